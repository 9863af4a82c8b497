"""Tests for the REPL (Read-Eval-Print Loop).

The REPL is the interactive terminal interface.  Its helpers are
tested in isolation; the loop itself runs against a patched ``input``.
"""

from pathlib import Path
from unittest.mock import patch

import pytest

from unix_v4.env import Environment
from unix_v4.fs.filesystem import MOTD
from unix_v4.repl import (
    ROOT_PROMPT,
    USER_PROMPT,
    build_parser,
    build_prompt,
    format_banner,
    main,
    run,
)


class TestREPLHelpers:
    """Verify REPL helper functions."""

    def test_build_prompt_as_root(self) -> None:
        """root gets the # prompt."""
        assert build_prompt(Environment()) == ROOT_PROMPT

    def test_build_prompt_as_user(self) -> None:
        """Everyone else gets %."""
        assert build_prompt(Environment({"USER": "ken"})) == USER_PROMPT

    def test_format_banner(self) -> None:
        """The banner is the motd after a blank line."""
        banner = format_banner(MOTD)
        assert banner.startswith("\n")
        assert "Bell Telephone Laboratories" in banner
        assert banner.endswith("1973\n")

    def test_format_banner_empty(self) -> None:
        """No motd gives no banner."""
        assert format_banner(None) == ""
        assert format_banner(b"") == ""


class TestParser:
    """Verify command-line parsing."""

    def test_no_arguments(self) -> None:
        """Without --knowledge nothing is persisted."""
        assert build_parser().parse_args([]).knowledge is None

    def test_knowledge_path(self, tmp_path: Path) -> None:
        """--knowledge takes a host path."""
        target = tmp_path / "ttt.k"
        assert build_parser().parse_args(["--knowledge", str(target)]).knowledge == target

    def test_main_passes_knowledge(self, tmp_path: Path) -> None:
        """main hands the parsed path to run."""
        target = tmp_path / "ttt.k"
        with patch("unix_v4.repl.run") as mock_run:
            main(["--knowledge", str(target)])
        mock_run.assert_called_once_with(knowledge=target)


class TestLoop:
    """Verify the loop against scripted input."""

    def test_banner_and_command(self, capsys: pytest.CaptureFixture[str]) -> None:
        """The motd is printed, then command output."""
        with patch("builtins.input", side_effect=["echo hello", "exit"]):
            run()
        out = capsys.readouterr().out
        assert "Unix Fourth Edition" in out
        assert "hello" in out

    def test_eof_ends_session(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Ctrl+D leaves the loop."""
        with patch("builtins.input", side_effect=EOFError):
            run()
        assert "Interrupted" not in capsys.readouterr().out

    def test_interrupt(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Ctrl+C ends the session with a message."""
        with patch("builtins.input", side_effect=KeyboardInterrupt):
            run()
        assert "Interrupted." in capsys.readouterr().out

    def test_knowledge_is_loaded(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """An existing host file seeds /usr/games/ttt.k."""
        host = tmp_path / "ttt.k"
        host.write_bytes(b"13203:5")
        with patch("builtins.input", side_effect=["cat /usr/games/ttt.k", "exit"]):
            run(knowledge=host)
        assert "13203:5" in capsys.readouterr().out

    def test_knowledge_is_saved(self, tmp_path: Path) -> None:
        """The file is written back on the way out."""
        host = tmp_path / "state" / "ttt.k"
        with patch("builtins.input", side_effect=["write /usr/games/ttt.k 81:3", "exit"]):
            run(knowledge=host)
        assert host.read_bytes() == b"81:3\n"

    def test_knowledge_saved_after_interrupt(self, tmp_path: Path) -> None:
        """Even an interrupted session saves the file."""
        host = tmp_path / "ttt.k"
        with patch("builtins.input", side_effect=KeyboardInterrupt):
            run(knowledge=host)
        assert host.read_bytes() == b""
