"""Interactive REPL (Read-Eval-Print Loop) for the V4 volume.

The REPL builds a fresh volume, prints the message of the day from
``/etc/motd``, and enters the classic loop:

    1. **Read** — display a prompt and read user input.
    2. **Eval** — pass the command to ``shell.execute()``.
    3. **Print** — display the result.
    4. **Loop** — repeat until ``exit`` or end of input.

The shell itself never prints; the REPL is the thin I/O wrapper around
it.  The games are handed a ``ConsoleIO`` so they can prompt the user
directly while they run.

``--knowledge PATH`` mirrors ``/usr/games/ttt.k`` to a host file:
loaded at startup if it exists, saved again on the way out, so the
tic-tac-toe machine keeps what it learned between sessions.
"""

from __future__ import annotations

import argparse
import readline
from pathlib import Path

from unix_v4.completer import Completer
from unix_v4.env import Environment
from unix_v4.fs.filesystem import KNOWLEDGE_PATH, UnixFilesystem
from unix_v4.fs.persistence import export_file, import_file
from unix_v4.games.io import ConsoleIO
from unix_v4.shell import Shell

ROOT_PROMPT = "# "
USER_PROMPT = "% "


def format_banner(motd: bytes | None) -> str:
    """Format the login banner from the contents of ``/etc/motd``."""
    if not motd:
        return ""
    return "\n" + motd.decode("ascii", errors="replace").rstrip("\n") + "\n"


def build_prompt(env: Environment) -> str:
    """Return ``# `` for root and ``% `` for everyone else."""
    return ROOT_PROMPT if env.is_root else USER_PROMPT


def run(*, knowledge: Path | None = None) -> None:
    """Build a volume and run the interactive REPL.

    Args:
        knowledge: Host file mirroring ``/usr/games/ttt.k``.

    """
    fs = UnixFilesystem()
    if knowledge is not None:
        import_file(fs, KNOWLEDGE_PATH, knowledge)

    env = Environment()
    shell = Shell(fs=fs, env=env, io=ConsoleIO())

    completer = Completer(shell)
    readline.set_completer(completer.complete)
    readline.set_completer_delims(" \t")
    readline.parse_and_bind("tab: complete")

    print(format_banner(fs.read("/etc/motd")))  # noqa: T201

    try:
        while True:
            try:
                command = input(build_prompt(env))
            except EOFError:
                # Ctrl+D
                print()  # noqa: T201
                break

            result = shell.execute(command)
            if result == Shell.EXIT_SENTINEL:
                break
            if result:
                print(result)  # noqa: T201

    except KeyboardInterrupt:
        print("\nInterrupted.")  # noqa: T201

    finally:
        if knowledge is not None:
            export_file(fs, KNOWLEDGE_PATH, knowledge)


def build_parser() -> argparse.ArgumentParser:
    """Return the command-line parser for ``unix-v4``."""
    parser = argparse.ArgumentParser(
        prog="unix-v4",
        description="A Fourth Edition Unix filesystem with its shell and games.",
    )
    parser.add_argument(
        "--knowledge",
        type=Path,
        metavar="PATH",
        help="host file that keeps /usr/games/ttt.k between sessions",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Console entry point for ``unix-v4``."""
    args = build_parser().parse_args(argv)
    run(knowledge=args.knowledge)
