"""Tab completion for the shell.

The completer separates **what to complete** (pure logic, fully
testable) from **how to wire it** (readline integration in the REPL).

``complete(text, state)`` is the readline callback.  It delegates to
``completions(text, line)``, which looks at the words typed so far:

- first word → builtin commands and programs found on ``PATH``;
- ``export``/``$`` → environment variable names;
- anything else → paths, listed with ``readdir``.
"""

from __future__ import annotations

import readline
from typing import TYPE_CHECKING

from unix_v4.fs.namei import SEPARATOR

if TYPE_CHECKING:
    from unix_v4.shell import Shell


class Completer:
    """Context-aware tab completer for a ``Shell``."""

    def __init__(self, shell: Shell) -> None:
        """Create a completer for *shell*'s commands and volume."""
        self._shell = shell

    def complete(self, text: str, state: int) -> str | None:
        """Readline callback — return the *state*-th candidate for *text*."""
        line = readline.get_line_buffer()
        candidates = self.completions(text, line)
        if state < len(candidates):
            return candidates[state]
        return None

    def completions(self, text: str, line: str) -> list[str]:
        """Return completion candidates for *text* within *line*.

        Args:
            text: The partial word under the cursor.
            line: The full input line so far.

        Returns:
            Sorted list of matching candidates.

        """
        words = line.lstrip().split()
        if not words or (len(words) == 1 and not line.endswith(" ")):
            return self._complete_commands(text)
        if text.startswith("$"):
            prefix = text[1:]
            return sorted(f"${k}" for k, _v in self._shell.env.items() if k.startswith(prefix))
        if words[0] == "export":
            return sorted(k for k, _v in self._shell.env.items() if k.startswith(text))
        return self._complete_paths(text)

    def _complete_commands(self, text: str) -> list[str]:
        """Complete builtin and program names."""
        names = set(self._shell.command_names) | set(self._shell.program_names)
        return sorted(name for name in names if name.startswith(text))

    def _complete_paths(self, text: str) -> list[str]:
        """Complete a path, absolute or relative to the working directory.

        Directories get a trailing ``/``; dot entries are offered only
        when the typed prefix starts with a dot.
        """
        last_slash = text.rfind(SEPARATOR)
        typed_dir = text[: last_slash + 1]
        prefix = text[last_slash + 1 :]
        directory = self._shell.absolute(typed_dir) if typed_dir else self._shell.cwd

        entries = self._shell.fs.readdir(directory)
        if entries is None:
            return []

        candidates: list[str] = []
        for entry in entries:
            if not entry.name.startswith(prefix):
                continue
            if entry.name.startswith(".") and not prefix.startswith("."):
                continue
            suffix = SEPARATOR if entry.inode.is_directory else ""
            candidates.append(f"{typed_dir}{entry.name}{suffix}")
        return sorted(candidates)
