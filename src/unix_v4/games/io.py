"""Terminal I/O for the console games.

The games are line-oriented: they write prompts and read one line of
input at a time.  ``GameIO`` is that whole interface, so a game never
touches ``stdin``/``stdout`` itself:

    - ``ConsoleIO`` — the real terminal, used by the REPL.
    - ``ScriptedIO`` — a queue of canned input lines with captured
      output, used by tests and by callers that have no terminal.

``read()`` returning ``None`` means end of input (Ctrl+D); every game
stops cleanly when it sees it.
"""

import sys
from collections import deque
from collections.abc import Iterable
from typing import Protocol


class GameIO(Protocol):
    """The line-oriented terminal a game talks to."""

    def write(self, text: str) -> None:
        """Write *text* without adding a newline."""
        ...  # pragma: no cover

    def read(self) -> str | None:
        """Return the next input line (no newline), or None at EOF."""
        ...  # pragma: no cover


class ConsoleIO:
    """``GameIO`` over the process's standard streams."""

    def write(self, text: str) -> None:
        """Write *text* to stdout and flush so prompts appear."""
        sys.stdout.write(text)
        sys.stdout.flush()

    def read(self) -> str | None:
        """Read a line from stdin; Ctrl+D gives None."""
        try:
            return input()
        except EOFError:
            return None


class ScriptedIO:
    """``GameIO`` fed from a fixed list of input lines.

    Once the lines run out, ``read()`` reports EOF.
    """

    def __init__(self, lines: Iterable[str] = ()) -> None:
        """Queue *lines* as the input to hand out."""
        self._input: deque[str] = deque(lines)
        self._output: list[str] = []

    def write(self, text: str) -> None:
        """Capture *text*."""
        self._output.append(text)

    def read(self) -> str | None:
        """Return the next queued line, or None when exhausted."""
        if not self._input:
            return None
        return self._input.popleft()

    def feed(self, *lines: str) -> None:
        """Queue more input lines."""
        self._input.extend(lines)

    @property
    def output(self) -> str:
        """Return everything written so far."""
        return "".join(self._output)

    @property
    def pending(self) -> int:
        """Return the number of unread input lines."""
        return len(self._input)
