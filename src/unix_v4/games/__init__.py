"""Console games from ``/usr/games``.

Three of the seven binaries on the V4 games directory are playable:

- ``moo`` — Bulls and Cows.
- ``ttt`` — tic-tac-toe that learns into ``/usr/games/ttt.k``.
- ``wump`` — Hunt the Wumpus.

``PROGRAMS`` maps each name to its entry point.  The shell runs a
program only when a regular file of that name exists on ``PATH``, so
the games stay tied to the volume they live on.
"""

from collections.abc import Callable
from typing import TypeAlias

from unix_v4.fs.filesystem import UnixFilesystem
from unix_v4.games import moo, ttt, wump
from unix_v4.games.io import ConsoleIO, GameIO, ScriptedIO

Program: TypeAlias = Callable[[GameIO, UnixFilesystem], None]

PROGRAMS: dict[str, Program] = {
    "moo": moo.play,
    "ttt": ttt.play,
    "wump": wump.play,
}

__all__ = [
    "PROGRAMS",
    "ConsoleIO",
    "GameIO",
    "Program",
    "ScriptedIO",
]
