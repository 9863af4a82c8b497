"""Path resolution — ``namei``, after the V4 kernel routine in ``nami.c``.

``namei`` turns an absolute path into an inode by walking the tree
from the root one name at a time::

    /usr/games/ttt.k
      root ──"usr"──▶ usr ──"games"──▶ games ──"ttt.k"──▶ ttt.k

At each step the current inode must be a directory and must contain an
entry whose name matches the segment exactly; the first such entry
wins.  Empty segments are skipped, so ``//usr//games/`` is the same
path as ``/usr/games``.  ``.`` and ``..`` need no special handling:
they are ordinary entries that every directory carries.

Failure is a ``None`` result, never an exception.  The interactive
callers of the filesystem treat "no such file" as a normal outcome.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from unix_v4.fs.inode import Inode
    from unix_v4.fs.table import InodeTable

SEPARATOR = "/"


def split_path(path: str) -> list[str]:
    """Return the non-empty segments of *path*.

    Examples::

        "/usr/games"    → ["usr", "games"]
        "//usr//games/" → ["usr", "games"]
        "/"             → []

    """
    return [segment for segment in path.split(SEPARATOR) if segment]


def namei(table: InodeTable, path: str | None) -> Inode | None:
    """Resolve an absolute *path* to its inode in *table*.

    Args:
        table: The inode table to search.
        path: An absolute path.  ``None`` and ``""`` never resolve.

    Returns:
        The inode at *path*, or ``None`` if any segment is missing or a
        non-directory is walked through.

    """
    if not path:
        return None

    current = table.root
    if path == SEPARATOR:
        return current

    for segment in split_path(path):
        if not current.is_directory:
            return None
        child = table.lookup(current, segment)
        if child is None:
            return None
        current = child

    return current
