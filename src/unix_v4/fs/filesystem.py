"""The filesystem facade — a bootstrapped V4 volume behind four calls.

``UnixFilesystem`` owns one ``InodeTable``, builds the fixed Fourth
Edition tree on construction, and exposes the operations collaborators
(the shell, the games) rely on:

- ``readdir(path)`` — entries of a directory, ``.`` and ``..`` first.
- ``read(path)`` — a file's payload.
- ``write(path, payload)`` — replace a file's payload.
- ``stat(path)`` — an ``InodeView`` snapshot.

Every negative outcome is a soft one: ``None`` from the readers,
``False`` from ``write``.  A missing path, a directory where a file
was expected, and a device (which stores no bytes) all look the same
to the caller, which is what an interactive loop wants.

The bootstrap tree::

    /
    ├── bin/
    ├── dev/         tty  null  mem          (character devices)
    ├── etc/         passwd  motd
    ├── usr/
    │   ├── games/   moo bj ttt ttt.k cubic wump chess
    │   ├── lib/
    │   ├── bin/
    │   └── sys/
    └── tmp/

``/usr/games/ttt.k`` starts empty; the tic-tac-toe game stores what it
has learned there.
"""

from __future__ import annotations

import time
from collections.abc import Callable

from unix_v4.fs.inode import NAME_MAX, DirEntryView, Inode, InodeView, RegularFile
from unix_v4.fs.namei import SEPARATOR, namei, split_path
from unix_v4.fs.table import DIR_PERMISSIONS, FILE_PERMISSIONS, InodeTable
from unix_v4.logging import Logger

_SOURCE = "fs"

EXEC_PERMISSIONS = 0o755
DEVICE_PERMISSIONS = 0o666

ROOT_DIRECTORIES = ("bin", "dev", "etc", "usr", "tmp")
USR_DIRECTORIES = ("games", "lib", "bin", "sys")

DEVICES: tuple[tuple[str, int], ...] = (
    ("tty", 0o666),
    ("null", 0o666),
    ("mem", 0o640),
)

PASSWD = b"root::0:0::/:\ndaemon::1:1::/:\nbin::2:2::/bin:\n"
MOTD = b"Unix Fourth Edition\nBell Telephone Laboratories\n1973\n"

KNOWLEDGE_FILE = "ttt.k"
KNOWLEDGE_PATH = "/usr/games/ttt.k"
GAMES_PATH = "/usr/games"

GAME_FILES: tuple[tuple[str, bytes, int], ...] = (
    ("moo", b"[binary: 624 bytes]", EXEC_PERMISSIONS),
    ("bj", b"[binary: 1562 bytes]", EXEC_PERMISSIONS),
    ("ttt", b"[binary: 2192 bytes]", EXEC_PERMISSIONS),
    (KNOWLEDGE_FILE, b"", FILE_PERMISSIONS),
    ("cubic", b"[binary: 2468 bytes]", EXEC_PERMISSIONS),
    ("wump", b"[binary: 5386 bytes]", EXEC_PERMISSIONS),
    ("chess", b"[binary: 14310 bytes]", EXEC_PERMISSIONS),
)


def split_parent(path: str) -> tuple[str, str] | None:
    """Split an absolute *path* into ``(parent_path, name)``.

    Examples::

        "/usr/games/moo" → ("/usr/games", "moo")
        "/tmp"           → ("/", "tmp")
        "/"              → None

    """
    segments = split_path(path)
    if not segments:
        return None
    return SEPARATOR + SEPARATOR.join(segments[:-1]), segments[-1]


class UnixFilesystem:
    """A single in-memory volume with the Fourth Edition layout.

    Each instance owns its own inode table, so tests and sessions can
    build as many independent volumes as they like.
    """

    def __init__(
        self,
        *,
        logger: Logger | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Create the volume and build the bootstrap tree.

        Args:
            logger: Where to record filesystem events.  A private
                logger is created when omitted.
            clock: Timestamp source for inode times.

        """
        self._logger = logger if logger is not None else Logger()
        self._clock = clock
        self._table = InodeTable(clock=clock)
        self._bootstrap()

    @property
    def table(self) -> InodeTable:
        """Return the inode table backing this volume."""
        return self._table

    @property
    def logger(self) -> Logger:
        """Return the logger this volume reports to."""
        return self._logger

    def _bootstrap(self) -> None:
        """Build the fixed V4 directory tree."""
        table = self._table
        root = table.mkroot()

        top = {name: table.mkdir(root, name) for name in ROOT_DIRECTORIES}
        usr = {name: table.mkdir(top["usr"], name) for name in USR_DIRECTORIES}

        for name, permissions in DEVICES:
            table.mkdev(top["dev"], name, permissions)

        table.mkfile(top["etc"], "passwd", PASSWD)
        table.mkfile(top["etc"], "motd", MOTD)

        for name, payload, permissions in GAME_FILES:
            table.mkfile(usr["games"], name, payload, permissions)

        self._logger.info(f"bootstrapped volume with {len(table)} inodes", source=_SOURCE)

    # -- lookup ----------------------------------------------------------

    def namei(self, path: str | None) -> Inode | None:
        """Return the live inode at *path*, or ``None``."""
        return namei(self._table, path)

    def exists(self, path: str | None) -> bool:
        """Return True if *path* resolves."""
        return self.namei(path) is not None

    def stat(self, path: str | None) -> InodeView | None:
        """Return a metadata snapshot for *path*, or ``None``."""
        inode = self.namei(path)
        return inode.to_view() if inode is not None else None

    def readdir(self, path: str | None) -> list[DirEntryView] | None:
        """List a directory's entries in on-disk order.

        Returns:
            One ``DirEntryView`` per entry, starting with ``.`` and
            ``..``; ``None`` if *path* is missing or not a directory.

        """
        inode = self.namei(path)
        if inode is None or not inode.is_directory:
            return None
        return [
            DirEntryView(name=entry.name, inode=self._table.get(entry.inode_number).to_view())
            for entry in inode.entries
        ]

    # -- data ------------------------------------------------------------

    def read(self, path: str | None) -> bytes | None:
        """Return the payload of the file at *path*.

        Returns ``None`` for missing paths, directories and devices.
        """
        inode = self.namei(path)
        if inode is None or not isinstance(inode.contents, RegularFile):
            return None
        return inode.contents.payload

    def write(self, path: str | None, payload: bytes) -> bool:
        """Replace the payload of the file at *path*.

        On success the size follows the new payload and the modify
        time is updated.

        Returns:
            True if the file was written; False (and nothing changed)
            for missing paths, directories and devices.

        """
        inode = self.namei(path)
        if inode is None or not isinstance(inode.contents, RegularFile):
            self._logger.warning(f"write refused: {path}", source=_SOURCE)
            return False
        inode.contents.payload = bytes(payload)
        inode.mtime = self._clock()
        self._logger.debug(f"wrote {inode.size} bytes to {path}", source=_SOURCE)
        return True

    # -- creation --------------------------------------------------------

    def create_file(
        self,
        path: str,
        payload: bytes = b"",
        permission_bits: int = FILE_PERMISSIONS,
    ) -> InodeView | None:
        """Create a regular file at *path*.

        Returns:
            The new file's snapshot, or ``None`` if the parent is
            missing or not a directory, or the name is already taken.

        """
        parent, name = self._creation_target(path)
        if parent is None:
            return None
        inode = self._table.mkfile(parent, name, payload, permission_bits)
        self._logger.debug(f"created file {path} (inode {inode.inode_number})", source=_SOURCE)
        return inode.to_view()

    def create_dir(self, path: str, permission_bits: int = DIR_PERMISSIONS) -> InodeView | None:
        """Create a directory at *path* (see ``create_file``)."""
        parent, name = self._creation_target(path)
        if parent is None:
            return None
        inode = self._table.mkdir(parent, name, permission_bits)
        self._logger.debug(
            f"created directory {path} (inode {inode.inode_number})", source=_SOURCE
        )
        return inode.to_view()

    def create_device(
        self, path: str, permission_bits: int = DEVICE_PERMISSIONS
    ) -> InodeView | None:
        """Create a character device at *path* (see ``create_file``)."""
        parent, name = self._creation_target(path)
        if parent is None:
            return None
        inode = self._table.mkdev(parent, name, permission_bits)
        self._logger.debug(f"created device {path} (inode {inode.inode_number})", source=_SOURCE)
        return inode.to_view()

    def _creation_target(self, path: str) -> tuple[Inode | None, str]:
        """Resolve the parent directory for a new entry at *path*.

        Unlike the table helpers, which keep the historical
        first-match behaviour, the facade refuses a name that is
        already present.  The comparison uses the truncated name,
        since that is what would be stored.
        """
        split = split_parent(path)
        if split is None:
            self._logger.warning(f"create refused: {path!r} has no name", source=_SOURCE)
            return None, ""
        parent_path, name = split
        parent = self.namei(parent_path)
        if parent is None or not parent.is_directory:
            self._logger.warning(f"create refused: no directory {parent_path}", source=_SOURCE)
            return None, name
        stored = name[:NAME_MAX]
        if any(entry.name == stored for entry in parent.entries):
            self._logger.warning(f"create refused: {path} exists", source=_SOURCE)
            return None, name
        return parent, name
