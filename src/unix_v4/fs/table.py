"""The inode table — the only place inodes come into existence.

The table maps inode numbers to live ``Inode`` records.  Numbers start
at 1 (the root directory, as on a real V4 volume) and only ever go up:
nothing in this system frees an inode, so a number is never handed out
twice within the life of a table.

The directory helpers (``mkroot``, ``mkdir``, ``mkfile``, ``mkdev``)
enforce the directory-entry rules:

- every new directory starts with ``.`` (itself) and ``..`` (its
  parent; the root is its own parent);
- every new inode is linked into its parent at once, so there is no
  way to create an orphan;
- the parent must be a directory, otherwise ``InvalidParentError``.

Entry names are *not* checked for uniqueness here.  Two entries may
share a name, and ``lookup`` returns the first one, the same as the
historical ``namei`` scan.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Iterator

from unix_v4.fs.inode import (
    Directory,
    DirectoryEntry,
    FileType,
    Inode,
    RegularFile,
    empty_contents,
)
from unix_v4.fs.mode import make_mode

ROOT_INODE = 1

DIR_PERMISSIONS = 0o755
FILE_PERMISSIONS = 0o644


class InodeNotFoundError(Exception):
    """Raised when an inode number was never allocated."""


class InvalidParentError(Exception):
    """Raised when a child is attached under a non-directory."""


class InodeTable:
    """Owns every inode of one volume.

    Each ``UnixFilesystem`` creates its own table, so independent
    volumes never share numbering or state.
    """

    def __init__(self, *, clock: Callable[[], float] = time.time) -> None:
        """Create an empty table.

        Args:
            clock: Source of timestamps for new inodes.

        """
        self._inodes: dict[int, Inode] = {}
        self._next = ROOT_INODE
        self._clock = clock

    def __len__(self) -> int:
        """Return how many inode numbers have been allocated."""
        return len(self._inodes)

    def __contains__(self, inode_number: object) -> bool:
        """Return True if *inode_number* has been allocated."""
        return inode_number in self._inodes

    def __iter__(self) -> Iterator[Inode]:
        """Iterate over inodes in allocation order."""
        return iter(list(self._inodes.values()))

    @property
    def next_inode_number(self) -> int:
        """Return the number the next allocation will receive."""
        return self._next

    @property
    def clock(self) -> Callable[[], float]:
        """Return the timestamp source used for this table."""
        return self._clock

    def allocate(self, file_type: FileType, permission_bits: int) -> Inode:
        """Allocate a fresh, unlinked inode.

        The inode gets the next number, the allocated flag, the type
        bits for *file_type*, the given permission bits, a link count
        of 1 and empty contents.  Callers outside this module should
        use the ``mk*`` helpers, which also link the inode in.
        """
        number = self._next
        self._next += 1
        now = self._clock()
        inode = Inode(
            inode_number=number,
            mode=make_mode(file_type.type_bits, permission_bits),
            contents=empty_contents(file_type),
            atime=now,
            mtime=now,
        )
        self._inodes[number] = inode
        return inode

    def get(self, inode_number: int) -> Inode:
        """Return the inode with the given number.

        Raises:
            InodeNotFoundError: If the number was never allocated.

        """
        try:
            return self._inodes[inode_number]
        except KeyError:
            msg = f"Inode {inode_number} not allocated"
            raise InodeNotFoundError(msg) from None

    @property
    def root(self) -> Inode:
        """Return the root directory inode."""
        return self.get(ROOT_INODE)

    # -- directory construction ------------------------------------------

    def mkroot(self) -> Inode:
        """Allocate the root directory, whose ``..`` is itself.

        Raises:
            InvalidParentError: If the table already holds inodes.

        """
        if self._inodes:
            msg = "Root must be the first inode allocated"
            raise InvalidParentError(msg)
        root = self.allocate(FileType.DIRECTORY, DIR_PERMISSIONS)
        root.entries.extend(
            [DirectoryEntry(root.inode_number, "."), DirectoryEntry(root.inode_number, "..")]
        )
        return root

    def mkdir(self, parent: Inode, name: str, permission_bits: int = DIR_PERMISSIONS) -> Inode:
        """Create a directory named *name* inside *parent*.

        Raises:
            InvalidParentError: If *parent* is not a directory.

        """
        self._check_parent(parent, name)
        child = self.allocate(FileType.DIRECTORY, permission_bits)
        child.entries.extend(
            [DirectoryEntry(child.inode_number, "."), DirectoryEntry(parent.inode_number, "..")]
        )
        parent.entries.append(DirectoryEntry(child.inode_number, name))
        return child

    def mkfile(
        self,
        parent: Inode,
        name: str,
        payload: bytes = b"",
        permission_bits: int = FILE_PERMISSIONS,
    ) -> Inode:
        """Create a regular file holding *payload* inside *parent*.

        Raises:
            InvalidParentError: If *parent* is not a directory.

        """
        self._check_parent(parent, name)
        child = self.allocate(FileType.REGULAR, permission_bits)
        child.contents = RegularFile(payload=bytes(payload))
        parent.entries.append(DirectoryEntry(child.inode_number, name))
        return child

    def mkdev(self, parent: Inode, name: str, permission_bits: int) -> Inode:
        """Create a character device inside *parent*.

        Raises:
            InvalidParentError: If *parent* is not a directory.

        """
        self._check_parent(parent, name)
        child = self.allocate(FileType.CHAR_DEVICE, permission_bits)
        parent.entries.append(DirectoryEntry(child.inode_number, name))
        return child

    def lookup(self, directory: Inode, name: str) -> Inode | None:
        """Return the first entry of *directory* named *name*.

        Returns ``None`` if *directory* is not a directory or holds no
        entry with that exact name.
        """
        if not isinstance(directory.contents, Directory):
            return None
        for entry in directory.contents.entries:
            if entry.name == name:
                return self._inodes.get(entry.inode_number)
        return None

    @staticmethod
    def _check_parent(parent: Inode, name: str) -> None:
        if not parent.is_directory:
            msg = f"Cannot create {name!r}: inode {parent.inode_number} is not a directory"
            raise InvalidParentError(msg)
