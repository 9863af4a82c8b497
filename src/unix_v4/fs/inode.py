"""Inodes and directory entries.

An **inode** is the fixed-shape record the kernel keeps for every
object on the volume.  It holds the object's metadata (mode, owner,
link count, timestamps) but *not* its name: names live in directory
entries, which are nothing more than ``(inode number, name)`` pairs
stored inside a directory inode.

What an inode holds besides metadata depends on its type, and exactly
one of these applies:

- ``RegularFile`` — an opaque byte payload.
- ``Directory`` — an ordered list of ``DirectoryEntry`` records.
- ``CharDevice`` — nothing; a device is a handle, not stored bytes.

Modelling the three as separate dataclasses (a tagged union) makes
"a directory with a payload" impossible to construct.

Callers outside the table get ``InodeView`` snapshots instead of the
live record, mirroring the ``InodeInfo`` returned by ``stat(2)``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TypeAlias

from unix_v4.fs.mode import Mode

NAME_MAX = 14
"""Longest directory-entry name; V4 entries were 2 + 14 bytes."""


class FileType(StrEnum):
    """The kind of object an inode represents."""

    REGULAR = "regular"
    DIRECTORY = "directory"
    CHAR_DEVICE = "chardev"

    @property
    def type_bits(self) -> int:
        """Return the mode type bits for this kind."""
        return _TYPE_BITS[self]


_TYPE_BITS: dict[FileType, int] = {
    FileType.REGULAR: 0,
    FileType.DIRECTORY: Mode.DIR,
    FileType.CHAR_DEVICE: Mode.CHR,
}


@dataclass(frozen=True)
class DirectoryEntry:
    """One slot of a directory: a child inode number and its name.

    Names longer than ``NAME_MAX`` are silently truncated, never
    rejected.
    """

    inode_number: int
    name: str

    def __post_init__(self) -> None:
        """Truncate the name to ``NAME_MAX`` characters."""
        object.__setattr__(self, "name", self.name[:NAME_MAX])


@dataclass
class RegularFile:
    """Contents of a regular file."""

    payload: bytes = b""


@dataclass
class Directory:
    """Contents of a directory: entries in insertion order."""

    entries: list[DirectoryEntry] = field(default_factory=list)  # pyright: ignore[reportUnknownVariableType]


@dataclass(frozen=True)
class CharDevice:
    """Contents marker for a character device (carries no data)."""


Contents: TypeAlias = RegularFile | Directory | CharDevice


def empty_contents(file_type: FileType) -> Contents:
    """Return fresh, empty contents for an inode of *file_type*."""
    match file_type:
        case FileType.REGULAR:
            return RegularFile()
        case FileType.DIRECTORY:
            return Directory()
        case FileType.CHAR_DEVICE:
            return CharDevice()


@dataclass
class Inode:
    """The live inode record owned by an ``InodeTable``.

    ``size`` is computed from the payload rather than stored, so a
    regular file's size can never drift from its length.
    """

    inode_number: int
    mode: Mode
    contents: Contents
    link_count: int = 1
    uid: int = 0
    gid: int = 0
    atime: float = 0.0
    mtime: float = 0.0

    @property
    def size(self) -> int:
        """Return the payload length in bytes (0 for non-files)."""
        if isinstance(self.contents, RegularFile):
            return len(self.contents.payload)
        return 0

    @property
    def file_type(self) -> FileType:
        """Return the kind of object this inode holds."""
        if self.mode.is_directory:
            return FileType.DIRECTORY
        if self.mode.is_char_device:
            return FileType.CHAR_DEVICE
        return FileType.REGULAR

    @property
    def is_directory(self) -> bool:
        """Return True for directory inodes."""
        return self.mode.is_directory

    @property
    def is_regular(self) -> bool:
        """Return True for regular files."""
        return self.mode.is_regular

    @property
    def is_char_device(self) -> bool:
        """Return True for character devices."""
        return self.mode.is_char_device

    @property
    def is_executable(self) -> bool:
        """Return True if the execute bit is set."""
        return self.mode.is_executable

    @property
    def entries(self) -> list[DirectoryEntry]:
        """Return the live entry list of a directory.

        Raises:
            NotADirectoryError: If this inode is not a directory.

        """
        if not isinstance(self.contents, Directory):
            msg = f"Inode {self.inode_number} is not a directory"
            raise NotADirectoryError(msg)
        return self.contents.entries

    def permission_string(self) -> str:
        """Render the mode as ``ls -l`` does."""
        return self.mode.permission_string()

    def to_view(self) -> InodeView:
        """Create a read-only snapshot of this inode."""
        return InodeView(
            inode_number=self.inode_number,
            mode=self.mode,
            link_count=self.link_count,
            uid=self.uid,
            gid=self.gid,
            size=self.size,
            atime=self.atime,
            mtime=self.mtime,
        )


@dataclass(frozen=True)
class InodeView:
    """Read-only snapshot of an inode's metadata (returned by ``stat``)."""

    inode_number: int
    mode: Mode
    link_count: int
    uid: int
    gid: int
    size: int
    atime: float
    mtime: float

    @property
    def is_directory(self) -> bool:
        """Return True for directories."""
        return self.mode.is_directory

    @property
    def is_regular(self) -> bool:
        """Return True for regular files."""
        return self.mode.is_regular

    @property
    def is_char_device(self) -> bool:
        """Return True for character devices."""
        return self.mode.is_char_device

    @property
    def is_executable(self) -> bool:
        """Return True if the execute bit is set."""
        return self.mode.is_executable

    def permission_string(self) -> str:
        """Render the mode as ``ls -l`` does."""
        return self.mode.permission_string()


@dataclass(frozen=True)
class DirEntryView:
    """A ``readdir`` result: an entry name with its inode snapshot."""

    name: str
    inode: InodeView
