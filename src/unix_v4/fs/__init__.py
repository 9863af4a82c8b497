"""File system subsystem — inodes, directories, path resolution.

Re-exports public symbols so callers can write::

    from unix_v4.fs import UnixFilesystem, namei
"""

from unix_v4.fs.filesystem import KNOWLEDGE_PATH, UnixFilesystem
from unix_v4.fs.inode import (
    NAME_MAX,
    CharDevice,
    Directory,
    DirectoryEntry,
    DirEntryView,
    FileType,
    Inode,
    InodeView,
    RegularFile,
)
from unix_v4.fs.mode import TYPE_MASK, Mode
from unix_v4.fs.namei import namei
from unix_v4.fs.persistence import export_file, import_file
from unix_v4.fs.table import ROOT_INODE, InodeNotFoundError, InodeTable, InvalidParentError

__all__ = [
    "KNOWLEDGE_PATH",
    "NAME_MAX",
    "ROOT_INODE",
    "TYPE_MASK",
    "CharDevice",
    "DirEntryView",
    "Directory",
    "DirectoryEntry",
    "FileType",
    "Inode",
    "InodeNotFoundError",
    "InodeTable",
    "InodeView",
    "InvalidParentError",
    "Mode",
    "RegularFile",
    "UnixFilesystem",
    "export_file",
    "import_file",
    "namei",
]
