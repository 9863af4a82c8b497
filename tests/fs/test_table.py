"""Tests for the inode table and its directory helpers.

The table is the only place inodes are created.  Numbers start at 1,
are handed out in order and are never reused; the helpers link every
new inode into a parent directory straight away.
"""

import pytest

from unix_v4.fs.inode import CharDevice, Directory, FileType, RegularFile
from unix_v4.fs.mode import Mode
from unix_v4.fs.table import ROOT_INODE, InodeNotFoundError, InodeTable, InvalidParentError

FIXED_TIME = 123.0


def _table() -> InodeTable:
    return InodeTable(clock=lambda: FIXED_TIME)


class TestAllocate:
    """Verify raw allocation."""

    def test_first_number_is_one(self) -> None:
        """The first inode allocated gets number 1."""
        table = _table()
        inode = table.allocate(FileType.DIRECTORY, 0o755)
        assert inode.inode_number == ROOT_INODE == 1

    def test_numbers_are_monotonic(self) -> None:
        """Each allocation gets the next number."""
        table = _table()
        numbers = [table.allocate(FileType.REGULAR, 0o644).inode_number for _ in range(4)]
        assert numbers == [1, 2, 3, 4]
        assert table.next_inode_number == 5

    def test_fresh_inode_fields(self) -> None:
        """A new inode is allocated, empty, with one link."""
        table = _table()
        inode = table.allocate(FileType.REGULAR, 0o640)
        assert inode.mode == Mode.ALLOC | 0o640
        assert inode.size == 0
        assert inode.link_count == 1
        assert inode.atime == inode.mtime == FIXED_TIME
        assert isinstance(inode.contents, RegularFile)

    def test_kind_selects_contents(self) -> None:
        """Directories get entry lists and devices get nothing."""
        table = _table()
        assert isinstance(table.allocate(FileType.DIRECTORY, 0o755).contents, Directory)
        assert isinstance(table.allocate(FileType.CHAR_DEVICE, 0o666).contents, CharDevice)

    def test_len_and_contains(self) -> None:
        """len() counts allocations and ``in`` tests numbers."""
        table = _table()
        table.allocate(FileType.REGULAR, 0o644)
        assert len(table) == 1
        assert 1 in table
        assert 2 not in table


class TestGet:
    """Verify lookup by number."""

    def test_get_allocated(self) -> None:
        """An allocated number returns its inode."""
        table = _table()
        inode = table.allocate(FileType.REGULAR, 0o644)
        assert table.get(inode.inode_number) is inode

    def test_get_unallocated_raises(self) -> None:
        """A number never handed out raises InodeNotFoundError."""
        table = _table()
        with pytest.raises(InodeNotFoundError, match="42"):
            table.get(42)


class TestMkroot:
    """Verify root creation."""

    def test_root_points_to_itself(self) -> None:
        """Both . and .. of the root are the root."""
        table = _table()
        root = table.mkroot()
        assert [(e.name, e.inode_number) for e in root.entries] == [(".", 1), ("..", 1)]

    def test_root_must_come_first(self) -> None:
        """mkroot refuses a table that already has inodes."""
        table = _table()
        table.allocate(FileType.REGULAR, 0o644)
        with pytest.raises(InvalidParentError):
            table.mkroot()


class TestMkdir:
    """Verify directory creation."""

    def test_seeds_dot_entries(self) -> None:
        """A new directory starts with . (itself) and .. (its parent)."""
        table = _table()
        root = table.mkroot()
        child = table.mkdir(root, "usr")
        assert [(e.name, e.inode_number) for e in child.entries] == [
            (".", child.inode_number),
            ("..", root.inode_number),
        ]

    def test_appends_to_parent(self) -> None:
        """The parent gains an entry after its existing ones."""
        table = _table()
        root = table.mkroot()
        child = table.mkdir(root, "usr")
        assert root.entries[-1].name == "usr"
        assert root.entries[-1].inode_number == child.inode_number

    def test_non_directory_parent_raises(self) -> None:
        """A file cannot be a parent."""
        table = _table()
        root = table.mkroot()
        file = table.mkfile(root, "f", b"x")
        with pytest.raises(InvalidParentError, match="not a directory"):
            table.mkdir(file, "sub")

    def test_failed_mkdir_allocates_nothing(self) -> None:
        """The parent check happens before allocation."""
        table = _table()
        root = table.mkroot()
        file = table.mkfile(root, "f")
        before = len(table)
        with pytest.raises(InvalidParentError):
            table.mkdir(file, "sub")
        assert len(table) == before


class TestMkfileAndMkdev:
    """Verify file and device creation."""

    def test_mkfile_size_matches_payload(self) -> None:
        """The new file's size is its payload length."""
        table = _table()
        root = table.mkroot()
        file = table.mkfile(root, "x", b"payload", 0o644)
        assert file.size == len(b"payload")
        assert file.mode == Mode.ALLOC | 0o644
        assert file.is_regular

    def test_mkdev_creates_device(self) -> None:
        """Devices carry neither payload nor entries."""
        table = _table()
        root = table.mkroot()
        dev = table.mkdev(root, "tty", 0o666)
        assert dev.is_char_device
        assert isinstance(dev.contents, CharDevice)
        assert dev.size == 0

    def test_mkdev_under_device_raises(self) -> None:
        """A device cannot be a parent."""
        table = _table()
        root = table.mkroot()
        dev = table.mkdev(root, "tty", 0o666)
        with pytest.raises(InvalidParentError):
            table.mkdev(dev, "sub", 0o666)


class TestLookup:
    """Verify first-match name lookup."""

    def test_finds_entry(self) -> None:
        """lookup returns the inode behind a name."""
        table = _table()
        root = table.mkroot()
        usr = table.mkdir(root, "usr")
        assert table.lookup(root, "usr") is usr

    def test_missing_name(self) -> None:
        """An absent name gives None."""
        table = _table()
        root = table.mkroot()
        assert table.lookup(root, "nope") is None

    def test_duplicate_names_first_match_wins(self) -> None:
        """Duplicate names are allowed and the earliest entry wins."""
        table = _table()
        root = table.mkroot()
        first = table.mkfile(root, "dup", b"first")
        table.mkfile(root, "dup", b"second")
        assert table.lookup(root, "dup") is first

    def test_lookup_in_file_is_none(self) -> None:
        """Looking up inside a non-directory gives None."""
        table = _table()
        root = table.mkroot()
        file = table.mkfile(root, "f")
        assert table.lookup(file, "anything") is None
