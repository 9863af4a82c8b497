"""Inode mode bits — file type and permissions in one integer.

Fourth Edition Unix packed everything the kernel needed to know about
an inode's *kind* and *access rights* into a single 16-bit word,
``i_mode``.  The high bits say whether the slot is in use and what type
of object it holds; the low bits are the read/write/execute triple::

    1 0 0 0 0 0 0 0 0 0 0 0 0 0 0 0
    │ └─┴─ type (00 regular, 10 directory, 01 char device)
    └───── allocated
                            r w x ...   permission bits

The numeric values below are the ones from the V4 ``param.h`` and must
not change: fixtures saved outside the process (for example a copy of
``/usr/games/ttt.k`` together with its ``stat``) refer to them.

``Mode`` is an ``IntFlag`` so it still behaves like the raw integer
(``oct(mode)`` prints ``0o100644``) while giving each bit a name.
"""

from enum import IntFlag

TYPE_MASK = 0o60000
"""Mask selecting the two file-type bits."""

PERMISSION_MASK = 0o7777
"""Mask selecting everything below the type bits."""


class Mode(IntFlag):
    """Named bits of an inode's ``i_mode`` word."""

    ALLOC = 0o100000
    DIR = 0o40000
    CHR = 0o20000
    READ = 0o400
    WRITE = 0o200
    EXEC = 0o100

    @property
    def file_type_bits(self) -> int:
        """Return only the type bits (``mode & TYPE_MASK``)."""
        return int(self) & TYPE_MASK

    @property
    def is_allocated(self) -> bool:
        """Return True if the allocated flag is set."""
        return bool(self & Mode.ALLOC)

    @property
    def is_directory(self) -> bool:
        """Return True for directory inodes."""
        return self.file_type_bits == Mode.DIR

    @property
    def is_regular(self) -> bool:
        """Return True for regular files (no type bits set)."""
        return self.file_type_bits == 0

    @property
    def is_char_device(self) -> bool:
        """Return True for character-device inodes."""
        return self.file_type_bits == Mode.CHR

    @property
    def is_executable(self) -> bool:
        """Return True if the execute bit is set."""
        return bool(self & Mode.EXEC)

    def permission_string(self) -> str:
        """Render the mode the way ``ls -l`` does, e.g. ``drwxrwxrwx``.

        Only the owner triple is consulted.  Group and other are printed
        as copies of it, which is how the V4 ``ls`` simulation always
        showed them.
        """
        if self.is_directory:
            kind = "d"
        elif self.is_char_device:
            kind = "c"
        else:
            kind = "-"
        r = "r" if self & Mode.READ else "-"
        w = "w" if self & Mode.WRITE else "-"
        x = "x" if self & Mode.EXEC else "-"
        return kind + (r + w + x) * 3


def make_mode(type_bits: int, permission_bits: int) -> Mode:
    """Combine the allocated flag, *type_bits* and *permission_bits*.

    Permission bits are masked so a caller cannot smuggle type bits in
    through the permission argument.
    """
    return Mode(Mode.ALLOC | (type_bits & TYPE_MASK) | (permission_bits & PERMISSION_MASK))
