"""Host persistence for single files of the simulated volume.

The volume itself lives only in memory; nothing about its layout is
ever written to disk.  Some payloads are worth keeping between
sessions, though.  The tic-tac-toe game learns into
``/usr/games/ttt.k``, and losing that on every exit would make the
learning pointless.

These two helpers copy one payload across the boundary:

    - ``import_file(fs, fs_path, host_path)`` — host file → volume,
      at startup.
    - ``export_file(fs, fs_path, host_path)`` — volume → host file,
      at shutdown.

The payload is copied byte for byte; no format is imposed.
"""

from pathlib import Path

from unix_v4.fs.filesystem import UnixFilesystem

_SOURCE = "fs"


def import_file(fs: UnixFilesystem, fs_path: str, host_path: Path) -> bool:
    """Load *host_path* into the existing file *fs_path*.

    Args:
        fs: The volume to write into.
        fs_path: Absolute path of an existing regular file on *fs*.
        host_path: The host file to read.

    Returns:
        True if the payload was loaded; False if the host file does
        not exist yet or *fs_path* is not a writable file.

    """
    if not host_path.is_file():
        return False
    loaded = fs.write(fs_path, host_path.read_bytes())
    if loaded:
        fs.logger.info(f"imported {fs_path} from {host_path}", source=_SOURCE)
    return loaded


def export_file(fs: UnixFilesystem, fs_path: str, host_path: Path) -> bool:
    """Save the payload of *fs_path* to *host_path*.

    Parent directories of *host_path* are created as needed.

    Returns:
        True if the payload was saved; False if *fs_path* has none.

    """
    payload = fs.read(fs_path)
    if payload is None:
        return False
    host_path.parent.mkdir(parents=True, exist_ok=True)
    host_path.write_bytes(payload)
    fs.logger.info(f"exported {fs_path} to {host_path}", source=_SOURCE)
    return True
