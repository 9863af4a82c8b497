"""The shell — command interpreter for the V4 volume.

The shell reads a command line, expands ``$VAR`` references, splits it
into a command name and arguments, and dispatches to a handler.  It
talks to the filesystem only through the facade operations
(``readdir``, ``read``, ``write``, ``stat`` and the ``create_*``
calls), exactly like any other collaborator.

Design choices:
    - **Returns strings, not prints.**  Errors come back as
      ``Error: ...`` strings; user input never raises.
    - **Command dispatch via a dict.**  Adding a builtin means writing
      a method and adding one dict entry.
    - **Programs live on the volume.**  A name that is not a builtin is
      searched for along ``PATH``; if a regular file of that name is
      found and a program is registered for it, the program runs on
      the shell's terminal.

Relative paths are joined to the working directory before they reach
``namei``, which itself only understands absolute paths.
"""

from __future__ import annotations

import posixpath
import time
from collections.abc import Callable
from typing import TypeAlias

from unix_v4.env import Environment
from unix_v4.fs.filesystem import UnixFilesystem
from unix_v4.fs.inode import InodeView
from unix_v4.fs.namei import SEPARATOR, split_path
from unix_v4.games import PROGRAMS, Program
from unix_v4.games.io import GameIO
from unix_v4.logging import LogLevel

# Type alias for a command handler: takes a list of args, returns output.
_Handler: TypeAlias = Callable[[list[str]], str]

_SOURCE = "sh"
PASSWD_PATH = "/etc/passwd"


def parse_passwd(data: bytes) -> dict[int, str]:
    """Map uids to login names from ``/etc/passwd`` contents.

    Lines look like ``root::0:0::/:`` (name, password, uid, gid, ...).
    """
    owners: dict[int, str] = {}
    for line in data.decode("ascii", errors="replace").splitlines():
        fields = line.split(":")
        if len(fields) < 3:  # noqa: PLR2004
            continue
        try:
            owners.setdefault(int(fields[2]), fields[0])
        except ValueError:
            continue
    return owners


def normalize(path: str) -> str:
    """Collapse ``.``, ``..`` and repeated slashes in an absolute path."""
    return SEPARATOR + SEPARATOR.join(split_path(posixpath.normpath(path)))


class Shell:
    """Command interpreter bound to one volume."""

    EXIT_SENTINEL = "__EXIT__"

    def __init__(
        self,
        *,
        fs: UnixFilesystem,
        env: Environment | None = None,
        io: GameIO | None = None,
        programs: dict[str, Program] | None = None,
    ) -> None:
        """Create a shell.

        Args:
            fs: The volume to operate on.
            env: Session variables; defaults to a fresh ``Environment``.
            io: Terminal for interactive programs.  Without one, the
                games refuse to start.
            programs: Runnable programs by name (default: the games).

        """
        self._fs = fs
        self._env = env if env is not None else Environment()
        self._io = io
        self._programs = PROGRAMS if programs is None else programs
        self._history: list[str] = []
        home = self._env.get("HOME") or SEPARATOR
        self._cwd = home if self._is_directory(home) else SEPARATOR

        self._commands: dict[str, _Handler] = {
            "help": self._cmd_help,
            "ls": self._cmd_ls,
            "cat": self._cmd_cat,
            "stat": self._cmd_stat,
            "cd": self._cmd_cd,
            "pwd": self._cmd_pwd,
            "echo": self._cmd_echo,
            "write": self._cmd_write,
            "mkdir": self._cmd_mkdir,
            "touch": self._cmd_touch,
            "env": self._cmd_env,
            "export": self._cmd_export,
            "log": self._cmd_log,
            "history": self._cmd_history,
            "exit": self._cmd_exit,
        }

    @property
    def fs(self) -> UnixFilesystem:
        """Return the volume this shell operates on."""
        return self._fs

    @property
    def env(self) -> Environment:
        """Return the session environment."""
        return self._env

    @property
    def cwd(self) -> str:
        """Return the current working directory."""
        return self._cwd

    @property
    def command_names(self) -> list[str]:
        """Return the builtin command names, sorted."""
        return sorted(self._commands)

    @property
    def program_names(self) -> list[str]:
        """Return registered programs that are present on ``PATH``."""
        return sorted(name for name in self._programs if self._find_program(name) is not None)

    def absolute(self, path: str) -> str:
        """Return *path* made absolute against the working directory."""
        if path.startswith(SEPARATOR):
            return path
        return self._cwd.rstrip(SEPARATOR) + SEPARATOR + path

    def execute(self, command: str) -> str:
        """Parse and execute one command line.

        Args:
            command: The raw command string (e.g. ``"ls -l /usr"``).

        Returns:
            The command output, an ``Error: ...`` message, or
            ``EXIT_SENTINEL`` after ``exit``.

        """
        stripped = command.strip()
        if not stripped:
            return ""
        self._history.append(stripped)

        parts = self._env.expand(stripped).split()
        if not parts:
            return ""
        name, args = parts[0], parts[1:]

        handler = self._commands.get(name)
        if handler is not None:
            return handler(args)
        return self._run_program(name, args)

    # -- helpers ---------------------------------------------------------

    def _is_directory(self, path: str) -> bool:
        info = self._fs.stat(path)
        return info is not None and info.is_directory

    def _describe_failure(self, path: str) -> str:
        """Explain why *path* has no payload to read."""
        info = self._fs.stat(self.absolute(path))
        if info is None:
            return f"Error: {path}: not found"
        if info.is_directory:
            return f"Error: {path}: is a directory"
        return f"Error: {path}: is a device"

    def _owners(self) -> dict[int, str]:
        data = self._fs.read(PASSWD_PATH)
        return parse_passwd(data) if data is not None else {}

    def _find_program(self, name: str) -> str | None:
        """Return the path of the regular file that runs as *name*."""
        if SEPARATOR in name:
            candidates = [self.absolute(name)]
        else:
            candidates = [d.rstrip(SEPARATOR) + SEPARATOR + name for d in self._env.search_path()]
        for candidate in candidates:
            info = self._fs.stat(candidate)
            if info is not None and info.is_regular:
                return candidate
        return None

    def _run_program(self, name: str, _args: list[str]) -> str:
        """Run a program found on ``PATH``."""
        path = self._find_program(name)
        if path is None:
            return f"Unknown command: {name}"
        program = self._programs.get(posixpath.basename(path))
        if program is None:
            return f"Error: {name}: cannot execute"
        if self._io is None:
            return f"Error: {name} needs an interactive terminal"
        self._fs.logger.info(f"exec {path}", source=_SOURCE)
        program(self._io, self._fs)
        return ""

    @staticmethod
    def _format_long(name: str, info: InodeView, owners: dict[int, str]) -> str:
        """Format one ``ls -l`` line."""
        owner = owners.get(info.uid, str(info.uid))
        stamp = time.strftime("%b %d %H:%M", time.localtime(info.mtime))
        return (
            f"{info.permission_string()} {info.link_count:>2} {owner:<8} "
            f"{info.size:>5} {stamp} {name}"
        )

    # -- Command handlers ------------------------------------------------

    def _cmd_help(self, _args: list[str]) -> str:
        """List available commands and programs."""
        lines = ["Available commands: " + ", ".join(self.command_names)]
        programs = self.program_names
        if programs:
            lines.append("Programs: " + ", ".join(programs))
        return "\n".join(lines)

    def _cmd_ls(self, args: list[str]) -> str:
        """List directory contents (``-a`` shows dot entries, ``-l`` details)."""
        flags = "".join(a[1:] for a in args if a.startswith("-"))
        paths = [a for a in args if not a.startswith("-")] or [self._cwd]
        show_all = "a" in flags
        long_format = "l" in flags
        unknown = set(flags) - {"a", "l"}
        if unknown:
            return f"Error: ls: unknown option -{''.join(sorted(unknown))}"

        owners = self._owners() if long_format else {}
        sections: list[str] = []
        for path in paths:
            target = self.absolute(path)
            info = self._fs.stat(target)
            if info is None:
                return f"Error: {path}: not found"
            if not info.is_directory:
                name = posixpath.basename(path.rstrip(SEPARATOR)) or path
                sections.append(self._format_long(name, info, owners) if long_format else name)
                continue
            entries = self._fs.readdir(target) or []
            visible = sorted(
                (e for e in entries if show_all or not e.name.startswith(".")),
                key=lambda e: e.name,
            )
            lines = [
                self._format_long(e.name, e.inode, owners) if long_format else e.name
                for e in visible
            ]
            if len(paths) > 1:
                lines.insert(0, f"{path}:")
            sections.append("\n".join(lines))
        return "\n".join(sections)

    def _cmd_cat(self, args: list[str]) -> str:
        """Print file contents."""
        if not args:
            return "Usage: cat <path...>"
        chunks: list[str] = []
        for path in args:
            data = self._fs.read(self.absolute(path))
            if data is None:
                return self._describe_failure(path)
            chunks.append(data.decode("ascii", errors="replace"))
        return "".join(chunks).rstrip("\n")

    def _cmd_stat(self, args: list[str]) -> str:
        """Display inode metadata."""
        if not args:
            return "Usage: stat <path>"
        path = args[0]
        info = self._fs.stat(self.absolute(path))
        if info is None:
            return f"Error: {path}: not found"
        owners = self._owners()
        lines = [
            f"  File: {path}",
            f"  Inode: {info.inode_number}",
            f"  Mode: {info.permission_string()} ({int(info.mode):07o})",
            f"  Links: {info.link_count}",
            f"  Owner: {owners.get(info.uid, info.uid)} (uid={info.uid}, gid={info.gid})",
            f"  Size: {info.size}",
            f"  Modified: {time.ctime(info.mtime)}",
        ]
        return "\n".join(lines)

    def _cmd_cd(self, args: list[str]) -> str:
        """Change the working directory (default ``$HOME``)."""
        target = args[0] if args else (self._env.get("HOME") or SEPARATOR)
        path = self.absolute(target)
        info = self._fs.stat(path)
        if info is None:
            return f"Error: {target}: not found"
        if not info.is_directory:
            return f"Error: {target}: not a directory"
        self._cwd = normalize(path)
        return ""

    def _cmd_pwd(self, _args: list[str]) -> str:
        """Print the working directory."""
        return self._cwd

    def _cmd_echo(self, args: list[str]) -> str:
        """Print the arguments."""
        return " ".join(args)

    def _cmd_write(self, args: list[str]) -> str:
        """Replace a file's contents with the remaining arguments."""
        if len(args) < 2:  # noqa: PLR2004
            return "Usage: write <path> <content...>"
        path = args[0]
        content = " ".join(args[1:]) + "\n"
        if not self._fs.write(self.absolute(path), content.encode()):
            return self._describe_failure(path)
        return ""

    def _cmd_mkdir(self, args: list[str]) -> str:
        """Create a directory."""
        if not args:
            return "Usage: mkdir <path>"
        if self._fs.create_dir(self.absolute(args[0])) is None:
            return f"Error: cannot create {args[0]}"
        return ""

    def _cmd_touch(self, args: list[str]) -> str:
        """Create an empty file, or bump an existing file's modify time."""
        if not args:
            return "Usage: touch <path>"
        path = self.absolute(args[0])
        existing = self._fs.read(path)
        if existing is not None:
            self._fs.write(path, existing)
            return ""
        if self._fs.create_file(path) is None:
            return f"Error: cannot create {args[0]}"
        return ""

    def _cmd_env(self, _args: list[str]) -> str:
        """List all environment variables."""
        items = self._env.items()
        return "\n".join(f"{k}={v}" for k, v in sorted(items)) if items else "No variables set."

    def _cmd_export(self, args: list[str]) -> str:
        """Set an environment variable (KEY=VALUE)."""
        if not args or "=" not in args[0]:
            return "Usage: export KEY=VALUE"
        key, value = args[0].split("=", 1)
        self._env.set(key, value)
        return ""

    def _cmd_log(self, args: list[str]) -> str:
        """Show log entries (``-l LEVEL`` sets the minimum level)."""
        min_level: LogLevel | None = None
        if args:
            if len(args) != 2 or args[0] != "-l":  # noqa: PLR2004
                return "Usage: log [-l DEBUG|INFO|WARNING|ERROR]"
            try:
                min_level = LogLevel[args[1].upper()]
            except KeyError:
                return f"Error: unknown level '{args[1]}'"
        entries = self._fs.logger.dmesg(min_level=min_level)
        return "\n".join(entries) if entries else "No log entries."

    def _cmd_history(self, _args: list[str]) -> str:
        """Show command history."""
        if not self._history:
            return "No history."
        return "\n".join(f"  {i + 1}  {cmd}" for i, cmd in enumerate(self._history))

    def _cmd_exit(self, _args: list[str]) -> str:
        """Signal the REPL to stop."""
        self._fs.logger.info("logout", source=_SOURCE)
        return self.EXIT_SENTINEL
