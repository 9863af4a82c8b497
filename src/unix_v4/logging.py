"""System log — an in-memory record of filesystem and shell events.

The V4 kernel had no ``syslog``; messages went straight to the console.
This module keeps them instead, so the shell's ``log`` command can show
what happened since boot:

- **LogLevel** — severity, ordered so ``min_level`` filtering is a
  single comparison.
- **LogEntry** — one immutable record (level, message, source, uid).
- **Logger** — an append-only buffer with filtering.

The filesystem logs under source ``fs``; the shell under ``sh``.
"""

from dataclasses import dataclass
from enum import IntEnum


class LogLevel(IntEnum):
    """Severity levels for log entries (DEBUG < INFO < WARNING < ERROR)."""

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass(frozen=True)
class LogEntry:
    """A single log record.

    Attributes:
        level: The severity of this event.
        message: What happened.
        source: The subsystem that reported it (``fs``, ``sh``, ...).
        uid: The user id the event is attributed to (0 = root).

    """

    level: LogLevel
    message: str
    source: str
    uid: int = 0

    def __str__(self) -> str:
        """Format as ``[LEVEL] source: message``."""
        return f"[{self.level.name}] {self.source}: {self.message}"


class Logger:
    """Append-only log buffer with filtering."""

    def __init__(self) -> None:
        """Create an empty logger."""
        self._entries: list[LogEntry] = []

    @property
    def entries(self) -> list[LogEntry]:
        """Return all log entries in the order they were logged."""
        return list(self._entries)

    def log(
        self,
        level: LogLevel,
        message: str,
        *,
        source: str,
        uid: int = 0,
    ) -> None:
        """Append a new entry to the log.

        Args:
            level: Severity of the event.
            message: Human-readable event description.
            source: Subsystem that generated the event.
            uid: User id associated with the event.

        """
        self._entries.append(LogEntry(level=level, message=message, source=source, uid=uid))

    def debug(self, message: str, *, source: str) -> None:
        """Log *message* at DEBUG level."""
        self.log(LogLevel.DEBUG, message, source=source)

    def info(self, message: str, *, source: str) -> None:
        """Log *message* at INFO level."""
        self.log(LogLevel.INFO, message, source=source)

    def warning(self, message: str, *, source: str) -> None:
        """Log *message* at WARNING level."""
        self.log(LogLevel.WARNING, message, source=source)

    def filter(
        self,
        *,
        min_level: LogLevel | None = None,
        source: str | None = None,
    ) -> list[LogEntry]:
        """Return entries matching the given criteria.

        Args:
            min_level: If set, only return entries at or above this level.
            source: If set, only return entries from this source.

        """
        result = self._entries
        if min_level is not None:
            result = [e for e in result if e.level >= min_level]
        if source is not None:
            result = [e for e in result if e.source == source]
        return result if result is not self._entries else list(result)

    def dmesg(self, *, min_level: LogLevel | None = None) -> list[str]:
        """Return the rendered entries, oldest first."""
        return [str(e) for e in self.filter(min_level=min_level)]

    def clear(self) -> None:
        """Remove all log entries."""
        self._entries.clear()
