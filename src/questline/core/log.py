"""Append-only execution log, newest entry first."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Iterator, Optional

from rich.console import Console
from rich.markup import escape

from ..models.log import LogEntry, LogSeverity

SEVERITY_STYLES: dict[LogSeverity, str] = {
    LogSeverity.INFO: "cyan",
    LogSeverity.SUCCESS: "green",
    LogSeverity.ERROR: "red",
}


class ExecutionLog:
    def __init__(self, console: Optional[Console] = None):
        self._entries: list[LogEntry] = []
        self.console = console

    def append(self, severity: LogSeverity | str, message: str) -> LogEntry:
        """Record a new entry at the front of the log and return it."""
        entry = LogEntry(
            id=uuid.uuid4().hex[:9],
            timestamp=datetime.now().strftime("%H:%M:%S"),
            severity=LogSeverity(severity),
            message=message,
        )
        self._entries.insert(0, entry)

        if self.console is not None:
            style = SEVERITY_STYLES[entry.severity]
            self.console.print(
                f"  [dim]{entry.timestamp}[/dim] [{style}]{entry.severity.value.upper()}[/{style}] "
                f"{escape(entry.message)}"
            )
        return entry

    @property
    def entries(self) -> tuple[LogEntry, ...]:
        return tuple(self._entries)

    def counts(self) -> dict[LogSeverity, int]:
        """Number of entries per severity, zero for severities not seen."""
        totals = {severity: 0 for severity in LogSeverity}
        for entry in self._entries:
            totals[entry.severity] += 1
        return totals

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(tuple(self._entries))
