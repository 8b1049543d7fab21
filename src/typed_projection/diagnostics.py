"""Diagnostics sinks for projection warnings."""

from __future__ import annotations

import logging
from typing import Protocol


class DiagnosticsSink(Protocol):
    """Receives human-readable, single-line warnings."""

    def warning(self, message: str) -> None: ...


class LoggingDiagnostics:
    """Sink that forwards warnings to a logger."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger if logger is not None else logging.getLogger(__name__)

    def warning(self, message: str) -> None:
        self.logger.warning("%s", message)


class CollectingDiagnostics:
    """Sink that keeps warnings in memory, for reporting after a run."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def warning(self, message: str) -> None:
        self.messages.append(message)

    def __len__(self) -> int:
        return len(self.messages)
