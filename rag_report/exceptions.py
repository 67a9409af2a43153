"""Exceptions raised while loading records, reading configuration or scoring."""

from __future__ import annotations

from pathlib import Path


class RagReportError(Exception):
    """Base class for every error that aborts a report run."""


class ConfigError(RagReportError, ValueError):
    """Invalid engine configuration (unknown policy, bad weights, bad YAML)."""


class RecordError(RagReportError, ValueError):
    """A record file could not be read or one of its rows is malformed."""

    def __init__(self, message: str, path: str | Path | None = None, line: int | None = None) -> None:
        self.path = str(path) if path is not None else None
        self.line = line
        location = ""
        if self.path:
            location = self.path if line is None else f"{self.path}:{line}"
            location += ": "
        super().__init__(f"{location}{message}")
