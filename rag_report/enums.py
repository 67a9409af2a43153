"""Closed enumerations for phase status, defect severity and RAG labels."""

from __future__ import annotations

from enum import Enum


class _ParsedEnum(str, Enum):
    """String enum with a single case-insensitive parser for input files."""

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, raw: str):
        key = raw.strip().upper().replace(" ", "_").replace("-", "_")
        try:
            return cls(key)
        except ValueError:
            allowed = ", ".join(m.value for m in cls)
            raise ValueError(f"unknown {cls.__name__} {raw!r} (expected one of {allowed})") from None


class PhaseStatus(_ParsedEnum):
    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    BLOCKED = "BLOCKED"


class Severity(_ParsedEnum):
    """Defect severity. Only CRITICAL and HIGH carry penalties."""

    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class RagStatus(_ParsedEnum):
    GREEN = "GREEN"
    AMBER = "AMBER"
    RED = "RED"
