"""Input records handed to the scoring engine."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from rag_report.enums import PhaseStatus, Severity


@dataclass(frozen=True)
class ProjectWindow:
    """Planned schedule window of the project. start_date <= end_date is not checked."""

    id: str
    name: str
    start_date: date
    end_date: date


@dataclass(frozen=True)
class PhaseRecord:
    name: str
    start_date: date
    end_date: date
    status: PhaseStatus


@dataclass(frozen=True)
class DefectRecord:
    id: str
    severity: Severity
    open_date: date
    fix_eta: date
