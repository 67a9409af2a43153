"""Report data model — collects all data needed to render a report."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from rag_report.config import ISO_DATE_FORMAT
from rag_report.models import DefectRecord, PhaseRecord, ProjectWindow
from rag_report.scorer import Scores


@dataclass
class ReportData:
    """Everything needed to render a report.

    Sections:
    1. Health summary (schedule, phase, defect, overall)
    2. Phase breakdown
    3. Defect breakdown
    """

    project: ProjectWindow
    phases: list[PhaseRecord]
    defects: list[DefectRecord]
    reference_date: date
    scores: Scores
    date_format: str = ISO_DATE_FORMAT

    def format_date(self, value: date) -> str:
        return value.strftime(self.date_format)
