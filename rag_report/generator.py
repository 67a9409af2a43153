"""Report generator — orchestrator that wires records → scores → report.

Usage:
    generator = ReportGenerator(config)
    csv_text = generator.generate_csv(project, phases, defects, reference_date)
    js = generator.generate_json(project, phases, defects, reference_date)
    data = generator.generate_from_files("project.csv", "phases.csv", "defects.csv")
"""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Iterable

from rag_report.config import EngineConfig
from rag_report.csv_renderer import render_csv
from rag_report.json_renderer import render_json
from rag_report.loader import load_records, resolve_reference_date
from rag_report.models import DefectRecord, PhaseRecord, ProjectWindow
from rag_report.report_data import ReportData
from rag_report.scorer import compute_scores

logger = logging.getLogger(__name__)


class ReportGenerator:
    """Generates CSV and JSON health reports from project records."""

    def __init__(self, config: EngineConfig | None = None) -> None:
        self.config = (config or EngineConfig()).validate()

    def generate(
        self,
        project: ProjectWindow,
        phases: Iterable[PhaseRecord],
        defects: Iterable[DefectRecord],
        reference_date: date,
    ) -> ReportData:
        """Compute scores and assemble report data."""
        phases = list(phases)
        defects = list(defects)
        scores = compute_scores(project, phases, defects, reference_date, self.config)
        data = ReportData(
            project=project,
            phases=phases,
            defects=defects,
            reference_date=reference_date,
            scores=scores,
            date_format=self.config.date_format,
        )
        logger.info(
            "Report data assembled for %s as of %s: %d phases, %d defects, overall=%.2f (%s)",
            project.id, reference_date.isoformat(), len(phases), len(defects),
            scores.overall_score, scores.overall_status,
        )
        return data

    def generate_from_files(
        self,
        project_file: str | Path,
        phase_file: str | Path,
        defect_file: str | Path,
        today: date | None = None,
    ) -> ReportData:
        """Load the three record files, resolve the reference date and score them."""
        project, phases, defects = load_records(
            project_file, phase_file, defect_file, self.config.date_format
        )
        reference_date = resolve_reference_date(self.config.reference, project, phases, defects, today)
        return self.generate(project, phases, defects, reference_date)

    def generate_csv(
        self,
        project: ProjectWindow,
        phases: Iterable[PhaseRecord],
        defects: Iterable[DefectRecord],
        reference_date: date,
        include_details: bool = False,
    ) -> str:
        """Generate the CSV health report."""
        data = self.generate(project, phases, defects, reference_date)
        return render_csv(data, include_details=include_details)

    def generate_json(
        self,
        project: ProjectWindow,
        phases: Iterable[PhaseRecord],
        defects: Iterable[DefectRecord],
        reference_date: date,
    ) -> str:
        """Generate a full JSON report."""
        data = self.generate(project, phases, defects, reference_date)
        return render_json(data)
