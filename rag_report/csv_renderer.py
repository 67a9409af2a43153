"""CSV renderer — the delimited health report.

Layout:

    Component,Score,Status,Details
    Schedule Health,1.00,GREEN,"Progress: 50.0% (5/10 days elapsed)"
    ...

With details, a phase table and a defect table follow, each after a blank line.
"""

from __future__ import annotations

import csv
import io
from pathlib import Path

from rag_report.report_data import ReportData

SUMMARY_HEADER = ["Component", "Score", "Status", "Details"]
PHASE_HEADER = ["Phase Name", "Start Date", "End Date", "Status", "Delay Details"]
DEFECT_HEADER = ["Defect ID", "Severity", "Open Date", "Fix ETA", "Delay Status"]


def render_csv(data: ReportData, include_details: bool = False) -> str:
    """Render the report as CSV text."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    s = data.scores

    writer.writerow(SUMMARY_HEADER)
    for component, score, status, details in (
        ("Schedule Health", s.schedule_score, s.schedule_status, s.schedule_summary),
        ("Phase Health", s.phase_score, s.phase_status, s.phase_summary),
        ("Defect Health", s.defect_score, s.defect_status, s.defect_summary),
        ("Overall Status", s.overall_score, s.overall_status, s.overall_summary),
    ):
        writer.writerow([component, f"{score:.2f}", status.value, details])

    if include_details:
        writer.writerow([])
        writer.writerow(PHASE_HEADER)
        for d in s.phase_details:
            writer.writerow([
                d.phase.name,
                data.format_date(d.phase.start_date),
                data.format_date(d.phase.end_date),
                d.phase.status.value,
                d.delay_details,
            ])

        writer.writerow([])
        writer.writerow(DEFECT_HEADER)
        for d in s.defect_details:
            writer.writerow([
                d.defect.id,
                d.defect.severity.value,
                data.format_date(d.defect.open_date),
                data.format_date(d.defect.fix_eta),
                d.delay_status,
            ])

    return buf.getvalue()


def write_csv(data: ReportData, path: str | Path, include_details: bool = False) -> Path:
    """Write the CSV report to path and return it."""
    path = Path(path)
    with open(path, "w", newline="", encoding="utf-8") as f:
        f.write(render_csv(data, include_details=include_details))
    return path
