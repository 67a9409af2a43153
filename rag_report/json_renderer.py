"""JSON renderer — produces a machine-readable JSON report."""

from __future__ import annotations

import json
from typing import Any

from rag_report.report_data import ReportData


def render_json(data: ReportData, indent: int = 2) -> str:
    """Render the report as JSON string."""
    report = build_json_dict(data)
    return json.dumps(report, indent=indent, default=str)


def build_json_dict(data: ReportData) -> dict[str, Any]:
    """Build a JSON-serializable dict of the full report."""
    s = data.scores
    p = data.project
    return {
        "meta": {
            "project_id": p.id,
            "project_name": p.name,
            "start_date": data.format_date(p.start_date),
            "end_date": data.format_date(p.end_date),
            "reference_date": data.format_date(data.reference_date),
            "phase_count": len(data.phases),
            "defect_count": len(data.defects),
        },
        "scores": {
            "schedule": {
                "score": s.schedule_score,
                "status": s.schedule_status.value,
                "summary": s.schedule_summary,
                "elapsed_days": s.elapsed_days,
                "total_days": s.total_days,
                "progress": round(s.progress, 4),
            },
            "phase": {
                "score": s.phase_score,
                "status": s.phase_status.value,
                "summary": s.phase_summary,
                "completed": s.completed_phases,
                "delayed": s.delayed_phases,
                "blocked": s.blocked_phases,
            },
            "defect": {
                "score": s.defect_score,
                "status": s.defect_status.value,
                "summary": s.defect_summary,
                "critical": s.critical_defects,
                "high": s.high_defects,
                "delayed": s.delayed_defects,
            },
            "overall": {
                "score": s.overall_score,
                "status": s.overall_status.value,
                "summary": s.overall_summary,
            },
        },
        "phases": [
            {
                "name": d.phase.name,
                "start_date": data.format_date(d.phase.start_date),
                "end_date": data.format_date(d.phase.end_date),
                "status": d.phase.status.value,
                "delay_details": d.delay_details,
            }
            for d in s.phase_details
        ],
        "defects": [
            {
                "id": d.defect.id,
                "severity": d.defect.severity.value,
                "open_date": data.format_date(d.defect.open_date),
                "fix_eta": data.format_date(d.defect.fix_eta),
                "days_delayed": d.days_delayed,
                "delay_status": d.delay_status,
            }
            for d in s.defect_details
        ],
    }
