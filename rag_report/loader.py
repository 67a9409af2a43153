"""Record source — reads the project, phase and defect CSV files.

Each file has a header row, which is skipped. Field order:

    project: project_id, project_name, start_date, end_date
    phase:   phase_name, start_date, end_date, status
    defect:  defect_id, severity, open_date, fix_eta

Any malformed row aborts the run with a RecordError; there are no partial loads.
"""

from __future__ import annotations

import csv
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Iterator

from rag_report.config import ISO_DATE_FORMAT
from rag_report.enums import PhaseStatus, Severity
from rag_report.exceptions import ConfigError, RecordError
from rag_report.models import DefectRecord, PhaseRecord, ProjectWindow

logger = logging.getLogger(__name__)


def _rows(path: Path, width: int) -> Iterator[tuple[int, list[str]]]:
    """Yield (line number, stripped fields) for each data row, skipping the header."""
    try:
        f = open(path, newline="", encoding="utf-8-sig")
    except OSError as exc:
        raise RecordError(f"cannot open file: {exc.strerror or exc}", path) from exc

    with f:
        reader = csv.reader(f)
        try:
            next(reader, None)
            for row in reader:
                if not any(cell.strip() for cell in row):
                    continue
                if len(row) < width:
                    raise RecordError(f"expected {width} fields, got {len(row)}", path, reader.line_num)
                yield reader.line_num, [cell.strip() for cell in row[:width]]
        except csv.Error as exc:
            raise RecordError(f"malformed CSV: {exc}", path, reader.line_num) from exc


def parse_date(raw: str, date_format: str, path: Path | None = None, line: int | None = None) -> date:
    """Parse raw with the fixed date_format; a mismatch is a RecordError at path:line."""
    try:
        return datetime.strptime(raw, date_format).date()
    except ValueError:
        raise RecordError(f"invalid date {raw!r} (expected format {date_format})", path, line) from None


def load_project(path: str | Path, date_format: str = ISO_DATE_FORMAT) -> ProjectWindow:
    """Read the first data row of the project file."""
    path = Path(path)
    for line, (project_id, name, start, end) in _rows(path, 4):
        return ProjectWindow(
            id=project_id,
            name=name,
            start_date=parse_date(start, date_format, path, line),
            end_date=parse_date(end, date_format, path, line),
        )
    raise RecordError("no project row found", path)


def load_phases(path: str | Path, date_format: str = ISO_DATE_FORMAT) -> list[PhaseRecord]:
    path = Path(path)
    phases = []
    for line, (name, start, end, status) in _rows(path, 4):
        try:
            parsed_status = PhaseStatus.parse(status)
        except ValueError as exc:
            raise RecordError(str(exc), path, line) from None
        phases.append(PhaseRecord(
            name=name,
            start_date=parse_date(start, date_format, path, line),
            end_date=parse_date(end, date_format, path, line),
            status=parsed_status,
        ))
    logger.debug("Loaded %d phases from %s", len(phases), path)
    return phases


def load_defects(path: str | Path, date_format: str = ISO_DATE_FORMAT) -> list[DefectRecord]:
    path = Path(path)
    defects = []
    for line, (defect_id, severity, opened, eta) in _rows(path, 4):
        try:
            parsed_severity = Severity.parse(severity)
        except ValueError as exc:
            raise RecordError(str(exc), path, line) from None
        defects.append(DefectRecord(
            id=defect_id,
            severity=parsed_severity,
            open_date=parse_date(opened, date_format, path, line),
            fix_eta=parse_date(eta, date_format, path, line),
        ))
    logger.debug("Loaded %d defects from %s", len(defects), path)
    return defects


def load_records(
    project_file: str | Path,
    phase_file: str | Path,
    defect_file: str | Path,
    date_format: str = ISO_DATE_FORMAT,
) -> tuple[ProjectWindow, list[PhaseRecord], list[DefectRecord]]:
    """Load all three inputs of a run."""
    return (
        load_project(project_file, date_format),
        load_phases(phase_file, date_format),
        load_defects(defect_file, date_format),
    )


def earliest_date(
    project: ProjectWindow, phases: list[PhaseRecord], defects: list[DefectRecord]
) -> date:
    """Minimum of every date in the inputs; a reproducible stand-in for today."""
    dates = [project.start_date, project.end_date]
    for p in phases:
        dates += [p.start_date, p.end_date]
    for d in defects:
        dates += [d.open_date, d.fix_eta]
    return min(dates)


def resolve_reference_date(
    mode: str,
    project: ProjectWindow,
    phases: list[PhaseRecord],
    defects: list[DefectRecord],
    today: date | None = None,
) -> date:
    """Turn a reference mode ('today', 'earliest' or an ISO date) into a date."""
    if mode == "today":
        return today or date.today()
    if mode == "earliest":
        return earliest_date(project, phases, defects)
    try:
        return date.fromisoformat(mode)
    except ValueError:
        raise ConfigError(f"invalid reference date {mode!r}") from None
