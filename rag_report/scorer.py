"""Scoring — schedule, phase and defect health plus the blended overall status.

Schedule: penalised when progress through the planned window passes 90% / 100%.
Phases: penalised per blocked, overdue or late-starting phase, plus cross-phase penalties.
Defects: penalised for open CRITICAL/HIGH defects and for delayed ones.
Overall: weighted blend of the three, labelled GREEN / AMBER / RED.

Every function takes the reference date explicitly; nothing here reads the clock.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable

from rag_report.config import AMBER_THRESHOLD, GREEN_THRESHOLD, EngineConfig, Weights
from rag_report.enums import PhaseStatus, RagStatus, Severity
from rag_report.models import DefectRecord, PhaseRecord, ProjectWindow

logger = logging.getLogger(__name__)

# Schedule penalties
OVERRUN_PENALTY = 0.4
NEAR_DEADLINE_PENALTY = 0.2
NEAR_DEADLINE_PROGRESS = 0.9

# Phase penalties
BLOCKED_PENALTY = 0.2
PHASE_OVERDUE_PENALTY = 0.15
NOT_STARTED_PENALTY = 0.2
LATE_START_PENALTY = 0.15
PHASE_DAILY_RATE = 0.02
PHASE_DAILY_CAP = 0.2
MULTI_DELAYED_PENALTY = 0.1
MULTI_BLOCKED_PENALTY = 0.1

# Defect penalties: simple policy
CRITICAL_PRESENT_PENALTY = 0.3
MANY_HIGH_PENALTY = 0.2
DELAYED_DEFECT_PENALTY = 0.1
HIGH_COUNT_LIMIT = 2

# Defect penalties: proportional policy, severity -> (base, daily rate, cap)
DELAYED_DEFECT_RATES = {
    Severity.CRITICAL: (0.2, 0.05, 0.3),
    Severity.HIGH: (0.1, 0.03, 0.2),
}
CRITICAL_PRESENT_PENALTY_PROPORTIONAL = 0.2
MANY_HIGH_PENALTY_PROPORTIONAL = 0.1

PENALISED_SEVERITIES = (Severity.CRITICAL, Severity.HIGH)

ON_TRACK = "on track"


@dataclass
class PhaseDetail:
    """One phase of the breakdown table with its start and completion slippage in days."""

    phase: PhaseRecord
    start_delay_days: int = 0
    completion_delay_days: int = 0

    @property
    def delay_details(self) -> str:
        parts = []
        if self.start_delay_days > 0:
            parts.append(f"Start delayed by {self.start_delay_days} days;")
        if self.completion_delay_days > 0:
            parts.append(f"Completion delayed by {self.completion_delay_days} days;")
        return " ".join(parts) if parts else ON_TRACK


@dataclass
class DefectDetail:
    """One defect of the breakdown table with the days it is past its deadline."""

    defect: DefectRecord
    days_delayed: int = 0

    @property
    def delay_status(self) -> str:
        if self.days_delayed > 0:
            return f"delayed by {self.days_delayed} days"
        return ON_TRACK


@dataclass
class Scores:
    """Dimension scores, their labels, summaries and per-item details."""

    # Schedule components
    elapsed_days: int = 0
    total_days: int = 0
    progress: float = 0.0
    schedule_score: float = 1.0
    schedule_status: RagStatus = RagStatus.GREEN
    schedule_summary: str = ""

    # Phase components
    phase_count: int = 0
    completed_phases: int = 0
    delayed_phases: int = 0
    blocked_phases: int = 0
    phase_score: float = 1.0
    phase_status: RagStatus = RagStatus.GREEN
    phase_summary: str = ""
    phase_details: list[PhaseDetail] = field(default_factory=list)

    # Defect components
    defect_count: int = 0
    critical_defects: int = 0
    high_defects: int = 0
    delayed_defects: int = 0
    defect_score: float = 1.0
    defect_status: RagStatus = RagStatus.GREEN
    defect_summary: str = ""
    defect_details: list[DefectDetail] = field(default_factory=list)

    # Overall
    overall_score: float = 1.0
    overall_status: RagStatus = RagStatus.GREEN
    overall_summary: str = ""


def rag_status(score: float) -> RagStatus:
    """Map a score to its RAG label: >= 0.8 GREEN, >= 0.6 AMBER, else RED."""
    if score >= GREEN_THRESHOLD:
        return RagStatus.GREEN
    if score >= AMBER_THRESHOLD:
        return RagStatus.AMBER
    return RagStatus.RED


def _clamp(health: float) -> float:
    # Rounding drops float noise such as 0.30000000000000004 before labelling.
    return min(1.0, max(0.0, round(health, 9)))


def _days(later: date, earlier: date) -> int:
    return (later - earlier).days


def _daily_penalty(days: int, rate: float, cap: float) -> float:
    return min(cap, rate * days)


# ── Schedule ──────────────────────────────────────────────────────────

def _score_schedule(s: Scores, project: ProjectWindow, reference_date: date, config: EngineConfig) -> None:
    s.total_days = _days(project.end_date, project.start_date)
    s.elapsed_days = max(0, _days(reference_date, project.start_date))

    if s.total_days == 0:
        s.progress = 1.0 if reference_date >= project.start_date else 0.0
    else:
        s.progress = s.elapsed_days / s.total_days

    s.schedule_summary = (
        f"Progress: {s.progress * 100:.1f}% ({s.elapsed_days}/{s.total_days} days elapsed)"
    )

    if config.schedule_overrun_policy == "zero" and reference_date > project.end_date:
        s.schedule_summary += "; window has ended"
        s.schedule_score = 0.0
        return

    # The deadline day itself (progress == 1.0) is neither near nor past it.
    health = 1.0
    if s.progress > 1.0:
        health -= OVERRUN_PENALTY
    elif NEAR_DEADLINE_PROGRESS < s.progress < 1.0:
        health -= NEAR_DEADLINE_PENALTY

    s.schedule_score = _clamp(health)


# ── Phases ────────────────────────────────────────────────────────────

def _score_phases(s: Scores, phases: Iterable[PhaseRecord], reference_date: date, config: EngineConfig) -> None:
    # Each phase is penalised on its own; the cross-phase penalties come after the loop.
    proportional = config.phase_policy == "proportional"
    health = 1.0

    for phase in phases:
        detail = PhaseDetail(phase=phase)
        s.phase_count += 1
        if phase.status == PhaseStatus.COMPLETED:
            s.completed_phases += 1

        if phase.status == PhaseStatus.BLOCKED:
            health -= BLOCKED_PENALTY
            s.blocked_phases += 1

        if reference_date > phase.end_date and phase.status != PhaseStatus.COMPLETED:
            detail.completion_delay_days = _days(reference_date, phase.end_date)
            health -= PHASE_OVERDUE_PENALTY
            if proportional:
                health -= _daily_penalty(detail.completion_delay_days, PHASE_DAILY_RATE, PHASE_DAILY_CAP)
            s.delayed_phases += 1

        if phase.status == PhaseStatus.NOT_STARTED and reference_date > phase.start_date:
            detail.start_delay_days = _days(reference_date, phase.start_date)
            if proportional:
                health -= LATE_START_PENALTY
                health -= _daily_penalty(detail.start_delay_days, PHASE_DAILY_RATE, PHASE_DAILY_CAP)
            elif reference_date < phase.end_date:
                health -= NOT_STARTED_PENALTY

        if detail.start_delay_days or detail.completion_delay_days:
            logger.debug("Phase %r: %s", phase.name, detail.delay_details)
        s.phase_details.append(detail)

    if s.delayed_phases > 1:
        health -= MULTI_DELAYED_PENALTY
    if s.blocked_phases > 1:
        health -= MULTI_BLOCKED_PENALTY

    s.phase_score = _clamp(health)
    s.phase_summary = (
        f"Completed: {s.completed_phases}/{s.phase_count}, "
        f"Delayed: {s.delayed_phases}, Blocked: {s.blocked_phases}"
    )


# ── Defects ───────────────────────────────────────────────────────────

def defect_days_delayed(defect: DefectRecord, reference_date: date, config: EngineConfig) -> int:
    """Days past the defect's deadline (0 when not delayed) under the configured basis."""
    if config.defect_delay_basis == "buffer":
        deadline = defect.open_date + timedelta(days=config.defect_buffer_days)
    else:
        deadline = defect.fix_eta
    return max(0, _days(reference_date, deadline))


def _score_defects(s: Scores, defects: Iterable[DefectRecord], reference_date: date, config: EngineConfig) -> None:
    # Only CRITICAL and HIGH are penalised; MEDIUM and LOW are counted in the details.
    proportional = config.defect_policy == "proportional"
    health = 1.0

    for defect in defects:
        detail = DefectDetail(defect=defect, days_delayed=defect_days_delayed(defect, reference_date, config))
        s.defect_count += 1
        s.defect_details.append(detail)

        if defect.severity == Severity.CRITICAL:
            s.critical_defects += 1
        elif defect.severity == Severity.HIGH:
            s.high_defects += 1

        if detail.days_delayed == 0 or defect.severity not in PENALISED_SEVERITIES:
            continue

        s.delayed_defects += 1
        if proportional:
            base, rate, cap = DELAYED_DEFECT_RATES[defect.severity]
            health -= base + _daily_penalty(detail.days_delayed, rate, cap)
        else:
            health -= DELAYED_DEFECT_PENALTY
        logger.debug("Defect %s (%s) %s", defect.id, defect.severity, detail.delay_status)

    if proportional:
        critical_penalty, high_penalty = CRITICAL_PRESENT_PENALTY_PROPORTIONAL, MANY_HIGH_PENALTY_PROPORTIONAL
    else:
        critical_penalty, high_penalty = CRITICAL_PRESENT_PENALTY, MANY_HIGH_PENALTY
    if s.critical_defects > 0:
        health -= critical_penalty
    if s.high_defects > HIGH_COUNT_LIMIT:
        health -= high_penalty

    s.defect_score = _clamp(health)
    s.defect_summary = (
        f"Critical: {s.critical_defects}, High: {s.high_defects}, Delayed: {s.delayed_defects}"
    )


# ── Blend ─────────────────────────────────────────────────────────────

def blend(schedule: float, phase: float, defect: float, weights: Weights) -> float:
    """Weighted combination of the three dimension scores."""
    raw = schedule * weights.schedule + phase * weights.phase + defect * weights.defect
    return _clamp(raw / weights.total)


# ── Single dimension ──────────────────────────────────────────────────

def score_schedule(
    project: ProjectWindow, reference_date: date, config: EngineConfig | None = None
) -> Scores:
    """Score only the schedule. Returns a fresh Scores with the schedule fields filled."""
    s = Scores()
    _score_schedule(s, project, reference_date, (config or EngineConfig()).validate())
    s.schedule_status = rag_status(s.schedule_score)
    return s


def score_phases(
    phases: Iterable[PhaseRecord], reference_date: date, config: EngineConfig | None = None
) -> Scores:
    """Score only the phases. Returns a fresh Scores with the phase fields and details filled."""
    s = Scores()
    _score_phases(s, phases, reference_date, (config or EngineConfig()).validate())
    s.phase_status = rag_status(s.phase_score)
    return s


def score_defects(
    defects: Iterable[DefectRecord], reference_date: date, config: EngineConfig | None = None
) -> Scores:
    """Score only the defects. Returns a fresh Scores with the defect fields and details filled."""
    s = Scores()
    _score_defects(s, defects, reference_date, (config or EngineConfig()).validate())
    s.defect_status = rag_status(s.defect_score)
    return s


def compute_scores(
    project: ProjectWindow,
    phases: Iterable[PhaseRecord],
    defects: Iterable[DefectRecord],
    reference_date: date,
    config: EngineConfig | None = None,
) -> Scores:
    """Compute every dimension score, the overall score and their RAG labels."""
    config = (config or EngineConfig()).validate()
    s = Scores()

    _score_schedule(s, project, reference_date, config)
    _score_phases(s, phases, reference_date, config)
    _score_defects(s, defects, reference_date, config)

    s.overall_score = blend(s.schedule_score, s.phase_score, s.defect_score, config.weights)

    s.schedule_status = rag_status(s.schedule_score)
    s.phase_status = rag_status(s.phase_score)
    s.defect_status = rag_status(s.defect_score)
    s.overall_status = rag_status(s.overall_score)
    s.overall_summary = (
        f"Schedule: {s.schedule_status}, Phases: {s.phase_status}, Defects: {s.defect_status}"
    )
    return s
