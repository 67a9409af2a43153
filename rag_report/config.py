"""Engine configuration — scoring policies, blend weights and input format.

The source material disagrees on three penalty rules, so each one is an
explicit switch here with a fixed default:

    schedule.overrun_policy  proportional | zero
    phases.policy            flat | proportional
    defects.policy           simple | proportional
    defects.delay_basis      eta | buffer

Example YAML:

    schedule:
      overrun_policy: zero
    defects:
      policy: proportional
      delay_basis: buffer
      buffer_days: 1
    weights:
      schedule: 0.5
      phase: 0.0
      defect: 0.5
    input:
      date_format: "%d/%m/%Y"
      reference: earliest
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any

import yaml

from rag_report.exceptions import ConfigError

GREEN_THRESHOLD = 0.8
AMBER_THRESHOLD = 0.6

ISO_DATE_FORMAT = "%Y-%m-%d"
DAY_FIRST_DATE_FORMAT = "%d/%m/%Y"

SCHEDULE_OVERRUN_POLICIES = ("proportional", "zero")
PHASE_POLICIES = ("flat", "proportional")
DEFECT_POLICIES = ("simple", "proportional")
DEFECT_DELAY_BASES = ("eta", "buffer")
REFERENCE_MODES = ("today", "earliest")


@dataclass(frozen=True)
class Weights:
    """Blend weights for the overall score. Normalised by their sum."""

    schedule: float = 0.3
    phase: float = 0.4
    defect: float = 0.3

    @property
    def total(self) -> float:
        return self.schedule + self.phase + self.defect


TWO_DIMENSION_WEIGHTS = Weights(schedule=0.5, phase=0.0, defect=0.5)


@dataclass(frozen=True)
class EngineConfig:
    """Everything that changes how a run is scored or read."""

    schedule_overrun_policy: str = "proportional"
    phase_policy: str = "flat"
    defect_policy: str = "simple"
    defect_delay_basis: str = "eta"
    defect_buffer_days: int = 1
    weights: Weights = field(default_factory=Weights)
    date_format: str = ISO_DATE_FORMAT
    reference: str = "today"

    def validate(self) -> "EngineConfig":
        _check_choice("schedule.overrun_policy", self.schedule_overrun_policy, SCHEDULE_OVERRUN_POLICIES)
        _check_choice("phases.policy", self.phase_policy, PHASE_POLICIES)
        _check_choice("defects.policy", self.defect_policy, DEFECT_POLICIES)
        _check_choice("defects.delay_basis", self.defect_delay_basis, DEFECT_DELAY_BASES)
        if not isinstance(self.defect_buffer_days, int) or isinstance(self.defect_buffer_days, bool):
            raise ConfigError(f"defects.buffer_days must be an integer, got {self.defect_buffer_days!r}")
        if self.defect_buffer_days < 0:
            raise ConfigError(f"defects.buffer_days must be >= 0, got {self.defect_buffer_days}")

        w = self.weights
        if min(w.schedule, w.phase, w.defect) < 0:
            raise ConfigError(f"weights must be non-negative, got {w}")
        if w.total <= 0:
            raise ConfigError("at least one weight must be positive")

        if not isinstance(self.date_format, str) or not self.date_format:
            raise ConfigError(f"input.date_format must be a non-empty string, got {self.date_format!r}")
        if not isinstance(self.reference, str):
            raise ConfigError(f"input.reference must be a string, got {self.reference!r}")
        if self.reference not in REFERENCE_MODES:
            try:
                date.fromisoformat(self.reference)
            except ValueError:
                raise ConfigError(
                    f"input.reference must be 'today', 'earliest' or an ISO date, got {self.reference!r}"
                ) from None
        return self


def _check_choice(key: str, value: str, allowed: tuple[str, ...]) -> None:
    if value not in allowed:
        raise ConfigError(f"{key} must be one of {', '.join(allowed)}, got {value!r}")


# YAML section → {yaml key: EngineConfig field}
_SECTIONS: dict[str, dict[str, str]] = {
    "schedule": {"overrun_policy": "schedule_overrun_policy"},
    "phases": {"policy": "phase_policy"},
    "defects": {
        "policy": "defect_policy",
        "delay_basis": "defect_delay_basis",
        "buffer_days": "defect_buffer_days",
    },
    "input": {"date_format": "date_format", "reference": "reference"},
}


def config_from_dict(raw: dict[str, Any]) -> EngineConfig:
    """Build a validated config from the nested YAML layout."""
    kwargs: dict[str, Any] = {}
    for section, body in raw.items():
        if section == "weights":
            kwargs["weights"] = _weights_from_dict(body)
            continue
        mapping = _SECTIONS.get(section)
        if mapping is None:
            raise ConfigError(f"unknown config section {section!r}")
        if not isinstance(body, dict):
            raise ConfigError(f"config section {section!r} must be a mapping")
        for key, value in body.items():
            if key not in mapping:
                raise ConfigError(f"unknown key {section}.{key}")
            kwargs[mapping[key]] = str(value) if mapping[key] == "reference" else value
    return EngineConfig(**kwargs).validate()


def _weights_from_dict(body: Any) -> Weights:
    if not isinstance(body, dict):
        raise ConfigError("config section 'weights' must be a mapping")
    unknown = set(body) - {"schedule", "phase", "defect"}
    if unknown:
        raise ConfigError(f"unknown weight(s): {', '.join(sorted(unknown))}")
    try:
        return Weights(**{k: float(v) for k, v in body.items()})
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"weights must be numbers: {exc}") from exc


def load_config(path: str | Path | None = None) -> EngineConfig:
    """Load an EngineConfig from a YAML file, or the defaults when path is None."""
    if path is None:
        return EngineConfig().validate()

    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except OSError as exc:
        raise ConfigError(f"cannot read config {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML in {path}: {exc}") from exc

    if raw is None:
        return EngineConfig().validate()
    if not isinstance(raw, dict):
        raise ConfigError(f"config {path} must contain a mapping at the top level")
    return config_from_dict(raw)
