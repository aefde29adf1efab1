"""
Construction progress bookkeeping.

Every entity carries six lifecycle stages. Stages are plain data: nothing in
here touches geometry, and the layout engine never reads them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class StageStatus(str, Enum):
    """Status of a construction stage or a weld joint."""

    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    BLOCKED = "BLOCKED"  # e.g. scaffolding missing
    ISSUE = "ISSUE"  # e.g. inspection failed

    @classmethod
    def parse(cls, value: StageStatus | str) -> StageStatus:
        """Accept an enum member or its name, case-insensitively."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            valid = ", ".join(s.value for s in cls)
            raise ValueError(f"Unknown stage status {value!r}. Expected one of: {valid}") from None


@dataclass
class StageRecord:
    """
    One lifecycle stage of an entity.

    Attributes:
        key: Stage key (e.g. "welding")
        label: Human readable name
        status: Current status
        required_resources: Crew and equipment the stage needs
        date: Optional completion/realisation date as free text
    """

    key: str
    label: str
    status: StageStatus = StageStatus.NOT_STARTED
    required_resources: tuple[str, ...] = ()
    date: str | None = None


# (key, label, required resources) in workflow order
STAGE_DEFINITIONS: tuple[tuple[str, str, tuple[str, ...]], ...] = (
    ("scaffolding", "Scaffolding / Access", ("Tubular scaffold", "Scaffolder x2")),
    ("lifting", "Lifting / Positioning", ("Crane truck", "Rigger")),
    ("welding", "Welding", ("TIG/SMAW welder", "7018 electrodes")),
    ("inspection", "Quality Inspection", ("N1 inspector", "Dye penetrant")),
    ("hydrotest", "Hydrostatic Test", ("Test pump", "Calibrated gauge")),
    ("insulation", "Thermal Insulation", ("Rock wool", "Tinsmith")),
)

STAGE_KEYS: tuple[str, ...] = tuple(key for key, _, _ in STAGE_DEFINITIONS)

# Stages that only make sense on pipe and elbow entities
PIPING_ONLY_STAGES = frozenset({"welding", "hydrotest", "insulation"})

# Stages set by "mark complete" on every entity; piping also gets hydrotest
# and insulation
COMMON_COMPLETION_STAGES: tuple[str, ...] = ("scaffolding", "lifting", "welding", "inspection")
PIPING_COMPLETION_STAGES: tuple[str, ...] = COMMON_COMPLETION_STAGES + ("hydrotest", "insulation")


def create_default_stages() -> dict[str, StageRecord]:
    """Fresh set of stages, all NOT_STARTED."""
    return {
        key: StageRecord(key=key, label=label, required_resources=resources)
        for key, label, resources in STAGE_DEFINITIONS
    }


def validate_stage_key(key: str) -> str:
    """Return the key if it names a known stage, else raise ValueError."""
    if key not in STAGE_KEYS:
        raise ValueError(f"Unknown stage {key!r}. Expected one of: {', '.join(STAGE_KEYS)}")
    return key


def stage_applies(key: str, is_piping: bool) -> bool:
    """Whether a stage may be updated on an entity."""
    return is_piping or key not in PIPING_ONLY_STAGES


def completion_stages(is_piping: bool) -> tuple[str, ...]:
    """Stages set to COMPLETED by a mark-complete command."""
    return PIPING_COMPLETION_STAGES if is_piping else COMMON_COMPLETION_STAGES


@dataclass
class ProgressSummary:
    """Count of entities per status for one stage."""

    stage: str
    counts: dict[StageStatus, int] = field(default_factory=lambda: {s: 0 for s in StageStatus})

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    @property
    def completed_fraction(self) -> float:
        total = self.total
        return self.counts[StageStatus.COMPLETED] / total if total else 0.0
