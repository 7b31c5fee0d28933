"""
Structured errors raised by the schedule engine.

The HTTP layer maps these to 4xx/5xx responses while keeping a stable
machine-readable code for the admin UI.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional


# Error codes (stable API surface)
INVALID_CONFIG = "INVALID_CONFIG"
PERSISTENCE_FAILURE = "PERSISTENCE_FAILURE"
REGENERATION_IN_PROGRESS = "REGENERATION_IN_PROGRESS"


@dataclass
class ScheduleEngineError(Exception):
    code: str
    message: str
    details: Optional[Any] = None

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


@dataclass
class InvalidConfig(ScheduleEngineError):
    """Season configuration failed validation; nothing was generated."""

    violations: List[Any] = field(default_factory=list)

    @classmethod
    def from_violations(cls, violations) -> "InvalidConfig":
        violations = list(violations)
        summary = "; ".join(v.message for v in violations)
        return cls(
            code=INVALID_CONFIG,
            message=f"Season configuration has {len(violations)} problem(s): {summary}",
            violations=violations,
        )


@dataclass
class PersistenceFailure(ScheduleEngineError):
    """The atomic batch apply failed; nothing is considered applied."""

    division_id: Optional[str] = None

    @classmethod
    def for_division(cls, division_id: str, cause: Exception) -> "PersistenceFailure":
        return cls(
            code=PERSISTENCE_FAILURE,
            message=f"Could not persist schedule for division {division_id}: {cause}",
            details={"cause": type(cause).__name__},
            division_id=division_id,
        )


@dataclass
class RegenerationInProgress(ScheduleEngineError):
    """Another regeneration for the same division holds the lock."""

    division_id: Optional[str] = None

    @classmethod
    def for_division(cls, division_id: str, timeout_s: float) -> "RegenerationInProgress":
        return cls(
            code=REGENERATION_IN_PROGRESS,
            message=(
                f"A schedule regeneration for division {division_id} is already running "
                f"(waited {timeout_s:g}s)"
            ),
            division_id=division_id,
        )
