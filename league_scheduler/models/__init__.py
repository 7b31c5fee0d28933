"""
Data models for the scheduling engine.
"""

from .models import (
    Weekday,
    WeekType,
    GameStatus,
    LockedConflictKind,
    DateRange,
    PlayoffStructure,
    SeasonConfig,
    GameSlot,
    Game,
    ConfigViolation,
    ValidationResult,
    LockedWeekConflict,
    LocationConflict,
    GameUpdate,
    ReconciliationPlan,
    RegenerationResult
)

__all__ = [
    "Weekday",
    "WeekType",
    "GameStatus",
    "LockedConflictKind",
    "DateRange",
    "PlayoffStructure",
    "SeasonConfig",
    "GameSlot",
    "Game",
    "ConfigViolation",
    "ValidationResult",
    "LockedWeekConflict",
    "LocationConflict",
    "GameUpdate",
    "ReconciliationPlan",
    "RegenerationResult"
]
