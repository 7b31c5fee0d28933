"""
Data models for the League Season Schedule Engine.
Defines all data structures used throughout the application.
"""

from dataclasses import dataclass, field, replace
from datetime import date, time
from typing import List, Optional, Dict, Any
from enum import Enum

from league_scheduler.core.config import DEFAULT_TIMEZONE


class Weekday(Enum):
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"

    @property
    def index(self) -> int:
        """Day number as returned by date.weekday() (0=Monday, 6=Sunday)."""
        return list(Weekday).index(self)

    @classmethod
    def from_date(cls, day: date) -> "Weekday":
        return list(cls)[day.weekday()]


class WeekType(Enum):
    REGULAR = "REGULAR"
    QUARTERFINAL = "QUARTERFINAL"
    SEMIFINAL = "SEMIFINAL"
    FINAL = "FINAL"

    @property
    def is_playoff(self) -> bool:
        return self is not WeekType.REGULAR


class GameStatus(Enum):
    SCHEDULED = "scheduled"
    PLAYED = "played"
    CANCELED = "canceled"


class LockedConflictKind(Enum):
    DRIFT = "drift"      # locked game no longer matches the generated slot
    ORPHAN = "orphan"    # locked game's week is no longer generated


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date
    label: str = ""

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def overlaps(self, other: "DateRange") -> bool:
        return self.start <= other.end and other.start <= self.end

    def __str__(self):
        if self.start == self.end:
            return self.start.isoformat()
        return f"{self.start.isoformat()}..{self.end.isoformat()}"


@dataclass(frozen=True)
class PlayoffStructure:
    has_quarterfinals: bool = True
    has_semifinals: bool = True
    has_finals: bool = True

    def rounds(self) -> List[WeekType]:
        rounds = []
        if self.has_quarterfinals:
            rounds.append(WeekType.QUARTERFINAL)
        if self.has_semifinals:
            rounds.append(WeekType.SEMIFINAL)
        if self.has_finals:
            rounds.append(WeekType.FINAL)
        return rounds


@dataclass(frozen=True)
class SeasonConfig:
    weekday: Weekday
    start_time: time
    end_time: time
    start_date: date
    end_date: Optional[date] = None
    week_count: Optional[int] = None
    blackouts: List[DateRange] = field(default_factory=list)
    early_registration_cutoff: Optional[date] = None
    playoffs: Optional[PlayoffStructure] = None
    location_id: Optional[str] = None
    timezone: str = DEFAULT_TIMEZONE

    def playoff_rounds(self) -> List[WeekType]:
        return self.playoffs.rounds() if self.playoffs else []


@dataclass(frozen=True)
class GameSlot:
    week_number: Optional[int]
    date: date
    start_time: time
    end_time: time
    is_bye: bool = False
    week_type: WeekType = WeekType.REGULAR
    label: str = ""

    def __str__(self):
        return f"{self.label or self.week_number}: {self.date} {self.start_time}-{self.end_time}"


@dataclass
class Game:
    id: str
    division_id: str
    week_number: Optional[int]
    date: date
    start_time: time
    end_time: time
    location_id: Optional[str] = None
    status: GameStatus = GameStatus.SCHEDULED
    locked: bool = False
    week_type: WeekType = WeekType.REGULAR
    published: bool = False

    @property
    def is_locked(self) -> bool:
        """A played game counts as locked even if the flag was never set."""
        return self.locked or self.status == GameStatus.PLAYED

    def copy(self, **changes) -> "Game":
        return replace(self, **changes)

    def __str__(self):
        return f"Game {self.id} (division {self.division_id}, week {self.week_number}) on {self.date} {self.start_time}-{self.end_time}"


@dataclass(frozen=True)
class ConfigViolation:
    field: str
    code: str
    message: str


@dataclass
class ValidationResult:
    is_valid: bool = True
    violations: List[ConfigViolation] = field(default_factory=list)

    def add_violation(self, violation: ConfigViolation):
        self.violations.append(violation)
        self.is_valid = False

    def get_summary(self) -> str:
        summary = f"Config Valid: {self.is_valid}\n"
        for violation in self.violations:
            summary += f"  - {violation.field}: {violation.message}\n"
        return summary


@dataclass(frozen=True)
class LockedWeekConflict:
    game_id: str
    week_number: Optional[int]
    kind: LockedConflictKind
    message: str
    expected_date: Optional[date] = None
    expected_start_time: Optional[time] = None
    expected_end_time: Optional[time] = None


@dataclass(frozen=True)
class LocationConflict:
    location_id: str
    date: date
    first_game_id: str
    second_game_id: str
    first_division_id: Optional[str] = None
    second_division_id: Optional[str] = None
    overlap_start: Optional[time] = None
    overlap_end: Optional[time] = None

    @property
    def pair(self) -> frozenset:
        return frozenset((self.first_game_id, self.second_game_id))

    def __str__(self):
        return (
            f"Location {self.location_id} double-booked on {self.date} "
            f"{self.overlap_start}-{self.overlap_end}: games {self.first_game_id} and {self.second_game_id}"
        )


@dataclass
class GameUpdate:
    game: Game
    changes: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ReconciliationPlan:
    to_create: List[Game] = field(default_factory=list)
    to_update: List[GameUpdate] = field(default_factory=list)
    to_delete: List[Game] = field(default_factory=list)
    locked_conflicts: List[LockedWeekConflict] = field(default_factory=list)

    @property
    def is_noop(self) -> bool:
        return not (self.to_create or self.to_update or self.to_delete)

    def get_summary(self) -> str:
        return (
            f"create={len(self.to_create)} update={len(self.to_update)} "
            f"delete={len(self.to_delete)} locked_conflicts={len(self.locked_conflicts)}"
        )


@dataclass
class RegenerationResult:
    division_id: str
    created: int = 0
    updated: int = 0
    deleted: int = 0
    conflicts: List[LocationConflict] = field(default_factory=list)
    locked_conflicts: List[LockedWeekConflict] = field(default_factory=list)
