"""
Request and response models for the schedule API.
"""

from datetime import date, time
from typing import List, Optional

from pydantic import BaseModel, Field

from league_scheduler.models import (
    DateRange, Game, GameSlot, GameStatus, LocationConflict, LockedWeekConflict,
    PlayoffStructure, RegenerationResult, SeasonConfig, ValidationResult, Weekday, WeekType
)
from league_scheduler.core.config import DEFAULT_TIMEZONE


class BlackoutPayload(BaseModel):
    start: date
    end: date
    label: str = ""


class PlayoffPayload(BaseModel):
    has_quarterfinals: bool = True
    has_semifinals: bool = True
    has_finals: bool = True


class SeasonConfigPayload(BaseModel):
    """Season configuration as submitted by the division form."""
    weekday: Weekday
    start_time: time
    end_time: time
    start_date: date
    end_date: Optional[date] = None
    week_count: Optional[int] = None
    blackouts: List[BlackoutPayload] = Field(default_factory=list)
    early_registration_cutoff: Optional[date] = None
    playoffs: Optional[PlayoffPayload] = None
    location_id: Optional[str] = None
    timezone: str = DEFAULT_TIMEZONE

    def to_config(self) -> SeasonConfig:
        return SeasonConfig(
            weekday=self.weekday,
            start_time=self.start_time,
            end_time=self.end_time,
            start_date=self.start_date,
            end_date=self.end_date,
            week_count=self.week_count,
            blackouts=[DateRange(b.start, b.end, b.label) for b in self.blackouts],
            early_registration_cutoff=self.early_registration_cutoff,
            playoffs=PlayoffStructure(**self.playoffs.model_dump()) if self.playoffs else None,
            location_id=self.location_id,
            timezone=self.timezone,
        )


class GamePayload(BaseModel):
    id: str
    division_id: str
    week_number: Optional[int] = None
    date: date
    start_time: time
    end_time: time
    location_id: Optional[str] = None
    status: GameStatus = GameStatus.SCHEDULED
    locked: bool = False
    week_type: WeekType = WeekType.REGULAR
    published: bool = False

    def to_game(self) -> Game:
        return Game(**self.model_dump())


class ConflictCheckRequest(BaseModel):
    games: List[GamePayload]


class ViolationResponse(BaseModel):
    field: str
    code: str
    message: str


class ValidationResponse(BaseModel):
    is_valid: bool
    violations: List[ViolationResponse]

    @classmethod
    def from_result(cls, result: ValidationResult) -> "ValidationResponse":
        return cls(
            is_valid=result.is_valid,
            violations=[ViolationResponse(field=v.field, code=v.code, message=v.message) for v in result.violations],
        )


class SlotResponse(BaseModel):
    week_number: Optional[int]
    date: str
    day: str
    start_time: str
    end_time: str
    is_bye: bool
    week_type: str
    label: str

    @classmethod
    def from_slot(cls, slot: GameSlot) -> "SlotResponse":
        return cls(
            week_number=slot.week_number,
            date=slot.date.strftime("%Y-%m-%d"),
            day=slot.date.strftime("%A"),
            start_time=slot.start_time.strftime("%H:%M"),
            end_time=slot.end_time.strftime("%H:%M"),
            is_bye=slot.is_bye,
            week_type=slot.week_type.value,
            label=slot.label,
        )


class PreviewResponse(BaseModel):
    total_weeks: int
    slots: List[SlotResponse]


class LocationConflictResponse(BaseModel):
    location_id: str
    date: str
    first_game_id: str
    second_game_id: str
    first_division_id: Optional[str] = None
    second_division_id: Optional[str] = None
    overlap: str

    @classmethod
    def from_conflict(cls, conflict: LocationConflict) -> "LocationConflictResponse":
        return cls(
            location_id=conflict.location_id,
            date=conflict.date.isoformat(),
            first_game_id=conflict.first_game_id,
            second_game_id=conflict.second_game_id,
            first_division_id=conflict.first_division_id,
            second_division_id=conflict.second_division_id,
            overlap=f"{conflict.overlap_start:%H:%M} - {conflict.overlap_end:%H:%M}",
        )


class LockedWeekConflictResponse(BaseModel):
    game_id: str
    week_number: Optional[int]
    kind: str
    message: str

    @classmethod
    def from_conflict(cls, conflict: LockedWeekConflict) -> "LockedWeekConflictResponse":
        return cls(
            game_id=conflict.game_id,
            week_number=conflict.week_number,
            kind=conflict.kind.value,
            message=conflict.message,
        )


class ConflictCheckResponse(BaseModel):
    total_conflicts: int
    conflicts: List[LocationConflictResponse]


class RegenerationResponse(BaseModel):
    division_id: str
    created: int
    updated: int
    deleted: int
    conflicts: List[LocationConflictResponse]
    locked_conflicts: List[LockedWeekConflictResponse]

    @classmethod
    def from_result(cls, result: RegenerationResult) -> "RegenerationResponse":
        return cls(
            division_id=result.division_id,
            created=result.created,
            updated=result.updated,
            deleted=result.deleted,
            conflicts=[LocationConflictResponse.from_conflict(c) for c in result.conflicts],
            locked_conflicts=[LockedWeekConflictResponse.from_conflict(c) for c in result.locked_conflicts],
        )


class WeekSummaryResponse(BaseModel):
    week_number: int
    label: str
    date: str
    is_playoff: bool
    status: str
    game_count: int
    is_current: bool


class ProgressResponse(BaseModel):
    division_id: str
    total_weeks: int
    scheduled_weeks: int
    current_week: int
    percent_scheduled: float
    status: str
    weeks: List[WeekSummaryResponse]
