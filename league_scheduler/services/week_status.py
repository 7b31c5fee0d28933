"""
Week status and schedule progress for a division.

Summaries the admin overview shows next to each division: which weeks have
games, whether they are published or finished, and the current week.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, Iterable, List, Optional

from league_scheduler.models import Game, GameSlot, GameStatus
from league_scheduler.services import calendar


class WeekStatus(Enum):
    NOT_STARTED = "not-started"
    DRAFT = "draft"
    PUBLISHED = "published"
    COMPLETE = "complete"


class ScheduleStatus(Enum):
    NOT_STARTED = "not-started"
    IN_PROGRESS = "in-progress"
    COMPLETE = "complete"


@dataclass
class WeekSummary:
    week_number: int
    label: str
    date: date
    is_playoff: bool
    status: WeekStatus
    game_count: int = 0
    is_current: bool = False


@dataclass
class ScheduleProgress:
    total_weeks: int
    scheduled_weeks: int
    current_week: int
    status: ScheduleStatus
    weeks: List[WeekSummary] = field(default_factory=list)

    @property
    def percent_scheduled(self) -> float:
        if self.total_weeks == 0:
            return 0.0
        return round(100.0 * self.scheduled_weeks / self.total_weeks, 1)


def week_status(games: Iterable[Game]) -> WeekStatus:
    """Status of one week from its games; canceled games do not block completion."""
    games = list(games)
    if not games:
        return WeekStatus.NOT_STARTED
    active = [g for g in games if g.status != GameStatus.CANCELED]
    if active and all(g.status == GameStatus.PLAYED for g in active):
        return WeekStatus.COMPLETE
    if all(g.published for g in games):
        return WeekStatus.PUBLISHED
    return WeekStatus.DRAFT


def schedule_progress(slots: Iterable[GameSlot], games: Iterable[Game], today: Optional[date] = None) -> ScheduleProgress:
    """
    Summarize a division's schedule against its generated weeks.

    Args:
        slots: Generator output for the division's current configuration
        games: Persisted games for the division
        today: Date in the division's timezone (defaults to the machine date)
    """
    playable = [slot for slot in slots if not slot.is_bye]
    games_by_week: Dict[int, List[Game]] = defaultdict(list)
    for game in games:
        if game.week_number is not None:
            games_by_week[game.week_number].append(game)

    current = calendar.current_week([slot.date for slot in playable], today or date.today())
    weeks = []
    for slot in playable:
        week_games = games_by_week.get(slot.week_number, [])
        weeks.append(WeekSummary(
            week_number=slot.week_number,
            label=slot.label,
            date=slot.date,
            is_playoff=slot.week_type.is_playoff,
            status=week_status(week_games),
            game_count=len(week_games),
            is_current=slot.week_number == current,
        ))

    scheduled = sum(1 for week in weeks if week.game_count > 0)
    if scheduled == 0:
        status = ScheduleStatus.NOT_STARTED
    elif scheduled < len(weeks):
        status = ScheduleStatus.IN_PROGRESS
    else:
        status = ScheduleStatus.COMPLETE

    return ScheduleProgress(
        total_weeks=len(weeks),
        scheduled_weeks=scheduled,
        current_week=current,
        status=status,
        weeks=weeks,
    )
