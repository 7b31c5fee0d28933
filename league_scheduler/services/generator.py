"""
Season schedule generator.

Expands a season configuration into the ordered sequence of weekly game
slots for one division. The expansion is pure: identical configurations
always produce identical slot sequences, which is what lets the reconciler
treat a re-run as a no-op.
"""

from datetime import date, timedelta
from typing import List

from league_scheduler.models import SeasonConfig, GameSlot, WeekType
from league_scheduler.core.config import MAX_SCAN_WEEKS, PLAYOFF_LABELS, BYE_LABEL
from league_scheduler.core.logging_config import get_logger
from league_scheduler.services import calendar

logger = get_logger(__name__)


class ScheduleGenerator:
    """
    Generates weekly game slots for a division's season.

    Candidate dates are every `config.weekday` from the first occurrence on
    or after the start date. A candidate inside a blackout range is a bye and
    does not consume a week number; every other candidate becomes the next
    playable week. Generation stops when the end date is passed or when
    `week_count` playable weeks exist, whichever comes first.
    """

    def generate(self, config: SeasonConfig, include_byes: bool = False) -> List[GameSlot]:
        """
        Generate the ordered slot sequence for a season.

        Args:
            config: A validated season configuration
            include_byes: Also return bye markers (week_number=None) in calendar order

        Returns:
            GameSlots ordered by date; playable weeks are numbered 1..N
        """
        candidates = self._scan(config)
        playable_dates = [day for day, is_bye in candidates if not is_bye]
        week_types = self._week_types(config, len(playable_dates))

        slots = []
        week_number = 0
        for day, is_bye in candidates:
            if is_bye:
                if include_byes:
                    slots.append(GameSlot(
                        week_number=None,
                        date=day,
                        start_time=config.start_time,
                        end_time=config.end_time,
                        is_bye=True,
                        label=BYE_LABEL,
                    ))
                continue

            week_number += 1
            week_type = week_types[week_number - 1]
            slots.append(GameSlot(
                week_number=week_number,
                date=day,
                start_time=config.start_time,
                end_time=config.end_time,
                week_type=week_type,
                label=self._label(week_number, week_type),
            ))

        logger.debug(
            "Generated %d playable week(s) and %d bye(s) from %s",
            len(playable_dates), len(candidates) - len(playable_dates), config.start_date,
        )
        return slots

    def playable_dates(self, config: SeasonConfig) -> List[date]:
        """Dates of the playable weeks only, in week order."""
        return [day for day, is_bye in self._scan(config) if not is_bye]

    def _scan(self, config: SeasonConfig):
        """
        Walk the calendar and classify each candidate date.

        Returns a list of (date, is_bye) with trailing byes removed, so a
        bye on the terminal boundary never lengthens the season.
        """
        candidates = []
        playable = 0
        day = calendar.next_occurrence_of(config.weekday, config.start_date)

        for _ in range(MAX_SCAN_WEEKS):
            if config.end_date is not None and day > config.end_date:
                break
            if config.week_count is not None and playable >= config.week_count:
                break

            is_bye = calendar.is_within_any_range(day, config.blackouts)
            if not is_bye:
                playable += 1
            candidates.append((day, is_bye))
            day += timedelta(days=calendar.DAYS_PER_WEEK)
        else:
            logger.warning(
                "Stopped scanning after %d weeks from %s with %d playable week(s)",
                MAX_SCAN_WEEKS, config.start_date, playable,
            )

        while candidates and candidates[-1][1]:
            candidates.pop()
        return candidates

    def _week_types(self, config: SeasonConfig, playable_count: int) -> List[WeekType]:
        """Regular weeks first, then the configured playoff rounds on the final weeks."""
        rounds = config.playoff_rounds()
        if len(rounds) >= playable_count:
            # Not enough weeks for a regular season; keep everything regular
            return [WeekType.REGULAR] * playable_count
        return [WeekType.REGULAR] * (playable_count - len(rounds)) + rounds

    def _label(self, week_number: int, week_type: WeekType) -> str:
        if week_type.is_playoff:
            return PLAYOFF_LABELS[week_type.value]
        return f"Week {week_number}"


def generate(config: SeasonConfig, include_byes: bool = False) -> List[GameSlot]:
    """Module-level shortcut for ScheduleGenerator().generate."""
    return ScheduleGenerator().generate(config, include_byes=include_byes)
