"""
Season configuration validation for the League Season Schedule Engine.
Checks a season configuration for internal consistency before generation.
"""

from datetime import date, time, timedelta
from typing import Optional

from league_scheduler.models import (
    SeasonConfig, Weekday, ConfigViolation, ValidationResult
)
from league_scheduler.core.config import MAX_SEASON_WEEKS
from league_scheduler.core.errors import InvalidConfig
from league_scheduler.core.logging_config import get_logger
from league_scheduler.services import calendar

logger = get_logger(__name__)


class SeasonConfigValidator:
    """
    Validates a season configuration against every structural invariant.
    All violations are collected so the admin form can show them at once.
    """

    def validate(self, config: SeasonConfig) -> ValidationResult:
        """
        Validate a season configuration.

        Args:
            config: The configuration to check

        Returns:
            ValidationResult listing every violated invariant
        """
        result = ValidationResult(is_valid=True)

        self._check_weekday(config, result)
        self._check_time_range(config, result)
        self._check_date_bounds(config, result)
        self._check_week_count(config, result)
        self._check_blackouts(config, result)
        self._check_playoffs(config, result)
        self._check_timezone(config, result)
        self._check_playable_weeks(config, result)

        if not result.is_valid:
            logger.info(
                "Season config rejected with %d violation(s): %s",
                len(result.violations),
                ", ".join(v.code for v in result.violations),
            )
        return result

    def ensure_valid(self, config: SeasonConfig) -> ValidationResult:
        """Validate and raise InvalidConfig carrying every violation."""
        result = self.validate(config)
        if not result.is_valid:
            raise InvalidConfig.from_violations(result.violations)
        return result

    def _check_weekday(self, config: SeasonConfig, result: ValidationResult):
        if not isinstance(config.weekday, Weekday):
            result.add_violation(ConfigViolation(
                field="weekday",
                code="invalid_weekday",
                message=f"Weekday must be one of Monday..Sunday, got {config.weekday!r}",
            ))

    def _check_time_range(self, config: SeasonConfig, result: ValidationResult):
        start_ok = isinstance(config.start_time, time)
        end_ok = isinstance(config.end_time, time)
        if not start_ok:
            result.add_violation(ConfigViolation(
                field="start_time", code="missing_start_time",
                message="Start time is required",
            ))
        if not end_ok:
            result.add_violation(ConfigViolation(
                field="end_time", code="missing_end_time",
                message="End time is required",
            ))
        if start_ok and end_ok and not config.start_time < config.end_time:
            result.add_violation(ConfigViolation(
                field="end_time",
                code="time_range_inverted",
                message=f"Start time {config.start_time:%H:%M} must be before end time {config.end_time:%H:%M}",
            ))

    def _check_date_bounds(self, config: SeasonConfig, result: ValidationResult):
        if not isinstance(config.start_date, date):
            result.add_violation(ConfigViolation(
                field="start_date", code="missing_start_date",
                message="Start date is required",
            ))
        if config.end_date is None and config.week_count is None:
            result.add_violation(ConfigViolation(
                field="end_date",
                code="missing_season_length",
                message="Either an end date or a number of weeks is required",
            ))
        if (
            isinstance(config.start_date, date)
            and isinstance(config.end_date, date)
            and config.start_date > config.end_date
        ):
            result.add_violation(ConfigViolation(
                field="end_date",
                code="date_range_inverted",
                message=f"Start date {config.start_date} must be on or before end date {config.end_date}",
            ))

    def _check_week_count(self, config: SeasonConfig, result: ValidationResult):
        if config.week_count is None:
            return
        if isinstance(config.week_count, bool) or not isinstance(config.week_count, int):
            result.add_violation(ConfigViolation(
                field="week_count", code="invalid_week_count",
                message=f"Number of weeks must be a whole number, got {config.week_count!r}",
            ))
            return
        if not 1 <= config.week_count <= MAX_SEASON_WEEKS:
            result.add_violation(ConfigViolation(
                field="week_count",
                code="week_count_out_of_range",
                message=f"Number of weeks must be between 1 and {MAX_SEASON_WEEKS}, got {config.week_count}",
            ))

    def _check_blackouts(self, config: SeasonConfig, result: ValidationResult):
        well_formed = []
        for i, blackout in enumerate(config.blackouts):
            if blackout.start > blackout.end:
                result.add_violation(ConfigViolation(
                    field=f"blackouts[{i}]",
                    code="blackout_inverted",
                    message=f"Blackout {blackout.start}..{blackout.end} ends before it starts",
                ))
                continue
            well_formed.append((i, blackout))

            if isinstance(config.start_date, date) and blackout.start < config.start_date:
                result.add_violation(ConfigViolation(
                    field=f"blackouts[{i}]",
                    code="blackout_outside_season",
                    message=f"Blackout {blackout} starts before the season start {config.start_date}",
                ))
            elif isinstance(config.end_date, date) and blackout.end > config.end_date:
                result.add_violation(ConfigViolation(
                    field=f"blackouts[{i}]",
                    code="blackout_outside_season",
                    message=f"Blackout {blackout} ends after the season end {config.end_date}",
                ))

        for n, (i, first) in enumerate(well_formed):
            for j, second in well_formed[n + 1:]:
                if not first.overlaps(second):
                    continue
                result.add_violation(ConfigViolation(
                    field=f"blackouts[{max(i, j)}]",
                    code="blackout_overlap",
                    message=f"Blackouts {first} and {second} overlap",
                ))

    def _check_playoffs(self, config: SeasonConfig, result: ValidationResult):
        rounds = config.playoff_rounds()
        if not rounds:
            return
        season_weeks = self._playable_week_count(config)
        # An empty end-date window is reported by _check_playable_weeks
        if not season_weeks:
            return
        if len(rounds) >= season_weeks:
            result.add_violation(ConfigViolation(
                field="playoffs",
                code="no_regular_season",
                message=(
                    f"{len(rounds)} playoff round(s) need at least {len(rounds) + 1} weeks, "
                    f"season has {season_weeks}"
                ),
            ))

    def _check_timezone(self, config: SeasonConfig, result: ValidationResult):
        if not calendar.is_known_timezone(config.timezone):
            result.add_violation(ConfigViolation(
                field="timezone", code="unknown_timezone",
                message=f"Unknown timezone {config.timezone!r}",
            ))

    def _check_playable_weeks(self, config: SeasonConfig, result: ValidationResult):
        """An end-date-bound season must contain at least one non-blackout occurrence."""
        if not self._has_end_date_window(config):
            return
        if self._count_weeks_until_end(config, limit=1) > 0:
            return

        result.add_violation(ConfigViolation(
            field="end_date",
            code="no_playable_weeks",
            message=(
                f"No playable {config.weekday.value} between {config.start_date} "
                f"and {config.end_date} outside blackouts"
            ),
        ))

    def _playable_week_count(self, config: SeasonConfig) -> Optional[int]:
        """
        Number of playable weeks the generator would produce, or None when the
        season bounds are themselves invalid. The earlier bound wins.
        """
        week_count = config.week_count
        if isinstance(week_count, bool) or not isinstance(week_count, int) or week_count < 1:
            week_count = None
        if self._has_end_date_window(config):
            return self._count_weeks_until_end(config, limit=week_count)
        return week_count

    def _has_end_date_window(self, config: SeasonConfig) -> bool:
        return (
            isinstance(config.weekday, Weekday)
            and isinstance(config.start_date, date)
            and isinstance(config.end_date, date)
            and config.start_date <= config.end_date
        )

    def _count_weeks_until_end(self, config: SeasonConfig, limit: Optional[int] = None) -> int:
        playable = 0
        candidate = calendar.next_occurrence_of(config.weekday, config.start_date)
        while candidate <= config.end_date:
            if limit is not None and playable >= limit:
                break
            if not calendar.is_within_any_range(candidate, config.blackouts):
                playable += 1
            candidate += timedelta(days=calendar.DAYS_PER_WEEK)
        return playable


def validate(config: SeasonConfig) -> ValidationResult:
    """Module-level shortcut for SeasonConfigValidator().validate."""
    return SeasonConfigValidator().validate(config)
