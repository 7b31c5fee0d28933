"""
Tests for season configuration validation.
"""

import sys
import os
from datetime import date, time

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from league_scheduler.models import DateRange, PlayoffStructure, SeasonConfig, Weekday
from league_scheduler.core.errors import INVALID_CONFIG, InvalidConfig
from league_scheduler.services.config_validator import SeasonConfigValidator, validate


def make_config(**overrides):
    values = dict(
        weekday=Weekday.TUESDAY,
        start_time=time(18, 0),
        end_time=time(20, 0),
        start_date=date(2024, 1, 2),
        week_count=10,
    )
    values.update(overrides)
    return SeasonConfig(**values)


def codes(result):
    return [v.code for v in result.violations]


def test_valid_config_passes():
    result = validate(make_config())
    assert result.is_valid
    assert result.violations == []


def test_end_date_only_config_passes():
    assert validate(make_config(week_count=None, end_date=date(2024, 3, 31))).is_valid


def test_start_time_must_precede_end_time():
    result = validate(make_config(start_time=time(20, 0), end_time=time(18, 0)))
    assert not result.is_valid
    assert codes(result) == ["time_range_inverted"]

    assert "time_range_inverted" in codes(validate(make_config(end_time=time(18, 0))))


def test_missing_times_are_reported():
    result = validate(make_config(start_time=None, end_time=None))
    assert "missing_start_time" in codes(result)
    assert "missing_end_time" in codes(result)


def test_invalid_weekday():
    assert "invalid_weekday" in codes(validate(make_config(weekday="Funday")))


def test_season_needs_end_date_or_week_count():
    assert codes(validate(make_config(week_count=None))) == ["missing_season_length"]


def test_start_date_after_end_date():
    result = validate(make_config(week_count=None, end_date=date(2023, 12, 1)))
    assert "date_range_inverted" in codes(result)


def test_week_count_bounds():
    assert "week_count_out_of_range" in codes(validate(make_config(week_count=0)))
    assert "week_count_out_of_range" in codes(validate(make_config(week_count=53)))
    assert "invalid_week_count" in codes(validate(make_config(week_count=2.5)))
    assert validate(make_config(week_count=52)).is_valid


def test_inverted_blackout():
    blackouts = [DateRange(date(2024, 2, 20), date(2024, 2, 13))]
    assert "blackout_inverted" in codes(validate(make_config(blackouts=blackouts)))


def test_blackout_outside_season():
    before = [DateRange(date(2023, 12, 20), date(2024, 1, 3))]
    assert "blackout_outside_season" in codes(validate(make_config(blackouts=before)))

    after = [DateRange(date(2024, 3, 20), date(2024, 4, 3))]
    config = make_config(week_count=None, end_date=date(2024, 3, 31), blackouts=after)
    assert "blackout_outside_season" in codes(validate(config))


def test_overlapping_blackouts_are_rejected():
    blackouts = [
        DateRange(date(2024, 2, 1), date(2024, 2, 20)),
        DateRange(date(2024, 3, 1), date(2024, 3, 2)),
        DateRange(date(2024, 2, 10), date(2024, 2, 11)),
    ]
    result = validate(make_config(blackouts=blackouts))
    assert codes(result) == ["blackout_overlap"]
    assert result.violations[0].field == "blackouts[2]"


def test_playoffs_need_a_regular_season():
    result = validate(make_config(week_count=3, playoffs=PlayoffStructure()))
    assert codes(result) == ["no_regular_season"]
    assert validate(make_config(week_count=4, playoffs=PlayoffStructure())).is_valid


def test_playoffs_need_a_regular_season_in_end_date_season():
    config = make_config(week_count=None, end_date=date(2024, 1, 9), playoffs=PlayoffStructure())
    assert codes(validate(config)) == ["no_regular_season"]

    longer = make_config(week_count=None, end_date=date(2024, 1, 23), playoffs=PlayoffStructure())
    assert validate(longer).is_valid


def test_playoff_check_uses_earlier_bound_and_skips_blackouts():
    # Week count allows a regular season but the end date leaves three playable weeks
    config = make_config(
        week_count=10,
        end_date=date(2024, 1, 23),
        blackouts=[DateRange(date(2024, 1, 9), date(2024, 1, 9))],
        playoffs=PlayoffStructure(),
    )
    assert codes(validate(config)) == ["no_regular_season"]


def test_region_name_is_not_a_timezone():
    result = validate(make_config(timezone="America"))
    assert codes(result) == ["unknown_timezone"]


def test_unknown_timezone():
    assert "unknown_timezone" in codes(validate(make_config(timezone="Nowhere/Special")))


def test_end_date_window_fully_blacked_out():
    config = make_config(
        week_count=None,
        end_date=date(2024, 1, 14),
        blackouts=[DateRange(date(2024, 1, 2), date(2024, 1, 10))],
    )
    assert codes(validate(config)) == ["no_playable_weeks"]


def test_all_violations_collected_at_once():
    config = make_config(
        start_time=time(21, 0),
        week_count=0,
        timezone="Nowhere/Special",
    )
    assert set(codes(validate(config))) == {
        "time_range_inverted", "week_count_out_of_range", "unknown_timezone"
    }


def test_ensure_valid_raises_with_every_violation():
    validator = SeasonConfigValidator()
    with pytest.raises(InvalidConfig) as excinfo:
        validator.ensure_valid(make_config(start_time=time(21, 0), week_count=0))
    assert excinfo.value.code == INVALID_CONFIG
    assert len(excinfo.value.violations) == 2


def test_get_summary_lists_violations():
    result = validate(make_config(week_count=0))
    summary = result.get_summary()
    assert "Config Valid: False" in summary
    assert "week_count" in summary
