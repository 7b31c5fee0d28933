"""
Tests for the division regeneration service against an in-memory game store.
"""

import sys
import os
import threading
from datetime import date, time

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from league_scheduler.models import DateRange, Game, GameStatus, SeasonConfig, Weekday
from league_scheduler.core.errors import (
    InvalidConfig, PersistenceFailure, RegenerationInProgress
)
from league_scheduler.services.game_store import GameStore, InMemoryGameStore
from league_scheduler.services.locks import DivisionLockRegistry
from league_scheduler.services.regeneration import ScheduleRegenerationService


def make_config(**overrides):
    values = dict(
        weekday=Weekday.TUESDAY,
        start_time=time(18, 0),
        end_time=time(20, 0),
        start_date=date(2024, 1, 2),
        week_count=10,
        blackouts=[DateRange(date(2024, 2, 13), date(2024, 2, 13))],
        location_id="gym-1",
    )
    values.update(overrides)
    return SeasonConfig(**values)


class FailingStore(InMemoryGameStore):
    """Reads work, every batch write is rejected."""

    def apply_batch(self, create, update, delete):
        raise ConnectionError("database unavailable")


def test_in_memory_store_satisfies_protocol():
    assert isinstance(InMemoryGameStore(), GameStore)


def test_first_regeneration_creates_full_season():
    store = InMemoryGameStore()
    service = ScheduleRegenerationService(game_store=store)

    result = service.regenerate_schedule("div-1", make_config())

    assert (result.created, result.updated, result.deleted) == (10, 0, 0)
    assert result.conflicts == []
    assert result.locked_conflicts == []
    games = store.list_games_for_division("div-1")
    assert [g.week_number for g in games] == list(range(1, 11))
    assert games[-1].date == date(2024, 3, 5)
    assert all(g.location_id == "gym-1" for g in games)


def test_regenerating_twice_is_a_noop():
    store = InMemoryGameStore()
    service = ScheduleRegenerationService(game_store=store)
    service.regenerate_schedule("div-1", make_config())
    before = store.all_games()

    result = service.regenerate_schedule("div-1", make_config())

    assert (result.created, result.updated, result.deleted) == (0, 0, 0)
    assert store.all_games() == before


def test_locked_game_survives_regeneration():
    store = InMemoryGameStore()
    service = ScheduleRegenerationService(game_store=store)
    service.regenerate_schedule("div-1", make_config())

    week_four = store.list_games_for_division("div-1")[3]
    store.apply_batch([], [week_four.copy(locked=True)], [])

    result = service.regenerate_schedule(
        "div-1", make_config(weekday=Weekday.WEDNESDAY, start_date=date(2024, 1, 3),
                             blackouts=[DateRange(date(2024, 2, 14), date(2024, 2, 14))])
    )

    assert result.updated == 9
    assert len(result.locked_conflicts) == 1
    stored = {g.id: g for g in store.list_games_for_division("div-1")}
    assert stored[week_four.id].date == date(2024, 1, 23)
    assert stored[week_four.id].locked


def test_invalid_config_touches_nothing():
    store = InMemoryGameStore()
    service = ScheduleRegenerationService(game_store=store)

    with pytest.raises(InvalidConfig) as excinfo:
        service.regenerate_schedule("div-1", make_config(start_time=time(21, 0)))

    assert [v.code for v in excinfo.value.violations] == ["time_range_inverted"]
    assert store.all_games() == []


def test_failed_batch_raises_persistence_failure_and_applies_nothing():
    store = FailingStore()
    service = ScheduleRegenerationService(game_store=store)

    with pytest.raises(PersistenceFailure) as excinfo:
        service.regenerate_schedule("div-1", make_config())

    assert excinfo.value.division_id == "div-1"
    assert store.all_games() == []


def test_in_memory_batch_is_all_or_nothing():
    existing = Game("g1", "div-1", 1, date(2024, 1, 2), time(18), time(20))
    store = InMemoryGameStore([existing])
    new_game = Game("g2", "div-1", 2, date(2024, 1, 9), time(18), time(20))
    missing = Game("nope", "div-1", 3, date(2024, 1, 16), time(18), time(20))

    with pytest.raises(KeyError):
        store.apply_batch([new_game], [], [missing])

    assert [g.id for g in store.all_games()] == ["g1"]


def test_cross_division_conflicts_reported():
    store = InMemoryGameStore([
        Game("other-1", "div-2", 1, date(2024, 1, 9), time(19, 0), time(21, 0), location_id="gym-1"),
        Game("other-2", "div-2", 2, date(2024, 1, 16), time(20, 0), time(21, 0), location_id="gym-1"),
        Game("elsewhere", "div-3", 1, date(2024, 1, 9), time(18, 0), time(20, 0), location_id="gym-9"),
    ])
    service = ScheduleRegenerationService(game_store=store)

    result = service.regenerate_schedule("div-1", make_config())

    assert result.created == 10
    assert len(result.conflicts) == 1
    conflict = result.conflicts[0]
    assert conflict.date == date(2024, 1, 9)
    assert "other-1" in conflict.pair
    assert {conflict.first_division_id, conflict.second_division_id} == {"div-1", "div-2"}


def test_conflicts_between_other_divisions_are_not_reported():
    store = InMemoryGameStore([
        Game("x", "div-2", 1, date(2024, 5, 1), time(18, 0), time(20, 0), location_id="gym-1"),
        Game("y", "div-3", 1, date(2024, 5, 1), time(18, 0), time(20, 0), location_id="gym-1"),
    ])
    result = ScheduleRegenerationService(game_store=store).regenerate_schedule("div-1", make_config())
    assert result.conflicts == []


def test_concurrent_regeneration_of_same_division_times_out():
    locks = DivisionLockRegistry(timeout_s=0.05)
    service = ScheduleRegenerationService(game_store=InMemoryGameStore(), locks=locks)
    held = threading.Event()
    release = threading.Event()

    def hold_lock():
        with locks.hold("div-1"):
            held.set()
            release.wait(5)

    holder = threading.Thread(target=hold_lock)
    holder.start()
    try:
        assert held.wait(5)
        with pytest.raises(RegenerationInProgress):
            service.regenerate_schedule("div-1", make_config())
        # Other divisions are not blocked
        assert service.regenerate_schedule("div-2", make_config()).created == 10
    finally:
        release.set()
        holder.join()


def test_preview_includes_byes_without_writing():
    store = InMemoryGameStore()
    slots = ScheduleRegenerationService(game_store=store).preview(make_config(), include_byes=True)
    assert len(slots) == 11
    assert sum(1 for s in slots if s.is_bye) == 1
    assert store.all_games() == []


def test_progress_reads_stored_games():
    store = InMemoryGameStore()
    service = ScheduleRegenerationService(game_store=store)
    service.regenerate_schedule("div-1", make_config(week_count=4, blackouts=[]))
    first = store.list_games_for_division("div-1")[0]
    store.apply_batch([], [first.copy(status=GameStatus.PLAYED)], [])

    progress = service.progress("div-1", make_config(week_count=4, blackouts=[]), today=date(2024, 1, 10))

    assert progress.scheduled_weeks == 4
    assert progress.current_week == 2
    assert progress.weeks[0].status.value == "complete"
