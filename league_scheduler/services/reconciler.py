"""
Schedule reconciliation.

Diffs a freshly generated slot sequence against the games already persisted
for the same division and produces a create/update/delete plan. Locked games
(played, scored or manually edited) are fixed points: they are never updated
or deleted, and any divergence is reported as a LockedWeekConflict instead.
"""

import uuid
from collections import defaultdict
from typing import Callable, Dict, Iterable, List, Optional

from league_scheduler.models import (
    Game, GameSlot, GameStatus, GameUpdate, LockedConflictKind,
    LockedWeekConflict, ReconciliationPlan
)
from league_scheduler.core.logging_config import get_logger

logger = get_logger(__name__)


def _new_game_id() -> str:
    return uuid.uuid4().hex


class ScheduleReconciler:
    """
    Merges generated slots into an existing schedule, keyed by week number.

    Regenerating an untouched division replaces every game; regenerating a
    division in progress only moves unlocked weeks. Running the plan and
    reconciling again against the same slots yields an empty plan.
    """

    def __init__(self, id_factory: Callable[[], str] = _new_game_id):
        self.id_factory = id_factory

    def reconcile(
        self,
        existing_games: Iterable[Game],
        new_slots: Iterable[GameSlot],
        division_id: Optional[str] = None,
        location_id: Optional[str] = None,
    ) -> ReconciliationPlan:
        """
        Build the reconciliation plan for one division.

        Args:
            existing_games: Games currently persisted for the division
            new_slots: Output of the generator (bye markers are ignored)
            division_id: Division for newly created games (defaults to the existing games' division)
            location_id: Location to assign; None leaves existing locations untouched

        Returns:
            ReconciliationPlan with creations, updates, deletions and locked-week warnings
        """
        existing_games = list(existing_games)
        slots_by_week = {
            slot.week_number: slot
            for slot in new_slots
            if not slot.is_bye and slot.week_number is not None
        }
        if division_id is None and existing_games:
            division_id = existing_games[0].division_id

        plan = ReconciliationPlan()
        games_by_week = self._group_by_week(existing_games, slots_by_week)

        for week_number in sorted(slots_by_week):
            slot = slots_by_week[week_number]
            week_games = games_by_week.pop(week_number, [])
            if not week_games:
                plan.to_create.append(self._create_game(slot, division_id, location_id))
                continue
            for game in week_games:
                if game.is_locked:
                    drift = self._locked_drift(game, slot)
                    if drift:
                        plan.locked_conflicts.append(drift)
                    continue
                changes = self._changes(game, slot, location_id)
                if changes:
                    plan.to_update.append(GameUpdate(game=game.copy(**changes), changes=changes))

        # Whatever is left has no generated week any more
        for week_number in sorted(games_by_week, key=lambda w: (w is None, w or 0)):
            for game in games_by_week[week_number]:
                if game.is_locked:
                    plan.locked_conflicts.append(LockedWeekConflict(
                        game_id=game.id,
                        week_number=game.week_number,
                        kind=LockedConflictKind.ORPHAN,
                        message=(
                            f"Locked game {game.id} in week {game.week_number} ({game.date}) "
                            f"no longer has a generated week; resolve manually"
                        ),
                    ))
                else:
                    plan.to_delete.append(game)

        logger.info("Reconciled division %s: %s", division_id, plan.get_summary())
        return plan

    def _group_by_week(
        self, games: List[Game], slots_by_week: Dict[int, GameSlot]
    ) -> Dict[Optional[int], List[Game]]:
        """Group games by week; legacy games without a week number are matched by date."""
        week_by_date = {slot.date: week for week, slot in slots_by_week.items()}
        grouped = defaultdict(list)
        for game in sorted(games, key=lambda g: (g.date, g.start_time, g.id)):
            week_number = game.week_number
            if week_number is None:
                week_number = week_by_date.get(game.date)
            grouped[week_number].append(game)
        return grouped

    def _create_game(self, slot: GameSlot, division_id: Optional[str], location_id: Optional[str]) -> Game:
        if division_id is None:
            raise ValueError("division_id is required to create games for a division with no existing games")
        return Game(
            id=self.id_factory(),
            division_id=division_id,
            week_number=slot.week_number,
            date=slot.date,
            start_time=slot.start_time,
            end_time=slot.end_time,
            location_id=location_id,
            status=GameStatus.SCHEDULED,
            locked=False,
            week_type=slot.week_type,
        )

    def _changes(self, game: Game, slot: GameSlot, location_id: Optional[str]) -> Dict[str, object]:
        target = {
            "week_number": slot.week_number,
            "date": slot.date,
            "start_time": slot.start_time,
            "end_time": slot.end_time,
            "week_type": slot.week_type,
        }
        if location_id is not None:
            target["location_id"] = location_id
        return {name: value for name, value in target.items() if getattr(game, name) != value}

    def _locked_drift(self, game: Game, slot: GameSlot) -> Optional[LockedWeekConflict]:
        if (game.date, game.start_time, game.end_time) == (slot.date, slot.start_time, slot.end_time):
            return None
        return LockedWeekConflict(
            game_id=game.id,
            week_number=slot.week_number,
            kind=LockedConflictKind.DRIFT,
            message=(
                f"Week {slot.week_number} is locked on {game.date} {game.start_time:%H:%M}-{game.end_time:%H:%M}; "
                f"regeneration computed {slot.date} {slot.start_time:%H:%M}-{slot.end_time:%H:%M}"
            ),
            expected_date=slot.date,
            expected_start_time=slot.start_time,
            expected_end_time=slot.end_time,
        )


def reconcile(existing_games, new_slots, division_id=None, location_id=None) -> ReconciliationPlan:
    """Module-level shortcut for ScheduleReconciler().reconcile."""
    return ScheduleReconciler().reconcile(
        existing_games, new_slots, division_id=division_id, location_id=location_id
    )


def apply_plan(existing_games: Iterable[Game], plan: ReconciliationPlan) -> List[Game]:
    """
    Project the game set that results from applying a plan.

    Used to run the cross-division conflict check before anything is written.
    """
    deleted = {game.id for game in plan.to_delete}
    updated = {update.game.id: update.game for update in plan.to_update}
    projected = [
        updated.get(game.id, game)
        for game in existing_games
        if game.id not in deleted
    ]
    projected.extend(plan.to_create)
    return projected
