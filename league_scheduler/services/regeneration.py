"""
Schedule regeneration for a division.

Wires the pure pieces together around the external collaborators:

    config -> validator -> generator -> reconciler (vs. stored games)
           -> conflict detector (same location, all divisions)
           -> one atomic batch written to the game store
"""

from datetime import date
from typing import List, Optional

from league_scheduler.models import (
    Game, GameSlot, LocationConflict, RegenerationResult, SeasonConfig
)
from league_scheduler.core.config import SUPABASE_KEY, SUPABASE_URL
from league_scheduler.core.errors import PersistenceFailure, ScheduleEngineError
from league_scheduler.core.logging_config import get_logger
from league_scheduler.services import calendar
from league_scheduler.services.config_validator import SeasonConfigValidator
from league_scheduler.services.conflicts import ConflictDetector
from league_scheduler.services.directories import LocationDirectory
from league_scheduler.services.game_store import GameStore, InMemoryGameStore, SupabaseGameStore
from league_scheduler.services.generator import ScheduleGenerator
from league_scheduler.services.locks import DivisionLockRegistry, RedisDivisionLock
from league_scheduler.services.reconciler import ScheduleReconciler, apply_plan
from league_scheduler.services.week_status import ScheduleProgress, schedule_progress

logger = get_logger(__name__)


class ScheduleRegenerationService:
    """
    Regenerates a division's schedule against the persisted games.

    The service holds no request or session state: it takes plain
    configuration plus collaborator objects, so it runs the same from an
    API handler, a Celery task or a test.
    """

    def __init__(
        self,
        game_store: GameStore,
        location_directory: Optional[LocationDirectory] = None,
        locks=None,
        validator: Optional[SeasonConfigValidator] = None,
        generator: Optional[ScheduleGenerator] = None,
        reconciler: Optional[ScheduleReconciler] = None,
        conflict_detector: Optional[ConflictDetector] = None,
    ):
        self.game_store = game_store
        self.location_directory = location_directory or LocationDirectory()
        self.locks = locks or DivisionLockRegistry()
        self.validator = validator or SeasonConfigValidator()
        self.generator = generator or ScheduleGenerator()
        self.reconciler = reconciler or ScheduleReconciler()
        self.conflict_detector = conflict_detector or ConflictDetector()

    def regenerate_schedule(self, division_id: str, config: SeasonConfig) -> RegenerationResult:
        """
        Regenerate and persist a division's schedule.

        Args:
            division_id: Division whose games are reconciled
            config: The division's season configuration

        Returns:
            RegenerationResult with counts and every non-fatal warning

        Raises:
            InvalidConfig: the configuration failed validation; nothing was generated
            RegenerationInProgress: another regeneration holds this division's lock
            PersistenceFailure: the batch was rejected; nothing was applied
        """
        self.validator.ensure_valid(config)
        slots = self.generator.generate(config)
        if config.location_id is not None:
            self.location_directory.register_division(division_id, config.location_id)

        logger.info(
            "Regenerating division %s: %d week(s) starting %s",
            division_id, len(slots), slots[0].date if slots else config.start_date,
        )

        with self.locks.hold(division_id):
            existing = self.game_store.list_games_for_division(division_id)
            plan = self.reconciler.reconcile(
                existing, slots, division_id=division_id, location_id=config.location_id
            )
            projected = apply_plan(existing, plan)
            conflicts = self._location_conflicts(division_id, projected)

            if not plan.is_noop:
                try:
                    self.game_store.apply_batch(
                        plan.to_create,
                        [update.game for update in plan.to_update],
                        plan.to_delete,
                    )
                except ScheduleEngineError:
                    raise
                except Exception as e:
                    logger.error("Batch apply failed for division %s: %s", division_id, e)
                    raise PersistenceFailure.for_division(division_id, e) from e

        for warning in plan.locked_conflicts:
            logger.warning("Division %s: %s", division_id, warning.message)
        for conflict in conflicts:
            logger.warning("Division %s: %s", division_id, conflict)

        return RegenerationResult(
            division_id=division_id,
            created=len(plan.to_create),
            updated=len(plan.to_update),
            deleted=len(plan.to_delete),
            conflicts=conflicts,
            locked_conflicts=list(plan.locked_conflicts),
        )

    def preview(self, config: SeasonConfig, include_byes: bool = False) -> List[GameSlot]:
        """Validate and generate without touching the store."""
        self.validator.ensure_valid(config)
        return self.generator.generate(config, include_byes=include_byes)

    def progress(self, division_id: str, config: SeasonConfig, today: Optional[date] = None) -> ScheduleProgress:
        """Week-by-week status of a division's schedule, evaluated in the division's timezone."""
        self.validator.ensure_valid(config)
        slots = self.generator.generate(config)
        games = self.game_store.list_games_for_division(division_id)
        return schedule_progress(slots, games, today or calendar.today_in(config.timezone))

    def _location_conflicts(self, division_id: str, projected: List[Game]) -> List[LocationConflict]:
        """Conflicts between this division's projected games and anything sharing their locations."""
        own_ids = {game.id for game in projected}
        location_ids = sorted({
            location_id
            for location_id in (self.location_directory.location_of(g) for g in projected)
            if location_id is not None
        })

        others = []
        for location_id in location_ids:
            for game in self.game_store.list_games_for_location(location_id):
                # Stored rows of this division are superseded by the projection
                if game.division_id != division_id:
                    others.append(game)

        conflicts = self.conflict_detector.detect_conflicts(
            projected + others, self.location_directory.location_of
        )
        return [
            conflict for conflict in conflicts
            if conflict.first_game_id in own_ids or conflict.second_game_id in own_ids
        ]


def build_service(shared: Optional[bool] = None) -> ScheduleRegenerationService:
    """
    Regeneration service wired for the current deployment.

    A shared store (Supabase) is written by API processes, workers and the
    CLI alike, so its division locks live in Redis where they all see them.
    Without Supabase credentials the store and its locks are process-local.
    """
    if shared is None:
        shared = bool(SUPABASE_URL and SUPABASE_KEY)
    if shared:
        return ScheduleRegenerationService(game_store=SupabaseGameStore(), locks=RedisDivisionLock())
    logger.warning("Supabase not configured; using an in-memory game store")
    return ScheduleRegenerationService(game_store=InMemoryGameStore(), locks=DivisionLockRegistry())
