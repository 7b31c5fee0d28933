"""
Location conflict detection.

Reports double-booked locations across divisions: two games conflict when
they share a location and their time ranges overlap on the same calendar
date. Conflicts are reported, never resolved.
"""

from collections import defaultdict
from typing import Callable, Iterable, List, Optional

from league_scheduler.models import Game, GameStatus, LocationConflict
from league_scheduler.core.logging_config import get_logger
from league_scheduler.services.calendar import time_ranges_overlap

logger = get_logger(__name__)


def default_location_of(game: Game) -> Optional[str]:
    return game.location_id


class ConflictDetector:
    """
    Detects location/time overlaps in a set of games.

    Each conflicting pair is reported once with the two game ids in
    ascending order, so the result does not depend on input order.
    Canceled games and games without a location are ignored.
    """

    def detect_conflicts(
        self,
        games: Iterable[Game],
        location_of: Callable[[Game], Optional[str]] = default_location_of,
    ) -> List[LocationConflict]:
        """
        Find every pair of games double-booking a location.

        Args:
            games: Games from any number of divisions
            location_of: Resolves a game's location id (None skips the game)

        Returns:
            LocationConflicts sorted by location, date, start time and game ids
        """
        groups = defaultdict(dict)
        for game in games:
            if game.status == GameStatus.CANCELED:
                continue
            location_id = location_of(game)
            if location_id is None:
                continue
            # The same game can show up twice when callers merge store reads
            groups[(location_id, game.date)][game.id] = game

        conflicts = []
        for (location_id, day), by_id in groups.items():
            day_games = sorted(by_id.values(), key=lambda g: (g.start_time, g.end_time, g.id))
            for i, first in enumerate(day_games):
                for second in day_games[i + 1:]:
                    # Sorted by start: nothing later can overlap once a start passes our end
                    if second.start_time >= first.end_time:
                        break
                    if not time_ranges_overlap(first.start_time, first.end_time,
                                               second.start_time, second.end_time):
                        continue
                    conflicts.append(self._conflict(location_id, day, first, second))

        conflicts.sort(key=lambda c: (c.location_id, c.date, c.overlap_start, c.first_game_id, c.second_game_id))
        if conflicts:
            logger.info("Detected %d location conflict(s)", len(conflicts))
        return conflicts

    def _conflict(self, location_id: str, day, a: Game, b: Game) -> LocationConflict:
        first, second = (a, b) if a.id <= b.id else (b, a)
        return LocationConflict(
            location_id=location_id,
            date=day,
            first_game_id=first.id,
            second_game_id=second.id,
            first_division_id=first.division_id,
            second_division_id=second.division_id,
            overlap_start=max(a.start_time, b.start_time),
            overlap_end=min(a.end_time, b.end_time),
        )


def detect_conflicts(games, location_of=default_location_of) -> List[LocationConflict]:
    """Module-level shortcut for ConflictDetector().detect_conflicts."""
    return ConflictDetector().detect_conflicts(games, location_of)
