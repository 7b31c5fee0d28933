"""
Game store collaborators.

The engine only needs to list a division's games, list the games sharing a
location, and apply a create/update/delete batch atomically. Two stores are
provided: an in-memory store for tests and batch jobs, and a Supabase store
that applies each batch through a single Postgres function call.
"""

import threading
from copy import deepcopy
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Dict, List, Optional, Protocol, Sequence, runtime_checkable

from supabase import create_client, Client

from league_scheduler.models import Game, GameStatus, WeekType
from league_scheduler.core.config import (
    SUPABASE_URL, SUPABASE_KEY, GAMES_TABLE, APPLY_BATCH_RPC
)
from league_scheduler.core.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class BatchResult:
    created: int = 0
    updated: int = 0
    deleted: int = 0


@runtime_checkable
class GameStore(Protocol):
    def list_games_for_division(self, division_id: str) -> List[Game]:
        ...

    def list_games_for_location(self, location_id: str) -> List[Game]:
        ...

    def apply_batch(self, create: Sequence[Game], update: Sequence[Game], delete: Sequence[Game]) -> BatchResult:
        """Apply all three sets or none of them."""
        ...


class InMemoryGameStore:
    """
    Process-local game store.

    Batches are applied to a copy of the table and swapped in only when every
    operation succeeded, so a failing batch leaves the store untouched.
    """

    def __init__(self, games: Optional[Sequence[Game]] = None):
        self._games: Dict[str, Game] = {}
        self._lock = threading.Lock()
        for game in games or []:
            self._games[game.id] = deepcopy(game)

    def list_games_for_division(self, division_id: str) -> List[Game]:
        with self._lock:
            games = [g for g in self._games.values() if g.division_id == division_id]
        return [deepcopy(g) for g in sorted(games, key=_game_sort_key)]

    def list_games_for_location(self, location_id: str) -> List[Game]:
        with self._lock:
            games = [g for g in self._games.values() if g.location_id == location_id]
        return [deepcopy(g) for g in sorted(games, key=_game_sort_key)]

    def all_games(self) -> List[Game]:
        with self._lock:
            return [deepcopy(g) for g in sorted(self._games.values(), key=_game_sort_key)]

    def apply_batch(self, create: Sequence[Game], update: Sequence[Game], delete: Sequence[Game]) -> BatchResult:
        with self._lock:
            staged = dict(self._games)
            for game in create:
                if game.id in staged:
                    raise KeyError(f"Game {game.id} already exists")
                staged[game.id] = deepcopy(game)
            for game in update:
                if game.id not in staged:
                    raise KeyError(f"Game {game.id} does not exist")
                staged[game.id] = deepcopy(game)
            for game in delete:
                if game.id not in staged:
                    raise KeyError(f"Game {game.id} does not exist")
                del staged[game.id]
            self._games = staged
        return BatchResult(created=len(create), updated=len(update), deleted=len(delete))


def _game_sort_key(game: Game):
    return (game.division_id, game.week_number is None, game.week_number or 0, game.date, game.start_time, game.id)


class SupabaseGameStore:
    """
    Game store backed by the Supabase `games` table.

    Reads go through the table API. Writes go through one RPC
    (`apply_schedule_batch`, see sql/apply_schedule_batch.sql) because the
    Postgres function body runs in a single transaction.
    """

    def __init__(self, client: Optional[Client] = None):
        if client is None:
            if not SUPABASE_URL or not SUPABASE_KEY:
                raise ValueError(
                    "Supabase credentials not found. Please set SUPABASE_URL and "
                    "SUPABASE_SERVICE_KEY (or SUPABASE_ANON_KEY)"
                )
            client = create_client(SUPABASE_URL, SUPABASE_KEY)
        self.client = client

    def list_games_for_division(self, division_id: str) -> List[Game]:
        response = (
            self.client.table(GAMES_TABLE)
            .select("*")
            .eq("division_id", division_id)
            .order("week_number")
            .execute()
        )
        return [game_from_row(row) for row in response.data]

    def list_games_for_location(self, location_id: str) -> List[Game]:
        response = (
            self.client.table(GAMES_TABLE)
            .select("*")
            .eq("location_id", location_id)
            .execute()
        )
        return [game_from_row(row) for row in response.data]

    def apply_batch(self, create: Sequence[Game], update: Sequence[Game], delete: Sequence[Game]) -> BatchResult:
        payload = {
            "p_create": [game_to_row(g) for g in create],
            "p_update": [game_to_row(g) for g in update],
            "p_delete": [g.id for g in delete],
        }
        response = self.client.rpc(APPLY_BATCH_RPC, payload).execute()
        counts = response.data or {}
        logger.debug("Supabase batch applied: %s", counts)
        return BatchResult(
            created=counts.get("created", len(create)),
            updated=counts.get("updated", len(update)),
            deleted=counts.get("deleted", len(delete)),
        )


def _parse_date(value) -> Optional[date]:
    if value is None or isinstance(value, date):
        return value
    return datetime.strptime(value[:10], "%Y-%m-%d").date()


def _parse_time(value) -> Optional[time]:
    if value is None or isinstance(value, time):
        return value
    for fmt in ("%H:%M:%S", "%H:%M"):
        try:
            return datetime.strptime(value, fmt).time()
        except ValueError:
            continue
    raise ValueError(f"Could not parse time: {value!r}")


def game_from_row(row: dict) -> Game:
    return Game(
        id=str(row["id"]),
        division_id=str(row["division_id"]),
        week_number=row.get("week_number"),
        date=_parse_date(row["date"]),
        start_time=_parse_time(row["start_time"]),
        end_time=_parse_time(row["end_time"]),
        location_id=str(row["location_id"]) if row.get("location_id") is not None else None,
        status=GameStatus(row.get("status") or GameStatus.SCHEDULED.value),
        locked=bool(row.get("locked", False)),
        week_type=WeekType(row.get("week_type") or WeekType.REGULAR.value),
        published=bool(row.get("published", False)),
    )


def game_to_row(game: Game) -> dict:
    return {
        "id": game.id,
        "division_id": game.division_id,
        "week_number": game.week_number,
        "date": game.date.isoformat(),
        "start_time": game.start_time.strftime("%H:%M:%S"),
        "end_time": game.end_time.strftime("%H:%M:%S"),
        "location_id": game.location_id,
        "status": game.status.value,
        "locked": game.locked,
        "week_type": game.week_type.value,
        "published": game.published,
    }
