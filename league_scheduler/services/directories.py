"""
Location and timezone collaborators.

Both are thin lookups the admin portal fills from its own records; the
engine only reads them.
"""

from typing import Dict, Optional

from league_scheduler.models import Game
from league_scheduler.core.config import DEFAULT_TIMEZONE
from league_scheduler.services import calendar


class LocationDirectory:
    """
    Resolves the location a game is played at.

    A game's own location wins; games stored without one fall back to the
    home location of their division.
    """

    def __init__(self, division_locations: Optional[Dict[str, str]] = None):
        self.division_locations = dict(division_locations or {})

    def register_division(self, division_id: str, location_id: str):
        self.division_locations[division_id] = location_id

    def location_of(self, game: Game) -> Optional[str]:
        if game.location_id is not None:
            return game.location_id
        return self.division_locations.get(game.division_id)

    __call__ = location_of


class TimezoneProvider:
    """Maps city ids to the IANA timezone used to interpret their season dates."""

    def __init__(self, city_timezones: Optional[Dict[str, str]] = None, default: str = DEFAULT_TIMEZONE):
        self.city_timezones = dict(city_timezones or {})
        self.default = default

    def timezone_for(self, city_id: Optional[str]) -> str:
        name = self.city_timezones.get(city_id, self.default) if city_id else self.default
        calendar.resolve_timezone(name)
        return name
