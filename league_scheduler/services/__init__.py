"""
Services for season generation, validation, reconciliation and conflict detection.
"""

from .config_validator import SeasonConfigValidator
from .generator import ScheduleGenerator
from .reconciler import ScheduleReconciler
from .conflicts import ConflictDetector
from .game_store import GameStore, InMemoryGameStore, SupabaseGameStore
from .directories import LocationDirectory, TimezoneProvider
from .locks import DivisionLockRegistry, RedisDivisionLock
from .regeneration import ScheduleRegenerationService

__all__ = [
    "SeasonConfigValidator",
    "ScheduleGenerator",
    "ScheduleReconciler",
    "ConflictDetector",
    "GameStore",
    "InMemoryGameStore",
    "SupabaseGameStore",
    "LocationDirectory",
    "TimezoneProvider",
    "DivisionLockRegistry",
    "RedisDivisionLock",
    "ScheduleRegenerationService"
]
