"""
Configuration constants for the League Season Schedule Engine.
All configurable settings are defined here.
"""

import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Timezone used when a city does not carry one
DEFAULT_TIMEZONE = os.getenv("LEAGUE_DEFAULT_TIMEZONE", "America/Los_Angeles")

# Season Length Rules
MAX_SEASON_WEEKS = 52         # Longest configurable season (playable weeks)
MAX_SCAN_WEEKS = 156          # Hard stop for calendar scanning (3 years of weeks)

# Week labels shown for playoff rounds
PLAYOFF_LABELS = {
    "QUARTERFINAL": "Quarterfinals",
    "SEMIFINAL": "Semifinals",
    "FINAL": "Finals",
}
BYE_LABEL = "Bye"

# Supabase (game store) Configuration
SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_KEY = os.getenv("SUPABASE_SERVICE_KEY", os.getenv("SUPABASE_ANON_KEY", ""))
GAMES_TABLE = os.getenv("LEAGUE_GAMES_TABLE", "games")
APPLY_BATCH_RPC = os.getenv("LEAGUE_APPLY_BATCH_RPC", "apply_schedule_batch")

# Redis connection URL (Celery broker/backend and cross-process division locks)
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")

# Regeneration of one division is serialized; wait this long for the lock
DIVISION_LOCK_TIMEOUT_SECONDS = float(os.getenv("DIVISION_LOCK_TIMEOUT_SECONDS", "10"))
DIVISION_LOCK_TTL_SECONDS = int(os.getenv("DIVISION_LOCK_TTL_SECONDS", "60"))
DIVISION_LOCK_PREFIX = "league_scheduler:division_lock:"

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# API
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]
