"""
Run Celery worker for async schedule regeneration.
"""

import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from league_scheduler.core.celery_app import celery_app
from league_scheduler.core.config import LOG_LEVEL
from league_scheduler.core.logging_config import setup_logging

if __name__ == "__main__":
    setup_logging(LOG_LEVEL)
    print("=" * 60)
    print("League Season Schedule Engine - Celery Worker")
    print("=" * 60)
    print("Starting Celery worker...")
    print("Worker will process division regeneration tasks")
    print("=" * 60)

    celery_app.worker_main([
        "worker",
        f"--loglevel={LOG_LEVEL.lower()}",
        "--concurrency=2",
        "--pool=solo" if os.name == "nt" else "--pool=prefork"  # Use solo pool on Windows
    ])
