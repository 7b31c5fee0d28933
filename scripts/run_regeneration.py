"""
Command line entry point for regenerating a division's schedule.
Reads a season configuration JSON file and either previews the season
or reconciles it against the game store.
"""

import sys
import json
import argparse
from datetime import datetime
import os

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pydantic import ValidationError

from league_scheduler.api.schemas import SeasonConfigPayload, SlotResponse
from league_scheduler.core.config import LOG_LEVEL
from league_scheduler.core.errors import InvalidConfig, ScheduleEngineError
from league_scheduler.core.logging_config import setup_logging
from league_scheduler.services.game_store import InMemoryGameStore
from league_scheduler.services.regeneration import ScheduleRegenerationService, build_service


def main():
    """
    Load the configuration, then preview or regenerate.
    Returns a process exit code.
    """
    parser = argparse.ArgumentParser(
        description='League Season Schedule Engine - Regenerate a division schedule'
    )
    parser.add_argument('config', help='Path to a season configuration JSON file')
    parser.add_argument('--division', help='Division ID to regenerate (required unless --preview)')
    parser.add_argument(
        '--preview',
        action='store_true',
        help='Only print the generated weeks; nothing is written'
    )
    parser.add_argument(
        '--include-byes',
        action='store_true',
        help='Show skipped weeks in the preview'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose output'
    )

    args = parser.parse_args()
    setup_logging("DEBUG" if args.verbose else LOG_LEVEL)

    if not args.preview and not args.division:
        parser.error("--division is required unless --preview is given")

    print("\n" + "=" * 80)
    print("LEAGUE SEASON SCHEDULE ENGINE")
    print("=" * 80)
    print(f"Started at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print("=" * 80)

    try:
        with open(args.config) as f:
            payload = SeasonConfigPayload.model_validate(json.load(f))
        config = payload.to_config()

        if args.preview:
            service = ScheduleRegenerationService(game_store=InMemoryGameStore())
            slots = service.preview(config, include_byes=args.include_byes)
            print(f"\n{'Week':<6}{'Label':<16}{'Date':<12}{'Day':<11}Time")
            for slot in slots:
                row = SlotResponse.from_slot(slot)
                week = row.week_number if row.week_number is not None else "-"
                print(f"{week:<6}{row.label:<16}{row.date:<12}{row.day:<11}{row.start_time} - {row.end_time}")
            print(f"\nPlayable weeks: {sum(1 for s in slots if not s.is_bye)}")
            return 0

        service = build_service(shared=True)
        result = service.regenerate_schedule(args.division, config)

        print("\n" + "=" * 80)
        print("REGENERATION COMPLETE")
        print("=" * 80)
        print(f"Division: {result.division_id}")
        print(f"Created: {result.created}  Updated: {result.updated}  Deleted: {result.deleted}")
        if result.locked_conflicts:
            print(f"\nLocked week warnings ({len(result.locked_conflicts)}):")
            for warning in result.locked_conflicts:
                print(f"  - {warning.message}")
        if result.conflicts:
            print(f"\nLocation conflicts ({len(result.conflicts)}):")
            for conflict in result.conflicts:
                print(f"  - {conflict}")
        print(f"Completed at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        print("=" * 80)
        return 0

    except InvalidConfig as e:
        print("\nERROR: Invalid season configuration:")
        for violation in e.violations:
            print(f"  - [{violation.field}] {violation.message}")
        return 2

    except (ValidationError, OSError, json.JSONDecodeError) as e:
        print(f"\nERROR: Could not read configuration: {e}")
        return 2

    except ScheduleEngineError as e:
        print(f"\nERROR: {e}")
        return 1

    except KeyboardInterrupt:
        print("\n\nRegeneration interrupted by user.")
        return 1


if __name__ == '__main__':
    sys.exit(main())
