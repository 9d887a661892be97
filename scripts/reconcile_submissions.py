#!/usr/bin/env python3
"""
CLI utility to re-emit events for submissions stuck in a non-terminal status.

Usage:
    uv run scripts/reconcile_submissions.py --older-than 600 --dry-run
"""

import argparse
import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.submissions.factory import get_producer, get_repository
from app.submissions.services.reconciliation import reconcile_stalled
from submission_core.logging import setup_logging


def main():
    parser = argparse.ArgumentParser(description="Re-emit events for stalled submissions")
    parser.add_argument(
        "--older-than",
        type=int,
        default=None,
        help="Minimum seconds since last status change (defaults to settings.RECONCILE_AFTER_SECONDS)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only report what would be re-emitted",
    )
    args = parser.parse_args()

    setup_logging()
    result = reconcile_stalled(
        get_repository(),
        get_producer(),
        older_than_seconds=args.older_than,
        dry_run=args.dry_run,
    )
    print(json.dumps(result, indent=2, default=str))


if __name__ == "__main__":
    main()
