#!/usr/bin/env python3
"""
CLI utility to create the submissions table and its indexes.

Safe to run repeatedly.

Usage:
    uv run scripts/init_db.py
"""

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from submission_core.infrastructure.postgres import init_schema
from submission_core.logging import setup_logging


def main():
    setup_logging()
    init_schema()


if __name__ == "__main__":
    main()
