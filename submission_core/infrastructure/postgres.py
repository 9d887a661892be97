"""
PostgreSQL connection helper for submission-disk.

This module provides a simple connection function for PostgreSQL access
and the idempotent schema bootstrap for the submissions table.
Uses psycopg for the connection.
"""

import psycopg
from loguru import logger

from submission_core.config import settings

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS submissions (
    id                  BIGSERIAL PRIMARY KEY,
    file_name           TEXT NOT NULL,
    original_file_name  TEXT NOT NULL,
    file_size           BIGINT NOT NULL CHECK (file_size >= 0),
    content_type        TEXT NOT NULL,
    storage_path        TEXT NOT NULL,
    description         TEXT,
    submitted_by        TEXT,
    status              VARCHAR(32) NOT NULL DEFAULT 'PENDING',
    checksum            CHAR(64),
    error_message       TEXT,
    submitted_at        TIMESTAMPTZ NOT NULL DEFAULT now(),
    processed_at        TIMESTAMPTZ,
    updated_at          TIMESTAMPTZ NOT NULL DEFAULT now()
);

-- Duplicate detection is done by the validator chain, so this index is not unique.
CREATE INDEX IF NOT EXISTS idx_submissions_checksum ON submissions (checksum);
CREATE INDEX IF NOT EXISTS idx_submissions_status ON submissions (status, submitted_at DESC);
CREATE INDEX IF NOT EXISTS idx_submissions_submitted_by ON submissions (submitted_by);
"""


def get_db_connection():
    """
    Get a PostgreSQL database connection.

    Returns a context manager that can be used with 'with' statement.
    The transaction is committed and the connection closed when the
    context exits.

    Usage:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM submissions")

    Returns:
        psycopg.Connection: A PostgreSQL connection.
    """
    try:
        conn = psycopg.connect(settings.POSTGRES_DSN)
        logger.debug("Connected to PostgreSQL")
        return conn
    except Exception as e:
        logger.error(f"Failed to connect to PostgreSQL: {e}")
        raise


def init_schema() -> None:
    """Create the submissions table and its indexes if they are missing."""
    with get_db_connection() as conn:
        conn.execute(SCHEMA_SQL)
        conn.commit()
    logger.info("Submission schema initialized")
