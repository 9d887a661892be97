"""
FastAPI application for submission-disk.

Serves the upload, query and admin API. The pipeline stages run in Celery
workers (see app.workers.celery_app).

Usage:
    uvicorn app.main:app --reload --port 8080
"""

from fastapi import FastAPI

from app.submissions.routes import router as submissions_router
from submission_core.config import settings
from submission_core.logging import setup_logging

# Initialize logging
setup_logging()

app = FastAPI(
    title="Submission Disk",
    description="ZIP submission intake with an asynchronous validation and processing pipeline",
    version="1.0.0",
)

# Mount the submissions router under /api/submissions
app.include_router(submissions_router, prefix="/api/submissions", tags=["Submissions"])


@app.get("/health")
def health():
    """
    Health check endpoint.

    Returns:
        dict: Status and service information.
    """
    return {"status": "ok", "service": settings.SERVICE_NAME, "version": "1.0.0"}
