"""
Submission upload, query and admin routes.

This module handles:
- Upload of ZIP archives into the pipeline
- Reading and listing submissions
- Admin status override and deletion
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Response, UploadFile
from loguru import logger

from app.submissions.factory import get_submission_service
from app.submissions.schemas import SubmissionResponse
from app.submissions.services.submission_service import SubmissionService
from submission_core.domain.exceptions import (
    InvalidSubmissionError,
    StorageFailureError,
    SubmissionNotFoundError,
)
from submission_core.domain.status import SubmissionStatus
from submission_core.runtime.errors import ServiceError

router = APIRouter()


@router.post("", response_model=SubmissionResponse, status_code=201)
def upload_submission(
    file: UploadFile = File(...),
    description: str | None = Form(default=None),
    submitted_by: str | None = Form(default=None, alias="submittedBy"),
    service: SubmissionService = Depends(get_submission_service),
):
    """
    Upload a ZIP archive for processing.

    The archive is stored and recorded as PENDING, then validated, stored and
    processed asynchronously. Poll GET /api/submissions/{id} for the outcome.
    """
    logger.info(f"Received upload {file.filename} from {submitted_by or 'anonymous'}")

    try:
        record = service.create_submission(
            fileobj=file.file,
            filename=file.filename,
            content_type=file.content_type,
            description=description,
            submitted_by=submitted_by,
        )
    except InvalidSubmissionError as e:
        logger.warning(f"Rejected upload {file.filename}: {e.message_safe}")
        raise HTTPException(status_code=400, detail=e.message_safe)
    except ServiceError as e:
        logger.error(f"Upload of {file.filename} failed: {e} (debug_id={e.debug_id})")
        raise HTTPException(status_code=500, detail=e.to_dict())
    except Exception as e:
        logger.exception(f"Upload of {file.filename} failed unexpectedly: {e}")
        raise HTTPException(status_code=500, detail="Failed to store submission")

    return SubmissionResponse.from_record(record)


@router.get("/{submission_id}", response_model=SubmissionResponse)
def get_submission(
    submission_id: int,
    service: SubmissionService = Depends(get_submission_service),
):
    """Get a submission by id."""
    try:
        record = service.get_submission(submission_id)
    except SubmissionNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message_safe)
    return SubmissionResponse.from_record(record)


@router.get("", response_model=list[SubmissionResponse])
def list_submissions(
    status: SubmissionStatus | None = Query(default=None),
    submitted_by: str | None = Query(default=None, alias="submittedBy"),
    service: SubmissionService = Depends(get_submission_service),
):
    """
    List submissions, optionally filtered.

    If both filters are given, status takes precedence.
    """
    records = service.list_submissions(status=status, submitted_by=submitted_by)
    return [SubmissionResponse.from_record(r) for r in records]


@router.patch("/{submission_id}/status", response_model=SubmissionResponse)
def update_submission_status(
    submission_id: int,
    status: SubmissionStatus = Query(...),
    service: SubmissionService = Depends(get_submission_service),
):
    """Admin override of a submission's status."""
    try:
        record = service.update_status(submission_id, status)
    except SubmissionNotFoundError as e:
        raise HTTPException(status_code=400, detail=e.message_safe)
    return SubmissionResponse.from_record(record)


@router.delete("/{submission_id}", status_code=204)
def delete_submission(
    submission_id: int,
    service: SubmissionService = Depends(get_submission_service),
):
    """Delete a submission's stored archive and its row."""
    try:
        service.delete_submission(submission_id)
    except SubmissionNotFoundError as e:
        raise HTTPException(status_code=400, detail=e.message_safe)
    except StorageFailureError as e:
        logger.error(f"[{submission_id}] Delete failed: {e} (debug_id={e.debug_id})")
        raise HTTPException(status_code=500, detail=e.to_dict())
    return Response(status_code=204)
