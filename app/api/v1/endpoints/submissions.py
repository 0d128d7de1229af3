"""
Editorial Workflow Endpoints

Submissions are open to any authenticated user; reviewer assignment,
decisions and publication need an editor role on the submission's journal.
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_credentials, query_params
from app.api.responses import envelope_response
from app.db.session import get_db
from app.services.actions import Credentials
from app.services.submission_service import submission_service

router = APIRouter()
reviews_router = APIRouter()


# ==================== SUBMISSIONS ====================

@router.get("/")
async def list_submissions(
    params: Dict[str, Any] = Depends(query_params),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    """
    Editors see every submission of their journal (?journal_id=),
    everyone else only their own.
    """
    return envelope_response(await submission_service.list_submissions(db, credentials, params))


@router.post("/")
async def create_submission(
    payload: Optional[Dict[str, Any]] = Body(None),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    result = await submission_service.create_submission(db, credentials, payload or {})
    return envelope_response(result, status.HTTP_201_CREATED)


@router.get("/{submission_id}")
async def get_submission(
    submission_id: int,
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    """Submission with its review assignments and decisions"""
    return envelope_response(await submission_service.get_submission(db, credentials, submission_id))


@router.post("/{submission_id}/submit")
async def submit_submission(
    submission_id: int,
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    return envelope_response(await submission_service.submit_submission(db, credentials, submission_id))


@router.post("/{submission_id}/reviewers")
async def assign_reviewer(
    submission_id: int,
    payload: Optional[Dict[str, Any]] = Body(None),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    result = await submission_service.assign_reviewer(
        db, credentials, {**(payload or {}), "submission_id": submission_id}
    )
    return envelope_response(result, status.HTTP_201_CREATED)


@router.post("/{submission_id}/decisions")
async def record_decision(
    submission_id: int,
    payload: Optional[Dict[str, Any]] = Body(None),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    """Body: {"decision_type": "accept" | "decline" | "revision" | "resubmit", "comments": "..."}"""
    result = await submission_service.record_decision(
        db, credentials, {**(payload or {}), "submission_id": submission_id}
    )
    return envelope_response(result, status.HTTP_201_CREATED)


@router.post("/{submission_id}/publish")
async def publish_submission(
    submission_id: int,
    payload: Optional[Dict[str, Any]] = Body(None),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    result = await submission_service.publish_submission(
        db, credentials, {**(payload or {}), "submission_id": submission_id}
    )
    return envelope_response(result)


# ==================== REVIEWS ====================

@reviews_router.get("/")
async def list_my_reviews(
    params: Dict[str, Any] = Depends(query_params),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    """Review assignments of the current reviewer"""
    return envelope_response(await submission_service.list_my_reviews(db, credentials, params))


@reviews_router.post("/{review_id}/complete")
async def complete_review(
    review_id: int,
    payload: Optional[Dict[str, Any]] = Body(None),
    db: AsyncSession = Depends(get_db),
    credentials: Credentials = Depends(get_credentials),
):
    """Body: {"recommendation": "...", "review_form_data": {...}}"""
    result = await submission_service.complete_review(db, credentials, {**(payload or {}), "review_id": review_id})
    return envelope_response(result)
