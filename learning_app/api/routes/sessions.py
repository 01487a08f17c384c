"""
Session API routes: checkpoints, session lifecycle and challenge progress.
"""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession

from learning_app.core.database import get_db
from learning_app.schemas.challenge import GenerateChallengeResponse, ProblemSchema
from learning_app.schemas.session import (
    SessionCreateRequest,
    SessionUpdateRequest,
    SessionSchema,
    SessionResponse,
    LastCheckpointResponse,
)
from learning_app.services.challenge_flow import ChallengeFlow
from learning_app.services.session_service import SessionService, SessionServiceError
from learning_app.services.source_service import SourceService


router = APIRouter(prefix="/api/sessions", tags=["sessions"])


@router.get("", response_model=LastCheckpointResponse)
async def get_last_checkpoint(
    viewer_id: Optional[str] = Query(default=None),
    source_id: Optional[UUID] = Query(default=None),
    db: AsyncSession = Depends(get_db)
) -> LastCheckpointResponse:
    """
    Get where the viewer's latest completed session on a source ended.

    Returns 0 when the viewer has not completed a session yet.
    """
    if not viewer_id or not source_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="viewer_id and source_id are required"
        )

    last_session = await SessionService().get_last_completed_session(viewer_id, source_id, db)

    return LastCheckpointResponse(
        last_checkpoint=(last_session.end_time or 0) if last_session else 0,
        last_session=SessionSchema.model_validate(last_session) if last_session else None
    )


@router.post("", response_model=SessionResponse)
async def create_session(
    request: SessionCreateRequest,
    db: AsyncSession = Depends(get_db)
) -> SessionResponse:
    """
    Start a session when the viewer asks to be checked on a time range.
    """
    if not request.viewer_id or not request.source_id or request.start_time is None or request.end_time is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="viewer_id, source_id, start_time, and end_time are required"
        )

    if request.end_time < request.start_time:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="end_time must not be before start_time"
        )

    source = await SourceService().get_source_by_id(request.source_id, db)
    if not source:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Source not found"
        )

    session = await SessionService().create_session(
        viewer_id=request.viewer_id,
        source_id=source.id,
        start_time=request.start_time,
        end_time=request.end_time,
        db=db
    )

    return SessionResponse(session=SessionSchema.model_validate(session))


@router.patch("", response_model=SessionResponse)
async def update_session(
    request: SessionUpdateRequest,
    db: AsyncSession = Depends(get_db)
) -> SessionResponse:
    """
    Update a session's status (e.g., mark as completed).
    """
    if not request.session_id or not request.status:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="session_id and status are required"
        )

    try:
        session = await SessionService().update_session_status(request.session_id, request.status, db)
    except SessionServiceError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    if not session:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found"
        )

    return SessionResponse(session=SessionSchema.model_validate(session))


@router.get("/{session_id}/progress", response_model=GenerateChallengeResponse)
async def get_session_progress(
    session_id: UUID,
    db: AsyncSession = Depends(get_db)
) -> GenerateChallengeResponse:
    """
    Get a session's problems and where the learner is in the challenge.

    Use this endpoint to resume a challenge after a reload.
    """
    session_service = SessionService()

    session = await session_service.get_session_by_id(session_id, db)
    if not session:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found"
        )

    problems = await session_service.get_problems(session.id, db)
    flow = ChallengeFlow.resume(problems)

    return GenerateChallengeResponse(
        session_id=session.id,
        problems=[ProblemSchema.model_validate(p) for p in problems],
        progress=flow.snapshot()
    )
