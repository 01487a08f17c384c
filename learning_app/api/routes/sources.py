"""
Source API routes: library listing, source detail, study notes and breakpoints.
"""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession

from learning_app.core.database import get_db
from learning_app.schemas.session import SessionSchema
from learning_app.schemas.source import (
    SourceListItem,
    SourceListResponse,
    SourceDetail,
    SourceResponse,
    StudyNotesResponse,
    BreakpointStatusResponse,
)
from learning_app.services.breakpoint_service import (
    load_breakpoints,
    next_breakpoint,
    is_ready_for_challenge,
)
from learning_app.services.notes_service import build_study_notes, notes_for_time
from learning_app.services.session_service import SessionService
from learning_app.services.source_service import SourceService


router = APIRouter(prefix="/api/sources", tags=["sources"])


async def _get_source_or_404(source_id: UUID, db: AsyncSession, include_sessions: bool = False):
    source = await SourceService().get_source_by_id(source_id, db, include_sessions=include_sessions)
    if not source:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Source not found"
        )
    return source


@router.get("", response_model=SourceListResponse)
async def list_sources(
    db: AsyncSession = Depends(get_db)
) -> SourceListResponse:
    """
    Get the most recently processed sources, each with its latest session.
    """
    sources = await SourceService().get_recent_sources(db)

    items = []
    for source in sources:
        item = SourceListItem.model_validate(source)
        if source.sessions:
            item.latest_session = SessionSchema.model_validate(source.sessions[0])
        items.append(item)

    return SourceListResponse(sources=items)


@router.get("/{source_id}", response_model=SourceResponse)
async def get_source(
    source_id: UUID,
    db: AsyncSession = Depends(get_db)
) -> SourceResponse:
    """
    Get a source with its transcript and sessions (newest first).
    """
    source = await _get_source_or_404(source_id, db, include_sessions=True)
    return SourceResponse(source=SourceDetail.model_validate(source))


@router.get("/{source_id}/notes", response_model=StudyNotesResponse)
async def get_study_notes(
    source_id: UUID,
    current_time: Optional[float] = Query(default=None, ge=0),
    db: AsyncSession = Depends(get_db)
) -> StudyNotesResponse:
    """
    Get study notes for a source.

    Sections follow the source's breakpoints. Pass current_time (seconds)
    to also get the section being played.
    """
    source = await _get_source_or_404(source_id, db)

    breakpoints = load_breakpoints(source.breakpoints, source.duration)
    notes = build_study_notes(source.transcript, source.duration, breakpoints)

    current_section = notes_for_time(notes, current_time) if current_time is not None else None

    return StudyNotesResponse(
        source_id=source.id,
        key_concepts=notes["key_concepts"],
        sections=notes["sections"],
        current_section=current_section
    )


@router.get("/{source_id}/breakpoints", response_model=BreakpointStatusResponse)
async def get_breakpoints(
    source_id: UUID,
    viewer_id: Optional[str] = Query(default=None),
    current_time: float = Query(default=0, ge=0),
    db: AsyncSession = Depends(get_db)
) -> BreakpointStatusResponse:
    """
    Get the source's breakpoints and whether the viewer should be quizzed now.

    The last checkpoint is the end of the viewer's latest completed session.
    """
    source = await _get_source_or_404(source_id, db)
    breakpoints = load_breakpoints(source.breakpoints, source.duration)

    last_checkpoint = 0
    if viewer_id:
        last_session = await SessionService().get_last_completed_session(viewer_id, source.id, db)
        if last_session and last_session.end_time is not None:
            last_checkpoint = last_session.end_time

    upcoming = next_breakpoint(breakpoints, last_checkpoint)

    return BreakpointStatusResponse(
        breakpoints=breakpoints,
        last_checkpoint=last_checkpoint,
        next_breakpoint=upcoming,
        ready_for_challenge=is_ready_for_challenge(current_time, upcoming)
    )
