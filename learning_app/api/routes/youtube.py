"""
YouTube API routes for turning a video URL into a stored source.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from learning_app.core.database import get_db
from learning_app.schemas.source import ProcessVideoRequest, SourceResponse, SourceDetail
from learning_app.services.breakpoint_service import BreakpointService, serialize_breakpoints
from learning_app.services.source_service import SourceService
from learning_app.services.youtube_service import (
    YouTubeService,
    YouTubeServiceError,
    format_transcript,
    estimate_duration,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/youtube", tags=["youtube"])


@router.post("/process", response_model=SourceResponse)
async def process_video(
    request: ProcessVideoRequest,
    db: AsyncSession = Depends(get_db)
) -> SourceResponse:
    """
    Process a YouTube video into a source.

    - Validates the URL and extracts the video ID
    - Returns the existing source if the video was processed before
    - Fetches transcript and metadata
    - Asks the LLM for natural breakpoints
    - Stores the source
    """
    if not request.url or not request.url.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="YouTube URL is required"
        )

    source_service = SourceService()
    youtube_service = YouTubeService()

    try:
        video_id = youtube_service.extract_video_id(request.url)
    except YouTubeServiceError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid YouTube URL"
        )

    existing_source = await source_service.get_source_by_video_id(video_id, db)
    if existing_source:
        source = await source_service.get_source_by_id(existing_source.id, db, include_sessions=True)
        return SourceResponse(source=SourceDetail.model_validate(source))

    try:
        segments = await run_in_threadpool(youtube_service.get_transcript, video_id)
    except YouTubeServiceError as e:
        logger.warning("Transcript fetch error for %s: %s", video_id, e)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    transcript = format_transcript(segments)
    duration = estimate_duration(segments)

    metadata = await run_in_threadpool(youtube_service.get_video_metadata, video_id)
    breakpoints = await run_in_threadpool(
        BreakpointService().analyze_breakpoints,
        transcript,
        duration
    )

    source = await source_service.create_source(
        video_id=video_id,
        title=metadata["title"],
        transcript=transcript,
        duration=duration,
        thumbnail=metadata["thumbnail_url"],
        breakpoints=serialize_breakpoints(breakpoints),
        db=db
    )
    logger.info("Stored source %s for video %s (%ds)", source.id, video_id, duration)

    source = await source_service.get_source_by_id(source.id, db, include_sessions=True)
    return SourceResponse(source=SourceDetail.model_validate(source))
