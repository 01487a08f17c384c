"""
Source Service for source creation, lookup and listing.
"""
from typing import Optional, List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from learning_app.core.constants import ListLimits
from learning_app.models.source import Source


class SourceService:
    """Service for source database operations."""

    async def create_source(
        self,
        video_id: str,
        title: str,
        transcript: str,
        duration: int,
        db: AsyncSession,
        thumbnail: Optional[str] = None,
        breakpoints: Optional[str] = None
    ) -> Source:
        """
        Create a new source record.

        Args:
            video_id: YouTube video ID (e.g., "dQw4w9WgXcQ")
            title: Video title
            transcript: Timestamped transcript text
            duration: Video duration in seconds
            db: Database session
            thumbnail: Thumbnail URL (optional)
            breakpoints: Serialized breakpoint list (optional)

        Returns:
            Created Source object
        """
        source = Source(
            title=title,
            url=f"https://www.youtube.com/watch?v={video_id}",
            video_id=video_id,
            transcript=transcript,
            duration=duration,
            thumbnail=thumbnail,
            breakpoints=breakpoints
        )
        db.add(source)
        await db.commit()
        await db.refresh(source)
        return source

    async def get_source_by_id(
        self,
        source_id: UUID,
        db: AsyncSession,
        include_sessions: bool = False
    ) -> Optional[Source]:
        """Get source by ID, optionally with its sessions (newest first)."""
        query = select(Source).where(Source.id == source_id)

        if include_sessions:
            query = query.options(selectinload(Source.sessions)).execution_options(populate_existing=True)

        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_source_by_video_id(
        self,
        video_id: str,
        db: AsyncSession
    ) -> Optional[Source]:
        """Get source by YouTube video ID."""
        result = await db.execute(
            select(Source).where(Source.video_id == video_id)
        )
        return result.scalar_one_or_none()

    async def get_recent_sources(
        self,
        db: AsyncSession,
        limit: int = ListLimits.RECENT_SOURCES
    ) -> List[Source]:
        """Most recently added sources, with sessions loaded."""
        query = (
            select(Source)
            .options(selectinload(Source.sessions))
            .order_by(Source.created_at.desc())
            .limit(limit)
        )
        result = await db.execute(query)
        return list(result.scalars().all())
