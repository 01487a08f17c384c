"""
Pydantic schemas for source-related API endpoints.
"""
import json
from datetime import datetime
from typing import Optional, List
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from learning_app.schemas.session import SessionSchema


# Request schemas
class ProcessVideoRequest(BaseModel):
    """Request body for processing a YouTube video."""
    url: Optional[str] = Field(None, description="YouTube video URL or video ID")


# Response schemas
class BreakpointSchema(BaseModel):
    """Schema for a suggested pause point."""
    timestamp: int
    reason: str


class SourceBase(BaseModel):
    """Base source schema."""
    id: UUID
    title: str
    url: str
    video_id: str
    duration: int
    thumbnail: Optional[str] = None
    breakpoints: List[BreakpointSchema] = []
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @field_validator("breakpoints", mode="before")
    @classmethod
    def parse_breakpoints(cls, value):
        """Breakpoints are stored serialized; decode them for the response."""
        if value is None or value == "":
            return []
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except ValueError:
                return []
        return value if isinstance(value, list) else []


class SourceListItem(SourceBase):
    """Source item for list endpoints, with its latest session."""
    latest_session: Optional[SessionSchema] = None


class SourceListResponse(BaseModel):
    """Response for source list endpoint."""
    sources: List[SourceListItem]


class SourceDetail(SourceBase):
    """Source with transcript and sessions (newest first)."""
    transcript: str
    sessions: List[SessionSchema] = []


class SourceResponse(BaseModel):
    """Response wrapping a single source."""
    source: SourceDetail


class KeyConceptSchema(BaseModel):
    """A frequent term in the transcript."""
    term: str
    count: int


class NotesSectionSchema(BaseModel):
    """Study notes for the stretch between two breakpoints."""
    start: int
    end: int
    time: str
    headline: str
    key_concepts: List[KeyConceptSchema]


class StudyNotesResponse(BaseModel):
    """Study notes for a source."""
    source_id: UUID
    key_concepts: List[KeyConceptSchema]
    sections: List[NotesSectionSchema]
    current_section: Optional[NotesSectionSchema] = None


class BreakpointStatusResponse(BaseModel):
    """Breakpoints plus where the viewer is relative to them."""
    breakpoints: List[BreakpointSchema]
    last_checkpoint: int
    next_breakpoint: Optional[BreakpointSchema] = None
    ready_for_challenge: bool
