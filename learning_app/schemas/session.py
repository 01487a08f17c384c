"""
Pydantic schemas for study session endpoints.
"""
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class SessionCreateRequest(BaseModel):
    """Request body for starting a session ("Check me")."""
    viewer_id: Optional[str] = Field(None, max_length=64)
    source_id: Optional[UUID] = None
    start_time: Optional[int] = Field(None, ge=0, description="Range start in seconds")
    end_time: Optional[int] = Field(None, ge=0, description="Range end in seconds")


class SessionUpdateRequest(BaseModel):
    """Request body for updating a session's status."""
    session_id: Optional[UUID] = None
    status: Optional[str] = None


class SessionSchema(BaseModel):
    """Session data."""
    id: UUID
    viewer_id: str
    source_id: UUID
    start_time: int
    end_time: Optional[int] = None
    status: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class SessionResponse(BaseModel):
    """Response wrapping a single session."""
    session: SessionSchema


class LastCheckpointResponse(BaseModel):
    """Where the viewer's previous completed session ended."""
    last_checkpoint: int
    last_session: Optional[SessionSchema] = None
