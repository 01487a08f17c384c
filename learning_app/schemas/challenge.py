"""
Pydantic schemas for challenge generation and evaluation.
"""
from datetime import datetime
from typing import Any, Optional, List
from uuid import UUID

from pydantic import BaseModel, Field


class GenerateChallengeRequest(BaseModel):
    """Request body for generating problems for a session."""
    session_id: Optional[UUID] = None


class EvaluateAnswerRequest(BaseModel):
    """
    Request body for submitting an answer.

    The answer shape depends on the problem type: option index, list of
    indices, true/false, {column A index: column B index} or free text.
    """
    problem_id: Optional[UUID] = None
    answer: Any = None


class ProblemSchema(BaseModel):
    """A problem as shown to the learner (no solution)."""
    id: UUID
    position: int
    type: str
    text: str
    difficulty: Optional[str] = None
    options: Optional[List[str]] = None
    column_a: Optional[List[str]] = None
    column_b: Optional[List[str]] = None
    user_answer: Optional[str] = None
    is_correct: Optional[bool] = None
    feedback: Optional[str] = None
    next_step: Optional[str] = None
    evaluated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ChallengeProgressSchema(BaseModel):
    """State of the challenge screen."""
    step: str
    current_index: int
    total: int
    progress_value: float = Field(..., description="Percentage, 0-100")
    current_problem_id: Optional[UUID] = None


class GenerateChallengeResponse(BaseModel):
    """Problems of a session plus the challenge state."""
    session_id: UUID
    problems: List[ProblemSchema]
    progress: ChallengeProgressSchema


class EvaluateAnswerResponse(BaseModel):
    """Grading result plus the challenge state after advancing."""
    is_correct: bool
    feedback: str
    next_step: str
    problem: ProblemSchema
    progress: ChallengeProgressSchema
    session_status: str
