from learning_app.schemas.session import (
    SessionCreateRequest,
    SessionUpdateRequest,
    SessionSchema,
    SessionResponse,
    LastCheckpointResponse,
)
from learning_app.schemas.source import (
    ProcessVideoRequest,
    BreakpointSchema,
    SourceListItem,
    SourceListResponse,
    SourceDetail,
    SourceResponse,
    StudyNotesResponse,
    BreakpointStatusResponse,
)
from learning_app.schemas.challenge import (
    GenerateChallengeRequest,
    EvaluateAnswerRequest,
    ProblemSchema,
    ChallengeProgressSchema,
    GenerateChallengeResponse,
    EvaluateAnswerResponse,
)

__all__ = [
    "SessionCreateRequest",
    "SessionUpdateRequest",
    "SessionSchema",
    "SessionResponse",
    "LastCheckpointResponse",
    "ProcessVideoRequest",
    "BreakpointSchema",
    "SourceListItem",
    "SourceListResponse",
    "SourceDetail",
    "SourceResponse",
    "StudyNotesResponse",
    "BreakpointStatusResponse",
    "GenerateChallengeRequest",
    "EvaluateAnswerRequest",
    "ProblemSchema",
    "ChallengeProgressSchema",
    "GenerateChallengeResponse",
    "EvaluateAnswerResponse",
]
