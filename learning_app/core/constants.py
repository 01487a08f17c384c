"""
Centralized constants for the application.
"""


class SessionStatus:
    """Study session status constants."""
    CHALLENGING = "challenging"
    COMPLETED = "completed"

    ALL = (CHALLENGING, COMPLETED)


class QuestionType:
    """Problem types with a structured answer format."""
    MULTIPLE_CHOICE = "multiple_choice"
    MULTI_SELECT = "multi_select"
    TRUE_FALSE = "true_false"
    MATCHING = "matching"
    ORDERING = "ordering"

    STRUCTURED = (MULTIPLE_CHOICE, MULTI_SELECT, TRUE_FALSE, MATCHING, ORDERING)

    # Anything else (recall, construction, application, ...) is answered as free text
    FREE_TEXT = "recall"


class ChallengeStep:
    """Steps of the challenge UI state machine."""
    LOADING = "loading"
    PROBLEM = "problem"
    EVALUATING = "evaluating"
    FEEDBACK = "feedback"
    COMPLETE = "complete"


# AI Model defaults
class AIModels:
    """Default AI model configurations."""
    BREAKPOINT_MODEL = "claude-haiku-4-5-20251001"
    CHALLENGE_MODEL = "claude-haiku-4-5-20251001"
    EVALUATION_MODEL = "claude-haiku-4-5-20251001"


# Token limits
class TokenLimits:
    """Token and character limit configurations."""
    BREAKPOINT_MAX_TOKENS = 2000
    CHALLENGE_MAX_TOKENS = 2048
    EVALUATION_MAX_TOKENS = 1024
    BREAKPOINT_TRANSCRIPT_MAX_CHARS = 15000
    CHALLENGE_TRANSCRIPT_MAX_CHARS = 8000


# Breakpoint selection
class BreakpointDefaults:
    """Fallback breakpoint spacing when the LLM suggests none."""
    SHORT_VIDEO_SECONDS = 600  # 10 min
    INTERVAL_SECONDS = 600
    DEFAULT_REASON = "Natural pause"


# Study notes
class NotesDefaults:
    """Study notes generation settings."""
    KEY_CONCEPTS_PER_SECTION = 5
    KEY_CONCEPTS_OVERALL = 10
    HEADLINE_MAX_CHARS = 120


class ListLimits:
    """Result limits for list endpoints."""
    RECENT_SOURCES = 10
