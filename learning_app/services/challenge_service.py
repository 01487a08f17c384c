"""
Challenge Service for generating problems from a watched transcript range
and grading learner answers.
"""
import logging
from typing import Dict, Any, List, Optional

from learning_app.core.constants import AIModels, TokenLimits, QuestionType
from learning_app.prompts import (
    CHALLENGE_SYSTEM_PROMPT,
    CHALLENGE_USER_PROMPT_TEMPLATE,
    EVALUATION_USER_PROMPT_TEMPLATE,
    EVALUATION_REFERENCE_TEMPLATE,
)
from learning_app.services.ai_provider import AIProvider, AIProviderError, extract_json_object, get_ai_provider
from learning_app.services.transcript_processor import extract_transcript_range, format_timestamp

logger = logging.getLogger(__name__)

DEFAULT_PROBLEM_COUNT = 3
DEFAULT_DIFFICULTY = "Medium"
OPTION_TYPES = (QuestionType.MULTIPLE_CHOICE, QuestionType.MULTI_SELECT, QuestionType.ORDERING)


class ChallengeServiceError(Exception):
    """Custom exception for challenge service errors."""
    pass


def _string_list(value: Any) -> Optional[List[str]]:
    if not isinstance(value, list):
        return None
    items = [str(v).strip() for v in value if isinstance(v, (str, int, float)) and str(v).strip()]
    return items or None


def _parse_verdict(value: Any) -> bool:
    """Read an LLM verdict; only true or "true" count as correct."""
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return value is True


def normalize_problem(item: Any) -> Optional[Dict[str, Any]]:
    """
    Validate one generated problem.

    Returns None for problems without text. Structured problems missing the
    options they need are kept as free-text problems.
    """
    if not isinstance(item, dict):
        return None

    text = item.get("text")
    if not isinstance(text, str) or not text.strip():
        return None

    problem_type = str(item.get("type") or QuestionType.FREE_TEXT).strip().lower()
    options = _string_list(item.get("options"))
    column_a = _string_list(item.get("columnA"))
    column_b = _string_list(item.get("columnB"))
    solution = item.get("correctAnswer")

    if problem_type in OPTION_TYPES and (not options or len(options) < 2):
        problem_type = QuestionType.FREE_TEXT
    if problem_type == QuestionType.MATCHING and (not column_a or not column_b):
        problem_type = QuestionType.FREE_TEXT

    if problem_type not in QuestionType.STRUCTURED:
        options = column_a = column_b = solution = None
    elif problem_type != QuestionType.MATCHING:
        column_a = column_b = None
        if problem_type == QuestionType.TRUE_FALSE:
            options = None
    else:
        options = None

    return {
        "type": problem_type,
        "text": text.strip(),
        "difficulty": str(item.get("difficulty") or DEFAULT_DIFFICULTY),
        "options": options,
        "column_a": column_a,
        "column_b": column_b,
        "solution": solution,
    }


class ChallengeService:
    """Service for LLM problem generation and answer evaluation."""

    def __init__(self, provider: Optional[AIProvider] = None):
        self._provider = provider

    @property
    def provider(self) -> AIProvider:
        if self._provider is None:
            self._provider = get_ai_provider()
        return self._provider

    def generate_problems(
        self,
        title: str,
        transcript: str,
        start_time: int = 0,
        end_time: Optional[int] = None,
        count: int = DEFAULT_PROBLEM_COUNT,
        model: str = AIModels.CHALLENGE_MODEL
    ) -> List[Dict[str, Any]]:
        """
        Generate problems about the transcript between start_time and end_time.

        Raises:
            ChallengeServiceError: If the LLM fails or returns no usable problems
        """
        transcript_portion = extract_transcript_range(
            transcript,
            start_time,
            end_time,
            TokenLimits.CHALLENGE_TRANSCRIPT_MAX_CHARS
        )
        if not transcript_portion.strip():
            raise ChallengeServiceError("Transcript cannot be empty")

        user_prompt = CHALLENGE_USER_PROMPT_TEMPLATE.format(
            title=title,
            count=count,
            start_label=format_timestamp(start_time),
            end_label=format_timestamp(end_time) if end_time is not None else "the end",
            transcript=transcript_portion
        )

        try:
            response = self.provider.generate(
                messages=[
                    {"role": "system", "content": CHALLENGE_SYSTEM_PROMPT},
                    {"role": "user", "content": user_prompt}
                ],
                model=model,
                temperature=0.7,
                max_tokens=TokenLimits.CHALLENGE_MAX_TOKENS
            )
            data = extract_json_object(response.content)
        except AIProviderError as e:
            raise ChallengeServiceError(f"Failed to generate challenges: {str(e)}")
        except ValueError as e:
            raise ChallengeServiceError(f"Failed to parse challenges: {str(e)}")

        raw_problems = data.get("problems")
        if not isinstance(raw_problems, list):
            raise ChallengeServiceError("Failed to parse challenges: missing 'problems' list")

        problems = [p for p in (normalize_problem(item) for item in raw_problems) if p]
        if not problems:
            raise ChallengeServiceError("Failed to generate challenges: no usable problems")

        logger.info("Generated %d problems for '%s'", len(problems), title)
        return problems

    def evaluate_answer(
        self,
        question: str,
        answer: str,
        reference: Optional[str] = None,
        model: str = AIModels.EVALUATION_MODEL
    ) -> Dict[str, Any]:
        """
        Grade an answer and produce tutoring feedback.

        Returns:
            Dictionary with is_correct, feedback and next_step

        Raises:
            ChallengeServiceError: If the LLM fails or the reply is not JSON
        """
        reference_section = EVALUATION_REFERENCE_TEMPLATE.format(reference=reference) if reference else ""
        user_prompt = EVALUATION_USER_PROMPT_TEMPLATE.format(
            question=question,
            answer=answer,
            reference_section=reference_section
        )

        try:
            response = self.provider.generate(
                messages=[{"role": "user", "content": user_prompt}],
                model=model,
                temperature=0.3,
                max_tokens=TokenLimits.EVALUATION_MAX_TOKENS
            )
            data = extract_json_object(response.content)
        except AIProviderError as e:
            raise ChallengeServiceError(f"Failed to evaluate answer: {str(e)}")
        except ValueError as e:
            raise ChallengeServiceError(f"Failed to parse evaluation: {str(e)}")

        return {
            "is_correct": _parse_verdict(data.get("isCorrect")),
            "feedback": str(data.get("feedback") or ""),
            "next_step": str(data.get("nextStep") or ""),
        }
