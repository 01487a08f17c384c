"""
Centralized prompts for all AI services.
"""
from learning_app.prompts.breakpoint_prompts import BREAKPOINT_USER_PROMPT_TEMPLATE
from learning_app.prompts.challenge_prompts import (
    CHALLENGE_SYSTEM_PROMPT,
    CHALLENGE_USER_PROMPT_TEMPLATE,
)
from learning_app.prompts.evaluation_prompts import (
    EVALUATION_USER_PROMPT_TEMPLATE,
    EVALUATION_REFERENCE_TEMPLATE,
)

__all__ = [
    # Breakpoint analysis
    "BREAKPOINT_USER_PROMPT_TEMPLATE",
    # Challenge generation
    "CHALLENGE_SYSTEM_PROMPT",
    "CHALLENGE_USER_PROMPT_TEMPLATE",
    # Answer evaluation
    "EVALUATION_USER_PROMPT_TEMPLATE",
    "EVALUATION_REFERENCE_TEMPLATE",
]
