"""
Validation, formatting and grading of answers per question type.

Structured answers arrive as JSON values:
    multiple_choice  int             option index
    multi_select     list[int]       option indices
    true_false       bool
    matching         {a_idx: b_idx}  column A index -> column B index
    ordering         list[int]       option indices in chosen order
Every other type is answered with free text.
"""
from typing import Any, Dict, List, Optional, Union

from learning_app.core.constants import QuestionType

Answer = Union[str, int, bool, List[int], Dict[int, int]]


def _is_index(value: Any) -> bool:
    # bool is a subclass of int
    return isinstance(value, int) and not isinstance(value, bool)


def _in_range(index: Any, items: Optional[List[Any]]) -> bool:
    return _is_index(index) and items is not None and 0 <= index < len(items)


def _option_label(index: int) -> str:
    return chr(65 + index)


def normalize_answer(answer: Any) -> Any:
    """Turn JSON matching answers ({"0": 1}) into int-keyed dicts."""
    if isinstance(answer, dict):
        normalized = {}
        for key, value in answer.items():
            try:
                normalized[int(key)] = value
            except (TypeError, ValueError):
                normalized[key] = value
        return normalized
    return answer


def is_answer_valid(problem: Any, answer: Any) -> bool:
    """Check if an answer is complete and well-formed for the problem's type."""
    answer = normalize_answer(answer)
    options = problem.options

    if problem.type == QuestionType.MULTIPLE_CHOICE:
        return _in_range(answer, options)

    if problem.type == QuestionType.MULTI_SELECT:
        return (
            isinstance(answer, list)
            and len(answer) > 0
            and all(_in_range(i, options) for i in answer)
        )

    if problem.type == QuestionType.TRUE_FALSE:
        return isinstance(answer, bool)

    if problem.type == QuestionType.MATCHING:
        column_a = problem.column_a
        if not isinstance(answer, dict) or not column_a:
            return False
        return (
            len(answer) == len(column_a)
            and all(_in_range(a, column_a) for a in answer)
            and all(_in_range(b, problem.column_b) for b in answer.values())
        )

    if problem.type == QuestionType.ORDERING:
        return (
            isinstance(answer, list)
            and len(answer) > 0
            and all(_in_range(i, options) for i in answer)
        )

    return isinstance(answer, str) and len(answer.strip()) > 0


def format_answer_for_submission(problem: Any, answer: Any) -> str:
    """Render an answer as readable text for the grading prompt and storage."""
    answer = normalize_answer(answer)
    options = problem.options

    if problem.type == QuestionType.MULTIPLE_CHOICE:
        if _in_range(answer, options):
            return f"Selected: {options[answer]} (option {_option_label(answer)})"
        return str(answer)

    if problem.type == QuestionType.MULTI_SELECT:
        if isinstance(answer, list) and options:
            selected = [options[i] for i in answer if _in_range(i, options)]
            return f"Selected: {', '.join(selected)}"
        return str(answer)

    if problem.type == QuestionType.TRUE_FALSE:
        return "True" if answer else "False"

    if problem.type == QuestionType.MATCHING:
        if isinstance(answer, dict) and problem.column_a and problem.column_b:
            pairs = sorted(
                (a, b) for a, b in answer.items()
                if _in_range(a, problem.column_a) and _in_range(b, problem.column_b)
            )
            matches = "; ".join(
                f"{problem.column_a[a]} → {problem.column_b[b]}" for a, b in pairs
            )
            return f"Matches: {matches}"
        return str(answer)

    if problem.type == QuestionType.ORDERING:
        if isinstance(answer, list) and options:
            ordered = [options[i] for i in answer if _in_range(i, options)]
            return f"Order: {' → '.join(ordered)}"
        return str(answer)

    return str(answer)


def format_reference_answer(problem: Any) -> Optional[str]:
    """Render the stored solution the same way a submitted answer is rendered."""
    if problem.solution is None or problem.type not in QuestionType.STRUCTURED:
        return None
    if not is_answer_valid(problem, problem.solution):
        return None
    return format_answer_for_submission(problem, problem.solution)


def grade_structured_answer(problem: Any, answer: Any) -> Optional[bool]:
    """
    Compare a structured answer with the stored solution.

    Returns None for free-text problems and when no usable solution is stored.
    """
    if problem.type not in QuestionType.STRUCTURED or problem.solution is None:
        return None

    solution = normalize_answer(problem.solution)
    answer = normalize_answer(answer)

    if not is_answer_valid(problem, solution):
        return None

    if problem.type == QuestionType.MULTI_SELECT:
        return isinstance(answer, list) and set(answer) == set(solution)

    if problem.type == QuestionType.TRUE_FALSE:
        return answer is solution

    return answer == solution
