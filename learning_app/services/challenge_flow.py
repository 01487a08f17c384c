"""
Challenge flow: the step machine the challenge screen renders.

    loading -> problem -> evaluating -> feedback -> problem ... -> complete
                              |
                              +-> problem (evaluation failed, retry)
"""
from dataclasses import dataclass, field
from typing import Any, List, Optional

from learning_app.core.constants import ChallengeStep


class ChallengeFlowError(Exception):
    """Raised on a transition the current step does not allow."""
    pass


@dataclass
class ChallengeFlow:
    """Progress through one session's problems, one at a time."""

    problems: List[Any] = field(default_factory=list)
    step: str = ChallengeStep.LOADING
    current_index: int = 0

    @classmethod
    def resume(cls, problems: List[Any]) -> "ChallengeFlow":
        """Rebuild the flow from persisted problems (evaluated ones are done)."""
        flow = cls()
        if problems:
            flow.loaded(problems)
            for problem in problems:
                if not problem.is_evaluated:
                    break
                flow.current_index += 1
            if flow.current_index >= len(problems):
                flow.current_index = len(problems) - 1
                flow.step = ChallengeStep.COMPLETE
        return flow

    @property
    def total(self) -> int:
        return len(self.problems)

    @property
    def current_problem(self) -> Optional[Any]:
        if self.step in (ChallengeStep.LOADING, ChallengeStep.COMPLETE) or not self.problems:
            return None
        return self.problems[self.current_index]

    @property
    def is_complete(self) -> bool:
        return self.step == ChallengeStep.COMPLETE

    @property
    def progress_value(self) -> float:
        """Percentage shown in the header progress bar."""
        if not self.total:
            return 0.0
        done = self.current_index + (1 if self.is_complete else 0)
        return done / self.total * 100

    def _require(self, *steps: str) -> None:
        if self.step not in steps:
            raise ChallengeFlowError(f"Cannot do that while in step '{self.step}'")

    def loaded(self, problems: List[Any]) -> None:
        self._require(ChallengeStep.LOADING)
        if not problems:
            raise ChallengeFlowError("No problems to show")
        self.problems = list(problems)
        self.current_index = 0
        self.step = ChallengeStep.PROBLEM

    def submit(self) -> None:
        self._require(ChallengeStep.PROBLEM)
        self.step = ChallengeStep.EVALUATING

    def evaluated(self) -> None:
        self._require(ChallengeStep.EVALUATING)
        self.step = ChallengeStep.FEEDBACK

    def evaluation_failed(self) -> None:
        self._require(ChallengeStep.EVALUATING)
        self.step = ChallengeStep.PROBLEM

    def next(self) -> None:
        self._require(ChallengeStep.FEEDBACK)
        if self.current_index < self.total - 1:
            self.current_index += 1
            self.step = ChallengeStep.PROBLEM
        else:
            self.step = ChallengeStep.COMPLETE

    def snapshot(self) -> dict:
        """Serializable view of the flow for API responses."""
        current = self.current_problem
        return {
            "step": self.step,
            "current_index": self.current_index,
            "total": self.total,
            "progress_value": self.progress_value,
            "current_problem_id": current.id if current is not None else None,
        }
