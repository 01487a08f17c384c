from learning_app.models.source import Source
from learning_app.models.session import Session
from learning_app.models.problem import Problem

__all__ = [
    "Source",
    "Session",
    "Problem",
]
