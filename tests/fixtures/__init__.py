"""Shared testing fixtures for the quizmaster test suite."""

from .quizzes import (  # noqa: F401
    ASTERISK_QUIZ,
    DEFAULT_QUIZ,
    DELIMITER_QUIZ,
    make_question,
    make_quiz,
)
from .workspace import WorkspaceBuilder  # noqa: F401

__all__ = [
    "ASTERISK_QUIZ",
    "DEFAULT_QUIZ",
    "DELIMITER_QUIZ",
    "WorkspaceBuilder",
    "make_question",
    "make_quiz",
]
