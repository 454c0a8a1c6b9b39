"""Exception types raised while importing and preparing quizzes."""

from __future__ import annotations

from typing import Sequence

__all__ = [
    "QuizError",
    "QuizParseError",
    "UnsupportedFileFormat",
    "MissingQuizName",
    "EmptyQuizName",
    "NoValidQuestions",
    "MissingCorrectAnswer",
    "InvalidRange",
    "ExtractionError",
    "DependencyError",
    "StoreError",
]


class QuizError(Exception):
    """Base class for every quizmaster domain error.

    The message is meant for end users and is printed verbatim by the CLI.
    """


class QuizParseError(QuizError, ValueError):
    """Raised when a document cannot be turned into a quiz."""


class UnsupportedFileFormat(QuizParseError):
    def __init__(self, extension: str) -> None:
        self.extension = extension
        shown = extension or "(none)"
        super().__init__(
            f"Unsupported file format: {shown}. "
            "Please use .txt, .docx, or .pdf"
        )


class MissingQuizName(QuizParseError):
    def __init__(self) -> None:
        super().__init__(
            "Quiz name not found. Please start your quiz with "
            '"# QUIZ: Your Quiz Name"'
        )


class EmptyQuizName(QuizParseError):
    def __init__(self) -> None:
        super().__init__(
            'Quiz name is empty. Please provide a quiz name after "# QUIZ:"'
        )


class NoValidQuestions(QuizParseError):
    def __init__(self) -> None:
        super().__init__(
            "No valid questions found. Please check your quiz format."
        )


class MissingCorrectAnswer(QuizParseError):
    """Raised in strict mode when questions carry no declared answer."""

    def __init__(self, question_ids: Sequence[int]) -> None:
        self.question_ids = tuple(question_ids)
        listed = ", ".join(str(qid) for qid in self.question_ids)
        super().__init__(
            f"No correct answer declared for question(s): {listed}."
        )


class InvalidRange(QuizError, ValueError):
    """Raised when a question range cannot be used for a session.

    ``reason`` is one of ``start_below_one``, ``end_exceeds_total``,
    ``start_after_end`` or ``single_question``.
    """

    def __init__(self, reason: str, message: str) -> None:
        self.reason = reason
        super().__init__(message)


class ExtractionError(QuizError):
    """Raised when text cannot be extracted from an uploaded document."""


class DependencyError(ExtractionError):
    """Raised when the document conversion backend is unavailable."""


class StoreError(QuizError):
    """Raised when the record store cannot be read or written."""
