"""Quiz bank import: format detection, parsing and text extraction."""

from __future__ import annotations

from .errors import (
    DependencyError,
    EmptyQuizName,
    ExtractionError,
    InvalidRange,
    MissingCorrectAnswer,
    MissingQuizName,
    NoValidQuestions,
    QuizError,
    QuizParseError,
    StoreError,
    UnsupportedFileFormat,
)
from .extract import (
    SUPPORTED_EXTENSIONS,
    ExtractorDependencies,
    extract_text,
)
from .formats import detect_format
from .models import (
    FormatKind,
    QuestionOption,
    QuestionRange,
    Quiz,
    QuizAnswer,
    QuizAttempt,
    QuizQuestion,
    QuizSettings,
    UserStats,
)
from .parsers import (
    ParsedBank,
    parse_questions,
    parse_quiz_content,
    parse_quiz_file,
)

__all__ = [
    "DependencyError",
    "EmptyQuizName",
    "ExtractionError",
    "InvalidRange",
    "MissingCorrectAnswer",
    "MissingQuizName",
    "NoValidQuestions",
    "QuizError",
    "QuizParseError",
    "StoreError",
    "UnsupportedFileFormat",
    "SUPPORTED_EXTENSIONS",
    "ExtractorDependencies",
    "extract_text",
    "detect_format",
    "FormatKind",
    "QuestionOption",
    "QuestionRange",
    "Quiz",
    "QuizAnswer",
    "QuizAttempt",
    "QuizQuestion",
    "QuizSettings",
    "UserStats",
    "ParsedBank",
    "parse_questions",
    "parse_quiz_content",
    "parse_quiz_file",
]
