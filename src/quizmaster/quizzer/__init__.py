"""Session preparation, play loop and scoring."""

from .scoring import (
    BADGES,
    Badge,
    build_attempt,
    get_badge,
    grade_answer,
    score_percentage,
    wrong_question_ids,
)
from .selection import (
    RandomSource,
    prepare_questions,
    select_questions,
    shuffle,
    validate_question_range,
)
from .session import (
    QuizSessionResult,
    QuizSessionState,
    SessionCommand,
    parse_session_command,
    render_attempt_summary,
    run_quiz_session,
)

__all__ = [
    "BADGES",
    "Badge",
    "build_attempt",
    "get_badge",
    "grade_answer",
    "score_percentage",
    "wrong_question_ids",
    "RandomSource",
    "prepare_questions",
    "select_questions",
    "shuffle",
    "validate_question_range",
    "QuizSessionResult",
    "QuizSessionState",
    "SessionCommand",
    "parse_session_command",
    "render_attempt_summary",
    "run_quiz_session",
]
