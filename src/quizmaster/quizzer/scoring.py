"""Grade answers, score attempts and award badges."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional, Sequence

from quizmaster.bank.models import (
    Quiz,
    QuizAnswer,
    QuizAttempt,
    QuizQuestion,
)

__all__ = [
    "Badge",
    "BADGES",
    "get_badge",
    "grade_answer",
    "score_percentage",
    "build_attempt",
    "wrong_question_ids",
]


@dataclass(frozen=True)
class Badge:
    type: str
    name: str
    description: str
    min_percentage: int


BADGES: tuple[Badge, ...] = (
    Badge("gold", "Gold Medal", "Outstanding!", 90),
    Badge("silver", "Silver Medal", "Great job!", 70),
    Badge("bronze", "Bronze Medal", "Good effort!", 50),
    Badge("participant", "Participant", "Keep practicing!", 0),
)


def get_badge(percentage: int) -> Badge:
    for badge in BADGES:
        if percentage >= badge.min_percentage:
            return badge
    return BADGES[-1]


def grade_answer(
    question: QuizQuestion, selected: str, index: int
) -> QuizAnswer:
    """Grade ``selected`` against ``question`` by exact label match."""

    label = selected.strip().upper()[:1]
    return QuizAnswer(
        question_index=index,
        question_id=question.id,
        selected_answer=label,
        correct_answer=question.correct_answer,
        is_correct=label == question.correct_answer,
        question_text=question.question,
    )


def score_percentage(correct: int, total: int) -> int:
    """Percentage of ``correct`` over ``total`` rounded half up."""

    if total <= 0:
        return 0
    return (correct * 200 + total) // (total * 2)


def build_attempt(
    quiz: Quiz,
    answers: Sequence[QuizAnswer],
    *,
    total_questions: int,
    time_spent: int,
    now: Optional[Callable[[], datetime]] = None,
    id_factory: Optional[Callable[[], str]] = None,
) -> QuizAttempt:
    """Build the attempt record for a finished session.

    ``total_questions`` is the session length, so unanswered questions count
    against the score.
    """

    correct = sum(1 for answer in answers if answer.is_correct)
    completed_at = now() if now else datetime.now(timezone.utc)
    return QuizAttempt(
        id=id_factory() if id_factory else uuid.uuid4().hex,
        quiz_id=quiz.id,
        quiz_name=quiz.name,
        score=score_percentage(correct, total_questions),
        total_questions=total_questions,
        time_spent=max(0, int(time_spent)),
        completed_at=completed_at,
        answers=tuple(answers),
    )


def wrong_question_ids(attempt: QuizAttempt) -> tuple[int, ...]:
    """Ids of incorrectly answered questions, for a retry-wrong session."""

    seen: list[int] = []
    for answer in attempt.answers:
        if not answer.is_correct and answer.question_id not in seen:
            seen.append(answer.question_id)
    return tuple(seen)
