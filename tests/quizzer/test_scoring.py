from __future__ import annotations

from datetime import datetime, timezone

import pytest

from fixtures import make_question, make_quiz

from quizmaster.bank.models import QuizAnswer
from quizmaster.quizzer.scoring import (
    build_attempt,
    get_badge,
    grade_answer,
    score_percentage,
    wrong_question_ids,
)


@pytest.mark.parametrize(
    "percentage, badge_type",
    [
        (100, "gold"),
        (90, "gold"),
        (89, "silver"),
        (70, "silver"),
        (69, "bronze"),
        (50, "bronze"),
        (49, "participant"),
        (0, "participant"),
    ],
)
def test_get_badge_thresholds(percentage, badge_type):
    assert get_badge(percentage).type == badge_type


@pytest.mark.parametrize(
    "correct, total, expected",
    [(0, 0, 0), (1, 2, 50), (2, 3, 67), (1, 3, 33), (1, 8, 13), (5, 5, 100)],
)
def test_score_percentage_rounds_half_up(correct, total, expected):
    assert score_percentage(correct, total) == expected


def test_grade_answer_matches_by_label():
    question = make_question(4, correct="C")

    right = grade_answer(question, "c", 2)
    wrong = grade_answer(question, "A", 2)

    assert right.is_correct is True
    assert right.selected_answer == "C"
    assert right.question_index == 2
    assert right.question_id == 4
    assert wrong.is_correct is False
    assert wrong.correct_answer == "C"


def test_build_attempt_counts_unanswered_as_wrong():
    quiz = make_quiz(count=4)
    answers = [
        QuizAnswer(0, 1, "A", "A", True, "q1"),
        QuizAnswer(1, 2, "B", "A", False, "q2"),
    ]
    finished = datetime(2024, 6, 1, tzinfo=timezone.utc)

    attempt = build_attempt(
        quiz,
        answers,
        total_questions=4,
        time_spent=-5,
        now=lambda: finished,
        id_factory=lambda: "attempt-1",
    )

    assert attempt.id == "attempt-1"
    assert attempt.quiz_id == quiz.id
    assert attempt.quiz_name == quiz.name
    assert attempt.score == 25
    assert attempt.total_questions == 4
    assert attempt.time_spent == 0
    assert attempt.completed_at == finished
    assert attempt.answers == tuple(answers)


def test_wrong_question_ids_are_unique_and_ordered():
    quiz = make_quiz(count=4)
    answers = [
        QuizAnswer(0, 3, "B", "A", False, "q3"),
        QuizAnswer(1, 1, "A", "A", True, "q1"),
        QuizAnswer(2, 2, "C", "A", False, "q2"),
        QuizAnswer(3, 3, "B", "A", False, "q3"),
    ]
    attempt = build_attempt(quiz, answers, total_questions=4, time_spent=1)

    assert wrong_question_ids(attempt) == (3, 2)
