from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from fixtures import make_quiz

from quizmaster.bank.errors import StoreError
from quizmaster.bank.models import QuizAnswer, QuizAttempt, UserStats
from quizmaster.library.store import QuizStore

BASE = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _attempt(attempt_id: str, quiz_id: str, *, minutes: int = 0, score=50):
    return QuizAttempt(
        id=attempt_id,
        quiz_id=quiz_id,
        quiz_name="Sample",
        score=score,
        total_questions=2,
        time_spent=30,
        completed_at=BASE + timedelta(minutes=minutes),
        answers=(QuizAnswer(0, 1, "A", "A", True, "Question 1?"),),
    )


@pytest.fixture
def store(tmp_path) -> QuizStore:
    return QuizStore(tmp_path / "library", now=lambda: BASE)


def test_empty_store_returns_defaults(store):
    assert store.list_quizzes() == []
    assert store.get_quiz("missing") is None
    assert store.get_latest_attempt("missing") is None
    assert store.get_user_stats() == UserStats()


def test_save_quiz_round_trips_and_upserts(store):
    quiz = make_quiz("q1")

    store.save_quiz(quiz)
    store.save_quiz(quiz)

    assert store.get_quiz("q1") == quiz
    assert len(store.list_quizzes()) == 1
    assert store.quizzes_path.exists()


def test_list_quizzes_newest_first(store):
    store.save_quiz(make_quiz("old", created_at=BASE))
    store.save_quiz(make_quiz("new", created_at=BASE + timedelta(days=1)))

    assert [quiz.id for quiz in store.list_quizzes()] == ["new", "old"]


def test_find_quiz_by_prefix(store):
    store.save_quiz(make_quiz("abc111"))
    store.save_quiz(make_quiz("abd222"))

    assert store.find_quiz("abc").id == "abc111"
    assert store.find_quiz("abd222").id == "abd222"
    assert store.find_quiz("zzz") is None
    assert store.find_quiz("  ") is None
    with pytest.raises(StoreError, match="matches 2 quizzes"):
        store.find_quiz("ab")


def test_delete_quiz_cascades_attempts(store):
    store.save_quiz(make_quiz("keep"))
    store.save_quiz(make_quiz("drop"))
    store.save_attempt(_attempt("a1", "drop"))
    store.save_attempt(_attempt("a2", "keep"))

    assert store.delete_quiz("drop") is True
    assert store.delete_quiz("drop") is False

    assert store.get_quiz("drop") is None
    assert store.get_quiz_attempts("drop") == []
    assert [a.id for a in store.get_quiz_attempts("keep")] == ["a2"]


def test_update_quiz_stats_tracks_best_score(store):
    store.save_quiz(make_quiz("q1"))

    store.update_quiz_stats("q1", 80)
    updated = store.update_quiz_stats("q1", 40)

    assert updated.total_attempts == 2
    assert updated.best_score == 80
    assert updated.last_played == BASE
    assert store.get_quiz("q1") == updated
    assert store.update_quiz_stats("missing", 10) is None


def test_attempt_queries(store):
    store.save_attempt(_attempt("a1", "q1", minutes=1))
    store.save_attempt(_attempt("a2", "q1", minutes=3))
    store.save_attempt(_attempt("a3", "q2", minutes=2))

    assert store.get_latest_attempt("q1").id == "a2"
    assert [a.id for a in store.get_recent_attempts(2)] == ["a2", "a3"]
    assert store.get_recent_attempts(0) == []
    assert store.get_quiz_attempts("q1")[0].answers[0].is_correct is True


def test_update_user_stats_accumulates(store):
    store.update_user_stats(3, 4)
    stats = store.update_user_stats(1, 2)

    assert stats == UserStats(
        total_score=4,
        total_quizzes_taken=2,
        total_correct_answers=4,
        total_questions_answered=6,
    )
    assert json.loads(store.stats_path.read_text(encoding="utf-8")) == (
        stats.to_dict()
    )


def test_interrupted_stats_write_keeps_previous_totals(store, monkeypatch):
    first = store.update_user_stats(3, 4)

    def fail_replace(self, target):  # noqa: ANN001
        raise OSError("disk full")

    monkeypatch.setattr(Path, "replace", fail_replace)
    with pytest.raises(OSError, match="disk full"):
        store.update_user_stats(1, 2)
    monkeypatch.undo()

    assert store.get_user_stats() == first


def test_malformed_records_raise_store_error(store):
    store.root.mkdir(parents=True)
    store.quizzes_path.write_text('{"id": "x"}\n', encoding="utf-8")
    store.attempts_path.write_text("not json\n", encoding="utf-8")
    store.stats_path.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(StoreError, match="Malformed quiz record"):
        store.list_quizzes()
    with pytest.raises(StoreError, match="Unreadable store file"):
        store.get_recent_attempts()
    with pytest.raises(StoreError, match="Unreadable stats file"):
        store.get_user_stats()


def test_store_logs_mutations(tmp_path, caplog):
    logger = logging.getLogger("tests.store")
    store = QuizStore(tmp_path, logger=logger)

    with caplog.at_level(logging.INFO, logger="tests.store"):
        store.save_quiz(make_quiz("q1"))
        store.delete_quiz("q1")

    messages = [record.getMessage() for record in caplog.records]
    assert messages == ["Saved quiz", "Deleted quiz"]
    assert caplog.records[0].quiz_id == "q1"
