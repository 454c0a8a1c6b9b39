"""JSON-lines record store for quizzes, attempts and user statistics.

Layout under ``root``::

    quizzes.jsonl   one Quiz per line
    attempts.jsonl  one QuizAttempt per line
    stats.json      the single UserStats record

Every mutation rewrites the affected file in full.
"""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, List, Optional

from quizmaster.bank.errors import StoreError
from quizmaster.bank.models import Quiz, QuizAttempt, UserStats
from quizmaster.core.files import read_jsonl, write_json, write_jsonl

__all__ = ["QuizStore"]

QUIZZES_FILE = "quizzes.jsonl"
ATTEMPTS_FILE = "attempts.jsonl"
STATS_FILE = "stats.json"


class QuizStore:
    """Persist quizzes, attempts and stats below a library directory."""

    def __init__(
        self,
        root: Path,
        *,
        logger: Optional[logging.Logger] = None,
        now: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.root = Path(root)
        self._logger = logger
        self._now = now or (lambda: datetime.now(timezone.utc))

    @property
    def quizzes_path(self) -> Path:
        return self.root / QUIZZES_FILE

    @property
    def attempts_path(self) -> Path:
        return self.root / ATTEMPTS_FILE

    @property
    def stats_path(self) -> Path:
        return self.root / STATS_FILE

    # Quizzes

    def save_quiz(self, quiz: Quiz) -> None:
        """Insert ``quiz`` or replace the stored record with the same id."""

        quizzes = self._load_quizzes()
        for index, existing in enumerate(quizzes):
            if existing.id == quiz.id:
                quizzes[index] = quiz
                break
        else:
            quizzes.append(quiz)
        self._write_quizzes(quizzes)
        self._log(
            "Saved quiz",
            quiz_id=quiz.id,
            quiz_name=quiz.name,
            question_count=len(quiz.questions),
        )

    def get_quiz(self, quiz_id: str) -> Optional[Quiz]:
        for quiz in self._load_quizzes():
            if quiz.id == quiz_id:
                return quiz
        return None

    def find_quiz(self, prefix: str) -> Optional[Quiz]:
        """Return the quiz whose id equals or uniquely starts with ``prefix``.

        Raises :class:`StoreError` when the prefix is ambiguous.
        """

        needle = prefix.strip()
        if not needle:
            return None
        quizzes = self._load_quizzes()
        for quiz in quizzes:
            if quiz.id == needle:
                return quiz
        matches = [quiz for quiz in quizzes if quiz.id.startswith(needle)]
        if len(matches) > 1:
            raise StoreError(
                f"Quiz id prefix '{needle}' matches {len(matches)} quizzes."
            )
        return matches[0] if matches else None

    def list_quizzes(self) -> List[Quiz]:
        """Return every stored quiz, most recently created first."""

        return sorted(
            self._load_quizzes(), key=lambda q: q.created_at, reverse=True
        )

    def delete_quiz(self, quiz_id: str) -> bool:
        """Delete a quiz and every attempt recorded against it."""

        quizzes = self._load_quizzes()
        remaining = [quiz for quiz in quizzes if quiz.id != quiz_id]
        if len(remaining) == len(quizzes):
            return False
        self._write_quizzes(remaining)

        attempts = self._load_attempts()
        kept = [attempt for attempt in attempts if attempt.quiz_id != quiz_id]
        if len(kept) != len(attempts):
            self._write_attempts(kept)
        self._log(
            "Deleted quiz",
            quiz_id=quiz_id,
            removed_attempts=len(attempts) - len(kept),
        )
        return True

    def update_quiz_stats(self, quiz_id: str, score: int) -> Optional[Quiz]:
        """Record a finished attempt on the quiz summary fields."""

        quiz = self.get_quiz(quiz_id)
        if quiz is None:
            return None
        updated = replace(
            quiz,
            total_attempts=quiz.total_attempts + 1,
            last_played=self._now(),
            best_score=max(quiz.best_score, score),
        )
        self.save_quiz(updated)
        return updated

    # Attempts

    def save_attempt(self, attempt: QuizAttempt) -> None:
        attempts = [
            existing
            for existing in self._load_attempts()
            if existing.id != attempt.id
        ]
        attempts.append(attempt)
        self._write_attempts(attempts)
        self._log(
            "Saved attempt",
            attempt_id=attempt.id,
            quiz_id=attempt.quiz_id,
            score=attempt.score,
        )

    def get_quiz_attempts(self, quiz_id: str) -> List[QuizAttempt]:
        return [
            attempt
            for attempt in self._load_attempts()
            if attempt.quiz_id == quiz_id
        ]

    def get_latest_attempt(self, quiz_id: str) -> Optional[QuizAttempt]:
        attempts = self.get_quiz_attempts(quiz_id)
        if not attempts:
            return None
        return max(attempts, key=lambda attempt: attempt.completed_at)

    def get_recent_attempts(self, limit: int = 10) -> List[QuizAttempt]:
        attempts = sorted(
            self._load_attempts(),
            key=lambda attempt: attempt.completed_at,
            reverse=True,
        )
        return attempts[: max(limit, 0)]

    # User stats

    def get_user_stats(self) -> UserStats:
        path = self.stats_path
        if not path.exists():
            return UserStats()
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            return UserStats.from_dict(data)
        except (ValueError, TypeError, AttributeError) as exc:
            raise StoreError(f"Unreadable stats file {path}: {exc}") from exc

    def update_user_stats(self, correct: int, total: int) -> UserStats:
        current = self.get_user_stats()
        updated = UserStats(
            total_score=current.total_score + correct,
            total_quizzes_taken=current.total_quizzes_taken + 1,
            total_correct_answers=current.total_correct_answers + correct,
            total_questions_answered=current.total_questions_answered + total,
        )
        write_json(self.stats_path, updated.to_dict())
        return updated

    # Internals

    def _load_quizzes(self) -> List[Quiz]:
        records = self._read_records(self.quizzes_path)
        try:
            return [Quiz.from_dict(record) for record in records]
        except (KeyError, ValueError, TypeError) as exc:
            raise StoreError(
                f"Malformed quiz record in {self.quizzes_path}: {exc}"
            ) from exc

    def _load_attempts(self) -> List[QuizAttempt]:
        records = self._read_records(self.attempts_path)
        try:
            return [QuizAttempt.from_dict(record) for record in records]
        except (KeyError, ValueError, TypeError) as exc:
            raise StoreError(
                f"Malformed attempt record in {self.attempts_path}: {exc}"
            ) from exc

    def _write_quizzes(self, quizzes: List[Quiz]) -> None:
        write_jsonl(self.quizzes_path, [quiz.to_dict() for quiz in quizzes])

    def _write_attempts(self, attempts: List[QuizAttempt]) -> None:
        write_jsonl(
            self.attempts_path, [attempt.to_dict() for attempt in attempts]
        )

    def _read_records(self, path: Path) -> List[dict]:
        if not path.exists():
            return []
        try:
            return read_jsonl(path)
        except ValueError as exc:
            raise StoreError(f"Unreadable store file {path}: {exc}") from exc

    def _log(self, message: str, **extra: object) -> None:
        if self._logger is not None:
            self._logger.info(message, extra=extra)
