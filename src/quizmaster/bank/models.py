"""Records shared by the parser, the session preparer and the store.

Every record is a frozen dataclass. ``to_dict`` / ``from_dict`` produce the
JSON shape written by :mod:`quizmaster.library.store`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping, Optional


class FormatKind(Enum):
    """Authoring conventions understood by the importer."""

    DEFAULT = "default"
    DELIMITER_BLOCK = "delimiter_block"
    ASTERISK_MARKED = "asterisk_marked"


@dataclass(frozen=True)
class QuestionOption:
    label: str
    text: str

    def to_dict(self) -> dict[str, Any]:
        return {"label": self.label, "text": self.text}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "QuestionOption":
        return cls(label=str(data["label"]), text=str(data["text"]))


@dataclass(frozen=True)
class QuizQuestion:
    """A single multiple-choice question.

    ``id`` is assigned at parse time in document order and never changes.
    ``correct_answer`` always names one of the option labels.
    """

    id: int
    question: str
    options: tuple[QuestionOption, ...]
    correct_answer: str

    @property
    def labels(self) -> tuple[str, ...]:
        return tuple(option.label for option in self.options)

    def option_for(self, label: Optional[str]) -> Optional[QuestionOption]:
        if not label:
            return None
        normalized = label.strip().upper()[:1]
        for option in self.options:
            if option.label == normalized:
                return option
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "question": self.question,
            "options": [option.to_dict() for option in self.options],
            "correct_answer": self.correct_answer,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "QuizQuestion":
        return cls(
            id=int(data["id"]),
            question=str(data["question"]),
            options=tuple(
                QuestionOption.from_dict(item) for item in data["options"]
            ),
            correct_answer=str(data["correct_answer"]),
        )


@dataclass(frozen=True)
class Quiz:
    id: str
    name: str
    questions: tuple[QuizQuestion, ...]
    created_at: datetime
    source_format: FormatKind = FormatKind.DEFAULT
    last_played: Optional[datetime] = None
    total_attempts: int = 0
    best_score: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "questions": [question.to_dict() for question in self.questions],
            "created_at": self.created_at.isoformat(),
            "source_format": self.source_format.value,
            "last_played": (
                self.last_played.isoformat() if self.last_played else None
            ),
            "total_attempts": self.total_attempts,
            "best_score": self.best_score,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Quiz":
        last_played = data.get("last_played")
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            questions=tuple(
                QuizQuestion.from_dict(item) for item in data["questions"]
            ),
            created_at=parse_timestamp(data["created_at"]),
            source_format=FormatKind(
                data.get("source_format", FormatKind.DEFAULT.value)
            ),
            last_played=parse_timestamp(last_played) if last_played else None,
            total_attempts=int(data.get("total_attempts", 0)),
            best_score=int(data.get("best_score", 0)),
        )


@dataclass(frozen=True)
class QuestionRange:
    """1-based inclusive positions over the bank's document order."""

    enabled: bool = False
    start: int = 1
    end: int = 1


@dataclass(frozen=True)
class QuizSettings:
    shuffle_questions: bool = False
    shuffle_answers: bool = True
    fast_mode: bool = False
    question_range: QuestionRange = field(default_factory=QuestionRange)
    specific_question_ids: Optional[tuple[int, ...]] = None


@dataclass(frozen=True)
class QuizAnswer:
    question_index: int
    question_id: int
    selected_answer: str
    correct_answer: str
    is_correct: bool
    question_text: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "question_index": self.question_index,
            "question_id": self.question_id,
            "selected_answer": self.selected_answer,
            "correct_answer": self.correct_answer,
            "is_correct": self.is_correct,
            "question_text": self.question_text,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "QuizAnswer":
        return cls(
            question_index=int(data["question_index"]),
            question_id=int(data["question_id"]),
            selected_answer=str(data["selected_answer"]),
            correct_answer=str(data["correct_answer"]),
            is_correct=bool(data["is_correct"]),
            question_text=str(data.get("question_text", "")),
        )


@dataclass(frozen=True)
class QuizAttempt:
    id: str
    quiz_id: str
    quiz_name: str
    score: int
    total_questions: int
    time_spent: int
    completed_at: datetime
    answers: tuple[QuizAnswer, ...] = ()

    @property
    def correct_count(self) -> int:
        return sum(1 for answer in self.answers if answer.is_correct)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "quiz_id": self.quiz_id,
            "quiz_name": self.quiz_name,
            "score": self.score,
            "total_questions": self.total_questions,
            "time_spent": self.time_spent,
            "completed_at": self.completed_at.isoformat(),
            "answers": [answer.to_dict() for answer in self.answers],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "QuizAttempt":
        return cls(
            id=str(data["id"]),
            quiz_id=str(data["quiz_id"]),
            quiz_name=str(data.get("quiz_name", "")),
            score=int(data["score"]),
            total_questions=int(data["total_questions"]),
            time_spent=int(data.get("time_spent", 0)),
            completed_at=parse_timestamp(data["completed_at"]),
            answers=tuple(
                QuizAnswer.from_dict(item) for item in data.get("answers", [])
            ),
        )


@dataclass(frozen=True)
class UserStats:
    total_score: int = 0
    total_quizzes_taken: int = 0
    total_correct_answers: int = 0
    total_questions_answered: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_score": self.total_score,
            "total_quizzes_taken": self.total_quizzes_taken,
            "total_correct_answers": self.total_correct_answers,
            "total_questions_answered": self.total_questions_answered,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UserStats":
        return cls(
            total_score=int(data.get("total_score", 0)),
            total_quizzes_taken=int(data.get("total_quizzes_taken", 0)),
            total_correct_answers=int(data.get("total_correct_answers", 0)),
            total_questions_answered=int(
                data.get("total_questions_answered", 0)
            ),
        )


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 timestamp, assuming UTC when no offset is given."""

    parsed = datetime.fromisoformat(str(value))
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed
