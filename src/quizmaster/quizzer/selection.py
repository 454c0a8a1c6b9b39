"""Derive the playable question sequence for a session.

``prepare_questions`` applies, in order: selection (specific ids, else a
position range, else everything), question shuffling, then per-question
answer shuffling. Stored questions are never mutated; reordered options live
on copies made with :func:`dataclasses.replace`.
"""

from __future__ import annotations

import random
from dataclasses import replace
from typing import List, Optional, Protocol, Sequence, TypeVar

from quizmaster.bank.errors import InvalidRange
from quizmaster.bank.models import QuizQuestion, QuizSettings

__all__ = [
    "RandomSource",
    "validate_question_range",
    "shuffle",
    "select_questions",
    "prepare_questions",
]

T = TypeVar("T")


class RandomSource(Protocol):
    def randrange(self, stop: int) -> int: ...


def validate_question_range(start: int, end: int, total: int) -> None:
    """Raise :class:`InvalidRange` unless ``[start, end]`` is playable.

    Rules are checked in order and the first failure wins. A range covering
    a single question is rejected even though it is well formed.
    """

    if start < 1:
        raise InvalidRange("start_below_one", "Start must be at least 1")
    if end > total:
        raise InvalidRange(
            "end_exceeds_total",
            f"End cannot exceed total questions ({total})",
        )
    if start > end:
        raise InvalidRange(
            "start_after_end", "Start cannot be greater than end"
        )
    if start == end:
        raise InvalidRange(
            "single_question", "Range must include at least 2 questions"
        )


def shuffle(items: Sequence[T], rng: Optional[RandomSource] = None) -> List[T]:
    """Return a uniformly shuffled copy of ``items`` (Fisher-Yates).

    ``rng`` defaults to the process-wide :mod:`random` source; pass a seeded
    ``random.Random`` (or any object with ``randrange``) for repeatable runs.
    """

    randrange = rng.randrange if rng is not None else random.randrange
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = randrange(i + 1)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def select_questions(
    questions: Sequence[QuizQuestion], settings: QuizSettings
) -> List[QuizQuestion]:
    """Apply the selection stage only.

    Specific ids win over the range and keep the bank's document order, not
    the order the ids were given in. Range bounds are positions, not ids.
    """

    wanted = settings.specific_question_ids
    if wanted:
        id_set = set(wanted)
        return [question for question in questions if question.id in id_set]
    selected_range = settings.question_range
    if selected_range.enabled:
        start = max(selected_range.start - 1, 0)
        return list(questions[start:selected_range.end])
    return list(questions)


def prepare_questions(
    questions: Sequence[QuizQuestion],
    settings: QuizSettings,
    *,
    rng: Optional[RandomSource] = None,
) -> List[QuizQuestion]:
    """Return the ordered questions to present for one session.

    The range is not validated here; callers with range mode enabled run
    :func:`validate_question_range` first. An empty result is valid.
    """

    prepared = select_questions(questions, settings)
    if settings.shuffle_questions:
        prepared = shuffle(prepared, rng)
    if settings.shuffle_answers:
        prepared = [
            replace(question, options=tuple(shuffle(question.options, rng)))
            for question in prepared
        ]
    return prepared
