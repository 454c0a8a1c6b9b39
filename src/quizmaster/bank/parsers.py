"""Parsers for the three plain-text quiz authoring formats.

Each format owns a parse function with the same output contract
(:class:`ParsedBank`). Line-oriented formats fold over normalised lines with
an accumulator holding the block being built plus the completed blocks, and
flush the last block explicitly once the lines run out.

Question ids are always assigned sequentially over the blocks that survive,
in document order. Numbers written in the document (``Q7:``, ``12.``) are
markers only.
"""

from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Mapping, Optional

from .errors import (
    EmptyQuizName,
    MissingCorrectAnswer,
    MissingQuizName,
    NoValidQuestions,
)
from .extract import ExtractorDependencies, extract_text
from .formats import BLOCK_SEPARATOR, OPTION_PREFIX, detect_format
from .models import FormatKind, QuestionOption, Quiz, QuizQuestion

__all__ = [
    "DEFAULT_ANSWER",
    "MAX_OPTIONS",
    "ParsedBank",
    "parse_default",
    "parse_delimiter_block",
    "parse_asterisk_marked",
    "parse_questions",
    "parse_quiz_content",
    "parse_quiz_file",
]

DEFAULT_ANSWER = "A"
OPTION_LABELS = ("A", "B", "C", "D")
MAX_OPTIONS = len(OPTION_LABELS)

CORRECT_OPTION_PREFIX = OPTION_PREFIX + "#"
SOURCE_URL_PREFIX = "SourceURL:"

_TITLE = re.compile(r"^#\s*QUIZ:(.*)$", re.IGNORECASE)
_DEFAULT_QUESTION = re.compile(r"^Q(\d+):\s*(.+)$", re.IGNORECASE)
_DEFAULT_OPTION = re.compile(r"^([A-D])\)\s*(.+)$", re.IGNORECASE)
_DEFAULT_ANSWER_LINE = re.compile(r"^ANSWER:\s*([A-D])", re.IGNORECASE)
_NUMBERED_LINE = re.compile(r"^(\d+)\.\s*(.+)$")
_MARKED_OPTION = re.compile(r"^(\*)?([A-D])\)\s*(.+)$", re.IGNORECASE)


@dataclass(frozen=True)
class ParsedBank:
    """Questions parsed out of one document.

    ``undeclared_answers`` lists the ids of questions whose correct answer was
    not written in the document and fell back to a default label.
    """

    name: str
    format: FormatKind
    questions: tuple[QuizQuestion, ...]
    undeclared_answers: tuple[int, ...] = ()


@dataclass
class _PartialQuestion:
    text: str
    options: list[QuestionOption] = field(default_factory=list)
    answer: Optional[str] = None

    def add_option(self, label: str, text: str) -> None:
        # A repeated label keeps the first occurrence.
        if any(option.label == label for option in self.options):
            return
        self.options.append(QuestionOption(label=label, text=text))


@dataclass
class _Accumulator:
    current: Optional[_PartialQuestion] = None
    completed: list[_PartialQuestion] = field(default_factory=list)

    def flush(self, *, min_options: int) -> None:
        block = self.current
        self.current = None
        if block is None or not block.text:
            return
        if len(block.options) >= min_options:
            self.completed.append(block)

    def start(self, text: str, *, min_options: int) -> None:
        self.flush(min_options=min_options)
        self.current = _PartialQuestion(text=text)


def _normalized_lines(text: str) -> list[str]:
    return [line.strip() for line in text.splitlines() if line.strip()]


def _resolve_answer(block: _PartialQuestion) -> tuple[str, bool]:
    labels = [option.label for option in block.options]
    if block.answer in labels:
        return block.answer, True  # type: ignore[return-value]
    if DEFAULT_ANSWER in labels:
        return DEFAULT_ANSWER, False
    return labels[0], False


def _finalize(
    blocks: list[_PartialQuestion], *, name: str, kind: FormatKind
) -> ParsedBank:
    if not blocks:
        raise NoValidQuestions()
    questions: list[QuizQuestion] = []
    undeclared: list[int] = []
    for question_id, block in enumerate(blocks, start=1):
        answer, declared = _resolve_answer(block)
        if not declared:
            undeclared.append(question_id)
        questions.append(
            QuizQuestion(
                id=question_id,
                question=block.text,
                options=tuple(block.options),
                correct_answer=answer,
            )
        )
    return ParsedBank(
        name=name,
        format=kind,
        questions=tuple(questions),
        undeclared_answers=tuple(undeclared),
    )


def _quiz_title(lines: list[str]) -> str:
    for line in lines:
        match = _TITLE.match(line)
        if match:
            name = match.group(1).strip()
            if not name:
                raise EmptyQuizName()
            return name
    raise MissingQuizName()


def parse_default(text: str, file_name: str = "") -> ParsedBank:
    """Parse the ``# QUIZ:`` / ``Q1:`` / ``A)`` / ``ANSWER:`` format.

    The quiz is named by its title line; ``file_name`` is not used.
    """

    lines = _normalized_lines(text)
    name = _quiz_title(lines)

    acc = _Accumulator()
    for line in lines:
        if _TITLE.match(line):
            continue
        question = _DEFAULT_QUESTION.match(line)
        if question:
            acc.start(question.group(2).strip(), min_options=1)
            continue
        if acc.current is None:
            continue
        option = _DEFAULT_OPTION.match(line)
        if option:
            acc.current.add_option(
                option.group(1).upper(), option.group(2).strip()
            )
            continue
        answer = _DEFAULT_ANSWER_LINE.match(line)
        if answer:
            acc.current.answer = answer.group(1).upper()
    acc.flush(min_options=1)

    return _finalize(acc.completed, name=name, kind=FormatKind.DEFAULT)


def parse_delimiter_block(text: str, file_name: str) -> ParsedBank:
    """Parse ``+++++``-separated blocks with ``=====`` option lines.

    Labels are positional: the n-th option line read becomes the n-th letter
    whatever its text says. ``=====#`` marks the correct option.
    """

    blocks: list[_PartialQuestion] = []
    for chunk in text.split(BLOCK_SEPARATOR):
        lines = _normalized_lines(chunk)
        if not lines:
            continue
        numbered = _NUMBERED_LINE.match(lines[0])
        stem = numbered.group(2).strip() if numbered else lines[0]
        block = _PartialQuestion(text=stem)
        for line in lines[1:]:
            if len(block.options) >= MAX_OPTIONS:
                break
            if line.startswith(CORRECT_OPTION_PREFIX):
                option_text = line[len(CORRECT_OPTION_PREFIX):].strip()
                is_correct = True
            elif line.startswith(OPTION_PREFIX):
                option_text = line[len(OPTION_PREFIX):].strip()
                is_correct = False
            else:
                continue
            if not option_text:
                continue
            label = OPTION_LABELS[len(block.options)]
            block.add_option(label, option_text)
            if is_correct:
                block.answer = label
        if len(block.options) >= 2:
            blocks.append(block)

    return _finalize(blocks, name=file_name, kind=FormatKind.DELIMITER_BLOCK)


def parse_asterisk_marked(text: str, file_name: str) -> ParsedBank:
    """Parse numbered questions whose correct option is prefixed with ``*``."""

    acc = _Accumulator()
    for line in _normalized_lines(text):
        if line.startswith(SOURCE_URL_PREFIX):
            continue
        question = _NUMBERED_LINE.match(line)
        if question:
            acc.start(question.group(2).strip(), min_options=2)
            continue
        option = _MARKED_OPTION.match(line)
        if option and acc.current is not None:
            label = option.group(2).upper()
            acc.current.add_option(label, option.group(3).strip())
            if option.group(1):
                acc.current.answer = label
    acc.flush(min_options=2)

    return _finalize(
        acc.completed, name=file_name, kind=FormatKind.ASTERISK_MARKED
    )


_PARSERS: Mapping[FormatKind, Callable[[str, str], ParsedBank]] = {
    FormatKind.DEFAULT: parse_default,
    FormatKind.DELIMITER_BLOCK: parse_delimiter_block,
    FormatKind.ASTERISK_MARKED: parse_asterisk_marked,
}


def parse_questions(
    content: str, file_name: str, *, kind: Optional[FormatKind] = None
) -> ParsedBank:
    """Detect the format of ``content`` (unless given) and parse it."""

    resolved = kind or detect_format(content)
    return _PARSERS[resolved](content, file_name)


def parse_quiz_content(
    content: str,
    file_name: str,
    *,
    strict: bool = False,
    logger: Optional[logging.Logger] = None,
    now: Optional[Callable[[], datetime]] = None,
    id_factory: Optional[Callable[[], str]] = None,
) -> Quiz:
    """Turn extracted document text into a new :class:`Quiz`.

    ``file_name`` is the document's base name without extension; formats
    without a title line use it as the quiz name.

    Questions without a declared correct answer keep the default label and
    are reported through ``logger``. With ``strict`` they raise
    :class:`MissingCorrectAnswer` instead.
    """

    parsed = parse_questions(content, file_name)

    if parsed.undeclared_answers:
        if strict:
            raise MissingCorrectAnswer(parsed.undeclared_answers)
        if logger is not None:
            logger.warning(
                "Questions without a declared answer use a default label",
                extra={
                    "quiz_name": parsed.name,
                    "question_ids": list(parsed.undeclared_answers),
                },
            )

    created_at = (now or _utc_now)()
    quiz = Quiz(
        id=(id_factory or _new_quiz_id)(),
        name=parsed.name,
        questions=parsed.questions,
        created_at=created_at,
        source_format=parsed.format,
    )
    if logger is not None:
        logger.info(
            "Parsed quiz",
            extra={
                "quiz_id": quiz.id,
                "quiz_name": quiz.name,
                "format": parsed.format.value,
                "question_count": len(quiz.questions),
            },
        )
    return quiz


def parse_quiz_file(
    path: Path,
    *,
    dependencies: Optional[ExtractorDependencies] = None,
    strict: bool = False,
    logger: Optional[logging.Logger] = None,
    now: Optional[Callable[[], datetime]] = None,
    id_factory: Optional[Callable[[], str]] = None,
) -> Quiz:
    """Extract text from ``path`` and parse it into a :class:`Quiz`."""

    source = Path(path)
    content = extract_text(source, dependencies=dependencies)
    return parse_quiz_content(
        content,
        source.stem,
        strict=strict,
        logger=logger,
        now=now,
        id_factory=id_factory,
    )


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _new_quiz_id() -> str:
    return uuid.uuid4().hex
