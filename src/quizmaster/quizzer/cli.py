"""CLI entry point for playing a stored quiz."""

from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence

from rich.console import Console

from quizmaster.bank.errors import QuizError
from quizmaster.bank.models import QuestionRange, Quiz, QuizSettings
from quizmaster.config import ConfigOverrides, QuizmasterConfigError
from quizmaster.context import (
    CommandContext,
    add_common_arguments,
    open_context,
)

from .scoring import build_attempt, wrong_question_ids
from .selection import prepare_questions, validate_question_range
from .session import (
    InputProvider,
    render_attempt_summary,
    run_quiz_session,
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quizmaster play",
        description="Play a stored quiz in the terminal.",
    )
    parser.add_argument(
        "quiz",
        help="Quiz id (or a unique prefix of it) as shown by `quizmaster list`.",
    )
    parser.add_argument(
        "--shuffle-questions",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Shuffle question order (config default: off).",
    )
    parser.add_argument(
        "--shuffle-answers",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Shuffle the options of each question (config default: on).",
    )
    parser.add_argument(
        "--fast",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Move to the next question right after answering.",
    )
    parser.add_argument(
        "--range",
        nargs=2,
        type=int,
        metavar=("START", "END"),
        help="Play only questions START..END (1-based, inclusive).",
    )
    parser.add_argument(
        "--retry-wrong",
        action="store_true",
        help="Replay only the questions missed in the latest attempt.",
    )
    parser.add_argument(
        "--wrong-only",
        action="store_true",
        help="List only the missed questions in the results summary.",
    )
    add_common_arguments(parser)
    return parser


def main(
    argv: Sequence[str] | None = None,
    *,
    console: Optional[Console] = None,
    input_provider: Optional[InputProvider] = None,
) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    overrides = ConfigOverrides(
        shuffle_questions=args.shuffle_questions,
        shuffle_answers=args.shuffle_answers,
        fast_mode=args.fast,
    )
    try:
        context = open_context(args, overrides=overrides)
    except QuizmasterConfigError as exc:
        parser.error(str(exc))

    out = console or Console()
    ask = input_provider or (lambda: out.input("> "))
    try:
        return _play(args, context, out, ask)
    except QuizError as exc:
        context.logger.error("Play failed", extra={"reason": str(exc)})
        sys.stderr.write(str(exc) + "\n")
        return 1


def _play(
    args: argparse.Namespace,
    context: CommandContext,
    console: Console,
    input_provider: InputProvider,
) -> int:
    store = context.store
    quiz = store.find_quiz(args.quiz)
    if quiz is None:
        sys.stderr.write(f"Quiz not found: {args.quiz}\n")
        return 1

    settings = _build_settings(args, context, quiz)
    if settings is None:
        return 1

    questions = prepare_questions(quiz.questions, settings)
    if not questions:
        sys.stderr.write("No questions selected for this session.\n")
        return 1

    context.logger.info(
        "Starting session",
        extra={
            "quiz_id": quiz.id,
            "question_count": len(questions),
            "shuffle_questions": settings.shuffle_questions,
            "shuffle_answers": settings.shuffle_answers,
            "retry_wrong": bool(settings.specific_question_ids),
        },
    )
    result = run_quiz_session(
        questions,
        console,
        input_provider,
        fast_mode=settings.fast_mode,
    )
    if result.exit_action != "completed":
        context.logger.info(
            "Session ended without finishing",
            extra={"quiz_id": quiz.id, "answered": len(result.answers)},
        )
        return 0

    attempt = build_attempt(
        quiz,
        result.answers,
        total_questions=result.total_questions,
        time_spent=result.elapsed_seconds,
    )
    store.save_attempt(attempt)
    store.update_quiz_stats(quiz.id, attempt.score)
    store.update_user_stats(attempt.correct_count, attempt.total_questions)

    render_attempt_summary(console, attempt, wrong_only=args.wrong_only)
    if wrong_question_ids(attempt):
        console.print(
            f"Retry the missed questions with "
            f"`quizmaster play {quiz.id[:8]} --retry-wrong`.",
            style="dim",
        )
    return 0


def _build_settings(
    args: argparse.Namespace, context: CommandContext, quiz: Quiz
) -> Optional[QuizSettings]:
    play = context.config.play
    total = len(quiz.questions)

    specific_ids: Optional[tuple[int, ...]] = None
    if args.retry_wrong:
        latest = context.store.get_latest_attempt(quiz.id)
        if latest is None:
            sys.stderr.write(
                f"No finished attempt recorded for '{quiz.name}' yet.\n"
            )
            return None
        specific_ids = wrong_question_ids(latest)
        if not specific_ids:
            sys.stderr.write("The latest attempt has no wrong answers.\n")
            return None

    question_range = QuestionRange(enabled=False, start=1, end=total)
    if args.range and not specific_ids:
        start, end = args.range
        validate_question_range(start, end, total)
        question_range = QuestionRange(enabled=True, start=start, end=end)

    return QuizSettings(
        shuffle_questions=play.shuffle_questions,
        shuffle_answers=play.shuffle_answers,
        fast_mode=play.fast_mode,
        question_range=question_range,
        specific_question_ids=specific_ids,
    )


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
