"""CLI entry points for managing the quiz library."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Callable, Optional, Sequence

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from quizmaster.bank.errors import ExtractionError, QuizError, QuizParseError
from quizmaster.bank.extract import ExtractorDependencies
from quizmaster.bank.parsers import parse_quiz_file
from quizmaster.config import ConfigOverrides, QuizmasterConfigError
from quizmaster.context import (
    CommandContext,
    add_common_arguments,
    open_context,
)


def _parser(prog: str, description: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=prog, description=description)
    add_common_arguments(parser)
    return parser


def _open(
    parser: argparse.ArgumentParser,
    args: argparse.Namespace,
    overrides: Optional[ConfigOverrides] = None,
) -> CommandContext:
    try:
        return open_context(args, overrides=overrides)
    except QuizmasterConfigError as exc:
        parser.error(str(exc))


def _run(context: CommandContext, action: Callable[[], int]) -> int:
    try:
        return action()
    except QuizError as exc:
        context.logger.error("Command failed", extra={"reason": str(exc)})
        sys.stderr.write(str(exc) + "\n")
        return 1


def import_main(
    argv: Sequence[str] | None = None,
    *,
    dependencies: Optional[ExtractorDependencies] = None,
) -> int:
    parser = _parser(
        "quizmaster import",
        "Parse quiz documents (.txt, .docx, .pdf) and add them to the "
        "library.",
    )
    parser.add_argument(
        "paths", nargs="+", type=Path, help="Quiz documents to import."
    )
    parser.add_argument(
        "--strict",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Reject documents with questions lacking a declared answer.",
    )
    args = parser.parse_args(list(argv) if argv is not None else None)
    context = _open(
        parser, args, ConfigOverrides(strict_import=args.strict)
    )

    def action() -> int:
        failures = 0
        for path in args.paths:
            try:
                quiz = parse_quiz_file(
                    path,
                    dependencies=dependencies,
                    strict=context.config.strict_import,
                    logger=context.logger,
                )
            except (QuizParseError, ExtractionError) as exc:
                failures += 1
                context.logger.error(
                    "Import failed",
                    extra={"source": str(path), "reason": str(exc)},
                )
                sys.stderr.write(f"{path.name}: {exc}\n")
                continue
            context.store.save_quiz(quiz)
            sys.stdout.write(
                f"Imported '{quiz.name}' ({len(quiz.questions)} questions, "
                f"{quiz.source_format.value} format) as {quiz.id}\n"
            )
        return 1 if failures else 0

    return _run(context, action)


def list_main(
    argv: Sequence[str] | None = None, *, console: Optional[Console] = None
) -> int:
    parser = _parser("quizmaster list", "List the quizzes in the library.")
    args = parser.parse_args(list(argv) if argv is not None else None)
    context = _open(parser, args)
    out = console or Console()

    def action() -> int:
        quizzes = context.store.list_quizzes()
        if not quizzes:
            out.print("No quizzes imported yet. Run `quizmaster import`.")
            return 0
        table = Table(title="Quizzes", box=box.SIMPLE, expand=True)
        table.add_column("Id")
        table.add_column("Name", overflow="fold")
        table.add_column("Questions", justify="right")
        table.add_column("Attempts", justify="right")
        table.add_column("Best", justify="right")
        table.add_column("Last played")
        for quiz in quizzes:
            table.add_row(
                quiz.id[:8],
                Text(quiz.name),
                str(len(quiz.questions)),
                str(quiz.total_attempts),
                f"{quiz.best_score}%",
                quiz.last_played.strftime("%Y-%m-%d %H:%M")
                if quiz.last_played
                else "-",
            )
        out.print(table)
        return 0

    return _run(context, action)


def show_main(
    argv: Sequence[str] | None = None, *, console: Optional[Console] = None
) -> int:
    parser = _parser(
        "quizmaster show", "Print the questions of a stored quiz."
    )
    parser.add_argument("quiz", help="Quiz id or unique prefix.")
    parser.add_argument(
        "--answers",
        action="store_true",
        help="Mark the correct option of each question.",
    )
    args = parser.parse_args(list(argv) if argv is not None else None)
    context = _open(parser, args)
    out = console or Console()

    def action() -> int:
        quiz = context.store.find_quiz(args.quiz)
        if quiz is None:
            sys.stderr.write(f"Quiz not found: {args.quiz}\n")
            return 1
        out.rule(Text(f"{quiz.name} ({len(quiz.questions)} questions)"))
        for question in quiz.questions:
            out.print(
                Text.assemble((f"{question.id}. ", "bold"), question.question)
            )
            for option in question.options:
                marker = (
                    "*"
                    if args.answers and option.label == question.correct_answer
                    else " "
                )
                out.print(Text(f"  {marker}{option.label}) {option.text}"))
        return 0

    return _run(context, action)


def delete_main(argv: Sequence[str] | None = None) -> int:
    parser = _parser(
        "quizmaster delete",
        "Delete a quiz and every attempt recorded for it.",
    )
    parser.add_argument("quiz", help="Quiz id or unique prefix.")
    args = parser.parse_args(list(argv) if argv is not None else None)
    context = _open(parser, args)

    def action() -> int:
        quiz = context.store.find_quiz(args.quiz)
        if quiz is None:
            sys.stderr.write(f"Quiz not found: {args.quiz}\n")
            return 1
        context.store.delete_quiz(quiz.id)
        sys.stdout.write(f"Deleted '{quiz.name}' ({quiz.id})\n")
        return 0

    return _run(context, action)


def stats_main(
    argv: Sequence[str] | None = None, *, console: Optional[Console] = None
) -> int:
    parser = _parser(
        "quizmaster stats", "Show overall statistics and recent attempts."
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=10,
        help="Number of recent attempts to list (default: 10).",
    )
    args = parser.parse_args(list(argv) if argv is not None else None)
    context = _open(parser, args)
    out = console or Console()

    def action() -> int:
        stats = context.store.get_user_stats()
        answered = stats.total_questions_answered
        accuracy = (
            stats.total_correct_answers / answered * 100 if answered else 0.0
        )
        overview = Table(
            show_header=False, box=box.MINIMAL_DOUBLE_HEAD, expand=False
        )
        overview.add_column("Metric", style="bold")
        overview.add_column("Value", justify="right")
        overview.add_row("Quizzes taken", str(stats.total_quizzes_taken))
        overview.add_row("Correct answers", str(stats.total_correct_answers))
        overview.add_row("Questions answered", str(answered))
        overview.add_row("Accuracy", f"{accuracy:.1f}%")
        out.print(overview)

        recent = context.store.get_recent_attempts(args.limit)
        if recent:
            table = Table(title="Recent attempts", box=box.SIMPLE)
            table.add_column("Completed")
            table.add_column("Quiz", overflow="fold")
            table.add_column("Score", justify="right")
            table.add_column("Questions", justify="right")
            for attempt in recent:
                table.add_row(
                    attempt.completed_at.strftime("%Y-%m-%d %H:%M"),
                    Text(attempt.quiz_name),
                    f"{attempt.score}%",
                    str(attempt.total_questions),
                )
            out.print(table)
        return 0

    return _run(context, action)
