"""Rich-powered play loop for a prepared question sequence.

The loop renders one question at a time, locks the first valid answer,
shows whether it was right and moves on when the player asks for the next
question (or immediately in fast mode). State is kept in
:class:`QuizSessionState` so the loop itself stays small and testable.
"""

from __future__ import annotations

import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Callable, Literal

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from quizmaster.bank.models import QuizAnswer, QuizAttempt, QuizQuestion

from .scoring import get_badge, grade_answer

InputProvider = Callable[[], str]
ExitAction = Literal["completed", "quit", "empty"]


@dataclass(frozen=True)
class SessionCommand:
    """Normalized user command parsed from console input."""

    type: Literal["next", "quit", "select"]
    choice: str | None = None


@dataclass(frozen=True)
class QuizSessionResult:
    """Return value from ``run_quiz_session``."""

    answers: tuple[QuizAnswer, ...]
    exit_action: ExitAction
    total_questions: int
    elapsed_seconds: int

    @property
    def correct_count(self) -> int:
        return sum(1 for answer in self.answers if answer.is_correct)


@dataclass
class QuizSessionState:
    """Mutable state shared by the play loop."""

    questions: list[QuizQuestion]
    index: int = 0
    answers: list[QuizAnswer] = field(default_factory=list)

    @property
    def total_questions(self) -> int:
        return len(self.questions)

    @property
    def current(self) -> QuizQuestion:
        return self.questions[self.index]

    @property
    def is_last(self) -> bool:
        return self.index >= self.total_questions - 1

    def current_answered(self) -> bool:
        return any(
            answer.question_index == self.index for answer in self.answers
        )

    def answer(self, label: str) -> QuizAnswer | None:
        """Lock ``label`` as the answer to the current question.

        Returns ``None`` when the question is already answered or the label
        is not one of its options.
        """

        if self.current_answered():
            return None
        if self.current.option_for(label) is None:
            return None
        graded = grade_answer(self.current, label, self.index)
        self.answers.append(graded)
        return graded

    def advance(self) -> bool:
        """Move to the next question; ``False`` once the last one is done."""

        if self.is_last:
            return False
        self.index += 1
        return True


def parse_session_command(raw: str | None) -> SessionCommand | None:
    """Parse raw user input into a structured command."""

    if raw is None:
        return None
    text = raw.strip()
    if not text:
        return SessionCommand("next")
    lowered = text.lower()
    if lowered in {"n", "next"}:
        return SessionCommand("next")
    if lowered in {"q", "quit", "exit"}:
        return SessionCommand("quit")
    if len(text) == 1 and text.isalpha():
        return SessionCommand("select", text.upper())
    return None


def run_quiz_session(
    questions: Sequence[QuizQuestion],
    console: Console,
    input_provider: InputProvider,
    *,
    fast_mode: bool = False,
    clock: Callable[[], float] = time.monotonic,
) -> QuizSessionResult:
    """Play ``questions`` in the given order and collect graded answers."""

    state = QuizSessionState(list(questions))
    if not state.questions:
        console.print(
            Panel(
                "No questions selected for this session.",
                title="Quiz Session",
                border_style="yellow",
            )
        )
        return QuizSessionResult((), "empty", 0, 0)

    started = clock()
    exit_action: ExitAction = "quit"
    _render_question(console, state)
    while True:
        try:
            raw = input_provider()
        except (EOFError, KeyboardInterrupt, StopIteration):
            console.print("\n[bold yellow]Session interrupted.[/]")
            break
        command = parse_session_command(raw)
        if command is None:
            console.print("[red]Unrecognized command. Try again.[/]")
            continue
        if command.type == "quit":
            console.print(
                "\n[bold yellow]Ending session without finishing.[/]"
            )
            break
        if command.type == "select":
            if not _apply_selection(console, state, command.choice or ""):
                continue
            if not fast_mode:
                console.print(Text("Press Enter or n to continue.", "dim"))
                continue
        elif not state.current_answered():
            console.print("[red]Pick an answer before moving on.[/]")
            continue
        if not state.advance():
            exit_action = "completed"
            break
        _render_question(console, state)

    elapsed = max(0, int(round(clock() - started)))
    return QuizSessionResult(
        tuple(state.answers), exit_action, state.total_questions, elapsed
    )


def _apply_selection(
    console: Console, state: QuizSessionState, choice: str
) -> bool:
    if state.current_answered():
        console.print("[yellow]This question is already answered.[/]")
        return False
    graded = state.answer(choice)
    if graded is None:
        console.print(
            "[red]'%s' is not a valid choice for this question.[/red]"
            % choice
        )
        return False
    _render_feedback(console, state.current, graded)
    return True


def _render_question(console: Console, state: QuizSessionState) -> None:
    question = state.current
    header = Text.assemble(
        (f"Question {state.index + 1}", "bold cyan"),
        (f" / {state.total_questions}", "dim"),
    )
    console.print()
    console.rule(header)
    console.print(Text(question.question, style="bold"))

    table = Table(show_header=False, box=box.SIMPLE, expand=True)
    table.add_column("Key", justify="center", style="cyan")
    table.add_column("Choice")
    for option in question.options:
        table.add_row(option.label, Text(option.text))
    console.print(table)

    keys = ", ".join(question.labels)
    console.print(
        Text(f"Commands: choices [{keys}], q (quit)", style="dim")
    )


def _render_feedback(
    console: Console, question: QuizQuestion, answer: QuizAnswer
) -> None:
    if answer.is_correct:
        console.print(Text("Correct!", style="bold green"))
        return
    correct = question.option_for(answer.correct_answer)
    detail = f" {correct.text}" if correct else ""
    console.print(
        Text(
            f"Incorrect. The answer is {answer.correct_answer}.{detail}",
            style="bold red",
        )
    )


def render_attempt_summary(
    console: Console,
    attempt: QuizAttempt,
    *,
    wrong_only: bool = False,
) -> None:
    """Print the score, badge and per-question outcome of ``attempt``."""

    console.print()
    console.rule(Text(f"{attempt.quiz_name} - Results", style="bold magenta"))

    badge = get_badge(attempt.score)
    minutes, seconds = divmod(attempt.time_spent, 60)
    overview = Table(
        show_header=False, box=box.MINIMAL_DOUBLE_HEAD, expand=False
    )
    overview.add_column("Metric", style="bold")
    overview.add_column("Value", justify="right")
    overview.add_row("Score", f"{attempt.score}%")
    overview.add_row("Correct", str(attempt.correct_count))
    overview.add_row(
        "Wrong", str(attempt.total_questions - attempt.correct_count)
    )
    overview.add_row("Questions", str(attempt.total_questions))
    overview.add_row("Time", f"{minutes}:{seconds:02d}")
    overview.add_row("Badge", f"{badge.name} - {badge.description}")
    console.print(overview)

    answers = [
        answer
        for answer in attempt.answers
        if not (wrong_only and answer.is_correct)
    ]
    if not answers:
        return
    responses = Table(title="Answers", box=box.SIMPLE, expand=True)
    responses.add_column("#", justify="right")
    responses.add_column("Question", overflow="fold")
    responses.add_column("Your answer")
    responses.add_column("Correct answer")
    responses.add_column("Result", justify="center")
    for answer in answers:
        responses.add_row(
            str(answer.question_index + 1),
            Text(answer.question_text),
            answer.selected_answer,
            answer.correct_answer,
            "ok" if answer.is_correct else "x",
        )
    console.print(responses)
