from __future__ import annotations

import json
from pathlib import Path

import pytest
from rich.console import Console

from fixtures import ASTERISK_QUIZ, DEFAULT_QUIZ, make_quiz

from quizmaster.bank.errors import DependencyError
from quizmaster.bank.extract import ExtractorDependencies
from quizmaster.library import cli
from quizmaster.library.store import QuizStore


def make_console() -> Console:
    return Console(record=True, width=120, force_terminal=True)


@pytest.fixture
def store(data_home) -> QuizStore:
    return QuizStore(data_home / "library")


def test_import_saves_quizzes(store, workspace, capsys):
    first = workspace.write("arith.txt", DEFAULT_QUIZ)
    second = workspace.write("bio.docx", b"PK")
    deps = ExtractorDependencies(markitdown=lambda _: ASTERISK_QUIZ)

    code = cli.import_main([str(first), str(second)], dependencies=deps)

    assert code == 0
    out = capsys.readouterr().out
    assert "Imported 'Arithmetic' (3 questions, default format)" in out
    assert "Imported 'bio' (2 questions, asterisk_marked format)" in out
    assert sorted(quiz.name for quiz in store.list_quizzes()) == [
        "Arithmetic",
        "bio",
    ]


def test_import_reports_failures_and_continues(store, workspace, capsys):
    good = workspace.write("good.txt", DEFAULT_QUIZ)
    bad = workspace.write("notes.md", "# QUIZ: nope")
    empty = workspace.write("empty.txt", "# QUIZ: Empty\n")

    code = cli.import_main([str(bad), str(empty), str(good)])

    assert code == 1
    err = capsys.readouterr().err
    assert "notes.md: Unsupported file format: md." in err
    assert "empty.txt: No valid questions found." in err
    assert [quiz.name for quiz in store.list_quizzes()] == ["Arithmetic"]


def test_import_skips_unreadable_sources(store, workspace, capsys):
    good = workspace.write("good.txt", DEFAULT_QUIZ)
    missing = good.parent / "missing.txt"
    docx = workspace.write("slides.docx", b"PK")

    def unavailable(_source):
        raise DependencyError("markitdown is not installed")

    deps = ExtractorDependencies(markitdown=unavailable)
    code = cli.import_main(
        [str(missing), str(docx), str(good)], dependencies=deps
    )

    assert code == 1
    err = capsys.readouterr().err
    assert "missing.txt: Source file not found" in err
    assert "slides.docx: markitdown is not installed" in err
    assert [quiz.name for quiz in store.list_quizzes()] == ["Arithmetic"]


def test_import_strict_rejects_undeclared_answers(store, workspace, capsys):
    path = workspace.write("loose.txt", "# QUIZ: Loose\nQ1: q\nA) a\nB) b\n")

    code = cli.import_main([str(path), "--strict"])

    assert code == 1
    assert "No correct answer declared" in capsys.readouterr().err
    assert store.list_quizzes() == []


def test_import_lenient_logs_warning(store, data_home, workspace):
    path = workspace.write("loose.txt", "# QUIZ: Loose\nQ1: q\nA) a\nB) b\n")

    code = cli.import_main([str(path)])

    assert code == 0
    log_path = data_home / "logs" / "quizmaster.log"
    records = [
        json.loads(line)
        for line in log_path.read_text(encoding="utf-8").splitlines()
    ]
    warnings = [record for record in records if record["level"] == "WARNING"]
    assert warnings[0]["extra"]["question_ids"] == [1]


def test_list_shows_quizzes(store):
    store.save_quiz(make_quiz("abcdef123456", name="Capitals", count=4))
    console = make_console()

    code = cli.list_main([], console=console)

    assert code == 0
    rendered = console.export_text()
    assert "abcdef12" in rendered
    assert "Capitals" in rendered


def test_list_empty_library(store):
    console = make_console()

    assert cli.list_main([], console=console) == 0
    assert "No quizzes imported yet" in console.export_text()


def test_show_marks_answers(store):
    store.save_quiz(make_quiz("abc", name="Capitals", count=2))
    console = make_console()

    code = cli.show_main(["abc", "--answers"], console=console)

    assert code == 0
    rendered = console.export_text()
    assert "Capitals (2 questions)" in rendered
    assert "*A) Option A" in rendered
    assert " B) Option B" in rendered


def test_show_unknown_quiz(store, capsys):
    assert cli.show_main(["nope"], console=make_console()) == 1
    assert "Quiz not found: nope" in capsys.readouterr().err


def test_delete_removes_quiz(store, capsys):
    store.save_quiz(make_quiz("abc", name="Capitals"))

    code = cli.delete_main(["abc"])

    assert code == 0
    assert "Deleted 'Capitals'" in capsys.readouterr().out
    assert store.get_quiz("abc") is None
    assert cli.delete_main(["abc"]) == 1


def test_ambiguous_prefix_is_reported(store, capsys):
    store.save_quiz(make_quiz("abc1"))
    store.save_quiz(make_quiz("abc2"))

    assert cli.delete_main(["abc"]) == 1
    assert "matches 2 quizzes" in capsys.readouterr().err


def test_stats_reports_totals(store):
    store.update_user_stats(3, 4)
    console = make_console()

    code = cli.stats_main([], console=console)

    assert code == 0
    rendered = console.export_text()
    assert "Quizzes taken" in rendered
    assert "75.0%" in rendered


def test_config_file_controls_strict_import(store, data_home, workspace):
    config = workspace.write(
        "custom.toml", "[import]\nstrict = true\n"
    )
    path = workspace.write("loose.txt", "# QUIZ: Loose\nQ1: q\nA) a\n")

    code = cli.import_main([str(path), "--config", str(config)])

    assert code == 1
    assert store.list_quizzes() == []


def test_missing_config_file_is_a_usage_error(store, tmp_path):
    with pytest.raises(SystemExit) as exc_info:
        cli.list_main(["--config", str(tmp_path / "absent.toml")])

    assert exc_info.value.code == 2


def test_import_requires_paths(store):
    with pytest.raises(SystemExit):
        cli.import_main([])


def test_workspace_flag_overrides_env(tmp_path, data_home, workspace):
    path = workspace.write("arith.txt", DEFAULT_QUIZ)
    other = tmp_path / "other-home"

    assert cli.import_main([str(path), "--workspace", str(other)]) == 0

    assert QuizStore(other / "library").list_quizzes()
    assert not Path(data_home / "library" / "quizzes.jsonl").exists()
