from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterator

import pytest

TESTS_DIR = Path(__file__).resolve().parent
ROOT = TESTS_DIR.parent
for extra in (TESTS_DIR, ROOT / "src"):
    path_str = str(extra)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)

from fixtures import WorkspaceBuilder  # noqa: E402

from quizmaster.context import LOGGER_NAME  # noqa: E402
from quizmaster.core.logging import close_logger  # noqa: E402


@pytest.fixture
def workspace(tmp_path: Path) -> WorkspaceBuilder:
    """Provide a helper bound to pytest's per-test tmp directory."""

    return WorkspaceBuilder(tmp_path)


@pytest.fixture
def data_home(tmp_path: Path, monkeypatch) -> Path:
    """Point the quizmaster workspace at an isolated tmp directory."""

    home = tmp_path / "data-home"
    monkeypatch.setenv("QUIZMASTER_DATA_HOME", str(home))
    for key in (
        "QUIZMASTER_CONFIG",
        "QUIZMASTER_SHUFFLE_QUESTIONS",
        "QUIZMASTER_SHUFFLE_ANSWERS",
        "QUIZMASTER_FAST_MODE",
        "QUIZMASTER_STRICT_IMPORT",
        "QUIZMASTER_LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)
    return home


@pytest.fixture(autouse=True)
def _close_command_logger() -> Iterator[None]:
    yield
    close_logger(logging.getLogger(LOGGER_NAME))
