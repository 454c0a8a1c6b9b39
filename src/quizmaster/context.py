"""Per-invocation wiring shared by the quizmaster subcommands."""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

from quizmaster.config import (
    ConfigOverrides,
    LoadResult,
    QuizmasterConfig,
    load_config,
)
from quizmaster.core.logging import configure_logger
from quizmaster.library.store import QuizStore

LOGGER_NAME = "quizmaster"


@dataclass(frozen=True)
class CommandContext:
    config: QuizmasterConfig
    load_result: LoadResult
    logger: logging.Logger
    log_path: Path
    store: QuizStore


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    """Register the options every subcommand understands."""

    parser.add_argument(
        "--config",
        type=Path,
        help=(
            "Path to a TOML config file (defaults to the workspace config "
            "directory)."
        ),
    )
    parser.add_argument(
        "--workspace",
        type=Path,
        help=(
            "Override the workspace root (defaults to QUIZMASTER_DATA_HOME "
            "or ~/.quizmaster-data)."
        ),
    )
    parser.add_argument(
        "--log-level",
        help="Set the logging level for the run (defaults to INFO).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Mirror log records to stderr.",
    )


def open_context(
    args: argparse.Namespace,
    *,
    overrides: Optional[ConfigOverrides] = None,
) -> CommandContext:
    """Load config, configure logging and open the store for ``args``.

    Raises :class:`quizmaster.config.QuizmasterConfigError` on bad config.
    """

    base = overrides or ConfigOverrides()
    if getattr(args, "log_level", None):
        base = replace(base, log_level=args.log_level)
    load_result = load_config(
        config_path=getattr(args, "config", None),
        overrides=base,
        workspace_path=getattr(args, "workspace", None),
    )
    logger, log_path = configure_logger(
        LOGGER_NAME,
        log_dir=load_result.layout.path_for("logs"),
        level=load_result.config.log_level,
        verbose=bool(getattr(args, "verbose", False)),
    )
    store = QuizStore(load_result.layout.path_for("library"), logger=logger)
    return CommandContext(
        config=load_result.config,
        load_result=load_result,
        logger=logger,
        log_path=log_path,
        store=store,
    )
