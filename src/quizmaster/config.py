"""Configuration loader shared by the quizmaster commands."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, MutableMapping, Optional

from quizmaster.core import config as core_config
from quizmaster.core import workspace as workspace_mod

CONFIG_FILENAME = "quizmaster.toml"
CONFIG_ENV = "QUIZMASTER_CONFIG"
ENV_PREFIX = "QUIZMASTER_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}

CONFIG_TEMPLATE = """\
# quizmaster configuration

[play]
# Defaults for `quizmaster play`; CLI flags override them per session.
shuffle_questions = false
shuffle_answers = true
# Advance to the next question right after answering.
fast_mode = false

[import]
# Reject documents containing questions without a declared correct answer.
strict = false

[logging]
level = "INFO"
"""


class QuizmasterConfigError(RuntimeError):
    """Raised when configuration parsing or validation fails."""


@dataclass(frozen=True)
class PlayDefaults:
    shuffle_questions: bool = False
    shuffle_answers: bool = True
    fast_mode: bool = False


@dataclass(frozen=True)
class QuizmasterConfig:
    """Fully resolved configuration for one command run."""

    play: PlayDefaults
    strict_import: bool
    log_level: str


@dataclass(frozen=True)
class ConfigOverrides:
    """CLI-sourced overrides applied on top of file/env options."""

    shuffle_questions: Optional[bool] = None
    shuffle_answers: Optional[bool] = None
    fast_mode: Optional[bool] = None
    strict_import: Optional[bool] = None
    log_level: Optional[str] = None


@dataclass(frozen=True)
class LoadResult:
    config: QuizmasterConfig
    layout: workspace_mod.WorkspaceLayout
    config_path: Optional[Path]


def load_config(
    *,
    config_path: Optional[Path] = None,
    overrides: Optional[ConfigOverrides] = None,
    env: Optional[Mapping[str, str]] = None,
    workspace_path: Optional[Path] = None,
) -> LoadResult:
    """Load configuration applying precedence CLI > env > TOML > defaults."""

    overrides = overrides or ConfigOverrides()
    env_map = os.environ if env is None else env

    try:
        layout = workspace_mod.ensure_workspace(
            env=env_map, path=workspace_path
        )
    except workspace_mod.WorkspaceError as exc:
        raise QuizmasterConfigError(str(exc)) from exc

    requested_path = _resolve_config_path(
        config_path=config_path,
        env_map=env_map,
        default_path=layout.path_for("config") / CONFIG_FILENAME,
    )

    options = _default_table()
    loaded_path: Optional[Path] = None
    if requested_path.exists():
        loaded_path = requested_path
        try:
            parsed = core_config.load_toml(requested_path)
            core_config.merge_defaults(options, parsed)
        except core_config.TomlConfigError as exc:
            raise QuizmasterConfigError(str(exc)) from exc
    elif config_path is not None or (env_map.get(CONFIG_ENV) or "").strip():
        raise QuizmasterConfigError(
            f"Config file not found: {requested_path}"
        )

    play = PlayDefaults(
        shuffle_questions=_resolve_bool(
            overrides.shuffle_questions,
            _parse_env_bool(env_map, "SHUFFLE_QUESTIONS"),
            options["play"]["shuffle_questions"],
        ),
        shuffle_answers=_resolve_bool(
            overrides.shuffle_answers,
            _parse_env_bool(env_map, "SHUFFLE_ANSWERS"),
            options["play"]["shuffle_answers"],
        ),
        fast_mode=_resolve_bool(
            overrides.fast_mode,
            _parse_env_bool(env_map, "FAST_MODE"),
            options["play"]["fast_mode"],
        ),
    )
    strict_import = _resolve_bool(
        overrides.strict_import,
        _parse_env_bool(env_map, "STRICT_IMPORT"),
        options["import"]["strict"],
    )
    log_level = _resolve_log_level(
        overrides.log_level,
        _parse_env_string(env_map, "LOG_LEVEL"),
        options["logging"]["level"],
    )

    config = QuizmasterConfig(
        play=play, strict_import=strict_import, log_level=log_level
    )
    return LoadResult(config=config, layout=layout, config_path=loaded_path)


def _default_table() -> MutableMapping[str, MutableMapping[str, object]]:
    defaults = PlayDefaults()
    return {
        "play": {
            "shuffle_questions": defaults.shuffle_questions,
            "shuffle_answers": defaults.shuffle_answers,
            "fast_mode": defaults.fast_mode,
        },
        "import": {"strict": False},
        "logging": {"level": "INFO"},
    }


def _resolve_config_path(
    *,
    config_path: Optional[Path],
    env_map: Mapping[str, str],
    default_path: Path,
) -> Path:
    if config_path is not None:
        return config_path.expanduser()
    env_candidate = (env_map.get(CONFIG_ENV) or "").strip()
    if env_candidate:
        return Path(env_candidate).expanduser()
    return default_path


def _resolve_bool(
    override: Optional[bool], env_value: Optional[bool], file_value: object
) -> bool:
    if override is not None:
        return override
    if env_value is not None:
        return env_value
    return bool(file_value)


def _resolve_log_level(
    override: Optional[str], env_value: Optional[str], file_value: object
) -> str:
    candidate = override or env_value or file_value
    if not isinstance(candidate, str) or not candidate.strip():
        raise QuizmasterConfigError(
            "logging.level must be a non-empty string."
        )
    return candidate.strip().upper()


def _parse_env_bool(env_map: Mapping[str, str], key: str) -> Optional[bool]:
    raw = _parse_env_string(env_map, key)
    if raw is None:
        return None
    lowered = raw.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise QuizmasterConfigError(
        f"{ENV_PREFIX}{key} must be a boolean (true/false), got '{raw}'."
    )


def _parse_env_string(env_map: Mapping[str, str], key: str) -> Optional[str]:
    raw = env_map.get(f"{ENV_PREFIX}{key}")
    if raw is None:
        return None
    value = raw.strip()
    return value or None
