"""Shared TOML configuration helpers for quizmaster commands."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any, Mapping, MutableMapping

__all__ = [
    "TomlConfigError",
    "load_toml",
    "merge_defaults",
    "write_toml_template",
]

# Checked in order: bool is a subclass of int.
_SCALAR_NAMES = ((bool, "boolean"), (int, "integer"), (str, "string"))


class TomlConfigError(RuntimeError):
    """Raised when a config document cannot be read, parsed or applied."""


def load_toml(path: Path) -> Mapping[str, Any]:
    """Parse the TOML document at ``path``.

    Missing files and syntax errors both surface as :class:`TomlConfigError`.
    """

    try:
        raw = path.read_bytes()
    except FileNotFoundError as exc:
        raise TomlConfigError(f"Config file not found: {path}") from exc
    try:
        return tomllib.loads(raw.decode("utf-8"))
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as exc:
        raise TomlConfigError(f"Failed to parse config TOML: {exc}") from exc


def merge_defaults(
    base: MutableMapping[str, Any],
    override: Mapping[str, Any],
    *,
    path: str = "",
) -> None:
    """Apply ``override`` onto the defaults table ``base`` in place.

    Keys absent from ``base`` are rejected, tables must stay tables and
    scalar values must keep the type of their default.
    """

    for key, value in override.items():
        dotted = path + key
        if key not in base:
            raise TomlConfigError(f"Unknown configuration key '{dotted}'.")
        default = base[key]
        if isinstance(default, MutableMapping):
            if not isinstance(value, Mapping):
                raise _type_error(dotted, "table", value)
            merge_defaults(default, value, path=dotted + ".")
            continue
        expected = _scalar_name(default)
        if expected is not None and _scalar_name(value) != expected:
            raise _type_error(dotted, expected, value)
        base[key] = value


def write_toml_template(
    path: Path,
    *,
    template: str,
    overwrite: bool = False,
    mode: int = 0o600,
) -> Path:
    """Write ``template`` to ``path``, refusing to clobber unless asked."""

    if path.exists() and not overwrite:
        raise TomlConfigError(f"Config already exists: {path}")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(template, encoding="utf-8")
    try:
        path.chmod(mode)
    except PermissionError:  # pragma: no cover - depends on filesystem
        pass
    return path


def _scalar_name(value: Any) -> str | None:
    for kind, name in _SCALAR_NAMES:
        if isinstance(value, kind):
            return name
    return None


def _type_error(dotted: str, expected: str, value: Any) -> TomlConfigError:
    return TomlConfigError(
        f"Expected {expected} for '{dotted}', found {type(value).__name__}."
    )
