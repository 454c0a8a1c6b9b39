"""CLI entry point for bootstrapping the quizmaster workspace."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

from quizmaster.config import CONFIG_FILENAME, CONFIG_TEMPLATE
from quizmaster.core import config as core_config
from quizmaster.core import workspace as workspace_mod


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quizmaster init",
        description=(
            "Bootstrap the quizmaster workspace, its subdirectories and a "
            "starter config file."
        ),
    )
    parser.add_argument(
        "--path",
        type=Path,
        help=(
            "Override the workspace root (defaults to QUIZMASTER_DATA_HOME "
            "or ~/.quizmaster-data)."
        ),
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing quizmaster.toml with the template.",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress informational output on success.",
    )
    return parser


def _write_config(path: Path, *, force: bool) -> str:
    """Write the starter config unless one is already in place."""

    if path.exists() and not force:
        return "exists"
    core_config.write_toml_template(
        path, template=CONFIG_TEMPLATE, overwrite=force
    )
    return "written"


def _report(
    layout: workspace_mod.WorkspaceLayout, config_path: Path, config_status: str
) -> list[str]:
    def status(key: str) -> str:
        return "created" if layout.created.get(key, False) else "exists"

    lines = [f"Workspace ready at {layout.home} ({status('home')})"]
    for name, directory in layout.items():
        lines.append(f"  {name + ':':<10} {directory} ({status(name)})")
    lines.append(f"Config: {config_path} ({config_status})")
    return lines


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        layout = workspace_mod.ensure_workspace(path=args.path)
        config_path = layout.path_for("config") / CONFIG_FILENAME
        config_status = _write_config(config_path, force=args.force)
    except (
        workspace_mod.WorkspaceError,
        core_config.TomlConfigError,
        OSError,
    ) as exc:
        sys.stderr.write(f"{exc}\n")
        return 1

    if not args.quiet:
        lines = _report(layout, config_path, config_status)
        sys.stdout.write("\n".join(lines) + "\n")
    return 0


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
