"""Unified CLI entry point for quizmaster."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from importlib import import_module, metadata
from typing import Callable, Mapping, Optional, Sequence


CommandHandler = Callable[[Sequence[str]], int]


@dataclass(frozen=True)
class CommandSpec:
    """Represents a quizmaster subcommand."""

    name: str
    summary: str
    handler: Optional[CommandHandler] = None
    is_interactive: bool = False


def _module_command(module_name: str, func_name: str) -> CommandHandler:
    return lambda argv: _run_module_command(module_name, func_name, argv)


_LIBRARY = "quizmaster.library.cli"

_COMMAND_SPECS: Sequence[CommandSpec] = (
    CommandSpec(
        name="init",
        summary="Bootstrap the workspace and a starter config file.",
        handler=_module_command("quizmaster.workspace.cli", "main"),
    ),
    CommandSpec(
        name="import",
        summary="Parse quiz documents and add them to the library.",
        handler=_module_command(_LIBRARY, "import_main"),
    ),
    CommandSpec(
        name="list",
        summary="List the quizzes in the library.",
        handler=_module_command(_LIBRARY, "list_main"),
    ),
    CommandSpec(
        name="show",
        summary="Print the questions of a stored quiz.",
        handler=_module_command(_LIBRARY, "show_main"),
    ),
    CommandSpec(
        name="play",
        summary="Play a stored quiz in the terminal.",
        is_interactive=True,
        handler=_module_command("quizmaster.quizzer.cli", "main"),
    ),
    CommandSpec(
        name="delete",
        summary="Delete a quiz and its recorded attempts.",
        handler=_module_command(_LIBRARY, "delete_main"),
    ),
    CommandSpec(
        name="stats",
        summary="Show overall statistics and recent attempts.",
        handler=_module_command(_LIBRARY, "stats_main"),
    ),
)


COMMANDS: Mapping[str, CommandSpec] = {
    spec.name: spec for spec in _COMMAND_SPECS
}


def _command_name_width() -> int:
    return max(len(spec.name) for spec in _COMMAND_SPECS) if COMMANDS else 0


def format_command_table() -> str:
    """Return a formatted command table for help output."""

    width = _command_name_width()
    lines = ["Available commands:"]
    for spec in _COMMAND_SPECS:
        name = spec.name.ljust(width)
        suffix = " (interactive)" if spec.is_interactive else ""
        lines.append(f"  {name}  {spec.summary}{suffix}")
    return "\n".join(lines)


def format_usage() -> str:
    """Build the top-level usage banner with command listings."""

    parts = [
        "Usage: quizmaster <command> [args...]",
        "Run `quizmaster list-commands` for commands or "
        "`quizmaster help <name>` for details.",
        "",
        format_command_table(),
    ]
    return "\n".join(parts)


def _print(
    text: str, *, stream: Optional[Callable[[str], None]] = None
) -> None:
    target = stream if stream is not None else sys.stdout.write
    if text:
        target(text + "\n")


def _handle_list_commands() -> int:
    _print(format_command_table())
    return 0


def _handle_version() -> int:
    try:
        version = metadata.version("quizmaster")
    except metadata.PackageNotFoundError:
        version = "unknown"
    _print(version)
    return 0


def _handle_help(argv: Sequence[str]) -> int:
    if not argv:
        _print(format_usage())
        return 0

    command = argv[0]
    spec = COMMANDS.get(command)
    if not spec:
        _print(f"Unknown command '{command}'.", stream=sys.stderr.write)
        _print(format_command_table(), stream=sys.stderr.write)
        return 2

    _print(f"{spec.name}: {spec.summary}")
    _print(f"Run `quizmaster {spec.name} --help` for command options.")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(argv if argv is not None else sys.argv[1:])

    if not args:
        _print(format_usage())
        return 2

    head, *tail = args

    if head in ("-h", "--help"):
        _print(format_usage())
        return 0

    if head in ("-V", "--version", "version"):
        return _handle_version()

    if head == "list-commands":
        return _handle_list_commands()

    if head == "help":
        return _handle_help(tail)

    spec = COMMANDS.get(head)
    if spec and spec.handler:
        return spec.handler(tail)

    _print(f"Unknown command '{head}'.", stream=sys.stderr.write)
    _print(format_command_table(), stream=sys.stderr.write)
    return 2


def _run_module_command(
    module_name: str, func_name: str, argv: Sequence[str]
) -> int:
    module = import_module(module_name)
    return _invoke_main(getattr(module, func_name), argv)


def _invoke_main(func: CommandHandler, argv: Sequence[str]) -> int:
    """Call a subcommand ``main`` turning argparse exits into return codes."""

    try:
        return func(list(argv))
    except SystemExit as exc:
        return _normalize_system_exit(exc)


def _normalize_system_exit(exc: SystemExit) -> int:
    code = exc.code
    if code is None:
        return 0
    if isinstance(code, int):
        return code
    _print(str(code), stream=sys.stderr.write)
    return 1


if __name__ == "__main__":  # pragma: no cover - manual invocation guard
    raise SystemExit(main())
