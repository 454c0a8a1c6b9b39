"""Plain-text extraction for uploaded quiz documents."""

from __future__ import annotations

import importlib
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional

from quizmaster.core.files import read_text_file

from .errors import (
    DependencyError,
    ExtractionError,
    QuizError,
    UnsupportedFileFormat,
)

__all__ = [
    "SUPPORTED_EXTENSIONS",
    "ExtractorDependencies",
    "build_default_dependencies",
    "extract_text",
    "unescape_markdown",
]

SUPPORTED_EXTENSIONS: frozenset[str] = frozenset({"txt", "docx", "pdf"})

# Markdown converters escape characters the quiz formats rely on (``*A)``,
# ``1.``, ``=====#``); these are undone before parsing.
_MARKDOWN_ESCAPE = re.compile(r"\\([\\`*_{}\[\]()#+\-.!=|<>~])")


@dataclass(frozen=True)
class ExtractorDependencies:
    """Callable seam for converting binary documents into text."""

    markitdown: Callable[[Path], str]


def extract_text(
    path: Path, *, dependencies: Optional[ExtractorDependencies] = None
) -> str:
    """Return the full text of ``path``.

    ``.txt`` files are read directly; ``.docx`` and ``.pdf`` go through the
    markitdown backend. The extension is checked before the file is touched.
    """

    source = Path(path)
    extension = source.suffix.lstrip(".").lower()
    if extension not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFileFormat(extension)
    if not source.is_file():
        raise ExtractionError(f"Source file not found: {source}")

    if extension == "txt":
        return read_text_file(source)

    deps = dependencies or build_default_dependencies()
    try:
        converted = deps.markitdown(source)
    except QuizError:
        raise
    except Exception as exc:
        raise ExtractionError(
            f"Failed to extract text from {source.name}: {exc}"
        ) from exc
    return unescape_markdown(converted)


def unescape_markdown(text: str) -> str:
    return _MARKDOWN_ESCAPE.sub(r"\1", text)


def build_default_dependencies() -> ExtractorDependencies:
    """Return the markitdown-backed conversion seam."""

    module = _import_module("markitdown", "MarkItDown")
    engine = getattr(module, "MarkItDown")()

    def convert_with_markitdown(source: Path) -> str:
        result = engine.convert(str(source))
        text = _coerce_text_result(result)
        if text is None:
            raise DependencyError(
                "markitdown returned an unsupported response; "
                "expected text content."
            )
        return text

    return ExtractorDependencies(markitdown=convert_with_markitdown)


def _import_module(module: str, required_attribute: str):
    try:
        imported = importlib.import_module(module)
    except ImportError as exc:
        raise DependencyError(
            f"Dependency '{module}' is required to read .docx and .pdf "
            'files. Install it with `pip install "markitdown[docx,pdf]"`.'
        ) from exc
    if not hasattr(imported, required_attribute):
        raise DependencyError(
            f"Dependency '{module}' is installed but missing the "
            f"'{required_attribute}' attribute. Upgrade or reinstall the "
            "package."
        )
    return imported


def _coerce_text_result(result: Any) -> Optional[str]:
    for attribute in ("markdown", "text_content"):
        value = getattr(result, attribute, None)
        if isinstance(value, str):
            return value
    if isinstance(result, str):
        return result
    return None
