"""File helpers shared across quizmaster modules."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Sequence

__all__ = [
    "read_text_file",
    "read_jsonl",
    "write_json",
    "write_jsonl",
]


def read_text_file(path: Path) -> str:
    """Read a text file as UTF-8 with replacement for decode errors."""
    with Path(path).open("r", encoding="utf-8-sig", errors="replace") as fh:
        return fh.read()


def read_jsonl(path: Path) -> List[dict]:
    data: List[dict] = []
    with Path(path).open("r", encoding="utf-8") as fh:
        for line in fh:
            line = line.strip()
            if not line:
                continue
            data.append(json.loads(line))
    return data


def write_jsonl(path: Path, records: Sequence[dict]) -> None:
    """Rewrite ``path`` with one JSON document per line."""
    lines = [json.dumps(rec, ensure_ascii=False) + "\n" for rec in records]
    _replace_atomically(Path(path), "".join(lines))


def write_json(path: Path, data: dict) -> None:
    """Rewrite ``path`` with a single indented JSON document."""
    _replace_atomically(Path(path), json.dumps(data, indent=2) + "\n")


def _replace_atomically(path: Path, text: str) -> None:
    # Written next to the target and moved into place so a crash mid-write
    # never leaves a truncated file behind.
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(path.name + ".tmp")
    tmp.write_text(text, encoding="utf-8")
    tmp.replace(path)
