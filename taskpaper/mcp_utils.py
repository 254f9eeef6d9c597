"""Filesystem helpers for writing edited documents back."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Sequence


def _join_lines(lines: Sequence[str], newline: str) -> str:
    return newline.join(lines)


def _detect_newline(content: str) -> str:
    return "\r\n" if "\r\n" in content else "\n"


def _atomic_write(target_path: Path, content: str) -> None:
    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=target_path.parent, delete=False, newline=""
        ) as temp_file:
            temp_path = Path(temp_file.name)
            temp_file.write(content)
            temp_file.flush()
            os.fsync(temp_file.fileno())
        os.replace(temp_path, target_path)
    finally:
        if temp_path is not None and temp_path.exists():
            try:
                temp_path.unlink()
            except OSError:
                pass
