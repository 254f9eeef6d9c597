"""Offset-based text edits for tags and task status."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Sequence

from taskpaper.parser import (
    STATUS_COMPLETED,
    STATUS_OPEN,
    TAG_NAME_PATTERN,
    TASK_LINE_PATTERN,
    Tag,
    TaskLine,
)


@dataclass(frozen=True)
class TextEdit:
    """Replace ``[start, end)`` on ``line`` with ``new_text``."""

    line: int
    start: int
    end: int
    new_text: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "line": self.line,
            "start": self.start,
            "end": self.end,
            "newText": self.new_text,
        }


def format_tag(name: str, value: str | None = None) -> str:
    if not isinstance(name, str) or not TAG_NAME_PATTERN.fullmatch(name):
        raise ValueError(f"Invalid tag name: {name!r}")
    if value and ")" in value:
        raise ValueError("Tag values cannot contain ')'.")
    return f"@{name}({value})" if value else f"@{name}"


def add_tag(line: str, line_number: int, name: str, value: str | None = None) -> TextEdit:
    """Append `` @name`` or `` @name(value)`` at the end of the line."""
    end_of_line = len(line.rstrip("\r\n"))
    return TextEdit(line_number, end_of_line, end_of_line, " " + format_tag(name, value))


def remove_tag(line: str, task: TaskLine, tag: Tag) -> TextEdit:
    """Delete a tag, taking one preceding space with it when present."""
    start, end = tag.line_range(task.prefix_length)
    if start > 0 and line[start - 1] == " ":
        start -= 1
    return TextEdit(task.line_number, start, end, "")


def toggle_completion(line: str, line_number: int) -> TextEdit | None:
    """Flip a task's status: open becomes done, done or cancelled reopens."""
    match = TASK_LINE_PATTERN.match(line.rstrip("\r\n"))
    if not match:
        return None
    status = match.group("status")
    new_status = STATUS_COMPLETED if status == STATUS_OPEN else STATUS_OPEN
    offset = match.start("status")
    return TextEdit(line_number, offset, offset + 1, new_status)


def search_query(name: str) -> str:
    """Query string the host's text search should look for."""
    return "@" + name


def apply_edits(lines: Sequence[str], edits: Iterable[TextEdit]) -> list[str]:
    """Apply non-overlapping edits and return the new lines."""
    updated = list(lines)
    by_line: dict[int, list[TextEdit]] = {}
    for edit in edits:
        if not 0 <= edit.line < len(updated):
            raise ValueError(f"Edit line {edit.line} is out of range.")
        by_line.setdefault(edit.line, []).append(edit)

    for line_number, line_edits in by_line.items():
        text = updated[line_number]
        boundary = len(text)
        for edit in sorted(line_edits, key=lambda item: (item.start, item.end), reverse=True):
            if edit.start > edit.end or edit.end > boundary:
                raise ValueError(f"Overlapping or invalid edit on line {line_number}.")
            text = text[: edit.start] + edit.new_text + text[edit.end :]
            boundary = edit.start
        updated[line_number] = text
    return updated
