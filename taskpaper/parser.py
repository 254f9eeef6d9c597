"""Line classification for checkbox tasks and markdown headings."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Sequence

TASK_LINE_PATTERN = re.compile(
    r"^(?P<indent>\s*)-\s*\[(?P<status>[ x\-])\](?!\])\s*(?P<content>.*)$"
)
TAG_PATTERN = re.compile(r"@(?P<name>[A-Za-z0-9_]+)(?:\((?P<value>[^)]+)\))?")
TAG_NAME_PATTERN = re.compile(r"[A-Za-z0-9_]+")
ATX_HEADER_PATTERN = re.compile(r"^(?P<indent>\s*)(?P<marks>#+)\s+(?P<title>\S.*?)\s*$")
SETEXT_UNDERLINE_PATTERN = re.compile(r"^\s*(?P<rule>=+|-+)\s*$")

STATUS_OPEN = " "
STATUS_COMPLETED = "x"
STATUS_CANCELLED = "-"


class EntryKind(str, Enum):
    TASK = "task"
    HEADER = "header"
    PLAIN = "plain"


@dataclass(frozen=True)
class Tag:
    """An inline ``@name`` or ``@name(value)`` annotation.

    ``start`` and ``end`` are offsets into the task's content, not the raw
    line. Use :meth:`line_range` with the owning entry's ``prefix_length``
    to get offsets into the line.
    """

    name: str
    value: str | None
    start: int
    end: int

    @property
    def range(self) -> tuple[int, int]:
        return self.start, self.end

    def line_range(self, prefix_length: int) -> tuple[int, int]:
        return self.start + prefix_length, self.end + prefix_length

    def to_dict(self, prefix_length: int | None = None) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "name": self.name,
            "value": self.value,
            "range": [self.start, self.end],
        }
        if prefix_length is not None:
            payload["lineRange"] = list(self.line_range(prefix_length))
        return payload


@dataclass(frozen=True)
class TaskLine:
    """One classified line: a task, a header or plain text."""

    kind: EntryKind
    text: str
    line_number: int
    indentation: int = 0
    prefix_length: int = 0
    header_level: int | None = None
    completed: bool = False
    cancelled: bool = False
    tags: tuple[Tag, ...] = field(default_factory=tuple)

    @property
    def is_task(self) -> bool:
        return self.kind is EntryKind.TASK

    @property
    def is_header(self) -> bool:
        return self.kind is EntryKind.HEADER

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "text": self.text,
            "lineNumber": self.line_number,
            "indentation": self.indentation,
            "isTask": self.is_task,
            "isHeader": self.is_header,
            "headerLevel": self.header_level,
            "completed": self.completed,
            "cancelled": self.cancelled,
            "tags": [tag.to_dict(self.prefix_length) for tag in self.tags],
        }


def _strip_line_ending(line: str) -> str:
    return line.rstrip("\r\n")


def _leading_whitespace(line: str) -> int:
    return len(line) - len(line.lstrip())


def parse_tags(content: str) -> tuple[Tag, ...]:
    """Extract tags from task content in order of appearance."""
    return tuple(
        Tag(
            name=match.group("name"),
            value=match.group("value"),
            start=match.start(),
            end=match.end(),
        )
        for match in TAG_PATTERN.finditer(content)
    )


def parse(line: str, line_number: int) -> TaskLine | None:
    """Return a task entry for a checkbox line, or ``None``."""
    match = TASK_LINE_PATTERN.match(_strip_line_ending(line))
    if not match:
        return None

    status = match.group("status")
    content = match.group("content")
    return TaskLine(
        kind=EntryKind.TASK,
        text=content,
        line_number=line_number,
        indentation=len(match.group("indent")),
        prefix_length=match.start("content"),
        completed=status == STATUS_COMPLETED,
        cancelled=status == STATUS_CANCELLED,
        tags=parse_tags(content),
    )


def _setext_level(next_line: str | None) -> int | None:
    if next_line is None:
        return None
    match = SETEXT_UNDERLINE_PATTERN.match(_strip_line_ending(next_line))
    if not match:
        return None
    return 1 if match.group("rule").startswith("=") else 2


def detect_header(
    line: str, next_line: str | None, line_number: int
) -> tuple[TaskLine | None, int]:
    """Classify ``line`` as an ATX or Setext heading.

    Returns the header entry (or ``None``) and the number of lines consumed.
    A Setext match consumes the underline as well, so the count is 2.
    Callers must try :func:`parse` first; task lines are never headings.
    """
    stripped = _strip_line_ending(line)

    match = ATX_HEADER_PATTERN.match(stripped)
    if match:
        title = re.sub(r"\s+#+$", "", match.group("title"))
        return (
            TaskLine(
                kind=EntryKind.HEADER,
                text=title,
                line_number=line_number,
                indentation=len(match.group("indent")),
                prefix_length=match.start("title"),
                header_level=len(match.group("marks")),
            ),
            1,
        )

    if not stripped.strip() or SETEXT_UNDERLINE_PATTERN.match(stripped):
        return None, 1

    level = _setext_level(next_line)
    if level is None:
        return None, 1

    indentation = _leading_whitespace(stripped)
    return (
        TaskLine(
            kind=EntryKind.HEADER,
            text=stripped.strip(),
            line_number=line_number,
            indentation=indentation,
            prefix_length=indentation,
            header_level=level,
        ),
        2,
    )


def plain_entry(line: str, line_number: int) -> TaskLine:
    stripped = _strip_line_ending(line)
    return TaskLine(
        kind=EntryKind.PLAIN,
        text=stripped,
        line_number=line_number,
        indentation=_leading_whitespace(stripped),
    )


def classify_line(lines: Sequence[str], position: int) -> tuple[TaskLine, int]:
    """Classify ``lines[position]`` (task, then header, then plain).

    Returns the entry and how many lines it consumed.
    """
    line = lines[position]
    task = parse(line, position)
    if task is not None:
        return task, 1

    next_line = lines[position + 1] if position + 1 < len(lines) else None
    header, consumed = detect_header(line, next_line, position)
    if header is not None:
        return header, consumed

    return plain_entry(line, position), 1
