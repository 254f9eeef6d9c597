"""Task views: all, completed, today and week."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Iterable

from taskpaper.index import DocumentIndex, TaskNode, forest_to_dict
from taskpaper.parser import Tag, TaskLine

TAG_DATE_PATTERN = re.compile(
    r"^\s*(?P<year>[0-9]{4})(?P<sep>[/-])(?P<month>[0-9]{1,2})(?P=sep)(?P<day>[0-9]{1,2})\s*$"
)
DATE_TAG_NAMES = {"due", "on"}
TODAY_TAG_NAME = "today"
WEEK_WINDOW_DAYS = 7


class ViewMode(str, Enum):
    ALL = "all"
    COMPLETED = "completed"
    TODAY = "today"
    WEEK = "week"


@dataclass(frozen=True)
class ViewResult:
    mode: ViewMode
    tasks: tuple[TaskLine, ...]
    forest: tuple[TaskNode, ...] = ()

    @property
    def count(self) -> int:
        return len(self.tasks)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "mode": self.mode.value,
            "count": self.count,
            "tasks": [task.to_dict() for task in self.tasks],
        }
        if self.mode is ViewMode.ALL:
            payload["forest"] = forest_to_dict(self.forest)
        return payload


def parse_tag_date(value: str | None) -> date | None:
    """Parse ``YYYY-MM-DD`` or ``YYYY/MM/DD``; ``None`` when unparseable."""
    if value is None:
        return None
    match = TAG_DATE_PATTERN.match(value)
    if not match:
        return None
    try:
        return date(
            int(match.group("year")),
            int(match.group("month")),
            int(match.group("day")),
        )
    except ValueError:
        return None


def _window_end(mode: ViewMode, today: date) -> date:
    if mode is ViewMode.WEEK:
        return today + timedelta(days=WEEK_WINDOW_DAYS)
    return today


def _tag_in_window(tag: Tag, task: TaskLine, today: date, window_end: date) -> bool:
    if tag.name == TODAY_TAG_NAME:
        return True
    if tag.name not in DATE_TAG_NAMES:
        return False
    tag_date = parse_tag_date(tag.value)
    if tag_date is None:
        return False
    if task.completed:
        return today <= tag_date <= window_end
    return tag_date <= window_end


def _scheduled(
    tasks: Iterable[TaskLine], mode: ViewMode, now: datetime
) -> tuple[TaskLine, ...]:
    today = now.date()
    window_end = _window_end(mode, today)
    return tuple(
        task
        for task in tasks
        if not task.cancelled
        and any(_tag_in_window(tag, task, today, window_end) for tag in task.tags)
    )


def filter_view(index: DocumentIndex, mode: ViewMode, now: datetime) -> ViewResult:
    """Derive one view from the flat task list."""
    tasks = index.tasks
    match mode:
        case ViewMode.ALL:
            return ViewResult(mode, tasks, index.forest)
        case ViewMode.COMPLETED:
            return ViewResult(mode, tuple(task for task in tasks if task.completed))
        case ViewMode.TODAY | ViewMode.WEEK:
            return ViewResult(mode, _scheduled(tasks, mode, now))
    raise ValueError(f"Unknown view mode: {mode!r}")


def build_views(index: DocumentIndex, now: datetime) -> dict[ViewMode, ViewResult]:
    return {mode: filter_view(index, mode, now) for mode in ViewMode}
