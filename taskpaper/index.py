"""Flat entry list and heading-rooted task forest for one document."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

from taskpaper.parser import EntryKind, TaskLine, classify_line

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaskNode:
    entry: TaskLine
    children: tuple[TaskNode, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        payload = self.entry.to_dict()
        payload["children"] = [child.to_dict() for child in self.children]
        return payload


@dataclass
class _PendingNode:
    entry: TaskLine
    children: list[_PendingNode] = field(default_factory=list)


@dataclass(frozen=True)
class DocumentIndex:
    entries: tuple[TaskLine, ...] = ()
    forest: tuple[TaskNode, ...] = ()

    @property
    def tasks(self) -> tuple[TaskLine, ...]:
        return tuple(entry for entry in self.entries if entry.is_task)


def classify_lines(lines: Sequence[str]) -> list[TaskLine]:
    """Classify every line in order, keeping only tasks and headers."""
    entries: list[TaskLine] = []
    position = 0
    while position < len(lines):
        entry, consumed = classify_line(lines, position)
        position += consumed
        match entry.kind:
            case EntryKind.TASK | EntryKind.HEADER:
                entries.append(entry)
            case EntryKind.PLAIN:
                continue
    return entries


def build_forest(entries: Sequence[TaskLine]) -> list[TaskNode]:
    """Nest entries under their headings and prune task-less subtrees.

    A header of level L closes every open header of level >= L. Tasks attach
    to the innermost open header, or to the root when none is open.
    """
    roots: list[_PendingNode] = []
    stack: list[tuple[_PendingNode, int]] = []

    for entry in entries:
        node = _PendingNode(entry)
        match entry.kind:
            case EntryKind.HEADER:
                level = entry.header_level or 1
                while stack and stack[-1][1] >= level:
                    stack.pop()
                _attach(node, stack, roots)
                stack.append((node, level))
            case EntryKind.TASK:
                _attach(node, stack, roots)
            case EntryKind.PLAIN:
                continue

    pruned = (_prune(root) for root in roots)
    return [node for node in pruned if node is not None]


def _attach(
    node: _PendingNode,
    stack: list[tuple[_PendingNode, int]],
    roots: list[_PendingNode],
) -> None:
    if stack:
        stack[-1][0].children.append(node)
    else:
        roots.append(node)


def _prune(node: _PendingNode) -> TaskNode | None:
    match node.entry.kind:
        case EntryKind.TASK:
            return TaskNode(node.entry)
        case EntryKind.HEADER:
            children = tuple(
                child
                for child in (_prune(pending) for pending in node.children)
                if child is not None
            )
            if not children:
                return None
            return TaskNode(node.entry, children)
        case EntryKind.PLAIN:
            return None


def build_index(lines: Sequence[str]) -> DocumentIndex:
    entries = classify_lines(lines)
    forest = build_forest(entries)
    logger.debug(
        "Indexed %d lines into %d entries and %d root nodes",
        len(lines),
        len(entries),
        len(forest),
    )
    return DocumentIndex(entries=tuple(entries), forest=tuple(forest))


def forest_to_dict(forest: Sequence[TaskNode]) -> list[dict[str, Any]]:
    return [node.to_dict() for node in forest]
