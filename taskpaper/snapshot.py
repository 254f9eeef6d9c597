"""One synchronous pipeline run and the per-document published snapshots."""

from __future__ import annotations

import logging
import re
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Sequence

from taskpaper.decorations import LineRange, ranges_to_dict, resolve_done_ranges
from taskpaper.index import DocumentIndex, build_index, forest_to_dict
from taskpaper.views import ViewMode, ViewResult, build_views

logger = logging.getLogger(__name__)

_LINE_BREAK = re.compile(r"\r?\n")


def split_lines(content: str) -> list[str]:
    return _LINE_BREAK.split(content)


@dataclass(frozen=True)
class DocumentSnapshot:
    now: datetime
    lines: tuple[str, ...] = ()
    index: DocumentIndex = field(default_factory=DocumentIndex)
    views: dict[ViewMode, ViewResult] = field(default_factory=dict)
    done_ranges: tuple[LineRange, ...] = ()

    @classmethod
    def empty(cls, now: datetime) -> DocumentSnapshot:
        return cls(now=now, views=build_views(DocumentIndex(), now))

    def view(self, mode: ViewMode) -> ViewResult:
        return self.views[mode]

    def to_dict(self) -> dict[str, Any]:
        return {
            "now": self.now.isoformat(),
            "lineCount": len(self.lines),
            "entries": [entry.to_dict() for entry in self.index.entries],
            "forest": forest_to_dict(self.index.forest),
            "counts": {mode.value: result.count for mode, result in self.views.items()},
            "doneRanges": ranges_to_dict(self.done_ranges),
        }


def recompute(lines: Sequence[str], now: datetime) -> DocumentSnapshot:
    """Run classification, indexing, views and the resolver over one snapshot."""
    frozen_lines = tuple(lines)
    index = build_index(frozen_lines)
    snapshot = DocumentSnapshot(
        now=now,
        lines=frozen_lines,
        index=index,
        views=build_views(index, now),
        done_ranges=tuple(resolve_done_ranges(frozen_lines)),
    )
    logger.debug(
        "Recomputed snapshot: %d tasks, %d done ranges",
        len(index.tasks),
        len(snapshot.done_ranges),
    )
    return snapshot


class SnapshotStore:
    """Latest published snapshot per document.

    Rebuilds of one document are serialized; the published value is swapped
    only after a rebuild completes, so readers never see a partial snapshot.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._document_locks: dict[str, threading.Lock] = {}
        self._published: dict[str, DocumentSnapshot] = {}

    def _document_lock(self, key: str) -> threading.Lock:
        with self._lock:
            return self._document_locks.setdefault(key, threading.Lock())

    def rebuild(self, key: str, lines: Sequence[str], now: datetime) -> DocumentSnapshot:
        with self._document_lock(key):
            snapshot = recompute(lines, now)
            with self._lock:
                self._published[key] = snapshot
        return snapshot

    def get(self, key: str) -> DocumentSnapshot | None:
        with self._lock:
            return self._published.get(key)

    def discard(self, key: str) -> None:
        # Document locks are never removed; a rebuild may be holding this one.
        with self._document_lock(key):
            with self._lock:
                self._published.pop(key, None)

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._published)
