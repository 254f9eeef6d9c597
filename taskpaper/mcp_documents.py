"""Read-only tool endpoints: index, views, done ranges, tags, snapshots."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import Request

from taskpaper.decorations import ranges_to_dict
from taskpaper.errors import ToolError, success_response
from taskpaper.mcp_constants import DOCUMENT_FIELDS
from taskpaper.mcp_payload import (
    _ensure_payload_dict,
    _read_now,
    _read_string,
    _read_view_mode,
    _reject_unknown_fields,
)
from taskpaper.mcp_router import mcp_router
from taskpaper.mcp_source import DocumentSource, load_document_source
from taskpaper.snapshot import DocumentSnapshot, SnapshotStore, recompute

logger = logging.getLogger(__name__)


def _get_snapshot_store(request: Request) -> SnapshotStore | None:
    return getattr(request.app.state, "snapshots", None)


def _compute_snapshot(
    source: DocumentSource, payload: dict[str, Any], request: Request
) -> DocumentSnapshot:
    now = _read_now(payload)
    store = _get_snapshot_store(request)
    if not source.applicable:
        if store is not None and source.key:
            store.discard(source.key)
        return DocumentSnapshot.empty(now)
    if store is not None and source.key:
        return store.rebuild(source.key, source.lines, now)
    return recompute(source.lines, now)


@mcp_router.post("/tool:index_document")
def index_document(payload: dict[str, Any], request: Request) -> dict[str, Any]:
    """Index a document and publish the snapshot under its key."""
    payload = _ensure_payload_dict(payload)
    _reject_unknown_fields(payload, DOCUMENT_FIELDS)

    source = load_document_source(payload, request)
    snapshot = _compute_snapshot(source, payload, request)
    if source.applicable:
        logger.info(
            "Indexed %s: %d tasks",
            source.key or "<inline document>",
            len(snapshot.index.tasks),
        )
    return success_response(
        {
            "documentKey": source.key,
            "applicable": source.applicable,
            "snapshot": snapshot.to_dict(),
        }
    )


@mcp_router.post("/tool:list_view")
def list_view(payload: dict[str, Any], request: Request) -> dict[str, Any]:
    """Return one view (all, completed, today, week) and its count."""
    payload = _ensure_payload_dict(payload)
    _reject_unknown_fields(payload, DOCUMENT_FIELDS | {"mode"})

    mode = _read_view_mode(payload)
    source = load_document_source(payload, request)
    snapshot = _compute_snapshot(source, payload, request)
    return success_response({"view": snapshot.view(mode).to_dict()})


@mcp_router.post("/tool:done_ranges")
def done_ranges(payload: dict[str, Any], request: Request) -> dict[str, Any]:
    """Return the line ranges that belong to completed task blocks."""
    payload = _ensure_payload_dict(payload)
    _reject_unknown_fields(payload, DOCUMENT_FIELDS)

    source = load_document_source(payload, request)
    snapshot = _compute_snapshot(source, payload, request)
    return success_response({"ranges": ranges_to_dict(snapshot.done_ranges)})


@mcp_router.post("/tool:list_tags")
def list_tags(payload: dict[str, Any], request: Request) -> dict[str, Any]:
    """List tag occurrences with content-relative and line offsets."""
    payload = _ensure_payload_dict(payload)
    _reject_unknown_fields(payload, DOCUMENT_FIELDS | {"name"})

    name = _read_string(payload, "name", optional=True)
    source = load_document_source(payload, request)
    snapshot = _compute_snapshot(source, payload, request)

    occurrences: list[dict[str, Any]] = []
    for task in snapshot.index.tasks:
        for tag in task.tags:
            if name is not None and tag.name != name:
                continue
            occurrence = tag.to_dict(task.prefix_length)
            occurrence["lineNumber"] = task.line_number
            occurrences.append(occurrence)
    return success_response({"tags": occurrences})


@mcp_router.post("/tool:read_snapshot")
def read_snapshot(payload: dict[str, Any], request: Request) -> dict[str, Any]:
    """Return the last published snapshot for a document key."""
    payload = _ensure_payload_dict(payload)
    _reject_unknown_fields(payload, {"documentKey", "mode"})

    key = _read_string(payload, "documentKey")
    store = _get_snapshot_store(request)
    snapshot = store.get(key) if store is not None else None
    if snapshot is None:
        raise ToolError(
            "SNAPSHOT_NOT_FOUND",
            "No snapshot has been published for this document.",
            {"documentKey": key, "published": store.keys() if store is not None else []},
        )

    data: dict[str, Any] = {"documentKey": key, "snapshot": snapshot.to_dict()}
    if "mode" in payload:
        data["view"] = snapshot.view(_read_view_mode(payload)).to_dict()
    return success_response(data)
