"""Tool endpoints that edit task lines: tags and completion status."""

from __future__ import annotations

import logging
from typing import Any, Sequence

from fastapi import Request

from taskpaper.edits import (
    TextEdit,
    add_tag as build_add_tag_edit,
    apply_edits,
    remove_tag as build_remove_tag_edit,
    search_query,
    toggle_completion as build_toggle_edit,
)
from taskpaper.errors import ToolError, success_response
from taskpaper.mcp_constants import DOCUMENT_FIELDS
from taskpaper.mcp_git import (
    _commit_document_edit,
    _ensure_git_repo,
    _rollback_document_edit,
)
from taskpaper.mcp_payload import (
    _ensure_payload_dict,
    _read_line_number,
    _read_string,
    _reject_unknown_fields,
    _require_fields,
)
from taskpaper.mcp_router import mcp_router
from taskpaper.mcp_source import (
    DocumentSource,
    get_request_library_root,
    load_document_source,
)
from taskpaper.mcp_utils import _atomic_write, _join_lines
from taskpaper.parser import TAG_NAME_PATTERN, parse

logger = logging.getLogger(__name__)


def _load_editable_source(payload: dict[str, Any], request: Request) -> DocumentSource:
    source = load_document_source(payload, request)
    if not source.applicable:
        raise ToolError(
            "NOT_APPLICABLE",
            "Edits require a markdown document.",
            {"documentKey": source.key},
        )
    return source


def _commit_enabled(request: Request) -> bool:
    config = getattr(request.app.state, "config", None)
    return bool(getattr(config, "commit_edits", True))


def _publish_edits(
    source: DocumentSource,
    edits: Sequence[TextEdit],
    operation: str,
    request: Request,
) -> dict[str, Any]:
    try:
        updated = apply_edits(source.lines, edits)
    except ValueError as exc:
        raise ToolError("INVALID_EDIT", str(exc), {"operation": operation}) from exc

    result: dict[str, Any] = {
        "edits": [edit.to_dict() for edit in edits],
        "lines": updated,
        "commitSha": None,
    }
    if source.path is None or source.relative_path is None or not edits:
        return result

    repo = None
    if _commit_enabled(request):
        repo = _ensure_git_repo(get_request_library_root(request))

    original = _join_lines(source.lines, source.newline)
    _atomic_write(source.path, _join_lines(updated, source.newline))
    logger.info("%s: wrote %s", operation, source.relative_path.as_posix())
    if repo is None:
        return result

    try:
        result["commitSha"] = _commit_document_edit(
            repo, source.relative_path, operation
        )
    except Exception as exc:
        _rollback_document_edit(repo, source.path, source.relative_path, original)
        raise ToolError(
            "GIT_ERROR",
            "Git commit failed; edit rolled back.",
            {"path": source.relative_path.as_posix(), "operation": operation},
        ) from exc
    return result


@mcp_router.post("/tool:add_tag")
def add_tag(payload: dict[str, Any], request: Request) -> dict[str, Any]:
    """Append ``@name`` or ``@name(value)`` to the end of a line."""
    payload = _ensure_payload_dict(payload)
    _reject_unknown_fields(payload, DOCUMENT_FIELDS | {"line", "name", "value"})
    _require_fields(payload, ["line", "name"])

    source = _load_editable_source(payload, request)
    line_number = _read_line_number(payload, "line", len(source.lines))
    name = _read_string(payload, "name")
    value = _read_string(payload, "value", optional=True)
    try:
        edit = build_add_tag_edit(source.lines[line_number], line_number, name, value)
    except ValueError as exc:
        raise ToolError(
            "INVALID_TAG", str(exc), {"name": name, "value": value}
        ) from exc
    return success_response(_publish_edits(source, [edit], "add_tag", request))


@mcp_router.post("/tool:remove_tag")
def remove_tag(payload: dict[str, Any], request: Request) -> dict[str, Any]:
    """Remove a tag (by name, and optionally occurrence) from a task line."""
    payload = _ensure_payload_dict(payload)
    _reject_unknown_fields(payload, DOCUMENT_FIELDS | {"line", "name", "occurrence"})
    _require_fields(payload, ["line", "name"])

    source = _load_editable_source(payload, request)
    line_number = _read_line_number(payload, "line", len(source.lines))
    name = _read_string(payload, "name")
    occurrence = payload.get("occurrence", 0)
    if not isinstance(occurrence, int) or isinstance(occurrence, bool) or occurrence < 0:
        raise ToolError(
            "INVALID_TYPE",
            "occurrence must be a non-negative integer.",
            {"occurrence": str(occurrence)},
        )

    line = source.lines[line_number]
    task = parse(line, line_number)
    if task is None:
        raise ToolError("NOT_A_TASK", "Line is not a task.", {"line": line_number})

    matches = [tag for tag in task.tags if tag.name == name]
    if occurrence >= len(matches):
        raise ToolError(
            "TAG_NOT_FOUND",
            "No matching tag found on this line.",
            {"line": line_number, "name": name, "tags": [tag.name for tag in task.tags]},
        )
    edit = build_remove_tag_edit(line, task, matches[occurrence])
    return success_response(_publish_edits(source, [edit], "remove_tag", request))


@mcp_router.post("/tool:toggle_completion")
def toggle_completion(payload: dict[str, Any], request: Request) -> dict[str, Any]:
    """Toggle every task between ``line`` and ``endLine`` (inclusive)."""
    payload = _ensure_payload_dict(payload)
    _reject_unknown_fields(payload, DOCUMENT_FIELDS | {"line", "endLine"})
    _require_fields(payload, ["line"])

    source = _load_editable_source(payload, request)
    start_line = _read_line_number(payload, "line", len(source.lines))
    end_line = start_line
    if payload.get("endLine") is not None:
        end_line = _read_line_number(payload, "endLine", len(source.lines))
    if end_line < start_line:
        start_line, end_line = end_line, start_line

    edits = [
        edit
        for line_number in range(start_line, end_line + 1)
        if (edit := build_toggle_edit(source.lines[line_number], line_number))
        is not None
    ]
    return success_response(
        _publish_edits(source, edits, "toggle_completion", request)
    )


@mcp_router.post("/tool:search_tag")
def search_tag(payload: dict[str, Any]) -> dict[str, Any]:
    """Return the literal query the host should run through its text search."""
    payload = _ensure_payload_dict(payload)
    _reject_unknown_fields(payload, {"name"})
    _require_fields(payload, ["name"])

    name = _read_string(payload, "name")
    if not TAG_NAME_PATTERN.fullmatch(name):
        raise ToolError("INVALID_TAG", "Invalid tag name.", {"name": name})
    return success_response({"query": search_query(name)})
