"""Payload validation helpers for tool endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Sequence

from taskpaper.errors import ToolError
from taskpaper.views import ViewMode


def _ensure_payload_dict(payload: Any) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise ToolError(
            "INVALID_TYPE",
            "Payload must be an object.",
            {"type": type(payload).__name__},
        )
    return payload


def _reject_unknown_fields(payload: dict[str, Any], allowed_fields: set[str]) -> None:
    unknown_fields = sorted(set(payload) - allowed_fields)
    if unknown_fields:
        raise ToolError(
            "UNKNOWN_FIELD",
            "Unknown fields are not allowed.",
            {"fields": unknown_fields},
        )


def _require_fields(payload: dict[str, Any], fields: Sequence[str]) -> None:
    missing = [name for name in fields if name not in payload]
    if missing:
        raise ToolError(
            "MISSING_FIELDS",
            f"{', '.join(missing)} required.",
            {"fields": missing},
        )


def _read_now(payload: dict[str, Any]) -> datetime:
    value = payload.get("now")
    if value is None:
        return datetime.now()
    try:
        return datetime.fromisoformat(str(value))
    except ValueError as exc:
        raise ToolError(
            "INVALID_DATE",
            "now must be an ISO date or date-time.",
            {"now": value},
        ) from exc


def _read_view_mode(payload: dict[str, Any]) -> ViewMode:
    raw_mode = payload.get("mode", ViewMode.ALL.value)
    try:
        return ViewMode(raw_mode)
    except ValueError as exc:
        raise ToolError(
            "INVALID_MODE",
            "mode must be one of all, completed, today, week.",
            {"mode": raw_mode, "allowed": [mode.value for mode in ViewMode]},
        ) from exc


def _read_line_number(payload: dict[str, Any], field: str, line_count: int) -> int:
    value = payload.get(field)
    if not isinstance(value, int) or isinstance(value, bool):
        raise ToolError(
            "INVALID_TYPE",
            f"{field} must be an integer.",
            {field: str(value)},
        )
    if not 0 <= value < line_count:
        raise ToolError(
            "INVALID_LINE",
            f"{field} is outside the document.",
            {field: value, "lineCount": line_count},
        )
    return value


def _read_string(payload: dict[str, Any], field: str, *, optional: bool = False) -> str | None:
    value = payload.get(field)
    if value is None and optional:
        return None
    if not isinstance(value, str) or not value.strip():
        raise ToolError(
            "INVALID_TYPE",
            f"{field} must be a non-empty string.",
            {field: str(value)},
        )
    return value.strip()
