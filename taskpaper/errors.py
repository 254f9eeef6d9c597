"""Error envelope shared by every tool endpoint."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

NOT_FOUND_CODES = {"FILE_NOT_FOUND", "SNAPSHOT_NOT_FOUND"}


@dataclass(frozen=True)
class ErrorResponse:
    code: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": self.details}


class ToolError(RuntimeError):
    """Raised by tool handlers; rendered as ``{"ok": false, "error": ...}``."""

    def __init__(
        self, code: str, message: str, details: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__(message)
        self.error = ErrorResponse(
            code=code, message=message, details=dict(details or {})
        )

    @property
    def status_code(self) -> int:
        return 404 if self.error.code in NOT_FOUND_CODES else 400


def success_response(payload: dict[str, Any]) -> dict[str, Any]:
    return {"ok": True, "data": payload}


def error_response(error: ErrorResponse) -> dict[str, Any]:
    return {"ok": False, "error": error.to_dict()}
