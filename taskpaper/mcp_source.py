"""Resolve the document a tool request refers to."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Any

from fastapi import Request

from taskpaper.errors import ToolError
from taskpaper.mcp_constants import (
    ALLOWED_MARKDOWN_EXTENSIONS,
    DOCUMENT_SOURCE_FIELDS,
    MARKDOWN_LANGUAGE_ID,
)
from taskpaper.mcp_utils import _detect_newline
from taskpaper.snapshot import split_lines


@dataclass(frozen=True)
class DocumentSource:
    """Lines of the requested document, or an inapplicable context.

    ``applicable`` is false when there is no document or it is not markdown;
    tools answer those requests with empty results.
    """

    lines: tuple[str, ...] = ()
    key: str | None = None
    path: Path | None = None
    relative_path: PurePosixPath | None = None
    newline: str = "\n"
    applicable: bool = True

    @classmethod
    def inapplicable(cls, key: str | None = None) -> DocumentSource:
        return cls(key=key, applicable=False)


def get_request_library_root(request: Request) -> Path:
    config = getattr(request.app.state, "config", None)
    if config is not None and hasattr(config, "library_path"):
        return Path(config.library_path)
    return Path(request.app.state.library_path)


def validate_document_path(library_root: Path, raw_path: Any) -> tuple[Path, PurePosixPath]:
    """Return the absolute and relative path of a document inside the root."""
    if not isinstance(raw_path, str) or not raw_path.strip():
        raise ToolError(
            "INVALID_TYPE",
            "path must be a non-empty string.",
            {"path": str(raw_path), "type": type(raw_path).__name__},
        )

    relative = PurePosixPath(raw_path.replace("\\", "/"))
    if relative.is_absolute():
        raise ToolError(
            "ABSOLUTE_PATH", "Absolute paths are not allowed.", {"path": raw_path}
        )
    if ".." in relative.parts:
        raise ToolError(
            "PATH_TRAVERSAL", "Path traversal is not allowed.", {"path": raw_path}
        )

    current = library_root
    for segment in relative.parts:
        current = current / segment
        if current.is_symlink():
            raise ToolError(
                "PATH_SYMLINK", "Symlinked paths are not allowed.", {"path": raw_path}
            )
    return current, relative


def _read_document_file(library_root: Path, raw_path: Any, key: str | None) -> DocumentSource:
    resolved, relative = validate_document_path(library_root, raw_path)

    if resolved.suffix.lower() not in ALLOWED_MARKDOWN_EXTENSIONS:
        return DocumentSource.inapplicable(key or relative.as_posix())
    if not resolved.exists():
        raise ToolError(
            "FILE_NOT_FOUND", "Markdown file does not exist.", {"path": raw_path}
        )
    if not resolved.is_file():
        raise ToolError(
            "INVALID_PATH", "Path must reference a file.", {"path": raw_path}
        )

    try:
        content = resolved.read_bytes().decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ToolError(
            "INVALID_ENCODING",
            "Markdown file must be UTF-8 encoded.",
            {"path": raw_path},
        ) from exc

    return DocumentSource(
        lines=tuple(split_lines(content)),
        key=key or relative.as_posix(),
        path=resolved,
        relative_path=relative,
        newline=_detect_newline(content),
    )


def load_document_source(payload: dict[str, Any], request: Request) -> DocumentSource:
    """Load lines from ``lines``, ``content`` or ``path`` in the payload."""
    key = payload.get("documentKey")
    if key is not None and not isinstance(key, str):
        raise ToolError(
            "INVALID_TYPE", "documentKey must be a string.", {"documentKey": str(key)}
        )

    supplied = [name for name in DOCUMENT_SOURCE_FIELDS if payload.get(name) is not None]
    if len(supplied) > 1:
        raise ToolError(
            "AMBIGUOUS_DOCUMENT",
            "Provide only one of lines, content or path.",
            {"fields": supplied},
        )

    language_id = payload.get("languageId")
    if not supplied or (
        language_id is not None and language_id != MARKDOWN_LANGUAGE_ID
    ):
        return DocumentSource.inapplicable(key)

    if "path" in supplied:
        return _read_document_file(
            get_request_library_root(request), payload["path"], key
        )

    if "content" in supplied:
        content = payload["content"]
        if not isinstance(content, str):
            raise ToolError(
                "INVALID_TYPE",
                "content must be a string.",
                {"type": type(content).__name__},
            )
        return DocumentSource(
            lines=tuple(split_lines(content)), key=key, newline=_detect_newline(content)
        )

    lines = payload["lines"]
    if not isinstance(lines, list) or not all(isinstance(line, str) for line in lines):
        raise ToolError(
            "INVALID_TYPE",
            "lines must be a list of strings.",
            {"type": type(lines).__name__},
        )
    return DocumentSource(lines=tuple(lines), key=key)
