"""Shared constants for tool endpoints."""

from __future__ import annotations

ALLOWED_MARKDOWN_EXTENSIONS = {".md", ".markdown"}
MARKDOWN_LANGUAGE_ID = "markdown"
DOCUMENT_SOURCE_FIELDS = ("lines", "content", "path")
DOCUMENT_FIELDS = {*DOCUMENT_SOURCE_FIELDS, "documentKey", "languageId", "now"}
