"""Tool handler registration."""

# ruff: noqa: F401

from __future__ import annotations

from fastapi import FastAPI

from taskpaper.mcp_router import mcp_router

# Import modules to register routes with the shared router.
from taskpaper import mcp_documents, mcp_edits, mcp_tools_endpoint

# Re-export endpoints for tests and direct imports.
from taskpaper.mcp_documents import (
    done_ranges,
    index_document,
    list_tags,
    list_view,
    read_snapshot,
)
from taskpaper.mcp_edits import add_tag, remove_tag, search_tag, toggle_completion
from taskpaper.mcp_tools_endpoint import list_tool_schemas


def register_mcp_handlers(app: FastAPI) -> None:
    """Attach tool routes to the FastAPI application."""
    app.include_router(mcp_router)
