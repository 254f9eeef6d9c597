"""Function-tool definitions served by ``GET /tools``."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

TOOLS_JSON_PATH = Path(__file__).with_name("mcp_tools.json")


class ToolSchemaError(RuntimeError):
    """Raised when tool schema definitions are invalid or unavailable."""


def load_tool_definitions(path: Path | None = None) -> list[dict[str, Any]]:
    source = path or TOOLS_JSON_PATH
    try:
        raw = source.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ToolSchemaError(f"Tool definition file not found: {source}") from exc
    except OSError as exc:
        raise ToolSchemaError(f"Unable to read tool definitions: {source}") from exc
    try:
        tools = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ToolSchemaError(f"{source.name} is not valid JSON: {exc}") from exc

    validate_tool_definitions(tools)
    return tools


def validate_tool_definitions(tools: Any) -> None:
    if not isinstance(tools, list):
        raise ToolSchemaError("Tool definitions must be a JSON array.")
    names = [_validate_tool(position, tool) for position, tool in enumerate(tools)]
    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        raise ToolSchemaError(f"Duplicate tool names: {', '.join(duplicates)}")


def _validate_tool(position: int, tool: Any) -> str:
    function = tool.get("function") if isinstance(tool, dict) else None
    if not isinstance(function, dict) or tool.get("type") != "function":
        raise ToolSchemaError(f"Entry {position} is not a function tool.")

    name = function.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ToolSchemaError(f"Entry {position} has no tool name.")

    parameters = function.get("parameters")
    if not isinstance(parameters, dict) or parameters.get("type") != "object":
        raise ToolSchemaError(f"{name}: parameters must be an object schema.")
    properties = parameters.get("properties", {})
    if not isinstance(properties, dict):
        raise ToolSchemaError(f"{name}: properties must be an object.")
    undeclared = [
        field for field in parameters.get("required", []) if field not in properties
    ]
    if undeclared:
        raise ToolSchemaError(
            f"{name}: required fields are not declared: {', '.join(undeclared)}"
        )
    return name
