import pytest

from tools.mcp_tools import (
    ToolSchemaError,
    load_tool_definitions,
    validate_tool_definitions,
)


def test_load_tool_definitions_rejects_missing_file(tmp_path):
    with pytest.raises(ToolSchemaError):
        load_tool_definitions(tmp_path / "missing.json")


def test_load_tool_definitions_rejects_invalid_json(tmp_path):
    path = tmp_path / "tools.json"
    path.write_text("{not valid json", encoding="utf-8")
    with pytest.raises(ToolSchemaError):
        load_tool_definitions(path)


def test_load_tool_definitions_rejects_non_list(tmp_path):
    path = tmp_path / "tools.json"
    path.write_text('{"type":"function"}', encoding="utf-8")
    with pytest.raises(ToolSchemaError):
        load_tool_definitions(path)


def test_load_tool_definitions_rejects_duplicate_names(tmp_path):
    path = tmp_path / "tools.json"
    tool = '{"type":"function","function":{"name":"ping","parameters":{"type":"object"}}}'
    path.write_text(f"[{tool},{tool}]", encoding="utf-8")
    with pytest.raises(ToolSchemaError, match="ping"):
        load_tool_definitions(path)


def test_bundled_tool_definitions_are_valid():
    names = {tool["function"]["name"] for tool in load_tool_definitions()}

    assert names == {
        "index_document",
        "list_view",
        "done_ranges",
        "list_tags",
        "read_snapshot",
        "add_tag",
        "remove_tag",
        "toggle_completion",
        "search_tag",
    }


def test_validate_tool_definitions_checks_required_fields():
    tool = {
        "type": "function",
        "function": {
            "name": "add_tag",
            "parameters": {
                "type": "object",
                "properties": {"line": {"type": "integer"}},
                "required": ["line", "name"],
            },
        },
    }

    with pytest.raises(ToolSchemaError, match="name"):
        validate_tool_definitions([tool])


def test_validate_tool_definitions_requires_object_parameters():
    tool = {"type": "function", "function": {"name": "ping", "parameters": {}}}

    with pytest.raises(ToolSchemaError, match="object schema"):
        validate_tool_definitions([tool])
