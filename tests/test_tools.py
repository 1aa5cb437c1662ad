import json

import pytest

from mcpkit.tools import (
    Tool,
    ToolAnnotation,
    ToolSchemaConflictError,
    additional_properties,
    default_array,
    default_bool,
    default_number,
    default_string,
    description,
    enum,
    items,
    max_items,
    max_length,
    maximum,
    min_items,
    min_length,
    minimum,
    multiple_of,
    new_tool,
    new_tool_with_raw_schema,
    pattern,
    properties,
    required,
    title,
    unique_items,
    with_array,
    with_boolean,
    with_boolean_items,
    with_description,
    with_destructive_hint_annotation,
    with_idempotent_hint_annotation,
    with_number,
    with_number_items,
    with_object,
    with_open_world_hint_annotation,
    with_read_only_hint_annotation,
    with_string,
    with_string_enum_items,
    with_string_items,
    with_title_annotation,
    with_tool_annotation,
)

RAW_SCHEMA = """{
    "type": "object",
    "properties": {
        "query": {"type": "string", "description": "Search query"},
        "limit": {"type": "integer", "minimum": 1, "maximum": 50}
    },
    "required": ["query"]
}"""


def test_tool_with_both_schemas_error():
    tool = new_tool(
        "dual-schema-tool",
        with_description("A tool with both schemas set"),
        with_string("input", description("Test input")),
    )
    assert json.loads(tool.to_json())["name"] == "dual-schema-tool"

    tool.raw_input_schema = '{"type":"string"}'
    with pytest.raises(ToolSchemaConflictError):
        tool.to_json()


def test_tool_with_raw_schema():
    tool = new_tool_with_raw_schema("search-tool", "Search API", RAW_SCHEMA)
    result = json.loads(tool.to_json())

    assert result["name"] == "search-tool"
    assert result["description"] == "Search API"
    schema = result["inputSchema"]
    assert schema["type"] == "object"
    assert schema["properties"]["query"]["type"] == "string"
    assert "query" in schema["required"]


def test_unmarshal_tool_with_raw_schema():
    tool = new_tool_with_raw_schema("search-tool", "Search API", RAW_SCHEMA)
    restored = Tool.from_json(tool.to_json())

    assert restored.name == tool.name
    assert restored.description == tool.description
    assert restored.input_schema.type == "object"
    query = restored.input_schema.properties["query"]
    assert query["type"] == "string"
    assert query["description"] == "Search query"
    limit = restored.input_schema.properties["limit"]
    assert limit["type"] == "integer"
    assert limit["minimum"] == 1.0
    assert limit["maximum"] == 50.0
    assert "query" in restored.input_schema.required
    assert restored.raw_input_schema is None


def test_unmarshal_tool_without_raw_schema():
    tool = new_tool(
        "dual-schema-tool",
        with_description("A tool with both schemas set"),
        with_string("input", description("Test input")),
    )
    restored = Tool.from_json(tool.to_json())

    assert restored.name == tool.name
    assert restored.description == tool.description
    assert restored.input_schema.properties["input"] == {
        "type": "string",
        "description": "Test input",
    }
    assert not restored.input_schema.required
    assert restored.raw_input_schema is None


def test_tool_with_object_and_array():
    tool = new_tool(
        "reading-list",
        with_description("A tool for managing reading lists"),
        with_object(
            "preferences",
            description("User preferences for the reading list"),
            properties(
                {
                    "theme": {
                        "type": "string",
                        "description": "UI theme preference",
                        "enum": ["light", "dark"],
                    },
                    "maxItems": {
                        "type": "number",
                        "description": "Maximum number of items in the list",
                        "minimum": 1,
                        "maximum": 100,
                    },
                }
            ),
        ),
        with_array(
            "books",
            description("List of books to read"),
            required(),
            items(
                {
                    "type": "object",
                    "properties": {
                        "title": {"type": "string", "description": "Book title", "required": True},
                        "author": {"type": "string", "description": "Book author"},
                        "year": {
                            "type": "number",
                            "description": "Publication year",
                            "minimum": 1000,
                        },
                    },
                }
            ),
        ),
    )
    result = json.loads(tool.to_json())

    assert result["name"] == "reading-list"
    assert result["description"] == "A tool for managing reading lists"
    schema = result["inputSchema"]
    assert schema["type"] == "object"

    preferences = schema["properties"]["preferences"]
    assert preferences["type"] == "object"
    assert preferences["description"] == "User preferences for the reading list"
    assert set(preferences["properties"]) == {"theme", "maxItems"}

    books = schema["properties"]["books"]
    assert books["type"] == "array"
    assert books["description"] == "List of books to read"
    assert "required" not in books
    assert books["items"]["type"] == "object"
    assert set(books["items"]["properties"]) == {"title", "author", "year"}

    assert "books" in schema["required"]


COMPAT_CASES = [
    (
        with_array("items", description("List of string items"), items({"type": "string"})),
        with_array("items", description("List of string items"), with_string_items()),
    ),
    (
        with_array(
            "status",
            description("Filter by status"),
            items({"type": "string", "enum": ["active", "inactive", "pending"]}),
        ),
        with_array(
            "status",
            description("Filter by status"),
            with_string_enum_items(["active", "inactive", "pending"]),
        ),
    ),
    (
        with_array(
            "names",
            description("List of names"),
            items({"type": "string", "minLength": 1, "maxLength": 50}),
        ),
        with_array(
            "names",
            description("List of names"),
            with_string_items(min_length(1), max_length(50)),
        ),
    ),
    (
        with_array("scores", description("List of scores"), items({"type": "number"})),
        with_array("scores", description("List of scores"), with_number_items()),
    ),
    (
        with_array(
            "ratings",
            description("List of ratings"),
            items({"type": "number", "minimum": 0.0, "maximum": 10.0}),
        ),
        with_array(
            "ratings",
            description("List of ratings"),
            with_number_items(minimum(0), maximum(10)),
        ),
    ),
    (
        with_array("flags", description("List of feature flags"), items({"type": "boolean"})),
        with_array("flags", description("List of feature flags"), with_boolean_items()),
    ),
]


@pytest.mark.parametrize("old_option, new_option", COMPAT_CASES)
def test_new_items_api_compatibility(old_option, new_option):
    old = json.loads(new_tool("old", old_option).to_json())
    new = json.loads(new_tool("new", new_option).to_json())

    def array_prop(result):
        props = result["inputSchema"]["properties"]
        return next(p for p in props.values() if p.get("type") == "array")

    old_prop = array_prop(old)
    new_prop = array_prop(new)
    assert old_prop["items"] == new_prop["items"]
    assert old_prop["description"] == new_prop["description"]
    assert old_prop["type"] == new_prop["type"]


def test_new_tool_defaults():
    assert new_tool("x").to_dict() == {
        "name": "x",
        "inputSchema": {"type": "object", "properties": {}},
        "annotations": {
            "readOnlyHint": False,
            "destructiveHint": True,
            "idempotentHint": False,
            "openWorldHint": True,
        },
    }


def test_raw_schema_tool_has_empty_annotations():
    tool = new_tool_with_raw_schema("r", "", '{"type":"object"}')
    assert tool.to_dict() == {
        "name": "r",
        "inputSchema": {"type": "object"},
        "annotations": {},
    }


def test_raw_schema_tool_rejects_property_options():
    tool = new_tool_with_raw_schema("r", "", '{"type":"object"}')
    with pytest.raises(TypeError):
        with_string("x")(tool)


def test_annotation_options():
    tool = new_tool(
        "t",
        with_title_annotation("Nice"),
        with_read_only_hint_annotation(True),
        with_destructive_hint_annotation(False),
        with_idempotent_hint_annotation(True),
        with_open_world_hint_annotation(False),
    )
    assert tool.to_dict()["annotations"] == {
        "title": "Nice",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    }


def test_with_tool_annotation_replaces_and_copies():
    annotation = ToolAnnotation(title="T", read_only_hint=True)
    tool = new_tool("t", with_tool_annotation(annotation))
    annotation.title = "changed"
    assert tool.annotations.title == "T"
    assert tool.to_dict()["annotations"] == {"title": "T", "readOnlyHint": True}


def test_annotation_round_trip():
    tool = new_tool("t", with_title_annotation("Shown"), with_read_only_hint_annotation(True))
    restored = Tool.from_json(tool.to_json())
    assert restored.annotations == tool.annotations


def test_property_options_populate_schema():
    tool = new_tool(
        "t",
        with_string(
            "s",
            title("S"),
            default_string("x"),
            enum("a", "b"),
            pattern("^[ab]$"),
            required(),
        ),
        with_number("n", default_number(2), multiple_of(2)),
        with_boolean("b", default_bool(True)),
        with_array("a", default_array(["x"]), min_items(1), max_items(3), unique_items(True)),
        with_object("o", additional_properties(False)),
    )
    props = tool.input_schema.properties
    assert props["s"] == {
        "type": "string",
        "title": "S",
        "default": "x",
        "enum": ["a", "b"],
        "pattern": "^[ab]$",
    }
    assert props["n"] == {"type": "number", "default": 2.0, "multipleOf": 2.0}
    assert props["b"] == {"type": "boolean", "default": True}
    assert props["a"] == {
        "type": "array",
        "default": ["x"],
        "minItems": 1,
        "maxItems": 3,
        "uniqueItems": True,
    }
    assert props["o"] == {"type": "object", "properties": {}, "additionalProperties": False}
    assert tool.input_schema.required == ["s"]


def test_required_order_follows_options():
    tool = new_tool("t", with_string("b", required()), with_number("a", required()))
    assert tool.to_dict()["inputSchema"]["required"] == ["b", "a"]


def test_description_omitted_when_empty():
    assert "description" not in new_tool("t").to_dict()
    assert new_tool("t", with_description("d")).to_dict()["description"] == "d"


def test_from_json_rejects_non_object():
    with pytest.raises(ValueError):
        Tool.from_json("[1, 2]")