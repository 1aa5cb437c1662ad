"""Tool definitions, their input schemas and the options that build them."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable


class ToolSchemaConflictError(ValueError):
    """Raised when a tool has both a structured and a raw input schema."""


_CONFLICT_MESSAGE = "provide either InputSchema or RawInputSchema, not both"


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value


@dataclass
class ToolInputSchema:
    """A JSON Schema object describing a tool's parameters."""

    type: str = ""
    properties: dict[str, Any] | None = None
    required: list[str] | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"type": self.type}
        if self.properties is not None:
            result["properties"] = _plain(self.properties)
        if self.required:
            result["required"] = list(self.required)
        return result


@dataclass
class ToolAnnotation:
    """Optional hints describing a tool's behaviour."""

    title: str = ""
    read_only_hint: bool | None = None
    destructive_hint: bool | None = None
    idempotent_hint: bool | None = None
    open_world_hint: bool | None = None

    _KEYS = (
        ("read_only_hint", "readOnlyHint"),
        ("destructive_hint", "destructiveHint"),
        ("idempotent_hint", "idempotentHint"),
        ("open_world_hint", "openWorldHint"),
    )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.title:
            result["title"] = self.title
        for attribute, key in self._KEYS:
            value = getattr(self, attribute)
            if value is not None:
                result[key] = value
        return result

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> ToolAnnotation:
        annotation = cls(title=data.get("title") or "")
        for attribute, key in cls._KEYS:
            value = data.get(key)
            if isinstance(value, bool):
                setattr(annotation, attribute, value)
        return annotation


@dataclass
class Tool:
    """A tool the client can call.

    The input schema is either structured (input_schema) or raw JSON
    (raw_input_schema, given as JSON text or an already decoded value).
    """

    name: str
    description: str = ""
    input_schema: ToolInputSchema = field(default_factory=ToolInputSchema)
    raw_input_schema: Any = None
    annotations: ToolAnnotation = field(default_factory=ToolAnnotation)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name}
        if self.description:
            result["description"] = self.description
        if self.raw_input_schema is not None:
            if self.input_schema.type:
                raise ToolSchemaConflictError(
                    f"tool {self.name} has both InputSchema and RawInputSchema set: "
                    f"{_CONFLICT_MESSAGE}"
                )
            raw = self.raw_input_schema
            if isinstance(raw, (str, bytes, bytearray)):
                result["inputSchema"] = json.loads(raw)
            else:
                result["inputSchema"] = _plain(raw)
        else:
            result["inputSchema"] = self.input_schema.to_dict()
        result["annotations"] = self.annotations.to_dict()
        return result

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Tool:
        """Decode a tool; the schema always lands in input_schema."""
        schema_data = data.get("inputSchema")
        schema = ToolInputSchema()
        if isinstance(schema_data, dict):
            properties = schema_data.get("properties")
            required_names = schema_data.get("required")
            schema = ToolInputSchema(
                type=schema_data.get("type") or "",
                properties=properties if isinstance(properties, dict) else None,
                required=list(required_names) if isinstance(required_names, list) else None,
            )
        annotation_data = data.get("annotations")
        annotations = (
            ToolAnnotation._from_dict(annotation_data)
            if isinstance(annotation_data, dict)
            else ToolAnnotation()
        )
        return cls(
            name=data.get("name") or "",
            description=data.get("description") or "",
            input_schema=schema,
            annotations=annotations,
        )

    @classmethod
    def from_json(cls, text: str | bytes) -> Tool:
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("tool must be a JSON object")
        return cls.from_dict(data)


ToolOption = Callable[[Tool], None]
PropertyOption = Callable[[dict], None]


def new_tool(name: str, *options: ToolOption) -> Tool:
    """Create a tool with an object input schema, applying the options in order."""
    tool = Tool(
        name=name,
        input_schema=ToolInputSchema(type="object", properties={}),
        annotations=ToolAnnotation(
            read_only_hint=False,
            destructive_hint=True,
            idempotent_hint=False,
            open_world_hint=True,
        ),
    )
    for option in options:
        option(tool)
    return tool


def new_tool_with_raw_schema(name: str, description: str, schema: Any) -> Tool:
    """Create a tool whose input schema is arbitrary raw JSON Schema.

    Property options cannot be applied to such a tool.
    """
    return Tool(name=name, description=description, raw_input_schema=schema)


def with_description(description: str) -> ToolOption:
    def apply(tool: Tool) -> None:
        tool.description = description

    return apply


def with_tool_annotation(annotation: ToolAnnotation) -> ToolOption:
    def apply(tool: Tool) -> None:
        tool.annotations = replace(annotation)

    return apply


def with_title_annotation(title: str) -> ToolOption:
    def apply(tool: Tool) -> None:
        tool.annotations.title = title

    return apply


def with_read_only_hint_annotation(value: bool) -> ToolOption:
    def apply(tool: Tool) -> None:
        tool.annotations.read_only_hint = value

    return apply


def with_destructive_hint_annotation(value: bool) -> ToolOption:
    def apply(tool: Tool) -> None:
        tool.annotations.destructive_hint = value

    return apply


def with_idempotent_hint_annotation(value: bool) -> ToolOption:
    def apply(tool: Tool) -> None:
        tool.annotations.idempotent_hint = value

    return apply


def with_open_world_hint_annotation(value: bool) -> ToolOption:
    def apply(tool: Tool) -> None:
        tool.annotations.open_world_hint = value

    return apply


def _set(key: str, value: Any) -> PropertyOption:
    def apply(schema: dict) -> None:
        schema[key] = value

    return apply


def description(desc: str) -> PropertyOption:
    return _set("description", desc)


def required() -> PropertyOption:
    """Mark a property as required in the tool's input schema."""
    return _set("required", True)


def title(text: str) -> PropertyOption:
    return _set("title", text)


def default_string(value: str) -> PropertyOption:
    return _set("default", value)


def enum(*values: str) -> PropertyOption:
    return _set("enum", list(values))


def max_length(value: int) -> PropertyOption:
    return _set("maxLength", value)


def min_length(value: int) -> PropertyOption:
    return _set("minLength", value)


def pattern(regex: str) -> PropertyOption:
    return _set("pattern", regex)


def default_number(value: float) -> PropertyOption:
    return _set("default", float(value))


def maximum(value: float) -> PropertyOption:
    return _set("maximum", float(value))


def minimum(value: float) -> PropertyOption:
    return _set("minimum", float(value))


def multiple_of(value: float) -> PropertyOption:
    return _set("multipleOf", float(value))


def default_bool(value: bool) -> PropertyOption:
    return _set("default", value)


def default_array(value: Any) -> PropertyOption:
    return _set("default", list(value))


def _with_property(name: str, base: dict[str, Any], options: tuple) -> ToolOption:
    def apply(tool: Tool) -> None:
        schema = dict(base)
        for option in options:
            option(schema)
        if tool.input_schema.properties is None:
            raise TypeError(f"tool {tool.name} has no structured input schema")
        if schema.get("required") is True:
            del schema["required"]
            if tool.input_schema.required is None:
                tool.input_schema.required = []
            tool.input_schema.required.append(name)
        tool.input_schema.properties[name] = schema

    return apply


def with_boolean(name: str, *options: PropertyOption) -> ToolOption:
    return _with_property(name, {"type": "boolean"}, options)


def with_number(name: str, *options: PropertyOption) -> ToolOption:
    return _with_property(name, {"type": "number"}, options)


def with_string(name: str, *options: PropertyOption) -> ToolOption:
    return _with_property(name, {"type": "string"}, options)


def with_object(name: str, *options: PropertyOption) -> ToolOption:
    def apply(tool: Tool) -> None:
        _with_property(name, {"type": "object", "properties": {}}, options)(tool)

    return apply


def with_array(name: str, *options: PropertyOption) -> ToolOption:
    return _with_property(name, {"type": "array"}, options)


def properties(props: dict[str, Any]) -> PropertyOption:
    return _set("properties", props)


def additional_properties(schema: Any) -> PropertyOption:
    return _set("additionalProperties", schema)


def min_properties(value: int) -> PropertyOption:
    return _set("minProperties", value)


def max_properties(value: int) -> PropertyOption:
    return _set("maxProperties", value)


def property_names(schema: dict[str, Any]) -> PropertyOption:
    return _set("propertyNames", schema)


def items(schema: Any) -> PropertyOption:
    """Set the schema of array items."""
    return _set("items", schema)


def min_items(value: int) -> PropertyOption:
    return _set("minItems", value)


def max_items(value: int) -> PropertyOption:
    return _set("maxItems", value)


def unique_items(unique: bool) -> PropertyOption:
    return _set("uniqueItems", unique)


def _typed_items(item_type: str, options: tuple) -> PropertyOption:
    def apply(schema: dict) -> None:
        item_schema: dict[str, Any] = {"type": item_type}
        for option in options:
            option(item_schema)
        schema["items"] = item_schema

    return apply


def with_string_items(*options: PropertyOption) -> PropertyOption:
    return _typed_items("string", options)


def with_string_enum_items(values: list[str]) -> PropertyOption:
    return _set("items", {"type": "string", "enum": list(values)})


def with_number_items(*options: PropertyOption) -> PropertyOption:
    return _typed_items("number", options)


def with_boolean_items(*options: PropertyOption) -> PropertyOption:
    return _typed_items("boolean", options)