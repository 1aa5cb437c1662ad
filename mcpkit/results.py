"""Results a server returns for protocol requests, with builders and parsers."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from mcpkit.content import (
    AudioContent,
    Content,
    EmbeddedResource,
    ImageContent,
    Resource,
    ResourceContents,
    ResourceTemplate,
    Role,
    TextContent,
    TextResourceContents,
    extract_string,
    parse_content,
    parse_resource_contents,
)
from mcpkit.prompts import Prompt, PromptMessage
from mcpkit.protocol import Implementation, ServerCapabilities
from mcpkit.tools import Tool


def _base(meta: dict[str, Any] | None) -> dict[str, Any]:
    return {"_meta": dict(meta)} if meta else {}


def _paginated(meta: dict[str, Any] | None, next_cursor: str) -> dict[str, Any]:
    result = _base(meta)
    if next_cursor:
        result["nextCursor"] = next_cursor
    return result


@dataclass
class CallToolResult:
    """The outcome of a tool call; tool failures are reported with is_error set."""

    content: list[Content] = field(default_factory=list)
    is_error: bool = False
    meta: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        result = _base(self.meta)
        result["content"] = [item.to_dict() for item in self.content]
        if self.is_error:
            result["isError"] = True
        return result


@dataclass
class ListToolsResult:
    """A page of tools."""

    tools: list[Tool] = field(default_factory=list)
    next_cursor: str = ""
    meta: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        result = _paginated(self.meta, self.next_cursor)
        result["tools"] = [tool.to_dict() for tool in self.tools]
        return result


@dataclass
class ListPromptsResult:
    """A page of prompts."""

    prompts: list[Prompt] = field(default_factory=list)
    next_cursor: str = ""
    meta: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        result = _paginated(self.meta, self.next_cursor)
        result["prompts"] = [prompt.to_dict() for prompt in self.prompts]
        return result


@dataclass
class GetPromptResult:
    """A prompt rendered into messages."""

    description: str = ""
    messages: list[PromptMessage] = field(default_factory=list)
    meta: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        result = _base(self.meta)
        if self.description:
            result["description"] = self.description
        result["messages"] = [message.to_dict() for message in self.messages]
        return result


@dataclass
class ListResourcesResult:
    """A page of resources."""

    resources: list[Resource] = field(default_factory=list)
    next_cursor: str = ""
    meta: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        result = _paginated(self.meta, self.next_cursor)
        result["resources"] = [resource.to_dict() for resource in self.resources]
        return result


@dataclass
class ListResourceTemplatesResult:
    """A page of resource templates."""

    resource_templates: list[ResourceTemplate] = field(default_factory=list)
    next_cursor: str = ""
    meta: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        result = _paginated(self.meta, self.next_cursor)
        result["resourceTemplates"] = [t.to_dict() for t in self.resource_templates]
        return result


@dataclass
class ReadResourceResult:
    """The contents of a read resource."""

    contents: list[ResourceContents] = field(default_factory=list)
    meta: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        result = _base(self.meta)
        result["contents"] = [item.to_dict() for item in self.contents]
        return result


@dataclass
class InitializeResult:
    """The server's answer to an initialize request."""

    protocol_version: str
    capabilities: ServerCapabilities = field(default_factory=ServerCapabilities)
    server_info: Implementation = field(default_factory=lambda: Implementation("", ""))
    instructions: str = ""
    meta: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        result = _base(self.meta)
        result["protocolVersion"] = self.protocol_version
        result["capabilities"] = self.capabilities.to_dict()
        result["serverInfo"] = self.server_info.to_dict()
        if self.instructions:
            result["instructions"] = self.instructions
        return result


def new_tool_result_text(text: str) -> CallToolResult:
    """A tool result holding one text block."""
    return CallToolResult(content=[TextContent(text=text)])


def new_tool_result_image(text: str, image_data: str, mime_type: str) -> CallToolResult:
    """A tool result holding a text block and an image."""
    return CallToolResult(
        content=[TextContent(text=text), ImageContent(data=image_data, mime_type=mime_type)]
    )


def new_tool_result_audio(text: str, audio_data: str, mime_type: str) -> CallToolResult:
    """A tool result holding a text block and audio."""
    return CallToolResult(
        content=[TextContent(text=text), AudioContent(data=audio_data, mime_type=mime_type)]
    )


def new_tool_result_resource(text: str, resource: ResourceContents) -> CallToolResult:
    """A tool result holding a text block and an embedded resource."""
    return CallToolResult(
        content=[TextContent(text=text), EmbeddedResource(resource=resource)]
    )


def new_tool_result_error(text: str) -> CallToolResult:
    """A tool result reporting a failure of the tool."""
    return CallToolResult(content=[TextContent(text=text)], is_error=True)


def new_tool_result_error_from_err(text: str, err: BaseException | None) -> CallToolResult:
    """A failure result; the error's message, if any, is appended to the text."""
    if err is not None:
        text = f"{text}: {err}"
    return new_tool_result_error(text)


def new_tool_result_errorf(template: str, *args: Any) -> CallToolResult:
    """A failure result whose text is formatted printf-style from the arguments."""
    text = template % args if args else template
    return new_tool_result_error(text)


def new_list_resources_result(
    resources: list[Resource], next_cursor: str = ""
) -> ListResourcesResult:
    return ListResourcesResult(resources=list(resources), next_cursor=next_cursor)


def new_list_resource_templates_result(
    templates: list[ResourceTemplate], next_cursor: str = ""
) -> ListResourceTemplatesResult:
    return ListResourceTemplatesResult(resource_templates=list(templates), next_cursor=next_cursor)


def new_read_resource_result(text: str) -> ReadResourceResult:
    """A read result holding one text entry with no URI."""
    return ReadResourceResult(contents=[TextResourceContents(uri="", text=text)])


def new_list_prompts_result(prompts: list[Prompt], next_cursor: str = "") -> ListPromptsResult:
    return ListPromptsResult(prompts=list(prompts), next_cursor=next_cursor)


def new_get_prompt_result(description: str, messages: list[PromptMessage]) -> GetPromptResult:
    return GetPromptResult(description=description, messages=list(messages))


def new_list_tools_result(tools: list[Tool], next_cursor: str = "") -> ListToolsResult:
    return ListToolsResult(tools=list(tools), next_cursor=next_cursor)


def new_initialize_result(
    protocol_version: str,
    capabilities: ServerCapabilities,
    server_info: Implementation,
    instructions: str = "",
) -> InitializeResult:
    return InitializeResult(
        protocol_version=protocol_version,
        capabilities=capabilities,
        server_info=server_info,
        instructions=instructions,
    )


def format_number_result(value: float) -> CallToolResult:
    """A text result with the number rounded to two decimals."""
    return new_tool_result_text(f"{value:.2f}")


def _decode(raw: str | bytes | bytearray | None) -> dict[str, Any]:
    if raw is None:
        raise ValueError("response is nil")
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise ValueError(f"failed to unmarshal response: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("failed to unmarshal response: not a JSON object")
    return data


def _meta_of(data: dict[str, Any]) -> dict[str, Any] | None:
    meta = data.get("_meta")
    return meta if isinstance(meta, dict) else None


def parse_get_prompt_result(raw: str | bytes | bytearray | None) -> GetPromptResult:
    """Decode a prompts/get result from JSON text."""
    data = _decode(raw)
    result = GetPromptResult(meta=_meta_of(data))
    description = data.get("description")
    if isinstance(description, str):
        result.description = description
    if "messages" in data:
        messages = data["messages"]
        if not isinstance(messages, list):
            raise ValueError("messages is not an array")
        for message in messages:
            if not isinstance(message, dict):
                raise ValueError("message is not an object")
            role = extract_string(message, "role")
            if role not in (Role.USER.value, Role.ASSISTANT.value):
                raise ValueError(f"unsupported role: {role}")
            content_map = message.get("content")
            if not isinstance(content_map, dict):
                raise ValueError("content is not an object")
            result.messages.append(PromptMessage(role=Role(role), content=parse_content(content_map)))
    return result


def parse_call_tool_result(raw: str | bytes | bytearray | None) -> CallToolResult:
    """Decode a tools/call result from JSON text."""
    data = _decode(raw)
    result = CallToolResult(meta=_meta_of(data))
    is_error = data.get("isError")
    if isinstance(is_error, bool):
        result.is_error = is_error
    if "content" not in data:
        raise ValueError("content is missing")
    contents = data["content"]
    if not isinstance(contents, list):
        raise ValueError("content is not an array")
    for item in contents:
        if not isinstance(item, dict):
            raise ValueError("content is not an object")
        result.content.append(parse_content(item))
    return result


def parse_read_resource_result(raw: str | bytes | bytearray | None) -> ReadResourceResult:
    """Decode a resources/read result from JSON text."""
    data = _decode(raw)
    result = ReadResourceResult(meta=_meta_of(data))
    if "contents" not in data:
        raise ValueError("contents is missing")
    contents = data["contents"]
    if not isinstance(contents, list):
        raise ValueError("contents is not an array")
    for item in contents:
        if not isinstance(item, dict):
            raise ValueError("content is not an object")
        result.contents.append(parse_resource_contents(item))
    return result