"""Content blocks, resource contents, resources and resource templates."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Union


class Role(str, Enum):
    """Sender or recipient of a message in a conversation."""

    USER = "user"
    ASSISTANT = "assistant"


def _role_value(role: Any) -> Any:
    return role.value if isinstance(role, Enum) else role


@dataclass
class Annotations:
    """Hints to the client about who a piece of data is for and how much it matters."""

    audience: list[Role] | None = None
    priority: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.audience:
            result["audience"] = [_role_value(role) for role in self.audience]
        if self.priority:
            result["priority"] = self.priority
        return result


def _with_annotations(result: dict[str, Any], annotations: Annotations | None) -> dict[str, Any]:
    if annotations is not None:
        return {"annotations": annotations.to_dict(), **result}
    return result


@dataclass
class TextContent:
    """Text provided to or from a model."""

    text: str
    type: str = "text"
    annotations: Annotations | None = None

    def to_dict(self) -> dict[str, Any]:
        return _with_annotations({"type": self.type, "text": self.text}, self.annotations)


@dataclass
class ImageContent:
    """A base64-encoded image."""

    data: str
    mime_type: str
    type: str = "image"
    annotations: Annotations | None = None

    def to_dict(self) -> dict[str, Any]:
        return _with_annotations(
            {"type": self.type, "data": self.data, "mimeType": self.mime_type},
            self.annotations,
        )


@dataclass
class AudioContent:
    """Base64-encoded audio."""

    data: str
    mime_type: str
    type: str = "audio"
    annotations: Annotations | None = None

    def to_dict(self) -> dict[str, Any]:
        return _with_annotations(
            {"type": self.type, "data": self.data, "mimeType": self.mime_type},
            self.annotations,
        )


@dataclass
class ResourceLink:
    """A link to a resource the client can access."""

    uri: str
    name: str
    description: str = ""
    mime_type: str = ""
    type: str = "resource_link"
    annotations: Annotations | None = None

    def to_dict(self) -> dict[str, Any]:
        return _with_annotations(
            {
                "type": self.type,
                "uri": self.uri,
                "name": self.name,
                "description": self.description,
                "mimeType": self.mime_type,
            },
            self.annotations,
        )


@dataclass
class TextResourceContents:
    """The textual contents of a resource."""

    uri: str
    text: str
    mime_type: str = ""

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"uri": self.uri}
        if self.mime_type:
            result["mimeType"] = self.mime_type
        result["text"] = self.text
        return result


@dataclass
class BlobResourceContents:
    """The base64-encoded binary contents of a resource."""

    uri: str
    blob: str
    mime_type: str = ""

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"uri": self.uri}
        if self.mime_type:
            result["mimeType"] = self.mime_type
        result["blob"] = self.blob
        return result


ResourceContents = Union[TextResourceContents, BlobResourceContents]


@dataclass
class EmbeddedResource:
    """Resource contents embedded into a prompt or tool result."""

    resource: ResourceContents
    type: str = "resource"
    annotations: Annotations | None = None

    def to_dict(self) -> dict[str, Any]:
        return _with_annotations(
            {"type": self.type, "resource": self.resource.to_dict()}, self.annotations
        )


Content = Union[TextContent, ImageContent, AudioContent, ResourceLink, EmbeddedResource]


_OPERATORS = "+#./;?&"
_RESERVED_OPERATORS = "=,!@|"
_VARCHAR = r"(?:[A-Za-z0-9_]|%[0-9A-Fa-f]{2})"
_VARSPEC = re.compile(rf"({_VARCHAR}+(?:\.{_VARCHAR}+)*)(?::([1-9][0-9]{{0,3}})|(\*))?")
_BAD_LITERAL = set("\"'<>\\^`{|} ")


class URITemplate:
    """A validated URI template (RFC 6570)."""

    def __init__(self, raw: str) -> None:
        self._raw = raw
        self._variables = tuple(self._parse(raw))

    @staticmethod
    def _parse(raw: str) -> list[str]:
        names: list[str] = []
        pos = 0
        while pos < len(raw):
            char = raw[pos]
            if char == "{":
                end = raw.find("}", pos + 1)
                if end < 0:
                    raise ValueError(f"uritemplate: unclosed expression at {pos}: {raw!r}")
                names.extend(URITemplate._parse_expression(raw[pos + 1 : end], raw))
                pos = end + 1
                continue
            if char == "}":
                raise ValueError(f"uritemplate: unexpected '}}' at {pos}: {raw!r}")
            if char == "%":
                if not re.fullmatch(r"[0-9A-Fa-f]{2}", raw[pos + 1 : pos + 3]):
                    raise ValueError(f"uritemplate: invalid percent-encoding at {pos}: {raw!r}")
                pos += 3
                continue
            if char in _BAD_LITERAL or ord(char) < 0x20 or ord(char) == 0x7F:
                raise ValueError(f"uritemplate: invalid literal {char!r} at {pos}: {raw!r}")
            pos += 1
        return names

    @staticmethod
    def _parse_expression(body: str, raw: str) -> list[str]:
        if body and body[0] in _RESERVED_OPERATORS:
            raise ValueError(f"uritemplate: reserved operator {body[0]!r}: {raw!r}")
        if body and body[0] in _OPERATORS:
            body = body[1:]
        if not body:
            raise ValueError(f"uritemplate: empty expression: {raw!r}")
        names = []
        for spec in body.split(","):
            match = _VARSPEC.fullmatch(spec)
            if match is None:
                raise ValueError(f"uritemplate: invalid variable {spec!r}: {raw!r}")
            names.append(match.group(1))
        return names

    @property
    def raw(self) -> str:
        """The template text as given."""
        return self._raw

    @property
    def variables(self) -> tuple[str, ...]:
        """Names of the variables in order of appearance."""
        return self._variables

    def __str__(self) -> str:
        return self._raw

    def __repr__(self) -> str:
        return f"URITemplate({self._raw!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, URITemplate):
            return self._raw == other._raw
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._raw)


@dataclass
class Resource:
    """A known resource the server can read."""

    uri: str
    name: str
    description: str = ""
    mime_type: str = ""
    annotations: Annotations | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"uri": self.uri, "name": self.name}
        if self.description:
            result["description"] = self.description
        if self.mime_type:
            result["mimeType"] = self.mime_type
        return _with_annotations(result, self.annotations)


@dataclass
class ResourceTemplate:
    """A template describing a family of resources."""

    uri_template: URITemplate | None
    name: str
    description: str = ""
    mime_type: str = ""
    annotations: Annotations | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "uriTemplate": None if self.uri_template is None else str(self.uri_template),
            "name": self.name,
        }
        if self.description:
            result["description"] = self.description
        if self.mime_type:
            result["mimeType"] = self.mime_type
        return _with_annotations(result, self.annotations)


ResourceOption = Callable[[Resource], None]
ResourceTemplateOption = Callable[[ResourceTemplate], None]


def new_resource(uri: str, name: str, *options: ResourceOption) -> Resource:
    """Create a resource, applying the options in order."""
    resource = Resource(uri=uri, name=name)
    for option in options:
        option(resource)
    return resource


def with_resource_description(description: str) -> ResourceOption:
    """Set the description of a resource."""

    def apply(resource: Resource) -> None:
        resource.description = description

    return apply


def with_mime_type(mime_type: str) -> ResourceOption:
    """Set the MIME type of a resource."""

    def apply(resource: Resource) -> None:
        resource.mime_type = mime_type

    return apply


def with_annotations(audience: list[Role] | None, priority: float) -> ResourceOption:
    """Set the audience and priority annotations of a resource."""

    def apply(resource: Resource) -> None:
        if resource.annotations is None:
            resource.annotations = Annotations()
        resource.annotations.audience = audience
        resource.annotations.priority = priority

    return apply


def new_resource_template(
    uri_template: str, name: str, *options: ResourceTemplateOption
) -> ResourceTemplate:
    """Create a resource template; raises ValueError for an invalid template."""
    template = ResourceTemplate(uri_template=URITemplate(uri_template), name=name)
    for option in options:
        option(template)
    return template


def with_template_description(description: str) -> ResourceTemplateOption:
    """Set the description of a resource template."""

    def apply(template: ResourceTemplate) -> None:
        template.description = description

    return apply


def with_template_mime_type(mime_type: str) -> ResourceTemplateOption:
    """Set the MIME type shared by all resources matching a template."""

    def apply(template: ResourceTemplate) -> None:
        template.mime_type = mime_type

    return apply


def with_template_annotations(
    audience: list[Role] | None, priority: float
) -> ResourceTemplateOption:
    """Set the audience and priority annotations of a resource template."""

    def apply(template: ResourceTemplate) -> None:
        if template.annotations is None:
            template.annotations = Annotations()
        template.annotations.audience = audience
        template.annotations.priority = priority

    return apply


def new_text_content(text: str) -> TextContent:
    return TextContent(text=text)


def new_image_content(data: str, mime_type: str) -> ImageContent:
    return ImageContent(data=data, mime_type=mime_type)


def new_audio_content(data: str, mime_type: str) -> AudioContent:
    return AudioContent(data=data, mime_type=mime_type)


def new_resource_link(uri: str, name: str, description: str, mime_type: str) -> ResourceLink:
    return ResourceLink(uri=uri, name=name, description=description, mime_type=mime_type)


def new_embedded_resource(resource: ResourceContents) -> EmbeddedResource:
    return EmbeddedResource(resource=resource)


def extract_string(data: dict[str, Any], key: str) -> str:
    """Return data[key] if it is a string, otherwise an empty string."""
    value = data.get(key)
    return value if isinstance(value, str) else ""


def extract_map(data: dict[str, Any], key: str) -> dict[str, Any] | None:
    """Return data[key] if it is a mapping, otherwise None."""
    value = data.get(key)
    return value if isinstance(value, dict) else None


def parse_content(content_map: dict[str, Any]) -> Content:
    """Build a content block from its decoded JSON form."""
    content_type = extract_string(content_map, "type")

    if content_type == "text":
        return new_text_content(extract_string(content_map, "text"))

    if content_type in ("image", "audio"):
        data = extract_string(content_map, "data")
        mime_type = extract_string(content_map, "mimeType")
        if not data or not mime_type:
            raise ValueError(f"{content_type} data or mimeType is missing")
        if content_type == "image":
            return new_image_content(data, mime_type)
        return new_audio_content(data, mime_type)

    if content_type == "resource_link":
        uri = extract_string(content_map, "uri")
        name = extract_string(content_map, "name")
        if not uri or not name:
            raise ValueError("resource_link uri or name is missing")
        return new_resource_link(
            uri,
            name,
            extract_string(content_map, "description"),
            extract_string(content_map, "mimeType"),
        )

    if content_type == "resource":
        resource_map = extract_map(content_map, "resource")
        if resource_map is None:
            raise ValueError("resource is missing")
        return new_embedded_resource(parse_resource_contents(resource_map))

    raise ValueError(f"unsupported content type: {content_type}")


def parse_resource_contents(content_map: dict[str, Any]) -> ResourceContents:
    """Build text or blob resource contents from their decoded JSON form."""
    uri = extract_string(content_map, "uri")
    if not uri:
        raise ValueError("resource uri is missing")
    mime_type = extract_string(content_map, "mimeType")
    text = extract_string(content_map, "text")
    if text:
        return TextResourceContents(uri=uri, text=text, mime_type=mime_type)
    blob = extract_string(content_map, "blob")
    if blob:
        return BlobResourceContents(uri=uri, blob=blob, mime_type=mime_type)
    raise ValueError("unsupported resource type")