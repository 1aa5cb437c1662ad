"""JSON-RPC envelopes, identifiers, metadata and notifications of the protocol."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any

LATEST_PROTOCOL_VERSION = "2025-03-26"
VALID_PROTOCOL_VERSIONS = ("2024-11-05", LATEST_PROTOCOL_VERSION)
JSONRPC_VERSION = "2.0"

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
RESOURCE_NOT_FOUND = -32002

METHOD_NOTIFICATION_RESOURCES_LIST_CHANGED = "notifications/resources/list_changed"
METHOD_NOTIFICATION_RESOURCE_UPDATED = "notifications/resources/updated"
METHOD_NOTIFICATION_PROMPTS_LIST_CHANGED = "notifications/prompts/list_changed"
METHOD_NOTIFICATION_TOOLS_LIST_CHANGED = "notifications/tools/list_changed"
METHOD_NOTIFICATION_PROGRESS = "notifications/progress"
METHOD_NOTIFICATION_MESSAGE = "notifications/message"


class MCPMethod(str, Enum):
    """Request methods understood by a server."""

    INITIALIZE = "initialize"
    PING = "ping"
    RESOURCES_LIST = "resources/list"
    RESOURCES_TEMPLATES_LIST = "resources/templates/list"
    RESOURCES_READ = "resources/read"
    PROMPTS_LIST = "prompts/list"
    PROMPTS_GET = "prompts/get"
    TOOLS_LIST = "tools/list"
    TOOLS_CALL = "tools/call"
    SET_LOG_LEVEL = "logging/setLevel"


class LoggingLevel(str, Enum):
    """Severity of a log message, following syslog severities."""

    DEBUG = "debug"
    INFO = "info"
    NOTICE = "notice"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"
    ALERT = "alert"
    EMERGENCY = "emergency"


def _plain(value: Any) -> Any:
    """Turn protocol objects into JSON-ready Python values."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, RequestId):
        return value.value
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    return format(Decimal(repr(value)), "f")


@dataclass(frozen=True)
class RequestId:
    """A JSON-RPC request identifier: a string, a number or nothing."""

    value: Any = None

    def __str__(self) -> str:
        value = self.value
        if value is None:
            return "<nil>"
        if isinstance(value, bool):
            return "unknown:" + ("true" if value else "false")
        if isinstance(value, str):
            return "string:" + value
        if isinstance(value, int):
            return f"int64:{value}"
        if isinstance(value, float):
            if math.isfinite(value) and value.is_integer():
                return f"int64:{int(value)}"
            return "float64:" + _format_float(value)
        return f"unknown:{value}"

    def is_nil(self) -> bool:
        """Return True when the identifier carries no value."""
        return self.value is None

    def to_json(self) -> str:
        """Encode the identifier as JSON text."""
        return json.dumps(self.value)

    @classmethod
    def from_json(cls, data: str | bytes) -> RequestId:
        """Decode an identifier; integral numbers become ints."""
        text = data.decode() if isinstance(data, (bytes, bytearray)) else data
        try:
            value = json.loads(text)
        except ValueError as exc:
            raise ValueError(f"invalid request id: {text}") from exc
        if value is None:
            return cls(None)
        if isinstance(value, str):
            return cls(value)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            number = float(value)
            if math.isfinite(number) and number.is_integer():
                return cls(int(number))
            return cls(number)
        raise ValueError(f"invalid request id: {text}")


@dataclass
class Meta:
    """Metadata attached to request parameters."""

    progress_token: Any = None
    additional_fields: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        raw: dict[str, Any] = {}
        if self.progress_token is not None:
            raw["progressToken"] = self.progress_token
        if self.additional_fields:
            raw.update(self.additional_fields)
        return raw

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Meta:
        raw = dict(data)
        token = raw.pop("progressToken", None)
        return cls(progress_token=token, additional_fields=raw)

    def to_json(self) -> str:
        return json.dumps(_plain(self.to_dict()), sort_keys=True, separators=(",", ":"))

    @classmethod
    def from_json(cls, text: str | bytes) -> Meta:
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("meta must be a JSON object")
        return cls.from_dict(data)


@dataclass
class NotificationParams:
    """Notification parameters: reserved metadata plus free-form fields."""

    meta: dict[str, Any] | None = None
    additional_fields: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.meta is not None:
            result["_meta"] = _plain(self.meta)
        for key, value in self.additional_fields.items():
            if key != "_meta":
                result[key] = _plain(value)
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> NotificationParams:
        meta: dict[str, Any] = {}
        additional: dict[str, Any] = {}
        for key, value in data.items():
            if key == "_meta":
                if isinstance(value, dict):
                    meta = value
            else:
                additional[key] = value
        return cls(meta=meta, additional_fields=additional)


@dataclass
class Notification:
    """A notification method with its parameters."""

    method: str
    params: NotificationParams = field(default_factory=NotificationParams)

    def to_dict(self) -> dict[str, Any]:
        return {"method": _plain(self.method), "params": self.params.to_dict()}


@dataclass
class Request:
    """A request method with optional metadata."""

    method: str
    meta: Meta | None = None

    def to_dict(self) -> dict[str, Any]:
        params: dict[str, Any] = {}
        if self.meta is not None:
            params["_meta"] = self.meta.to_dict()
        return {"method": _plain(self.method), "params": params}


@dataclass
class JSONRPCRequest:
    """A JSON-RPC request that expects a response."""

    id: RequestId
    method: str
    params: Any = None
    jsonrpc: str = JSONRPC_VERSION

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id.value}
        if self.params is not None:
            result["params"] = _plain(self.params)
        result["method"] = _plain(self.method)
        return result


@dataclass
class JSONRPCNotification:
    """A JSON-RPC notification, which expects no response."""

    method: str
    params: NotificationParams = field(default_factory=NotificationParams)
    jsonrpc: str = JSONRPC_VERSION

    def to_dict(self) -> dict[str, Any]:
        return {
            "jsonrpc": self.jsonrpc,
            "method": _plain(self.method),
            "params": self.params.to_dict(),
        }


@dataclass
class JSONRPCResponse:
    """A successful JSON-RPC response."""

    id: RequestId
    result: Any = None
    jsonrpc: str = JSONRPC_VERSION

    def to_dict(self) -> dict[str, Any]:
        return {"jsonrpc": self.jsonrpc, "id": self.id.value, "result": _plain(self.result)}


@dataclass
class JSONRPCErrorDetail:
    """The error member of a JSON-RPC error response."""

    code: int
    message: str
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            result["data"] = _plain(self.data)
        return result


@dataclass
class JSONRPCError:
    """A JSON-RPC error response."""

    id: RequestId
    error: JSONRPCErrorDetail
    jsonrpc: str = JSONRPC_VERSION

    def to_dict(self) -> dict[str, Any]:
        return {"jsonrpc": self.jsonrpc, "id": self.id.value, "error": self.error.to_dict()}


@dataclass
class Implementation:
    """Name and version of a protocol implementation."""

    name: str
    version: str

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "version": self.version}


def _capability(present: bool, **flags: bool) -> dict[str, Any] | None:
    if not present and not any(flags.values()):
        return None
    return {key: True for key, value in flags.items() if value}


@dataclass
class ClientCapabilities:
    """Capabilities a client announces during initialization."""

    experimental: dict[str, Any] | None = None
    roots: bool = False
    roots_list_changed: bool = False
    sampling: bool = False

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.experimental:
            result["experimental"] = _plain(self.experimental)
        roots = _capability(self.roots, listChanged=self.roots_list_changed)
        if roots is not None:
            result["roots"] = roots
        if self.sampling:
            result["sampling"] = {}
        return result


@dataclass
class ServerCapabilities:
    """Capabilities a server announces during initialization."""

    experimental: dict[str, Any] | None = None
    logging: bool = False
    prompts: bool = False
    prompts_list_changed: bool = False
    resources: bool = False
    resources_subscribe: bool = False
    resources_list_changed: bool = False
    tools: bool = False
    tools_list_changed: bool = False

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.experimental:
            result["experimental"] = _plain(self.experimental)
        if self.logging:
            result["logging"] = {}
        prompts = _capability(self.prompts, listChanged=self.prompts_list_changed)
        if prompts is not None:
            result["prompts"] = prompts
        resources = _capability(
            self.resources,
            subscribe=self.resources_subscribe,
            listChanged=self.resources_list_changed,
        )
        if resources is not None:
            result["resources"] = resources
        tools = _capability(self.tools, listChanged=self.tools_list_changed)
        if tools is not None:
            result["tools"] = tools
        return result


@dataclass
class ProgressNotificationParams:
    """Parameters of a progress notification."""

    progress_token: Any = None
    progress: float = 0.0
    total: float = 0.0
    message: str = ""

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "progressToken": _plain(self.progress_token),
            "progress": self.progress,
        }
        if self.total:
            result["total"] = self.total
        if self.message:
            result["message"] = self.message
        return result


@dataclass
class ProgressNotification:
    """An out-of-band progress update for a long-running request."""

    params: ProgressNotificationParams = field(default_factory=ProgressNotificationParams)
    method: str = METHOD_NOTIFICATION_PROGRESS

    def to_dict(self) -> dict[str, Any]:
        return {"method": self.method, "params": self.params.to_dict()}


@dataclass
class LoggingMessageNotificationParams:
    """Parameters of a log message notification."""

    level: LoggingLevel
    logger: str = ""
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"level": _plain(self.level)}
        if self.logger:
            result["logger"] = self.logger
        result["data"] = _plain(self.data)
        return result


@dataclass
class LoggingMessageNotification:
    """A log message sent from server to client."""

    params: LoggingMessageNotificationParams
    method: str = METHOD_NOTIFICATION_MESSAGE

    def to_dict(self) -> dict[str, Any]:
        return {"method": self.method, "params": self.params.to_dict()}


def new_jsonrpc_response(request_id: RequestId, result: Any) -> JSONRPCResponse:
    """Build a successful response for the given request id."""
    return JSONRPCResponse(id=request_id, result=result)


def new_jsonrpc_error(
    request_id: RequestId, code: int, message: str, data: Any = None
) -> JSONRPCError:
    """Build an error response for the given request id."""
    return JSONRPCError(id=request_id, error=JSONRPCErrorDetail(code, message, data))


def new_progress_notification(
    token: Any,
    progress: float,
    total: float | None = None,
    message: str | None = None,
) -> ProgressNotification:
    """Build a progress notification; total and message are optional."""
    params = ProgressNotificationParams(progress_token=token, progress=progress)
    if total is not None:
        params.total = total
    if message is not None:
        params.message = message
    return ProgressNotification(params=params)


def new_logging_message_notification(
    level: LoggingLevel, logger: str, data: Any
) -> LoggingMessageNotification:
    """Build a log message notification."""
    return LoggingMessageNotification(
        params=LoggingMessageNotificationParams(level=level, logger=logger, data=data)
    )