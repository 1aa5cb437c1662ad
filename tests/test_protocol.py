import json

import pytest

from mcpkit.protocol import (
    INVALID_PARAMS,
    JSONRPC_VERSION,
    LATEST_PROTOCOL_VERSION,
    VALID_PROTOCOL_VERSIONS,
    ClientCapabilities,
    Implementation,
    JSONRPCNotification,
    JSONRPCRequest,
    LoggingLevel,
    MCPMethod,
    Meta,
    Notification,
    NotificationParams,
    Request,
    RequestId,
    ServerCapabilities,
    new_jsonrpc_error,
    new_jsonrpc_response,
    new_logging_message_notification,
    new_progress_notification,
)


@pytest.mark.parametrize(
    "text, meta, expected",
    [
        ("{}", Meta(), Meta(additional_fields={})),
        ("{}", Meta(additional_fields={}), Meta(additional_fields={})),
        (
            '{"progressToken":"123"}',
            Meta(progress_token="123"),
            Meta(progress_token="123", additional_fields={}),
        ),
        (
            '{"progressToken":"123"}',
            Meta(progress_token="123", additional_fields={}),
            Meta(progress_token="123", additional_fields={}),
        ),
        (
            '{"a":2,"b":"1"}',
            Meta(additional_fields={"a": 2, "b": "1"}),
            Meta(additional_fields={"a": 2.0, "b": "1"}),
        ),
        (
            '{"a":2,"b":"1","progressToken":"123"}',
            Meta(progress_token="123", additional_fields={"a": 2, "b": "1"}),
            Meta(progress_token="123", additional_fields={"a": 2.0, "b": "1"}),
        ),
    ],
)
def test_meta_marshalling(text, meta, expected):
    assert meta.to_json() == text
    assert Meta.from_json(text) == expected


def test_meta_from_json_rejects_non_object():
    with pytest.raises(ValueError):
        Meta.from_json("[1, 2]")


@pytest.mark.parametrize(
    "value, expected",
    [
        ("abc", "string:abc"),
        (7, "int64:7"),
        (3.0, "int64:3"),
        (2.5, "float64:2.5"),
        (1e-05, "float64:0.00001"),
        (None, "<nil>"),
        (True, "unknown:true"),
    ],
)
def test_request_id_str(value, expected):
    assert str(RequestId(value)) == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ('"abc"', "abc"),
        ("5", 5),
        ("5.0", 5),
        ("5.5", 5.5),
    ],
)
def test_request_id_from_json(text, expected):
    rid = RequestId.from_json(text)
    assert rid.value == expected
    assert type(rid.value) is type(expected)


def test_request_id_null_is_nil():
    rid = RequestId.from_json("null")
    assert rid.is_nil()
    assert not RequestId(1).is_nil()


@pytest.mark.parametrize("text", ["true", "{}", "[1]", "{"])
def test_request_id_invalid(text):
    with pytest.raises(ValueError, match="invalid request id"):
        RequestId.from_json(text)


def test_request_id_round_trip():
    for value in ("x", 42, 1.25):
        assert RequestId.from_json(RequestId(value).to_json()) == RequestId(value)


def test_notification_params_round_trip_and_meta_protection():
    params = NotificationParams(
        meta={"k": "v"}, additional_fields={"a": 1, "_meta": "ignored"}
    )
    data = params.to_dict()
    assert data == {"_meta": {"k": "v"}, "a": 1}
    back = NotificationParams.from_dict(data)
    assert back.meta == {"k": "v"}
    assert back.additional_fields == {"a": 1}


def test_notification_params_from_dict_without_meta():
    back = NotificationParams.from_dict({"x": 2})
    assert back.meta == {}
    assert back.additional_fields == {"x": 2}


def test_notification_and_request_to_dict():
    note = Notification("notifications/initialized")
    assert note.to_dict() == {"method": "notifications/initialized", "params": {}}
    req = Request(MCPMethod.PING, meta=Meta(progress_token=3))
    assert req.to_dict() == {"method": "ping", "params": {"_meta": {"progressToken": 3}}}


def test_jsonrpc_request_to_dict():
    req = JSONRPCRequest(id=RequestId(1), method=MCPMethod.TOOLS_CALL, params={"name": "x"})
    assert req.to_dict() == {
        "jsonrpc": "2.0",
        "id": 1,
        "params": {"name": "x"},
        "method": "tools/call",
    }
    bare = JSONRPCRequest(id=RequestId("a"), method="ping")
    assert "params" not in bare.to_dict()


def test_jsonrpc_notification_to_dict():
    note = JSONRPCNotification("notifications/tools/list_changed")
    assert note.to_dict() == {
        "jsonrpc": JSONRPC_VERSION,
        "method": "notifications/tools/list_changed",
        "params": {},
    }


def test_new_jsonrpc_response():
    resp = new_jsonrpc_response(RequestId(9), Implementation("srv", "1.0"))
    assert resp.to_dict() == {
        "jsonrpc": "2.0",
        "id": 9,
        "result": {"name": "srv", "version": "1.0"},
    }


def test_new_jsonrpc_error_omits_missing_data():
    err = new_jsonrpc_error(RequestId("r"), INVALID_PARAMS, "bad", None)
    assert err.to_dict() == {
        "jsonrpc": "2.0",
        "id": "r",
        "error": {"code": -32602, "message": "bad"},
    }
    with_data = new_jsonrpc_error(RequestId("r"), INVALID_PARAMS, "bad", {"x": 1})
    assert with_data.to_dict()["error"]["data"] == {"x": 1}


def test_progress_notification_optional_fields():
    plain = new_progress_notification("tok", 0.5)
    assert plain.to_dict() == {
        "method": "notifications/progress",
        "params": {"progressToken": "tok", "progress": 0.5},
    }
    full = new_progress_notification("tok", 1, 10, "halfway")
    assert full.to_dict()["params"] == {
        "progressToken": "tok",
        "progress": 1,
        "total": 10,
        "message": "halfway",
    }


def test_logging_message_notification():
    note = new_logging_message_notification(LoggingLevel.WARNING, "", {"msg": "hi"})
    assert note.to_dict() == {
        "method": "notifications/message",
        "params": {"level": "warning", "data": {"msg": "hi"}},
    }
    named = new_logging_message_notification(LoggingLevel.ERROR, "core", "boom")
    assert named.to_dict()["params"] == {"level": "error", "logger": "core", "data": "boom"}


def test_capabilities_to_dict():
    client = ClientCapabilities(roots=True, sampling=True)
    assert client.to_dict() == {"roots": {}, "sampling": {}}
    assert ClientCapabilities().to_dict() == {}
    server = ServerCapabilities(
        logging=True,
        resources=True,
        resources_subscribe=True,
        tools_list_changed=True,
    )
    assert server.to_dict() == {
        "logging": {},
        "resources": {"subscribe": True},
        "tools": {"listChanged": True},
    }
    assert json.loads(json.dumps(server.to_dict())) == server.to_dict()


def test_protocol_versions():
    assert LATEST_PROTOCOL_VERSION in VALID_PROTOCOL_VERSIONS
    assert VALID_PROTOCOL_VERSIONS[0] == "2024-11-05"
    assert MCPMethod("logging/setLevel") is MCPMethod.SET_LOG_LEVEL