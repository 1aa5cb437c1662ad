# mcpkit

Building blocks for Model Context Protocol (MCP) servers and clients:
JSON-RPC message types, tool, prompt and resource definitions with builder
options, helpers for building and parsing results, and request hooks. The
package has no dependencies outside the standard library.

## Installation

```
pip install mcpkit
```

To run the test suite:

```
pip install "mcpkit[test]"
pytest
```

## Modules

- `mcpkit.protocol` – `RequestId`, `Meta`, `Request`, `Notification`,
  `NotificationParams`, the JSON-RPC envelopes (`JSONRPCRequest`,
  `JSONRPCNotification`, `JSONRPCResponse`, `JSONRPCError`), `Implementation`,
  `ClientCapabilities`, `ServerCapabilities`, progress and logging
  notifications, the `MCPMethod` and `LoggingLevel` enums, protocol version and
  error-code constants, and the builders `new_jsonrpc_response`,
  `new_jsonrpc_error`, `new_progress_notification` and
  `new_logging_message_notification`.
- `mcpkit.content` – content blocks (`TextContent`, `ImageContent`,
  `AudioContent`, `ResourceLink`, `EmbeddedResource`), resource contents
  (`TextResourceContents`, `BlobResourceContents`), `Resource`,
  `ResourceTemplate`, `URITemplate`, `Annotations`, `Role`, and
  `parse_content` / `parse_resource_contents`.
- `mcpkit.prompts` – `Prompt`, `PromptArgument`, `PromptMessage` and their
  options.
- `mcpkit.tools` – `Tool`, `ToolInputSchema`, `ToolAnnotation` and the tool and
  property options.
- `mcpkit.results` – result types for tool calls, listings, prompts, resource
  reads and initialization, with builders and JSON parsers.
- `mcpkit.hooks` – `Hooks`, a registry of callbacks around request handling.

Every message type has a `to_dict()` method giving its JSON-ready form.

## Defining a tool

```python
from mcpkit.tools import (
    new_tool, with_description, with_string, with_number,
    description, required, minimum,
)

tool = new_tool(
    "calculator",
    with_description("Adds two numbers"),
    with_number("x", description("First operand"), required()),
    with_number("y", description("Second operand"), required(), minimum(0)),
    with_string("note", description("Optional remark")),
)
print(tool.to_json())
```

Options are applied in order. A property marked with `required()` is moved into
the input schema's `required` list. `new_tool` sets the default annotations
(not read-only, destructive, not idempotent, open world); the
`with_*_hint_annotation` options change them.

`new_tool_with_raw_schema(name, description, schema)` carries an arbitrary JSON
Schema, given as JSON text or a decoded value. Property options cannot be
applied to such a tool (they raise `TypeError`), and if a structured schema
type is set as well, `to_dict()` raises `ToolSchemaConflictError`.
`Tool.from_dict` / `Tool.from_json` decode a tool, always into `input_schema`.

Array items can be described with `items(schema)` or the shorthands
`with_string_items(...)`, `with_string_enum_items(values)`,
`with_number_items(...)` and `with_boolean_items(...)`.

## Building results

```python
from mcpkit.results import new_tool_result_text, new_tool_result_error_from_err

ok = new_tool_result_text("5")
failed = new_tool_result_error_from_err("division failed", ZeroDivisionError("division by zero"))
print(failed.to_dict())
# {'content': [{'type': 'text', 'text': 'division failed: division by zero'}], 'isError': True}
```

Tool failures are reported inside the result with `is_error` set.
`new_tool_result_errorf` formats its text printf-style, and
`format_number_result` rounds to two decimals.

## Prompts and resources

```python
from mcpkit.prompts import (
    new_prompt, with_prompt_description, with_argument,
    argument_description, required_argument,
)
from mcpkit.content import new_resource, new_resource_template, with_mime_type

prompt = new_prompt(
    "greeting",
    with_prompt_description("Greets someone"),
    with_argument("name", argument_description("Who to greet"), required_argument()),
)
resource = new_resource("test://resource", "Test Resource", with_mime_type("text/plain"))
template = new_resource_template("users://{id}/profile", "User profile")
```

`new_resource_template` raises `ValueError` for a malformed URI template.

## Parsing responses

`parse_call_tool_result`, `parse_get_prompt_result` and
`parse_read_resource_result` in `mcpkit.results` turn raw JSON responses into
result objects, raising `ValueError` on missing or malformed content.
`RequestId.from_json` and `Meta.from_json` decode identifiers and metadata.

## Hooks

```python
from mcpkit.hooks import Hooks

hooks = Hooks()
hooks.add_before("tools/call", lambda ctx, request_id, message: print("calling", request_id))
hooks.add_on_error(lambda ctx, request_id, method, message, err: print(method, err))
hooks.run_before(None, 1, "tools/call", {"name": "calculator"})
```

Hooks run in the order they were added. `run_before` and `run_after` run the
general hooks first, then those for the method; `run_request_initialization`
stops at the first hook that raises.

## What this package does not do

It defines messages and helpers only. It has no server that dispatches
requests, no client, and no transport (stdio, HTTP or otherwise); `Hooks` must
be called by your own request handling. There are no helpers for converting or
binding tool-call arguments; read them from the decoded request yourself.