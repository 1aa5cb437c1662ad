"""Callbacks run around the handling of server requests and sessions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

from mcpkit.protocol import MCPMethod

BeforeAnyHook = Callable[[Any, Any, MCPMethod, Any], None]
SuccessHook = Callable[[Any, Any, MCPMethod, Any, Any], None]
ErrorHook = Callable[[Any, Any, MCPMethod, Any, BaseException], None]
SessionHook = Callable[[Any, Any], None]
RequestInitializationHook = Callable[[Any, Any, Any], None]
BeforeHook = Callable[[Any, Any, Any], None]
AfterHook = Callable[[Any, Any, Any, Any], None]

_HOOKED_METHODS = frozenset(
    {
        "initialize",
        "ping",
        "logging/setLevel",
        "resources/list",
        "resources/templates/list",
        "resources/read",
        "prompts/list",
        "prompts/get",
        "tools/list",
        "tools/call",
    }
)


def _method(method: MCPMethod | str) -> MCPMethod:
    try:
        resolved = method if isinstance(method, MCPMethod) else MCPMethod(method)
    except ValueError:
        raise ValueError(f"unknown method: {method}") from None
    if resolved.value not in _HOOKED_METHODS:
        raise ValueError(f"method {resolved.value} does not support hooks")
    return resolved


@dataclass
class Hooks:
    """Registered hooks, run in the order they were added."""

    on_register_session: list[SessionHook] = field(default_factory=list)
    on_unregister_session: list[SessionHook] = field(default_factory=list)
    on_before_any: list[BeforeAnyHook] = field(default_factory=list)
    on_success: list[SuccessHook] = field(default_factory=list)
    on_error: list[ErrorHook] = field(default_factory=list)
    on_request_initialization: list[RequestInitializationHook] = field(default_factory=list)
    before: dict[MCPMethod, list[BeforeHook]] = field(default_factory=dict)
    after: dict[MCPMethod, list[AfterHook]] = field(default_factory=dict)

    def add_before_any(self, hook: BeforeAnyHook) -> None:
        self.on_before_any.append(hook)

    def add_on_success(self, hook: SuccessHook) -> None:
        self.on_success.append(hook)

    def add_on_error(self, hook: ErrorHook) -> None:
        """Register a hook called with the exception when handling fails."""
        self.on_error.append(hook)

    def add_on_register_session(self, hook: SessionHook) -> None:
        self.on_register_session.append(hook)

    def add_on_unregister_session(self, hook: SessionHook) -> None:
        self.on_unregister_session.append(hook)

    def add_on_request_initialization(self, hook: RequestInitializationHook) -> None:
        """Register a hook run before any request; raising rejects the request."""
        self.on_request_initialization.append(hook)

    def add_before(self, method: MCPMethod | str, hook: BeforeHook) -> None:
        """Register a hook run before the given method is handled."""
        self.before.setdefault(_method(method), []).append(hook)

    def add_after(self, method: MCPMethod | str, hook: AfterHook) -> None:
        """Register a hook run after the given method produced a result."""
        self.after.setdefault(_method(method), []).append(hook)

    def register_session(self, ctx: Any, session: Any) -> None:
        for hook in self.on_register_session:
            hook(ctx, session)

    def unregister_session(self, ctx: Any, session: Any) -> None:
        for hook in self.on_unregister_session:
            hook(ctx, session)

    def run_before(self, ctx: Any, request_id: Any, method: MCPMethod | str, message: Any) -> None:
        """Run the before-any hooks, then those for the method."""
        resolved = _method(method)
        for hook in self.on_before_any:
            hook(ctx, request_id, resolved, message)
        for hook in self.before.get(resolved, []):
            hook(ctx, request_id, message)

    def run_after(
        self,
        ctx: Any,
        request_id: Any,
        method: MCPMethod | str,
        message: Any,
        result: Any,
    ) -> None:
        """Run the success hooks, then the after hooks for the method."""
        resolved = _method(method)
        for hook in self.on_success:
            hook(ctx, request_id, resolved, message, result)
        for hook in self.after.get(resolved, []):
            hook(ctx, request_id, message, result)

    def run_error(
        self,
        ctx: Any,
        request_id: Any,
        method: MCPMethod | str,
        message: Any,
        err: BaseException,
    ) -> None:
        resolved = method if isinstance(method, MCPMethod) else MCPMethod(method)
        for hook in self.on_error:
            hook(ctx, request_id, resolved, message, err)

    def run_request_initialization(self, ctx: Any, request_id: Any, message: Any) -> None:
        """Run the initialization hooks; the first one that raises stops the rest."""
        for hook in self.on_request_initialization:
            hook(ctx, request_id, message)