"""Prompts, prompt arguments and prompt messages, with option helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from mcpkit.content import Content, Role


@dataclass
class PromptArgument:
    """An argument that a prompt template accepts."""

    name: str
    description: str = ""
    required: bool = False

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name}
        if self.description:
            result["description"] = self.description
        if self.required:
            result["required"] = True
        return result


@dataclass
class Prompt:
    """A prompt or prompt template offered by a server.

    A prompt with arguments is a template; one without is static.
    """

    name: str
    description: str = ""
    arguments: list[PromptArgument] | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name}
        if self.description:
            result["description"] = self.description
        if self.arguments:
            result["arguments"] = [argument.to_dict() for argument in self.arguments]
        return result


@dataclass
class PromptMessage:
    """A message returned as part of a prompt."""

    role: Role
    content: Content

    def to_dict(self) -> dict[str, Any]:
        role = self.role.value if isinstance(self.role, Enum) else self.role
        return {"role": role, "content": self.content.to_dict()}


PromptOption = Callable[[Prompt], None]
ArgumentOption = Callable[[PromptArgument], None]


def new_prompt(name: str, *options: PromptOption) -> Prompt:
    """Create a prompt, applying the options in order."""
    prompt = Prompt(name=name)
    for option in options:
        option(prompt)
    return prompt


def with_prompt_description(description: str) -> PromptOption:
    """Set the description of a prompt."""

    def apply(prompt: Prompt) -> None:
        prompt.description = description

    return apply


def with_argument(name: str, *options: ArgumentOption) -> PromptOption:
    """Append an argument, configured by the given options, to a prompt."""

    def apply(prompt: Prompt) -> None:
        argument = PromptArgument(name=name)
        for option in options:
            option(argument)
        if prompt.arguments is None:
            prompt.arguments = []
        prompt.arguments.append(argument)

    return apply


def argument_description(desc: str) -> ArgumentOption:
    """Set the description of a prompt argument."""

    def apply(argument: PromptArgument) -> None:
        argument.description = desc

    return apply


def required_argument() -> ArgumentOption:
    """Mark a prompt argument as required."""

    def apply(argument: PromptArgument) -> None:
        argument.required = True

    return apply


def new_prompt_message(role: Role, content: Content) -> PromptMessage:
    """Create a prompt message."""
    return PromptMessage(role=role, content=content)