"""Conversation message types.

Messages are immutable values. A conversation is any ordered sequence of
them, chronological, with system messages interleaved anywhere.

Types:
    Message: A single chat message with optional images and tool calls.
    ToolCall: A function call issued by the assistant.

Constants:
    SKIP_MARKER: The canonical system message that marks elided history.
"""

from __future__ import annotations

import base64
import json
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from typing import Any, Literal

Role = Literal["system", "user", "assistant", "tool"]

ROLES: frozenset[str] = frozenset({"system", "user", "assistant", "tool"})


@dataclass(frozen=True)
class ToolCall:
    """A function call issued by the assistant.

    Attributes:
        name: Name of the called tool.
        arguments: Arguments passed to the tool.
        id: Optional provider call identifier.
    """

    name: str
    arguments: dict[str, Any] = field(default_factory=dict, hash=False)
    id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": "function",
            "function": {"name": self.name, "arguments": json.dumps(self.arguments)},
        }
        if self.id is not None:
            data["id"] = self.id
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ToolCall:
        function = data.get("function", data)
        arguments = function.get("arguments") or {}
        if isinstance(arguments, str):
            arguments = json.loads(arguments) if arguments.strip() else {}
        return cls(name=function["name"], arguments=arguments, id=data.get("id"))


@dataclass(frozen=True)
class Message:
    """A single chat message.

    Equality is by value: role, content, image bytes, tool calls and
    tool name must all match.

    Attributes:
        role: One of ``system``, ``user``, ``assistant`` or ``tool``.
        content: Message text.
        images: Raw image payloads in attachment order.
        tool_calls: Function calls issued by an assistant message.
        tool_name: Name of the tool that produced a ``tool`` message.
    """

    role: Role
    content: str = ""
    images: tuple[bytes, ...] = ()
    tool_calls: tuple[ToolCall, ...] = ()
    tool_name: str | None = None

    def __post_init__(self) -> None:
        if self.role not in ROLES:
            raise ValueError(f"Unknown message role: {self.role!r}")
        # Accept lists from callers, store tuples
        if not isinstance(self.images, tuple):
            object.__setattr__(self, "images", tuple(self.images))
        if not isinstance(self.tool_calls, tuple):
            object.__setattr__(self, "tool_calls", tuple(self.tool_calls))

    @property
    def is_system(self) -> bool:
        return self.role == "system"

    def with_content(self, content: str) -> Message:
        """Return a copy of this message with different text."""
        return replace(self, content=content)

    def to_dict(self) -> dict[str, Any]:
        """Convert to an OpenAI-style message dict.

        Images are encoded as base64 strings so the dict is JSON-serializable.
        """
        data: dict[str, Any] = {"role": self.role, "content": self.content}
        if self.images:
            data["images"] = [base64.b64encode(image).decode("ascii") for image in self.images]
        if self.tool_calls:
            data["tool_calls"] = [call.to_dict() for call in self.tool_calls]
        if self.tool_name is not None:
            data["tool_name"] = self.tool_name
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Message:
        """Build a message from an OpenAI-style message dict.

        Args:
            data: Dict with at least a ``role`` key. Images may be raw bytes
                or base64 strings.

        Returns:
            The corresponding Message.
        """
        images = data.get("images") or ()
        return cls(
            role=data["role"],
            content=data.get("content") or "",
            images=tuple(_image_bytes(image) for image in images),
            tool_calls=tuple(ToolCall.from_dict(tc) for tc in data.get("tool_calls") or ()),
            tool_name=data.get("tool_name") or data.get("name"),
        )


SKIP_MARKER = Message(role="system", content="...")


def is_skip_marker(message: Message) -> bool:
    """Check whether a message is the skip marker (role and content)."""
    return message.role == SKIP_MARKER.role and message.content == SKIP_MARKER.content


def as_messages(conversation: Iterable[Message | dict[str, Any]]) -> list[Message]:
    """Normalize a conversation of messages or dicts to a list of messages."""
    return [m if isinstance(m, Message) else Message.from_dict(m) for m in conversation]


def _image_bytes(image: str | bytes | bytearray) -> bytes:
    if isinstance(image, str):
        return base64.b64decode(image, validate=True)
    return bytes(image)
