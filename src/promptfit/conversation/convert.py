"""Conversion from pydantic-ai message histories.

Agents built on pydantic-ai keep their history as ``ModelMessage`` objects
(requests made of parts, responses made of parts). Each request part maps
to one chat message; each response maps to one assistant message.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Sequence
from typing import Any

from pydantic_ai.messages import (
    BinaryContent,
    ModelMessage,
    ModelRequest,
    ModelResponse,
    RetryPromptPart,
    SystemPromptPart,
    TextPart,
    ToolCallPart,
    ToolReturnPart,
    UserContent,
    UserPromptPart,
)

from promptfit.conversation.message import Message, ToolCall

logger = logging.getLogger(__name__)


def from_model_messages(history: Iterable[ModelMessage]) -> list[Message]:
    """Convert a pydantic-ai message history into chat messages.

    Args:
        history: Messages as returned by ``result.all_messages()``.

    Returns:
        Chronological list of Message values.
    """
    messages: list[Message] = []
    for model_message in history:
        if isinstance(model_message, ModelRequest):
            if model_message.instructions:
                messages.append(Message(role="system", content=model_message.instructions))
            for part in model_message.parts:
                converted = _request_part_to_message(part)
                if converted is not None:
                    messages.append(converted)
        elif isinstance(model_message, ModelResponse):
            messages.append(_response_to_message(model_message))
    return messages


def _request_part_to_message(part: Any) -> Message | None:
    if isinstance(part, SystemPromptPart):
        return Message(role="system", content=part.content)
    if isinstance(part, UserPromptPart):
        text, images = _split_user_content(part.content)
        return Message(role="user", content=text, images=images)
    if isinstance(part, ToolReturnPart):
        return Message(role="tool", content=part.model_response_str(), tool_name=part.tool_name)
    if isinstance(part, RetryPromptPart):
        # Retries tied to a tool go back as tool output, others as user text
        if part.tool_name is not None:
            return Message(role="tool", content=part.model_response(), tool_name=part.tool_name)
        return Message(role="user", content=part.model_response())
    logger.debug("Skipping unsupported request part: %s", type(part).__name__)
    return None


def _split_user_content(content: str | Sequence[UserContent]) -> tuple[str, tuple[bytes, ...]]:
    if isinstance(content, str):
        return content, ()
    texts: list[str] = []
    images: list[bytes] = []
    for item in content:
        if isinstance(item, str):
            texts.append(item)
        elif isinstance(item, BinaryContent) and item.is_image:
            images.append(item.data)
        else:
            logger.debug("Skipping unsupported user content: %s", type(item).__name__)
    return "\n".join(texts), tuple(images)


def _response_to_message(response: ModelResponse) -> Message:
    texts: list[str] = []
    calls: list[ToolCall] = []
    for part in response.parts:
        if isinstance(part, TextPart):
            texts.append(part.content)
        elif isinstance(part, ToolCallPart):
            calls.append(
                ToolCall(
                    name=part.tool_name,
                    arguments=_tool_args(part.args),
                    id=part.tool_call_id,
                )
            )
    return Message(role="assistant", content="".join(texts), tool_calls=tuple(calls))


def _tool_args(args: str | dict[str, Any] | None) -> dict[str, Any]:
    if args is None:
        return {}
    if isinstance(args, str):
        if not args.strip():
            return {}
        parsed = json.loads(args)
        return parsed if isinstance(parsed, dict) else {"value": parsed}
    return dict(args)
