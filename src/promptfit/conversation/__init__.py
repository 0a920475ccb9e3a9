"""Conversation data model.

    >>> from promptfit.conversation import Message, SKIP_MARKER
    >>> history = [
    ...     Message(role="system", content="You are terse."),
    ...     Message(role="user", content="Hi"),
    ... ]
"""

from promptfit.conversation.convert import from_model_messages
from promptfit.conversation.message import (
    SKIP_MARKER,
    Message,
    Role,
    ToolCall,
    as_messages,
    is_skip_marker,
)

__all__ = [
    "SKIP_MARKER",
    "Message",
    "Role",
    "ToolCall",
    "as_messages",
    "from_model_messages",
    "is_skip_marker",
]
