"""
promptfit - Fit chat conversations into a model's context window.

Quick Start:
    >>> from promptfit import Message, ModelInfo, build_chat_prompt
    >>> from promptfit.templates import Jinja2ChatTemplate
    >>> from promptfit.tokens import TiktokenTokenizer
    >>> model = ModelInfo(name="llama3.2", context_length=8192)
    >>> chat = await build_chat_prompt(
    ...     [Message(role="user", content="Hello!")],
    ...     model,
    ...     Jinja2ChatTemplate(),
    ...     TiktokenTokenizer(),
    ...     num_predict=512,
    ... )
    >>> chat.window.tokens
    1024

Key Features:
    - Dynamic window sizing rounded to 1024-token quanta
    - Message-aware truncation that keeps system messages, the first
      message and the latest message, plus the most recent history that fits
    - Image ids, reference tags and token surcharges
    - Diagnostic selection reports for logging and display
"""

from promptfit.config.settings import PromptFitSettings
from promptfit.context import (
    ContextConfig,
    MessageSelector,
    SelectionReport,
    SelectionResult,
    WindowSize,
    compute_window_size,
    select_messages,
)
from promptfit.conversation import SKIP_MARKER, Message, ToolCall, from_model_messages
from promptfit.errors import (
    ConfigurationError,
    PromptFitError,
    RenderError,
    TokenizeError,
    UnsupportedMultiImageError,
)
from promptfit.images import ImageData
from promptfit.models import ModelInfo
from promptfit.prompt import ChatPrompt, PromptBuilder, build_chat_prompt
from promptfit.tokens import MeasurementOracle

__version__ = "0.1.0"

__all__ = [
    "SKIP_MARKER",
    "ChatPrompt",
    "ConfigurationError",
    "ContextConfig",
    "ImageData",
    "MeasurementOracle",
    "Message",
    "MessageSelector",
    "ModelInfo",
    "PromptBuilder",
    "PromptFitError",
    "PromptFitSettings",
    "RenderError",
    "SelectionReport",
    "SelectionResult",
    "TokenizeError",
    "ToolCall",
    "UnsupportedMultiImageError",
    "WindowSize",
    "__version__",
    "build_chat_prompt",
    "compute_window_size",
    "from_model_messages",
    "select_messages",
]
