"""Context window sizing and message selection.

Sizing:
    >>> from promptfit.context import compute_window_size
    >>> compute_window_size(11, 512, 8192).tokens
    1024

Selection:
    >>> from promptfit.context import MessageSelector
    >>> selector = MessageSelector(oracle)
    >>> result = await selector.select(history, window_size=4096, request_id="req-1")
    >>> result.report.tokens_removed
"""

from promptfit.context.config import ContextConfig
from promptfit.context.report import SelectionReport
from promptfit.context.selection import MessageSelector, SelectionResult, select_messages
from promptfit.context.sizing import (
    UNSPECIFIED_RESPONSE_BUDGET,
    WindowSize,
    compute_window_size,
)

__all__ = [
    "UNSPECIFIED_RESPONSE_BUDGET",
    "ContextConfig",
    "MessageSelector",
    "SelectionReport",
    "SelectionResult",
    "WindowSize",
    "compute_window_size",
    "select_messages",
]
