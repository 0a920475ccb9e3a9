"""Dynamic context window sizing.

The window for a request is always computed here from the prompt length,
the requested response length and the model limit. A window size sent by
the client is not trusted by default, since it directly drives how much
memory the backend reserves.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from promptfit.context.config import ContextConfig
from promptfit.errors import ConfigurationError

logger = logging.getLogger(__name__)

UNSPECIFIED_RESPONSE_BUDGET = -1


@dataclass(frozen=True)
class WindowSize:
    """A computed context window.

    Attributes:
        tokens: Window size in tokens.
        response_budget: Tokens reserved for the response before rounding.
        budget_exceeded: True when the prompt alone reaches the model limit.
    """

    tokens: int
    response_budget: int
    budget_exceeded: bool = False

    def __int__(self) -> int:
        return self.tokens


def round_up(value: int, quantum: int) -> int:
    """Round ``value`` up to the next multiple of ``quantum``."""
    return -(-value // quantum) * quantum


def compute_window_size(
    message_length: int,
    requested_response_budget: int,
    model_max_ctx: int,
    *,
    config: ContextConfig | None = None,
    requested_window: int | None = None,
    request_id: str | None = None,
) -> WindowSize:
    """Compute the context window for a single request.

    Args:
        message_length: Token count of the rendered input.
        requested_response_budget: Tokens requested for the response. Any
            value <= 0 (conventionally -1) means "use the remaining room".
        model_max_ctx: The model's absolute context limit.
        config: Sizing configuration. Defaults to ``ContextConfig()``.
        requested_window: Window size supplied by the caller. Ignored unless
            ``config.caller_window_policy`` is ``upper_bound``.
        request_id: Identifier used to correlate log records.

    Returns:
        The computed WindowSize, a multiple of the quantum within
        ``[window_floor, model_max_ctx]``. When the prompt alone reaches the
        model limit, or the limit is below the floor, the window is the
        limit itself and ``budget_exceeded`` is set in the first case.

    Raises:
        ConfigurationError: If the model limit or message length is invalid.
    """
    config = config or ContextConfig()
    if model_max_ctx <= 0:
        raise ConfigurationError(
            "model_max_ctx must be positive",
            config_key="model_max_ctx",
            expected="> 0",
            actual=model_max_ctx,
        )
    if message_length < 0:
        raise ConfigurationError(
            "message_length must not be negative",
            config_key="message_length",
            expected=">= 0",
            actual=message_length,
        )

    if requested_response_budget > 0:
        response_budget = requested_response_budget
    else:
        response_budget = max(model_max_ctx - message_length, config.window_floor)

    tokens = round_up(message_length + response_budget, config.quantum)

    if (
        requested_window is not None
        and requested_window > 0
        and config.caller_window_policy == "upper_bound"
    ):
        tokens = min(tokens, round_up(requested_window, config.quantum))
    elif requested_window is not None:
        logger.debug(
            "Ignoring caller window size",
            extra={"request_id": request_id, "requested_window": requested_window},
        )

    # Largest quantum multiple the model can hold, unless that falls below the floor
    limit = model_max_ctx // config.quantum * config.quantum
    if limit < config.window_floor:
        limit = model_max_ctx

    budget_exceeded = message_length >= model_max_ctx
    if budget_exceeded:
        tokens = model_max_ctx
        logger.warning(
            "Prompt reaches the model context limit",
            extra={
                "request_id": request_id,
                "message_length": message_length,
                "model_max_ctx": model_max_ctx,
            },
        )
    else:
        tokens = min(max(tokens, config.window_floor), limit)

    return WindowSize(
        tokens=tokens,
        response_budget=response_budget,
        budget_exceeded=budget_exceeded,
    )
