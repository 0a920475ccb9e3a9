"""Measurement oracle: the token cost of a candidate message list."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from promptfit.errors import PromptFitError, RenderError, TokenizeError
from promptfit.images.accounting import DEFAULT_TOKENS_PER_IMAGE, image_token_cost

if TYPE_CHECKING:
    from promptfit.conversation import Message
    from promptfit.templates.renderer import ChatTemplate
    from promptfit.tokens.tokenizer import Tokenizer

logger = logging.getLogger(__name__)


class MeasurementOracle:
    """Cost a message list by rendering and tokenizing it.

    Tools and the thinking flag are fixed for the lifetime of an oracle so
    every candidate in one selection run is measured the same way.

    This is the expensive step of message selection: every call renders
    the full template and runs the tokenizer.

    Example:
        >>> oracle = MeasurementOracle(Jinja2ChatTemplate(), TiktokenTokenizer())
        >>> tokens = await oracle.measure(messages)
    """

    def __init__(
        self,
        template: ChatTemplate,
        tokenizer: Tokenizer,
        *,
        tools: Sequence[dict[str, Any]] = (),
        think: bool | None = None,
        multimodal: bool = False,
        tokens_per_image: int = DEFAULT_TOKENS_PER_IMAGE,
    ) -> None:
        """Initialize the oracle.

        Args:
            template: Chat template used to render candidates.
            tokenizer: Tokenizer for rendered text.
            tools: Tool definitions rendered with every candidate.
            think: Thinking flag, or None if the caller did not set it.
            multimodal: Whether images carry a token surcharge.
            tokens_per_image: Surcharge per image when multimodal.
        """
        self.template = template
        self.tokenizer = tokenizer
        self.tools = tuple(tools)
        self.think = think
        self.multimodal = multimodal
        self.tokens_per_image = tokens_per_image
        self.calls = 0

    def render(self, messages: Sequence[Message]) -> str:
        """Render messages with this oracle's tools and thinking flag.

        Raises:
            RenderError: If the template fails.
        """
        try:
            return self.template.render(
                messages,
                tools=self.tools,
                think=bool(self.think),
                think_set=self.think is not None,
            )
        except (asyncio.CancelledError, PromptFitError):
            raise
        except Exception as e:
            raise RenderError(
                "Failed to render chat template", cause=e, message_count=len(messages)
            ) from e

    async def measure(self, messages: Sequence[Message]) -> int:
        """Token cost of ``messages``, image surcharge included.

        Raises:
            RenderError: If the template fails.
            TokenizeError: If the tokenizer fails.
        """
        self.calls += 1
        text = self.render(messages)
        try:
            tokens = await self.tokenizer.tokenize(text)
        except (asyncio.CancelledError, PromptFitError):
            raise
        except Exception as e:
            raise TokenizeError(
                "Failed to tokenize rendered prompt", cause=e, text_length=len(text)
            ) from e

        return len(tokens) + image_token_cost(
            messages,
            multimodal=self.multimodal,
            tokens_per_image=self.tokens_per_image,
        )
