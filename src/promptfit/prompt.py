"""Chat prompt assembly.

Turns a chat request into the prompt handed to the model:

1. reject messages with more images than the model family allows;
2. measure the rendered conversation;
3. size the context window;
4. select the messages that fit it;
5. tag images and render the final prompt.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from promptfit.context.config import ContextConfig
from promptfit.context.selection import MessageSelector
from promptfit.context.sizing import UNSPECIFIED_RESPONSE_BUDGET, WindowSize, compute_window_size
from promptfit.conversation.message import Message, as_messages
from promptfit.images.accounting import ImageData, assign_images, check_image_limits
from promptfit.observability.logging import log_report
from promptfit.tokens.oracle import MeasurementOracle

if TYPE_CHECKING:
    from promptfit.config.settings import PromptFitSettings
    from promptfit.context.report import SelectionReport
    from promptfit.models.profile import ModelInfo
    from promptfit.observability.logging import Reporter
    from promptfit.templates.renderer import ChatTemplate
    from promptfit.tokens.tokenizer import Tokenizer

logger = logging.getLogger(__name__)


@dataclass
class ChatPrompt:
    """A prompt ready for inference.

    Attributes:
        prompt: Rendered prompt text.
        images: Images referenced by the prompt, in id order.
        messages: Final messages the prompt was rendered from.
        window: Context window the prompt was fitted into.
        report: Diagnostic record of the selection.
    """

    prompt: str
    images: list[ImageData]
    messages: list[Message]
    window: WindowSize
    report: SelectionReport

    @property
    def budget_exceeded(self) -> bool:
        """Whether the prompt could not be fitted into its window."""
        return self.window.budget_exceeded or self.report.budget_exceeded


class PromptBuilder:
    """Builds fitted chat prompts for one model.

    Example:
        >>> builder = PromptBuilder(model, Jinja2ChatTemplate(), TiktokenTokenizer())
        >>> chat = await builder.build(history, num_predict=512, request_id="req-1")
        >>> chat.window.tokens
        2048
    """

    def __init__(
        self,
        model: ModelInfo,
        template: ChatTemplate,
        tokenizer: Tokenizer,
        *,
        config: ContextConfig | None = None,
        reporter: Reporter | None = None,
        log_reports: bool = True,
    ) -> None:
        """Initialize the builder.

        Args:
            model: Metadata of the model the prompts are for.
            template: The model's chat template.
            tokenizer: The model's tokenizer.
            config: Sizing and selection configuration.
            reporter: Callback receiving every selection report.
            log_reports: Whether to log every selection report.
        """
        self.model = model
        self.template = template
        self.tokenizer = tokenizer
        self.config = config or ContextConfig()
        self.reporter = reporter
        self.log_reports = log_reports

    @classmethod
    def from_settings(
        cls,
        settings: PromptFitSettings,
        model: ModelInfo,
        template: ChatTemplate,
        tokenizer: Tokenizer,
        *,
        reporter: Reporter | None = None,
    ) -> PromptBuilder:
        """Create a builder configured from settings."""
        return cls(
            model,
            template,
            tokenizer,
            config=settings.context,
            reporter=reporter,
            log_reports=settings.logging.log_reports,
        )

    async def build(
        self,
        conversation: Iterable[Message | dict[str, Any]],
        *,
        tools: Sequence[dict[str, Any]] = (),
        think: bool | None = None,
        num_predict: int = UNSPECIFIED_RESPONSE_BUDGET,
        num_ctx: int | None = None,
        request_id: str | None = None,
    ) -> ChatPrompt:
        """Fit a conversation into a dynamically sized window and render it.

        Args:
            conversation: Full chronological history.
            tools: Tool definitions available to the model.
            think: Thinking flag, or None if the request did not set it.
            num_predict: Requested response length; -1 for the remaining room.
            num_ctx: Window size sent with the request. Ignored unless the
                config allows it as an upper bound.
            request_id: Identifier for log and report correlation.

        Returns:
            The fitted ChatPrompt.

        Raises:
            UnsupportedMultiImageError: If a message has too many images.
            RenderError: If the chat template fails.
            TokenizeError: If the tokenizer fails.
        """
        messages = as_messages(conversation)
        check_image_limits(messages, self.model.image_limit)

        oracle = MeasurementOracle(
            self.template,
            self.tokenizer,
            tools=tools,
            think=think,
            multimodal=self.model.has_image_projector,
            tokens_per_image=self.config.tokens_per_image,
        )

        message_length = await oracle.measure(messages) if messages else 0
        window = compute_window_size(
            message_length,
            num_predict,
            self.model.context_length,
            config=self.config,
            requested_window=num_ctx,
            request_id=request_id,
        )
        logger.debug(
            "Sized window for %s: %d tokens for a %d token prompt",
            self.model.name or "model",
            window.tokens,
            message_length,
            extra={"request_id": request_id},
        )

        selection = await MessageSelector(oracle).select(
            messages,
            window,
            request_id=request_id,
            original_tokens=message_length,
        )

        final, images = assign_images(
            selection.messages,
            placeholder=self.config.image_placeholder,
            tag_format=self.config.image_tag_format,
        )
        prompt = oracle.render(final) if final else ""

        if self.log_reports:
            log_report(selection.report)
        if self.reporter is not None:
            self.reporter(selection.report)

        return ChatPrompt(
            prompt=prompt,
            images=images,
            messages=final,
            window=window,
            report=selection.report,
        )


async def build_chat_prompt(
    conversation: Iterable[Message | dict[str, Any]],
    model: ModelInfo,
    template: ChatTemplate,
    tokenizer: Tokenizer,
    *,
    tools: Sequence[dict[str, Any]] = (),
    think: bool | None = None,
    num_predict: int = UNSPECIFIED_RESPONSE_BUDGET,
    num_ctx: int | None = None,
    request_id: str | None = None,
    reporter: Reporter | None = None,
    config: ContextConfig | None = None,
) -> ChatPrompt:
    """Fit and render a conversation in one call.

    Shortcut for ``PromptBuilder(...).build(...)``; see there for details.
    """
    builder = PromptBuilder(model, template, tokenizer, config=config, reporter=reporter)
    return await builder.build(
        conversation,
        tools=tools,
        think=think,
        num_predict=num_predict,
        num_ctx=num_ctx,
        request_id=request_id,
    )
