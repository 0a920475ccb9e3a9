"""Exceptions raised while fitting a conversation into a window."""

from __future__ import annotations

from typing import Any


class PromptFitError(Exception):
    """Root of the promptfit exception hierarchy.

    Catch this to handle any failure raised by sizing, selection or
    rendering. Keyword context given at construction is kept in
    ``details`` and readable as attributes, so ``error.image_count`` works
    on an UnsupportedMultiImageError.

    Attributes:
        message: What went wrong.
        cause: The underlying exception, if any.
        details: Extra context for logs and callers.
    """

    def __init__(self, message: str, *, cause: Exception | None = None, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.details = details

    def __getattr__(self, name: str) -> Any:
        # Only reached for names not set on the instance
        details = self.__dict__.get("details", {})
        try:
            return details[name]
        except KeyError:
            raise AttributeError(f"{type(self).__name__} has no detail {name!r}") from None

    def __str__(self) -> str:
        if self.cause is None:
            return self.message
        return f"{self.message} (caused by: {self.cause})"


class ConfigurationError(PromptFitError):
    """Invalid configuration or arguments.

    Raised when sizing parameters or settings are out of range.

    Details: config_key, expected, actual.
    """


class TokenizeError(PromptFitError):
    """The tokenizer failed to tokenize a rendered prompt.

    Not recoverable at this layer; aborts the whole selection.

    Details: text_length.
    """


class RenderError(PromptFitError):
    """The chat template failed to render a message list.

    Details: message_count.
    """


class UnsupportedMultiImageError(PromptFitError):
    """A message carries more images than the model family allows.

    Raised before any selection work so the caller can reject the
    request.

    Details: message_index, image_count, max_images.
    """

    def __init__(
        self,
        message_index: int,
        image_count: int,
        max_images: int,
        **kwargs: Any,
    ) -> None:
        noun = "image" if max_images == 1 else "images"
        super().__init__(
            f"this model only supports {max_images} {noun} per message "
            f"while {image_count} were requested (message {message_index})",
            message_index=message_index,
            image_count=image_count,
            max_images=max_images,
            **kwargs,
        )
