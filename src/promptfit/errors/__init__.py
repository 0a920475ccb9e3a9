"""Error types."""

from promptfit.errors.exceptions import (
    ConfigurationError,
    PromptFitError,
    RenderError,
    TokenizeError,
    UnsupportedMultiImageError,
)

__all__ = [
    "ConfigurationError",
    "PromptFitError",
    "RenderError",
    "TokenizeError",
    "UnsupportedMultiImageError",
]
