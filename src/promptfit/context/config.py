"""Context fitting configuration."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, model_validator

CallerWindowPolicy = Literal["ignore", "upper_bound"]


class ContextConfig(BaseModel):
    """Configuration for window sizing and message selection.

    Attributes:
        quantum: Rounding granularity for computed window sizes.
        window_floor: Smallest window (and smallest default response budget).
        tokens_per_image: Token surcharge per image on multimodal models.
        image_placeholder: Text token replaced by an image's reference tag.
        image_tag_format: Format of image reference tags, with an ``{id}`` field.
        caller_window_policy: How a window size supplied with the request is
            treated. ``ignore`` discards it, ``upper_bound`` caps the computed
            window with it.

    Example:
        >>> config = ContextConfig(window_floor=2048)
        >>> config.quantum
        1024
    """

    quantum: int = Field(
        default=1024,
        gt=0,
        description="Rounding granularity for computed window sizes",
    )
    window_floor: int = Field(
        default=1024,
        gt=0,
        description="Smallest window and smallest default response budget",
    )
    tokens_per_image: int = Field(
        default=768,
        ge=0,
        description="Token surcharge per image on multimodal models",
    )
    image_placeholder: str = Field(
        default="[img]",
        min_length=1,
        description="Text token replaced in place by an image reference tag",
    )
    image_tag_format: str = Field(
        default="[img-{id}]",
        description="Format of image reference tags",
    )
    caller_window_policy: CallerWindowPolicy = Field(
        default="ignore",
        description="How a caller-supplied window size is treated",
    )

    @model_validator(mode="after")
    def _check_tag_format(self) -> ContextConfig:
        if "{id}" not in self.image_tag_format:
            raise ValueError("image_tag_format must contain an '{id}' field")
        return self
