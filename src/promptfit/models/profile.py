"""Model metadata consumed by sizing and selection."""

from __future__ import annotations

from pydantic import BaseModel, Field

# Per-message image limits enforced by some model families
_FAMILY_IMAGE_LIMITS: dict[str, int] = {
    "mllama": 1,
}


def register_family_image_limit(family: str, max_images: int) -> None:
    """Declare that ``family`` accepts at most ``max_images`` images per message."""
    if max_images < 0:
        raise ValueError("max_images must not be negative")
    _FAMILY_IMAGE_LIMITS[family] = max_images


def family_image_limit(families: list[str]) -> int | None:
    """Strictest per-message image limit among ``families``, if any."""
    limits = [_FAMILY_IMAGE_LIMITS[f] for f in families if f in _FAMILY_IMAGE_LIMITS]
    return min(limits) if limits else None


class ModelInfo(BaseModel):
    """What the fitting pipeline needs to know about a model.

    Attributes:
        name: Model name, for logs.
        context_length: Absolute context limit in tokens.
        has_image_projector: Whether the model accepts images.
        families: Model families (e.g. ``["llama"]``, ``["mllama"]``).
        max_images_per_message: Explicit per-message image limit. When
            unset, the limit registered for the model's families applies.

    Example:
        >>> model = ModelInfo(name="llama3.2-vision", context_length=131072,
        ...                   has_image_projector=True, families=["mllama"])
        >>> model.image_limit
        1
    """

    name: str = Field(default="", description="Model name")
    context_length: int = Field(gt=0, description="Absolute context limit in tokens")
    has_image_projector: bool = Field(
        default=False,
        description="Whether the model accepts images",
    )
    families: list[str] = Field(default_factory=list, description="Model families")
    max_images_per_message: int | None = Field(
        default=None,
        ge=0,
        description="Explicit per-message image limit",
    )

    @property
    def image_limit(self) -> int | None:
        if self.max_images_per_message is not None:
            return self.max_images_per_message
        return family_image_limit(self.families)
