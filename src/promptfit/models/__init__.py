"""Model metadata."""

from promptfit.models.profile import ModelInfo, family_image_limit, register_family_image_limit

__all__ = ["ModelInfo", "family_image_limit", "register_family_image_limit"]
