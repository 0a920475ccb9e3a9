"""Image ids, reference tags and token surcharges."""

from promptfit.images.accounting import (
    ImageData,
    assign_images,
    check_image_limits,
    image_token_cost,
)

__all__ = ["ImageData", "assign_images", "check_image_limits", "image_token_cost"]
