"""Image accounting.

Images cost a fixed number of tokens each on multimodal models and are
handed to the backend separately from the prompt text. In the prompt,
every image is referenced by a tag carrying its id.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from promptfit.conversation import Message
from promptfit.errors import UnsupportedMultiImageError

DEFAULT_TOKENS_PER_IMAGE = 768
DEFAULT_PLACEHOLDER = "[img]"
DEFAULT_TAG_FORMAT = "[img-{id}]"


@dataclass(frozen=True)
class ImageData:
    """An image attached to the final prompt.

    Attributes:
        id: Prompt-wide image id, increasing in prompt order from 0.
        data: Raw image payload.
    """

    id: int
    data: bytes


def image_token_cost(
    messages: Sequence[Message],
    *,
    multimodal: bool,
    tokens_per_image: int = DEFAULT_TOKENS_PER_IMAGE,
) -> int:
    """Token surcharge of all images in ``messages``.

    Images are free unless the model has an image projector.
    """
    if not multimodal:
        return 0
    return tokens_per_image * sum(len(m.images) for m in messages)


def check_image_limits(messages: Sequence[Message], max_images_per_message: int | None) -> None:
    """Reject messages with more images than the model family allows.

    Args:
        messages: The full conversation.
        max_images_per_message: Per-message limit, or None for no limit.

    Raises:
        UnsupportedMultiImageError: On the first message over the limit.
    """
    if max_images_per_message is None:
        return
    for index, message in enumerate(messages):
        if len(message.images) > max_images_per_message:
            raise UnsupportedMultiImageError(
                message_index=index,
                image_count=len(message.images),
                max_images=max_images_per_message,
            )


def assign_images(
    messages: Sequence[Message],
    *,
    placeholder: str = DEFAULT_PLACEHOLDER,
    tag_format: str = DEFAULT_TAG_FORMAT,
) -> tuple[list[Message], list[ImageData]]:
    """Give every image an id and reference it from its message text.

    For each image, the first remaining ``placeholder`` in the text is
    replaced by the image's tag. Images without a placeholder have their
    tags prepended to the text instead.

    Args:
        messages: Final, ordered messages.
        placeholder: Text token that marks where an image belongs.
        tag_format: Tag format with an ``{id}`` field.

    Returns:
        Tuple of (messages with tagged text, images in id order).
    """
    tagged: list[Message] = []
    images: list[ImageData] = []

    for message in messages:
        if not message.images:
            tagged.append(message)
            continue

        prefix = ""
        text = message.content
        for data in message.images:
            image = ImageData(id=len(images), data=data)
            tag = tag_format.format(id=image.id)
            if placeholder in text:
                text = text.replace(placeholder, tag, 1)
            else:
                prefix += tag
            images.append(image)

        tagged.append(message.with_content(prefix + text))

    return tagged, images
