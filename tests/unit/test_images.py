"""Tests for image accounting."""

from __future__ import annotations

import pytest

from promptfit.conversation import Message
from promptfit.errors import PromptFitError, UnsupportedMultiImageError
from promptfit.images import ImageData, assign_images, check_image_limits, image_token_cost


class TestImageTokenCost:
    """Tests for image_token_cost."""

    def test_multimodal_surcharge(self) -> None:
        """Test each image costs a fixed number of tokens."""
        messages = [
            Message(role="user", content="a", images=(b"1", b"2")),
            Message(role="user", content="b", images=(b"3",)),
        ]

        assert image_token_cost(messages, multimodal=True) == 3 * 768
        assert image_token_cost(messages, multimodal=True, tokens_per_image=10) == 30

    def test_text_only_model_is_free(self) -> None:
        """Test images cost nothing without an image projector."""
        messages = [Message(role="user", content="a", images=(b"1",))]

        assert image_token_cost(messages, multimodal=False) == 0


class TestCheckImageLimits:
    """Tests for check_image_limits."""

    def test_no_limit(self) -> None:
        """Test that no limit accepts any number of images."""
        check_image_limits([Message(role="user", images=(b"1", b"2", b"3"))], None)

    def test_within_limit(self) -> None:
        """Test messages at the limit are accepted."""
        check_image_limits([Message(role="user", images=(b"1",))], 1)

    def test_over_limit(self) -> None:
        """Test a message over the limit is rejected with details."""
        messages = [
            Message(role="user", images=(b"1",)),
            Message(role="user", images=(b"1", b"2")),
        ]

        with pytest.raises(UnsupportedMultiImageError) as exc_info:
            check_image_limits(messages, 1)

        error = exc_info.value
        assert isinstance(error, PromptFitError)
        assert error.message_index == 1
        assert error.image_count == 2
        assert error.max_images == 1
        assert "1 image per message" in str(error)


class TestAssignImages:
    """Tests for assign_images."""

    def test_placeholder_replaced(self) -> None:
        """Test the placeholder is replaced by the image tag in place."""
        messages = [Message(role="user", content="look at [img] please", images=(b"png",))]

        tagged, images = assign_images(messages)

        assert tagged[0].content == "look at [img-0] please"
        assert images == [ImageData(id=0, data=b"png")]

    def test_tag_prepended_without_placeholder(self) -> None:
        """Test tags are prepended when there is no placeholder."""
        messages = [Message(role="user", content="describe", images=(b"a", b"b"))]

        tagged, images = assign_images(messages)

        assert tagged[0].content == "[img-0][img-1]describe"
        assert [image.id for image in images] == [0, 1]

    def test_placeholders_consumed_in_order(self) -> None:
        """Test each image takes the next placeholder; extras are prepended."""
        messages = [Message(role="user", content="[img] vs [img]", images=(b"a", b"b", b"c"))]

        tagged, _ = assign_images(messages)

        assert tagged[0].content == "[img-2][img-0] vs [img-1]"

    def test_ids_increase_across_messages(self) -> None:
        """Test ids are global to the prompt, not per message."""
        messages = [
            Message(role="user", content="first", images=(b"a",)),
            Message(role="assistant", content="no images"),
            Message(role="user", content="second [img]", images=(b"b",)),
        ]

        tagged, images = assign_images(messages)

        assert tagged[0].content == "[img-0]first"
        assert tagged[1] is messages[1]
        assert tagged[2].content == "second [img-1]"
        assert [(i.id, i.data) for i in images] == [(0, b"a"), (1, b"b")]

    def test_inputs_not_mutated(self) -> None:
        """Test the original messages keep their text."""
        message = Message(role="user", content="[img]", images=(b"a",))

        assign_images([message])

        assert message.content == "[img]"

    def test_custom_placeholder_and_format(self) -> None:
        """Test placeholder and tag format are configurable."""
        messages = [Message(role="user", content="see <image>", images=(b"a",))]

        tagged, _ = assign_images(messages, placeholder="<image>", tag_format="<image-{id}>")

        assert tagged[0].content == "see <image-0>"
