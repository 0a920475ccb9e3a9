#!/usr/bin/env python3
"""Configure promptfit from settings and log selection reports.

This example demonstrates:
- Loading settings from the environment or a config file
- Structured JSON logging with request ids
- A custom reporter callback
- Image tagging for multimodal models

Try:
    PROMPTFIT_LOGGING__STRUCTURED=true python settings_and_logging.py
"""

import asyncio

from promptfit import Message, ModelInfo, PromptBuilder, PromptFitSettings
from promptfit.observability import setup_logging
from promptfit.templates import Jinja2ChatTemplate
from promptfit.tokens import FunctionTokenizer


def whitespace_tokenizer(text: str) -> list[int]:
    # Rough stand-in for a model tokenizer
    return list(range(len(text.split())))


async def main():
    settings = PromptFitSettings()
    setup_logging(settings.logging)

    reports = []
    model = ModelInfo(
        name="llava-like",
        context_length=8192,
        has_image_projector=True,
        families=["clip"],
    )
    builder = PromptBuilder.from_settings(
        settings,
        model,
        Jinja2ChatTemplate(),
        FunctionTokenizer(whitespace_tokenizer),
        reporter=reports.append,
    )

    chat = await builder.build(
        [
            Message(
                role="user",
                content="Compare [img] with this one.",
                images=(b"<png-1>", b"<png-2>"),
            ),
        ],
        request_id="example-2",
    )

    print(chat.prompt)
    print(f"Images: {[image.id for image in chat.images]}")
    print(f"Reports received: {len(reports)}")


if __name__ == "__main__":
    asyncio.run(main())
