#!/usr/bin/env python3
"""Fit a long conversation into a model's context window.

This example demonstrates:
- Building a prompt with the default ChatML template
- Dynamic window sizing from the requested response length
- Inspecting the selection report

Prerequisites:
- tiktoken can download the cl100k_base encoding (first run only)
"""

import asyncio

from promptfit import Message, ModelInfo, build_chat_prompt
from promptfit.display import render_report
from promptfit.templates import Jinja2ChatTemplate
from promptfit.tokens import TiktokenTokenizer


def make_history(turns: int) -> list[Message]:
    history = [Message(role="system", content="You are a patient Python tutor.")]
    history.append(Message(role="user", content="I want to learn about generators."))
    for i in range(turns):
        lesson = f"Lesson {i}: " + "yield values lazily. " * 40
        history.append(Message(role="assistant", content=lesson))
        history.append(Message(role="user", content=f"Thanks, what comes after lesson {i}?"))
    return history


async def main():
    model = ModelInfo(name="tutor", context_length=4096)
    history = make_history(turns=30)

    chat = await build_chat_prompt(
        history,
        model,
        Jinja2ChatTemplate(),
        TiktokenTokenizer("cl100k_base"),
        num_predict=512,
        request_id="example-1",
    )

    print(f"Window: {chat.window.tokens} tokens")
    print(f"Kept {len(chat.messages)} of {len(history)} messages")
    print(f"First kept user message: {chat.messages[1].content!r}")
    print(f"Last kept message: {chat.messages[-1].content!r}")
    print()
    render_report(chat.report)


if __name__ == "__main__":
    asyncio.run(main())
