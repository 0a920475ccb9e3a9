"""Shared test fixtures and configuration for promptfit tests.

Costs in these tests are exact: the plain template renders each message's
content on its own line and the word tokenizer yields one token per
whitespace-separated word, so a candidate costs the number of words in
its messages (the skip marker "..." is one word).
"""

from __future__ import annotations

from typing import Any

import pytest

from promptfit.conversation import Message
from promptfit.templates import Jinja2ChatTemplate
from promptfit.tokens import FunctionTokenizer, MeasurementOracle

PLAIN_TEMPLATE = "{% for m in messages %}{{ m.content }}\n{% endfor %}"


def count_words(text: str) -> list[int]:
    return list(range(len(text.split())))


@pytest.fixture
def word_tokenizer() -> FunctionTokenizer:
    """Tokenizer producing one token per whitespace-separated word."""
    return FunctionTokenizer(count_words)


@pytest.fixture
def plain_template() -> Jinja2ChatTemplate:
    """Template rendering only message contents, one per line."""
    return Jinja2ChatTemplate(PLAIN_TEMPLATE, name="plain")


@pytest.fixture
def oracle(
    plain_template: Jinja2ChatTemplate, word_tokenizer: FunctionTokenizer
) -> MeasurementOracle:
    """Oracle whose cost is the word count of the candidate."""
    return MeasurementOracle(plain_template, word_tokenizer)


@pytest.fixture
def make_oracle(plain_template: Jinja2ChatTemplate, word_tokenizer: FunctionTokenizer) -> Any:
    """Factory fixture for oracles with custom options.

    Usage:
        def test_something(make_oracle):
            oracle = make_oracle(multimodal=True)
    """

    def _make(**kwargs: Any) -> MeasurementOracle:
        return MeasurementOracle(plain_template, word_tokenizer, **kwargs)

    return _make


@pytest.fixture
def harry_conversation() -> list[Message]:
    """Four-message conversation costing 4 + 3 + 6 + 11 = 24 tokens."""
    return [
        Message(role="user", content="You're a test, Harry!"),
        Message(role="assistant", content="I-I'm a what?"),
        Message(role="assistant", content="You are the Test Who Lived."),
        Message(role="user", content="A test. And a thumping good one at that, I'd wager."),
    ]


@pytest.fixture
def sample_messages() -> list[dict[str, Any]]:
    """Provide sample message history in dict form."""
    return [
        {"role": "system", "content": "You are a helpful assistant."},
        {"role": "user", "content": "Hello, can you help me?"},
        {"role": "assistant", "content": "Of course! What do you need help with?"},
        {"role": "user", "content": "I need to read a file."},
        {
            "role": "assistant",
            "content": "I'll help you read the file.",
            "tool_calls": [
                {
                    "id": "call_123",
                    "type": "function",
                    "function": {"name": "read_file", "arguments": '{"path": "test.txt"}'},
                }
            ],
        },
        {"role": "tool", "tool_name": "read_file", "content": "File contents here"},
        {"role": "assistant", "content": "The file contains: File contents here"},
    ]


@pytest.fixture
def mock_env(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock environment variables for configuration tests.

    Returns the dict of set variables for assertions.
    """
    env_vars = {
        "PROMPTFIT_CONTEXT__WINDOW_FLOOR": "2048",
        "PROMPTFIT_CONTEXT__CALLER_WINDOW_POLICY": "upper_bound",
        "PROMPTFIT_LOGGING__LEVEL": "DEBUG",
        "PROMPTFIT_LOGGING__STRUCTURED": "true",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


@pytest.fixture
def config_toml_content() -> str:
    """Provide sample TOML configuration content."""
    return """
[context]
quantum = 512
window_floor = 512
tokens_per_image = 576

[logging]
level = "WARNING"
log_reports = false
"""
