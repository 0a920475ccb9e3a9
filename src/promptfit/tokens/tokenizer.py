"""Tokenizer adapters.

Only the length of a tokenization is ever used. Tokenizers are awaited so
a model server can call out to its runner without blocking, and so the
caller's task cancellation aborts an in-flight measurement.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from tiktoken import Encoding

TokenizeFunc = Callable[[str], "list[int] | Awaitable[list[int]]"]


@runtime_checkable
class Tokenizer(Protocol):
    """Converts rendered prompt text to token ids."""

    async def tokenize(self, text: str) -> list[int]: ...


class FunctionTokenizer:
    """Adapt a plain sync or async ``text -> token ids`` function.

    Example:
        >>> tokenizer = FunctionTokenizer(lambda text: list(range(len(text.split()))))
    """

    def __init__(self, func: TokenizeFunc) -> None:
        self._func = func

    async def tokenize(self, text: str) -> list[int]:
        result = self._func(text)
        if inspect.isawaitable(result):
            result = await result
        return list(result)


class TiktokenTokenizer:
    """Tokenizer backed by tiktoken.

    The encoding is loaded lazily on first use, because tiktoken fetches
    encoding files on demand. Encoding is synchronous, so texts of
    ``thread_threshold`` characters or more are encoded in a worker
    thread.
    """

    def __init__(
        self,
        encoding: str | Encoding = "cl100k_base",
        *,
        thread_threshold: int = 32_768,
    ) -> None:
        """Initialize the tokenizer.

        Args:
            encoding: Encoding name (e.g. ``cl100k_base``) or a loaded
                tiktoken Encoding.
            thread_threshold: Text length from which encoding runs in a
                worker thread.
        """
        self._encoding_name = encoding if isinstance(encoding, str) else encoding.name
        self._encoding: Encoding | None = None if isinstance(encoding, str) else encoding
        self.thread_threshold = thread_threshold

    @classmethod
    def for_model(cls, model: str) -> TiktokenTokenizer:
        """Create a tokenizer with the encoding tiktoken maps to ``model``."""
        import tiktoken

        try:
            return cls(tiktoken.encoding_for_model(model))
        except KeyError:
            return cls("o200k_base")

    @property
    def encoding(self) -> Encoding:
        if self._encoding is None:
            import tiktoken

            self._encoding = tiktoken.get_encoding(self._encoding_name)
        return self._encoding

    @property
    def name(self) -> str:
        return self._encoding_name

    async def tokenize(self, text: str) -> list[int]:
        encoding = self.encoding
        # Chat templates emit special tokens as literal text
        if len(text) < self.thread_threshold:
            return encoding.encode(text, disallowed_special=())
        return await asyncio.to_thread(encoding.encode, text, disallowed_special=())
