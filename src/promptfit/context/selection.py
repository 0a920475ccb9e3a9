"""Message-aware truncation.

Selects the messages of a conversation that fit a token window while
keeping the conversation coherent:

- every system message is kept and moved to the front, in order;
- the first non-system message (M1) is kept right after them;
- the latest message is kept last;
- of the messages in between, the longest run of the most recent ones
  that still fits is kept, with a skip marker after M1 standing in for
  the rest.

Messages are tracked by their position in the input, so repeated content
never confuses which message is which. Re-running a selection on its own
output reuses the existing skip marker instead of adding a second one.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, SupportsInt

from promptfit.context.report import SelectionReport
from promptfit.conversation.message import SKIP_MARKER, Message, as_messages, is_skip_marker

if TYPE_CHECKING:
    from promptfit.tokens.oracle import MeasurementOracle

logger = logging.getLogger(__name__)

# Position of a skip marker that is not part of the input
INSERTED_MARKER = -1


@dataclass
class SelectionResult:
    """Output of a message selection.

    Attributes:
        messages: Final ordered messages.
        source_indices: Input position of each final message, or None for
            an inserted skip marker.
        report: Diagnostic record of the selection.
    """

    messages: list[Message]
    source_indices: list[int | None]
    report: SelectionReport

    @property
    def budget_exceeded(self) -> bool:
        return self.report.budget_exceeded

    @property
    def truncated(self) -> bool:
        return self.report.truncated


class MessageSelector:
    """Fit conversations into a token window.

    Every candidate is costed with the measurement oracle. Costs are
    memoized for the duration of one ``select`` call only.

    Example:
        >>> selector = MessageSelector(oracle)
        >>> result = await selector.select(history, window_size=4096)
        >>> result.report.utilization
        0.83
    """

    def __init__(self, oracle: MeasurementOracle) -> None:
        self.oracle = oracle

    async def select(
        self,
        conversation: Iterable[Message | dict[str, Any]],
        window_size: SupportsInt,
        *,
        request_id: str | None = None,
        original_tokens: int | None = None,
    ) -> SelectionResult:
        """Select the messages that fit ``window_size``.

        Args:
            conversation: Full chronological history.
            window_size: Token budget (an int or a WindowSize).
            request_id: Identifier attached to the report and log records.
            original_tokens: Cost of the whole conversation, when the caller
                already measured it.

        Returns:
            SelectionResult with the final messages and the report. When
            even the minimal skeleton does not fit, it is returned anyway
            with ``budget_exceeded`` set.

        Raises:
            RenderError: If the template fails on any candidate.
            TokenizeError: If the tokenizer fails on any candidate.
        """
        messages = as_messages(conversation)
        window = int(window_size)
        calls_before = self.oracle.calls
        costs: dict[tuple[int, ...], int] = {}
        if original_tokens is not None:
            costs[tuple(range(len(messages)))] = original_tokens

        async def cost(positions: Sequence[int]) -> int:
            key = tuple(positions)
            if key not in costs:
                costs[key] = await self.oracle.measure([_message_at(messages, p) for p in key])
            return costs[key]

        if not messages:
            return SelectionResult(
                messages=[],
                source_indices=[],
                report=SelectionReport(
                    window_size=window,
                    original_message_count=0,
                    final_message_count=0,
                    original_tokens=0,
                    final_tokens=0,
                    request_id=request_id,
                ),
            )

        system: list[int] = []
        chat: list[int] = []
        for i, message in enumerate(messages):
            # A marker right after M1 was left by an earlier selection and stays in place
            if message.is_system and not (len(chat) == 1 and is_skip_marker(message)):
                system.append(i)
            else:
                chat.append(i)

        intermediates: list[int] = []
        marker_inserted = False

        if not chat:
            selected = system
        else:
            first, latest = chat[0], chat[-1]
            marker = chat[1] if len(chat) > 1 and is_skip_marker(messages[chat[1]]) else None
            intermediates = chat[2 if marker is not None else 1 : -1]

            head = [*system, first]
            existing = [marker] if marker is not None else []
            tail = [latest] if latest not in (first, marker) else []

            full = head + existing + intermediates + tail
            full_tokens = await cost(full)
            logger.debug(
                "Context size check: %d tokens against a window of %d",
                full_tokens,
                window,
                extra={"request_id": request_id},
            )

            if full_tokens <= window or not intermediates:
                selected = full
            else:
                skip = existing or [INSERTED_MARKER]
                skeleton = head + skip + tail
                if await cost(skeleton) > window:
                    logger.debug(
                        "Skeleton alone exceeds the window",
                        extra={"request_id": request_id},
                    )
                    selected = skeleton
                else:
                    suffix = await _reverse_fill(intermediates, head + skip, tail, window, cost)
                    selected = head + skip + suffix + tail
                marker_inserted = marker is None

        final_tokens = await cost(selected)
        original_tokens = await cost(range(len(messages)))
        kept = set(selected)
        dropped = sum(1 for i in intermediates if i not in kept)

        report = SelectionReport(
            window_size=window,
            original_message_count=len(messages),
            final_message_count=len(selected),
            original_tokens=original_tokens,
            final_tokens=final_tokens,
            intermediate_count=len(intermediates),
            intermediates_dropped=dropped,
            truncated=dropped > 0,
            marker_inserted=marker_inserted,
            budget_exceeded=final_tokens > window,
            oracle_calls=self.oracle.calls - calls_before,
            request_id=request_id,
        )

        return SelectionResult(
            messages=[_message_at(messages, p) for p in selected],
            source_indices=[None if p == INSERTED_MARKER else p for p in selected],
            report=report,
        )


async def select_messages(
    conversation: Iterable[Message | dict[str, Any]],
    window_size: SupportsInt,
    oracle: MeasurementOracle,
    *,
    request_id: str | None = None,
) -> SelectionResult:
    """Select the messages of ``conversation`` that fit ``window_size``.

    Shortcut for ``MessageSelector(oracle).select(...)``.
    """
    return await MessageSelector(oracle).select(conversation, window_size, request_id=request_id)


async def _reverse_fill(
    intermediates: list[int],
    before: list[int],
    after: list[int],
    window: int,
    cost: Callable[[Sequence[int]], Awaitable[int]],
) -> list[int]:
    """Longest suffix of ``intermediates`` that fits between ``before`` and ``after``.

    Suffixes are tried from the most recent message backward. A longer
    suffix never costs less than a shorter one, so the scan stops at the
    first suffix that no longer fits.
    """
    best = len(intermediates)
    for start in range(len(intermediates) - 1, -1, -1):
        if await cost(before + intermediates[start:] + after) > window:
            break
        best = start
    return intermediates[best:]


def _message_at(messages: Sequence[Message], position: int) -> Message:
    return SKIP_MARKER if position == INSERTED_MARKER else messages[position]
