"""Completion provider contract.

A completion provider is awaited with the prompt text and the
"single message" flag and appends its answer to the timeline it serves.
Network transport to a model backend lives outside this package; the
echo provider below lets the CLI run offline.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable

from .timeline.durable import Timeline
from .timeline.ephemeral import EphemeralTimeline
from .timeline.models import Message, Role, TempMessage

CompletionProvider = Callable[[str, bool], Awaitable[None]]

# (content, response_time_ms, response_tokens)
ResponseSink = Callable[[str, int, int], None]


def timeline_sink(timeline: Timeline, model: str, mode: str = "chat", agent_type: str = "none") -> ResponseSink:
    """Sink that appends assistant answers to a durable timeline."""

    def _append(content: str, response_time_ms: int, response_tokens: int) -> None:
        timeline.append(Message.create(
            Role.ASSISTANT,
            content,
            response_time_ms=response_time_ms,
            response_tokens=response_tokens,
            model=model,
            mode=mode,
            agent_type=agent_type,
        ))

    return _append


def ephemeral_sink(timeline: EphemeralTimeline, model: str) -> ResponseSink:
    """Sink that appends assistant answers to an ephemeral timeline."""

    def _append(content: str, response_time_ms: int, response_tokens: int) -> None:
        timeline.append(TempMessage(
            content=content,
            role=Role.ASSISTANT,
            response_time_ms=response_time_ms,
            response_tokens=response_tokens,
            model=model,
        ))

    return _append


class EchoCompletionProvider:
    """Offline provider that answers by quoting the prompt back."""

    def __init__(self, sink: ResponseSink, delay: float = 0.0) -> None:
        self._sink = sink
        self._delay = delay

    def retarget(self, sink: ResponseSink) -> None:
        """Send subsequent answers to another timeline."""
        self._sink = sink

    async def __call__(self, prompt: str, is_single_message: bool) -> None:
        # An answer goes where the prompt was sent, even if retargeted meanwhile
        sink = self._sink
        start = time.perf_counter()
        if self._delay:
            await asyncio.sleep(self._delay)
        quoted = "\n".join(f"> {line}" for line in prompt.splitlines() or [""])
        heading = "You said:" if is_single_message else "You said (again):"
        content = f"{heading}\n\n{quoted}"
        elapsed_ms = int((time.perf_counter() - start) * 1000)
        sink(content, elapsed_ms, len(content.split()))
