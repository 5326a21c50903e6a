"""Adapters between async chunk producers and the interceptor."""

from __future__ import annotations

import logging
from typing import AsyncIterable, AsyncIterator, Callable

from stream_interceptor.interceptor import StreamInterceptor
from stream_interceptor.models import CommandDescriptor, ParseResult

logger = logging.getLogger(__name__)


class StreamSession:
    """Feeds one response stream through an interceptor and dispatches results.

    Cleaned text goes to ``on_text`` and each extracted command to
    ``on_command``, in the order they were found.
    """

    def __init__(
        self,
        on_text: Callable[[str], None],
        on_command: Callable[[CommandDescriptor], None],
        interceptor: StreamInterceptor | None = None,
    ) -> None:
        self._on_text = on_text
        self._on_command = on_command
        self._interceptor = interceptor or StreamInterceptor()
        self.command_count = 0

    @property
    def interceptor(self) -> StreamInterceptor:
        return self._interceptor

    def feed(self, chunk: str) -> ParseResult:
        """Handle an incoming stream chunk."""
        result = self._interceptor.process_chunk(chunk)
        if result.text:
            self._on_text(result.text)
        for block in result.blocks:
            self.command_count += 1
            self._on_command(block)
        return result

    def finish(self) -> None:
        """End the stream, emitting any unclosed block tail as text."""
        tail = self._interceptor.finish()
        if tail:
            logger.debug("Stream ended with %d chars of unclosed block", len(tail))
            self._on_text(tail)


async def intercept_stream(
    chunks: AsyncIterable[str],
    interceptor: StreamInterceptor | None = None,
) -> AsyncIterator[ParseResult]:
    """Yield one ParseResult per chunk of an async text stream.

    Text still held back when the stream ends is yielded as a final result.
    """
    interceptor = interceptor or StreamInterceptor()
    async for chunk in chunks:
        yield interceptor.process_chunk(chunk)

    tail = interceptor.finish()
    if tail:
        logger.debug("Stream ended with %d chars held back", len(tail))
        yield ParseResult(text=tail)
