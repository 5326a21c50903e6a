"""Streaming extraction of %%OS command blocks from assistant output."""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable

from stream_interceptor.config import InterceptorConfig
from stream_interceptor.fallback import PLAIN_SENTINEL_RE, FallbackParser, cut_spans
from stream_interceptor.fencing import FenceTracker
from stream_interceptor.models import CommandDescriptor, ParseResult
from stream_interceptor.scanner import CLOSE_SENTINEL, OPEN_SENTINEL, find_block_end

logger = logging.getLogger(__name__)


def parse_block(raw: str) -> CommandDescriptor | None:
    """Build a descriptor from a complete ``%%OS{...}%%`` span.

    Returns None if the payload is not a JSON object with a string ``cmd``.
    When the payload has no ``args`` key, the remaining keys are used as the
    arguments.
    """
    payload_text = raw[len(OPEN_SENTINEL) - 1 : -(len(CLOSE_SENTINEL) - 1)]
    try:
        payload = json.loads(payload_text)
    except (ValueError, RecursionError) as e:
        logger.debug("Leaving malformed block as text: %s", e)
        return None

    if not isinstance(payload, dict):
        return None
    cmd = payload.get("cmd")
    if not isinstance(cmd, str) or not cmd:
        logger.debug("Leaving block without cmd as text: %r", raw[:80])
        return None

    args: Any
    if "args" in payload:
        args = payload["args"]
    else:
        args = {key: value for key, value in payload.items() if key != "cmd"}
    return CommandDescriptor(cmd=cmd, args=args, raw=raw)


def _partial_sentinel_length(text: str) -> int:
    """Length of a trailing proper prefix of the open sentinel, e.g. ``%%O``.

    A ``%%`` that finishes a close sentinel (``}%%``) or a plain-text command
    on the same line does not count.
    """
    for size in range(len(OPEN_SENTINEL) - 1, 0, -1):
        if text.endswith(OPEN_SENTINEL[:size]):
            head = text[:-size]
            if head.endswith(CLOSE_SENTINEL[0]):
                return 0
            if size == 2 and PLAIN_SENTINEL_RE.search(head.rpartition("\n")[2]):
                return 0
            return size
    return 0


def _original_offset(offset: int, removed: list[tuple[int, int]]) -> int:
    """Map an offset in text with *removed* spans cut out back to the source."""
    for start, end in removed:
        if start > offset:
            break
        offset += end - start
    return offset


class StreamInterceptor:
    """Extracts command blocks from a stream of text chunks.

    Handles:
    - Blocks split across chunk boundaries (the open tail is carried over)
    - Code fences (blocks inside ``` or ~~~ are left alone)
    - Braces and quotes inside JSON string values
    - Malformed payloads (left verbatim in the text)
    - The plain-text ``%%OS open <path>`` / ``%%OS run <command>`` form

    One instance serves exactly one stream; calls must not overlap.
    """

    def __init__(self, config: InterceptorConfig | None = None) -> None:
        self._config = config or InterceptorConfig()
        self._fallback: FallbackParser | None = None
        if self._config.fallback_enabled:
            self._fallback = FallbackParser(
                open_command=self._config.open_command,
                run_command=self._config.run_command,
            )
        self._pending_text = ""  # Unclosed block or partial sentinel from earlier chunks

    @property
    def pending(self) -> bool:
        """True if text that may start a block is being held for the next chunk."""
        return bool(self._pending_text)

    def process_chunk(self, chunk: str) -> ParseResult:
        """Process one chunk and return its cleaned text and commands."""
        full_text = self._pending_text + chunk
        self._pending_text = ""

        last_open = full_text.rfind(OPEN_SENTINEL)
        last_close = full_text.rfind(CLOSE_SENTINEL)
        if last_open > last_close:
            self._pending_text = full_text[last_open:]
            full_text = full_text[:last_open]
            logger.debug("Carrying %d chars of open block", len(self._pending_text))
        else:
            partial = _partial_sentinel_length(full_text)
            if partial:
                self._pending_text = full_text[-partial:]
                full_text = full_text[:-partial]

        text, found = self._extract_blocks(full_text)
        ordered = [(start, descriptor) for start, _, descriptor in found]

        if self._fallback is not None and "%%OS" in text:
            plain = self._fallback.scan(text)
            if plain:
                text = cut_spans(text, [(start, end) for start, end, _ in plain])
                removed = [(start, end) for start, end, _ in found]
                ordered.extend(
                    (_original_offset(start, removed), descriptor)
                    for start, _, descriptor in plain
                )
                ordered.sort(key=lambda item: item[0])

        return ParseResult(text=text, blocks=[descriptor for _, descriptor in ordered])

    def _extract_blocks(
        self, text: str
    ) -> tuple[str, list[tuple[int, int, CommandDescriptor]]]:
        found: list[tuple[int, int, CommandDescriptor]] = []
        fences = FenceTracker()
        fed = 0  # Start of text not yet fed to the fence tracker
        search = 0

        while True:
            start = text.find(OPEN_SENTINEL, search)
            if start == -1:
                break

            fences.feed(text[fed:start])
            fed = start
            if fences.in_fence:
                logger.debug("Skipping fenced block at %d", start)
                search = start + len(OPEN_SENTINEL)
                continue

            end = find_block_end(text, start)
            if end is None:
                break

            descriptor = parse_block(text[start:end])
            if descriptor is None:
                search = start + len(OPEN_SENTINEL)
                continue

            logger.debug("Extracted command %s", descriptor.cmd)
            found.append((start, end, descriptor))
            fed = search = end

        return cut_spans(text, [(start, end) for start, end, _ in found]), found

    def finish(self) -> str:
        """Release any unclosed block tail as plain text and clear it."""
        text = self._pending_text
        self._pending_text = ""
        return text

    def reset(self) -> None:
        """Discard the carry-over buffer, e.g. when a stream is abandoned."""
        self._pending_text = ""

    def process_chunks(self, chunks: Iterable[str]) -> ParseResult:
        """Process several chunks in order and combine their results."""
        combined = ParseResult()
        pieces: list[str] = []
        for chunk in chunks:
            result = self.process_chunk(chunk)
            pieces.append(result.text)
            combined.blocks.extend(result.blocks)
        combined.text = "".join(pieces)
        return combined
