"""Loose ``%%OS <verb> <argument>`` grammar for unstructured commands."""

from __future__ import annotations

import logging
import re

from stream_interceptor.config import DEFAULT_OPEN_COMMAND, DEFAULT_RUN_COMMAND
from stream_interceptor.fencing import FenceTracker
from stream_interceptor.models import CommandDescriptor

logger = logging.getLogger(__name__)

PLAIN_SENTINEL_RE = re.compile(r"%%OS[ \t]")

# Argument stops at "%%", the next "%%OS", end of line or end of text; a lone
# "%" never matches.
PLAIN_COMMAND_RE = re.compile(
    r"%%OS[ \t]+(?P<verb>[A-Za-z]+)[ \t]+(?P<arg>[^\n%]+?)[ \t]*"
    r"(?:%%(?!OS)|(?=%%OS)|(?=\r?\n)|\Z)"
)


def cut_spans(text: str, spans: list[tuple[int, int]]) -> str:
    """Return *text* without the ordered, non-overlapping *spans*."""
    if not spans:
        return text
    pieces: list[str] = []
    cursor = 0
    for start, end in spans:
        pieces.append(text[cursor:start])
        cursor = end
    pieces.append(text[cursor:])
    return "".join(pieces)


class FallbackParser:
    """Extracts ``open`` and ``run`` commands written as plain text."""

    def __init__(
        self,
        open_command: str = DEFAULT_OPEN_COMMAND,
        run_command: str = DEFAULT_RUN_COMMAND,
    ) -> None:
        self._open_command = open_command
        self._run_command = run_command

    def describe(self, verb: str, arg: str, raw: str) -> CommandDescriptor | None:
        """Map a verb and its argument to a descriptor, or None if unknown."""
        verb = verb.lower()
        if verb == "open":
            return CommandDescriptor(self._open_command, {"path": arg}, raw)
        if verb == "run":
            return CommandDescriptor(self._run_command, {"command": arg}, raw)
        return None

    def scan(self, text: str) -> list[tuple[int, int, CommandDescriptor]]:
        """Find recognized plain-text commands outside code fences.

        Returns:
            ``(start, end, descriptor)`` for each match, in text order.
        """
        found: list[tuple[int, int, CommandDescriptor]] = []
        fences = FenceTracker()
        fed = 0

        for match in PLAIN_COMMAND_RE.finditer(text):
            fences.feed(text[fed : match.start()])
            fed = match.start()
            if fences.in_fence:
                continue

            descriptor = self.describe(
                match.group("verb"), match.group("arg").strip(), match.group(0)
            )
            if descriptor is None:
                logger.debug("Ignoring unknown plain-text verb: %r", match.group("verb"))
                continue
            found.append((match.start(), match.end(), descriptor))
            fed = match.end()

        return found

    def extract(self, text: str) -> tuple[str, list[CommandDescriptor]]:
        """Remove recognized plain-text commands from *text*.

        Returns:
            The remaining text and the descriptors found, in order.
        """
        found = self.scan(text)
        remaining = cut_spans(text, [(start, end) for start, end, _ in found])
        return remaining, [descriptor for _, _, descriptor in found]
