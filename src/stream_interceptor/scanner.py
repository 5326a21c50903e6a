"""String-aware scanning for the end of a structured command block."""

from __future__ import annotations

OPEN_SENTINEL = "%%OS{"
CLOSE_SENTINEL = "}%%"
_CLOSE_TAIL = "%%"


def find_block_end(text: str, start: int) -> int | None:
    """Find where the block opened at *start* ends.

    *start* is the index of an ``%%OS{`` sentinel. Brace depth is only
    counted outside double-quoted strings, and a backslash consumes the
    following character, so braces and quotes inside JSON string values do
    not close the block early.

    Returns:
        The index just past the closing ``}%%``, or None if the text ends
        before the block is closed.
    """
    depth = 0
    in_string = False
    escape_next = False
    i = start + len(OPEN_SENTINEL) - 1  # the opening brace

    while i < len(text):
        ch = text[i]
        if escape_next:
            escape_next = False
        elif ch == "\\":
            escape_next = True
        elif ch == '"':
            in_string = not in_string
        elif in_string:
            pass
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0 and text.startswith(_CLOSE_TAIL, i + 1):
                return i + 1 + len(_CLOSE_TAIL)
        i += 1

    return None
