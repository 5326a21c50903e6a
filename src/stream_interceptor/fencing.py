"""Markdown code fence tracking for command suppression."""

from __future__ import annotations

_BACKTICK = "`"
_TILDE = "~"
_FENCE_RUN = 3


class FenceTracker:
    """Tracks whether text fed so far leaves a code fence open.

    A run of three or more backticks (or tildes) toggles a fence of that
    family: it opens when no fence is open and closes when a fence of the
    same family is open. The toggle fires on every marker of a run from the
    third on, and info strings are not inspected.
    """

    def __init__(self) -> None:
        self._backtick_count = 0
        self._tilde_count = 0
        self._fence_type: str | None = None  # None, "`" or "~"

    @property
    def in_fence(self) -> bool:
        """True if a fence is currently open."""
        return self._fence_type is not None

    def reset(self) -> None:
        self._backtick_count = 0
        self._tilde_count = 0
        self._fence_type = None

    def feed(self, text: str) -> None:
        """Process *text* character by character."""
        for ch in text:
            self.feed_char(ch)

    def feed_char(self, ch: str) -> None:
        if ch == _BACKTICK:
            self._backtick_count += 1
            self._tilde_count = 0
            if self._backtick_count >= _FENCE_RUN:
                self._toggle(_BACKTICK)
        elif ch == _TILDE:
            self._tilde_count += 1
            self._backtick_count = 0
            if self._tilde_count >= _FENCE_RUN:
                self._toggle(_TILDE)
        else:
            self._backtick_count = 0
            self._tilde_count = 0

    def _toggle(self, marker: str) -> None:
        if self._fence_type is None:
            self._fence_type = marker
        elif self._fence_type == marker:
            self._fence_type = None


def is_inside_fence(text: str, position: int) -> bool:
    """Return True if *position* in *text* lies inside an open code fence."""
    tracker = FenceTracker()
    tracker.feed(text[:position])
    return tracker.in_fence
