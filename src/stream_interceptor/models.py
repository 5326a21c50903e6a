"""Result types produced by the stream interceptor."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class CommandDescriptor:
    """One recognized command occurrence.

    Attributes:
        cmd: Identifier of the requested action (e.g. ``openspace.editor.open``).
        args: Structured payload that accompanied the command.
        raw: The exact substring that was matched, kept for diagnostics.
    """

    cmd: str
    args: Any
    raw: str

    def to_dict(self) -> dict[str, Any]:
        return {"cmd": self.cmd, "args": self.args, "raw": self.raw}


@dataclass
class ParseResult:
    """Cleaned display text plus the commands found in one call."""

    text: str = ""
    blocks: list[CommandDescriptor] = field(default_factory=list)
