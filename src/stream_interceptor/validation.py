"""Consumer-side checks for extracted commands.

The interceptor only guarantees that a descriptor is structurally a command.
Callers that dispatch commands can use these helpers to restrict them to a
known namespace before acting on them.
"""

from __future__ import annotations

import logging
from typing import Iterable

from stream_interceptor.config import DEFAULT_COMMAND_PREFIX
from stream_interceptor.models import CommandDescriptor

logger = logging.getLogger(__name__)


def rejection_reason(
    descriptor: CommandDescriptor, prefix: str = DEFAULT_COMMAND_PREFIX
) -> str | None:
    """Return why *descriptor* should not be dispatched, or None if it is fine."""
    cmd = descriptor.cmd
    if not isinstance(cmd, str) or not cmd:
        return "missing command id"
    if not cmd.startswith(prefix):
        return f"command outside {prefix!r} namespace"
    if ".." in cmd or "/" in cmd or "\\" in cmd:
        return "command id contains a path"
    if not isinstance(descriptor.args, (dict, list)):
        return f"arguments must be an object, got {type(descriptor.args).__name__}"
    return None


def validate_command(
    descriptor: CommandDescriptor, prefix: str = DEFAULT_COMMAND_PREFIX
) -> bool:
    """True if *descriptor* may be dispatched."""
    reason = rejection_reason(descriptor, prefix)
    if reason is not None:
        logger.debug("Rejected command %r: %s", descriptor.cmd, reason)
        return False
    return True


def partition_commands(
    blocks: Iterable[CommandDescriptor], prefix: str = DEFAULT_COMMAND_PREFIX
) -> tuple[list[CommandDescriptor], list[CommandDescriptor]]:
    """Split *blocks* into (accepted, rejected), preserving order."""
    accepted: list[CommandDescriptor] = []
    rejected: list[CommandDescriptor] = []
    for block in blocks:
        if validate_command(block, prefix):
            accepted.append(block)
        else:
            rejected.append(block)
    return accepted, rejected
