"""Exceptions raised across the channel bridge."""

from __future__ import annotations

from typing import Any


class ChannelError(Exception):
    """Base class for channel failures. Carries a wire-level error code."""

    code = "CHANNEL_ERROR"

    def __init__(self, message: str, *, code: str | None = None, details: Any = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.details = details


class NotAttachedError(ChannelError):
    """A command reached a channel whose plugin is not attached."""

    code = "NOT_ATTACHED"


class CommandNotImplementedError(ChannelError):
    """No handler is registered for the command name."""

    code = "NOT_IMPLEMENTED"


class CommandError(ChannelError):
    """Structured failure raised by a handler.

    Usage:
        raise CommandError("CAMERA_UNAVAILABLE", "no front camera", details={...})
    """

    code = "COMMAND_ERROR"

    def __init__(self, code: str, message: str, details: Any = None):
        super().__init__(message, code=code, details=details)
