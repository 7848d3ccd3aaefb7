"""Host messaging surfaces.

A messaging surface is whatever delivers commands to a plugin: the
in-process messenger below, the stdio adapter, or the HTTP app. Plugins
only ever see the `set_command_handler` / `remove_command_handler` contract.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol, runtime_checkable

from .protocol import Command, Result

logger = logging.getLogger(__name__)

# Callback a plugin registers for its channel
CommandCallback = Callable[[Command], Result]


@runtime_checkable
class MessagingSurface(Protocol):
    """Protocol for anything a channel plugin can attach to."""

    def set_command_handler(self, channel: str, handler: CommandCallback | None) -> None:
        """Register `handler` for `channel`, or unregister it when None."""
        ...

    def remove_command_handler(self, channel: str, handler: CommandCallback) -> None:
        """Unregister `handler` from `channel` if it is still the registered one."""
        ...


class InProcessMessenger:
    """Routes commands to per-channel callbacks inside one process.

    Usage:
        messenger = InProcessMessenger()
        plugin.attach(messenger)
        result = messenger.send("selfie_camera", Command.get_platform_version())
    """

    def __init__(self) -> None:
        self._handlers: dict[str, CommandCallback] = {}

    def set_command_handler(self, channel: str, handler: CommandCallback | None) -> None:
        if handler is None:
            if self._handlers.pop(channel, None) is not None:
                logger.debug(f"Channel {channel} unregistered")
            return

        if channel in self._handlers:
            logger.warning(f"Replacing existing handler for channel {channel}")
        self._handlers[channel] = handler
        logger.debug(f"Channel {channel} registered")

    def remove_command_handler(self, channel: str, handler: CommandCallback) -> None:
        current = self._handlers.get(channel)
        if current is None or current != handler:
            logger.debug(f"Channel {channel} no longer served by this handler")
            return
        del self._handlers[channel]
        logger.debug(f"Channel {channel} unregistered")

    def has_handler(self, channel: str) -> bool:
        return channel in self._handlers

    def channels(self) -> list[str]:
        """Channels that currently have a handler."""
        return sorted(self._handlers)

    def send(self, channel: str, command: Command) -> Result:
        """Deliver a command to the handler of `channel`."""
        handler = self._handlers.get(channel)
        if handler is None:
            logger.warning(f"Command {command.name} sent to unattached channel {channel}")
            return Result.not_attached(command.id, channel)
        return handler(command)
