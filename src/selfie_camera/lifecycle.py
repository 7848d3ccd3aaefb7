"""Channel plugin lifecycle.

A ChannelPlugin moves between two states:

    DETACHED --attach(surface)--> ATTACHED --detach()--> DETACHED

Handlers are built fresh on every attach and dropped on detach, so a
re-attached plugin never sees state from a previous attachment.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from enum import Enum

from .dispatcher import Dispatcher
from .messenger import MessagingSurface
from .protocol import Command, Result
from .registry import CommandRegistry, Handler

logger = logging.getLogger(__name__)


class BindingState(str, Enum):
    """Attachment state of a channel plugin."""

    DETACHED = "detached"
    ATTACHED = "attached"


class ChannelPlugin:
    """Base class for plugins that serve one named channel.

    Subclasses set `channel_name` and override `register_commands()`.
    Extra handlers can be passed at construction; they are registered
    after the plugin's own commands and win on name clashes.

    Commands dispatched while detached produce a NOT_ATTACHED error result.
    attach/detach/dispatch share one lock, so at most one handler runs at
    a time even when surfaces call in from several threads.
    """

    channel_name: str = ""

    def __init__(self, handlers: Mapping[str, Handler] | None = None) -> None:
        if not self.channel_name:
            raise ValueError(f"{type(self).__name__} must define channel_name")

        self._extra_handlers = dict(handlers or {})
        self._lock = threading.RLock()
        self._state = BindingState.DETACHED
        self._surface: MessagingSurface | None = None
        self._registry: CommandRegistry | None = None
        self._dispatcher: Dispatcher | None = None

    @property
    def state(self) -> BindingState:
        return self._state

    @property
    def is_attached(self) -> bool:
        return self._state == BindingState.ATTACHED

    def register_commands(self, registry: CommandRegistry) -> None:
        """Register this plugin's handlers. Called on every attach."""

    def command_names(self) -> list[str]:
        """Names the plugin registers when attached."""
        registry = self._build_registry()
        return registry.names()

    def attach(self, surface: MessagingSurface) -> None:
        """Start receiving commands from `surface`."""
        with self._lock:
            if self._state == BindingState.ATTACHED:
                if surface is self._surface:
                    return
                logger.info(f"Moving channel {self.channel_name} to a new surface")
                self._detach_locked()

            registry = self._build_registry()
            dispatcher = Dispatcher(registry)
            # Nothing is recorded until the surface accepts the handler
            surface.set_command_handler(self.channel_name, self.dispatch)
            self._registry = registry
            self._dispatcher = dispatcher
            self._surface = surface
            self._state = BindingState.ATTACHED
            logger.info(f"Channel {self.channel_name} attached ({len(registry)} commands)")

    def detach(self) -> None:
        """Stop receiving commands. Detaching twice is a no-op."""
        with self._lock:
            if self._state == BindingState.DETACHED:
                return
            self._detach_locked()

    def dispatch(self, command: Command) -> Result:
        """Dispatch a command to this plugin's handlers."""
        with self._lock:
            if self._state != BindingState.ATTACHED or self._dispatcher is None:
                logger.warning(
                    f"Command {command.name} dispatched while channel "
                    f"{self.channel_name} is detached"
                )
                return Result.not_attached(command.id, self.channel_name)
            return self._dispatcher.dispatch(command)

    def _build_registry(self) -> CommandRegistry:
        registry = CommandRegistry()
        self.register_commands(registry)
        for name, handler in self._extra_handlers.items():
            registry.register(name, handler)
        return registry

    def _detach_locked(self) -> None:
        if self._surface is not None:
            self._surface.remove_command_handler(self.channel_name, self.dispatch)
        if self._registry is not None:
            self._registry.clear()
        self._surface = None
        self._registry = None
        self._dispatcher = None
        self._state = BindingState.DETACHED
        logger.info(f"Channel {self.channel_name} detached")
