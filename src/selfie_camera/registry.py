"""Command registry - maps command names to handlers."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Iterator
from typing import Any

logger = logging.getLogger(__name__)

# A handler receives the command's arguments and returns its value
# (or a ready-made Result) synchronously.
Handler = Callable[[Any], Any]


class CommandRegistry:
    """Name-keyed handler table.

    Entries are unique by name; registering a name again replaces the
    previous handler.

    Usage:
        registry = CommandRegistry()

        @registry.command("getPlatformVersion")
        def get_platform_version(arguments):
            return "iOS 17.0"
    """

    def __init__(self) -> None:
        self._handlers: dict[str, Handler] = {}

    def register(self, name: str, handler: Handler) -> None:
        """Store the handler for `name`, replacing any previous one."""
        if not name:
            raise ValueError("Command name must be a non-empty string")
        if not callable(handler):
            raise TypeError(f"Handler for {name!r} is not callable")
        if inspect.iscoroutinefunction(handler) or inspect.iscoroutinefunction(
            getattr(handler, "__call__", None)
        ):
            raise TypeError(f"Handler for {name!r} must return its result synchronously")

        if name in self._handlers:
            logger.debug(f"Replacing handler for command {name}")
        self._handlers[name] = handler

    def command(self, name: str) -> Callable[[Handler], Handler]:
        """Decorator form of register()."""

        def decorator(handler: Handler) -> Handler:
            self.register(name, handler)
            return handler

        return decorator

    def unregister(self, name: str) -> bool:
        """Remove the handler for `name`. Returns False if none was registered."""
        return self._handlers.pop(name, None) is not None

    def lookup(self, name: str) -> Handler | None:
        """Return the handler for `name`, or None."""
        return self._handlers.get(name)

    def names(self) -> list[str]:
        """Registered command names, in registration order."""
        return list(self._handlers)

    def clear(self) -> None:
        self._handlers.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._handlers))
