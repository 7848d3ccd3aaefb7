"""Dispatcher - resolves a command to its handler and produces one Result.

All host surfaces (in-process, stdio, HTTP) end up here, so a command
behaves the same regardless of how it arrived.
"""

from __future__ import annotations

import inspect
import logging

from pydantic_core import PydanticSerializationError

from .errors import CommandError
from .protocol import Command, ErrorCode, Result
from .registry import CommandRegistry

logger = logging.getLogger(__name__)


class Dispatcher:
    """Dispatches commands to the handlers of a registry.

    Every call to dispatch() returns exactly one terminal Result:
    - No handler: not_implemented
    - Handler returned a Result: that result, correlated to the command
    - Handler returned anything else: success carrying the value unchanged
    - Handler raised CommandError: error with the handler's code
    - Handler raised anything else: error with code HANDLER_ERROR
    - Handler returned an awaitable or a value that cannot be encoded
      as JSON: error with code HANDLER_ERROR
    """

    def __init__(self, registry: CommandRegistry) -> None:
        self._registry = registry

    def dispatch(self, command: Command) -> Result:
        """Process a command and return its result."""
        logger.debug(f"Dispatching command: {command.name} (id={command.id})")

        handler = self._registry.lookup(command.name)
        if handler is None:
            logger.debug(f"No handler for command: {command.name}")
            return Result.not_implemented(command.id, command.name)

        try:
            value = handler(command.arguments)
        except CommandError as e:
            logger.info(f"Command {command.name} failed: {e.code}: {e.message}")
            return Result.error_result(command.id, e.message, code=e.code, details=e.details)
        except Exception as e:
            logger.exception(f"Error handling command {command.id}: {e}")
            return Result.error_result(command.id, str(e), code=ErrorCode.HANDLER_ERROR)

        if inspect.isawaitable(value):
            # Handlers answer synchronously; a pending awaitable is never run
            if inspect.iscoroutine(value):
                value.close()
            logger.error(f"Handler for {command.name} returned an awaitable")
            return Result.error_result(
                command.id,
                f"Handler for {command.name} returned an awaitable instead of a value",
                code=ErrorCode.HANDLER_ERROR,
            )

        if isinstance(value, Result):
            result = value.with_correlation(command.id)
        else:
            result = Result.success(command.id, value)

        try:
            result.model_dump_json()
        except PydanticSerializationError as e:
            logger.error(f"Result of {command.name} is not serializable: {e}")
            return Result.error_result(
                command.id,
                f"Result of {command.name} is not serializable: {e}",
                code=ErrorCode.HANDLER_ERROR,
            )
        return result
