"""Result definitions for the channel protocol.

Every dispatched command produces exactly one Result:
- success: the handler's value, unchanged
- not_implemented: no handler is registered for the command name
- error: a lifecycle, parse or handler failure with a code
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..errors import (
    ChannelError,
    CommandError,
    CommandNotImplementedError,
    NotAttachedError,
)


class ResultType(str, Enum):
    """Terminal outcomes of a dispatched command."""

    SUCCESS = "success"
    NOT_IMPLEMENTED = "not_implemented"
    ERROR = "error"


class ErrorCode(str, Enum):
    """Error codes produced by the bridge itself."""

    NOT_ATTACHED = "NOT_ATTACHED"
    HANDLER_ERROR = "HANDLER_ERROR"
    PARSE_ERROR = "PARSE_ERROR"


class Result(BaseModel):
    """The single terminal response to a command.

    Example (success):
        {
            "type": "success",
            "correlation_id": "cmd_abc123",
            "value": "iOS 17.0"
        }

    Example (not attached):
        {
            "type": "error",
            "correlation_id": "cmd_abc123",
            "error": "Channel 'selfie_camera' is not attached",
            "code": "NOT_ATTACHED"
        }
    """

    model_config = ConfigDict(frozen=True)

    type: ResultType
    correlation_id: str | None = None  # Links to command.id
    value: Any = None
    error: str | None = None
    code: str | None = None
    details: Any = None
    timestamp: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())

    def is_success(self) -> bool:
        return self.type == ResultType.SUCCESS

    def is_not_implemented(self) -> bool:
        return self.type == ResultType.NOT_IMPLEMENTED

    def is_error(self) -> bool:
        return self.type == ResultType.ERROR

    def is_not_attached(self) -> bool:
        return self.is_error() and self.code == ErrorCode.NOT_ATTACHED.value

    def with_correlation(self, correlation_id: str | None) -> Result:
        """Return a copy of this result correlated to another command."""
        if correlation_id == self.correlation_id:
            return self
        return self.model_copy(update={"correlation_id": correlation_id})

    def unwrap(self) -> Any:
        """Return the success value, or raise the matching ChannelError."""
        if self.is_success():
            return self.value
        if self.is_not_implemented():
            raise CommandNotImplementedError(self.error or "Not implemented")
        if self.is_not_attached():
            raise NotAttachedError(self.error or "Not attached", details=self.details)
        if self.code in (ErrorCode.HANDLER_ERROR.value, ErrorCode.PARSE_ERROR.value):
            raise ChannelError(self.error or "Command failed", code=self.code, details=self.details)
        raise CommandError(self.code or CommandError.code, self.error or "Command failed", self.details)

    # =========================================================================
    # Factory methods
    # =========================================================================

    @classmethod
    def success(cls, correlation_id: str | None, value: Any = None) -> Result:
        """Create a success result carrying the handler's value."""
        return cls(type=ResultType.SUCCESS, correlation_id=correlation_id, value=value)

    @classmethod
    def not_implemented(cls, correlation_id: str | None, name: str) -> Result:
        """Create a result signalling that no handler exists for `name`."""
        return cls(
            type=ResultType.NOT_IMPLEMENTED,
            correlation_id=correlation_id,
            error=f"Command not implemented: {name}",
        )

    @classmethod
    def error_result(
        cls,
        correlation_id: str | None,
        error: str,
        code: str | ErrorCode,
        details: Any = None,
    ) -> Result:
        """Create an error result."""
        return cls(
            type=ResultType.ERROR,
            correlation_id=correlation_id,
            error=error,
            code=code.value if isinstance(code, ErrorCode) else code,
            details=details,
        )

    @classmethod
    def not_attached(cls, correlation_id: str | None, channel: str) -> Result:
        """Create a result for a command sent to a detached channel."""
        return cls.error_result(
            correlation_id,
            error=f"Channel '{channel}' is not attached",
            code=ErrorCode.NOT_ATTACHED,
            details={"channel": channel},
        )
