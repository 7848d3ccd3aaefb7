"""Transport-agnostic channel protocol.

Defines the command/result pair that works identically across
all host surfaces (in-process, stdio, HTTP).

Key concepts:
- Commands: requests delivered on a named channel, with correlation IDs
- Results: exactly one terminal response per command
- Correlation: every result links back to its originating command
"""

from .commands import Command, CommandType
from .results import ErrorCode, Result, ResultType

__all__ = [
    "Command",
    "CommandType",
    "ErrorCode",
    "Result",
    "ResultType",
]
