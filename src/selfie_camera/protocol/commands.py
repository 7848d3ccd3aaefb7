"""Command definitions for the channel protocol.

Commands are requests delivered on a named channel that expect exactly
one result. Each command has an ID for correlation with its result.
"""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CommandType(str, Enum):
    """Command names known to the selfie_camera channel."""

    GET_PLATFORM_VERSION = "getPlatformVersion"


class Command(BaseModel):
    """A command delivered on a channel.

    Each command:
    - Has a unique `id` for correlation with its result
    - Has a `name` identifying the operation
    - Has optional opaque `arguments`

    Example:
        {
            "id": "cmd_abc123",
            "name": "getPlatformVersion",
            "arguments": null
        }

    Commands are immutable once received.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: f"cmd_{uuid.uuid4().hex[:12]}")
    name: str
    arguments: Any = None

    @classmethod
    def create(
        cls,
        name: str | CommandType,
        arguments: Any = None,
        command_id: str | None = None,
    ) -> Command:
        """Factory method for creating commands."""
        return cls(
            id=command_id or f"cmd_{uuid.uuid4().hex[:12]}",
            name=name.value if isinstance(name, CommandType) else name,
            arguments=arguments,
        )

    @classmethod
    def get_platform_version(cls) -> Command:
        """Create a getPlatformVersion command."""
        return cls.create(CommandType.GET_PLATFORM_VERSION)
