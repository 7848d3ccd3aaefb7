"""The selfie_camera channel plugin."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .lifecycle import ChannelPlugin
from .platform_info import PlatformInfo, detect_platform_info
from .protocol import CommandType
from .registry import CommandRegistry, Handler

CHANNEL_NAME = "selfie_camera"


class SelfieCameraPlugin(ChannelPlugin):
    """Serves the selfie_camera channel.

    The only command is the platform version probe; every other name
    yields a not_implemented result.
    """

    channel_name = CHANNEL_NAME

    def __init__(
        self,
        platform_info: PlatformInfo | None = None,
        handlers: Mapping[str, Handler] | None = None,
    ) -> None:
        super().__init__(handlers)
        self._platform_info = platform_info

    @property
    def platform_info(self) -> PlatformInfo:
        if self._platform_info is None:
            self._platform_info = detect_platform_info()
        return self._platform_info

    def register_commands(self, registry: CommandRegistry) -> None:
        registry.register(CommandType.GET_PLATFORM_VERSION.value, self.get_platform_version)

    def get_platform_version(self, arguments: Any = None) -> str:
        """Return "<platform> <version>", e.g. "iOS 17.0"."""
        return self.platform_info.describe()
