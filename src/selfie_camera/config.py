"""Bridge configuration loaded from SELFIE_CAMERA_* environment variables."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

from .platform_info import PlatformInfo, detect_platform_info

ENV_PREFIX = "SELFIE_CAMERA_"

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 4097
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass
class BridgeConfig:
    """Runtime configuration."""

    # HTTP surface
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT

    # Logging (stdlib level name)
    log_level: str = DEFAULT_LOG_LEVEL

    # Platform overrides for the version probe
    platform_name: str | None = None
    platform_version: str | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> BridgeConfig:
        """Build a config from the environment, falling back to defaults."""
        env = os.environ if environ is None else environ

        def get(key: str) -> str | None:
            value = env.get(ENV_PREFIX + key)
            return value if value else None

        port_value = get("PORT")
        try:
            port = int(port_value) if port_value else DEFAULT_PORT
        except ValueError:
            raise ValueError(f"{ENV_PREFIX}PORT must be an integer, got {port_value!r}") from None

        return cls(
            host=get("HOST") or DEFAULT_HOST,
            port=port,
            log_level=(get("LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper(),
            platform_name=get("PLATFORM_NAME"),
            platform_version=get("PLATFORM_VERSION"),
        )

    @property
    def logging_level(self) -> int:
        """Numeric logging level; unknown names fall back to WARNING."""
        level = logging.getLevelName(self.log_level.upper())
        return level if isinstance(level, int) else logging.WARNING

    def platform_info(self) -> PlatformInfo:
        """Detected platform with any configured overrides applied."""
        if self.platform_name and self.platform_version:
            return PlatformInfo(self.platform_name, self.platform_version)

        detected = detect_platform_info()
        return PlatformInfo(
            self.platform_name or detected.name,
            self.platform_version or detected.version,
        )
