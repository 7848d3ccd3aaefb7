"""Platform detection for the version probe."""

from __future__ import annotations

import logging
import platform
import sys
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlatformInfo:
    """Operating system name and version as reported to callers."""

    name: str
    version: str

    def describe(self) -> str:
        """Human-readable form, e.g. "iOS 17.0"."""
        return f"{self.name} {self.version}".strip()


def detect_platform_info() -> PlatformInfo:
    """Detect the current operating system name and version."""
    system = platform.system()

    if sys.platform == "ios":
        info = PlatformInfo("iOS", platform.ios_ver().release)
    elif sys.platform == "android":
        info = PlatformInfo("Android", platform.android_ver().release)
    elif system == "Darwin":
        info = PlatformInfo("macOS", platform.mac_ver()[0] or platform.release())
    elif system == "Windows":
        info = PlatformInfo("Windows", platform.version())
    elif system == "Linux":
        info = PlatformInfo("Linux", platform.release())
    else:
        info = PlatformInfo(system or "Unknown", platform.release())

    logger.debug(f"Detected platform: {info.describe()}")
    return info
