"""Pytest configuration and shared fixtures."""

import pytest

from selfie_camera.messenger import InProcessMessenger
from selfie_camera.platform_info import PlatformInfo
from selfie_camera.plugin import SelfieCameraPlugin


@pytest.fixture(scope="module")
def anyio_backend():
    """Configure anyio to use asyncio backend."""
    return "asyncio"


@pytest.fixture
def ios_platform() -> PlatformInfo:
    """A fixed platform so version probes are deterministic."""
    return PlatformInfo("iOS", "17.0")


@pytest.fixture
def messenger() -> InProcessMessenger:
    return InProcessMessenger()


@pytest.fixture
def plugin(ios_platform: PlatformInfo) -> SelfieCameraPlugin:
    return SelfieCameraPlugin(platform_info=ios_platform)


@pytest.fixture
def attached_plugin(plugin: SelfieCameraPlugin, messenger: InProcessMessenger):
    """Plugin attached to an in-process messenger, detached afterwards."""
    plugin.attach(messenger)
    yield plugin
    plugin.detach()
