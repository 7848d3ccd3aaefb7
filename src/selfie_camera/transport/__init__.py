"""Host surfaces that carry channel commands across a process boundary.

- stdio - newline-delimited JSON for subprocess/IPC integration
- HTTP  - see selfie_camera.app
"""

from .stdio_adapter import StdioChannelAdapter, run_stdio_adapter

__all__ = [
    "StdioChannelAdapter",
    "run_stdio_adapter",
]
