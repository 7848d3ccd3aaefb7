"""HTTP routes."""

from .channel import channel_routes
from .health import health_routes

__all__ = [
    "channel_routes",
    "health_routes",
]
