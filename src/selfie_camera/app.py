"""selfie_camera HTTP application.

Creates the Starlette ASGI application that serves channel plugins:
- /health - Health check, lists attached channels
- /channels/{channel} - POST a command, receive its result

The application is itself the messaging surface: plugins are attached
to its messenger when the app starts and detached when it shuts down.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import AsyncIterator, Sequence

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.routing import Route

from .config import BridgeConfig
from .lifecycle import ChannelPlugin
from .messenger import InProcessMessenger
from .plugin import SelfieCameraPlugin
from .routes import channel_routes, health_routes

logger = logging.getLogger(__name__)


def create_app(
    plugins: Sequence[ChannelPlugin] | None = None,
    *,
    config: BridgeConfig | None = None,
) -> Starlette:
    """Create the bridge application.

    Args:
        plugins: Plugins to serve. Defaults to the selfie_camera plugin.
        config: Runtime configuration. Defaults to the environment.

    Returns:
        Configured Starlette application
    """
    if plugins is None:
        config = config or BridgeConfig.from_env()
        plugins = [SelfieCameraPlugin(platform_info=config.platform_info())]

    messenger = InProcessMessenger()

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        for plugin in plugins:
            plugin.attach(messenger)
        logger.info(f"Serving channels: {', '.join(messenger.channels())}")
        try:
            yield
        finally:
            for plugin in plugins:
                plugin.detach()

    routes: list[Route] = []
    routes.extend(health_routes)
    routes.extend(channel_routes)

    # CORS middleware for local development
    middleware = [
        Middleware(
            CORSMiddleware,
            allow_origins=["http://localhost:*", "http://127.0.0.1:*"],
            allow_methods=["*"],
            allow_headers=["*"],
        ),
    ]

    app = Starlette(routes=routes, middleware=middleware, lifespan=lifespan)
    app.state.messenger = messenger
    return app
