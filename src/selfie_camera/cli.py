"""selfie-camera CLI.

Default mode is stdio (for subprocess/IPC integration).
Use --http to run as HTTP server.

Usage:
    selfie-camera                          # Stdio mode (default)
    selfie-camera --http                   # HTTP server mode
    selfie-camera --http --port 8080       # HTTP with custom port
    selfie-camera --health                 # Check HTTP server health

    selfie-camera call getPlatformVersion  # Dispatch one command in process
    selfie-camera commands                 # List registered commands
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import Any

import click
import httpx

from .config import BridgeConfig
from .messenger import InProcessMessenger
from .plugin import CHANNEL_NAME, SelfieCameraPlugin
from .protocol import Command


def _configure_logging(config: BridgeConfig) -> None:
    # Protocol output owns stdout; diagnostics go to stderr
    logging.basicConfig(
        level=config.logging_level,
        format="%(levelname)s: %(name)s: %(message)s",
        stream=sys.stderr,
    )


@click.group(invoke_without_command=True)
@click.option("--http", "http_mode", is_flag=True, help="Run as HTTP server instead of stdio")
@click.option("--host", default=None, help="Host to bind to (HTTP mode)")
@click.option("--port", default=None, type=int, help="Port to bind to (HTTP mode)")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development (HTTP mode)")
@click.option("--health", "health_check", is_flag=True, help="Check HTTP server health and exit")
@click.option("--health-url", default=None, help="Server URL for health check")
@click.option("--log-level", default=None, help="Logging level (overrides SELFIE_CAMERA_LOG_LEVEL)")
@click.pass_context
def main(
    ctx: click.Context,
    http_mode: bool,
    host: str | None,
    port: int | None,
    reload: bool,
    health_check: bool,
    health_url: str | None,
    log_level: str | None,
) -> None:
    """selfie-camera - serve the selfie_camera command channel.

    By default, serves the channel over stdio.
    Use --http to run as an HTTP server.
    """
    try:
        config = BridgeConfig.from_env()
    except ValueError as e:
        raise click.UsageError(str(e)) from e

    if log_level:
        config.log_level = log_level.upper()
    _configure_logging(config)
    ctx.obj = config

    # If a subcommand is invoked, let it handle everything
    if ctx.invoked_subcommand is not None:
        return

    if (host is not None or port is not None or reload) and not http_mode:
        raise click.UsageError(
            "--host, --port and --reload require --http mode. "
            "These options are only available when running as an HTTP server."
        )

    if host is not None:
        config.host = host
    if port is not None:
        config.port = port

    if health_check:
        _do_health_check(health_url or f"http://{config.host}:{config.port}")
        return

    if http_mode:
        _run_http_server(config, reload)
    else:
        _run_stdio_server(config)


def _do_health_check(url: str) -> None:
    """Check health of a running HTTP server."""

    async def check() -> None:
        async with httpx.AsyncClient(timeout=5.0) as client:
            try:
                response = await client.get(f"{url.rstrip('/')}/health")
                if response.status_code == 200:
                    data = response.json()
                    click.echo(f"Server is healthy: {data}")
                else:
                    click.echo(f"Server returned {response.status_code}", err=True)
                    sys.exit(1)
            except httpx.HTTPError:
                click.echo(f"Cannot connect to server at {url}", err=True)
                sys.exit(1)

    asyncio.run(check())


def _uvicorn_log_level(config: BridgeConfig) -> str:
    # uvicorn only knows these names; anything else falls back to "warning"
    name = logging.getLevelName(config.logging_level).lower()
    return name if name in ("critical", "error", "warning", "info", "debug") else "warning"


def _run_http_server(config: BridgeConfig, reload: bool) -> None:
    """Run HTTP server mode."""
    import uvicorn

    click.echo(f"Serving {CHANNEL_NAME} on http://{config.host}:{config.port}", err=True)
    click.echo("Press Ctrl+C to stop", err=True)

    uvicorn.run(
        "selfie_camera.app:create_app",
        factory=True,
        host=config.host,
        port=config.port,
        reload=reload,
        log_level=_uvicorn_log_level(config),
    )


def _run_stdio_server(config: BridgeConfig) -> None:
    """Run stdio server mode (default)."""
    from .transport.stdio_adapter import run_stdio_adapter

    click.echo(f"Serving {CHANNEL_NAME} over stdio", err=True)

    try:
        asyncio.run(run_stdio_adapter(config))
    except KeyboardInterrupt:
        click.echo("\nShutting down", err=True)


# =============================================================================
# One-shot commands
# =============================================================================


@main.command("call")
@click.argument("name")
@click.option("--arguments", "arguments_json", default=None, help="JSON-encoded command arguments")
@click.option("--channel", default=CHANNEL_NAME, show_default=True, help="Channel to send on")
@click.pass_obj
def call(config: BridgeConfig, name: str, arguments_json: str | None, channel: str) -> None:
    """Dispatch one command in process and print its result."""
    arguments: Any = None
    if arguments_json is not None:
        try:
            arguments = json.loads(arguments_json)
        except json.JSONDecodeError as e:
            raise click.BadParameter(f"not valid JSON: {e}", param_hint="--arguments") from e

    messenger = InProcessMessenger()
    plugin = SelfieCameraPlugin(platform_info=config.platform_info())
    plugin.attach(messenger)
    try:
        result = messenger.send(channel, Command.create(name, arguments))
    finally:
        plugin.detach()

    click.echo(result.model_dump_json(indent=2))
    if result.is_error():
        sys.exit(1)


@main.command("commands")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def commands(config: BridgeConfig, output_json: bool) -> None:
    """List the commands served on the selfie_camera channel."""
    names = SelfieCameraPlugin(platform_info=config.platform_info()).command_names()

    if output_json:
        click.echo(json.dumps({"channel": CHANNEL_NAME, "commands": names}, indent=2))
        return

    click.echo(f"Channel: {CHANNEL_NAME}")
    for name in names:
        click.echo(f"  {name}")


if __name__ == "__main__":
    main()
