"""stdio channel adapter.

Thin adapter layer that maps stdin JSON lines to channel commands
and results to stdout JSON lines.

Wire format (newline-delimited JSON, UTF-8 encoded):
- Input (stdin):  {"id": "c1", "channel": "selfie_camera", "name": "getPlatformVersion"}
- Output (stdout): {"type": "success", "correlation_id": "c1", "value": "iOS 17.0", ...}

`channel` defaults to the adapter's default channel; `id` and
`arguments` are optional.

Cross-platform considerations:
- All JSON is UTF-8 encoded (no BOM)
- Newlines are always LF (\\n), never CRLF
- Input accepts both LF and CRLF (normalized to LF)
- Binary mode used internally for consistent behavior
"""

from __future__ import annotations

import asyncio
import io
import json
import logging
import os
import sys
from typing import BinaryIO

from ..config import BridgeConfig
from ..messenger import CommandCallback, InProcessMessenger
from ..plugin import CHANNEL_NAME, SelfieCameraPlugin
from ..protocol import Command, ErrorCode, Result

logger = logging.getLogger(__name__)

# UTF-8 encoding for all JSON operations
ENCODING = "utf-8"

# Newline character (always LF for cross-platform consistency)
NEWLINE = "\n"


def _ensure_binary_stream(stream: BinaryIO | None, default_fd: int) -> BinaryIO:
    """Return `stream`, or the binary buffer of the matching std stream."""
    if stream is not None:
        return stream

    if default_fd == 0:
        return sys.stdin.buffer
    elif default_fd == 1:
        return sys.stdout.buffer
    else:
        return sys.stderr.buffer


class StdioChannelAdapter:
    """Messaging surface that serves channels over stdin/stdout.

    Plugins attach to the adapter like to any other surface; each input
    line is routed to the plugin registered for its channel and exactly
    one result line is written back.

    Usage:
        adapter = StdioChannelAdapter()
        plugin.attach(adapter)
        await adapter.run()  # Blocks until stdin closes

    Example session:
        → {"id":"c1","name":"getPlatformVersion"}
        ← {"type":"success","correlation_id":"c1","value":"Linux 6.8.0",...}
        → {"id":"c2","name":"takeSelfie"}
        ← {"type":"not_implemented","correlation_id":"c2",...}
    """

    def __init__(
        self,
        stdin: BinaryIO | None = None,
        stdout: BinaryIO | None = None,
        stderr: BinaryIO | None = None,
        messenger: InProcessMessenger | None = None,
        default_channel: str = CHANNEL_NAME,
    ):
        self._stdin = _ensure_binary_stream(stdin, 0)
        self._stdout = _ensure_binary_stream(stdout, 1)
        self._stderr = _ensure_binary_stream(stderr, 2)

        # Wrap binary streams with UTF-8 text readers/writers
        self._reader = io.TextIOWrapper(
            self._stdin,
            encoding=ENCODING,
            errors="replace",
            newline="",  # Universal newline mode - accepts LF, CRLF, CR
        )
        self._writer = io.TextIOWrapper(
            self._stdout,
            encoding=ENCODING,
            errors="replace",
            newline=NEWLINE,
            write_through=True,
        )
        self._error_writer = io.TextIOWrapper(
            self._stderr,
            encoding=ENCODING,
            errors="replace",
            newline=NEWLINE,
            write_through=True,
        )

        self._messenger = messenger or InProcessMessenger()
        self._default_channel = default_channel

    def set_command_handler(self, channel: str, handler: CommandCallback | None) -> None:
        self._messenger.set_command_handler(channel, handler)

    def remove_command_handler(self, channel: str, handler: CommandCallback) -> None:
        self._messenger.remove_command_handler(channel, handler)

    async def run(self) -> None:
        """Run the adapter, processing commands until stdin closes."""
        try:
            while True:
                line = await self._read_line()
                if line is None:
                    break  # EOF

                # Skip UTF-8 BOM if present at start
                line = line.strip().removeprefix("\ufeff").strip()
                if not line:
                    continue

                self._send_result(self.process_line(line))

        except asyncio.CancelledError:
            logger.info("stdio adapter cancelled")
        except Exception as e:
            logger.exception(f"stdio adapter error: {e}")
            self._log_error(f"Fatal error: {e}")

    def process_line(self, line: str) -> Result:
        """Parse one input line and dispatch it to its channel."""
        try:
            payload = json.loads(line)
            if not isinstance(payload, dict):
                raise ValueError("expected a JSON object")
            channel = payload.pop("channel", None)
            if channel is not None and not isinstance(channel, str):
                raise ValueError("channel must be a string")
            channel = channel or self._default_channel
            command = Command.model_validate(payload)
        except ValueError as e:
            # pydantic.ValidationError and json.JSONDecodeError are ValueErrors
            self._log_error(f"Parse error: {e}")
            return Result.error_result(
                None,  # Can't correlate if we couldn't parse
                error=f"Invalid command: {e}",
                code=ErrorCode.PARSE_ERROR,
            )

        logger.debug(f"Received command: {command.name} (id={command.id}) on {channel}")
        return self._messenger.send(channel, command)

    async def _read_line(self) -> str | None:
        """Read a line from stdin without blocking the event loop."""
        loop = asyncio.get_running_loop()
        line = await loop.run_in_executor(None, self._reader.readline)
        return line if line else None

    def _send_result(self, result: Result) -> None:
        """Write a result to stdout as one UTF-8 JSON line."""
        try:
            line = result.model_dump_json()
        except ValueError as e:
            self._log_error(f"Failed to encode result: {e}")
            line = Result.error_result(
                result.correlation_id,
                error=f"Result could not be serialized: {e}",
                code=ErrorCode.HANDLER_ERROR,
            ).model_dump_json()

        try:
            self._writer.write(line + NEWLINE)
            self._writer.flush()
        except (OSError, ValueError) as e:
            self._log_error(f"Failed to send result: {e}")

    def _log_error(self, message: str) -> None:
        """Log error to stderr."""
        self._error_writer.write(f"ERROR: {message}{NEWLINE}")
        self._error_writer.flush()


async def run_stdio_adapter(config: BridgeConfig | None = None) -> None:
    """Serve the selfie_camera channel over stdio until stdin closes."""
    config = config or BridgeConfig.from_env()

    adapter = StdioChannelAdapter()
    plugin = SelfieCameraPlugin(platform_info=config.platform_info())
    plugin.attach(adapter)
    try:
        await adapter.run()
    finally:
        plugin.detach()


def main() -> None:
    """Synchronous entry point."""
    config = BridgeConfig.from_env()

    # Logging goes to stderr; stdout carries the protocol
    logging.basicConfig(
        level=config.logging_level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    # On Windows, ensure binary mode for stdin/stdout
    if sys.platform == "win32":
        import msvcrt

        msvcrt.setmode(sys.stdin.fileno(), os.O_BINARY)
        msvcrt.setmode(sys.stdout.fileno(), os.O_BINARY)
        msvcrt.setmode(sys.stderr.fileno(), os.O_BINARY)

    asyncio.run(run_stdio_adapter(config))


if __name__ == "__main__":
    main()
