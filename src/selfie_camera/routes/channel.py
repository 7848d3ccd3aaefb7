"""HTTP channel adapter.

Thin adapter layer that maps HTTP requests to channel commands and
results to JSON responses. All command logic lives behind the
messenger; this module only handles HTTP concerns.
"""

from __future__ import annotations

import json
import logging

from pydantic import ValidationError
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from ..messenger import InProcessMessenger
from ..protocol import Command, ErrorCode, Result

logger = logging.getLogger(__name__)


def status_for(result: Result) -> int:
    """HTTP status for a result. not_implemented is a normal answer."""
    if not result.is_error():
        return 200
    if result.code == ErrorCode.NOT_ATTACHED.value:
        return 404
    if result.code == ErrorCode.PARSE_ERROR.value:
        return 400
    return 500


def result_response(result: Result) -> JSONResponse:
    return JSONResponse(result.model_dump(mode="json"), status_code=status_for(result))


async def send_command(request: Request) -> JSONResponse:
    """POST /channels/{channel} - dispatch one command."""
    channel = request.path_params["channel"]
    messenger: InProcessMessenger = request.app.state.messenger

    try:
        body = await request.body()
        command = Command.model_validate_json(body)
    except (ValidationError, json.JSONDecodeError) as e:
        logger.info(f"Rejected command on {channel}: {e}")
        return result_response(
            Result.error_result(None, error=f"Invalid command: {e}", code=ErrorCode.PARSE_ERROR)
        )

    return result_response(messenger.send(channel, command))


channel_routes = [
    Route("/channels/{channel}", send_command, methods=["POST"]),
]
