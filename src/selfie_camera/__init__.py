"""selfie_camera - a named command channel with explicit attach/detach lifecycle.

Commands arrive on the "selfie_camera" channel from a host messaging
surface (in process, stdio or HTTP), are dispatched to at most one
registered handler, and always produce exactly one Result.
"""

from .dispatcher import Dispatcher
from .errors import ChannelError, CommandError, CommandNotImplementedError, NotAttachedError
from .lifecycle import BindingState, ChannelPlugin
from .messenger import InProcessMessenger, MessagingSurface
from .platform_info import PlatformInfo, detect_platform_info
from .plugin import CHANNEL_NAME, SelfieCameraPlugin
from .protocol import Command, CommandType, ErrorCode, Result, ResultType
from .registry import CommandRegistry, Handler

__version__ = "0.1.0"

__all__ = [
    "CHANNEL_NAME",
    "BindingState",
    "ChannelError",
    "ChannelPlugin",
    "Command",
    "CommandError",
    "CommandNotImplementedError",
    "CommandRegistry",
    "CommandType",
    "Dispatcher",
    "ErrorCode",
    "Handler",
    "InProcessMessenger",
    "MessagingSurface",
    "NotAttachedError",
    "PlatformInfo",
    "Result",
    "ResultType",
    "SelfieCameraPlugin",
    "detect_platform_info",
]
