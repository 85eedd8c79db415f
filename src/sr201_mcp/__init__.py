"""Client library and MCP server for the SR-201 network relay board.

The board runs two independent ASCII services over TCP: relay control on
port 6722 and device configuration on port 5111.
"""

from .client import RelayClient, ConfigClient
from .exceptions import (
    RelayBoardError,
    TransportError,
    FramingError,
    BufferTooSmallError,
    DecodeError,
    FieldCountError,
    KeyNotFoundError,
    InvalidValueError,
    DeviceRejectedError,
    UnknownResponseError,
    VerificationError,
    ParseError,
)
from .models import RelayStatus, parse_channels, parse_channel_list, CONFIG_KEYS
from .transport import TCPConnection, RELAY_PORT, CONFIG_PORT

__all__ = [
    "RelayClient",
    "ConfigClient",
    "TCPConnection",
    "RelayStatus",
    "parse_channels",
    "parse_channel_list",
    "CONFIG_KEYS",
    "RELAY_PORT",
    "CONFIG_PORT",
    "RelayBoardError",
    "TransportError",
    "FramingError",
    "BufferTooSmallError",
    "DecodeError",
    "FieldCountError",
    "KeyNotFoundError",
    "InvalidValueError",
    "DeviceRejectedError",
    "UnknownResponseError",
    "VerificationError",
    "ParseError",
]
