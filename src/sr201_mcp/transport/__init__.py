"""Transport layer: blocking TCP streams to the board."""

from .tcp_connection import (
    TCPConnection,
    RELAY_PORT,
    CONFIG_PORT,
    RECV_BUFFER_SIZE,
    DEFAULT_TIMEOUT,
)
