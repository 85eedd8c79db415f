"""Synchronous clients for the SR-201 relay and configuration services.

Each client owns one connection and performs exactly one request/reply
exchange per call. Nothing is cached between calls.

Example::

    with RelayClient.connect("192.168.1.100") as relay:
        relay.close(0)
        print(relay.status().closed_channels())

    with ConfigClient.connect("192.168.1.100") as config:
        print(config.get()["ipv4"])
"""

from __future__ import annotations

import logging

from .exceptions import VerificationError
from .models.config import find_writable_key
from .models.relay import RelayStatus
from .protocol.commands import (
    IMMEDIATE,
    QUICK_REOPEN,
    CloseMode,
    build_close,
    build_get_config,
    build_open,
    build_set_config,
    build_status,
    close_mode_for_delay,
)
from .protocol.framing import decode_response, encode_request
from .protocol.parser import parse_config, parse_set_result, parse_status
from .transport.tcp_connection import (
    CONFIG_PORT,
    DEFAULT_TIMEOUT,
    RELAY_PORT,
    TCPConnection,
)

logger = logging.getLogger(__name__)


class _BaseClient:
    """Shared request/reply plumbing over a single connection."""

    def __init__(self, connection: TCPConnection) -> None:
        self._connection = connection

    @property
    def connection(self) -> TCPConnection:
        return self._connection

    def disconnect(self) -> None:
        """Close the underlying connection."""
        self._connection.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.disconnect()

    def _exchange(self, request: str) -> str:
        logger.debug("Request %r to %s", request, self._connection.host)
        reply = self._connection.send_and_receive(encode_request(request))
        return decode_response(reply)


class RelayClient(_BaseClient):
    """Client for the relay control service (port 6722).

    Args:
        connection: An open connection to the relay service.
        verify: Check after every close that the channel reports closed.
    """

    def __init__(self, connection: TCPConnection, verify: bool = True) -> None:
        super().__init__(connection)
        self._verify = verify

    @classmethod
    def connect(
        cls,
        host: str,
        port: int = RELAY_PORT,
        timeout: float | None = DEFAULT_TIMEOUT,
        debug: bool = False,
        verify: bool = True,
    ) -> RelayClient:
        """Open a connection to ``host`` and return a client owning it."""
        connection = TCPConnection(host, port, timeout=timeout, debug=debug)
        connection.open()
        return cls(connection, verify=verify)

    def status(self) -> RelayStatus:
        """Read the closed state of all channels."""
        return parse_status(self._exchange(build_status()))

    def open(self, channel: int) -> RelayStatus:
        """Open a channel and return the resulting status."""
        return parse_status(self._exchange(build_open(channel)))

    def close(self, channel: int) -> RelayStatus:
        """Close a channel and return the resulting status."""
        return self._close(channel, IMMEDIATE)

    def close_then_open(self, channel: int, delay: int) -> RelayStatus:
        """Close a channel and have the device reopen it after ``delay`` seconds.

        A delay of 0 closes without reopening.
        """
        return self._close(channel, close_mode_for_delay(delay))

    def close_then_open_quick(self, channel: int) -> RelayStatus:
        """Close a channel and have the device reopen it after about 500 ms."""
        return self._close(channel, QUICK_REOPEN)

    def _close(self, channel: int, mode: CloseMode) -> RelayStatus:
        status = parse_status(self._exchange(build_close(channel, mode)))
        if self._verify and not status[channel]:
            raise VerificationError(
                "Channel not closed when expected", channel, status
            )
        return status


class ConfigClient(_BaseClient):
    """Client for the device configuration service (port 5111)."""

    @classmethod
    def connect(
        cls,
        host: str,
        port: int = CONFIG_PORT,
        timeout: float | None = DEFAULT_TIMEOUT,
        debug: bool = False,
    ) -> ConfigClient:
        """Open a connection to ``host`` and return a client owning it."""
        connection = TCPConnection(host, port, timeout=timeout, debug=debug)
        connection.open()
        return cls(connection)

    def get(self) -> dict[str, str]:
        """Read every named configuration value."""
        return parse_config(self._exchange(build_get_config()))

    def set(self, key: str, value: str) -> None:
        """Write one configuration value.

        Raises:
            KeyNotFoundError: If the key is unknown or read-only.
            InvalidValueError: If the value contains "," or ";".
            DeviceRejectedError: If the device refused the value.
            UnknownResponseError: If the reply was neither OK nor ERR.
        """
        config_key = find_writable_key(key)
        request = build_set_config(config_key, value)
        parse_set_result(self._exchange(request))
        logger.info("Set %s = %s", key, value)
