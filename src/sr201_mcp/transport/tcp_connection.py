"""TCP connection to one of the SR-201 services.

Each exchange is a single write followed by a single read into a fixed
128-byte buffer. The board sends one complete reply per request, so no
buffering is carried between calls. A read that fills the buffer exactly is
treated as truncated and rejected, even though a reply of exactly 128 bytes
would be legitimate.
"""

from __future__ import annotations

import logging
import socket

from ..exceptions import BufferTooSmallError, TransportError

logger = logging.getLogger(__name__)

RELAY_PORT = 6722
CONFIG_PORT = 5111
RECV_BUFFER_SIZE = 128
DEFAULT_TIMEOUT = 5.0


class TCPConnection:
    """Owns one TCP stream to the board.

    Usage::

        conn = TCPConnection("192.168.1.100", RELAY_PORT)
        conn.open()
        reply = conn.send_and_receive(b"00")
        conn.close()

    Not safe for use from several threads; open one connection per caller.
    """

    def __init__(
        self,
        host: str,
        port: int,
        timeout: float | None = DEFAULT_TIMEOUT,
        debug: bool = False,
    ) -> None:
        self._host = host
        self._port = port
        self._timeout = timeout
        self._debug = debug
        self._sock: socket.socket | None = None

    @classmethod
    def from_socket(cls, sock: socket.socket, debug: bool = False) -> TCPConnection:
        """Wrap an already connected socket."""
        try:
            host, port = sock.getpeername()[:2]
        except (OSError, ValueError):
            host, port = "", 0
        conn = cls(host, port, timeout=sock.gettimeout(), debug=debug)
        conn._sock = sock
        return conn

    @property
    def connected(self) -> bool:
        return self._sock is not None

    @property
    def host(self) -> str:
        return self._host

    @property
    def port(self) -> int:
        return self._port

    @property
    def debug(self) -> bool:
        return self._debug

    def open(self) -> None:
        """Connect to the board.

        Raises:
            TransportError: If the connection cannot be established.
        """
        if self._sock is not None:
            return
        try:
            self._sock = socket.create_connection(
                (self._host, self._port), timeout=self._timeout
            )
        except OSError as e:
            raise TransportError(
                f"Could not connect to {self._host}:{self._port}: {e}"
            ) from e
        logger.info("Connected to %s:%d", self._host, self._port)

    def close(self) -> None:
        """Close the connection."""
        if self._sock is None:
            return
        try:
            self._sock.close()
        except OSError as e:
            logger.warning("Error closing socket: %s", e)
        finally:
            self._sock = None
            logger.info("Disconnected from %s:%d", self._host, self._port)

    def __enter__(self) -> TCPConnection:
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def write(self, data: bytes) -> None:
        """Send a complete request.

        Raises:
            TransportError: If not connected or the write fails.
        """
        if self._sock is None:
            raise TransportError("Not connected to device")
        if self._debug:
            logger.info("> %s", data.decode("ascii", errors="replace"))
        try:
            self._sock.sendall(data)
        except OSError as e:
            raise TransportError(f"Write to {self._host}:{self._port} failed: {e}") from e

    def read(self) -> bytes:
        """Read one reply with a single receive call.

        Returns:
            The bytes read, possibly empty if the peer closed the stream.

        Raises:
            TransportError: If not connected, or the read fails or times out.
            BufferTooSmallError: If the reply filled the receive buffer.
        """
        if self._sock is None:
            raise TransportError("Not connected to device")
        try:
            data = self._sock.recv(RECV_BUFFER_SIZE)
        except OSError as e:
            raise TransportError(f"Read from {self._host}:{self._port} failed: {e}") from e

        if self._debug:
            logger.info("< %s", data.decode("ascii", errors="replace"))

        if len(data) == RECV_BUFFER_SIZE:
            raise BufferTooSmallError(len(data))
        return data

    def send_and_receive(self, data: bytes) -> bytes:
        """Send a request and return the raw reply."""
        self.write(data)
        return self.read()
