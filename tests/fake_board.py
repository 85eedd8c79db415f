"""Fake SR-201 board for socket-level tests."""

from __future__ import annotations

import logging
import socket
import threading
from typing import Callable

_LOGGER = logging.getLogger(__name__)


class FakeService:
    """Listen on 127.0.0.1 and answer each request with ``handler(request)``.

    Requests are read with a single ``recv`` each, the way the board expects
    one request per write. Returning ``None`` from the handler sends nothing;
    returning ``HANG_UP`` closes the client connection.
    """

    HANG_UP = object()

    def __init__(self, handler: Callable[[bytes], object]) -> None:
        self._handler = handler
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._sock.bind(("127.0.0.1", 0))
        self._sock.listen(1)
        self._thread: threading.Thread | None = None
        self.requests: list[bytes] = []

    @property
    def port(self) -> int:
        return self._sock.getsockname()[1]

    def start(self) -> FakeService:
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()
        return self

    def stop(self) -> None:
        # shutdown wakes a thread still blocked in accept()
        try:
            self._sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
        self._sock.close()
        if self._thread is not None:
            self._thread.join(timeout=2)

    def _serve(self) -> None:
        try:
            csock, _ = self._sock.accept()
        except OSError:
            return
        with csock:
            while True:
                try:
                    data = csock.recv(1024)
                except OSError:
                    break
                if not data:
                    break
                self.requests.append(data)
                _LOGGER.debug("Received request: %r", data)
                reply = self._handler(data)
                if reply is self.HANG_UP:
                    break
                if reply is not None:
                    csock.sendall(reply)


class FakeBoard:
    """Simulated relay and configuration state behind two fake services."""

    def __init__(self) -> None:
        self.closed = [False] * 8
        self.config = [
            "192.168.1.100",
            "255.255.255.0",
            "192.168.1.1",
            "",
            "1",
            "1.0.6",
            "F0FE6B123456",
            "8.8.8.8",
            "cloud.example.com",
            "0",
        ]
        self.stuck: set[int] = set()
        self.relay = FakeService(self.handle_relay)
        self.config_service = FakeService(self.handle_config)

    def start(self) -> FakeBoard:
        self.relay.start()
        self.config_service.start()
        return self

    def stop(self) -> None:
        self.relay.stop()
        self.config_service.stop()

    def _status(self) -> bytes:
        return "".join("1" if c else "0" for c in self.closed).encode()

    def handle_relay(self, data: bytes) -> bytes:
        text = data.decode("ascii")
        action, rest = text[0], text[1:]
        if action == "0":
            return self._status()
        channel = int(rest[0]) - 1
        if channel not in self.stuck:
            # a delayed or quick close still reports closed right away
            self.closed[channel] = action == "1"
        return self._status()

    def handle_config(self, data: bytes) -> bytes:
        text = data.decode("ascii")
        if text == "#12222;":
            return (">" + ",".join(self.config) + ";").encode()
        selector = text[1]
        value = text[text.index(",") + 1 : -1]
        selectors = "234567 89A"
        if selector not in selectors or selector == " ":
            return b">ERR;"
        self.config[selectors.index(selector)] = value
        return b">OK;"
