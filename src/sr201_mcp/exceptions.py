"""Exceptions raised by the SR-201 client.

Every failure surfaces immediately as one of these; nothing is retried.
"""

from __future__ import annotations


class RelayBoardError(Exception):
    """Base exception for all relay board errors."""


class TransportError(RelayBoardError):
    """The socket could not be opened, written or read."""


class FramingError(RelayBoardError):
    """A response violated the envelope or was possibly truncated."""


class BufferTooSmallError(FramingError):
    """The read filled the whole receive buffer."""

    def __init__(self, size: int) -> None:
        super().__init__(f"Buffer too small ({size} bytes read)")
        self.size = size


class DecodeError(RelayBoardError):
    """A response did not match the expected fixed format."""

    def __init__(
        self,
        message: str,
        text: str = "",
        expected: int | None = None,
        actual: int | None = None,
    ) -> None:
        super().__init__(message)
        self.text = text
        self.expected = expected
        self.actual = actual


class FieldCountError(DecodeError):
    """A config payload had the wrong number of comma-separated fields."""


class KeyNotFoundError(RelayBoardError):
    """The config key is unknown or cannot be written."""

    def __init__(self, key: str, reason: str = "Key not found") -> None:
        super().__init__(f"{reason}: {key!r}")
        self.key = key


class InvalidValueError(RelayBoardError, ValueError):
    """A config value contains a character reserved by the wire format."""

    def __init__(self, key: str, value: str) -> None:
        super().__init__(f"Value for {key!r} must not contain ',' or ';': {value!r}")
        self.key = key
        self.value = value


class DeviceRejectedError(RelayBoardError):
    """The device answered a request with ERR."""


class UnknownResponseError(RelayBoardError):
    """The device answered with something that is neither OK nor ERR."""

    def __init__(self, payload: str) -> None:
        super().__init__(f"Unknown response: {payload}")
        self.payload = payload


class VerificationError(RelayBoardError):
    """A well-formed response showed the wrong channel state."""

    def __init__(self, message: str, channel: int, status=None) -> None:
        super().__init__(f"{message} (channel {channel})")
        self.channel = channel
        self.status = status


class ParseError(RelayBoardError, ValueError):
    """A channel selector expression is malformed or out of bounds."""

    def __init__(self, message: str, expression: str) -> None:
        super().__init__(message)
        self.expression = expression
