"""Request builders for the relay and configuration services.

Relay requests are two ASCII digits, an action followed by a 1-based
channel number, with an optional suffix on close::

    00        status
    1N        close channel N
    1N:S      close, reopen after S seconds
    1N*       close, reopen after roughly 500 ms
    2N        open channel N

Configuration requests use ``#`` and the envelope terminator::

    #12222;              read all settings
    #X2222,VALUE;        write VALUE to the key with selector X
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from ..exceptions import InvalidValueError
from ..models.channels import MAX_CHANNEL
from ..models.config import ConfigKey

MAX_DELAY_SECONDS = 0xFFFF


class RelayAction(str, Enum):
    """Leading digit of a relay request."""

    STATUS = "0"
    CLOSE = "1"
    OPEN = "2"


@dataclass(frozen=True)
class Immediate:
    """Close and stay closed."""


@dataclass(frozen=True)
class QuickReopen:
    """Close, then let the device reopen after a short fixed interval."""


@dataclass(frozen=True)
class DelayedSeconds:
    """Close, then let the device reopen after ``seconds``."""

    seconds: int

    def __post_init__(self) -> None:
        if not 1 <= self.seconds <= MAX_DELAY_SECONDS:
            raise ValueError(
                f"Delay must be 1-{MAX_DELAY_SECONDS} seconds, got {self.seconds}"
            )


CloseMode = Union[Immediate, QuickReopen, DelayedSeconds]

IMMEDIATE = Immediate()
QUICK_REOPEN = QuickReopen()

STATUS_REQUEST = "00"
GET_CONFIG_REQUEST = "#12222;"


def _check_channel(channel: int) -> None:
    if not 0 <= channel <= MAX_CHANNEL:
        raise ValueError(f"Channel must be 0-{MAX_CHANNEL}, got {channel}")


def build_status() -> str:
    """Build a status query."""
    return STATUS_REQUEST


def build_open(channel: int) -> str:
    """Build an open request.

    Args:
        channel: Channel index 0-7.
    """
    _check_channel(channel)
    return f"{RelayAction.OPEN.value}{channel + 1}"


def build_close(channel: int, mode: CloseMode = IMMEDIATE) -> str:
    """Build a close request.

    Args:
        channel: Channel index 0-7.
        mode: What the device should do after closing.
    """
    _check_channel(channel)
    request = f"{RelayAction.CLOSE.value}{channel + 1}"
    if isinstance(mode, QuickReopen):
        return request + "*"
    if isinstance(mode, DelayedSeconds):
        return f"{request}:{mode.seconds}"
    if isinstance(mode, Immediate):
        return request
    raise TypeError(f"Unknown close mode: {mode!r}")


def close_mode_for_delay(delay: int) -> CloseMode:
    """Pick the close mode for a delay in seconds, 0 meaning no reopen."""
    if delay < 0:
        raise ValueError(f"Delay must not be negative, got {delay}")
    if delay == 0:
        return IMMEDIATE
    return DelayedSeconds(delay)


def build_get_config() -> str:
    """Build a request for the full configuration record."""
    return GET_CONFIG_REQUEST


def build_set_config(key: ConfigKey, value: str) -> str:
    """Build a write request for a single configuration key.

    Raises:
        ValueError: If the key is not writable.
        InvalidValueError: If the value contains characters that would
            break the request framing.
    """
    if not key.writable:
        raise ValueError(f"Config key {key.name!r} is not writable")
    if "," in value or ";" in value:
        raise InvalidValueError(key.name or "", value)
    return f"#{key.selector}2222,{value};"
