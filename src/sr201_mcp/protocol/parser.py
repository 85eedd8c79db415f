"""Response parsing for device messages."""

from __future__ import annotations

from ..exceptions import (
    DecodeError,
    DeviceRejectedError,
    FieldCountError,
    UnknownResponseError,
)
from ..models.channels import CHANNEL_COUNT
from ..models.config import CONFIG_KEYS
from ..models.relay import RelayStatus
from .framing import strip_envelope

RESPONSE_OK = "OK"
RESPONSE_ERR = "ERR"


def parse_status(text: str) -> RelayStatus:
    """Parse an 8-character status string, leftmost character is channel 0.

    Raises:
        DecodeError: On a wrong length or a character other than 0 or 1.
    """
    if len(text) != CHANNEL_COUNT:
        raise DecodeError(
            f"Unexpected char length: expected {CHANNEL_COUNT}, got {len(text)}",
            text=text,
            expected=CHANNEL_COUNT,
            actual=len(text),
        )
    bad = [c for c in text if c not in "01"]
    if bad:
        raise DecodeError(f"Unexpected char {bad[0]!r} in status {text!r}", text=text)
    return RelayStatus.from_bools(c == "1" for c in text)


def parse_config(text: str) -> dict[str, str]:
    """Parse a full configuration reply into a name -> value mapping.

    Reserved positions are dropped.

    Raises:
        FramingError: If the envelope is missing.
        FieldCountError: Unless there are exactly as many fields as keys.
    """
    payload = strip_envelope(text)
    values = payload.split(",")
    if len(values) != len(CONFIG_KEYS):
        raise FieldCountError(
            f"Unexpected number of values: expected {len(CONFIG_KEYS)}, "
            f"got {len(values)}",
            text=payload,
            expected=len(CONFIG_KEYS),
            actual=len(values),
        )
    return {
        key.name: value
        for key, value in zip(CONFIG_KEYS, values)
        if key.name is not None
    }


def parse_set_result(text: str) -> None:
    """Check the reply to a configuration write.

    Raises:
        FramingError: If the envelope is missing.
        DeviceRejectedError: If the device answered ERR.
        UnknownResponseError: For any other payload than OK.
    """
    payload = strip_envelope(text)
    if payload == RESPONSE_OK:
        return
    if payload == RESPONSE_ERR:
        raise DeviceRejectedError("Device replied with error")
    raise UnknownResponseError(payload)
