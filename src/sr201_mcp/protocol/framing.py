"""Message framing for the two SR-201 services.

Neither service uses a length prefix or line terminator: one write carries
one request and one read carries one response. The relay service replies
with a bare status string. The configuration service wraps every reply in
an envelope::

    +-----+-------------------------------+-----+
    | '>' |  payload (comma-separated)    | ';' |
    +-----+-------------------------------+-----+
"""

from __future__ import annotations

from ..exceptions import DecodeError, FramingError

ENVELOPE_START = ">"
ENVELOPE_END = ";"


def encode_request(request: str) -> bytes:
    """Encode a request string for the wire."""
    return request.encode("ascii")


def decode_response(data: bytes) -> str:
    """Decode raw response bytes as ASCII.

    Raises:
        DecodeError: If the bytes are not ASCII.
    """
    try:
        return data.decode("ascii")
    except UnicodeDecodeError as e:
        raise DecodeError(
            f"Response is not ASCII: {data!r}", text=data.hex(" ")
        ) from e


def strip_envelope(text: str) -> str:
    """Remove the ``'>' ... ';'`` envelope from a configuration reply.

    Raises:
        FramingError: If either marker is missing. An empty reply fails the
            first check; a lone ``'>'`` fails the second.
    """
    if not text.startswith(ENVELOPE_START):
        raise FramingError(f"Bad format for first char: {text!r}")
    body = text[len(ENVELOPE_START):]
    if not body.endswith(ENVELOPE_END):
        raise FramingError(f"Bad format for last char: {text!r}")
    return body[: -len(ENVELOPE_END)]
