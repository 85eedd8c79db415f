"""Protocol layer: request builders, envelope framing, and response parsing."""

from .framing import strip_envelope, decode_response, encode_request
from .commands import CloseMode, Immediate, QuickReopen, DelayedSeconds
from .parser import parse_status, parse_config, parse_set_result
