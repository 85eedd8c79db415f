"""Channel selector parsing.

A selector picks one or more of the eight relay channels::

    all       every channel, 0..7
    3         a single channel
    2..5      exclusive range, 2 3 4
    2..=5     inclusive range, 2 3 4 5
    ..4       start defaults to 0, inclusive, 0 1 2 3 4
    5..       end defaults to 7, always inclusive
"""

from __future__ import annotations

import re
from typing import Iterable

from ..exceptions import ParseError

CHANNEL_COUNT = 8
MAX_CHANNEL = CHANNEL_COUNT - 1

_INDEX_RE = re.compile(r"[0-9]+")
_RANGE_RE = re.compile(r"(?P<start>[0-9]+)?\.\.(?P<eq>=)?(?P<end>[0-9]+)?")


def parse_channels(expr: str) -> list[int]:
    """Parse a single selector expression into an ordered list of channels.

    Raises:
        ParseError: If the expression is not recognised or out of bounds.
    """
    if expr == "all":
        return list(range(CHANNEL_COUNT))

    if _INDEX_RE.fullmatch(expr):
        index = int(expr)
        if index <= MAX_CHANNEL:
            return [index]

    match = _RANGE_RE.fullmatch(expr)
    if match:
        start_text, end_text = match.group("start"), match.group("end")
        inclusive = (
            match.group("eq") is not None or start_text is None or end_text is None
        )

        start = int(start_text) if start_text is not None else 0
        end = int(end_text) if end_text is not None else MAX_CHANNEL

        if start > end or end > MAX_CHANNEL:
            raise ParseError(f'Bad range for expression "{expr}"', expr)

        if inclusive:
            return list(range(start, end + 1))
        return list(range(start, end))

    raise ParseError(f'Failed to parse "{expr}"', expr)


def parse_channel_list(exprs: str | Iterable[str]) -> list[int]:
    """Parse several selectors and concatenate the results.

    A string is split on commas, so ``"0,3..5"`` gives ``[0, 3, 4]``.
    Order and repeats are preserved.
    """
    if isinstance(exprs, str):
        exprs = exprs.split(",")

    channels: list[int] = []
    for expr in exprs:
        channels.extend(parse_channels(expr.strip()))
    return channels
