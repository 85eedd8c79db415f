"""Relay status model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from .channels import CHANNEL_COUNT


@dataclass(frozen=True)
class RelayStatus:
    """Closed state of all eight channels, as reported by one exchange.

    ``status[i]`` is True when channel ``i`` is closed.
    """

    closed: tuple[bool, ...]

    def __post_init__(self) -> None:
        if len(self.closed) != CHANNEL_COUNT:
            raise ValueError(
                f"RelayStatus needs {CHANNEL_COUNT} channels, got {len(self.closed)}"
            )

    def __getitem__(self, channel: int) -> bool:
        return self.closed[channel]

    def __iter__(self) -> Iterator[bool]:
        return iter(self.closed)

    def __len__(self) -> int:
        return len(self.closed)

    def __repr__(self) -> str:
        return f"RelayStatus({self.to_wire()})"

    def closed_channels(self) -> list[int]:
        return [i for i, state in enumerate(self.closed) if state]

    def to_dict(self, channels: list[int] | None = None) -> dict[str, bool]:
        """Map channel number (as a string key) to its closed state."""
        if channels is None:
            channels = list(range(CHANNEL_COUNT))
        return {str(ch): self.closed[ch] for ch in channels}

    def to_wire(self) -> str:
        """Render in the device's ``"10000000"`` form."""
        return "".join("1" if state else "0" for state in self.closed)

    @classmethod
    def from_bools(cls, states) -> RelayStatus:
        return cls(closed=tuple(bool(s) for s in states))
