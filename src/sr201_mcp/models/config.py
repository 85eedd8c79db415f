"""Device configuration key table.

The configuration service returns its settings as ten positional,
comma-separated fields. Each position has a name and, when the device
accepts writes to it, a single-character selector used in set requests::

    pos  name           selector
    0    ipv4           2
    1    netmask        3
    2    gateway        4
    3    (reserved)     5
    4    power_persist  6
    5    version        7
    6    serial         -
    7    dns            8
    8    cloud_server   9
    9    cloud_enabled  A
"""

from __future__ import annotations

from dataclasses import dataclass

from ..exceptions import KeyNotFoundError


@dataclass(frozen=True)
class ConfigKey:
    """One position of the configuration record."""

    name: str | None
    selector: str | None

    @property
    def reserved(self) -> bool:
        return self.name is None

    @property
    def writable(self) -> bool:
        return self.name is not None and self.selector is not None


CONFIG_KEYS: tuple[ConfigKey, ...] = (
    ConfigKey("ipv4", "2"),
    ConfigKey("netmask", "3"),
    ConfigKey("gateway", "4"),
    ConfigKey(None, "5"),
    ConfigKey("power_persist", "6"),
    ConfigKey("version", "7"),
    ConfigKey("serial", None),
    ConfigKey("dns", "8"),
    ConfigKey("cloud_server", "9"),
    ConfigKey("cloud_enabled", "A"),
)

CONFIG_KEY_NAMES: tuple[str, ...] = tuple(
    key.name for key in CONFIG_KEYS if key.name is not None
)


def find_writable_key(name: str) -> ConfigKey:
    """Look up a key that may be used in a set request.

    Raises:
        KeyNotFoundError: If no named key matches, or the key has no selector.
    """
    for key in CONFIG_KEYS:
        if key.name is not None and key.name == name:
            if key.selector is None:
                raise KeyNotFoundError(name, "Key not writable")
            return key
    raise KeyNotFoundError(name)


def describe_keys() -> list[dict]:
    """Summarise the named keys for display."""
    return [
        {"position": i, "name": key.name, "writable": key.writable}
        for i, key in enumerate(CONFIG_KEYS)
        if not key.reserved
    ]
