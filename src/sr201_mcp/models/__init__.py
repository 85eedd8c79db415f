"""Data models for channels, relay status, and configuration keys."""

from .channels import CHANNEL_COUNT, MAX_CHANNEL, parse_channels, parse_channel_list
from .relay import RelayStatus
from .config import ConfigKey, CONFIG_KEYS, CONFIG_KEY_NAMES, find_writable_key
