"""MCP server entry point for the SR-201 network relay board.

Exposes relay and configuration operations as tools via the Model Context
Protocol using the official Python MCP SDK with stdio transport. Every tool
call opens its own connection, runs its requests serially, and closes it.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable

from mcp.server.fastmcp import FastMCP

from .client import ConfigClient, RelayClient
from .exceptions import RelayBoardError, VerificationError
from .models.channels import parse_channel_list
from .models.config import describe_keys
from .models.relay import RelayStatus
from .protocol.commands import MAX_DELAY_SECONDS
from .transport.tcp_connection import CONFIG_PORT, RELAY_PORT

logger = logging.getLogger(__name__)

DEFAULT_HOST = "192.168.1.100"

mcp = FastMCP(
    "sr201",
    instructions="MCP server for the SR-201 8-channel network relay board",
)


def _open_relay(host: str, verbose: bool = False) -> RelayClient:
    return RelayClient.connect(host, RELAY_PORT, debug=verbose)


def _open_config(host: str, verbose: bool = False) -> ConfigClient:
    return ConfigClient.connect(host, CONFIG_PORT, debug=verbose)


def _error(err: RelayBoardError) -> dict[str, Any]:
    logger.warning("%s: %s", type(err).__name__, err)
    return {"error": str(err), "kind": type(err).__name__}


def _each_channel(
    selected: list[int], action: Callable[[int], RelayStatus]
) -> tuple[list[int], list[int], RelayStatus | None]:
    """Run ``action`` on every channel, recording failures and carrying on."""
    done: list[int] = []
    failed: list[int] = []
    status = None
    for ch in selected:
        try:
            status = action(ch)
        except VerificationError as e:
            logger.warning("Channel %d: %s", ch, e)
            failed.append(ch)
            if e.status is not None:
                status = e.status
            continue
        except RelayBoardError as e:
            logger.warning("Channel %d: %s: %s", ch, type(e).__name__, e)
            failed.append(ch)
            continue
        done.append(ch)
    return done, failed, status


def _channel_result(
    verb: str, done: list[int], failed: list[int], status: RelayStatus | None
) -> dict[str, Any]:
    result: dict[str, Any] = {
        verb: done,
        "status": status.to_dict() if status is not None else {},
    }
    if failed:
        result["error"] = f"Channel not {verb} when expected: {failed}"
        result["failed"] = failed
    return result


# ─── RELAY TOOLS ─────────────────────────────────────────────────────

@mcp.tool()
def relay_status(
    host: str = DEFAULT_HOST,
    channels: str = "all",
    verbose: bool = False,
) -> dict[str, Any]:
    """Report whether each selected relay channel is closed.

    Args:
        host: Board hostname or IP address.
        channels: Channel selector, e.g. "all", "3", "2..5", "..=4", "0,6..".
        verbose: Log the raw protocol traffic.
    """
    try:
        selected = parse_channel_list(channels)
        with _open_relay(host, verbose) as relay:
            status = relay.status()
    except RelayBoardError as e:
        return _error(e)

    return {"closed": status.to_dict(selected)}


@mcp.tool()
def relay_open(
    host: str = DEFAULT_HOST,
    channels: str = "all",
    verbose: bool = False,
) -> dict[str, Any]:
    """Open the selected relay channels.

    A channel that fails is listed under ``failed``; the remaining channels
    are still attempted.

    Args:
        host: Board hostname or IP address.
        channels: Channel selector.
        verbose: Log the raw protocol traffic.
    """
    try:
        selected = parse_channel_list(channels)
        with _open_relay(host, verbose) as relay:

            def open_checked(ch: int) -> RelayStatus:
                status = relay.open(ch)
                if status[ch]:
                    raise VerificationError(
                        "Channel not opened when expected", ch, status
                    )
                return status

            done, failed, status = _each_channel(selected, open_checked)
    except RelayBoardError as e:
        return _error(e)

    return _channel_result("opened", done, failed, status)


@mcp.tool()
def relay_close(
    host: str = DEFAULT_HOST,
    channels: str = "all",
    delay: int = 0,
    quick: bool = False,
    verbose: bool = False,
) -> dict[str, Any]:
    """Close the selected relay channels, optionally reopening them later.

    A channel that fails is listed under ``failed``; the remaining channels
    are still attempted.

    Args:
        host: Board hostname or IP address.
        channels: Channel selector.
        delay: Seconds after which the board reopens each channel (0 = stay closed).
        quick: Reopen after about 500 ms instead; overrides ``delay``.
        verbose: Log the raw protocol traffic.
    """
    if not 0 <= delay <= MAX_DELAY_SECONDS:
        return {
            "error": f"Delay must be between 0 and {MAX_DELAY_SECONDS}, got {delay}",
            "kind": "ValueError",
        }

    try:
        selected = parse_channel_list(channels)
        with _open_relay(host, verbose) as relay:

            def close_one(ch: int) -> RelayStatus:
                if quick:
                    return relay.close_then_open_quick(ch)
                if delay:
                    return relay.close_then_open(ch, delay)
                return relay.close(ch)

            done, failed, status = _each_channel(selected, close_one)
    except RelayBoardError as e:
        return _error(e)

    return _channel_result("closed", done, failed, status)


# ─── CONFIGURATION TOOLS ─────────────────────────────────────────────

@mcp.tool()
def config_get(
    host: str = DEFAULT_HOST,
    keys: list[str] | None = None,
    verbose: bool = False,
) -> dict[str, Any]:
    """Read the board's network and device settings.

    Args:
        host: Board hostname or IP address.
        keys: Only return these keys; unknown names map to null.
        verbose: Log the raw protocol traffic.
    """
    try:
        with _open_config(host, verbose) as config:
            values = config.get()
    except RelayBoardError as e:
        return _error(e)

    if not keys:
        return {"config": values}
    return {"config": {k: values.get(k) for k in keys}}


@mcp.tool()
def config_set(
    host: str = DEFAULT_HOST,
    key: str = "",
    value: str = "",
    verbose: bool = False,
) -> dict[str, Any]:
    """Write one configuration value on the board.

    Args:
        host: Board hostname or IP address.
        key: Setting name, e.g. "ipv4", "gateway", "cloud_enabled".
        value: New value, sent verbatim.
        verbose: Log the raw protocol traffic.
    """
    try:
        with _open_config(host, verbose) as config:
            config.set(key, value)
    except RelayBoardError as e:
        return _error(e)

    return {"key": key, "value": value, "ok": True}


# ─── MCP RESOURCES ───────────────────────────────────────────────────

@mcp.resource("sr201://config/keys")
def resource_config_keys() -> str:
    """Configuration keys in record order, with writability."""
    return json.dumps({"keys": describe_keys()})


@mcp.resource("sr201://protocol/ports")
def resource_ports() -> str:
    """TCP ports of the relay and configuration services."""
    return json.dumps({"relay": RELAY_PORT, "config": CONFIG_PORT})


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=logging.INFO)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
