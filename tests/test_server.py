"""Tests for the MCP tool layer with the clients mocked out."""

from __future__ import annotations

import json
import sys
from unittest.mock import MagicMock, patch

from sr201_mcp.exceptions import (
    InvalidValueError,
    KeyNotFoundError,
    TransportError,
    VerificationError,
)
from sr201_mcp.models.relay import RelayStatus


def _get_server_module():
    """Import server module with FastMCP mocked to avoid init issues."""
    mock_fastmcp_cls = MagicMock()
    mock_fastmcp_instance = MagicMock()
    # Make the @mcp.tool() decorator a no-op that returns the function unchanged
    mock_fastmcp_instance.tool.return_value = lambda fn: fn
    mock_fastmcp_instance.resource.return_value = lambda fn: fn
    mock_fastmcp_cls.return_value = mock_fastmcp_instance

    with patch("mcp.server.fastmcp.FastMCP", mock_fastmcp_cls):
        # Remove cached server module so it re-imports with our mock
        sys.modules.pop("sr201_mcp.server", None)
        import sr201_mcp.server as server_mod

    return server_mod


def _client(**methods) -> MagicMock:
    client = MagicMock()
    client.__enter__.return_value = client
    client.__exit__.return_value = False
    for name, value in methods.items():
        setattr(client, name, value)
    return client


def _status(wire: str) -> RelayStatus:
    return RelayStatus.from_bools(c == "1" for c in wire)


def test_relay_status_selected_channels():
    """Only the selected channels are reported."""
    server = _get_server_module()
    relay = _client(status=MagicMock(return_value=_status("10100000")))

    with patch.object(server, "_open_relay", return_value=relay) as opener:
        result = server.relay_status("10.0.0.5", "0..3")

    opener.assert_called_once_with("10.0.0.5", False)
    assert result == {"closed": {"0": True, "1": False, "2": True}}
    relay.__exit__.assert_called_once()


def test_relay_status_bad_selector_does_not_connect():
    """A bad selector fails before connecting."""
    server = _get_server_module()

    with patch.object(server, "_open_relay") as opener:
        result = server.relay_status("10.0.0.5", "9")

    opener.assert_not_called()
    assert result["kind"] == "ParseError"


def test_relay_status_transport_error():
    """Connection errors come back with their kind."""
    server = _get_server_module()

    with patch.object(server, "_open_relay", side_effect=TransportError("refused")):
        result = server.relay_status("10.0.0.5")

    assert result == {"error": "refused", "kind": "TransportError"}


def test_relay_open_each_channel():
    """Each selected channel is opened in order."""
    server = _get_server_module()
    relay = _client(open=MagicMock(return_value=_status("00000000")))

    with patch.object(server, "_open_relay", return_value=relay):
        result = server.relay_open("10.0.0.5", "1,3")

    assert [c.args for c in relay.open.call_args_list] == [(1,), (3,)]
    assert result["opened"] == [1, 3]
    assert "error" not in result


def test_relay_open_reports_channel_still_closed():
    """A channel still closed after open is reported."""
    server = _get_server_module()
    relay = _client(open=MagicMock(return_value=_status("01000000")))

    with patch.object(server, "_open_relay", return_value=relay):
        result = server.relay_open("10.0.0.5", "1")

    assert result["opened"] == []
    assert "not opened" in result["error"]


def test_relay_close_modes():
    """delay and quick pick the close variant."""
    server = _get_server_module()
    closed = _status("11111111")
    relay = _client(
        close=MagicMock(return_value=closed),
        close_then_open=MagicMock(return_value=closed),
        close_then_open_quick=MagicMock(return_value=closed),
    )

    with patch.object(server, "_open_relay", return_value=relay):
        server.relay_close("10.0.0.5", "0")
        server.relay_close("10.0.0.5", "1", delay=4)
        server.relay_close("10.0.0.5", "2", delay=4, quick=True)

    relay.close.assert_called_once_with(0)
    relay.close_then_open.assert_called_once_with(1, 4)
    relay.close_then_open_quick.assert_called_once_with(2)


def test_relay_close_verification_failure():
    """A channel that does not close is reported without a connection-level kind."""
    server = _get_server_module()
    relay = _client(
        close=MagicMock(side_effect=VerificationError("Channel not closed when expected", 0))
    )

    with patch.object(server, "_open_relay", return_value=relay):
        result = server.relay_close("10.0.0.5", "0")

    assert result["closed"] == []
    assert result["failed"] == [0]
    assert "kind" not in result


def test_relay_close_keeps_going_after_channel_error():
    """A failure on a middle channel does not stop the remaining channels."""
    server = _get_server_module()
    stuck = _status("10000000")
    relay = _client(
        close=MagicMock(
            side_effect=[
                _status("10000000"),
                VerificationError("Channel not closed when expected", 1, stuck),
                _status("10100000"),
                _status("10110000"),
            ]
        )
    )

    with patch.object(server, "_open_relay", return_value=relay):
        result = server.relay_close("10.0.0.5", "0..4")

    assert [c.args for c in relay.close.call_args_list] == [(0,), (1,), (2,), (3,)]
    assert result["closed"] == [0, 2, 3]
    assert result["failed"] == [1]
    assert result["status"]["3"] is True


def test_relay_open_keeps_going_after_transport_error():
    """A per-channel transport error is recorded and later channels still run."""
    server = _get_server_module()
    relay = _client(
        open=MagicMock(side_effect=[TransportError("timed out"), _status("00000000")])
    )

    with patch.object(server, "_open_relay", return_value=relay):
        result = server.relay_open("10.0.0.5", "2,5")

    assert result["opened"] == [5]
    assert result["failed"] == [2]
    assert "not opened" in result["error"]


def test_relay_close_delay_out_of_range():
    """A negative or oversized delay is rejected before connecting."""
    server = _get_server_module()

    with patch.object(server, "_open_relay") as opener:
        negative = server.relay_close("10.0.0.5", "0", delay=-2)
        too_long = server.relay_close("10.0.0.5", "0", delay=65536)

    opener.assert_not_called()
    assert negative["kind"] == "ValueError"
    assert too_long["kind"] == "ValueError"


def test_config_get_filters_keys():
    """Requested keys are returned, unknown ones as None."""
    server = _get_server_module()
    config = _client(get=MagicMock(return_value={"ipv4": "10.0.0.5", "dns": "8.8.8.8"}))

    with patch.object(server, "_open_config", return_value=config):
        full = server.config_get("10.0.0.5")
        some = server.config_get("10.0.0.5", keys=["dns", "bogus"])

    assert full == {"config": {"ipv4": "10.0.0.5", "dns": "8.8.8.8"}}
    assert some == {"config": {"dns": "8.8.8.8", "bogus": None}}


def test_config_set():
    """A write returns the key and value."""
    server = _get_server_module()
    config = _client(set=MagicMock(return_value=None))

    with patch.object(server, "_open_config", return_value=config):
        result = server.config_set("10.0.0.5", "ipv4", "10.0.0.2", verbose=True)

    config.set.assert_called_once_with("ipv4", "10.0.0.2")
    assert result == {"key": "ipv4", "value": "10.0.0.2", "ok": True}


def test_config_set_unknown_key():
    """An unknown key comes back with its kind."""
    server = _get_server_module()

    with patch.object(server, "_open_config") as opener:
        opener.return_value = _client()
        opener.return_value.set.side_effect = KeyNotFoundError("hostname")
        result = server.config_set("10.0.0.5", "hostname", "x")

    assert result["kind"] == "KeyNotFoundError"


def test_config_set_framing_character_is_typed():
    """A separator in the value comes back with its exception kind."""
    server = _get_server_module()

    with patch.object(server, "_open_config") as opener:
        opener.return_value = _client()
        opener.return_value.set.side_effect = InvalidValueError("dns", "1,2")
        result = server.config_set("10.0.0.5", "dns", "1,2")

    assert result["kind"] == "InvalidValueError"


def test_config_keys_resource():
    """The key resource lists the named keys in order."""
    server = _get_server_module()
    keys = json.loads(server.resource_config_keys())["keys"]
    assert [k["name"] for k in keys][:3] == ["ipv4", "netmask", "gateway"]
    assert len(keys) == 9
