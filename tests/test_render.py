"""Tests for the human readable and line protocol renderers."""

from datetime import timedelta

import pytest

from netgear.model import PortStat
from netgear.render import format_duration, to_human, to_line_protocol

WAN = PortStat(
    port="WAN",
    status="Up",
    tx_packets=120,
    rx_packets=118,
    collisions=0,
    tx_bytes_per_second=500,
    rx_bytes_per_second=480,
    uptime=timedelta(hours=2, minutes=10),
)

# Down, but the router left stale figures in the table
STALE_WLAN = PortStat(
    port="2.4G WLAN b/g/n",
    status="Link Down",
    tx_packets=5,
    rx_packets=6,
    collisions=7,
    tx_bytes_per_second=8,
    rx_bytes_per_second=9,
    uptime=timedelta(minutes=5),
)


class TestFormatDuration:
    """Test format_duration()."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (timedelta(0), "0s"),
            (timedelta(hours=2, minutes=10), "2h10m0s"),
            (timedelta(hours=1), "1h0m0s"),
            (timedelta(minutes=5), "5m0s"),
            (timedelta(seconds=42), "42s"),
            (timedelta(seconds=1.5), "1.5s"),
            (timedelta(hours=1, milliseconds=500), "1h0m0.5s"),
            (timedelta(milliseconds=300), "300ms"),
            (timedelta(microseconds=1500), "1.5ms"),
            (timedelta(microseconds=250), "250µs"),
            (timedelta(days=2, hours=1), "49h0m0s"),
            (-timedelta(minutes=5), "-5m0s"),
        ],
    )
    def test_format(self, value, expected):
        assert format_duration(value) == expected


class TestToHuman:
    """Test to_human()."""

    def test_up_port(self):
        assert to_human(WAN) == (
            "Port: WAN; Status: Up; TxPkts: 120; RxPkts: 118; Collisions: 0; "
            "TxB/s: 500; RxB/s: 480; Uptime: 2h10m0s"
        )

    def test_down_port_reports_zeros(self):
        assert to_human(STALE_WLAN) == (
            "Port: 2.4G WLAN b/g/n; Status: Link Down; TxPkts: 0; RxPkts: 0; Collisions: 0; "
            "TxB/s: 0; RxB/s: 0; Uptime: 5m0s"
        )


class TestToLineProtocol:
    """Test to_line_protocol()."""

    def test_up_port(self):
        assert to_line_protocol(WAN, "192.168.1.1") == (
            "router,address=192.168.1.1,name=WAN,classification=Wired,availability=External "
            'tx_packets=120i,rx_packets=118i,collisions=0i,tx_bytes_sec=500i,rx_bytes_sec=480i,status="Up",down=false'
        )

    def test_down_port_escapes_name_and_reports_zeros(self):
        assert to_line_protocol(STALE_WLAN, "10.0.0.1") == (
            "router,address=10.0.0.1,name=2.4G\\ WLAN\\ b/g/n,classification=Wireless,availability=Internal "
            'tx_packets=0i,rx_packets=0i,collisions=0i,tx_bytes_sec=0i,rx_bytes_sec=0i,status="Link Down",down=true'
        )

    def test_status_quoting(self):
        stat = PortStat(port="LAN1", status='Up "1G" \\ full')
        assert 'status="Up \\"1G\\" \\\\ full"' in to_line_protocol(stat, "r")
