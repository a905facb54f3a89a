"""Turns parsed PortStats into output lines: human readable text or line protocol."""

from datetime import timedelta

from netgear.model import PortStat

MEASUREMENT = "router"

_MICROS_PER_MS = 1_000
_MICROS_PER_S = 1_000_000
_MICROS_PER_M = 60 * _MICROS_PER_S
_MICROS_PER_H = 60 * _MICROS_PER_M


def format_duration(value: timedelta) -> str:
    """
    Compact rendering of a duration, the same syntax the router uses for uptime.

    E.G.:
        2h10m -> '2h10m0s'
        5m -> '5m0s'
        1.5s -> '1.5s'
        0 -> '0s'
    """
    micros = (value.days * 86_400 + value.seconds) * _MICROS_PER_S + value.microseconds
    if micros == 0:
        return "0s"

    sign = "-" if micros < 0 else ""
    micros = abs(micros)

    # Sub-second durations switch to smaller units instead of a fractional second
    if micros < _MICROS_PER_MS:
        return f"{sign}{micros}µs"
    if micros < _MICROS_PER_S:
        return f"{sign}{_with_fraction(micros, _MICROS_PER_MS)}ms"

    hours, rest = divmod(micros, _MICROS_PER_H)
    minutes, rest = divmod(rest, _MICROS_PER_M)
    out = sign
    if hours:
        out += f"{hours}h"
    if hours or minutes:
        out += f"{minutes}m"
    return f"{out}{_with_fraction(rest, _MICROS_PER_S)}s"


def _with_fraction(value: int, unit: int) -> str:
    whole, frac = divmod(value, unit)
    if not frac:
        return str(whole)
    digits = len(str(unit)) - 1
    return f"{whole}.{frac:0{digits}d}".rstrip("0")


def to_human(stat: PortStat) -> str:
    tx_packets, rx_packets, collisions, tx_bps, rx_bps = stat.reported_counters()
    return (
        f"Port: {stat.port}; Status: {stat.status}; TxPkts: {tx_packets}; RxPkts: {rx_packets}; "
        f"Collisions: {collisions}; TxB/s: {tx_bps}; RxB/s: {rx_bps}; Uptime: {format_duration(stat.uptime)}"
    )


def _quote(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def to_line_protocol(stat: PortStat, address: str) -> str:
    """
    One line protocol point per port.

    router,address=<addr>,name=<port>,classification=<c>,availability=<a> tx_packets=1i,...,status="Up",down=false
    """
    tx_packets, rx_packets, collisions, tx_bps, rx_bps = stat.reported_counters()
    tags = ",".join(
        [
            MEASUREMENT,
            f"address={address}",
            f"name={stat.name}",
            f"classification={stat.classification}",
            f"availability={stat.availability}",
        ]
    )
    fields = ",".join(
        [
            f"tx_packets={tx_packets}i",
            f"rx_packets={rx_packets}i",
            f"collisions={collisions}i",
            f"tx_bytes_sec={tx_bps}i",
            f"rx_bytes_sec={rx_bps}i",
            f"status={_quote(stat.status)}",
            f"down={'true' if stat.is_down else 'false'}",
        ]
    )
    return f"{tags} {fields}"
