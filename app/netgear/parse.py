"""
Parsing functions that pull the per-port statistics out of the router's status page.
    Only tested against the Netgear RST_stattbl.htm table but the logic is generic enough
    for any table that uses the same `thead`/`ttext` span classes.

"""

import re
from dataclasses import dataclass, replace
from datetime import timedelta
from enum import Enum
from typing import Iterable

import structlog
from netgear.model import PortStat
from netgear.tokens import Token, TokenKind, iter_tokens

log = structlog.get_logger(__name__)

# Only spans with one of these classes carry data; the rest are decoration
DATA_SPAN_CLASSES = ("thead", "ttext")

# The first row of each table is the column headings
HEADER_ROW = 1

# Row shapes we know how to map.
#   3 values: port, status, uptime (e.g. WAN/WLAN rows with no counters)
#   8 values: port, status, tx pkts, rx pkts, collisions, tx B/s, rx B/s, uptime
SHORT_ROW_LEN = 3
FULL_ROW_LEN = 8

# Same syntax the firmware uses for uptime: one or more <number><unit> pairs, e.g. '3h25m', '1.5s'
_DURATION_RE = re.compile(r"([-+]?)((?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:ns|us|µs|μs|ms|s|m|h))+)")
_DURATION_PART_RE = re.compile(r"([0-9]+\.?[0-9]*|\.[0-9]+)(ns|us|µs|μs|ms|s|m|h)")
# Counters are plain ASCII decimal; no underscores, no digits from other scripts
_NUMBER_RE = re.compile(r"[-+]?[0-9]+")
_DURATION_UNITS = {
    "ns": ("microseconds", 0.001),
    "us": ("microseconds", 1),
    "µs": ("microseconds", 1),
    "μs": ("microseconds", 1),
    "ms": ("milliseconds", 1),
    "s": ("seconds", 1),
    "m": ("minutes", 1),
    "h": ("hours", 1),
}


@dataclass
class ParseDiagnostics:
    """Counts of what went sideways during a parse. Never changes the parsed values."""

    rows: int = 0
    partial_rows: int = 0
    defaulted_fields: int = 0


class Phase(Enum):
    OUTSIDE_TABLE = "outside_table"
    IN_TABLE = "in_table"
    IN_ROW = "in_row"
    IN_CELL = "in_cell"


@dataclass(frozen=True)
class ParserState:
    """Where we are in the table while walking the token stream."""

    phase: Phase = Phase.OUTSIDE_TABLE
    row_number: int = 0
    # Tracked for debugging only; the mapping is purely positional on the collected values
    column_number: int = 0
    values: tuple[str, ...] = ()
    # A data span was just opened; the next token is its value (or nothing)
    capture: bool = False


def step(state: ParserState, token: Token) -> tuple[ParserState, tuple[str, ...] | None]:
    """Advance the table state machine by one token.

    Returns the new state and, when `token` closes a row, the values collected for that row.
    """
    if state.capture:
        # Whatever follows a data span is consumed here, even if it's not text
        if token.kind is TokenKind.TEXT:
            return replace(state, capture=False, values=state.values + (token.data,)), None
        log.debug("Data span without text", token=token.kind.value, row=state.row_number)
        return replace(state, capture=False), None

    if token.kind is TokenKind.START_TAG:
        if token.data == "table":
            return replace(state, phase=Phase.IN_TABLE, row_number=0), None
        if token.data == "tr":
            return (
                replace(
                    state,
                    phase=Phase.IN_ROW,
                    row_number=state.row_number + 1,
                    column_number=0,
                    values=(),
                ),
                None,
            )
        if token.data == "td":
            return replace(state, phase=Phase.IN_CELL, column_number=state.column_number + 1), None
        if token.data == "span":
            if state.row_number == HEADER_ROW:
                return state, None
            if _is_data_span(token):
                return replace(state, capture=True), None
        return state, None

    if token.kind is TokenKind.END_TAG:
        if token.data == "tr":
            return replace(state, phase=Phase.IN_TABLE, values=()), state.values
        if token.data == "td":
            return replace(state, phase=Phase.IN_ROW), None
        if token.data == "table":
            return replace(state, phase=Phase.OUTSIDE_TABLE), None

    return state, None


def _is_data_span(token: Token) -> bool:
    for key, value in token.attrs.items():
        if key.casefold() == "class" and value.casefold() in DATA_SPAN_CLASSES:
            return True
    return False


def iter_rows(tokens: Iterable[Token]) -> Iterable[tuple[str, ...]]:
    """Collapse a token stream into the raw values of each table row, in page order."""
    state = ParserState()
    for token in tokens:
        if token.kind is TokenKind.END:
            return
        state, row = step(state, token)
        if row is not None:
            yield row


def parse_stats(markup: str, diagnostics: ParseDiagnostics | None = None) -> list[PortStat]:
    """Pull every port row out of the status page.

    A page without the table (or with nothing we recognize) gives an empty list; that is not an error.
    """
    if diagnostics is None:
        diagnostics = ParseDiagnostics()

    stats = []
    previous = None
    # Order matters here; see the LAN note in make_stat()
    for row in iter_rows(iter_tokens(markup)):
        stat = make_stat(row, previous, diagnostics)
        if stat is None:
            continue
        log.debug("Parsed port", port=stat.port, status=stat.status, values=len(row))
        stats.append(stat)
        previous = stat

    log.debug(
        "Parsed stats table",
        rows=diagnostics.rows,
        partial_rows=diagnostics.partial_rows,
        defaulted_fields=diagnostics.defaulted_fields,
    )
    return stats


def make_stat(
    values: Iterable[str],
    previous: PortStat | None = None,
    diagnostics: ParseDiagnostics | None = None,
) -> PortStat | None:
    """Map one row's values onto a PortStat.

    Rows with an unexpected number of values still produce a record so the port shows up,
    just with everything but the label zeroed.
    """
    values = list(values)
    if not values:
        return None
    if diagnostics is None:
        diagnostics = ParseDiagnostics()
    diagnostics.rows += 1

    port = values[0]
    status = ""
    counters = (0, 0, 0, 0, 0)
    uptime = timedelta(0)

    if len(values) == SHORT_ROW_LEN:
        status = values[1]
        uptime = parse_duration(values[2], diagnostics)
    elif len(values) == FULL_ROW_LEN:
        status = values[1]
        counters = tuple(parse_number(v, diagnostics) for v in values[2:7])
        uptime = parse_duration(values[7], diagnostics)
    else:
        diagnostics.partial_rows += 1
        log.warning("Unexpected number of values for row", port=port, count=len(values), data=values)

    # LAN ports share one counter set in the table; the second LAN row repeats the first's figures
    if previous is not None and previous.port.startswith("LAN") and port.startswith("LAN"):
        counters = previous.counters()

    tx_packets, rx_packets, collisions, tx_bps, rx_bps = counters
    return PortStat(
        port=port,
        status=status,
        tx_packets=tx_packets,
        rx_packets=rx_packets,
        collisions=collisions,
        tx_bytes_per_second=tx_bps,
        rx_bytes_per_second=rx_bps,
        uptime=uptime,
    )


def parse_number(raw: str, diagnostics: ParseDiagnostics | None = None) -> int:
    """Decimal text to int; anything unparsable is 0."""
    raw = raw.strip()
    if _NUMBER_RE.fullmatch(raw) is None:
        if diagnostics is not None:
            diagnostics.defaulted_fields += 1
        log.debug("Defaulting unparsable number", raw=raw)
        return 0
    return int(raw, 10)


def parse_duration(raw: str, diagnostics: ParseDiagnostics | None = None) -> timedelta:
    """
    Turns the compact uptime string into a timedelta.

    Input ends up being something like:
        '3h25m' or '12m30s' or '0'
    Anything unparsable is a zero duration.
    """
    raw = raw.strip()
    if raw in ("0", "+0", "-0"):
        return timedelta(0)

    match = _DURATION_RE.fullmatch(raw)
    if match is None:
        if diagnostics is not None:
            diagnostics.defaulted_fields += 1
        log.debug("Defaulting unparsable duration", raw=raw)
        return timedelta(0)

    sign, body = match.groups()
    total = timedelta(0)
    try:
        for number, unit in _DURATION_PART_RE.findall(body):
            kwarg, scale = _DURATION_UNITS[unit]
            total += timedelta(**{kwarg: float(number) * scale})
    except OverflowError:
        # Well formed, but more than a timedelta can hold
        if diagnostics is not None:
            diagnostics.defaulted_fields += 1
        log.debug("Defaulting out of range duration", raw=raw)
        return timedelta(0)

    return -total if sign == "-" else total
