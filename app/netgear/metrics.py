"""All the boiler plate / init code for defining metrics.
Every per-port metric is derived from one row of the statistics table and is labeled with the
port label plus the two derived classifications so dashboards can split wired/wireless and WAN/LAN
without a regex on the port name.
"""

from prometheus_client import Counter, Gauge, Summary, disable_created_metrics

# By default, client will automatically create a "_created" meta metric for
#   each metric defined below.
# Having the unix epoch time of when the metric was created isn't that useful for us
#   so we'll disable it.
disable_created_metrics()


METRICS_NS = "netgear"
META_NS = "meta"

PORT_LABELS = ["port", "classification", "availability"]

##
# Meta Metrics
##
# summary comes with both a count and a sum so we don't need to count the number of scrapes ourselves
s_meta_scrape_time = Summary(
    f"{META_NS}_request_duration_seconds",
    "Time spent waiting for router to respond",
    labelnames=["scrape_target"],
)

# We count the number of successful vs failed requests; retries show up as an extra non-200
c_meta_scrape_result = Counter(
    f"{META_NS}_scrape_result",
    "Count of successful vs failed scrapes",
    labelnames=["http_code", "scrape_target"],
)

# Time to parse returned HTML isn't interesting but am interested in parse errors
c_meta_parse_result = Counter(
    f"{META_NS}_parse_result",
    "Count of successful vs failed parse attempts",
    labelnames=["parse_target", "parse_result"],
)

# Parsing never fails outright; unparsable cells are zeroed. Count them so a firmware change is visible.
c_meta_defaulted_fields = Counter(
    f"{META_NS}_defaulted_fields",
    "Count of table cells that could not be parsed and were defaulted to zero",
    labelnames=["parse_target"],
)

##
# Per-port metrics
##
# The router reports packet counts "since last reset" and resets them whenever it likes,
#   so these are gauges that we set rather than counters that we increment.
##
g_port_tx_packets = Gauge(
    f"{METRICS_NS}_port_tx_packets",
    "Packets transmitted since the router last reset its counters.",
    labelnames=PORT_LABELS,
)

g_port_rx_packets = Gauge(
    f"{METRICS_NS}_port_rx_packets",
    "Packets received since the router last reset its counters.",
    labelnames=PORT_LABELS,
)

g_port_collisions = Gauge(
    f"{METRICS_NS}_port_collisions",
    "Collisions since the router last reset its counters.",
    labelnames=PORT_LABELS,
)

g_port_tx_bytes_per_second = Gauge(
    f"{METRICS_NS}_port_tx_bytes_per_second",
    "Instantaneous transmit rate.",
    labelnames=PORT_LABELS,
)

g_port_rx_bytes_per_second = Gauge(
    f"{METRICS_NS}_port_rx_bytes_per_second",
    "Instantaneous receive rate.",
    labelnames=PORT_LABELS,
)

g_port_uptime_seconds = Gauge(
    f"{METRICS_NS}_port_uptime_seconds",
    "Count of seconds since the link was established.",
    labelnames=PORT_LABELS,
)

g_port_up = Gauge(
    f"{METRICS_NS}_port_up",
    "1 if the port has a link, 0 if it reports Link Down.",
    labelnames=PORT_LABELS,
)

# Same order as PortStat.reported_counters()
COUNTER_GAUGES = (
    g_port_tx_packets,
    g_port_rx_packets,
    g_port_collisions,
    g_port_tx_bytes_per_second,
    g_port_rx_bytes_per_second,
)
