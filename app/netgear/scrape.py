"""
Implementation of the scrape and metric update functions
"""

import structlog
from aiohttp import ClientSession
from err.exceptions import NoCredentialsError, RouterNotOkError
from netgear import metrics, parse
from netgear.model import PortStat
from util.const import STATS_ENDPOINT

log = structlog.get_logger(__name__)

# One retry; the first request after the router drops a session usually comes back 401
MAX_ATTEMPTS = 2


async def fetch_stats_page(cs: ClientSession) -> str:
    """
    Requests the statistics page from the router and returns the raw HTML.

    The router's idea of a "session" is flaky. When it decides the previous one has ended, the
    first request comes back as a non-200 even with correct credentials and the second one works.
    So a single non-200 is retried once; a second one is a real failure.
    """
    if cs.auth is None:
        raise NoCredentialsError("No basic auth configured on client session")

    for attempt in range(1, MAX_ATTEMPTS + 1):
        with metrics.s_meta_scrape_time.labels("stats").time():
            async with cs.request(method="GET", url=STATS_ENDPOINT) as resp:
                metrics.c_meta_scrape_result.labels(resp.status, "stats").inc()
                if resp.status == 200:
                    body = await resp.text()
                    log.debug("Got stats page", attempt=attempt, size=len(body))
                    return body

                log.warning("Non-200 from router", status=resp.status, attempt=attempt)
                status = resp.status

    if status == 401:
        _e = f"Router rejected credentials. Check for extra/incorrect quotes in your env-vars? Status={status}."
    else:
        _e = f"Failed to get stats page. Status={status}."
    raise RouterNotOkError(_e, status_code=status)


def update_port_metrics(html: str) -> list[PortStat]:
    """Parse the statistics page and push every port into the per-port gauges.

    Returns the parsed ports so callers can log/print them as well.
    """
    diagnostics = parse.ParseDiagnostics()
    stats = parse.parse_stats(html, diagnostics)

    if not stats:
        # Not an error as far as the parser is concerned but almost certainly a login/error page
        log.error("No ports parsed from stats page. Scrape error?")
        metrics.c_meta_parse_result.labels("stats", False).inc()
        return stats

    metrics.c_meta_parse_result.labels("stats", True).inc()
    if diagnostics.defaulted_fields:
        metrics.c_meta_defaulted_fields.labels("stats").inc(diagnostics.defaulted_fields)
    if diagnostics.partial_rows:
        log.warning("Some rows had an unexpected shape", partial_rows=diagnostics.partial_rows)

    log.info("Updating port metrics...", count=len(stats))
    for stat in stats:
        labels = {
            "port": stat.port,
            "classification": stat.classification,
            "availability": stat.availability,
        }
        # Down ports report zeros regardless of what the table still shows
        for gauge, value in zip(metrics.COUNTER_GAUGES, stat.reported_counters()):
            gauge.labels(**labels).set(value)
        metrics.g_port_uptime_seconds.labels(**labels).set(stat.uptime.total_seconds())
        metrics.g_port_up.labels(**labels).set(0 if stat.is_down else 1)

    return stats
