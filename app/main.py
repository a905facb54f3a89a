#!/usr/bin/env python3
"""
Main / entry point for the Netgear router port statistics poller.

By default: poll once and print one line per port (line protocol, or human readable with -human).
With -serve: keep polling and expose the same figures as Prometheus metrics.
"""
import argparse
import asyncio
import sys
from os import getenv

import structlog
from aiohttp import BasicAuth, ClientError, ClientSession
from err.exceptions import NoCredentialsError, RouterNotOkError
from netgear import parse, render
from netgear.scrape import fetch_stats_page, update_port_metrics
from prometheus_client import start_http_server
from util.const import REQUEST_HEADERS, LogLevel

# cfg-file is overkill for the few things that need to be configured.
# Both cron/telegraf exec and k8s make it trivial to define env-vars so we'll just use that.
##
ROUTER_ADDR = getenv("ROUTER_ADDR", None)

# Netgear ships with `admin` and very few people change it
ROUTER_USER = getenv("ROUTER_USER", "admin")
# No sane default; require user provides
ROUTER_PASS = getenv("ROUTER_PASS", None)

# Only used with -serve
METRICS_PORT = int(getenv("METRICS_PORT", "8300"))
METRICS_POLL_INTERVAL_SECONDS = int(getenv("METRICS_POLL_INTERVAL_SECONDS", "60"))
RETRY_INTERVAL_SECONDS = int(getenv("RETRY_INTERVAL_SECONDS", "5"))


# stdout is reserved for the rendered stats so anything chatty goes to stderr
if getenv("LOG_LEVEL") not in LogLevel.__members__ or getenv("LOG_LEVEL") is None:
    print(f"Defaulting to {LogLevel.INFO} log level", file=sys.stderr)
    log_level = LogLevel.INFO
else:
    log_level = LogLevel[getenv("LOG_LEVEL")]  # type: ignore
    print(f"Using log level {log_level.value}", file=sys.stderr)


structlog.configure(
    wrapper_class=structlog.make_filtering_bound_logger(log_level.value),
    logger_factory=structlog.PrintLoggerFactory(sys.stderr),
)

log = structlog.get_logger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Poll per-port statistics from a Netgear router.")
    # Single dash long flags, kept for compatibility with existing cron/telegraf configs
    parser.add_argument("-human", "--human", action="store_true", help="print human readable lines instead of line protocol")
    parser.add_argument("-debug", "--debug", action="store_true", help="dump the raw stats page to stderr")
    parser.add_argument("-serve", "--serve", action="store_true", help="run as a Prometheus exporter")
    return parser.parse_args(argv)


def make_client(address: str, user: str, password: str) -> ClientSession:
    return ClientSession(
        auth=BasicAuth(user, password),
        base_url=f"http://{address}",
        headers=REQUEST_HEADERS,
    )


async def poll_once(client: ClientSession, address: str, human: bool = False, debug: bool = False) -> list[str]:
    """Fetch, parse and print the stats once. Returns the printed lines."""
    body = await fetch_stats_page(client)
    if debug:
        print(body, file=sys.stderr)

    stats = parse.parse_stats(body)
    if human:
        lines = [render.to_human(stat) for stat in stats]
    else:
        lines = [render.to_line_protocol(stat, address) for stat in stats]

    for line in lines:
        print(line)
    return lines


async def serve(client: ClientSession, debug: bool = False):
    """Exporter loop; runs until credentials turn out to be unusable."""
    # In testing, server responds to requests on / and /metrics so there's no real
    #   need to allow customizing the path, I think.
    server, _ = start_http_server(port=METRICS_PORT)
    log.info("Metrics server started", server=server.server_address)

    while True:
        try:
            body = await fetch_stats_page(client)
            if debug:
                print(body, file=sys.stderr)
            update_port_metrics(body)

            log.info(f"Sleeping {METRICS_POLL_INTERVAL_SECONDS} seconds before next poll")
            await asyncio.sleep(METRICS_POLL_INTERVAL_SECONDS)

        except NoCredentialsError as e:
            # Can't continue without auth.
            log.error("Caught NoCredentialsError", error=e)
            break
        except RouterNotOkError as e:
            # Already retried once inside the fetch; back off and try again next cycle
            log.error("Caught RouterNotOkError", error=e, status=e.status_code)
            await asyncio.sleep(RETRY_INTERVAL_SECONDS)
        # pylint: disable=broad-exception-caught
        except Exception as e:
            _e = "Unforeseen exception. Treating as non-fatal."
            log.error(_e, error=e)
            await asyncio.sleep(RETRY_INTERVAL_SECONDS)


async def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    if ROUTER_ADDR is None or ROUTER_PASS is None:
        log.error("Missing ROUTER_ADDR or ROUTER_PASS")
        return 1

    log.debug("Setting up connection to router...", address=ROUTER_ADDR)
    client = make_client(ROUTER_ADDR, ROUTER_USER, ROUTER_PASS)
    try:
        if args.serve:
            await serve(client, debug=args.debug)
            return 1
        await poll_once(client, ROUTER_ADDR, human=args.human, debug=args.debug)
    except (NoCredentialsError, RouterNotOkError, ClientError) as e:
        log.error("Failed to poll router", error=e)
        return 1
    finally:
        await client.close()
    return 0


def run():
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
