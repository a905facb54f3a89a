"""The one entity we pull out of the statistics table: a port and its counters at poll time."""

from dataclasses import dataclass
from datetime import timedelta

DOWN_STATUS = "link down"


@dataclass(frozen=True)
class PortStat:
    """One row of the statistics table.

    `port` and `status` are stored exactly as scraped; escaping is the renderer's problem.
    Traffic counters are kept even when the port is down since the router tends to leave stale
    figures in the table. Use `reported_counters()` rather than the raw fields when publishing.
    """

    port: str
    status: str = ""
    tx_packets: int = 0
    rx_packets: int = 0
    collisions: int = 0
    tx_bytes_per_second: int = 0
    rx_bytes_per_second: int = 0
    uptime: timedelta = timedelta(0)

    @property
    def is_down(self) -> bool:
        return self.status.casefold() == DOWN_STATUS

    @property
    def classification(self) -> str:
        if "WLAN" in self.port.upper():
            return "Wireless"
        return "Wired"

    @property
    def availability(self) -> str:
        if self.port.upper().startswith("WAN"):
            return "External"
        return "Internal"

    @property
    def name(self) -> str:
        """Port label escaped for use as a line protocol tag value.

        E.G.: '2.4G WLAN b/g/n' -> '2.4G\\ WLAN\\ b/g/n'
        """
        return self.port.replace("\\", "\\\\").replace(" ", "\\ ")

    def counters(self) -> tuple[int, int, int, int, int]:
        """The five traffic counters, as stored."""
        return (
            self.tx_packets,
            self.rx_packets,
            self.collisions,
            self.tx_bytes_per_second,
            self.rx_bytes_per_second,
        )

    def reported_counters(self) -> tuple[int, int, int, int, int]:
        """The five traffic counters as they should be published; all zero for a down port."""
        if self.is_down:
            return (0, 0, 0, 0, 0)
        return self.counters()
