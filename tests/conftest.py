"""Shared fixtures: a trimmed copy of the router's statistics page and a fake aiohttp session."""

from __future__ import annotations

import pytest
from aiohttp import BasicAuth

# Trimmed down RST_stattbl.htm. Decorative spans, whitespace and a comment are left in on purpose.
STATS_PAGE = """
<html>
<head><title>Statistics</title></head>
<body>
<!-- statistics table -->
<table border="1" cellpadding="2" cellspacing="0" width="100%">
  <tr>
    <td><span class="thead">Port</span></td>
    <td><span class="thead">Status</span></td>
    <td><span class="thead">TxPkts</span></td>
    <td><span class="thead">RxPkts</span></td>
    <td><span class="thead">Collisions</span></td>
    <td><span class="thead">Tx B/s</span></td>
    <td><span class="thead">Rx B/s</span></td>
    <td><span class="thead">Up Time</span></td>
  </tr>
  <tr>
    <td><span class="ttext">WAN</span></td>
    <td><span class="ttext">Up</span></td>
    <td><span class="ttext">120</span></td>
    <td><span class="ttext">118</span></td>
    <td><span class="ttext">0</span></td>
    <td><span class="ttext">500</span></td>
    <td><span class="ttext">480</span></td>
    <td><span class="ttext">2h10m</span></td>
  </tr>
  <tr>
    <td><span class="icon">*</span><span class="TTEXT">LAN1</span></td>
    <td><span class="ttext">Up</span></td>
    <td><span class="ttext">10</span></td>
    <td><span class="ttext">20</span></td>
    <td><span class="ttext">0</span></td>
    <td><span class="ttext">100</span></td>
    <td><span class="ttext">200</span></td>
    <td><span class="ttext">1h</span></td>
  </tr>
  <tr>
    <td><span class="ttext">LAN2</span></td>
    <td><span class="ttext">Up</span></td>
    <td><span class="ttext">999</span></td>
    <td><span class="ttext">999</span></td>
    <td><span class="ttext">999</span></td>
    <td><span class="ttext">999</span></td>
    <td><span class="ttext">999</span></td>
    <td><span class="ttext">1h</span></td>
  </tr>
  <tr>
    <td><span class="ttext">2.4G WLAN b/g/n</span></td>
    <td><span class="ttext">Up</span></td>
    <td><span class="ttext">3000</span></td>
    <td><span class="ttext">2000</span></td>
    <td><span class="ttext">0</span></td>
    <td><span class="ttext">50</span></td>
    <td><span class="ttext">40</span></td>
    <td><span class="ttext">30m</span></td>
  </tr>
  <tr>
    <td><span class="ttext">WLAN-5G</span></td>
    <td><span class="ttext">Link Down</span></td>
    <td><span class="ttext">5m</span></td>
  </tr>
</table>
</body>
</html>
"""


@pytest.fixture()
def stats_page():
    return STATS_PAGE


class FakeResponse:
    def __init__(self, status: int, body: str = ""):
        self.status = status
        self._body = body

    async def text(self) -> str:
        return self._body


class _RequestContext:
    def __init__(self, response: FakeResponse):
        self._response = response

    async def __aenter__(self) -> FakeResponse:
        return self._response

    async def __aexit__(self, *exc_info) -> bool:
        return False


class FakeSession:
    """Just enough of aiohttp.ClientSession for the scrape code: request() and close()."""

    def __init__(self, responses, auth=BasicAuth("admin", "password")):
        self.auth = auth
        self.responses = list(responses)
        self.requests = []
        self.closed = False

    def request(self, method, url, **kwargs):
        self.requests.append((method, url))
        response = self.responses.pop(0)
        # Connection level failures surface from request() itself, like aiohttp does
        if isinstance(response, Exception):
            raise response
        return _RequestContext(response)

    async def close(self):
        self.closed = True


@pytest.fixture()
def fake_session():
    """Factory fixture; pass (status, body) pairs, or exceptions to raise, in the order the router should answer."""

    def _make(*responses, auth=BasicAuth("admin", "password")):
        return FakeSession(
            [r if isinstance(r, Exception) else FakeResponse(*r) for r in responses],
            auth=auth,
        )

    return _make
