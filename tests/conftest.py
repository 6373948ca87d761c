import asyncio

import httpx
import pytest


class FakeWeb:
    """In-memory web served through httpx.MockTransport.

    Pages are keyed by "host/path"; a value is either a body (HTTP 200) or a
    (status, body) tuple. Keys listed in `down` raise ConnectError.
    """

    def __init__(self, pages=None, down=(), delay=0.0):
        self.pages = dict(pages or {})
        self.down = set(down)
        self.delay = delay
        self.requests = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def handler(self, request):
        key = f"{request.url.host}{request.url.path}"
        self.requests.append((request.method, key))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if key in self.down:
                raise httpx.ConnectError(f"cannot reach {key}", request=request)
            page = self.pages.get(key)
            if page is None:
                return httpx.Response(404, text="not found")
            status, body = page if isinstance(page, tuple) else (200, page)
            return httpx.Response(status, text=body, headers={"Content-Type": "text/html"})
        finally:
            self.in_flight -= 1

    def client(self):
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler), follow_redirects=True)

    def fetched(self, key, method="GET"):
        return (method, key) in self.requests


@pytest.fixture
def web():
    return FakeWeb()
