"""Shared fixtures: page documents and a mocked tagging server."""

from collections.abc import Callable

import httpx
import pytest
import pytest_asyncio

from booru_importer.scrape import PageDocument, TaggingClient


@pytest.fixture
def make_document() -> Callable[..., PageDocument]:
    def _make(html: str, url: str = "https://x.com/someone/status/1") -> PageDocument:
        return PageDocument.from_html(html, url)

    return _make


@pytest_asyncio.fixture
async def make_tagging_client():
    """TaggingClient factory backed by an httpx MockTransport."""
    clients: list[httpx.AsyncClient] = []

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> TaggingClient:
        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        clients.append(http)
        return TaggingClient("http://tagger.local", client=http)

    yield _make
    for http in clients:
        await http.aclose()
