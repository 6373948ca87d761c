from datetime import date

import pytest

import domain_recon

from conftest import FakeWeb
from domain_recon import (
    ABSENT,
    DomainData,
    DomainFetchError,
    RequestGate,
    build_result,
    ensure_scheme,
    process_domain,
)

KEYWORDS = ["Stranger Things", "Family"]

LANDING = """
<html><head>
  <link rel="icon" href="/static/favicon.png?v=3">
  <link rel='shortcut icon' href='/favicon.ico'>
</head>
<body>
  <h1>Stranger Things streaming</h1>
  <a href="/watch/the-family-man">watch</a>
  <a href="/about">About</a>
  <a href="/contact">Contact</a>
  <a href="mailto:owner@site.test">mail</a>
  <a href="https://other.test/stranger-things-family">partner</a>
  <a href="/styles/main.css">css</a>
  contact: help@site.test
</body></html>
"""


def site_web(**overrides):
    pages = {
        "site.test/": LANDING,
        "site.test/watch/the-family-man": "<p>nothing to see</p> sales@site.test",
        "site.test/about": "<p>About us</p>",
        "site.test/contact": "<p>The Family channel</p> press@site.test",
    }
    pages.update(overrides)
    return FakeWeb(pages=pages)


# region scheme
@pytest.mark.asyncio
async def test_ensure_scheme_keeps_explicit_scheme_without_probing(web):
    async with web.client() as client:
        assert await ensure_scheme(client, "http://site.test") == "http://site.test"
        assert await ensure_scheme(client, "https://site.test/x") == "https://site.test/x"
    assert web.requests == []


@pytest.mark.asyncio
async def test_ensure_scheme_prefers_https_when_probe_succeeds():
    web = FakeWeb(pages={"site.test/": "ok"})
    async with web.client() as client:
        assert await ensure_scheme(client, "site.test") == "https://site.test"
    assert web.requests == [("HEAD", "site.test/")]


@pytest.mark.asyncio
async def test_ensure_scheme_falls_back_to_http_on_error_or_bad_status():
    web = FakeWeb(pages={"forbidden.test/": (403, "no")}, down={"down.test/"})
    async with web.client() as client:
        assert await ensure_scheme(client, "down.test") == "http://down.test"
        assert await ensure_scheme(client, "forbidden.test") == "http://forbidden.test"
    # the HTTP fallback itself is never probed
    assert len(web.requests) == 2
# endregion


# region process_domain
@pytest.mark.asyncio
async def test_process_domain_collects_landing_and_link_signals():
    web = site_web()
    async with web.client() as client:
        data = await process_domain(client, "site.test", KEYWORDS, concurrency=4)

    assert data.url == "https://site.test"
    assert data.keywords == {"Stranger Things", "Family"}
    assert data.favicons == ["https://site.test/static/favicon.png", "https://site.test/favicon.ico"]
    assert data.emails == {"owner@site.test", "help@site.test", "sales@site.test", "press@site.test"}
    assert data.internal_links == {
        "https://site.test/watch/the-family-man",  # keyword in URL text
        "https://site.test/contact",  # keyword in body
        "https://site.test",  # landing page matched
    }
    # landing page fetched exactly once, foreign hosts and assets never
    assert web.requests.count(("GET", "site.test/")) == 1
    assert not any(key.startswith("other.test") for _, key in web.requests)
    assert not web.fetched("site.test/styles/main.css")
    # favicons came from the HTML, so no fallback probe
    assert not web.fetched("site.test/favicon.ico")


@pytest.mark.asyncio
async def test_url_match_still_fetches_link_body_for_emails():
    web = site_web()
    async with web.client() as client:
        await process_domain(client, "https://site.test", KEYWORDS, concurrency=2)
    assert web.fetched("site.test/watch/the-family-man")


@pytest.mark.asyncio
async def test_second_hop_links_are_not_followed():
    web = site_web(**{"site.test/about": '<a href="/deeper">deeper</a> Stranger Things'})
    async with web.client() as client:
        data = await process_domain(client, "https://site.test", KEYWORDS, concurrency=2)
    assert not web.fetched("site.test/deeper")
    assert "https://site.test/deeper" not in data.internal_links
    assert "https://site.test/about" in data.internal_links


@pytest.mark.asyncio
async def test_failed_internal_link_is_swallowed():
    web = site_web()
    web.down.add("site.test/contact")
    web.pages["site.test/about"] = (500, "Stranger Things")
    async with web.client() as client:
        data = await process_domain(client, "https://site.test", KEYWORDS, concurrency=2)
    assert "press@site.test" not in data.emails
    assert "https://site.test/contact" not in data.internal_links
    # non-200 bodies are ignored too
    assert "https://site.test/about" not in data.internal_links
    assert "sales@site.test" in data.emails


@pytest.mark.asyncio
async def test_landing_failure_raises_domain_fetch_error():
    web = FakeWeb(down={"down.test/"})
    async with web.client() as client:
        with pytest.raises(DomainFetchError):
            await process_domain(client, "down.test", KEYWORDS, concurrency=2)
    assert web.requests == [("HEAD", "down.test/"), ("GET", "down.test/")]


@pytest.mark.asyncio
async def test_landing_page_is_processed_whatever_its_status():
    web = FakeWeb(pages={"site.test/": (404, "Stranger Things gone")})
    async with web.client() as client:
        data = await process_domain(client, "https://site.test", KEYWORDS, concurrency=2)
    assert data.keywords == {"Stranger Things"}
    assert data.internal_links == {"https://site.test"}


@pytest.mark.asyncio
async def test_favicon_fallback_probe():
    web = FakeWeb(pages={"site.test/": "<html>plain</html>", "site.test/favicon.ico": "ICO"})
    async with web.client() as client:
        data = await process_domain(client, "https://site.test", KEYWORDS, concurrency=2)
    assert data.favicons == ["https://site.test/favicon.ico"]
    assert data.keywords == set()
    assert data.internal_links == set()

    web = FakeWeb(pages={"site.test/": "<html>plain</html>"})
    async with web.client() as client:
        data = await process_domain(client, "https://site.test", KEYWORDS, concurrency=2)
    assert data.favicons == []


@pytest.mark.asyncio
async def test_link_fan_out_respects_concurrency_bound():
    links = "".join(f'<a href="/p{i}">p{i}</a>' for i in range(8))
    pages = {"site.test/": f'<link rel="icon" href="/i.ico">{links}'}
    pages.update({f"site.test/p{i}": "page" for i in range(8)})
    web = FakeWeb(pages=pages, delay=0.02)
    async with web.client() as client:
        await process_domain(client, "https://site.test", KEYWORDS, concurrency=3)
    assert sum(1 for _, key in web.requests if key.startswith("site.test/p")) == 8
    assert web.max_in_flight <= 3


@pytest.mark.asyncio
async def test_request_gate_caps_link_fetches():
    links = "".join(f'<a href="/p{i}">p{i}</a>' for i in range(6))
    pages = {"site.test/": f'<link rel="icon" href="/i.ico">{links}'}
    pages.update({f"site.test/p{i}": "page" for i in range(6)})
    web = FakeWeb(pages=pages, delay=0.02)
    async with web.client() as client:
        await process_domain(client, "https://site.test", KEYWORDS, concurrency=6, gate=RequestGate(2))
    assert web.max_in_flight <= 2


@pytest.mark.asyncio
async def test_unexpected_error_in_one_link_does_not_fail_the_domain(monkeypatch):
    real_scan = domain_recon.scan_internal_link

    async def scan_or_crash(client, link, *args, **kwargs):
        if link.endswith("/contact"):
            raise RuntimeError("parser blew up")
        return await real_scan(client, link, *args, **kwargs)

    monkeypatch.setattr(domain_recon, "scan_internal_link", scan_or_crash)
    web = site_web()
    async with web.client() as client:
        data = await process_domain(client, "https://site.test", KEYWORDS, concurrency=2)

    assert "https://site.test/contact" not in data.internal_links
    assert "press@site.test" not in data.emails
    assert "https://site.test/watch/the-family-man" in data.internal_links
    assert "sales@site.test" in data.emails
# endregion


# region build_result
def test_build_result_uses_sentinels_for_missing_values():
    result = build_result(DomainData(url="https://site.test"), KEYWORDS, today=date(2026, 1, 2))
    assert result.to_dict() == {
        "name": "https://site.test",
        "logo": ABSENT,
        "internal_link": [],
        "email": ["-"],
        "matched": [],
        "last_updated": "2026-01-02",
    }


def test_build_result_picks_shortest_logo_and_orders_fields():
    data = DomainData(
        url="https://site.test",
        keywords={"Family", "Stranger Things"},
        favicons=["https://site.test/static/a.png", "https://site.test/b.ico", "https://site.test/c.ico"],
        emails={"z@site.test", "a@site.test"},
        internal_links={"https://site.test/z", "https://site.test"},
    )
    result = build_result(data, KEYWORDS, today=date(2026, 10, 19))
    assert result.logo == "https://site.test/b.ico"
    assert result.email == ["a@site.test", "z@site.test"]
    assert result.internal_link == ["https://site.test", "https://site.test/z"]
    assert result.matched == ["Stranger Things", "Family"]
    assert result.last_updated == "2026-10-19"
# endregion
