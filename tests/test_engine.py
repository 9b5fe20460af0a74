# File: tests/test_engine.py
from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from aiohttp import web

from pageripper.config import RipperConfig
from pageripper.counter.store import MemoryCounterStore
from pageripper.engine import Engine, start_rip
from pageripper.errors import FetchError, InvalidTargetError


async def _serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "localhost", port)
    await site.start()
    try:
        yield f"http://localhost:{port}"
    finally:
        await runner.cleanup()


@pytest_asyncio.fixture
async def site(unused_tcp_port: int) -> AsyncIterator[str]:
    app = web.Application()

    async def handle_root(_):
        return web.Response(
            text='<a href="https://a.com/">a</a><a href="/local">l</a>',
            content_type="text/html",
        )

    async def handle_stalled(request):
        resp = web.StreamResponse(headers={"Content-Type": "text/html"})
        await resp.prepare(request)
        await resp.write(b'<a href="https://early.test/">early</a>')
        await asyncio.sleep(1.5)
        await resp.write(b'<a href="https://late.test/">late</a>')
        return resp

    async def handle_error(_):
        return web.Response(text='<a href="https://help.test/">help</a>', status=500, content_type="text/html")

    app.router.add_get("/", handle_root)
    app.router.add_get("/stalled", handle_stalled)
    app.router.add_get("/error", handle_error)

    async for url in _serve_app(app, unused_tcp_port):
        yield url


@pytest.mark.asyncio()
async def test_engine_rips_and_counts(basic_config, site):
    store = MemoryCounterStore()
    engine = Engine(basic_config, store)

    report = await engine.rip(f"{site}/")
    await engine.drain()

    assert report.links == ["https://a.com/", f"{site}/local"]
    assert report.hostnames == {"a.com": 1, "": 1}
    assert await engine.count() == 1


@pytest.mark.asyncio()
async def test_engine_drops_empty_hosts_when_configured(site):
    engine = Engine(RipperConfig(drop_empty_hosts=True), MemoryCounterStore())
    report = await engine.rip(f"{site}/")
    await engine.drain()
    assert report.hostnames == {"a.com": 1}


@pytest.mark.asyncio()
async def test_error_status_pages_are_still_ripped(basic_config, site):
    report = await Engine(basic_config, MemoryCounterStore()).rip(f"{site}/error")
    assert report.links == ["https://help.test/"]


@pytest.mark.asyncio()
async def test_body_timeout_truncates_instead_of_failing(site):
    engine = Engine(RipperConfig(timeout=0.5), MemoryCounterStore())
    report = await engine.rip(f"{site}/stalled")
    await engine.drain()
    assert report.links == ["https://early.test/"]


@pytest.mark.asyncio()
async def test_invalid_target_is_rejected_before_fetching(basic_config):
    store = MemoryCounterStore()
    with pytest.raises(InvalidTargetError):
        await Engine(basic_config, store).rip("/example.html")
    assert await store.read("system") is None


@pytest.mark.asyncio()
async def test_unreachable_target_raises_fetch_error(basic_config, unused_tcp_port_factory):
    url = f"http://localhost:{unused_tcp_port_factory()}/"
    with pytest.raises(FetchError) as excinfo:
        await Engine(basic_config, MemoryCounterStore()).rip(url)
    assert excinfo.value.url == url


@pytest.mark.asyncio()
async def test_start_rip_uses_configured_sqlite_counter(site, tmp_path):
    config = RipperConfig(counter={"db_path": tmp_path / "rips.db"})
    await start_rip(config, f"{site}/")
    report = await start_rip(config, f"{site}/")
    # the second rip reads the counter bumped by the first one at least
    assert report.ripcount >= 1
