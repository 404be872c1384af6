from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import httpx
import pytest

from adapters.remote_bundle import HttpBundleFetcher
from conftest import SOURCE_URL, ExplodingFetcher, FakeFetcher, failing_transport, static_transport
from core.domain.errors import FetchStatusError, FetchTransportError, LocalReadError
from core.domain.models import FALLBACK_BUNDLE, BundleState
from core.services.bundle_provider import BundleProvider

TRAILER = f"\n//# sourceMappingURL={SOURCE_URL}.map"


def _http_provider(settings, transport: httpx.MockTransport) -> BundleProvider:
    return BundleProvider(settings, fetcher=HttpBundleFetcher(settings, transport=transport))


def test_fallback_before_any_fetch(make_settings):
    provider = BundleProvider(make_settings(), fetcher=ExplodingFetcher())

    assert provider.get_current() == FALLBACK_BUNDLE
    assert provider.state is BundleState.UNINITIALIZED
    assert not provider.has_bundle


def test_fallback_text_is_an_error_script():
    assert FALLBACK_BUNDLE == 'console.error("[shelter] bundle could not be fetched in time. Aborting!");'


def test_successful_fetch_appends_source_map(make_settings):
    settings = make_settings()
    provider = _http_provider(settings, static_transport(200, "console.log(1)"))

    asyncio.run(provider.refresh())

    assert provider.get_current() == "console.log(1)" + TRAILER
    assert provider.state is BundleState.AVAILABLE


def test_existing_source_map_is_kept(make_settings):
    body = "console.log(1)\n//# sourceMappingURL=https://cdn.example.test/other.map"
    provider = _http_provider(make_settings(), static_transport(200, body))

    asyncio.run(provider.refresh())

    assert provider.get_current() == body


def test_status_error_keeps_fallback(make_settings):
    provider = _http_provider(make_settings(), static_transport(500, "oops"))

    asyncio.run(provider.refresh())

    assert provider.get_current() == FALLBACK_BUNDLE
    assert provider.state is BundleState.UNAVAILABLE


def test_status_error_keeps_previous_bundle(make_settings):
    fetcher = FakeFetcher(
        "first",
        FetchStatusError(url=SOURCE_URL, status_code=503),
    )
    provider = BundleProvider(make_settings(), fetcher=fetcher)

    asyncio.run(provider.refresh())
    before = provider.bundle
    asyncio.run(provider.refresh())

    assert provider.bundle is before
    assert provider.get_current() == "first" + TRAILER
    assert provider.state is BundleState.AVAILABLE


def test_transport_error_is_logged_not_raised(make_settings, caplog):
    caplog.set_level(logging.ERROR)
    provider = _http_provider(make_settings(), failing_transport())

    asyncio.run(provider.refresh())

    assert provider.get_current() == FALLBACK_BUNDLE
    assert provider.state is BundleState.UNAVAILABLE
    assert "[shelter] Error fetching remote bundle" in caplog.text


@pytest.mark.parametrize(
    "bad_url",
    ["https://bundles.example.test:99999/shelter.js", "https://bundles.exa\x00mple.test/shelter.js"],
)
def test_malformed_bundle_url_is_logged_not_raised(make_settings, caplog, bad_url):
    caplog.set_level(logging.ERROR)
    provider = _http_provider(make_settings(bundle_url=bad_url), static_transport(200, "console.log(1)"))

    asyncio.run(provider.refresh())

    assert provider.get_current() == FALLBACK_BUNDLE
    assert provider.state is BundleState.UNAVAILABLE
    assert "[shelter] Error fetching remote bundle" in caplog.text


def test_transport_error_keeps_previous_bundle(make_settings):
    fetcher = FakeFetcher("first", FetchTransportError(url=SOURCE_URL, reason="timed out"))
    provider = BundleProvider(make_settings(), fetcher=fetcher)

    asyncio.run(provider.refresh())
    asyncio.run(provider.refresh())

    assert provider.get_current() == "first" + TRAILER


def test_later_successful_fetch_replaces_bundle(make_settings):
    fetcher = FakeFetcher("first", "second")
    provider = BundleProvider(make_settings(), fetcher=fetcher)

    asyncio.run(provider.refresh())
    first = provider.bundle
    asyncio.run(provider.refresh())

    assert fetcher.calls == 2
    assert provider.get_current() == "second" + TRAILER
    # the previous snapshot is untouched
    assert first.source_text == "first" + TRAILER


def test_local_override_reads_file(make_settings, tmp_path: Path):
    (tmp_path / "shelter.js").write_text("X", encoding="utf-8")
    provider = BundleProvider(
        make_settings(dist_path=tmp_path),
        fetcher=ExplodingFetcher(),
        platform="linux",
    )

    assert provider.get_current() == f"X\n//# sourceMappingURL=file://{tmp_path}/shelter.js.map"


def test_local_override_windows_uses_extra_slash(make_settings, tmp_path: Path):
    (tmp_path / "shelter.js").write_text("X", encoding="utf-8")
    provider = BundleProvider(make_settings(dist_path=tmp_path), fetcher=ExplodingFetcher(), platform="win32")

    assert provider.get_current().endswith(f"sourceMappingURL=file:///{tmp_path}/shelter.js.map")


def test_local_override_wins_over_fetched_bundle(make_settings, tmp_path: Path):
    (tmp_path / "shelter.js").write_text("local", encoding="utf-8")
    fetcher = FakeFetcher("remote")
    provider = BundleProvider(make_settings(dist_path=tmp_path), fetcher=fetcher, platform="linux")

    asyncio.run(provider.refresh())

    assert provider.get_current().startswith("local\n//# sourceMappingURL=file://")


def test_local_override_missing_file_propagates(make_settings, tmp_path: Path):
    provider = BundleProvider(make_settings(dist_path=tmp_path / "nope"), fetcher=ExplodingFetcher())

    with pytest.raises(LocalReadError) as excinfo:
        provider.get_current()

    assert excinfo.value.path == tmp_path / "nope" / "shelter.js"


def test_start_skips_network_with_local_override(make_settings, tmp_path: Path):
    provider = BundleProvider(make_settings(dist_path=tmp_path), fetcher=ExplodingFetcher())

    async def scenario():
        task = provider.start()
        await provider.ensure_bundle()
        return task

    assert asyncio.run(scenario()) is None
    assert provider.state is BundleState.UNINITIALIZED


def test_concurrent_refreshes_share_one_fetch(make_settings):
    fetcher = FakeFetcher("console.log(1)", hold=True)
    provider = BundleProvider(make_settings(), fetcher=fetcher)

    async def scenario():
        first = asyncio.create_task(provider.refresh())
        second = asyncio.create_task(provider.refresh())
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        assert provider.state is BundleState.FETCHING
        assert provider.in_flight
        fetcher.release()
        await asyncio.gather(first, second)

    asyncio.run(scenario())

    assert fetcher.calls == 1
    assert provider.get_current() == "console.log(1)" + TRAILER
    assert not provider.in_flight


def test_ensure_bundle_joins_startup_fetch(make_settings):
    fetcher = FakeFetcher("console.log(1)", hold=True)
    provider = BundleProvider(make_settings(), fetcher=fetcher)

    async def scenario():
        startup = provider.start()
        assert startup is not None
        waiter = asyncio.create_task(provider.ensure_bundle())
        await asyncio.sleep(0)
        assert not waiter.done()
        fetcher.release()
        await waiter
        await startup

    asyncio.run(scenario())

    assert fetcher.calls == 1
    assert provider.has_bundle


def test_ensure_bundle_is_noop_once_available(make_settings):
    fetcher = FakeFetcher("console.log(1)")
    provider = BundleProvider(make_settings(), fetcher=fetcher)

    async def scenario():
        await provider.refresh()
        await provider.ensure_bundle()

    asyncio.run(scenario())

    assert fetcher.calls == 1


def test_ensure_bundle_retries_after_failed_startup(make_settings):
    fetcher = FakeFetcher(FetchStatusError(url=SOURCE_URL, status_code=502), "console.log(2)")
    provider = BundleProvider(make_settings(), fetcher=fetcher)

    async def scenario():
        await provider.start()
        assert provider.state is BundleState.UNAVAILABLE
        await provider.ensure_bundle()

    asyncio.run(scenario())

    assert fetcher.calls == 2
    assert provider.get_current() == "console.log(2)" + TRAILER


def test_cancelled_waiter_does_not_cancel_shared_fetch(make_settings):
    fetcher = FakeFetcher("console.log(1)", hold=True)
    provider = BundleProvider(make_settings(), fetcher=fetcher)

    async def scenario():
        waiter = asyncio.create_task(provider.refresh())
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        waiter.cancel()
        with pytest.raises(asyncio.CancelledError):
            await waiter
        assert provider.in_flight
        fetcher.release()
        await provider.refresh()

    asyncio.run(scenario())

    assert fetcher.calls == 1
    assert provider.has_bundle


def test_local_override_with_undecodable_file_raises_local_read_error(make_settings, tmp_path: Path):
    (tmp_path / "shelter.js").write_bytes(b"\xff\xfe\x00bad")
    provider = BundleProvider(make_settings(dist_path=tmp_path), fetcher=ExplodingFetcher())

    with pytest.raises(LocalReadError):
        provider.get_current()
