"""Shared pytest fixtures for the loader tests."""

from __future__ import annotations

import asyncio
import os
from collections.abc import Callable, Iterator
from pathlib import Path

import httpx
import pytest

from core.config import AppSettings
from core.domain.errors import BundleFetchError

SOURCE_URL = "https://bundles.example.test/shelter.js"


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Keep real SHELTER_* variables and a project .env out of the tests."""

    for key in list(os.environ):
        if key.upper().startswith("SHELTER_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    yield


@pytest.fixture
def make_settings() -> Callable[..., AppSettings]:
    def factory(**overrides: object) -> AppSettings:
        values: dict[str, object] = {"bundle_url": SOURCE_URL}
        values.update(overrides)
        return AppSettings(_env_file=None, **values)  # type: ignore[call-arg]

    return factory


def static_transport(
    status_code: int = 200,
    body: bytes | str = b"",
    *,
    calls: list[httpx.Request] | None = None,
) -> httpx.MockTransport:
    """MockTransport answering every request with the same response."""

    content = body.encode("utf-8") if isinstance(body, str) else body

    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        return httpx.Response(status_code, content=content)

    return httpx.MockTransport(handler)


def failing_transport(exc_type: type[httpx.TransportError] = httpx.ConnectError) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        raise exc_type("name or service not known", request=request)

    return httpx.MockTransport(handler)


class FakeFetcher:
    """In-memory `BundleFetcher`; results are consumed in order.

    With `hold=True` every fetch waits for `release()`.
    """

    source_url = SOURCE_URL

    def __init__(self, *results: str | BundleFetchError, hold: bool = False) -> None:
        self.results = list(results)
        self.calls = 0
        self.hold = hold
        self._gate = asyncio.Event()

    def release(self) -> None:
        self._gate.set()

    async def fetch(self) -> str:
        self.calls += 1
        if self.hold:
            await self._gate.wait()
        result = self.results.pop(0)
        if isinstance(result, BaseException):
            raise result
        return result


class ExplodingFetcher:
    """Fails the test if the network is ever touched."""

    source_url = SOURCE_URL

    async def fetch(self) -> str:
        raise AssertionError("network fetch was not expected")
