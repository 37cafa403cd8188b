"""Fetch component for calling a server started inside the test program."""

import os
import re
from functools import lru_cache
from typing import Any

import httpx

from .exceptions import ConfigurationError
from .lifecycle import maybe_await
from .logger import get_logger
from .protocols import ConfigComponent
from .settings import HarnessSettings, get_settings

logger = get_logger(__name__)

MAX_PORT = 65535


def current_worker_index() -> int:
    """1-based index of the pytest-xdist worker running this process (1 without xdist)."""
    worker = os.getenv("PYTEST_XDIST_WORKER", "")
    match = re.fullmatch(r"gw(\d+)", worker)
    if match is None:
        return 1
    return int(match.group(1)) + 1


class PortAllocator:
    """Hands out TCP ports for test servers.

    Every worker gets its own block starting at ``base + worker * block_size``
    and ports are handed out by incrementing from there, so parallel workers
    never collide.
    """

    def __init__(self, base: int, block_size: int, worker: int):
        self.first = base + worker * block_size
        self.last = min(self.first + block_size, MAX_PORT)
        self._last_used = self.first

    @classmethod
    def from_settings(cls, settings: HarnessSettings, worker: int | None = None) -> "PortAllocator":
        return cls(
            settings.port_base,
            settings.port_block_size,
            current_worker_index() if worker is None else worker,
        )

    def allocate(self) -> int:
        if self._last_used >= self.last:
            raise ConfigurationError(f"No free test ports left in {self.first}-{self.last}")
        self._last_used += 1
        return self._last_used


@lru_cache
def default_port_allocator() -> PortAllocator:
    return PortAllocator.from_settings(get_settings())


def default_server_config(allocator: PortAllocator | None = None) -> dict[str, str]:
    """Server config values for a test HTTP server on a fresh port."""
    allocator = allocator or default_port_allocator()
    return {
        "HTTP_SERVER_HOST": "0.0.0.0",
        "HTTP_SERVER_PORT": str(allocator.allocate()),
    }


class LocalFetch:
    """Sends requests to the local test server. Only paths starting with ``/`` are accepted."""

    def __init__(self, base_url: str):
        self.base_url = base_url
        self._client: httpx.AsyncClient | None = None

    async def fetch(self, url: str, method: str = "GET", **kwargs: Any) -> httpx.Response:
        if not isinstance(url, str) or not url.startswith("/"):
            raise ValueError("localFetch only works for local testing-URLs")

        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self.base_url)
        return await self._client.request(method, url, **kwargs)

    async def stop(self) -> None:
        if self._client is not None:
            client, self._client = self._client, None
            await client.aclose()


async def create_local_fetch_component(config: ConfigComponent) -> LocalFetch:
    host = await maybe_await(config.require_string("HTTP_SERVER_HOST"))
    port = await maybe_await(config.require_number("HTTP_SERVER_PORT"))
    base_url = f"http://{host}:{int(port)}"
    logger.debug("Created local fetch component", base_url=base_url)
    return LocalFetch(base_url)
