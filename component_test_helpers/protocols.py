"""Protocol definitions for components the harness helpers interact with."""

from collections.abc import Awaitable
from typing import Any, Protocol, runtime_checkable

import httpx


@runtime_checkable
class ConfigComponent(Protocol):
    """Protocol defining the configuration reads the local fetch component needs."""

    def require_string(self, key: str) -> str | Awaitable[str]:
        """Return the string value for key, failing if it is missing."""
        ...

    def require_number(self, key: str) -> float | Awaitable[float]:
        """Return the numeric value for key, failing if it is missing."""
        ...


@runtime_checkable
class FetchComponent(Protocol):
    """Protocol defining a component that performs HTTP requests."""

    async def fetch(self, url: str, **kwargs: Any) -> httpx.Response:
        """Send a request and return the response."""
        ...

