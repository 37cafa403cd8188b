"""Passive spies over components.

A spy records calls to a component's methods and always forwards them. The
target is looked up at call time, so a spy keeps forwarding to a stub that was
created after it. The spy cache is discarded before every test.
"""

from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock, MagicMock

from .logger import get_logger
from .resolver import ComponentResolver
from .stubs import StubCache, is_async, public_methods

logger = get_logger(__name__)

_INTERNAL = frozenset({"_key", "_target", "_methods"})


def _forwarder(target: Callable[[], Any], name: str, asynchronous: bool) -> Callable:
    if asynchronous:

        async def forward_async(*args, **kwargs):
            return await getattr(target(), name)(*args, **kwargs)

        return forward_async

    def forward(*args, **kwargs):
        return getattr(target(), name)(*args, **kwargs)

    return forward


class ComponentSpy:
    """Call recorder in front of one component."""

    def __init__(self, key: str, target: Callable[[], Any]):
        self._key = key
        self._target = target
        self._methods: dict[str, MagicMock] = {}

        for name, member in public_methods(target()):
            asynchronous = is_async(member)
            mock_class = AsyncMock if asynchronous else MagicMock
            method = mock_class(name=f"{key}.{name}", side_effect=_forwarder(target, name, asynchronous))
            self._methods[name] = method
            setattr(self, name, method)

    @property
    def __wrapped__(self) -> Any:
        return self._target()

    def __getattr__(self, name: str) -> Any:
        if name in _INTERNAL or name.startswith("__"):
            raise AttributeError(name)
        return getattr(self._target(), name)

    def __dir__(self) -> list[str]:
        return dir(self._target())

    def __repr__(self) -> str:
        return f"<ComponentSpy {self._key}: {sorted(self._methods)}>"


class SpyCache:
    def __init__(self, resolver: ComponentResolver, stubs: StubCache):
        self._resolver = resolver
        self._stubs = stubs
        self._spies: dict[str, ComponentSpy] = {}

    def _target(self, key: str) -> Any:
        stub = self._stubs.cached(key)
        if stub is not None:
            return stub
        return self._resolver.resolve(key)

    def get(self, key: str) -> ComponentSpy:
        spy = self._spies.get(key)
        if spy is None:
            spy = ComponentSpy(key, lambda: self._target(key))
            self._spies[key] = spy
            logger.debug("Created component spy", component=key)
        return spy

    def cached(self, key: str) -> ComponentSpy | None:
        return self._spies.get(key)

    def clear(self) -> None:
        self._spies.clear()
