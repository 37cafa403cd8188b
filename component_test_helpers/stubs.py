"""Stub wrappers around live components.

A ``ComponentStub`` replaces every public method of a component with a
``unittest.mock`` mock that wraps the original: calls are recorded and still
reach the component unless a test configures ``return_value`` or
``side_effect``. Stubs live for the whole suite; only their recorded state is
reset between tests.
"""

import inspect
from collections.abc import Callable, Iterator
from typing import Any
from unittest.mock import AsyncMock, MagicMock

from .logger import get_logger
from .resolver import ComponentResolver

logger = get_logger(__name__)

_INTERNAL = frozenset({"_key", "_component", "_methods"})


def is_async(member: Any) -> bool:
    return isinstance(member, AsyncMock) or inspect.iscoroutinefunction(member)


def public_methods(target: Any) -> Iterator[tuple[str, Callable]]:
    """Yield the public callable members of target.

    Properties are skipped without being evaluated.
    """
    for name in dir(target):
        if name.startswith("_"):
            continue
        try:
            static = inspect.getattr_static(target, name)
        except AttributeError:
            continue
        if isinstance(static, property):
            continue
        member = getattr(target, name)
        if callable(member) and not inspect.isclass(member):
            yield name, member


class ComponentStub:
    """Mock decorator holding a reference to one live component.

    Each method mock keeps the original callable in ``wrapped_method``, and
    ``__wrapped__`` is the unmocked component itself.
    """

    def __init__(self, key: str, component: Any):
        self._key = key
        self._component = component
        self._methods: dict[str, MagicMock] = {}
        self.__wrapped__ = component

        for name, member in public_methods(component):
            mock_class = AsyncMock if is_async(member) else MagicMock
            method = mock_class(name=f"{key}.{name}", wraps=member)
            method.wrapped_method = member
            self._methods[name] = method
            setattr(self, name, method)

    def __getattr__(self, name: str) -> Any:
        if name in _INTERNAL or name.startswith("__"):
            raise AttributeError(name)
        return getattr(self._component, name)

    def __dir__(self) -> list[str]:
        return dir(self._component)

    def __repr__(self) -> str:
        return f"<ComponentStub {self._key}: {sorted(self._methods)}>"

    def _reset_behavior(self) -> None:
        """Forget recorded calls and configured behavior, and re-attach replaced mocks."""
        for name, method in self._methods.items():
            method.reset_mock(return_value=True, side_effect=True)
            if self.__dict__.get(name) is not method:
                setattr(self, name, method)


class StubCache:
    """One ``ComponentStub`` per component key for the lifetime of a suite."""

    def __init__(self, resolver: ComponentResolver):
        self._resolver = resolver
        self._stubs: dict[str, ComponentStub] = {}

    def get(self, key: str) -> ComponentStub:
        stub = self._stubs.get(key)
        if stub is None:
            stub = ComponentStub(key, self._resolver.resolve(key))
            self._stubs[key] = stub
            logger.debug("Created component stub", component=key)
        return stub

    def cached(self, key: str) -> ComponentStub | None:
        return self._stubs.get(key)

    def reset_behavior(self) -> None:
        for stub in self._stubs.values():
            stub._reset_behavior()
