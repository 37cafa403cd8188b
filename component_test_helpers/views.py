"""Lazily resolving views over a suite's components.

Views are created while a suite is declared and resolve a key only when it is
read, so they can be captured in closures before the program exists.
"""

from collections.abc import Callable, Collection
from typing import Any

from .exceptions import UnknownComponentError

Accessor = Callable[[str], Any]


class ComponentView:
    """Read-only access to components by key, as ``view.key`` or ``view["key"]``."""

    def __init__(self, label: str, accessor: Accessor):
        self._label = label
        self._accessor = accessor

    def resolve(self, key: str) -> Any:
        return self._accessor(key)

    def __getitem__(self, key: str) -> Any:
        return self.resolve(key)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return self.resolve(name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            object.__setattr__(self, name, value)
        else:
            raise AttributeError(f"{self._label} is read-only")

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._label}>"


class KeyedComponentView(ComponentView):
    """View over a declared key set. Names outside the set are rejected without a lookup."""

    _keys: frozenset[str] = frozenset()

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        raise UnknownComponentError(name)

    def __dir__(self) -> list[str]:
        return sorted(set(super().__dir__()) | self._keys)


def _accessor_property(key: str) -> property:
    return property(lambda self: self.resolve(key), doc=f"The '{key}' component")


def create_view(label: str, accessor: Accessor, keys: Collection[str] | None = None) -> ComponentView:
    """Build a view; with keys, one property is generated per key."""
    if keys is None:
        return ComponentView(label, accessor)

    namespace: dict[str, Any] = {"_keys": frozenset(keys)}
    for key in keys:
        if key.startswith("_") or not key.isidentifier() or hasattr(ComponentView, key):
            continue
        namespace[key] = _accessor_property(key)
    view_class = type(f"{label.title().replace('_', '')}View", (KeyedComponentView,), namespace)
    return view_class(label, accessor)
