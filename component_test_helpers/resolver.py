from typing import Any

from .exceptions import NotInitializedError, UnknownComponentError
from .program import ProgramLifecycle


class ComponentResolver:
    """Looks up live components of the running program by key.

    The program is read from the lifecycle on every call: resolvers are handed
    to views while a suite is being declared, long before a program exists.
    """

    def __init__(self, lifecycle: ProgramLifecycle):
        self._lifecycle = lifecycle
        keys = lifecycle.config.component_keys
        self.declared_keys: frozenset[str] | None = frozenset(keys) if keys is not None else None

    def check_key(self, key: str) -> None:
        if self.declared_keys is not None and key not in self.declared_keys:
            raise UnknownComponentError(key)

    def resolve(self, key: str) -> Any:
        self.check_key(key)

        program = self._lifecycle.program
        if program is None:
            raise NotInitializedError()
        if program.components is None:
            raise NotInitializedError("Cannot get the components")
        if key not in program.components:
            raise UnknownComponentError(key)

        return program.components[key]
