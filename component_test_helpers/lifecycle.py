"""Minimal component lifecycle runner.

A program is described by a ``ProgramConfig``: ``init_components`` builds the
component set and ``main`` receives the constructed program, usually to wire
things together and call ``start_components()``. ``run`` returns the started
``ComponentBasedProgram``; its ``stop()`` stops every started component in
reverse order.
"""

import inspect
from collections.abc import Awaitable, Callable, Collection
from dataclasses import dataclass
from typing import Any

from .logger import get_logger

logger = get_logger(__name__)


async def maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


@dataclass
class ProgramConfig:
    """How to build and start a component-based program."""

    init_components: Callable[[], Awaitable[dict[str, Any]] | dict[str, Any]]
    main: Callable[["ComponentBasedProgram"], Awaitable[None] | None] | None = None
    component_keys: Collection[str] | None = None
    # clears module-level state (caches, registries) the program keeps between suites
    reset_state: Callable[[], Awaitable[None] | None] | None = None


class ComponentBasedProgram:
    """A constructed program: its components plus start/stop of their lifecycle."""

    def __init__(self, components: dict[str, Any]):
        self.components = components
        self._started: list[str] = []

    async def start_components(self) -> None:
        """Call ``start()`` on every component that has one, in insertion order."""
        for key, component in self.components.items():
            start = getattr(component, "start", None)
            if callable(start):
                logger.debug("Starting component", component=key)
                await maybe_await(start())
            self._started.append(key)

    async def stop(self) -> None:
        """Call ``stop()`` on every started component, in reverse start order.

        A failing ``stop()`` does not keep the remaining components running:
        all of them are stopped and the first error is raised afterwards.
        """
        first_error: Exception | None = None
        while self._started:
            key = self._started.pop()
            stop = getattr(self.components[key], "stop", None)
            if not callable(stop):
                continue
            logger.debug("Stopping component", component=key)
            try:
                await maybe_await(stop())
            except Exception as e:
                logger.warning("Component failed to stop", component=key, error=repr(e))
                if first_error is None:
                    first_error = e
        if first_error is not None:
            raise first_error


async def run(config: ProgramConfig) -> ComponentBasedProgram:
    """Construct the program from config and run its main entry point."""
    components = await maybe_await(config.init_components())
    program = ComponentBasedProgram(dict(components))

    try:
        if config.main is None:
            await program.start_components()
        else:
            await maybe_await(config.main(program))
    except Exception:
        logger.warning("Program main failed, stopping started components", started=len(program._started))
        await program.stop()
        raise

    return program
