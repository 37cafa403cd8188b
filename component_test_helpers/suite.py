"""Suite declaration model.

Suites are declared by running a body function inside ``describe``. While the
body runs, ``it``, ``before_all``, ``after_all``, ``before_each`` and
``after_each`` register into the suite being declared. A hook adapter then
turns the collected ``SuiteDefinition`` into whatever its test framework
collects, and drives it through a ``SuiteExecution``.
"""

import asyncio
import inspect
import re
from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from .exceptions import HarnessStateError
from .logger import get_logger

logger = get_logger(__name__)

Hook = Callable[[], Awaitable[Any] | Any]

_declaring: list["SuiteDefinition"] = []


@dataclass
class CaseDefinition:
    name: str
    fn: Hook


@dataclass
class SuiteDefinition:
    """Everything registered while a suite body was being declared."""

    name: str
    before_all: list[Hook] = field(default_factory=list)
    after_all: list[Hook] = field(default_factory=list)
    before_each: list[Hook] = field(default_factory=list)
    after_each: list[Hook] = field(default_factory=list)
    tests: list[CaseDefinition] = field(default_factory=list)

    def method_names(self) -> Iterator[tuple[str, CaseDefinition]]:
        """Yield a unique ``test_*`` identifier for every declared test case."""
        seen: set[str] = set()
        for case in self.tests:
            base = "test_" + (re.sub(r"\W+", "_", case.name.lower()).strip("_") or "case")
            name = base
            n = 2
            while name in seen:
                name = f"{base}_{n}"
                n += 1
            seen.add(name)
            yield name, case


@contextmanager
def describe(name: str) -> Iterator[SuiteDefinition]:
    """Collect registrations made inside the block into a new suite definition."""
    definition = SuiteDefinition(name)
    _declaring.append(definition)
    try:
        yield definition
    finally:
        _declaring.pop()


def current_suite() -> SuiteDefinition:
    if not _declaring:
        raise HarnessStateError("Tests and hooks can only be registered while a suite is being declared")
    return _declaring[-1]


def it(name: str, fn: Hook | None = None):
    """Declare a test case. Usable as ``it(name, fn)`` or as ``@it(name)``."""

    def register(fn: Hook) -> Hook:
        current_suite().tests.append(CaseDefinition(name, fn))
        return fn

    if fn is None:
        return register
    return register(fn)


def before_all(fn: Hook) -> Hook:
    current_suite().before_all.append(fn)
    return fn


def after_all(fn: Hook) -> Hook:
    current_suite().after_all.append(fn)
    return fn


def before_each(fn: Hook) -> Hook:
    current_suite().before_each.append(fn)
    return fn


def after_each(fn: Hook) -> Hook:
    current_suite().after_each.append(fn)
    return fn


async def _wait(awaitable: Awaitable[Any]) -> Any:
    return await awaitable


class SuiteExecution:
    """Runs a suite's hooks and test cases on one event loop.

    The loop lives from one-time setup until one-time teardown so that
    components bound to it keep working across the suite's test cases.
    """

    def __init__(self, definition: SuiteDefinition):
        self.definition = definition
        self._runner: asyncio.Runner | None = None

    @property
    def running(self) -> bool:
        return self._runner is not None

    def call(self, fn: Hook) -> Any:
        result = fn()
        if inspect.isawaitable(result):
            if self._runner is None:
                if inspect.iscoroutine(result):
                    result.close()
                raise HarnessStateError(f"Suite '{self.definition.name}' has no running event loop")
            return self._runner.run(_wait(result))
        return result

    def setup(self) -> None:
        logger.debug("Suite setup", suite=self.definition.name)
        self._runner = asyncio.Runner()
        try:
            for hook in self.definition.before_all:
                self.call(hook)
        except BaseException:
            self._close()
            raise

    def teardown(self) -> None:
        if self._runner is None:
            # setup never ran or already failed and cleaned up
            logger.debug("Suite teardown skipped", suite=self.definition.name)
            return

        logger.debug("Suite teardown", suite=self.definition.name)
        try:
            self._call_all(self.definition.after_all)
        finally:
            self._close()

    def setup_test(self) -> None:
        try:
            for hook in self.definition.before_each:
                self.call(hook)
        except BaseException:
            # the host framework skips per-test teardown when setup fails
            logger.debug("Per-test setup failed, running after_each hooks", suite=self.definition.name)
            try:
                self._call_all(self.definition.after_each)
            except Exception as e:
                logger.warning(
                    "after_each hook failed after a failed setup",
                    suite=self.definition.name,
                    error=repr(e),
                )
            raise

    def teardown_test(self) -> None:
        self._call_all(self.definition.after_each)

    def _call_all(self, hooks: list[Hook]) -> None:
        """Call every hook even if an earlier one fails, then raise the first error."""
        first_error: Exception | None = None
        for hook in hooks:
            try:
                self.call(hook)
            except Exception as e:
                if first_error is None:
                    first_error = e
                else:
                    logger.warning("Suite hook failed", suite=self.definition.name, error=repr(e))
        if first_error is not None:
            raise first_error

    def run_test(self, case: CaseDefinition) -> Any:
        logger.debug("Running test", suite=self.definition.name, test=case.name)
        return self.call(case.fn)

    def _close(self) -> None:
        if self._runner is not None:
            runner, self._runner = self._runner, None
            runner.close()
