"""Hook adapters binding declared suites to a host test framework.

Each adapter names the four lifecycle hooks its framework calls (one-time
setup/teardown, per-test setup/teardown) and materializes a
``SuiteDefinition`` into a test class that framework collects.
"""

import keyword
import unittest
from abc import ABC
from collections.abc import Callable
from dataclasses import astuple, dataclass
from typing import Any, ClassVar

from .exceptions import ConfigurationError
from .logger import get_logger
from .suite import CaseDefinition, SuiteDefinition, SuiteExecution, describe

logger = get_logger(__name__)


@dataclass(frozen=True)
class HookNames:
    one_time_setup: str
    one_time_teardown: str
    per_test_setup: str
    per_test_teardown: str


class HookAdapter(ABC):
    """Base class for host framework adapters."""

    name: ClassVar[str]
    hook_names: ClassVar[HookNames]
    base: ClassVar[type] = object

    def __init__(self) -> None:
        names = getattr(self, "hook_names", None)
        if names is None:
            raise ConfigurationError(f"{type(self).__name__} does not define its lifecycle hook names")

        resolved = astuple(names)
        for hook in resolved:
            if not hook or not hook.isidentifier() or keyword.iskeyword(hook):
                raise ConfigurationError(f"{type(self).__name__} has an invalid hook name: {hook!r}")
        if len(set(resolved)) != len(resolved):
            raise ConfigurationError(f"{type(self).__name__} maps two lifecycle hooks to the same name")

    def describe(self, name: str, body: Callable[[], None], *, class_name: str, module: str | None = None) -> type:
        """Declare a suite by running body, then materialize it as a test class."""
        with describe(name) as definition:
            body()
        return self.materialize(definition, class_name=class_name, module=module)

    def materialize(self, definition: SuiteDefinition, *, class_name: str, module: str | None = None) -> type:
        execution = SuiteExecution(definition)
        names = self.hook_names

        namespace: dict[str, Any] = {
            "__doc__": definition.name,
            "suite_execution": execution,
            names.one_time_setup: classmethod(lambda cls: execution.setup()),
            names.one_time_teardown: classmethod(lambda cls: execution.teardown()),
            names.per_test_setup: lambda self, *args: execution.setup_test(),
            names.per_test_teardown: lambda self, *args: execution.teardown_test(),
        }
        if module is not None:
            namespace["__module__"] = module

        for method_name, case in definition.method_names():
            namespace[method_name] = _test_method(execution, case, method_name)

        logger.debug(
            "Materialized suite",
            suite=definition.name,
            framework=self.name,
            test_class=class_name,
            tests=len(definition.tests),
        )
        return type(class_name, (self.base,), namespace)


def _test_method(execution: SuiteExecution, case: CaseDefinition, method_name: str):
    def test(self):
        execution.run_test(case)

    test.__name__ = method_name
    test.__qualname__ = method_name
    test.__doc__ = case.name
    return test


class PytestHooks(HookAdapter):
    """xunit-style hooks collected by pytest."""

    name = "pytest"
    hook_names = HookNames(
        one_time_setup="setup_class",
        one_time_teardown="teardown_class",
        per_test_setup="setup_method",
        per_test_teardown="teardown_method",
    )


class UnittestHooks(HookAdapter):
    """``unittest.TestCase`` hooks, also collected by pytest."""

    name = "unittest"
    hook_names = HookNames(
        one_time_setup="setUpClass",
        one_time_teardown="tearDownClass",
        per_test_setup="setUp",
        per_test_teardown="tearDown",
    )
    base = unittest.TestCase


HOOK_ADAPTERS: dict[str, type[HookAdapter]] = {
    "pytest": PytestHooks,
    "py.test": PytestHooks,
    "unittest": UnittestHooks,
    "xunit": UnittestHooks,
}


def get_hook_adapter(name: str) -> HookAdapter:
    """Return the adapter registered under name (case-insensitive)."""
    adapter_class = HOOK_ADAPTERS.get(name.strip().lower())
    if adapter_class is None:
        supported = ", ".join(sorted(HOOK_ADAPTERS))
        raise ConfigurationError(f"No hook adapter named '{name}' (supported: {supported})")
    return adapter_class()
