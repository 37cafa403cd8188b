"""Suite orchestration: binds a program's lifecycle to a declared test suite.

Usage:
    test = create_runner(ProgramConfig(init_components=init_components))

    @test("counter component")
    def TestCounter(args: TestArguments):
        @it("increments")
        def _():
            assert args.components.counter.increment() == 1

        @it("stubs the increment")
        def _():
            args.stub_components.counter.increment.return_value = 99
            assert args.components.counter.increment() == 99
"""

import importlib
import re
from collections.abc import Callable
from typing import Any

from .exceptions import HarnessStateError, SuiteSetupError
from .hooks import HookAdapter, get_hook_adapter
from .lifecycle import ProgramConfig
from .logger import get_logger
from .program import ProgramLifecycle
from .resolver import ComponentResolver
from .sandbox import Sandbox
from .settings import HarnessSettings, get_settings
from .spies import SpyCache
from .stubs import StubCache
from .suite import Hook, after_all, after_each, before_all, before_each
from .views import ComponentView, create_view

logger = get_logger(__name__)

SuiteBody = Callable[["TestArguments"], None]


class TestArguments:
    """What a suite body receives: the component views and ``before_start``."""

    __test__ = False

    def __init__(self, harness: "ComponentHarness"):
        self._harness = harness
        keys = harness.resolver.declared_keys
        self.components: ComponentView = create_view("components", harness.effective_component, keys)
        self.stub_components: ComponentView = create_view("stub_components", harness.stubs.get, keys)
        self.spy_components: ComponentView = create_view("spy_components", harness.spies.get, keys)

    def before_start(self, fn: Hook) -> Hook:
        """Run fn before the program is constructed. Callbacks run in registration order."""
        return self._harness.lifecycle.register_pre_start(fn)

    @property
    def sandbox(self) -> Sandbox:
        """Patch set of the running test, restored when the test finishes."""
        if self._harness.sandbox is None:
            raise HarnessStateError("The sandbox is only available while a test is running")
        return self._harness.sandbox


class ComponentHarness:
    """Per-suite state: the program lifecycle, the component caches and the current sandbox."""

    def __init__(self, suite_name: str, config: ProgramConfig):
        self.suite_name = suite_name
        self.lifecycle = ProgramLifecycle(config)
        self.resolver = ComponentResolver(self.lifecycle)
        self.stubs = StubCache(self.resolver)
        self.spies = SpyCache(self.resolver, self.stubs)
        self.sandbox: Sandbox | None = None
        self.arguments = TestArguments(self)

    def effective_component(self, key: str) -> Any:
        """The component as tests see it: spy, else stub, else the live instance."""
        component = self.resolver.resolve(key)
        stub = self.stubs.cached(key)
        if stub is not None:
            component = stub
        spy = self.spies.cached(key)
        if spy is not None:
            component = spy
        return component

    async def one_time_setup(self) -> None:
        # modules written to disk by earlier suites must be importable by this one
        importlib.invalidate_caches()
        logger.info("Starting suite program", suite=self.suite_name)
        try:
            await self.lifecycle.start()
        except Exception as e:
            raise SuiteSetupError(self.suite_name, self.lifecycle.stage or "setup") from e

    def per_test_setup(self) -> None:
        # a sandbox still open here belongs to a test whose teardown never ran
        self.per_test_teardown()
        self.sandbox = Sandbox()
        self.stubs.reset_behavior()
        self.spies.clear()

    def per_test_teardown(self) -> None:
        sandbox, self.sandbox = self.sandbox, None
        if sandbox is not None:
            sandbox.restore()

    async def one_time_teardown(self) -> None:
        logger.info("Stopping suite program", suite=self.suite_name)
        await self.lifecycle.stop()


def _class_name(name: str, body: SuiteBody) -> str:
    body_name = getattr(body, "__name__", "")
    if body_name.startswith("Test"):
        return body_name
    words = re.findall(r"[A-Za-z0-9]+", name)
    return "Test" + "".join(word[:1].upper() + word[1:] for word in words)


def create_runner(
    config: ProgramConfig,
    *,
    hooks: str | HookAdapter | None = None,
    settings: HarnessSettings | None = None,
):
    """Create a suite declaration function for programs built from config.

    The hook adapter is resolved here, so an unusable framework name fails when
    the test module is imported rather than when a suite runs.

    Returns:
        ``test(name, body)``, which declares a suite and returns its test
        class. ``test(name)`` returns a decorator doing the same with the
        decorated function as body.
    """
    settings = settings or get_settings()
    adapter = hooks if isinstance(hooks, HookAdapter) else get_hook_adapter(hooks or settings.hooks)

    def declare(name: str, body: SuiteBody) -> type:
        harness = ComponentHarness(name, config)

        def declare_suite() -> None:
            before_all(harness.one_time_setup)
            before_each(harness.per_test_setup)
            after_each(harness.per_test_teardown)
            body(harness.arguments)
            after_all(harness.one_time_teardown)

        test_class = adapter.describe(
            name,
            declare_suite,
            class_name=_class_name(name, body),
            module=getattr(body, "__module__", None),
        )
        test_class.harness = harness
        return test_class

    def test(name: str, body: SuiteBody | None = None):
        if body is None:
            return lambda body: declare(name, body)
        return declare(name, body)

    # test modules bind this as ``test``, which pytest would otherwise collect
    test.__test__ = False
    return test
