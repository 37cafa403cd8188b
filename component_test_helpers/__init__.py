"""Test helpers for component-based programs.

Binds a program's lifecycle to a test suite and gives test bodies lazy
access to its live components, plus stub and spy views of the same
components.

Usage:
    from component_test_helpers import ProgramConfig, create_runner, it

    test = create_runner(ProgramConfig(init_components=init_components))

    @test("counter")
    def TestCounter(args):
        @it("increments")
        def _():
            assert args.components.counter.increment() == 1
"""

from .exceptions import (
    ConfigurationError,
    HarnessError,
    HarnessStateError,
    NotInitializedError,
    SuiteSetupError,
    UnknownComponentError,
)
from .hooks import HookAdapter, PytestHooks, UnittestHooks, get_hook_adapter
from .lifecycle import ComponentBasedProgram, ProgramConfig
from .local_fetch import LocalFetch, PortAllocator, create_local_fetch_component, default_server_config
from .runner import TestArguments, create_runner
from .sandbox import Sandbox
from .spies import ComponentSpy
from .stubs import ComponentStub
from .suite import after_all, after_each, before_all, before_each, it

__all__ = [
    # Runner
    "create_runner",
    "ProgramConfig",
    "ComponentBasedProgram",
    "TestArguments",
    "it",
    "before_all",
    "after_all",
    "before_each",
    "after_each",
    # Hook adapters
    "HookAdapter",
    "PytestHooks",
    "UnittestHooks",
    "get_hook_adapter",
    # Mocks
    "ComponentStub",
    "ComponentSpy",
    "Sandbox",
    # Local fetch
    "LocalFetch",
    "PortAllocator",
    "create_local_fetch_component",
    "default_server_config",
    # Exceptions
    "ConfigurationError",
    "HarnessError",
    "HarnessStateError",
    "NotInitializedError",
    "SuiteSetupError",
    "UnknownComponentError",
]
