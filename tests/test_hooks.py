"""Tests for hook adapters and suite declaration."""

import io
import unittest

import pytest

from component_test_helpers import create_runner
from component_test_helpers.exceptions import ConfigurationError, HarnessStateError
from component_test_helpers.hooks import HookAdapter, HookNames, PytestHooks, UnittestHooks, get_hook_adapter
from component_test_helpers.suite import after_all, after_each, before_all, before_each, describe, it

from .factories import counter_program


def _run_unittest(test_class: type) -> unittest.TestResult:
    suite = unittest.defaultTestLoader.loadTestsFromTestCase(test_class)
    return unittest.TextTestRunner(stream=io.StringIO(), verbosity=0).run(suite)


class TestGetHookAdapter:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("pytest", PytestHooks),
            ("py.test", PytestHooks),
            ("PyTest", PytestHooks),
            ("unittest", UnittestHooks),
            ("xunit", UnittestHooks),
        ],
    )
    def test_known_names(self, name, expected):
        assert isinstance(get_hook_adapter(name), expected)

    def test_unknown_name_raises(self):
        with pytest.raises(ConfigurationError, match="No hook adapter named 'jest'"):
            get_hook_adapter("jest")

    def test_create_runner_fails_fast_on_unknown_adapter(self):
        with pytest.raises(ConfigurationError):
            create_runner(counter_program(), hooks="mocha")

    def test_adapter_without_hook_names(self):
        class NoHooks(HookAdapter):
            name = "none"

        with pytest.raises(ConfigurationError, match="does not define"):
            NoHooks()

    def test_adapter_with_colliding_hook_names(self):
        class Colliding(HookAdapter):
            name = "colliding"
            hook_names = HookNames("setup", "teardown", "setup", "teardown_each")

        with pytest.raises(ConfigurationError, match="same name"):
            Colliding()

    def test_adapter_with_invalid_hook_name(self):
        class Invalid(HookAdapter):
            name = "invalid"
            hook_names = HookNames("setup class", "teardown", "before", "after")

        with pytest.raises(ConfigurationError, match="invalid hook name"):
            Invalid()


class TestSuiteDeclaration:
    def test_it_outside_a_suite_raises(self):
        with pytest.raises(HarnessStateError):
            it("orphan", lambda: None)

    def test_registrations_collect_into_definition(self):
        with describe("collected") as definition:
            before_all(lambda: None)
            it("first", lambda: None)

            @it("second")
            def _():
                pass

        assert definition.name == "collected"
        assert len(definition.before_all) == 1
        assert [case.name for case in definition.tests] == ["first", "second"]

    def test_method_names_are_unique_identifiers(self):
        with describe("names") as definition:
            it("does a thing!", lambda: None)
            it("does a thing?", lambda: None)
            it("???", lambda: None)

        assert [name for name, _ in definition.method_names()] == [
            "test_does_a_thing",
            "test_does_a_thing_2",
            "test_case",
        ]


class TestPytestHooks:
    def test_materialized_class_uses_xunit_hook_names(self):
        def body():
            it("works", lambda: None)

        test_class = PytestHooks().describe("xunit suite", body, class_name="TestXunitSuite", module=__name__)

        assert test_class.__name__ == "TestXunitSuite"
        assert test_class.__module__ == __name__
        assert test_class.__doc__ == "xunit suite"
        for hook in ("setup_class", "teardown_class", "setup_method", "teardown_method", "test_works"):
            assert callable(getattr(test_class, hook))

    def test_hooks_drive_the_execution(self):
        events: list[str] = []

        def body():
            before_all(lambda: events.append("before_all"))
            before_each(lambda: events.append("before_each"))
            after_each(lambda: events.append("after_each"))
            after_all(lambda: events.append("after_all"))

            @it("async case")
            async def _():
                events.append("test")

        test_class = PytestHooks().describe("driven", body, class_name="TestDriven")
        instance = test_class()

        test_class.setup_class()
        instance.setup_method(test_class.test_async_case)
        instance.test_async_case()
        instance.teardown_method(test_class.test_async_case)
        test_class.teardown_class()

        assert events == ["before_all", "before_each", "test", "after_each", "after_all"]
        assert not test_class.suite_execution.running

    def test_failed_setup_closes_the_loop(self):
        def body():
            before_all(lambda: 1 / 0)

        test_class = PytestHooks().describe("failing", body, class_name="TestFailing")

        with pytest.raises(ZeroDivisionError):
            test_class.setup_class()

        assert not test_class.suite_execution.running
        test_class.teardown_class()

    def test_failing_after_all_runs_remaining_hooks(self):
        events: list[str] = []

        def body():
            after_all(lambda: 1 / 0)
            after_all(lambda: events.append("second after_all"))

        test_class = PytestHooks().describe("after all", body, class_name="TestAfterAll")
        test_class.setup_class()

        with pytest.raises(ZeroDivisionError):
            test_class.teardown_class()

        assert events == ["second after_all"]
        assert not test_class.suite_execution.running

    def test_failing_after_each_runs_remaining_hooks(self):
        events: list[str] = []

        def body():
            after_each(lambda: events.append("first"))
            after_each(lambda: 1 / 0)
            after_each(lambda: events.append("third"))

        test_class = PytestHooks().describe("after each", body, class_name="TestAfterEach")

        with pytest.raises(ZeroDivisionError):
            test_class().teardown_method(None)

        assert events == ["first", "third"]

    def test_failing_before_each_runs_after_each_hooks(self):
        events: list[str] = []

        def failing_before_each():
            events.append("before_each")
            raise RuntimeError("before_each failed")

        def failing_after_each():
            events.append("failing after_each")
            raise ValueError("after_each failed")

        def body():
            before_each(failing_before_each)
            before_each(lambda: events.append("never"))
            after_each(failing_after_each)
            after_each(lambda: events.append("after_each"))

        test_class = PytestHooks().describe("before each", body, class_name="TestBeforeEach")

        with pytest.raises(RuntimeError, match="before_each failed"):
            test_class().setup_method(None)

        assert events == ["before_each", "failing after_each", "after_each"]

    def test_async_hook_without_setup_raises(self):
        async def hook():
            pass

        def body():
            before_each(hook)

        test_class = PytestHooks().describe("no loop", body, class_name="TestNoLoop")

        with pytest.raises(HarnessStateError):
            test_class().setup_method(None)


class TestUnittestHooks:
    def test_runs_under_unittest(self):
        events: list[str] = []

        def body():
            before_all(lambda: events.append("before_all"))
            before_each(lambda: events.append("before_each"))
            after_each(lambda: events.append("after_each"))
            after_all(lambda: events.append("after_all"))
            it("first", lambda: events.append("first"))

            @it("second")
            async def _():
                events.append("second")

        test_class = UnittestHooks().describe("unittest suite", body, class_name="UnittestSuite")
        result = _run_unittest(test_class)

        assert issubclass(test_class, unittest.TestCase)
        assert result.wasSuccessful()
        assert result.testsRun == 2
        assert events == [
            "before_all",
            "before_each",
            "first",
            "after_each",
            "before_each",
            "second",
            "after_each",
            "after_all",
        ]

    def test_failures_are_reported(self):
        def body():
            @it("fails")
            def _():
                assert 1 == 2

        result = _run_unittest(UnittestHooks().describe("failing", body, class_name="FailingSuite"))

        assert len(result.failures) == 1
