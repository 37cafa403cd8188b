"""Custom exceptions for the component test harness."""


class HarnessError(Exception):
    """Base exception for test harness operations."""

    pass


class ConfigurationError(HarnessError):
    """Raised when the harness cannot be bound to a test framework."""

    pass


class NotInitializedError(HarnessError):
    """Raised when components are accessed before the test program exists."""

    def __init__(self, message: str = "Cannot get the components before the test program is initialized") -> None:
        super().__init__(message)


class UnknownComponentError(HarnessError, AttributeError):
    """Raised when a component key is not part of the program's component set."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Component {key} does not exist")
        self.key = key


class SuiteSetupError(HarnessError):
    """Raised when a pre-start callback or the program start fails.

    The original exception is available as ``__cause__``.
    """

    def __init__(self, suite_name: str, stage: str) -> None:
        super().__init__(f"Suite '{suite_name}' failed during {stage}")
        self.suite_name = suite_name
        self.stage = stage


class HarnessStateError(HarnessError):
    """Raised when a harness operation is used at the wrong point of the suite lifecycle."""

    pass
