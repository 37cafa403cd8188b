from contextlib import ExitStack
from typing import Any
from unittest.mock import patch


class Sandbox:
    """Patches applied during a single test, undone when the test finishes.

    Usage:
        def test_body():
            sandbox.patch_object(components.database, "query", return_value=[])
    """

    def __init__(self):
        self._stack = ExitStack()

    def patch(self, target: str, *args: Any, **kwargs: Any) -> Any:
        """Apply ``unittest.mock.patch(target, ...)`` until the test ends."""
        return self._stack.enter_context(patch(target, *args, **kwargs))

    def patch_object(self, target: Any, attribute: str, *args: Any, **kwargs: Any) -> Any:
        """Apply ``unittest.mock.patch.object(target, attribute, ...)`` until the test ends."""
        return self._stack.enter_context(patch.object(target, attribute, *args, **kwargs))

    def patch_dict(self, in_dict: Any, values: Any = (), clear: bool = False, **kwargs: Any) -> Any:
        """Apply ``unittest.mock.patch.dict`` until the test ends."""
        return self._stack.enter_context(patch.dict(in_dict, values, clear=clear, **kwargs))

    def restore(self) -> None:
        """Undo every patch in reverse order."""
        self._stack.close()
