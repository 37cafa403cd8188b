"""Ownership of the one program instance a suite runs against."""

from . import lifecycle
from .exceptions import HarnessStateError
from .lifecycle import ComponentBasedProgram, ProgramConfig, maybe_await
from .logger import get_logger
from .suite import Hook

logger = get_logger(__name__)


class ProgramLifecycle:
    """Runs pre-start callbacks, starts the program and stops it again."""

    def __init__(self, config: ProgramConfig):
        self.config = config
        self.program: ComponentBasedProgram | None = None
        self._pre_start: list[Hook] = []
        self._drained = False
        self.stage: str | None = None

    def register_pre_start(self, callback: Hook) -> Hook:
        """Queue a callback to run before the program is constructed."""
        if self._drained:
            raise HarnessStateError("before_start callbacks must be registered before the program starts")
        self._pre_start.append(callback)
        return callback

    async def start(self) -> ComponentBasedProgram:
        """Reset module-level state, run every pre-start callback in registration order, then start the program.

        Each callback is awaited before the next one runs, so later callbacks
        can depend on side effects of earlier ones.
        """
        if self._drained:
            raise HarnessStateError("The program lifecycle can only be started once")
        self._drained = True

        if self.config.reset_state is not None:
            self.stage = "reset"
            logger.debug("Resetting module-level state")
            await maybe_await(self.config.reset_state())

        self.stage = "before_start"
        for index, callback in enumerate(self._pre_start):
            logger.debug("Running before_start callback", index=index, total=len(self._pre_start))
            await maybe_await(callback())

        self.stage = "program start"
        program = await lifecycle.run(self.config)
        self.program = program
        self.stage = None
        logger.info("Program started", components=sorted(program.components))
        return program

    async def stop(self) -> None:
        """Stop the program if one was started. A no-op otherwise."""
        if self.program is None:
            logger.debug("No program to stop")
            return

        program, self.program = self.program, None
        await program.stop()
        logger.info("Program stopped")
