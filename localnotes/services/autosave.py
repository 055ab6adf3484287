"""
Autosave Timer.

Optional background task that periodically saves the session draft when
it has unsaved changes. Each tick calls SessionController.autosave(),
which is a no-op unless the session is dirty.

Usage:
    timer = AutosaveTimer(controller, interval_seconds=5)
    timer.start()      # requires a running event loop
    ...
    await timer.stop()
"""

import asyncio

from localnotes.core.exceptions import ValidationError
from localnotes.core.logging import get_logger
from localnotes.services.session import SessionController

logger = get_logger(__name__)

MIN_INTERVAL_SECONDS = 1.0


class AutosaveTimer:
    """Fixed-interval autosave loop bound to one controller."""

    def __init__(self, controller: SessionController, interval_seconds: float) -> None:
        if interval_seconds < MIN_INTERVAL_SECONDS:
            raise ValidationError(
                "Autosave interval too short",
                details={"interval_seconds": f"Minimum is {MIN_INTERVAL_SECONDS}"},
            )
        self._controller = controller
        self.interval_seconds = interval_seconds
        self._task: asyncio.Task[None] | None = None
        self.saves = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start ticking on the running event loop. Calling twice is harmless."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.debug("Autosave started", extra={"interval_seconds": self.interval_seconds})

    async def stop(self) -> None:
        """Cancel the loop and wait for it to finish. Calling twice is harmless."""
        task = self._task
        self._task = None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.debug("Autosave stopped", extra={"saves": self.saves})

    def tick(self) -> bool:
        """
        Run one autosave check.

        Returns:
            True if a note was saved
        """
        note = self._controller.autosave()
        if note is None:
            return False
        self.saves += 1
        return True

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            self.tick()
