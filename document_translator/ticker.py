"""Elapsed-time counter and rotating status messages shown while translating.

Purely presentational: nothing here feeds back into the workflow state, and
a ticker that fails or never starts leaves the translation untouched.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

logger = logging.getLogger(__name__)


def format_elapsed(seconds: int) -> str:
    """Format a second count as MM:SS."""
    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{secs:02d}"


def status_steps(base_steps: Sequence[str], anonymize: bool, anonymize_step: str) -> list[str]:
    steps = list(base_steps)
    if anonymize:
        steps.append(anonymize_step)
    return steps


class ProgressTicker:
    """Single asyncio task advancing ``elapsed`` and cycling ``message``.

    ``elapsed`` grows by one every *tick_seconds*; the status message moves to
    the next step every *step_ticks* ticks and wraps around. ``start`` always
    begins from zero and replaces any running task; ``stop`` cancels the task
    and clears the counters.
    """

    def __init__(self, tick_seconds: float = 1.0, step_ticks: int = 3):
        self.tick_seconds = tick_seconds
        self.step_ticks = max(1, step_ticks)
        self.elapsed = 0
        self.message = ""
        self._steps: list[str] = []
        self._step_index = 0
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def elapsed_display(self) -> str:
        return format_elapsed(self.elapsed)

    def start(self, steps: Sequence[str]) -> None:
        self.stop()
        self._steps = list(steps)
        self._step_index = 0
        self.message = self._steps[0] if self._steps else ""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop; progress ticker not started")
            return
        self._task = loop.create_task(self._run())

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None
        self.elapsed = 0
        self.message = ""
        self._steps = []
        self._step_index = 0

    def _advance(self) -> None:
        self.elapsed += 1
        if self._steps and self.elapsed % self.step_ticks == 0:
            self._step_index = (self._step_index + 1) % len(self._steps)
            self.message = self._steps[self._step_index]

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.tick_seconds)
            self._advance()
