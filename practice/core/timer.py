import asyncio
import logging
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)


class Countdown:
    """
    One-second countdown driving the question phase.

    The owner decides when it runs: start() launches a fresh generation and
    stop() cancels it before returning. A callback from an older generation
    is never invoked, even if its task was already scheduled to resume.
    """

    def __init__(self, on_tick: Callable[[], Awaitable[None]], interval: float = 1.0):
        self._on_tick = on_tick
        self._interval = interval
        self._task: asyncio.Task | None = None
        self._generation = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def generation(self) -> int:
        return self._generation

    def start(self) -> None:
        self.stop()
        self._generation += 1
        self._task = asyncio.get_running_loop().create_task(self._run(self._generation))
        logger.debug(f"Countdown started (generation {self._generation})")

    def stop(self) -> None:
        # bumping the generation makes any in-flight _run exit before its next callback
        self._generation += 1
        task, self._task = self._task, None
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()
            logger.debug("Countdown cancelled")

    async def _run(self, generation: int) -> None:
        while generation == self._generation:
            await asyncio.sleep(self._interval)
            if generation != self._generation:
                return
            await self._on_tick()
