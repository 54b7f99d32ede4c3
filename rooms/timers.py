"""
RoundTimer - fire-once, cancelable phase timers for a room.

A timer callback runs under the room's lock and only if the timer is still
the current one and the room is still in the phase it was scheduled for.
A timer that fires while a cancellation is in progress therefore does
nothing.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional

from infra.logger import get_logger

log = get_logger(__name__)

Guard = Callable[[], bool]
Callback = Callable[[], Awaitable[None]]


class RoundTimer:
    """
    One pending timer at a time, owned by a single room.

    Attributes:
        generation: Bumped on every schedule() and cancel(); a firing timer
            compares against it to detect that it has been superseded.
    """

    def __init__(self, lock: asyncio.Lock, name: str = "room"):
        self._lock = lock
        self._name = name
        self._task: Optional[asyncio.Task] = None
        self.generation = 0

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def schedule(self, delay_ms: int, guard: Guard, callback: Callback) -> int:
        """
        Replace any pending timer with a new one.

        Args:
            delay_ms: Milliseconds to wait
            guard: Checked under the lock at fire time; False means stale
            callback: Awaited under the lock if the guard passes

        Returns:
            The generation number of the new timer
        """
        self.cancel()
        generation = self.generation
        self._task = asyncio.create_task(
            self._run(generation, delay_ms, guard, callback),
            name=f"{self._name}-timer-{generation}",
        )
        return generation

    def cancel(self) -> None:
        """Invalidate the pending timer. Safe to call from inside its own callback."""
        self.generation += 1
        task = self._task
        self._task = None
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

    async def _run(self, generation: int, delay_ms: int, guard: Guard, callback: Callback) -> None:
        await asyncio.sleep(delay_ms / 1000)
        async with self._lock:
            if generation != self.generation or not guard():
                log.debug("%s timer %d is stale; ignoring", self._name, generation)
                return
            self._task = None
            try:
                await callback()
            except Exception:
                log.exception("%s timer %d callback failed", self._name, generation)
