"""
MockDelay - the artificial "thinking" pause the assistant takes before it
answers. Nothing real happens during the delay; it only exists so the demo
feels like a model is working.
"""

import asyncio
import logging
from typing import Optional

logger = logging.getLogger(__name__)


class DelayCancelled(Exception):
    pass


class MockDelay:
    """
    A one-shot cancellable timer.

    Usage:
        delay = MockDelay(1.2)
        await delay.wait()      # returns after 1.2s
        delay.cancel()          # from elsewhere: wait() raises DelayCancelled

    A delay of 0 (or less) resolves on the next loop iteration.
    """

    def __init__(self, seconds: float):
        self.seconds = max(0.0, float(seconds))
        self._task: Optional[asyncio.Task] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._cancelled = False

    @property
    def done(self) -> bool:
        return self._task is not None and self._task.done()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    async def wait(self):
        if self._task is not None:
            raise RuntimeError("MockDelay can only be awaited once")
        if self._cancelled:
            raise DelayCancelled()
        self._loop = asyncio.get_running_loop()
        self._task = asyncio.ensure_future(asyncio.sleep(self.seconds))
        logger.debug("Waiting %.2fs", self.seconds)
        try:
            await self._task
        except asyncio.CancelledError:
            if self._cancelled:
                raise DelayCancelled()
            raise

    def cancel(self):
        """
        Cancel a pending delay. No-op once it has resolved.
        Safe to call from a thread other than the one running the loop.
        """
        if self.done:
            return
        self._cancelled = True
        if self._task is not None:
            self._loop.call_soon_threadsafe(self._task.cancel)
