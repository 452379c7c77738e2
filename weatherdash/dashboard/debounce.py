"""Single-slot debounce timer for search-as-you-type."""

import asyncio
from typing import Any, Awaitable, Callable, Optional


class Debouncer:
    """
    Run `callback` only after `delay` seconds pass without another `trigger`.

    Each trigger cancels whatever is pending, including a callback that already
    started, so an older keystroke can never publish results after a newer one.
    Must be used from inside a running event loop.
    """

    def __init__(self, delay: float, callback: Callable[..., Awaitable[Any]]) -> None:
        self.delay = delay
        self.callback = callback
        self._task: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def trigger(self, *args: Any) -> None:
        self.cancel()
        self._task = asyncio.get_running_loop().create_task(self._run(args))

    async def _run(self, args: tuple) -> None:
        await asyncio.sleep(self.delay)
        await self.callback(*args)

    def cancel(self) -> None:
        if self.pending:
            self._task.cancel()
        self._task = None

    async def wait(self) -> None:
        """Wait for the pending callback, if any, to finish."""
        task = self._task
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            if not task.cancelled():
                raise
