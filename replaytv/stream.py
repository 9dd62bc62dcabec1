"""Cancellable stream of shows produced by a background task."""

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable

from replaytv.models import Show

log = logging.getLogger(__name__)

Emit = Callable[[Show], Awaitable[None]]

_DONE = object()


class ShowStream:
    """Async iterator over the shows emitted by a producer coroutine.

    The producer runs in its own task and hands shows over through a
    one-slot queue, so it waits while the consumer is busy and emission
    order is preserved. The stream ends exactly once, when the producer
    returns or fails. A failure doesn't propagate to the consumer: it is
    logged and kept in :attr:`error`, the stream just ends early.

    Consumers that stop reading before the end must call :meth:`aclose`
    (or use ``async with``) so the producer task is cancelled.
    """

    def __init__(self, producer: Callable[[Emit], Awaitable[None]], name: str = ""):
        self.name = name
        self.error: BaseException | None = None
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=1)
        self._closed = False
        self._task = asyncio.get_running_loop().create_task(self._run(producer))

    async def _run(self, producer: Callable[[Emit], Awaitable[None]]) -> None:
        try:
            await producer(self._queue.put)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self.error = e
            log.error("[%s] %s", self.name, e)
        await self._queue.put(_DONE)

    def __aiter__(self) -> AsyncIterator[Show]:
        return self

    async def __anext__(self) -> Show:
        if self._closed:
            raise StopAsyncIteration
        item = await self._queue.get()
        if item is _DONE:
            self._closed = True
            await self._task
            raise StopAsyncIteration
        return item

    @property
    def closed(self) -> bool:
        return self._closed

    async def aclose(self) -> None:
        """Stop the producer and end the stream."""
        self._closed = True
        if not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                # only swallow the cancellation of the producer task
                current = asyncio.current_task()
                if current is not None and current.cancelling():
                    raise

    async def collect(self) -> list[Show]:
        """Drain the stream into a list."""
        return [show async for show in self]

    async def __aenter__(self) -> "ShowStream":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()
