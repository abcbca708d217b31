"""
Per-room actor: one mailbox, one consumer task, strictly sequential handling.
"""

import asyncio
import logging
from typing import Any, Callable, Optional

from .clock import ScheduledCall

logger = logging.getLogger(__name__)

_STOP = object()


class RoomActor:
    """
    Runs everything that touches a room through a single asyncio queue.

    Inbound messages, attaches, detaches and timer expiries are all posted as
    callables and executed one at a time by the consumer task, so the room
    itself never needs a lock.
    """

    def __init__(self, room_id: str):
        self.room_id = room_id
        self.room = None
        self.mailbox: asyncio.Queue = asyncio.Queue()
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def pending(self) -> int:
        """Work items waiting in the mailbox."""
        return self.mailbox.qsize()

    def start(self) -> None:
        if not self.running:
            self._task = asyncio.get_running_loop().create_task(self._run())

    def post(self, fn: Callable[[], Any]) -> None:
        """Queue ``fn`` without waiting for it."""
        self.mailbox.put_nowait((fn, None))

    def submit(self, fn: Callable[[], Any]) -> asyncio.Future:
        """Queue ``fn`` and return a future resolved with its result."""
        future = asyncio.get_running_loop().create_future()
        if not self.running:
            future.set_exception(RuntimeError(f"Room {self.room_id} actor stopped"))
            return future
        self.mailbox.put_nowait((fn, future))
        return future

    async def stop(self) -> None:
        """Drain the work queued so far, then end the consumer task."""
        if not self.running:
            return
        self.mailbox.put_nowait((_STOP, None))
        await self._task

    async def _run(self) -> None:
        while True:
            fn, future = await self.mailbox.get()
            if fn is _STOP:
                self._fail_waiting()
                return
            try:
                result = fn()
            except Exception as e:
                logger.exception(f"Room {self.room_id} task failed")
                if future is not None and not future.done():
                    future.set_exception(e)
                continue
            if future is not None and not future.done():
                future.set_result(result)

    def _fail_waiting(self) -> None:
        # Work queued behind the stop marker never runs
        while not self.mailbox.empty():
            _, future = self.mailbox.get_nowait()
            if future is not None and not future.done():
                future.set_exception(RuntimeError(f"Room {self.room_id} actor stopped"))


class LoopCall(ScheduledCall):
    """A scheduled call backed by an event loop timer."""

    def __init__(self, callback: Callable[[], None]):
        super().__init__(callback)
        self.timer: Optional[asyncio.TimerHandle] = None

    def cancel(self) -> None:
        super().cancel()
        if self.timer is not None:
            self.timer.cancel()


class MailboxScheduler:
    """
    Schedules delayed calls on the event loop and runs them inside the actor.

    A timer never touches the room directly; on expiry it posts the callback
    into the mailbox behind whatever was already queued.
    """

    def __init__(self, actor: RoomActor):
        self.actor = actor

    def call_later(self, delay: float, callback: Callable[[], None]) -> LoopCall:
        handle = LoopCall(callback)

        def expire():
            if not handle.cancelled:
                self.actor.post(callback)

        handle.timer = asyncio.get_running_loop().call_later(delay, expire)
        return handle
