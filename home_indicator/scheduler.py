# scheduler.py
import asyncio
import logging
from typing import Any, Callable, Optional

logger = logging.getLogger("home_indicator.scheduler")

TickCallback = Callable[[], Any]


class SchedulerHandle:
    """Token for one recurring timer. Invalid once stopped."""

    def __init__(self, interval: float, on_tick: TickCallback, started_at: float):
        self.interval = interval
        self.on_tick = on_tick
        self.started_at = started_at
        self.ticks = 0
        self._slot = 0
        self._timer: Optional[asyncio.TimerHandle] = None
        self._stopped = False

    @property
    def active(self) -> bool:
        return not self._stopped

    def _cancel(self) -> None:
        self._stopped = True
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None


class RefreshScheduler:
    """Repeating timer on the event loop.

    The callback returns ``False`` to cancel itself; any
    other value keeps the timer running. The timer does not fire on start;
    callers that want an immediate update trigger it themselves.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def start(self, interval: float, on_tick: TickCallback) -> SchedulerHandle:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval!r}")
        handle = SchedulerHandle(interval, on_tick, self.loop.time())
        self._arm(handle)
        return handle

    def stop(self, handle: SchedulerHandle) -> None:
        handle._cancel()

    def _arm(self, handle: SchedulerHandle) -> None:
        # Fixed grid from the start time, so slow callbacks don't drift the schedule.
        # Slots already in the past after a stall are skipped, not replayed.
        elapsed = self.loop.time() - handle.started_at
        handle._slot = max(handle._slot, int(elapsed // handle.interval)) + 1
        when = handle.started_at + handle._slot * handle.interval
        handle._timer = self.loop.call_at(when, self._fire, handle)

    def _fire(self, handle: SchedulerHandle) -> None:
        handle._timer = None
        if handle._stopped:
            return
        handle.ticks += 1
        try:
            keep_going = handle.on_tick()
        except Exception:
            logger.exception("refresh tick failed")
            keep_going = True
        if keep_going is False:
            logger.debug("timer cancelled itself after %d ticks", handle.ticks)
            handle._cancel()
            return
        # on_tick may have stopped the handle itself.
        if not handle._stopped:
            self._arm(handle)
