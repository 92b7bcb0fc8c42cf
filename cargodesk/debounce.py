"""
CargoDesk - Debounce Scheduling

Cancellable scheduled callbacks. A Scheduler hands out an id for every
scheduled callback and cancels by that id; Debouncer builds on it so that a
burst of triggers collapses into a single call carrying the last value.
"""

import itertools
import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)


class Scheduler(ABC):
    """Schedules callbacks after a delay and cancels them by id"""

    @abstractmethod
    def Schedule(self, delay_ms: int, callback: Callable[[], None]) -> int:
        """
        Schedule a callback

        Args:
            delay_ms: Delay in milliseconds
            callback: Function to call once the delay has elapsed

        Returns:
            Timer id for Cancel
        """

    @abstractmethod
    def Cancel(self, timer_id: int) -> bool:
        """
        Cancel a scheduled callback

        Args:
            timer_id: Id returned by Schedule

        Returns:
            True if a pending callback was cancelled
        """


class ThreadingScheduler(Scheduler):
    """Scheduler backed by threading.Timer"""

    def __init__(self):
        self._timers: Dict[int, threading.Timer] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def Schedule(self, delay_ms: int, callback: Callable[[], None]) -> int:
        timer_id = next(self._ids)

        def Fire():
            with self._lock:
                if self._timers.pop(timer_id, None) is None:
                    return
            callback()

        timer = threading.Timer(delay_ms / 1000.0, Fire)
        timer.daemon = True
        with self._lock:
            self._timers[timer_id] = timer
        timer.start()
        return timer_id

    def Cancel(self, timer_id: int) -> bool:
        with self._lock:
            timer = self._timers.pop(timer_id, None)
        if timer is None:
            return False
        timer.cancel()
        return True


class Debouncer:
    """
    Collapses bursts of triggers into one callback

    Every Trigger cancels the pending timer before scheduling a new one, so
    at most one timer is pending at any time and the callback receives the
    value of the last trigger.
    """

    def __init__(self, scheduler: Scheduler, delay_ms: int, callback: Callable[[Any], None]):
        """
        Args:
            scheduler: Scheduler providing the timers
            delay_ms: Quiet period before the callback fires
            callback: Called with the last triggered value
        """
        self.scheduler = scheduler
        self.delay_ms = delay_ms
        self.callback = callback
        self._pending_id: Optional[int] = None
        self._lock = threading.Lock()

    @property
    def Pending(self) -> bool:
        return self._pending_id is not None

    def Trigger(self, value: Any) -> None:
        """Restart the quiet period with a new value"""
        with self._lock:
            if self._pending_id is not None:
                self.scheduler.Cancel(self._pending_id)

            timer_id = None

            def Fire():
                with self._lock:
                    if self._pending_id != timer_id:
                        return
                    self._pending_id = None
                self.callback(value)

            timer_id = self.scheduler.Schedule(self.delay_ms, Fire)
            self._pending_id = timer_id

    def Cancel(self) -> bool:
        """Drop the pending callback without firing it"""
        with self._lock:
            if self._pending_id is None:
                return False
            self.scheduler.Cancel(self._pending_id)
            self._pending_id = None
            return True
