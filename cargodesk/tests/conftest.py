"""
Shared fixtures for CargoDesk tests
"""

import sys
from pathlib import Path

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from cargodesk import admin_sessions
from cargodesk.debounce import Scheduler


class ManualScheduler(Scheduler):
    """Scheduler driven by Advance() instead of wall-clock time"""

    def __init__(self):
        self.now = 0
        self.timers = {}
        self._next_id = 1

    def Schedule(self, delay_ms, callback):
        timer_id = self._next_id
        self._next_id += 1
        self.timers[timer_id] = (self.now + delay_ms, callback)
        return timer_id

    def Cancel(self, timer_id):
        return self.timers.pop(timer_id, None) is not None

    def Advance(self, ms):
        self.now += ms
        due = sorted(
            ((timer_id, when) for timer_id, (when, _) in self.timers.items() if when <= self.now),
            key=lambda pair: pair[1]
        )
        for timer_id, _ in due:
            entry = self.timers.pop(timer_id, None)
            if entry is not None:
                entry[1]()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture(autouse=True)
def clear_sessions():
    """Every test starts with an empty session store"""
    with admin_sessions._sessions_lock:
        admin_sessions._sessions.clear()
    yield
    with admin_sessions._sessions_lock:
        admin_sessions._sessions.clear()
