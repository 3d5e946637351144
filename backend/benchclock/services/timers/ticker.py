"""Periodic tick sources.

A tick source schedules a recurring callback and hands back an opaque
``TickHandle``; cancelling the handle stops further firings. The callback
receives the handle it was scheduled under so the owner can tell a live
subscription from a stale one.
"""

import itertools
from threading import Lock
from typing import Callable, Dict, List, Optional


_handle_ids = itertools.count(1)


class TickHandle:
    """Opaque ownership token for one periodic subscription."""

    __slots__ = ('id', 'period', 'cancelled')

    def __init__(self, period: float):
        self.id = next(_handle_ids)
        self.period = period
        self.cancelled = False

    def __repr__(self):
        state = 'cancelled' if self.cancelled else 'live'
        return f"<TickHandle {self.id} {state}>"


TickCallback = Callable[[TickHandle], None]


class SocketIOTickSource:
    """Runs one Socket.IO background task per subscription.

    ``socketio.sleep`` keeps the loop cooperative under eventlet/gevent and
    falls back to ``time.sleep`` in threading mode.
    """

    def __init__(self, socketio):
        self._socketio = socketio

    def schedule(self, callback: TickCallback, period: float) -> TickHandle:
        handle = TickHandle(period)

        def _worker(h: TickHandle):
            while not h.cancelled:
                self._socketio.sleep(h.period)
                if h.cancelled:
                    break
                callback(h)

        self._socketio.start_background_task(_worker, handle)
        return handle

    def cancel(self, handle: Optional[TickHandle]) -> None:
        if handle is not None:
            handle.cancelled = True


class ManualTickSource:
    """Tick source driven by the caller; used when the app runs in TESTING mode.

    ``fire`` invokes a subscription's callback even after it was cancelled,
    which mimics a platform timer delivering a stale firing. A cancelled
    subscription is forgotten once that stale firing has been replayed, or
    by ``prune``.
    """

    def __init__(self):
        self._lock = Lock()
        self._callbacks: Dict[int, TickCallback] = {}
        self._handles: Dict[int, TickHandle] = {}

    def __len__(self):
        return len(self._handles)

    def schedule(self, callback: TickCallback, period: float) -> TickHandle:
        handle = TickHandle(period)
        with self._lock:
            self._callbacks[handle.id] = callback
            self._handles[handle.id] = handle
        return handle

    def cancel(self, handle: Optional[TickHandle]) -> None:
        if handle is not None:
            handle.cancelled = True

    @property
    def active_handles(self) -> List[TickHandle]:
        with self._lock:
            return [h for h in self._handles.values() if not h.cancelled]

    def fire(self, handle: TickHandle, times: int = 1) -> None:
        with self._lock:
            callback = self._callbacks.get(handle.id)
        if callback is None:
            return
        for _ in range(times):
            callback(handle)
        if handle.cancelled:
            self._forget(handle.id)

    def fire_all(self, times: int = 1) -> None:
        """Fire every live subscription ``times`` times, in subscription order."""
        for _ in range(times):
            for handle in self.active_handles:
                self.fire(handle)

    def prune(self) -> None:
        """Drop every cancelled subscription."""
        with self._lock:
            stale = [hid for hid, h in self._handles.items() if h.cancelled]
        for hid in stale:
            self._forget(hid)

    def _forget(self, handle_id: int) -> None:
        with self._lock:
            self._callbacks.pop(handle_id, None)
            self._handles.pop(handle_id, None)
