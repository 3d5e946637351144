"""In-memory timer registry: the single owner of every timer mutation.

Each public operation runs under one re-entrant lock, so a tick firing can
never interleave with an operation halfway through. Timers are immutable
values; a transition swaps in a new ``Timer`` for the same id, which keeps
callers from editing fields behind the registry's back.
"""

import logging
import time
from dataclasses import dataclass, replace
from functools import partial
from threading import RLock
from typing import Callable, Dict, Iterable, List, Optional
from uuid import uuid4

from .errors import NotFoundError, PersistenceError, ValidationError
from .ticker import TickHandle


TICK_PERIOD_SEC = 0.1
MAX_NAME_LENGTH = 64


@dataclass(frozen=True)
class Timer:
    id: str
    name: str
    elapsed: float = 0.0
    running: bool = False
    tick_handle: Optional[TickHandle] = None

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'elapsed': self.elapsed,
            'running': self.running,
        }


Listener = Callable[[List[Timer]], None]


class TimerRegistry:
    def __init__(
        self,
        tick_source,
        store=None,
        clock: Callable[[], float] = time.time,
        logger: Optional[logging.Logger] = None,
        tick_period: float = TICK_PERIOD_SEC,
        save_every_ticks: int = 10,
        default_names: Iterable[str] = (),
    ):
        self._ticks = tick_source
        self._store = store
        self._clock = clock
        self._logger = logger or logging.getLogger(__name__)
        self._tick_period = tick_period
        self._save_every_ticks = save_every_ticks
        self._default_names = list(default_names)

        self._lock = RLock()
        self._timers: Dict[str, Timer] = {}
        self._listeners: List[Listener] = []
        self._suspended_at: Optional[float] = None
        self._ticks_since_save = 0
        self._lifecycle = None
        self._lifecycle_token = None
        self._loaded = False
        self._closed = False

    # ---- queries ----

    def __len__(self):
        return len(self._timers)

    def __contains__(self, timer_id):
        return timer_id in self._timers

    def timers(self) -> List[Timer]:
        """Snapshot of every timer in creation order."""
        with self._lock:
            return list(self._timers.values())

    def get(self, timer_id: str) -> Timer:
        with self._lock:
            return self._require(timer_id)

    @property
    def tick_period(self) -> float:
        return self._tick_period

    @property
    def suspended(self) -> bool:
        return self._suspended_at is not None

    # ---- mutations ----

    def add(self, name: str) -> str:
        cleaned = (name or '').strip()
        if not cleaned:
            raise ValidationError('Name cannot be empty')
        if len(cleaned) > MAX_NAME_LENGTH:
            raise ValidationError(f'Name must be at most {MAX_NAME_LENGTH} characters')
        with self._lock:
            self._check_open()
            timer_id = uuid4().hex
            self._timers[timer_id] = Timer(id=timer_id, name=cleaned)
            self._logger.info(f"[timer-add] id={timer_id} name={cleaned!r} total={len(self._timers)}")
            self._changed()
            return timer_id

    def toggle_running(self, timer_id: str) -> Timer:
        with self._lock:
            self._check_open()
            timer = self._require(timer_id)
            if timer.running:
                self._ticks.cancel(timer.tick_handle)
                timer = replace(timer, running=False, tick_handle=None)
                self._logger.info(f"[timer-stop] id={timer_id} elapsed={timer.elapsed:.1f}")
            else:
                timer = replace(timer, running=True, tick_handle=self._subscribe(timer_id))
                self._logger.info(f"[timer-start] id={timer_id} elapsed={timer.elapsed:.1f}")
            self._timers[timer_id] = timer
            self._changed()
            return timer

    def reset_one(self, timer_id: str) -> Timer:
        """Zero one timer. A running timer keeps running."""
        with self._lock:
            self._check_open()
            timer = replace(self._require(timer_id), elapsed=0.0)
            self._timers[timer_id] = timer
            self._logger.info(f"[timer-reset] id={timer_id} running={timer.running}")
            self._changed()
            return timer

    def reset_all(self) -> None:
        """Stop and zero every timer."""
        with self._lock:
            self._check_open()
            for timer_id, timer in list(self._timers.items()):
                if timer.running:
                    self._ticks.cancel(timer.tick_handle)
                self._timers[timer_id] = replace(timer, elapsed=0.0, running=False, tick_handle=None)
            self._logger.info(f"[timer-reset-all] total={len(self._timers)}")
            self._changed()

    def delete(self, timer_id: str) -> None:
        with self._lock:
            self._check_open()
            timer = self._require(timer_id)
            if timer.running:
                self._ticks.cancel(timer.tick_handle)
            del self._timers[timer_id]
            self._logger.info(f"[timer-delete] id={timer_id} name={timer.name!r}")
            self._changed()

    def reconcile_suspend(self) -> None:
        with self._lock:
            if self._suspended_at is not None:
                # Repeated background events: the first timestamp wins
                self._logger.info("[suspend] already suspended, keeping first timestamp")
                return
            self._suspended_at = self._clock()
            self._logger.info(f"[suspend] at={self._suspended_at:.3f}")

    def reconcile_resume(self) -> None:
        """Credit running timers with the wall-clock time spent suspended."""
        with self._lock:
            if self._suspended_at is None:
                return
            delta = max(0.0, self._clock() - self._suspended_at)
            self._suspended_at = None
            credited = 0
            for timer_id, timer in list(self._timers.items()):
                if timer.running:
                    self._timers[timer_id] = replace(timer, elapsed=timer.elapsed + delta)
                    credited += 1
            self._logger.info(f"[resume] delta={delta:.3f}s credited={credited}")
            if not self._closed:
                self._changed()

    # ---- seeding ----

    def seed(self, timers: Iterable[Timer]) -> None:
        """Replace the roster with persisted timers.

        Timers stored as running get a fresh tick subscription; stored
        handles are never trusted.
        """
        with self._lock:
            self._check_open()
            for timer in self._timers.values():
                self._ticks.cancel(timer.tick_handle)
            self._timers = {}
            for timer in timers:
                if timer.id in self._timers:
                    self._logger.warning(f"[timer-load] duplicate id={timer.id} skipped")
                    continue
                handle = self._subscribe(timer.id) if timer.running else None
                self._timers[timer.id] = replace(timer, elapsed=max(0.0, timer.elapsed), tick_handle=handle)
            self._loaded = True

    def persist(self) -> None:
        """Write the current snapshot to the store."""
        with self._lock:
            self._save()

    def ensure_loaded(self) -> None:
        """Seed from the store once; fall back to the default names."""
        with self._lock:
            if self._loaded:
                return
            persisted = None
            if self._store is not None:
                try:
                    persisted = self._store.load()
                except PersistenceError as exc:
                    self._logger.error(f"[timer-load] failed, using defaults: {exc}")
            if persisted:
                self.seed(persisted)
                self._logger.info(f"[timer-load] loaded={len(self._timers)}")
                return
            self.seed(Timer(id=uuid4().hex, name=name) for name in self._default_names)
            self._logger.info(f"[timer-load] seeded defaults={len(self._timers)}")
            if self._timers:
                self._save()

    # ---- collaborators ----

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def attach_lifecycle(self, bus) -> None:
        with self._lock:
            self._detach_lifecycle()
            self._lifecycle = bus
            self._lifecycle_token = bus.subscribe(self.reconcile_suspend, self.reconcile_resume)

    def close(self) -> None:
        """Release every tick subscription and the lifecycle subscription."""
        with self._lock:
            if self._closed:
                return
            for timer in self._timers.values():
                self._ticks.cancel(timer.tick_handle)
            self._detach_lifecycle()
            self._closed = True
            if self._loaded:
                self._save()
            self._logger.info(f"[registry-close] timers={len(self._timers)}")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # ---- internals ----

    def _require(self, timer_id) -> Timer:
        timer = self._timers.get(timer_id)
        if timer is None:
            raise NotFoundError(timer_id)
        return timer

    def _check_open(self):
        if self._closed:
            raise RuntimeError('Timer registry is closed')

    def _subscribe(self, timer_id: str) -> TickHandle:
        return self._ticks.schedule(partial(self._on_tick, timer_id), self._tick_period)

    def _on_tick(self, timer_id: str, handle: TickHandle) -> None:
        with self._lock:
            timer = self._timers.get(timer_id)
            if (
                self._closed
                or self._suspended_at is not None
                or timer is None
                or not timer.running
                or timer.tick_handle is not handle
            ):
                return
            self._timers[timer_id] = replace(timer, elapsed=timer.elapsed + self._tick_period)
            self._notify()
            self._ticks_since_save += 1
            if self._save_every_ticks and self._ticks_since_save >= self._save_every_ticks:
                self._save()

    def _detach_lifecycle(self):
        if self._lifecycle is not None:
            self._lifecycle.unsubscribe(self._lifecycle_token)
        self._lifecycle = None
        self._lifecycle_token = None

    def _changed(self):
        self._notify()
        self._save()

    def _notify(self):
        if not self._listeners:
            return
        snapshot = list(self._timers.values())
        for listener in list(self._listeners):
            listener(snapshot)

    def _save(self):
        self._ticks_since_save = 0
        if self._store is None:
            return
        try:
            self._store.save(list(self._timers.values()))
        except PersistenceError as exc:
            self._logger.error(f"[timer-save-failed] {exc}")
