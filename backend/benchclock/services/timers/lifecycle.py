"""Host lifecycle signals (app going to background / coming to foreground)."""

import itertools
from threading import Lock
from typing import Callable, Dict, Tuple


BACKGROUND = 'background'
ACTIVE = 'active'
INACTIVE = 'inactive'
APP_STATES = (BACKGROUND, ACTIVE, INACTIVE)

Listener = Callable[[], None]


class LifecycleBus:
    """Delivers background/foreground events to subscribers in publish order.

    ``background`` triggers the suspend callback, ``active`` the foreground
    one. ``inactive`` is a transitional state and is not delivered.
    """

    def __init__(self, logger=None):
        self._logger = logger
        self._lock = Lock()
        self._tokens = itertools.count(1)
        self._subscribers: Dict[int, Tuple[Listener, Listener]] = {}

    def subscribe(self, on_background: Listener, on_foreground: Listener) -> int:
        with self._lock:
            token = next(self._tokens)
            self._subscribers[token] = (on_background, on_foreground)
        return token

    def unsubscribe(self, token: int) -> None:
        with self._lock:
            self._subscribers.pop(token, None)

    def __len__(self):
        return len(self._subscribers)

    def publish(self, state: str) -> None:
        if state not in APP_STATES:
            raise ValueError(f"Unknown app state: {state!r}")
        if self._logger:
            self._logger.info(f"[lifecycle] state={state} subscribers={len(self._subscribers)}")
        if state == INACTIVE:
            return
        with self._lock:
            subscribers = list(self._subscribers.values())
        for on_background, on_foreground in subscribers:
            if state == BACKGROUND:
                on_background()
            else:
                on_foreground()
