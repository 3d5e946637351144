class TimerError(Exception):
    """Base class for timer service failures."""


class ValidationError(TimerError):
    """Rejected input, e.g. an empty timer name. The registry is unchanged."""


class NotFoundError(TimerError):
    """An operation referenced a timer id that does not exist (or no longer exists)."""

    def __init__(self, timer_id):
        super().__init__(f"Timer {timer_id} not found")
        self.timer_id = timer_id


class PersistenceError(TimerError):
    """Loading or saving the roster failed. Never fatal to the registry."""
