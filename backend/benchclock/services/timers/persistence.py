"""Timer roster storage backed by Flask-SQLAlchemy.

The store may be called from Socket.IO background tasks, so every call
pushes its own app context instead of relying on a request.
"""

from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from benchclock import db
from benchclock.models import TimerRecord
from .errors import PersistenceError
from .registry import Timer


class SqlAlchemyTimerStore:
    def __init__(self, app):
        self._app = app

    def load(self) -> Optional[List[Timer]]:
        """Persisted roster in creation order, or None when nothing is stored."""
        with self._app.app_context():
            try:
                records = TimerRecord.query.order_by(TimerRecord.position).all()
            except SQLAlchemyError as exc:
                db.session.rollback()
                raise PersistenceError(f"load failed: {exc}") from exc
            if not records:
                return None
            return [
                Timer(id=r.id, name=r.name, elapsed=float(r.elapsed or 0.0), running=bool(r.running))
                for r in records
            ]

    def save(self, timers: List[Timer]) -> None:
        """Replace the stored roster with ``timers`` (last write wins)."""
        with self._app.app_context():
            try:
                TimerRecord.query.delete()
                for position, timer in enumerate(timers):
                    db.session.add(TimerRecord(
                        id=timer.id,
                        name=timer.name,
                        elapsed=timer.elapsed,
                        running=timer.running,
                        position=position,
                    ))
                db.session.commit()
            except SQLAlchemyError as exc:
                db.session.rollback()
                raise PersistenceError(f"save failed: {exc}") from exc
