import os


def _csv(value):
    return [item.strip() for item in (value or '').split(',') if item.strip()]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///benchclock.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Browser origins allowed for HTTP and Socket.IO
    CORS_ORIGINS = _csv(os.environ.get('CORS_ORIGINS')) or [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:19006",
    ]
    # Tick period for running timers (ms). Each tick adds exactly this much.
    TICK_INTERVAL_MS = int(os.environ.get('TICK_INTERVAL_MS', '100'))
    # 'socketio' runs background tasks; 'manual' is driven by the caller
    TICK_SOURCE = os.environ.get('TICK_SOURCE', 'socketio')
    # Persist the roster every N ticks while timers run. 0 disables tick saves.
    TICK_SAVE_EVERY = int(os.environ.get('TICK_SAVE_EVERY', '10'))
    # Lag thresholds (seconds behind the furthest-ahead peer)
    BEHIND_AMBER_SEC = int(os.environ.get('BEHIND_AMBER_SEC', '300'))
    BEHIND_RED_SEC = int(os.environ.get('BEHIND_RED_SEC', '600'))
    # Roster used when nothing has been saved yet
    DEFAULT_TIMER_NAMES = _csv(os.environ.get('DEFAULT_TIMER_NAMES'))
