import os
import sys
import pytest

# Ensure the backend root (containing the `benchclock` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from benchclock import create_app, db, socketio
from benchclock.services.timers import ManualTickSource, TimerRegistry


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ORIGINS = ['http://localhost:5173']
    TICK_INTERVAL_MS = 100
    TICK_SOURCE = 'manual'
    TICK_SAVE_EVERY = 10
    BEHIND_AMBER_SEC = 300
    BEHIND_RED_SEC = 600
    DEFAULT_TIMER_NAMES = []


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import benchclock.models  # noqa: F401
        db.create_all()
        yield application
        application.extensions['timer_registry'].close()
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def ticks(flask_app):
    return flask_app.extensions['timer_ticks']


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    if test_client.is_connected('/ws'):
        test_client.disconnect(namespace='/ws')


class FakeClock:
    def __init__(self, now=1_000_000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class MemoryStore:
    def __init__(self, timers=None, fail_load=False, fail_save=False):
        self.timers = timers
        self.saves = []
        self.fail_load = fail_load
        self.fail_save = fail_save

    def load(self):
        from benchclock.services.timers import PersistenceError
        if self.fail_load:
            raise PersistenceError('disk on fire')
        return self.timers

    def save(self, timers):
        from benchclock.services.timers import PersistenceError
        if self.fail_save:
            raise PersistenceError('disk full')
        self.saves.append(list(timers))


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def store():
    return MemoryStore()


@pytest.fixture()
def tick_source():
    return ManualTickSource()


@pytest.fixture()
def registry(tick_source, store, clock):
    reg = TimerRegistry(tick_source, store=store, clock=clock)
    reg.ensure_loaded()
    yield reg
    reg.close()
