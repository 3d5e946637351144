"""Timer domain services: registry, lag classification, tick and lifecycle plumbing.

HTTP routes and socket handlers go through ``get_registry()``; nothing
outside this package mutates a timer.
"""

from flask import current_app

from .classifier import Classification, Lag, board, classify, order
from .errors import NotFoundError, PersistenceError, TimerError, ValidationError
from .formatting import format_time
from .lifecycle import LifecycleBus
from .registry import Timer, TimerRegistry
from .ticker import ManualTickSource, SocketIOTickSource, TickHandle


EXTENSION_KEY = 'timer_registry'


def init_timer_registry(app, socketio):
    """Build the registry for ``app`` and wire its collaborators.

    Loading the roster is deferred to the first ``get_registry()`` call so
    that tables exist by then (migrations in production, ``create_all`` in
    tests).
    """
    from .persistence import SqlAlchemyTimerStore

    if app.config.get('TICK_SOURCE', 'socketio') == 'manual':
        tick_source = ManualTickSource()
    else:
        tick_source = SocketIOTickSource(socketio)

    registry = TimerRegistry(
        tick_source,
        store=SqlAlchemyTimerStore(app),
        logger=app.logger,
        tick_period=int(app.config.get('TICK_INTERVAL_MS', 100)) / 1000.0,
        save_every_ticks=int(app.config.get('TICK_SAVE_EVERY', 10)),
        default_names=app.config.get('DEFAULT_TIMER_NAMES') or (),
    )
    lifecycle = LifecycleBus(logger=app.logger)
    registry.attach_lifecycle(lifecycle)

    amber = app.config.get('BEHIND_AMBER_SEC', 300)
    red = app.config.get('BEHIND_RED_SEC', 600)

    def _broadcast(timers):
        socketio.emit('state_update', board(timers, amber=amber, red=red), namespace='/ws')

    registry.add_listener(_broadcast)

    app.extensions[EXTENSION_KEY] = registry
    app.extensions['timer_lifecycle'] = lifecycle
    app.extensions['timer_ticks'] = tick_source
    return registry


def get_registry(app=None) -> TimerRegistry:
    app = app or current_app._get_current_object()
    registry = app.extensions[EXTENSION_KEY]
    registry.ensure_loaded()
    return registry


def get_lifecycle(app=None) -> LifecycleBus:
    app = app or current_app._get_current_object()
    return app.extensions['timer_lifecycle']


def current_board(app=None) -> dict:
    app = app or current_app._get_current_object()
    return board(
        get_registry(app).timers(),
        amber=app.config.get('BEHIND_AMBER_SEC', 300),
        red=app.config.get('BEHIND_RED_SEC', 600),
    )
