import atexit

import click
from flask import Flask
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
from flask_sqlalchemy import SQLAlchemy

from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    origins = flask_app.config.get('CORS_ORIGINS') or []

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=origins)

    from benchclock.main import main
    flask_app.register_blueprint(main)

    from benchclock.api.timers import timers
    flask_app.register_blueprint(timers, url_prefix='/api/timers')

    from benchclock.services.timers import init_timer_registry, format_time, order, classify
    registry = init_timer_registry(flask_app, socketio)
    if not flask_app.config.get('TESTING'):
        atexit.register(registry.close)

    from benchclock.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('db-reset')
    @click.argument('names', nargs=-1)
    def db_reset_command(names):
        """Drops, recreates, and seeds the timer table."""
        from benchclock.services.timers import Timer
        from uuid import uuid4
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
        seed = list(names) or flask_app.config.get('DEFAULT_TIMER_NAMES') or []
        registry.seed(Timer(id=uuid4().hex, name=n.strip()) for n in seed if n.strip())
        registry.persist()
        print(f'Database has been reset and seeded with {len(registry)} timer(s)!')

    @click.command('timers-list')
    def timers_list_command():
        """Prints the stored roster in display order without touching it."""
        from benchclock.services.timers.persistence import SqlAlchemyTimerStore
        snapshot = SqlAlchemyTimerStore(flask_app).load() or []
        if not snapshot:
            print('No timers stored.')
            return
        cls = classify(
            snapshot,
            amber=flask_app.config.get('BEHIND_AMBER_SEC', 300),
            red=flask_app.config.get('BEHIND_RED_SEC', 600),
        )
        for timer in order(snapshot, cls):
            state = 'running' if timer.running else 'stopped'
            print(f"{timer.name:<24} {format_time(timer.elapsed):>12}  {state:<8} {cls[timer.id].lag.value}")

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(timers_list_command)

    return flask_app
