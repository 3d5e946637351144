from flask import current_app
from flask_socketio import emit

from benchclock import socketio
from benchclock.services.timers import current_board, get_lifecycle, get_registry
from benchclock.services.timers.lifecycle import APP_STATES


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})
    emit('state_update', current_board())


def handle_app_state(data):
    """Client app moved between foreground and background."""
    state = (data or {}).get('state')
    if state not in APP_STATES:
        emit('error', {'message': f"state must be one of {', '.join(APP_STATES)}"})
        return
    registry = get_registry()
    get_lifecycle().publish(state)
    current_app.logger.info(f"[lifecycle-ws] state={state} suspended={registry.suspended}")
    emit('app_state_ack', {'state': state, 'suspended': registry.suspended})


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    namespaces = ['/ws', '/'] if testing else ['/ws']
    for namespace in namespaces:
        socketio.on_event('connect', handle_connect, namespace=namespace)
        socketio.on_event('app_state', handle_app_state, namespace=namespace)
        socketio.on_event('ping', handle_ping, namespace=namespace)
