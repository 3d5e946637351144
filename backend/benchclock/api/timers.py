from flask import Blueprint, current_app, jsonify, request

from benchclock.services.timers import (
    NotFoundError,
    ValidationError,
    current_board,
    format_time,
    get_lifecycle,
    get_registry,
)
from benchclock.services.timers.lifecycle import APP_STATES


timers = Blueprint('timers', __name__)


def _row(timer):
    payload = timer.to_dict()
    payload['display'] = format_time(timer.elapsed)
    return payload


@timers.errorhandler(ValidationError)
def handle_validation_error(exc):
    return jsonify({'error': str(exc)}), 400


@timers.errorhandler(NotFoundError)
def handle_not_found(exc):
    return jsonify({'error': str(exc)}), 404


@timers.route('', methods=['GET'])
def list_timers():
    return jsonify(current_board())


@timers.route('', methods=['POST'])
def add_timer():
    data = request.get_json(silent=True) or {}
    name = data.get('name')
    if name is not None and not isinstance(name, str):
        raise ValidationError('Name must be a string')
    registry = get_registry()
    timer_id = registry.add(name or '')
    return jsonify(_row(registry.get(timer_id))), 201


@timers.route('/<string:timer_id>/toggle', methods=['POST'])
def toggle_timer(timer_id):
    timer = get_registry().toggle_running(timer_id)
    return jsonify(_row(timer))


@timers.route('/<string:timer_id>/reset', methods=['POST'])
def reset_timer(timer_id):
    timer = get_registry().reset_one(timer_id)
    return jsonify(_row(timer))


@timers.route('/reset', methods=['POST'])
def reset_all_timers():
    get_registry().reset_all()
    return jsonify(current_board())


@timers.route('/<string:timer_id>', methods=['DELETE'])
def delete_timer(timer_id):
    get_registry().delete(timer_id)
    return jsonify({'message': f'Timer {timer_id} deleted'})


@timers.route('/lifecycle', methods=['POST'])
def app_state_changed():
    data = request.get_json(silent=True) or {}
    state = data.get('state')
    if state not in APP_STATES:
        return jsonify({'error': f"state must be one of {', '.join(APP_STATES)}"}), 400
    registry = get_registry()
    get_lifecycle().publish(state)
    current_app.logger.info(f"[lifecycle-http] state={state} suspended={registry.suspended}")
    return jsonify({'state': state, 'suspended': registry.suspended})
