from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the benchclock timer server!'})


@main.route('/help')
def usage():
    amber_min = int(current_app.config.get('BEHIND_AMBER_SEC', 300)) // 60
    red_min = int(current_app.config.get('BEHIND_RED_SEC', 600)) // 60
    return jsonify({
        'instructions': [
            'Press a timer to start it, press again to stop it.',
            'Long press to reset the timer.',
            'Active timers go to the top and are blue.',
            f'If a timer is {amber_min} minutes behind, it turns orange.',
            f'If a timer is {red_min} minutes behind, it turns red.',
        ],
        'thresholds_minutes': {'orange': amber_min, 'red': red_min},
    })
