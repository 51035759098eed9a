from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the gridmatch game server!'})

@main.route('/health')
def health():
    registry = current_app.extensions['session_registry']
    return jsonify({'status': 'ok', 'rooms': len(registry)})

@main.route('/api/rooms/<string:room_id>')
def get_room_state(room_id):
    """
    Returns the current state of an existing room. Never creates one.
    """
    registry = current_app.extensions['session_registry']
    with registry.lock:
        session = registry.get(room_id.strip())
        if session is None:
            return jsonify({'error': 'Room not found'}), 404
        return jsonify(session.to_dict())
