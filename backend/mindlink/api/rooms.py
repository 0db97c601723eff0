from flask import Blueprint, current_app, jsonify

rooms = Blueprint('rooms', __name__)


def _registry():
    return current_app.extensions['mindlink'].registry


@rooms.route('', methods=['GET'])
def list_rooms():
    """
    Returns a summary of every active room.
    """
    summaries = []
    for room in _registry().rooms():
        with room.lock:
            summaries.append({
                'code': room.code,
                'state': room.state.value,
                'players': len(room.players),
                'current_round': room.current_round,
                'total_rounds': room.total_rounds,
            })
    return jsonify(summaries), 200


@rooms.route('/<string:game_code>', methods=['GET'])
def get_room_state(game_code):
    """
    Returns the full state of a room, including scores and round history.
    """
    room = _registry().get(game_code)
    if not room:
        return jsonify({'error': 'Game not found'}), 404
    with room.lock:
        return jsonify(room.to_dict()), 200
