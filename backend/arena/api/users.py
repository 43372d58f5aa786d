from flask import Blueprint, jsonify, request, current_app
from arena import store
from arena.errors import NotFound
from arena.models import generate_user_id


users = Blueprint('users', __name__)


def _winrate(user) -> float:
    played = user.wins + user.losses
    if not played:
        return 0
    return round(user.wins / played * 100, 1)


@users.route('/user/register', methods=['POST'])
def register_user():
    """
    Creates a user with a generated id and default display name.
    """
    user_id = generate_user_id()
    user = store.create_user(user_id)
    current_app.logger.info(f"[user-register] user={user_id}")
    return jsonify({'user_id': user_id, 'user': user.to_dict()}), 201


@users.route('/user/<string:user_id>', methods=['GET'])
def get_user(user_id):
    user = store.get_user(user_id)
    if not user:
        raise NotFound('User not found')
    return jsonify(user.to_dict())


@users.route('/user/<string:user_id>/username', methods=['POST'])
def update_username(user_id):
    data = request.get_json(silent=True) or {}
    username = (data.get('username') or '').strip()
    if not username:
        return jsonify({'error': 'Username is required'}), 400
    if len(username) > 64:
        return jsonify({'error': 'Username must be at most 64 characters'}), 400
    user = store.update_username(user_id, username)
    return jsonify(user.to_dict())


@users.route('/user/<string:user_id>/history', methods=['GET'])
def get_history(user_id):
    limit = int(current_app.config.get('HISTORY_LIMIT', 20))
    history = store.get_user_match_history(user_id, limit=limit)
    return jsonify([m.to_dict() for m in history])


@users.route('/leaderboard', methods=['GET'])
def get_leaderboard():
    limit = int(current_app.config.get('LEADERBOARD_LIMIT', 100))
    board = []
    for user in store.get_leaderboard(limit=limit):
        entry = user.to_dict()
        entry['winrate'] = _winrate(user)
        board.append(entry)
    return jsonify(board)
