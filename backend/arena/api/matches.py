from flask import Blueprint, jsonify, request
from arena import store
from arena.errors import NotFound
from arena.services.duel import get_engine
from arena.services.duel.state import MAX_SCORE


matches = Blueprint('matches', __name__)


@matches.route('/matchmaking/join', methods=['POST'])
def join_queue():
    """
    Challenges `opponent_id`. Pairs immediately if the opponent already
    challenged this user, otherwise parks the request.
    """
    data = request.get_json(silent=True) or {}
    user_id = data.get('user_id')
    opponent_id = data.get('opponent_id')
    if not all([user_id, opponent_id]):
        return jsonify({'error': 'user_id and opponent_id are required'}), 400
    result = get_engine().queue.join(user_id, opponent_id)
    return jsonify(result.to_dict())


@matches.route('/matchmaking/cancel', methods=['POST'])
def cancel_queue():
    data = request.get_json(silent=True) or {}
    user_id = data.get('user_id')
    if user_id:
        get_engine().queue.cancel(user_id)
    return jsonify({'success': True})


@matches.route('/match/<string:match_id>/roll', methods=['POST'])
def submit_roll(match_id):
    """
    Records a score roll. Rolls for unknown, finished or foreign matches
    are ignored but still answered with success.
    """
    data = request.get_json(silent=True) or {}
    user_id = data.get('user_id')
    score = data.get('score')
    if not user_id:
        return jsonify({'error': 'user_id is required'}), 400
    if isinstance(score, bool) or not isinstance(score, int):
        return jsonify({'error': 'score must be an integer'}), 400
    if not 0 <= score <= MAX_SCORE:
        return jsonify({'error': f'score must be between 0 and {MAX_SCORE}'}), 400
    get_engine().registry.submit_score(match_id, user_id, score)
    return jsonify({'success': True})


@matches.route('/match/<string:match_id>', methods=['GET'])
def get_match_status(match_id):
    snapshot = get_engine().registry.get_or_resolve(match_id)
    if snapshot is not None:
        return jsonify(snapshot)
    match = store.get_match(match_id)
    if not match:
        raise NotFound('Match not found')
    return jsonify(match.to_dict())
