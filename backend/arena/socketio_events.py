from flask import current_app, request
from flask_socketio import emit
from arena import socketio
from arena.services.duel import get_engine


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_disconnect(reason=None):
    # Forget the session and drop any pending challenge from that user
    engine = get_engine()
    user_id = engine.notifier.unregister_sid(_get_sid())
    if not user_id:
        return
    engine.queue.cancel(user_id)
    current_app.logger.info(f"[ws-disconnect] user={user_id}")


def handle_register(data):
    user_id = (data or {}).get('user_id')
    if not user_id:
        emit('error', {'message': 'user_id is required'})
        return
    get_engine().notifier.register(user_id, _get_sid())
    emit('registered', {'type': 'registered', 'user_id': user_id})


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on namespace '/ws'."""
    socketio.on_event('connect', handle_connect, namespace='/ws')
    socketio.on_event('disconnect', handle_disconnect, namespace='/ws')
    socketio.on_event('register', handle_register, namespace='/ws')
    socketio.on_event('ping', handle_ping, namespace='/ws')
