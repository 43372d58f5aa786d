import logging
import threading
from typing import Any, Dict, Optional


class Notifier:
    """Best-effort push of duel events to connected users.

    The Socket.IO handlers bind a user id to its current session id; the
    engine only ever calls `notify`. Events for users without a live
    session are dropped, nothing is queued or retried.
    """

    def __init__(self, socketio, namespace: str = '/ws', logger: Optional[logging.Logger] = None):
        self.socketio = socketio
        self.namespace = namespace
        self.logger = logger or logging.getLogger(__name__)
        self._sessions: Dict[str, str] = {}
        self._lock = threading.Lock()

    def register(self, user_id: str, sid: str) -> None:
        with self._lock:
            # a session speaks for one user at a time
            for bound_user, bound in list(self._sessions.items()):
                if bound == sid and bound_user != user_id:
                    del self._sessions[bound_user]
            previous = self._sessions.get(user_id)
            self._sessions[user_id] = sid
        if previous and previous != sid:
            self.logger.info(f"[ws-replace] user={user_id} old_sid={previous} new_sid={sid}")

    def unregister_sid(self, sid: str) -> Optional[str]:
        """Drop the binding that points at `sid`; return its user id."""
        with self._lock:
            for user_id, bound in list(self._sessions.items()):
                if bound == sid:
                    del self._sessions[user_id]
                    return user_id
        return None

    def is_connected(self, user_id: str) -> bool:
        with self._lock:
            return user_id in self._sessions

    def notify(self, user_id: str, event: Dict[str, Any]) -> bool:
        with self._lock:
            sid = self._sessions.get(user_id)
        if not sid:
            return False
        try:
            self.socketio.emit(event['type'], event, to=sid, namespace=self.namespace)
            return True
        except Exception as exc:
            self.logger.warning(f"[notify-drop] user={user_id} type={event.get('type')} error={exc}")
            return False
