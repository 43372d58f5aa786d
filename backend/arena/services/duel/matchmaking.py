import logging
import uuid
from dataclasses import dataclass
from typing import Optional

from arena.errors import NotFound
from .state import DuelState, QueueEntry, to_ms


@dataclass
class JoinResult:
    matched: bool
    match_id: Optional[str] = None

    def to_dict(self):
        if self.matched:
            return {'matched': True, 'match_id': self.match_id}
        return {'matched': False, 'waiting': True}


def generate_match_id() -> str:
    return uuid.uuid4().hex


class MatchmakingQueue:
    """Mutual opt-in challenges: a pair forms once each user named the other."""

    def __init__(self, state: DuelState, registry, store, notifier, logger: Optional[logging.Logger] = None):
        self.state = state
        self.registry = registry
        self.store = store
        self.notifier = notifier
        self.logger = logger or logging.getLogger(__name__)

    def join(self, requester_id: str, desired_opponent_id: str) -> JoinResult:
        if not self.store.get_user(requester_id):
            raise NotFound(f"User {requester_id} not found")

        with self.state.lock:
            pending = self.state.queue.get(desired_opponent_id)
            mutual = (
                pending is not None
                and desired_opponent_id != requester_id
                and pending.desired_opponent_id == requester_id
            )
            if not mutual:
                self.state.queue[requester_id] = QueueEntry(requester_id, desired_opponent_id)
                self.logger.info(f"[queue-wait] user={requester_id} wants={desired_opponent_id}")
                return JoinResult(matched=False)

            self.state.queue.pop(desired_opponent_id, None)
            self.state.queue.pop(requester_id, None)
            match_id = generate_match_id()
            match = self.registry.create(match_id, requester_id, desired_opponent_id)
            self.store.create_match(match_id, requester_id, desired_opponent_id, to_ms(match.start_time))

        self.notifier.notify(requester_id, {'type': 'match_found', 'match_id': match_id, 'opponent': desired_opponent_id})
        self.notifier.notify(desired_opponent_id, {'type': 'match_found', 'match_id': match_id, 'opponent': requester_id})
        return JoinResult(matched=True, match_id=match_id)

    def cancel(self, requester_id: str) -> bool:
        """Remove a pending entry. Returns True if one existed."""
        with self.state.lock:
            removed = self.state.queue.pop(requester_id, None)
        if removed:
            self.logger.info(f"[queue-cancel] user={requester_id}")
        return removed is not None

    def pending_for(self, requester_id: str) -> Optional[QueueEntry]:
        return self.state.queue.get(requester_id)
