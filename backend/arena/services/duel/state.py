import threading
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from arena.models import DRAW

ACTIVE = 'active'
FINISHED = 'finished'
# score columns are 32-bit integers
MAX_SCORE = 2 ** 31 - 1


def to_ms(ts: Optional[float]) -> Optional[int]:
    return int(ts * 1000) if ts is not None else None


@dataclass
class QueueEntry:
    requester_id: str
    desired_opponent_id: str
    status: str = 'waiting'


@dataclass
class MatchState:
    match_id: str
    player1_id: str
    player2_id: str
    start_time: float
    deadline: float
    player1_score: int = 0
    player2_score: int = 0
    winner: Optional[str] = None
    end_time: Optional[float] = None
    state: str = ACTIVE

    @property
    def is_active(self) -> bool:
        return self.state == ACTIVE

    @property
    def players(self) -> Tuple[str, str]:
        return (self.player1_id, self.player2_id)

    def is_participant(self, user_id: str) -> bool:
        return user_id in self.players

    def opponent_of(self, user_id: str) -> str:
        return self.player2_id if user_id == self.player1_id else self.player1_id

    def is_expired(self, now: float) -> bool:
        return now >= self.deadline

    def record_score(self, user_id: str, value: int) -> None:
        # best roll counts, lower rolls are ignored
        if user_id == self.player1_id:
            self.player1_score = max(self.player1_score, value)
        elif user_id == self.player2_id:
            self.player2_score = max(self.player2_score, value)

    def leader(self) -> Optional[str]:
        """Participant with the higher score, None on a tie."""
        if self.player1_score > self.player2_score:
            return self.player1_id
        if self.player2_score > self.player1_score:
            return self.player2_id
        return None

    def finish(self, winner: Optional[str], ended_at: float) -> None:
        self.winner = winner or DRAW
        self.end_time = ended_at
        self.state = FINISHED

    def to_dict(self):
        return {
            'match_id': self.match_id,
            'player1_id': self.player1_id,
            'player2_id': self.player2_id,
            'player1_score': self.player1_score,
            'player2_score': self.player2_score,
            'winner': self.winner,
            'start_time': to_ms(self.start_time),
            'deadline': to_ms(self.deadline),
            'end_time': to_ms(self.end_time),
            'state': self.state,
        }


@dataclass
class DuelState:
    """Process-local tables shared by the queue, registry and sweeper.

    `lock` serializes every read-then-write on either table.
    """
    matches: Dict[str, MatchState] = field(default_factory=dict)
    queue: Dict[str, QueueEntry] = field(default_factory=dict)
    lock: Any = field(default_factory=threading.RLock)
