import logging
import time
from typing import Callable, List, Optional

from arena.errors import InvalidState
from .rating import K_FACTOR, elo_deltas
from .state import MAX_SCORE, DuelState, MatchState, to_ms

MATCH_DURATION_SEC = 120


class MatchRegistry:
    """Owns every in-progress MatchState and drives active -> finished.

    All mutations run under the shared DuelState lock, persistence calls
    included. Notifications go out after the lock is released.
    """

    def __init__(
        self,
        state: DuelState,
        store,
        notifier,
        clock: Callable[[], float] = time.time,
        duration_sec: float = MATCH_DURATION_SEC,
        k_factor: int = K_FACTOR,
        retention_sec: float = 30,
        logger: Optional[logging.Logger] = None,
    ):
        self.state = state
        self.store = store
        self.notifier = notifier
        self.clock = clock
        self.duration_sec = duration_sec
        self.k_factor = k_factor
        self.retention_sec = retention_sec
        self.logger = logger or logging.getLogger(__name__)

    def create(self, match_id: str, player1_id: str, player2_id: str) -> MatchState:
        with self.state.lock:
            if match_id in self.state.matches:
                raise InvalidState(f"Match {match_id} already exists")
            now = self.clock()
            match = MatchState(
                match_id=match_id,
                player1_id=player1_id,
                player2_id=player2_id,
                start_time=now,
                deadline=now + self.duration_sec,
            )
            self.state.matches[match_id] = match
        self.logger.info(
            f"[match-create] match={match_id} p1={player1_id} p2={player2_id} deadline={match.deadline}"
        )
        return match

    def get(self, match_id: str) -> Optional[MatchState]:
        return self.state.matches.get(match_id)

    def submit_score(self, match_id: str, user_id: str, value: int) -> bool:
        """Record a roll. Returns False when the roll was ignored."""
        with self.state.lock:
            match = self.state.matches.get(match_id)
            if (
                not 0 <= value <= MAX_SCORE
                or not match
                or not match.is_active
                or match.is_expired(self.clock())
                or not match.is_participant(user_id)
            ):
                self.logger.debug(f"[roll-ignored] match={match_id} user={user_id} value={value}")
                return False
            match.record_score(user_id, value)
            self.store.update_match_score(match_id, match.player1_score, match.player2_score)
            opponent_id = match.opponent_of(user_id)
        self.notifier.notify(opponent_id, {'type': 'opponent_roll', 'score': value})
        return True

    def resolve(self, match_id: str) -> Optional[MatchState]:
        """Finish an active match exactly once.

        Returns the finished MatchState, or None when the match is unknown
        or was already finished by another trigger.
        """
        with self.state.lock:
            match = self.state.matches.get(match_id)
            if not match or not match.is_active:
                return None
            ended_at = self.clock()
            winner_id = match.leader()
            match.finish(winner_id, ended_at)
            if winner_id:
                self._apply_ratings(winner_id, match.opponent_of(winner_id))
            self.store.end_match(match_id, match.winner, to_ms(ended_at))
            summary = match.to_dict()
        self.logger.info(
            f"[match-resolve] match={match_id} winner={match.winner} "
            f"score={match.player1_score}-{match.player2_score}"
        )
        for player_id in match.players:
            self.notifier.notify(player_id, {'type': 'match_end', 'match': summary})
        return match

    def _apply_ratings(self, winner_id: str, loser_id: str) -> None:
        winner = self.store.get_user(winner_id)
        loser = self.store.get_user(loser_id)
        if not winner or not loser:
            self.logger.warning(f"[rating-skip] winner={winner_id} loser={loser_id} missing user record")
            return
        gain, loss = elo_deltas(winner.rating, loser.rating, self.k_factor)
        winner_stats = (winner.wins + 1, winner.losses, winner.rating + gain)
        loser_stats = (loser.wins, loser.losses + 1, loser.rating - loss)
        self.store.update_user_stats(winner_id, *winner_stats)
        self.store.update_user_stats(loser_id, *loser_stats)
        self.logger.info(f"[rating] winner={winner_id} +{gain} loser={loser_id} -{loss}")

    def get_or_resolve(self, match_id: str) -> Optional[dict]:
        """Snapshot for status reads; never shows an expired match as active."""
        match = self.state.matches.get(match_id)
        if not match:
            return None
        if match.is_active and match.is_expired(self.clock()):
            self.resolve(match_id)
        with self.state.lock:
            return match.to_dict()

    def expired_match_ids(self) -> List[str]:
        now = self.clock()
        with self.state.lock:
            return [
                mid for mid, m in self.state.matches.items()
                if m.is_active and m.is_expired(now)
            ]

    def prune_finished(self) -> int:
        """Forget finished matches older than the retention window."""
        cutoff = self.clock() - self.retention_sec
        with self.state.lock:
            stale = [
                mid for mid, m in self.state.matches.items()
                if not m.is_active and m.end_time is not None and m.end_time <= cutoff
            ]
            for mid in stale:
                del self.state.matches[mid]
        return len(stale)
