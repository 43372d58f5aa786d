"""Persistent store for users and match records.

Every write commits its own transaction. Failures roll the session back
and surface as PersistenceError; callers do not batch or undo across
calls.
"""

import time
from typing import List, Optional

from flask import current_app
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError

from arena import db
from arena.errors import NotFound, PersistenceError
from arena.models import Match, User


def _now_ms() -> int:
    return int(time.time() * 1000)


def _commit(action: str) -> None:
    try:
        db.session.commit()
    except (SQLAlchemyError, OverflowError) as exc:
        # sqlite3 raises a bare OverflowError for out-of-range integers
        db.session.rollback()
        current_app.logger.error(f"[store-fail] action={action} error={exc}")
        raise PersistenceError(f"{action} failed") from exc


def _query(action: str, fn):
    try:
        return fn()
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.error(f"[store-fail] action={action} error={exc}")
        raise PersistenceError(f"{action} failed") from exc


def create_user(user_id: str) -> User:
    user = User(
        user_id=user_id,
        username=f"player_{user_id[-4:]}",
        rating=int(current_app.config.get('DEFAULT_RATING', 1000)),
    )
    db.session.add(user)
    _commit('create_user')
    return user


def get_user(user_id: str) -> Optional[User]:
    return _query('get_user', lambda: User.query.filter_by(user_id=user_id).first())


def _require_user(user_id: str) -> User:
    user = get_user(user_id)
    if not user:
        raise NotFound(f"User {user_id} not found")
    return user


def update_username(user_id: str, username: str) -> User:
    user = _require_user(user_id)
    user.username = username
    db.session.add(user)
    _commit('update_username')
    return user


def update_user_stats(user_id: str, wins: int, losses: int, rating: int) -> User:
    user = _require_user(user_id)
    user.wins = wins
    user.losses = losses
    user.rating = rating
    db.session.add(user)
    _commit('update_user_stats')
    return user


def create_match(match_id: str, player1_id: str, player2_id: str, start_time: Optional[int] = None) -> Match:
    match = Match(
        match_id=match_id,
        player1_id=player1_id,
        player2_id=player2_id,
        start_time=start_time if start_time is not None else _now_ms(),
    )
    db.session.add(match)
    _commit('create_match')
    return match


def get_match(match_id: str) -> Optional[Match]:
    return _query('get_match', lambda: Match.query.filter_by(match_id=match_id).first())


def _require_match(match_id: str) -> Match:
    match = get_match(match_id)
    if not match:
        raise NotFound(f"Match {match_id} not found")
    return match


def update_match_score(match_id: str, player1_score: int, player2_score: int) -> None:
    match = _require_match(match_id)
    match.player1_score = player1_score
    match.player2_score = player2_score
    db.session.add(match)
    _commit('update_match_score')


def end_match(match_id: str, winner_id: str, end_time: Optional[int] = None) -> None:
    match = _require_match(match_id)
    match.winner_id = winner_id
    match.end_time = end_time if end_time is not None else _now_ms()
    match.state = 'finished'
    db.session.add(match)
    _commit('end_match')


def get_leaderboard(limit: int = 100) -> List[User]:
    return _query(
        'get_leaderboard',
        lambda: User.query.order_by(User.rating.desc()).limit(limit).all(),
    )


def get_user_match_history(user_id: str, limit: int = 20) -> List[Match]:
    return _query(
        'get_user_match_history',
        lambda: Match.query
        .filter(or_(Match.player1_id == user_id, Match.player2_id == user_id))
        .filter(Match.state == 'finished')
        .order_by(Match.end_time.desc())
        .limit(limit)
        .all(),
    )
