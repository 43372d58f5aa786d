from dataclasses import dataclass

from flask import current_app

from arena import store
from .matchmaking import MatchmakingQueue
from .notifier import Notifier
from .registry import MatchRegistry
from .state import DuelState
from .sweeper import TimeoutSweeper

EXTENSION_KEY = 'duel'


@dataclass
class DuelEngine:
    state: DuelState
    notifier: Notifier
    registry: MatchRegistry
    queue: MatchmakingQueue
    sweeper: TimeoutSweeper


def build_engine(app, socketio) -> DuelEngine:
    """Wire one engine per Flask app from its config."""
    cfg = app.config
    state = DuelState()
    notifier = Notifier(socketio, namespace='/ws', logger=app.logger)
    registry = MatchRegistry(
        state,
        store,
        notifier,
        duration_sec=int(cfg.get('MATCH_DURATION_SEC', 120)),
        k_factor=int(cfg.get('ELO_K_FACTOR', 32)),
        retention_sec=int(cfg.get('FINISHED_RETENTION_SEC', 30)),
        logger=app.logger,
    )
    queue = MatchmakingQueue(state, registry, store, notifier, logger=app.logger)
    sweeper = TimeoutSweeper(app, socketio, registry, interval_sec=float(cfg.get('SWEEP_INTERVAL_SEC', 1)))
    engine = DuelEngine(state=state, notifier=notifier, registry=registry, queue=queue, sweeper=sweeper)
    app.extensions[EXTENSION_KEY] = engine
    return engine


def get_engine() -> DuelEngine:
    return current_app.extensions[EXTENSION_KEY]
