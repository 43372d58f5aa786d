from contextlib import nullcontext

from flask import has_app_context

from arena.errors import ArenaError


class TimeoutSweeper:
    """Periodic background task that resolves matches past their deadline.

    - Runs on the Socket.IO background task machinery
    - Each tick works from a snapshot of expired ids, taking the engine
      lock per match rather than across the whole scan
    - Prunes finished matches kept in memory past their retention window
    """

    def __init__(self, app, socketio, registry, interval_sec: float = 1.0):
        self.app = app
        self.socketio = socketio
        self.registry = registry
        self.interval_sec = interval_sec
        self._running = False
        # bumped on every start/stop; a loop exits once its token is stale
        self._generation = 0
        self._task = None

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._generation += 1
        self._task = self.socketio.start_background_task(self._run, self._generation)
        self.app.logger.info(f"[sweeper-start] interval={self.interval_sec}s")

    def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        self._generation += 1
        self.app.logger.info("[sweeper-stop]")

    def _is_current(self, generation: int) -> bool:
        return self._running and generation == self._generation

    def _run(self, generation: int) -> None:
        while self._is_current(generation):
            self.tick()
            self.socketio.sleep(self.interval_sec)

    def tick(self) -> int:
        """Resolve every expired active match; return how many finished."""
        ctx = nullcontext() if has_app_context() else self.app.app_context()
        resolved = 0
        with ctx:
            for match_id in self.registry.expired_match_ids():
                try:
                    if self.registry.resolve(match_id):
                        resolved += 1
                except ArenaError:
                    self.app.logger.exception(f"[sweeper-fail] match={match_id}")
            pruned = self.registry.prune_finished()
            if resolved or pruned:
                self.app.logger.info(f"[sweeper-tick] resolved={resolved} pruned={pruned}")
        return resolved
