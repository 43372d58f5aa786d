import os
import sys
import pytest

# Ensure the backend root (containing the `arena` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from arena import create_app, db, socketio, store
from arena.models import generate_user_id


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ORIGINS = ['http://localhost:5173']
    MATCH_DURATION_SEC = 120
    SWEEP_INTERVAL_SEC = 1
    FINISHED_RETENTION_SEC = 30
    ELO_K_FACTOR = 32
    DEFAULT_RATING = 1000
    LEADERBOARD_LIMIT = 100
    HISTORY_LIMIT = 20


class FakeClock:
    """Manually advanced stand-in for time.time."""

    def __init__(self, start=1_700_000_000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import arena.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def engine(flask_app):
    return flask_app.extensions['duel']


@pytest.fixture()
def clock(engine):
    fake = FakeClock()
    engine.registry.clock = fake
    return fake


@pytest.fixture()
def make_user(flask_app):
    def _make(rating=None):
        user = store.create_user(generate_user_id())
        if rating is not None:
            store.update_user_stats(user.user_id, user.wins, user.losses, rating)
        return user.user_id
    return _make


@pytest.fixture()
def sio_factory(flask_app):
    clients = []

    def _connect():
        test_client = socketio.test_client(
            flask_app,
            flask_test_client=flask_app.test_client(),
            namespace='/ws'
        )
        clients.append(test_client)
        return test_client

    yield _connect
    for test_client in clients:
        try:
            if test_client.is_connected('/ws'):
                test_client.disconnect(namespace='/ws')
        except Exception:
            pass


@pytest.fixture()
def pair(engine):
    def _pair(first, second):
        """Make two users challenge each other and return the new match id."""
        engine.queue.join(first, second)
        result = engine.queue.join(second, first)
        assert result.matched
        return result.match_id
    return _pair
