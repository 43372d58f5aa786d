from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    allowed_origins = flask_app.config.get('CORS_ORIGINS') or []

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from arena.errors import NotFound, PersistenceError

    @flask_app.errorhandler(NotFound)
    def handle_not_found(exc):
        return jsonify({'error': str(exc)}), 404

    @flask_app.errorhandler(PersistenceError)
    def handle_persistence_error(exc):
        return jsonify({'error': 'Operation failed'}), 500

    from arena.api.users import users
    flask_app.register_blueprint(users, url_prefix='/api')

    from arena.api.matches import matches
    flask_app.register_blueprint(matches, url_prefix='/api')

    # One duel engine per app; routes and socket handlers reach it via
    # app.extensions
    from arena.services.duel import build_engine
    engine = build_engine(flask_app, socketio)

    from arena.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    if not flask_app.config.get('TESTING') or flask_app.config.get('ENABLE_SWEEPER_IN_TESTS'):
        engine.sweeper.start()

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the database tables."""
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Database has been reset!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
