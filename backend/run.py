from arena import create_app, socketio
from arena.services.duel.engine import EXTENSION_KEY

app = create_app()

if __name__ == '__main__':
    # Use SocketIO server to enable websockets in dev
    try:
        socketio.run(app, debug=True, use_reloader=False)
    finally:
        app.extensions[EXTENSION_KEY].sweeper.stop()
