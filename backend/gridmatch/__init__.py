from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

from gridmatch.services.games.registry import SessionRegistry
from gridmatch.transport import SocketIOTransport

socketio = SocketIO(async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    board_size = int(flask_app.config['BOARD_SIZE'])
    win_length = int(flask_app.config['WIN_LENGTH'])
    if not 1 <= win_length <= board_size:
        raise ValueError(f'WIN_LENGTH must be between 1 and BOARD_SIZE ({board_size}), got {win_length}')

    allowed_origins = flask_app.config.get('CORS_ALLOWED_ORIGINS') or []
    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/')

    CORS(flask_app, supports_credentials=True, origins=allowed_origins)
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Rooms live only as long as this app object
    flask_app.extensions['session_registry'] = SessionRegistry(board_size=board_size, win_length=win_length)
    flask_app.extensions['room_transport'] = SocketIOTransport(socketio, namespace=namespace)

    from gridmatch.main import main
    flask_app.register_blueprint(main)

    # Importing here ensures the handlers bind to the initialized socketio instance
    from gridmatch.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=namespace)

    @click.command('rooms')
    def rooms_command():
        """Lists active rooms with their phase and assigned symbols."""
        registry = flask_app.extensions['session_registry']
        room_ids = registry.room_ids()
        if not room_ids:
            click.echo('No active rooms.')
            return
        for room_id in sorted(room_ids):
            session = registry.get(room_id)
            if session is None:
                continue
            symbols = ','.join(sorted(session.players.values())) or '-'
            click.echo(f'{room_id}\t{session.phase}\t{symbols}')

    flask_app.cli.add_command(rooms_command)

    return flask_app
