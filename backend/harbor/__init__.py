from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

socketio = SocketIO(async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = flask_app.config.get('CORS_ORIGINS', [])
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # One registry per app; handlers reach it through app.extensions
    from harbor.services.games.registry import RoomRegistry
    from harbor.services.games.dispatcher import CommandDispatcher
    from harbor.socketio_events import make_socket_emitter, register_socketio_handlers

    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/ws')
    registry = RoomRegistry(max_code_length=flask_app.config.get('ROOM_CODE_MAX_LENGTH', 0))
    flask_app.extensions['harbor.registry'] = registry
    flask_app.extensions['harbor.dispatcher'] = CommandDispatcher(registry, make_socket_emitter(namespace))

    # Register blueprints here
    from harbor.main import main
    flask_app.register_blueprint(main)

    from harbor.api.rooms import rooms
    flask_app.register_blueprint(rooms, url_prefix='/api/rooms')

    register_socketio_handlers(namespace)

    return flask_app
