import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Comma separated list of origins allowed to open a socket
    CORS_ORIGINS = [
        o.strip() for o in os.environ.get(
            'CORS_ORIGINS',
            'http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,http://127.0.0.1:5173',
        ).split(',') if o.strip()
    ]
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/ws')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    # Room codes longer than this are rejected before lookup. 0 disables.
    ROOM_CODE_MAX_LENGTH = int(os.environ.get('ROOM_CODE_MAX_LENGTH', '16'))
