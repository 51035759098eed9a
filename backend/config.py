import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Board geometry (must match the client renderer)
    BOARD_SIZE = int(os.environ.get('BOARD_SIZE', '7'))
    WIN_LENGTH = int(os.environ.get('WIN_LENGTH', '4'))
    # Room cleanup delays (seconds)
    ABANDONED_ROOM_CLEANUP_SEC = float(os.environ.get('ABANDONED_ROOM_CLEANUP_SEC', '15'))
    FINISHED_ROOM_CLEANUP_SEC = float(os.environ.get('FINISHED_ROOM_CLEANUP_SEC', '60'))
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    CORS_ALLOWED_ORIGINS = [
        origin.strip()
        for origin in os.environ.get(
            'CORS_ALLOWED_ORIGINS',
            'http://localhost:3000,http://127.0.0.1:3000',
        ).split(',')
        if origin.strip()
    ]
