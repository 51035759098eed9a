import os

from gridmatch import create_app, socketio

app = create_app()


def run_options(environ=os.environ):
    debug = environ.get('FLASK_DEBUG', '1') == '1'
    return {
        'host': environ.get('HOST', '127.0.0.1'),
        'port': int(environ.get('PORT', '3000')),
        'debug': debug,
        # The Werkzeug dev server is only for local debugging
        'allow_unsafe_werkzeug': debug,
    }


if __name__ == '__main__':
    # Use SocketIO server to enable websockets in dev
    socketio.run(app, **run_options())
