import copy
import os
import sys
from collections import defaultdict

import pytest

# Ensure the backend root (containing the `gridmatch` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from gridmatch import create_app, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    BOARD_SIZE = 7
    WIN_LENGTH = 4
    # Short delays so timer-driven cleanup can be observed in tests
    ABANDONED_ROOM_CLEANUP_SEC = 0.2
    FINISHED_ROOM_CLEANUP_SEC = 0.3
    SOCKETIO_NAMESPACE = '/'
    CORS_ALLOWED_ORIGINS = ['http://localhost:3000']


class FakeTransport:
    """Records outbound messages and defers background tasks until asked."""

    def __init__(self):
        self.outbox = []
        self.groups = defaultdict(set)
        self.tasks = []

    def send(self, sid, event, payload):
        self.outbox.append((sid, event, copy.deepcopy(payload)))

    def broadcast(self, room, event, payload):
        for sid in sorted(self.groups.get(room, ())):
            self.send(sid, event, payload)

    def attach(self, sid, room):
        self.groups[room].add(sid)

    def detach(self, sid, room):
        self.groups[room].discard(sid)

    def close_group(self, room):
        self.groups.pop(room, None)

    def start_background_task(self, target, *args):
        self.tasks.append((target, args))

    def sleep(self, seconds):
        pass

    def run_tasks(self):
        tasks, self.tasks = self.tasks, []
        for target, args in tasks:
            target(*args)

    def events(self, sid):
        return [(event, payload) for target, event, payload in self.outbox if target == sid]

    def names(self, sid):
        return [event for event, _ in self.events(sid)]

    def last(self, sid, event):
        matching = [payload for name, payload in self.events(sid) if name == event]
        return matching[-1] if matching else None

    def clear(self):
        self.outbox.clear()


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application
    application.extensions['session_registry'].clear()


@pytest.fixture()
def registry(flask_app):
    return flask_app.extensions['session_registry']


@pytest.fixture()
def transport():
    return FakeTransport()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app):
    """Connects Socket.IO test clients; each starts with its queue flushed."""
    clients = []

    def _connect():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        test_client.get_received()
        clients.append(test_client)
        return test_client

    yield _connect
    for test_client in clients:
        if test_client.is_connected():
            test_client.disconnect()
