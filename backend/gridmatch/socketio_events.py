from flask import current_app, request
from flask_socketio import emit

from gridmatch import socketio
from gridmatch.errors import RejectedRequest
from gridmatch.games import drop_connection, join_game_room, make_move

INTERNAL_ERROR = {'message': 'Internal server error.', 'code': 'internal'}


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _registry():
    return current_app.extensions['session_registry']


def _transport():
    return current_app.extensions['room_transport']


def _dispatch(handler, rejection_event: str, data) -> None:
    """Run one protocol handler and report failures to the caller only."""
    sid = _get_sid()
    try:
        handler(_registry(), _transport(), sid, data)
    except RejectedRequest as exc:
        current_app.logger.warning(f"[rejected] event={rejection_event} sid={sid} code={exc.code} data={data!r}")
        emit(rejection_event, exc.to_dict())
    except Exception:
        # A fault in one room must not take down the others
        current_app.logger.exception(f"[handler-error] event={rejection_event} sid={sid} data={data!r}")
        emit(rejection_event, INTERNAL_ERROR)


def handle_connect():
    current_app.logger.info(f"[connect] sid={_get_sid()}")
    emit('connected', {'message': 'Connected'})


def handle_disconnect(reason=None):
    sid = _get_sid()
    try:
        drop_connection(_registry(), _transport(), sid, reason)
    except Exception:
        current_app.logger.exception(f"[handler-error] event=disconnect sid={sid}")


def handle_join_game_room(data):
    _dispatch(join_game_room, 'serverError', data)


def handle_make_move(data):
    _dispatch(make_move, 'invalidMove', data)


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on the configured namespace."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('joinGameRoom', handle_join_game_room, namespace=namespace)
    socketio.on_event('makeMove', handle_make_move, namespace=namespace)
