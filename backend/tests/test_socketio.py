import time


def _received(test_client):
    return [(pkt['name'], pkt['args'][0] if pkt['args'] else None) for pkt in test_client.get_received()]


def _payloads(events, name):
    return [payload for event, payload in events if event == name]


def _join(test_client, symbol, room='r1'):
    test_client.emit('joinGameRoom', {'roomId': room, 'symbol': symbol})


def _wait_for(predicate, timeout=3.0):
    deadline = time.time() + timeout
    while time.time() < deadline:
        if predicate():
            return True
        time.sleep(0.05)
    return predicate()


def test_socket_connect_and_join(flask_app, sio_factory):
    c1 = sio_factory()
    assert c1.is_connected()

    _join(c1, 'X')
    states = _payloads(_received(c1), 'gameState')
    assert len(states) == 1
    assert states[0]['gameStarted'] is False
    assert states[0]['roomId'] == 'r1'


def test_two_players_start_and_play(flask_app, sio_factory):
    c1 = sio_factory()
    c2 = sio_factory()
    _join(c1, 'X')
    _received(c1)
    _join(c2, 'O')

    c1_events = _received(c1)
    assert _payloads(c1_events, 'opponentJoined') == [{'symbol': 'O'}]
    for events in (c1_events, _received(c2)):
        state = _payloads(events, 'gameState')[-1]
        assert state['gameStarted'] is True
        assert state['turn'] == 'X'
        assert state['board'] == [None] * 49

    c1.emit('makeMove', {'roomId': 'r1', 'cellIndex': 0})
    c2.emit('makeMove', {'roomId': 'r1', 'cellIndex': 1})
    states = _payloads(_received(c1), 'gameState')
    assert [s['turn'] for s in states] == ['O', 'X']
    assert states[-1]['board'][:2] == ['X', 'O']
    assert states[-1]['gameOver'] is False


def test_win_broadcasts_result_then_room_is_removed(flask_app, sio_factory):
    registry = flask_app.extensions['session_registry']
    c1 = sio_factory()
    c2 = sio_factory()
    _join(c1, 'X')
    _join(c2, 'O')
    for sender, index in [(c1, 0), (c2, 7), (c1, 1), (c2, 8), (c1, 2), (c2, 9)]:
        sender.emit('makeMove', {'roomId': 'r1', 'cellIndex': index})
    _received(c1)
    _received(c2)

    c1.emit('makeMove', {'roomId': 'r1', 'cellIndex': 3})
    events = _received(c2)
    names = [name for name, _ in events]
    assert names == ['gameState', 'gameEnded']
    assert events[0][1]['winner'] == 'X'
    assert events[0][1]['winningLine'] == [0, 1, 2, 3]
    assert events[1][1]['winningLine'] == [0, 1, 2, 3]

    assert _wait_for(lambda: registry.get('r1') is None)
    assert _wait_for(lambda: any(name == 'roomClosed' for name, _ in _received(c1)))


def test_join_rejection_goes_to_requester_only(flask_app, sio_factory):
    c1 = sio_factory()
    c2 = sio_factory()
    _join(c1, 'X')
    _received(c1)

    _join(c2, 'X')
    errors = _payloads(_received(c2), 'serverError')
    assert errors[0]['code'] == 'symbol_taken'
    assert _received(c1) == []

    c2.emit('joinGameRoom', {'roomId': '   ', 'symbol': 'O'})
    assert _payloads(_received(c2), 'serverError')[0]['code'] == 'invalid_request'


def test_move_in_unknown_room_creates_nothing(flask_app, sio_factory):
    registry = flask_app.extensions['session_registry']
    c1 = sio_factory()
    c1.emit('makeMove', {'roomId': 'ghost', 'cellIndex': 0})
    rejections = _payloads(_received(c1), 'invalidMove')
    assert rejections[0]['code'] == 'room_not_found'
    assert len(registry) == 0


def test_disconnect_abandons_game(flask_app, sio_factory):
    registry = flask_app.extensions['session_registry']
    c1 = sio_factory()
    c2 = sio_factory()
    _join(c1, 'X')
    _join(c2, 'O')
    _received(c1)

    c2.disconnect()
    notices = _payloads(_received(c1), 'opponentDisconnected')
    assert len(notices) == 1
    assert notices[0]['gameOver'] is True
    assert notices[0]['winner'] is None

    assert _wait_for(lambda: registry.get('r1') is None)

    c3 = sio_factory()
    _join(c3, 'O')
    state = _payloads(_received(c3), 'gameState')[-1]
    assert state['gameStarted'] is False
    assert state['phase'] == 'lobby'


def test_unexpected_fault_is_reported_not_raised(flask_app, sio_factory, monkeypatch):
    import gridmatch.socketio_events as events_module

    def _boom(*args, **kwargs):
        raise RuntimeError('corrupt session')

    monkeypatch.setattr(events_module, 'make_move', _boom)
    c1 = sio_factory()
    c1.emit('makeMove', {'roomId': 'r1', 'cellIndex': 0})
    rejections = _payloads(_received(c1), 'invalidMove')
    assert rejections == [{'message': 'Internal server error.', 'code': 'internal'}]
    assert c1.is_connected()
