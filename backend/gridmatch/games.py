"""Protocol handlers for room joins, moves and disconnects.

Each handler runs to completion under the registry lock, re-fetches its
room by id, and either raises a ``RejectedRequest`` (nothing mutated,
nothing broadcast) or applies the change and emits the resulting
messages through the transport.
"""
from typing import Optional

from flask import current_app

from gridmatch.errors import (
    CellOccupied,
    GameAlreadyOver,
    GameNotStarted,
    InvalidCellIndex,
    InvalidRequest,
    NotAPlayer,
    NotYourTurn,
    RoomFull,
    RoomNotFound,
    SymbolTaken,
)
from gridmatch.models import SYMBOLS, GameSession, Phase, other_symbol
from gridmatch.services.games.board import check_winner, is_draw
from gridmatch.services.games.scheduler import schedule_room_cleanup


def join_game_room(registry, transport, sid: str, data) -> GameSession:
    data = data if isinstance(data, dict) else {}
    room_id = data.get('roomId')
    symbol = data.get('symbol', data.get('mySymbol'))
    current_app.logger.info(f"[join] sid={sid} room={room_id!r} symbol={symbol!r}")

    if not isinstance(room_id, str) or not room_id.strip() or symbol not in SYMBOLS:
        raise InvalidRequest()
    room_id = room_id.strip()

    with registry.lock:
        # A connection plays in one room at a time. A waiting or finished
        # slot elsewhere is given up, but only once this join will succeed.
        previous = None
        found = registry.find_by_connection(sid)
        if found is not None and found[0] != room_id:
            previous_id, previous, _ = found
            if previous.phase == Phase.ACTIVE:
                raise InvalidRequest(f'Already playing in room "{previous_id}".')

        session = registry.get_or_create(room_id)

        if session.symbol_for(sid) == symbol:
            # Retry or reconnect of the same slot: re-attach and resync only
            session.connections.add(sid)
            transport.attach(sid, room_id)
            transport.send(sid, 'gameState', session.to_dict())
            current_app.logger.info(f"[join-resync] room={room_id} sid={sid} symbol={symbol}")
            return session

        if session.has_both_symbols() and sid not in session.players:
            raise RoomFull(f'Room "{room_id}" is already full.')

        holder = session.connection_for(symbol)
        if holder is not None and holder != sid:
            raise SymbolTaken(f'Player {symbol} slot is already taken in room "{room_id}".')

        if session.game_over:
            raise GameAlreadyOver(f'The game in room "{room_id}" has ended. Try again shortly.')

        if previous is not None:
            _leave_room(registry, transport, sid, previous)

        session.assign(sid, symbol)
        transport.attach(sid, room_id)
        current_app.logger.info(
            f"[join-assign] room={room_id} sid={sid} symbol={symbol} players={sorted(session.players.values())}"
        )

        # Sent to the waiting player ahead of the game-start broadcast
        for other_sid in session.players:
            if other_sid != sid:
                transport.send(other_sid, 'opponentJoined', {'symbol': symbol})

        if session.has_both_symbols():
            session.start()
            current_app.logger.info(f"[game-start] room={room_id}")
            transport.broadcast(room_id, 'gameState', session.to_dict())
        else:
            transport.send(sid, 'gameState', session.to_dict())
        return session


def _cell_index(value, size: int) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int):
        return None
    if not 0 <= value < size * size:
        return None
    return value


def make_move(registry, transport, sid: str, data) -> GameSession:
    data = data if isinstance(data, dict) else {}
    room_id = data.get('roomId')
    raw_index = data.get('cellIndex')
    if isinstance(room_id, str):
        room_id = room_id.strip()

    with registry.lock:
        session = registry.get(room_id) if isinstance(room_id, str) and room_id else None
        if session is None:
            raise RoomNotFound()
        if session.game_over:
            raise GameAlreadyOver()
        if session.phase != Phase.ACTIVE:
            raise GameNotStarted()
        symbol = session.symbol_for(sid)
        if symbol is None:
            raise NotAPlayer()
        if session.turn != symbol:
            raise NotYourTurn()
        index = _cell_index(raw_index, session.size)
        if index is None:
            raise InvalidCellIndex()
        if session.board[index] is not None:
            raise CellOccupied()

        session.place(index, symbol)
        current_app.logger.info(f"[move] room={room_id} symbol={symbol} index={index}")

        result = check_winner(symbol, session.board, session.size, session.win_length)
        if result is not None:
            session.finish(winner=result.symbol, line=result.line)
        elif is_draw(symbol, session.board, session.size, session.win_length):
            session.finish()
        else:
            session.turn = other_symbol(symbol)
            transport.broadcast(room_id, 'gameState', session.to_dict())
            return session

        current_app.logger.info(
            f"[game-over] room={room_id} winner={session.winner} draw={session.is_draw} line={session.winning_line}"
        )
        transport.broadcast(room_id, 'gameState', session.to_dict())
        transport.broadcast(room_id, 'gameEnded', session.ended_dict())
        schedule_room_cleanup(
            current_app._get_current_object(),
            registry,
            transport,
            room_id,
            current_app.config.get('FINISHED_ROOM_CLEANUP_SEC', 60),
            reason='finished',
        )
        return session


def drop_connection(registry, transport, sid: str, reason=None) -> Optional[GameSession]:
    with registry.lock:
        found = registry.find_by_connection(sid)
        if found is None:
            current_app.logger.info(f"[disconnect] sid={sid} reason={reason} not in any room")
            return None
        room_id, session, symbol = found

        session.release(sid)
        transport.detach(sid, room_id)
        current_app.logger.info(
            f"[disconnect] room={room_id} sid={sid} symbol={symbol} reason={reason} remaining={len(session.players)}"
        )

        if session.phase == Phase.ACTIVE:
            session.abandon()
            current_app.logger.info(f"[game-abandoned] room={room_id}")
            transport.broadcast(
                room_id,
                'opponentDisconnected',
                session.disconnect_dict(f'Opponent ({symbol}) disconnected. Game ended.'),
            )
            schedule_room_cleanup(
                current_app._get_current_object(),
                registry,
                transport,
                room_id,
                current_app.config.get('ABANDONED_ROOM_CLEANUP_SEC', 15),
                reason='abandoned',
            )
        elif session.is_empty():
            registry.remove(room_id)
            current_app.logger.info(f"[room-removed] room={room_id} empty")
        return session


def _leave_room(registry, transport, sid: str, previous: GameSession) -> None:
    previous.release(sid)
    transport.detach(sid, previous.room_id)
    if previous.is_empty():
        registry.remove(previous.room_id)
    current_app.logger.info(f"[join-leave] room={previous.room_id} sid={sid}")
