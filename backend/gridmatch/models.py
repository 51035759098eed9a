from typing import Dict, List, Optional, Set

from gridmatch.services.games.board import new_board

PLAYER_X = 'X'
PLAYER_O = 'O'
SYMBOLS = (PLAYER_X, PLAYER_O)


def other_symbol(symbol: str) -> str:
    return PLAYER_O if symbol == PLAYER_X else PLAYER_X


class Phase:
    LOBBY = 'lobby'          # fewer than two symbols assigned
    ACTIVE = 'active'        # both assigned, no result yet
    FINISHED = 'finished'    # win or draw
    ABANDONED = 'abandoned'  # ended by a disconnect

    TERMINAL = (FINISHED, ABANDONED)


class GameSession:
    """One authoritative game instance, keyed by a caller-chosen room id.

    Owned by the registry. Handlers must re-fetch it by room id on every
    request and never keep a reference across requests.
    """

    def __init__(self, room_id: str, size: int, win_length: int):
        self.room_id = room_id
        self.size = size
        self.win_length = win_length
        self.board: List[Optional[str]] = new_board(size)
        self.turn = PLAYER_X
        self.players: Dict[str, str] = {}  # sid -> symbol
        self.connections: Set[str] = set()  # sids attached to the broadcast group
        self.phase = Phase.LOBBY
        self.winner: Optional[str] = None
        self.winning_line: Optional[List[int]] = None
        self.is_draw = False
        self.cleanup_deadline: Optional[float] = None

    @property
    def game_started(self) -> bool:
        return self.phase != Phase.LOBBY

    @property
    def game_over(self) -> bool:
        return self.phase in Phase.TERMINAL

    def symbol_for(self, sid: str) -> Optional[str]:
        return self.players.get(sid)

    def connection_for(self, symbol: str) -> Optional[str]:
        for sid, assigned in self.players.items():
            if assigned == symbol:
                return sid
        return None

    def has_both_symbols(self) -> bool:
        assigned = set(self.players.values())
        return all(symbol in assigned for symbol in SYMBOLS)

    def is_empty(self) -> bool:
        return not self.players and not self.connections

    def assign(self, sid: str, symbol: str) -> None:
        self.players[sid] = symbol
        self.connections.add(sid)

    def release(self, sid: str) -> Optional[str]:
        self.connections.discard(sid)
        return self.players.pop(sid, None)

    def start(self) -> None:
        if self.phase == Phase.LOBBY:
            self.phase = Phase.ACTIVE

    def place(self, index: int, symbol: str) -> None:
        if self.board[index] is not None:
            raise ValueError(f'cell {index} is already taken')
        self.board[index] = symbol

    def finish(self, winner: Optional[str] = None, line: Optional[List[int]] = None) -> None:
        self.phase = Phase.FINISHED
        self.winner = winner
        self.winning_line = list(line) if line else None
        self.is_draw = winner is None

    def abandon(self) -> None:
        self.phase = Phase.ABANDONED
        self.winner = None
        self.winning_line = None
        self.is_draw = False

    def to_dict(self):
        """Canonical full-state message shared by every state broadcast."""
        return {
            'roomId': self.room_id,
            'board': list(self.board),
            'turn': self.turn,
            'phase': self.phase,
            'gameStarted': self.game_started,
            'gameOver': self.game_over,
            'winner': self.winner,
            'isDraw': self.is_draw,
            'winningLine': list(self.winning_line) if self.winning_line else None,
        }

    def ended_dict(self):
        return {
            'winner': self.winner,
            'isDraw': self.is_draw,
            'winningLine': list(self.winning_line) if self.winning_line else None,
            'board': list(self.board),
        }

    def disconnect_dict(self, message: str):
        return {
            'message': message,
            'board': list(self.board),
            'turn': self.turn,
            'gameOver': self.game_over,
            'winner': self.winner,
            'isDraw': self.is_draw,
            'winningLine': list(self.winning_line) if self.winning_line else None,
        }
