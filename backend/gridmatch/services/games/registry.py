import threading
from typing import Dict, List, Optional, Tuple

from gridmatch.models import GameSession


class SessionRegistry:
    """In-process table of live rooms, keyed by trimmed room id.

    Protocol handlers and cleanup timers hold ``lock`` for the whole of
    their run so that room mutations (and the broadcasts that follow
    them) never interleave. The lock is re-entrant so the lookup helpers
    below can also be called on their own.
    """

    def __init__(self, board_size: int = 7, win_length: int = 4):
        self.board_size = board_size
        self.win_length = win_length
        self.lock = threading.RLock()
        self._sessions: Dict[str, GameSession] = {}

    def get_or_create(self, room_id: str) -> GameSession:
        with self.lock:
            session = self._sessions.get(room_id)
            if session is None:
                session = GameSession(room_id, self.board_size, self.win_length)
                self._sessions[room_id] = session
            return session

    def get(self, room_id: str) -> Optional[GameSession]:
        with self.lock:
            return self._sessions.get(room_id)

    def remove(self, room_id: str) -> Optional[GameSession]:
        """Drop a room if present. Any pending cleanup timer for it goes stale."""
        with self.lock:
            session = self._sessions.pop(room_id, None)
            if session is not None:
                session.cleanup_deadline = None
            return session

    def find_by_connection(self, sid: str) -> Optional[Tuple[str, GameSession, str]]:
        # O(rooms) scan; fine while concurrent rooms stay few. Keep a
        # sid -> room id index here if that stops being true.
        with self.lock:
            for room_id, session in self._sessions.items():
                symbol = session.players.get(sid)
                if symbol is not None:
                    return room_id, session, symbol
        return None

    def room_ids(self) -> List[str]:
        with self.lock:
            return list(self._sessions)

    def clear(self) -> None:
        with self.lock:
            for session in self._sessions.values():
                session.cleanup_deadline = None
            self._sessions.clear()

    def __len__(self) -> int:
        with self.lock:
            return len(self._sessions)

    def __contains__(self, room_id) -> bool:
        with self.lock:
            return room_id in self._sessions
