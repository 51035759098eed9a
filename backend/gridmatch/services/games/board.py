from typing import List, NamedTuple, Optional, Sequence

# Scan order matters: the first qualifying line under this order wins.
DIRECTIONS = (
    (0, 1),   # right
    (1, 0),   # down
    (1, 1),   # down-right
    (1, -1),  # down-left
)


class WinResult(NamedTuple):
    symbol: str
    line: List[int]


def new_board(size: int) -> List[Optional[str]]:
    return [None] * (size * size)


def check_winner(symbol: str, board: Sequence[Optional[str]], size: int, win_length: int) -> Optional[WinResult]:
    """Return the first winning line for ``symbol``, or None.

    Cells are visited row-major and, from each cell, the four directions
    are tried in ``DIRECTIONS`` order. A line qualifies when all
    ``win_length`` cells are on the board and hold ``symbol``. A board of
    the wrong length yields None rather than an error.
    """
    if board is None or len(board) != size * size:
        return None

    for r in range(size):
        for c in range(size):
            for dr, dc in DIRECTIONS:
                line = []
                for k in range(win_length):
                    row = r + k * dr
                    col = c + k * dc
                    if not (0 <= row < size and 0 <= col < size):
                        break
                    index = row * size + col
                    if board[index] != symbol:
                        break
                    line.append(index)
                if len(line) == win_length:
                    return WinResult(symbol, line)
    return None


def is_full(board: Sequence[Optional[str]]) -> bool:
    return all(cell is not None for cell in board)


def is_draw(symbol: str, board: Sequence[Optional[str]], size: int, win_length: int) -> bool:
    """A draw: no empty cell left and the last mover has no line."""
    return is_full(board) and check_winner(symbol, board, size, win_length) is None
