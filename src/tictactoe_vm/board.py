"""
Board basics: representation, serialization, winner detection, square clicks.
Notes:
- A board is a tuple of 9 cells in row-major order: None=empty, "X" or "O".
- Boards are never mutated; a move produces a new tuple.
- X always starts.
"""
from typing import Optional, Tuple

X = "X"
O = "O"
PLAYERS = (X, O)

Board = Tuple[Optional[str], ...]

BOARD_SIZE = 9

WIN_PATTERNS = [
    [0, 1, 2], [3, 4, 5], [6, 7, 8],
    [0, 3, 6], [1, 4, 7], [2, 5, 8],
    [0, 4, 8], [2, 4, 6]
]

EMPTY_CHARS = ".-_ "


def empty_board() -> Board:
    return (None,) * BOARD_SIZE


def check_square(square: int) -> int:
    if isinstance(square, bool) or not isinstance(square, int):
        raise ValueError(f"Square index must be an integer, got {square!r}")
    if not 0 <= square < BOARD_SIZE:
        raise ValueError(f"Square index out of range [0, 8]: {square}")
    return square


def serialize_board(board: Board) -> str:
    return ''.join(cell if cell is not None else '.' for cell in board)


def deserialize_board(board_str: str) -> Board:
    """Parse a 9-character board string such as ``"XX.OO...."``.

    Lowercase ``x``/``o`` are accepted; ``.``, ``-``, ``_`` and space mean empty.
    """
    if len(board_str) != BOARD_SIZE:
        raise ValueError(f"Board string must have 9 cells, got {len(board_str)}: {board_str!r}")
    cells = []
    for ch in board_str:
        up = ch.upper()
        if up in PLAYERS:
            cells.append(up)
        elif ch in EMPTY_CHARS:
            cells.append(None)
        else:
            raise ValueError(f"Invalid board cell {ch!r} in {board_str!r}")
    return tuple(cells)


def calculate_winner(board: Board) -> Optional[str]:
    for pattern in WIN_PATTERNS:
        a, b, c = pattern
        v = board[a]
        if v is not None and v == board[b] and v == board[c]:
            return v
    return None


def is_draw(board: Board) -> bool:
    return None not in board and calculate_winner(board) is None


def click_square(board: Board, next_player: str, square: int) -> Board:
    """Place ``next_player`` on ``square``.

    Returns the very same ``board`` object when the square is taken or the
    game is already won; callers compare by identity to detect the no-op.
    """
    check_square(square)
    if board[square] is not None or calculate_winner(board) is not None:
        return board
    return board[:square] + (next_player,) + board[square + 1:]
