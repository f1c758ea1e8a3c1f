"""USI move strings (7g7f, 8h2b+, P*5e).

筋は数字（1〜9）、段はアルファベット（a〜i、a が一段目）。
CLI の入力などで使う。
"""

from __future__ import annotations

from shogi_online.game.board import Board
from shogi_online.game.moves import BoardMove, Drop, Move
from shogi_online.game.types import COLS, PieceType, Square, in_bounds
from shogi_online.notation.sfen import SFEN_LETTERS

_DROP_LETTERS: dict[str, PieceType] = {
    v.upper(): k for k, v in SFEN_LETTERS.items() if k != PieceType.KING
}


class UsiError(ValueError):
    """不正な USI 指し手文字列。"""


def square_to_usi(square: Square) -> str:
    x, y = square
    return f"{COLS - x}{chr(ord('a') + y)}"


def usi_to_square(text: str) -> Square:
    if len(text) != 2 or not text[0].isdigit():
        raise UsiError(f"invalid square: {text!r}")
    x = COLS - int(text[0])
    y = ord(text[1]) - ord("a")
    if not in_bounds(x, y):
        raise UsiError(f"square out of range: {text!r}")
    return x, y


def parse_usi(text: str, board: Board) -> Move:
    """Parse a USI move; the board supplies the moving piece's type.

    盤上の手で移動元に駒がない場合は UsiError。
    """
    text = text.strip()
    if len(text) == 4 and text[1] == "*":
        pt = _DROP_LETTERS.get(text[0].upper())
        if pt is None:
            raise UsiError(f"invalid drop piece: {text[0]!r}")
        return Drop(pt, usi_to_square(text[2:4]))

    if len(text) not in (4, 5) or (len(text) == 5 and text[4] != "+"):
        raise UsiError(f"invalid USI move: {text!r}")
    from_square = usi_to_square(text[0:2])
    to = usi_to_square(text[2:4])
    piece = board.piece_at(*from_square)
    if piece is None:
        raise UsiError(f"no piece on {text[0:2]}")
    return BoardMove(from_square, to, piece.piece_type, promote=len(text) == 5)


def to_usi(move: Move) -> str:
    if isinstance(move, Drop):
        return f"{SFEN_LETTERS[move.piece_type].upper()}*{square_to_usi(move.to)}"
    suffix = "+" if move.promote else ""
    return f"{square_to_usi(move.from_square)}{square_to_usi(move.to)}{suffix}"
