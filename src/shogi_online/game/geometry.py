"""Piece movement geometry.

駒の利き（到達可能性）の判定。盤面の幾何だけを見て、
移動先の自駒や王手放置は考慮しない（それらは rules.is_legal の責務）。
"""

from __future__ import annotations

from shogi_online.game.board import Board, Piece
from shogi_online.game.types import (
    DRAGON_EXTRA_STEPS,
    GOLD_MOVERS_WHEN_PROMOTED,
    HORSE_EXTRA_STEPS,
    KNIGHT_MOVES,
    SLIDE_MOVES,
    STEP_MOVES,
    PieceType,
    Player,
    Square,
)


def _sign(n: int) -> int:
    return (n > 0) - (n < 0)


def has_obstacle(board: Board, from_square: Square, to: Square) -> bool:
    """Whether any piece stands strictly between two squares on a straight line.

    2マス間（両端を除く）の直線経路上に駒があれば True。
    縦・横・斜めの直線上にあることは呼び出し側が保証する。
    """
    dx = _sign(to[0] - from_square[0])
    dy = _sign(to[1] - from_square[1])
    x, y = from_square[0] + dx, from_square[1] + dy
    while (x, y) != to:
        if board.piece_at(x, y) is not None:
            return True
        x, y = x + dx, y + dy
    return False


def _step_table(piece: Piece) -> list[tuple[int, int]]:
    """成りを考慮した1マス移動の方向表。"""
    if piece.promoted and piece.piece_type in GOLD_MOVERS_WHEN_PROMOTED:
        return STEP_MOVES[PieceType.GOLD]  # と・成香・成桂・成銀は金と同じ
    if piece.promoted and piece.piece_type == PieceType.BISHOP:
        return HORSE_EXTRA_STEPS
    if piece.promoted and piece.piece_type == PieceType.ROOK:
        return DRAGON_EXTRA_STEPS
    return STEP_MOVES.get(piece.piece_type, [])


def can_reach(
    board: Board,
    from_square: Square,
    to: Square,
    piece: Piece,
    mover: Player,
) -> bool:
    """Return True if piece at from_square can geometrically move to `to`.

    駒が from_square から to に動けるかを返す。
    方向表は先手視点（前 = dy -1）なので、mover.forward で向きをそろえて比較する。
    左右対称なので dx の反転は不要。
    """
    dx = to[0] - from_square[0]
    dy = (from_square[1] - to[1]) * mover.forward
    if dx == 0 and dy == 0:
        return False

    if (dx, dy) in _step_table(piece):
        return True

    if piece.promoted and piece.piece_type in GOLD_MOVERS_WHEN_PROMOTED:
        return False

    # 桂馬: 間の駒を飛び越える
    if piece.piece_type == PieceType.KNIGHT:
        return (dx, dy) in KNIGHT_MOVES

    # 遠距離移動（香・角・飛、馬・龍）
    directions = SLIDE_MOVES.get(piece.piece_type)
    if directions is None:
        return False
    if dx != 0 and dy != 0 and abs(dx) != abs(dy):
        return False
    if (_sign(dx), _sign(dy)) not in directions:
        return False
    return not has_obstacle(board, from_square, to)
