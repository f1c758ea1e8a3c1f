"""入玉宣言 (entering-king declaration) scoring.

点数計算（27点法）:
  - 敵陣3段以内の自駒（玉を除く）と持ち駒を数える
  - 大駒（角・飛、成っていても）は5点、それ以外は1点
  - 先手28点以上・後手27点以上、敵陣の駒10枚以上、玉が敵陣にあれば宣言可能

持ち駒は点数にだけ加算し、敵陣の枚数には数えない。
手番かどうか・王手されていないかは宣言する側（can_declare_win）で判定する。
"""

from __future__ import annotations

from dataclasses import dataclass

from shogi_online.game.board import Board, Hands
from shogi_online.game.rules import is_in_check
from shogi_online.game.types import MAJOR_PIECES, PieceType, Player, promotion_zone

MIN_PIECES_IN_ZONE = 10
REQUIRED_SCORE: dict[Player, int] = {
    Player.SENTE: 28,
    Player.GOTE: 27,
}


@dataclass(frozen=True)
class NyugyokuState:
    """入玉宣言の判定結果。"""

    score: int
    pieces_in_zone: int
    king_in_zone: bool
    can_declare: bool
    required_score: int


def piece_points(piece_type: PieceType) -> int:
    """大駒5点、小駒1点（玉は0点）。"""
    if piece_type == PieceType.KING:
        return 0
    return 5 if piece_type in MAJOR_PIECES else 1


def nyugyoku_state(board: Board, hands: Hands, player: Player) -> NyugyokuState:
    """Compute declaration eligibility and score for player."""
    zone = promotion_zone(player)
    score = 0
    pieces_in_zone = 0
    king_in_zone = False

    for (_, y), piece in board.pieces(player):
        if y not in zone:
            continue
        if piece.piece_type == PieceType.KING:
            king_in_zone = True
            continue
        score += piece_points(piece.piece_type)
        pieces_in_zone += 1

    for pt, count in hands.of(player).items():
        score += count * piece_points(pt)

    required = REQUIRED_SCORE[player]
    return NyugyokuState(
        score=score,
        pieces_in_zone=pieces_in_zone,
        king_in_zone=king_in_zone,
        can_declare=(
            king_in_zone and pieces_in_zone >= MIN_PIECES_IN_ZONE and score >= required
        ),
        required_score=required,
    )


def can_declare_win(board: Board, hands: Hands, player: Player, turn: Player) -> bool:
    """Whether player may declare right now.

    点数条件に加えて、自分の手番であり王手されていないことが必要。
    """
    if turn != player:
        return False
    if is_in_check(board, player):
        return False
    return nyugyoku_state(board, hands, player).can_declare
