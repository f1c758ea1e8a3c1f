"""Move representation for 本将棋.

指し手は「打つ手（Drop）」と「盤上の手（BoardMove）」の2種類のタグ付き共用体。
王手フラグ・消費時間は棋譜出力用の注釈で、合法手判定では参照しない。
"""

from __future__ import annotations

from dataclasses import dataclass

from shogi_online.game.types import PieceType, Square


@dataclass(frozen=True)
class MoveTime:
    """消費時間の注釈（秒）。

    Attributes:
        this_move:  その一手にかかった時間
        cumulative: 通算消費時間
    """

    this_move: int = 0
    cumulative: int = 0


@dataclass(frozen=True)
class Drop:
    """持ち駒を打つ手。"""

    piece_type: PieceType
    to: Square
    is_check: bool | None = None
    time: MoveTime | None = None


@dataclass(frozen=True)
class BoardMove:
    """盤上の駒を動かす手。

    piece_type は動かす駒の駒種（未成の種類）。盤上の駒が優先され、
    この値は表示の手がかりにしか使わない。
    """

    from_square: Square
    to: Square
    piece_type: PieceType
    promote: bool = False
    is_check: bool | None = None
    time: MoveTime | None = None


Move = Drop | BoardMove
