"""本将棋 (Shogi) rules engine — 9x9 board."""

from shogi_online.game.board import Board, Hand, Hands, Piece
from shogi_online.game.moves import BoardMove, Drop, Move, MoveTime
from shogi_online.game.nyugyoku import NyugyokuState, can_declare_win, nyugyoku_state
from shogi_online.game.rules import (
    apply_move,
    has_any_legal_move,
    is_checkmate,
    is_in_check,
    is_legal,
    legal_moves,
    promotion_status,
)
from shogi_online.game.types import (
    COLS,
    ROWS,
    EndReason,
    PieceType,
    Player,
    PromotionStatus,
)

__all__ = [
    "Board",
    "BoardMove",
    "COLS",
    "Drop",
    "EndReason",
    "Hand",
    "Hands",
    "Move",
    "MoveTime",
    "NyugyokuState",
    "Piece",
    "PieceType",
    "Player",
    "PromotionStatus",
    "ROWS",
    "apply_move",
    "can_declare_win",
    "has_any_legal_move",
    "is_checkmate",
    "is_in_check",
    "is_legal",
    "legal_moves",
    "nyugyoku_state",
    "promotion_status",
]
