"""Tests for shogi engine types."""

from __future__ import annotations

from shogi_online.game.types import (
    COLS,
    HAND_PIECE_TYPES,
    PROMOTABLE,
    ROWS,
    EndReason,
    PieceType,
    Player,
    in_bounds,
    promotion_zone,
)


def test_board_dimensions() -> None:
    assert ROWS == 9
    assert COLS == 9


def test_player_opponent() -> None:
    assert Player.SENTE.opponent == Player.GOTE
    assert Player.GOTE.opponent == Player.SENTE


def test_player_forward() -> None:
    assert Player.SENTE.forward == -1
    assert Player.GOTE.forward == 1


def test_8_base_piece_types() -> None:
    assert len(PieceType) == 8


def test_gold_and_king_not_promotable() -> None:
    assert PieceType.GOLD not in PROMOTABLE
    assert PieceType.KING not in PROMOTABLE
    assert len(PROMOTABLE) == 6


def test_hand_piece_types() -> None:
    assert len(HAND_PIECE_TYPES) == 7
    assert PieceType.KING not in HAND_PIECE_TYPES
    assert PieceType.PAWN in HAND_PIECE_TYPES
    assert PieceType.ROOK in HAND_PIECE_TYPES


def test_promotion_zone() -> None:
    assert list(promotion_zone(Player.SENTE)) == [0, 1, 2]
    assert list(promotion_zone(Player.GOTE)) == [6, 7, 8]


def test_in_bounds() -> None:
    assert in_bounds(0, 0)
    assert in_bounds(8, 8)
    assert not in_bounds(-1, 4)
    assert not in_bounds(4, 9)


def test_end_reason_values_match_server_strings() -> None:
    assert EndReason("resign") == EndReason.RESIGN
    assert EndReason("illegal_sennichite") == EndReason.ILLEGAL_SENNICHITE
