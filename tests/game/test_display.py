"""Tests for terminal display and piece names."""

from __future__ import annotations

from shogi_online.game.board import Board, Hand, Hands
from shogi_online.game.display import format_board, piece_name
from shogi_online.game.types import PieceType, Player


def test_piece_names() -> None:
    assert piece_name(PieceType.PAWN) == "歩"
    assert piece_name(PieceType.PAWN, promoted=True) == "と"
    assert piece_name(PieceType.LANCE, promoted=True) == "成香"
    assert piece_name(PieceType.BISHOP, promoted=True) == "馬"
    assert piece_name(PieceType.ROOK, promoted=True) == "龍"


def test_format_initial_board() -> None:
    text = format_board(Board())
    lines = text.split("\n")
    assert lines[0] == "後手持駒: なし"
    assert lines[-1] == "先手持駒: なし"
    assert "v香" in lines[3]
    assert " 玉" in text
    assert len(lines) == 2 + 1 + 9 * 2 + 1


def test_format_hands() -> None:
    hands = Hands().replace(Player.SENTE, Hand.of({PieceType.PAWN: 2, PieceType.ROOK: 1}))
    text = format_board(Board.empty(), hands)
    assert text.split("\n")[-1] == "先手持駒: 歩2 飛"
