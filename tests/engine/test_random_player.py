"""Tests for random player."""

from __future__ import annotations

import random

import pytest

from shogi_online.engine.random_player import random_move
from shogi_online.game.board import Board, Hands, Piece
from shogi_online.game.rules import legal_moves
from shogi_online.game.types import PieceType, Player


def test_returns_legal_move() -> None:
    move = random_move(Board(), Hands(), Player.SENTE)
    assert move in legal_moves(Board(), Hands(), Player.SENTE)


def test_seeded_rng_is_reproducible() -> None:
    a = random_move(Board(), Hands(), Player.SENTE, random.Random(42))
    b = random_move(Board(), Hands(), Player.SENTE, random.Random(42))
    assert a == b


def test_no_legal_moves_raises() -> None:
    """頭金で詰んだ局面では指す手がない。"""
    board = (
        Board.empty()
        .set_piece(4, 0, Piece(PieceType.KING, Player.GOTE))
        .set_piece(4, 1, Piece(PieceType.GOLD, Player.SENTE))
        .set_piece(4, 2, Piece(PieceType.PAWN, Player.SENTE))
    )
    with pytest.raises(ValueError):
        random_move(board, Hands(), Player.GOTE)
