"""Tests for GameRecord replay, undo and branching."""

from __future__ import annotations

import logging

import pytest

from shogi_online.game.board import Board, Hands, Piece
from shogi_online.game.moves import BoardMove, Drop
from shogi_online.game.record import GameRecord, Position
from shogi_online.game.types import PieceType, Player
from shogi_online.notation.sfen import START_SFEN

P76 = BoardMove((2, 6), (2, 5), PieceType.PAWN)   # ７六歩
P34 = BoardMove((6, 2), (6, 3), PieceType.PAWN)   # ３四歩
P26 = BoardMove((7, 6), (7, 5), PieceType.PAWN)   # ２六歩
P84 = BoardMove((1, 2), (1, 3), PieceType.PAWN)   # ８四歩


def _opening() -> GameRecord:
    record = GameRecord()
    for move in (P76, P34, P26):
        next_record = record.play(move)
        assert next_record is not None
        record = next_record
    return record


class TestPlay:
    def test_empty_record(self) -> None:
        record = GameRecord()
        assert len(record) == 0
        assert record.current == Position()
        assert record.current.turn == Player.SENTE

    def test_play_appends(self) -> None:
        record = _opening()
        assert len(record) == 3
        assert record.current.turn == Player.GOTE
        assert record.current.ply == 3
        assert record.current.last_move == P26
        assert record.current.last_destination == (7, 5)

    def test_illegal_move_returns_none(self) -> None:
        assert GameRecord().play(P34) is None  # 後手の歩を先手番で動かす

    def test_illegal_move_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="shogi_online.game.record"):
            GameRecord().play(Drop(PieceType.GOLD, (4, 4)))
        assert "Rejected illegal move" in caplog.text

    def test_record_is_immutable(self) -> None:
        record = GameRecord()
        record.play(P76)
        assert len(record) == 0


class TestPositionAt:
    def test_initial_position(self) -> None:
        position = _opening().position_at(0)
        assert position.board == Board()
        assert position.hands == Hands()
        assert position.to_sfen() == START_SFEN

    def test_intermediate_ply(self) -> None:
        position = _opening().position_at(1)
        assert position.turn == Player.GOTE
        assert position.board.piece_at(2, 5) == Piece(PieceType.PAWN, Player.SENTE)
        assert position.board.piece_at(6, 3) is None

    def test_ply_is_clamped(self) -> None:
        record = _opening()
        assert record.position_at(99) == record.current
        assert record.position_at(-5) == record.position_at(0)

    def test_sfen_move_number(self) -> None:
        sfen = _opening().position_at(2).to_sfen()
        assert sfen.endswith(" b - 3")

    def test_in_check_flag(self) -> None:
        board = (
            Board.empty()
            .set_piece(4, 8, Piece(PieceType.KING, Player.SENTE))
            .set_piece(4, 0, Piece(PieceType.ROOK, Player.GOTE))
        )
        record = GameRecord(initial_board=board)
        assert record.current.in_check
        assert not record.current.is_checkmate

    def test_nyugyoku_view(self) -> None:
        state = GameRecord().current.nyugyoku(Player.SENTE)
        assert not state.can_declare
        assert state.required_score == 28


class TestUndoAndBranch:
    def test_undo(self) -> None:
        record = _opening().undo()
        assert len(record) == 2
        assert record.current.turn == Player.SENTE

    def test_undo_empty_is_noop(self) -> None:
        assert GameRecord().undo() == GameRecord()

    def test_truncate(self) -> None:
        record = _opening().truncate(1)
        assert record.moves == (P76,)

    def test_branch_replaces_tail(self) -> None:
        record = _opening().branch(1, P84)
        assert record is not None
        assert record.moves == (P76, P84)

    def test_branch_with_illegal_move(self) -> None:
        assert _opening().branch(1, P76) is None

    def test_custom_start_position_kept(self) -> None:
        board = (
            Board.empty()
            .set_piece(4, 8, Piece(PieceType.KING, Player.SENTE))
            .set_piece(4, 0, Piece(PieceType.KING, Player.GOTE))
        )
        record = GameRecord(initial_board=board, initial_turn=Player.GOTE)
        record = record.play(BoardMove((4, 0), (4, 1), PieceType.KING))
        assert record is not None
        assert record.undo().initial_board == board
        assert record.current.turn == Player.SENTE


class TestTamperedRecord:
    def test_off_board_move_stops_replay(self, caplog: pytest.LogCaptureFixture) -> None:
        """盤外の座標を含む棋譜は直前の局面で再生を止め、ログに残す。"""
        tampered = BoardMove((-1, 8), (-1, 7), PieceType.LANCE)
        record = GameRecord(moves=(P76, tampered, P34))
        with caplog.at_level(logging.ERROR, logger="shogi_online.game.record"):
            position = record.position_at()
        assert position.ply == 1
        assert position.last_move == P76
        assert position.board.piece_at(8, 6) == Piece(PieceType.PAWN, Player.SENTE)
        assert "Failed to replay move 2" in caplog.text

    def test_positions_before_tampering_are_intact(self) -> None:
        tampered = BoardMove((-1, 7), (-1, 6), PieceType.PAWN)
        record = GameRecord(moves=(P76, tampered))
        assert record.position_at(1) == GameRecord(moves=(P76,)).current
