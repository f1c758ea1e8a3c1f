"""Tests for SFEN encoding and decoding."""

from __future__ import annotations

import pytest

from shogi_online.game.board import Board, Hand, Hands, Piece
from shogi_online.game.types import PieceType, Player
from shogi_online.notation.sfen import START_SFEN, SfenError, from_sfen, to_sfen


class TestToSfen:
    def test_initial_position(self) -> None:
        assert to_sfen(Board(), Player.SENTE, Hands()) == START_SFEN

    def test_gote_to_move_and_move_number(self) -> None:
        sfen = to_sfen(Board(), Player.GOTE, Hands(), move_number=2)
        assert sfen.endswith(" w - 2")

    def test_promoted_pieces(self) -> None:
        board = (
            Board.empty()
            .set_piece(0, 0, Piece(PieceType.PAWN, Player.SENTE, promoted=True))
            .set_piece(8, 8, Piece(PieceType.ROOK, Player.GOTE, promoted=True))
        )
        rows = to_sfen(board, Player.SENTE, Hands()).split()[0].split("/")
        assert rows[0] == "+P8"
        assert rows[8] == "8+r"
        assert rows[4] == "9"

    def test_hand_order_and_counts(self) -> None:
        hands = Hands(
            sente=Hand.of({PieceType.PAWN: 2, PieceType.ROOK: 1}),
            gote=Hand.of({PieceType.BISHOP: 1, PieceType.PAWN: 10}),
        )
        sfen = to_sfen(Board.empty(), Player.SENTE, hands)
        assert sfen.split()[2] == "R2Pb10p"


class TestFromSfen:
    def test_initial_position(self) -> None:
        board, turn, hands, move_number = from_sfen(START_SFEN)
        assert board == Board()
        assert turn == Player.SENTE
        assert hands == Hands()
        assert move_number == 1

    def test_startpos_alias(self) -> None:
        assert from_sfen("startpos") == from_sfen(START_SFEN)
        assert from_sfen("") == from_sfen(START_SFEN)

    def test_sfen_prefix(self) -> None:
        assert from_sfen("sfen " + START_SFEN) == from_sfen(START_SFEN)

    def test_move_number_optional(self) -> None:
        _, _, _, move_number = from_sfen(START_SFEN.rsplit(" ", 1)[0])
        assert move_number == 1

    def test_round_trip_with_hands(self) -> None:
        sfen = "lnsgk2nl/1r4gs1/p1pppp1pp/1p4p2/7P1/2P6/PP1PPPP1P/1SG4R1/LN2KGSNL b Bb 15"
        board, turn, hands, move_number = from_sfen(sfen)
        assert hands.of(Player.SENTE).count(PieceType.BISHOP) == 1
        assert hands.of(Player.GOTE).count(PieceType.BISHOP) == 1
        assert to_sfen(board, turn, hands, move_number) == sfen

    def test_promoted_piece(self) -> None:
        board, _, _, _ = from_sfen("4k4/9/9/9/4+B4/9/9/9/4K4 w - 1")
        assert board.piece_at(4, 4) == Piece(PieceType.BISHOP, Player.SENTE, promoted=True)

    @pytest.mark.parametrize(
        "text",
        [
            "lnsgkgsnl/1r5b1/ppppppppp/9/9/9/PPPPPPPPP/LNSGKGSNL b - 1",  # 8段
            "lnsgkgsnl/1r5b1/ppppppppp/9/9/9/PPPPPPPPP/1B5R1/LNSGKGSNL x - 1",
            "lnsgkgsnl/1r5b1/ppppppppp/9/9/9/PPPPPPPPP/1B5R1/LNSGKGSNX b - 1",
            "lnsgkgsnl/1r5b1/ppppppppp/9/9/9/PPPPPPPPP/1B5R2/LNSGKGSNL b - 1",
            "4+k4/9/9/9/9/9/9/9/4K4 b - 1",
            "4k3+/9/9/9/9/9/9/9/4K4 b - 1",
            "4k4/9/9/9/9/9/9/9/4K4 b K 1",
            "4k4/9/9/9/9/9/9/9/4K4 b 2 1",
            "4k4/9/9/9/9/9/9/9/4K4 b - one",
            "4k4/9/9/9/9/9/9/9/4K4",
        ],
    )
    def test_invalid(self, text: str) -> None:
        with pytest.raises(SfenError):
            from_sfen(text)

    def test_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            from_sfen("garbage")
