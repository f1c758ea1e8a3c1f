"""SFEN position encoding and decoding.

SFEN: 盤面・手番・持ち駒・手数を1行で表す局面表記。
  例: lnsgkgsnl/1r5b1/ppppppppp/9/9/9/PPPPPPPPP/1B5R1/LNSGKGSNL b - 1

先手の駒は大文字、後手の駒は小文字、成り駒は '+' を前置する。
"""

from __future__ import annotations

from shogi_online.game.board import Board, Hand, Hands, Piece
from shogi_online.game.types import COLS, NUM_SQUARES, ROWS, PieceType, Player

START_SFEN = "lnsgkgsnl/1r5b1/ppppppppp/9/9/9/PPPPPPPPP/1B5R1/LNSGKGSNL b - 1"

SFEN_LETTERS: dict[PieceType, str] = {
    PieceType.PAWN: "p",
    PieceType.LANCE: "l",
    PieceType.KNIGHT: "n",
    PieceType.SILVER: "s",
    PieceType.GOLD: "g",
    PieceType.BISHOP: "b",
    PieceType.ROOK: "r",
    PieceType.KING: "k",
}
_LETTER_TO_TYPE: dict[str, PieceType] = {v: k for k, v in SFEN_LETTERS.items()}

# 持ち駒の出力順: 飛角金銀桂香歩
HAND_ORDER = [
    PieceType.ROOK, PieceType.BISHOP, PieceType.GOLD, PieceType.SILVER,
    PieceType.KNIGHT, PieceType.LANCE, PieceType.PAWN,
]


class SfenError(ValueError):
    """不正な SFEN 文字列。"""


def piece_to_sfen(piece: Piece) -> str:
    letter = SFEN_LETTERS[piece.piece_type]
    if piece.owner == Player.SENTE:
        letter = letter.upper()
    return f"+{letter}" if piece.promoted else letter


def _board_to_sfen(board: Board) -> str:
    ranks: list[str] = []
    for y in range(ROWS):
        rank = ""
        empty = 0
        for x in range(COLS):
            piece = board.piece_at(x, y)
            if piece is None:
                empty += 1
                continue
            if empty:
                rank += str(empty)
                empty = 0
            rank += piece_to_sfen(piece)
        if empty:
            rank += str(empty)
        ranks.append(rank)
    return "/".join(ranks)


def _hands_to_sfen(hands: Hands) -> str:
    parts: list[str] = []
    for player in Player:
        hand = hands.of(player)
        for pt in HAND_ORDER:
            count = hand.count(pt)
            if count == 0:
                continue
            letter = SFEN_LETTERS[pt]
            if player == Player.SENTE:
                letter = letter.upper()
            parts.append(letter if count == 1 else f"{count}{letter}")
    return "".join(parts) or "-"


def to_sfen(board: Board, turn: Player, hands: Hands, move_number: int = 1) -> str:
    """Encode a position as SFEN."""
    side = "b" if turn == Player.SENTE else "w"
    return f"{_board_to_sfen(board)} {side} {_hands_to_sfen(hands)} {move_number}"


def _parse_board(text: str) -> Board:
    ranks = text.split("/")
    if len(ranks) != ROWS:
        raise SfenError(f"board must have {ROWS} ranks: {text!r}")

    squares: list[Piece | None] = [None] * NUM_SQUARES
    for y, rank in enumerate(ranks):
        x = 0
        promoted = False
        for ch in rank:
            if ch.isdigit():
                if promoted:
                    raise SfenError(f"dangling '+' in rank {y + 1}")
                x += int(ch)
                continue
            if ch == "+":
                promoted = True
                continue
            pt = _LETTER_TO_TYPE.get(ch.lower())
            if pt is None:
                raise SfenError(f"invalid piece letter: {ch!r}")
            if x >= COLS:
                raise SfenError(f"rank {y + 1} overflows")
            owner = Player.SENTE if ch.isupper() else Player.GOTE
            try:
                squares[y * COLS + x] = Piece(pt, owner, promoted)
            except ValueError as e:
                raise SfenError(str(e)) from e
            promoted = False
            x += 1
        if x != COLS or promoted:
            raise SfenError(f"rank {y + 1} must describe {COLS} squares: {rank!r}")
    return Board(squares=tuple(squares))


def _parse_hands(text: str) -> Hands:
    if text == "-":
        return Hands()
    counts: dict[Player, dict[PieceType, int]] = {Player.SENTE: {}, Player.GOTE: {}}
    number = ""
    for ch in text:
        if ch.isdigit():
            number += ch
            continue
        pt = _LETTER_TO_TYPE.get(ch.lower())
        if pt is None or pt == PieceType.KING:
            raise SfenError(f"invalid hand piece: {ch!r}")
        owner = Player.SENTE if ch.isupper() else Player.GOTE
        counts[owner][pt] = counts[owner].get(pt, 0) + int(number or "1")
        number = ""
    if number:
        raise SfenError(f"hand ends with a count: {text!r}")
    return Hands(sente=Hand.of(counts[Player.SENTE]), gote=Hand.of(counts[Player.GOTE]))


def from_sfen(text: str) -> tuple[Board, Player, Hands, int]:
    """Decode SFEN into (board, turn, hands, move_number).

    "startpos" は平手の初期局面として扱う。
    """
    text = text.strip()
    if text in ("", "startpos"):
        text = START_SFEN
    if text.startswith("sfen "):
        text = text[len("sfen "):]

    parts = text.split()
    if len(parts) not in (3, 4):
        raise SfenError(f"SFEN must have 3 or 4 fields: {text!r}")
    if parts[1] not in ("b", "w"):
        raise SfenError(f"invalid side to move: {parts[1]!r}")

    board = _parse_board(parts[0])
    turn = Player.SENTE if parts[1] == "b" else Player.GOTE
    hands = _parse_hands(parts[2])
    move_number = 1
    if len(parts) == 4:
        if not parts[3].isdigit():
            raise SfenError(f"invalid move number: {parts[3]!r}")
        move_number = int(parts[3])
    return board, turn, hands, move_number
