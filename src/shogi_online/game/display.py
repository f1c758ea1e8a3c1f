"""Terminal display for 本将棋."""

from __future__ import annotations

from shogi_online.game.board import Board, Hand, Hands
from shogi_online.game.types import COLS, ROWS, PieceType, Player

# 未成駒の表示文字
PIECE_KANJI: dict[PieceType, str] = {
    PieceType.PAWN: "歩",
    PieceType.LANCE: "香",
    PieceType.KNIGHT: "桂",
    PieceType.SILVER: "銀",
    PieceType.GOLD: "金",
    PieceType.BISHOP: "角",
    PieceType.ROOK: "飛",
    PieceType.KING: "玉",
}

# 成り駒の棋譜表記
PROMOTED_KANJI: dict[PieceType, str] = {
    PieceType.PAWN: "と",
    PieceType.LANCE: "成香",
    PieceType.KNIGHT: "成桂",
    PieceType.SILVER: "成銀",
    PieceType.BISHOP: "馬",
    PieceType.ROOK: "龍",
}

# 盤面表示用の1文字表記
_PROMOTED_CHARS: dict[PieceType, str] = {
    PieceType.PAWN: "と",
    PieceType.LANCE: "杏",
    PieceType.KNIGHT: "圭",
    PieceType.SILVER: "全",
    PieceType.BISHOP: "馬",
    PieceType.ROOK: "龍",
}

RANK_KANJI = ["一", "二", "三", "四", "五", "六", "七", "八", "九"]


def piece_name(piece_type: PieceType, promoted: bool = False) -> str:
    """棋譜で使う駒名（成り駒は と・成香・成桂・成銀・馬・龍）。"""
    if promoted:
        return PROMOTED_KANJI.get(piece_type, PIECE_KANJI[piece_type])
    return PIECE_KANJI[piece_type]


def format_board(board: Board, hands: Hands | None = None) -> str:
    """Format the board for terminal display."""
    hands = hands or Hands()
    lines: list[str] = []

    lines.append(f"後手持駒: {_format_hand(hands.of(Player.GOTE))}")
    lines.append("  ９ ８ ７ ６ ５ ４ ３ ２ １")
    lines.append("+--+--+--+--+--+--+--+--+--+")

    for y in range(ROWS):
        row_str = "|"
        for x in range(COLS):
            piece = board.piece_at(x, y)
            if piece is None:
                row_str += "  |"
                continue
            if piece.promoted:
                char = _PROMOTED_CHARS[piece.piece_type]
            else:
                char = PIECE_KANJI[piece.piece_type]
            mark = "v" if piece.owner == Player.GOTE else " "
            row_str += f"{mark}{char}|"
        lines.append(f"{row_str} {RANK_KANJI[y]}")
        lines.append("+--+--+--+--+--+--+--+--+--+")

    lines.append(f"先手持駒: {_format_hand(hands.of(Player.SENTE))}")

    return "\n".join(lines)


def _format_hand(hand: Hand) -> str:
    if hand.is_empty():
        return "なし"
    pieces: list[str] = []
    for pt, count in hand.items():
        char = PIECE_KANJI[pt]
        pieces.append(char if count == 1 else f"{char}{count}")
    return " ".join(pieces)
