"""Board and hand representation for 本将棋 (9x9).

9×9盤の盤面と持ち駒のデータ構造。
イミュータブルなデータクラスで、変更メソッドは新しいオブジェクトを返す。
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from shogi_online.game.types import (
    COLS,
    HAND_PIECE_TYPES,
    NUM_SQUARES,
    PROMOTABLE,
    ROWS,
    PieceType,
    Player,
    Square,
    in_bounds,
)


@dataclass(frozen=True)
class Piece:
    """A piece on the board.

    盤面上の駒。未成の駒種・所有者・成りフラグを持つ。
    金と玉は成れないので promoted=True では作れない。
    """

    piece_type: PieceType
    owner: Player
    promoted: bool = False

    def __post_init__(self) -> None:
        if self.promoted and self.piece_type not in PROMOTABLE:
            msg = f"{self.piece_type.name} cannot be promoted"
            raise ValueError(msg)

    def promote(self) -> Piece:
        """成った駒を返す（成れない駒はそのまま）。"""
        if self.piece_type not in PROMOTABLE:
            return self
        return Piece(self.piece_type, self.owner, promoted=True)


_BACK_RANK = [
    PieceType.LANCE, PieceType.KNIGHT, PieceType.SILVER,
    PieceType.GOLD, PieceType.KING, PieceType.GOLD,
    PieceType.SILVER, PieceType.KNIGHT, PieceType.LANCE,
]


def _initial_squares() -> tuple[Piece | None, ...]:
    """Return the standard starting position (平手).

    Row 0 = 後手の後段（上端）、Row 8 = 先手の後段（下端）。
    x=0 が9筋（左端）になる点に注意。
    """
    squares: list[Piece | None] = [None] * NUM_SQUARES

    # 後手の後段（Row 0）: 香桂銀金王金銀桂香
    for x, pt in enumerate(_BACK_RANK):
        squares[0 * COLS + x] = Piece(pt, Player.GOTE)

    # Row 1: 後手の飛角（8筋に飛車、2筋に角行）
    squares[1 * COLS + 1] = Piece(PieceType.ROOK, Player.GOTE)
    squares[1 * COLS + 7] = Piece(PieceType.BISHOP, Player.GOTE)

    # Row 2 / Row 6: 歩兵（9枚ずつ）
    for x in range(COLS):
        squares[2 * COLS + x] = Piece(PieceType.PAWN, Player.GOTE)
        squares[6 * COLS + x] = Piece(PieceType.PAWN, Player.SENTE)

    # Row 7: 先手の飛角（後手と点対称）
    squares[7 * COLS + 1] = Piece(PieceType.BISHOP, Player.SENTE)
    squares[7 * COLS + 7] = Piece(PieceType.ROOK, Player.SENTE)

    # 先手の後段（Row 8）
    for x, pt in enumerate(_BACK_RANK):
        squares[8 * COLS + x] = Piece(pt, Player.SENTE)

    return tuple(squares)


def _index(x: int, y: int) -> int:
    """(x, y) の添字。盤外なら IndexError。"""
    if not in_bounds(x, y):
        msg = f"square out of range: ({x}, {y})"
        raise IndexError(msg)
    return y * COLS + x


@dataclass(frozen=True)
class Board:
    """Immutable 9x9 board.

    squares: 81要素のタプル（行優先）。squares[y * COLS + x] でアクセス。
    """

    squares: tuple[Piece | None, ...] = field(default_factory=_initial_squares)

    @classmethod
    def empty(cls) -> Board:
        """駒のない盤面を返す（詰将棋や局面指定のテスト用）。"""
        return cls(squares=(None,) * NUM_SQUARES)

    def piece_at(self, x: int, y: int) -> Piece | None:
        """マス(x, y)の駒を返す。駒がなければ None。"""
        return self.squares[_index(x, y)]

    def set_piece(self, x: int, y: int, piece: Piece | None) -> Board:
        """マス(x, y)の駒を変更した新しい Board を返す。"""
        squares = list(self.squares)
        squares[_index(x, y)] = piece
        return Board(squares=tuple(squares))

    def pieces(self, player: Player | None = None) -> Iterator[tuple[Square, Piece]]:
        """盤上の駒を ((x, y), piece) で列挙する。player 指定時はその持ち駒のみ。"""
        for idx, piece in enumerate(self.squares):
            if piece is None:
                continue
            if player is not None and piece.owner != player:
                continue
            yield (idx % COLS, idx // COLS), piece

    def find_king(self, player: Player) -> Square | None:
        """プレイヤーの王将のマスを返す。王将がなければ None。"""
        for square, piece in self.pieces(player):
            if piece.piece_type == PieceType.KING:
                return square
        return None

    def has_unpromoted_pawn(self, player: Player, x: int) -> bool:
        """Whether player has an unpromoted pawn on file x (for 二歩 check).

        二歩（同じ筋に未成の歩を2枚置くこと）を判定するために使用する。
        と金は数えない。
        """
        for y in range(ROWS):
            p = self.piece_at(x, y)
            if (
                p is not None
                and p.owner == player
                and p.piece_type == PieceType.PAWN
                and not p.promoted
            ):
                return True
        return False


@dataclass(frozen=True)
class Hand:
    """One player's captured pieces.

    counts: HAND_PIECE_TYPES の順（歩香桂銀金角飛）の枚数。
    """

    counts: tuple[int, ...] = (0,) * len(HAND_PIECE_TYPES)

    @classmethod
    def of(cls, pieces: dict[PieceType, int]) -> Hand:
        """駒種→枚数の辞書から Hand を作る。"""
        return cls(counts=tuple(pieces.get(pt, 0) for pt in HAND_PIECE_TYPES))

    def count(self, piece_type: PieceType) -> int:
        """持ち駒の枚数（玉など持ち駒にならない駒種は 0）。"""
        if piece_type not in HAND_PIECE_TYPES:
            return 0
        return self.counts[HAND_PIECE_TYPES.index(piece_type)]

    def add(self, piece_type: PieceType) -> Hand:
        """1枚追加した Hand を返す。持ち駒にならない駒種は無視する。"""
        if piece_type not in HAND_PIECE_TYPES:
            return self
        idx = HAND_PIECE_TYPES.index(piece_type)
        counts = list(self.counts)
        counts[idx] += 1
        return Hand(counts=tuple(counts))

    def remove(self, piece_type: PieceType) -> Hand:
        """1枚取り除いた Hand を返す。枚数は 0 未満にならない。"""
        if piece_type not in HAND_PIECE_TYPES:
            return self
        idx = HAND_PIECE_TYPES.index(piece_type)
        counts = list(self.counts)
        counts[idx] = max(0, counts[idx] - 1)
        return Hand(counts=tuple(counts))

    def items(self) -> Iterator[tuple[PieceType, int]]:
        """枚数が1以上の (駒種, 枚数) を列挙する。"""
        for pt, n in zip(HAND_PIECE_TYPES, self.counts):
            if n > 0:
                yield pt, n

    def is_empty(self) -> bool:
        return not any(self.counts)


@dataclass(frozen=True)
class Hands:
    """持ち駒（先手・後手）の組。"""

    sente: Hand = field(default_factory=Hand)
    gote: Hand = field(default_factory=Hand)

    def of(self, player: Player) -> Hand:
        return self.sente if player == Player.SENTE else self.gote

    def replace(self, player: Player, hand: Hand) -> Hands:
        if player == Player.SENTE:
            return Hands(sente=hand, gote=self.gote)
        return Hands(sente=self.sente, gote=hand)
