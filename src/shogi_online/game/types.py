"""Types and constants for the shogi rules engine (9x9).

本将棋（9×9盤）の基本型・定数定義。
駒種は未成の8種のみを持ち、成り駒は Piece.promoted で表す。
（駒種と成りフラグが食い違う状態を構造上作れないようにするため）
"""

from __future__ import annotations

from enum import Enum, IntEnum, unique

ROWS = 9
COLS = 9
NUM_SQUARES = ROWS * COLS  # 81マス

# マス座標 (x, y)。x=列（0が9筋）、y=行（0が後手の一段目）
Square = tuple[int, int]


@unique
class Player(IntEnum):
    """Player identifiers.

    先手（SENTE）は下側から上に向かって進む（row 8 → row 0）。
    後手（GOTE）は上側から下に向かって進む（row 0 → row 8）。
    """

    SENTE = 0  # 先手
    GOTE = 1   # 後手

    @property
    def opponent(self) -> Player:
        """相手プレイヤーを返す。"""
        return Player(1 - self.value)

    @property
    def forward(self) -> int:
        """前進方向の行の増分（先手 -1、後手 +1）。"""
        return -1 if self == Player.SENTE else 1

    @property
    def label(self) -> str:
        """棋譜用の表記（先手/後手）。"""
        return "先手" if self == Player.SENTE else "後手"


@unique
class PieceType(IntEnum):
    """Base piece kinds（8種類）.

    成り駒（と・成香・成桂・成銀・馬・龍）は独立した種類として持たず、
    Piece(piece_type, owner, promoted=True) で表現する。
    """

    PAWN = 0    # 歩
    LANCE = 1   # 香
    KNIGHT = 2  # 桂
    SILVER = 3  # 銀
    GOLD = 4    # 金
    BISHOP = 5  # 角
    ROOK = 6    # 飛
    KING = 7    # 玉/王


@unique
class PromotionStatus(Enum):
    """成りの可否。"""

    MUST = "must"  # 成らないと行き所がない
    CAN = "can"    # 成っても成らなくてもよい
    NONE = "none"  # 成れない


@unique
class EndReason(str, Enum):
    """終局理由（対局サーバから渡される文字列と同じ値）。"""

    RESIGN = "resign"                          # 投了
    TIMEOUT = "timeout"                        # 時間切れ
    SENNICHITE = "sennichite"                  # 千日手（引き分け）
    ILLEGAL_SENNICHITE = "illegal_sennichite"  # 連続王手の千日手（反則負け）
    NYUGYOKU = "nyugyoku"                      # 入玉宣言勝ち
    CHECKMATE = "checkmate"                    # 詰み


# 成れる駒種（金・玉以外）
PROMOTABLE: frozenset[PieceType] = frozenset({
    PieceType.PAWN, PieceType.LANCE, PieceType.KNIGHT,
    PieceType.SILVER, PieceType.BISHOP, PieceType.ROOK,
})

# 成ると金と同じ動きになる駒種
GOLD_MOVERS_WHEN_PROMOTED: frozenset[PieceType] = frozenset({
    PieceType.PAWN, PieceType.LANCE, PieceType.KNIGHT, PieceType.SILVER,
})

# 持ち駒として使える駒種（未成の非玉駒、7種）
HAND_PIECE_TYPES = [
    PieceType.PAWN, PieceType.LANCE, PieceType.KNIGHT,
    PieceType.SILVER, PieceType.GOLD, PieceType.BISHOP, PieceType.ROOK,
]

# 大駒（入玉の点数計算で5点）
MAJOR_PIECES: frozenset[PieceType] = frozenset({PieceType.BISHOP, PieceType.ROOK})

# 1マス移動の方向定義（先手視点の (dx, dy)、前 = y 減少方向）
# 後手の場合は dy を反転して使う
_GOLD_STEPS = [(-1, -1), (0, -1), (1, -1), (-1, 0), (1, 0), (0, 1)]
STEP_MOVES: dict[PieceType, list[tuple[int, int]]] = {
    PieceType.PAWN: [(0, -1)],  # 歩: 1マス前のみ
    PieceType.SILVER: [(-1, -1), (0, -1), (1, -1), (-1, 1), (1, 1)],  # 銀: 前3方向+斜め後
    PieceType.GOLD: _GOLD_STEPS,  # 金: 斜め後以外の6方向
    PieceType.KING: [
        (-1, -1), (0, -1), (1, -1),
        (-1, 0), (1, 0),
        (-1, 1), (0, 1), (1, 1),
    ],  # 王: 全8方向1マス
}

# 桂馬のジャンプ（2マス前+左右1マス、間の駒を飛び越える）
KNIGHT_MOVES: list[tuple[int, int]] = [(-1, -2), (1, -2)]

# 遠距離移動の方向定義（同方向に繰り返し移動できる）
SLIDE_MOVES: dict[PieceType, list[tuple[int, int]]] = {
    PieceType.LANCE: [(0, -1)],                               # 香: 前方向のみ
    PieceType.BISHOP: [(-1, -1), (1, -1), (-1, 1), (1, 1)],   # 角・馬: 斜め4方向
    PieceType.ROOK: [(0, -1), (0, 1), (-1, 0), (1, 0)],       # 飛・龍: 縦横4方向
}

# 馬（成り角）の追加1マス移動（縦横に1マスだけ動ける）
HORSE_EXTRA_STEPS: list[tuple[int, int]] = [(0, -1), (0, 1), (-1, 0), (1, 0)]
# 龍（成り飛）の追加1マス移動（斜めに1マスだけ動ける）
DRAGON_EXTRA_STEPS: list[tuple[int, int]] = [(-1, -1), (1, -1), (-1, 1), (1, 1)]


def in_bounds(x: int, y: int) -> bool:
    """(x, y) が盤内なら True。"""
    return 0 <= x < COLS and 0 <= y < ROWS


def promotion_zone(player: Player) -> range:
    """Rows of the opponent's camp (敵陣3段)."""
    return range(0, 3) if player == Player.SENTE else range(6, 9)


def ranks_from_far_edge(player: Player, y: int) -> int:
    """相手側の端から数えた段数（0 = 最奥の段）。"""
    return y if player == Player.SENTE else ROWS - 1 - y
