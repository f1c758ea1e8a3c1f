"""Rules of 本将棋: check, state transition, legality and move enumeration.

すべて純粋関数。盤面・持ち駒・手番を引数で受け取り、
真偽値または新しい局面を返す。グローバルな状態は持たない。

打ち歩詰めの判定は「相手に合法手が残るか」を調べるために is_legal を
再帰的に呼ぶ。内側の呼び出しでは check_no_pawn_mate=False を渡して
同じ判定が再び起きないようにしている（これがないと停止しない）。
"""

from __future__ import annotations

from collections.abc import Iterator

from shogi_online.game.board import Board, Hands, Piece
from shogi_online.game.geometry import can_reach
from shogi_online.game.moves import BoardMove, Drop, Move
from shogi_online.game.types import (
    COLS,
    HAND_PIECE_TYPES,
    PROMOTABLE,
    ROWS,
    PieceType,
    Player,
    PromotionStatus,
    in_bounds,
    promotion_zone,
    ranks_from_far_edge,
)

# ---------------------------------------------------------------------------
# 王手判定
# ---------------------------------------------------------------------------


def is_in_check(board: Board, player: Player) -> bool:
    """Check if player's king is attacked by any opposing piece.

    王将がいない局面（合法手の連続では起きない）は王手ではないとみなす。
    """
    king = board.find_king(player)
    if king is None:
        return False

    opponent = player.opponent
    for square, piece in board.pieces(opponent):
        if can_reach(board, square, king, piece, opponent):
            return True
    return False


# ---------------------------------------------------------------------------
# 局面遷移
# ---------------------------------------------------------------------------


def apply_move(
    board: Board,
    hands: Hands,
    move: Move,
    mover: Player,
) -> tuple[Board, Hands, Player]:
    """Apply a move and return (board, hands, next_turn).

    合法性は仮定しない（呼び出し側が is_legal で確認する）。
    不正な手でも例外は出さず、形の整った局面を返す。
    """
    next_turn = mover.opponent

    if isinstance(move, Drop):
        x, y = move.to
        new_board = board.set_piece(x, y, Piece(move.piece_type, mover))
        new_hands = hands.replace(mover, hands.of(mover).remove(move.piece_type))
        return new_board, new_hands, next_turn

    fx, fy = move.from_square
    tx, ty = move.to
    piece = board.piece_at(fx, fy)
    if piece is None:
        return board, hands, next_turn

    # 駒を取ったら元の駒種に戻して持ち駒に加える（龍を取ったら飛車）
    new_hands = hands
    target = board.piece_at(tx, ty)
    if target is not None and target.owner != mover:
        new_hands = hands.replace(mover, hands.of(mover).add(target.piece_type))

    # 成りは一方通行: 成り駒は promote=False でも成ったまま
    moved = piece.promote() if move.promote else piece

    new_board = board.set_piece(fx, fy, None).set_piece(tx, ty, moved)
    return new_board, new_hands, next_turn


# ---------------------------------------------------------------------------
# 成り判定
# ---------------------------------------------------------------------------


def _must_promote(piece_type: PieceType, player: Player, to_y: int) -> bool:
    """Check if promotion is mandatory (piece has no further moves).

    行き所のない駒: 歩・香は最奥の段、桂は奥の2段。
    """
    far = ranks_from_far_edge(player, to_y)
    if piece_type in (PieceType.PAWN, PieceType.LANCE):
        return far == 0
    if piece_type == PieceType.KNIGHT:
        return far <= 1
    return False


def promotion_status(
    piece_type: PieceType,
    from_y: int,
    to_y: int,
    mover: Player,
    promoted: bool = False,
) -> PromotionStatus:
    """Classify a board move as forced / optional / no promotion.

    UIが成り・不成の選択を出すかどうかに使う。
    """
    if piece_type not in PROMOTABLE or promoted:
        return PromotionStatus.NONE
    if _must_promote(piece_type, mover, to_y):
        return PromotionStatus.MUST
    zone = promotion_zone(mover)
    if from_y in zone or to_y in zone:
        return PromotionStatus.CAN
    return PromotionStatus.NONE


def _dead_drop(piece_type: PieceType, player: Player, y: int) -> bool:
    """行き所のない場所への打ち込みなら True。"""
    return _must_promote(piece_type, player, y)


# ---------------------------------------------------------------------------
# 合法手判定
# ---------------------------------------------------------------------------


def is_legal(
    board: Board,
    hands: Hands,
    mover: Player,
    move: Move,
    check_no_pawn_mate: bool = True,
) -> bool:
    """Return True if `move` is legal for `mover`.

    判定順（最初に失敗した時点で False）:
    1. 移動先が盤内
    2. 移動先に自駒がない
    3. 打つ手: 空きマス・持ち駒あり・二歩・行き所のない駒
    4. 盤上の手: 移動元に自駒・駒の利き・成りの可否
    5. 指した後に自玉が王手されていない
    6. 打ち歩詰め（check_no_pawn_mate=True のときのみ）
    """
    tx, ty = move.to
    if not in_bounds(tx, ty):
        return False
    target = board.piece_at(tx, ty)
    if target is not None and target.owner == mover:
        return False

    if isinstance(move, Drop):
        if target is not None:
            return False
        if hands.of(mover).count(move.piece_type) < 1:
            return False
        if move.piece_type == PieceType.PAWN and board.has_unpromoted_pawn(mover, tx):
            return False  # 二歩
        if _dead_drop(move.piece_type, mover, ty):
            return False
    else:
        fx, fy = move.from_square
        if not in_bounds(fx, fy):
            return False
        piece = board.piece_at(fx, fy)
        if piece is None or piece.owner != mover:
            return False
        if not can_reach(board, move.from_square, move.to, piece, mover):
            return False
        status = promotion_status(piece.piece_type, fy, ty, mover, piece.promoted)
        if status == PromotionStatus.MUST and not move.promote:
            return False
        if status == PromotionStatus.NONE and move.promote and not piece.promoted:
            return False

    new_board, new_hands, _ = apply_move(board, hands, move, mover)
    if is_in_check(new_board, mover):
        return False  # 王手放置・自殺手

    if (
        check_no_pawn_mate
        and isinstance(move, Drop)
        and move.piece_type == PieceType.PAWN
    ):
        opponent = mover.opponent
        if is_in_check(new_board, opponent) and not has_any_legal_move(
            new_board, new_hands, opponent
        ):
            return False  # 打ち歩詰め

    return True


# ---------------------------------------------------------------------------
# 合法手の列挙・詰み判定
# ---------------------------------------------------------------------------


def _candidate_moves(board: Board, hands: Hands, player: Player) -> Iterator[Move]:
    """Generate pseudo-legal candidates (legality filtered by the caller).

    盤上の駒は利きのあるマスすべて（成り・不成の両方を含む）、
    持ち駒は空きマスすべてを候補にする。
    """
    for from_square, piece in board.pieces(player):
        for ty in range(ROWS):
            for tx in range(COLS):
                to = (tx, ty)
                if not can_reach(board, from_square, to, piece, player):
                    continue
                status = promotion_status(
                    piece.piece_type, from_square[1], ty, player, piece.promoted
                )
                if status != PromotionStatus.NONE:
                    yield BoardMove(from_square, to, piece.piece_type, promote=True)
                if status != PromotionStatus.MUST:
                    yield BoardMove(from_square, to, piece.piece_type, promote=False)

    hand = hands.of(player)
    for pt in HAND_PIECE_TYPES:
        if hand.count(pt) == 0:
            continue
        for ty in range(ROWS):
            for tx in range(COLS):
                if board.piece_at(tx, ty) is None:
                    yield Drop(pt, (tx, ty))


def legal_moves(
    board: Board,
    hands: Hands,
    player: Player,
    check_no_pawn_mate: bool = True,
) -> list[Move]:
    """Generate all legal moves for player."""
    return [
        move
        for move in _candidate_moves(board, hands, player)
        if is_legal(board, hands, player, move, check_no_pawn_mate)
    ]


def has_any_legal_move(board: Board, hands: Hands, player: Player) -> bool:
    """Return True as soon as one legal move is found.

    打ち歩詰めの判定から呼ばれるため、内側では打ち歩詰めを再判定しない。
    """
    return any(
        is_legal(board, hands, player, move, check_no_pawn_mate=False)
        for move in _candidate_moves(board, hands, player)
    )


def is_checkmate(board: Board, hands: Hands, player: Player) -> bool:
    """player が詰んでいれば True。"""
    return is_in_check(board, player) and not has_any_legal_move(board, hands, player)
