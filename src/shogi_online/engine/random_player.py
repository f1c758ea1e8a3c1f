"""Random player — selects a legal move uniformly at random.

ランダムプレイヤー: 合法手の中からランダムに手を選ぶ。

用途:
- CLI の対局相手（ルールの動作確認用）
- ルール実装のテスト（ランダム対局を続けても不変条件が崩れないこと）
"""

from __future__ import annotations

import random

from shogi_online.game.board import Board, Hands
from shogi_online.game.moves import Move
from shogi_online.game.rules import legal_moves
from shogi_online.game.types import Player


def random_move(
    board: Board,
    hands: Hands,
    player: Player,
    rng: random.Random | None = None,
) -> Move:
    """Return a random legal move.

    合法手の中から一様ランダムで1手を返す。
    合法手がない場合は ValueError を送出する（終局局面では呼ばれないはず）。
    """
    moves = legal_moves(board, hands, player)
    if not moves:
        raise ValueError("No legal moves available")
    return (rng or random).choice(moves)  # 一様ランダムサンプリング
