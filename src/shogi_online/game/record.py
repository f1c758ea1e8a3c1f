"""Game record: the move list and replay-based position views.

対局の記録（棋譜）。局面は保持せず、初期局面から指し手を再生して求める。
任意の手数の表示・待った・ローカル検討の分岐がすべて同じ仕組みで済む。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from shogi_online.game.board import Board, Hands
from shogi_online.game.moves import Move
from shogi_online.game.nyugyoku import NyugyokuState, nyugyoku_state
from shogi_online.game.rules import apply_move, is_checkmate, is_in_check, is_legal
from shogi_online.game.types import Player, Square
from shogi_online.notation.sfen import to_sfen

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Position:
    """ある手数の局面（盤面・持ち駒・手番）。"""

    board: Board = field(default_factory=Board)
    hands: Hands = field(default_factory=Hands)
    turn: Player = Player.SENTE
    ply: int = 0
    last_move: Move | None = None

    @property
    def last_destination(self) -> Square | None:
        return self.last_move.to if self.last_move is not None else None

    @property
    def in_check(self) -> bool:
        """手番側が王手されていれば True。"""
        return is_in_check(self.board, self.turn)

    @property
    def is_checkmate(self) -> bool:
        """手番側が詰んでいれば True。"""
        return is_checkmate(self.board, self.hands, self.turn)

    def nyugyoku(self, player: Player) -> NyugyokuState:
        return nyugyoku_state(self.board, self.hands, player)

    def to_sfen(self) -> str:
        return to_sfen(self.board, self.turn, self.hands, move_number=self.ply + 1)


@dataclass(frozen=True)
class GameRecord:
    """Immutable move list with its starting position.

    変更メソッドは新しい GameRecord を返す。
    """

    moves: tuple[Move, ...] = ()
    initial_board: Board = field(default_factory=Board)
    initial_hands: Hands = field(default_factory=Hands)
    initial_turn: Player = Player.SENTE

    def __len__(self) -> int:
        return len(self.moves)

    def position_at(self, ply: int | None = None) -> Position:
        """Replay the first `ply` moves (all moves when None).

        再生中に例外が起きた場合（改ざんされた棋譜など）はログに残し、
        直前までの局面を返す。例外は呼び出し側に伝えない。
        """
        if ply is None:
            ply = len(self.moves)
        ply = max(0, min(ply, len(self.moves)))

        position = Position(self.initial_board, self.initial_hands, self.initial_turn)
        for i, move in enumerate(self.moves[:ply]):
            try:
                board, hands, turn = apply_move(
                    position.board, position.hands, move, position.turn
                )
            except Exception:
                logger.exception("Failed to replay move %d: %r", i + 1, move)
                break
            position = Position(board, hands, turn, i + 1, move)
        return position

    @property
    def current(self) -> Position:
        """最新の局面。"""
        return self.position_at()

    def play(self, move: Move) -> GameRecord | None:
        """合法なら手を追加した記録を返す。不正な手なら None。"""
        position = self.current
        if not is_legal(position.board, position.hands, position.turn, move):
            logger.debug("Rejected illegal move at ply %d: %r", position.ply + 1, move)
            return None
        return self._with_moves(self.moves + (move,))

    def undo(self) -> GameRecord:
        """最後の1手を取り消した記録を返す（手がなければそのまま）。"""
        return self._with_moves(self.moves[:-1])

    def branch(self, ply: int, move: Move) -> GameRecord | None:
        """Truncate to `ply` and play `move` there (ローカル検討の分岐)."""
        return self.truncate(ply).play(move)

    def truncate(self, ply: int) -> GameRecord:
        return self._with_moves(self.moves[: max(0, ply)])

    def _with_moves(self, moves: tuple[Move, ...]) -> GameRecord:
        return GameRecord(
            moves=moves,
            initial_board=self.initial_board,
            initial_hands=self.initial_hands,
            initial_turn=self.initial_turn,
        )
