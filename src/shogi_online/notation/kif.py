"""KIF game record export.

KIF 形式（柿木形式）の棋譜を出力する。

  #KIF version=2.0 encoding=UTF-8
  手合割：平手
  先手：Alice
  後手：Bob
  手数----指手---------消費時間--
     1 ７六歩(77)　　　 ( 00:03/00:00:03)
     2 ３四歩(33)　　　 ( 00:05/00:00:05)
     3 投了　　　　　　　　 ( 00:10/00:00:13)
  まで2手で後手の勝ち

駒名は指す前の盤面から求める（成り駒が動いた場合は「と」「馬」など）。
そのため初期局面から指し手を再生しながら出力する。
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from shogi_online.config import TimeSettings
from shogi_online.game.board import Board, Hands
from shogi_online.game.display import RANK_KANJI, piece_name
from shogi_online.game.moves import Drop, Move, MoveTime
from shogi_online.game.rules import apply_move
from shogi_online.game.types import COLS, EndReason, Player, Square

KIF_HEADER = "#KIF version=2.0 encoding=UTF-8"
COLUMN_HEADER = "手数----指手---------消費時間--"
SAME_SQUARE = "同　"
MOVE_TEXT_WIDTH = 10

_ZENKAKU_DIGITS = "０１２３４５６７８９"

END_WORDS: dict[EndReason, str] = {
    EndReason.RESIGN: "投了",
    EndReason.TIMEOUT: "切れ負け",
    EndReason.SENNICHITE: "千日手",
    EndReason.ILLEGAL_SENNICHITE: "反則負け",
    EndReason.NYUGYOKU: "入玉勝ち",
    EndReason.CHECKMATE: "詰み",
}

# 手番側（最後に指していない側）が負けになる終局理由
_SIDE_TO_MOVE_LOSES = {EndReason.RESIGN, EndReason.TIMEOUT, EndReason.CHECKMATE}


@dataclass(frozen=True)
class Branch:
    """変化（ローカル検討の分岐）。start 手目の局面から moves を指す。"""

    start: int
    moves: tuple[Move, ...]


def format_move_time(seconds: int) -> str:
    """一手の消費時間 mm:ss。"""
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


def format_total_time(seconds: int) -> str:
    """通算消費時間 HH:MM:SS。"""
    h, rest = divmod(seconds, 3600)
    m, s = divmod(rest, 60)
    return f"{h:02d}:{m:02d}:{s:02d}"


def _time_column(time: MoveTime | None) -> str:
    time = time or MoveTime()
    return f"( {format_move_time(time.this_move)}/{format_total_time(time.cumulative)})"


def _destination(to: Square, prev_to: Square | None) -> str:
    if prev_to == to:
        return SAME_SQUARE
    x, y = to
    return f"{_ZENKAKU_DIGITS[COLS - x]}{RANK_KANJI[y]}"


def _line(index: int, text: str, time: MoveTime | None) -> str:
    text = text.ljust(MOVE_TEXT_WIDTH, "　")
    return f"{index:>4} {text} {_time_column(time)}"


def _move_text(move: Move, board: Board, prev_to: Square | None) -> str:
    text = _destination(move.to, prev_to)
    if isinstance(move, Drop):
        return text + piece_name(move.piece_type) + "打"

    fx, fy = move.from_square
    piece = board.piece_at(fx, fy)
    promoted = piece.promoted if piece is not None else False
    piece_type = piece.piece_type if piece is not None else move.piece_type
    text += piece_name(piece_type, promoted)
    if move.promote and not promoted:
        text += "成"
    return text + f"({COLS - fx}{fy + 1})"


@dataclass
class _Replay:
    """出力中の局面（再生用の作業領域）。"""

    board: Board
    hands: Hands
    turn: Player
    prev_to: Square | None = None

    def lines(self, moves: tuple[Move, ...] | list[Move], offset: int) -> list[str]:
        out: list[str] = []
        for i, move in enumerate(moves):
            out.append(_line(offset + i + 1, _move_text(move, self.board, self.prev_to), move.time))
            self.play(move)
        return out

    def play(self, move: Move) -> None:
        self.board, self.hands, self.turn = apply_move(self.board, self.hands, move, self.turn)
        self.prev_to = move.to


def _last_cumulative(history: list[Move], player: Player, first_mover: Player) -> int:
    """player が最後に指した手の通算消費時間（なければ 0）。"""
    for i in range(len(history) - 1, -1, -1):
        mover = first_mover if i % 2 == 0 else first_mover.opponent
        if mover == player:
            time = history[i].time
            return time.cumulative if time is not None else 0
    return 0


def _final_think_time(
    loser: Player,
    history: list[Move],
    first_mover: Player,
    time_settings: TimeSettings | None,
    remaining_times: dict[Player, int] | None,
    remaining_byoyomi: dict[Player, int] | None,
) -> MoveTime:
    """Think time of the losing side for the resign/timeout line.

    持ち時間の減り方から今回の消費時間を求める。
    持ち時間を使い切っている場合は秒読みの消費分を加える。
    """
    prev = _last_cumulative(history, loser, first_mover)
    if time_settings is None or remaining_times is None:
        return MoveTime(0, prev)

    remaining = remaining_times.get(loser, time_settings.initial)
    main_used = max(0, time_settings.initial - remaining)
    this_move = max(0, main_used - min(prev, time_settings.initial))
    if remaining <= 0:
        byoyomi_left = (remaining_byoyomi or {}).get(loser, 0)
        this_move += max(0, time_settings.byoyomi - byoyomi_left)
    return MoveTime(this_move, prev + this_move)


def _infer_winner(end_reason: EndReason, turn: Player) -> Player | None:
    if end_reason in _SIDE_TO_MOVE_LOSES:
        return turn.opponent
    if end_reason == EndReason.NYUGYOKU:
        return turn  # 宣言するのは手番側
    return None


def _header(
    sente_name: str,
    gote_name: str,
    time_settings: TimeSettings | None,
    started_at: datetime | None,
) -> list[str]:
    lines = [KIF_HEADER]
    if started_at is not None:
        lines.append(f"開始日時：{started_at.strftime('%Y/%m/%d %H:%M:%S')}")
    if time_settings is not None:
        limit = f"{time_settings.initial // 60}分"
        if time_settings.byoyomi:
            limit += f"+秒読み{time_settings.byoyomi}秒"
        lines.append(f"持ち時間：{limit}")
    lines.append("手合割：平手")
    lines.append(f"先手：{sente_name}")
    lines.append(f"後手：{gote_name}")
    lines.append(COLUMN_HEADER)
    return lines


def to_kif(
    history: list[Move] | tuple[Move, ...],
    initial_board: Board | None = None,
    sente_name: str = "",
    gote_name: str = "",
    winner: Player | None = None,
    end_reason: EndReason | str | None = None,
    time_settings: TimeSettings | None = None,
    remaining_times: dict[Player, int] | None = None,
    remaining_byoyomi: dict[Player, int] | None = None,
    branch: Branch | None = None,
    started_at: datetime | None = None,
    initial_hands: Hands | None = None,
    initial_turn: Player = Player.SENTE,
) -> str:
    """Export a move list as KIF text.

    initial_turn は初手を指す側。終局行の勝者と消費時間の計算に使う。
    """
    history = list(history)
    first_mover = initial_turn
    replay = _Replay(initial_board or Board(), initial_hands or Hands(), first_mover)

    lines = _header(sente_name, gote_name, time_settings, started_at)
    lines += replay.lines(history, 0)

    if end_reason is not None:
        reason = EndReason(end_reason)
        if winner is None:
            winner = _infer_winner(reason, replay.turn)
        if reason in (EndReason.RESIGN, EndReason.TIMEOUT):
            loser = winner.opponent if winner is not None else replay.turn
            time = _final_think_time(
                loser, history, first_mover,
                time_settings, remaining_times, remaining_byoyomi,
            )
        else:
            time = None
        lines.append(_line(len(history) + 1, END_WORDS[reason], time))

        if reason == EndReason.SENNICHITE:
            lines.append(f"まで{len(history)}手で千日手")
        elif winner is not None:
            lines.append(f"まで{len(history)}手で{winner.label}の勝ち")
    elif winner is not None:
        lines.append(f"まで{len(history)}手で{winner.label}の勝ち")

    if branch is not None:
        variation = _Replay(initial_board or Board(), initial_hands or Hands(), first_mover)
        for move in history[: branch.start]:
            variation.play(move)
        lines.append("")
        lines.append(f"変化：{branch.start + 1}手")
        lines += variation.lines(branch.moves, branch.start)

    return "\n".join(lines) + "\n"
