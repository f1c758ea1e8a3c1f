"""CLI entry point for shogi-online — Human vs Random AI.

コマンドラインで動く本将棋の対局プログラム。
プレイヤー（先手）対ランダムAI（後手）で対局し、終局後に KIF を表示する。

起動方法: `uv run shogi-cli`
指し手は USI 形式で入力する（例: 7g7f, 8h2b+, P*5e）。
"""

from __future__ import annotations

from shogi_online.engine.random_player import random_move
from shogi_online.game.display import format_board
from shogi_online.game.nyugyoku import can_declare_win
from shogi_online.game.record import GameRecord
from shogi_online.game.types import EndReason, Player
from shogi_online.notation.kif import to_kif
from shogi_online.notation.usi import parse_usi, to_usi


def main() -> None:
    """Run a Human (SENTE) vs Random AI (GOTE) game.

    人間（先手）対ランダムAI（後手）の対局を実行する。

    ゲームの流れ:
    1. 盤面を表示
    2. USI 形式の指し手入力を求める（resign で投了、declare で入玉宣言）
    3. AI が応答する
    4. 詰むか投了するまで繰り返す
    """
    print("=== 本将棋 ===")
    print("You are SENTE (bottom). AI is GOTE (v-marked).")
    print("Enter moves like 7g7f, 8h2b+, P*5e. Type 'resign' or 'declare'.")
    print()

    record = GameRecord()  # 初期局面から開始
    winner: Player | None = None
    reason: EndReason | None = None

    while True:
        position = record.current
        if position.is_checkmate:
            winner, reason = position.turn.opponent, EndReason.CHECKMATE
            break

        print(format_board(position.board, position.hands))
        print()

        if position.turn == Player.SENTE:
            # 入力検証ループ（合法手が入力されるまで繰り返す）
            while True:
                try:
                    text = input("Your move: ").strip()
                except (EOFError, KeyboardInterrupt):
                    print("\nGame aborted.")
                    return
                if text == "resign":
                    winner, reason = Player.GOTE, EndReason.RESIGN
                    break
                if text == "declare":
                    if can_declare_win(position.board, position.hands, Player.SENTE, position.turn):
                        winner, reason = Player.SENTE, EndReason.NYUGYOKU
                        break
                    print("Declaration conditions are not met.")
                    continue
                try:
                    move = parse_usi(text, position.board)
                except ValueError as e:
                    print(f"Invalid: {e}")
                    continue
                new_record = record.play(move)
                if new_record is None:
                    print("Illegal move.")
                    continue
                record = new_record
                break
            if reason is not None:
                break
        else:
            # AI（後手）の番: ランダムに手を選んで指す
            move = random_move(position.board, position.hands, position.turn)
            print(f"AI plays: {to_usi(move)}")
            record = record.play(move) or record

        print()

    # 終局: 結果と棋譜を表示
    position = record.current
    print(format_board(position.board, position.hands))
    print()
    print("You win!" if winner == Player.SENTE else "AI wins!")
    print()
    print(to_kif(record.moves, sente_name="You", gote_name="Random AI",
                 winner=winner, end_reason=reason))


if __name__ == "__main__":
    main()
