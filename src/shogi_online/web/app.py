"""FastAPI web application exposing the rules engine per game room.

FastAPI を使った対局室の REST API。
盤面は保持せず、各対局室は棋譜（GameRecord）だけを持つ。
局面は必要になるたびに棋譜を再生して求める。

エンドポイント:
  POST /api/new-game        — 新規対局を開始（ゲームIDを返す）
  GET  /api/state/{id}      — 局面情報を取得（?ply= で任意の手数）
  POST /api/move            — 手を指す（不正な手は 400）
  POST /api/undo            — 1手戻す
  POST /api/resign          — 投了
  POST /api/declare         — 入玉宣言
  POST /api/finish          — 時計・千日手判定側からの終局通知
  GET  /api/kif/{id}        — KIF 形式の棋譜
  GET  /api/sfen/{id}       — SFEN 形式の局面
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

from fastapi import FastAPI, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, ConfigDict, Field

from shogi_online.config import DEFAULT_SERVER_CONFIG, DEFAULT_TIME_SETTINGS, TimeSettings
from shogi_online.game.moves import BoardMove, Drop, Move, MoveTime
from shogi_online.game.nyugyoku import can_declare_win
from shogi_online.game.record import GameRecord, Position
from shogi_online.game.types import HAND_PIECE_TYPES, EndReason, PieceType, Player
from shogi_online.notation.kif import to_kif

logger = logging.getLogger(__name__)

app = FastAPI(title="Shogi Online")

# クライアントが送る駒名 → (未成の駒種, 成りフラグ)
_WIRE_PIECES: dict[str, tuple[PieceType, bool]] = {
    "Pawn": (PieceType.PAWN, False),
    "Lance": (PieceType.LANCE, False),
    "Knight": (PieceType.KNIGHT, False),
    "Silver": (PieceType.SILVER, False),
    "Gold": (PieceType.GOLD, False),
    "Bishop": (PieceType.BISHOP, False),
    "Rook": (PieceType.ROOK, False),
    "King": (PieceType.KING, False),
    "PromotedPawn": (PieceType.PAWN, True),
    "PromotedLance": (PieceType.LANCE, True),
    "PromotedKnight": (PieceType.KNIGHT, True),
    "PromotedSilver": (PieceType.SILVER, True),
    "Horse": (PieceType.BISHOP, True),
    "Dragon": (PieceType.ROOK, True),
}


@dataclass
class Room:
    """対局室。棋譜と終局情報だけを持つ。"""

    record: GameRecord = field(default_factory=GameRecord)
    sente_name: str = ""
    gote_name: str = ""
    time_settings: TimeSettings = DEFAULT_TIME_SETTINGS
    started_at: datetime = field(default_factory=datetime.now)
    winner: Player | None = None
    reason: EndReason | None = None
    remaining_times: dict[Player, int] | None = None
    remaining_byoyomi: dict[Player, int] | None = None

    @property
    def finished(self) -> bool:
        return self.reason is not None

    def finish(self, winner: Player | None, reason: EndReason) -> None:
        self.winner = winner
        self.reason = reason
        logger.info(
            "Game finished after %d moves: %s (winner=%s)",
            len(self.record), reason.value, winner.name if winner is not None else None,
        )


# 対局情報のインメモリストレージ（サーバ再起動で消える簡易実装）
_games: dict[str, Room] = {}


class Coordinates(BaseModel):
    x: int
    y: int


class WireMoveTime(BaseModel):
    now: int = 0    # その一手の消費時間（秒）
    total: int = 0  # 通算消費時間（秒）


class WireMove(BaseModel):
    """クライアントが送る指し手の形式。

    from は盤上の座標か、持ち駒を打つ場合は "hand"。
    """

    model_config = ConfigDict(populate_by_name=True)

    from_: Coordinates | Literal["hand"] = Field(alias="from")
    to: Coordinates
    piece: str
    drop: bool = False
    is_promoted: bool = Field(False, alias="isPromoted")
    is_check: bool | None = Field(None, alias="isCheck")
    time: WireMoveTime | None = None


class NewGameRequest(BaseModel):
    """新規対局リクエストのスキーマ。"""

    sente_name: str = "先手"
    gote_name: str = "後手"
    initial: int = DEFAULT_TIME_SETTINGS.initial  # 持ち時間（秒）
    byoyomi: int = DEFAULT_TIME_SETTINGS.byoyomi  # 秒読み（秒）


class MoveRequest(BaseModel):
    """指し手リクエストのスキーマ。"""

    game_id: str
    move: WireMove


class GameRequest(BaseModel):
    game_id: str


class PlayerRequest(BaseModel):
    game_id: str
    player: Literal["sente", "gote"]


class FinishRequest(BaseModel):
    """時計・千日手判定からの終局通知。

    盤面から判定する終局（詰み・入玉宣言）は /api/move と /api/declare が
    記録するので、ここでは受け付けない。
    """

    game_id: str
    reason: Literal["timeout", "sennichite", "illegal_sennichite"]
    winner: Literal["sente", "gote"] | None = None
    remaining_times: dict[Literal["sente", "gote"], int] | None = None
    remaining_byoyomi: dict[Literal["sente", "gote"], int] | None = None


def _player(name: str) -> Player:
    return Player.SENTE if name == "sente" else Player.GOTE


def _per_player(values: dict[str, int] | None) -> dict[Player, int] | None:
    if values is None:
        return None
    return {_player(k): v for k, v in values.items()}


def move_from_wire(wire: WireMove) -> Move:
    """Convert the client's move shape into a Drop / BoardMove.

    駒名が不明な場合は ValueError。
    """
    if wire.piece not in _WIRE_PIECES:
        msg = f"Unknown piece: {wire.piece}"
        raise ValueError(msg)
    piece_type, promoted = _WIRE_PIECES[wire.piece]
    time = MoveTime(wire.time.now, wire.time.total) if wire.time else None
    to = (wire.to.x, wire.to.y)

    if isinstance(wire.from_, Coordinates) and not wire.drop:
        return BoardMove(
            (wire.from_.x, wire.from_.y),
            to,
            piece_type,
            promote=wire.is_promoted,
            is_check=wire.is_check,
            time=time,
        )

    # from が "hand" または drop=True なら打つ手
    if promoted:
        msg = f"Cannot drop a promoted piece: {wire.piece}"
        raise ValueError(msg)
    return Drop(piece_type, to, is_check=wire.is_check, time=time)


def _get_room(game_id: str) -> Room:
    room = _games.get(game_id)
    if room is None:
        raise HTTPException(404, "Game not found")
    return room


def _position_to_dict(position: Position) -> dict[str, Any]:
    """Convert a position to a JSON-serializable dict.

    フロントエンドがこの形式を受け取って盤面を描画する。
    """
    squares: list[dict[str, Any] | None] = []
    for piece in position.board.squares:
        if piece is None:
            squares.append(None)
        else:
            squares.append(
                {
                    "type": piece.piece_type.name,  # 未成の駒種
                    "owner": piece.owner.name.lower(),  # "sente" / "gote"
                    "promoted": piece.promoted,
                }
            )
    hands = {
        player.name.lower(): {
            pt.name: position.hands.of(player).count(pt) for pt in HAND_PIECE_TYPES
        }
        for player in Player
    }
    nyugyoku = {}
    for player in Player:
        state = position.nyugyoku(player)
        nyugyoku[player.name.lower()] = {
            "score": state.score,
            "pieces_in_zone": state.pieces_in_zone,
            "king_in_zone": state.king_in_zone,
            "can_declare": state.can_declare,
            "required_score": state.required_score,
        }
    return {
        "ply": position.ply,
        "turn": position.turn.name.lower(),
        "sfen": position.to_sfen(),
        "in_check": position.in_check,
        "squares": squares,
        "hands": hands,
        "nyugyoku": nyugyoku,
    }


def _room_to_dict(room: Room, ply: int | None = None) -> dict[str, Any]:
    return {
        "moves": len(room.record),
        "finished": room.finished,
        "winner": room.winner.name.lower() if room.winner is not None else None,
        "reason": room.reason.value if room.reason is not None else None,
        "position": _position_to_dict(room.record.position_at(ply)),
    }


@app.post("/api/new-game")
async def new_game(req: NewGameRequest) -> dict[str, Any]:
    """新規対局を開始する。

    対局IDと初期局面情報を返す。
    """
    game_id = str(uuid.uuid4())[:8]  # 短いIDを生成
    room = Room(
        sente_name=req.sente_name,
        gote_name=req.gote_name,
        time_settings=TimeSettings(initial=req.initial, byoyomi=req.byoyomi),
    )
    _games[game_id] = room
    logger.info("Created game %s (%s vs %s)", game_id, req.sente_name, req.gote_name)
    return {"game_id": game_id, "state": _room_to_dict(room)}


@app.get("/api/state/{game_id}")
async def get_state(game_id: str, ply: int | None = None) -> dict[str, Any]:
    """局面情報を取得する（ply 指定で過去の局面を再生）。"""
    return _room_to_dict(_get_room(game_id), ply)


@app.post("/api/move")
async def make_move(req: MoveRequest) -> dict[str, Any]:
    """手を検証して棋譜に追加する。

    指した結果相手が詰んでいれば終局にする。
    """
    room = _get_room(req.game_id)
    if room.finished:
        raise HTTPException(400, "Game is already over")

    try:
        move = move_from_wire(req.move)
    except ValueError as e:
        raise HTTPException(400, str(e)) from e

    mover = room.record.current.turn
    record = room.record.play(move)
    if record is None:
        raise HTTPException(400, "Illegal move")
    room.record = record

    if record.current.is_checkmate:
        room.finish(mover, EndReason.CHECKMATE)

    return {"state": _room_to_dict(room)}


@app.post("/api/undo")
async def undo(req: GameRequest) -> dict[str, Any]:
    """最新の1手を取り消す。"""
    room = _get_room(req.game_id)
    if room.finished:
        raise HTTPException(400, "Game is already over")
    room.record = room.record.undo()
    return {"state": _room_to_dict(room)}


@app.post("/api/resign")
async def resign(req: PlayerRequest) -> dict[str, Any]:
    """投了する。player が負け。"""
    room = _get_room(req.game_id)
    if room.finished:
        raise HTTPException(400, "Game is already over")
    room.finish(_player(req.player).opponent, EndReason.RESIGN)
    return {"state": _room_to_dict(room)}


@app.post("/api/declare")
async def declare(req: PlayerRequest) -> dict[str, Any]:
    """入玉宣言する。

    手番であること・王手されていないこと・点数条件をすべて満たす場合のみ勝ち。

    条件を満たさない宣言は 400 で拒否し、対局は続行する（反則負けにはしない）。
    クライアントは条件を満たすまで宣言ボタンを無効にしておく前提。
    """
    room = _get_room(req.game_id)
    if room.finished:
        raise HTTPException(400, "Game is already over")
    player = _player(req.player)
    position = room.record.current
    if not can_declare_win(position.board, position.hands, player, position.turn):
        raise HTTPException(400, "Declaration conditions are not met")
    room.finish(player, EndReason.NYUGYOKU)
    return {"state": _room_to_dict(room)}


@app.post("/api/finish")
async def finish(req: FinishRequest) -> dict[str, Any]:
    """時間切れ・千日手などの終局を記録する。"""
    room = _get_room(req.game_id)
    if room.finished:
        raise HTTPException(400, "Game is already over")
    room.remaining_times = _per_player(req.remaining_times)
    room.remaining_byoyomi = _per_player(req.remaining_byoyomi)
    winner = _player(req.winner) if req.winner is not None else None
    room.finish(winner, EndReason(req.reason))
    return {"state": _room_to_dict(room)}


@app.get("/api/kif/{game_id}", response_class=PlainTextResponse)
async def get_kif(game_id: str) -> PlainTextResponse:
    """KIF 形式の棋譜を返す。"""
    room = _get_room(game_id)
    kif = to_kif(
        room.record.moves,
        room.record.initial_board,
        room.sente_name,
        room.gote_name,
        room.winner,
        room.reason,
        time_settings=room.time_settings,
        remaining_times=room.remaining_times,
        remaining_byoyomi=room.remaining_byoyomi,
        started_at=room.started_at,
        initial_hands=room.record.initial_hands,
        initial_turn=room.record.initial_turn,
    )
    return PlainTextResponse(kif)


@app.get("/api/sfen/{game_id}", response_class=PlainTextResponse)
async def get_sfen(game_id: str, ply: int | None = None) -> PlainTextResponse:
    """SFEN 形式の局面を返す。"""
    room = _get_room(game_id)
    return PlainTextResponse(room.record.position_at(ply).to_sfen())


def main() -> None:
    """Run the web server.

    `uv run shogi-web` または `python -m shogi_online.web.app` で起動する。
    """
    import uvicorn

    config = DEFAULT_SERVER_CONFIG
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(app, host=config.host, port=config.port)


if __name__ == "__main__":
    main()
