"""Configuration for game rooms and the web server.

対局の持ち時間設定とサーバ設定。
ゲームの種類ごとにプリセットを用意する（設定クラス + モジュール定数）。
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TimeSettings:
    """持ち時間の設定（秒）。

    Attributes:
        initial: 持ち時間
        byoyomi: 秒読み（持ち時間を使い切った後の1手ごとの時間）
    """

    initial: int = 600
    byoyomi: int = 30


@dataclass(frozen=True)
class ServerConfig:
    """Web サーバの設定。"""

    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"


# 持ち時間10分+秒読み30秒（対局室の既定値）
DEFAULT_TIME_SETTINGS = TimeSettings()

DEFAULT_SERVER_CONFIG = ServerConfig()
