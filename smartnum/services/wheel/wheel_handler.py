"""
services.wheel.wheel_handler
----------------------------

ホイール 1 イベントを 1 回の値更新へ直接写像する、状態を持たないハンドラ。

ドラッグ系の ``value - increment`` とは逆に ``value + increment`` で更新する。
デッドゾーンやイージングは掛けない。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from smartnum.models.model import InputConfig
from smartnum.services.formatter.value_formatter import round_value
from smartnum.utils.util import clamp, fmt

LOGGER = logging.getLogger(__name__)


@dataclass
class WheelEvent:
    """ホイール入力イベント。

    Attributes:
        delta (float): 符号付きの回転量。
        position (float): イベント発生位置。計算には使わない。
        default_prevented (bool): プラットフォーム既定の処理（スクロール）を抑止したか。
    """

    delta: float
    position: float = 0.0
    default_prevented: bool = False

    def prevent_default(self) -> None:
        self.default_prevented = True


class WheelHandler:
    """ホイールイベントから次の値を計算するクラス"""

    def handle(self, event: WheelEvent, value: float, config: InputConfig) -> float:
        """イベントを消費し、次の値を返す。

        Args:
            event (WheelEvent): ホイールイベント。既定動作は常に抑止される。
            value (float): 現在値。
            config (InputConfig): 設定値。

        Returns:
            float: 丸め・クランプ済みの次の値。
        """
        event.prevent_default()
        scaled_distance = abs(event.delta) * config.wheel_sensitivity
        direction = 1 if event.delta > 0 else -1
        new_val = round_value(value + scaled_distance * direction, config)
        new_val = clamp(new_val, config.min_value, config.max_value)
        LOGGER.debug("wheel delta=%s: %s -> %s", fmt(event.delta), fmt(value), fmt(new_val))
        return new_val
