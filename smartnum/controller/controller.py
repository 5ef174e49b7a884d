"""
controller.controller
---------------------

ジェスチャ・ホイール・テキスト入力イベントを受け取り、倍率計算・連続更新ループ・
ホイールハンドラへ橋渡しして ``on_change`` で新しい値を通知するコントローラ。

値そのものは呼び出し側が所有し、コントローラは ``get_value()`` で毎回読み直す。
"""

import asyncio
import logging
import math
from typing import Callable

from smartnum.models.model import InputConfig
from smartnum.services.formatter.value_formatter import parse_value, round_value
from smartnum.services.loop.update_loop import ContinuousUpdateLoop
from smartnum.services.multiplier.multiplier_styles import BaseMultiplierStyle, get_multiplier_instance
from smartnum.services.tracker.gesture_tracker import GestureTracker
from smartnum.services.wheel.wheel_handler import WheelEvent, WheelHandler
from smartnum.utils.util import clamp, fmt

LOGGER = logging.getLogger(__name__)


class NumberInputController:
    """
    ジェスチャ駆動の数値入力コントロール 1 つ分のエンジン。

    Args:
        get_value (Callable[[], float]): 呼び出し側が所有する現在値を返す関数。
        on_change (Callable[[float], None]): 新しい値の通知先。
        config (InputConfig | None): 設定値。省略時はデフォルト。

    Attributes:
        tracker (GestureTracker): ドラッグ状態の状態機械。インスタンスごとに独立。
        update_loop (ContinuousUpdateLoop): ドラッグ中のみ動く周期更新ループ。
        wheel_handler (WheelHandler): ホイールイベントの処理。
    """

    def __init__(
        self,
        get_value: Callable[[], float],
        on_change: Callable[[float], None],
        config: InputConfig | None = None,
    ) -> None:
        self.get_value = get_value
        self.on_change = on_change
        self.config = config or InputConfig()
        self.tracker = GestureTracker()
        self.update_loop = ContinuousUpdateLoop(self._on_tick, interval_ms=self.config.tick_interval_ms)
        self.wheel_handler = WheelHandler()
        self._multiplier: BaseMultiplierStyle = get_multiplier_instance(self.config.multiplier_style)
        self._disposed: bool = False

    @property
    def multiplier(self) -> BaseMultiplierStyle:
        return self._multiplier

    @property
    def emit_on_move(self) -> bool:
        if self.config.emit_on_move is None:
            return self._multiplier.eager
        return self.config.emit_on_move

    # ---------------------------------
    # gesture events
    # ---------------------------------
    def on_gesture_start(self, position: float, time_ms: float | None = None) -> None:
        """ジェスチャ開始。Session を初期化し、連続更新ループを起動する。

        Args:
            position (float): 開始座標 (px)。
            time_ms (float | None): タイムスタンプ (ms)。省略時はイベントループの時計。
        """
        if self._disposed:
            LOGGER.warning("Controller already disposed – ignore gesture start")
            return
        self.tracker.start(position=position, time_ms=self._now(time_ms))
        self.update_loop.start()

    def on_gesture_move(self, position: float, time_ms: float | None = None) -> None:
        """ジェスチャ移動。Session を更新し、即時通知が有効なら値を計算して通知する。

        Args:
            position (float): 現在座標 (px)。
            time_ms (float | None): タイムスタンプ (ms)。省略時はイベントループの時計。
        """
        if not self.tracker.move(position=position, time_ms=self._now(time_ms)):
            LOGGER.debug("Move ignored while %s", self.tracker.state)
            return
        if self.emit_on_move:
            self._apply_multiplier()

    def on_gesture_end(self) -> None:
        """ジェスチャ終了。ループは状態に関係なく必ず停止する。"""
        self.update_loop.cancel()
        self.tracker.end()

    # ---------------------------------
    # single-shot events
    # ---------------------------------
    def on_wheel(self, event: WheelEvent) -> None:
        """ホイールイベントを処理する。イベントごとにちょうど 1 回通知する。"""
        value = self._current_value()
        if value is None:
            event.prevent_default()
            return
        self._emit(self.wheel_handler.handle(event, value, self.config), value, force=True)

    def on_text_input(self, text: str) -> None:
        """手入力テキストを反映する。数値として解釈できなければ破棄する。"""
        parsed = parse_value(text, self.config)
        if parsed is None:
            return
        self._emit(clamp(parsed, self.config.min_value, self.config.max_value), self._current_value())

    def increment(self) -> None:
        """``step`` だけ値を増やす（+ ボタン）。"""
        self._step_by(1)

    def decrement(self) -> None:
        """``step`` だけ値を減らす（- ボタン）。"""
        self._step_by(-1)

    # ---------------------------------
    # lifecycle
    # ---------------------------------
    def reconfigure(self, config: InputConfig) -> None:
        """設定を差し替える。

        ドラッグ中でもクラッシュしない。倍率方式や周期が変わった場合はループを
        再起動し、以降の計算はすべて新しい設定を使う。
        """
        old = self.config
        self.config = config
        if config.multiplier_style != old.multiplier_style:
            LOGGER.info("MultiplierStyle %s -> %s", old.multiplier_style, config.multiplier_style)
            self._multiplier = get_multiplier_instance(config.multiplier_style)
        if config.tick_interval_ms != old.tick_interval_ms or config.multiplier_style != old.multiplier_style:
            self.update_loop.cancel()
            self.update_loop.interval_ms = config.tick_interval_ms
            if self.tracker.dragging and not self._disposed:
                self.update_loop.start()

    def dispose(self) -> None:
        """コントロール破棄。ループを停止し Session を破棄する。以降のイベントは無視される。"""
        LOGGER.info("Disposing controller")
        self._disposed = True
        self.update_loop.cancel()
        self.tracker.end()

    async def aclose(self) -> None:
        """:py:meth:`dispose` に加えてループタスクの完全終了を待つ。"""
        self._disposed = True
        await self.update_loop.stop()
        self.dispose()

    # ---------------------------------
    # private methods
    # ---------------------------------
    def _on_tick(self) -> None:
        if not self.tracker.dragging:
            self.update_loop.cancel()
            return
        self._apply_multiplier()

    def _apply_multiplier(self) -> None:
        value = self._current_value()
        if value is None:
            return
        session = self.tracker.session
        new_val = self._multiplier.calculate(value, session, self.config, session.last_position)
        self._emit(new_val, value)

    def _step_by(self, sign: int) -> None:
        value = self._current_value()
        if value is None:
            return
        new_val = round_value(value + sign * self.config.step, self.config)
        self._emit(clamp(new_val, self.config.min_value, self.config.max_value), value)

    def _current_value(self) -> float | None:
        value = self.get_value()
        if value is None or not math.isfinite(value):
            LOGGER.warning("Current value %r is not a finite number – skip update", value)
            return None
        return value

    def _emit(self, new_val: float, old_val: float | None, force: bool = False) -> None:
        if self._disposed:
            return
        if not force and old_val is not None and new_val == old_val:
            return
        LOGGER.debug("value: %s -> %s", fmt(old_val), fmt(new_val))
        self.on_change(new_val)

    @staticmethod
    def _now(time_ms: float | None) -> float:
        if time_ms is not None:
            return time_ms
        return asyncio.get_running_loop().time() * 1000.0
