"""
services.loop.update_loop
-------------------------

ドラッグ中のみ asyncio タスクとして動作し、一定周期でコールバックを呼び続けるループ。
ポインタが止まっていてもジェスチャが保持されている間は値を変化させ続けるために使う。
"""

import asyncio
import logging
from typing import Callable

LOGGER = logging.getLogger(__name__)


class ContinuousUpdateLoop:
    """
    asyncio タスクで動く周期更新ループ。

    Args:
        on_tick (Callable[[], None]): 各周期で呼び出すコールバック。呼び出し時点の
            最新の設定・値を自分で読み直すこと。
        interval_ms (float): 周期 (ms)。デフォルト 16 ms (~60 Hz)。

    同時に起動できるタスクは 1 つだけ。`cancel()` は同期的に停止フラグを下ろすため、
    呼び出し直後からコールバックは二度と呼ばれない。`stop()` はさらにタスクの終了を待つ。
    """

    def __init__(self, on_tick: Callable[[], None], interval_ms: float = 16.0):
        self.on_tick = on_tick
        self.interval_ms = interval_ms
        self._running: bool = False
        self._task: asyncio.Task | None = None

    @property
    def armed(self) -> bool:
        return self._running

    # ---------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------
    def start(self) -> None:
        """イベントループに更新タスクを登録して走らせる。

        すでに起動中なら、古いタスクをキャンセルしてから新しく起動する。
        """
        if self._task is not None:
            self.cancel()
        LOGGER.info("UpdateLoop: arming (interval=%s ms)", self.interval_ms)
        self._running = True
        self._task = asyncio.create_task(self._loop())

    def cancel(self) -> None:
        """タスクをキャンセルする。起動していなければ何もしない。"""
        if self._task is None:
            self._running = False
            return
        LOGGER.info("UpdateLoop: disarming")
        self._running = False
        self._task.cancel()
        self._task = None

    async def stop(self) -> None:
        """タスクをキャンセルし、完全に終了するまで待つ。"""
        task = self._task
        self.cancel()
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            pass

    # ---------------------------------------------------------------------
    # 内部: メインループ
    # ---------------------------------------------------------------------
    async def _loop(self) -> None:
        """内部コルーチン: ``interval_ms`` ごとに ``on_tick`` を呼び続ける。

        処理時間の揺らぎによる累積ドリフトを防ぐため、次フレーム予定時刻
        ``target`` を保持して ``await asyncio.sleep(max(0, target - loop.time()))``
        で待機する。1 フレーム以上遅れた場合は ``target`` を現在時刻へリセットする。
        """
        loop = asyncio.get_running_loop()
        target = loop.time()

        try:
            while self._running:
                frame_interval = self.interval_ms / 1000.0
                target += frame_interval
                sleep_for = target - loop.time()

                if sleep_for < -frame_interval:
                    target = loop.time()
                    sleep_for = 0.0

                await asyncio.sleep(max(0.0, sleep_for))

                # sleep 中に cancel() された場合は通知しない
                if not self._running:
                    break
                self.on_tick()
        except asyncio.CancelledError:
            pass
        except Exception:
            LOGGER.exception("UpdateLoop: tick failed – disarming")
            if self._task is asyncio.current_task():
                self._running = False
                self._task = None
