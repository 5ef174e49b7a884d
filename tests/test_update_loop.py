"""
ContinuousUpdateLoop のテスト

テスト戦略:
1. 初期化とライフサイクル管理
2. 非同期タスクの開始/停止処理（停止後にコールバックが呼ばれないこと）
3. 二重起動時に古いタスクを必ず止めること
4. コールバック例外時のループ停止
"""

import asyncio
import logging
from unittest.mock import Mock, patch

import pytest

from smartnum.services.loop.update_loop import ContinuousUpdateLoop


class TestContinuousUpdateLoop:
    """ContinuousUpdateLoop の基本機能テスト"""

    def test_init(self):
        on_tick = Mock()
        loop = ContinuousUpdateLoop(on_tick, interval_ms=16)

        assert loop.on_tick == on_tick
        assert loop.interval_ms == 16
        assert loop.armed is False
        assert loop._task is None

    def test_start(self):
        loop = ContinuousUpdateLoop(Mock())

        with patch("asyncio.create_task") as mock_create_task:
            loop.start()

            assert loop.armed is True
            mock_create_task.assert_called_once()
            assert loop._task is not None

    def test_start_when_already_running_cancels_previous(self):
        """起動中に start() すると古いタスクをキャンセルしてから作り直す"""
        loop = ContinuousUpdateLoop(Mock())

        with patch("asyncio.create_task") as mock_create_task:
            first_task = Mock()
            second_task = Mock()
            mock_create_task.side_effect = [first_task, second_task]
            loop.start()
            loop.start()

            assert mock_create_task.call_count == 2
            first_task.cancel.assert_called_once()
            second_task.cancel.assert_not_called()
            assert loop._task is second_task

    def test_cancel_when_not_running(self):
        loop = ContinuousUpdateLoop(Mock())
        loop.cancel()
        assert loop.armed is False
        assert loop._task is None

    @pytest.mark.asyncio
    async def test_stop_when_not_running(self):
        """実行中でない場合でも stop() がエラーなく処理されることを確認"""
        loop = ContinuousUpdateLoop(Mock())

        await loop.stop()

        assert loop.armed is False
        assert loop._task is None

    @pytest.mark.asyncio
    async def test_ticks_while_armed(self):
        on_tick = Mock()
        loop = ContinuousUpdateLoop(on_tick, interval_ms=5)

        loop.start()
        await asyncio.sleep(0.1)
        await loop.stop()

        assert on_tick.call_count >= 2

    @pytest.mark.asyncio
    async def test_no_tick_after_cancel(self):
        """cancel() 後はコールバックが一度も呼ばれない"""
        on_tick = Mock()
        loop = ContinuousUpdateLoop(on_tick, interval_ms=5)

        loop.start()
        await asyncio.sleep(0.05)
        loop.cancel()
        count = on_tick.call_count
        await asyncio.sleep(0.05)

        assert on_tick.call_count == count
        assert loop.armed is False

    @pytest.mark.asyncio
    async def test_first_tick_after_interval(self):
        """起動直後ではなく 1 周期後に最初のコールバックが呼ばれる"""
        on_tick = Mock()
        loop = ContinuousUpdateLoop(on_tick, interval_ms=50)

        loop.start()
        await asyncio.sleep(0)
        on_tick.assert_not_called()
        await loop.stop()

    @pytest.mark.asyncio
    async def test_restart_keeps_single_task(self):
        on_tick = Mock()
        loop = ContinuousUpdateLoop(on_tick, interval_ms=5)

        loop.start()
        first = loop._task
        loop.start()
        await asyncio.sleep(0.02)

        assert first.done()
        assert loop._task is not first
        await loop.stop()

    @pytest.mark.asyncio
    async def test_tick_exception_disarms(self, caplog):
        """コールバック例外はログに残し、ループを停止する"""
        on_tick = Mock(side_effect=RuntimeError("boom"))
        loop = ContinuousUpdateLoop(on_tick, interval_ms=5)

        with caplog.at_level(logging.ERROR):
            loop.start()
            await asyncio.sleep(0.05)

        assert on_tick.call_count == 1
        assert loop.armed is False
        assert loop._task is None
        assert "tick failed" in caplog.text

    @pytest.mark.asyncio
    async def test_interval_change_applies_next_frame(self):
        on_tick = Mock()
        loop = ContinuousUpdateLoop(on_tick, interval_ms=1000)

        loop.start()
        loop.interval_ms = 5
        await asyncio.sleep(0.1)
        await loop.stop()

        # 周期はフレームごとに読み直される
        assert on_tick.call_count >= 2
