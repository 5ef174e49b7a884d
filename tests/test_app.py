import logging
from unittest.mock import Mock

import pytest
from omegaconf import OmegaConf

from smartnum.app import ValueHost, dispatch, main
from smartnum.models.model import InputConfig
from smartnum.utils.util import config_loader


def make_cfg(events, initial_value=10):
    return OmegaConf.create(
        {
            "input": {"min_value": 0, "max_value": 100, "step": 1},
            "demo": {"initial_value": initial_value, "events": events},
        }
    )


@pytest.mark.asyncio
async def test_main_replays_single_shot_events():
    cfg = make_cfg(
        [
            {"type": "wheel", "delta": 4},
            {"type": "text", "text": "42"},
            {"type": "text", "text": "abc"},
            {"type": "increment"},
            {"type": "decrement"},
            {"type": "hold", "wait_ms": 1},
        ]
    )
    history = await main(cfg)
    assert history == [12, 42, 43, 42]


@pytest.mark.asyncio
async def test_main_default_config_stays_in_bounds():
    """同梱の設定ファイルのデモを再生し、全ての値が範囲内に収まる"""
    cfg = config_loader()
    history = await main(cfg)
    assert history
    assert all(0 <= v <= 100 for v in history)


def test_dispatch_unknown_event(caplog):
    controller = Mock()
    with caplog.at_level(logging.WARNING):
        dispatch(controller, OmegaConf.create({"type": "pinch"}))
    assert "Unknown demo event type" in caplog.text


def test_dispatch_routes_gestures():
    controller = Mock()
    dispatch(controller, OmegaConf.create({"type": "start", "position": 10}))
    dispatch(controller, OmegaConf.create({"type": "move", "position": 20}))
    dispatch(controller, OmegaConf.create({"type": "end"}))
    controller.on_gesture_start.assert_called_once_with(10)
    controller.on_gesture_move.assert_called_once_with(20)
    controller.on_gesture_end.assert_called_once_with()


def test_value_host_logs_formatted(caplog):
    host = ValueHost(0, InputConfig(allow_decimals=True, decimal_places=2))
    with caplog.at_level(logging.INFO):
        host.set_value(1234.5)
    assert host.history == [1234.5]
    assert "value = 1,234.50" in caplog.text
