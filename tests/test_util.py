import logging
import math

import pytest
from hypothesis import assume, given
from hypothesis import strategies as st

from smartnum.utils.util import DEFAULT_CONFIG_PATH, clamp, config_loader, fmt, setup_logging


@pytest.mark.parametrize(
    "x, lo, hi, expected",
    [
        (0.5, 0.0, 1.0, 0.5),  # 値が範囲内
        (-1, 0, 10, 0),  # 下限未満 → lo に丸め
        (15, 0, 10, 10),  # 上限超過 → hi に丸め
        (0, 0, 10, 0),  # 下限境界
        (10, 0, 10, 10),  # 上限境界
        (1e12, -math.inf, math.inf, 1e12),  # 非有界
        (-5, 0, math.inf, 0),  # 下限のみ
    ],
)
def test_clamp(x, lo, hi, expected):
    """clamp() は x を閉区間 [lo, hi] に制限する"""
    assert clamp(x, lo, hi) == expected


floats = st.floats(
    min_value=-1e9,
    max_value=1e9,
    allow_nan=False,
    allow_infinity=False,
    width=32,
)


@given(x=floats, bounds=st.tuples(floats, floats))
def test_clamp_within_bounds_property(x, bounds):
    """出力が必ず [lo, hi] に入るという不変条件を検証"""
    lo, hi = bounds
    assume(lo <= hi)

    out = clamp(x, lo, hi)

    assert lo <= out <= hi


def test_clamp_invalid_bounds_raises():
    """lo > hi の場合は ValueError を送出することを期待"""
    with pytest.raises(ValueError):
        clamp(0, 10, 0)


def test_fmt():
    assert fmt(1.23456) == "1.235"
    assert fmt(3) == "3"
    assert fmt(None) == "None"


def test_config_loader_default():
    """同梱の config.yaml が読み込めること"""
    assert DEFAULT_CONFIG_PATH.exists()
    cfg = config_loader()
    assert cfg.globals.logging.level == "info"
    assert cfg.input.multiplier_style == "speed_distance"
    assert len(cfg.demo.events) > 0


def test_config_loader_custom_path(tmp_path):
    path = tmp_path / "custom.yaml"
    path.write_text("input:\n  step: 5\n")
    cfg = config_loader(path)
    assert cfg.input.step == 5


def test_setup_logging_replaces_handlers():
    """setup_logging() はルートロガーのハンドラを 1 つに置き換える"""
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging(logging.DEBUG)
        setup_logging(logging.DEBUG)
        assert len(root.handlers) == 1
        assert root.level == logging.DEBUG
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
