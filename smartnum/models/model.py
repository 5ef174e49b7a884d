from __future__ import annotations

import logging
import math
from dataclasses import dataclass, fields

from smartnum.enums.enums import MultiplierStyle
from smartnum.utils.util import fmt

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class InputConfig:
    """数値入力コントロールの設定値。描画サイクル単位で不変。

    Attributes:
        min_value (float): 下限。デフォルトは非有界 (-inf)。
        max_value (float): 上限。デフォルトは非有界 (inf)。
        step (float): 増分の基本単位。
        sensitivity (float): 速度 (px/s) を倍率へ換算する係数。
        max_multiplier (float): 速度倍率の上限。
        min_threshold (float): これ未満の倍率では値を変えない（デッドゾーン）。
        wheel_sensitivity (float): ホイール 1 単位あたりの変化量。
        distance_sensitivity (float): 距離効果が 1.0 に達するまでの px 数。
        max_distance_multiplier (float): 距離倍率の上限。
        distance_exponent (float): 正規化距離に掛ける指数。
        allow_decimals (bool): 小数を許可するか。
        decimal_places (int): 小数桁数。``allow_decimals`` が True のときのみ参照。
        multiplier_style (MultiplierStyle): ドラッグ時の倍率計算方式。
        emit_on_move (bool | None): move イベントで即時通知するか。None なら方式のデフォルト。
        tick_interval_ms (float): 連続更新ループの周期 (ms)。
        locale (str): 表示用フォーマットのロケール。
    """

    min_value: float = -math.inf
    max_value: float = math.inf
    step: float = 1.0
    sensitivity: float = 300.0
    max_multiplier: float = 2.0
    min_threshold: float = 0.1
    wheel_sensitivity: float = 0.5
    distance_sensitivity: float = 100.0
    max_distance_multiplier: float = 3.0
    distance_exponent: float = 2.0
    allow_decimals: bool = False
    decimal_places: int = 2
    multiplier_style: MultiplierStyle = MultiplierStyle.SPEED_DISTANCE
    emit_on_move: bool | None = None
    tick_interval_ms: float = 16.0
    locale: str = "en_US"

    def __post_init__(self) -> None:
        if self.min_value > self.max_value:
            raise ValueError(f"Invalid range: {self.min_value} > {self.max_value}")
        for name in ("step", "sensitivity", "distance_sensitivity", "tick_interval_ms"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        if self.decimal_places < 0:
            raise ValueError(f"decimal_places must be >= 0, got {self.decimal_places}")

    @classmethod
    def from_config(cls, cfg) -> "InputConfig":
        """設定から InputConfig を生成する。

        ``min_value`` / ``max_value`` が null の場合は非有界として扱う。

        Args:
            cfg: OmegaConf 設定オブジェクト。``cfg.input`` を参照する。

        Returns:
            設定に基づいて初期化された InputConfig インスタンス。
        """
        section = cfg.get("input") if hasattr(cfg, "get") else None
        if section is None:
            LOGGER.warning("cfg.input not found – fallback to default InputConfig")
            return cls()

        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in section.items():
            if key not in known:
                LOGGER.warning("Unknown input option '%s' – ignored", key)
                continue
            if value is None:
                continue
            kwargs[key] = value

        if "multiplier_style" in kwargs:
            try:
                kwargs["multiplier_style"] = MultiplierStyle(kwargs["multiplier_style"])
            except ValueError:
                LOGGER.warning("Unknown MultiplierStyle %s – fallback to SPEED_DISTANCE", kwargs["multiplier_style"])
                kwargs["multiplier_style"] = MultiplierStyle.SPEED_DISTANCE
        return cls(**kwargs)


@dataclass
class Session:
    """進行中のドラッグ 1 回分のランタイム状態。

    コントロールのインスタンスごとに 1 つ保持し、プロセス全体で共有しない。

    Attributes:
        active (bool): start から end までの間のみ True。
        start_position (float): ジェスチャ開始時の座標。
        last_position (float): 直近の座標。
        last_sample_time (float): 直近サンプルのタイムスタンプ (ms)。
        current_speed (float): 符号付き速度 (px/s)。正は座標が増える方向。
    """

    active: bool = False
    start_position: float = 0.0
    last_position: float = 0.0
    last_sample_time: float = 0.0
    current_speed: float = 0.0

    def begin(self, position: float, time_ms: float) -> None:
        """新しいジェスチャで状態を上書きする。"""
        self.active = True
        self.start_position = position
        self.last_position = position
        self.last_sample_time = time_ms
        self.current_speed = 0.0

    def sample(self, position: float, time_ms: float) -> None:
        """座標サンプルを取り込み、速度を更新する。

        ``dt <= 0`` のサンプルでは速度を再計算せず、前回値を保持する。

        Args:
            position (float): 新しい座標。
            time_ms (float): サンプル時刻 (ms)。
        """
        delta_position = position - self.last_position
        delta_time = time_ms - self.last_sample_time
        if delta_time > 0:
            self.current_speed = (delta_position / delta_time) * 1000.0
        else:
            LOGGER.debug("Non-positive dt (%s ms) – keep speed %s", fmt(delta_time), fmt(self.current_speed))
        self.last_position = position
        self.last_sample_time = time_ms

    def reset(self) -> None:
        self.active = False
        self.current_speed = 0.0

    @property
    def distance(self) -> float:
        """開始位置から直近位置までの距離 (絶対値)。"""
        return abs(self.last_position - self.start_position)
