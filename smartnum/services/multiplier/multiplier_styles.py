import logging
import math
from abc import ABC, abstractmethod
from functools import cached_property

from smartnum.enums.enums import MultiplierStyle
from smartnum.models.model import InputConfig, Session
from smartnum.services.formatter.value_formatter import round_value
from smartnum.utils.util import clamp

LOGGER = logging.getLogger(__name__)


class BaseMultiplierStyle(ABC):
    """
    ドラッグの動きから次の値を求めるアルゴリズムの共通インターフェース
    各 Strategy は 純粋に計算だけ 行い、副作用（Session 更新・通知など）は持たせない
    座標が増える方向（画面下方向）へのドラッグで値が減る
    """

    # move イベントで即時に値を通知するか（連続更新ループとは別）
    eager: bool = False

    # ----------------- public API -----------------
    @abstractmethod
    def multiplier(self, session: Session, config: InputConfig, position: float) -> float:
        """符号なしの倍率を返す。"""
        raise NotImplementedError

    @abstractmethod
    def direction(self, session: Session, position: float) -> int:
        """+1 / -1 / 0 の方向を返す。"""
        raise NotImplementedError

    def ease(self, multiplier: float) -> float:
        """デッドゾーン判定後の倍率に掛けるイージング。デフォルトは恒等写像。"""
        return multiplier

    def calculate(self, value: float, session: Session, config: InputConfig, position: float) -> float:
        """現在値と Session から次の値を計算する。

        倍率が ``min_threshold`` 未満ならデッドゾーンとして ``value`` をそのまま返す。

        Args:
            value (float): 現在値。
            session (Session): 進行中のドラッグ状態。
            config (InputConfig): 設定値。
            position (float): 評価に使う座標。

        Returns:
            float: 丸め・クランプ済みの次の値。
        """
        multiplier = self.multiplier(session, config, position)
        if multiplier < config.min_threshold:
            return value
        increment = config.step * self.ease(multiplier) * self.direction(session, position)
        new_val = round_value(value - increment, config)
        return clamp(new_val, config.min_value, config.max_value)

    # ----------------- meta ---------------------
    @cached_property
    def style_enum(self) -> MultiplierStyle | str:
        """
        自身のクラスに対応する MultiplierStyle を返す
        未登録の場合はクラス名文字列を返す
        """
        return MULTIPLIER_CLASS_TO_STYLE_ENUM.get(self.__class__, self.__class__.__name__)


class SpeedDistanceMultiplierStyle(BaseMultiplierStyle):
    """速度と開始位置からの距離を組み合わせ、1.5 乗のイージングを掛ける"""

    eager = True

    def multiplier(self, session: Session, config: InputConfig, position: float) -> float:
        speed_multiplier = min(abs(session.current_speed) / config.sensitivity, config.max_multiplier)
        distance = abs(position - session.start_position)
        distance_multiplier = min(distance / config.distance_sensitivity, config.max_distance_multiplier)
        return speed_multiplier * (1.0 + distance_multiplier)

    def ease(self, multiplier: float) -> float:
        return multiplier**1.5

    def direction(self, session: Session, position: float) -> int:
        return int(math.copysign(1, session.current_speed)) if session.current_speed else 0


class DistanceMultiplierStyle(BaseMultiplierStyle):
    """開始位置からの距離のみで倍率を決める。速度推定に依存しない"""

    def multiplier(self, session: Session, config: InputConfig, position: float) -> float:
        normalized = abs(position - session.start_position) / config.distance_sensitivity
        return min(normalized**config.distance_exponent, config.max_distance_multiplier)

    def direction(self, session: Session, position: float) -> int:
        return 1 if position > session.start_position else -1


# -----------------------------------------------------------------------------
# Factory
# -----------------------------------------------------------------------------
MULTIPLIER_STYLE_MAP = {
    MultiplierStyle.SPEED_DISTANCE: SpeedDistanceMultiplierStyle,
    MultiplierStyle.DISTANCE: DistanceMultiplierStyle,
}
# 逆引き: クラス → MultiplierStyle
MULTIPLIER_CLASS_TO_STYLE_ENUM: dict[type[BaseMultiplierStyle], MultiplierStyle] = {
    v: k for k, v in MULTIPLIER_STYLE_MAP.items()
}


def get_multiplier_instance(style: MultiplierStyle) -> BaseMultiplierStyle:
    cls = MULTIPLIER_STYLE_MAP.get(style)
    if cls is None:
        LOGGER.warning("Unknown MultiplierStyle %s – fallback to SPEED_DISTANCE", style)
        cls = SpeedDistanceMultiplierStyle
    return cls()
