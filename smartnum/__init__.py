"""
smartnum パッケージ

ドラッグ距離・速度やホイール回転から数値を変化させる、ジェスチャ駆動の数値入力エンジンを提供します。
"""

from smartnum.app import main, run
from smartnum.controller.controller import NumberInputController
from smartnum.enums.enums import MultiplierStyle
from smartnum.models.model import InputConfig
from smartnum.services.wheel.wheel_handler import WheelEvent

__version__ = "1.0.0"

# 公開するAPIを明示的に定義
__all__ = ["InputConfig", "MultiplierStyle", "NumberInputController", "WheelEvent", "main", "run"]
