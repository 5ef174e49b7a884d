"""
services.formatter.value_formatter
----------------------------------

値の丸め・表示用フォーマット・テキスト入力の解釈を行う純粋関数群。

丸め規則は Python 組み込みの ``round`` に従う偶数丸め (round-half-to-even)。
``round(2.5) == 2``, ``round(3.5) == 4``。小数桁指定時は 2 進表現に対して
丸めるため ``round(2.675, 2) == 2.67`` となる点に注意。
"""

import logging
import math

from babel.numbers import format_decimal

from smartnum.models.model import InputConfig

LOGGER = logging.getLogger(__name__)


def round_value(x: float, config: InputConfig) -> float | int:
    """設定に従って値を丸める。

    Args:
        x (float): 有限の入力値。
        config (InputConfig): ``allow_decimals`` / ``decimal_places`` を参照する。

    Returns:
        float | int: 小数不許可なら int、許可なら ``decimal_places`` 桁へ丸めた float。
    """
    if not config.allow_decimals:
        return round(x)
    return round(x, config.decimal_places)


def _pattern(config: InputConfig) -> str:
    if not config.allow_decimals or config.decimal_places == 0:
        return "#,##0"
    return "#,##0." + "0" * config.decimal_places


def format_value(x: float, config: InputConfig) -> str:
    """ロケールに応じた桁区切り付き文字列へ変換する。

    小数許可時は常に ``decimal_places`` 桁の小数部を持つ。

    Args:
        x (float): 有限の入力値。
        config (InputConfig): 丸め設定と ``locale``。

    Returns:
        str: 表示用文字列。例: ``en_US`` で ``"1,234.50"``、``de_DE`` で ``"1.234,50"``。
    """
    return format_decimal(round_value(x, config), format=_pattern(config), locale=config.locale)


def parse_value(text: str, config: InputConfig) -> float | int | None:
    """手入力テキストを数値へ変換する。

    空文字・数値でない文字列・NaN・無限大は ``None`` を返し、呼び出し側で破棄させる。

    Args:
        text (str): 入力テキスト。
        config (InputConfig): 丸め設定。

    Returns:
        float | int | None: 丸め済みの値。無効な入力なら None。
    """
    try:
        parsed = float(text.strip())
    except (AttributeError, ValueError):
        LOGGER.debug("Discard non-numeric input %r", text)
        return None
    if not math.isfinite(parsed):
        LOGGER.debug("Discard non-finite input %r", text)
        return None
    return round_value(parsed, config)
