"""
utils.util
----------

範囲クランプ、YAML 読み込み、ロギング設定など smartnum 全体で共有される
ユーティリティ関数群。
"""

import logging
from pathlib import Path
from typing import Any, TypeVar, overload

from omegaconf import DictConfig, ListConfig, OmegaConf

LOGGER = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "config.yaml"


def fmt(v: Any) -> str:
    """ログ出力用に数値を文字列へフォーマットするヘルパ。

    Args:
        v (Any): 整形対象。`float` の場合は小数 3 桁へ丸める。

    Returns:
        str: 整形後の文字列。
    """
    return f"{v:.3f}" if isinstance(v, float) else str(v)


_T = TypeVar("_T", int, float)


@overload
def clamp(x: int, lo: int, hi: int) -> int: ...
@overload
def clamp(x: float, lo: float, hi: float) -> float: ...


def clamp(x: _T, lo: _T, hi: _T) -> _T:
    """値を指定範囲へクランプする。

    ``lo`` / ``hi`` には ``-inf`` / ``inf`` を渡してもよい（非有界）。

    Args:
        x (_T): 入力値。
        lo (_T): 下限。
        hi (_T): 上限。

    Returns:
        _T: クランプされた値。

    Raises:
        ValueError: ``lo`` が ``hi`` より大きい場合。
    """
    if lo > hi:
        raise ValueError(f"Invalid range: {lo} > {hi}")
    return max(lo, min(hi, x))


def config_loader(cfg_path: Path = DEFAULT_CONFIG_PATH) -> DictConfig | ListConfig:
    """YAML 設定ファイルを読み込み `OmegaConf` オブジェクトを返す。

    Args:
        cfg_path (Path, optional): YAML ファイルのパス。デフォルトはパッケージ同梱の
            `config/config.yaml`。

    Returns:
        OmegaConf: 読み込まれた DictConfig。
    """
    LOGGER.debug("Loading config from %s", cfg_path)
    return OmegaConf.load(str(cfg_path))


def setup_logging(level: int = logging.INFO) -> None:
    """ルートロガーに `StreamHandler` を設定する。

    Args:
        level (int, optional): ログレベル。デフォルトは `logging.INFO`。
    """
    logger = logging.getLogger()
    logger.setLevel(level)
    # 既存ハンドラをクリア
    logger.handlers.clear()

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    formatter = logging.Formatter("[%(levelname)s] %(name)s: %(message)s")
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)
