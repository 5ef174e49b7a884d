"""
smartnum アプリケーションのメイン実装

値を所有するホスト役のオブジェクトを用意し、設定ファイルに記述されたジェスチャを
:class:`NumberInputController` へ再生して、値の変化をログへ出力する。
"""

import asyncio
import logging

from omegaconf import DictConfig, ListConfig

from smartnum.controller.controller import NumberInputController
from smartnum.models.model import InputConfig
from smartnum.services.formatter.value_formatter import format_value
from smartnum.services.wheel.wheel_handler import WheelEvent
from smartnum.utils.util import config_loader, setup_logging

LOGGER = logging.getLogger(__name__)


class ValueHost:
    """コントロールの外側で値を保持するホスト。

    Args:
        value (float): 初期値。
        config (InputConfig): 表示フォーマットに使う設定。
    """

    def __init__(self, value: float, config: InputConfig) -> None:
        self.value = value
        self.config = config
        self.history: list[float] = []

    def get_value(self) -> float:
        return self.value

    def set_value(self, value: float) -> None:
        self.value = value
        self.history.append(value)
        LOGGER.info("value = %s", format_value(value, self.config))


def dispatch(controller: NumberInputController, event) -> None:
    """デモ用イベント 1 件をコントローラの対応メソッドへ振り分ける。"""
    kind = event.type
    if kind == "start":
        controller.on_gesture_start(event.position)
    elif kind == "move":
        controller.on_gesture_move(event.position)
    elif kind == "end":
        controller.on_gesture_end()
    elif kind == "wheel":
        controller.on_wheel(WheelEvent(delta=event.delta))
    elif kind == "text":
        controller.on_text_input(event.text)
    elif kind == "increment":
        controller.increment()
    elif kind == "decrement":
        controller.decrement()
    elif kind != "hold":
        LOGGER.warning("Unknown demo event type %s – skipped", kind)


async def main(cfg: DictConfig | ListConfig) -> list[float]:
    """設定に記述されたジェスチャを再生する。

    Args:
        cfg (OmegaConf): 設定ファイルの内容を保持する `OmegaConf` オブジェクト。

    Returns:
        list[float]: 通知された値の履歴。
    """
    input_config = InputConfig.from_config(cfg)
    host = ValueHost(cfg.demo.get("initial_value", 0), input_config)
    controller = NumberInputController(host.get_value, host.set_value, input_config)
    LOGGER.info("Start value = %s", format_value(host.value, input_config))
    try:
        for event in cfg.demo.events:
            await asyncio.sleep(event.get("wait_ms", 0) / 1000.0)
            dispatch(controller, event)
    except asyncio.CancelledError:
        pass
    finally:
        LOGGER.info("Shutting down: disposing controller")
        await controller.aclose()
    return host.history


def run() -> None:
    """設定ファイルの読み込みやログ設定などを行った上でアプリケーションを実行する同期版関数。"""
    cfg = config_loader()
    level_name = cfg.globals.logging.level.upper()  # type: ignore
    log_level = getattr(logging, level_name, logging.WARNING)
    setup_logging(level=log_level)

    try:
        asyncio.run(main(cfg))
    except KeyboardInterrupt:
        LOGGER.info("Received exit signal, shutting down application")


if __name__ == "__main__":
    run()
