"""
services.tracker.gesture_tracker
--------------------------------

ドラッグ 1 回分の :class:`Session` を所有し、IDLE / DRAGGING の状態遷移を管理する。

* ``start(position=, time_ms=)``: どの状態からでも DRAGGING へ（再開始は上書き）
* ``move(position=, time_ms=)``: DRAGGING 中のみ受け付け、速度を更新する
* ``end()``: DRAGGING から IDLE へ

IDLE 中の ``move`` / ``end`` は無視され、トリガは ``False`` を返す。
"""

import logging

from transitions import EventData, Machine, State

from smartnum.enums.enums import GesturePhase
from smartnum.models.model import Session
from smartnum.utils.util import fmt

LOGGER = logging.getLogger(__name__)


STATES = [
    State(name=GesturePhase.IDLE),
    State(name=GesturePhase.DRAGGING),
]
TRANSITIONS = [
    {"trigger": "start", "source": "*", "dest": GesturePhase.DRAGGING, "before": "_on_start"},
    {"trigger": "move", "source": GesturePhase.DRAGGING, "dest": None, "before": "_on_move"},
    {"trigger": "end", "source": GesturePhase.DRAGGING, "dest": GesturePhase.IDLE, "before": "_on_end"},
]


class GestureTracker:
    """
    ジェスチャの状態機械。

    Attributes:
        session (Session): このトラッカー専用のドラッグ状態。
        machine (transitions.Machine): IDLE / DRAGGING の状態遷移。
    """

    def __init__(self) -> None:
        self.session = Session()
        self.state: GesturePhase | None = None
        self.machine: Machine = Machine(
            model=self,
            states=STATES,
            transitions=TRANSITIONS,
            initial=GesturePhase.IDLE,
            send_event=True,
            auto_transitions=False,
            ignore_invalid_triggers=True,
        )

    @property
    def dragging(self) -> bool:
        return self.state == GesturePhase.DRAGGING

    # ---------------------------------
    # transition callbacks
    # ---------------------------------
    def _on_start(self, event: EventData) -> None:
        position = event.kwargs["position"]
        time_ms = event.kwargs["time_ms"]
        if self.session.active:
            LOGGER.info("Gesture restarted at %s", fmt(position))
        else:
            LOGGER.info("Gesture started at %s", fmt(position))
        self.session.begin(position, time_ms)

    def _on_move(self, event: EventData) -> None:
        self.session.sample(event.kwargs["position"], event.kwargs["time_ms"])
        LOGGER.debug(
            "Gesture moved: position=%s speed=%s", fmt(self.session.last_position), fmt(self.session.current_speed)
        )

    def _on_end(self, event: EventData) -> None:  # noqa: D401
        LOGGER.info("Gesture ended (distance=%s)", fmt(self.session.distance))
        self.session.reset()
