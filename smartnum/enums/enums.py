import enum


class MultiplierStyle(enum.Enum):
    # 速度 × (1 + 距離) でフリック操作を優遇する
    SPEED_DISTANCE = "speed_distance"
    # 開始位置からの距離のみ。速度推定を行わない
    DISTANCE = "distance"


class GesturePhase(enum.Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
