# src/retro_chip8/runtime/pacer.py
"""
実行ペース制御。

命令実行レートとタイマーレート(60Hz)を独立に管理し、経過時間から
実行すべき命令サイクル数とタイマー減算回数を算出します。
"""
from typing import NamedTuple


class Budget(NamedTuple):
    cycles: int
    timer_ticks: int


# @intent:responsibility 経過時間を命令サイクルとタイマーtickに換算し、端数を次回に持ち越します。
# @intent:rationale タイマーを命令レートから切り離すことで、実行速度を変えてもタイマーの体感速度が変わらないようにします。
class Pacer:
    def __init__(self, cpu_hz: int = 500, timer_hz: int = 60, max_catch_up: float = 0.25):
        if cpu_hz <= 0 or timer_hz <= 0:
            raise ValueError("cpu_hz and timer_hz must be positive.")
        self.cpu_hz = cpu_hz
        self.timer_hz = timer_hz
        self.max_catch_up = max_catch_up  # 長時間停止後に追いつく最大秒数
        self._cycle_debt = 0.0
        self._timer_debt = 0.0

    # @intent:responsibility elapsed 秒の経過に対して実行すべきサイクル数とタイマーtick数を返します。
    def advance(self, elapsed: float) -> Budget:
        if elapsed < 0:
            raise ValueError("elapsed must not be negative.")
        elapsed = min(elapsed, self.max_catch_up)

        self._cycle_debt += elapsed * self.cpu_hz
        self._timer_debt += elapsed * self.timer_hz
        cycles = int(self._cycle_debt)
        ticks = int(self._timer_debt)
        self._cycle_debt -= cycles
        self._timer_debt -= ticks
        return Budget(cycles, ticks)

    def set_cpu_hz(self, cpu_hz: int) -> None:
        if cpu_hz <= 0:
            raise ValueError("cpu_hz must be positive.")
        self.cpu_hz = cpu_hz

    def reset(self) -> None:
        self._cycle_debt = 0.0
        self._timer_debt = 0.0
