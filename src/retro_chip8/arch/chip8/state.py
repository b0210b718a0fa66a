# src/retro_chip8/arch/chip8/state.py
"""
CHIP-8 CPU固有の状態定義。
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from retro_chip8.core.state import CpuState

MEMORY_SIZE = 0x1000
PROGRAM_START = 0x200
REGISTER_COUNT = 16
FLAG_REGISTER = 0xF


# @intent:responsibility 実行状態の2状態機械。Fx0A によるキー待ちを明示的に表現します。
class RunState(Enum):
    RUNNING = "RUNNING"
    AWAITING_KEY = "AWAITING_KEY"


# @intent:responsibility CHIP-8 CPUの全てのレジスタ（V0-VF, I, PC, スタック, タイマー）と実行状態を保持します。
@dataclass
class Chip8CpuState(CpuState):
    """
    CHIP-8 CPUのレジスタ状態を保持するデータクラス。
    sp は常にコールスタックの深さと一致します。
    """
    pc: int = PROGRAM_START
    v: List[int] = field(default_factory=lambda: [0] * REGISTER_COUNT)
    i: int = 0x000
    stack: List[int] = field(default_factory=list)
    delay_timer: int = 0
    sound_timer: int = 0
    run_state: RunState = RunState.RUNNING
    key_register: Optional[int] = None  # AWAITING_KEY 中の書き込み先レジスタ

    @property
    def vf(self) -> int:
        return self.v[FLAG_REGISTER]

    @vf.setter
    def vf(self, value: int) -> None:
        self.v[FLAG_REGISTER] = value & 0xFF

    @property
    def awaiting_key(self) -> bool:
        return self.run_state == RunState.AWAITING_KEY

    @property
    def sound_active(self) -> bool:
        return self.sound_timer > 0

    def push(self, address: int) -> None:
        self.stack.append(address)
        self.sp = len(self.stack)

    def pop(self) -> int:
        address = self.stack.pop()
        self.sp = len(self.stack)
        return address

    # @intent:responsibility Fx0A のキー待ちに入ります。PC は待機中の命令を指したままになります。
    def begin_key_wait(self, register: int) -> None:
        self.run_state = RunState.AWAITING_KEY
        self.key_register = register

    def end_key_wait(self) -> None:
        self.run_state = RunState.RUNNING
        self.key_register = None

    # @intent:responsibility 両タイマーを1だけ0に向かって減算します。
    def tick_timers(self) -> None:
        if self.delay_timer > 0:
            self.delay_timer -= 1
        if self.sound_timer > 0:
            self.sound_timer -= 1

    # @intent:responsibility リストを含めた独立したコピーを返します。Snapshot と履歴に使用します。
    def copy(self) -> 'Chip8CpuState':
        return Chip8CpuState(
            pc=self.pc,
            sp=self.sp,
            v=list(self.v),
            i=self.i,
            stack=list(self.stack),
            delay_timer=self.delay_timer,
            sound_timer=self.sound_timer,
            run_state=self.run_state,
            key_register=self.key_register,
        )
