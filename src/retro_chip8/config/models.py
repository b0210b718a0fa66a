from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple


class ShiftSource(Enum):
    VY = "vy"  # 8xy6/8xyE: Vy をシフトし、結果を Vy と Vx の両方に書き込む
    VX = "vx"  # Vx をその場でシフトする


class JumpOffset(Enum):
    V0 = "v0"  # Bnnn: nnn + V0
    VX = "vx"  # Bxnn: xnn + Vx


class ScreenEdge(Enum):
    CLIP = "clip"
    WRAP = "wrap"


class IndexOverflow(Enum):
    CARRY16 = "carry16"  # Fx1E: I + Vx > 0xFFFF で VF = 1
    CARRY12 = "carry12"  # Fx1E: I + Vx > 0x0FFF で VF = 1
    NONE = "none"        # VF は変更しない


class TimerMode(Enum):
    DECOUPLED = "decoupled"  # 60Hz で外部から tick_timers() を呼ぶ
    COUPLED = "coupled"      # 命令サイクルごとにタイマーを減算する


@dataclass
class QuirkConfig:
    shift_source: ShiftSource = ShiftSource.VY
    jump_offset: JumpOffset = JumpOffset.V0
    screen_edge: ScreenEdge = ScreenEdge.CLIP
    index_overflow: IndexOverflow = IndexOverflow.CARRY16
    logic_resets_flag: bool = False
    load_store_increments_index: bool = False


@dataclass
class MachineConfig:
    cpu_hz: int = 500
    timer_hz: int = 60
    timer_mode: TimerMode = TimerMode.DECOUPLED
    stack_depth: int = 16
    strict: bool = False  # True の場合、ファミリ0の未知命令も致命的エラーにする
    seed: Optional[int] = None


@dataclass
class DisplayConfig:
    scale: int = 10
    foreground: Tuple[int, int, int] = (255, 255, 255)
    background: Tuple[int, int, int] = (0, 0, 0)


@dataclass
class SystemConfig:
    machine: MachineConfig = field(default_factory=MachineConfig)
    quirks: QuirkConfig = field(default_factory=QuirkConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    keymap: Dict[str, int] = field(default_factory=dict)  # キー名 -> CHIP-8キーコード。空なら既定配置
