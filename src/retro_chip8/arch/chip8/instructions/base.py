# src/retro_chip8/arch/chip8/instructions/base.py
"""
CHIP-8命令実装用の共通ユーティリティ。
"""
import random
from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional

from retro_chip8.config.models import QuirkConfig
from retro_chip8.core.snapshot import Operation
from retro_chip8.devices.display import Framebuffer
from retro_chip8.devices.keypad import Keypad
from retro_chip8.transport.bus import Bus


# @intent:data_structure 命令語から切り出したオペランドフィールド。
class Fields(NamedTuple):
    x: int
    y: int
    n: int
    kk: int
    nnn: int


# @intent:utility_function 命令語を x, y, n, kk, nnn の各フィールドに分解します。
def split_fields(word: int) -> Fields:
    return Fields(
        x=(word >> 8) & 0xF,
        y=(word >> 4) & 0xF,
        n=word & 0xF,
        kk=word & 0xFF,
        nnn=word & 0xFFF,
    )


# @intent:utility_function 命令パターンと表示情報から Operation を生成します。
def make_operation(word: int, pc: int, pattern: str, mnemonic: str, operands: Optional[List[str]] = None) -> Operation:
    return Operation(
        opcode_hex=f"{word:04X}",
        mnemonic=mnemonic,
        operands=operands or [],
        operand_bytes=[(word >> 8) & 0xFF, word & 0xFF],
        cycle_count=1,
        length=2,
        pattern=pattern,
        address=pc,
    )


# @intent:responsibility 命令実行に必要なCPU外部の資源（バス、画面、キーパッド、クセ設定、乱数源）を束ねます。
@dataclass
class ExecutionContext:
    bus: Bus
    display: Framebuffer
    keypad: Keypad
    quirks: QuirkConfig = field(default_factory=QuirkConfig)
    rng: random.Random = field(default_factory=random.Random)
    stack_depth: int = 16
    strict: bool = False


def reg(index: int) -> str:
    return f"V{index:X}"


def addr(value: int) -> str:
    return f"0x{value:03X}"


def byte(value: int) -> str:
    return f"0x{value:02X}"
