# src/retro_chip8/arch/chip8/instructions/__init__.py
"""
CHIP-8命令セット実装パッケージ。
"""
from typing import Optional

from retro_chip8.config.models import JumpOffset, QuirkConfig
from retro_chip8.core.errors import IllegalInstructionError
from retro_chip8.core.snapshot import Operation
from retro_chip8.arch.chip8.state import Chip8CpuState
from .base import ExecutionContext, make_operation
from .control import decode_jp_offset_vx
from .maps import DECODE_MAP, EXECUTE_MAP, match_pattern

# @intent:responsibility CHIP-8の命令語をデコードします。
def decode_opcode(word: int, pc: int, quirks: Optional[QuirkConfig] = None) -> Operation:
    """
    命令語をデコードし、Operationオブジェクトを返します。
    未定義の命令語は mnemonic="UNKNOWN" の Operation になります。
    quirks を渡すと、オペランド表記がクセ設定に合わせられます(Bnnn のオフセットレジスタ)。
    """
    pattern = match_pattern(word)
    if pattern == "BNNN" and quirks is not None and quirks.jump_offset == JumpOffset.VX:
        return decode_jp_offset_vx(word, pc)
    decoder = DECODE_MAP.get(pattern) if pattern else None
    if decoder:
        return decoder(word, pc)
    return make_operation(word, pc, "", "UNKNOWN", [f"0x{word:04X}"])

# @intent:responsibility デコードされたCHIP-8命令を実行します。
# @intent:post-condition 実行テーブルに存在しない命令は IllegalInstructionError を送出します。
def execute_instruction(operation: Operation, state: Chip8CpuState, ctx: ExecutionContext) -> None:
    executor = EXECUTE_MAP.get(operation.pattern)
    if executor is None:
        raise IllegalInstructionError(operation.opcode, operation.address)
    executor(state, ctx, operation)
