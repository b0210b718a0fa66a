# src/retro_chip8/arch/chip8/instructions/control.py
"""
制御命令（ジャンプ、サブルーチン、条件スキップ）の実装。
"""
import logging

from retro_chip8.config.models import JumpOffset
from retro_chip8.core.errors import IllegalInstructionError, StackOverflowError, StackUnderflowError
from retro_chip8.core.snapshot import Operation
from retro_chip8.arch.chip8.state import Chip8CpuState
from .base import ExecutionContext, make_operation, split_fields, reg, addr, byte

logger = logging.getLogger(__name__)

# --- 0nnn (SYS) ---
# @intent:responsibility 00E0/00EE 以外のファミリ0命令をデコードします。
def decode_sys(word: int, pc: int) -> Operation:
    return make_operation(word, pc, "0NNN", "SYS", [addr(word & 0xFFF)])

# @intent:responsibility ファミリ0の未知命令を扱います。既定では警告を記録して何もしません。
# @intent:rationale 一部のROMは未使用の 0nnn を含むため、strict 指定時のみ致命的エラーとします。
def execute_sys(state: Chip8CpuState, ctx: ExecutionContext, op: Operation) -> None:
    if ctx.strict:
        raise IllegalInstructionError(op.opcode, op.address)
    logger.warning("Invalid instruction %#06x at PC %#05x ignored", op.opcode, op.address)

# --- 00EE (RET) ---
def decode_ret(word: int, pc: int) -> Operation:
    return make_operation(word, pc, "00EE", "RET")

# @intent:responsibility スタックから戻りアドレスをポップしてPCに設定します。空スタックは致命的エラーです。
def execute_ret(state: Chip8CpuState, ctx: ExecutionContext, op: Operation) -> None:
    if not state.stack:
        raise StackUnderflowError(op.opcode, op.address)
    state.pc = state.pop()

# --- 1nnn (JP addr) ---
def decode_jp(word: int, pc: int) -> Operation:
    return make_operation(word, pc, "1NNN", "JP", [addr(word & 0xFFF)])

def execute_jp(state: Chip8CpuState, ctx: ExecutionContext, op: Operation) -> None:
    state.pc = split_fields(op.opcode).nnn

# --- 2nnn (CALL addr) ---
def decode_call(word: int, pc: int) -> Operation:
    return make_operation(word, pc, "2NNN", "CALL", [addr(word & 0xFFF)])

# @intent:responsibility 次の命令のアドレスをプッシュしてからジャンプします。
def execute_call(state: Chip8CpuState, ctx: ExecutionContext, op: Operation) -> None:
    if len(state.stack) >= ctx.stack_depth:
        raise StackOverflowError(op.opcode, op.address, ctx.stack_depth)
    # state.pc は CPU.step で既に次の命令を指している
    state.push(state.pc)
    state.pc = split_fields(op.opcode).nnn

# --- 3xkk (SE Vx, byte) ---
def decode_se_byte(word: int, pc: int) -> Operation:
    f = split_fields(word)
    return make_operation(word, pc, "3XKK", "SE", [reg(f.x), byte(f.kk)])

def execute_se_byte(state: Chip8CpuState, ctx: ExecutionContext, op: Operation) -> None:
    f = split_fields(op.opcode)
    if state.v[f.x] == f.kk:
        state.pc += 2

# --- 4xkk (SNE Vx, byte) ---
def decode_sne_byte(word: int, pc: int) -> Operation:
    f = split_fields(word)
    return make_operation(word, pc, "4XKK", "SNE", [reg(f.x), byte(f.kk)])

def execute_sne_byte(state: Chip8CpuState, ctx: ExecutionContext, op: Operation) -> None:
    f = split_fields(op.opcode)
    if state.v[f.x] != f.kk:
        state.pc += 2

# --- 5xy0 (SE Vx, Vy) ---
def decode_se_reg(word: int, pc: int) -> Operation:
    f = split_fields(word)
    return make_operation(word, pc, "5XY0", "SE", [reg(f.x), reg(f.y)])

def execute_se_reg(state: Chip8CpuState, ctx: ExecutionContext, op: Operation) -> None:
    f = split_fields(op.opcode)
    if state.v[f.x] == state.v[f.y]:
        state.pc += 2

# --- 9xy0 (SNE Vx, Vy) ---
def decode_sne_reg(word: int, pc: int) -> Operation:
    f = split_fields(word)
    return make_operation(word, pc, "9XY0", "SNE", [reg(f.x), reg(f.y)])

def execute_sne_reg(state: Chip8CpuState, ctx: ExecutionContext, op: Operation) -> None:
    f = split_fields(op.opcode)
    if state.v[f.x] != state.v[f.y]:
        state.pc += 2

# --- Bnnn (JP V0, addr) ---
def decode_jp_offset(word: int, pc: int) -> Operation:
    f = split_fields(word)
    return make_operation(word, pc, "BNNN", "JP", ["V0", addr(f.nnn)])

# Bxnn (jump_offset=vx): オフセットは Vx。
def decode_jp_offset_vx(word: int, pc: int) -> Operation:
    f = split_fields(word)
    return make_operation(word, pc, "BNNN", "JP", [reg(f.x), addr(f.nnn)])

# @intent:responsibility オフセット付きジャンプ。オフセットレジスタはクセ設定(jump_offset)で選択します。
def execute_jp_offset(state: Chip8CpuState, ctx: ExecutionContext, op: Operation) -> None:
    f = split_fields(op.opcode)
    if ctx.quirks.jump_offset == JumpOffset.VX:
        state.pc = f.nnn + state.v[f.x]
    else:
        state.pc = f.nnn + state.v[0]
