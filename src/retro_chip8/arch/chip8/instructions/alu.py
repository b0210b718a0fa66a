# src/retro_chip8/arch/chip8/instructions/alu.py
"""
算術・論理演算命令の実装。

フラグ(VF)は常に演算結果の書き込み後に設定されます。x == F の場合はフラグ値が結果を上書きします。
"""
from retro_chip8.config.models import IndexOverflow, ShiftSource
from retro_chip8.core.snapshot import Operation
from retro_chip8.arch.chip8.state import Chip8CpuState
from .base import ExecutionContext, make_operation, split_fields, reg, byte

# --- 7xkk (ADD Vx, byte) ---
def decode_add_byte(word: int, pc: int) -> Operation:
    f = split_fields(word)
    return make_operation(word, pc, "7XKK", "ADD", [reg(f.x), byte(f.kk)])

# @intent:responsibility 即値加算。256を法として折り返し、VFは変更しません。
def execute_add_byte(state: Chip8CpuState, ctx: ExecutionContext, op: Operation) -> None:
    f = split_fields(op.opcode)
    state.v[f.x] = (state.v[f.x] + f.kk) & 0xFF

# --- 8xy1 / 8xy2 / 8xy3 (OR, AND, XOR) ---
def decode_or(word: int, pc: int) -> Operation:
    f = split_fields(word)
    return make_operation(word, pc, "8XY1", "OR", [reg(f.x), reg(f.y)])

def execute_or(state: Chip8CpuState, ctx: ExecutionContext, op: Operation) -> None:
    f = split_fields(op.opcode)
    state.v[f.x] = state.v[f.x] | state.v[f.y]
    _reset_flag_after_logic(state, ctx)

def decode_and(word: int, pc: int) -> Operation:
    f = split_fields(word)
    return make_operation(word, pc, "8XY2", "AND", [reg(f.x), reg(f.y)])

def execute_and(state: Chip8CpuState, ctx: ExecutionContext, op: Operation) -> None:
    f = split_fields(op.opcode)
    state.v[f.x] = state.v[f.x] & state.v[f.y]
    _reset_flag_after_logic(state, ctx)

def decode_xor(word: int, pc: int) -> Operation:
    f = split_fields(word)
    return make_operation(word, pc, "8XY3", "XOR", [reg(f.x), reg(f.y)])

def execute_xor(state: Chip8CpuState, ctx: ExecutionContext, op: Operation) -> None:
    f = split_fields(op.opcode)
    state.v[f.x] = state.v[f.x] ^ state.v[f.y]
    _reset_flag_after_logic(state, ctx)

def _reset_flag_after_logic(state: Chip8CpuState, ctx: ExecutionContext) -> None:
    if ctx.quirks.logic_resets_flag:
        state.vf = 0

# --- 8xy4 (ADD Vx, Vy) ---
def decode_add_reg(word: int, pc: int) -> Operation:
    f = split_fields(word)
    return make_operation(word, pc, "8XY4", "ADD", [reg(f.x), reg(f.y)])

# @intent:responsibility 9ビットの和を計算し、下位8ビットを Vx に、桁上がりを VF に設定します。
def execute_add_reg(state: Chip8CpuState, ctx: ExecutionContext, op: Operation) -> None:
    f = split_fields(op.opcode)
    result = state.v[f.x] + state.v[f.y]
    state.v[f.x] = result & 0xFF
    state.vf = 1 if result > 0xFF else 0

# --- 8xy5 (SUB Vx, Vy) ---
def decode_sub(word: int, pc: int) -> Operation:
    f = split_fields(word)
    return make_operation(word, pc, "8XY5", "SUB", [reg(f.x), reg(f.y)])

# @intent:responsibility Vx = Vx - Vy。借りが発生しなければ VF = 1。
def execute_sub(state: Chip8CpuState, ctx: ExecutionContext, op: Operation) -> None:
    f = split_fields(op.opcode)
    vx, vy = state.v[f.x], state.v[f.y]
    state.v[f.x] = (vx - vy) & 0xFF
    state.vf = 1 if vx >= vy else 0

# --- 8xy7 (SUBN Vx, Vy) ---
def decode_subn(word: int, pc: int) -> Operation:
    f = split_fields(word)
    return make_operation(word, pc, "8XY7", "SUBN", [reg(f.x), reg(f.y)])

# @intent:responsibility Vx = Vy - Vx。借りが発生しなければ VF = 1。
def execute_subn(state: Chip8CpuState, ctx: ExecutionContext, op: Operation) -> None:
    f = split_fields(op.opcode)
    vx, vy = state.v[f.x], state.v[f.y]
    state.v[f.x] = (vy - vx) & 0xFF
    state.vf = 1 if vy >= vx else 0

# --- 8xy6 (SHR Vx, Vy) ---
def decode_shr(word: int, pc: int) -> Operation:
    f = split_fields(word)
    return make_operation(word, pc, "8XY6", "SHR", [reg(f.x), reg(f.y)])

# @intent:responsibility 1ビット右シフト。押し出されたビットを VF に設定します。
# @intent:rationale 既定(ShiftSource.VY)では Vy をシフトし、結果を Vy と Vx の両方に書き込みます。
def execute_shr(state: Chip8CpuState, ctx: ExecutionContext, op: Operation) -> None:
    f = split_fields(op.opcode)
    if ctx.quirks.shift_source == ShiftSource.VY:
        val = state.v[f.y]
        state.v[f.y] = val >> 1
        state.v[f.x] = state.v[f.y]
    else:
        val = state.v[f.x]
        state.v[f.x] = val >> 1
    state.vf = val & 0x1

# --- 8xyE (SHL Vx, Vy) ---
def decode_shl(word: int, pc: int) -> Operation:
    f = split_fields(word)
    return make_operation(word, pc, "8XYE", "SHL", [reg(f.x), reg(f.y)])

def execute_shl(state: Chip8CpuState, ctx: ExecutionContext, op: Operation) -> None:
    f = split_fields(op.opcode)
    if ctx.quirks.shift_source == ShiftSource.VY:
        val = state.v[f.y]
        state.v[f.y] = (val << 1) & 0xFF
        state.v[f.x] = state.v[f.y]
    else:
        val = state.v[f.x]
        state.v[f.x] = (val << 1) & 0xFF
    state.vf = (val >> 7) & 0x1

# --- Cxkk (RND Vx, byte) ---
def decode_rnd(word: int, pc: int) -> Operation:
    f = split_fields(word)
    return make_operation(word, pc, "CXKK", "RND", [reg(f.x), byte(f.kk)])

# @intent:responsibility 0-255 の一様乱数と kk の論理積を Vx に設定します。
def execute_rnd(state: Chip8CpuState, ctx: ExecutionContext, op: Operation) -> None:
    f = split_fields(op.opcode)
    state.v[f.x] = ctx.rng.randint(0, 0xFF) & f.kk

# --- Fx1E (ADD I, Vx) ---
def decode_add_i(word: int, pc: int) -> Operation:
    return make_operation(word, pc, "FX1E", "ADD", ["I", reg(split_fields(word).x)])

# @intent:responsibility I = I + Vx。結果は12ビットにマスクし、VF の扱いはクセ設定(index_overflow)に従います。
def execute_add_i(state: Chip8CpuState, ctx: ExecutionContext, op: Operation) -> None:
    result = state.i + state.v[split_fields(op.opcode).x]
    mode = ctx.quirks.index_overflow
    if mode == IndexOverflow.CARRY16:
        state.vf = 1 if result > 0xFFFF else 0
    elif mode == IndexOverflow.CARRY12:
        state.vf = 1 if result > 0xFFF else 0
    state.i = result & 0xFFF
