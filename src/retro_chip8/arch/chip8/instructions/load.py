# src/retro_chip8/arch/chip8/instructions/load.py
"""
ロード/ストア命令（レジスタ、インデックス、タイマー、メモリ転送）の実装。
"""
from retro_chip8.core.snapshot import Operation
from retro_chip8.arch.chip8.font import FONT_BASE, GLYPH_SIZE
from retro_chip8.arch.chip8.state import Chip8CpuState
from .base import ExecutionContext, make_operation, split_fields, reg, addr, byte

# --- 6xkk (LD Vx, byte) ---
def decode_ld_byte(word: int, pc: int) -> Operation:
    f = split_fields(word)
    return make_operation(word, pc, "6XKK", "LD", [reg(f.x), byte(f.kk)])

def execute_ld_byte(state: Chip8CpuState, ctx: ExecutionContext, op: Operation) -> None:
    f = split_fields(op.opcode)
    state.v[f.x] = f.kk

# --- 8xy0 (LD Vx, Vy) ---
def decode_ld_reg(word: int, pc: int) -> Operation:
    f = split_fields(word)
    return make_operation(word, pc, "8XY0", "LD", [reg(f.x), reg(f.y)])

def execute_ld_reg(state: Chip8CpuState, ctx: ExecutionContext, op: Operation) -> None:
    f = split_fields(op.opcode)
    state.v[f.x] = state.v[f.y]

# --- Annn (LD I, addr) ---
def decode_ld_i(word: int, pc: int) -> Operation:
    return make_operation(word, pc, "ANNN", "LD", ["I", addr(word & 0xFFF)])

def execute_ld_i(state: Chip8CpuState, ctx: ExecutionContext, op: Operation) -> None:
    state.i = split_fields(op.opcode).nnn

# --- Fx07 (LD Vx, DT) ---
def decode_ld_vx_dt(word: int, pc: int) -> Operation:
    return make_operation(word, pc, "FX07", "LD", [reg(split_fields(word).x), "DT"])

def execute_ld_vx_dt(state: Chip8CpuState, ctx: ExecutionContext, op: Operation) -> None:
    state.v[split_fields(op.opcode).x] = state.delay_timer

# --- Fx15 (LD DT, Vx) ---
def decode_ld_dt_vx(word: int, pc: int) -> Operation:
    return make_operation(word, pc, "FX15", "LD", ["DT", reg(split_fields(word).x)])

def execute_ld_dt_vx(state: Chip8CpuState, ctx: ExecutionContext, op: Operation) -> None:
    state.delay_timer = state.v[split_fields(op.opcode).x]

# --- Fx18 (LD ST, Vx) ---
def decode_ld_st_vx(word: int, pc: int) -> Operation:
    return make_operation(word, pc, "FX18", "LD", ["ST", reg(split_fields(word).x)])

def execute_ld_st_vx(state: Chip8CpuState, ctx: ExecutionContext, op: Operation) -> None:
    state.sound_timer = state.v[split_fields(op.opcode).x]

# --- Fx29 (LD F, Vx) ---
def decode_ld_font(word: int, pc: int) -> Operation:
    return make_operation(word, pc, "FX29", "LD", ["F", reg(split_fields(word).x)])

# @intent:responsibility Vx の値に対応するフォントグリフのアドレスを I に設定します。
def execute_ld_font(state: Chip8CpuState, ctx: ExecutionContext, op: Operation) -> None:
    state.i = state.v[split_fields(op.opcode).x] * GLYPH_SIZE + FONT_BASE

# --- Fx33 (LD B, Vx) ---
def decode_ld_bcd(word: int, pc: int) -> Operation:
    return make_operation(word, pc, "FX33", "LD", ["B", reg(split_fields(word).x)])

# @intent:responsibility Vx を10進3桁（百、十、一の位）に分解し、I, I+1, I+2 に格納します。
def execute_ld_bcd(state: Chip8CpuState, ctx: ExecutionContext, op: Operation) -> None:
    value = state.v[split_fields(op.opcode).x]
    ctx.bus.write(state.i, value // 100)
    ctx.bus.write(state.i + 1, value // 10 % 10)
    ctx.bus.write(state.i + 2, value % 10)

# --- Fx55 (LD [I], Vx) ---
def decode_store_regs(word: int, pc: int) -> Operation:
    return make_operation(word, pc, "FX55", "LD", ["[I]", reg(split_fields(word).x)])

# @intent:responsibility V0 から Vx まで（x を含む）を I から始まるメモリに格納します。
def execute_store_regs(state: Chip8CpuState, ctx: ExecutionContext, op: Operation) -> None:
    x = split_fields(op.opcode).x
    for r in range(x + 1):
        ctx.bus.write(state.i + r, state.v[r])
    if ctx.quirks.load_store_increments_index:
        state.i = (state.i + x + 1) & 0xFFF

# --- Fx65 (LD Vx, [I]) ---
def decode_load_regs(word: int, pc: int) -> Operation:
    return make_operation(word, pc, "FX65", "LD", [reg(split_fields(word).x), "[I]"])

# @intent:responsibility I から始まるメモリを V0 から Vx まで（x を含む）に読み込みます。
def execute_load_regs(state: Chip8CpuState, ctx: ExecutionContext, op: Operation) -> None:
    x = split_fields(op.opcode).x
    for r in range(x + 1):
        state.v[r] = ctx.bus.read(state.i + r)
    if ctx.quirks.load_store_increments_index:
        state.i = (state.i + x + 1) & 0xFFF
