# src/retro_chip8/arch/chip8/instructions/display.py
"""
画面命令（クリア、スプライト描画）の実装。
"""
from retro_chip8.config.models import ScreenEdge
from retro_chip8.core.snapshot import Operation
from retro_chip8.arch.chip8.state import Chip8CpuState
from .base import ExecutionContext, make_operation, split_fields, reg

# --- 00E0 (CLS) ---
def decode_cls(word: int, pc: int) -> Operation:
    return make_operation(word, pc, "00E0", "CLS")

def execute_cls(state: Chip8CpuState, ctx: ExecutionContext, op: Operation) -> None:
    ctx.display.clear()

# --- Dxyn (DRW Vx, Vy, n) ---
def decode_drw(word: int, pc: int) -> Operation:
    f = split_fields(word)
    return make_operation(word, pc, "DXYN", "DRW", [reg(f.x), reg(f.y), str(f.n)])

# @intent:responsibility I から n バイトのスプライトを (Vx, Vy) に XOR 描画し、衝突を VF に設定します。
# @intent:rationale 開始座標は画面サイズで折り返しますが、はみ出した行・列は既定(ScreenEdge.CLIP)では描画しません。
def execute_drw(state: Chip8CpuState, ctx: ExecutionContext, op: Operation) -> None:
    f = split_fields(op.opcode)
    display = ctx.display
    wrap = ctx.quirks.screen_edge == ScreenEdge.WRAP
    x0 = state.v[f.x] % display.width
    y0 = state.v[f.y] % display.height
    sprite_base = state.i
    state.vf = 0
    collision = 0

    for row in range(f.n):
        y = y0 + row
        if y >= display.height:
            if not wrap:
                break
            y %= display.height
        data = ctx.bus.read(sprite_base + row)
        for col in range(8):
            x = x0 + col
            if x >= display.width:
                if not wrap:
                    break
                x %= display.width
            if (data >> (7 - col)) & 0x1:
                if display.toggle(x, y):
                    collision = 1

    state.vf = collision
