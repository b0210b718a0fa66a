# src/retro_chip8/arch/chip8/instructions/keypad.py
"""
キー入力命令の実装。
"""
from retro_chip8.core.snapshot import Operation
from retro_chip8.arch.chip8.state import Chip8CpuState
from .base import ExecutionContext, make_operation, split_fields, reg

# --- Ex9E (SKP Vx) ---
def decode_skp(word: int, pc: int) -> Operation:
    return make_operation(word, pc, "EX9E", "SKP", [reg(split_fields(word).x)])

def execute_skp(state: Chip8CpuState, ctx: ExecutionContext, op: Operation) -> None:
    if ctx.keypad.is_pressed(state.v[split_fields(op.opcode).x]):
        state.pc += 2

# --- ExA1 (SKNP Vx) ---
def decode_sknp(word: int, pc: int) -> Operation:
    return make_operation(word, pc, "EXA1", "SKNP", [reg(split_fields(word).x)])

def execute_sknp(state: Chip8CpuState, ctx: ExecutionContext, op: Operation) -> None:
    if not ctx.keypad.is_pressed(state.v[split_fields(op.opcode).x]):
        state.pc += 2

# --- Fx0A (LD Vx, K) ---
def decode_wait_key(word: int, pc: int) -> Operation:
    return make_operation(word, pc, "FX0A", "LD", [reg(split_fields(word).x), "K"])

# @intent:responsibility 押下中のキー（最小のキーコード）を Vx に設定します。押下がなければキー待ち状態に入ります。
# @intent:rationale キー待ち中は PC をこの命令に戻しておき、待機中も外部ループが入力・描画・タイマーを進められるようにします。
def execute_wait_key(state: Chip8CpuState, ctx: ExecutionContext, op: Operation) -> None:
    x = split_fields(op.opcode).x
    key = ctx.keypad.first_pressed()
    if key is not None:
        state.v[x] = key
        return
    state.pc = op.address
    state.begin_key_wait(x)

# @intent:responsibility キー待ち状態でキーパッドを再確認し、押下があれば待ちを解除して PC を次の命令へ進めます。
# @intent:return 待ちが解除された場合 True。
def resume_wait_key(state: Chip8CpuState, ctx: ExecutionContext) -> bool:
    key = ctx.keypad.first_pressed()
    if key is None:
        return False
    state.v[state.key_register] = key
    state.end_key_wait()
    state.pc += 2
    return True
