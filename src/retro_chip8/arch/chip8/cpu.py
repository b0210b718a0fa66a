# src/retro_chip8/arch/chip8/cpu.py
"""
CHIP-8 CPUエミュレーションの中心モジュール。
"""
import random
from typing import Dict, List, Optional, Tuple

from retro_chip8.common.types import KeySnapshot, RegisterInfo, RegisterLayoutInfo
from retro_chip8.config.models import MachineConfig, QuirkConfig, TimerMode
from retro_chip8.core.cpu import AbstractCpu
from retro_chip8.core.snapshot import Operation, Snapshot
from retro_chip8.devices.display import Framebuffer
from retro_chip8.devices.keypad import Keypad
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState
from retro_chip8.arch.chip8.instructions import ExecutionContext, decode_opcode, execute_instruction
from retro_chip8.arch.chip8.instructions.keypad import resume_wait_key
from retro_chip8.arch.chip8 import disassembler

# @intent:responsibility CHIP-8 CPUの具体的なエミュレーションロジック（フェッチ、デコード、実行）を提供します。
class Chip8Cpu(AbstractCpu):
    """
    CHIP-8 CPUをエミュレートするクラス。
    画面とキーパッドは外部と共有され、レンダラと入力変換器はそれぞれを直接参照します。
    """
    def __init__(self, bus: Bus, display: Optional[Framebuffer] = None, keypad: Optional[Keypad] = None,
                 quirks: Optional[QuirkConfig] = None, machine: Optional[MachineConfig] = None,
                 rng: Optional[random.Random] = None):
        self._machine = machine or MachineConfig()
        self._display = display or Framebuffer()
        self._keypad = keypad or Keypad()
        self._context = ExecutionContext(
            bus=bus,
            display=self._display,
            keypad=self._keypad,
            quirks=quirks or QuirkConfig(),
            rng=rng or random.Random(self._machine.seed),
            stack_depth=self._machine.stack_depth,
            strict=self._machine.strict,
        )
        super().__init__(bus)

    def _create_initial_state(self) -> Chip8CpuState:
        return Chip8CpuState()

    @property
    def display(self) -> Framebuffer:
        return self._display

    @property
    def keypad(self) -> Keypad:
        return self._keypad

    @property
    def quirks(self) -> QuirkConfig:
        return self._context.quirks

    @property
    def machine(self) -> MachineConfig:
        return self._machine

    # @intent:responsibility CPU状態をリセットし、画面を消去します。メモリ内容（フォントとプログラム）は保持します。
    def reset(self) -> None:
        super().reset()
        self._display.clear()
        self._display.consume_changed()

    # @intent:responsibility 遅延タイマーとサウンドタイマーを1回減算します。decoupled モードでは外部ループが 60Hz で呼び出します。
    def tick_timers(self) -> None:
        self._state.tick_timers()

    # @intent:responsibility 1命令サイクルを実行します。keys を渡した場合、実行前にキーパッドのスナップショットを置き換えます。
    def step(self, keys: Optional[KeySnapshot] = None) -> Snapshot:
        if keys is not None:
            self._keypad.update(keys)
        return super().step()

    def _begin_cycle(self) -> None:
        self._display.consume_changed()
        if self._machine.timer_mode == TimerMode.COUPLED:
            self._state.tick_timers()

    # @intent:responsibility キー待ち状態の場合、命令をフェッチせずにキーパッドを再確認します。
    def _handle_stall(self, current_pc: int) -> Optional[Snapshot]:
        if not self._state.awaiting_key:
            return None
        operation = decode_opcode(self._peek_word(current_pc), current_pc, self.quirks)
        resume_wait_key(self._state, self._context)
        return self._create_snapshot(current_pc, operation)

    # @intent:responsibility PCから2バイトをビッグエンディアンで読み出します。範囲外は MemoryAccessError。
    def _fetch(self) -> int:
        pc = self._state.pc
        return (self._bus.read(pc) << 8) | self._bus.read(pc + 1)

    def _peek_word(self, address: int) -> int:
        return (self._bus.peek(address) << 8) | self._bus.peek(address + 1)

    def _decode(self, opcode: int) -> Operation:
        return decode_opcode(opcode, self._state.pc, self.quirks)

    def _execute(self, operation: Operation) -> None:
        execute_instruction(operation, self._state, self._context)

    def _snapshot_state(self) -> Chip8CpuState:
        return self._state.copy()

    def _display_changed(self) -> bool:
        return self._display.consume_changed()

    # @intent:responsibility UI表示用に、現在のレジスタ値を辞書形式で提供します。
    def get_register_map(self) -> Dict[str, int]:
        s = self._state
        registers = {f"V{r:X}": value for r, value in enumerate(s.v)}
        registers.update({"I": s.i, "PC": s.pc, "SP": s.sp, "DT": s.delay_timer, "ST": s.sound_timer})
        return registers

    # @intent:responsibility UIのレジスタ表示レイアウト（グループ化）を定義します。
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return [
            RegisterLayoutInfo("General", [RegisterInfo(f"V{r:X}", 8) for r in range(16)]),
            RegisterLayoutInfo("Index/Pointers", [
                RegisterInfo("I", 16), RegisterInfo("PC", 16), RegisterInfo("SP", 8)
            ]),
            RegisterLayoutInfo("Timers", [RegisterInfo("DT", 8), RegisterInfo("ST", 8)]),
        ]

    # @intent:responsibility UI表示用に、VF とキー待ち・サウンド状態を提供します。
    def get_flag_state(self) -> Dict[str, bool]:
        s = self._state
        return {"VF": s.vf != 0, "KEY": s.awaiting_key, "SND": s.sound_active}

    # @intent:responsibility 指定範囲のメモリを逆アセンブルします。
    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        return disassembler.disassemble(self._bus, start_addr, length, self.quirks)
