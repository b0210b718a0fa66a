# tests/debugger/test_debugger.py
"""
retro_chip8.debugger.debuggerモジュールの単体テスト。
"""
import pytest

from retro_chip8.config.builder import SystemBuilder
from retro_chip8.debugger.debugger import (
    Breakpoint, BreakpointKind, Debugger, StopReason,
)
from retro_chip8.loader.loader import RomLoader

# 0x200: LD V0, 0x01
# 0x202: ADD V0, 0x01
# 0x204: LD I, 0x300
# 0x206: LD B, V0
# 0x208: JP 0x202
PROGRAM = bytes([0x60, 0x01, 0x70, 0x01, 0xA3, 0x00, 0xF0, 0x33, 0x12, 0x02])


@pytest.fixture
def setup_debugger():
    cpu, bus = SystemBuilder().build_system()
    RomLoader().load_bytes(PROGRAM, bus)
    return Debugger(cpu, history_limit=8), cpu


class TestDebugger:
    def test_breakpoint_management(self, setup_debugger):
        debugger, _ = setup_debugger
        bp = Breakpoint(BreakpointKind.PC, address=0x204)
        debugger.add_breakpoint(bp)
        debugger.add_breakpoint(bp)
        assert debugger.breakpoints() == [bp]
        debugger.remove_breakpoint(bp)
        assert debugger.breakpoints() == []

    def test_step_instruction_records_history(self, setup_debugger):
        debugger, cpu = setup_debugger
        snapshot = debugger.step_instruction()
        assert snapshot.operation.mnemonic == "LD"
        assert debugger.last_snapshot is snapshot
        assert debugger.history() == [snapshot]

    def test_history_is_bounded(self, setup_debugger):
        debugger, _ = setup_debugger
        for _ in range(20):
            debugger.step_instruction()
        assert len(debugger.history()) == 8

    # @intent:test_case_pc PC一致ブレークポイントで、その命令の実行前に停止することを検証します。
    def test_run_stops_at_pc_breakpoint(self, setup_debugger):
        debugger, cpu = setup_debugger
        debugger.add_breakpoint(Breakpoint(BreakpointKind.PC, address=0x206))
        assert debugger.run() == StopReason.BREAKPOINT
        assert cpu.get_state().pc == 0x206
        assert not debugger.is_running

        # 停止位置から再開すると、ループして再び同じ位置で止まる
        assert debugger.run() == StopReason.BREAKPOINT
        assert cpu.get_state().pc == 0x206
        assert cpu.get_state().v[0] == 3

    def test_run_max_steps(self, setup_debugger):
        debugger, cpu = setup_debugger
        assert debugger.run(max_steps=4) == StopReason.MAX_STEPS
        assert cpu.cycle_count == 4

    def test_memory_write_breakpoint(self, setup_debugger):
        debugger, cpu = setup_debugger
        debugger.add_breakpoint(Breakpoint(BreakpointKind.MEMORY_WRITE, address=0x302))
        assert debugger.run(max_steps=100) == StopReason.BREAKPOINT
        assert cpu.get_state().pc == 0x208
        assert debugger.last_snapshot.operation.text() == "LD B, V0"

    def test_memory_read_breakpoint(self, setup_debugger):
        debugger, cpu = setup_debugger
        debugger.add_breakpoint(Breakpoint(BreakpointKind.MEMORY_READ, address=0x208))
        assert debugger.run(max_steps=100) == StopReason.BREAKPOINT
        assert debugger.last_snapshot.operation.mnemonic == "JP"

    def test_register_value_breakpoint(self, setup_debugger):
        debugger, cpu = setup_debugger
        debugger.add_breakpoint(Breakpoint(BreakpointKind.REGISTER_EQUALS, register="V0", value=5))
        assert debugger.run(max_steps=100) == StopReason.BREAKPOINT
        assert cpu.get_state().v[0] == 5

    def test_register_change_breakpoint(self, setup_debugger):
        debugger, cpu = setup_debugger
        debugger.add_breakpoint(Breakpoint(BreakpointKind.REGISTER_CHANGED, register="I"))
        assert debugger.run(max_steps=100) == StopReason.BREAKPOINT
        assert cpu.get_state().i == 0x300
        assert cpu.get_state().pc == 0x206

    def test_disabled_breakpoint_is_ignored(self, setup_debugger):
        debugger, _ = setup_debugger
        debugger.add_breakpoint(Breakpoint(BreakpointKind.PC, address=0x202, enabled=False))
        assert debugger.run(max_steps=10) == StopReason.MAX_STEPS

    def test_display_dirty_flag(self):
        cpu, bus = SystemBuilder().build_system()
        RomLoader().load_bytes(bytes([0x60, 0x00, 0x00, 0xE0]), bus)
        cpu.display.toggle(0, 0)
        cpu.display.consume_changed()
        debugger = Debugger(cpu)
        debugger.step_instruction()
        assert debugger.consume_display_dirty() is False
        debugger.step_instruction()
        assert debugger.consume_display_dirty() is True
        assert debugger.consume_display_dirty() is False

    def test_stop(self, setup_debugger):
        debugger, _ = setup_debugger
        debugger.stop()
        assert not debugger.is_running
