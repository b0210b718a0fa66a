# tests/arch/chip8/test_chip8_cpu.py
"""
retro_chip8.arch.chip8.cpuモジュールの単体テスト。
命令サイクル全体（フェッチ、PC更新、タイマー、Snapshot生成）を検証します。
"""
import pytest

from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.arch.chip8.state import Chip8CpuState
from retro_chip8.config.builder import SystemBuilder
from retro_chip8.config.models import MachineConfig, SystemConfig, TimerMode
from retro_chip8.core.errors import MemoryAccessError
from retro_chip8.loader.loader import RomLoader
from retro_chip8.transport.bus import Bus, BusAccessType, RAM

# @intent:test_suite CHIP-8 CPU の命令サイクルと公開インターフェースの検証。

@pytest.fixture
def system():
    return SystemBuilder().build_system()


def load(bus, program):
    RomLoader().load_bytes(bytes(program), bus)


class TestChip8Cycle:
    # @intent:test_case_scenario 小さなプログラムを3サイクル実行し、最終状態を検証します。
    def test_small_program(self, system):
        cpu, bus = system
        load(bus, [0x60, 0x05, 0x61, 0x03, 0x80, 0x14])
        for _ in range(3):
            cpu.step()
        state = cpu.get_state()
        assert state.v[0] == 8
        assert state.v[1] == 3
        assert state.vf == 0
        assert state.pc == 0x206
        assert cpu.cycle_count == 3

    # @intent:test_case_fetch 命令語はビッグエンディアンで2バイト読み込まれることを検証します。
    def test_fetch_is_big_endian_and_logged(self, system):
        cpu, bus = system
        load(bus, [0x6A, 0xBC])
        snapshot = cpu.step()
        assert snapshot.operation.opcode_hex == "6ABC"
        assert snapshot.operation.address == 0x200
        reads = [(a.address, a.data) for a in snapshot.bus_activity if a.access_type == BusAccessType.READ]
        assert reads == [(0x200, 0x6A), (0x201, 0xBC)]

    def test_fetch_beyond_memory_is_fatal(self, system):
        cpu, bus = system
        cpu.get_state().pc = 0xFFF
        with pytest.raises(MemoryAccessError):
            cpu.step()

    def test_jump_offset_beyond_memory_fails_on_next_fetch(self, system):
        cpu, bus = system
        load(bus, [0x60, 0xFF, 0xBF, 0xFF])
        cpu.step()
        cpu.step()
        assert cpu.get_state().pc == 0x10FE
        with pytest.raises(MemoryAccessError):
            cpu.step()

    # @intent:test_case_snapshot Snapshotの状態は以降のサイクルで変化しないコピーであることを検証します。
    def test_snapshot_state_is_a_copy(self, system):
        cpu, bus = system
        load(bus, [0x60, 0x01, 0x70, 0x01, 0x22, 0x00])
        first = cpu.step()
        cpu.step()
        assert first.state.v[0] == 1
        assert cpu.get_state().v[0] == 2
        third = cpu.step()
        assert third.state.stack == [0x206]
        assert third.state is not cpu.get_state()

    def test_symbol_info(self, system):
        cpu, bus = system
        load(bus, [0x80, 0x14])
        snapshot = cpu.step()
        assert snapshot.metadata.symbol_info == "200: ADD V0, V1"
        assert snapshot.metadata.cycle_count == 1

    def test_step_with_key_snapshot(self, system):
        cpu, bus = system
        load(bus, [0x60, 0x07, 0xE0, 0x9E])
        cpu.step()
        cpu.step([k == 7 for k in range(16)])
        assert cpu.get_state().pc == 0x206

    def test_reset_keeps_memory_and_clears_display(self, system):
        cpu, bus = system
        load(bus, [0x60, 0x01, 0xA0, 0x50, 0xD0, 0x05])
        for _ in range(3):
            cpu.step()
        assert cpu.display.lit_count() > 0
        cpu.reset()
        state = cpu.get_state()
        assert state.pc == 0x200
        assert state.v == [0] * 16
        assert cpu.cycle_count == 0
        assert cpu.display.lit_count() == 0
        assert bus.peek(0x200) == 0x60

    def test_restore_state(self, system):
        cpu, bus = system
        load(bus, [0x60, 0x01, 0x60, 0x02])
        saved = cpu.step().state
        cpu.step()
        cpu.restore_state(saved.copy())
        assert cpu.get_state().v[0] == 1
        assert cpu.get_state().pc == 0x202


class TestTimers:
    def test_decoupled_timers_do_not_tick_per_cycle(self, system):
        cpu, bus = system
        load(bus, [0x60, 0x05, 0xF0, 0x15, 0xF0, 0x18, 0x12, 0x06])
        for _ in range(10):
            cpu.step()
        assert cpu.get_state().delay_timer == 5
        assert cpu.get_state().sound_timer == 5
        for _ in range(7):
            cpu.tick_timers()
        assert cpu.get_state().delay_timer == 0
        assert cpu.get_state().sound_timer == 0
        assert not cpu.get_state().sound_active

    # @intent:test_case_coupled coupled モードではサイクルごとに両タイマーが減算されることを検証します。
    def test_coupled_timers_tick_every_cycle(self):
        config = SystemConfig(machine=MachineConfig(timer_mode=TimerMode.COUPLED))
        cpu, bus = SystemBuilder().build_system(config)
        load(bus, [0x60, 0x05, 0xF0, 0x15, 0x12, 0x04])
        cpu.step()
        cpu.step()
        assert cpu.get_state().delay_timer == 5
        cpu.step()
        assert cpu.get_state().delay_timer == 4
        for _ in range(10):
            cpu.step()
        assert cpu.get_state().delay_timer == 0


class TestRegisterInterface:
    def test_register_map(self, system):
        cpu, _ = system
        cpu.get_state().v[0xA] = 0x12
        registers = cpu.get_register_map()
        assert registers["VA"] == 0x12
        assert registers["PC"] == 0x200
        assert set(registers) == {f"V{r:X}" for r in range(16)} | {"I", "PC", "SP", "DT", "ST"}

    def test_register_layout_covers_register_map(self, system):
        cpu, _ = system
        names = {reg.name for group in cpu.get_register_layout() for reg in group.registers}
        assert names == set(cpu.get_register_map())

    def test_flag_state(self, system):
        cpu, _ = system
        cpu.get_state().vf = 1
        cpu.get_state().sound_timer = 2
        assert cpu.get_flag_state() == {"VF": True, "KEY": False, "SND": True}

    def test_default_construction(self):
        bus = Bus()
        bus.attach(0x000, RAM(0x1000))
        cpu = Chip8Cpu(bus)
        assert isinstance(cpu.get_state(), Chip8CpuState)
        assert cpu.machine.stack_depth == 16
