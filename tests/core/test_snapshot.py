# tests/core/test_snapshot.py
"""
retro_chip8.core.snapshotモジュールの単体テスト。
"""
import pytest

from retro_chip8.core.snapshot import Metadata, Operation, Snapshot
from retro_chip8.core.state import CpuState
from retro_chip8.transport.bus import BusAccess, BusAccessType


class TestOperation:
    # @intent:test_case_init Operationが正しく初期化され、命令語と表示文字列を返すことを検証します。
    def test_operation_fields(self):
        op = Operation(opcode_hex="8014", mnemonic="ADD", operands=["V0", "V1"], pattern="8XY4", address=0x204)
        assert op.opcode == 0x8014
        assert op.text() == "ADD V0, V1"
        assert op.length == 2
        assert op.cycle_count == 1

    def test_text_without_operands(self):
        assert Operation(opcode_hex="00E0", mnemonic="CLS").text() == "CLS"

    # @intent:test_case_immutability Operationが不変であることを検証します。
    def test_operation_immutability(self):
        op = Operation(opcode_hex="00EE", mnemonic="RET")
        with pytest.raises(AttributeError):
            op.mnemonic = "CALL"


class TestMetadata:
    def test_metadata_defaults(self):
        meta = Metadata(cycle_count=100)
        assert meta.symbol_info is None

    def test_metadata_immutability(self):
        meta = Metadata(cycle_count=10)
        with pytest.raises(AttributeError):
            meta.cycle_count = 20


class TestSnapshot:
    @pytest.fixture
    def sample(self):
        state = CpuState(pc=0x202, sp=0)
        operation = Operation(opcode_hex="6005", mnemonic="LD", operands=["V0", "0x05"])
        metadata = Metadata(cycle_count=1, symbol_info="200: LD V0, 0x05")
        return state, operation, metadata

    def test_snapshot_init(self, sample):
        state, operation, metadata = sample
        snapshot = Snapshot(state=state, operation=operation, metadata=metadata)
        assert snapshot.state == state
        assert snapshot.bus_activity == []
        assert snapshot.display_changed is False

    # @intent:test_case_immutability Snapshotのフィールドは再代入できないことを検証します。
    def test_snapshot_immutability(self, sample):
        state, operation, metadata = sample
        snapshot = Snapshot(state=state, operation=operation, metadata=metadata)
        with pytest.raises(AttributeError):
            snapshot.state = CpuState(pc=0x300)
        with pytest.raises(AttributeError):
            snapshot.display_changed = True

    def test_default_bus_activity_is_independent(self, sample):
        state, operation, metadata = sample
        first = Snapshot(state=state, operation=operation, metadata=metadata)
        second = Snapshot(state=state, operation=operation, metadata=metadata)
        assert first.bus_activity is not second.bus_activity

    # @intent:test_case_query wrote_to は書き込みアクセスのみを対象とすることを検証します。
    def test_wrote_to(self, sample):
        state, operation, metadata = sample
        activity = [
            BusAccess(0x300, 0x01, BusAccessType.READ),
            BusAccess(0x301, 0x02, BusAccessType.WRITE, previous_data=0x00),
        ]
        snapshot = Snapshot(state=state, operation=operation, metadata=metadata, bus_activity=activity)
        assert snapshot.wrote_to(0x301)
        assert not snapshot.wrote_to(0x300)
