# src/retro_chip8/core/cpu.py
"""
命令サイクルの骨格。

フェッチ、デコード、PC の前進、実行、Snapshot の生成という順序をここで固定し、
命令セット固有の処理はサブクラスのフックに任せます。
"""
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple

from retro_chip8.common.types import RegisterLayoutInfo
from retro_chip8.core.snapshot import Metadata, Operation, Snapshot
from retro_chip8.core.state import CpuState
from retro_chip8.transport.bus import Bus


# @intent:responsibility 1サイクルの処理順序と、状態・サイクル数の管理を受け持ちます。
class AbstractCpu(ABC):
    def __init__(self, bus: Bus):
        self._bus = bus
        self._state: CpuState = self._create_initial_state()
        self._cycle_count = 0

    @abstractmethod
    def _create_initial_state(self) -> CpuState:
        ...

    def reset(self) -> None:
        self._state = self._create_initial_state()
        self._cycle_count = 0

    # @intent:responsibility 現在の状態そのもの（コピーではない）を返します。
    def get_state(self) -> CpuState:
        return self._state

    def restore_state(self, state: CpuState) -> None:
        self._state = state

    def get_bus(self) -> Bus:
        return self._bus

    @property
    def cycle_count(self) -> int:
        return self._cycle_count

    # --- 命令セットが実装するフック ---

    # @intent:post-condition PC は変更しません。PC の前進は _update_pc の責務です。
    @abstractmethod
    def _fetch(self) -> int:
        ...

    @abstractmethod
    def _decode(self, opcode: int) -> Operation:
        ...

    @abstractmethod
    def _execute(self, operation: Operation) -> None:
        ...

    def _begin_cycle(self) -> None:
        pass

    # @intent:return 命令を実行せずにサイクルを終える場合はその Snapshot、通常は None。
    def _handle_stall(self, current_pc: int) -> Optional[Snapshot]:
        return None

    def _update_pc(self, operation: Operation) -> None:
        self._state.pc = (self._state.pc + operation.length) & 0xFFFF

    # @intent:responsibility Snapshot に格納する状態。可変なレジスタを持つサブクラスはコピーを返します。
    def _snapshot_state(self) -> CpuState:
        return self._state

    def _display_changed(self) -> bool:
        return False

    # @intent:responsibility 1命令サイクルを実行し、その結果を Snapshot として返します。
    # @intent:rationale 分岐命令が PC を上書きできるよう、PC は実行前に次の命令へ進めておきます。
    def step(self) -> Snapshot:
        self._bus.drain_activity()
        start_pc = self._state.pc
        self._begin_cycle()

        stalled = self._handle_stall(start_pc)
        if stalled is not None:
            return stalled

        operation = self._decode(self._fetch())
        self._update_pc(operation)
        self._execute(operation)
        return self._create_snapshot(start_pc, operation)

    def _create_snapshot(self, start_pc: int, operation: Operation) -> Snapshot:
        self._cycle_count += operation.cycle_count
        metadata = Metadata(
            cycle_count=self._cycle_count,
            symbol_info=f"{start_pc:03X}: {operation.text()}",
        )
        return Snapshot(
            state=self._snapshot_state(),
            operation=operation,
            metadata=metadata,
            bus_activity=self._bus.drain_activity(),
            display_changed=self._display_changed(),
        )

    # --- インスペクタ向けの問い合わせ ---

    # @intent:responsibility レジスタ名から値への対応を返します。表示側は CPU の内部構造を知る必要がありません。
    @abstractmethod
    def get_register_map(self) -> Dict[str, int]:
        ...

    @abstractmethod
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        ...

    @abstractmethod
    def get_flag_state(self) -> Dict[str, bool]:
        ...

    # @intent:return (アドレス, 命令語の16進表記, ニーモニック) のリスト。
    @abstractmethod
    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        ...
