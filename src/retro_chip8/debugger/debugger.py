# src/retro_chip8/debugger/debugger.py
"""
実行制御とブレークポイント。

CPU を1命令ずつ、または条件を満たすまで連続して進めます。各サイクルの
Snapshot を一定数だけ履歴として保持し、トレース表示と事後調査に使います。
"""
import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, Dict, List, Optional

from retro_chip8.core.cpu import AbstractCpu
from retro_chip8.core.snapshot import Snapshot
from retro_chip8.transport.bus import BusAccessType

logger = logging.getLogger(__name__)


class BreakpointKind(Enum):
    PC = "pc"                        # 指定アドレスの命令を実行する直前
    MEMORY_READ = "memory_read"      # 指定アドレスが読まれたサイクルの直後
    MEMORY_WRITE = "memory_write"    # 指定アドレスに書き込まれたサイクルの直後
    REGISTER_EQUALS = "register_equals"
    REGISTER_CHANGED = "register_changed"


class StopReason(Enum):
    BREAKPOINT = "breakpoint"
    MAX_STEPS = "max_steps"
    STOPPED = "stopped"


# @intent:responsibility 1つの停止条件。register は get_register_map() のキー（"V3", "I", "DT" など）です。
@dataclass(frozen=True)
class Breakpoint:
    kind: BreakpointKind
    address: Optional[int] = None
    register: Optional[str] = None
    value: Optional[int] = None
    enabled: bool = True

    # @intent:responsibility 実行済みサイクルの結果がこの条件を満たすかを判定します。PC 条件は対象外です。
    def matches(self, snapshot: Snapshot, before: Dict[str, int], after: Dict[str, int]) -> bool:
        if not self.enabled:
            return False
        if self.kind == BreakpointKind.MEMORY_READ:
            return any(a.access_type == BusAccessType.READ and a.address == self.address
                       for a in snapshot.bus_activity)
        if self.kind == BreakpointKind.MEMORY_WRITE:
            return snapshot.wrote_to(self.address)
        if self.kind == BreakpointKind.REGISTER_EQUALS:
            return after.get(self.register) == self.value
        if self.kind == BreakpointKind.REGISTER_CHANGED:
            return self.register in after and before.get(self.register) != after[self.register]
        return False


# @intent:responsibility CPU の実行を進め、ブレークポイントと実行履歴を管理します。
class Debugger:
    def __init__(self, cpu: AbstractCpu, history_limit: int = 1024):
        self._cpu = cpu
        self._breakpoints: List[Breakpoint] = []
        self._history: Deque[Snapshot] = deque(maxlen=history_limit)
        self._running = False
        self._display_dirty = False

    def add_breakpoint(self, bp: Breakpoint) -> None:
        if bp not in self._breakpoints:
            self._breakpoints.append(bp)

    def remove_breakpoint(self, bp: Breakpoint) -> None:
        if bp in self._breakpoints:
            self._breakpoints.remove(bp)

    def breakpoints(self) -> List[Breakpoint]:
        return list(self._breakpoints)

    def history(self) -> List[Snapshot]:
        return list(self._history)

    @property
    def last_snapshot(self) -> Optional[Snapshot]:
        return self._history[-1] if self._history else None

    @property
    def is_running(self) -> bool:
        return self._running

    # @intent:responsibility 前回の呼び出し以降に画面を変更したサイクルがあったかを返し、記録をリセットします。
    def consume_display_dirty(self) -> bool:
        dirty, self._display_dirty = self._display_dirty, False
        return dirty

    def _stops_at(self, pc: int) -> bool:
        return any(bp.enabled and bp.kind == BreakpointKind.PC and bp.address == pc
                   for bp in self._breakpoints)

    def step_instruction(self) -> Snapshot:
        snapshot, _ = self._step_and_check()
        return snapshot

    def _step_and_check(self):
        before = self._cpu.get_register_map()
        snapshot = self._cpu.step()
        logger.debug("%s", snapshot.metadata.symbol_info)
        self._history.append(snapshot)
        self._display_dirty = self._display_dirty or snapshot.display_changed

        after = self._cpu.get_register_map()
        hit = any(bp.matches(snapshot, before, after) for bp in self._breakpoints)
        return snapshot, hit

    # @intent:responsibility ブレークポイント、max_steps、stop() のいずれかまで実行を続けます。
    # @intent:pre-condition PC ブレークポイント上で呼ばれた場合は、その命令を1つ実行してから判定を始めます。
    def run(self, max_steps: Optional[int] = None) -> StopReason:
        self._running = True
        steps = 0
        resume_from_breakpoint = self._stops_at(self._cpu.get_state().pc)

        while self._running:
            if max_steps is not None and steps >= max_steps:
                self._running = False
                return StopReason.MAX_STEPS

            pc = self._cpu.get_state().pc
            if not resume_from_breakpoint and self._stops_at(pc):
                return self._halt(pc)
            resume_from_breakpoint = False

            snapshot, hit = self._step_and_check()
            steps += 1
            if hit:
                return self._halt(snapshot.state.pc)

        return StopReason.STOPPED

    def _halt(self, pc: int) -> StopReason:
        self._running = False
        logger.info("Breakpoint hit at PC %#05x", pc)
        return StopReason.BREAKPOINT

    def stop(self) -> None:
        self._running = False
