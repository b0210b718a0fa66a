# src/retro_chip8/core/snapshot.py
"""
実行状態の不変スナップショット

このモジュールは、1命令サイクル実行後のCPUとバスの状態を記録した不変のデータ構造を定義します。
UIへの情報提供と、デバッグ時の状態記録に用いる責務を負います。
"""
from dataclasses import dataclass, field
from typing import List, Optional

from retro_chip8.core.state import CpuState
from retro_chip8.transport.bus import BusAccessType, BusAccess


# @intent:responsibility デコードされた命令の詳細を記録します。
@dataclass(frozen=True)
class Operation:
    """
    デコードされた命令の詳細（HEX、ニーモニック、オペランド）を記録するデータクラス。
    """
    opcode_hex: str  # 例: "8014"
    mnemonic: str  # 例: "ADD"
    operands: List[str] = field(default_factory=list)  # 例: ["V0", "V1"]
    operand_bytes: List[int] = field(default_factory=list)  # 命令語の生バイト (上位, 下位)
    cycle_count: int = 1
    length: int = 2
    pattern: str = ""  # 命令パターン。例: "8XY4"。実行テーブルのキーになります。
    address: int = 0  # 命令語が置かれていたアドレス

    # @intent:responsibility 16ビットの命令語を返します。
    @property
    def opcode(self) -> int:
        return int(self.opcode_hex, 16)

    # @intent:responsibility ニーモニックとオペランドを連結した表示用文字列を返します。
    def text(self) -> str:
        if self.operands:
            return f"{self.mnemonic} " + ", ".join(self.operands)
        return self.mnemonic


# @intent:responsibility 実行に関するメタデータを記録します。
@dataclass(frozen=True)
class Metadata:
    """
    実行に関するメタデータ（累計サイクル数、シンボル情報など）を記録するデータクラス。
    """
    cycle_count: int
    symbol_info: Optional[str] = None  # 例: "main_loop: JP 0x0200"


# @intent:responsibility ある一時点におけるCPUとバスの完全な状態を不変に記録します。
@dataclass(frozen=True)
class Snapshot:
    """
    1サイクル実行後のCPU状態のコピー、実行した命令、バスアクティビティ、
    および表示内容が変化したかどうかを記録した不変のデータ構造。
    """
    state: CpuState
    operation: Operation
    metadata: Metadata
    bus_activity: List[BusAccess] = field(default_factory=list)
    display_changed: bool = False

    # @intent:responsibility 指定したアドレスへの書き込みがこのサイクルで発生したかを返します。
    def wrote_to(self, address: int) -> bool:
        return any(
            access.access_type == BusAccessType.WRITE and access.address == address
            for access in self.bus_activity
        )
