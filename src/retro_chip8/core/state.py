# src/retro_chip8/core/state.py
"""
命令セットに依存しない最小限のレジスタ状態。
"""
from dataclasses import dataclass


# @intent:responsibility 全ての CPU が持つ PC と SP。命令セット固有のレジスタはサブクラスで追加します（arch/chip8/state.py）。
@dataclass
class CpuState:
    pc: int = 0
    sp: int = 0
