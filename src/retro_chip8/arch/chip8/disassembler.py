# src/retro_chip8/arch/chip8/disassembler.py
"""
CHIP-8 Disassembler

メモリ上のバイナリデータを解析し、CHIP-8のアセンブリ言語（ニーモニック）に変換します。
Instruction Layerのデコードロジックを再利用し、バスアクセスログを汚さないよう peek で読み込みます。
"""
from typing import List, Optional, Tuple

from retro_chip8.config.models import QuirkConfig
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.instructions import decode_opcode
from retro_chip8.core.errors import MemoryAccessError

# @intent:responsibility 指定されたメモリ範囲を逆アセンブルし、表示用データを生成します。
def disassemble(bus: Bus, start_addr: int, length: int, quirks: Optional[QuirkConfig] = None) -> List[Tuple[int, str, str]]:
    """
    指定された範囲のメモリを2バイト単位で逆アセンブルします。
    未定義の命令語は "DW 0xNNNN" として表示します。

    Returns:
        List of (address, hex_bytes, mnemonic) tuples.
    """
    result = []
    current_addr = start_addr
    end_addr = start_addr + length

    while current_addr + 1 < end_addr:
        try:
            word = (bus.peek(current_addr) << 8) | bus.peek(current_addr + 1)
        except MemoryAccessError:
            break

        operation = decode_opcode(word, current_addr, quirks)
        hex_bytes = " ".join(f"{b:02X}" for b in operation.operand_bytes)
        if operation.mnemonic == "UNKNOWN":
            text = f"DW 0x{word:04X}"
        else:
            text = operation.text()

        result.append((current_addr, hex_bytes, text))
        current_addr += operation.length

    return result
