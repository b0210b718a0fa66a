# retro_chip8/loader/loader.py
"""
プログラムローダーモジュール。
生バイナリ形式の CHIP-8 ROM をプログラム領域(0x200-)にロードします。
"""
import logging
from typing import Union

from retro_chip8.core.errors import ProgramTooLargeError
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import MEMORY_SIZE, PROGRAM_START

logger = logging.getLogger(__name__)

PROGRAM_CAPACITY = MEMORY_SIZE - PROGRAM_START  # 3584 bytes


class RomLoader:
    """
    CHIP-8 ROM イメージをバスにロードするローダー。
    容量(3584バイト)を超えるプログラムは切り詰めずに拒否します。
    """
    def load_file(self, file_path: str, bus: Bus) -> int:
        with open(file_path, 'rb') as f:
            data = f.read()
        size = self.load_bytes(data, bus)
        logger.info("Loaded %s (%d bytes) at %#05x", file_path, size, PROGRAM_START)
        return size

    # @intent:responsibility バイト列をプログラム領域にコピーし、ロードしたバイト数を返します。
    # @intent:pre-condition data は PROGRAM_CAPACITY バイト以下である必要があります。
    def load_bytes(self, data: Union[bytes, bytearray], bus: Bus) -> int:
        if len(data) > PROGRAM_CAPACITY:
            raise ProgramTooLargeError(len(data), PROGRAM_CAPACITY)
        bus.load_block(PROGRAM_START, bytes(data))
        return len(data)

    # @intent:responsibility プログラム領域を0で埋めます。別のROMをロードする前に使用します。
    def clear_program_area(self, bus: Bus) -> None:
        bus.load_block(PROGRAM_START, bytes(PROGRAM_CAPACITY))
