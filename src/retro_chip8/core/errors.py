# src/retro_chip8/core/errors.py
"""
実行エンジンの例外階層。

致命的なエラー（未定義命令、スタック異常、メモリ範囲外アクセス）を構造化された例外として表現し、
中断するか継続するかの判断を呼び出し側に委ねます。
"""
from typing import Optional


# @intent:responsibility 本パッケージが送出する全ての例外の基底クラス。
class Chip8Error(Exception):
    pass


# @intent:responsibility 4096バイトのアドレス空間外へのアクセスを表します。
# @intent:rationale 既存の IndexError ハンドリングがそのまま機能するよう IndexError も継承します。
class MemoryAccessError(Chip8Error, IndexError):
    def __init__(self, address: int, message: Optional[str] = None):
        self.address = address
        super().__init__(message or f"Address {address:#06x} is outside the CHIP-8 address space.")


# @intent:responsibility 命令の実行中に発生したエラー。命令語とそのアドレスを保持します。
class InstructionError(Chip8Error):
    def __init__(self, opcode: int, pc: int, message: str):
        self.opcode = opcode
        self.pc = pc
        super().__init__(f"{message} (opcode {opcode:#06x} at PC {pc:#05x})")


class IllegalInstructionError(InstructionError):
    """
    デコードできない命令語。ファミリ 8/E/F の未定義サブオペコード、
    または strict モードでのファミリ 0 の未知命令で送出されます。
    """
    def __init__(self, opcode: int, pc: int):
        super().__init__(opcode, pc, "Invalid instruction")


class StackUnderflowError(InstructionError):
    def __init__(self, opcode: int, pc: int):
        super().__init__(opcode, pc, "Return with empty call stack")


class StackOverflowError(InstructionError):
    def __init__(self, opcode: int, pc: int, depth: int):
        self.depth = depth
        super().__init__(opcode, pc, f"Call stack exceeded {depth} entries")


# @intent:responsibility キーパッドの有効範囲(0x0-0xF)外のキーコードを表します。
class InvalidKeyError(Chip8Error, IndexError):
    def __init__(self, key: int):
        self.key = key
        super().__init__(f"Key code {key:#04x} is outside the keypad range 0x0-0xF.")


# @intent:responsibility プログラム領域(0x200-0xFFF)に収まらないプログラムを表します。
class ProgramTooLargeError(Chip8Error, ValueError):
    def __init__(self, size: int, capacity: int):
        self.size = size
        self.capacity = capacity
        super().__init__(f"Program is {size} bytes; at most {capacity} bytes fit in memory.")


# @intent:responsibility 設定ファイルの不正な値を表します。
class ConfigError(Chip8Error, ValueError):
    pass
