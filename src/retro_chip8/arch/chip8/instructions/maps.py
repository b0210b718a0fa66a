# src/retro_chip8/arch/chip8/instructions/maps.py
"""
命令パターンと命令実装のマッピング定義。
"""
from typing import Optional

from . import alu
from . import control
from . import display
from . import keypad
from . import load

# @intent:map ファミリ8のサブオペコード(下位ニブル)から命令パターンへの対応。
_FAMILY_8 = {0x0: "8XY0", 0x1: "8XY1", 0x2: "8XY2", 0x3: "8XY3", 0x4: "8XY4",
             0x5: "8XY5", 0x6: "8XY6", 0x7: "8XY7", 0xE: "8XYE"}

# @intent:map ファミリE/Fのサブオペコード(下位バイト)から命令パターンへの対応。
_FAMILY_E = {0x9E: "EX9E", 0xA1: "EXA1"}
_FAMILY_F = {0x07: "FX07", 0x0A: "FX0A", 0x15: "FX15", 0x18: "FX18", 0x1E: "FX1E",
             0x29: "FX29", 0x33: "FX33", 0x55: "FX55", 0x65: "FX65"}

# @intent:map サブオペコードを持たないファミリの命令パターン。
_SIMPLE_FAMILIES = {0x1: "1NNN", 0x2: "2NNN", 0x3: "3XKK", 0x4: "4XKK", 0x5: "5XY0",
                    0x6: "6XKK", 0x7: "7XKK", 0x9: "9XY0", 0xA: "ANNN", 0xB: "BNNN",
                    0xC: "CXKK", 0xD: "DXYN"}


# @intent:responsibility 命令語を上位ニブル、続いてサブフィールドで分類し、命令パターンを返します。
# @intent:return 定義されていない命令語の場合 None。
def match_pattern(word: int) -> Optional[str]:
    family = word >> 12
    if family == 0x0:
        if word == 0x00E0:
            return "00E0"
        if word == 0x00EE:
            return "00EE"
        return "0NNN"
    if family == 0x8:
        return _FAMILY_8.get(word & 0xF)
    if family == 0xE:
        return _FAMILY_E.get(word & 0xFF)
    if family == 0xF:
        return _FAMILY_F.get(word & 0xFF)
    return _SIMPLE_FAMILIES.get(family)


# @intent:map 命令パターンからデコード関数へのマッピングテーブル。
DECODE_MAP = {
    # Control
    "0NNN": control.decode_sys,
    "00EE": control.decode_ret,
    "1NNN": control.decode_jp,
    "2NNN": control.decode_call,
    "3XKK": control.decode_se_byte,
    "4XKK": control.decode_sne_byte,
    "5XY0": control.decode_se_reg,
    "9XY0": control.decode_sne_reg,
    "BNNN": control.decode_jp_offset,

    # Load/Store
    "6XKK": load.decode_ld_byte,
    "8XY0": load.decode_ld_reg,
    "ANNN": load.decode_ld_i,
    "FX07": load.decode_ld_vx_dt,
    "FX15": load.decode_ld_dt_vx,
    "FX18": load.decode_ld_st_vx,
    "FX29": load.decode_ld_font,
    "FX33": load.decode_ld_bcd,
    "FX55": load.decode_store_regs,
    "FX65": load.decode_load_regs,

    # ALU
    "7XKK": alu.decode_add_byte,
    "8XY1": alu.decode_or,
    "8XY2": alu.decode_and,
    "8XY3": alu.decode_xor,
    "8XY4": alu.decode_add_reg,
    "8XY5": alu.decode_sub,
    "8XY6": alu.decode_shr,
    "8XY7": alu.decode_subn,
    "8XYE": alu.decode_shl,
    "CXKK": alu.decode_rnd,
    "FX1E": alu.decode_add_i,

    # Display
    "00E0": display.decode_cls,
    "DXYN": display.decode_drw,

    # Keypad
    "EX9E": keypad.decode_skp,
    "EXA1": keypad.decode_sknp,
    "FX0A": keypad.decode_wait_key,
}

# @intent:map 命令パターンから実行関数へのマッピングテーブル。
EXECUTE_MAP = {
    # Control
    "0NNN": control.execute_sys,
    "00EE": control.execute_ret,
    "1NNN": control.execute_jp,
    "2NNN": control.execute_call,
    "3XKK": control.execute_se_byte,
    "4XKK": control.execute_sne_byte,
    "5XY0": control.execute_se_reg,
    "9XY0": control.execute_sne_reg,
    "BNNN": control.execute_jp_offset,

    # Load/Store
    "6XKK": load.execute_ld_byte,
    "8XY0": load.execute_ld_reg,
    "ANNN": load.execute_ld_i,
    "FX07": load.execute_ld_vx_dt,
    "FX15": load.execute_ld_dt_vx,
    "FX18": load.execute_ld_st_vx,
    "FX29": load.execute_ld_font,
    "FX33": load.execute_ld_bcd,
    "FX55": load.execute_store_regs,
    "FX65": load.execute_load_regs,

    # ALU
    "7XKK": alu.execute_add_byte,
    "8XY1": alu.execute_or,
    "8XY2": alu.execute_and,
    "8XY3": alu.execute_xor,
    "8XY4": alu.execute_add_reg,
    "8XY5": alu.execute_sub,
    "8XY6": alu.execute_shr,
    "8XY7": alu.execute_subn,
    "8XYE": alu.execute_shl,
    "CXKK": alu.execute_rnd,
    "FX1E": alu.execute_add_i,

    # Display
    "00E0": display.execute_cls,
    "DXYN": display.execute_drw,

    # Keypad
    "EX9E": keypad.execute_skp,
    "EXA1": keypad.execute_sknp,
    "FX0A": keypad.execute_wait_key,
}
