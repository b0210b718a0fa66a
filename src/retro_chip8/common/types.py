"""
レイヤー間で受け渡す小さな型。
"""
from typing import List, NamedTuple, Sequence

# @intent:data_structure 16キーの押下状態。インデックスが CHIP-8 のキーコード(0x0-0xF)です。
KeySnapshot = Sequence[bool]


# @intent:data_structure 表示用のレジスタ定義。width はビット幅で、16進表示の桁数を決めます。
class RegisterInfo(NamedTuple):
    name: str
    width: int


class RegisterLayoutInfo(NamedTuple):
    group_name: str
    registers: List[RegisterInfo]
