# src/retro_chip8/transport/bus.py
"""
アドレス空間とアクセス記録。

CHIP-8 の 4KB アドレス空間をデバイス単位の領域に分割し、CPU からの
読み書きを担当デバイスへ振り分けます。CPU 経由のアクセスは全て記録され、
1サイクル分の記録が Snapshot に添付されます。
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import List, NamedTuple, Optional

from retro_chip8.core.errors import MemoryAccessError


class BusAccessType(Enum):
    READ = "READ"
    WRITE = "WRITE"


# @intent:responsibility CPU が行った1バイト分のアクセスを記録します。
@dataclass(frozen=True)
class BusAccess:
    address: int
    data: int
    access_type: BusAccessType
    previous_data: Optional[int] = None  # 書き込みの場合のみ、上書きされた値


# @intent:responsibility バスに割り当てられる記憶装置のインターフェース。オフセットは領域の先頭からの相対値です。
class Device(ABC):
    @property
    @abstractmethod
    def size(self) -> int:
        ...

    @abstractmethod
    def read(self, offset: int) -> int:
        ...

    @abstractmethod
    def write(self, offset: int, value: int) -> None:
        ...


# @intent:responsibility バイト単位で読み書きできる固定長メモリ。
class RAM(Device):
    def __init__(self, size: int):
        if not isinstance(size, int) or size <= 0:
            raise ValueError("RAM size must be a positive integer.")
        self._cells = bytearray(size)

    @property
    def size(self) -> int:
        return len(self._cells)

    def _check(self, offset: int) -> None:
        if offset < 0 or offset >= len(self._cells):
            raise MemoryAccessError(offset, f"Offset {offset:#06x} is beyond the {len(self._cells)}-byte RAM.")

    def read(self, offset: int) -> int:
        self._check(offset)
        return self._cells[offset]

    def write(self, offset: int, value: int) -> None:
        self._check(offset)
        if value < 0 or value > 0xFF:
            raise ValueError(f"Value {value} does not fit in a byte.")
        self._cells[offset] = value


class Region(NamedTuple):
    base: int
    end: int  # 領域に含まれる最後のアドレス
    device: Device

    def contains(self, address: int) -> bool:
        return self.base <= address <= self.end


# @intent:responsibility 領域表に従ってアクセスを振り分け、CPU 経由のアクセスを記録します。
# @intent:rationale peek/load 系はローダー、フォント初期化、逆アセンブラなど CPU 外からの利用に限り、記録を残しません。
class Bus:
    def __init__(self):
        self._regions: List[Region] = []
        self._activity: List[BusAccess] = []

    # @intent:responsibility base から device.size バイトの領域にデバイスを割り当てます。既存領域との重なりは拒否します。
    def attach(self, base: int, device: Device) -> Region:
        if not isinstance(device, Device):
            raise TypeError(f"{type(device).__name__} is not a Device.")
        if base < 0:
            raise ValueError(f"Base address {base:#x} must not be negative.")
        region = Region(base, base + device.size - 1, device)
        for other in self._regions:
            if region.base <= other.end and other.base <= region.end:
                raise ValueError(
                    f"Region {region.base:#06x}-{region.end:#06x} overlaps {other.base:#06x}-{other.end:#06x}."
                )
        self._regions.append(region)
        return region

    def regions(self) -> List[Region]:
        return list(self._regions)

    def _resolve(self, address: int):
        for region in self._regions:
            if region.contains(address):
                return region.device, address - region.base
        raise MemoryAccessError(address, f"Address {address:#06x} not mapped to any device.")

    # @intent:responsibility これまでのアクセス記録を返し、記録を空にします。CPU はサイクルの開始と終了で呼び出します。
    def drain_activity(self) -> List[BusAccess]:
        activity, self._activity = self._activity, []
        return activity

    def read(self, address: int) -> int:
        device, offset = self._resolve(address)
        value = device.read(offset)
        self._activity.append(BusAccess(address, value, BusAccessType.READ))
        return value

    def write(self, address: int, value: int) -> None:
        device, offset = self._resolve(address)
        previous = device.read(offset)
        device.write(offset, value)
        self._activity.append(BusAccess(address, value, BusAccessType.WRITE, previous))

    def peek(self, address: int) -> int:
        device, offset = self._resolve(address)
        return device.read(offset)

    def load(self, address: int, value: int) -> None:
        device, offset = self._resolve(address)
        device.write(offset, value)

    def load_block(self, address: int, data: bytes) -> None:
        for index, value in enumerate(data):
            self.load(address + index, value)

    def dump(self, address: int, length: int) -> bytes:
        return bytes(self.peek(address + index) for index in range(length))
