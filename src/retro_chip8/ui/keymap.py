# src/retro_chip8/ui/keymap.py
"""
キーボードイベントを CHIP-8 の論理キーパッドへ変換するモジュール。

既定の配置（左: PCキーボード、右: CHIP-8 キーパッド）::

    1 2 3 4        1 2 3 C
    Q W E R   ->   4 5 6 D
    A S D F        7 8 9 E
    Z X C V        A 0 B F
"""
from typing import Dict, List, Mapping, Tuple

from PySide6.QtCore import Qt

from retro_chip8.core.errors import ConfigError
from retro_chip8.devices.keypad import KEY_COUNT

DEFAULT_KEYMAP: Dict[str, int] = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "q": 0x4, "w": 0x5, "e": 0x6, "r": 0xD,
    "a": 0x7, "s": 0x8, "d": 0x9, "f": 0xE,
    "z": 0xA, "x": 0x0, "c": 0xB, "v": 0xF,
}


# @intent:responsibility キー名（"q", "1", "space" など）を Qt のキーコードに変換します。
def qt_key_for(name: str) -> int:
    key = getattr(Qt.Key, f"Key_{name.capitalize()}", None)
    if key is None:
        key = getattr(Qt.Key, f"Key_{name.upper()}", None)
    if key is None:
        raise ConfigError(f"Unknown key name: {name!r}")
    return int(key.value) if hasattr(key, "value") else int(key)


# @intent:responsibility キー押下/解放イベントを蓄積し、16キーのスナップショットを生成します。
class KeyTranslator:
    def __init__(self, keymap: Mapping[str, int] = None):
        names = dict(keymap) if keymap else dict(DEFAULT_KEYMAP)
        self._bindings: Dict[int, int] = {qt_key_for(name): code for name, code in names.items()}
        self._pressed: List[bool] = [False] * KEY_COUNT

    # @intent:return キーが割り当て済みで状態が更新された場合 True。
    def press(self, qt_key: int) -> bool:
        return self._set(qt_key, True)

    def release(self, qt_key: int) -> bool:
        return self._set(qt_key, False)

    def _set(self, qt_key: int, pressed: bool) -> bool:
        code = self._bindings.get(qt_key)
        if code is None:
            return False
        self._pressed[code] = pressed
        return True

    def release_all(self) -> None:
        self._pressed = [False] * KEY_COUNT

    # @intent:responsibility 現在の押下状態の不変コピーを返します。Keypad.update() にそのまま渡せます。
    def snapshot(self) -> Tuple[bool, ...]:
        return tuple(self._pressed)
