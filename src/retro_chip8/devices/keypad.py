# src/retro_chip8/devices/keypad.py
"""
16キーの論理キーパッド。

外部の入力変換器が完全なスナップショットを書き込み、実行エンジンは読み取りのみを行います。
"""
from typing import Optional, Tuple

from retro_chip8.common.types import KeySnapshot
from retro_chip8.core.errors import InvalidKeyError

KEY_COUNT = 16


# @intent:responsibility キー押下状態を不変タプルとして保持し、スナップショット単位で置き換えます。
# @intent:rationale 実行エンジンが更新途中の配列を観測しないよう、書き込みは常に全16キーの置き換えとします。
class Keypad:
    def __init__(self):
        self._state: Tuple[bool, ...] = (False,) * KEY_COUNT

    # @intent:responsibility 16要素のスナップショットで現在の押下状態を置き換えます。
    # @intent:pre-condition snapshotはちょうど16要素である必要があります。
    def update(self, snapshot: KeySnapshot) -> None:
        state = tuple(bool(pressed) for pressed in snapshot)
        if len(state) != KEY_COUNT:
            raise ValueError(f"Key snapshot must have {KEY_COUNT} entries, got {len(state)}.")
        self._state = state

    def release_all(self) -> None:
        self._state = (False,) * KEY_COUNT

    def is_pressed(self, key: int) -> bool:
        if not 0 <= key < KEY_COUNT:
            raise InvalidKeyError(key)
        return self._state[key]

    # @intent:responsibility 押下中のキーのうち最小のキーコードを返します。押下がなければ None。
    def first_pressed(self) -> Optional[int]:
        for key, pressed in enumerate(self._state):
            if pressed:
                return key
        return None

    def snapshot(self) -> Tuple[bool, ...]:
        return self._state
