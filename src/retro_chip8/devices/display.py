# src/retro_chip8/devices/display.py
"""
64x32 モノクロフレームバッファ。

クリア命令(00E0)とスプライト描画命令(Dxyn)によってのみ変更され、
レンダラには読み取り専用のビューを提供します。
"""
from typing import List, Tuple

DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32


# @intent:responsibility 論理ピクセルの点灯状態を保持し、XOR描画とクリアを提供します。
class Framebuffer:
    """
    CHIP-8 の論理画面。物理的なスケーリングやウィンドウ表示とは切り離されています。
    """
    def __init__(self, width: int = DISPLAY_WIDTH, height: int = DISPLAY_HEIGHT):
        self.width = width
        self.height = height
        self._pixels: List[List[bool]] = [[False] * width for _ in range(height)]
        self._changed = False

    def _check_bounds(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) is outside the {self.width}x{self.height} display.")

    # @intent:responsibility 全ピクセルを消灯します。点灯ピクセルがなければ変更扱いにしません。
    def clear(self) -> None:
        for row in self._pixels:
            if any(row):
                self._changed = True
                for x in range(self.width):
                    row[x] = False

    # @intent:responsibility ピクセルを反転し、点灯していたピクセルを消した場合(衝突)に True を返します。
    def toggle(self, x: int, y: int) -> bool:
        self._check_bounds(x, y)
        was_lit = self._pixels[y][x]
        self._pixels[y][x] = not was_lit
        self._changed = True
        return was_lit

    def pixel(self, x: int, y: int) -> bool:
        self._check_bounds(x, y)
        return self._pixels[y][x]

    # @intent:responsibility 行ごとの不変コピーを返します。レンダラはこれを描画に使用します。
    def snapshot(self) -> Tuple[Tuple[bool, ...], ...]:
        return tuple(tuple(row) for row in self._pixels)

    def lit_count(self) -> int:
        return sum(sum(1 for lit in row if lit) for row in self._pixels)

    # @intent:responsibility 前回の呼び出し以降に表示内容が変化したかを返し、フラグをリセットします。
    def consume_changed(self) -> bool:
        changed = self._changed
        self._changed = False
        return changed

    # @intent:responsibility テキスト表示用。点灯ピクセルを '#'、消灯を '.' で表します。
    def render_text(self, on: str = "#", off: str = ".") -> str:
        return "\n".join("".join(on if lit else off for lit in row) for row in self._pixels)
