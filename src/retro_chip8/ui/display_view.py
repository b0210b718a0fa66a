# src/retro_chip8/ui/display_view.py
"""
フレームバッファを拡大表示するウィジェット。
"""
from typing import Optional, Tuple

from PySide6.QtWidgets import QWidget
from PySide6.QtCore import Qt, QRect, QSize
from PySide6.QtGui import QPainter, QColor, QPaintEvent

from retro_chip8.devices.display import Framebuffer

# @intent:responsibility 64x32 の論理画面を scale 倍の矩形で描画します。
class DisplayView(QWidget):
    def __init__(self, framebuffer: Framebuffer, scale: int = 10,
                 foreground: Tuple[int, int, int] = (255, 255, 255),
                 background: Tuple[int, int, int] = (0, 0, 0), parent=None):
        super().__init__(parent)
        self._framebuffer = framebuffer
        self._scale = scale
        self._foreground = QColor(*foreground)
        self._background = QColor(*background)
        self._frame: Optional[tuple] = None
        self.setFixedSize(self.sizeHint())
        self.setFocusPolicy(Qt.NoFocus)

    def sizeHint(self) -> QSize:
        return QSize(self._framebuffer.width * self._scale, self._framebuffer.height * self._scale)

    # @intent:responsibility フレームバッファの現在の内容を取り込み、再描画を要求します。
    def refresh(self) -> None:
        self._frame = self._framebuffer.snapshot()
        self.update()

    def paintEvent(self, event: QPaintEvent):
        painter = QPainter(self)
        painter.fillRect(self.rect(), self._background)
        frame = self._frame or self._framebuffer.snapshot()
        scale = self._scale
        for y, row in enumerate(frame):
            for x, lit in enumerate(row):
                if lit:
                    painter.fillRect(QRect(x * scale, y * scale, scale, scale), self._foreground)
        painter.end()
