# src/retro_chip8/ui/register_view.py
"""
レジスタ表示パネル。
CPU が返すレイアウト定義（グループとビット幅）からラベルを組み立て、値を16進で表示します。
"""
from typing import Dict, Optional

from PySide6.QtGui import QFontDatabase
from PySide6.QtWidgets import QGridLayout, QGroupBox, QLabel, QVBoxLayout, QWidget

from retro_chip8.core.cpu import AbstractCpu


class RegisterView(QWidget):
    COLUMNS = 4

    def __init__(self, parent=None):
        super().__init__(parent)
        self._cpu: Optional[AbstractCpu] = None
        self._cells: Dict[str, QLabel] = {}
        self._digits: Dict[str, int] = {}
        self._mono = QFontDatabase.systemFont(QFontDatabase.FixedFont)
        self._root = QVBoxLayout(self)
        self._root.setContentsMargins(4, 4, 4, 4)

    # @intent:responsibility 表示対象の CPU を切り替え、パネルを作り直します。
    def set_cpu(self, cpu: AbstractCpu) -> None:
        self._cpu = cpu
        self._rebuild()
        self.refresh()

    def _clear(self) -> None:
        while self._root.count():
            widget = self._root.takeAt(0).widget()
            if widget is not None:
                widget.deleteLater()
        self._cells = {}
        self._digits = {}

    def _rebuild(self) -> None:
        self._clear()
        for group in self._cpu.get_register_layout():
            box = QGroupBox(group.group_name)
            grid = QGridLayout(box)
            grid.setHorizontalSpacing(12)
            for position, info in enumerate(group.registers):
                cell = QLabel()
                cell.setFont(self._mono)
                row, column = divmod(position, self.COLUMNS)
                grid.addWidget(cell, row, column)
                self._cells[info.name] = cell
                self._digits[info.name] = (info.width + 3) // 4
            self._root.addWidget(box)
        self._root.addStretch()

    # @intent:responsibility 現在のレジスタ値でラベルを更新します。
    def refresh(self) -> None:
        if self._cpu is None:
            return
        for name, value in self._cpu.get_register_map().items():
            cell = self._cells.get(name)
            if cell is not None:
                cell.setText(f"{name}: 0x{value:0{self._digits[name]}X}")

    def text_for(self, name: str) -> str:
        return self._cells[name].text()
