"""
逆アセンブルコードを表示するウィジェット。
"""
from typing import List, Optional, Tuple

from PySide6.QtWidgets import QWidget, QVBoxLayout, QTableWidget, QTableWidgetItem, QHeaderView
from PySide6.QtGui import QColor, QFont, QFontDatabase
from PySide6.QtCore import Qt

from chip8_tracer.arch.chip8.cpu import Chip8Cpu

_HIGHLIGHT = QColor("#404000")
_NORMAL = QColor("#101010")

# @intent:responsibility 逆アセンブルされたコードを表形式で表示し、現在のPCをハイライトします。
class CodeView(QWidget):
    """
    PCが表示中の範囲にあればハイライトだけを移動し、範囲外であれば逆アセンブルし直します。
    """
    def __init__(self, parent=None, window_size: int = 512):
        super().__init__(parent)
        self.layout = QVBoxLayout(self)
        self.layout.setContentsMargins(0, 0, 0, 0)

        self.table = QTableWidget()
        self.table.setColumnCount(3)
        self.table.setHorizontalHeaderLabels(["Address", "Bytes", "Mnemonic"])
        header = self.table.horizontalHeader()
        header.setSectionResizeMode(0, QHeaderView.ResizeToContents)
        header.setSectionResizeMode(1, QHeaderView.ResizeToContents)
        header.setSectionResizeMode(2, QHeaderView.Stretch)

        font = QFont(QFontDatabase.systemFont(QFontDatabase.FixedFont).family(), 10)
        self.table.setFont(font)
        self.table.verticalHeader().setVisible(False)
        self.table.setEditTriggers(QTableWidget.NoEditTriggers)
        self.table.setSelectionBehavior(QTableWidget.SelectRows)
        self.table.setShowGrid(False)
        # キー入力はキーパッドに回す
        self.table.setFocusPolicy(Qt.NoFocus)
        self.table.setStyleSheet("background-color: #101010; color: #BBBBBB; gridline-color: #303030;")

        self.layout.addWidget(self.table)

        self._window_size = window_size
        self.disassembled_data: List[Tuple[int, str, str]] = []
        self.highlighted_row: Optional[int] = None

    def _row_of(self, pc: int) -> Optional[int]:
        for row, (addr, _, _) in enumerate(self.disassembled_data):
            if addr == pc:
                return row
        return None

    # @intent:responsibility 指定されたPC周辺のメモリを逆アセンブルして表示を更新します。
    def update_code(self, cpu: Chip8Cpu, pc: int):
        row_index = self._row_of(pc)

        if row_index is None:
            # PCと同じ偶奇で数命令手前から逆アセンブルする
            start_addr = pc - (min(32, pc) & ~1)
            self.disassembled_data = cpu.disassemble(start_addr, pc - start_addr + self._window_size)
            self.table.setRowCount(len(self.disassembled_data))
            for row, (addr, hex_dump, mnemonic) in enumerate(self.disassembled_data):
                self.table.setItem(row, 0, QTableWidgetItem(f"{addr:04X}"))
                self.table.setItem(row, 1, QTableWidgetItem(hex_dump))
                self.table.setItem(row, 2, QTableWidgetItem(mnemonic))
            row_index = self._row_of(pc)

        for row in range(self.table.rowCount()):
            color = _HIGHLIGHT if row == row_index else _NORMAL
            for col in range(3):
                self.table.item(row, col).setBackground(color)
        self.highlighted_row = row_index

        if row_index is not None:
            self.table.scrollToItem(self.table.item(row_index, 0), QTableWidget.EnsureVisible)
            # ハイライト行の数行先まで見えるようにする
            look_ahead = min(row_index + 5, self.table.rowCount() - 1)
            if look_ahead > row_index:
                self.table.scrollToItem(self.table.item(look_ahead, 0), QTableWidget.EnsureVisible)

    # @intent:responsibility ROMのロードなどでメモリ内容が変わった際にキャッシュを破棄します。
    def reset_cache(self):
        self.disassembled_data = []
        self.highlighted_row = None
        self.table.setRowCount(0)
