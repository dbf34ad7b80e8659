"""
フレームバッファ表示ウィジェット。
"""
from typing import Optional

from PySide6.QtWidgets import QWidget, QSizePolicy
from PySide6.QtGui import QPainter, QColor, QPaintEvent
from PySide6.QtCore import QSize

from chip8_tracer.arch.chip8.display import Framebuffer
from chip8_tracer.config.models import DisplayConfig

# @intent:responsibility Framebufferの内容を拡大して描画します。
class DisplayView(QWidget):
    def __init__(self, display_config: Optional[DisplayConfig] = None, parent=None):
        super().__init__(parent)
        self._framebuffer: Optional[Framebuffer] = None
        self.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Fixed)
        self.apply_config(display_config or DisplayConfig())

    # @intent:responsibility 拡大率と前景色・背景色を設定します。
    def apply_config(self, display_config: DisplayConfig) -> None:
        if display_config.scale <= 0:
            raise ValueError("Display scale must be positive")
        self._scale = display_config.scale
        self._foreground = QColor(display_config.foreground)
        self._background = QColor(display_config.background)
        self.resize(self.sizeHint())
        self.updateGeometry()
        self.update()

    def set_framebuffer(self, framebuffer: Framebuffer) -> None:
        self._framebuffer = framebuffer
        self.resize(self.sizeHint())
        self.updateGeometry()
        self.update()

    def sizeHint(self) -> QSize:
        if self._framebuffer is None:
            return QSize(64 * self._scale, 32 * self._scale)
        return QSize(self._framebuffer.width * self._scale, self._framebuffer.height * self._scale)

    def minimumSizeHint(self) -> QSize:
        return self.sizeHint()

    # @intent:responsibility 点灯ピクセルのみを前景色の矩形として描画します。
    def paintEvent(self, event: QPaintEvent):
        painter = QPainter(self)
        painter.fillRect(self.rect(), self._background)
        if self._framebuffer is not None:
            scale = self._scale
            for y, row in enumerate(self._framebuffer.rows()):
                for x, pixel in enumerate(row):
                    if pixel:
                        painter.fillRect(x * scale, y * scale, scale, scale, self._foreground)
        painter.end()
