# chip8_tracer/arch/chip8/display.py
"""
モノクロのフレームバッファ。

CPUが描画命令で書き換え、ホストの描画層が描画ティックごとに読み出します。
座標は(row, col)の順で指定します。
"""
from typing import List

from chip8_tracer.arch.chip8.constants import DISPLAY_WIDTH, DISPLAY_HEIGHT

# @intent:responsibility 固定サイズの2値ピクセルグリッドを保持します。
class Framebuffer:
    def __init__(self, width: int = DISPLAY_WIDTH, height: int = DISPLAY_HEIGHT):
        self.width = width
        self.height = height
        self._pixels: List[List[int]] = [[0] * width for _ in range(height)]

    def _check(self, row: int, col: int) -> None:
        if not (0 <= row < self.height and 0 <= col < self.width):
            raise IndexError(f"Pixel ({row}, {col}) out of bounds for {self.width}x{self.height} display.")

    def get(self, row: int, col: int) -> int:
        self._check(row, col)
        return self._pixels[row][col]

    # @intent:responsibility ピクセルを設定します。0以外の値は全て点灯(1)として扱います。
    def set(self, row: int, col: int, value: int) -> None:
        self._check(row, col)
        self._pixels[row][col] = 1 if value else 0

    def clear(self) -> None:
        for row in self._pixels:
            row[:] = [0] * self.width

    # @intent:responsibility 描画層向けに全行のコピーを返します。
    def rows(self) -> List[List[int]]:
        return [list(row) for row in self._pixels]
