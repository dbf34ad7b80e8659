# chip8_tracer/loader/loader.py
"""
ROMローダーモジュール。
ヘッダーを持たない生のバイト列（.ch8）を読み込み、プログラム領域へ配置します。
"""
import logging
import os

from chip8_tracer.common.errors import RomLoadError
from chip8_tracer.arch.chip8.constants import MAX_ROM_SIZE
from chip8_tracer.arch.chip8.cpu import Chip8Cpu

logger = logging.getLogger(__name__)

class RomLoader:
    """
    ROMファイルを読み込むローダー。
    失敗はRomLoadErrorとして報告され、その読み込みのみが失敗します。
    """
    def load_file(self, file_path: str) -> bytes:
        try:
            with open(file_path, 'rb') as f:
                data = f.read()
        except OSError as e:
            raise RomLoadError(f"Cannot read ROM file {file_path}: {e}") from e

        if not data:
            raise RomLoadError(f"ROM file {file_path} is empty")
        if len(data) > MAX_ROM_SIZE:
            raise RomLoadError(
                f"ROM file {file_path} is {len(data)} bytes; at most {MAX_ROM_SIZE} bytes fit in program space"
            )
        return data

    # @intent:responsibility ROMを読み込み、CPUをリセットしてからプログラム領域に配置します。
    def load_into(self, file_path: str, cpu: Chip8Cpu) -> int:
        data = self.load_file(file_path)
        cpu.reset()
        cpu.load_rom(data)
        logger.info("Loaded ROM %s", os.path.basename(file_path))
        return len(data)
