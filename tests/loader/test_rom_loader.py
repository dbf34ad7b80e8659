# tests/loader/test_rom_loader.py
"""
chip8_tracer.loader.loaderモジュールの単体テスト。
"""
import pytest

from chip8_tracer.common.errors import Chip8Error, RomLoadError
from chip8_tracer.loader.loader import RomLoader
from chip8_tracer.arch.chip8.cpu import Chip8Cpu

# @intent:test_suite ROMファイルの読み込みとプログラム領域への配置を検証します。

class TestRomLoader:
    @pytest.fixture
    def loader(self):
        return RomLoader()

    def test_load_file(self, loader, tmp_path):
        path = tmp_path / "rom.ch8"
        path.write_bytes(b"\x00\xe0\x12\x00")
        assert loader.load_file(str(path)) == b"\x00\xe0\x12\x00"

    # @intent:test_case_missing 存在しないファイルがRomLoadErrorとして報告されることを検証します。
    def test_missing_file(self, loader, tmp_path):
        with pytest.raises(RomLoadError) as excinfo:
            loader.load_file(str(tmp_path / "missing.ch8"))
        assert isinstance(excinfo.value.__cause__, OSError)
        assert isinstance(excinfo.value, Chip8Error)

    def test_empty_file(self, loader, tmp_path):
        path = tmp_path / "empty.ch8"
        path.write_bytes(b"")
        with pytest.raises(RomLoadError):
            loader.load_file(str(path))

    # @intent:test_case_oversized プログラム領域に収まらないROMが拒否されることを検証します。
    def test_oversized_file(self, loader, tmp_path):
        path = tmp_path / "big.ch8"
        path.write_bytes(bytes(4096 - 0x200 + 1))
        with pytest.raises(RomLoadError):
            loader.load_file(str(path))

    # @intent:test_case_load_into CPUがリセットされてからROMが配置されることを検証します。
    def test_load_into_resets_cpu(self, loader, tmp_path):
        path = tmp_path / "rom.ch8"
        path.write_bytes(b"\xa2\xf0")
        cpu = Chip8Cpu()
        cpu.memory.write(0x300, 0x55)
        cpu.get_state().v[1] = 9

        size = loader.load_into(str(path), cpu)
        assert size == 2
        assert cpu.memory.peek(0x200) == 0xA2F0
        assert cpu.memory.peek(0x300) == 0x0000
        assert cpu.get_state().v[1] == 0
        assert cpu.get_state().pc == 0x200

    def test_failed_load_leaves_cpu_untouched(self, loader, tmp_path):
        cpu = Chip8Cpu()
        cpu.memory.write(0x300, 0x55)
        with pytest.raises(RomLoadError):
            loader.load_into(str(tmp_path / "missing.ch8"), cpu)
        assert cpu.memory.peek(0x300) == 0x5500
