# tests/arch/chip8/test_instructions_display.py
"""
画面消去とスプライト描画命令の単体テスト。
"""
import pytest

from chip8_tracer.common.errors import MemoryOutOfRangeError
from chip8_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_tracer.arch.chip8.timers import CycleTimerScheduler

# @intent:test_suite XOR描画、衝突フラグ、クリッピング、原点の折り返しを検証します。

def run_opcode(cpu: Chip8Cpu, word: int):
    cpu.memory.load(cpu.get_state().pc, word.to_bytes(2, "big"))
    return cpu.step()

def lit_pixels(cpu: Chip8Cpu):
    return {
        (row, col)
        for row, line in enumerate(cpu.framebuffer.rows())
        for col, pixel in enumerate(line)
        if pixel
    }

class TestDisplayInstructions:
    @pytest.fixture
    def cpu(self):
        cpu = Chip8Cpu(timer_scheduler=CycleTimerScheduler())
        cpu.get_state().i = 0x300
        cpu.memory.load(0x300, [0x11, 0x88])
        return cpu

    def test_cls(self, cpu):
        cpu.framebuffer.set(5, 5, 1)
        run_opcode(cpu, 0x00E0)
        assert lit_pixels(cpu) == set()
        assert cpu.get_state().pc == 0x202

    # @intent:test_case_draw スプライトの各バイトがMSBから左に並んで描画されることを検証します。
    def test_draw(self, cpu):
        run_opcode(cpu, 0xD3D2)
        assert lit_pixels(cpu) == {(0, 3), (0, 7), (1, 0), (1, 4)}
        assert cpu.get_state().vf == 0

    # @intent:test_case_draw_collision 同じスプライトの再描画で全て消え、VF=1になることを検証します。
    def test_draw_twice_erases_and_sets_collision(self, cpu):
        run_opcode(cpu, 0xD3D2)
        run_opcode(cpu, 0xD3D2)
        assert lit_pixels(cpu) == set()
        assert cpu.get_state().vf == 1

    def test_draw_resets_flag_without_collision(self, cpu):
        cpu.get_state().vf = 1
        run_opcode(cpu, 0xD3D1)
        assert cpu.get_state().vf == 0

    # @intent:test_case_draw_origin_wrap 原点座標は画面サイズで折り返されることを検証します。
    def test_draw_origin_wraps(self, cpu):
        state = cpu.get_state()
        state.v[3] = 64 + 2
        state.v[0xD] = 32 + 1
        run_opcode(cpu, 0xD3D1)
        assert lit_pixels(cpu) == {(1, 5), (1, 9)}

    # @intent:test_case_draw_clip 右端・下端を越える部分は折り返さずに切り捨てられることを検証します。
    def test_draw_clips_at_edges(self, cpu):
        cpu.memory.load(0x300, [0xFF, 0xFF])
        state = cpu.get_state()
        state.v[3] = 60
        state.v[0xD] = 31
        run_opcode(cpu, 0xD3D2)
        assert lit_pixels(cpu) == {(31, 60), (31, 61), (31, 62), (31, 63)}

    def test_draw_zero_height(self, cpu):
        run_opcode(cpu, 0xD3D0)
        assert lit_pixels(cpu) == set()
        assert cpu.get_state().vf == 0

    # @intent:test_case_draw_out_of_range スプライトがアドレス空間を越える場合、画面とVFを変更せずに失敗することを検証します。
    def test_draw_sprite_past_memory_end(self, cpu):
        state = cpu.get_state()
        state.i = 0xFFF
        state.vf = 0x7
        cpu.memory.load(0xFFF, [0xFF])
        with pytest.raises(MemoryOutOfRangeError):
            run_opcode(cpu, 0xD3D2)
        assert lit_pixels(cpu) == set()
        assert state.vf == 0x7

        state.i = 0x1000
        with pytest.raises(MemoryOutOfRangeError):
            run_opcode(cpu, 0xD3D1)

    def test_draw_sprite_ending_at_last_address(self, cpu):
        state = cpu.get_state()
        state.i = 0xFFF
        cpu.memory.load(0xFFF, [0x80])
        run_opcode(cpu, 0xD3D1)
        assert lit_pixels(cpu) == {(0, 0)}
