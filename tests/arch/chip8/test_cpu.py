# tests/arch/chip8/test_cpu.py
"""
chip8_tracer.arch.chip8.cpuモジュールの単体テスト。
Chip8Cpuの初期化、ROM配置、命令サイクル、タイマー、ホスト向けAPIを検証します。
"""
import random

import pytest

from chip8_tracer.common.errors import RomLoadError
from chip8_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_tracer.arch.chip8.state import Chip8CpuState
from chip8_tracer.arch.chip8.fonts import CHIP8_FONT_DATA, SCHIP_FONT_DATA
from chip8_tracer.arch.chip8.timers import CycleTimerScheduler, TimerScheduler
from chip8_tracer.core.snapshot import MemoryAccess, MemoryAccessType

# @intent:test_suite Chip8Cpuの基本機能（初期化、フェッチ、実行サイクル、タイマー）を検証します。

class ManualTimerScheduler(TimerScheduler):
    def __init__(self):
        self.pending = 0
        self.reset_count = 0

    def consume_ticks(self) -> int:
        ticks, self.pending = self.pending, 0
        return ticks

    def reset(self) -> None:
        self.reset_count += 1
        self.pending = 0

class TestChip8Cpu:
    @pytest.fixture
    def cpu(self):
        return Chip8Cpu(rng=random.Random(0), timer_scheduler=CycleTimerScheduler())

    # @intent:test_case_init 生成直後の状態（PC=0x200、レジスタ0、フォント配置済み）を検証します。
    def test_init(self, cpu):
        state = cpu.get_state()
        assert isinstance(state, Chip8CpuState)
        assert state.pc == 0x200
        assert state.v == [0] * 16
        assert state.i == 0
        assert state.delay_timer == 0
        assert state.sound_timer == 0
        assert cpu.cycle_count == 0
        assert len(cpu.memory.stack) == 0

    # @intent:test_case_fonts 標準フォントが0x050、拡張フォントが0x0A0に配置されることを検証します。
    def test_fonts_loaded(self, cpu):
        memory = cpu.memory
        loaded = [memory.peek(0x050 + i) >> 8 for i in range(len(CHIP8_FONT_DATA))]
        assert loaded == list(CHIP8_FONT_DATA)
        loaded = [memory.peek(0x0A0 + i) >> 8 for i in range(len(SCHIP_FONT_DATA))]
        assert loaded == list(SCHIP_FONT_DATA)
        assert memory.peek(0x050) >> 8 == 0xF0

    # @intent:test_case_load_rom ROMが0x200から配置され、同じ内容が読み出せることを検証します。
    def test_load_rom(self, cpu):
        rom = bytes([0x00, 0xE0, 0xA2, 0x2A, 0x60, 0x0C])
        cpu.load_rom(rom)
        for offset, byte in enumerate(rom):
            assert cpu.memory.peek(0x200 + offset) >> 8 == byte

    def test_load_rom_max_size(self, cpu):
        cpu.load_rom(bytes([0x12]) * (4096 - 0x200))
        assert cpu.memory.peek(0xFFF) == 0x1200

    def test_load_rom_too_large(self, cpu):
        with pytest.raises(RomLoadError):
            cpu.load_rom(bytes(4096 - 0x200 + 1))

    # @intent:test_case_step 1サイクルでPCが2進み、スナップショットに命令情報が記録されることを検証します。
    def test_step(self, cpu):
        cpu.load_rom(bytes([0x6A, 0x42]))
        snapshot = cpu.step()
        assert cpu.get_state().v[0xA] == 0x42
        assert cpu.get_state().pc == 0x202
        assert snapshot.operation.opcode_hex == "6A42"
        assert snapshot.operation.mnemonic == "LD"
        assert snapshot.operation.operands == ["VA", "#42"]
        assert snapshot.metadata.symbol_info == "LD VA, #42"
        assert snapshot.memory_activity == [MemoryAccess(0x200, 0x6A42, MemoryAccessType.READ)]

    # @intent:test_case_unknown_opcode 未定義の命令はPCを2進めるだけのNOPとして扱われることを検証します。
    @pytest.mark.parametrize("word", [0x8128, 0x810F, 0xE1FF, 0xF1FF])
    def test_unknown_opcode_is_noop(self, cpu, word):
        cpu.load_rom(word.to_bytes(2, "big"))
        cpu.get_state().v[1] = 0x11
        snapshot = cpu.step()
        state = cpu.get_state()
        assert state.pc == 0x202
        assert state.v[1] == 0x11
        assert state.i == 0
        assert snapshot.operation.mnemonic == "UNKNOWN"
        assert snapshot.operation.operands == [f"${word:04X}"]

    # @intent:test_case_tick_timers tickごとにDT/STが1ずつ減り、0で止まることを検証します（サイクル連動）。
    def test_tick_decrements_timers(self, cpu):
        cpu.load_rom(bytes([0x12, 0x00]))  # JP $200
        state = cpu.get_state()
        state.delay_timer = 2
        state.sound_timer = 1
        cpu.tick()
        assert (state.delay_timer, state.sound_timer) == (1, 0)
        cpu.tick()
        cpu.tick()
        assert (state.delay_timer, state.sound_timer) == (0, 0)

    # @intent:test_case_step_no_timer stepはタイマーを更新しないことを検証します。
    def test_step_does_not_touch_timers(self, cpu):
        cpu.load_rom(bytes([0x12, 0x00]))
        cpu.get_state().delay_timer = 5
        cpu.step()
        assert cpu.get_state().delay_timer == 5

    # @intent:test_case_update_timers 複数ティックがまとめて減算され、0で飽和することを検証します。
    def test_update_timers_multiple_ticks(self):
        scheduler = ManualTimerScheduler()
        cpu = Chip8Cpu(timer_scheduler=scheduler)
        state = cpu.get_state()
        state.delay_timer = 10
        state.sound_timer = 3
        scheduler.pending = 4
        cpu.update_timers()
        assert (state.delay_timer, state.sound_timer) == (6, 0)
        cpu.update_timers()
        assert state.delay_timer == 6

    def test_sync_timers_resets_scheduler(self):
        scheduler = ManualTimerScheduler()
        cpu = Chip8Cpu(timer_scheduler=scheduler)
        scheduler.pending = 9
        cpu.sync_timers()
        cpu.get_state().delay_timer = 10
        cpu.update_timers()
        assert cpu.get_state().delay_timer == 10

    def test_sound_active(self, cpu):
        assert not cpu.sound_active
        cpu.get_state().sound_timer = 2
        assert cpu.sound_active

    # @intent:test_case_reset resetでレジスタ、メモリ、スタック、画面が初期化され、フォントは再配置されることを検証します。
    def test_reset(self, cpu):
        cpu.load_rom(bytes([0x22, 0x04, 0x00, 0x00, 0x00, 0xE0]))
        cpu.step()
        cpu.framebuffer.set(0, 0, 1)
        state = cpu.get_state()
        state.v[3] = 7
        state.delay_timer = 4

        cpu.reset()
        state = cpu.get_state()
        assert state.pc == 0x200
        assert state.v[3] == 0
        assert state.delay_timer == 0
        assert cpu.cycle_count == 0
        assert len(cpu.memory.stack) == 0
        assert cpu.framebuffer.get(0, 0) == 0
        assert cpu.memory.peek(0x200) == 0x0000
        assert cpu.memory.peek(0x050) >> 8 == 0xF0

    # @intent:test_case_register_map レジスタマップがV0-VF、PC、I、SP、DT、STを含むことを検証します。
    def test_register_map(self, cpu):
        state = cpu.get_state()
        state.v[0xF] = 1
        state.i = 0x2F0
        cpu.memory.stack.push(0x202)
        registers = cpu.get_register_map()
        assert registers["VF"] == 1
        assert registers["I"] == 0x2F0
        assert registers["PC"] == 0x200
        assert registers["SP"] == 1
        assert set(registers) == {f"V{i:X}" for i in range(16)} | {"PC", "I", "SP", "DT", "ST"}

    def test_register_layout_covers_register_map(self, cpu):
        names = [reg.name for group in cpu.get_register_layout() for reg in group.registers]
        assert sorted(names) == sorted(cpu.get_register_map())

    def test_disassemble(self, cpu):
        cpu.load_rom(bytes([0xA2, 0xF0, 0xD0, 0x15]))
        assert cpu.disassemble(0x200, 4) == [
            (0x200, "A2 F0", "LD I, $2F0"),
            (0x202, "D0 15", "DRW V0, V1, 5"),
        ]
