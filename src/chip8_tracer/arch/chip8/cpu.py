# chip8_tracer/arch/chip8/cpu.py
"""
CHIP-8 CPUエミュレーションの中心モジュール。
"""
import logging
import random
from typing import Dict, List, Optional, Tuple

from chip8_tracer.common.errors import RomLoadError
from chip8_tracer.common.types import RegisterLayoutInfo, RegisterInfo
from chip8_tracer.core.cpu import AbstractCpu
from chip8_tracer.core.snapshot import Operation, Snapshot
from chip8_tracer.transport.memory import Memory
from chip8_tracer.arch.chip8.constants import (
    FONT_START,
    EXTENDED_FONT_START,
    MAX_ROM_SIZE,
    MEMORY_SIZE,
    PROGRAM_START,
    STACK_CAPACITY,
)
from chip8_tracer.arch.chip8.display import Framebuffer
from chip8_tracer.arch.chip8.fonts import CHIP8_FONT_DATA, SCHIP_FONT_DATA
from chip8_tracer.arch.chip8.keypad import Keypad
from chip8_tracer.arch.chip8.opcode import Opcode, decode_opcode
from chip8_tracer.arch.chip8.state import Chip8CpuState
from chip8_tracer.arch.chip8.timers import TimerScheduler, RealtimeTimerScheduler
from chip8_tracer.arch.chip8.instructions import execute_instruction, describe_opcode
from chip8_tracer.arch.chip8 import disassembler

logger = logging.getLogger(__name__)

# @intent:responsibility CHIP-8 CPUの具体的なエミュレーションロジック（フェッチ、デコード、実行）を提供します。
class Chip8Cpu(AbstractCpu):
    """
    CHIP-8 CPUをエミュレートするクラス。

    レジスタ・メモリ・スタックはCPUが排他的に所有します。
    FramebufferとKeypadはホストと参照で共有されますが、
    ホストが触れるのはサイクルの合間に限られます。
    """
    def __init__(
        self,
        memory: Optional[Memory] = None,
        framebuffer: Optional[Framebuffer] = None,
        keypad: Optional[Keypad] = None,
        rng: Optional[random.Random] = None,
        timer_scheduler: Optional[TimerScheduler] = None,
    ):
        super().__init__(memory or Memory(MEMORY_SIZE, STACK_CAPACITY))
        self.framebuffer = framebuffer or Framebuffer()
        self.keypad = keypad or Keypad()
        # @intent:rationale 乱数源はプロセス生存期間中に1つだけ保持し、呼び出しごとに再シードしない。
        self.rng = rng or random.Random()
        self.timer_scheduler = timer_scheduler or RealtimeTimerScheduler()
        self._initialize_memory()

    # @intent:responsibility メモリをゼロクリアし、標準フォントと拡張フォントを配置します。
    def _initialize_memory(self) -> None:
        self._memory.clear()
        self._memory.load(FONT_START, CHIP8_FONT_DATA)
        self._memory.load(EXTENDED_FONT_START, SCHIP_FONT_DATA)

    def _create_initial_state(self) -> Chip8CpuState:
        return Chip8CpuState()

    # @intent:responsibility レジスタ、タイマー、メモリ、スタック、画面を生成直後の状態に戻します。
    def reset(self) -> None:
        super().reset()
        self._initialize_memory()
        self.framebuffer.clear()
        self.timer_scheduler.reset()

    # @intent:responsibility プログラム領域(0x200-)にROMイメージをそのままコピーします。
    # @intent:pre-condition dataの長さは4096 - 0x200バイト以下である必要があります。
    def load_rom(self, data: bytes) -> None:
        if len(data) > MAX_ROM_SIZE:
            raise RomLoadError(f"ROM of {len(data)} bytes exceeds the {MAX_ROM_SIZE} bytes of program space.")
        self._memory.load(PROGRAM_START, data)
        logger.info("Loaded %d bytes of ROM at %#05x", len(data), PROGRAM_START)

    def get_state(self) -> Chip8CpuState:
        return self._state

    def _fetch(self) -> int:
        return self._memory.fetch(self._state.pc)

    def _decode(self, word: int) -> Opcode:
        return decode_opcode(word)

    def _execute(self, op: Opcode) -> None:
        if not execute_instruction(op, self):
            # 未定義の命令はNOPとして扱う
            logger.debug("Unmapped opcode %04X at %#05x", op.word, (self._state.pc - 2) & 0xFFFF)

    def _describe(self, op: Opcode) -> Operation:
        return describe_opcode(op)

    # @intent:responsibility 1サイクル実行した後、タイマーを更新します。
    def tick(self) -> Snapshot:
        snapshot = self.step()
        self.update_timers()
        return snapshot

    # @intent:responsibility スケジューラが報告したティック数だけDT/STを減算します（0で飽和）。
    def update_timers(self) -> None:
        ticks = self.timer_scheduler.consume_ticks()
        if ticks <= 0:
            return
        state = self._state
        state.delay_timer = max(0, state.delay_timer - ticks)
        state.sound_timer = max(0, state.sound_timer - ticks)

    # @intent:responsibility 一時停止中に経過した実時間をタイマーに反映させないようにします。
    def sync_timers(self) -> None:
        self.timer_scheduler.reset()

    # 外部のオーディオ層が参照する唯一の信号
    @property
    def sound_active(self) -> bool:
        return self._state.sound_timer > 0

    # @intent:responsibility UI表示用に、現在のレジスタ値を辞書形式で提供します。
    def get_register_map(self) -> Dict[str, int]:
        s = self._state
        registers = {f"V{index:X}": value for index, value in enumerate(s.v)}
        registers.update({
            "PC": s.pc, "I": s.i, "SP": len(self._memory.stack),
            "DT": s.delay_timer, "ST": s.sound_timer,
        })
        return registers

    # @intent:responsibility UIのレジスタ表示レイアウト（グループ化）を定義します。
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return [
            RegisterLayoutInfo("V0-V7", [RegisterInfo(f"V{index:X}", 8) for index in range(0x0, 0x8)]),
            RegisterLayoutInfo("V8-VF", [RegisterInfo(f"V{index:X}", 8) for index in range(0x8, 0x10)]),
            RegisterLayoutInfo("Pointers", [
                RegisterInfo("PC", 16), RegisterInfo("I", 16), RegisterInfo("SP", 8)
            ]),
            RegisterLayoutInfo("Timers", [
                RegisterInfo("DT", 8), RegisterInfo("ST", 8)
            ]),
        ]

    # @intent:responsibility 指定範囲のメモリを逆アセンブルします。
    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        return disassembler.disassemble(self._memory, start_addr, length)
