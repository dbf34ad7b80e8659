# chip8_tracer/arch/chip8/state.py
"""
CHIP-8 CPU固有の状態定義。
"""
from dataclasses import dataclass, field
from typing import List

from chip8_tracer.core.state import CpuState
from chip8_tracer.arch.chip8.constants import PROGRAM_START, REGISTER_COUNT, FLAG_REGISTER

# @intent:responsibility CHIP-8の全てのレジスタ（V0-VF, I, PC）とタイマーの状態を保持します。
@dataclass
class Chip8CpuState(CpuState):
    """
    CHIP-8 CPUのレジスタ状態を保持するデータクラス。
    VFはフラグ出力専用であり、フラグを定義する命令によって上書きされます。
    """
    pc: int = PROGRAM_START
    v: List[int] = field(default_factory=lambda: [0] * REGISTER_COUNT)
    i: int = 0x0000          # Index Register
    delay_timer: int = 0x00
    sound_timer: int = 0x00

    # @intent:accessor フラグレジスタVFへのアクセスを提供します。
    @property
    def vf(self) -> int:
        return self.v[FLAG_REGISTER]

    @vf.setter
    def vf(self, value: int) -> None:
        self.v[FLAG_REGISTER] = value & 0xFF
