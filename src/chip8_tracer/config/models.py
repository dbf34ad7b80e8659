from dataclasses import dataclass, field
from typing import Dict, List, Optional

from chip8_tracer.arch.chip8.constants import CYCLES_PER_SECOND, FRAME_RATE, STACK_CAPACITY

TIMER_MODES = ("realtime", "cycle")

# @intent:data_structure ホスト文字からキーパッドインデックスへの既定の対応。
#  1 2 3 C      1 2 3 4
#  4 5 6 D  <-  Q W E R
#  7 8 9 E      A S D F
#  A 0 B F      Z X C V
DEFAULT_KEYMAP: Dict[str, int] = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "q": 0x4, "w": 0x5, "e": 0x6, "r": 0xD,
    "a": 0x7, "s": 0x8, "d": 0x9, "f": 0xE,
    "z": 0xA, "x": 0x0, "c": 0xB, "v": 0xF,
}

@dataclass
class MachineConfig:
    cycles_per_second: int = CYCLES_PER_SECOND
    frame_rate: int = FRAME_RATE
    timer_mode: str = "realtime"  # "realtime", "cycle"
    stack_depth: int = STACK_CAPACITY
    seed: Optional[int] = None

    @property
    def cycles_per_frame(self) -> int:
        return max(1, self.cycles_per_second // self.frame_rate)

@dataclass
class DisplayConfig:
    scale: int = 10
    foreground: str = "#FFFFFF"
    background: str = "#000000"

@dataclass
class DebugConfig:
    breakpoints: List[int] = field(default_factory=list)

@dataclass
class SystemConfig:
    machine: MachineConfig = field(default_factory=MachineConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    keymap: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_KEYMAP))
    debug: DebugConfig = field(default_factory=DebugConfig)
    rom: Optional[str] = None
