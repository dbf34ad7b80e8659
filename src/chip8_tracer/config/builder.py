import random
from typing import Optional

from chip8_tracer.transport.memory import Memory
from chip8_tracer.arch.chip8.constants import MEMORY_SIZE
from chip8_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_tracer.arch.chip8.timers import TimerScheduler, CycleTimerScheduler, RealtimeTimerScheduler
from chip8_tracer.debugger.debugger import Debugger, BreakpointCondition, BreakpointConditionType
from chip8_tracer.loader.loader import RomLoader
from .models import SystemConfig, MachineConfig

# @intent:responsibility システム構成（Config）に基づいて、Memory、CPU、乱数源、タイマースケジューラを生成・接続します。
class SystemBuilder:
    def build_system(self, config: SystemConfig, rom_loader: Optional[RomLoader] = None) -> Chip8Cpu:
        machine = config.machine
        cpu = Chip8Cpu(
            memory=Memory(MEMORY_SIZE, machine.stack_depth),
            rng=random.Random(machine.seed),
            timer_scheduler=self._create_timer_scheduler(machine),
        )

        if config.rom:
            (rom_loader or RomLoader()).load_into(config.rom, cpu)

        return cpu

    # @intent:responsibility CPUに接続したDebuggerを生成し、設定されたPCブレークポイントを登録します。
    def build_debugger(self, config: SystemConfig, cpu: Chip8Cpu) -> Debugger:
        debugger = Debugger(cpu)
        for address in config.debug.breakpoints:
            debugger.add_breakpoint(
                BreakpointCondition(BreakpointConditionType.PC_MATCH, value=address)
            )
        return debugger

    def _create_timer_scheduler(self, machine: MachineConfig) -> TimerScheduler:
        if machine.timer_mode == "cycle":
            return CycleTimerScheduler()
        return RealtimeTimerScheduler()
