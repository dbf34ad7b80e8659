"""
ブレークポイント付きの実行制御。

CPUをtick単位で進め、各サイクルのSnapshotを条件と照合して停止を判断します。
PC一致は命令の実行前、それ以外の条件は実行後に評価されます。
"""
import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, List, Optional

from chip8_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_tracer.arch.chip8.state import Chip8CpuState
from chip8_tracer.core.snapshot import Snapshot, MemoryAccessType

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 1024

class BreakpointConditionType(Enum):
    PC_MATCH = "PC_MATCH"               # 次に実行する命令のアドレス
    MEMORY_READ = "MEMORY_READ"         # fetchの先頭アドレス
    MEMORY_WRITE = "MEMORY_WRITE"
    REGISTER_VALUE = "REGISTER_VALUE"
    REGISTER_CHANGE = "REGISTER_CHANGE" # 直前のサイクルからの変化

# @intent:data_structure 1つの停止条件。同値のものは同じブレークポイントとして扱います。
@dataclass(frozen=True)
class BreakpointCondition:
    """
    valueはPC_MATCHのアドレスまたはREGISTER_VALUEの比較値、
    addressはMEMORY_READ/MEMORY_WRITEの対象アドレスです。
    register_nameはget_register_map()のキー（"V3", "I", "DT"など）で指定します。
    """
    condition_type: BreakpointConditionType
    value: Optional[int] = None
    address: Optional[int] = None
    register_name: Optional[str] = None
    enabled: bool = True

# @intent:responsibility レジスタ名からレジスタ値を取り出します。
def _register_value(state: Chip8CpuState, name: str) -> Optional[int]:
    upper = name.upper()
    if len(upper) == 2 and upper[0] == "V":
        try:
            return state.v[int(upper[1], 16)]
        except ValueError:
            return None
    return {
        "PC": state.pc, "I": state.i, "DT": state.delay_timer, "ST": state.sound_timer,
    }.get(upper)

class Debugger:
    """
    1ステップはCPUのtick（1サイクル実行とタイマー更新）に対応します。
    実行中の例外は捕捉せず、そのまま呼び出し元へ伝播します。
    """
    def __init__(self, cpu: Chip8Cpu, history_limit: int = HISTORY_LIMIT):
        self._cpu = cpu
        self._breakpoints: List[BreakpointCondition] = []
        self._running: bool = False
        self._previous_state: Chip8CpuState = cpu.get_state()
        self._last_snapshot: Optional[Snapshot] = None
        self._history: Deque[Snapshot] = deque(maxlen=history_limit)
        # 直前にPC_MATCHで停止したアドレス。再開時はこのアドレスのブレークポイントを1度だけ通過させる。
        self._break_pc: Optional[int] = None

    def add_breakpoint(self, condition: BreakpointCondition) -> None:
        if condition not in self._breakpoints:
            self._breakpoints.append(condition)

    def update_breakpoint(self, old_condition: BreakpointCondition, new_condition: BreakpointCondition) -> None:
        if old_condition in self._breakpoints:
            idx = self._breakpoints.index(old_condition)
            self._breakpoints[idx] = new_condition

    def remove_breakpoint(self, condition: BreakpointCondition) -> None:
        if condition in self._breakpoints:
            self._breakpoints.remove(condition)

    def get_breakpoints(self) -> List[BreakpointCondition]:
        return list(self._breakpoints)

    def get_history(self) -> List[Snapshot]:
        return list(self._history)

    def get_last_snapshot(self) -> Optional[Snapshot]:
        return self._last_snapshot

    @property
    def is_running(self) -> bool:
        return self._running

    def _pc_breakpoint_hit(self, pc: int) -> bool:
        return any(
            bp.enabled and bp.condition_type == BreakpointConditionType.PC_MATCH and bp.value == pc
            for bp in self._breakpoints
        )

    def _check_other_breakpoints(self, snapshot: Snapshot) -> bool:
        current_state = snapshot.state

        for bp in self._breakpoints:
            if not bp.enabled:
                continue

            if bp.condition_type == BreakpointConditionType.MEMORY_READ:
                for access in snapshot.memory_activity:
                    if access.access_type == MemoryAccessType.READ and access.address == bp.address:
                        return True
            elif bp.condition_type == BreakpointConditionType.MEMORY_WRITE:
                for access in snapshot.memory_activity:
                    if access.access_type == MemoryAccessType.WRITE and access.address == bp.address:
                        return True
            elif bp.condition_type == BreakpointConditionType.REGISTER_VALUE:
                if bp.register_name and _register_value(current_state, bp.register_name) == bp.value:
                    return True
            elif bp.condition_type == BreakpointConditionType.REGISTER_CHANGE:
                if bp.register_name:
                    current = _register_value(current_state, bp.register_name)
                    previous = _register_value(self._previous_state, bp.register_name)
                    if current is not None and current != previous:
                        return True
        return False

    def step_instruction(self) -> Snapshot:
        """
        CPUを1サイクル分実行し、その結果のSnapshotを返します。
        """
        self._previous_state = _copy_state(self._cpu)
        snapshot = self._cpu.tick()
        self._last_snapshot = snapshot
        self._history.append(snapshot)
        return snapshot

    # @intent:responsibility ブレークポイントにヒットするか、max_stepsに達するか、stop()されるまで実行します。
    # @intent:return ブレークポイントで停止した場合True。
    def run(self, max_steps: Optional[int] = None) -> bool:
        self._running = True
        steps = 0

        resume_pc = self._break_pc
        self._break_pc = None
        try:
            while self._running and (max_steps is None or steps < max_steps):
                current_pc = self._cpu.get_state().pc
                if not (steps == 0 and current_pc == resume_pc) and self._pc_breakpoint_hit(current_pc):
                    self._break_pc = current_pc
                    logger.info("Breakpoint hit at PC: %#06x", current_pc)
                    return True

                snapshot = self.step_instruction()
                steps += 1

                if self._check_other_breakpoints(snapshot):
                    logger.info("Breakpoint hit at PC: %#06x", snapshot.state.pc)
                    return True
            return False
        finally:
            self._running = False

    def stop(self) -> None:
        self._running = False

def _copy_state(cpu: Chip8Cpu) -> Chip8CpuState:
    state = cpu.get_state()
    return Chip8CpuState(
        pc=state.pc, v=list(state.v), i=state.i,
        delay_timer=state.delay_timer, sound_timer=state.sound_timer,
    )
