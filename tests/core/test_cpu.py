# tests/core/test_cpu.py
"""
chip8_tracer.core.cpuモジュールの単体テスト。
最小限の具象CPUを定義し、AbstractCpuの命令サイクル（Template Method）を検証します。
"""
from typing import Dict, List, Tuple

import pytest

from chip8_tracer.core.state import CpuState
from chip8_tracer.core.cpu import AbstractCpu
from chip8_tracer.core.snapshot import Operation, MemoryAccess, MemoryAccessType
from chip8_tracer.transport.memory import Memory
from chip8_tracer.common.types import RegisterLayoutInfo, RegisterInfo

# @intent:test_suite 抽象CPUの状態管理と命令サイクルの基本動作を検証します。

class StubCpu(AbstractCpu):
    """
    0x0000はNOP、それ以外は0x0300番地に上位バイトを書き込むだけのテスト用CPU。
    """
    def _create_initial_state(self) -> CpuState:
        return CpuState(pc=0x0200)

    def _fetch(self) -> int:
        return self._memory.fetch(self._state.pc)

    def _decode(self, word: int) -> int:
        return word

    def _execute(self, decoded: int) -> None:
        if decoded:
            self._memory.write(0x0300, decoded >> 8)

    def _describe(self, decoded: int) -> Operation:
        if decoded:
            return Operation(opcode_hex=f"{decoded:04X}", mnemonic="STORE", operands=["$300", f"#{decoded >> 8:02X}"])
        return Operation(opcode_hex="0000", mnemonic="NOP")

    def get_register_map(self) -> Dict[str, int]:
        return {"PC": self._state.pc}

    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return [RegisterLayoutInfo("Test Group", [RegisterInfo("PC", 16)])]

    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        return [(start_addr, "00 00", "NOP")]

class TestCpuState:
    def test_cpu_state_init_default(self):
        assert CpuState().pc == 0x0000

    def test_cpu_state_init_custom(self):
        assert CpuState(pc=0x1234).pc == 0x1234

class TestAbstractCpu:
    @pytest.fixture
    def setup_cpu(self):
        memory = Memory()
        cpu = StubCpu(memory)
        return cpu, memory

    def test_abstract_cpu_cannot_be_instantiated(self):
        with pytest.raises(TypeError):
            AbstractCpu(Memory())

    # @intent:test_case_step_advances_pc stepがPCを2進め、サイクル数を1増やすことを検証します。
    def test_step_advances_pc(self, setup_cpu):
        cpu, _ = setup_cpu
        snapshot = cpu.step()
        assert cpu.get_state().pc == 0x0202
        assert cpu.cycle_count == 1
        assert snapshot.state.pc == 0x0202
        assert snapshot.metadata.cycle_count == 1
        assert snapshot.metadata.symbol_info == "NOP"

    # @intent:test_case_snapshot_activity スナップショットにそのサイクルのメモリアクセスのみが含まれることを検証します。
    def test_snapshot_memory_activity(self, setup_cpu):
        cpu, memory = setup_cpu
        memory.write(0x0200, 0xAB)  # 前サイクル以前のログとして残る
        snapshot = cpu.step()
        assert snapshot.memory_activity == [
            MemoryAccess(0x0200, 0xAB00, MemoryAccessType.READ),
            MemoryAccess(0x0300, 0xAB, MemoryAccessType.WRITE),
        ]
        assert snapshot.operation.mnemonic == "STORE"
        assert snapshot.metadata.symbol_info == "STORE $300, #AB"

    # @intent:test_case_snapshot_isolation スナップショットの状態が以降の実行で変化しないことを検証します。
    def test_snapshot_state_is_a_copy(self, setup_cpu):
        cpu, _ = setup_cpu
        first = cpu.step()
        cpu.step()
        assert first.state.pc == 0x0202
        assert cpu.get_state().pc == 0x0204

    def test_reset(self, setup_cpu):
        cpu, _ = setup_cpu
        cpu.step()
        cpu.reset()
        assert cpu.get_state().pc == 0x0200
        assert cpu.cycle_count == 0
