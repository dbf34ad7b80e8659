# chip8_tracer/arch/chip8/instructions/control.py
"""
制御命令（ジャンプ、サブルーチン、条件スキップ）の実装。
"""
from typing import TYPE_CHECKING

from chip8_tracer.arch.chip8.opcode import Opcode
from chip8_tracer.arch.chip8.state import Chip8CpuState

if TYPE_CHECKING:
    from chip8_tracer.arch.chip8.cpu import Chip8Cpu

# --- 共通プリミティブ ---

# @intent:responsibility PCをaddress + offsetに設定します。
def jump(state: Chip8CpuState, address: int, offset: int = 0) -> None:
    state.pc = (address + offset) & 0xFFFF

# @intent:responsibility 条件が真であれば次の命令を読み飛ばします。
def skip_if(state: Chip8CpuState, condition: bool) -> None:
    if condition:
        state.pc = (state.pc + 2) & 0xFFFF

# --- 00EE RET ---
def execute_ret(cpu: "Chip8Cpu", op: Opcode) -> None:
    cpu.get_state().pc = cpu.memory.stack.pop()

# --- 0nnn SYS ---
# @intent:rationale 00E0/00EE以外の0nnnは、ネイティブルーチン呼び出しではなくnnnへのジャンプとして扱います。
def execute_sys(cpu: "Chip8Cpu", op: Opcode) -> None:
    jump(cpu.get_state(), op.nnn)

# --- 1nnn JP ---
def execute_jp(cpu: "Chip8Cpu", op: Opcode) -> None:
    jump(cpu.get_state(), op.nnn)

# --- 2nnn CALL ---
# @intent:responsibility フェッチ後のPC（次の命令）をスタックに積んでからジャンプします。
def execute_call(cpu: "Chip8Cpu", op: Opcode) -> None:
    state = cpu.get_state()
    cpu.memory.stack.push(state.pc)
    jump(state, op.nnn)

# --- Bnnn JP V0, nnn ---
def execute_jp_v0(cpu: "Chip8Cpu", op: Opcode) -> None:
    state = cpu.get_state()
    jump(state, op.nnn, state.v[0x0])

# --- 3xnn / 4xnn / 5xy0 / 9xy0 ---
def execute_se_vx_nn(cpu: "Chip8Cpu", op: Opcode) -> None:
    state = cpu.get_state()
    skip_if(state, state.v[op.x] == op.nn)

def execute_sne_vx_nn(cpu: "Chip8Cpu", op: Opcode) -> None:
    state = cpu.get_state()
    skip_if(state, state.v[op.x] != op.nn)

def execute_se_vx_vy(cpu: "Chip8Cpu", op: Opcode) -> None:
    state = cpu.get_state()
    skip_if(state, state.v[op.x] == state.v[op.y])

def execute_sne_vx_vy(cpu: "Chip8Cpu", op: Opcode) -> None:
    state = cpu.get_state()
    skip_if(state, state.v[op.x] != state.v[op.y])

# --- Ex9E SKP / ExA1 SKNP ---
def execute_skp(cpu: "Chip8Cpu", op: Opcode) -> None:
    state = cpu.get_state()
    skip_if(state, cpu.keypad.is_pressed(state.v[op.x] & 0xF))

def execute_sknp(cpu: "Chip8Cpu", op: Opcode) -> None:
    state = cpu.get_state()
    skip_if(state, not cpu.keypad.is_pressed(state.v[op.x] & 0xF))
