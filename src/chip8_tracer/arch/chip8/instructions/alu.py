# chip8_tracer/arch/chip8/instructions/alu.py
"""
算術・論理命令の実装。

フラグを定義する命令はVFを加算せずに上書きします。
シフト命令はVyを参照せず、Vxのみを対象とします。
"""
from typing import TYPE_CHECKING

from chip8_tracer.arch.chip8.opcode import Opcode
from chip8_tracer.arch.chip8.state import Chip8CpuState

if TYPE_CHECKING:
    from chip8_tracer.arch.chip8.cpu import Chip8Cpu

# --- 共通プリミティブ ---

# @intent:responsibility Vreg += value (8bitラップ)。with_flagの場合のみVFにキャリーを設定します。
def add(state: Chip8CpuState, reg: int, value: int, with_flag: bool) -> None:
    total = state.v[reg] + value
    state.v[reg] = total & 0xFF
    if with_flag:
        state.vf = 1 if total > 0xFF else 0

# @intent:responsibility Vreg = minuend - subtrahend。minuend > subtrahendのときVF=1。
def subtract(state: Chip8CpuState, reg: int, minuend: int, subtrahend: int) -> None:
    state.vf = 1 if minuend > subtrahend else 0
    state.v[reg] = (minuend - subtrahend) & 0xFF

def shift_right(state: Chip8CpuState, reg: int) -> None:
    value = state.v[reg]
    state.vf = value & 0x01
    state.v[reg] = value >> 1

def shift_left(state: Chip8CpuState, reg: int) -> None:
    value = state.v[reg]
    state.vf = (value >> 7) & 0x01
    state.v[reg] = (value << 1) & 0xFF

# --- 6xnn LD Vx, nn ---
def execute_ld_vx_nn(cpu: "Chip8Cpu", op: Opcode) -> None:
    cpu.get_state().v[op.x] = op.nn

# --- 7xnn ADD Vx, nn (VF不変) ---
def execute_add_vx_nn(cpu: "Chip8Cpu", op: Opcode) -> None:
    add(cpu.get_state(), op.x, op.nn, with_flag=False)

# --- 8xy0-8xyE ---
def execute_ld_vx_vy(cpu: "Chip8Cpu", op: Opcode) -> None:
    state = cpu.get_state()
    state.v[op.x] = state.v[op.y]

def execute_or(cpu: "Chip8Cpu", op: Opcode) -> None:
    state = cpu.get_state()
    state.v[op.x] |= state.v[op.y]

def execute_and(cpu: "Chip8Cpu", op: Opcode) -> None:
    state = cpu.get_state()
    state.v[op.x] &= state.v[op.y]

def execute_xor(cpu: "Chip8Cpu", op: Opcode) -> None:
    state = cpu.get_state()
    state.v[op.x] ^= state.v[op.y]

def execute_add_vx_vy(cpu: "Chip8Cpu", op: Opcode) -> None:
    state = cpu.get_state()
    add(state, op.x, state.v[op.y], with_flag=True)

def execute_sub(cpu: "Chip8Cpu", op: Opcode) -> None:
    state = cpu.get_state()
    subtract(state, op.x, state.v[op.x], state.v[op.y])

def execute_subn(cpu: "Chip8Cpu", op: Opcode) -> None:
    state = cpu.get_state()
    subtract(state, op.x, state.v[op.y], state.v[op.x])

def execute_shr(cpu: "Chip8Cpu", op: Opcode) -> None:
    shift_right(cpu.get_state(), op.x)

def execute_shl(cpu: "Chip8Cpu", op: Opcode) -> None:
    shift_left(cpu.get_state(), op.x)

# --- Cxnn RND Vx, nn ---
# @intent:responsibility CPUが保持する単一の乱数源から0-255を引き、nnでマスクします。
def execute_rnd(cpu: "Chip8Cpu", op: Opcode) -> None:
    cpu.get_state().v[op.x] = cpu.rng.randint(0, 0xFF) & op.nn
