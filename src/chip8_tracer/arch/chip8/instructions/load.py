# chip8_tracer/arch/chip8/instructions/load.py
"""
インデックスレジスタ、タイマー、キー入力、メモリ転送命令の実装。
"""
from typing import TYPE_CHECKING

from chip8_tracer.arch.chip8.constants import (
    FONT_START,
    FONT_GLYPH_SIZE,
    EXTENDED_FONT_START,
    EXTENDED_FONT_GLYPH_SIZE,
)
from chip8_tracer.arch.chip8.opcode import Opcode
from chip8_tracer.arch.chip8.state import Chip8CpuState

if TYPE_CHECKING:
    from chip8_tracer.arch.chip8.cpu import Chip8Cpu

# --- 共通プリミティブ ---

# @intent:responsibility I += value。加算結果が0x0FFFを超えるとVF=1、そうでなければVF=0。
def add_to_index(state: Chip8CpuState, value: int) -> None:
    total = state.i + value
    state.vf = 1 if total > 0x0FFF else 0
    state.i = total & 0xFFFF

# @intent:responsibility 押下中のキーがあればそのインデックスをVregへ、なければPCを戻して同じ命令を再実行させます。
def wait_for_key(cpu: "Chip8Cpu", reg: int) -> None:
    state = cpu.get_state()
    key = cpu.keypad.first_pressed()
    if key is None:
        state.pc = (state.pc - 2) & 0xFFFF
    else:
        state.v[reg] = key

# @intent:responsibility valueの百・十・一の位をmemory[I], [I+1], [I+2]に書き込みます。
def store_bcd(cpu: "Chip8Cpu", value: int) -> None:
    state = cpu.get_state()
    value &= 0xFF
    cpu.memory.check_range(state.i, 3)
    cpu.memory.write(state.i, value // 100)
    cpu.memory.write(state.i + 1, (value // 10) % 10)
    cpu.memory.write(state.i + 2, value % 10)

# --- Annn LD I, nnn ---
def execute_ld_i(cpu: "Chip8Cpu", op: Opcode) -> None:
    cpu.get_state().i = op.nnn

# --- Fx07 / Fx15 / Fx18 ---
def execute_ld_vx_dt(cpu: "Chip8Cpu", op: Opcode) -> None:
    state = cpu.get_state()
    state.v[op.x] = state.delay_timer

def execute_ld_dt_vx(cpu: "Chip8Cpu", op: Opcode) -> None:
    state = cpu.get_state()
    state.delay_timer = state.v[op.x]

def execute_ld_st_vx(cpu: "Chip8Cpu", op: Opcode) -> None:
    state = cpu.get_state()
    state.sound_timer = state.v[op.x]

# --- Fx0A LD Vx, K ---
def execute_ld_vx_k(cpu: "Chip8Cpu", op: Opcode) -> None:
    wait_for_key(cpu, op.x)

# --- Fx1E ADD I, Vx ---
def execute_add_i_vx(cpu: "Chip8Cpu", op: Opcode) -> None:
    state = cpu.get_state()
    add_to_index(state, state.v[op.x])

# --- Fx29 LD F, Vx / Fx30 LD HF, Vx ---
def execute_ld_f_vx(cpu: "Chip8Cpu", op: Opcode) -> None:
    state = cpu.get_state()
    state.i = FONT_START + (state.v[op.x] & 0xF) * FONT_GLYPH_SIZE

def execute_ld_hf_vx(cpu: "Chip8Cpu", op: Opcode) -> None:
    state = cpu.get_state()
    state.i = EXTENDED_FONT_START + (state.v[op.x] & 0xF) * EXTENDED_FONT_GLYPH_SIZE

# --- Fx33 LD B, Vx ---
def execute_ld_b_vx(cpu: "Chip8Cpu", op: Opcode) -> None:
    store_bcd(cpu, cpu.get_state().v[op.x])

# --- Fx55 LD [I], Vx / Fx65 LD Vx, [I] ---
# Iは変更しない。範囲外を含む転送は何も変更せずに失敗する。
def execute_ld_mem_vx(cpu: "Chip8Cpu", op: Opcode) -> None:
    state = cpu.get_state()
    cpu.memory.check_range(state.i, op.x + 1)
    for reg in range(op.x + 1):
        cpu.memory.write(state.i + reg, state.v[reg])

def execute_ld_vx_mem(cpu: "Chip8Cpu", op: Opcode) -> None:
    state = cpu.get_state()
    cpu.memory.check_range(state.i, op.x + 1)
    for reg in range(op.x + 1):
        state.v[reg] = cpu.memory.fetch(state.i + reg) >> 8
