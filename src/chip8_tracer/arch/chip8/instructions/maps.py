# chip8_tracer/arch/chip8/instructions/maps.py
"""
命令クラス（上位ニブル）と命令実装のマッピング定義。

0x0/0x8/0xE/0xFの各ファミリーは、それぞれnnn/n/nn/nnをキーとする二次テーブルで解決します。
オペランド書式はOpcodeのフィールド名（x, y, n, nn, nnn）で展開されます。
"""
from typing import Callable, Dict, NamedTuple, Optional

from chip8_tracer.arch.chip8.opcode import Opcode
from . import alu
from . import control
from . import graphics
from . import load

# @intent:data_structure 1命令分の実行関数と表示用のニーモニック定義。
class InstructionEntry(NamedTuple):
    execute: Callable
    mnemonic: str
    operands: str = ""

# @intent:data_structure 二次テーブルの解決方法（キー算出関数、テーブル、該当なし時の既定エントリ）。
class SecondaryDispatch(NamedTuple):
    key: Callable[[Opcode], int]
    table: Dict[int, InstructionEntry]
    default: Optional[InstructionEntry] = None

# @intent:map 0x0nnn ファミリー（nnnで解決）。
SYSTEM_MAP = {
    0x0E0: InstructionEntry(graphics.execute_cls, "CLS"),
    0x0EE: InstructionEntry(control.execute_ret, "RET"),
}
SYS_ENTRY = InstructionEntry(control.execute_sys, "SYS", "${nnn:03X}")

# @intent:map 0x8xyn ファミリー（nで解決）。
ALU_MAP = {
    0x0: InstructionEntry(alu.execute_ld_vx_vy, "LD", "V{x:X}, V{y:X}"),
    0x1: InstructionEntry(alu.execute_or, "OR", "V{x:X}, V{y:X}"),
    0x2: InstructionEntry(alu.execute_and, "AND", "V{x:X}, V{y:X}"),
    0x3: InstructionEntry(alu.execute_xor, "XOR", "V{x:X}, V{y:X}"),
    0x4: InstructionEntry(alu.execute_add_vx_vy, "ADD", "V{x:X}, V{y:X}"),
    0x5: InstructionEntry(alu.execute_sub, "SUB", "V{x:X}, V{y:X}"),
    0x6: InstructionEntry(alu.execute_shr, "SHR", "V{x:X}"),
    0x7: InstructionEntry(alu.execute_subn, "SUBN", "V{x:X}, V{y:X}"),
    0xE: InstructionEntry(alu.execute_shl, "SHL", "V{x:X}"),
}

# @intent:map 0xExnn ファミリー（nnで解決）。
KEY_MAP = {
    0x9E: InstructionEntry(control.execute_skp, "SKP", "V{x:X}"),
    0xA1: InstructionEntry(control.execute_sknp, "SKNP", "V{x:X}"),
}

# @intent:map 0xFxnn ファミリー（nnで解決）。
MISC_MAP = {
    0x07: InstructionEntry(load.execute_ld_vx_dt, "LD", "V{x:X}, DT"),
    0x0A: InstructionEntry(load.execute_ld_vx_k, "LD", "V{x:X}, K"),
    0x15: InstructionEntry(load.execute_ld_dt_vx, "LD", "DT, V{x:X}"),
    0x18: InstructionEntry(load.execute_ld_st_vx, "LD", "ST, V{x:X}"),
    0x1E: InstructionEntry(load.execute_add_i_vx, "ADD", "I, V{x:X}"),
    0x29: InstructionEntry(load.execute_ld_f_vx, "LD", "F, V{x:X}"),
    0x30: InstructionEntry(load.execute_ld_hf_vx, "LD", "HF, V{x:X}"),
    0x33: InstructionEntry(load.execute_ld_b_vx, "LD", "B, V{x:X}"),
    0x55: InstructionEntry(load.execute_ld_mem_vx, "LD", "[I], V{x:X}"),
    0x65: InstructionEntry(load.execute_ld_vx_mem, "LD", "V{x:X}, [I]"),
}

# @intent:map 命令クラスから実行エントリへのマッピングテーブル。
EXECUTE_MAP = {
    0x1000: InstructionEntry(control.execute_jp, "JP", "${nnn:03X}"),
    0x2000: InstructionEntry(control.execute_call, "CALL", "${nnn:03X}"),
    0x3000: InstructionEntry(control.execute_se_vx_nn, "SE", "V{x:X}, #{nn:02X}"),
    0x4000: InstructionEntry(control.execute_sne_vx_nn, "SNE", "V{x:X}, #{nn:02X}"),
    0x5000: InstructionEntry(control.execute_se_vx_vy, "SE", "V{x:X}, V{y:X}"),
    0x6000: InstructionEntry(alu.execute_ld_vx_nn, "LD", "V{x:X}, #{nn:02X}"),
    0x7000: InstructionEntry(alu.execute_add_vx_nn, "ADD", "V{x:X}, #{nn:02X}"),
    0x9000: InstructionEntry(control.execute_sne_vx_vy, "SNE", "V{x:X}, V{y:X}"),
    0xA000: InstructionEntry(load.execute_ld_i, "LD", "I, ${nnn:03X}"),
    0xB000: InstructionEntry(control.execute_jp_v0, "JP", "V0, ${nnn:03X}"),
    0xC000: InstructionEntry(alu.execute_rnd, "RND", "V{x:X}, #{nn:02X}"),
    0xD000: InstructionEntry(graphics.execute_drw, "DRW", "V{x:X}, V{y:X}, {n}"),
}

# @intent:map 二次テーブルを持つ命令クラス。
SECONDARY_MAP = {
    0x0000: SecondaryDispatch(lambda op: op.nnn, SYSTEM_MAP, SYS_ENTRY),
    0x8000: SecondaryDispatch(lambda op: op.n, ALU_MAP),
    0xE000: SecondaryDispatch(lambda op: op.nn, KEY_MAP),
    0xF000: SecondaryDispatch(lambda op: op.nn, MISC_MAP),
}
