# chip8_tracer/arch/chip8/opcode.py
"""
命令ワードのデコーダ。

16bitの命令ワードを固定ビットマスクでオペランドフィールドに分解します。
状態を持たず、失敗することもありません。
"""
from typing import NamedTuple

from chip8_tracer.arch.chip8.constants import (
    INSTRUCTION_BITMASK,
    X_BITMASK,
    Y_BITMASK,
    N_BITMASK,
    NN_BITMASK,
    NNN_BITMASK,
)

# @intent:data_structure 1命令分のデコード結果。1サイクルを超えて保持されることはない。
class Opcode(NamedTuple):
    word: int
    instruction: int  # 上位ニブル (0x0000-0xF000)
    x: int
    y: int
    n: int
    nn: int
    nnn: int

# @intent:responsibility 命令ワードをOpcodeに分解します。
def decode_opcode(word: int) -> Opcode:
    return Opcode(
        word=word & 0xFFFF,
        instruction=word & INSTRUCTION_BITMASK,
        x=(word & X_BITMASK) >> 8,
        y=(word & Y_BITMASK) >> 4,
        n=word & N_BITMASK,
        nn=word & NN_BITMASK,
        nnn=word & NNN_BITMASK,
    )
