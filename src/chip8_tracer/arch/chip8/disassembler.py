# chip8_tracer/arch/chip8/disassembler.py
"""
CHIP-8 Disassembler

メモリ上のバイナリデータを解析し、CHIP-8のニーモニックに変換します。
命令テーブルの表示定義を再利用し、アクセスログを汚さないようにpeekで読み出します。
"""
from typing import List, Tuple

from chip8_tracer.transport.memory import Memory
from chip8_tracer.arch.chip8.opcode import decode_opcode
from chip8_tracer.arch.chip8.instructions import describe_opcode

# @intent:responsibility 指定されたメモリ範囲を逆アセンブルし、表示用データを生成します。
def disassemble(memory: Memory, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
    """
    指定された範囲のメモリを2バイトずつ逆アセンブルします。

    Returns:
        List of (address, hex_bytes, mnemonic) tuples.
    """
    result = []
    end_addr = min(start_addr + length, memory.get_size())
    current_addr = start_addr

    while current_addr < end_addr:
        word = memory.peek(current_addr)
        operation = describe_opcode(decode_opcode(word))

        hex_bytes = f"{word >> 8:02X} {word & 0xFF:02X}"
        mnemonic_str = operation.mnemonic
        if operation.operands:
            mnemonic_str += " " + ", ".join(operation.operands)

        result.append((current_addr, hex_bytes, mnemonic_str))
        current_addr += operation.length

    return result
