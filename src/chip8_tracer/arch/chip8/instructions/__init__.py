# chip8_tracer/arch/chip8/instructions/__init__.py
"""
CHIP-8命令セット実装パッケージ。
"""
from typing import TYPE_CHECKING, Optional

from chip8_tracer.core.snapshot import Operation
from chip8_tracer.arch.chip8.opcode import Opcode
from .maps import EXECUTE_MAP, SECONDARY_MAP, InstructionEntry

if TYPE_CHECKING:
    from chip8_tracer.arch.chip8.cpu import Chip8Cpu

# @intent:responsibility Opcodeに対応する命令エントリを一次・二次テーブルから解決します。
def lookup_instruction(op: Opcode) -> Optional[InstructionEntry]:
    entry = EXECUTE_MAP.get(op.instruction)
    if entry:
        return entry
    secondary = SECONDARY_MAP.get(op.instruction)
    if secondary:
        return secondary.table.get(secondary.key(op), secondary.default)
    return None

# @intent:responsibility デコードされた命令を実行します。該当する命令がなければ何もせずFalseを返します。
def execute_instruction(op: Opcode, cpu: "Chip8Cpu") -> bool:
    entry = lookup_instruction(op)
    if entry is None:
        return False
    entry.execute(cpu, op)
    return True

# @intent:responsibility Opcodeを表示用のOperationに変換します。
def describe_opcode(op: Opcode) -> Operation:
    entry = lookup_instruction(op)
    opcode_hex = f"{op.word:04X}"
    if entry is None:
        return Operation(opcode_hex, "UNKNOWN", [f"${op.word:04X}"])
    operands = []
    if entry.operands:
        operands = [part.strip() for part in entry.operands.format(**op._asdict()).split(",")]
    return Operation(opcode_hex, entry.mnemonic, operands)
