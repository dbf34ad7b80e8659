# chip8_tracer/core/snapshot.py
"""
実行状態の不変スナップショット

このモジュールは、1サイクル実行後のCPUとメモリアクセスを記録した不変のデータ構造を定義します。
UIへの情報提供と、デバッガでの条件判定に用いる責務を負います。
"""
from dataclasses import dataclass, field
from typing import List, Optional

from chip8_tracer.core.state import CpuState
from chip8_tracer.transport.memory import MemoryAccess, MemoryAccessType

__all__ = ["Operation", "Metadata", "Snapshot", "MemoryAccess", "MemoryAccessType"]

# @intent:responsibility 実行された命令の表示用情報を記録します。
@dataclass(frozen=True)
class Operation:
    """
    実行された命令の詳細（HEX、ニーモニック、オペランド）を記録するデータクラス。
    """
    opcode_hex: str # 例: "A2F0"
    mnemonic: str # 例: "LD"
    operands: List[str] = field(default_factory=list) # 例: ["I", "$2F0"]
    length: int = 2 # 命令のバイト長

# @intent:responsibility 実行に関するメタデータを記録します。
@dataclass(frozen=True)
class Metadata:
    """
    累計サイクル数と表示用の命令文字列を記録するデータクラス。
    """
    cycle_count: int
    symbol_info: Optional[str] = None # 例: "DRW V0, V1, 5"

# @intent:responsibility ある一時点におけるCPUの状態とそのサイクルのメモリアクセスを不変に記録します。
@dataclass(frozen=True)
class Snapshot:
    """
    stateはCPUが保持する状態のコピーであり、以降の実行で変化しません。
    """
    state: CpuState
    operation: Operation
    metadata: Metadata
    memory_activity: List[MemoryAccess] = field(default_factory=list)
