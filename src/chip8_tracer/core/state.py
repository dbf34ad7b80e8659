"""
アーキテクチャに依存しないレジスタ状態の基底定義。
"""
from dataclasses import dataclass

# @intent:responsibility 全てのCPUが共通に持つプログラムカウンタのみを保持します。
@dataclass
class CpuState:
    pc: int = 0x0000
