"""
命令サイクルの骨組み。

フェッチからスナップショット生成までの順序はここで固定し、
ワードの解釈と命令の効果はアーキテクチャ側のサブクラスが埋めます。
"""
import copy
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Tuple

from chip8_tracer.transport.memory import Memory
from chip8_tracer.core.snapshot import Snapshot, Operation, Metadata
from chip8_tracer.core.state import CpuState
from chip8_tracer.common.types import RegisterLayoutInfo

class AbstractCpu(ABC):
    # @intent:pre-condition `memory`は有効なMemoryオブジェクトである必要があります。
    def __init__(self, memory: Memory):
        self._memory = memory
        self._state: CpuState = self._create_initial_state()
        self._cycle_count: int = 0

    @property
    def memory(self) -> Memory:
        return self._memory

    @property
    def cycle_count(self) -> int:
        return self._cycle_count

    # @intent:responsibility 電源投入直後のレジスタ状態を返します。
    @abstractmethod
    def _create_initial_state(self) -> CpuState:
        pass

    # @intent:responsibility レジスタを電源投入直後に戻し、サイクル数を0にします。
    def reset(self) -> None:
        self._state = self._create_initial_state()
        self._cycle_count = 0

    def get_state(self) -> CpuState:
        return self._state

    # @intent:responsibility メモリから次の命令ワードをフェッチします。
    @abstractmethod
    def _fetch(self) -> int:
        pass

    # @intent:responsibility フェッチした命令ワードを実行可能な形に解析します。
    @abstractmethod
    def _decode(self, word: int) -> Any:
        pass

    # @intent:responsibility 命令の効果をレジスタ・メモリ・周辺に反映します。
    @abstractmethod
    def _execute(self, decoded: Any) -> None:
        pass

    # @intent:responsibility デコード結果を表示用のOperationに変換します。
    @abstractmethod
    def _describe(self, decoded: Any) -> Operation:
        pass

    # @intent:responsibility 1命令分のサイクルを完了させ、その記録を返します。
    def step(self) -> Snapshot:
        """
        ログ破棄 -> フェッチ -> デコード -> PC+2 -> 実行 -> Snapshot の順で進みます。
        停止状態はなく、例外が送出されない限り必ずSnapshotが返ります。
        """
        # サイクル外（ホストによる書き込みなど）で積まれたログはこのサイクルに含めない
        self._memory.get_and_clear_activity_log()

        word = self._fetch()
        decoded = self._decode(word)
        self._update_pc(decoded)
        self._execute(decoded)
        return self._create_snapshot(decoded)

    # @intent:responsibility 全命令が固定長2バイトなので、実行前に次の命令へ進めておきます。
    def _update_pc(self, decoded: Any) -> None:
        self._state.pc = (self._state.pc + 2) & 0xFFFF

    def _create_snapshot(self, decoded: Any) -> Snapshot:
        memory_activity = self._memory.get_and_clear_activity_log()
        self._cycle_count += 1

        operation = self._describe(decoded)
        symbol_info = operation.mnemonic
        if operation.operands:
            symbol_info += " " + ", ".join(operation.operands)

        return Snapshot(
            state=copy.deepcopy(self._state),
            operation=operation,
            metadata=Metadata(cycle_count=self._cycle_count, symbol_info=symbol_info),
            memory_activity=memory_activity,
        )

    @abstractmethod
    def get_register_map(self) -> Dict[str, int]:
        """
        レジスタ名から現在値への辞書。名前はget_register_layout()と揃えます。
        """
        pass

    @abstractmethod
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        pass

    @abstractmethod
    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        """
        [start_addr, start_addr + length) を (アドレス, "HH LL", 命令文字列) の列に変換します。
        """
        pass
