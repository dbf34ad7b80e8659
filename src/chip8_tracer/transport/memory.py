# chip8_tracer/transport/memory.py
"""
Transport Layer (メモリユニット)

このモジュールは、4KBのバイトアドレス空間と有限長のコールスタックを所有し、
CPUからの読み書きを受け付ける責務を負います。
全てのアクセスは記録され、1サイクルごとにSnapshotへ取り込まれます。
"""
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List

from chip8_tracer.common.errors import (
    MemoryOutOfRangeError,
    StackOverflowError,
    StackUnderflowError,
)

MEMORY_SIZE = 4096
STACK_CAPACITY = 16

# @intent:responsibility メモリアクセスを記録するためのタイプを定義します。
class MemoryAccessType(Enum):
    READ = "READ"
    WRITE = "WRITE"

# @intent:responsibility 個々のメモリアクセス操作を記録します。
@dataclass(frozen=True) # 不変データ構造
class MemoryAccess:
    """
    メモリ上で行われた単一のアクセスを記録するデータクラス。
    READの場合、dataはfetchで読み出した16bitワードです。
    """
    address: int
    data: int
    access_type: MemoryAccessType

# @intent:responsibility サブルーチンの戻りアドレスを保持する有限長のLIFO。
class CallStack:
    """
    戻りアドレス（16bit）を保持するコールスタック。
    容量を超えるpushと空の状態でのpopは名前付き例外になります。
    """
    def __init__(self, capacity: int = STACK_CAPACITY):
        if not isinstance(capacity, int) or capacity <= 0:
            raise ValueError("Stack capacity must be a positive integer.")
        self._capacity = capacity
        self._entries: List[int] = []

    # @intent:responsibility 戻りアドレスを積みます。
    # @intent:pre-condition スタックが容量未満であること。
    def push(self, address: int) -> None:
        if len(self._entries) >= self._capacity:
            raise StackOverflowError(
                f"Call stack overflow: capacity {self._capacity} exceeded pushing {address:#06x}."
            )
        self._entries.append(address & 0xFFFF)

    # @intent:responsibility 最後に積まれた戻りアドレスを取り出します。
    def pop(self) -> int:
        if not self._entries:
            raise StackUnderflowError("Call stack underflow: return with an empty stack.")
        return self._entries.pop()

    def clear(self) -> None:
        self._entries.clear()

    @property
    def capacity(self) -> int:
        return self._capacity

    # UI表示用。底から順に並ぶ。
    def entries(self) -> List[int]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

# @intent:responsibility 固定長のバイトアドレス空間とコールスタックを管理します。
# @intent:rationale アクセスを全て記録し、Snapshotに含めることで実行の観測可能性を高めます。
class Memory:
    """
    CHIP-8のメモリユニット。
    読み出しプリミティブはfetch（2バイト窓の読み出し）のみです。
    1バイトだけ必要な呼び出し側は結果を8bit右シフトして上位バイトを使います。
    """
    def __init__(self, size: int = MEMORY_SIZE, stack_capacity: int = STACK_CAPACITY):
        if not isinstance(size, int) or size <= 0:
            raise ValueError("Memory size must be a positive integer.")
        self._memory = bytearray(size)
        self._size = size
        self.stack = CallStack(stack_capacity)
        self._activity_log: List[MemoryAccess] = []

    def _check_address(self, address: int) -> None:
        if not 0 <= address < self._size:
            raise MemoryOutOfRangeError(address, self._size)

    # @intent:responsibility [address, address + length) が全てアドレス空間内であることを検査します。
    # @intent:rationale 複数バイトを扱う命令が状態を変更する前に、範囲外アクセスを検出するために使います。
    def check_range(self, address: int, length: int) -> None:
        if length <= 0:
            return
        self._check_address(address)
        self._check_address(address + length - 1)

    # @intent:responsibility 2バイト窓を読み出します（ログ記録なし）。
    # @intent:rationale 末尾アドレスでの窓読み出しでも上位バイトを取得できるよう、範囲外の下位バイトは0とします。
    def _read_window(self, address: int) -> int:
        self._check_address(address)
        high = self._memory[address]
        low = self._memory[address + 1] if address + 1 < self._size else 0x00
        return (high << 8) | low

    # @intent:responsibility addressを上位8bit、address+1を下位8bitとする16bitワードを返します。
    # @intent:pre-condition addressはアドレス空間内である必要があります。
    def fetch(self, address: int) -> int:
        word = self._read_window(address)
        self._activity_log.append(MemoryAccess(address, word, MemoryAccessType.READ))
        return word

    # @intent:responsibility ログを記録せずに2バイト窓を読み出します。
    def peek(self, address: int) -> int:
        """
        fetchと同じ値を返しますが、アクセスログには残しません。
        逆アセンブラやUIなどのインスペクタ用。
        """
        return self._read_window(address)

    # @intent:responsibility 指定されたアドレスに8bitのデータを書き込みます。
    # @intent:pre-condition アドレスは範囲内、データは8bit値である必要があります。
    def write(self, address: int, data: int) -> None:
        self._check_address(address)
        if not 0 <= data <= 0xFF:
            raise ValueError(f"Data {data} is not an 8-bit value.")
        self._memory[address] = data
        self._activity_log.append(MemoryAccess(address, data, MemoryAccessType.WRITE))

    # @intent:responsibility フォントやROMなど、初期化用のデータをログなしで一括配置します。
    def load(self, base_address: int, data: Iterable[int]) -> None:
        payload = bytes(data)
        if not payload:
            return
        self.check_range(base_address, len(payload))
        self._memory[base_address:base_address + len(payload)] = payload

    # @intent:responsibility メモリを全てゼロにし、スタックとログを空にします。
    def clear(self) -> None:
        self._memory = bytearray(self._size)
        self.stack.clear()
        self._activity_log = []

    # @intent:responsibility 記録されたアクセスログを取得し、クリアします。
    def get_and_clear_activity_log(self) -> List[MemoryAccess]:
        log = self._activity_log
        self._activity_log = []
        return log

    def get_size(self) -> int:
        return self._size
