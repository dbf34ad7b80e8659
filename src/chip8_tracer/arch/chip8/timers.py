# chip8_tracer/arch/chip8/timers.py
"""
遅延タイマー・サウンドタイマーの減算スケジューラ。

RealtimeTimerSchedulerは経過実時間から60Hzのティック数を算出し、
命令実行レートとタイマーレートを切り離します。
CycleTimerSchedulerは1サイクルごとに1ティックを返す旧来の挙動です。
"""
import logging
import time
from abc import ABC, abstractmethod
from typing import Callable

from chip8_tracer.arch.chip8.constants import TIMER_RATE

logger = logging.getLogger(__name__)

# @intent:responsibility タイマー減算の発生タイミングを決定する抽象インターフェース。
class TimerScheduler(ABC):
    # @intent:responsibility 前回の呼び出し以降に期限を迎えたティック数を返します。
    @abstractmethod
    def consume_ticks(self) -> int:
        pass

    # @intent:responsibility 蓄積した経過を破棄します（一時停止からの再開時など）。
    def reset(self) -> None:
        pass

class CycleTimerScheduler(TimerScheduler):
    def consume_ticks(self) -> int:
        return 1

class RealtimeTimerScheduler(TimerScheduler):
    """
    clockは秒単位の単調増加時刻を返す関数です。テストでは差し替え可能です。
    """
    def __init__(self, rate_hz: int = TIMER_RATE, clock: Callable[[], float] = time.monotonic):
        if rate_hz <= 0:
            raise ValueError("Timer rate must be positive.")
        self._period = 1.0 / rate_hz
        self._clock = clock
        self._last = clock()

    def consume_ticks(self) -> int:
        now = self._clock()
        ticks = int((now - self._last) / self._period)
        if ticks > 0:
            # 端数は次回に持ち越す
            self._last += ticks * self._period
            if ticks > 1:
                logger.debug("Consumed %d timer ticks at once", ticks)
        return ticks

    def reset(self) -> None:
        self._last = self._clock()
