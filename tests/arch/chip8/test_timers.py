# tests/arch/chip8/test_timers.py
"""
chip8_tracer.arch.chip8.timersモジュールの単体テスト。
実時間スケジューラは差し替えたクロックで検証します。
"""
import pytest

from chip8_tracer.arch.chip8.timers import CycleTimerScheduler, RealtimeTimerScheduler

class FakeClock:
    def __init__(self, now: float = 100.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

class TestCycleTimerScheduler:
    def test_one_tick_per_call(self):
        scheduler = CycleTimerScheduler()
        assert [scheduler.consume_ticks() for _ in range(3)] == [1, 1, 1]
        scheduler.reset()
        assert scheduler.consume_ticks() == 1

class TestRealtimeTimerScheduler:
    # @intent:test_case_rate 60Hzで1秒経過すると60ティックになることを検証します。
    def test_ticks_at_60hz(self):
        clock = FakeClock()
        scheduler = RealtimeTimerScheduler(clock=clock)
        assert scheduler.consume_ticks() == 0
        clock.now += 1.001
        assert scheduler.consume_ticks() == 60
        assert scheduler.consume_ticks() == 0

    # @intent:test_case_remainder 端数の経過時間が次回に持ち越されることを検証します。
    def test_remainder_carried_over(self):
        clock = FakeClock()
        scheduler = RealtimeTimerScheduler(rate_hz=4, clock=clock)
        clock.now += 0.375
        assert scheduler.consume_ticks() == 1
        clock.now += 0.125
        assert scheduler.consume_ticks() == 1

    # @intent:test_case_reset resetで一時停止中の経過時間が破棄されることを検証します。
    def test_reset_discards_elapsed_time(self):
        clock = FakeClock()
        scheduler = RealtimeTimerScheduler(rate_hz=4, clock=clock)
        clock.now += 5.0
        scheduler.reset()
        assert scheduler.consume_ticks() == 0
        clock.now += 0.25
        assert scheduler.consume_ticks() == 1

    def test_invalid_rate(self):
        with pytest.raises(ValueError):
            RealtimeTimerScheduler(rate_hz=0)
