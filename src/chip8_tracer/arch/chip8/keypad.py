# chip8_tracer/arch/chip8/keypad.py
"""
16キーの押下状態テーブル。

ホストが入力サンプリングのたびに書き込み、CPUからは読み取り専用として扱われます。
"""
from typing import Iterable, List, Optional

from chip8_tracer.arch.chip8.constants import KEY_COUNT

# @intent:responsibility キー0x0-0xFの押下状態を保持します。
class Keypad:
    def __init__(self):
        self._pressed: List[bool] = [False] * KEY_COUNT

    def _check(self, key: int) -> None:
        if not 0 <= key < KEY_COUNT:
            raise IndexError(f"Key {key} out of range 0x0-0xF.")

    def set_key(self, key: int, pressed: bool) -> None:
        self._check(key)
        self._pressed[key] = bool(pressed)

    def press(self, key: int) -> None:
        self.set_key(key, True)

    def release(self, key: int) -> None:
        self.set_key(key, False)

    def is_pressed(self, key: int) -> bool:
        self._check(key)
        return self._pressed[key]

    # @intent:responsibility 押下中のキーのうち最小のインデックスを返します。なければNone。
    def first_pressed(self) -> Optional[int]:
        for key, pressed in enumerate(self._pressed):
            if pressed:
                return key
        return None

    # @intent:responsibility 押下中のキー集合でテーブル全体を書き換えます。
    def update(self, pressed_keys: Iterable[int]) -> None:
        state = [False] * KEY_COUNT
        for key in pressed_keys:
            self._check(key)
            state[key] = True
        self._pressed = state

    def clear(self) -> None:
        self._pressed = [False] * KEY_COUNT
