# tests/ui/test_keymap.py
"""
chip8_tracer.ui.keymapモジュールの単体テスト。
Qtのキーコードは英数字について大文字のASCIIコードと一致するため、Qtを起動せずに検証できます。
"""
import pytest

from chip8_tracer.config.models import DEFAULT_KEYMAP
from chip8_tracer.ui.keymap import HostKeyState, build_qt_keymap

class TestBuildQtKeymap:
    def test_default_keymap(self):
        qt_keymap = build_qt_keymap(DEFAULT_KEYMAP)
        assert qt_keymap[ord("1")] == 0x1
        assert qt_keymap[ord("4")] == 0xC
        assert qt_keymap[ord("Q")] == 0x4
        assert qt_keymap[ord("X")] == 0x0
        assert qt_keymap[ord("V")] == 0xF
        assert len(qt_keymap) == 16

    def test_rejects_multi_character_entry(self):
        with pytest.raises(ValueError):
            build_qt_keymap({"F1": 0x1})

class TestHostKeyState:
    @pytest.fixture
    def keys(self):
        return HostKeyState(build_qt_keymap(DEFAULT_KEYMAP))

    # @intent:test_case_press_release 押下中のキーがキーパッドのインデックス順に返ることを検証します。
    def test_press_release(self, keys):
        assert keys.press(ord("V"))
        assert keys.press(ord("W"))
        assert keys.pressed_keys() == [0x5, 0xF]
        assert keys.release(ord("V"))
        assert keys.pressed_keys() == [0x5]

    def test_unmapped_key_is_ignored(self, keys):
        assert not keys.press(ord("P"))
        assert not keys.release(ord("P"))
        assert keys.pressed_keys() == []

    def test_release_all(self, keys):
        keys.press(ord("1"))
        keys.press(ord("2"))
        keys.release_all()
        assert keys.pressed_keys() == []

    # @intent:test_case_shared_index 同じインデックスに割り当てた複数のキーは1つとして扱われることを検証します。
    def test_keys_sharing_an_index(self):
        keys = HostKeyState(build_qt_keymap({"x": 0x0, "0": 0x0}))
        keys.press(ord("X"))
        keys.press(ord("0"))
        assert keys.pressed_keys() == [0x0]
        keys.release(ord("X"))
        assert keys.pressed_keys() == [0x0]
