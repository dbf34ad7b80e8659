"""
ホストキーボードとキーパッドの対応付け。

Qtのキーコードは英数字について大文字のASCIIコードと一致するため、
設定ファイルの文字指定からそのままキーコードを算出します。
"""
from typing import Dict, List, Set

# @intent:responsibility 文字→キーパッドインデックスの対応を、Qtキーコード→インデックスに変換します。
def build_qt_keymap(keymap: Dict[str, int]) -> Dict[int, int]:
    qt_keymap = {}
    for char, index in keymap.items():
        if len(char) != 1:
            raise ValueError(f"Keymap entry '{char}' must be a single character")
        qt_keymap[ord(char.upper())] = index
    return qt_keymap

# @intent:responsibility ホスト側で押下中のキーを追跡し、入力サンプリング時にキーパッドの押下集合を返します。
class HostKeyState:
    def __init__(self, qt_keymap: Dict[int, int]):
        self._qt_keymap = qt_keymap
        self._held: Set[int] = set()

    # @intent:return キーパッドに対応するキーであればTrue。
    def press(self, qt_key: int) -> bool:
        if qt_key not in self._qt_keymap:
            return False
        self._held.add(qt_key)
        return True

    def release(self, qt_key: int) -> bool:
        if qt_key not in self._qt_keymap:
            return False
        self._held.discard(qt_key)
        return True

    def release_all(self) -> None:
        self._held.clear()

    def pressed_keys(self) -> List[int]:
        return sorted({self._qt_keymap[qt_key] for qt_key in self._held})
