"""
エラー種別の定義。

仮想CPUの実行中に発生し得る失敗を名前付きの例外として表現します。
未定義オペコードはエラーではなく、NOPとして扱われるためここには含まれません。
"""


# @intent:responsibility 本パッケージが送出する全ての例外の基底クラス。
class Chip8Error(Exception):
    pass


# @intent:responsibility アドレス空間外へのメモリアクセスを表します。
# @intent:rationale 既存のIndexErrorハンドリングとも互換にするため、IndexErrorも継承します。
class MemoryOutOfRangeError(Chip8Error, IndexError):
    def __init__(self, address: int, size: int):
        super().__init__(f"Address {address:#06x} out of range for memory of size {size:#06x}.")
        self.address = address
        self.size = size


# @intent:responsibility 容量いっぱいのコールスタックへのCALLを表します。
class StackOverflowError(Chip8Error):
    pass


# @intent:responsibility 空のコールスタックからのRETを表します。
class StackUnderflowError(Chip8Error):
    pass


# @intent:responsibility ROMの読み込み失敗（読み込み不能・空・サイズ超過）を表します。
class RomLoadError(Chip8Error):
    pass
