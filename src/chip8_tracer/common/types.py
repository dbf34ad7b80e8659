"""
UI向けのレジスタ表示定義。

CPUは自分のレジスタの名前とビット幅だけを公開し、UIはそれを見て表示欄を組み立てます。
"""
from typing import List, NamedTuple

class RegisterInfo(NamedTuple):
    name: str   # get_register_map()のキーと一致する
    width: int  # 表示桁数の算出に使うビット幅

# @intent:data_structure 1つの枠にまとめて表示するレジスタ群（例: "V0-V7", "Timers"）。
class RegisterLayoutInfo(NamedTuple):
    group_name: str
    registers: List[RegisterInfo]
