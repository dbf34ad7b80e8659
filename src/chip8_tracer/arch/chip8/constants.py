# chip8_tracer/arch/chip8/constants.py
"""
CHIP-8の固定メモリレイアウト、命令ビットマスク、表示サイズなどの定数定義。
"""

MEMORY_SIZE = 4096
PROGRAM_START = 0x200
MAX_ROM_SIZE = MEMORY_SIZE - PROGRAM_START

# @intent:constant フォントの配置先。標準フォントは5バイト×16文字、拡張フォントは10バイト×16文字。
FONT_START = 0x050
FONT_GLYPH_SIZE = 5
EXTENDED_FONT_START = 0x0A0
EXTENDED_FONT_GLYPH_SIZE = 10

STACK_CAPACITY = 16
REGISTER_COUNT = 16
KEY_COUNT = 16
FLAG_REGISTER = 0xF

# 命令ワードのフィールドマスク
INSTRUCTION_BITMASK = 0xF000
X_BITMASK = 0x0F00
Y_BITMASK = 0x00F0
N_BITMASK = 0x000F
NN_BITMASK = 0x00FF
NNN_BITMASK = 0x0FFF

# Display
DISPLAY_WIDTH = 0x40
DISPLAY_HEIGHT = 0x20

# Timing
CYCLES_PER_SECOND = 700
FRAME_RATE = 60
TIMER_RATE = 60
