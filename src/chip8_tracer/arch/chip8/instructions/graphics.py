# chip8_tracer/arch/chip8/instructions/graphics.py
"""
画面消去とスプライト描画命令の実装。
"""
from typing import TYPE_CHECKING

from chip8_tracer.arch.chip8.opcode import Opcode

if TYPE_CHECKING:
    from chip8_tracer.arch.chip8.cpu import Chip8Cpu

# --- 00E0 CLS ---
def execute_cls(cpu: "Chip8Cpu", op: Opcode) -> None:
    cpu.framebuffer.clear()

# @intent:responsibility I以降のheightバイトをスプライトとして(Vx & 63, Vy & 31)にXOR描画します。
# @intent:post-condition 点灯していたピクセルが1つでも消えればVF=1、そうでなければVF=0。
def draw(cpu: "Chip8Cpu", x_reg: int, y_reg: int, height: int) -> None:
    """
    右端・下端を越える部分は折り返さずにクリップされます。
    スプライトの各バイトはMSBが左端のピクセルに対応します。
    スプライトがアドレス空間を越える場合は、画面とVFを変更する前に
    MemoryOutOfRangeErrorを送出します。
    """
    state = cpu.get_state()
    cpu.memory.check_range(state.i, height)
    framebuffer = cpu.framebuffer
    origin_x = state.v[x_reg] % framebuffer.width
    origin_y = state.v[y_reg] % framebuffer.height
    state.vf = 0

    for row in range(height):
        y = origin_y + row
        if y >= framebuffer.height:
            break
        sprite = cpu.memory.fetch(state.i + row) >> 8
        for bit in range(8):
            x = origin_x + bit
            if x >= framebuffer.width:
                break
            if not sprite & (0x80 >> bit):
                continue
            if framebuffer.get(y, x):
                framebuffer.set(y, x, 0)
                state.vf = 1
            else:
                framebuffer.set(y, x, 1)

# --- Dxyn DRW Vx, Vy, n ---
def execute_drw(cpu: "Chip8Cpu", op: Opcode) -> None:
    draw(cpu, op.x, op.y, op.n)
