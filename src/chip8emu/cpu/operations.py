"""Instruction semantics, one handler per instruction id."""

from __future__ import annotations

from types import MappingProxyType
from typing import Callable, Dict, Mapping, Sequence

from chip8emu.constants import FLAG_REGISTER, FONT_GLYPH_SIZE, SPRITE_SET_ADDRESS
from chip8emu.cpu.context import ExecutionContext

Operation = Callable[[ExecutionContext, Sequence[int], int], None]


# 00E0
def _cls(ctx: ExecutionContext, args: Sequence[int], opcode: int) -> None:
    ctx.draw_sprite(0, 0, b"")


# 00EE
def _ret(ctx: ExecutionContext, args: Sequence[int], opcode: int) -> None:
    ctx.registers.pc = ctx.registers.pop()


# 1nnn
def _jp_addr(ctx: ExecutionContext, args: Sequence[int], opcode: int) -> None:
    ctx.registers.pc = args[0]


# 2nnn; PC already points past the CALL, which is the return address.
def _call_addr(ctx: ExecutionContext, args: Sequence[int], opcode: int) -> None:
    ctx.registers.push(ctx.registers.pc)
    ctx.registers.pc = args[0]


# 3xkk
def _se_vx_kk(ctx: ExecutionContext, args: Sequence[int], opcode: int) -> None:
    x, kk = args
    if ctx.registers.v[x] == kk:
        ctx.registers.advance()


# 4xkk
def _sne_vx_kk(ctx: ExecutionContext, args: Sequence[int], opcode: int) -> None:
    x, kk = args
    if ctx.registers.v[x] != kk:
        ctx.registers.advance()


# 5xy0
def _se_vx_vy(ctx: ExecutionContext, args: Sequence[int], opcode: int) -> None:
    x, y = args
    if ctx.registers.v[x] == ctx.registers.v[y]:
        ctx.registers.advance()


# 6xkk
def _ld_vx_kk(ctx: ExecutionContext, args: Sequence[int], opcode: int) -> None:
    x, kk = args
    ctx.registers.v[x] = kk


# 7xkk, no carry flag
def _add_vx_kk(ctx: ExecutionContext, args: Sequence[int], opcode: int) -> None:
    x, kk = args
    ctx.registers.v[x] = (ctx.registers.v[x] + kk) & 0xFF


# 8xy0
def _ld_vx_vy(ctx: ExecutionContext, args: Sequence[int], opcode: int) -> None:
    x, y = args
    ctx.registers.v[x] = ctx.registers.v[y]


# 8xy1
def _or_vx_vy(ctx: ExecutionContext, args: Sequence[int], opcode: int) -> None:
    x, y = args
    ctx.registers.v[x] = ctx.registers.v[x] | ctx.registers.v[y]


# 8xy2
def _and_vx_vy(ctx: ExecutionContext, args: Sequence[int], opcode: int) -> None:
    x, y = args
    ctx.registers.v[x] = ctx.registers.v[x] & ctx.registers.v[y]


# 8xy3
def _xor_vx_vy(ctx: ExecutionContext, args: Sequence[int], opcode: int) -> None:
    x, y = args
    ctx.registers.v[x] = ctx.registers.v[x] ^ ctx.registers.v[y]


# The flag is written before the result, so an x of F ends up holding the result.
# 8xy4
def _add_vx_vy(ctx: ExecutionContext, args: Sequence[int], opcode: int) -> None:
    x, y = args
    v = ctx.registers.v
    total = v[x] + v[y]
    v[FLAG_REGISTER] = 1 if total > 0xFF else 0
    v[x] = total & 0xFF


# 8xy5
def _sub_vx_vy(ctx: ExecutionContext, args: Sequence[int], opcode: int) -> None:
    x, y = args
    v = ctx.registers.v
    vx, vy = v[x], v[y]
    v[FLAG_REGISTER] = 1 if vx >= vy else 0
    v[x] = (vx - vy) & 0xFF


# 8xy6, y ignored
def _shr_vx(ctx: ExecutionContext, args: Sequence[int], opcode: int) -> None:
    x = args[0]
    v = ctx.registers.v
    vx = v[x]
    v[FLAG_REGISTER] = vx & 0x01
    v[x] = vx >> 1


# 8xy7
def _subn_vx_vy(ctx: ExecutionContext, args: Sequence[int], opcode: int) -> None:
    x, y = args
    v = ctx.registers.v
    vx, vy = v[x], v[y]
    v[FLAG_REGISTER] = 1 if vy >= vx else 0
    v[x] = (vy - vx) & 0xFF


# 8xyE, y ignored
def _shl_vx(ctx: ExecutionContext, args: Sequence[int], opcode: int) -> None:
    x = args[0]
    v = ctx.registers.v
    vx = v[x]
    v[FLAG_REGISTER] = (vx & 0x80) >> 7
    v[x] = (vx << 1) & 0xFF


# 9xy0
def _sne_vx_vy(ctx: ExecutionContext, args: Sequence[int], opcode: int) -> None:
    x, y = args
    if ctx.registers.v[x] != ctx.registers.v[y]:
        ctx.registers.advance()


# Annn
def _ld_i_addr(ctx: ExecutionContext, args: Sequence[int], opcode: int) -> None:
    ctx.registers.i = args[0]


# Bnnn
def _jp_v0_addr(ctx: ExecutionContext, args: Sequence[int], opcode: int) -> None:
    ctx.registers.pc = (args[0] + ctx.registers.v[0]) & 0xFFFF


# Cxkk
def _rnd_vx_kk(ctx: ExecutionContext, args: Sequence[int], opcode: int) -> None:
    x, kk = args
    ctx.registers.v[x] = ctx.random_byte() & kk


# Dxyn
def _drw_vx_vy_n(ctx: ExecutionContext, args: Sequence[int], opcode: int) -> None:
    x, y, height = args
    registers = ctx.registers
    sprite = ctx.memory.slice(registers.i, registers.i + height)
    collision = ctx.draw_sprite(registers.v[x], registers.v[y], sprite)
    registers.v[FLAG_REGISTER] = 1 if collision else 0


# Ex9E
def _skp_vx(ctx: ExecutionContext, args: Sequence[int], opcode: int) -> None:
    if ctx.is_key_pressed(ctx.registers.v[args[0]]):
        ctx.registers.advance()


# ExA1
def _sknp_vx(ctx: ExecutionContext, args: Sequence[int], opcode: int) -> None:
    if not ctx.is_key_pressed(ctx.registers.v[args[0]]):
        ctx.registers.advance()


# Fx07
def _ld_vx_dt(ctx: ExecutionContext, args: Sequence[int], opcode: int) -> None:
    ctx.registers.v[args[0]] = ctx.registers.delay_timer


# Fx0A
def _ld_vx_k(ctx: ExecutionContext, args: Sequence[int], opcode: int) -> None:
    x = args[0]
    registers = ctx.registers

    def _on_key(key: int) -> None:
        registers.v[x] = key
        registers.paused = False

    registers.paused = True
    ctx.wait_for_key(_on_key)


# Fx15
def _ld_dt_vx(ctx: ExecutionContext, args: Sequence[int], opcode: int) -> None:
    ctx.registers.delay_timer = ctx.registers.v[args[0]]


# Fx18
def _ld_st_vx(ctx: ExecutionContext, args: Sequence[int], opcode: int) -> None:
    ctx.registers.sound_timer = ctx.registers.v[args[0]]


# Fx1E
def _add_i_vx(ctx: ExecutionContext, args: Sequence[int], opcode: int) -> None:
    ctx.registers.i = (ctx.registers.i + ctx.registers.v[args[0]]) & 0xFFFF


# Fx29
def _ld_f_vx(ctx: ExecutionContext, args: Sequence[int], opcode: int) -> None:
    ctx.registers.i = SPRITE_SET_ADDRESS + ctx.registers.v[args[0]] * FONT_GLYPH_SIZE


# Fx33
def _ld_b_vx(ctx: ExecutionContext, args: Sequence[int], opcode: int) -> None:
    value = ctx.registers.v[args[0]]
    base = ctx.registers.i
    ctx.memory.write(base, value // 100)
    ctx.memory.write(base + 1, (value % 100) // 10)
    ctx.memory.write(base + 2, value % 10)


# Fx55, I is left unchanged
def _ld_i_vx(ctx: ExecutionContext, args: Sequence[int], opcode: int) -> None:
    base = ctx.registers.i
    for index in range(args[0] + 1):
        ctx.memory.write(base + index, ctx.registers.v[index])


# Fx65, I is left unchanged
def _ld_vx_i(ctx: ExecutionContext, args: Sequence[int], opcode: int) -> None:
    base = ctx.registers.i
    for index in range(args[0] + 1):
        ctx.registers.v[index] = ctx.memory.read(base + index)


_OPERATIONS: Dict[str, Operation] = {
    "CLS": _cls,
    "RET": _ret,
    "JP_ADDR": _jp_addr,
    "CALL_ADDR": _call_addr,
    "SE_VX_KK": _se_vx_kk,
    "SNE_VX_KK": _sne_vx_kk,
    "SE_VX_VY": _se_vx_vy,
    "LD_VX_KK": _ld_vx_kk,
    "ADD_VX_KK": _add_vx_kk,
    "LD_VX_VY": _ld_vx_vy,
    "OR_VX_VY": _or_vx_vy,
    "AND_VX_VY": _and_vx_vy,
    "XOR_VX_VY": _xor_vx_vy,
    "ADD_VX_VY": _add_vx_vy,
    "SUB_VX_VY": _sub_vx_vy,
    "SHR_VX_VY": _shr_vx,
    "SUBN_VX_VY": _subn_vx_vy,
    "SHL_VX_VY": _shl_vx,
    "SNE_VX_VY": _sne_vx_vy,
    "LD_I_ADDR": _ld_i_addr,
    "JP_V0_ADDR": _jp_v0_addr,
    "RND_VX_KK": _rnd_vx_kk,
    "DRW_VX_VY_N": _drw_vx_vy_n,
    "SKP_VX": _skp_vx,
    "SKNP_VX": _sknp_vx,
    "LD_VX_DT": _ld_vx_dt,
    "LD_VX_K": _ld_vx_k,
    "LD_DT_VX": _ld_dt_vx,
    "LD_ST_VX": _ld_st_vx,
    "ADD_I_VX": _add_i_vx,
    "LD_F_VX": _ld_f_vx,
    "LD_B_VX": _ld_b_vx,
    "LD_I_VX": _ld_i_vx,
    "LD_VX_I": _ld_vx_i,
}

# SYS_ADDR (0nnn) decodes but has no handler.
OPERATIONS: Mapping[str, Operation] = MappingProxyType(_OPERATIONS)


__all__ = ["Operation", "OPERATIONS"]
