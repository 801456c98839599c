"""Opcode decoding against an ordered mask/pattern instruction table."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Tuple


@dataclass(frozen=True)
class OperandField:
    """Bit field of an opcode: ``(opcode & mask) >> shift``."""

    mask: int
    shift: int = 0
    kind: str = "imm"

    def extract(self, opcode: int) -> int:
        return (opcode & self.mask) >> self.shift


@dataclass(frozen=True)
class InstructionDefinition:
    id: str
    mnemonic: str
    mask: int
    pattern: int
    arguments: Tuple[OperandField, ...] = ()

    def matches(self, opcode: int) -> bool:
        return (opcode & self.mask) == self.pattern


@dataclass(frozen=True)
class DecodedInstruction:
    instruction: Optional[InstructionDefinition]
    args: List[int] = field(default_factory=list)

    @property
    def id(self) -> Optional[str]:
        return self.instruction.id if self.instruction is not None else None


_ADDR = OperandField(0x0FFF, 0, "addr")
_X = OperandField(0x0F00, 8, "reg")
_Y = OperandField(0x00F0, 4, "reg")
_KK = OperandField(0x00FF, 0, "imm")
_N = OperandField(0x000F, 0, "nibble")

# First match wins, so exact opcodes sit in front of the families they belong to
# (00E0/00EE before 0nnn, every 8xyN before anything looser).
INSTRUCTION_SET: Tuple[InstructionDefinition, ...] = (
    InstructionDefinition("CLS", "CLS", 0xFFFF, 0x00E0),
    InstructionDefinition("RET", "RET", 0xFFFF, 0x00EE),
    InstructionDefinition("SYS_ADDR", "SYS", 0xF000, 0x0000, (_ADDR,)),
    InstructionDefinition("JP_ADDR", "JP", 0xF000, 0x1000, (_ADDR,)),
    InstructionDefinition("CALL_ADDR", "CALL", 0xF000, 0x2000, (_ADDR,)),
    InstructionDefinition("SE_VX_KK", "SE", 0xF000, 0x3000, (_X, _KK)),
    InstructionDefinition("SNE_VX_KK", "SNE", 0xF000, 0x4000, (_X, _KK)),
    InstructionDefinition("SE_VX_VY", "SE", 0xF00F, 0x5000, (_X, _Y)),
    InstructionDefinition("LD_VX_KK", "LD", 0xF000, 0x6000, (_X, _KK)),
    InstructionDefinition("ADD_VX_KK", "ADD", 0xF000, 0x7000, (_X, _KK)),
    InstructionDefinition("LD_VX_VY", "LD", 0xF00F, 0x8000, (_X, _Y)),
    InstructionDefinition("OR_VX_VY", "OR", 0xF00F, 0x8001, (_X, _Y)),
    InstructionDefinition("AND_VX_VY", "AND", 0xF00F, 0x8002, (_X, _Y)),
    InstructionDefinition("XOR_VX_VY", "XOR", 0xF00F, 0x8003, (_X, _Y)),
    InstructionDefinition("ADD_VX_VY", "ADD", 0xF00F, 0x8004, (_X, _Y)),
    InstructionDefinition("SUB_VX_VY", "SUB", 0xF00F, 0x8005, (_X, _Y)),
    InstructionDefinition("SHR_VX_VY", "SHR", 0xF00F, 0x8006, (_X, _Y)),
    InstructionDefinition("SUBN_VX_VY", "SUBN", 0xF00F, 0x8007, (_X, _Y)),
    InstructionDefinition("SHL_VX_VY", "SHL", 0xF00F, 0x800E, (_X, _Y)),
    InstructionDefinition("SNE_VX_VY", "SNE", 0xF00F, 0x9000, (_X, _Y)),
    InstructionDefinition("LD_I_ADDR", "LD", 0xF000, 0xA000, (_ADDR,)),
    InstructionDefinition("JP_V0_ADDR", "JP", 0xF000, 0xB000, (_ADDR,)),
    InstructionDefinition("RND_VX_KK", "RND", 0xF000, 0xC000, (_X, _KK)),
    InstructionDefinition("DRW_VX_VY_N", "DRW", 0xF000, 0xD000, (_X, _Y, _N)),
    InstructionDefinition("SKP_VX", "SKP", 0xF0FF, 0xE09E, (_X,)),
    InstructionDefinition("SKNP_VX", "SKNP", 0xF0FF, 0xE0A1, (_X,)),
    InstructionDefinition("LD_VX_DT", "LD", 0xF0FF, 0xF007, (_X,)),
    InstructionDefinition("LD_VX_K", "LD", 0xF0FF, 0xF00A, (_X,)),
    InstructionDefinition("LD_DT_VX", "LD", 0xF0FF, 0xF015, (_X,)),
    InstructionDefinition("LD_ST_VX", "LD", 0xF0FF, 0xF018, (_X,)),
    InstructionDefinition("ADD_I_VX", "ADD", 0xF0FF, 0xF01E, (_X,)),
    InstructionDefinition("LD_F_VX", "LD", 0xF0FF, 0xF029, (_X,)),
    InstructionDefinition("LD_B_VX", "LD", 0xF0FF, 0xF033, (_X,)),
    InstructionDefinition("LD_I_VX", "LD", 0xF0FF, 0xF055, (_X,)),
    InstructionDefinition("LD_VX_I", "LD", 0xF0FF, 0xF065, (_X,)),
)

# Operand layouts that the generic renderer in format_instruction cannot infer.
_OPERAND_TEMPLATES = {
    "SHR_VX_VY": "V{0:X}",
    "SHL_VX_VY": "V{0:X}",
    "LD_I_ADDR": "I, 0x{0:03X}",
    "JP_V0_ADDR": "V0, 0x{0:03X}",
    "SKP_VX": "V{0:X}",
    "SKNP_VX": "V{0:X}",
    "LD_VX_DT": "V{0:X}, DT",
    "LD_VX_K": "V{0:X}, K",
    "LD_DT_VX": "DT, V{0:X}",
    "LD_ST_VX": "ST, V{0:X}",
    "ADD_I_VX": "I, V{0:X}",
    "LD_F_VX": "F, V{0:X}",
    "LD_B_VX": "B, V{0:X}",
    "LD_I_VX": "[I], V{0:X}",
    "LD_VX_I": "V{0:X}, [I]",
}


class Disassembler:
    """Resolve raw opcodes into instruction definitions and operand values."""

    def __init__(self, instruction_set: Sequence[InstructionDefinition] = INSTRUCTION_SET) -> None:
        self._instruction_set: Tuple[InstructionDefinition, ...] = tuple(instruction_set)

    @property
    def instruction_set(self) -> Tuple[InstructionDefinition, ...]:
        return self._instruction_set

    def disassemble(self, opcode: int) -> DecodedInstruction:
        opcode &= 0xFFFF
        for definition in self._instruction_set:
            if definition.matches(opcode):
                args = [operand.extract(opcode) for operand in definition.arguments]
                return DecodedInstruction(definition, args)
        return DecodedInstruction(None, [])


def format_instruction(decoded: DecodedInstruction) -> str:
    """Render a decoded instruction in conventional CHIP-8 assembly syntax."""

    instruction = decoded.instruction
    if instruction is None:
        return "???"
    template = _OPERAND_TEMPLATES.get(instruction.id)
    if template is not None:
        return f"{instruction.mnemonic} {template.format(*decoded.args)}"
    parts: List[str] = []
    for operand, value in zip(instruction.arguments, decoded.args):
        if operand.kind == "reg":
            parts.append(f"V{value:X}")
        elif operand.kind == "addr":
            parts.append(f"0x{value:03X}")
        elif operand.kind == "nibble":
            parts.append(f"{value:d}")
        else:
            parts.append(f"0x{value:02X}")
    if not parts:
        return instruction.mnemonic
    return f"{instruction.mnemonic} {', '.join(parts)}"


def disassemble_program(
    data: bytes,
    origin: int,
    disassembler: Optional[Disassembler] = None,
) -> Iterator[Tuple[int, int, str]]:
    """Yield ``(address, opcode, text)`` for each 2-byte word of ``data``."""

    decoder = disassembler or Disassembler()
    for offset in range(0, len(data) - 1, 2):
        opcode = (data[offset] << 8) | data[offset + 1]
        yield origin + offset, opcode, format_instruction(decoder.disassemble(opcode))
    if len(data) % 2:
        yield origin + len(data) - 1, data[-1], f"DB 0x{data[-1]:02X}"


__all__ = [
    "OperandField",
    "InstructionDefinition",
    "DecodedInstruction",
    "INSTRUCTION_SET",
    "Disassembler",
    "format_instruction",
    "disassemble_program",
]
