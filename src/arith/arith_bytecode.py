"""Bytecode definitions for the arith virtual machine.

Programs are a flat byte stream.  Each instruction is a one-byte opcode tag
followed by a fixed number of operand bytes determined by the opcode alone, so
the stream can be decoded unambiguously from the start.  There are no jumps:
execution is a single linear scan.

    Opcode        Tag   Operand
    OP_CONSTANT   0x01  2-byte big-endian constant pool index
    OP_POP        0x02
    OP_ADD        0x03
    OP_SUB        0x04
    OP_MUL        0x05
    OP_DIV        0x06
    OP_PLUS       0x0A
    OP_MINUS      0x0B
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterator, List, Tuple

from arith.arith_value import ArithValue


MAX_CONSTANT_INDEX = 0xFFFF


def _op(n: int, operand_width: int = 0) -> Tuple[int, int]:
    """Helper to construct an Opcode value: (tag_byte, operand_width_in_bytes)."""
    return (n, operand_width)


class Opcode(IntEnum):
    """Bytecode operation codes.

    Each member's value is a (tag_byte, operand_width) tuple.  The integer value
    is the tag byte written to the stream; `operand_width` is the number of
    operand bytes that follow it.
    """

    _operand_width: int  # Set in __new__; declared here so mypy knows the attribute exists

    def __new__(cls, int_value: int, operand_width: int = 0) -> 'Opcode':
        obj = int.__new__(cls, int_value)
        obj._value_ = int_value
        obj._operand_width = operand_width
        return obj

    @property
    def operand_width(self) -> int:
        """Number of operand bytes following the tag (0 or 2)."""
        return self._operand_width

    @property
    def size(self) -> int:
        """Total encoded size of an instruction with this opcode."""
        return 1 + self._operand_width

    OP_CONSTANT = _op(0x01, 2)          # OP_CONSTANT const_index
    OP_POP = _op(0x02)                  # Pop and discard top of stack
    OP_ADD = _op(0x03)                  # lhs + rhs
    OP_SUB = _op(0x04)                  # lhs - rhs
    OP_MUL = _op(0x05)                  # lhs * rhs
    OP_DIV = _op(0x06)                  # lhs / rhs
    OP_PLUS = _op(0x0A)                 # Unary plus (identity)
    OP_MINUS = _op(0x0B)                # Unary minus (negate)


def lookup_opcode(tag: int) -> Opcode | None:
    """Return the opcode for a tag byte, or None if the byte is not an opcode."""
    try:
        return Opcode(tag)

    except ValueError:
        return None


def make_op(opcode: Opcode, operand: int = 0) -> bytes:
    """
    Encode a single instruction.

    Args:
        opcode: Operation to encode
        operand: Operand value for opcodes that take one

    Returns:
        The encoded bytes: tag followed by big-endian operand bytes
    """
    if opcode.operand_width == 0:
        return bytes([opcode])

    if not 0 <= operand <= MAX_CONSTANT_INDEX:
        raise ValueError(f"Operand {operand} does not fit in {opcode.operand_width} bytes")

    return bytes([opcode]) + operand.to_bytes(opcode.operand_width, "big")


@dataclass
class Instruction:
    """A decoded instruction, used for debugging, validation and tracing."""
    offset: int
    opcode: Opcode
    operand: int = 0

    def __repr__(self) -> str:
        """Human-readable representation."""
        if self.opcode.operand_width == 0:
            return f"{self.opcode.name}"

        return f"{self.opcode.name} {self.operand}"


class TruncatedInstructionError(ValueError):
    """Raised by `decode_instructions` when an operand runs past the end of the stream."""

    def __init__(self, offset: int, opcode: Opcode):
        self.offset = offset
        self.opcode = opcode
        super().__init__(f"Truncated {opcode.name} operand at offset {offset}")


class UnknownOpcodeError(ValueError):
    """Raised by `decode_instructions` when a tag byte is not an opcode."""

    def __init__(self, offset: int, tag: int):
        self.offset = offset
        self.tag = tag
        super().__init__(f"Unknown opcode 0x{tag:02X} at offset {offset}")


def decode_instructions(instructions: bytes) -> Iterator[Instruction]:
    """
    Decode a byte stream into instructions.

    Raises:
        UnknownOpcodeError: If a tag byte is not a known opcode
        TruncatedInstructionError: If an operand extends past the end of the stream
    """
    ip = 0
    length = len(instructions)
    while ip < length:
        tag = instructions[ip]
        opcode = lookup_opcode(tag)
        if opcode is None:
            raise UnknownOpcodeError(ip, tag)

        end = ip + opcode.size
        if end > length:
            raise TruncatedInstructionError(ip, opcode)

        operand = int.from_bytes(instructions[ip + 1:end], "big") if opcode.operand_width else 0
        yield Instruction(ip, opcode, operand)
        ip = end


@dataclass
class ArithBytecodeProgram:
    """Compiled program: an instruction byte stream and its constant pool.

    Every OP_CONSTANT operand produced by the compiler is a valid index into
    `constants`.  Programs are not mutated by execution and may be run again.
    """

    # Encoded instruction stream
    instructions: bytes = b""

    # Constant pool (for OP_CONSTANT)
    constants: List[ArithValue] = field(default_factory=list)

    def decode(self) -> List[Instruction]:
        """Return the decoded instruction list."""
        return list(decode_instructions(self.instructions))

    def __repr__(self) -> str:
        """Human-readable representation."""
        lines = ["ArithBytecodeProgram"]
        lines.append(f"  Constants: {len(self.constants)}")
        lines.append(f"  Bytes: {len(self.instructions)}")
        return "\n".join(lines)

    def disassemble(self) -> str:
        """Return annotated disassembly for debugging."""
        lines = ["Constants:"]
        if not self.constants:
            lines.append("  (none)")

        for i, const in enumerate(self.constants):
            lines.append(f"  {i:5d}: {const!r}")

        lines.append("Instructions:")
        for instr in self.decode():
            annotation = ""
            if instr.opcode == Opcode.OP_CONSTANT:
                if instr.operand < len(self.constants):
                    annotation = f"  ; Load constant: {self.constants[instr.operand].describe()}"

                else:
                    annotation = "  ; Constant index out of range"

            elif instr.opcode == Opcode.OP_POP:
                annotation = "  ; End of statement"

            lines.append(f"  {instr.offset:04d}: {instr!r}{annotation}")

        return "\n".join(lines)
