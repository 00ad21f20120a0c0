"""
Bytecode validator for the arith virtual machine.

This validator performs a static linear pass over a program before execution.
Because the instruction set has no jumps, one pass sees every instruction that
can execute, in execution order.

The validator checks:
- Every tag byte is a known opcode
- No operand runs past the end of the stream
- Every constant index is inside the constant pool
- Simulated stack depth never drops below zero or exceeds the VM capacity
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from arith.arith_bytecode import (
    ArithBytecodeProgram, Opcode, TruncatedInstructionError, UnknownOpcodeError, decode_instructions
)


class ValidationErrorType(Enum):
    """Types of validation errors."""
    INVALID_OPCODE = "invalid_opcode"
    TRUNCATED_OPERAND = "truncated_operand"
    INDEX_OUT_OF_BOUNDS = "index_out_of_bounds"
    STACK_UNDERFLOW = "stack_underflow"
    STACK_OVERFLOW = "stack_overflow"


@dataclass
class ValidationError(Exception):
    """Bytecode validation error with detailed context."""
    error_type: ValidationErrorType
    message: str
    offset: Optional[int] = None
    opcode: Optional[Opcode] = None
    context: Optional[str] = None

    def __str__(self) -> str:
        parts = [f"Bytecode validation error: {self.message}"]
        if self.offset is not None:
            parts.append(f"  at offset {self.offset}")

        if self.opcode is not None:
            parts.append(f"  opcode: {self.opcode.name}")

        if self.context:
            parts.append(f"  context: {self.context}")

        return "\n".join(parts)


# Stack effect: (pop_count, push_count)
STACK_EFFECTS: Dict[Opcode, Tuple[int, int]] = {
    Opcode.OP_CONSTANT: (0, 1),
    Opcode.OP_POP: (1, 0),
    Opcode.OP_ADD: (2, 1),
    Opcode.OP_SUB: (2, 1),
    Opcode.OP_MUL: (2, 1),
    Opcode.OP_DIV: (2, 1),
    Opcode.OP_PLUS: (1, 1),
    Opcode.OP_MINUS: (1, 1),
}


class ArithBytecodeValidator:
    """
    Validates arith bytecode for correctness and safety.

    A program that passes validation cannot raise invalid opcode, invalid
    operand, stack overflow or stack underflow errors in a VM with at least
    `stack_size` slots.  Division by zero is data-dependent and is not checked.
    """

    def __init__(self, stack_size: int = 512) -> None:
        """
        Initialize validator.

        Args:
            stack_size: Operand stack capacity of the VM that will run the program
        """
        self.stack_size = stack_size

    def validate(self, program: ArithBytecodeProgram) -> int:
        """
        Validate a program.

        Args:
            program: Program to validate

        Returns:
            The maximum stack depth the program reaches

        Raises:
            ValidationError: If the bytecode is invalid
        """
        depth = 0
        max_depth = 0

        try:
            for instr in decode_instructions(program.instructions):
                opcode = instr.opcode

                if opcode == Opcode.OP_CONSTANT and instr.operand >= len(program.constants):
                    raise ValidationError(
                        ValidationErrorType.INDEX_OUT_OF_BOUNDS,
                        f"Constant index {instr.operand} out of bounds (pool size: {len(program.constants)})",
                        offset=instr.offset,
                        opcode=opcode
                    )

                pops, pushes = STACK_EFFECTS[opcode]
                if depth < pops:
                    raise ValidationError(
                        ValidationErrorType.STACK_UNDERFLOW,
                        f"{opcode.name} needs {pops} value(s) but the stack holds {depth}",
                        offset=instr.offset,
                        opcode=opcode
                    )

                depth = depth - pops + pushes
                if depth > self.stack_size:
                    raise ValidationError(
                        ValidationErrorType.STACK_OVERFLOW,
                        f"Stack depth {depth} exceeds capacity {self.stack_size}",
                        offset=instr.offset,
                        opcode=opcode
                    )

                max_depth = max(max_depth, depth)

        except UnknownOpcodeError as e:
            raise ValidationError(
                ValidationErrorType.INVALID_OPCODE,
                f"Unknown opcode 0x{e.tag:02X}",
                offset=e.offset
            ) from e

        except TruncatedInstructionError as e:
            raise ValidationError(
                ValidationErrorType.TRUNCATED_OPERAND,
                f"{e.opcode.name} operand runs past the end of the stream",
                offset=e.offset,
                opcode=e.opcode,
                context=f"Stream length: {len(program.instructions)}"
            ) from e

        if depth == self.stack_size:
            raise ValidationError(
                ValidationErrorType.STACK_OVERFLOW,
                "Program ends with a full stack, leaving no popped result slot",
                context=f"Capacity: {self.stack_size}"
            )

        return max_depth


def validate_bytecode(program: ArithBytecodeProgram, stack_size: int = 512) -> int:
    """
    Convenience function to validate a program.

    Args:
        program: Program to validate
        stack_size: Operand stack capacity of the target VM

    Returns:
        The maximum stack depth the program reaches

    Raises:
        ValidationError: If the bytecode is invalid
    """
    validator = ArithBytecodeValidator(stack_size)
    return validator.validate(program)
