"""Arith Virtual Machine - executes bytecode."""

import logging
from typing import Any, List, Optional, Protocol

from arith.arith_bytecode import ArithBytecodeProgram, Opcode
from arith.arith_bytecode_validator import validate_bytecode
from arith.arith_error import ArithInvalidOpcodeError, ArithInvalidOperandError
from arith.arith_operand_stack import ArithOperandStack
from arith.arith_value import ArithValue, ADD, SUB, MUL, DIV, apply_binary, negate


class ArithTraceWatcher(Protocol):
    """Protocol for arith trace watchers."""
    def on_trace(self, message: str) -> None:
        """
        Called after each instruction executes.

        Args:
            message: Offset, instruction and the resulting stack, as one line of text
        """


class ArithVM:
    """
    Virtual machine for executing arith bytecode.

    Uses a bounded operand stack.  The result of a run is the last value
    popped, which for compiled programs is the value of the final statement.
    """

    def __init__(self, stack_size: int = 512, validate: bool = False) -> None:
        """
        Initialize the VM.

        Args:
            stack_size: Operand stack capacity
            validate: Whether to validate bytecode statically before execution
        """
        if stack_size < 1:
            raise ValueError(f"Stack size must be at least 1, got {stack_size}")

        self.stack_size = stack_size
        self.validate_bytecode = validate
        self.stack = ArithOperandStack(stack_size)
        self.program = ArithBytecodeProgram()
        self.ip = 0

        # Trace watcher for debugging support
        self.trace_watcher: Optional[ArithTraceWatcher] = None

        self._logger = logging.getLogger("ArithVM")
        self._dispatch_table = self._build_dispatch_table()

    def set_trace_watcher(self, watcher: Optional[ArithTraceWatcher]) -> None:
        """
        Set the trace watcher (replaces any existing watcher).

        Args:
            watcher: ArithTraceWatcher instance or None to disable tracing
        """
        self.trace_watcher = watcher

    def _build_dispatch_table(self) -> List[Any]:
        """Build jump table for opcode dispatch, indexed by tag byte."""
        table: List[Any] = [None] * 256
        table[Opcode.OP_CONSTANT] = self._op_constant
        table[Opcode.OP_POP] = self._op_pop
        table[Opcode.OP_ADD] = self._op_add
        table[Opcode.OP_SUB] = self._op_sub
        table[Opcode.OP_MUL] = self._op_mul
        table[Opcode.OP_DIV] = self._op_div
        table[Opcode.OP_PLUS] = self._op_plus
        table[Opcode.OP_MINUS] = self._op_minus
        return table

    def execute(self, program: ArithBytecodeProgram) -> ArithValue:
        """
        Execute a program and return the last popped value.

        The operand stack is allocated fresh for each run, so a program may be
        executed repeatedly and a failed run leaves nothing behind.

        Args:
            program: Compiled program to execute

        Returns:
            The value in the stack slot at the stack pointer after the run

        Raises:
            ValidationError: If validation is enabled and the program is malformed
            ArithRuntimeError: If execution fails
        """
        if self.validate_bytecode:
            validate_bytecode(program, self.stack_size)

        self.program = program
        self.stack = ArithOperandStack(self.stack_size)
        self.ip = 0

        instructions = program.instructions
        length = len(instructions)
        dispatch = self._dispatch_table
        self._logger.debug("executing %d byte(s), %d constant(s)", length, len(program.constants))

        while self.ip < length:
            offset = self.ip
            tag = instructions[offset]
            handler = dispatch[tag]
            if handler is None:
                raise ArithInvalidOpcodeError(
                    message=f"Invalid opcode: 0x{tag:02X}",
                    position=offset,
                    context=f"Instruction stream length: {length}"
                )

            opcode = Opcode(tag)
            end = offset + opcode.size
            if end > length:
                raise ArithInvalidOperandError(
                    message=f"Truncated {opcode.name} operand",
                    position=offset,
                    expected=f"{opcode.operand_width} operand byte(s)",
                    received=f"{length - offset - 1} byte(s) before end of stream"
                )

            operand = int.from_bytes(instructions[offset + 1:end], "big") if opcode.operand_width else 0
            self.ip = end
            handler(operand)

            if self.trace_watcher is not None:
                self._emit_trace(offset, opcode, operand)

        return self.stack.last_popped()

    def _emit_trace(self, offset: int, opcode: Opcode, operand: int) -> None:
        """Report one executed instruction to the watcher."""
        assert self.trace_watcher is not None
        instr = opcode.name if opcode.operand_width == 0 else f"{opcode.name} {operand}"
        stack = ", ".join(repr(v) for v in self.stack.values())
        self.trace_watcher.on_trace(f"{offset:04d} {instr} [{stack}]")

    def _op_constant(self, index: int) -> None:
        """OP_CONSTANT: Push constant from pool onto stack."""
        constants = self.program.constants
        if index >= len(constants):
            raise ArithInvalidOperandError(
                message=f"Constant index {index} out of range",
                position=self.ip - Opcode.OP_CONSTANT.size,
                expected=f"Index below {len(constants)}",
                context="The constant pool is smaller than the instruction stream expects"
            )

        self.stack.push(constants[index])

    def _op_pop(self, _operand: int) -> None:
        """OP_POP: Pop and discard top of stack."""
        self.stack.pop()

    def _op_add(self, _operand: int) -> None:
        """OP_ADD: Pop rhs, pop lhs, push lhs + rhs."""
        rhs = self.stack.pop()
        lhs = self.stack.pop()
        self.stack.push(apply_binary(ADD, lhs, rhs))

    def _op_sub(self, _operand: int) -> None:
        """OP_SUB: Pop rhs, pop lhs, push lhs - rhs."""
        rhs = self.stack.pop()
        lhs = self.stack.pop()
        self.stack.push(apply_binary(SUB, lhs, rhs))

    def _op_mul(self, _operand: int) -> None:
        """OP_MUL: Pop rhs, pop lhs, push lhs * rhs."""
        rhs = self.stack.pop()
        lhs = self.stack.pop()
        self.stack.push(apply_binary(MUL, lhs, rhs))

    def _op_div(self, _operand: int) -> None:
        """OP_DIV: Pop rhs, pop lhs, push lhs / rhs."""
        rhs = self.stack.pop()
        lhs = self.stack.pop()
        self.stack.push(apply_binary(DIV, lhs, rhs))

    def _op_plus(self, _operand: int) -> None:
        """OP_PLUS: Unary plus leaves the value unchanged."""
        self.stack.push(self.stack.pop())

    def _op_minus(self, _operand: int) -> None:
        """OP_MINUS: Negate top of stack."""
        self.stack.push(negate(self.stack.pop()))
