"""Arith bytecode compiler - lowers AST statements to an instruction stream."""

from dataclasses import dataclass, field
import logging
from typing import List, Sequence

from arith.arith_ast import (
    ArithASTNode, ArithASTLiteral, ArithASTUnary, ArithASTBinary, ArithOperator
)
from arith.arith_bytecode import ArithBytecodeProgram, Opcode, make_op, MAX_CONSTANT_INDEX
from arith.arith_error import ArithCompileError
from arith.arith_value import ArithValue


_BINARY_OPCODES = {
    ArithOperator.PLUS: Opcode.OP_ADD,
    ArithOperator.MINUS: Opcode.OP_SUB,
    ArithOperator.MULTIPLY: Opcode.OP_MUL,
    ArithOperator.DIVIDE: Opcode.OP_DIV,
}

_UNARY_OPCODES = {
    ArithOperator.PLUS: Opcode.OP_PLUS,
    ArithOperator.MINUS: Opcode.OP_MINUS,
}


@dataclass
class CompilationContext:
    """Instruction buffer and constant pool for one compile call."""
    instructions: bytearray = field(default_factory=bytearray)
    constants: List[ArithValue] = field(default_factory=list)

    def add_constant(self, value: ArithValue) -> int:
        """
        Append a constant and return its index.

        Constants are not deduplicated: each literal occurrence gets its own slot.
        """
        index = len(self.constants)
        if index > MAX_CONSTANT_INDEX:
            raise ArithCompileError(
                message=f"Too many constants (limit {MAX_CONSTANT_INDEX + 1})",
                context="OP_CONSTANT addresses the pool with a 2-byte operand",
                suggestion="Split the program into smaller programs"
            )

        self.constants.append(value)
        return index

    def emit(self, opcode: Opcode, operand: int = 0) -> None:
        """Append an encoded instruction."""
        self.instructions.extend(make_op(opcode, operand))


class ArithCompiler:
    """
    Compiles AST statements to bytecode.

    Each statement is emitted in post-order (operands before their operator)
    and followed by OP_POP, leaving the stack empty between statements.
    """

    def __init__(self) -> None:
        self._logger = logging.getLogger("ArithCompiler")

    def compile(self, statements: Sequence[ArithASTNode]) -> ArithBytecodeProgram:
        """
        Compile statements to a bytecode program.

        Args:
            statements: Top-level AST roots in evaluation order

        Returns:
            The compiled program

        Raises:
            ArithCompileError: If the constant pool would overflow its operand width
        """
        ctx = CompilationContext()
        for statement in statements:
            self._compile_node(statement, ctx)
            ctx.emit(Opcode.OP_POP)

        self._logger.debug(
            "compiled %d statement(s) to %d byte(s), %d constant(s)",
            len(statements), len(ctx.instructions), len(ctx.constants)
        )
        return ArithBytecodeProgram(bytes(ctx.instructions), ctx.constants)

    def _compile_node(self, root: ArithASTNode, ctx: CompilationContext) -> None:
        """Emit instructions for one tree."""
        for node in root.iter_postorder():
            if isinstance(node, ArithASTLiteral):
                index = ctx.add_constant(node.to_runtime_value())
                ctx.emit(Opcode.OP_CONSTANT, index)

            elif isinstance(node, ArithASTUnary):
                ctx.emit(_UNARY_OPCODES[node.op])

            elif isinstance(node, ArithASTBinary):
                ctx.emit(_BINARY_OPCODES[node.op])

            else:
                raise ArithCompileError(
                    message=f"Cannot compile node type: {type(node).__name__}",
                    position=node.position,
                    suggestion="This is an internal error - please report this issue"
                )
