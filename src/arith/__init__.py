"""Arith arithmetic expression calculator package."""

# Main API
from arith.arith import Arith
from arith.arith_config import ArithConfig, ArithEngineType

# Exceptions (for error handling)
from arith.arith_error import (
    ArithError, ArithTokenError, ArithParseError, ArithCompileError, ArithRuntimeError,
    ArithRuntimeErrorKind, ArithInvalidOpcodeError, ArithInvalidOperandError,
    ArithStackOverflowError, ArithStackUnderflowError, ArithDivisionByZeroError
)

# Value types
from arith.arith_value import ArithValue, ArithValueKind, ArithInteger, ArithFloat

# Lower-level components (for advanced usage)
from arith.arith_ast import (
    ArithOperator, ArithASTNode, ArithASTInteger, ArithASTFloat, ArithASTUnary, ArithASTBinary
)
from arith.arith_bytecode import ArithBytecodeProgram, Opcode
from arith.arith_compiler import ArithCompiler
from arith.arith_engine import ArithEngine, ArithInterpreterEngine, ArithVMEngine
from arith.arith_evaluator import ArithEvaluator
from arith.arith_lexer import ArithLexer
from arith.arith_parser import ArithParser
from arith.arith_vm import ArithVM


__all__ = [
    # Main API
    "Arith", "ArithConfig", "ArithEngineType",

    # Exceptions
    "ArithError", "ArithTokenError", "ArithParseError", "ArithCompileError", "ArithRuntimeError",
    "ArithRuntimeErrorKind", "ArithInvalidOpcodeError", "ArithInvalidOperandError",
    "ArithStackOverflowError", "ArithStackUnderflowError", "ArithDivisionByZeroError",

    # Value types
    "ArithValue", "ArithValueKind", "ArithInteger", "ArithFloat",

    # Lower-level components
    "ArithOperator", "ArithASTNode", "ArithASTInteger", "ArithASTFloat", "ArithASTUnary", "ArithASTBinary",
    "ArithBytecodeProgram", "Opcode", "ArithCompiler", "ArithEngine", "ArithInterpreterEngine",
    "ArithVMEngine", "ArithEvaluator", "ArithLexer", "ArithParser", "ArithVM",
]
