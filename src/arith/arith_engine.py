"""Execution engines behind the arith entry point.

Every engine implements `compile_and_run(source) -> ArithValue`.  The engine is
chosen once, when an `Arith` instance is configured, not per call.
"""

from abc import ABC, abstractmethod
import logging
from typing import List, Optional, Sequence

from arith.arith_ast import ArithASTNode
from arith.arith_bytecode import ArithBytecodeProgram
from arith.arith_compiler import ArithCompiler
from arith.arith_config import ArithConfig, ArithEngineType
from arith.arith_evaluator import ArithEvaluator
from arith.arith_lexer import ArithLexer
from arith.arith_parser import ArithParser
from arith.arith_value import ArithValue
from arith.arith_vm import ArithVM, ArithTraceWatcher


class ArithEngine(ABC):
    """Base class for execution engines: parse source, then run the statements."""

    def __init__(self, max_depth: int = 256) -> None:
        self.max_depth = max_depth
        self._lexer = ArithLexer()

    def parse(self, source: str) -> List[ArithASTNode]:
        """
        Parse source text into AST statements.

        Raises:
            ArithParseError: If the source is malformed
        """
        tokens = self._lexer.lex(source)
        return ArithParser(tokens, source, self.max_depth).parse()

    @abstractmethod
    def run(self, statements: Sequence[ArithASTNode]) -> ArithValue:
        """Run parsed statements and return the program's result."""

    def compile_and_run(self, source: str) -> ArithValue:
        """
        Parse and run source text.

        Raises:
            ArithParseError: If the source is malformed
            ArithCompileError: If code generation fails
            ArithRuntimeError: If execution fails
        """
        return self.run(self.parse(source))


class ArithInterpreterEngine(ArithEngine):
    """Engine that walks the AST directly."""

    def __init__(self, max_depth: int = 256) -> None:
        super().__init__(max_depth)
        self._evaluator = ArithEvaluator()

    def run(self, statements: Sequence[ArithASTNode]) -> ArithValue:
        return self._evaluator.evaluate(statements)


class ArithVMEngine(ArithEngine):
    """Engine that compiles to bytecode and executes on a fresh VM per run."""

    def __init__(
        self,
        max_depth: int = 256,
        stack_size: int = 512,
        validate: bool = False,
        trace_watcher: Optional[ArithTraceWatcher] = None
    ) -> None:
        super().__init__(max_depth)
        self.stack_size = stack_size
        self.validate = validate
        self.trace_watcher = trace_watcher
        self._compiler = ArithCompiler()

    def compile(self, statements: Sequence[ArithASTNode]) -> ArithBytecodeProgram:
        """Compile statements to a bytecode program."""
        return self._compiler.compile(statements)

    def execute(self, program: ArithBytecodeProgram) -> ArithValue:
        """Execute a compiled program on a new VM instance."""
        vm = ArithVM(self.stack_size, self.validate)
        vm.set_trace_watcher(self.trace_watcher)
        return vm.execute(program)

    def run(self, statements: Sequence[ArithASTNode]) -> ArithValue:
        return self.execute(self.compile(statements))


def create_engine(config: ArithConfig, trace_watcher: Optional[ArithTraceWatcher] = None) -> ArithEngine:
    """
    Build the engine selected by a configuration.

    Args:
        config: Configuration naming the engine and its limits
        trace_watcher: Optional watcher for VM instruction traces (ignored by the interpreter)

    Returns:
        The configured engine
    """
    logger = logging.getLogger("ArithEngine")
    logger.debug("creating %s engine", config.engine.value)

    if config.engine == ArithEngineType.INTERPRETER:
        if trace_watcher is not None:
            logger.warning("trace watcher ignored: the interpreter engine does not execute bytecode")

        return ArithInterpreterEngine(config.max_depth)

    return ArithVMEngine(config.max_depth, config.stack_size, config.validate_bytecode, trace_watcher)
