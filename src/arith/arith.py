"""Main Arith class: the single entry point for evaluating calculator source."""

from typing import List, Optional

from arith.arith_ast import ArithASTNode
from arith.arith_bytecode import ArithBytecodeProgram
from arith.arith_compiler import ArithCompiler
from arith.arith_config import ArithConfig
from arith.arith_engine import ArithEngine, create_engine
from arith.arith_value import ArithValue
from arith.arith_vm import ArithTraceWatcher


class Arith:
    """
    Arithmetic expression calculator.

    Evaluates integer and floating point expressions with unary `+`/`-`, binary
    `+ - * /` and parentheses.  Operator chains fold strictly left to right:
    `2 + 2 * 3` is `12`.

    The execution strategy (tree-walking interpreter or bytecode VM) is fixed by
    the configuration; both produce identical results.
    """

    def __init__(self, config: Optional[ArithConfig] = None, trace_watcher: Optional[ArithTraceWatcher] = None):
        """
        Initialize the calculator.

        Args:
            config: Engine selection and limits; defaults to the VM engine
            trace_watcher: Optional watcher receiving one line per VM instruction
        """
        self.config = config if config is not None else ArithConfig()
        self.engine: ArithEngine = create_engine(self.config, trace_watcher)

    def parse(self, source: str) -> List[ArithASTNode]:
        """
        Parse source text into AST statements.

        Raises:
            ArithParseError: If parsing fails
        """
        return self.engine.parse(source)

    def compile(self, source: str) -> ArithBytecodeProgram:
        """
        Parse and compile source text to bytecode, whatever engine is configured.

        Raises:
            ArithParseError: If parsing fails
            ArithCompileError: If code generation fails
        """
        return ArithCompiler().compile(self.parse(source))

    def evaluate(self, source: str) -> ArithValue:
        """
        Evaluate source text.

        Args:
            source: One or more expressions; the last one's value is returned

        Returns:
            The resulting value

        Raises:
            ArithParseError: If parsing fails
            ArithCompileError: If code generation fails
            ArithRuntimeError: If execution fails
        """
        return self.engine.compile_and_run(source)

    def evaluate_and_format(self, source: str) -> str:
        """
        Evaluate source text and return the debug representation of the result.

        Returns:
            e.g. `Int(27)` or `Float(8.5)`

        Raises:
            ArithParseError: If parsing fails
            ArithCompileError: If code generation fails
            ArithRuntimeError: If execution fails
        """
        return repr(self.evaluate(source))
