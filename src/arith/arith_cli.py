"""
Arith command-line front ends.

Usage:
    python -m arith <file>           Evaluate a whole file and print the result
    python -m arith                  Start the interactive REPL

Options:
    --engine {interpreter,vm}   Execution engine (default: vm)
    --stack-size N              VM operand stack capacity (default: 512)
    --max-depth N               Maximum parenthesis nesting (default: 256)
    --validate                  Validate bytecode before running it
    --trace                     Print each executed VM instruction
    --disassemble               Print the compiled bytecode before running it
    --verbose                   Log at DEBUG level
    --log-file PATH             Write log records to a rotating log file
"""

import argparse
import logging
from logging.handlers import RotatingFileHandler
import sys
from typing import Callable, List, Optional, TextIO

from arith.arith import Arith
from arith.arith_bytecode_validator import ValidationError
from arith.arith_config import ArithConfig, ArithEngineType
from arith.arith_error import ArithError
from arith.arith_trace import ArithStdoutTraceWatcher


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(verbose: bool, log_file: Optional[str]) -> None:
    """Configure logging for the command-line tools."""
    handlers: List[logging.Handler] = []
    if log_file:
        # Keep up to 6 log files, max 1MB each
        handlers.append(RotatingFileHandler(log_file, maxBytes=1024*1024, backupCount=5, encoding='utf-8'))

    else:
        handlers.append(logging.StreamHandler(sys.stderr))

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        handlers=handlers
    )


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="arith",
        description="Evaluate arithmetic expressions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Evaluate a file with the bytecode VM
  python -m arith examples/sample.calc

  # Evaluate with the tree-walking interpreter
  python -m arith examples/sample.calc --engine interpreter

  # Show the bytecode and an instruction trace
  python -m arith examples/sample.calc --disassemble --trace

  # Interactive session
  python -m arith
        """
    )

    parser.add_argument(
        'file',
        nargs='?',
        help='Source file to evaluate (omit to start the REPL)'
    )

    parser.add_argument(
        '--engine',
        choices=[e.value for e in ArithEngineType],
        default=ArithEngineType.VM.value,
        help='Execution engine (default: vm)'
    )

    parser.add_argument(
        '--stack-size',
        type=int,
        default=512,
        help='VM operand stack capacity (default: 512)'
    )

    parser.add_argument(
        '--max-depth',
        type=int,
        default=256,
        help='Maximum parenthesis nesting depth (default: 256)'
    )

    parser.add_argument(
        '--validate',
        action='store_true',
        help='Validate bytecode before running it'
    )

    parser.add_argument(
        '--trace',
        action='store_true',
        help='Print each executed VM instruction'
    )

    parser.add_argument(
        '--disassemble',
        action='store_true',
        help='Print the compiled bytecode before running it'
    )

    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Log at DEBUG level'
    )

    parser.add_argument(
        '--log-file',
        help='Write log records to a rotating log file'
    )

    return parser.parse_args(argv)


class ArithRunner:
    """
    Front-end application.

    Coordinates:
    - Building the configured calculator
    - Evaluating a file once, or lines interactively
    - Reporting results and errors
    """

    def __init__(self, args: argparse.Namespace, out: Optional[TextIO] = None) -> None:
        self.args = args
        self.out = out
        self._logger = logging.getLogger("ArithRunner")

        config = ArithConfig(
            engine=ArithEngineType(args.engine),
            stack_size=args.stack_size,
            max_depth=args.max_depth,
            validate_bytecode=args.validate
        )
        watcher = ArithStdoutTraceWatcher(out) if args.trace else None
        self.arith = Arith(config, watcher)

    def _print(self, text: str) -> None:
        print(text, file=self.out)

    def _evaluate(self, source: str) -> str:
        """Evaluate source and return the debug representation of the result."""
        if self.args.disassemble:
            self._print(self.arith.compile(source).disassemble())

        return self.arith.evaluate_and_format(source)

    def run_file(self, path: str) -> int:
        """
        Evaluate a whole file.

        Returns:
            Exit code: 0 on success, 1 on evaluation error, 2 if the file cannot be read
        """
        try:
            with open(path, 'r', encoding='utf-8') as f:
                source = f.read()

        except OSError as e:
            self._print(f"Error: cannot read {path}: {e.strerror}")
            return 2

        except UnicodeDecodeError as e:
            self._print(f"Error: cannot read {path}: not valid UTF-8 text (byte offset {e.start})")
            return 2

        try:
            self._print(self._evaluate(source))

        except (ArithError, ValidationError) as e:
            self._logger.warning("evaluation of %s failed: %s", path, e)
            self._print(str(e))
            return 1

        return 0

    def run_repl(self, read_line: Optional[Callable[[str], str]] = None) -> int:
        """
        Read, evaluate and print lines until interrupted.

        Errors are printed and the loop continues.

        Returns:
            Exit code (always 0)
        """
        if read_line is None:
            read_line = input

        while True:
            try:
                line = read_line(">> ")

            except KeyboardInterrupt:
                self._print("CTRL-C")
                break

            except EOFError:
                self._print("CTRL-D")
                break

            if not line.strip():
                continue

            try:
                self._print(self._evaluate(line))

            except (ArithError, ValidationError) as e:
                self._print(str(e))

        return 0

    def run(self) -> int:
        """Run in file mode if a file was given, otherwise start the REPL."""
        if self.args.file:
            return self.run_file(self.args.file)

        return self.run_repl()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_arguments(argv)
    setup_logging(args.verbose, args.log_file)

    try:
        runner = ArithRunner(args)

    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    return runner.run()


if __name__ == "__main__":
    sys.exit(main())
