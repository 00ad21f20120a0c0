"""Exception classes for the arith calculator with detailed context."""

from enum import Enum
from typing import Optional


class ArithError(Exception):
    """
    Base exception for arith errors.

    Besides the core message an error may carry the source position (or
    bytecode offset), what was received and expected, some context, a
    suggested fix and an example of correct usage.  `str(error)` renders each
    field that is set on its own labelled line, message first.
    """

    # Rendering order of the optional detail lines
    _DETAIL_LABELS = (
        ("position", "Position"),
        ("received", "Received"),
        ("expected", "Expected"),
        ("context", "Context"),
        ("suggestion", "Suggestion"),
        ("example", "Example"),
    )

    def __init__(
        self,
        message: str,
        context: Optional[str] = None,
        expected: Optional[str] = None,
        received: Optional[str] = None,
        suggestion: Optional[str] = None,
        example: Optional[str] = None,
        position: Optional[int] = None
    ):
        self.message = message
        self.context = context
        self.expected = expected
        self.received = received
        self.suggestion = suggestion
        self.example = example
        self.position = position

        super().__init__(self._format_detailed_message())

    def _format_detailed_message(self) -> str:
        lines = [f"Error: {self.message}"]
        for attr, label in self._DETAIL_LABELS:
            value = getattr(self, attr)

            # Position 0 is meaningful, empty strings are not
            if value is None or value == "":
                continue

            lines.append(f"{label}: {value}")

        return "\n".join(lines)


class ArithParseError(ArithError):
    """Source text does not match the grammar."""


class ArithTokenError(ArithParseError):
    """Source text contains characters that cannot start a token."""


class ArithCompileError(ArithError):
    """Code generation errors."""


class ArithRuntimeErrorKind(Enum):
    """Discriminant for VM and arithmetic failures."""
    INVALID_OPCODE = "invalid_opcode"
    INVALID_OPERAND = "invalid_operand"
    STACK_OVERFLOW = "stack_overflow"
    STACK_UNDERFLOW = "stack_underflow"
    DIVISION_BY_ZERO = "division_by_zero"


class ArithRuntimeError(ArithError):
    """Execution errors. Subclasses set `kind`."""
    kind: ArithRuntimeErrorKind


class ArithInvalidOpcodeError(ArithRuntimeError):
    """The instruction stream contains a byte that is not a known opcode."""
    kind = ArithRuntimeErrorKind.INVALID_OPCODE


class ArithInvalidOperandError(ArithRuntimeError):
    """An operand is truncated or refers outside the constant pool."""
    kind = ArithRuntimeErrorKind.INVALID_OPERAND


class ArithStackOverflowError(ArithRuntimeError):
    """Push onto a full operand stack."""
    kind = ArithRuntimeErrorKind.STACK_OVERFLOW


class ArithStackUnderflowError(ArithRuntimeError):
    """Pop from an empty operand stack."""
    kind = ArithRuntimeErrorKind.STACK_UNDERFLOW


class ArithDivisionByZeroError(ArithRuntimeError):
    """Integer division by zero."""
    kind = ArithRuntimeErrorKind.DIVISION_BY_ZERO
