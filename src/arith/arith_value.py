"""Arith value hierarchy - immutable numeric primitives and their arithmetic.

A value is a tagged union of a 32-bit signed integer and a 64-bit float.
Arithmetic never mutates an operand; every operation builds a new value.

Mixed-kind promotion is not left to Python's operator overloading.  Each binary
operation is dispatched through `_KIND_DISPATCH`, a table keyed by the
(lhs kind, rhs kind) pair, so the promotion rules can be read in one place:

    Int   op Int   -> Int   (32-bit wrapping, truncating division)
    Int   op Float -> Float (Int widened to float first)
    Float op Int   -> Float (Int widened to float first)
    Float op Float -> Float (IEEE-754, division by zero gives inf or nan)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
import math
from typing import Callable, Dict, Tuple

from arith.arith_error import ArithDivisionByZeroError


INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1


def wrap_int32(value: int) -> int:
    """Wrap a Python integer to 32-bit two's complement."""
    value &= 0xFFFFFFFF
    if value > INT32_MAX:
        value -= 2 ** 32

    return value


class ArithValueKind(Enum):
    """Tag for the primitive union."""
    INT = "Int"
    FLOAT = "Float"


@dataclass(frozen=True)
class ArithValue(ABC):
    """
    Abstract base class for arith runtime values.

    All values are immutable.
    """

    @property
    @abstractmethod
    def kind(self) -> ArithValueKind:
        """Return the tag for this value."""

    @abstractmethod
    def to_python(self) -> int | float:
        """Convert to a Python number."""

    @abstractmethod
    def describe(self) -> str:
        """Describe the value as literal text."""


@dataclass(frozen=True)
class ArithInteger(ArithValue):
    """32-bit signed integer value."""
    value: int

    def __post_init__(self) -> None:
        if not INT32_MIN <= self.value <= INT32_MAX:
            raise ValueError(f"Integer value {self.value} does not fit in 32 bits")

    @property
    def kind(self) -> ArithValueKind:
        return ArithValueKind.INT

    def to_python(self) -> int:
        return self.value

    def describe(self) -> str:
        return str(self.value)

    def __repr__(self) -> str:
        return f"Int({self.value})"


@dataclass(frozen=True)
class ArithFloat(ArithValue):
    """64-bit floating point value."""
    value: float

    @property
    def kind(self) -> ArithValueKind:
        return ArithValueKind.FLOAT

    def to_python(self) -> float:
        return self.value

    def describe(self) -> str:
        """
        Render as a decimal literal: `2.5`, `10000000000000000.0`, never exponent form.

        Non-finite values (only reachable through overflow or division) render as
        Python does: `inf`, `-inf`, `nan`.
        """
        if not math.isfinite(self.value):
            return repr(self.value)

        text = format(Decimal(repr(self.value)), "f")
        return text if "." in text else f"{text}.0"

    def __eq__(self, other: object) -> bool:
        """Compare float values; nan compares equal to nan so results stay comparable."""
        if not isinstance(other, ArithFloat):
            return False

        if math.isnan(self.value) and math.isnan(other.value):
            return True

        return self.value == other.value

    def __hash__(self) -> int:
        # All nans are equal, so they must share a hash
        if math.isnan(self.value):
            return 0

        return hash(self.value)

    def __repr__(self) -> str:
        return f"Float({self.value!r})"


def _int_div(lhs: int, rhs: int) -> int:
    """Integer division truncating toward zero."""
    if rhs == 0:
        raise ArithDivisionByZeroError(
            message="Integer division by zero",
            received=f"{lhs} / {rhs}",
            suggestion="Use a float operand (e.g. 1.0 / 0) to get IEEE-754 infinity instead",
            example="8 / 2 → 4"
        )

    quotient = abs(lhs) // abs(rhs)
    return quotient if (lhs < 0) == (rhs < 0) else -quotient


def _float_div(lhs: float, rhs: float) -> float:
    """IEEE-754 division; Python raises where IEEE produces inf or nan."""
    if rhs == 0.0:
        if lhs == 0.0 or math.isnan(lhs):
            return math.nan

        return math.copysign(math.inf, lhs) * math.copysign(1.0, rhs)

    return lhs / rhs


@dataclass(frozen=True)
class ArithBinaryOperation:
    """A binary arithmetic operation with its integer and float implementations."""
    name: str
    symbol: str
    int_impl: Callable[[int, int], int]
    float_impl: Callable[[float, float], float]


ADD = ArithBinaryOperation("add", "+", lambda a, b: a + b, lambda a, b: a + b)
SUB = ArithBinaryOperation("sub", "-", lambda a, b: a - b, lambda a, b: a - b)
MUL = ArithBinaryOperation("mul", "*", lambda a, b: a * b, lambda a, b: a * b)
DIV = ArithBinaryOperation("div", "/", _int_div, _float_div)


def _int_int(op: ArithBinaryOperation, lhs: ArithValue, rhs: ArithValue) -> ArithValue:
    assert isinstance(lhs, ArithInteger) and isinstance(rhs, ArithInteger)
    return ArithInteger(wrap_int32(op.int_impl(lhs.value, rhs.value)))


def _int_float(op: ArithBinaryOperation, lhs: ArithValue, rhs: ArithValue) -> ArithValue:
    assert isinstance(lhs, ArithInteger) and isinstance(rhs, ArithFloat)
    return ArithFloat(op.float_impl(float(lhs.value), rhs.value))


def _float_int(op: ArithBinaryOperation, lhs: ArithValue, rhs: ArithValue) -> ArithValue:
    assert isinstance(lhs, ArithFloat) and isinstance(rhs, ArithInteger)
    return ArithFloat(op.float_impl(lhs.value, float(rhs.value)))


def _float_float(op: ArithBinaryOperation, lhs: ArithValue, rhs: ArithValue) -> ArithValue:
    assert isinstance(lhs, ArithFloat) and isinstance(rhs, ArithFloat)
    return ArithFloat(op.float_impl(lhs.value, rhs.value))


_KIND_DISPATCH: Dict[
    Tuple[ArithValueKind, ArithValueKind],
    Callable[[ArithBinaryOperation, ArithValue, ArithValue], ArithValue]
] = {
    (ArithValueKind.INT, ArithValueKind.INT): _int_int,
    (ArithValueKind.INT, ArithValueKind.FLOAT): _int_float,
    (ArithValueKind.FLOAT, ArithValueKind.INT): _float_int,
    (ArithValueKind.FLOAT, ArithValueKind.FLOAT): _float_float,
}


def apply_binary(op: ArithBinaryOperation, lhs: ArithValue, rhs: ArithValue) -> ArithValue:
    """
    Compute `lhs <op> rhs` according to the promotion table.

    Raises:
        ArithDivisionByZeroError: For integer division by zero
    """
    return _KIND_DISPATCH[(lhs.kind, rhs.kind)](op, lhs, rhs)


def negate(value: ArithValue) -> ArithValue:
    """Negate a value, preserving its kind."""
    if isinstance(value, ArithInteger):
        return ArithInteger(wrap_int32(-value.value))

    assert isinstance(value, ArithFloat)
    return ArithFloat(-value.value)
