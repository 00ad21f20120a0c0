"""Token types and token representation for arith expressions."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ArithTokenType(Enum):
    """Token types for arith expressions."""
    INTEGER = "INTEGER"
    FLOAT = "FLOAT"
    PLUS = "+"
    MINUS = "-"
    STAR = "*"
    SLASH = "/"
    LPAREN = "("
    RPAREN = ")"


@dataclass
class ArithToken:
    """Represents a single token in an arith expression."""
    type: ArithTokenType
    value: Any
    position: int
    length: int = 1

    def __repr__(self) -> str:
        return f"ArithToken({self.type.name}, {self.value!r}, pos={self.position})"
