"""Arith AST node hierarchy - compile-time representation of parsed expressions.

AST nodes are separate from runtime ArithValue types.  Each node owns its
children exclusively; trees are never shared and never cyclic.  Nodes carry an
optional source position that is ignored by equality.

Operator chains fold left-to-right, so a long chain produces a deep left spine.
Traversals (`iter_postorder`, `describe`) therefore use an explicit work stack
rather than Python recursion.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Tuple

from arith.arith_error import ArithParseError
from arith.arith_token import ArithToken, ArithTokenType
from arith.arith_value import ArithValue, ArithInteger, ArithFloat


class ArithOperator(Enum):
    """Operators; PLUS and MINUS are also valid in unary position."""
    PLUS = "+"
    MINUS = "-"
    MULTIPLY = "*"
    DIVIDE = "/"

    @property
    def is_unary(self) -> bool:
        """True if the operator may be used as a prefix operator."""
        return self in (ArithOperator.PLUS, ArithOperator.MINUS)

    @classmethod
    def from_token(cls, token: ArithToken) -> 'ArithOperator':
        """
        Build an operator from a token.

        Raises:
            ArithParseError: If the token is not an operator
        """
        operator = _TOKEN_OPERATORS.get(token.type)
        if operator is None:
            raise ArithParseError(
                message=f"Expected an operator, got: {token.value}",
                position=token.position,
                received=f"Token: {token.value} (type: {token.type.name})",
                expected="One of '+', '-', '*', '/'",
                example="1 + 2"
            )

        return operator

    def __str__(self) -> str:
        return self.value


_TOKEN_OPERATORS = {
    ArithTokenType.PLUS: ArithOperator.PLUS,
    ArithTokenType.MINUS: ArithOperator.MINUS,
    ArithTokenType.STAR: ArithOperator.MULTIPLY,
    ArithTokenType.SLASH: ArithOperator.DIVIDE,
}


@dataclass(frozen=True)
class ArithASTNode(ABC):
    """
    Abstract base class for all arith AST nodes.

    The source position is keyword-only and excluded from comparisons, so trees
    built by the parser compare equal to trees built by hand.
    """
    position: int | None = field(default=None, kw_only=True, compare=False)

    @abstractmethod
    def children(self) -> Tuple['ArithASTNode', ...]:
        """Return child nodes in evaluation order."""

    def iter_postorder(self) -> Iterator['ArithASTNode']:
        """
        Yield every node in the tree, children before parents, left before right.

        This is the order in which a stack machine evaluates the tree.
        """
        stack: List[Tuple[ArithASTNode, bool]] = [(self, False)]
        while stack:
            node, expanded = stack.pop()
            if expanded:
                yield node
                continue

            stack.append((node, True))
            for child in reversed(node.children()):
                stack.append((child, False))

    def describe(self) -> str:
        """
        Render the tree in canonical text form.

        Literals render as literal text, unary nodes as `<op><child>` and binary
        nodes as `<lhs> <op> <rhs>`.  Parentheses are not reinserted.
        """
        rendered: List[str] = []
        for node in self.iter_postorder():
            if isinstance(node, ArithASTUnary):
                child = rendered.pop()
                rendered.append(f"{node.op}{child}")

            elif isinstance(node, ArithASTBinary):
                rhs = rendered.pop()
                lhs = rendered.pop()
                rendered.append(f"{lhs} {node.op} {rhs}")

            else:
                assert isinstance(node, ArithASTLiteral)
                rendered.append(node.to_runtime_value().describe())

        return rendered[0]

    def __str__(self) -> str:
        return self.describe()


@dataclass(frozen=True)
class ArithASTLiteral(ArithASTNode):
    """Base class for literal leaves."""

    def children(self) -> Tuple[ArithASTNode, ...]:
        return ()

    @abstractmethod
    def to_runtime_value(self) -> ArithValue:
        """Convert the literal to a runtime value (strips metadata)."""


@dataclass(frozen=True)
class ArithASTInteger(ArithASTLiteral):
    """Integer literal."""
    value: int

    def to_runtime_value(self) -> ArithInteger:
        return ArithInteger(self.value)


@dataclass(frozen=True)
class ArithASTFloat(ArithASTLiteral):
    """Float literal."""
    value: float

    def to_runtime_value(self) -> ArithFloat:
        return ArithFloat(self.value)


@dataclass(frozen=True)
class ArithASTUnary(ArithASTNode):
    """Prefix `+` or `-` applied to a single child."""
    op: ArithOperator
    child: ArithASTNode

    def __post_init__(self) -> None:
        if not self.op.is_unary:
            raise ValueError(f"Operator {self.op} cannot be used as a unary operator")

    def children(self) -> Tuple[ArithASTNode, ...]:
        return (self.child,)


@dataclass(frozen=True)
class ArithASTBinary(ArithASTNode):
    """Binary operation."""
    op: ArithOperator
    lhs: ArithASTNode
    rhs: ArithASTNode

    def children(self) -> Tuple[ArithASTNode, ...]:
        return (self.lhs, self.rhs)
