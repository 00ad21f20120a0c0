"""Parser for arith expressions with detailed error messages.

Grammar:

    Program    := Expr*
    Expr       := BinaryExpr | UnaryExpr | Term
    BinaryExpr := (UnaryExpr | Term) (Operator Term)+
    UnaryExpr  := ('+' | '-') Term
    Term       := IntLiteral | FloatLiteral | '(' Expr ')'

Binary chains fold strictly left to right whatever the operators are, so
`2 + 2 * 3` parses as `(2 + 2) * 3`.  There is no precedence climbing.

Parenthesized groups are tracked on an explicit stack of open groups rather
than by recursion, so nesting is limited by `max_depth` alone and never by
the Python interpreter's recursion limit.
"""

from dataclasses import dataclass
from typing import List

from arith.arith_ast import (
    ArithASTNode, ArithASTInteger, ArithASTFloat, ArithASTUnary, ArithASTBinary, ArithOperator
)
from arith.arith_error import ArithParseError
from arith.arith_token import ArithToken, ArithTokenType


_OPERATOR_TOKENS = (
    ArithTokenType.PLUS,
    ArithTokenType.MINUS,
    ArithTokenType.STAR,
    ArithTokenType.SLASH,
)

_SIGN_TOKENS = (ArithTokenType.PLUS, ArithTokenType.MINUS)


@dataclass
class _OpenExpression:
    """An expression being built: the whole statement or the inside of one group."""

    # The '(' that opened this group; None at statement level
    open_token: ArithToken | None

    # Left operand folded so far
    node: ArithASTNode | None = None

    # Unary prefix waiting for the first term
    sign: ArithToken | None = None

    # Binary operator waiting for its right-hand term
    operator: ArithToken | None = None


class ArithParser:
    """Parses tokens into a sequence of AST roots, one per statement."""

    def __init__(self, tokens: List[ArithToken], source: str = "", max_depth: int = 256):
        """
        Initialize parser with tokens and original source.

        Args:
            tokens: List of tokens to parse
            source: Original source text for error context
            max_depth: Maximum parenthesis nesting depth
        """
        self.tokens = tokens
        self.pos = 0
        self.current_token: ArithToken | None = tokens[0] if tokens else None
        self.source = source
        self.max_depth = max_depth

    def parse(self) -> List[ArithASTNode]:
        """
        Parse all tokens into AST roots.

        Returns:
            One node per top-level statement, in source order.  Empty input
            yields an empty list.

        Raises:
            ArithParseError: If the tokens do not match the grammar
        """
        statements: List[ArithASTNode] = []
        while self.current_token is not None:
            statements.append(self._parse_statement())

        return statements

    def _advance(self) -> None:
        """Move to the next token."""
        self.pos += 1
        self.current_token = self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _at_operator(self) -> bool:
        return self.current_token is not None and self.current_token.type in _OPERATOR_TOKENS

    def _parse_statement(self) -> ArithASTNode:
        """
        Parse one top-level `Expr`.

        Each pass of the outer loop reads one term position.  A '(' pushes the
        current expression and starts a new one; a literal is folded into the
        current expression, and every ')' that follows pops back out, folding
        the finished group into its parent as a term.
        """
        enclosing: List[_OpenExpression] = []
        expr = _OpenExpression(None)

        while True:
            if expr.node is None and expr.sign is None and self._at_sign():
                expr.sign = self.current_token
                self._advance()

            token = self._expect_term_start()
            if token.type == ArithTokenType.LPAREN:
                self._open_group(token, len(enclosing))
                enclosing.append(expr)
                expr = _OpenExpression(token)
                continue

            term = self._parse_literal()
            while True:
                self._fold(expr, term)

                if self._at_operator():
                    expr.operator = self.current_token
                    self._advance()
                    break

                if expr.open_token is None:
                    assert expr.node is not None
                    return expr.node

                self._close_group(expr.open_token)
                assert expr.node is not None
                term = expr.node
                expr = enclosing.pop()

    def _at_sign(self) -> bool:
        return self.current_token is not None and self.current_token.type in _SIGN_TOKENS

    def _fold(self, expr: _OpenExpression, term: ArithASTNode) -> None:
        """Combine a finished term with the expression built so far."""
        if expr.node is None:
            if expr.sign is None:
                expr.node = term
                return

            sign = expr.sign
            expr.node = ArithASTUnary(ArithOperator.from_token(sign), term, position=sign.position)
            return

        operator = expr.operator
        assert operator is not None
        expr.node = ArithASTBinary(ArithOperator.from_token(operator), expr.node, term, position=operator.position)
        expr.operator = None

    def _expect_term_start(self) -> ArithToken:
        """Return the token that starts a `Term`, or raise if there is none."""
        token = self.current_token
        if token is None:
            raise ArithParseError(
                message="Unexpected end of input",
                position=len(self.source),
                expected="Number or '('",
                example="1 + 2",
                suggestion="Complete the expression after the last operator"
            )

        return token

    def _parse_literal(self) -> ArithASTNode:
        """Parse a numeric literal in term position."""
        token = self._expect_term_start()

        if token.type == ArithTokenType.INTEGER:
            self._advance()
            return ArithASTInteger(token.value, position=token.position)

        if token.type == ArithTokenType.FLOAT:
            self._advance()
            return ArithASTFloat(token.value, position=token.position)

        if token.type in _SIGN_TOKENS:
            raise ArithParseError(
                message=f"Unexpected sign: {token.value}",
                position=token.position,
                received=f"Token: {token.value}",
                expected="Number or '('",
                example="Correct: 2 * (-3)\\nIncorrect: 2 * -3",
                suggestion="Wrap a signed operand in parentheses",
                context="A sign may only prefix the first operand of an expression"
            )

        raise ArithParseError(
            message=f"Unexpected token: {token.value}",
            position=token.position,
            received=f"Token: {token.value} (type: {token.type.name})",
            expected="Number or '('",
            example="Valid terms: 42, 3.5, (1 + 2)",
            suggestion="Check for a missing operand or an extra ')'"
        )

    def _open_group(self, open_token: ArithToken, depth: int) -> None:
        """Consume '(' after checking the nesting limit and that the group is not empty."""
        if depth >= self.max_depth:
            raise ArithParseError(
                message=f"Expression too deeply nested (max depth: {self.max_depth})",
                position=open_token.position,
                suggestion="Reduce parenthesis nesting or increase max_depth"
            )

        self._advance()
        if self.current_token is None:
            raise self._unclosed_paren(open_token)

        if self.current_token.type == ArithTokenType.RPAREN:
            raise ArithParseError(
                message="Empty parentheses",
                position=open_token.position,
                expected="Expression inside '( )'",
                example="Correct: (1 + 2)\\nIncorrect: ()"
            )

    def _close_group(self, open_token: ArithToken) -> None:
        """Consume the ')' matching `open_token`."""
        if self.current_token is None:
            raise self._unclosed_paren(open_token)

        if self.current_token.type != ArithTokenType.RPAREN:
            raise ArithParseError(
                message=f"Expected ')', got: {self.current_token.value}",
                position=self.current_token.position,
                received=f"Token: {self.current_token.value}",
                expected=f"')' closing the '(' at position {open_token.position}",
                suggestion="Close the group before starting another expression"
            )

        self._advance()

    def _unclosed_paren(self, open_token: ArithToken) -> ArithParseError:
        snippet = self.source[open_token.position:open_token.position + 20]
        return ArithParseError(
            message="Unclosed parenthesis",
            position=open_token.position,
            received=f"Incomplete group: {snippet}",
            expected="Closing ')'",
            example="Correct: (1 + 2)\\nIncorrect: (1 + 2",
            suggestion="Add the missing ')'"
        )
