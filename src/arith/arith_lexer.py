"""Lexer for arith expressions with detailed error messages."""

from typing import List

from arith.arith_error import ArithParseError, ArithTokenError
from arith.arith_token import ArithToken, ArithTokenType
from arith.arith_value import INT32_MAX


class ArithLexer:
    """Splits arith source text into tokens."""

    _SINGLE_CHAR_TOKENS = {
        '+': ArithTokenType.PLUS,
        '-': ArithTokenType.MINUS,
        '*': ArithTokenType.STAR,
        '/': ArithTokenType.SLASH,
        '(': ArithTokenType.LPAREN,
        ')': ArithTokenType.RPAREN,
    }

    def lex(self, source: str) -> List[ArithToken]:
        """
        Tokenize source text.

        Args:
            source: The source text to tokenize

        Returns:
            List of tokens in source order

        Raises:
            ArithTokenError: If a character cannot start a token
            ArithParseError: If a numeric literal is malformed or out of range
        """
        tokens: List[ArithToken] = []
        i = 0

        while i < len(source):
            ch = source[i]

            if ch.isspace():
                i += 1
                continue

            token_type = self._SINGLE_CHAR_TOKENS.get(ch)
            if token_type is not None:
                tokens.append(ArithToken(token_type, ch, i))
                i += 1
                continue

            if '0' <= ch <= '9':
                token = self._read_number(source, i)
                tokens.append(token)
                i += token.length
                continue

            raise self._invalid_character(source, i)

        return tokens

    def _read_digits(self, source: str, start: int) -> int:
        """Return the index just past a run of ASCII digits."""
        end = start
        while end < len(source) and '0' <= source[end] <= '9':
            end += 1

        return end

    def _read_number(self, source: str, start: int) -> ArithToken:
        """Read an integer or float literal starting at `start`."""
        end = self._read_digits(source, start)

        if end < len(source) and source[end] == '.':
            fraction_end = self._read_digits(source, end + 1)
            if fraction_end == end + 1:
                raise ArithParseError(
                    message="Incomplete float literal",
                    position=start,
                    received=f"Literal: {source[start:end + 1]}",
                    expected="Digits after the decimal point",
                    example="Correct: 5.0\\nIncorrect: 5.",
                    suggestion="Add at least one digit after the decimal point"
                )

            text = source[start:fraction_end]
            return ArithToken(ArithTokenType.FLOAT, float(text), start, fraction_end - start)

        text = source[start:end]

        # Compare digit counts before converting; int() refuses very long digit strings
        significant = text.lstrip("0") or "0"
        if len(significant) > len(str(INT32_MAX)) or int(significant) > INT32_MAX:
            shown = text if len(text) <= 20 else f"{text[:20]}... ({len(text)} digits)"
            raise ArithParseError(
                message=f"Integer literal out of range: {shown}",
                position=start,
                received=f"Literal: {shown}",
                expected=f"Integer between 0 and {INT32_MAX}",
                suggestion="Use a float literal for large values",
                example="Correct: 2147483647 or 3000000000.0"
            )

        return ArithToken(ArithTokenType.INTEGER, int(significant), start, end - start)

    def _invalid_character(self, source: str, position: int) -> ArithTokenError:
        """Build the error for a character that cannot start a token."""
        char = source[position]
        char_code = ord(char)

        suggestions = {
            '.': "Float literals need digits before the decimal point: use 0.5, not .5",
            '%': "The modulo operator is not supported",
            '^': "Exponentiation is not supported",
            '[': "Use parentheses ( ) for grouping, not brackets [ ]",
            ']': "Use parentheses ( ) for grouping, not brackets [ ]",
            '{': "Use parentheses ( ) for grouping, not braces { }",
            '}': "Use parentheses ( ) for grouping, not braces { }",
        }

        if char_code < 32:
            received = f"Control character: \\u{char_code:04x} (code {char_code})"

        else:
            received = f"Character: {char} (code {char_code})"

        return ArithTokenError(
            message=f"Invalid character: {char!r}",
            position=position,
            received=received,
            expected="Digits, '.', '+', '-', '*', '/', '(', ')' or whitespace",
            suggestion=suggestions.get(char, f"Remove {char!r} from the expression"),
            example="Valid: 1 + 2 * (3 - 4.5)"
        )
