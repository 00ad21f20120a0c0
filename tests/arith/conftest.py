"""Shared fixtures and utilities for arith tests."""

import pytest

from arith import Arith, ArithConfig, ArithEngineType


@pytest.fixture
def arith():
    """Create a fresh Arith instance (VM engine) for each test."""
    return Arith()


@pytest.fixture
def arith_custom():
    """Factory for Arith instances with custom configuration."""
    def _create_arith(
        engine: ArithEngineType = ArithEngineType.VM,
        stack_size: int = 512,
        max_depth: int = 256,
        validate_bytecode: bool = False
    ) -> Arith:
        return Arith(ArithConfig(engine, stack_size, max_depth, validate_bytecode))
    return _create_arith


@pytest.fixture(params=[ArithEngineType.INTERPRETER, ArithEngineType.VM], ids=["interpreter", "vm"])
def any_engine(request):
    """An Arith instance for each engine, so a test runs against both."""
    return Arith(ArithConfig(engine=request.param))


class ArithTestHelpers:
    """Helper utilities for arith testing."""

    @staticmethod
    def assert_evaluates_to(arith: Arith, expression: str, expected: str) -> None:
        """Assert that expression evaluates to the expected debug representation."""
        result = arith.evaluate_and_format(expression)
        assert result == expected, f"Expected '{expected}' for '{expression}', got '{result}'"

    @staticmethod
    def assert_engines_agree(expression: str) -> None:
        """Assert that the interpreter and the VM produce the same result."""
        interpreter = Arith(ArithConfig(engine=ArithEngineType.INTERPRETER))
        vm = Arith(ArithConfig(engine=ArithEngineType.VM))
        lhs = interpreter.evaluate(expression)
        rhs = vm.evaluate(expression)
        assert lhs == rhs, f"Engines disagree on '{expression}': interpreter {lhs!r}, vm {rhs!r}"

    @staticmethod
    def build_chain(operator: str, count: int, operand: str = "1") -> str:
        """Build a flat operator chain of `count` operators."""
        return f" {operator} ".join([operand] * (count + 1))

    @staticmethod
    def build_nested_expression(depth: int, inner: str = "1") -> str:
        """Wrap an expression in `depth` pairs of parentheses."""
        return "(" * depth + inner + ")" * depth


@pytest.fixture
def helpers():
    """Provide test helper utilities."""
    return ArithTestHelpers
