"""End-to-end tests through the Arith entry point, run against both engines."""

import math

import pytest

from arith import (
    Arith, ArithConfig, ArithDivisionByZeroError, ArithEngineType, ArithInterpreterEngine,
    ArithParseError, ArithStackOverflowError, ArithVMEngine
)
from arith.arith_bytecode_validator import ValidationError
from arith.arith_value import ArithFloat, ArithInteger


class TestEvaluation:
    """Test results that both engines must produce."""

    @pytest.mark.parametrize("source,expected", [
        ("21 + 6", "Int(27)"),
        ("2 + 2 * 3", "Int(12)"),
        ("2 + (2 * 3)", "Int(8)"),
        ("-11 + 2", "Int(-9)"),
        ("10 - 4", "Int(6)"),
        ("8 / 2", "Int(4)"),
        ("7 / 2", "Int(3)"),
        ("-7 / 2", "Int(-3)"),
        ("2.5 + 2.5 + 1.5 + 2", "Float(8.5)"),
        ("10 / 4.0", "Float(2.5)"),
        ("+3", "Int(3)"),
        ("-(2 - 5)", "Int(3)"),
        ("2147483647 + 1", "Int(-2147483648)"),
        ("", "Int(0)"),
        ("   ", "Int(0)"),
        ("1 2 3", "Int(3)"),
        ("1 -2", "Int(-1)"),
        ("1 + 1\n2 * 5", "Int(10)"),
    ])
    def test_evaluates_to(self, any_engine, helpers, source, expected):
        """Test the debug representation of each result."""
        helpers.assert_evaluates_to(any_engine, source, expected)

    def test_float_approximation(self, any_engine):
        """Test a float result that is not exactly representable."""
        result = any_engine.evaluate("1.2 * 2")
        assert isinstance(result, ArithFloat)
        assert result.value == pytest.approx(2.4)

    def test_float_division_by_zero(self, any_engine):
        """Test IEEE-754 division through both engines."""
        assert any_engine.evaluate("1.0 / 0") == ArithFloat(math.inf)
        assert any_engine.evaluate("-1 / 0.0") == ArithFloat(-math.inf)

    def test_integer_division_by_zero(self, any_engine):
        """Test that integer division by zero is a runtime error."""
        with pytest.raises(ArithDivisionByZeroError):
            any_engine.evaluate("1 / (2 - 2)")

    def test_parse_error(self, any_engine):
        """Test that parse errors surface from both engines."""
        with pytest.raises(ArithParseError):
            any_engine.evaluate("2 * -3")

    def test_deterministic(self, any_engine):
        """Test that repeated evaluation gives the same result."""
        results = {any_engine.evaluate_and_format("3.5 * 2 - 1") for _ in range(5)}
        assert results == {"Float(6.0)"}

    def test_instance_survives_errors(self, any_engine):
        """Test that an error is fatal only to the call that raised it."""
        with pytest.raises(ArithDivisionByZeroError):
            any_engine.evaluate("1 / 0")

        assert any_engine.evaluate("1 + 1") == ArithInteger(2)

    def test_long_chain(self, any_engine, helpers):
        """Test a chain deeper than the Python recursion limit."""
        assert any_engine.evaluate(helpers.build_chain("+", 5000)) == ArithInteger(5001)


class TestEngineEquivalence:
    """Test that the interpreter and the VM agree."""

    @pytest.mark.parametrize("source", [
        "1 + 2",
        "2 + 2 * 3",
        "-11 + 2",
        "(1 + 2.5) * (-3)",
        "-(4 / 3) * 3",
        "100 / 7 / 2.0",
        "2147483647 * 2",
        "0.0 / 0.0",
        "5 4 3 - 1",
        "-((((1))))",
        "",
    ])
    def test_engines_agree(self, helpers, source):
        """Test cross-engine equivalence."""
        helpers.assert_engines_agree(source)


class TestConfiguration:
    """Test engine selection and limits through the entry point."""

    def test_default_engine_is_vm(self, arith):
        """Test the default configuration."""
        assert isinstance(arith.engine, ArithVMEngine)
        assert arith.config.engine == ArithEngineType.VM

    def test_interpreter_engine(self, arith_custom):
        """Test selecting the interpreter."""
        calc = arith_custom(engine=ArithEngineType.INTERPRETER)
        assert isinstance(calc.engine, ArithInterpreterEngine)

    def test_stack_size_limit(self, arith_custom):
        """Test that the VM stack bound applies to nested expressions."""
        calc = arith_custom(stack_size=3)
        assert calc.evaluate("1 + (2 + 3)") == ArithInteger(6)
        with pytest.raises(ArithStackOverflowError):
            calc.evaluate("1 + (2 + (3 + 4))")

    def test_interpreter_has_no_stack_limit(self, arith_custom):
        """Test that stack_size does not constrain the interpreter."""
        calc = arith_custom(engine=ArithEngineType.INTERPRETER, stack_size=3)
        assert calc.evaluate("1 + (2 + (3 + 4))") == ArithInteger(10)

    def test_max_depth(self, arith_custom, helpers):
        """Test the parenthesis nesting limit."""
        calc = arith_custom(max_depth=5)
        assert calc.evaluate(helpers.build_nested_expression(5)) == ArithInteger(1)
        with pytest.raises(ArithParseError):
            calc.evaluate(helpers.build_nested_expression(6))

    def test_validation_enabled(self, arith_custom):
        """Test that validation rejects programs that would overflow."""
        calc = arith_custom(stack_size=3, validate_bytecode=True)
        with pytest.raises(ValidationError):
            calc.evaluate("1 + (2 + (3 + 4))")

    def test_parse_and_compile(self, arith):
        """Test the lower-level entry points."""
        statements = arith.parse("1 + 2 3")
        assert [str(s) for s in statements] == ["1 + 2", "3"]
        assert len(arith.compile("1 + 2 3").constants) == 3

    def test_parse_uses_engine_limits(self, arith_custom, helpers):
        """Test that parsing through the entry point applies the configured depth."""
        calc = arith_custom(engine=ArithEngineType.INTERPRETER, max_depth=2)
        assert calc.parse("(1)") == calc.engine.parse("(1)")
        with pytest.raises(ArithParseError, match="too deeply nested"):
            calc.parse(helpers.build_nested_expression(3))

    def test_compile_with_interpreter_engine(self, arith_custom):
        """Test that compile works whichever engine is configured."""
        calc = arith_custom(engine=ArithEngineType.INTERPRETER)
        assert calc.compile("4").constants == [ArithInteger(4)]

    def test_explicit_config(self):
        """Test constructing with a config object."""
        calc = Arith(ArithConfig(engine=ArithEngineType.INTERPRETER))
        assert calc.evaluate_and_format("9 / 3") == "Int(3)"
