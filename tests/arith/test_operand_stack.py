"""Tests for the bounded operand stack."""

import pytest

from arith.arith_error import ArithStackOverflowError, ArithStackUnderflowError
from arith.arith_operand_stack import ArithOperandStack
from arith.arith_value import ArithFloat, ArithInteger


class TestOperandStack:
    """Test push, pop and the last-popped slot."""

    def test_push_pop(self):
        """Test LIFO order."""
        stack = ArithOperandStack(4)
        stack.push(ArithInteger(1))
        stack.push(ArithFloat(2.0))
        assert len(stack) == 2
        assert stack.peek() == ArithFloat(2.0)
        assert stack.pop() == ArithFloat(2.0)
        assert stack.pop() == ArithInteger(1)
        assert len(stack) == 0
        assert stack.peek() is None

    def test_initial_last_popped(self):
        """Test that an unused stack reports Int(0)."""
        assert ArithOperandStack(1).last_popped() == ArithInteger(0)

    def test_last_popped_survives_pop(self):
        """Test that popped values stay in their slot."""
        stack = ArithOperandStack(4)
        stack.push(ArithInteger(9))
        stack.pop()
        assert stack.last_popped() == ArithInteger(9)
        assert stack.values() == []

    def test_overflow(self):
        """Test pushing onto a full stack."""
        stack = ArithOperandStack(1)
        stack.push(ArithInteger(1))
        with pytest.raises(ArithStackOverflowError):
            stack.push(ArithInteger(2))

        assert stack.stack_pointer == 1

    def test_underflow(self):
        """Test popping an empty stack."""
        with pytest.raises(ArithStackUnderflowError):
            ArithOperandStack(2).pop()

    def test_last_popped_when_full(self):
        """Test that a full stack has no slot at the stack pointer."""
        stack = ArithOperandStack(1)
        stack.push(ArithInteger(1))
        with pytest.raises(ArithStackOverflowError):
            stack.last_popped()

    def test_values_bottom_first(self):
        """Test the live value listing."""
        stack = ArithOperandStack(3)
        stack.push(ArithInteger(1))
        stack.push(ArithInteger(2))
        assert stack.values() == [ArithInteger(1), ArithInteger(2)]

    def test_capacity_must_be_positive(self):
        """Test that a stack needs at least one slot."""
        with pytest.raises(ValueError):
            ArithOperandStack(0)
