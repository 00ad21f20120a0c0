"""Bounded operand stack for the arith VM."""

from typing import List

from arith.arith_error import ArithStackOverflowError, ArithStackUnderflowError
from arith.arith_value import ArithValue, ArithInteger


class ArithOperandStack:
    """
    Fixed-capacity operand stack.

    Slots are preallocated and never shrink.  `pop` moves the stack pointer
    down without clearing the slot, so the slot at the stack pointer holds the
    most recently popped value.  The VM reads its result from there.

    Every push and pop is bounds-checked and raises a typed error instead of
    corrupting state.
    """

    def __init__(self, capacity: int = 512) -> None:
        """
        Initialize an empty stack.

        Args:
            capacity: Maximum number of values the stack can hold
        """
        if capacity < 1:
            raise ValueError(f"Stack capacity must be at least 1, got {capacity}")

        self.capacity = capacity
        self._slots: List[ArithValue] = [ArithInteger(0)] * capacity
        self._sp = 0

    def __len__(self) -> int:
        return self._sp

    @property
    def stack_pointer(self) -> int:
        """Index of the next free slot."""
        return self._sp

    def push(self, value: ArithValue) -> None:
        """
        Push a value.

        Raises:
            ArithStackOverflowError: If the stack is full
        """
        if self._sp >= self.capacity:
            raise ArithStackOverflowError(
                message=f"Operand stack overflow (capacity {self.capacity})",
                received=f"Push of {value!r} onto a full stack",
                suggestion="Reduce expression nesting or increase the stack size"
            )

        self._slots[self._sp] = value
        self._sp += 1

    def pop(self) -> ArithValue:
        """
        Pop and return the top value.

        Raises:
            ArithStackUnderflowError: If the stack is empty
        """
        if self._sp == 0:
            raise ArithStackUnderflowError(
                message="Operand stack underflow",
                received="Pop from an empty stack",
                context="The instruction stream consumes more values than it produces"
            )

        self._sp -= 1
        return self._slots[self._sp]

    def peek(self) -> ArithValue | None:
        """Return the top value without popping, or None if empty."""
        if self._sp == 0:
            return None

        return self._slots[self._sp - 1]

    def last_popped(self) -> ArithValue:
        """
        Return the value in the slot at the stack pointer.

        After a pop this is the value that was popped.  Before any pop it is the
        slot's initial value, Int(0).

        Raises:
            ArithStackOverflowError: If the stack is full, so no slot lies at the stack pointer
        """
        if self._sp >= self.capacity:
            raise ArithStackOverflowError(
                message="No popped value available: operand stack is full",
                context="The program ended without popping its final value",
                suggestion="End each statement with OP_POP"
            )

        return self._slots[self._sp]

    def values(self) -> List[ArithValue]:
        """Return the live values, bottom first."""
        return self._slots[:self._sp]
