"""Arith configuration."""

from dataclasses import dataclass
from enum import Enum


class ArithEngineType(Enum):
    """Execution strategies available behind the `Arith` entry point."""
    INTERPRETER = "interpreter"
    VM = "vm"


@dataclass
class ArithConfig:
    """Configuration for an `Arith` instance."""
    engine: ArithEngineType = ArithEngineType.VM
    stack_size: int = 512
    max_depth: int = 256
    validate_bytecode: bool = False

    def __post_init__(self) -> None:
        if self.stack_size < 1:
            raise ValueError(f"stack_size must be at least 1, got {self.stack_size}")

        if self.max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {self.max_depth}")
