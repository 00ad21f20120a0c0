"""Tests for bytecode encoding, decoding and disassembly."""

import pytest

from arith.arith_bytecode import (
    ArithBytecodeProgram, Instruction, Opcode, TruncatedInstructionError, UnknownOpcodeError,
    decode_instructions, lookup_opcode, make_op
)
from arith.arith_value import ArithFloat, ArithInteger


class TestOpcodes:
    """Test opcode definitions."""

    @pytest.mark.parametrize("opcode,tag", [
        (Opcode.OP_CONSTANT, 0x01),
        (Opcode.OP_POP, 0x02),
        (Opcode.OP_ADD, 0x03),
        (Opcode.OP_SUB, 0x04),
        (Opcode.OP_MUL, 0x05),
        (Opcode.OP_DIV, 0x06),
        (Opcode.OP_PLUS, 0x0A),
        (Opcode.OP_MINUS, 0x0B),
    ])
    def test_tag_bytes(self, opcode, tag):
        """Test that each opcode has its fixed tag byte."""
        assert int(opcode) == tag
        assert lookup_opcode(tag) is opcode

    def test_operand_widths(self):
        """Test that only OP_CONSTANT takes an operand."""
        assert Opcode.OP_CONSTANT.operand_width == 2
        assert Opcode.OP_CONSTANT.size == 3
        for opcode in Opcode:
            if opcode != Opcode.OP_CONSTANT:
                assert opcode.operand_width == 0
                assert opcode.size == 1

    def test_unknown_tags(self):
        """Test that unassigned bytes are not opcodes."""
        assert lookup_opcode(0x00) is None
        assert lookup_opcode(0x07) is None
        assert lookup_opcode(0xFF) is None


class TestMakeOp:
    """Test instruction encoding."""

    def test_constant_operand_big_endian(self):
        """Test the 2-byte big-endian operand layout."""
        assert make_op(Opcode.OP_CONSTANT, 1) == bytes([0x01, 0x00, 0x01])
        assert make_op(Opcode.OP_CONSTANT, 257) == bytes([0x01, 0x01, 0x01])
        assert make_op(Opcode.OP_CONSTANT, 0xFFFF) == bytes([0x01, 0xFF, 0xFF])

    def test_no_operand(self):
        """Test opcodes without operands encode to a single byte."""
        assert make_op(Opcode.OP_ADD) == bytes([0x03])
        assert make_op(Opcode.OP_MINUS) == bytes([0x0B])

    def test_operand_out_of_range(self):
        """Test that operands wider than two bytes are rejected."""
        with pytest.raises(ValueError):
            make_op(Opcode.OP_CONSTANT, 0x10000)

        with pytest.raises(ValueError):
            make_op(Opcode.OP_CONSTANT, -1)


class TestDecode:
    """Test instruction decoding."""

    def test_decode_stream(self):
        """Test decoding a compiled statement."""
        stream = make_op(Opcode.OP_CONSTANT, 0) + make_op(Opcode.OP_CONSTANT, 258) + make_op(Opcode.OP_ADD)
        instructions = list(decode_instructions(stream))
        assert [(i.offset, i.opcode, i.operand) for i in instructions] == [
            (0, Opcode.OP_CONSTANT, 0),
            (3, Opcode.OP_CONSTANT, 258),
            (6, Opcode.OP_ADD, 0),
        ]

    def test_decode_unknown_opcode(self):
        """Test that unknown tags stop decoding."""
        with pytest.raises(UnknownOpcodeError) as exc_info:
            list(decode_instructions(bytes([0x02, 0x42])))

        assert exc_info.value.offset == 1
        assert exc_info.value.tag == 0x42

    def test_decode_truncated_operand(self):
        """Test that a short operand is detected."""
        with pytest.raises(TruncatedInstructionError) as exc_info:
            list(decode_instructions(bytes([0x01, 0x00])))

        assert exc_info.value.offset == 0
        assert exc_info.value.opcode == Opcode.OP_CONSTANT

    def test_instruction_repr(self):
        """Test instruction debug text."""
        assert repr(Instruction(0, Opcode.OP_CONSTANT, 4)) == "OP_CONSTANT 4"
        assert repr(Instruction(3, Opcode.OP_POP)) == "OP_POP"


class TestProgram:
    """Test the program container."""

    def test_empty_program(self):
        """Test the default program."""
        program = ArithBytecodeProgram()
        assert program.instructions == b""
        assert program.constants == []
        assert program.decode() == []

    def test_repr(self):
        """Test the summary representation."""
        program = ArithBytecodeProgram(make_op(Opcode.OP_CONSTANT, 0), [ArithInteger(1)])
        assert repr(program) == "ArithBytecodeProgram\n  Constants: 1\n  Bytes: 3"

    def test_disassemble(self):
        """Test annotated disassembly."""
        program = ArithBytecodeProgram(
            make_op(Opcode.OP_CONSTANT, 0) + make_op(Opcode.OP_CONSTANT, 1)
            + make_op(Opcode.OP_DIV) + make_op(Opcode.OP_POP),
            [ArithInteger(9), ArithFloat(2.0)]
        )
        assert program.disassemble().splitlines() == [
            "Constants:",
            "      0: Int(9)",
            "      1: Float(2.0)",
            "Instructions:",
            "  0000: OP_CONSTANT 0  ; Load constant: 9",
            "  0003: OP_CONSTANT 1  ; Load constant: 2.0",
            "  0006: OP_DIV",
            "  0007: OP_POP  ; End of statement",
        ]

    def test_disassemble_bad_index(self):
        """Test that disassembly flags constant indices outside the pool."""
        program = ArithBytecodeProgram(make_op(Opcode.OP_CONSTANT, 3), [])
        text = program.disassemble()
        assert "(none)" in text
        assert "Constant index out of range" in text
