"""
Decoder Tests for the Counter Machine VM.

Every cell text must either decode to exactly one of Succ / BeqzPred /
Exit or be rejected with DecodeError. Nothing here touches memory.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from dataclasses import FrozenInstanceError
from counter_vm.decoder import (
    Operand, Succ, BeqzPred, Exit, DecodeError,
    decode_instruction, decode_operand, parse_int, is_int_literal,
)


# ─── Valid instructions ─────────────────────

class TestDecodeValid:
    def test_exit(self):
        assert decode_instruction("exit") == Exit()

    def test_succ_direct(self):
        assert decode_instruction("succ $0") == Succ(Operand("0", indirect=False))

    def test_succ_indirect(self):
        assert decode_instruction("succ &12") == Succ(Operand("12", indirect=True))

    def test_beqz_pred_mixed_modes(self):
        instr = decode_instruction("beqz-pred &1 $2")
        assert instr == BeqzPred(test=Operand("1", True), jump=Operand("2", False))

    def test_negative_and_signed_literals(self):
        instr = decode_instruction("beqz-pred $-3 &+4")
        assert instr.test == Operand("-3", False)
        assert instr.jump == Operand("+4", True)

    def test_surrounding_and_inner_whitespace(self):
        """Tokens are whitespace-separated; extra spaces and tabs are fine."""
        assert decode_instruction("  succ \t $7  ") == Succ(Operand("7"))
        assert decode_instruction("\texit\n") == Exit()

    def test_decode_is_idempotent(self):
        text = "beqz-pred &4 $9"
        assert decode_instruction(text) == decode_instruction(text)

    def test_canonical_text(self):
        """str() gives back the canonical source form."""
        for text in ("exit", "succ $3", "succ &3", "beqz-pred &1 $-2"):
            assert str(decode_instruction(text)) == text

    def test_instructions_are_immutable(self):
        instr = decode_instruction("succ $1")
        with pytest.raises(FrozenInstanceError):
            instr.target = Operand("2")


# ─── Rejected text ─────────────────────

class TestDecodeInvalid:
    @pytest.mark.parametrize("text", [
        "",
        "   ",
        "EXIT",
        "Succ $1",
        "halt",
        "add $1 $2",
        "42",
        "-7",
    ])
    def test_unknown_or_empty(self, text):
        with pytest.raises(DecodeError):
            decode_instruction(text)

    @pytest.mark.parametrize("text", [
        "exit now",
        "succ",
        "succ $1 $2",
        "beqz-pred $1",
        "beqz-pred $1 $2 $3",
        "succ $ 1",
    ])
    def test_wrong_arity(self, text):
        with pytest.raises(DecodeError):
            decode_instruction(text)

    @pytest.mark.parametrize("text", [
        "succ 3",
        "succ #3",
        "succ $",
        "succ $x",
        "succ $1.5",
        "succ $0x10",
        "succ $1_000",
        "beqz-pred $1 2",
        "beqz-pred 1 $2",
    ])
    def test_malformed_operand(self, text):
        with pytest.raises(DecodeError):
            decode_instruction(text)

    @pytest.mark.parametrize("text", ["succ &&3", "succ &$3", "beqz-pred $0 &&1"])
    def test_multi_level_indirection_rejected(self, text):
        """Only one level of indirection exists; stacked sigils don't decode."""
        with pytest.raises(DecodeError):
            decode_instruction(text)

    def test_error_keeps_cell_text(self):
        with pytest.raises(DecodeError) as exc_info:
            decode_instruction("succ $oops")
        assert exc_info.value.text == "succ $oops"


# ─── Operands and integer literals ─────────────────────

class TestOperands:
    def test_decode_operand(self):
        assert decode_operand("$5") == Operand("5", False)
        assert decode_operand("&5") == Operand("5", True)

    def test_operand_str(self):
        assert str(Operand("5", True)) == "&5"
        assert str(Operand("-1")) == "$-1"

    def test_bad_operand(self):
        with pytest.raises(DecodeError):
            decode_operand("5")


class TestParseInt:
    @pytest.mark.parametrize("text,value", [
        ("0", 0), ("42", 42), ("-7", -7), ("+3", 3), ("007", 7),
    ])
    def test_integers(self, text, value):
        assert parse_int(text) == value

    @pytest.mark.parametrize("text", ["", "x", "1.0", " 1", "1 ", "--1", "+", "٣"])
    def test_not_integers(self, text):
        assert parse_int(text) is None

    def test_overlong_literal_is_not_an_integer(self):
        """Digit strings past int()'s conversion limit read as None, not raise."""
        text = "9" * 5000
        assert parse_int(text) is None
        assert is_int_literal(text)

    def test_is_int_literal(self):
        assert is_int_literal("-12")
        assert not is_int_literal("12a")
