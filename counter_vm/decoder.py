"""
Counter Machine VM: Instruction Decoder

Turns the text of a single memory cell into a typed instruction.

Grammar (whitespace-separated, keywords are case-sensitive):

  exit
  succ       <operand>
  beqz-pred  <operand> <operand>

Operands:
  $N   Direct    N itself is the address
  &N   Indirect  the integer stored at cell N is the address

N is a base-10 integer literal, optionally signed. Only one level of
indirection exists, so "&&3" or "&$3" are rejected here rather than
being silently truncated.

The decoder never looks at memory. Whether a rejected cell is data or
garbage is the engine's call (see machine.py).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Union


# ──────────────────────────────────────────────
# Addressing mode sigils
# ──────────────────────────────────────────────

DIRECT = '$'
INDIRECT = '&'

SIGILS = {DIRECT: False, INDIRECT: True}   # sigil -> indirect?

# Base-10, optional sign, ASCII digits only
INT_LITERAL = re.compile(r'[+-]?[0-9]+')


def parse_int(text: str) -> Optional[int]:
    """Parse a base-10 integer literal, or return None if text isn't one.

    Shared by operand decoding and by every integer read of a cell. A
    literal too long for int() is not a number: counters read it as 0
    and address reads reject it.
    """
    if not INT_LITERAL.fullmatch(text):
        return None
    try:
        return int(text)
    except ValueError:
        # past the interpreter's int string conversion limit
        return None


def is_int_literal(text: str) -> bool:
    """True if text has integer syntax, however many digits it carries."""
    return INT_LITERAL.fullmatch(text) is not None


# ──────────────────────────────────────────────
# Instruction forms
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class Operand:
    address: str
    indirect: bool = False

    def __str__(self) -> str:
        return (INDIRECT if self.indirect else DIRECT) + self.address


@dataclass(frozen=True)
class Succ:
    target: Operand

    def __str__(self) -> str:
        return f"succ {self.target}"


@dataclass(frozen=True)
class BeqzPred:
    test: Operand
    jump: Operand

    def __str__(self) -> str:
        return f"beqz-pred {self.test} {self.jump}"


@dataclass(frozen=True)
class Exit:
    def __str__(self) -> str:
        return "exit"


Instruction = Union[Succ, BeqzPred, Exit]

# Mnemonic -> operand count
MNEMONICS = {
    'exit':      0,
    'succ':      1,
    'beqz-pred': 2,
}


class DecodeError(Exception):
    """Raised when cell text does not match the instruction grammar."""
    def __init__(self, message: str, text: str):
        self.text = text
        super().__init__(f"{message}: {text!r}")


def decode_operand(token: str, text: Optional[str] = None) -> Operand:
    """Decode a single '$N' / '&N' token."""
    sigil, literal = token[:1], token[1:]
    if sigil not in SIGILS:
        raise DecodeError(f"Operand {token!r} has no addressing sigil",
                          token if text is None else text)
    if parse_int(literal) is None:
        raise DecodeError(f"Operand {token!r} is not an integer address",
                          token if text is None else text)
    return Operand(literal, SIGILS[sigil])


def decode_instruction(text: str) -> Instruction:
    """Decode one cell's text into Succ, BeqzPred or Exit.

    Raises DecodeError for unknown mnemonics, wrong operand counts and
    malformed operands.
    """
    parts = text.split()
    if not parts:
        raise DecodeError("Empty instruction", text)

    mnem, args = parts[0], parts[1:]
    if mnem not in MNEMONICS:
        raise DecodeError(f"Unknown mnemonic {mnem!r}", text)
    if len(args) != MNEMONICS[mnem]:
        raise DecodeError(
            f"{mnem} takes {MNEMONICS[mnem]} operand(s), got {len(args)}",
            text)

    operands = [decode_operand(arg, text) for arg in args]
    if mnem == 'exit':
        return Exit()
    if mnem == 'succ':
        return Succ(operands[0])
    return BeqzPred(operands[0], operands[1])
