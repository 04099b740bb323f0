"""
Counter Machine VM
==================
An interpreter for a three-instruction counter machine whose memory is a
flat list of text cells holding both code and data.

    ┌──────────────┐    ┌──────────┐    ┌───────────┐    ┌──────────┐
    │ Image (.cm)  │───>│  Memory  │───>│  Decoder  │───>│ Machine  │
    │ line / cell  │    │ (cells)  │    │ (instr)   │    │ (pc, run)│
    └──────────────┘    └──────────┘    └───────────┘    └──────────┘

Instructions:
    succ <op>             increment the counter at <op>
    beqz-pred <op> <op>   jump to 2nd <op> if 1st is zero, else decrement it
    exit                  halt

Operands are $N (direct) or &N (indirect, one level).
"""

__version__ = "0.1.0"

from .decoder import (
    Operand, Succ, BeqzPred, Exit, Instruction,
    DecodeError, decode_instruction, parse_int,
)
from .errors import (
    MachineError, OutOfBounds, InvalidInstruction, ExecutingData,
    MalformedAddress, MalformedIndirectTarget,
)
from .memory import Memory, parse_image, load_image
from .machine import CounterMachine, StopReason
