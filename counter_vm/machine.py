"""
Counter Machine VM: Execution Engine

Integrates:
  - Instruction decoder (decoder.py)
  - Text-cell memory (memory.py)

Execution model, one step:
  1. Bounds-check pc, fetch memory[pc]
  2. Decode the cell text (fresh every step, cells may have been
     rewritten by an earlier step)
  3. Resolve operand addresses, direct or one-level indirect
  4. Execute: increment, test-and-decrement/branch, or halt

Every check a step performs happens before that step writes anything,
so a step that raises leaves pc and memory exactly as they were.

Termination reasons for run_steps():
  - HALT:   exit instruction executed
  - STEPS:  step budget used up
"""

import logging
from enum import Enum
from typing import Iterable, List, Union

from .decoder import (
    decode_instruction, parse_int, is_int_literal, DecodeError,
    Operand, Instruction, Succ, BeqzPred, Exit,
)
from .errors import ExecutingData, InvalidInstruction, MalformedAddress
from .memory import Memory

log = logging.getLogger(__name__)


class StopReason(Enum):
    HALT = 'HALT'
    STEPS = 'STEPS'


class CounterMachine:
    """Counter machine over a flat, self-modifying text memory.

    Usage:
        vm = CounterMachine(0, load_image('add.cm'))
        reason = vm.run_steps(100)
        print(vm.display())
    """

    def __init__(self, pc: int, memory: Union[Memory, Iterable[str]]):
        self.pc = pc
        self.mem = memory if isinstance(memory, Memory) else Memory(memory)

        # Instructions executed so far, exit included
        self.steps = 0

        self._trace = False
        self._trace_output: List[str] = []

        self._dispatch = {
            Succ:     self._op_succ,
            BeqzPred: self._op_beqz_pred,
            Exit:     self._op_exit,
        }

    # ══════════════════════════════════════════════
    # Addressing
    # ══════════════════════════════════════════════

    def check_bounds(self, addr: int):
        self.mem.check_bounds(addr)

    def resolve_address(self, operand: Operand) -> int:
        """Resolve an operand to a memory address.

        Direct:   the literal is the address.
        Indirect: the literal names a pointer cell; its integer value is
                  the address. The result is not dereferenced again.
        """
        addr = parse_int(operand.address)
        if addr is None:
            raise MalformedAddress(str(operand))
        if operand.indirect:
            return self.mem.read_address(addr)
        return addr

    # ══════════════════════════════════════════════
    # Execution
    # ══════════════════════════════════════════════

    def fetch(self) -> Instruction:
        """Decode the cell at pc.

        A cell that fails to decode is ExecutingData if it holds a bare
        integer, InvalidInstruction otherwise.
        """
        text = self.mem.read(self.pc)
        try:
            return decode_instruction(text)
        except DecodeError:
            if is_int_literal(text):
                raise ExecutingData(self.pc, text) from None
            raise InvalidInstruction(self.pc, text) from None

    def step(self) -> bool:
        """Execute one instruction. Returns False once halted, else True."""
        pc = self.pc
        instr = self.fetch()

        log.debug("PC=%d, Executing: %s", pc, instr)
        if self._trace:
            self._trace_output.append(f"PC={pc}: {instr}")

        running = self._dispatch[type(instr)](instr)
        self.steps += 1
        return running

    def run_steps(self, n: int) -> StopReason:
        """Execute up to n instructions, stopping early on exit.

        Machine errors propagate immediately and end the run.
        """
        if isinstance(n, bool) or not isinstance(n, int) or n < 1:
            raise ValueError(f"Step count must be a positive integer, got {n!r}")

        for _ in range(n):
            if not self.step():
                return StopReason.HALT
        return StopReason.STEPS

    # ══════════════════════════════════════════════
    # Instruction handlers
    # ══════════════════════════════════════════════

    def _op_exit(self, instr: Exit) -> bool:
        log.info("Exit instruction encountered at PC=%d", self.pc)
        return False

    def _op_succ(self, instr: Succ) -> bool:
        addr = self.resolve_address(instr.target)
        self.check_bounds(addr)
        self.mem.write_counter(addr, self.mem.read_counter(addr) + 1)
        self.pc += 1
        return True

    def _op_beqz_pred(self, instr: BeqzPred) -> bool:
        taddr = self.resolve_address(instr.test)
        self.check_bounds(taddr)
        value = self.mem.read_counter(taddr)
        if value == 0:
            jaddr = self.resolve_address(instr.jump)
            self.check_bounds(jaddr)
            self.pc = jaddr
        else:
            self.mem.write_counter(taddr, value - 1)
            self.pc += 1
        return True

    # ══════════════════════════════════════════════
    # Trace / Debug
    # ══════════════════════════════════════════════

    def enable_trace(self, enable: bool = True):
        """Record every executed instruction."""
        self._trace = enable

    @property
    def tracing(self) -> bool:
        return self._trace

    def get_trace(self) -> str:
        return '\n'.join(self._trace_output)

    def clear_trace(self):
        self._trace_output.clear()

    def display(self) -> str:
        """Format pc and memory for printing."""
        lines = ["=== VM State ===", f"PC: {self.pc}", "Memory:"]
        if len(self.mem):
            lines.append(self.mem.dump())
        lines.append("================")
        return '\n'.join(lines)
