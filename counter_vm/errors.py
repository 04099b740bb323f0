"""
Counter Machine VM: Fatal Machine Errors

Every error here aborts the run. The engine raises them and never
recovers; the driver (cmrun.py) turns them into a diagnostic and a
non-zero exit status.

  OutOfBounds              address outside [0, size)
  InvalidInstruction       pc cell is not valid instruction text
  ExecutingData            pc cell is a bare integer
  MalformedAddress         operand literal is not an integer
  MalformedIndirectTarget  pointer cell does not hold an integer
"""


class MachineError(Exception):
    """Base class for all fatal machine conditions."""

    @property
    def kind(self) -> str:
        return type(self).__name__


class OutOfBounds(MachineError):
    def __init__(self, address: int, size: int):
        self.address = address
        self.size = size
        super().__init__(
            f"Memory access out of bounds: address {address} "
            f"is beyond memory size {size}")


class InvalidInstruction(MachineError):
    def __init__(self, pc: int, text: str):
        self.pc = pc
        self.text = text
        super().__init__(f"Invalid instruction at PC={pc}: {text!r}")


class ExecutingData(MachineError):
    def __init__(self, pc: int, text: str):
        self.pc = pc
        self.text = text
        super().__init__(
            f"Trying to execute data value {text} at PC={pc} as instruction")


class MalformedAddress(MachineError):
    def __init__(self, operand: str):
        self.operand = operand
        super().__init__(f"Invalid address: {operand!r}")


class MalformedIndirectTarget(MachineError):
    def __init__(self, address: int, text: str):
        self.address = address
        self.text = text
        super().__init__(
            f"Expected integer at address {address} for indirect "
            f"addressing, found: {text!r}")
