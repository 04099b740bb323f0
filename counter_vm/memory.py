"""
Counter Machine VM: Flat Text-Cell Memory

Memory is a fixed-length list of text cells. A cell has no type: it is
code when the program counter fetches it and an integer counter when an
operand addresses it, so integers are re-parsed on every access and
never cached.

Two integer read policies coexist on purpose:

  read_counter()  lenient, anything that isn't a clean integer reads
                  as 0 (uninitialized counters)
  read_address()  strict, a non-integer raises MalformedIndirectTarget

Program image format: one cell per line (split on \n only), lines
stripped, blank lines skipped. The number of non-blank lines fixes the
memory size.
"""

from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

from .decoder import parse_int
from .errors import OutOfBounds, MalformedIndirectTarget


class Memory:
    """Fixed-size, mutable array of text cells."""

    def __init__(self, cells: Iterable[str] = ()):
        self._cells: List[str] = [str(c) for c in cells]

    def __len__(self) -> int:
        return len(self._cells)

    @property
    def size(self) -> int:
        return len(self._cells)

    @property
    def cells(self) -> List[str]:
        """Copy of the current cell contents."""
        return list(self._cells)

    # --- Bounds ---

    def check_bounds(self, addr: int):
        """Raise OutOfBounds unless 0 <= addr < size."""
        if addr < 0 or addr >= len(self._cells):
            raise OutOfBounds(addr, len(self._cells))

    # --- Core read/write ---

    def read(self, addr: int) -> str:
        self.check_bounds(addr)
        return self._cells[addr]

    def write(self, addr: int, text: str):
        self.check_bounds(addr)
        self._cells[addr] = text

    def read_counter(self, addr: int) -> int:
        """Read a cell as a counter. Non-integer text counts as 0."""
        value = parse_int(self.read(addr))
        return 0 if value is None else value

    def write_counter(self, addr: int, value: int):
        self.write(addr, str(value))

    def read_address(self, addr: int) -> int:
        """Read a pointer cell for indirect addressing. Must be an integer."""
        text = self.read(addr)
        value = parse_int(text)
        if value is None:
            raise MalformedIndirectTarget(addr, text)
        return value

    # --- Snapshots ---

    def snapshot(self) -> Tuple[str, ...]:
        """Capture the cell contents for later diffing."""
        return tuple(self._cells)

    @staticmethod
    def diff_snapshots(snap_a, snap_b) -> Dict[int, Tuple[str, str]]:
        """Compare two snapshots, return {addr: (old, new)} for changed cells."""
        changes = {}
        for addr, (old, new) in enumerate(zip(snap_a, snap_b)):
            if old != new:
                changes[addr] = (old, new)
        return changes

    # --- Display ---

    def dump(self, start: int = 0, length: Optional[int] = None) -> str:
        """One '  [addr]: cell' line per cell."""
        end = len(self._cells) if length is None else min(start + length, len(self._cells))
        return '\n'.join(f"  [{addr}]: {self._cells[addr]}"
                         for addr in range(max(start, 0), end))


# ──────────────────────────────────────────────
# Program image loading
# ──────────────────────────────────────────────

def parse_image(text: str) -> List[str]:
    """Split image text into cells: stripped lines, blanks dropped."""
    return [line.strip() for line in text.split('\n') if line.strip()]


def load_image(path: Union[str, Path]) -> Memory:
    """Read a program image file into a new Memory."""
    # read_bytes keeps a lone \r inside its line; read_text would split there
    text = Path(path).read_bytes().decode('utf-8')
    return Memory(parse_image(text))
