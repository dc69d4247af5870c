"""
Symbol Tape

A tape is a 0-indexed, growable list of symbols over the alphabet
{ZERO, ONE, BLANK}. Reads never grow the tape; writes go through
safe_write, which pads any newly created cells with BLANK.

Display characters:
    ZERO  -> '0'
    ONE   -> '1'
    BLANK -> 'B'
"""

from enum import IntEnum
from typing import Iterable, List


class Symbol(IntEnum):
    ZERO = 0
    ONE = 1
    BLANK = 2

    @property
    def char(self) -> str:
        return SYMBOL_CHARS[self]

    @classmethod
    def from_char(cls, char: str) -> 'Symbol':
        try:
            return CHAR_SYMBOLS[char]
        except KeyError:
            raise ValueError(f"Not a tape symbol: {char!r}") from None


SYMBOL_CHARS = {Symbol.ZERO: '0', Symbol.ONE: '1', Symbol.BLANK: 'B'}
CHAR_SYMBOLS = {char: symbol for symbol, char in SYMBOL_CHARS.items()}


class Tape:
    """
    Read/write memory of a simulated machine.

    Any index a machine touches is either inside the current bounds or is
    written through safe_write. Cells are only ever removed by trim_prefix,
    which the machines call once, at halt.
    """

    def __init__(self, symbols: Iterable[Symbol] = ()):
        self.cells: List[Symbol] = [Symbol(s) for s in symbols]

    def __len__(self):
        return len(self.cells)

    def __iter__(self):
        return iter(self.cells)

    def __eq__(self, other):
        if isinstance(other, Tape):
            return self.cells == other.cells
        return NotImplemented

    def __str__(self):
        return tape_to_string(self)

    def __repr__(self):
        return f"Tape('{self}')"

    def read(self, idx: int) -> Symbol:
        if not 0 <= idx < len(self.cells):
            raise IndexError(f"Read at {idx} outside tape of length {len(self.cells)}")
        return self.cells[idx]

    def safe_write(self, idx: int, symbol: Symbol) -> None:
        """Write symbol at idx, growing the tape with BLANK cells if needed."""
        if idx < 0:
            raise IndexError(f"Write at negative index {idx}")
        if idx >= len(self.cells):
            self.cells.extend([Symbol.BLANK] * (idx + 1 - len(self.cells)))
        self.cells[idx] = symbol

    def trim_prefix(self, count: int) -> None:
        """Drop the first count cells, shifting the rest left."""
        del self.cells[:count]

    def append(self, symbol: Symbol) -> None:
        self.cells.append(Symbol(symbol))

    def extend(self, symbols: Iterable[Symbol]) -> None:
        self.cells.extend(Symbol(s) for s in symbols)

    def snapshot(self) -> str:
        return tape_to_string(self)

    def copy(self) -> 'Tape':
        return Tape(self.cells)


def string_to_tape(input_string: str) -> Tape:
    """
    Convert a display string to a tape.

    Example:
        string_to_tape('B11B0B') -> Tape of BLANK, ONE, ONE, BLANK, ZERO, BLANK
    """
    return Tape(Symbol.from_char(char) for char in input_string)


def tape_to_string(tape: Iterable[Symbol]) -> str:
    """Convert a tape (or any symbol sequence) back to its display string."""
    return ''.join(SYMBOL_CHARS[s] for s in tape)


def visualize_tape(tape: Tape, head=None, width=40):
    """
    Print a visual representation of the tape.

    Args:
        tape: Tape to show
        head: Optional head position to highlight
        width: Maximum number of cells to show, starting from index 0
    """
    if not len(tape):
        print("Empty tape")
        return

    last = min(len(tape), width)

    print("Position:", end=" ")
    for pos in range(last):
        print(f"{pos:^3}", end="")
    print()

    print("   Value:", end=" ")
    for pos in range(last):
        symbol = tape.read(pos).char
        if head is not None and pos == head:
            print(f"[{symbol}]", end="")
        else:
            print(f" {symbol} ", end="")
    print()
    if last < len(tape):
        print(f"... {len(tape) - last} more cells")
