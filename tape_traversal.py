"""
Tape traversal primitives shared by the arithmetic machines.

Each state function examines one cell, may rewrite it, and returns a Step:
the next cell to examine and whether the state is finished. A state is
driven by run_state until it signals ADVANCE; the caller decides which
state runs next.

    Signal.CONTINUE: stay in this state, examine step.cursor next
    Signal.ADVANCE:  this state is done, the next state starts at step.cursor
"""

from enum import Enum
from typing import Callable, NamedTuple, Optional, Tuple

from tape import Symbol, Tape


class Signal(Enum):
    CONTINUE = 'continue'
    ADVANCE = 'advance'


class Step(NamedTuple):
    cursor: int
    signal: Signal


StateFunction = Callable[[Tape, int], Step]


def take_one_x(tape: Tape, idx: int) -> Step:
    """Decrement the numeral starting at idx by one."""
    symbol = tape.read(idx)
    if symbol == Symbol.ZERO:
        tape.safe_write(idx, Symbol.ONE)
        return Step(idx + 1, Signal.CONTINUE)
    if symbol == Symbol.ONE:
        tape.safe_write(idx, Symbol.ZERO)
    # A BLANK here means the numeral was already zero
    return Step(idx, Signal.ADVANCE)


def add_one_x(tape: Tape, idx: int) -> Step:
    """Walk right to the next BLANK and stop just past it."""
    if tape.read(idx) == Symbol.BLANK:
        return Step(idx + 1, Signal.ADVANCE)
    return Step(idx + 1, Signal.CONTINUE)


def add_one_y(tape: Tape, idx: int) -> Step:
    """Increment the numeral starting at idx by one."""
    symbol = tape.read(idx)
    if symbol == Symbol.ONE:
        tape.safe_write(idx, Symbol.ZERO)
        return Step(idx + 1, Signal.CONTINUE)
    if symbol == Symbol.ZERO:
        tape.safe_write(idx, Symbol.ONE)
        return Step(idx - 1, Signal.ADVANCE)
    # Carry out of the top digit: the numeral grows by one cell
    tape.safe_write(idx, Symbol.ONE)
    tape.safe_write(idx + 1, Symbol.BLANK)
    return Step(idx - 1, Signal.ADVANCE)


def get_next_y(tape: Tape, idx: int) -> Step:
    """Walk left to the next BLANK and stop one cell left of it."""
    if tape.read(idx) == Symbol.BLANK:
        return Step(idx - 1, Signal.ADVANCE)
    return Step(idx - 1, Signal.CONTINUE)


def get_next_x(tape: Tape, idx: int) -> Step:
    """Walk left to the next BLANK and stop one cell right of it."""
    if tape.read(idx) == Symbol.BLANK:
        return Step(idx + 1, Signal.ADVANCE)
    return Step(idx - 1, Signal.CONTINUE)


def run_state(state: StateFunction, tape: Tape, idx: int,
              on_step: Optional[Callable[[int], None]] = None) -> int:
    """
    Apply one state function until it signals ADVANCE.

    Args:
        state: State function to run
        tape: Tape the state operates on
        idx: Cursor the state starts at
        on_step: Optional callback invoked with the cursor before every step

    Returns:
        The cursor the next state should start at
    """
    while True:
        if on_step is not None:
            on_step(idx)
        step = state(tape, idx)
        if step.signal is Signal.ADVANCE:
            return step.cursor
        idx = step.cursor


def copy_until_blank(tape_read: Tape, tape_write: Tape, idx_r: int, idx_w: int) -> Tuple[int, int]:
    """
    Copy cells from tape_read to tape_write up to the next BLANK.

    A terminating BLANK is written after the copied run. Both cursors come
    back one cell left of where the scan stopped, i.e. on the last copied
    cell of each tape.

    Returns:
        Tuple of (idx_r, idx_w)
    """
    while tape_read.read(idx_r) != Symbol.BLANK:
        tape_write.safe_write(idx_w, tape_read.read(idx_r))
        idx_r += 1
        idx_w += 1
    tape_write.safe_write(idx_w, Symbol.BLANK)
    return idx_r - 1, idx_w - 1


def move_to_input_start(tape: Tape, idx: int) -> int:
    """From inside the second field of a two-field tape, go to the first cell of field one."""
    idx = run_state(get_next_y, tape, idx)
    return run_state(get_next_x, tape, idx)


def move_to_mult_start(tape: Tape, idx: int) -> int:
    """Same as move_to_input_start, for tapes holding three fields."""
    idx = run_state(get_next_y, tape, idx)
    idx = run_state(get_next_y, tape, idx)
    return run_state(get_next_x, tape, idx)
