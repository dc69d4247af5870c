"""
Numeral Codec

Numbers live on the tape as reversed binary: least-significant bit first,
one ZERO/ONE symbol per bit, with 0 written as a single ZERO.

Tape layouts built here:
    init_tape(x, y)           B x... B y... B
    init_work_tape(x, y)      B x... B y... B 0 B      (multiplication)
    init_exponent_tape(x, y)  B x... B y... B 1 B      (exponentiation)
"""

from typing import List, Sequence

from tape import Symbol, Tape

MAX_NUMERAL_DIGITS = 32
MAX_OPERAND = 2 ** MAX_NUMERAL_DIGITS - 1


def encode_numeral(n: int) -> List[Symbol]:
    """
    Encode a non-negative integer as its reversed binary digits.

    Example:
        encode_numeral(6) -> [ZERO, ONE, ONE]
    """
    if isinstance(n, bool) or not isinstance(n, int):
        raise ValueError(f"Operand must be an integer, got {n!r}")
    if n < 0:
        raise ValueError(f"Operand must be non-negative, got {n}")
    if n > MAX_OPERAND:
        raise ValueError(f"Operand {n} does not fit in {MAX_NUMERAL_DIGITS} bits")

    digits = []
    while n != 0:
        digits.append(Symbol.ONE if n & 1 else Symbol.ZERO)
        n >>= 1
    if not digits:
        digits.append(Symbol.ZERO)
    return digits


def decode_numeral(digits: Sequence[Symbol]) -> int:
    """
    Decode a reversed-binary run back into an integer.

    Runs longer than MAX_NUMERAL_DIGITS are cut to their low-order
    MAX_NUMERAL_DIGITS digits first, so oversized results wrap silently.
    """
    digits = list(digits)[:MAX_NUMERAL_DIGITS]
    if not digits:
        raise ValueError("Cannot decode an empty numeral")
    if Symbol.BLANK in digits:
        raise ValueError("Numeral contains a BLANK cell")
    return int(''.join(Symbol(d).char for d in reversed(digits)), 2)


def init_tape(x: int, y: int) -> Tape:
    tape = Tape([Symbol.BLANK])
    tape.extend(encode_numeral(x))
    tape.append(Symbol.BLANK)
    tape.extend(encode_numeral(y))
    tape.append(Symbol.BLANK)
    return tape


def init_work_tape(x: int, y: int) -> Tape:
    """Addition layout plus a running product that starts at 0."""
    tape = init_tape(x, y)
    tape.extend([Symbol.ZERO, Symbol.BLANK])
    return tape


def init_exponent_tape(x: int, y: int) -> Tape:
    """Addition layout plus a running power that starts at 1 (x^0)."""
    tape = init_tape(x, y)
    tape.extend([Symbol.ONE, Symbol.BLANK])
    return tape


def read_result_numeral(tape: Tape, boundary: int = 0) -> List[Symbol]:
    """Return the digit run that follows the BLANK at index boundary."""
    if tape.read(boundary) != Symbol.BLANK:
        raise ValueError(f"Expected a BLANK at result boundary {boundary}")
    digits = []
    idx = boundary + 1
    while idx < len(tape) and tape.read(idx) != Symbol.BLANK:
        digits.append(tape.read(idx))
        idx += 1
    return digits


def interpret_tape_result(tape: Tape, boundary: int = 0) -> int:
    """Decode the result numeral of a halted machine."""
    return decode_numeral(read_result_numeral(tape, boundary))


def check_layout(tape: Tape, fields: int) -> None:
    """
    Fail fast unless the tape reads B (digits B) repeated fields times.

    Cells after the last field's BLANK are ignored, since scratch tapes
    may carry leftovers from earlier runs there.
    """
    if len(tape) == 0 or tape.read(0) != Symbol.BLANK:
        raise ValueError(f"Malformed tape '{tape}': must start with a BLANK")
    idx = 1
    for field in range(fields):
        start = idx
        while idx < len(tape) and tape.read(idx) != Symbol.BLANK:
            idx += 1
        if idx == start:
            raise ValueError(f"Malformed tape '{tape}': field {field + 1} is empty")
        if idx >= len(tape):
            raise ValueError(f"Malformed tape '{tape}': field {field + 1} is not terminated")
        idx += 1
