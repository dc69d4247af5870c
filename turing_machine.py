"""
Turing Machine Arithmetic

Unary-step arithmetic on simulated tapes. Every machine here only reads the
cell under a cursor, writes it, and moves the cursor one cell; higher
operations run the lower ones as subroutines on private scratch tapes:

    exponentiation  --runs-->  multiplication  --runs-->  addition

Addition moves one unit at a time from x into y. Multiplication adds y to
a running product once per unit of x. Exponentiation multiplies a running
power by x once per unit of y.

Every machine returns the index of the BLANK right before its result.
With trim=True (top-level runs) the tape is cut at halt so that BLANK sits
at index 0; subroutine runs pass trim=False and the caller finds the result
at the returned index + 1.
"""

import numpy as np

from execution_trace import emit
from numeral_codec import (
    MAX_OPERAND,
    check_layout,
    init_exponent_tape,
    init_tape,
    init_work_tape,
    interpret_tape_result,
)
from tape import Symbol, Tape
from tape_traversal import (
    add_one_x,
    add_one_y,
    copy_until_blank,
    get_next_x,
    get_next_y,
    move_to_input_start,
    move_to_mult_start,
    run_state,
    take_one_x,
)


def add_sim(tape, sink=None, trim=True, strict=False):
    """
    Add the two numerals on a 'B x B y B' tape, in place.

    Args:
        tape: Tape laid out as by numeral_codec.init_tape
        sink: Optional trace sink, called once per state step
        trim: If True, cut the tape at halt so the result boundary is index 0
        strict: If True, check the tape layout before running

    Returns:
        Index of the BLANK immediately preceding the sum
    """
    if strict:
        check_layout(tape, 2)

    def tracer(state):
        if sink is None:
            return None
        return lambda idx: emit(sink, 'add', state, {'Add': idx}, {'Add': tape})

    emit(sink, 'add', 'Start', {'Add': 0}, {'Add': tape})
    cur_idx = 1

    while True:
        # Subtract 1 from x; reaching a BLANK means x is already zero
        cur_idx = run_state(take_one_x, tape, cur_idx, tracer('TakeOneX'))

        if tape.read(cur_idx) == Symbol.BLANK:
            emit(sink, 'add', 'Halt', {'Add': cur_idx}, {'Add': tape})
            if trim:
                tape.trim_prefix(cur_idx)
                return 0
            return cur_idx

        cur_idx = run_state(add_one_x, tape, cur_idx, tracer('AddOneX'))
        cur_idx = run_state(add_one_y, tape, cur_idx, tracer('AddOneY'))
        cur_idx = run_state(get_next_y, tape, cur_idx, tracer('GetNextY'))
        cur_idx = run_state(get_next_x, tape, cur_idx, tracer('GetNextX'))


def mult_sim(tape, add_tape=None, sink=None, trim=True, strict=False):
    """
    Multiply the numerals on a 'B x B y B p B' work tape by repeated addition.

    The add tape is scratch space: y and the running product p are copied
    onto it, added there by add_sim, and the sum is copied back over p.

    Args:
        tape: Work tape laid out as by numeral_codec.init_work_tape
        add_tape: Scratch tape for the addition subroutine (a fresh 'B' if None)
        sink: Optional trace sink, called once per state
        trim: If True, cut the work tape at halt so the result boundary is index 0
        strict: If True, check tape layouts before running each machine

    Returns:
        Index of the BLANK immediately preceding the product
    """
    if strict:
        check_layout(tape, 3)
    if add_tape is None:
        add_tape = Tape([Symbol.BLANK])

    tapes = {'Add': add_tape, 'Mult': tape}
    add_idx = 0
    mult_idx = 0

    def trace(state):
        emit(sink, 'mult', state, {'Add': add_idx, 'Mult': mult_idx}, tapes)

    trace('Start')
    add_idx = 1
    mult_idx = 1

    while True:
        trace('TakeOneInX')
        mult_idx = run_state(take_one_x, tape, mult_idx)

        if tape.read(mult_idx) == Symbol.BLANK:
            # x is used up, so the product cells hold the answer
            mult_idx += 1
            trace('MoveToOutputFromY')
            mult_idx = run_state(add_one_x, tape, mult_idx) - 1
            trace('Halt')
            if trim:
                tape.trim_prefix(mult_idx)
                return 0
            return mult_idx

        trace('MoveToYFromX')
        mult_idx = run_state(add_one_x, tape, mult_idx)

        trace('WriteFirstAddArg')
        mult_idx, add_idx = copy_until_blank(tape, add_tape, mult_idx, add_idx)
        mult_idx += 2
        add_idx += 2

        trace('WriteSecondAddArg')
        mult_idx, add_idx = copy_until_blank(tape, add_tape, mult_idx, add_idx)

        trace('MoveToBeginAdd')
        add_idx = move_to_input_start(add_tape, add_idx)

        trace('Add*')
        add_idx = add_sim(add_tape, trim=False, strict=strict) + 1

        trace('MoveToOutputStartFromEnd')
        mult_idx = run_state(get_next_x, tape, mult_idx)

        trace('WriteSumBack')
        add_idx, mult_idx = copy_until_blank(add_tape, tape, add_idx, mult_idx)

        trace('FirstCellFromEndAddTape*')
        add_idx = move_to_input_start(add_tape, add_idx)

        trace('FirstCellFromEndMultTape*')
        mult_idx = move_to_mult_start(tape, mult_idx)


def exp_sim(tape, mult_tape=None, sink=None, trim=True, strict=False):
    """
    Raise x to the y on a 'B x B y B r B' exponent tape by repeated multiplication.

    Each round decrements y, copies r and x onto the mult tape, runs
    mult_sim there, and copies the product back over r.

    Args:
        tape: Exponent tape laid out as by numeral_codec.init_exponent_tape
        mult_tape: Scratch tape for the multiplication subroutine (a fresh 'B' if None)
        sink: Optional trace sink, called once per state
        trim: If True, cut the exponent tape at halt so the result boundary is index 0
        strict: If True, check tape layouts before running each machine

    Returns:
        Index of the BLANK immediately preceding the power
    """
    if strict:
        check_layout(tape, 3)
    if mult_tape is None:
        mult_tape = Tape([Symbol.BLANK])
    # Only the multiplication subroutine touches this one
    add_tape = Tape([Symbol.BLANK])

    tapes = {'Mult': mult_tape, 'Exp': tape}
    mult_idx = 0
    exp_idx = 0

    def trace(state):
        emit(sink, 'exp', state, {'Mult': mult_idx, 'Exp': exp_idx}, tapes)

    trace('Start')
    mult_idx = 1
    exp_idx = 1

    while True:
        trace('MoveToYFromXForDecrement')
        exp_idx = run_state(add_one_x, tape, exp_idx)

        trace('DecrementY')
        exp_idx = run_state(take_one_x, tape, exp_idx)

        if tape.read(exp_idx) == Symbol.BLANK:
            # y is used up, so the result cells hold the answer
            exp_idx += 1
            trace('Halt')
            boundary = exp_idx - 1
            if trim:
                tape.trim_prefix(boundary)
                return 0
            return boundary

        trace('MoveToResFromY')
        exp_idx = run_state(add_one_x, tape, exp_idx)

        trace('WriteResAsMultArg')
        exp_idx, mult_idx = copy_until_blank(tape, mult_tape, exp_idx, mult_idx)
        mult_idx += 2

        trace('MoveToYForXWrite')
        exp_idx = run_state(get_next_y, tape, exp_idx)

        trace('MoveToXForXWrite')
        exp_idx = run_state(get_next_y, tape, exp_idx)

        trace('MoveToXBeginFromXEndForXWrite')
        exp_idx = run_state(get_next_x, tape, exp_idx)

        trace('WriteXAsMultArg')
        exp_idx, mult_idx = copy_until_blank(tape, mult_tape, exp_idx, mult_idx)
        # Both heads step over the BLANK just reached instead of back onto x
        exp_idx += 2
        mult_idx += 2

        trace('InitMultRes')
        mult_tape.safe_write(mult_idx, Symbol.ZERO)
        mult_idx += 1

        # The mult tape is reused, so stale digits may sit past the new product cell
        trace('MakeLastBlankInMult')
        mult_tape.safe_write(mult_idx, Symbol.BLANK)
        mult_idx -= 1

        trace('MultMoveToYAfterInitResWrite')
        mult_idx = run_state(get_next_y, mult_tape, mult_idx)

        trace('ToFirstInputEndInMultAfterXWrite')
        mult_idx = run_state(get_next_y, mult_tape, mult_idx)

        trace('ToFirstInputBeginInMultAfterArgWrites')
        mult_idx = run_state(get_next_x, mult_tape, mult_idx)

        trace('Mult*')
        mult_idx = mult_sim(mult_tape, add_tape, trim=False, strict=strict) + 1

        trace('ToExpResultForUpdate')
        exp_idx = run_state(add_one_x, tape, exp_idx)

        trace('WriteProduct')
        mult_idx, exp_idx = copy_until_blank(mult_tape, tape, mult_idx, exp_idx)

        trace('FirstCellFromEndExpTape*')
        exp_idx = move_to_mult_start(tape, exp_idx)

        trace('FirstCellFromEndMultTape*')
        mult_idx = move_to_mult_start(mult_tape, mult_idx)


def simulate_add(x, y, sink=None, strict=False):
    """
    Compute x + y on a fresh tape.

    Returns:
        Tuple of (tape, result_boundary); the sum is the numeral after the
        BLANK at result_boundary (always 0, since the tape is trimmed)
    """
    tape = init_tape(x, y)
    return tape, add_sim(tape, sink=sink, strict=strict)


def simulate_multiply(x, y, sink=None, strict=False):
    """Compute x * y on a fresh work tape. Returns (tape, result_boundary)."""
    tape = init_work_tape(x, y)
    return tape, mult_sim(tape, Tape([Symbol.BLANK]), sink=sink, strict=strict)


def simulate_exponent(x, y, sink=None, strict=False):
    """Compute x ** y on a fresh exponent tape (0 ** 0 == 1). Returns (tape, result_boundary)."""
    tape = init_exponent_tape(x, y)
    return tape, exp_sim(tape, Tape([Symbol.BLANK]), sink=sink, strict=strict)


SIMULATORS = {
    'add': simulate_add,
    'mult': simulate_multiply,
    'exp': simulate_exponent,
}

OPERATION_ALIASES = {
    'add': 'add',
    '+': 'add',
    'mult': 'mult',
    'multiply': 'mult',
    'x': 'mult',
    '*': 'mult',
    'exp': 'exp',
    'exponent': 'exp',
    'pow': 'exp',
    '^': 'exp',
}

EXPECTED = {
    'add': lambda x, y: x + y,
    'mult': lambda x, y: x * y,
    'exp': lambda x, y: x ** y,
}

DEFAULT_RANGES = {
    'add': (0, 255),
    'mult': (0, 31),
    'exp': (0, 5),
}


def normalize_operation(operation):
    """Map an operation name or alias ('multiply', '^', ...) to 'add', 'mult' or 'exp'."""
    key = str(operation).strip().lower().lstrip('-')
    if key not in OPERATION_ALIASES:
        raise ValueError(f"Unknown operation: {operation!r} "
                         f"(expected one of {', '.join(sorted(SIMULATORS))})")
    return OPERATION_ALIASES[key]


def simulate(operation, x, y, sink=None, strict=False):
    """
    Run one computation and decode its result.

    Returns:
        Tuple of (tape, result_boundary, result)
    """
    simulator = SIMULATORS[normalize_operation(operation)]
    tape, boundary = simulator(x, y, sink=sink, strict=strict)
    return tape, boundary, interpret_tape_result(tape, boundary)


def simulate_random_arithmetic(operation, n_runs, num_range=None, seed=None, verbose=False):
    """
    Run one operation on random operand pairs and check every result.

    Args:
        operation: 'add', 'mult' or 'exp' (or an alias)
        n_runs: Number of computations to run
        num_range: Tuple (min, max) for random operands (inclusive).
                   Defaults per operation: add (0, 255), mult (0, 31), exp (0, 5)
        seed: Optional random seed for reproducibility
        verbose: If True, print each run

    Returns:
        Dict with keys:
            - 'inputs': List of tuples (x, y)
            - 'results': List of decoded results
            - 'expected': List of exact results, wrapped to 32 bits
            - 'correct': List of booleans indicating if result matched
            - 'tape_lengths': List of final tape lengths
    """
    operation = normalize_operation(operation)
    if num_range is None:
        num_range = DEFAULT_RANGES[operation]
    min_num, max_num = num_range
    if min_num < 0 or max_num > MAX_OPERAND or min_num > max_num:
        raise ValueError(f"Invalid operand range: {num_range}")

    if seed is not None:
        np.random.seed(seed)

    inputs = []
    results = []
    expected = []
    correct = []
    tape_lengths = []

    for run_idx in range(n_runs):
        x = int(np.random.randint(min_num, max_num + 1))
        y = int(np.random.randint(min_num, max_num + 1))
        inputs.append((x, y))

        tape, _, result = simulate(operation, x, y)
        want = EXPECTED[operation](x, y) & MAX_OPERAND

        results.append(result)
        expected.append(want)
        correct.append(result == want)
        tape_lengths.append(len(tape))

        if verbose:
            status = "OK" if result == want else "WRONG"
            print(f"Run {run_idx + 1}/{n_runs}: {operation}({x}, {y}) -> {result}, "
                  f"Expected: {want}, Status: {status}")

    return {
        'inputs': inputs,
        'results': results,
        'expected': expected,
        'correct': correct,
        'tape_lengths': tape_lengths,
    }
