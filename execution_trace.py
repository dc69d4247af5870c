"""
Execution traces for the arithmetic machines.

Machines report their progress to an optional sink: any callable taking a
StepRecord. Nothing a sink does feeds back into the machine, so a run
produces the same tapes with or without one.

Text trace layout (one block per step):
    State: WriteFirstAddArg
    Current Add Index: 1
    Current Mult Index: 3
    Current Add Tape: B
    Current Mult Tape: B11B01B0B
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

import numpy as np

from tape import CHAR_SYMBOLS, Symbol, Tape


@dataclass
class StepRecord:
    """One traced step: the state entered, every cursor, and every tape."""
    machine: str
    state: str
    cursors: Dict[str, int]
    tapes: Dict[str, str]


TraceSink = Callable[[StepRecord], None]


@dataclass
class TraceRecorder:
    """Sink that keeps every record it is given."""
    records: List[StepRecord] = field(default_factory=list)

    def __call__(self, record: StepRecord) -> None:
        self.records.append(record)

    def __len__(self):
        return len(self.records)

    def states(self) -> List[str]:
        return [r.state for r in self.records]


def emit(sink: Optional[TraceSink], machine: str, state: str,
         cursors: Dict[str, int], tapes: Dict[str, Tape]) -> None:
    """Send a record to sink, if there is one. Snapshots are taken only then."""
    if sink is None:
        return
    sink(StepRecord(
        machine=machine,
        state=state,
        cursors=dict(cursors),
        tapes={name: tape.snapshot() for name, tape in tapes.items()},
    ))


OPERATION_HEADERS = {
    'add': "Trace for {x} + {y}",
    'mult': "Abbreviated Trace for {x} x {y}",
    'exp': "Abbreviated Trace for {x} ^ {y} (x to the yth power)",
}


def trace_header(operation: str, x: int, y: int) -> str:
    return OPERATION_HEADERS[operation].format(x=x, y=y)


def format_step(record: StepRecord) -> str:
    lines = [f"State: {record.state}"]
    for name, idx in record.cursors.items():
        lines.append(f"Current {name} Index: {idx}")
    for name, snapshot in record.tapes.items():
        lines.append(f"Current {name} Tape: {snapshot}")
    return '\n'.join(lines) + '\n'


def format_trace(records: List[StepRecord], header: str = '', result: Optional[int] = None) -> str:
    """
    Render records as the text trace written to trace files.

    Args:
        records: Records collected from a run
        header: Optional first line (see trace_header)
        result: Optional decoded result, appended as a closing line

    Returns:
        The trace text
    """
    blocks = []
    if header:
        blocks.append(header + '\n')
    blocks.extend(format_step(r) for r in records)
    text = '\n'.join(blocks)
    if result is not None:
        text += f"\n\nInterpreted result of this computation: {result}"
    return text


def history_to_numpy(records: List[StepRecord], state_encoding=None):
    """
    Convert trace records to an int array of shape (n_steps, 1 + n_tapes).

    Columns are [state, cursor of first tape, cursor of second tape, ...],
    with tapes in the order the machine reports them.

    Args:
        records: Records collected from a run
        state_encoding: Optional dict mapping state names to integers.
                        If None, states are encoded in order of first appearance.

    Returns:
        Tuple of (array, state_encoding)
    """
    if not records:
        return np.array([], dtype=np.int64).reshape(0, 1), {}

    if state_encoding is None:
        state_encoding = {}
        for r in records:
            state_encoding.setdefault(r.state, len(state_encoding))

    names = list(records[0].cursors)
    arr = np.zeros((len(records), 1 + len(names)), dtype=np.int64)
    for i, r in enumerate(records):
        arr[i, 0] = state_encoding[r.state]
        for j, name in enumerate(names):
            arr[i, j + 1] = r.cursors[name]

    return arr, state_encoding


def tape_history_to_numpy(records: List[StepRecord], tape_name: str) -> np.ndarray:
    """
    Stack one tape's snapshots into a symbol-code array, padded with BLANK.

    Encoding: ZERO=0, ONE=1, BLANK=2.
    """
    snapshots = [r.tapes[tape_name] for r in records]
    width = max((len(s) for s in snapshots), default=0)
    arr = np.full((len(snapshots), width), int(Symbol.BLANK), dtype=np.int8)
    for i, snapshot in enumerate(snapshots):
        arr[i, :len(snapshot)] = [int(CHAR_SYMBOLS[c]) for c in snapshot]
    return arr


def save_history_to_file(records: List[StepRecord], filepath, state_encoding=None):
    """
    Save trace records to a .npy file.

    Returns:
        The state_encoding dict used
    """
    arr, encoding = history_to_numpy(records, state_encoding)
    np.save(filepath, arr)
    return encoding
