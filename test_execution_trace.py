"""
Tests for trace records, text traces and numpy export.

Run with: pytest test_execution_trace.py -v
"""

import numpy as np

from execution_trace import (
    StepRecord,
    TraceRecorder,
    emit,
    format_step,
    format_trace,
    history_to_numpy,
    save_history_to_file,
    tape_history_to_numpy,
    trace_header,
)
from tape import string_to_tape
from turing_machine import simulate_add, simulate_multiply


def make_record(state, add_idx, mult_idx, add_tape='B', mult_tape='B1B1B0B'):
    return StepRecord(
        machine='mult',
        state=state,
        cursors={'Add': add_idx, 'Mult': mult_idx},
        tapes={'Add': add_tape, 'Mult': mult_tape},
    )


class TestEmit:

    def test_no_sink_is_fine(self):
        emit(None, 'add', 'Start', {'Add': 0}, {'Add': string_to_tape('B1B')})

    def test_snapshots_are_strings(self):
        recorder = TraceRecorder()
        tape = string_to_tape('B1B')
        emit(recorder, 'add', 'Start', {'Add': 0}, {'Add': tape})
        tape.safe_write(1, tape.read(0))
        assert len(recorder) == 1
        assert recorder.records[0].tapes == {'Add': 'B1B'}
        assert recorder.records[0].cursors == {'Add': 0}


class TestFormatting:

    def test_format_step(self):
        text = format_step(make_record('WriteFirstAddArg', 1, 3))
        assert text == (
            "State: WriteFirstAddArg\n"
            "Current Add Index: 1\n"
            "Current Mult Index: 3\n"
            "Current Add Tape: B\n"
            "Current Mult Tape: B1B1B0B\n"
        )

    def test_headers(self):
        assert trace_header('add', 3, 5) == "Trace for 3 + 5"
        assert trace_header('mult', 4, 6) == "Abbreviated Trace for 4 x 6"
        assert trace_header('exp', 2, 5) == "Abbreviated Trace for 2 ^ 5 (x to the yth power)"

    def test_format_trace(self):
        records = [make_record('Start', 0, 0), make_record('Halt', 1, 4)]
        text = format_trace(records, "Abbreviated Trace for 1 x 1", result=1)
        assert text.startswith("Abbreviated Trace for 1 x 1\n\nState: Start\n")
        assert "\n\nState: Halt\n" in text
        assert text.endswith("Interpreted result of this computation: 1")

    def test_format_real_run(self):
        recorder = TraceRecorder()
        simulate_add(3, 5, sink=recorder)
        text = format_trace(recorder.records)
        assert text.count("State: ") == len(recorder)
        assert "Current Add Tape: B11B101B" in text


class TestNumpyExport:

    def test_history_columns(self):
        recorder = TraceRecorder()
        simulate_multiply(2, 3, sink=recorder)
        arr, encoding = history_to_numpy(recorder.records)
        assert arr.shape == (len(recorder), 3)
        assert encoding['Start'] == 0
        assert arr[0].tolist() == [0, 0, 0]
        for row, record in zip(arr, recorder.records):
            assert row[0] == encoding[record.state]
            assert row[1] == record.cursors['Add']
            assert row[2] == record.cursors['Mult']

    def test_given_encoding(self):
        records = [make_record('Start', 0, 0), make_record('Halt', 1, 4)]
        arr, encoding = history_to_numpy(records, {'Halt': 7, 'Start': 3})
        assert arr[:, 0].tolist() == [3, 7]
        assert encoding == {'Halt': 7, 'Start': 3}

    def test_empty_history(self):
        arr, encoding = history_to_numpy([])
        assert arr.shape == (0, 1)
        assert encoding == {}

    def test_tape_history_padded_with_blank(self):
        records = [
            make_record('Start', 0, 0, add_tape='B1'),
            make_record('Halt', 0, 0, add_tape='B101'),
        ]
        arr = tape_history_to_numpy(records, 'Add')
        assert arr.dtype == np.int8
        assert arr.tolist() == [[2, 1, 2, 2], [2, 1, 0, 1]]

    def test_save_history(self, tmp_path):
        recorder = TraceRecorder()
        simulate_add(2, 2, sink=recorder)
        path = tmp_path / 'add_2_2.npy'
        encoding = save_history_to_file(recorder.records, path)
        loaded = np.load(path)
        expected, _ = history_to_numpy(recorder.records, encoding)
        assert np.array_equal(loaded, expected)
