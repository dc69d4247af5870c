"""
Tests for YAML job files.

Run with: pytest test_job_config.py -v
"""

import pytest

from job_config import load_job_file, parse_job_file

JOB_FILE = """
output_dir: traces
save_numpy: true
jobs:
  - {operation: add, x: 3, y: 5}
  - operation: multiply
    x: 4
    y: 6
  - {operation: pow, x: 2, y: 5}
"""


class TestParseJobFile:

    def test_full_file(self):
        config = parse_job_file(JOB_FILE)
        assert config['output_dir'] == 'traces'
        assert config['write_trace'] is True
        assert config['save_numpy'] is True
        assert config['jobs'] == [
            {'operation': 'add', 'x': 3, 'y': 5},
            {'operation': 'mult', 'x': 4, 'y': 6},
            {'operation': 'exp', 'x': 2, 'y': 5},
        ]

    def test_defaults(self):
        config = parse_job_file("jobs:\n  - {operation: add, x: 0, y: 0}\n")
        assert config['output_dir'] == '.'
        assert config['write_trace'] is True
        assert config['save_numpy'] is False

    def test_load_from_disk(self, tmp_path):
        path = tmp_path / 'jobs.yaml'
        path.write_text(JOB_FILE)
        assert len(load_job_file(str(path))['jobs']) == 3

    @pytest.mark.parametrize('text, message', [
        ("- 1\n- 2\n", "mapping"),
        ("jobs: []\n", "at least one job"),
        ("color: red\njobs:\n  - {operation: add, x: 1, y: 1}\n", "color"),
        ("jobs:\n  - {operation: add, x: 1}\n", "missing y"),
        ("jobs:\n  - {operation: div, x: 1, y: 1}\n", "Job 1"),
        ("jobs:\n  - {operation: add, x: -1, y: 1}\n", "out of range"),
        ("jobs:\n  - {operation: add, x: one, y: 1}\n", "must be an integer"),
        ("jobs:\n  - add 1 1\n", "expected a mapping"),
        ("write_trace: maybe\njobs:\n  - {operation: add, x: 1, y: 1}\n", "write_trace"),
    ])
    def test_invalid(self, text, message):
        with pytest.raises(ValueError, match=message):
            parse_job_file(text)
