"""
Batch job files.

A job file is a YAML document listing computations to run:

    output_dir: traces
    write_trace: true
    save_numpy: false
    jobs:
      - {operation: add, x: 3, y: 5}
      - {operation: mult, x: 4, y: 6}
      - {operation: exp, x: 2, y: 5}

Only 'jobs' is required.
"""

import yaml

from numeral_codec import MAX_OPERAND
from turing_machine import normalize_operation

DEFAULT_OPTIONS = {
    'output_dir': '.',
    'write_trace': True,
    'save_numpy': False,
}


def _parse_operand(job_number, name, value):
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Job {job_number}: '{name}' must be an integer, got {value!r}")
    if value < 0 or value > MAX_OPERAND:
        raise ValueError(f"Job {job_number}: '{name}' out of range: {value}")
    return value


def _parse_job(job_number, job):
    if not isinstance(job, dict):
        raise ValueError(f"Job {job_number}: expected a mapping, got {job!r}")
    missing = [key for key in ('operation', 'x', 'y') if key not in job]
    if missing:
        raise ValueError(f"Job {job_number}: missing {', '.join(missing)}")
    try:
        operation = normalize_operation(job['operation'])
    except ValueError as e:
        raise ValueError(f"Job {job_number}: {e}") from None
    return {
        'operation': operation,
        'x': _parse_operand(job_number, 'x', job['x']),
        'y': _parse_operand(job_number, 'y', job['y']),
    }


def parse_job_file(yaml_string):
    """
    Parse a YAML job file.

    Args:
        yaml_string: YAML text of the job file

    Returns:
        Dict with keys:
            - 'jobs': List of dicts with 'operation' ('add', 'mult' or 'exp'), 'x', 'y'
            - 'output_dir': Directory for trace files
            - 'write_trace': Whether to write text traces
            - 'save_numpy': Whether to also save .npy trace arrays
    """
    data = yaml.safe_load(yaml_string)
    if not isinstance(data, dict):
        raise ValueError("Job file must be a YAML mapping")

    unknown = set(data) - set(DEFAULT_OPTIONS) - {'jobs'}
    if unknown:
        raise ValueError(f"Unknown job file keys: {', '.join(sorted(unknown))}")

    jobs = data.get('jobs')
    if not isinstance(jobs, list) or not jobs:
        raise ValueError("Job file must list at least one job under 'jobs'")

    config = dict(DEFAULT_OPTIONS)
    for key in DEFAULT_OPTIONS:
        if data.get(key) is not None:
            config[key] = data[key]
    config['output_dir'] = str(config['output_dir'])
    for key in ('write_trace', 'save_numpy'):
        if not isinstance(config[key], bool):
            raise ValueError(f"'{key}' must be true or false, got {config[key]!r}")

    config['jobs'] = [_parse_job(i + 1, job) for i, job in enumerate(jobs)]
    return config


def load_job_file(path):
    with open(path, 'r') as f:
        return parse_job_file(f.read())
