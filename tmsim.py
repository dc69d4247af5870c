"""Command-line entry point for the tape arithmetic simulator."""

import argparse
import logging
import os
import sys
from typing import List, Optional

from execution_trace import TraceRecorder, format_trace, save_history_to_file, trace_header
from job_config import load_job_file
from numeral_codec import MAX_OPERAND
from tape import visualize_tape
from turing_machine import normalize_operation, simulate, simulate_random_arithmetic

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Set up logging configuration."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[logging.StreamHandler()],
    )


def operand(value: str) -> int:
    """argparse type for a tape operand."""
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}") from None
    if n < 0 or n > MAX_OPERAND:
        raise argparse.ArgumentTypeError(f"must be between 0 and {MAX_OPERAND}: {n}")
    return n


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for the CLI.

    Returns:
        Argument parser

    """
    parser = argparse.ArgumentParser(
        prog="tmsim",
        description="Simulate unary-step arithmetic on Turing machine tapes",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(
        title="commands", description="valid commands", help="additional help", dest="command"
    )

    for name, help_text in (("add", "Compute X + Y"), ("mult", "Compute X * Y"), ("exp", "Compute X ^ Y")):
        op_parser = subparsers.add_parser(name, help=help_text)
        op_parser.add_argument("x", type=operand, help="First operand")
        op_parser.add_argument("y", type=operand, help="Second operand")
        op_parser.add_argument(
            "--output-dir", type=str, default=".", help="Directory to write the trace file to"
        )
        op_parser.add_argument(
            "--no-trace-file", action="store_true", help="Print the result without writing a trace"
        )
        op_parser.add_argument(
            "--save-npy", action="store_true", help="Also save the trace as a numpy array"
        )
        op_parser.add_argument(
            "--show-tape", action="store_true", help="Print the final tape"
        )

    batch_parser = subparsers.add_parser("batch", help="Run every job in a YAML job file")
    batch_parser.add_argument("job_file", type=str, help="Path to the YAML job file")

    random_parser = subparsers.add_parser("random", help="Check an operation on random operands")
    random_parser.add_argument("operation", type=str, help="add, mult or exp")
    random_parser.add_argument("--runs", type=int, default=20, help="Number of computations")
    random_parser.add_argument("--min", type=operand, default=None, help="Smallest operand")
    random_parser.add_argument("--max", type=operand, default=None, help="Largest operand")
    random_parser.add_argument("--seed", type=int, default=None, help="Random seed")

    return parser


def run_job(operation: str, x: int, y: int, output_dir: str = ".", write_trace: bool = True,
            save_numpy: bool = False, show_tape: bool = False) -> int:
    """Run one computation, write its trace files and print the result.

    Returns:
        The decoded result

    """
    operation = normalize_operation(operation)
    recorder = TraceRecorder() if (write_trace or save_numpy) else None
    tape, boundary, result = simulate(operation, x, y, sink=recorder)
    logger.debug(f"{operation}({x}, {y}) halted with tape {tape}")

    filename = f"{operation}_{x}_{y}"
    if write_trace or save_numpy:
        os.makedirs(output_dir, exist_ok=True)
    if write_trace:
        path = os.path.join(output_dir, filename)
        with open(path, "w") as f:
            f.write(format_trace(recorder.records, trace_header(operation, x, y), result))
        logger.info(f"Wrote {len(recorder)} trace steps to {path}")
        print(f"Created trace file '{filename}'")
    if save_numpy:
        npy_path = os.path.join(output_dir, filename + ".npy")
        encoding = save_history_to_file(recorder.records, npy_path)
        logger.info(f"Saved trace array to {npy_path} ({len(encoding)} states)")

    print(f"Result: {result}")
    if show_tape:
        visualize_tape(tape, head=boundary)
    return result


def run_random(args: argparse.Namespace) -> None:
    num_range = None
    if args.min is not None or args.max is not None:
        num_range = (args.min or 0, args.max if args.max is not None else MAX_OPERAND)
    results = simulate_random_arithmetic(
        args.operation, args.runs, num_range=num_range, seed=args.seed, verbose=True
    )
    n_correct = sum(results['correct'])
    n_total = len(results['correct'])
    print(f"\nCorrect: {n_correct}/{n_total}")
    if n_correct != n_total:
        raise RuntimeError(f"{n_total - n_correct} computations gave a wrong result")


def main(argv: Optional[List[str]] = None) -> int:
    """Execute the main entry point for the CLI.

    Args:
        argv: Command line arguments (if None, parse from sys.argv)

    Returns:
        Process exit status

    """
    parser = create_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        return 1

    try:
        if args.command in ("add", "mult", "exp"):
            run_job(
                args.command, args.x, args.y,
                output_dir=args.output_dir,
                write_trace=not args.no_trace_file,
                save_numpy=args.save_npy,
                show_tape=args.show_tape,
            )
        elif args.command == "batch":
            config = load_job_file(args.job_file)
            for job in config['jobs']:
                run_job(
                    job['operation'], job['x'], job['y'],
                    output_dir=config['output_dir'],
                    write_trace=config['write_trace'],
                    save_numpy=config['save_numpy'],
                )
        elif args.command == "random":
            run_random(args)
    except (ValueError, OSError, RuntimeError) as e:
        logger.error(str(e))
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
