"""
CLI for profiling a Python script.

Runs a script under the call profiler and prints a ranked report of the
functions it called.
"""

import argparse
import logging
import os
import runpy
import sys
from typing import List, Optional

from tqdm import tqdm

from ..profiler import Profiler
from ..utils import (
    BaseArgumentParser,
    add_filter_args,
    add_report_args,
    check_script_exists,
    configure_logging_level,
    setup_logging,
    validate_common_arguments,
)


def create_parser():
    """Create argument parser for the run command."""
    parser = BaseArgumentParser.create_base_parser(
        prog="callprof-run",
        description="Run a Python script under the call profiler and report call counts and elapsed time.",
        epilog="""
Examples:
  callprof-run app.py
  callprof-run --sort time --limit 10 app.py --app-flag
  callprof-run --mode C --repeat 5 -o report.txt app.py
"""
    )

    parser.add_argument(
        "--repeat",
        type=int,
        default=1,
        help="Run the script this many times, accumulating the profile (default: 1)"
    )

    add_report_args(parser)
    add_filter_args(parser)
    BaseArgumentParser.add_verbose_quiet_arguments(parser)
    BaseArgumentParser.add_script_argument(parser)

    return parser


def validate_arguments(args: argparse.Namespace) -> bool:
    """
    Validate parsed command-line arguments.

    Args:
        args: Parsed arguments namespace

    Returns:
        True if arguments are valid, False otherwise
    """
    if not validate_common_arguments(args):
        return False
    return check_script_exists(args)


def run_script(profiler: Profiler, script: str, script_args: List[str], repeat: int = 1,
               show_progress: bool = True) -> Optional[int]:
    """
    Run a script under the profiler.

    The script sees ``sys.argv`` as if it had been launched directly, and its
    directory is put first on ``sys.path``.

    Args:
        profiler: Profiler collecting the data
        script: Path of the script
        script_args: Arguments passed to the script
        repeat: Number of runs
        show_progress: Display a progress bar when running more than once

    Returns:
        Exit code requested by the script through SystemExit, or None
    """
    saved_argv, saved_path = sys.argv, list(sys.path)
    sys.argv = [script] + list(script_args)
    sys.path.insert(0, os.path.dirname(os.path.abspath(script)))
    exit_code = None
    try:
        runs = range(repeat)
        if repeat > 1 and show_progress:
            runs = tqdm(runs, desc="Profiling", unit="run")
        for _ in runs:
            profiler.start()
            try:
                runpy.run_path(script, run_name="__main__")
            except SystemExit as e:
                exit_code = e.code if isinstance(e.code, int) else (0 if e.code is None else 1)
                break
            finally:
                profiler.stop()
    finally:
        sys.argv = saved_argv
        sys.path[:] = saved_path
    return exit_code


def write_report(report: str, output: Optional[str]) -> None:
    """Print the report or write it to ``output``."""
    if not output:
        print(report)
        return
    with open(output, 'w', encoding='utf-8') as f:
        f.write(report)
    logging.info(f"Report written to: {output}")


def main(argv: Optional[List[str]] = None):
    """Main entry point for callprof-run command."""
    setup_logging()
    parser = create_parser()
    args = parser.parse_args(argv)

    if not validate_arguments(args):
        sys.exit(1)

    configure_logging_level(args)

    profiler = Profiler()
    if args.mode != "all":
        profiler.set_filter_mode(args.mode)

    exit_code = None
    failed = False
    try:
        logging.info(f"Profiling {args.script} ({args.repeat} run{'s' if args.repeat > 1 else ''})")
        exit_code = run_script(profiler, args.script, args.script_args, args.repeat,
                               show_progress=not args.quiet)
    except KeyboardInterrupt:
        logging.info("Profiling interrupted by user.")
        failed = True
    except Exception as e:
        logging.error(f"Profiled script raised {type(e).__name__}: {e}")
        logging.debug("Script traceback:", exc_info=True)
        failed = True

    if not args.no_combine:
        merged = profiler.combine()
        logging.debug(f"Combined {merged} duplicate records")

    try:
        write_report(profiler.report(args.sort, args.limit or None), args.output)
    except OSError as e:
        logging.error(f"Cannot write report: {e}")
        sys.exit(1)

    if failed:
        sys.exit(1)
    if exit_code:
        sys.exit(exit_code)


if __name__ == "__main__":
    main()
