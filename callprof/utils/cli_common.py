"""
Shared pieces of the callprof command line.

Logging setup for profiler diagnostics, the parser skeleton for commands that
run a script under the profiler, and validation of the report options.
"""

import argparse
import logging
import os
from typing import Optional


def setup_logging() -> None:
    """
    Route profiler diagnostics to stderr.

    Diagnostics go through logging so they never mix with a report written
    to stdout.
    """
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s"
    )


class BaseArgumentParser:
    """
    Parser building blocks for commands that profile a script.
    """

    @staticmethod
    def create_base_parser(prog: str, description: str, epilog: Optional[str] = None) -> argparse.ArgumentParser:
        """
        Create a parser that keeps the usage examples of the epilog verbatim.

        Args:
            prog: Command name, e.g. callprof-run
            description: One-line summary shown in --help
            epilog: Usage examples

        Returns:
            Configured ArgumentParser instance
        """
        return argparse.ArgumentParser(
            prog=prog,
            description=description,
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog=epilog
        )

    @staticmethod
    def add_script_argument(parser: argparse.ArgumentParser,
                            help: str = "Python script to run under the profiler") -> None:
        """
        Add the profiled script and its own arguments to the parser.

        Args:
            parser: ArgumentParser to add arguments to
            help: Help text for the script argument
        """
        parser.add_argument("script", help=help)
        parser.add_argument(
            "script_args",
            nargs=argparse.REMAINDER,
            help="Arguments passed through to the script"
        )

    @staticmethod
    def add_verbose_quiet_arguments(parser: argparse.ArgumentParser) -> None:
        """
        Add -v/--verbose to show profiler debug logging and -q/--quiet to keep
        only warnings, so the report is the only output.

        Args:
            parser: ArgumentParser to add arguments to
        """
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show profiler debug logging"
        )
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Only log warnings and errors"
        )


def validate_common_arguments(args: argparse.Namespace) -> bool:
    """
    Reject conflicting logging flags, a negative --limit and a --repeat below 1.

    Args:
        args: Parsed arguments namespace

    Returns:
        True if arguments are valid, False otherwise
    """
    if getattr(args, 'verbose', False) and getattr(args, 'quiet', False):
        print("Error: --verbose and --quiet cannot be used together")
        return False

    if getattr(args, 'limit', None) is not None and args.limit < 0:
        print("Error: --limit must be zero or positive")
        return False

    if getattr(args, 'repeat', None) is not None and args.repeat < 1:
        print("Error: --repeat must be at least 1")
        return False

    return True


def configure_logging_level(args: argparse.Namespace) -> None:
    """
    Set the root logging level from -v/-q.

    Quiet wins over verbose; the default level is INFO.

    Args:
        args: Parsed arguments with verbose and quiet flags
    """
    if getattr(args, 'quiet', False):
        logging.getLogger().setLevel(logging.WARNING)
    elif getattr(args, 'verbose', False):
        logging.getLogger().setLevel(logging.DEBUG)
    else:
        logging.getLogger().setLevel(logging.INFO)


def check_script_exists(args: argparse.Namespace) -> bool:
    """
    Check that the script to profile exists and is a file.

    Args:
        args: Parsed arguments with a script attribute

    Returns:
        True if the script can be run, False otherwise
    """
    script = getattr(args, 'script', None)
    if not script:
        logging.error("No script given")
        return False

    if not os.path.isfile(script):
        logging.error(f"Script does not exist: {script}")
        return False

    return True
