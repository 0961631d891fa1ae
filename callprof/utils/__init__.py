"""
Utility modules for callprof.

This package provides the helpers shared by the command-line interfaces.
"""

from .cli_args import add_report_args, add_filter_args
from .cli_common import setup_logging, BaseArgumentParser, validate_common_arguments, configure_logging_level, check_script_exists

__all__ = [
    'add_report_args', 'add_filter_args',
    'setup_logging', 'BaseArgumentParser', 'validate_common_arguments', 'configure_logging_level', 'check_script_exists'
]
