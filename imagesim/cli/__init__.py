"""
CLI package for imagesim.

Provides the command-line interface for fingerprinting images, comparing
pairs and grouping similar images in a directory.

Public API:
- main: Entry point for CLI execution
- CLIOrchestrator: CLI workflow orchestration class
"""

from __future__ import annotations

from .orchestrator import CLIOrchestrator, setup_logging, EXIT_NOT_SIMILAR
from .arg_parser import create_parser, parse_arguments
from .reporting import print_comparison, print_group_report


def main(argv=None) -> int:
    """
    Main entry point for the CLI.

    Returns:
        Exit code (0 for success, 1 for error, 2 for a non-similar pair)
    """
    orchestrator = CLIOrchestrator()
    return orchestrator.run(argv)


__all__ = [
    'main',
    'CLIOrchestrator',
    'EXIT_NOT_SIMILAR',
    'setup_logging',
    'create_parser',
    'parse_arguments',
    'print_comparison',
    'print_group_report',
]
