"""
CLI workflow orchestration for imagesim.

Provides the CLIOrchestrator class that dispatches parsed arguments to the
hash, compare, group and config commands.
"""

from __future__ import annotations

import json
import logging

from ..batch import find_image_files, fingerprint_files, find_similar_groups
from ..exceptions import ImageSimError
from ..fingerprint import generate_masks, normalize, similar, similarity_stats
from ..imaging import fingerprint_file
from ..user_config import get_user_config
from ..utils.exporters import export_results
from .arg_parser import parse_arguments
from .reporting import print_comparison, print_group_report

# Exit code of `compare` when the images are not similar
EXIT_NOT_SIMILAR = 2


def setup_logging(verbose: bool = False) -> logging.Logger:
    """
    Configure logging for the CLI.

    Args:
        verbose: Enable verbose (DEBUG level) logging

    Returns:
        Configured logger instance
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    return logging.getLogger(__name__)


class CLIOrchestrator:
    """
    Orchestrates the CLI workflow.

    Parses arguments, configures logging and runs the selected command.
    """

    def __init__(self):
        """Initialize the orchestrator."""
        self.logger = None
        self.args = None
        self.config = get_user_config()
        self.masks = generate_masks()

    def run(self, argv=None) -> int:
        """
        Execute the CLI workflow.

        Args:
            argv: Argument list (default: sys.argv)

        Returns:
            Exit code (0 for success, 1 for error, 2 for a non-similar pair)
        """
        self.args = parse_arguments(argv)
        self.logger = setup_logging(self.args.verbose)

        commands = {
            'hash': self._hash_command,
            'compare': self._compare_command,
            'group': self._group_command,
            'config': self._config_command,
        }
        try:
            return commands[self.args.command]()
        except ImageSimError as e:
            self.logger.error(str(e))
            return 1

    def _hash_command(self) -> int:
        """Print fingerprints of the given files as JSON."""
        results = []
        for path in self.args.files:
            fingerprint = fingerprint_file(path, self.masks)
            if self.args.normalized:
                fingerprint = normalize(fingerprint)
            results.append({'path': str(path), **fingerprint.to_dict()})
        print(json.dumps(results, indent=2))
        return 0

    def _compare_command(self) -> int:
        """Compare two images and print the verdict."""
        fingerprint_a = fingerprint_file(self.args.image_a, self.masks)
        fingerprint_b = fingerprint_file(self.args.image_b, self.masks)
        thresholds = self.config.thresholds()

        verdict = similar(fingerprint_a, fingerprint_b, self.masks, thresholds)
        stats = None
        if self.args.stats:
            stats = similarity_stats(fingerprint_a, fingerprint_b, self.masks, thresholds.base_width)
        print_comparison(str(self.args.image_a), str(self.args.image_b), verdict, stats)
        return 0 if verdict else EXIT_NOT_SIMILAR

    def _group_command(self) -> int:
        """Group similar images under a directory."""
        directory = self.args.directory
        if not directory.is_dir():
            self.logger.error(f"Directory not found: {directory}")
            return 1

        self.logger.info(f"Scanning {directory}...")
        image_files = find_image_files(directory, recursive=not self.args.no_recursive)
        self.logger.info(f"Found {len(image_files):,} image files")
        if not image_files:
            self.logger.info("No images found. Exiting.")
            return 1

        show_progress = not self.args.no_progress
        records = fingerprint_files(
            image_files,
            masks=self.masks,
            max_workers=self.args.workers,
            show_progress=show_progress,
            logger=self.logger,
        )
        failed = [r for r in records if r.error]
        for record in failed:
            self.logger.warning(f"Could not fingerprint {record.path}: {record.error}")

        valid = [r for r in records if not r.error]
        groups = find_similar_groups(
            valid,
            thresholds=self.config.thresholds(),
            show_progress=show_progress,
            logger=self.logger,
        )
        print_group_report(groups, valid)

        if self.args.export:
            try:
                export_results(groups, self.args.export, self.args.export_format)
            except OSError as e:
                self.logger.error(f"Cannot write export file: {e}")
                return 1
            self.logger.info(f"Results exported to: {self.args.export}")
        return 0

    def _config_command(self) -> int:
        """Show the current configuration or create an example file."""
        config = self.config
        if self.args.init:
            if config.create_example_config():
                print(f"Created example configuration file at:\n  {config.config_file_path}")
                return 0
            print("Failed to create configuration file.")
            return 1

        print(f"Configuration file: {config.config_file_path}")
        print(f"Status: {'found' if config.config_file_path.exists() else 'not found (using defaults)'}")
        print("\nCurrent settings:")
        for name, value in config.effective_settings().items():
            print(f"  {name}: {value}")
        return 0


__all__ = ['CLIOrchestrator', 'setup_logging', 'EXIT_NOT_SIMILAR']
