"""
Argument parsing for the CLI interface.

Provides functions to create and configure the argument parser for the
imagesim command-line interface.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from ..user_config import get_user_config


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Verbose output'
    )


def create_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance with hash, compare, group and
        config subcommands
    """
    default_workers = get_user_config().default_workers

    parser = argparse.ArgumentParser(
        prog='imagesim',
        description='Fingerprint images and find visually similar ones',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s hash photo.jpg
      Print the fingerprint of an image as JSON

  %(prog)s compare large.jpg small.jpg --stats
      Compare two images and show the raw filter statistics

  %(prog)s group /path/to/photos --export groups.json
      Group similar images in a directory and export the result

  %(prog)s config --init
      Create an example configuration file
        """
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    # hash
    hash_parser = subparsers.add_parser('hash', help='Print image fingerprints as JSON')
    hash_parser.add_argument('files', type=Path, nargs='+', help='Image files to fingerprint')
    hash_parser.add_argument(
        '--normalized',
        action='store_true',
        help='Print per-channel normalized fingerprints'
    )
    _add_common_options(hash_parser)

    # compare
    compare_parser = subparsers.add_parser(
        'compare',
        help='Decide whether two images are similar (exit code 0 if similar, 2 if not)'
    )
    compare_parser.add_argument('image_a', type=Path, help='First image')
    compare_parser.add_argument('image_b', type=Path, help='Second image')
    compare_parser.add_argument(
        '-s', '--stats',
        action='store_true',
        help='Also print the raw statistics of every filter'
    )
    _add_common_options(compare_parser)

    # group
    group_parser = subparsers.add_parser('group', help='Group similar images in a directory')
    group_parser.add_argument('directory', type=Path, help='Directory to scan for images')
    group_parser.add_argument(
        '-r', '--no-recursive',
        action='store_true',
        help='Do not scan subdirectories'
    )
    group_parser.add_argument(
        '-w', '--workers',
        type=int,
        default=default_workers,
        help=f'Number of parallel workers. Default: {default_workers}'
    )
    group_parser.add_argument(
        '-e', '--export',
        type=Path,
        help='Export results to file'
    )
    group_parser.add_argument(
        '--export-format',
        choices=['json', 'txt'],
        default='json',
        help='Export format. Default: json'
    )
    group_parser.add_argument(
        '--no-progress',
        action='store_true',
        help='Disable progress bars (useful for piping output)'
    )
    _add_common_options(group_parser)

    # config
    config_parser = subparsers.add_parser('config', help='Show or create the user configuration')
    config_parser.add_argument(
        '-i', '--init',
        action='store_true',
        help='Create an example configuration file'
    )
    _add_common_options(config_parser)

    return parser


def parse_arguments(argv=None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        argv: List of argument strings (default: sys.argv)

    Returns:
        Parsed arguments as Namespace object

    Examples:
        >>> args = parse_arguments(['compare', 'a.jpg', 'b.jpg'])
        >>> args.command
        'compare'
    """
    parser = create_parser()
    return parser.parse_args(argv)


__all__ = [
    'create_parser',
    'parse_arguments',
]
