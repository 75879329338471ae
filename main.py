#!/usr/bin/env python3
"""
Polyomino Ring Farm

Main entry point: searches for closed-ring arrangements of a set of
polyominoes and writes the best candidates as SVG drawings.
"""

import sys
import argparse
import logging
import time
from pathlib import Path

# Add current directory to path for imports
sys.path.append(str(Path(__file__).parent))

from polyring.config_loader import (
    ConfigurationError,
    load_config,
    print_config_summary,
)
from ringfarm.cli import apply_overrides, run_from_config


DEFAULT_SHAPES_FILE = "data/pentomino.txt"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Polyomino Ring Farm - closed-ring layout search",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python3 main.py                                # Pentominoes with config.yaml settings
  python3 main.py data/tetromino.txt             # Another shapes file
  python3 main.py -s 42 -p 200 -g 20             # Seed, population and generation count
  python3 main.py --no-mirror --plot best.png    # Rotations only, save a PNG of the best layout
        """
    )

    parser.add_argument(
        'shapes_file',
        nargs='?',
        metavar='SHAPES_FILE',
        help=f'Shape definitions, separated by blank lines (default: {DEFAULT_SHAPES_FILE})'
    )

    parser.add_argument(
        '--config', '-c',
        default='config.yaml',
        help='Configuration file path (default: config.yaml)'
    )

    parser.add_argument('--seed', '-s', type=int, help='Random seed')
    parser.add_argument('--population', '-p', type=int, metavar='N', help='Layouts per generation')
    parser.add_argument('--generations', '-g', type=int, metavar='N', help='Number of generations')
    parser.add_argument('--elites', '-e', type=int, metavar='N', help='Elites carried over unchanged')
    parser.add_argument('--mutation-percentage', '-m', type=float, metavar='PCT',
                        help='Share of each generation produced by mutation (0-100)')
    parser.add_argument('--mutation-attempts', '-a', type=int, metavar='N',
                        help='Trial clones evaluated per mutation')
    parser.add_argument('--output', '-o', metavar='FILE', help='HTML file receiving the top layouts')
    parser.add_argument('--cell-side', type=int, metavar='PX', help='Cell size in pixels')
    parser.add_argument('--plot', metavar='FILE', help='Save a PNG preview of the best layout')
    parser.add_argument('--no-mirror', action='store_true', help='Do not use mirrored variants')
    parser.add_argument('--no-rotate', action='store_true', help='Do not use rotated variants')
    parser.add_argument('--verbose', '-v', action='store_true', help='Log every mutation')

    return parser


def main():
    """Main entry point with command-line argument parsing"""
    args = build_parser().parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    try:
        config_path = args.config if Path(args.config).exists() else None
        if config_path is None:
            print(f"Configuration file {args.config} not found, using defaults")
        config = apply_overrides(load_config(config_path), vars(args))

        if args.shapes_file is None and config_path is None:
            print(f"Shapes file not specified, using default: {DEFAULT_SHAPES_FILE}")

        print_config_summary(config)

        start_time = time.time()
        run_from_config(config)
        print(f"\nCompleted in {time.time() - start_time:.3f} seconds")
        print("Done.")

    except KeyboardInterrupt:
        print("\nOperation cancelled by user.")
        sys.exit(1)
    except ConfigurationError as e:
        print(f"Configuration Error: {e}")
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
