#!/usr/bin/env python3
"""
Scrum Work Map - Main CLI Entry Point
=====================================

Runs the weekly work map analysis for one week and writes the results.

    Phase 1: Load          -- the requested week (latest by default) and its
                              ISO neighbours from the data directory, or a
                              single .xlsx/.csv table given with --file
    Phase 2: Work map      -- Project > Module > Feature tree with metrics
    Phase 3: Network       -- collaboration graph, layout, bottlenecks
    Phase 4: Continuity    -- prev -> current -> next task continuity
    Phase 5: Report        -- multi-sheet Excel workbook (--output) and an
                              optional interactive network chart (--html)

Usage:
    python run.py                              # Latest week in data/scrum
    python run.py --week 2025-W03              # Specific week
    python run.py --data-dir /path/to/scrum --output report.xlsx
    python run.py --file items.xlsx --html network.html
"""

import argparse
import logging
import os
import re
import sys
import time
from pathlib import Path

from scrum_workmap.core.config import DEFAULT_DATA_DIR, DEFAULT_REPORT_FILE, LOG_DIR

logger = logging.getLogger(__name__)


# ==========================================
# PATH VALIDATION
# ==========================================

def validate_file_path(path: str, must_exist: bool = False) -> Path:
    """
    Resolve a user-supplied path and check it stays in an allowed location.

    Allowed locations are the project directory and the user's home
    directory.

    Args:
        path: Raw path from a CLI argument.
        must_exist: Raise when the resolved path does not exist.

    Returns:
        The resolved Path.

    Raises:
        ValueError: If the path is malformed, outside allowed directories,
                    or missing when must_exist is True.
    """
    try:
        resolved = Path(path).resolve()

        if must_exist and not resolved.exists():
            raise ValueError(f"File not found: {path}")

        project_root = Path(__file__).parent.resolve()
        home_dir = Path.home().resolve()
        allowed = resolved.is_relative_to(project_root) or resolved.is_relative_to(home_dir)
        if not allowed:
            raise ValueError(f"Path outside allowed directories: {path}")

        return resolved
    except (OSError, RuntimeError, ValueError) as e:
        raise ValueError(f"Invalid file path '{path}': {e}")


def sanitize_filename(filename: str) -> str:
    """Keep word characters, spaces, hyphens and dots; at most 255 chars."""
    filename = os.path.basename(filename)
    filename = re.sub(r'[^\w\s\-\.]', '', filename)
    return filename[:255]


def output_file_path(path: str) -> Path:
    """Sanitize the file name part of an output path, then validate the whole path."""
    raw = Path(path)
    name = sanitize_filename(raw.name)
    if not name.strip('. '):
        raise ValueError(f"Invalid output file name: {path}")
    return validate_file_path(str(raw.parent / name))


# ==========================================
# LOGGING
# ==========================================

def setup_logging(verbose: bool = False, log_dir: Path = LOG_DIR) -> Path:
    """
    Configure the root logger with file and console handlers.

    Every run writes a timestamped log file under ``log_dir`` at DEBUG level.
    The console shows warnings only, or info with --verbose.

    Returns:
        Path of the new log file.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    timestamp = time.strftime('%Y%m%d_%H%M%S')
    log_file = log_dir / f"scrum_workmap_{timestamp}.log"

    file_formatter = logging.Formatter(
        '%(asctime)s | %(name)s | %(levelname)s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    console_formatter = logging.Formatter(
        '%(asctime)s | %(levelname)s | %(message)s',
        datefmt='%H:%M:%S'
    )

    file_handler = logging.FileHandler(log_file)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(file_formatter)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO if verbose else logging.WARNING)
    console_handler.setFormatter(console_formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Calling twice must not duplicate log lines
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    if verbose:
        print(f"Verbose logging enabled. Log file: {log_file}")

    return log_file


# ==========================================
# CLI
# ==========================================

def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description='Scrum Work Map - weekly work map, collaboration network and continuity',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run.py                           Latest week, report in the current directory
  python run.py --week 2025-W03           Specific ISO week
  python run.py --file items.xlsx         Single table, no continuity neighbours
  python run.py --html network.html       Also write the network chart
        """
    )

    parser.add_argument(
        '--data-dir', '-d',
        type=str,
        default=str(DEFAULT_DATA_DIR),
        help=f'Directory holding <year>/<year>-Wnn.json files (default: {DEFAULT_DATA_DIR})'
    )

    parser.add_argument(
        '--week', '-w',
        type=str,
        help='ISO week to analyse, e.g. 2025-W03 (default: latest available)'
    )

    parser.add_argument(
        '--file', '-f',
        type=str,
        help='Input Excel/CSV table instead of the weekly JSON files'
    )

    parser.add_argument(
        '--output', '-o',
        type=str,
        default=DEFAULT_REPORT_FILE,
        help=f'Output report file path (default: {DEFAULT_REPORT_FILE})'
    )

    parser.add_argument(
        '--html',
        type=str,
        help='Write the collaboration network chart to this HTML file'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Show detailed logging output'
    )

    return parser.parse_args(argv)


def run(args) -> Path:
    """Run every phase for the parsed arguments.  Returns the report path.

    Raises:
        ValueError: For invalid paths, week keys or unreadable input.
    """
    from scrum_workmap.ingest import WeekKey, load_items_table
    from scrum_workmap.pipeline import run_workmap
    from scrum_workmap.visualization import chart_collaboration_network

    output_path = output_file_path(args.output)

    if args.file:
        items = load_items_table(validate_file_path(args.file, must_exist=True))
        pipeline = run_workmap(items=items, output_path=output_path, verbose=args.verbose)
    else:
        week = WeekKey.parse(args.week) if args.week else None
        pipeline = run_workmap(data_dir=args.data_dir, week=week,
                               output_path=output_path, verbose=args.verbose)

    if args.html:
        html_path = output_file_path(args.html)
        fig = chart_collaboration_network(pipeline.layout.graph)
        fig.write_html(str(html_path))
        logger.info(f"[CLI] Network chart written to {html_path}")

    return output_path


def main(argv=None):
    """Parse arguments, run, and exit 1 on invalid input."""
    args = parse_args(argv)
    log_file = setup_logging(verbose=args.verbose)
    logger.debug(f"[CLI] Log file: {log_file}")

    try:
        output_path = run(args)
    except ValueError as e:
        logger.error(f"[CLI] {e}")
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nCancelled by user.")
        sys.exit(0)

    print(f"Report saved to: {output_path}")


if __name__ == "__main__":
    main()
