"""Entry point for the Tumor Volume Changes statistics tool.

Compute the report with::

    python -m tumor_volume_changes --file volumes.csv
    python -m tumor_volume_changes -f volumes.csv -r stats.json --summary --debug
"""

from __future__ import annotations

import argparse
import logging
import sys

from tumor_volume_changes import __version__
from tumor_volume_changes.config import get_setting
from tumor_volume_changes.domain.errors import VolumeChangesError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line argument parser.

    Returns
    -------
    argparse.ArgumentParser
        Configured argument parser.
    """
    default_results = get_setting("output.filename")
    default_decimals = get_setting("report.decimals")

    parser = argparse.ArgumentParser(
        prog="tumor-volume-changes",
        description=(
            "Average and standard deviation of GTV, GTV_N and PTV_DP volume "
            "changes between consecutive treatment phases."
        ),
    )
    parser.add_argument(
        "-f",
        "--file",
        required=True,
        help="CSV input file (semicolon delimited).",
    )
    parser.add_argument(
        "-r",
        "--results",
        default=default_results,
        help=f"JSON file where the results are written to (default: {default_results}).",
    )
    parser.add_argument(
        "--decimals",
        type=int,
        default=default_decimals,
        help=f"Decimal places kept in the JSON report (default: {default_decimals}).",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        default=False,
        help="Also print a markdown summary table to stdout.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Enable debug mode with verbose logging.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def _configure_logging(debug: bool) -> None:
    """Set up root logger.

    Parameters
    ----------
    debug:
        If True, set log level to DEBUG; otherwise use ``logging.level``
        from the configuration.
    """
    if debug:
        level = logging.DEBUG
    else:
        level = getattr(logging, str(get_setting("logging.level")).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, run the pipeline and return the exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.debug)

    if args.decimals < 0:
        parser.error("--decimals must be non-negative")

    from tumor_volume_changes.pipeline import run
    from tumor_volume_changes.reporting.report import format_stats_table

    try:
        stats = run(args.file, args.results, decimals=args.decimals)
    except VolumeChangesError as exc:
        logger.error("%s", exc)
        return 1

    if args.summary:
        print(format_stats_table(stats, decimals=args.decimals))
    return 0


if __name__ == "__main__":
    sys.exit(main())
