"""End-to-end volume change pipeline.

Loader -> difference computation -> aggregation -> report.  Every fatal
error propagates before the output file is touched.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from tumor_volume_changes.domain.models import PatientRecord, VolumeChangeStat
from tumor_volume_changes.evaluation.statistics import aggregate
from tumor_volume_changes.ingestion.csv_loader import count_missing, load_records
from tumor_volume_changes.measurement.volume import compute_deltas
from tumor_volume_changes.reporting.report import build_report, write_report

logger = logging.getLogger(__name__)


def compute_volume_change_stats(
    records: Iterable[PatientRecord],
) -> list[VolumeChangeStat]:
    """Compute the ordered volume change statistics of a cohort."""
    samples = compute_deltas(records)
    groups = aggregate(samples)
    stats = build_report(groups)
    logger.info(
        "Computed %d statistics from %d volume change samples",
        len(stats), len(samples),
    )
    return stats


def run(
    input_path: str | Path,
    output_path: str | Path,
    decimals: int | None = 3,
) -> list[VolumeChangeStat]:
    """Load *input_path*, compute the statistics and write them to *output_path*.

    Returns
    -------
    list[VolumeChangeStat]
        The unrounded statistics that were written.
    """
    records = load_records(input_path)
    missing = {col: n for col, n in count_missing(records).items() if n}
    if missing:
        logger.debug("Missing measurements per column: %s", missing)

    stats = compute_volume_change_stats(records)
    write_report(stats, output_path, decimals=decimals)
    return stats
