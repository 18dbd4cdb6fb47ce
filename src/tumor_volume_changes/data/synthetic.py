"""Synthetic cohort generator for the Tumor Volume Changes system.

Produces reproducible per-patient GTV, GTV_N and PTV_DP volumes over the three
treatment phases, with regression between phases and randomly missing
measurements, and writes them in the semicolon-delimited input format.
"""

from __future__ import annotations

import csv
import logging
from collections.abc import Sequence
from pathlib import Path

import numpy as np

from tumor_volume_changes.domain.models import PHASES, ROI, PatientRecord
from tumor_volume_changes.ingestion.csv_loader import DELIMITER, REQUIRED_COLUMNS

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Typical phase-1 volumes (cm^3) as (mean, sigma) of a log-normal draw.
_BASELINE_LOGNORMAL: dict[ROI, tuple[float, float]] = {
    ROI.GTV: (3.0, 0.6),
    ROI.GTV_N: (2.2, 0.7),
    ROI.PTV_DP: (4.5, 0.4),
}

# Mean fractional shrinkage per phase transition.
_SHRINKAGE: dict[ROI, float] = {
    ROI.GTV: 0.25,
    ROI.GTV_N: 0.20,
    ROI.PTV_DP: 0.10,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def generate_cohort(
    n_patients: int = 40,
    seed: int = 42,
    missing_rate: float = 0.1,
) -> list[PatientRecord]:
    """Generate a synthetic cohort of patient records.

    Parameters
    ----------
    n_patients:
        Number of patients (rows).
    seed:
        Seed of the numpy random generator; equal seeds give equal cohorts.
    missing_rate:
        Probability that any single measurement is missing.

    Returns
    -------
    list[PatientRecord]
        Records with identifiers ``P001``, ``P002``, ...
    """
    if not 0.0 <= missing_rate <= 1.0:
        raise ValueError(f"missing_rate must be in [0, 1], got {missing_rate}")

    rng = np.random.default_rng(seed)
    records: list[PatientRecord] = []
    for i in range(n_patients):
        volumes: dict[tuple[ROI, int], float | None] = {}
        for roi in ROI:
            mu, sigma = _BASELINE_LOGNORMAL[roi]
            volume = float(rng.lognormal(mu, sigma))
            for phase in PHASES:
                if phase > PHASES[0]:
                    shrink = float(np.clip(rng.normal(_SHRINKAGE[roi], 0.1), -0.2, 0.9))
                    volume = volume * (1.0 - shrink)
                missing = bool(rng.random() < missing_rate)
                volumes[(roi, phase)] = None if missing else round(volume, 3)
        records.append(
            PatientRecord(patient_id=f"P{i + 1:03d}", volumes=volumes, row_number=i + 2)
        )
    logger.info("Generated synthetic cohort of %d patients (seed=%d)", n_patients, seed)
    return records


def write_cohort_csv(records: Sequence[PatientRecord], path: str | Path) -> Path:
    """Write *records* in the semicolon-delimited input format.

    Missing measurements are written as empty cells.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="") as fh:
        writer = csv.writer(fh, delimiter=DELIMITER)
        writer.writerow(REQUIRED_COLUMNS)
        for record in records:
            row = [record.patient_id]
            for roi in ROI:
                for phase in PHASES:
                    value = record.volume(roi, phase)
                    row.append("" if value is None else repr(value))
            writer.writerow(row)
    logger.info("Wrote %d records to %s", len(records), path)
    return path

