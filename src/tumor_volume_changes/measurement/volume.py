"""Per-patient volume changes between consecutive treatment phases.

A change is computed for a ``(patient, ROI, phase pair)`` only when both
endpoint volumes are present.  Missing data is excluded, never imputed, and
the exclusion is scoped to exactly the affected ROI and phase pair.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from tumor_volume_changes.domain.models import (
    PHASE_PAIRS,
    ROI,
    DeltaSample,
    PatientRecord,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def compute_volume_change(
    start_volume: float | None,
    end_volume: float | None,
) -> float | None:
    """Compute the volume change between two phases.

    Parameters
    ----------
    start_volume:
        Volume at the earlier phase, or ``None`` when missing.
    end_volume:
        Volume at the later phase, or ``None`` when missing.

    Returns
    -------
    float or None
        ``start_volume - end_volume`` (positive when the volume shrinks),
        or ``None`` if either endpoint is missing.
    """
    if start_volume is None or end_volume is None:
        return None
    return start_volume - end_volume


def patient_deltas(record: PatientRecord) -> list[DeltaSample]:
    """Return the volume change samples of one patient.

    Samples are ordered by ROI, then by phase pair.
    """
    samples: list[DeltaSample] = []
    for roi in ROI:
        for pair in PHASE_PAIRS:
            start = record.volume(roi, pair.start)
            delta = compute_volume_change(start, record.volume(roi, pair.end))
            if delta is None:
                logger.debug(
                    "Patient %s: %s %s excluded (missing measurement)",
                    record.patient_id, roi.value, pair,
                )
                continue
            samples.append(
                DeltaSample(
                    patient_id=record.patient_id,
                    roi=roi,
                    pair=pair,
                    delta=delta,
                    start_volume=start,
                )
            )
    return samples


def compute_deltas(records: Iterable[PatientRecord]) -> list[DeltaSample]:
    """Compute all volume change samples, patient by patient in input order."""
    samples: list[DeltaSample] = []
    for record in records:
        samples.extend(patient_deltas(record))
    return samples
