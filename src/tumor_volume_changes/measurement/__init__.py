"""Measurement sub-package.

Turns per-phase volumes into signed per-patient volume changes.
"""

from __future__ import annotations

from tumor_volume_changes.measurement.volume import (
    compute_deltas,
    compute_volume_change,
    patient_deltas,
)

__all__ = [
    "compute_deltas",
    "compute_volume_change",
    "patient_deltas",
]
