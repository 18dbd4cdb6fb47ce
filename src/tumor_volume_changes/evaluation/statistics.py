"""Aggregation of volume change samples into per-group statistics.

Samples are grouped by ``(ROI, PhasePair)``.  Each group reports the sample
count, the mean change, the Bessel-corrected sample standard deviation of the
change and the mean volume at the starting phase.  All arithmetic is float64;
nothing is rounded here.
"""
from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping, Sequence

import numpy as np

from tumor_volume_changes.domain.models import (
    DeltaSample,
    GroupKey,
    PhasePair,
    ROI,
    StatGroup,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Scalar statistics
# ---------------------------------------------------------------------------

def sample_mean(values: Sequence[float]) -> float:
    """Arithmetic mean; NaN for an empty sequence."""
    if len(values) == 0:
        return math.nan
    return float(np.mean(np.asarray(values, dtype=np.float64)))


def sample_std_dev(values: Sequence[float]) -> float | None:
    """Corrected sample standard deviation ``sqrt(sum((x - mean)^2) / (n - 1))``.

    Returns ``None`` for fewer than two values, where the estimator is
    undefined.
    """
    if len(values) < 2:
        return None
    return float(np.std(np.asarray(values, dtype=np.float64), ddof=1))


# ---------------------------------------------------------------------------
# DeltaAccumulator
# ---------------------------------------------------------------------------

class DeltaAccumulator:
    """Collects the samples of one ``(ROI, PhasePair)`` group.

    The raw samples are kept, so merging partial accumulators is exact and
    the finalised statistics do not depend on how the input was split.
    """

    def __init__(self, roi: ROI, pair: PhasePair) -> None:
        self.roi = roi
        self.pair = pair
        self._samples: list[DeltaSample] = []

    @property
    def key(self) -> GroupKey:
        return (self.roi, self.pair)

    def __len__(self) -> int:
        return len(self._samples)

    def add(self, sample: DeltaSample) -> None:
        """Append *sample*; its key must match the accumulator's key."""
        if sample.key != self.key:
            raise ValueError(
                f"Sample for {sample.roi.value} {sample.pair} added to "
                f"accumulator {self.roi.value} {self.pair}"
            )
        self._samples.append(sample)

    def merge(self, other: DeltaAccumulator) -> None:
        """Append all samples of *other*, preserving their order."""
        if other.key != self.key:
            raise ValueError(
                f"Cannot merge {other.roi.value} {other.pair} into "
                f"{self.roi.value} {self.pair}"
            )
        self._samples.extend(other._samples)

    def finalize(self) -> StatGroup:
        """Compute the group statistics from the collected samples."""
        deltas = [s.delta for s in self._samples]
        starts = [s.start_volume for s in self._samples]
        return StatGroup(
            roi=self.roi,
            pair=self.pair,
            samples=tuple(self._samples),
            n=len(self._samples),
            average=sample_mean(deltas),
            std_dev=sample_std_dev(deltas),
            volume_phase_start=sample_mean(starts),
        )


# ---------------------------------------------------------------------------
# Grouping
# ---------------------------------------------------------------------------

def accumulate(samples: Iterable[DeltaSample]) -> dict[GroupKey, DeltaAccumulator]:
    """Group *samples* into accumulators, created on the first sample of a key."""
    accumulators: dict[GroupKey, DeltaAccumulator] = {}
    for sample in samples:
        acc = accumulators.get(sample.key)
        if acc is None:
            acc = accumulators[sample.key] = DeltaAccumulator(sample.roi, sample.pair)
        acc.add(sample)
    return accumulators


def aggregate(samples: Iterable[DeltaSample]) -> dict[GroupKey, StatGroup]:
    """Group samples by ``(ROI, PhasePair)`` and finalise each group.

    Only groups with at least one sample are returned.
    """
    groups = {key: acc.finalize() for key, acc in accumulate(samples).items()}
    for group in groups.values():
        if group.std_dev is None:
            logger.debug(
                "%s %s: single sample, standard deviation undefined",
                group.roi.value, group.pair,
            )
    return groups


def aggregate_partials(
    partials: Iterable[Mapping[GroupKey, DeltaAccumulator]],
) -> dict[GroupKey, StatGroup]:
    """Merge independently built accumulator maps and finalise them.

    Each partial typically covers one patient or one chunk of patients.
    Merging in input order reproduces :func:`aggregate` over the
    concatenated samples exactly.
    """
    merged: dict[GroupKey, DeltaAccumulator] = {}
    for partial in partials:
        for key, acc in partial.items():
            target = merged.get(key)
            if target is None:
                target = merged[key] = DeltaAccumulator(acc.roi, acc.pair)
            target.merge(acc)
    return {key: acc.finalize() for key, acc in merged.items() if len(acc)}
