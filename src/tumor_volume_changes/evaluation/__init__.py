"""Statistics for the Tumor Volume Changes system.

Groups per-patient volume changes by region of interest and phase pair and
computes count, mean, corrected sample standard deviation and mean starting
volume for each group.
"""
from tumor_volume_changes.evaluation.statistics import (
    DeltaAccumulator,
    accumulate,
    aggregate,
    aggregate_partials,
    sample_mean,
    sample_std_dev,
)

__all__ = [
    "DeltaAccumulator",
    "accumulate",
    "aggregate",
    "aggregate_partials",
    "sample_mean",
    "sample_std_dev",
]
