"""Synthetic cohort generation for demos and tests."""

from tumor_volume_changes.data.synthetic import generate_cohort, write_cohort_csv

__all__ = [
    "generate_cohort",
    "write_cohort_csv",
]
