"""Tumor Volume Changes.

Computes per-patient volume changes of the GTV, GTV_N and PTV_DP regions of
interest between consecutive treatment phases and aggregates them into
per-ROI summary statistics (count, mean, corrected sample standard
deviation, mean starting volume).
"""

from __future__ import annotations

__version__ = "0.1.0"
