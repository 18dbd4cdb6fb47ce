"""Ingestion sub-package.

Reads semicolon-delimited per-patient volume tables into
:class:`~tumor_volume_changes.domain.models.PatientRecord` objects.
"""

from __future__ import annotations

from tumor_volume_changes.ingestion.csv_loader import (
    DELIMITER,
    REQUIRED_COLUMNS,
    count_missing,
    load_records,
    read_records,
)

__all__ = [
    "DELIMITER",
    "REQUIRED_COLUMNS",
    "count_missing",
    "load_records",
    "read_records",
]
