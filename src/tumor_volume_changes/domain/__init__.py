"""Domain layer -- models, enumerations, and errors.

Re-exports all public domain types for convenient access::

    from tumor_volume_changes.domain import ROI, PhasePair, PatientRecord
"""

from __future__ import annotations

from tumor_volume_changes.domain.errors import (
    InputNotFoundError,
    OutputWriteError,
    RowFormatError,
    SchemaError,
    StatisticOverflowError,
    VolumeChangesError,
)
from tumor_volume_changes.domain.models import (
    MEASUREMENT_COLUMNS,
    PATIENT_ID_COLUMN,
    PHASE_PAIRS,
    PHASES,
    ROI,
    AppConfig,
    DeltaSample,
    GroupKey,
    PatientRecord,
    PhasePair,
    StatGroup,
    VolumeChangeStat,
    column_name,
)

__all__ = [
    # Constants
    "MEASUREMENT_COLUMNS",
    "PATIENT_ID_COLUMN",
    "PHASE_PAIRS",
    "PHASES",
    # Models
    "ROI",
    "AppConfig",
    "DeltaSample",
    "GroupKey",
    "PatientRecord",
    "PhasePair",
    "StatGroup",
    "VolumeChangeStat",
    "column_name",
    # Errors
    "InputNotFoundError",
    "OutputWriteError",
    "RowFormatError",
    "SchemaError",
    "StatisticOverflowError",
    "VolumeChangesError",
]
