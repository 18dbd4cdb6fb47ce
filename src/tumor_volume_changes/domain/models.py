"""Domain models for the Tumor Volume Changes system.

All models are frozen dataclasses to enforce immutability.  The closed sets
(regions of interest, treatment phases and consecutive phase pairs) are
module-level constants so that invalid combinations cannot be constructed.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml


# ---------------------------------------------------------------------------
# Closed enumerations
# ---------------------------------------------------------------------------

class ROI(str, Enum):
    """Region of interest.  Declaration order is the report order."""

    GTV = "GTV"
    GTV_N = "GTV_N"
    PTV_DP = "PTV_DP"


PHASES: tuple[int, ...] = (1, 2, 3)

PATIENT_ID_COLUMN = "Patient ID"


@dataclass(frozen=True, order=True)
class PhasePair:
    """An ordered pair of consecutive treatment phases."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if (self.start, self.end) not in _CONSECUTIVE_PAIRS:
            raise ValueError(
                f"Unsupported phase pair ({self.start}, {self.end}); "
                f"expected one of {sorted(_CONSECUTIVE_PAIRS)}"
            )

    def __str__(self) -> str:
        return f"{self.start}->{self.end}"


_CONSECUTIVE_PAIRS = frozenset(zip(PHASES[:-1], PHASES[1:]))

PHASE_PAIRS: tuple[PhasePair, ...] = tuple(
    PhasePair(start, end) for start, end in zip(PHASES[:-1], PHASES[1:])
)

GroupKey = tuple[ROI, PhasePair]


def column_name(roi: ROI, phase: int) -> str:
    """Return the input column holding *roi* at *phase*, e.g. ``GTV_N_phase_2``."""
    if phase not in PHASES:
        raise ValueError(f"Unsupported phase {phase}; expected one of {PHASES}")
    return f"{roi.value}_phase_{phase}"


MEASUREMENT_COLUMNS: tuple[str, ...] = tuple(
    column_name(roi, phase) for roi in ROI for phase in PHASES
)


# ---------------------------------------------------------------------------
# Patient / sample models
# ---------------------------------------------------------------------------

def _empty_volumes() -> dict[tuple[ROI, int], float | None]:
    """Return a volume map with every measurement missing."""
    return {(roi, phase): None for roi in ROI for phase in PHASES}


@dataclass(frozen=True)
class PatientRecord:
    """One input row: a patient identifier and nine optional volumes.

    ``volumes`` maps ``(ROI, phase)`` to a non-negative volume, or ``None``
    when the measurement is missing.  Missing is never the same as zero.
    The mapping is read-only.
    """

    patient_id: str
    volumes: Mapping[tuple[ROI, int], float | None] = field(
        default_factory=_empty_volumes, hash=False,
    )
    row_number: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "volumes", MappingProxyType(dict(self.volumes)))

    def volume(self, roi: ROI, phase: int) -> float | None:
        """Return the measurement of *roi* at *phase* (``None`` if missing)."""
        return self.volumes.get((roi, phase))


@dataclass(frozen=True)
class DeltaSample:
    """Volume change of one patient's ROI across one phase pair."""

    patient_id: str
    roi: ROI
    pair: PhasePair
    delta: float
    start_volume: float

    @property
    def key(self) -> GroupKey:
        return (self.roi, self.pair)


@dataclass(frozen=True)
class StatGroup:
    """Finalised statistics for one ``(ROI, PhasePair)`` group.

    ``std_dev`` is ``None`` when fewer than two samples contribute, since the
    corrected sample standard deviation is undefined there.
    """

    roi: ROI
    pair: PhasePair
    samples: tuple[DeltaSample, ...] = ()
    n: int = 0
    average: float = math.nan
    std_dev: float | None = None
    volume_phase_start: float = math.nan

    def __post_init__(self) -> None:
        for sample in self.samples:
            if sample.key != self.key:
                raise ValueError(
                    f"Sample for {sample.roi.value} {sample.pair} cannot "
                    f"belong to group {self.roi.value} {self.pair}"
                )
        if self.n != len(self.samples):
            raise ValueError(
                f"Group {self.roi.value} {self.pair}: n={self.n} does not "
                f"match {len(self.samples)} samples"
            )

    @property
    def key(self) -> GroupKey:
        return (self.roi, self.pair)


# ---------------------------------------------------------------------------
# Report model
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class VolumeChangeStat:
    """One output record of the volume change report."""

    roi_name: str
    volume_phase_start: float
    phase_start: int
    phase_end: int
    average: float
    std_dev: float | None
    n: int

    def to_dict(self, decimals: int | None = 3) -> dict[str, Any]:
        """Serialise with the report's key names, rounding floats to *decimals*.

        Parameters
        ----------
        decimals:
            Number of decimal places kept for presentation.  ``None`` keeps
            the full double-precision values.
        """
        def _fmt(value: float | None) -> float | None:
            if value is None or decimals is None:
                return value
            return round(value, decimals)

        return {
            "ROI": self.roi_name,
            "Volume Phase start": _fmt(self.volume_phase_start),
            "Phase start": self.phase_start,
            "Phase end": self.phase_end,
            "average": _fmt(self.average),
            "std_dev": _fmt(self.std_dev),
            "n": self.n,
        }


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

def _empty_dict() -> dict[str, Any]:
    """Return an empty dictionary."""
    return {}


@dataclass(frozen=True)
class AppConfig:
    """Application configuration loaded from YAML with environment overrides.

    Configuration is resolved in order:
      1. ``config/default.yaml``
      2. Environment variables prefixed with ``TVC_``
    """

    data: dict[str, Any] = field(default_factory=_empty_dict)

    # -- factory -----------------------------------------------------------

    @staticmethod
    def load(
        default_path: str | Path = "config/default.yaml",
        env_prefix: str = "TVC_",
    ) -> AppConfig:
        """Load configuration from a YAML file and environment variables.

        Parameters
        ----------
        default_path:
            Path to the base configuration file.  A missing file yields an
            empty configuration.
        env_prefix:
            Prefix for environment variable overrides.  A variable named
            ``TVC_REPORT__DECIMALS`` maps to ``config["report"]["decimals"]``.

        Returns
        -------
        AppConfig
            Frozen configuration object.
        """
        import os

        merged: dict[str, Any] = {}

        default = Path(default_path)
        if default.exists():
            with open(default, "r", encoding="utf-8") as fh:
                raw = yaml.safe_load(fh) or {}
            merged = _deep_merge(merged, raw)

        for key, value in os.environ.items():
            if key.startswith(env_prefix):
                parts = key[len(env_prefix):].lower().split("__")
                _set_nested(merged, parts, _coerce(value))

        return AppConfig(data=merged)

    # -- typed accessors ---------------------------------------------------

    def get(self, dotted_key: str, default: Any = None) -> Any:
        """Retrieve a value using dot-separated path, e.g. ``report.decimals``."""
        parts = dotted_key.split(".")
        node: Any = self.data
        for part in parts:
            if isinstance(node, dict) and part in node:
                node = node[part]
            else:
                return default
        return node

    def section(self, name: str) -> dict[str, Any]:
        """Return a top-level section as a dict (empty dict if missing)."""
        val = self.data.get(name)
        if isinstance(val, dict):
            return dict(val)
        return {}


def _deep_merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge *overlay* into *base* (non-destructive)."""
    merged = dict(base)
    for key, value in overlay.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _set_nested(d: dict[str, Any], parts: list[str], value: Any) -> None:
    """Set a value in a nested dict using a list of keys."""
    for part in parts[:-1]:
        d = d.setdefault(part, {})
    if parts:
        d[parts[-1]] = value


def _coerce(value: str) -> Any:
    """Best-effort coercion from string to bool / int / float / str."""
    if value.lower() in ("true", "yes"):
        return True
    if value.lower() in ("false", "no"):
        return False
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        pass
    return value
