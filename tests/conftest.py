"""Shared pytest fixtures for the Tumor Volume Changes test suite."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from tumor_volume_changes.config import get_config
from tumor_volume_changes.domain.models import PHASES, ROI, PatientRecord
from tumor_volume_changes.ingestion.csv_loader import REQUIRED_COLUMNS


HEADER = ";".join(REQUIRED_COLUMNS)


def make_record(
    patient_id: str,
    gtv: tuple[float | None, float | None, float | None] = (None, None, None),
    gtv_n: tuple[float | None, float | None, float | None] = (None, None, None),
    ptv_dp: tuple[float | None, float | None, float | None] = (None, None, None),
) -> PatientRecord:
    """Build a PatientRecord from per-ROI phase 1..3 volume triples."""
    volumes: dict[tuple[ROI, int], float | None] = {}
    for roi, triple in ((ROI.GTV, gtv), (ROI.GTV_N, gtv_n), (ROI.PTV_DP, ptv_dp)):
        for phase, value in zip(PHASES, triple):
            volumes[(roi, phase)] = value
    return PatientRecord(patient_id=patient_id, volumes=volumes)


def csv_row(patient_id: str, *values: float | str | None) -> str:
    """Format one input row; ``None`` becomes an empty cell."""
    cells = [patient_id] + ["" if v is None else str(v) for v in values]
    return ";".join(cells)


# ---------------------------------------------------------------------------
# Record fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def record_factory() -> Callable[..., PatientRecord]:
    """The :func:`make_record` helper."""
    return make_record


@pytest.fixture()
def row_factory() -> Callable[..., str]:
    """The :func:`csv_row` helper."""
    return csv_row


@pytest.fixture()
def two_patient_records() -> list[PatientRecord]:
    """Patients A (10, 8, 5) and B (20, 15, 10) with GTV volumes only."""
    return [
        make_record("A", gtv=(10.0, 8.0, 5.0)),
        make_record("B", gtv=(20.0, 15.0, 10.0)),
    ]


@pytest.fixture()
def full_cohort_records() -> list[PatientRecord]:
    """Three patients with all ROIs present and one missing GTV_phase_2."""
    return [
        make_record("P1", gtv=(10.0, 8.0, 5.0), gtv_n=(4.0, 3.0, 2.5),
                    ptv_dp=(100.0, 90.0, 85.0)),
        make_record("P2", gtv=(20.0, 15.0, 10.0), gtv_n=(6.0, 5.0, 3.0),
                    ptv_dp=(120.0, 110.0, 95.0)),
        make_record("P3", gtv=(30.0, None, 12.0), gtv_n=(5.0, 4.0, 4.0),
                    ptv_dp=(140.0, 125.0, 120.0)),
    ]


# ---------------------------------------------------------------------------
# File fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def write_csv(tmp_path) -> Callable[..., Path]:
    """Write ``lines`` to a CSV in ``tmp_path``; the header is prepended by default."""

    def _write(lines: list[str], name: str = "volumes.csv",
               header: str | None = HEADER) -> Path:
        path = tmp_path / name
        content = [header] if header is not None else []
        content.extend(lines)
        path.write_text("\n".join(content) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture()
def two_patient_csv(write_csv) -> Path:
    """CSV version of ``two_patient_records``."""
    return write_csv([
        csv_row("A", 10, 8, 5, None, None, None, None, None, None),
        csv_row("B", 20, 15, 10, None, None, None, None, None, None),
    ])


@pytest.fixture(autouse=True)
def _fresh_config():
    """Drop the cached configuration so env overrides apply per test."""
    get_config.cache_clear()
    yield
    get_config.cache_clear()
