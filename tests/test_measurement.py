"""Tests for per-patient volume change computation."""

from __future__ import annotations

import pytest

from tumor_volume_changes.domain.models import PHASE_PAIRS, ROI, PhasePair
from tumor_volume_changes.measurement.volume import (
    compute_deltas,
    compute_volume_change,
    patient_deltas,
)

P12, P23 = PHASE_PAIRS


# =====================================================================
# compute_volume_change
# =====================================================================


class TestComputeVolumeChange:

    def test_shrinking_is_positive(self):
        assert compute_volume_change(10.0, 8.0) == 2.0

    def test_growing_is_negative(self):
        assert compute_volume_change(5.0, 7.5) == -2.5

    def test_zero_endpoints(self):
        assert compute_volume_change(0.0, 0.0) == 0.0
        assert compute_volume_change(3.0, 0.0) == 3.0

    @pytest.mark.parametrize("start, end", [(None, 1.0), (1.0, None), (None, None)])
    def test_missing_endpoint(self, start, end):
        assert compute_volume_change(start, end) is None


# =====================================================================
# patient_deltas
# =====================================================================


class TestPatientDeltas:

    def test_all_present(self, record_factory):
        record = record_factory("A", gtv=(10.0, 8.0, 5.0), gtv_n=(4.0, 3.0, 2.5),
                                ptv_dp=(100.0, 90.0, 85.0))
        samples = patient_deltas(record)
        assert [(s.roi, s.pair) for s in samples] == [
            (ROI.GTV, P12), (ROI.GTV, P23),
            (ROI.GTV_N, P12), (ROI.GTV_N, P23),
            (ROI.PTV_DP, P12), (ROI.PTV_DP, P23),
        ]
        assert [s.delta for s in samples[:2]] == [2.0, 3.0]
        assert [s.start_volume for s in samples[:2]] == [10.0, 8.0]

    def test_missing_middle_phase_excludes_both_pairs_of_that_roi(self, record_factory):
        record = record_factory("A", gtv=(10.0, None, 5.0), gtv_n=(4.0, 3.0, 2.5),
                                ptv_dp=(100.0, 90.0, 85.0))
        keys = [(s.roi, s.pair) for s in patient_deltas(record)]
        assert (ROI.GTV, P12) not in keys
        assert (ROI.GTV, P23) not in keys
        assert len(keys) == 4

    def test_missing_last_phase_keeps_first_pair(self, record_factory):
        record = record_factory("A", gtv=(10.0, 8.0, None))
        samples = patient_deltas(record)
        assert len(samples) == 1
        assert samples[0].pair == PhasePair(1, 2)

    def test_missing_first_phase_keeps_second_pair(self, record_factory):
        record = record_factory("A", gtv_n=(None, 3.0, 2.0))
        samples = patient_deltas(record)
        assert [(s.roi, s.pair, s.delta) for s in samples] == [(ROI.GTV_N, P23, 1.0)]

    def test_no_measurements(self, record_factory):
        assert patient_deltas(record_factory("empty")) == []

    def test_patient_id_carried(self, record_factory):
        samples = patient_deltas(record_factory("X-9", ptv_dp=(1.0, 1.0, 1.0)))
        assert {s.patient_id for s in samples} == {"X-9"}


# =====================================================================
# compute_deltas
# =====================================================================


class TestComputeDeltas:

    def test_two_patient_example(self, two_patient_records):
        samples = compute_deltas(two_patient_records)
        by_pair = {
            pair: [s.delta for s in samples if s.pair == pair]
            for pair in PHASE_PAIRS
        }
        assert by_pair[P12] == [2.0, 5.0]
        assert by_pair[P23] == [3.0, 5.0]

    def test_input_order_preserved(self, full_cohort_records):
        samples = compute_deltas(full_cohort_records)
        ids = [s.patient_id for s in samples]
        assert ids == sorted(ids)
        assert ids.count("P3") == 4

    def test_accepts_generator(self, two_patient_records):
        samples = compute_deltas(r for r in two_patient_records)
        assert len(samples) == 4
