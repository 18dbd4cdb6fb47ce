"""Volume change report: ordering, JSON serialisation and summary table.

Records are ordered by ROI (``GTV``, ``GTV_N``, ``PTV_DP``) and then by phase
pair (``1->2``, ``2->3``).  Rounding to the presentation precision happens
only when the report is serialised.
"""
from __future__ import annotations

import json
import logging
import math
import os
import tempfile
from collections.abc import Mapping, Sequence
from pathlib import Path

from tumor_volume_changes.domain.errors import OutputWriteError, StatisticOverflowError
from tumor_volume_changes.domain.models import (
    PHASE_PAIRS,
    ROI,
    GroupKey,
    StatGroup,
    VolumeChangeStat,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------

def build_report(groups: Mapping[GroupKey, StatGroup]) -> list[VolumeChangeStat]:
    """Turn finalised groups into ordered report records.

    Groups without samples are omitted.
    """
    stats: list[VolumeChangeStat] = []
    for roi in ROI:
        for pair in PHASE_PAIRS:
            group = groups.get((roi, pair))
            if group is None or group.n == 0:
                continue
            stats.append(
                VolumeChangeStat(
                    roi_name=roi.value,
                    volume_phase_start=group.volume_phase_start,
                    phase_start=pair.start,
                    phase_end=pair.end,
                    average=group.average,
                    std_dev=group.std_dev,
                    n=group.n,
                )
            )
    return stats


# ---------------------------------------------------------------------------
# Serialisation
# ---------------------------------------------------------------------------

def report_to_json(
    stats: Sequence[VolumeChangeStat], decimals: int | None = 3,
) -> str:
    """Serialise *stats* as a pretty-printed JSON array.

    An undefined standard deviation is written as ``null``.

    Raises
    ------
    StatisticOverflowError
        If any value is infinite or NaN, which JSON cannot represent.
    """
    for s in stats:
        values = (s.volume_phase_start, s.average, s.std_dev)
        if any(v is not None and not math.isfinite(v) for v in values):
            raise StatisticOverflowError(s.roi_name, s.phase_start, s.phase_end)
    payload = [s.to_dict(decimals) for s in stats]
    return json.dumps(payload, indent=2, allow_nan=False) + "\n"


def write_report(
    stats: Sequence[VolumeChangeStat],
    path: str | Path,
    decimals: int | None = 3,
) -> Path:
    """Write the JSON report to *path*, replacing any existing file.

    The report is written to a temporary file next to *path* and moved into
    place, so a failure never leaves a partial report behind.

    Raises
    ------
    OutputWriteError
        If the destination cannot be written.
    """
    path = Path(path)
    text = report_to_json(stats, decimals)

    tmp_name: str | None = None
    try:
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=path.parent, prefix=f".{path.name}.",
            suffix=".tmp", delete=False,
        ) as fh:
            tmp_name = fh.name
            fh.write(text)
        os.chmod(tmp_name, _default_file_mode())
        os.replace(tmp_name, path)
    except OSError as exc:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise OutputWriteError(str(path), exc.strerror or str(exc)) from exc

    logger.info("Wrote %d statistics to %s", len(stats), path)
    return path


def _default_file_mode() -> int:
    """Permission bits a newly created file gets under the current umask."""
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


# ---------------------------------------------------------------------------
# Summary table formatting
# ---------------------------------------------------------------------------

def format_stats_table(stats: Sequence[VolumeChangeStat], decimals: int = 3) -> str:
    """Format the report as a markdown table for console output.

    | ROI | Phases | n | Volume Phase start | Average change | Std dev |
    """
    lines = [
        "| ROI | Phases | n | Volume Phase start | Average change | Std dev |",
        "| :--- | :---: | ---: | ---: | ---: | ---: |",
    ]

    def _f(value: float | None) -> str:
        if value is None or math.isnan(value):
            return "N/A"
        return f"{value:.{decimals}f}"

    for s in stats:
        lines.append(
            f"| {s.roi_name} | {s.phase_start}->{s.phase_end} | {s.n} | "
            f"{_f(s.volume_phase_start)} | {_f(s.average)} | {_f(s.std_dev)} |"
        )
    return "\n".join(lines)
