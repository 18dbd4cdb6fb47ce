"""Semicolon-delimited CSV loader for per-patient volume tables.

The first row is a header.  Columns are resolved by name, so their order in
the file is irrelevant.  An empty or blank measurement cell is a missing
measurement; anything else must parse as a finite, non-negative number.
Malformed rows are fatal: skipping them would silently change the sample
counts of the aggregated statistics.
"""

from __future__ import annotations

import csv
import logging
import math
from collections import Counter
from collections.abc import Iterable
from pathlib import Path
from typing import TextIO

from tumor_volume_changes.domain.errors import (
    InputNotFoundError,
    RowFormatError,
    SchemaError,
)
from tumor_volume_changes.domain.models import (
    PATIENT_ID_COLUMN,
    PHASES,
    ROI,
    PatientRecord,
    column_name,
)

logger = logging.getLogger(__name__)

DELIMITER = ";"

REQUIRED_COLUMNS: tuple[str, ...] = (PATIENT_ID_COLUMN,) + tuple(
    column_name(roi, phase) for roi in ROI for phase in PHASES
)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def load_records(path: str | Path) -> list[PatientRecord]:
    """Load patient records from a semicolon-delimited CSV file.

    Parameters
    ----------
    path:
        Path to the CSV file.  A UTF-8 byte order mark is tolerated.

    Returns
    -------
    list[PatientRecord]
        One record per data row, in file order.

    Raises
    ------
    InputNotFoundError
        If *path* is not a readable file.
    SchemaError
        If the input is empty or the header lacks a required column.
    RowFormatError
        If a row has the wrong field count or an invalid number, or the
        file is not valid UTF-8 CSV.
    """
    path = Path(path)
    if not path.is_file():
        raise InputNotFoundError(str(path))

    try:
        fh = open(path, "r", encoding="utf-8-sig", newline="")
    except OSError as exc:
        raise InputNotFoundError(str(path)) from exc

    with fh:
        records = read_records(fh, source=str(path))
    logger.info("Loaded %d patient records from %s", len(records), path)
    return records


def read_records(stream: TextIO, source: str = "<stream>") -> list[PatientRecord]:
    """Parse patient records from an open text stream.

    The stream is consumed once, sequentially.  See :func:`load_records` for
    the raised errors; *source* only labels error messages.
    """
    reader = csv.reader(stream, delimiter=DELIMITER)
    try:
        header = next((row for row in reader if row), None)
        if header is None:
            raise SchemaError(
                f"{source}: empty input, expected a header row",
                REQUIRED_COLUMNS,
            )

        index = _resolve_columns([cell.strip() for cell in header], source)
        records: list[PatientRecord] = []
        for fields in reader:
            if not fields:
                continue
            records.append(
                _parse_row(fields, index, len(header), reader.line_num, source)
            )
    except UnicodeDecodeError as exc:
        raise RowFormatError(
            f"{source}, after line {reader.line_num}: input is not valid "
            f"UTF-8 ({exc.reason} at byte {exc.start})",
            line=reader.line_num + 1,
        ) from exc
    except csv.Error as exc:
        raise RowFormatError(
            f"{source}, line {reader.line_num}: {exc}",
            line=reader.line_num,
        ) from exc
    return records


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _resolve_columns(header: list[str], source: str) -> dict[str, int]:
    """Map each required column name to its position in *header*."""
    counts = Counter(header)
    missing = [c for c in REQUIRED_COLUMNS if counts[c] == 0]
    if missing:
        raise SchemaError(
            f"{source}: header is missing required column(s): "
            + ", ".join(missing),
            missing,
        )
    duplicated = [c for c in REQUIRED_COLUMNS if counts[c] > 1]
    if duplicated:
        raise SchemaError(
            f"{source}: header repeats column(s): " + ", ".join(duplicated),
            duplicated,
        )

    extra = [c for c in header if c not in REQUIRED_COLUMNS]
    if extra:
        logger.debug("%s: ignoring unrecognised column(s) %s", source, extra)
    return {name: header.index(name) for name in REQUIRED_COLUMNS}


def _parse_row(
    fields: list[str],
    index: dict[str, int],
    n_columns: int,
    line: int,
    source: str,
) -> PatientRecord:
    if len(fields) != n_columns:
        raise RowFormatError(
            f"{source}, line {line}: expected {n_columns} fields, "
            f"found {len(fields)}",
            line=line,
        )

    volumes = {
        (roi, phase): _parse_volume(
            fields[index[column_name(roi, phase)]],
            column_name(roi, phase), line, source,
        )
        for roi in ROI
        for phase in PHASES
    }
    return PatientRecord(
        patient_id=fields[index[PATIENT_ID_COLUMN]],
        volumes=volumes,
        row_number=line,
    )


def _parse_volume(cell: str, column: str, line: int, source: str) -> float | None:
    """Parse one measurement cell; blank means missing."""
    text = cell.strip()
    if not text:
        return None
    try:
        value = float(text)
    except ValueError:
        raise RowFormatError(
            f"{source}, line {line}, column {column}: "
            f"{cell!r} is not a number",
            line=line, column=column, value=cell,
        ) from None
    if not math.isfinite(value) or value < 0.0:
        raise RowFormatError(
            f"{source}, line {line}, column {column}: "
            f"{cell!r} is not a finite non-negative volume",
            line=line, column=column, value=cell,
        )
    return value


def count_missing(records: Iterable[PatientRecord]) -> dict[str, int]:
    """Count missing measurements per input column."""
    counts = {column_name(roi, phase): 0 for roi in ROI for phase in PHASES}
    for record in records:
        for (roi, phase), value in record.volumes.items():
            if value is None:
                counts[column_name(roi, phase)] += 1
    return counts
