"""Fatal error taxonomy for the volume change pipeline.

Every error aborts the run before any output is written.  A missing
measurement is not an error: it is an ordinary ``None`` volume.
"""

from __future__ import annotations

from collections.abc import Sequence


class VolumeChangesError(Exception):
    """Base class for all fatal pipeline errors."""


class InputNotFoundError(VolumeChangesError, FileNotFoundError):
    """The input path does not resolve to a readable file."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Input file not found or not readable: {path}")

    def __str__(self) -> str:
        return self.args[0]


class SchemaError(VolumeChangesError, ValueError):
    """The header row is absent or does not name the required columns."""

    def __init__(self, message: str, columns: Sequence[str] = ()) -> None:
        self.columns = tuple(columns)
        super().__init__(message)


class RowFormatError(VolumeChangesError, ValueError):
    """A data row has the wrong field count or an unparsable cell."""

    def __init__(
        self,
        message: str,
        line: int,
        column: str | None = None,
        value: str | None = None,
    ) -> None:
        self.line = line
        self.column = column
        self.value = value
        super().__init__(message)


class OutputWriteError(VolumeChangesError, OSError):
    """The report could not be written to its destination."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot write report to {path}: {reason}")

    def __str__(self) -> str:
        return self.args[0]


class StatisticOverflowError(VolumeChangesError, OverflowError):
    """A computed statistic is not a finite number."""

    def __init__(self, roi_name: str, phase_start: int, phase_end: int) -> None:
        self.roi_name = roi_name
        self.phase_start = phase_start
        self.phase_end = phase_end
        super().__init__(
            f"Statistics for {roi_name} phases {phase_start}->{phase_end} "
            "are not finite; input volumes are too large"
        )
