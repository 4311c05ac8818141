"""
Sample matrix loading and typed extremes.

Reads a header-less CSV of numeric samples into an immutable rectangular
matrix. Every sample is rounded at ingestion so later geometry is computed
from the same values that were read.
"""
import csv
import logging
import math
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Sequence, Union

import numpy as np

from ridgeprint.errors import DatasetError, DataShapeError

logger = logging.getLogger(__name__)

DEFAULT_DECIMALS = 4


def round_to(value: float, decimals: int = DEFAULT_DECIMALS) -> float:
    """Round half up to a fixed number of decimals.

    Python's round() rounds half to even; coordinates are rounded half up
    so 0.5 steps always move away from the baseline.
    """
    factor = 10 ** decimals
    return math.floor((value + sys.float_info.epsilon) * factor + 0.5) / factor


@dataclass(frozen=True)
class SampleMatrix:
    """Rectangular, read-only matrix of rounded samples."""

    values: np.ndarray  # (rows, columns), read-only

    @classmethod
    def from_rows(
        cls,
        rows: Sequence[Sequence[float]],
        decimals: int = DEFAULT_DECIMALS,
    ) -> "SampleMatrix":
        if not rows:
            raise DatasetError("Dataset has no rows")
        column_count = len(rows[0])
        if column_count == 0:
            raise DatasetError("Dataset row 0 has no samples")
        for i, row in enumerate(rows):
            if len(row) != column_count:
                raise DataShapeError(
                    f"Row {i} has {len(row)} samples, expected {column_count}"
                )
            if not all(math.isfinite(float(v)) for v in row):
                raise DatasetError(f"Row {i} has a non-finite sample")
        values = np.array(
            [[round_to(float(v), decimals) for v in row] for row in rows],
            dtype=float,
        )
        values.setflags(write=False)
        return cls(values=values)

    @property
    def row_count(self) -> int:
        return int(self.values.shape[0])

    @property
    def column_count(self) -> int:
        return int(self.values.shape[1])

    def row(self, index: int) -> np.ndarray:
        return self.values[index]

    def __iter__(self):
        return iter(self.values)


def load_sample_matrix(
    path: Union[str, Path],
    decimals: int = DEFAULT_DECIMALS,
) -> SampleMatrix:
    """Load a header-less CSV into a SampleMatrix.

    Args:
        path: CSV file, one profile per row.
        decimals: Rounding applied to every sample.

    Returns:
        The loaded matrix.

    Raises:
        DatasetError: file missing, unreadable, empty, non-numeric or non-finite.
        DataShapeError: rows of differing lengths.
    """
    path = Path(path)
    if not path.is_file():
        raise DatasetError(f"Dataset not found: {path}")

    rows: List[List[float]] = []
    try:
        with path.open("r", encoding="utf-8", newline="") as handle:
            for line_no, record in enumerate(csv.reader(handle), start=1):
                cells = [cell.strip() for cell in record]
                if not any(cells):
                    continue
                rows.append(_parse_record(cells, line_no))
    except OSError as e:
        raise DatasetError(f"Cannot read dataset {path}: {e}") from e

    matrix = SampleMatrix.from_rows(rows, decimals=decimals)
    logger.info(
        "Loaded %d x %d samples from %s",
        matrix.row_count, matrix.column_count, path,
    )
    return matrix


def _parse_record(cells: List[str], line_no: int) -> List[float]:
    try:
        values = [float(cell) for cell in cells]
    except ValueError as e:
        raise DatasetError(f"Non-numeric sample on line {line_no}: {e}") from e
    for cell, value in zip(cells, values):
        if not math.isfinite(value):
            raise DatasetError(f"Non-finite sample {cell!r} on line {line_no}")
    return values


# ─── Extremes ────────────────────────────────────────────────────────────────
# Extremes are seeded with zero so data that never crosses zero keeps its
# absolute datum.

def row_minimum(row: Iterable[float]) -> float:
    return float(np.min(np.asarray(row, dtype=float), initial=0.0))


def row_maximum(row: Iterable[float]) -> float:
    return float(np.max(np.asarray(row, dtype=float), initial=0.0))


def matrix_minimum(matrix: SampleMatrix) -> float:
    return row_minimum([row_minimum(row) for row in matrix])


def matrix_maximum(matrix: SampleMatrix) -> float:
    return row_maximum([row_maximum(row) for row in matrix])
