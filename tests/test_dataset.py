"""Tests for dataset module."""
from pathlib import Path

import numpy as np
import pytest

from ridgeprint.dataset import (
    SampleMatrix,
    load_sample_matrix,
    matrix_maximum,
    matrix_minimum,
    round_to,
    row_maximum,
    row_minimum,
)
from ridgeprint.errors import DatasetError, DataShapeError


class TestRoundTo:

    def test_rounds_to_four_decimals(self):
        assert round_to(1.23456) == pytest.approx(1.2346)

    def test_rounds_half_up(self):
        assert round_to(2.5, 0) == 3.0
        assert round_to(-2.5, 0) == -2.0


class TestLoadSampleMatrix:

    def test_loads_rectangular_csv(self, tmp_path: Path):
        path = tmp_path / "data.csv"
        path.write_text("1,2,3\n4,5,6\n", encoding="utf-8")
        matrix = load_sample_matrix(path)
        assert matrix.row_count == 2
        assert matrix.column_count == 3
        assert matrix.row(1).tolist() == [4.0, 5.0, 6.0]

    def test_samples_are_rounded(self, tmp_path: Path):
        path = tmp_path / "data.csv"
        path.write_text("0.123456,1.000049\n", encoding="utf-8")
        matrix = load_sample_matrix(path)
        assert matrix.row(0).tolist() == pytest.approx([0.1235, 1.0])

    def test_blank_lines_are_skipped(self, tmp_path: Path):
        path = tmp_path / "data.csv"
        path.write_text("1,2\n\n3,4\n", encoding="utf-8")
        assert load_sample_matrix(path).row_count == 2

    def test_ragged_rows_fail(self, tmp_path: Path):
        path = tmp_path / "ragged.csv"
        path.write_text("1,2,3\n4,5\n", encoding="utf-8")
        with pytest.raises(DataShapeError):
            load_sample_matrix(path)

    def test_missing_file_fails(self, tmp_path: Path):
        with pytest.raises(DatasetError):
            load_sample_matrix(tmp_path / "nope.csv")

    def test_non_numeric_fails(self, tmp_path: Path):
        path = tmp_path / "text.csv"
        path.write_text("1,abc\n", encoding="utf-8")
        with pytest.raises(DatasetError):
            load_sample_matrix(path)

    @pytest.mark.parametrize("sample", ["nan", "inf", "-inf", "1e999"])
    def test_non_finite_fails(self, tmp_path: Path, sample):
        path = tmp_path / "overflow.csv"
        path.write_text(f"1,{sample},3\n4,5,6\n", encoding="utf-8")
        with pytest.raises(DatasetError, match="line 1"):
            load_sample_matrix(path)

    def test_non_finite_rows_fail(self):
        with pytest.raises(DatasetError):
            SampleMatrix.from_rows([[1.0, float("nan")], [2.0, 3.0]])

    def test_empty_file_fails(self, tmp_path: Path):
        path = tmp_path / "empty.csv"
        path.write_text("", encoding="utf-8")
        with pytest.raises(DatasetError):
            load_sample_matrix(path)

    def test_matrix_is_read_only(self):
        matrix = SampleMatrix.from_rows([[1, 2], [3, 4]])
        with pytest.raises(ValueError):
            matrix.values[0, 0] = 9.0


class TestExtremes:

    def test_row_extremes_include_zero(self):
        assert row_minimum([1.0, 2.0]) == 0.0
        assert row_maximum([-3.0, -1.0]) == 0.0

    def test_row_extremes(self):
        assert row_minimum(np.array([3.0, -2.5, 1.0])) == -2.5
        assert row_maximum(np.array([3.0, -2.5, 1.0])) == 3.0

    def test_matrix_extremes_reduce_rows(self):
        matrix = SampleMatrix.from_rows([[-1, 2], [3, -4]])
        assert matrix_minimum(matrix) == -4.0
        assert matrix_maximum(matrix) == 3.0
