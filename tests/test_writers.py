"""Tests for dxf_writer and scad_writer modules."""
from pathlib import Path

import pytest

from ridgeprint.contracts import Batch, Placement, RunConfig
from ridgeprint.dataset import SampleMatrix
from ridgeprint.dxf_writer import outline_file_name, profile_to_dxf, profiles_to_dxf, read_outline
from ridgeprint.packing import pack_batches
from ridgeprint.profiles import build_profiles
from ridgeprint.scad_writer import (
    PART_GENERATOR_NAME,
    format_number,
    render_batch_layout,
    write_batch_layouts,
    write_part_generator,
)


@pytest.fixture
def profiles(scenario_rows):
    config = RunConfig(input_path="unused.csv", width_mm=10.0, xy_relation=1.0, padding_y_mm=0.0)
    return build_profiles(SampleMatrix.from_rows(scenario_rows), config)


class TestDXFWriter:

    def test_outline_round_trips(self, profiles, tmp_path: Path):
        path = profile_to_dxf(profiles[1], tmp_path / "one.dxf")
        assert path.is_file()
        assert read_outline(path) == list(profiles[1].points)

    def test_files_are_named_by_index(self, profiles, tmp_path: Path):
        paths = profiles_to_dxf(profiles, tmp_path / "dxf")
        assert [p.name for p in paths] == ["00.dxf", "01.dxf", "02.dxf"]
        assert outline_file_name(profiles[2]) == "02.dxf"

    def test_rewrite_reproduces_geometry(self, profiles, tmp_path: Path):
        first = profile_to_dxf(profiles[0], tmp_path / "a.dxf")
        second = profile_to_dxf(profiles[0], tmp_path / "b.dxf")
        assert read_outline(first) == read_outline(second)

    def test_rewrite_is_byte_identical(self, profiles, tmp_path: Path):
        first = profile_to_dxf(profiles[1], tmp_path / "a.dxf")
        second = profile_to_dxf(profiles[1], tmp_path / "b.dxf")
        assert first.read_bytes() == second.read_bytes()


class TestFormatNumber:

    @pytest.mark.parametrize(
        "value,expected",
        [(57.0, "57"), (-57.0, "-57"), (3.2, "3.2"), (0.0, "0"), (-0.0, "0"), (-42.6, "-42.6")],
    )
    def test_formats(self, value, expected):
        assert format_number(value) == expected


class TestBatchLayout:

    def test_layout_instructions(self, tmp_path: Path):
        outline = tmp_path / "dxf" / "00.dxf"
        layout_dir = tmp_path / "batch_scad"
        batch = Batch(index=0, placements=(Placement(profile_index=0, offset_y=-57.0, offset_x=10.0),))

        code = render_batch_layout(batch, {0: outline}, layout_dir, 3.0)

        assert code == "\n".join([
            "rotate([180, 0, 0])",
            "translate([10, -57, -3])",
            "linear_extrude(height = 3)",
            'import("../dxf/00.dxf");',
        ])

    def test_placements_are_concatenated_in_order(self, profiles, tmp_path: Path):
        outlines = {p.index: tmp_path / "dxf" / outline_file_name(p) for p in profiles}
        batches = pack_batches(profiles, bed_y=100)
        code = render_batch_layout(batches[0], outlines, tmp_path / "batch_scad", 1.4)

        lines = code.splitlines()
        assert len(lines) == 4 * len(batches[0].placements)
        imports = [line for line in lines if line.startswith("import(")]
        assert imports == [
            f'import("../dxf/{outline_file_name(p)}");' for p in profiles
        ]
        assert "linear_extrude(height = 1.4)" in lines

    def test_layout_files_are_byte_identical_on_rerun(self, profiles, tmp_path: Path):
        outlines = {p.index: tmp_path / "dxf" / outline_file_name(p) for p in profiles}
        batches = pack_batches(profiles, bed_y=20, margin=1, spacing=1)
        first = [p.read_bytes() for p in write_batch_layouts(batches, outlines, tmp_path / "batch_scad", 2.0)]
        second = [p.read_bytes() for p in write_batch_layouts(batches, outlines, tmp_path / "batch_scad", 2.0)]

        assert len(first) == len(batches) > 1
        assert first == second

    def test_batch_files_are_named_by_index(self, profiles, tmp_path: Path):
        outlines = {p.index: tmp_path / outline_file_name(p) for p in profiles}
        batches = pack_batches(profiles, bed_y=20, margin=1, spacing=1)
        paths = write_batch_layouts(batches, outlines, tmp_path / "batch_scad", 2.0)
        assert paths[0].name == "batch_00.scad"


def test_part_generator_declares_overridable_parameters(tmp_path: Path):
    path = write_part_generator(tmp_path)
    source = path.read_text(encoding="utf-8")
    assert path.name == PART_GENERATOR_NAME
    assert 'dxf = "";' in source
    assert "height = 1;" in source
    assert "linear_extrude(height = height)" in source
