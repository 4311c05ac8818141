"""
Shared test fixtures for the ridgeprint pipeline tests.
"""
import math
import stat
import sys
from pathlib import Path

import pytest
import trimesh

# Add src/ to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


@pytest.fixture
def scenario_rows():
    """Three short rows with a known scale at width 10 / relation 1."""
    return [[0, 1, 2], [2, 1, 0], [1, 1, 1]]


@pytest.fixture
def signal_csv(tmp_path: Path) -> Path:
    """A 6x8 sine dataset, one phase-shifted wave per row."""
    path = tmp_path / "signal.csv"
    lines = []
    for r in range(6):
        row = [math.sin(c * 0.8 + r * 0.5) for c in range(8)]
        lines.append(",".join(f"{v:.6f}" for v in row))
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def box_stl(tmp_path: Path) -> Path:
    """A 10mm cube STL the fake engine hands out as render output."""
    path = tmp_path / "box.stl"
    trimesh.creation.box(extents=[10.0, 10.0, 10.0]).export(str(path))
    return path


@pytest.fixture
def make_engine(tmp_path: Path, box_stl: Path):
    """Factory for fake OpenSCAD executables.

    The script logs its arguments, copies the box STL to the ``-o`` path
    and exits with the requested code.
    """
    def _make(exit_code: int = 0, name: str = "fake_openscad") -> Path:
        script = tmp_path / name
        log = tmp_path / f"{name}.log"
        script.write_text(
            "\n".join([
                "#!/bin/sh",
                f'printf "%s\\n" "$*" >> "{log}"',
                'out=""',
                'src=""',
                'while [ "$#" -gt 0 ]; do',
                '  case "$1" in',
                '    -o) out="$2"; shift 2 ;;',
                '    -D) echo "param $2"; shift 2 ;;',
                '    *) src="$1"; shift ;;',
                "  esac",
                "done",
                'echo "rendering $src" >&2',
                f'cp "{box_stl}" "$out"',
                f"exit {exit_code}",
                "",
            ]),
            encoding="utf-8",
        )
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    return _make
