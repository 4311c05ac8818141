"""OpenSCAD sources: the per-part generator and the per-batch layouts."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, List, Sequence

from ridgeprint.contracts import Batch, Placement

logger = logging.getLogger(__name__)

PART_GENERATOR_NAME = "part.scad"

PART_GENERATOR_SOURCE = """\
// Extrudes one profile outline. Both parameters are set with -D per part.
dxf = "";
height = 1;

linear_extrude(height = height)
import(dxf);
"""


def format_number(value: float) -> str:
    """Render a number for OpenSCAD without a trailing ``.0``."""
    value = float(value)
    if value == 0:
        return "0"
    if value.is_integer():
        return str(int(value))
    return repr(value)


def write_part_generator(output_dir: Path) -> Path:
    path = Path(output_dir) / PART_GENERATOR_NAME
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(PART_GENERATOR_SOURCE, encoding="utf-8")
    return path


def render_placement(
    placement: Placement,
    outline_path: Path,
    layout_dir: Path,
    extrude_height: float,
) -> List[str]:
    rx, ry, rz = placement.rotation
    import_path = Path(os.path.relpath(outline_path, layout_dir)).as_posix()
    return [
        f"rotate([{format_number(rx)}, {format_number(ry)}, {format_number(rz)}])",
        "translate(["
        f"{format_number(placement.offset_x)}, "
        f"{format_number(placement.offset_y)}, "
        f"{format_number(-extrude_height)}])",
        f"linear_extrude(height = {format_number(extrude_height)})",
        f'import("{import_path}");',
    ]


def render_batch_layout(
    batch: Batch,
    outline_paths: Dict[int, Path],
    layout_dir: Path,
    extrude_height: float,
) -> str:
    """OpenSCAD program placing every part of a batch on one bed.

    Args:
        batch: Batch to lay out.
        outline_paths: DXF path per profile index.
        layout_dir: Directory the program will be written to; imports are
            relative to it.
        extrude_height: Extrusion height shared by all parts.
    """
    lines: List[str] = []
    for placement in batch.placements:
        lines.extend(
            render_placement(
                placement,
                outline_paths[placement.profile_index],
                layout_dir,
                extrude_height,
            )
        )
    return "\n".join(lines)


def write_batch_layouts(
    batches: Sequence[Batch],
    outline_paths: Dict[int, Path],
    layout_dir: Path,
    extrude_height: float,
) -> List[Path]:
    layout_dir = Path(layout_dir)
    layout_dir.mkdir(parents=True, exist_ok=True)
    paths = []
    for batch in batches:
        path = layout_dir / f"{batch.file_stem}.scad"
        code = render_batch_layout(batch, outline_paths, layout_dir, extrude_height)
        path.write_text(code, encoding="utf-8")
        paths.append(path)
    logger.info("Wrote %d batch layouts to %s", len(paths), layout_dir)
    return paths
