"""Contracts shared by the ridgeprint pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from shapely.geometry import Polygon

Vec2 = Tuple[float, float]
Vec3 = Tuple[float, float, float]

BASELINE_GLOBAL = "global"
BASELINE_ROW = "row"

FLIP_X: Vec3 = (180.0, 0.0, 0.0)


@dataclass(frozen=True)
class RunConfig:
    """Configuration for dataset -> profiles -> print batches."""

    input_path: str
    output_dir: str = "out"
    openscad_path: str = "openscad"

    # Print layer height; the extrusion height is a multiple of it.
    layer_height_mm: float = 0.2
    # Overall stacked height of all parts.
    height_mm: float = 256.0
    # Overall width of every profile.
    width_mm: float = 188.0
    # Lower values give taller spikes relative to one horizontal step.
    xy_relation: float = 1.197
    # Extra material below the graph for a thicker base.
    padding_y_mm: float = 3.0

    # Batch layout on the print surface
    bed_y_mm: float = 200.0
    part_margin_y_mm: float = 5.0
    part_spacing_y_mm: float = 2.0
    part_offset_x_mm: float = 10.0

    decimals: int = 4
    baseline: str = BASELINE_GLOBAL
    strict_render: bool = True
    render: bool = True


@dataclass(frozen=True)
class Profile:
    """Closed 2D outline derived from one data row."""

    index: int
    source_row: int
    points: Tuple[Vec2, ...]
    width: float
    height: float

    @property
    def file_stem(self) -> str:
        return f"{self.index:02d}"

    @property
    def is_closed(self) -> bool:
        return len(self.points) > 1 and self.points[0] == self.points[-1]

    @property
    def outline(self) -> Polygon:
        return Polygon(self.points)

    def validate_geometry(self) -> List[str]:
        """Check the outline for degenerate shapes.

        Returns list of warning strings (empty = ok).
        """
        issues = []
        if not self.is_closed:
            issues.append("Outline is not closed")
        outline = self.outline
        if outline.area <= 0.0:
            issues.append(f"Profile {self.file_stem} has zero area")
        elif not outline.is_valid:
            issues.append(f"Profile {self.file_stem} outline is self-intersecting")
        return issues


@dataclass(frozen=True)
class Placement:
    """Position of one profile inside a batch."""

    profile_index: int
    offset_y: float
    offset_x: float
    rotation: Vec3 = FLIP_X


@dataclass(frozen=True)
class Batch:
    """Profiles sharing one print bed."""

    index: int
    placements: Tuple[Placement, ...]

    @property
    def file_stem(self) -> str:
        return f"batch_{self.index:02d}"

    @property
    def profile_indices(self) -> List[int]:
        return [p.profile_index for p in self.placements]


@dataclass(frozen=True)
class RenderJob:
    """One invocation of the render engine."""

    name: str
    source: Path
    output: Path
    params: Dict[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class RenderResult:
    """Exit status and captured output of a finished render job."""

    job: RenderJob
    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


@dataclass
class RunResult:
    """In-memory result of a pipeline run."""

    config: RunConfig
    row_count: int
    column_count: int
    extrusion_height_mm: float
    profiles: List[Profile]
    batches: List[Batch]
    outline_paths: List[Path]
    layout_paths: List[Path]
    manifest_path: Path
    profile_renders: List[RenderResult] = field(default_factory=list)
    batch_renders: List[RenderResult] = field(default_factory=list)
    mesh_summaries: Dict[str, Optional[Dict[str, object]]] = field(default_factory=dict)

    @property
    def failed_renders(self) -> List[RenderResult]:
        return [r for r in self.profile_renders + self.batch_renders if not r.ok]
