"""
Data row -> closed 2D profile.

Every row of a matrix is mapped with the same scale, derived from the column
count, so all profiles share one physical width. Each outline starts and ends
at the origin and runs along a flat baseline, ready for linear extrusion.
"""
import logging
from typing import List, Optional, Sequence

from ridgeprint.contracts import BASELINE_GLOBAL, BASELINE_ROW, Profile, RunConfig, Vec2
from ridgeprint.dataset import SampleMatrix, matrix_minimum, round_to, row_minimum
from ridgeprint.errors import ConfigurationError, DataShapeError

logger = logging.getLogger(__name__)


def profile_scale(column_count: int, target_width: float, xy_relation: float) -> float:
    """Scale that maps a row of ``column_count`` samples onto ``target_width``."""
    if column_count < 2:
        raise ConfigurationError(
            f"Need at least 2 samples per row to span a width, got {column_count}"
        )
    if xy_relation <= 0:
        raise ConfigurationError(f"xy_relation must be positive, got {xy_relation}")
    return target_width / ((column_count - 1) * xy_relation)


def build_profile(
    row: Sequence[float],
    *,
    index: int,
    source_row: int,
    column_count: int,
    minimum: float,
    scale: float,
    xy_relation: float,
    padding_y: float,
    decimals: int = 4,
) -> Profile:
    """Convert one row of samples into a closed profile.

    Args:
        row: Samples of one data row.
        index: Position in consumption order; names the outline file.
        source_row: Row index in the sample matrix.
        column_count: Matrix column count the row must match.
        minimum: Lowest value to lift onto the baseline (<= 0).
        scale: Shared scale from profile_scale().
        xy_relation: Horizontal step per sample before scaling.
        padding_y: Extra height added under every sample.
        decimals: Rounding applied after each computation.

    Returns:
        Profile whose width/height equal the extremes of its own points.
    """
    if len(row) != column_count:
        raise DataShapeError(
            f"Row {source_row} has {len(row)} samples, expected {column_count}"
        )

    offset_y = -minimum
    points: List[Vec2] = [
        (
            round_to(i * xy_relation * scale, decimals),
            round_to((float(value) + offset_y) * scale + padding_y, decimals),
        )
        for i, value in enumerate(row)
    ]

    # Dimensions come from the emitted coordinates so they cannot drift.
    width = max(x for x, _ in points)
    height = max(y for _, y in points)
    last_x = points[-1][0]

    outline = [(0.0, 0.0), *points, (last_x, 0.0), (0.0, 0.0)]
    return Profile(
        index=index,
        source_row=source_row,
        points=tuple(outline),
        width=width,
        height=height,
    )


def build_profiles(
    matrix: SampleMatrix,
    config: RunConfig,
) -> List[Profile]:
    """Build one profile per matrix row.

    Rows are consumed in reverse order: profile 0 is the last data row. The
    batch packer places profiles in this order, so the last row prints first
    and the stacked assembly reads top to bottom in data order.
    """
    scale = profile_scale(matrix.column_count, config.width_mm, config.xy_relation)
    global_minimum: Optional[float] = None
    if config.baseline == BASELINE_GLOBAL:
        global_minimum = matrix_minimum(matrix)
    elif config.baseline != BASELINE_ROW:
        raise ConfigurationError(f"Unknown baseline mode: {config.baseline!r}")

    logger.debug(
        "Profile scale %.6f for %d columns (baseline=%s)",
        scale, matrix.column_count, config.baseline,
    )

    profiles = []
    for index, source_row in enumerate(reversed(range(matrix.row_count))):
        row = matrix.row(source_row)
        minimum = global_minimum if global_minimum is not None else row_minimum(row)
        profile = build_profile(
            row,
            index=index,
            source_row=source_row,
            column_count=matrix.column_count,
            minimum=minimum,
            scale=scale,
            xy_relation=config.xy_relation,
            padding_y=config.padding_y_mm,
            decimals=config.decimals,
        )
        for issue in profile.validate_geometry():
            logger.warning(issue)
        profiles.append(profile)

    logger.info("Built %d profiles", len(profiles))
    return profiles
