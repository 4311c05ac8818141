"""
Greedy single-pass packing of profiles into print-bed batches.

Profiles are stacked along the bed's Y axis in input order. A batch is sealed
as soon as the next profile would overflow the bed, and a fresh batch starts
at the initial margin. No reordering or rotation is attempted, so the result
is fully determined by the input order and the bed parameters.

Placements grow downward from the top of the sheet: each part is flipped
about the X axis for printing, so its offset is the negated cursor.
"""
import logging
from functools import reduce
from typing import List, NamedTuple, Sequence, Tuple

from ridgeprint.contracts import FLIP_X, Batch, Placement, Profile, RunConfig
from ridgeprint.dataset import round_to
from ridgeprint.errors import ConfigurationError, PartTooLargeError

logger = logging.getLogger(__name__)


class PackState(NamedTuple):
    """Fold state: cursor and placements of the open batch, sealed batches."""
    cursor: float
    current: Tuple[Placement, ...]
    sealed: Tuple[Tuple[Placement, ...], ...]


def pack_batches(
    profiles: Sequence[Profile],
    bed_y: float,
    margin: float = 5.0,
    spacing: float = 2.0,
    offset_x: float = 10.0,
    decimals: int = 4,
) -> List[Batch]:
    """Pack profiles into batches bounded by ``bed_y``.

    Args:
        profiles: Profiles in consumption order.
        bed_y: Usable bed length along the packing axis.
        margin: Space before the first part of every batch.
        spacing: Space added after every part.
        offset_x: Fixed X offset of every placement.
        decimals: Rounding applied to the cursor.

    Returns:
        Batches in the order they were filled; none is empty.

    Raises:
        PartTooLargeError: a profile does not fit even an empty batch.
    """
    if bed_y <= 0:
        raise ConfigurationError(f"bed_y must be positive, got {bed_y}")
    if margin < 0 or spacing < 0:
        raise ConfigurationError(
            f"margin and spacing must be >= 0, got {margin} and {spacing}"
        )

    def step(state: PackState, profile: Profile) -> PackState:
        if round_to(margin + spacing + profile.height, decimals) > bed_y:
            raise PartTooLargeError(
                f"Profile {profile.file_stem} (row {profile.source_row}) is "
                f"{profile.height:.2f}mm tall; bed allows "
                f"{bed_y - margin - spacing:.2f}mm after margin and spacing"
            )

        cursor, current, sealed = state
        if round_to(cursor + spacing + profile.height, decimals) > bed_y:
            sealed = sealed + (current,)
            current = ()
            cursor = margin

        cursor = round_to(cursor + profile.height + spacing, decimals)
        placement = Placement(
            profile_index=profile.index,
            offset_y=-cursor,
            offset_x=offset_x,
            rotation=FLIP_X,
        )
        return PackState(cursor, current + (placement,), sealed)

    final = reduce(step, profiles, PackState(margin, (), ()))
    groups = final.sealed + ((final.current,) if final.current else ())

    batches = [
        Batch(index=i, placements=placements) for i, placements in enumerate(groups)
    ]
    logger.info(
        "Packed %d profiles into %d batches (bed %.1fmm)",
        len(profiles), len(batches), bed_y,
    )
    return batches


def pack_profiles(profiles: Sequence[Profile], config: RunConfig) -> List[Batch]:
    """pack_batches() with the bed settings of a run config."""
    return pack_batches(
        profiles,
        bed_y=config.bed_y_mm,
        margin=config.part_margin_y_mm,
        spacing=config.part_spacing_y_mm,
        offset_x=config.part_offset_x_mm,
        decimals=config.decimals,
    )
