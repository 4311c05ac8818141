"""Extrusion height planning: quantize the stack height to the layer pitch."""
import logging
import math

from ridgeprint.dataset import round_to
from ridgeprint.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Absorbs float noise such as 0.6 / 3 / 0.2 == 0.9999999999999999.
_FLOOR_TOLERANCE = 1e-9


def plan_extrusion_height(
    target_height: float,
    row_count: int,
    layer_pitch: float,
    decimals: int = 4,
) -> float:
    """Extrusion height shared by every profile of a run.

    The largest multiple of ``layer_pitch`` not exceeding
    ``target_height / row_count``. Returns 0.0 when a single layer per row
    already overshoots the target; callers decide whether that is fatal.
    """
    if row_count <= 0:
        raise ConfigurationError(f"row_count must be positive, got {row_count}")
    if layer_pitch <= 0:
        raise ConfigurationError(f"layer_pitch must be positive, got {layer_pitch}")
    if target_height < 0:
        raise ConfigurationError(f"target_height must be >= 0, got {target_height}")
    # A pitch finer than the output precision would round the height up past the target
    if not math.isclose(round_to(layer_pitch, decimals), layer_pitch, rel_tol=0.0, abs_tol=1e-12):
        raise ConfigurationError(
            f"layer_pitch {layer_pitch} is not representable with {decimals} decimals"
        )

    layers = math.floor(target_height / row_count / layer_pitch + _FLOOR_TOLERANCE)
    height = round_to(layers * layer_pitch, decimals)
    logger.debug(
        "Extrusion: %d layers x %.4f = %.4f mm per part (%d parts)",
        layers, layer_pitch, height, row_count,
    )
    return height
