"""
DXF export of profile outlines.

Uses ezdxf to write one file per profile with a single closed polyline on the
PROFILE layer. OpenSCAD's import() reads the outline back for extrusion.

Units: millimeters. Format: R2010.
"""
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

import ezdxf

from ridgeprint.contracts import Profile

logger = logging.getLogger(__name__)


@dataclass
class DXFExportConfig:
    """Configuration for DXF export."""
    layer: str = "PROFILE"
    color: int = 7  # ACI white/black
    dxf_version: str = "R2010"
    # Fixed header timestamps/GUIDs so reruns produce identical bytes.
    reproducible: bool = True


def outline_file_name(profile: Profile) -> str:
    return f"{profile.file_stem}.dxf"


def profile_to_dxf(
    profile: Profile,
    filepath: Path,
    config: Optional[DXFExportConfig] = None,
) -> Path:
    """Export a single profile outline to a DXF file.

    Args:
        profile: The profile to export.
        filepath: Output DXF file path.
        config: DXF export settings.

    Returns:
        Path to created DXF file.
    """
    if config is None:
        config = DXFExportConfig()

    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    # ezdxf stamps creation metadata in new() and save metadata in saveas()
    with _fixed_metadata(config.reproducible):
        doc = ezdxf.new(config.dxf_version)
        doc.units = ezdxf.units.MM
        doc.layers.add(config.layer, color=config.color)

        msp = doc.modelspace()
        # points already repeat the origin; close=True keeps CAD readers happy
        msp.add_lwpolyline(
            list(profile.points),
            close=True,
            dxfattribs={"layer": config.layer},
        )
        doc.saveas(filepath)
    logger.debug("Exported DXF: %s", filepath)
    return filepath


def profiles_to_dxf(
    profiles: Sequence[Profile],
    output_dir: Path,
    config: Optional[DXFExportConfig] = None,
) -> List[Path]:
    """Export each profile to ``output_dir/NN.dxf``.

    Returns:
        List of created DXF file paths, in profile order.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    paths = [
        profile_to_dxf(profile, output_dir / outline_file_name(profile), config)
        for profile in profiles
    ]
    logger.info("Exported %d DXF outlines to %s", len(paths), output_dir)
    return paths


def read_outline(filepath: Path) -> List[tuple]:
    """Return the (x, y) vertices of the first polyline in a DXF file."""
    doc = ezdxf.readfile(str(filepath))
    for entity in doc.modelspace().query("LWPOLYLINE"):
        return [(float(x), float(y)) for x, y in entity.get_points("xy")]
    return []


@contextmanager
def _fixed_metadata(enabled: bool):
    previous = ezdxf.options.write_fixed_meta_data_for_testing
    ezdxf.options.write_fixed_meta_data_for_testing = enabled
    try:
        yield
    finally:
        ezdxf.options.write_fixed_meta_data_for_testing = previous
