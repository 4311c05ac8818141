"""Inspect rendered STL files with trimesh."""
import logging
from pathlib import Path
from typing import Dict, Optional

import trimesh

logger = logging.getLogger(__name__)


def summarize_mesh(path: Path) -> Optional[Dict[str, object]]:
    """Extents, watertightness and face count of a rendered mesh.

    Returns None when the file was not produced (e.g. a failed render in
    lenient mode), cannot be parsed or holds no geometry.
    """
    path = Path(path)
    if not path.is_file() or path.stat().st_size == 0:
        logger.warning("No mesh at %s", path)
        return None

    try:
        mesh = trimesh.load(str(path), force="mesh")
    except Exception as e:
        logger.warning("Cannot load mesh %s: %s", path, e)
        return None
    if mesh.is_empty:
        logger.warning("Empty mesh at %s", path)
        return None

    extents = [round(float(v), 4) for v in mesh.extents]
    return {
        "extents_mm": extents,
        "faces": int(len(mesh.faces)),
        "watertight": bool(mesh.is_watertight),
    }
