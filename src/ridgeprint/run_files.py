"""Output-folder layout and file helpers for a ridgeprint run."""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from ridgeprint.errors import OutputDirectoryError


@dataclass
class OutputPaths:
    root: Path
    dxf_dir: Path
    stl_dir: Path
    batch_scad_dir: Path
    batch_stl_dir: Path
    manifest_path: Path


def ensure_dir(path: Path) -> Path:
    if path.exists() and not path.is_dir():
        raise OutputDirectoryError(f"Path exists but is not a directory: {path}")
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise OutputDirectoryError(f"Cannot create directory {path}: {e}") from e
    return path


def prepare_output_dirs(output_root: str | Path) -> OutputPaths:
    root = Path(output_root)
    paths = OutputPaths(
        root=root,
        dxf_dir=root / "dxf",
        stl_dir=root / "stl",
        batch_scad_dir=root / "batch_scad",
        batch_stl_dir=root / "batch_stl",
        manifest_path=root / "manifest.json",
    )
    for directory in (
        paths.root,
        paths.dxf_dir,
        paths.stl_dir,
        paths.batch_scad_dir,
        paths.batch_stl_dir,
    ):
        ensure_dir(directory)
    return paths


def sha256_file(path: Path) -> str:
    digest = hashlib.sha256()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(1024 * 1024), b""):
            digest.update(chunk)
    return digest.hexdigest()


def write_json(path: Path, payload: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, sort_keys=True)
