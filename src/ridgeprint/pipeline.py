"""Dataset -> profiles -> print batches -> rendered meshes."""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path
from typing import Dict, List, Optional

from ridgeprint.contracts import Batch, Profile, RenderResult, RunConfig, RunResult
from ridgeprint.dataset import load_sample_matrix
from ridgeprint.dxf_writer import profiles_to_dxf
from ridgeprint.errors import ConfigurationError
from ridgeprint.extrusion import plan_extrusion_height
from ridgeprint.mesh_summary import summarize_mesh
from ridgeprint.packing import pack_profiles
from ridgeprint.profiles import build_profiles
from ridgeprint.render import batch_jobs, profile_jobs, render_jobs
from ridgeprint.run_files import OutputPaths, prepare_output_dirs, sha256_file, write_json
from ridgeprint.scad_writer import write_batch_layouts, write_part_generator

logger = logging.getLogger(__name__)

MANIFEST_SCHEMA = "ridgeprint.manifest.v1"


def run_pipeline(config: RunConfig) -> RunResult:
    """Run a complete job for ``config``.

    Geometry is computed and validated before any file is written; an input
    or geometry error leaves the output folders empty.
    """
    paths = prepare_output_dirs(config.output_dir)

    matrix = load_sample_matrix(config.input_path, decimals=config.decimals)
    profiles = build_profiles(matrix, config)
    extrude_height = plan_extrusion_height(
        config.height_mm,
        matrix.row_count,
        config.layer_height_mm,
        decimals=config.decimals,
    )
    if extrude_height <= 0:
        raise ConfigurationError(
            f"{matrix.row_count} parts of at least {config.layer_height_mm}mm "
            f"exceed the target height {config.height_mm}mm"
        )
    batches = pack_profiles(profiles, config)

    generator = write_part_generator(paths.root)
    outline_paths = profiles_to_dxf(profiles, paths.dxf_dir)
    outlines_by_index = {p.index: path for p, path in zip(profiles, outline_paths)}
    layout_paths = write_batch_layouts(
        batches, outlines_by_index, paths.batch_scad_dir, extrude_height
    )

    profile_renders: List[RenderResult] = []
    batch_renders: List[RenderResult] = []
    if config.render:
        profile_renders = render_jobs(
            config.openscad_path,
            profile_jobs(profiles, outlines_by_index, generator, paths.stl_dir, extrude_height),
            strict=config.strict_render,
            stage="part",
        )
        batch_renders = render_jobs(
            config.openscad_path,
            batch_jobs(batches, layout_paths, paths.batch_stl_dir),
            strict=config.strict_render,
            stage="batch",
        )
    else:
        logger.info("Rendering disabled; wrote DXF and SCAD sources only")

    mesh_summaries: Dict[str, Optional[Dict[str, object]]] = {
        result.job.output.name: summarize_mesh(result.job.output)
        for result in profile_renders + batch_renders
    }

    result = RunResult(
        config=config,
        row_count=matrix.row_count,
        column_count=matrix.column_count,
        extrusion_height_mm=extrude_height,
        profiles=profiles,
        batches=batches,
        outline_paths=outline_paths,
        layout_paths=layout_paths,
        manifest_path=paths.manifest_path,
        profile_renders=profile_renders,
        batch_renders=batch_renders,
        mesh_summaries=mesh_summaries,
    )
    write_json(paths.manifest_path, build_manifest(result, paths))
    logger.info(
        "Run complete: %d profiles, %d batches, extrusion %.4fmm",
        len(profiles), len(batches), extrude_height,
    )
    return result


def build_manifest(result: RunResult, paths: OutputPaths) -> Dict[str, object]:
    return {
        "schema_version": MANIFEST_SCHEMA,
        "config": dataclasses.asdict(result.config),
        "matrix": {"rows": result.row_count, "columns": result.column_count},
        "extrusion_height_mm": result.extrusion_height_mm,
        "profiles": [
            _profile_entry(profile, path, paths.root)
            for profile, path in zip(result.profiles, result.outline_paths)
        ],
        "batches": [
            _batch_entry(batch, path, paths.root)
            for batch, path in zip(result.batches, result.layout_paths)
        ],
        "renders": [
            _render_entry(r, result.mesh_summaries.get(r.job.output.name))
            for r in result.profile_renders + result.batch_renders
        ],
    }


def _profile_entry(profile: Profile, path: Path, root: Path) -> Dict[str, object]:
    return {
        "index": profile.index,
        "source_row": profile.source_row,
        "width_mm": profile.width,
        "height_mm": profile.height,
        "outline": path.relative_to(root).as_posix(),
        "sha256": sha256_file(path),
    }


def _batch_entry(batch: Batch, path: Path, root: Path) -> Dict[str, object]:
    return {
        "index": batch.index,
        "profiles": batch.profile_indices,
        "offsets_y_mm": [p.offset_y for p in batch.placements],
        "layout": path.relative_to(root).as_posix(),
        "sha256": sha256_file(path),
    }


def _render_entry(
    result: RenderResult,
    summary: Optional[Dict[str, object]],
) -> Dict[str, object]:
    return {
        "job": result.job.name,
        "output": result.job.output.name,
        "exit_code": result.exit_code,
        "mesh": summary,
    }
