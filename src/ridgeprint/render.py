"""
Render orchestration against the OpenSCAD command line.

Each job is one engine process:

    openscad -o <output> -D key=<json> ... <source>

All jobs of a stage are started at once and awaited together; there is no
concurrency cap, timeout or cancellation. A stage always runs every job to
completion before failures are reported.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Dict, List, Sequence

from ridgeprint.contracts import Batch, Profile, RenderJob, RenderResult
from ridgeprint.errors import RenderError, RendererNotFoundError

logger = logging.getLogger(__name__)


def build_command(engine: str, job: RenderJob) -> List[str]:
    params: List[str] = []
    for key, value in job.params.items():
        params.extend(["-D", f"{key}={json.dumps(value)}"])
    return [
        engine,
        "-o",
        str(Path(job.output).resolve()),
        *params,
        str(Path(job.source).resolve()),
    ]


def profile_jobs(
    profiles: Sequence[Profile],
    outline_paths: Dict[int, Path],
    generator: Path,
    stl_dir: Path,
    extrude_height: float,
) -> List[RenderJob]:
    """One job per profile: extrude its outline with the part generator."""
    return [
        RenderJob(
            name=f"part {profile.file_stem}",
            source=generator,
            output=Path(stl_dir) / f"{profile.file_stem}.stl",
            params={
                "dxf": str(Path(outline_paths[profile.index]).resolve()),
                "height": extrude_height,
            },
        )
        for profile in profiles
    ]


def batch_jobs(
    batches: Sequence[Batch],
    layout_paths: Sequence[Path],
    stl_dir: Path,
) -> List[RenderJob]:
    """One job per batch layout program."""
    return [
        RenderJob(
            name=batch.file_stem,
            source=Path(layout_path),
            output=Path(stl_dir) / f"{batch.file_stem}.stl",
        )
        for batch, layout_path in zip(batches, layout_paths)
    ]


async def run_job(engine: str, job: RenderJob) -> RenderResult:
    cmd = build_command(engine, job)
    logger.debug("Starting %s: %s", job.name, " ".join(cmd))
    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise RendererNotFoundError(
            f"Cannot start render engine {engine!r}: {e}"
        ) from e

    stdout, stderr = await proc.communicate()
    result = RenderResult(
        job=job,
        exit_code=proc.returncode,
        stdout=stdout.decode("utf-8", errors="replace"),
        stderr=stderr.decode("utf-8", errors="replace"),
    )
    for stream in (result.stdout, result.stderr):
        if stream.strip():
            logger.debug("[%s] %s", job.name, stream.rstrip())
    return result


async def run_jobs(engine: str, jobs: Sequence[RenderJob]) -> List[RenderResult]:
    return list(await asyncio.gather(*(run_job(engine, job) for job in jobs)))


def render_jobs(
    engine: str,
    jobs: Sequence[RenderJob],
    strict: bool = True,
    stage: str = "render",
) -> List[RenderResult]:
    """Run a stage of render jobs concurrently and wait for all of them.

    Args:
        engine: Render engine executable.
        jobs: Independent jobs; each owns its output path.
        strict: Raise RenderError when any job exits non-zero. When False,
            failures are logged and returned like successes.
        stage: Label used in log and error messages.

    Returns:
        One result per job, in job order.
    """
    if not jobs:
        return []

    logger.info("Rendering %d %s jobs with %s", len(jobs), stage, engine)
    results = asyncio.run(run_jobs(engine, jobs))

    failed = [r for r in results if not r.ok]
    for result in failed:
        logger.warning(
            "%s exited with %d: %s",
            result.job.name, result.exit_code, result.stderr.strip()[:200],
        )
    if failed and strict:
        names = ", ".join(r.job.name for r in failed)
        raise RenderError(f"{len(failed)}/{len(results)} {stage} jobs failed: {names}")
    return results
