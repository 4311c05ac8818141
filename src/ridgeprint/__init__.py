"""Public API for turning sample matrices into print-ready profile batches."""

from ridgeprint.contracts import Batch, Placement, Profile, RunConfig, RunResult
from ridgeprint.extrusion import plan_extrusion_height
from ridgeprint.packing import pack_batches
from ridgeprint.pipeline import run_pipeline
from ridgeprint.profiles import build_profile, build_profiles

__all__ = [
    "Batch",
    "Placement",
    "Profile",
    "RunConfig",
    "RunResult",
    "build_profile",
    "build_profiles",
    "pack_batches",
    "plan_extrusion_height",
    "run_pipeline",
]
