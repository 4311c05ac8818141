#!/usr/bin/env python3
"""Turn a CSV dataset into extruded profile parts and print-bed batches."""

from __future__ import annotations

import argparse
import logging
import os
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from ridgeprint import RunConfig, run_pipeline
from ridgeprint.contracts import BASELINE_GLOBAL, BASELINE_ROW
from ridgeprint.errors import RidgeprintError

logger = logging.getLogger("ridgeprint")


def build_parser() -> argparse.ArgumentParser:
    defaults = RunConfig(input_path="")
    parser = argparse.ArgumentParser(
        description="Dataset rows -> DXF profiles -> OpenSCAD batches -> STL"
    )
    parser.add_argument(
        "--input", required=True, help="Path to header-less CSV dataset"
    )
    parser.add_argument(
        "--output-dir", default=defaults.output_dir, help="Output root directory"
    )
    parser.add_argument(
        "--openscad",
        default=os.environ.get("RIDGEPRINT_OPENSCAD", defaults.openscad_path),
        help="OpenSCAD executable (default: $RIDGEPRINT_OPENSCAD or 'openscad')",
    )
    parser.add_argument(
        "--layer-height-mm",
        type=float,
        default=defaults.layer_height_mm,
        help="Print layer height; extrusion height is rounded down to it",
    )
    parser.add_argument(
        "--height-mm",
        type=float,
        default=defaults.height_mm,
        help="Overall height of the stacked parts",
    )
    parser.add_argument(
        "--width-mm",
        type=float,
        default=defaults.width_mm,
        help="Overall width of every profile",
    )
    parser.add_argument(
        "--xy-relation",
        type=float,
        default=defaults.xy_relation,
        help="Horizontal step per sample; lower values give taller spikes",
    )
    parser.add_argument(
        "--padding-y-mm",
        type=float,
        default=defaults.padding_y_mm,
        help="Extra base material under the graph",
    )
    parser.add_argument(
        "--bed-y-mm",
        type=float,
        default=defaults.bed_y_mm,
        help="Usable print bed length along Y",
    )
    parser.add_argument(
        "--part-margin-y-mm",
        type=float,
        default=defaults.part_margin_y_mm,
        help="Space before the first part of each batch",
    )
    parser.add_argument(
        "--part-spacing-y-mm",
        type=float,
        default=defaults.part_spacing_y_mm,
        help="Space between parts in a batch",
    )
    parser.add_argument(
        "--part-offset-x-mm",
        type=float,
        default=defaults.part_offset_x_mm,
        help="X offset of every part in a batch",
    )
    parser.add_argument(
        "--decimals",
        type=int,
        default=defaults.decimals,
        help="Decimal places kept for samples, coordinates and heights",
    )
    parser.add_argument(
        "--baseline",
        choices=[BASELINE_GLOBAL, BASELINE_ROW],
        default=defaults.baseline,
        help="Lift samples by the dataset minimum or by each row's minimum",
    )
    parser.add_argument(
        "--allow-render-errors",
        action="store_true",
        help="Keep going when OpenSCAD exits non-zero",
    )
    parser.add_argument(
        "--no-render",
        action="store_true",
        help="Write DXF and SCAD sources without running OpenSCAD",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logs"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = RunConfig(
        input_path=args.input,
        output_dir=args.output_dir,
        openscad_path=args.openscad,
        layer_height_mm=float(args.layer_height_mm),
        height_mm=float(args.height_mm),
        width_mm=float(args.width_mm),
        xy_relation=float(args.xy_relation),
        padding_y_mm=float(args.padding_y_mm),
        bed_y_mm=float(args.bed_y_mm),
        part_margin_y_mm=float(args.part_margin_y_mm),
        part_spacing_y_mm=float(args.part_spacing_y_mm),
        part_offset_x_mm=float(args.part_offset_x_mm),
        decimals=int(args.decimals),
        baseline=args.baseline,
        strict_render=not args.allow_render_errors,
        render=not args.no_render,
    )

    started = time.perf_counter()
    try:
        result = run_pipeline(config)
    except RidgeprintError as e:
        logger.error("%s: %s", type(e).__name__, e)
        return 1
    elapsed = time.perf_counter() - started

    print(f"Profiles: {len(result.profiles)}")
    print(f"Batches: {len(result.batches)}")
    print(f"Extrusion height: {result.extrusion_height_mm}mm")
    if config.render:
        print(f"Renders failed: {len(result.failed_renders)}")
    print(f"Manifest: {result.manifest_path}")
    print(f"Duration: {elapsed:.2f}s")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
