#!/usr/bin/env python3
"""XY Phase Field Entrypoint

Interactive lattice of phase angles relaxing toward local alignment:
- drag on the field to pull arrows toward the pointer
- hold the rotate button (or the `r` key) to spin every arrow at once
- speed and temperature sliders change the dynamics live

Usage:
    python run.py                          # 30x30 lattice fitted to the window
    python run.py --cell-size 16           # lattice derived from the window size
    python run.py --temperature 0.2        # start warm
    python run.py --headless --frames 600  # no window, report tick count
    python run.py --headless --quiet       # no window, no console output
    python run.py --video artifacts/xy.mp4 # record the dashboard
"""

from __future__ import annotations

import argparse
from pathlib import Path

import torch

from xyfield.console import console
from xyfield.field.config import FieldConfig
from xyfield.field.lattice import LatticeConfigError
from xyfield.field.simulator import XYSimulation


def main():
    parser = argparse.ArgumentParser(
        description="XY Phase Field",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument("--grid", type=int, nargs=2, default=(30, 30), metavar=("W", "H"), help="Initial lattice size before fitting to the window")
    parser.add_argument("--fit-cells", type=int, default=30, help="Cells across the smaller window side (default: 30)")
    parser.add_argument("--cell-size", type=float, default=None, help="Cell size in pixels; derives the lattice from the window instead of --fit-cells")
    parser.add_argument("--speed", type=int, default=5, help="Tick rate 1..10; physics runs every (11 - speed) frames")
    parser.add_argument("--temperature", type=float, default=0.0, help="Noise amplitude 0..1")
    parser.add_argument("--rotation-step", type=float, default=0.02, help="Radians per 60 Hz frame while rotating")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--monochrome", action="store_true", help="Draw white arrows instead of hue-by-angle")
    parser.add_argument("--fps", type=int, default=60, help="Refresh rate of the animation (default: 60)")
    parser.add_argument("--video", type=str, default=None, help="Record the dashboard to a video file (e.g. artifacts/xy.mp4)")
    parser.add_argument("--headless", action="store_true", help="Run without a window")
    parser.add_argument("--frames", type=int, default=600, help="Frames to run in headless mode")
    parser.add_argument("--device", type=str, default=None, help="Device (cuda, cpu)")
    parser.add_argument("--quiet", action="store_true", help="Suppress console output")

    args = parser.parse_args()
    if args.quiet:
        console.set_quiet(True)

    device = args.device
    if device is None:
        device = "cuda" if torch.cuda.is_available() else "cpu"

    config = FieldConfig(
        grid_size=(args.grid[0], args.grid[1]),
        cell_size=args.cell_size if args.cell_size is not None else FieldConfig.cell_size,
        base_angular_step=args.rotation_step,
        speed=args.speed,
        temperature=args.temperature,
        color_by_angle=not args.monochrome,
        seed=args.seed,
        device=device,
    )
    try:
        sim = XYSimulation(config)
    except (LatticeConfigError, ValueError) as err:
        console.error("Invalid configuration", detail=str(err))
        raise SystemExit(2)

    fit_cells = None if args.cell_size is not None else args.fit_cells

    console.header(
        "XY PHASE FIELD",
        Device=str(device),
        Lattice=("fit %d cells" % fit_cells) if fit_cells is not None else ("cell %.1fpx" % config.cell_size),
        Speed=str(config.speed),
        Temperature=f"{config.temperature:.2f}",
        Mode="headless" if args.headless else "interactive",
    )

    if args.headless and args.video is None:
        with console.spinner(f"Running {args.frames} frames..."):
            sim.run(args.frames)
        w, h = sim.dims
        console.success("Done", detail=f"{sim.frames} frames, {sim.ticks} ticks on {w}x{h}")
        return

    if args.headless:
        import matplotlib

        matplotlib.use("Agg")

    from xyfield.instrument.dashboard.session import DashboardSession

    session = DashboardSession(
        sim,
        fit_cells=fit_cells,
        fps=args.fps,
        video_path=(None if args.video is None else Path(args.video)),
        show=not args.headless,
    )
    try:
        if args.headless:
            with console.spinner(f"Recording {args.frames} frames..."):
                session.run_headless(args.frames)
        else:
            session.run()
    except KeyboardInterrupt:
        console.warn("Interrupted")
    finally:
        session.close()

    if args.video is not None:
        console.success("Video saved", detail=str(args.video))


if __name__ == "__main__":
    main()
