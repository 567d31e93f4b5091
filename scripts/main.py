"""
S-Curve Move Calculator Main Script
===================================

CLI-driven main script for single-axis jerk-limited move analysis.

Major use-cases (selectable via CLI or run all):
    1. Single move: solve, print timing breakdown, export samples
    2. Drive validation (stroke, speed, force against a drive's limits)
    3. Parametric sweeps (velocity, acceleration, jerk, distance)

To add new use-cases, define a new function and add to the USE_CASES dict.
CLI Usage Examples:

# Run the default single_move case using settings defined at the top of this file:
python scripts/main.py

# Run ALL use-cases with a specific config file
python scripts/main.py --usecase all --config short_stroke.json

# Validate against the configured drive only
python scripts/main.py --usecase validate

# Change logging verbosity
python scripts/main.py --loglevel DEBUG

NOTE:
- All config files should be placed in the config/ directory at the project base.
- Sample tables and sweep results are stored in the results/ directory.
"""

import argparse
import logging
import json
from pathlib import Path
import sys

import numpy as np

from motion_profile import MoveRequest, PhysicsInputs
from physics import derive_max_acceleration, apply_derived_acceleration
from trajectory import InvalidInputError, solve_move, time_breakdown
from sampler import sample, summarize, samples_to_frame, DEFAULT_POINT_COUNT
from validator import DriveLimits, validate, has_errors, clamp_to_drive, physics_for_drive
from analysis import sweep_to_frame, surface_to_frame

# =============================
# DEFAULT RUN SETTINGS
# =============================
DEFAULT_SETTINGS = {
    "base_dir": Path(__file__).resolve().parents[1],
    "config": "baseline.json",
    "usecase": ["single_move"],
    "loglevel": "INFO",
}

SWEEPS = {
    "velocity_sweep": "max_speed_mm_s",
    "acceleration_sweep": "max_accel_m_s2",
    "jerk_sweep": "max_jerk_m_s3",
    "distance_sweep": "distance_mm",
}


# =======================
# 1. CONFIGURATION UTILS
# =======================

def load_config(config_path: Path) -> dict:
    """Load and validate a JSON configuration file."""
    try:
        with open(config_path, "r") as f:
            config = json.load(f)
    except FileNotFoundError:
        logging.error(f"Config file not found: {config_path}")
        sys.exit(1)
    except json.JSONDecodeError:
        logging.error(f"Config file is not valid JSON: {config_path}")
        sys.exit(1)
    for key in ("move", "physics"):
        if key not in config:
            logging.error(f"Config file is missing the '{key}' section: {config_path}")
            sys.exit(1)
    return config

def setup_dirs(base_dir: Path) -> dict:
    """Create and return all working subdirectories."""
    dirs = {
        "config": base_dir / "config",
        "results": base_dir / "results",
        "single_move": base_dir / "results" / "single_move",
        "parametric": base_dir / "results" / "parametric",
    }
    for d in dirs.values():
        d.mkdir(parents=True, exist_ok=True)
    return dirs

# ==============================
# 2. MOVE UTILITY FUNCTIONS
# ==============================

def build_physics(config: dict) -> PhysicsInputs:
    """Moving mass and force; a configured drive supplies its own mass and force."""
    block = config["physics"]
    if config.get("drive"):
        return physics_for_drive(
            DriveLimits.from_config(config["drive"]),
            payload_mass=float(block.get("payload_mass_g", 0.0)),
        )
    return PhysicsInputs(
        motor_mass=float(block.get("motor_mass_g", 0.0)),
        payload_mass=float(block.get("payload_mass_g", 0.0)),
        max_force=float(block.get("max_force_n", 0.0)),
    )

def build_request(config: dict) -> MoveRequest:
    """Create the move request from config, applying drive and physics adjustments."""
    request = MoveRequest.from_config(config["move"])
    if config.get("drive"):
        request = clamp_to_drive(request, DriveLimits.from_config(config["drive"]))
    if config.get("use_derived_acceleration", False):
        request = apply_derived_acceleration(request, build_physics(config))
    return request

def print_request(request: MoveRequest, physics: PhysicsInputs):
    accel = derive_max_acceleration(physics.motor_mass, physics.payload_mass, physics.max_force)
    print("\n[MOVE PARAMETERS]")
    print(f"  Distance         : {request.distance_mm:.4f} mm")
    print(f"  Max Velocity     : {request.max_speed_mm_s:.4f} mm/s")
    print(f"  Max Acceleration : {request.max_accel_m_s2:.4f} m/s²")
    print(f"  Max Jerk         : {request.max_jerk_m_s3:.4f} m/s³")
    print(f"  Drive Max Accel  : {accel:.4f} m/s² "
          f"({physics.motor_mass + physics.payload_mass:.0f} g, {physics.max_force:.1f} N)")

# ==========================
# 3. USE-CASE IMPLEMENTATION
# ==========================

def usecase_single_move(config, dirs, request):
    """Solve a single move, print its breakdown and export its samples."""
    logging.info("Running use-case: Single Move")
    print_request(request, build_physics(config))

    solution = solve_move(request)
    samples = sample(solution, config.get("point_count", DEFAULT_POINT_COUNT))
    summary = summarize(samples, solution)

    print("\n[S-curve Phase Timing Breakdown]")
    for k, v in time_breakdown(solution).items():
        print(f"  {k:12s}: {v:8.4f} sec")
    print(f"  Jerk phase   : {solution.t_jerk:8.4f} sec")
    print(f"  Const accel  : {solution.t_const_accel:8.4f} sec")

    print("\n[Achieved Profile]")
    print(f"  Peak Velocity    : {summary.max_velocity_reached / 1000:.4f} mm/s")
    print(f"  Peak Accel       : {summary.max_acceleration_reached / 1e6:.4f} m/s²")
    print(f"  Jerk Used        : {solution.jerk / 1e6:.4f} m/s³")
    print(f"  Final Position   : {summary.final_position / 1000:.4f} mm")
    for label, flag in (
        ("Velocity limited", summary.is_velocity_limited),
        ("Jerk raised to minimum", summary.is_jerk_min_limited),
        ("Trapezoidal", summary.is_trapezoidal),
    ):
        if flag:
            print(f"  * {label}")

    out_path = dirs["single_move"] / f"{config.get('name', 'move')}_samples.csv"
    samples_to_frame(samples, user_units=True).to_csv(out_path, index=False)
    logging.info(f"Samples written to {out_path}")

def usecase_validate(config, dirs, request):
    """Check the move against the configured drive limits."""
    logging.info("Running use-case: Drive Validation")
    if not config.get("drive"):
        logging.warning("No 'drive' section in config, skipping validation")
        return
    drive = DriveLimits.from_config(config["drive"])
    checks = validate(request, build_physics(config), drive)
    print(f"\n[{drive.name} VALIDATION]")
    for c in checks:
        print(f"  [{'OK' if c.ok else 'FAIL'}] {c.param:8s} {c.message}")
    if has_errors(checks):
        logging.warning(f"Move exceeds the limits of {drive.name}")

def usecase_parametric_sweep(config, dirs, request):
    """
    Run parametric sweeps of total move time over each configured range.
    """
    logging.info("Running use-case: Parametric Sweep Analysis")
    for key, field in SWEEPS.items():
        if key not in config:
            continue
        value_range = np.linspace(*config[key])
        df = sweep_to_frame(request, field, value_range)
        out_path = dirs["parametric"] / f"{key}.csv"
        df.to_csv(out_path, index=False)
        logging.info(f"{key}: {len(df)} points, total time "
                     f"{df['total_time'].min():.4f}-{df['total_time'].max():.4f} s -> {out_path}")

    # 2D surface
    if "velocity_2d_sweep" in config and "acceleration_2d_sweep" in config:
        v_2d = np.linspace(*config["velocity_2d_sweep"])
        a_2d = np.linspace(*config["acceleration_2d_sweep"])
        df = surface_to_frame(request, v_2d, a_2d)
        out_path = dirs["parametric"] / "velocity_accel_surface.csv"
        df.to_csv(out_path, index=False)
        logging.info(f"velocity_accel_surface: {len(df)} points -> {out_path}")

# Register use-cases
USE_CASES = {
    "single_move": usecase_single_move,
    "validate": usecase_validate,
    "parametric": usecase_parametric_sweep,
}

# ================
# 4. MAIN ENTRYPOINT
# ================

def build_parser():
    parser = argparse.ArgumentParser(
        description="S-curve move calculator: jerk-limited single-axis move analysis"
    )
    parser.add_argument(
        "--base-dir",
        type=str,
        default=str(DEFAULT_SETTINGS['base_dir']),
        help="Project base directory holding config/ and results/"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=DEFAULT_SETTINGS["config"],
        help="Name of config file to load from the config/ directory"
    )
    parser.add_argument(
        "--usecase",
        type=str,
        nargs="*",
        choices=list(USE_CASES.keys()) + ["all"],
        default=DEFAULT_SETTINGS["usecase"],
        help="Which use-case(s) to run (default: single_move)"
    )
    parser.add_argument(
        "--loglevel",
        type=str,
        default=DEFAULT_SETTINGS["loglevel"],
        help="Set logging level (DEBUG, INFO, WARNING, ERROR)"
    )
    return parser

def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.loglevel.upper()), format="%(levelname)s: %(message)s")
    base_dir = Path(args.base_dir)
    dirs = setup_dirs(base_dir)
    config_path = dirs["config"] / args.config
    config = load_config(config_path)
    request = build_request(config)

    if "all" in args.usecase:
        run_cases = USE_CASES.values()
    else:
        run_cases = [USE_CASES[uc] for uc in args.usecase]
    try:
        for fn in run_cases:
            fn(config, dirs, request)
    except InvalidInputError as e:
        logging.error(f"Cannot solve move from {config_path.name}: {e}")
        sys.exit(1)

if __name__ == "__main__":
    main()
