"""Checks a move request against the declared limits of a drive."""
import math
from dataclasses import dataclass
from typing import List, Optional

from motion_profile import MoveRequest, PhysicsInputs

# Relative slack on the force limit so float equality does not fail a check
FORCE_TOLERANCE = 0.001


@dataclass(frozen=True)
class DriveLimits:
    name: str
    max_stroke_mm: float
    max_speed_mm_s: float
    max_force_n: float
    moving_mass_g: float = 0.0

    @classmethod
    def from_config(cls, block: dict) -> "DriveLimits":
        return cls(
            name=block.get("name", "Drive"),
            max_stroke_mm=float(block["max_stroke_mm"]),
            max_speed_mm_s=float(block["max_speed_mm_s"]),
            max_force_n=float(block["max_force_n"]),
            moving_mass_g=float(block.get("moving_mass_g", 0.0)),
        )


@dataclass(frozen=True)
class Check:
    param: str
    ok: bool
    message: str
    utilization: Optional[float] = None  # percent, force check only


def required_force(physics: PhysicsInputs, accel_m_s2: float) -> float:
    """F = m * a with masses in grams, in newtons."""
    return (physics.motor_mass + physics.payload_mass) / 1000.0 * accel_m_s2


def check_distance(request: MoveRequest, drive: DriveLimits) -> Check:
    if request.distance_mm > drive.max_stroke_mm:
        return Check("distance", False,
                     f"Stroke exceeded ({request.distance_mm}mm > {drive.max_stroke_mm}mm)")
    return Check("distance", True, "Stroke within limit")


def check_speed(request: MoveRequest, drive: DriveLimits) -> Check:
    if request.max_speed_mm_s > drive.max_speed_mm_s:
        return Check("speed", False,
                     f"Speed exceeded ({request.max_speed_mm_s}mm/s > {drive.max_speed_mm_s}mm/s)")
    return Check("speed", True, "Speed within limit")


def check_force(request: MoveRequest, physics: PhysicsInputs, drive: DriveLimits) -> Check:
    force = required_force(physics, request.max_accel_m_s2)
    if force > drive.max_force_n * (1 + FORCE_TOLERANCE):
        return Check("force", False,
                     f"Force exceeded ({force:.1f}N > {drive.max_force_n}N)")
    utilization = math.floor(force / drive.max_force_n * 100 + 0.5) if drive.max_force_n > 0 else 0
    return Check("force", True, f"Force usage {utilization}%", utilization)


def validate(request: MoveRequest, physics: PhysicsInputs, drive: DriveLimits) -> List[Check]:
    """Pass/fail judgement for distance, speed and force, in that order."""
    return [
        check_distance(request, drive),
        check_speed(request, drive),
        check_force(request, physics, drive),
    ]


def has_errors(checks) -> bool:
    return any(not c.ok for c in checks)


def clamp_to_drive(request: MoveRequest, drive: DriveLimits) -> MoveRequest:
    """Pull distance and speed back inside the drive's stroke and speed limits."""
    return request.with_changes(
        distance_mm=min(request.distance_mm, drive.max_stroke_mm),
        max_speed_mm_s=min(request.max_speed_mm_s, drive.max_speed_mm_s),
    )


def physics_for_drive(drive: DriveLimits, payload_mass: float = 0.0) -> PhysicsInputs:
    return PhysicsInputs(
        motor_mass=drive.moving_mass_g,
        payload_mass=payload_mass,
        max_force=drive.max_force_n,
    )
