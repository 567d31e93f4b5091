"""
Closed-form jerk-limited (S-curve) point-to-point trajectory solver.

All quantities are in internal units (um, um/s, um/s^2, um/s^3). The profile
is symmetric: the deceleration half mirrors the acceleration half, with an
optional constant-velocity cruise in between.
"""
import logging
import math
from dataclasses import dataclass

from motion_profile import KinematicLimits, MoveRequest

# Any jerk at or above this (um/s^3) is treated as unlimited: trapezoidal profile
JERK_TRAPEZOIDAL = 2100000000 * 1000.0
# Relative overshoot of accel+decel distance tolerated as float residue
CRUISE_TOLERANCE = 1e-9


class InvalidInputError(ValueError):
    """Raised when a move cannot be solved from the given limits."""

    def __init__(self, fields):
        self.fields = tuple(fields)
        super().__init__(f"Must be positive and finite: {', '.join(self.fields)}")


@dataclass(frozen=True)
class ProfileSolution:
    t_jerk: float
    t_const_accel: float
    t_half: float  # time to reach peak velocity
    t_const_velocity: float
    total_time: float
    peak_velocity: float
    peak_acceleration: float
    jerk: float
    average_acceleration: float
    distance: float
    is_velocity_limited: bool = False
    is_jerk_min_limited: bool = False
    is_trapezoidal: bool = False

    @property
    def phase_durations(self):
        """Durations of the seven phases, in order."""
        return (
            self.t_jerk,
            self.t_const_accel,
            self.t_jerk,
            self.t_const_velocity,
            self.t_jerk,
            self.t_const_accel,
            self.t_jerk,
        )

    @property
    def accel_distance(self) -> float:
        """Distance covered while accelerating to peak velocity."""
        return 0.5 * self.peak_velocity * self.t_half


def _check_limits(limits: KinematicLimits):
    bad = [
        name for name in ("distance", "max_velocity", "max_acceleration")
        if not (math.isfinite(getattr(limits, name)) and getattr(limits, name) > 0)
    ]
    if bad:
        raise InvalidInputError(bad)


def peak_velocity_for_distance(distance: float, amax: float, jmax: float) -> float:
    """
    Highest velocity reachable over `distance` with no cruise segment.
    """
    d_threshold = 2 * amax ** 3 / jmax ** 2
    if distance <= d_threshold:
        # Jerk limited only: acceleration never reaches amax
        return (jmax * distance ** 2 / 4.0) ** (1.0 / 3.0)

    # Reaches amax: solve for plateau time t_a from
    # distance = v * (t_a + 2 * amax / jmax), v = amax * t_a + amax^2 / jmax
    A = amax
    B = 3 * amax ** 2 / jmax
    C = 2 * amax ** 3 / jmax ** 2 - distance
    discriminant = B ** 2 - 4 * A * C
    t_a = 0.0
    if discriminant >= 0:
        t_a = (-B + math.sqrt(discriminant)) / (2 * A)
    return amax * t_a + amax ** 2 / jmax


def solve(limits: KinematicLimits) -> ProfileSolution:
    """
    Solve the S-curve profile for a single move.
    Raises InvalidInputError when distance, velocity or acceleration is not positive.
    A non-positive jerk selects a trapezoidal profile.
    """
    _check_limits(limits)
    distance = limits.distance
    amax = limits.max_acceleration
    jmax = limits.max_jerk if limits.max_jerk > 0 else JERK_TRAPEZOIDAL

    vmax = peak_velocity_for_distance(distance, amax, jmax)

    is_velocity_limited = vmax > limits.max_velocity
    if is_velocity_limited:
        vmax = limits.max_velocity

    # Jerk needed to reach vmax when ramping straight to amax and back
    jerk_required = amax ** 2 / vmax
    is_jerk_min_limited = jmax < jerk_required
    jerk = jerk_required if is_jerk_min_limited else jmax
    is_trapezoidal = jerk >= JERK_TRAPEZOIDAL

    if is_trapezoidal:
        t_jerk = 0.0
        t_const_accel = vmax / amax
    else:
        t_jerk = amax / jerk
        t_const_accel = max(0.0, vmax - amax ** 2 / jerk) / amax

    t_half = t_const_accel + 2 * t_jerk
    # Same-time trapezoidal equivalent acceleration
    average_acceleration = vmax / t_half
    accel_distance = 0.5 * vmax ** 2 / average_acceleration

    t_const_velocity = (distance - 2 * accel_distance) / vmax
    if t_const_velocity < 0:
        if 2 * accel_distance - distance > CRUISE_TOLERANCE * distance:
            logging.warning(
                f"Accel/decel need {2 * accel_distance:.6g} um for a {distance:.6g} um move; "
                f"clamping cruise time {t_const_velocity:.3e} s to 0"
            )
        t_const_velocity = 0.0

    total_time = 2 * t_half + t_const_velocity

    logging.debug(
        f"Solved move d={distance:.6g} um: v={vmax:.6g} um/s, j={jerk:.6g} um/s^3, "
        f"T={total_time:.6g} s (velocity_limited={is_velocity_limited}, "
        f"jerk_min_limited={is_jerk_min_limited}, trapezoidal={is_trapezoidal})"
    )

    return ProfileSolution(
        t_jerk=t_jerk,
        t_const_accel=t_const_accel,
        t_half=t_half,
        t_const_velocity=t_const_velocity,
        total_time=total_time,
        peak_velocity=vmax,
        peak_acceleration=amax,
        jerk=jerk,
        average_acceleration=average_acceleration,
        distance=distance,
        is_velocity_limited=is_velocity_limited,
        is_jerk_min_limited=is_jerk_min_limited,
        is_trapezoidal=is_trapezoidal,
    )


def solve_move(request: MoveRequest) -> ProfileSolution:
    """Convert a user-unit request and solve it."""
    return solve(request.to_limits())


def time_breakdown(solution: ProfileSolution) -> dict:
    """Accel / constant / decel durations of one move, in seconds."""
    breakdown = {
        "Acceleration": solution.t_half,
        "Constant":     solution.t_const_velocity,
        "Deceleration": solution.t_half,
    }
    breakdown["Total"] = sum(breakdown.values())
    return breakdown
