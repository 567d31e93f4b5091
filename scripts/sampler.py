import numpy as np
import pandas as pd
from dataclasses import dataclass

from evaluator import build_segments, evaluate_segments
from motion_profile import UM_PER_M, UM_PER_MM
from trajectory import ProfileSolution

DEFAULT_POINT_COUNT = 200

# Internal um units -> user units (mm, mm/s, m/s^2, m/s^3)
USER_UNIT_SCALE = {
    "position": 1 / UM_PER_MM,
    "velocity": 1 / UM_PER_MM,
    "acceleration": 1 / UM_PER_M,
    "jerk": 1 / UM_PER_M,
}


@dataclass(frozen=True)
class ProfileSummary:
    total_time: float = 0.0
    max_velocity_reached: float = 0.0
    max_acceleration_reached: float = 0.0
    final_position: float = 0.0
    is_velocity_limited: bool = False
    is_jerk_min_limited: bool = False
    is_trapezoidal: bool = False


def sample_times(total_time: float, point_count: int) -> np.ndarray:
    """Evenly spaced times over [0, total_time], plus total_time itself appended."""
    dt = total_time / (point_count - 1)
    return np.append(np.arange(point_count) * dt, total_time)


def sample(solution: ProfileSolution, point_count: int = DEFAULT_POINT_COUNT):
    """
    Discretize a solved move into point_count evenly spaced samples, followed by
    one explicit sample at exactly total_time so the terminal state is present.
    Returns an empty list for a zero-duration move.
    """
    if point_count < 2:
        raise ValueError(f"point_count must be at least 2, got {point_count}")
    if solution.total_time == 0:
        return []
    segments = build_segments(solution)
    return [
        evaluate_segments(float(t), segments, solution)
        for t in sample_times(solution.total_time, point_count)
    ]


def summarize(samples, solution: ProfileSolution = None) -> ProfileSummary:
    """Peak values over the samples; zeroed for an empty sequence."""
    if not samples:
        return ProfileSummary()
    flags = {}
    if solution is not None:
        flags = dict(
            is_velocity_limited=solution.is_velocity_limited,
            is_jerk_min_limited=solution.is_jerk_min_limited,
            is_trapezoidal=solution.is_trapezoidal,
        )
    return ProfileSummary(
        total_time=samples[-1].time,
        max_velocity_reached=max(s.velocity for s in samples),
        max_acceleration_reached=max(abs(s.acceleration) for s in samples),
        final_position=samples[-1].position,
        **flags,
    )


def samples_to_frame(samples, user_units: bool = False) -> pd.DataFrame:
    """Tabulate samples; optionally convert from um based units to mm / m based units."""
    df = pd.DataFrame(
        [s._replace(phase=s.phase.value) for s in samples],
        columns=["time", "position", "velocity", "acceleration", "jerk", "phase"],
    )
    if user_units:
        for col, scale in USER_UNIT_SCALE.items():
            df[col] = df[col] * scale
    return df
