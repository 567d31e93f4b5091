import numpy as np
import pandas as pd
from motion_profile import MoveRequest
from trajectory import solve_move

SWEEP_COLUMNS = ["value", "total_time", "peak_velocity", "velocity_limited", "jerk_min_limited", "trapezoidal"]


def _sweep(base: MoveRequest, field: str, value_range):
    """
    Solve base with `field` replaced by each value in value_range.
    Returns an array with one row per value, columns as SWEEP_COLUMNS.
    """
    results = []
    for value in value_range:
        request = base.with_changes(**{field: float(value)})
        sol = solve_move(request)
        results.append((
            value,
            sol.total_time,
            sol.peak_velocity,
            sol.is_velocity_limited,
            sol.is_jerk_min_limited,
            sol.is_trapezoidal,
        ))
    return np.array(results, dtype=float).reshape(-1, len(SWEEP_COLUMNS))


def sweep_velocity(base, velocity_range):
    """
    Sweep max speed (mm/s), return velocity_list and total_time_list.
    """
    rows = _sweep(base, "max_speed_mm_s", velocity_range)
    return rows[:, 0], rows[:, 1]


def sweep_accel(base, accel_range):
    """
    Sweep max acceleration (m/s^2), return accel_list and total_time_list.
    """
    rows = _sweep(base, "max_accel_m_s2", accel_range)
    return rows[:, 0], rows[:, 1]


def sweep_jerk(base, jerk_range):
    """
    Sweep max jerk (m/s^3), return jerk_list and total_time_list.
    """
    rows = _sweep(base, "max_jerk_m_s3", jerk_range)
    return rows[:, 0], rows[:, 1]


def sweep_distance(base, distance_range):
    """
    Sweep move distance (mm), return distance_list and total_time_list.
    """
    rows = _sweep(base, "distance_mm", distance_range)
    return rows[:, 0], rows[:, 1]


def sweep_velocity_accel(base, velocity_range, accel_range):
    """
    2D sweep: For each (v, a) pair, compute total move time. Returns meshgrid and Z.
    """
    Z = np.zeros((len(accel_range), len(velocity_range)))
    for i, accel in enumerate(accel_range):
        _, Z[i, :] = sweep_velocity(base.with_changes(max_accel_m_s2=float(accel)), velocity_range)
    V, A = np.meshgrid(velocity_range, accel_range)
    return V, A, Z


def surface_to_frame(base, velocity_range, accel_range) -> pd.DataFrame:
    """Velocity x acceleration surface as a long table, one row per (v, a) pair."""
    V, A, Z = sweep_velocity_accel(base, velocity_range, accel_range)
    return pd.DataFrame({
        "max_speed_mm_s": V.ravel(),
        "max_accel_m_s2": A.ravel(),
        "total_time": Z.ravel(),
    })


def sweep_to_frame(base, field, value_range) -> pd.DataFrame:
    """Full sweep table including peak velocity and classification flags."""
    df = pd.DataFrame(_sweep(base, field, value_range), columns=SWEEP_COLUMNS)
    df = df.rename(columns={"value": field})
    for col in ("velocity_limited", "jerk_min_limited", "trapezoidal"):
        df[col] = df[col].astype(bool)
    return df
