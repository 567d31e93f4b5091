import sys
from pathlib import Path
sys.path.append(str(Path(__file__).resolve().parents[1] / 'scripts'))

import numpy as np
import pytest
from motion_profile import KinematicLimits
from evaluator import Phase, evaluate, phase_boundaries
from trajectory import solve

LIMITS = [
    KinematicLimits(distance=100000, max_velocity=1000000, max_acceleration=10000000, max_jerk=100000000),
    KinematicLimits(distance=1000000, max_velocity=1e9, max_acceleration=10000000, max_jerk=100000000),
    KinematicLimits(distance=1000000, max_velocity=1000000, max_acceleration=10000000, max_jerk=100000000),
    KinematicLimits(distance=1, max_velocity=1000000000, max_acceleration=10000000, max_jerk=0),
    KinematicLimits(distance=2500000, max_velocity=300000, max_acceleration=2000000, max_jerk=4e7),
    KinematicLimits(distance=50, max_velocity=20000, max_acceleration=1e6, max_jerk=1e13),
]


@pytest.mark.parametrize("limits", LIMITS)
def test_starts_at_rest(limits):
    s = evaluate(0, solve(limits))
    assert s.position == 0
    assert s.velocity == 0
    assert s.acceleration == 0
    assert s.phase is Phase.ACCEL_JERK_UP


@pytest.mark.parametrize("limits", LIMITS)
def test_ends_at_distance(limits):
    sol = solve(limits)
    s = evaluate(sol.total_time, sol)
    assert s.position == pytest.approx(limits.distance, rel=1e-9)
    assert s.velocity == pytest.approx(0, abs=1e-6 * sol.peak_velocity)
    assert s.phase is Phase.DECEL_JERK_DOWN


@pytest.mark.parametrize("limits", LIMITS)
def test_position_monotonic_and_bounded(limits):
    sol = solve(limits)
    t = np.linspace(0, sol.total_time, 2001)
    samples = [evaluate(ti, sol) for ti in t]
    x = np.array([s.position for s in samples])
    v = np.array([s.velocity for s in samples])
    a = np.array([s.acceleration for s in samples])
    assert np.all(np.diff(x) >= -1e-9 * limits.distance)
    assert x.min() >= 0
    assert x.max() <= limits.distance
    assert v.min() >= 0
    assert v.max() <= sol.peak_velocity * (1 + 1e-9)
    assert np.abs(a).max() <= sol.peak_acceleration


def test_after_total_time_is_arrived():
    sol = solve(LIMITS[0])
    s = evaluate(sol.total_time + 0.1, sol)
    assert s.phase is Phase.ARRIVED
    assert s.position == sol.distance
    assert (s.velocity, s.acceleration, s.jerk) == (0, 0, 0)


def test_phase_laws():
    # Velocity limited move with every phase present
    sol = solve(KinematicLimits(distance=2500000, max_velocity=300000, max_acceleration=2000000, max_jerk=4e7))
    t1, t2, t3, t4, t5, t6, t7 = phase_boundaries(sol)
    assert t7 == pytest.approx(sol.total_time)
    j, a = sol.jerk, sol.peak_acceleration

    def mid(lo, hi):
        return evaluate((lo + hi) / 2, sol)

    expected = [
        (0, t1, Phase.ACCEL_JERK_UP, j, a / 2),
        (t1, t2, Phase.CONST_ACCEL, 0, a),
        (t2, t3, Phase.ACCEL_JERK_DOWN, -j, a / 2),
        (t3, t4, Phase.CONST_VELOCITY, 0, 0),
        (t4, t5, Phase.DECEL_JERK_UP, -j, -a / 2),
        (t5, t6, Phase.CONST_DECEL, 0, -a),
        (t6, t7, Phase.DECEL_JERK_DOWN, j, -a / 2),
    ]
    for lo, hi, phase, jerk, accel in expected:
        s = mid(lo, hi)
        assert s.phase is phase
        assert s.jerk == jerk
        assert s.acceleration == pytest.approx(accel, abs=1e-6 * a)

    cruise = mid(t3, t4)
    assert cruise.velocity == pytest.approx(300000)


def test_symmetric_profile():
    sol = solve(LIMITS[4])
    for frac in (0.004, 0.01, 0.05, 0.3):
        t = frac * sol.total_time
        early = evaluate(t, sol)
        late = evaluate(sol.total_time - t, sol)
        assert early.velocity == pytest.approx(late.velocity, rel=1e-9)
        assert early.position == pytest.approx(sol.distance - late.position, rel=1e-9)


def test_trapezoid_skips_jerk_phases():
    sol = solve(KinematicLimits(distance=100000, max_velocity=500000, max_acceleration=10000000, max_jerk=0))
    assert sol.is_trapezoidal
    phases = {evaluate(t, sol).phase for t in np.linspace(1e-6, sol.total_time - 1e-6, 500)}
    assert phases == {Phase.CONST_ACCEL, Phase.CONST_VELOCITY, Phase.CONST_DECEL}


def test_terminal_state_exact_for_extreme_time_scales():
    # Nanosecond acceleration ramp followed by a multi-hour cruise
    sol = solve(KinematicLimits(distance=386484.8, max_velocity=44.73, max_acceleration=1.004e10, max_jerk=4.16e6))
    s = evaluate(sol.total_time, sol)
    assert s.position == sol.distance
    assert s.velocity == 0
    assert s.acceleration == 0
    assert s.phase is Phase.DECEL_JERK_DOWN
    assert evaluate(sol.total_time * (1 + 1e-12), sol).phase is Phase.ARRIVED
