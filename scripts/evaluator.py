"""
Piecewise kinematic state of a solved S-curve move.

The move is split into seven segments of constant jerk. Each segment starts
from the exact end state of the one before it, so position and velocity are
continuous across every boundary.
"""
from bisect import bisect_right
from enum import Enum
from typing import NamedTuple, Tuple

from trajectory import ProfileSolution


class Phase(Enum):
    ACCEL_JERK_UP = "Accel Jerk Up"
    CONST_ACCEL = "Constant Accel"
    ACCEL_JERK_DOWN = "Accel Jerk Down"
    CONST_VELOCITY = "Constant Velocity"
    DECEL_JERK_UP = "Decel Jerk Up"
    CONST_DECEL = "Constant Decel"
    DECEL_JERK_DOWN = "Decel Jerk Down"
    ARRIVED = "Arrived"


MOTION_PHASES = tuple(p for p in Phase if p is not Phase.ARRIVED)


class Sample(NamedTuple):
    time: float
    position: float
    velocity: float
    acceleration: float
    jerk: float
    phase: Phase


class Segment(NamedTuple):
    phase: Phase
    start: float
    duration: float
    jerk: float
    accel0: float
    velocity0: float
    position0: float

    @property
    def end(self) -> float:
        return self.start + self.duration

    def state(self, dt: float):
        """(position, velocity, acceleration) after dt seconds in this segment."""
        j, a0, v0, p0 = self.jerk, self.accel0, self.velocity0, self.position0
        acc = a0 + j * dt
        vel = v0 + a0 * dt + 0.5 * j * dt ** 2
        pos = p0 + v0 * dt + 0.5 * a0 * dt ** 2 + j * dt ** 3 / 6
        return pos, vel, acc


def build_segments(solution: ProfileSolution) -> Tuple[Segment, ...]:
    """Precompute the seven constant-jerk segments of a solution."""
    j = solution.jerk
    a = solution.peak_acceleration
    # (jerk, entry acceleration) per phase
    laws = (
        (j, 0.0),
        (0.0, a),
        (-j, a),
        (0.0, 0.0),
        (-j, 0.0),
        (0.0, -a),
        (j, -a),
    )
    segments = []
    start = pos = vel = 0.0
    for phase, duration, (jerk, accel0) in zip(MOTION_PHASES, solution.phase_durations, laws):
        seg = Segment(phase, start, duration, jerk, accel0, vel, pos)
        segments.append(seg)
        pos, vel, _ = seg.state(duration)
        start = seg.end
    return tuple(segments)


def phase_boundaries(solution: ProfileSolution) -> Tuple[float, ...]:
    """Cumulative end times t1..t7 of the seven phases."""
    return tuple(seg.end for seg in build_segments(solution))


def evaluate_segments(t: float, segments, solution: ProfileSolution) -> Sample:
    """Evaluate at time t using segments already built for the solution."""
    a = solution.peak_acceleration
    if t <= 0:
        first = segments[0]
        jerk = first.jerk if first.duration > 0 else 0.0
        return Sample(t, 0.0, 0.0, 0.0, jerk, first.phase)
    if t > solution.total_time:
        return Sample(t, solution.distance, 0.0, 0.0, 0.0, Phase.ARRIVED)
    if t == solution.total_time:
        # End of the closed last phase: exact end state, no integration residue
        last = segments[-1]
        jerk = last.jerk if last.duration > 0 else 0.0
        return Sample(t, solution.distance, 0.0, 0.0, jerk, last.phase)

    # Last segment starting at or before t; zero-length segments share their
    # start with the next one and are skipped. The final segment is closed.
    starts = [seg.start for seg in segments]
    seg = segments[bisect_right(starts, t) - 1]

    pos, vel, acc = seg.state(t - seg.start)
    acc = min(max(acc, -a), a)
    vel = max(vel, 0.0)
    pos = min(max(pos, 0.0), solution.distance)
    return Sample(t, pos, vel, acc, seg.jerk, seg.phase)


def evaluate(t: float, solution: ProfileSolution) -> Sample:
    """Kinematic state of the move at elapsed time t (seconds)."""
    return evaluate_segments(t, build_segments(solution), solution)
