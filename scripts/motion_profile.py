"""Move request and kinematic limit definitions for the S-curve calculator."""
from dataclasses import dataclass, replace

# Internal unit scale: everything inside the solver is in micrometers
UM_PER_MM = 1000.0
UM_PER_M = 1000000.0


@dataclass(frozen=True)
class KinematicLimits:
    distance: float  # um
    max_velocity: float  # um/s
    max_acceleration: float  # um/s^2
    max_jerk: float = 0.0  # um/s^3, <= 0 means unconstrained (trapezoidal)


@dataclass(frozen=True)
class PhysicsInputs:
    motor_mass: float  # g
    payload_mass: float = 0.0  # g
    max_force: float = 10.0  # N


@dataclass
class MoveRequest:
    """A move as entered by a user, in mm and m based units."""
    distance_mm: float
    max_speed_mm_s: float
    max_accel_m_s2: float
    max_jerk_m_s3: float = 0.0

    def to_limits(self) -> KinematicLimits:
        return KinematicLimits(
            distance=self.distance_mm * UM_PER_MM,
            max_velocity=self.max_speed_mm_s * UM_PER_MM,
            max_acceleration=self.max_accel_m_s2 * UM_PER_M,
            max_jerk=self.max_jerk_m_s3 * UM_PER_M,
        )

    def with_changes(self, **changes) -> "MoveRequest":
        return replace(self, **changes)

    @classmethod
    def from_config(cls, block: dict) -> "MoveRequest":
        return cls(
            distance_mm=float(block["distance_mm"]),
            max_speed_mm_s=float(block["max_speed_mm_s"]),
            max_accel_m_s2=float(block["max_accel_m_s2"]),
            max_jerk_m_s3=float(block.get("max_jerk_m_s3", 0.0)),
        )


# Example moves used in notebooks or quick tests
default_move = MoveRequest(
    distance_mm=100,
    max_speed_mm_s=1000,
    max_accel_m_s2=10,
    max_jerk_m_s3=100,
)

short_stroke_move = MoveRequest(
    distance_mm=0.1,
    max_speed_mm_s=1000,
    max_accel_m_s2=10,
    max_jerk_m_s3=100,
)

default_physics = PhysicsInputs(motor_mass=500, payload_mass=0, max_force=10)
