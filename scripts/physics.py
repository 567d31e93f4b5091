"""Peak acceleration a drive can reach for a given moving mass and force."""
import math

from motion_profile import MoveRequest, PhysicsInputs, UM_PER_M

# Advisory default: jerk (m/s^3) = 100 x acceleration (m/s^2)
JERK_PER_ACCEL = 100.0


def derive_max_acceleration(motor_mass: float, payload_mass: float, max_force: float) -> float:
    """
    Return max_force / total mass in m/s^2.
    Masses are in grams, force in newtons. A non-positive mass or force means
    acceleration is not the binding constraint and math.inf is returned.
    """
    total_mass_kg = (motor_mass + payload_mass) / 1000.0
    if total_mass_kg <= 0 or max_force <= 0:
        return math.inf
    return max_force / total_mass_kg


def derive_max_acceleration_um(motor_mass: float, payload_mass: float, max_force: float) -> float:
    """Same as derive_max_acceleration, scaled to um/s^2."""
    accel = derive_max_acceleration(motor_mass, payload_mass, max_force)
    if math.isinf(accel):
        return accel
    return accel * UM_PER_M


def _round_tenth(value: float) -> float:
    # Round half up, to the nearest 0.1
    return math.floor(value * 10 + 0.5) / 10


def suggested_jerk(acceleration: float) -> float:
    """Advisory jerk for an auto-derived acceleration (m/s^2 -> m/s^3)."""
    if math.isinf(acceleration):
        return math.inf
    return _round_tenth(_round_tenth(acceleration) * JERK_PER_ACCEL)


def apply_derived_acceleration(request: MoveRequest, physics: PhysicsInputs) -> MoveRequest:
    """
    Return a copy of the request using the acceleration the drive can reach,
    with the advisory jerk. The request is returned unchanged when the derived
    acceleration is unbounded.
    """
    accel = derive_max_acceleration(physics.motor_mass, physics.payload_mass, physics.max_force)
    if math.isinf(accel):
        return request
    return request.with_changes(
        max_accel_m_s2=_round_tenth(accel),
        max_jerk_m_s3=suggested_jerk(accel),
    )
