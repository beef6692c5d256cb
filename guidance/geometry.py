"""Geometry utilities for bearings and turn angles."""


def angle_difference(angle1: float, angle2: float) -> float:
    """Calculate smallest difference between two angles in degrees (-180 to 180)."""
    diff = (angle2 - angle1 + 180) % 360 - 180
    return diff


def angular_deviation(angle1: float, angle2: float) -> float:
    """Unsigned smallest difference between two angles in degrees (0 to 180)."""
    return abs(angle_difference(angle1, angle2))


def reverse_bearing(bearing_deg: float) -> float:
    """Bearing pointing the opposite way (0-360)."""
    return (bearing_deg + 180) % 360


def turn_angle(bearing_in: float, bearing_out: float) -> float:
    """
    Angle turned when arriving on bearing_in and leaving on bearing_out.

    Measured between the road we came from and the road we leave on:
    0 is a u-turn, 180 is straight on, below 180 turns right and above
    180 turns left. Returns 0-360.
    """
    return (180 + bearing_in - bearing_out) % 360


def bearings_are_reversed(bearing_in: float, bearing_out: float, tolerance: float) -> bool:
    """True if bearing_out heads back the way bearing_in came from."""
    return angular_deviation(reverse_bearing(bearing_in), bearing_out) <= tolerance
