from __future__ import annotations

import math

# All angles in degrees; math works in radians, so convert at every call.

def sin_deg(angle_deg: float) -> float:
    return math.sin(math.radians(angle_deg))

def cos_deg(angle_deg: float) -> float:
    return math.cos(math.radians(angle_deg))

def atan_deg(slope: float) -> float:
    return math.degrees(math.atan(slope))

def law_of_sines_multiplier(side: float, opposite_angle_deg: float) -> float:
    """a / sin(A): multiply by sin(B) to get the side opposite angle B."""
    return side / sin_deg(opposite_angle_deg)

def half_thickness_offset(thickness: float, crossing_angle_deg: float) -> float:
    """Distance along one beam from its edge to the center line of a beam crossing at the given angle."""
    return thickness / 2.0 / sin_deg(crossing_angle_deg)
