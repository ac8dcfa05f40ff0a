from __future__ import annotations

DEFAULT_UNITS_SYSTEM = "US"

# Seat geometry: 12 deg recline, approximated by a 1:5 slope so the tangent is exact.
IDEAL_SEAT_ANGLE_DEG = 12.0
SEAT_SLOPE = 0.2

BACK_ANGLE_DEG = 115.0
# 10" net leg + 5" tenon; the rear beam anchors against the tenon.
BACK_LEG_LENGTH_IN = 15.0

# Spruce, cross-grain crush and parallel-to-grain shear
FAILURE_PSI = 430.0
PARALLEL_SHEAR_FAILURE_PSI = 970.0
CROSS_SECTION_SI = 2.0
COMPRESSION_RATIO = 3.0

BOARD_THICKNESS_IN = 1.375  # conservative; actual is ~1.5
BEAM_THICKNESS_IN = 5.0

# Hand-picked, not derived. Computed minimum is ~0.82"; 3" covers wood imperfections.
POST_NOTCH_LENGTH_IN = 3.0
# Computed 3.21", rounded up to 3 + 7/32 because the diagonal along the 4" notch
# segment runs slightly longer than 4".
ROUNDED_REAR_SUPPORT_HEIGHT_IN = 3.22

# Hinge to front edge: 2.5" frame + 4-5" compressed mattress gives ~20" seat depth.
HINGE_TO_EDGE_IN = 26.0
# Front edge height (16" + compressed 6" mattress is ~20-21").
FRONT_EDGE_HEIGHT_IN = 16.0

# Rear support takes the main beam in a 5x4" notch with a 5x1" wedge over the end grain.
REAR_SUPPORT_NOTCH_IN = 4.0
REAR_SUPPORT_WEDGE_IN = 1.0
