from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

# Console output, grouped by calculation stage, in print order.
# Each entry: (printf-style template, quantity names filling it).
STAGE_LINES: Dict[str, Sequence[Tuple[str, Tuple[str, ...]]]] = {
    "seat": [
        ("seat angle error is %f degrees", ("seat_angle_error",)),
    ],
    "back": [
        ("back angle delta = %f", ("back_angle_delta",)),
    ],
    "rear_angle": [],
    "law_of_sines": [],
    "leg_offsets": [
        ("other angles = %f", ("other_angles",)),
        ("other offsets = %f", ("other_offsets",)),
    ],
    "failure_load": [
        ("failure load = %.4flb at top, %.4flb spread evenly", ("failure_load_top", "failure_load_even")),
    ],
    "shear": [
        ("maximum force = %.4flbf, in² at shear failure = %.4f", ("maximum_lbf", "si_at_shear_failure")),
        ("minimum post-notch length: %.4fin", ("minimum_post_notch_length",)),
    ],
    "beam_intersection": [
        ("beam intersection = %.4fin", ("beam_intersection",)),
    ],
    "main_beam": [
        ("main beam minimum length = %.4fin", ("main_beam_minimum_length",)),
        ("main beam notch/hole distance = %.4fin", ("notch_hole_distance",)),
    ],
    "main_beam_drop": [
        ("main beam height drop = %.4fin", ("main_beam_drop",)),
        ("rear support height = %.4fin", ("rear_support_height",)),
    ],
    "rear_support": [
        ("rear support wedge height = %.4fin, total = %.4fin", ("rear_support_wedge_height", "rear_support_total_height")),
    ],
}

STAGE_ORDER: Tuple[str, ...] = tuple(STAGE_LINES.keys())


def format_stage(stage: str, values: Mapping[str, float]) -> List[str]:
    """Render the console lines for one stage. Missing quantities raise KeyError."""
    return [template % tuple(values[name] for name in names) for template, names in STAGE_LINES[stage]]


def render_console_lines(values: Mapping[str, Any]) -> List[str]:
    """All console lines for a finished calculation (FrameGeometry.as_dict())."""
    lines: List[str] = []
    for stage in STAGE_ORDER:
        lines.extend(format_stage(stage, values))
    return lines


class StageEmitter:
    """Formats each stage as soon as it is computed and hands the lines to `emit`.

    Lines are also kept, so callers can return them without re-rendering.
    """

    def __init__(self, emit: Optional[Callable[[str], None]] = None) -> None:
        self._emit = emit
        self.lines: List[str] = []

    def __call__(self, stage: str, **values: float) -> None:
        for line in format_stage(stage, values):
            self.lines.append(line)
            if self._emit is not None:
                self._emit(line)
