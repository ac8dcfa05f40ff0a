from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Callable, Dict, List, Optional

from .calc_trace import CalcTrace, compute_step
from .geometry import atan_deg, cos_deg, half_thickness_offset, law_of_sines_multiplier, sin_deg
from .models import FutonInputs
from .report import StageEmitter

TOOL_ID = "futon_frame"


@dataclass(frozen=True)
class FrameGeometry:
    # seat / back
    seat_angle: float
    seat_angle_error: float
    back_angle_delta: float
    effective_rear_angle: float

    # supporting leg
    sin_multiplier: float
    other_angles: float
    other_offsets: float

    # strength
    failure_load_top: float
    failure_load_even: float
    maximum_lbf: float
    si_at_shear_failure: float
    minimum_post_notch_length: float
    notch_contact_area: float

    # main beam
    beam_intersection: float
    main_beam_minimum_length: float
    notch_hole_distance: float
    main_beam_drop: float

    # rear support
    rear_support_height: float
    rear_support_wedge_height: float
    rear_support_total_height: float

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


def _inp(symbol: str, description: str, value: float, units: str, field: str) -> Dict[str, object]:
    return {"symbol": symbol, "description": description, "value": value, "units": units, "source": f"input:{field}"}


def _stp(symbol: str, description: str, value: float, units: str, step_id: str) -> Dict[str, object]:
    return {"symbol": symbol, "description": description, "value": value, "units": units, "source": f"step:{step_id}"}


def _post_notch_checks(minimum_in: float, provided_in: float) -> List[Dict[str, object]]:
    # No wood left beyond the notch: nothing resists the grain shear.
    ratio = minimum_in / provided_in if provided_in > 0.0 else math.inf
    return [
        {
            "label": "Post-notch length (shear behind notch)",
            "demand": minimum_in,
            "capacity": provided_in,
            "ratio": ratio,
            "pass_fail": "PASS" if ratio <= 1.0 else "FAIL",
        }
    ]


def compute_frame(
    inputs: FutonInputs,
    trace: Optional[CalcTrace] = None,
    emit: Optional[Callable[[str], None]] = None,
) -> FrameGeometry:
    """
    Evaluate the futon frame formula chain in dependency order.

    Each stage's console lines are passed to `emit` as soon as the stage is done,
    so a failing stage still leaves the earlier lines printed. Values flow forward
    unrounded; rounding only happens in the printed text.
    """
    if trace is None:
        trace = CalcTrace.new(tool_id=TOOL_ID, tool_version="-", inputs=inputs.model_dump())
    out = StageEmitter(emit)
    i = inputs

    # 1) Seat angle. The 12 deg target is approximated with a 1:5 slope.
    seat_angle = compute_step(
        trace,
        id="S1",
        section="Seat",
        title="Seat angle from slope",
        output_symbol="theta_s",
        output_description="Seat recline from horizontal",
        equation="theta_s = atan(m)",
        variables=[_inp("m", "Seat slope", i.seat_slope, "-", "seat_slope")],
        compute_fn=lambda: atan_deg(i.seat_slope),
        units="deg",
        references=[{"type": "note", "ref": "tan(theta_s) = 1/5 keeps later geometry simple"}],
    )
    seat_angle_error = compute_step(
        trace,
        id="S2",
        section="Seat",
        title="Seat angle error",
        output_symbol="e_s",
        output_description="Ideal minus approximated seat angle",
        equation="e_s = theta_ideal - theta_s",
        variables=[
            _inp("theta_ideal", "Ideal seat angle", i.ideal_seat_angle_deg, "deg", "ideal_seat_angle_deg"),
            _stp("theta_s", "Seat angle", seat_angle, "deg", "S1"),
        ],
        compute_fn=lambda: i.ideal_seat_angle_deg - seat_angle,
        units="deg",
        display_decimals=6,
    )
    out("seat", seat_angle_error=seat_angle_error)

    # 2) Back angle relative to the seat
    back_angle_delta = compute_step(
        trace,
        id="B1",
        section="Back",
        title="Back angle delta",
        output_symbol="delta_b",
        output_description="Back angle measured from the seat plane",
        equation="delta_b = theta_b - theta_s",
        variables=[
            _inp("theta_b", "Back angle", i.back_angle_deg, "deg", "back_angle_deg"),
            _stp("theta_s", "Seat angle", seat_angle, "deg", "S1"),
        ],
        compute_fn=lambda: i.back_angle_deg - seat_angle,
        units="deg",
        display_decimals=6,
    )
    out("back", back_angle_delta=back_angle_delta)

    # 3) Angle between the back and the rear side of the main beam
    effective_rear_angle = compute_step(
        trace,
        id="B2",
        section="Back",
        title="Effective rear angle",
        output_symbol="theta_r",
        output_description="Angle between back and rear side of main beam",
        equation="theta_r = 180 - delta_b",
        variables=[_stp("delta_b", "Back angle delta", back_angle_delta, "deg", "B1")],
        compute_fn=lambda: 180.0 - back_angle_delta,
        units="deg",
    )
    out("rear_angle", effective_rear_angle=effective_rear_angle)

    # 4) Law of sines on the back / leg / main beam triangle
    sin_multiplier = compute_step(
        trace,
        id="L1",
        section="Supporting leg",
        title="Law of sines multiplier",
        output_symbol="k",
        output_description="Leg length over sine of its opposite angle",
        equation="k = L_leg / sin(theta_r)",
        variables=[
            _inp("L_leg", "Supporting leg length", i.back_leg_length_in, "in", "back_leg_length_in"),
            _stp("theta_r", "Effective rear angle", effective_rear_angle, "deg", "B2"),
        ],
        compute_fn=lambda: law_of_sines_multiplier(i.back_leg_length_in, effective_rear_angle),
        units="in",
    )
    out("law_of_sines", sin_multiplier=sin_multiplier)

    # 5) Even split of the remaining angles minimizes total cross-grain force
    other_angles = compute_step(
        trace,
        id="L2",
        section="Supporting leg",
        title="Remaining triangle angles",
        output_symbol="alpha",
        output_description="Each of the two remaining angles (even split)",
        equation="alpha = delta_b / 2",
        variables=[_stp("delta_b", "Back angle delta", back_angle_delta, "deg", "B1")],
        compute_fn=lambda: back_angle_delta / 2.0,
        units="deg",
        display_decimals=6,
    )
    other_offsets = compute_step(
        trace,
        id="L3",
        section="Supporting leg",
        title="Leg offsets along back and main beam",
        output_symbol="d",
        output_description="Intersection to far end of each notch",
        equation="d = k * sin(alpha)",
        variables=[
            _stp("k", "Law of sines multiplier", sin_multiplier, "in", "L1"),
            _stp("alpha", "Remaining angle", other_angles, "deg", "L2"),
        ],
        compute_fn=lambda: sin_multiplier * sin_deg(other_angles),
        units="in",
        display_decimals=6,
    )
    out("leg_offsets", other_angles=other_angles, other_offsets=other_offsets)

    # 6) Cross-grain crush at the leg
    failure_load_top = compute_step(
        trace,
        id="F1",
        section="Strength",
        title="Failure load, load at top",
        output_symbol="P_top",
        output_description="Crush failure load with load at the top of the leg",
        equation="P_top = f_c * A / r",
        variables=[
            _inp("f_c", "Cross-grain crush strength", i.failure_psi, "psi", "failure_psi"),
            _inp("A", "Bearing cross section", i.cross_section_si, "in^2", "cross_section_si"),
            _inp("r", "Compression ratio", i.compression_ratio, "-", "compression_ratio"),
        ],
        compute_fn=lambda: i.failure_psi * i.cross_section_si / i.compression_ratio,
        units="lbf",
    )
    failure_load_even = compute_step(
        trace,
        id="F2",
        section="Strength",
        title="Failure load, spread evenly",
        output_symbol="P_even",
        output_description="Crush failure load with load spread evenly",
        equation="P_even = 2 * P_top",
        variables=[_stp("P_top", "Failure load at top", failure_load_top, "lbf", "F1")],
        compute_fn=lambda: failure_load_top * 2.0,
        units="lbf",
    )
    out("failure_load", failure_load_top=failure_load_top, failure_load_even=failure_load_even)

    # Trace only: contact patch of the leg turned 90 deg into board-thick notches
    notch_contact_area = compute_step(
        trace,
        id="F3",
        section="Strength",
        title="Notch contact area",
        output_symbol="A_c",
        output_description="Leg contact area in the main beam notch",
        equation="A_c = t_b * t_b",
        variables=[_inp("t_b", "Board thickness", i.board_thickness_in, "in", "board_thickness_in")],
        compute_fn=lambda: i.board_thickness_in * i.board_thickness_in,
        units="in^2",
        references=[{"type": "note", "ref": "Basis for the bearing cross section estimate"}],
    )

    # 7) Shear behind the notch; equal force each way, no friction
    maximum_lbf = compute_step(
        trace,
        id="V1",
        section="Strength",
        title="Maximum leg force",
        output_symbol="P_max",
        output_description="Largest force the bearing area carries before crushing",
        equation="P_max = f_c * A",
        variables=[
            _inp("f_c", "Cross-grain crush strength", i.failure_psi, "psi", "failure_psi"),
            _inp("A", "Bearing cross section", i.cross_section_si, "in^2", "cross_section_si"),
        ],
        compute_fn=lambda: i.failure_psi * i.cross_section_si,
        units="lbf",
    )
    si_at_shear_failure = compute_step(
        trace,
        id="V2",
        section="Strength",
        title="Shear ratio at failure",
        output_symbol="a_v",
        output_description="Shear strength over maximum leg force",
        equation="a_v = f_v / P_max",
        variables=[
            _inp("f_v", "Parallel shear strength", i.parallel_shear_failure_psi, "psi", "parallel_shear_failure_psi"),
            _stp("P_max", "Maximum leg force", maximum_lbf, "lbf", "V1"),
        ],
        compute_fn=lambda: i.parallel_shear_failure_psi / maximum_lbf,
        units="in^2",
    )
    minimum_post_notch_length = compute_step(
        trace,
        id="V3",
        section="Strength",
        title="Minimum post-notch length",
        output_symbol="l_min",
        output_description="Wood needed beyond the notch to resist grain shear",
        equation="l_min = a_v / t_b",
        variables=[
            _stp("a_v", "Shear ratio at failure", si_at_shear_failure, "in^2", "V2"),
            _inp("t_b", "Board thickness", i.board_thickness_in, "in", "board_thickness_in"),
        ],
        compute_fn=lambda: si_at_shear_failure / i.board_thickness_in,
        units="in",
        checks_builder=lambda v: _post_notch_checks(v, i.post_notch_length_in),
    )
    out(
        "shear",
        maximum_lbf=maximum_lbf,
        si_at_shear_failure=si_at_shear_failure,
        minimum_post_notch_length=minimum_post_notch_length,
    )

    # 8) Half the leg is sunk into the main beam, so measure to its center line
    beam_intersection = compute_step(
        trace,
        id="M1",
        section="Main beam",
        title="Beam intersection offset",
        output_symbol="x_i",
        output_description="Offset along the main beam to the leg center line",
        equation="x_i = (t / 2) / sin(theta_r)",
        variables=[
            _inp("t", "Beam thickness", i.beam_thickness_in, "in", "beam_thickness_in"),
            _stp("theta_r", "Effective rear angle", effective_rear_angle, "deg", "B2"),
        ],
        compute_fn=lambda: half_thickness_offset(i.beam_thickness_in, effective_rear_angle),
        units="in",
    )
    out("beam_intersection", beam_intersection=beam_intersection)

    # 9) Hinge offset + intersection + leg offset + post-notch margin
    main_beam_minimum_length = compute_step(
        trace,
        id="M2",
        section="Main beam",
        title="Main beam minimum length",
        output_symbol="L_min",
        output_description="Shortest main beam that seats the leg notch",
        equation="L_min = L_h + x_i + d + l_pn",
        variables=[
            _inp("L_h", "Hinge to front edge", i.hinge_to_edge_in, "in", "hinge_to_edge_in"),
            _stp("x_i", "Beam intersection offset", beam_intersection, "in", "M1"),
            _stp("d", "Leg offset", other_offsets, "in", "L3"),
            _inp("l_pn", "Post-notch length", i.post_notch_length_in, "in", "post_notch_length_in"),
        ],
        compute_fn=lambda: i.hinge_to_edge_in + beam_intersection + other_offsets + i.post_notch_length_in,
        units="in",
    )
    notch_hole_distance = compute_step(
        trace,
        id="M3",
        section="Main beam",
        title="Notch/hole distance",
        output_symbol="x_n",
        output_description="Hinge hole to far end of the leg notch",
        equation="x_n = x_i + d",
        variables=[
            _stp("x_i", "Beam intersection offset", beam_intersection, "in", "M1"),
            _stp("d", "Leg offset", other_offsets, "in", "L3"),
        ],
        compute_fn=lambda: beam_intersection + other_offsets,
        units="in",
    )
    out(
        "main_beam",
        main_beam_minimum_length=main_beam_minimum_length,
        notch_hole_distance=notch_hole_distance,
    )

    # 10) Main beam falls from the 16" front edge (11" on its underside)
    main_beam_drop = compute_step(
        trace,
        id="R1",
        section="Rear support",
        title="Main beam height drop",
        output_symbol="h_d",
        output_description="Height lost along the main beam up to the rear support notch",
        equation="h_d = (L_min - n) * sin(theta_s)",
        variables=[
            _stp("L_min", "Main beam minimum length", main_beam_minimum_length, "in", "M2"),
            _inp("n", "Rear support notch length", i.rear_support_notch_in, "in", "rear_support_notch_in"),
            _stp("theta_s", "Seat angle", seat_angle, "deg", "S1"),
        ],
        compute_fn=lambda: (main_beam_minimum_length - i.rear_support_notch_in) * sin_deg(seat_angle),
        units="in",
    )
    rear_support_height = compute_step(
        trace,
        id="R2",
        section="Rear support",
        title="Rear support height",
        output_symbol="h_r",
        output_description="Rear support height under the main beam",
        equation="h_r = H_f - t - h_d",
        variables=[
            _inp("H_f", "Front edge height", i.front_edge_height_in, "in", "front_edge_height_in"),
            _inp("t", "Beam thickness", i.beam_thickness_in, "in", "beam_thickness_in"),
            _stp("h_d", "Main beam height drop", main_beam_drop, "in", "R1"),
        ],
        compute_fn=lambda: i.front_edge_height_in - i.beam_thickness_in - main_beam_drop,
        units="in",
    )
    out("main_beam_drop", main_beam_drop=main_beam_drop, rear_support_height=rear_support_height)

    # 11) Rear support dimensions: hand-rounded base height + wedge over the end grain
    rear_support_wedge_height = compute_step(
        trace,
        id="R3",
        section="Rear support",
        title="Rear support wedge height",
        output_symbol="h_w",
        output_description="Wedge height covering the main beam end grain",
        equation="h_w = t * cos(theta_s)",
        variables=[
            _inp("t", "Beam thickness", i.beam_thickness_in, "in", "beam_thickness_in"),
            _stp("theta_s", "Seat angle", seat_angle, "deg", "S1"),
        ],
        compute_fn=lambda: i.beam_thickness_in * cos_deg(seat_angle),
        units="in",
    )
    rear_support_total_height = compute_step(
        trace,
        id="R4",
        section="Rear support",
        title="Rear support total height",
        output_symbol="h_t",
        output_description="Overall rear support height",
        equation="h_t = h_0 + h_w",
        variables=[
            _inp(
                "h_0",
                "Rear support height (rounded)",
                i.rounded_rear_support_height_in,
                "in",
                "rounded_rear_support_height_in",
            ),
            _stp("h_w", "Rear support wedge height", rear_support_wedge_height, "in", "R3"),
        ],
        compute_fn=lambda: i.rounded_rear_support_height_in + rear_support_wedge_height,
        units="in",
    )
    out(
        "rear_support",
        rear_support_wedge_height=rear_support_wedge_height,
        rear_support_total_height=rear_support_total_height,
    )

    return FrameGeometry(
        seat_angle=seat_angle,
        seat_angle_error=seat_angle_error,
        back_angle_delta=back_angle_delta,
        effective_rear_angle=effective_rear_angle,
        sin_multiplier=sin_multiplier,
        other_angles=other_angles,
        other_offsets=other_offsets,
        failure_load_top=failure_load_top,
        failure_load_even=failure_load_even,
        maximum_lbf=maximum_lbf,
        si_at_shear_failure=si_at_shear_failure,
        minimum_post_notch_length=minimum_post_notch_length,
        notch_contact_area=notch_contact_area,
        beam_intersection=beam_intersection,
        main_beam_minimum_length=main_beam_minimum_length,
        notch_hole_distance=notch_hole_distance,
        main_beam_drop=main_beam_drop,
        rear_support_height=rear_support_height,
        rear_support_wedge_height=rear_support_wedge_height,
        rear_support_total_height=rear_support_total_height,
    )
