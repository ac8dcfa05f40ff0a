from __future__ import annotations

import dataclasses
import math

import pytest
from pydantic import ValidationError

from futon_toolbox.core.schema_utils import field_units, validate_inputs

from .calc_trace import CalcStepError, CalcTrace, compute_input_hash, compute_step
from .calculator import FrameGeometry, compute_frame
from .models import FutonInputs
from .report import render_console_lines


def _trace() -> CalcTrace:
    return CalcTrace.new(tool_id="futon_frame", tool_version="test", inputs=FutonInputs().model_dump())


def _run(**overrides) -> FrameGeometry:
    return compute_frame(FutonInputs(**overrides))


def test_seat_angle_from_one_in_five_slope() -> None:
    g = _run()
    assert g.seat_angle == pytest.approx(11.3099, abs=1e-4)
    assert g.seat_angle_error == pytest.approx(0.6901, abs=1e-4)


def test_back_angles() -> None:
    g = _run()
    assert g.back_angle_delta == pytest.approx(103.6901, abs=1e-4)
    assert g.effective_rear_angle == pytest.approx(76.3099, abs=1e-4)


def test_law_of_sines_leg_offsets() -> None:
    g = _run()
    assert g.sin_multiplier == pytest.approx(15.4386, abs=1e-3)
    assert g.other_angles == pytest.approx(51.845034, abs=1e-5)
    assert g.other_offsets == pytest.approx(12.1400, abs=1e-3)
    expected = 15.0 / math.sin(math.radians(g.effective_rear_angle)) * math.sin(math.radians(g.other_angles))
    assert g.other_offsets == pytest.approx(expected, rel=1e-12)


def test_failure_loads_exact() -> None:
    g = _run()
    assert g.failure_load_top == pytest.approx(430.0 * 2.0 / 3.0, rel=1e-15)
    assert g.failure_load_even == pytest.approx(430.0 * 4.0 / 3.0, rel=1e-15)


def test_shear_and_post_notch_minimum() -> None:
    g = _run()
    assert g.maximum_lbf == 860.0
    assert g.si_at_shear_failure == pytest.approx(970.0 / 860.0, rel=1e-15)
    assert g.minimum_post_notch_length == pytest.approx(0.8203, abs=1e-4)


def test_main_beam() -> None:
    g = _run()
    assert g.beam_intersection == pytest.approx(2.5731, abs=1e-4)
    assert g.main_beam_minimum_length == pytest.approx(43.7131, abs=1e-4)
    assert g.main_beam_minimum_length == pytest.approx(26.0 + g.beam_intersection + g.other_offsets + 3.0, rel=1e-15)
    assert g.notch_hole_distance == pytest.approx(g.beam_intersection + g.other_offsets, rel=1e-15)


def test_rear_support() -> None:
    g = _run()
    drop = (g.main_beam_minimum_length - 4.0) * math.sin(math.radians(g.seat_angle))
    assert g.main_beam_drop == pytest.approx(drop, rel=1e-12)
    assert g.rear_support_height == pytest.approx(16.0 - 5.0 - drop, rel=1e-12)
    # the 3.22" literal is the hand-rounded version of this value
    assert g.rear_support_height == pytest.approx(3.21, abs=0.01)
    assert g.rear_support_wedge_height == pytest.approx(4.9029, abs=1e-4)
    assert g.rear_support_total_height == pytest.approx(8.1229, abs=1e-4)


def test_notch_contact_area_near_bearing_estimate() -> None:
    g = _run()
    assert g.notch_contact_area == pytest.approx(1.890625)
    assert g.notch_contact_area < FutonInputs().cross_section_si


@pytest.mark.parametrize("factor", [0.5, 2.0, 3.0])
def test_leg_offsets_scale_linearly_with_leg_length(factor: float) -> None:
    base = _run()
    scaled = _run(back_leg_length_in=15.0 * factor)
    assert scaled.sin_multiplier == pytest.approx(base.sin_multiplier * factor, rel=1e-12)
    assert scaled.other_offsets == pytest.approx(base.other_offsets * factor, rel=1e-12)
    assert scaled.beam_intersection == base.beam_intersection


def test_console_lines_default_design() -> None:
    lines = render_console_lines(_run().as_dict())
    assert lines == [
        "seat angle error is 0.690068 degrees",
        "back angle delta = 103.690068",
        "other angles = 51.845034",
        lines[3],
        "failure load = 286.6667lb at top, 573.3333lb spread evenly",
        "maximum force = 860.0000lbf, in² at shear failure = 1.1279",
        "minimum post-notch length: 0.8203in",
        "beam intersection = 2.5731in",
        "main beam minimum length = 43.7131in",
        "main beam notch/hole distance = 14.7131in",
        "main beam height drop = 7.7884in",
        "rear support height = 3.2116in",
        "rear support wedge height = 4.9029in, total = 8.1229in",
    ]
    assert lines[3].startswith("other offsets = 12.140")


def test_emitted_lines_match_rendered_and_are_idempotent() -> None:
    first: list = []
    second: list = []
    g1 = compute_frame(FutonInputs(), emit=first.append)
    g2 = compute_frame(FutonInputs(), emit=second.append)
    assert first == second
    assert g1 == g2
    assert first == render_console_lines(g1.as_dict())


def test_trace_records_steps_in_order() -> None:
    tr = _trace()
    compute_frame(FutonInputs(), trace=tr)
    assert [s.id for s in tr.steps] == [
        "S1", "S2", "B1", "B2", "L1", "L2", "L3", "F1", "F2", "F3",
        "V1", "V2", "V3", "M1", "M2", "M3", "R1", "R2", "R3", "R4",
    ]
    assert tr.step("L1").substitution == "k = 15 in / sin(76.3099 deg)"
    assert tr.step("R1").substitution == "h_d = (43.7131 in - 4 in) * sin(11.3099 deg)"
    assert tr.step("M2").result_display.value == 43.7131


def test_post_notch_check_passes_with_margin() -> None:
    tr = _trace()
    compute_frame(FutonInputs(), trace=tr)
    chk = tr.step("V3").checks[0]
    assert chk.pass_fail == "PASS"
    assert chk.ratio == pytest.approx(0.8203 / 3.0, abs=1e-4)


def test_post_notch_check_fails_when_margin_too_short() -> None:
    tr = _trace()
    compute_frame(FutonInputs(post_notch_length_in=0.5), trace=tr)
    assert tr.step("V3").checks[0].pass_fail == "FAIL"


def test_zero_post_notch_length_fails_check_without_aborting() -> None:
    tr = _trace()
    g = compute_frame(FutonInputs(post_notch_length_in=0.0), trace=tr)
    chk = tr.step("V3").checks[0]
    assert chk.pass_fail == "FAIL"
    assert math.isinf(chk.ratio)
    assert g.main_beam_minimum_length == pytest.approx(26.0 + g.beam_intersection + g.other_offsets, rel=1e-15)
    assert len(tr.steps) == 20


def test_check_builder_arithmetic_error_names_step() -> None:
    tr = _trace()
    with pytest.raises(CalcStepError) as ei:
        compute_step(
            tr,
            id="X1",
            section="Test",
            title="Broken check",
            output_symbol="x",
            output_description="x",
            equation="x = 1",
            variables=[],
            compute_fn=lambda: 1.0,
            units="-",
            checks_builder=lambda v: [{"label": "c", "demand": v, "capacity": 0.0, "ratio": v / 0.0, "pass_fail": "-"}],
        )
    assert ei.value.step_id == "X1"
    assert isinstance(ei.value.__cause__, ZeroDivisionError)
    assert tr.steps == []


def test_zero_denominator_is_fatal() -> None:
    seen: list = []
    with pytest.raises(CalcStepError) as ei:
        compute_frame(FutonInputs(compression_ratio=0.0), emit=seen.append)
    assert ei.value.step_id == "F1"
    assert isinstance(ei.value.__cause__, ZeroDivisionError)
    # stages before the failure were already printed
    assert len(seen) == 4


def test_values_are_write_once() -> None:
    g = _run()
    with pytest.raises(dataclasses.FrozenInstanceError):
        g.seat_angle = 0.0  # type: ignore[misc]
    inputs = FutonInputs()
    with pytest.raises(ValidationError):
        inputs.back_angle_deg = 100.0  # type: ignore[misc]


def test_input_hash_deterministic() -> None:
    a = {"b": 2.0, "a": 1.0}
    b = {"a": 1.0, "b": 2.0}
    assert compute_input_hash(a) == compute_input_hash(b)


def test_validate_inputs_rejects_unknown_keys() -> None:
    model, err = validate_inputs(FutonInputs, {"seat_height_in": 18.0})
    assert model is None
    assert err and "seat_height_in" in err


def test_field_units_declared() -> None:
    units = field_units(FutonInputs)
    assert units["back_leg_length_in"] == "in"
    assert units["back_angle_deg"] == "deg"
    assert units["failure_psi"] == "psi"
