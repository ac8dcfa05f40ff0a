from __future__ import annotations

import traceback
from typing import Any, Callable, Dict, Optional

from loguru import logger

from futon_toolbox.core.schema_utils import field_labels, field_units, validate_inputs
from futon_toolbox.core.tool_base import ToolMeta

from .calc_trace import Assumption, CalcTrace, compute_input_hash
from .calculator import TOOL_ID, compute_frame
from .constants import DEFAULT_UNITS_SYSTEM, REAR_SUPPORT_WEDGE_IN
from .models import FutonInputs


def _assumptions(inputs: FutonInputs) -> list[Assumption]:
    return [
        Assumption(
            id="A1",
            text=(
                f"Seat recline ({inputs.ideal_seat_angle_deg:g} deg target) is approximated by a slope of "
                f"{inputs.seat_slope:g}, giving a slightly flatter seat."
            ),
        ),
        Assumption(
            id="A2",
            text=(
                "Half of the supporting leg is sunk into both the main beam and the rear beam, so the leg "
                "center line is the operative measurement; offsets run from the frame intersection to the "
                "far ends of the notches, parallel to the beams."
            ),
        ),
        Assumption(
            id="A3",
            text=(
                "The leg is turned 90 deg about its long axis and seated in plain notches one board thick in "
                "both beams, with no internal structure."
            ),
        ),
        Assumption(
            id="A4",
            text="Shear behind the notch assumes equal force in each direction and no friction.",
        ),
        Assumption(
            id="A5",
            text=(
                f"The rear support takes the main beam in a {inputs.beam_thickness_in:g}x"
                f"{inputs.rear_support_notch_in:g} in notch with a {inputs.beam_thickness_in:g}x"
                f"{REAR_SUPPORT_WEDGE_IN:g} in wedge over the end grain; its bottom is straight."
            ),
        ),
        Assumption(
            id="A6",
            text=(
                f"Post-notch length is set to {inputs.post_notch_length_in:g} in by judgment (well above the "
                f"computed minimum); the rear support base height is rounded up to "
                f"{inputs.rounded_rear_support_height_in:g} in."
            ),
        ),
    ]


class FutonFrameTool:
    """Futon frame structural calculator.

    run() validates inputs, evaluates the formula chain with a full CalcTrace and
    returns a results payload. Output lines go to `emit` stage by stage.
    """

    meta = ToolMeta(
        id=TOOL_ID,
        name="Futon Frame",
        category="Furniture",
        version="1.0.0",
        description="Derived dimensions and crush/shear checks for a reclining futon frame in spruce.",
    )

    InputModel = FutonInputs

    def default_inputs(self) -> dict:
        return self.InputModel().model_dump()

    def run(self, inputs: Dict[str, Any], emit: Optional[Callable[[str], None]] = None) -> Dict[str, Any]:
        model, error = validate_inputs(self.InputModel, inputs)
        if model is None:
            logger.error(f"Invalid inputs for {self.meta.id}: {error}")
            return {"ok": False, "error": error}

        inputs_norm = model.model_dump()
        defaults = self.default_inputs()
        input_hash = compute_input_hash(inputs_norm)
        log = logger.bind(tool_id=self.meta.id, input_hash=input_hash)

        lines: list[str] = []

        def _emit(line: str) -> None:
            lines.append(line)
            if emit is not None:
                emit(line)

        try:
            log.info("Starting futon frame calculation")
            log.debug(f"Inputs (validated): {inputs_norm}")

            trace = CalcTrace.new(
                tool_id=self.meta.id,
                tool_version=self.meta.version,
                units_system=DEFAULT_UNITS_SYSTEM,
                code_basis="Closed-form geometry; spruce strengths (cross-grain crush, parallel shear)",
                inputs=inputs_norm,
                input_hash=input_hash,
                input_sources={k: ("default" if v == defaults.get(k) else "user") for k, v in inputs_norm.items()},
                input_labels=field_labels(self.InputModel),
                input_units=field_units(self.InputModel),
            )
            trace.assumptions.extend(_assumptions(model))

            geometry = compute_frame(model, trace=trace, emit=_emit)

            results = geometry.as_dict()
            post_notch = trace.step("V3").checks[0]
            trace.summary = {
                "main_beam_minimum_length_in": geometry.main_beam_minimum_length,
                "rear_support_total_height_in": geometry.rear_support_total_height,
                "post_notch_ratio": post_notch.ratio,
                "post_notch_check": post_notch.pass_fail,
            }

            log.info(f"Calculation complete ({len(trace.steps)} steps)")
            return {
                "ok": True,
                "input_hash": input_hash,
                "results": results,
                "lines": list(lines),
                "trace": trace.to_dict(),
            }

        except Exception as e:
            log.exception("Futon frame calculation failed")
            return {
                "ok": False,
                "input_hash": input_hash,
                "lines": list(lines),
                "error": str(e),
                "traceback": traceback.format_exc(),
            }


TOOL = FutonFrameTool()
