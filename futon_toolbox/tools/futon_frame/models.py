from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from . import constants as c


def _units(u: str) -> dict:
    return {"units": u}


class FutonInputs(BaseModel):
    """
    Design constants for the futon frame calculation.

    Every field defaults to the shipped design; overriding a value is meant for
    what-if runs from code (tests, notebooks). Values are taken as given, with no
    range screening.

    Conventions:
      - lengths in inches, angles in degrees, strengths in PSI
      - the seat slope is rise/run of the seat surface (tan of the seat angle)
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    # --- Seat / back geometry
    ideal_seat_angle_deg: float = Field(
        c.IDEAL_SEAT_ANGLE_DEG, description="Ideal seat recline from horizontal", json_schema_extra=_units("deg")
    )
    seat_slope: float = Field(
        c.SEAT_SLOPE, description="Seat slope used for the geometry (rise/run)", json_schema_extra=_units("-")
    )
    back_angle_deg: float = Field(
        c.BACK_ANGLE_DEG, description="Back angle from the ground", json_schema_extra=_units("deg")
    )
    back_leg_length_in: float = Field(
        c.BACK_LEG_LENGTH_IN, description="Supporting leg length incl. tenon", json_schema_extra=_units("in")
    )

    # --- Material
    failure_psi: float = Field(
        c.FAILURE_PSI, description="Cross-grain crush strength", json_schema_extra=_units("psi")
    )
    cross_section_si: float = Field(
        c.CROSS_SECTION_SI, description="Leg bearing cross section", json_schema_extra=_units("in^2")
    )
    compression_ratio: float = Field(
        c.COMPRESSION_RATIO, description="Compression ratio at the leg", json_schema_extra=_units("-")
    )
    parallel_shear_failure_psi: float = Field(
        c.PARALLEL_SHEAR_FAILURE_PSI, description="Parallel-to-grain shear strength", json_schema_extra=_units("psi")
    )

    # --- Stock
    board_thickness_in: float = Field(
        c.BOARD_THICKNESS_IN, description="Board thickness", json_schema_extra=_units("in")
    )
    beam_thickness_in: float = Field(
        c.BEAM_THICKNESS_IN, description="Beam depth", json_schema_extra=_units("in")
    )

    # --- Hand-picked values
    post_notch_length_in: float = Field(
        c.POST_NOTCH_LENGTH_IN, description="Wood left beyond the leg notch", json_schema_extra=_units("in")
    )
    rounded_rear_support_height_in: float = Field(
        c.ROUNDED_REAR_SUPPORT_HEIGHT_IN, description="Rear support height below the notch", json_schema_extra=_units("in")
    )

    # --- Fixed frame offsets
    hinge_to_edge_in: float = Field(
        c.HINGE_TO_EDGE_IN, description="Back hinge to seat front edge", json_schema_extra=_units("in")
    )
    front_edge_height_in: float = Field(
        c.FRONT_EDGE_HEIGHT_IN, description="Seat front edge height", json_schema_extra=_units("in")
    )
    rear_support_notch_in: float = Field(
        c.REAR_SUPPORT_NOTCH_IN, description="Main beam seat length in the rear support", json_schema_extra=_units("in")
    )
