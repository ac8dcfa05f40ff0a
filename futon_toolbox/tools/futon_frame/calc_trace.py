from __future__ import annotations

import hashlib
import json
import re
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from loguru import logger


class CalcStepError(ArithmeticError):
    """A traced step failed to evaluate (zero denominator, math domain error)."""

    def __init__(self, step_id: str, message: str) -> None:
        super().__init__(f"Step {step_id} failed: {message}")
        self.step_id = step_id


@dataclass(frozen=True)
class TraceMeta:
    tool_id: str
    tool_version: str
    timestamp: str
    units_system: str
    input_hash: str
    code_basis: Optional[str] = None


@dataclass(frozen=True)
class TraceInput:
    id: str
    label: str
    value: Any
    units: str
    source: str  # user/default


@dataclass(frozen=True)
class Assumption:
    id: str
    text: str


@dataclass(frozen=True)
class CalcVar:
    symbol: str
    description: str
    value: Any
    units: str
    source: str  # input:<id> | const:<name> | step:<step_id>


@dataclass(frozen=True)
class CalcResult:
    value: float
    units: str


@dataclass(frozen=True)
class Rounding:
    decimals: int


@dataclass(frozen=True)
class Reference:
    type: str  # "note" | "derived" | "table"
    ref: str


@dataclass(frozen=True)
class CheckResult:
    label: str
    demand: float
    capacity: float
    ratio: float
    pass_fail: str


@dataclass
class CalcStep:
    id: str
    section: str
    title: str
    output_symbol: str
    output_description: str
    equation: str
    substitution: str
    variables: List[CalcVar]
    result: CalcResult
    rounding: Rounding
    result_display: CalcResult
    references: List[Reference]
    checks: List[CheckResult] = field(default_factory=list)


@dataclass
class CalcTrace:
    """Ordered record of every computed quantity.

    Steps are appended in evaluation order. `result` is the full-precision value
    that later steps consume; `result_display` is only for reports.
    """

    meta: TraceMeta
    inputs: List[TraceInput] = field(default_factory=list)
    assumptions: List[Assumption] = field(default_factory=list)
    steps: List[CalcStep] = field(default_factory=list)
    summary: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def new(
        cls,
        *,
        tool_id: str,
        tool_version: str,
        inputs: Dict[str, Any],
        units_system: str = "US",
        input_hash: Optional[str] = None,
        code_basis: Optional[str] = None,
        input_sources: Optional[Dict[str, str]] = None,
        input_labels: Optional[Dict[str, str]] = None,
        input_units: Optional[Dict[str, str]] = None,
    ) -> "CalcTrace":
        """Create a new CalcTrace with deterministic input_hash and input listing."""

        if input_hash is None:
            input_hash = compute_input_hash(inputs)

        meta = TraceMeta(
            tool_id=str(tool_id),
            tool_version=str(tool_version),
            timestamp=datetime.now().isoformat(timespec="seconds"),
            units_system=str(units_system),
            input_hash=str(input_hash),
            code_basis=code_basis,
        )

        src = input_sources or {}
        lbl = input_labels or {}
        unt = input_units or {}

        trace_inputs: List[TraceInput] = []
        for k in sorted(inputs.keys()):
            trace_inputs.append(
                TraceInput(
                    id=str(k),
                    label=str(lbl.get(k, _default_label(k))),
                    value=inputs[k],
                    units=str(unt.get(k, _infer_units(k))),
                    source=str(src.get(k, "default")),
                )
            )

        return cls(meta=meta, inputs=trace_inputs)

    def step(self, step_id: str) -> CalcStep:
        for s in self.steps:
            if s.id == step_id:
                return s
        raise KeyError(step_id)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _default_label(key: str) -> str:
    return key.replace("_", " ")


def _infer_units(key: str) -> str:
    if key.endswith("_in"):
        return "in"
    if key.endswith("_deg"):
        return "deg"
    if key.endswith("_psi"):
        return "psi"
    if key.endswith("_si"):
        return "in^2"
    return "-"


def compute_input_hash(inputs: Dict[str, Any]) -> str:
    """Deterministic hash computed from normalized, sorted inputs."""

    norm: Dict[str, Any] = {}
    for k in sorted(inputs.keys()):
        v = inputs[k]
        if isinstance(v, float):
            norm[k] = float(f"{v:.12g}")
        else:
            norm[k] = v
    payload = json.dumps(norm, sort_keys=True, separators=(",", ":"), ensure_ascii=True)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()[:12]


def _format_value_units(value: Any, units: str) -> str:
    if isinstance(value, float):
        text = f"{value:.6g}"
    else:
        text = str(value)
    return f"{text} {units}" if units and units != "-" else text


def _substitute(equation: str, variables: List[CalcVar]) -> str:
    """Replace whole-word symbols on the right-hand side with value + units, in one pass."""
    if not variables:
        return equation
    lhs, sep, rhs = equation.partition("=")
    if not sep:
        lhs, rhs = "", equation
    by_symbol = {v.symbol: _format_value_units(v.value, v.units) for v in variables}
    symbols = sorted(by_symbol, key=len, reverse=True)
    pattern = re.compile(r"(?<![A-Za-z0-9_])(" + "|".join(re.escape(s) for s in symbols) + r")(?![A-Za-z0-9_])")
    rhs = pattern.sub(lambda m: by_symbol[m.group(1)], rhs)
    return f"{lhs}{sep}{rhs}"


def compute_step(
    trace: CalcTrace,
    *,
    id: str,
    section: str,
    title: str,
    output_symbol: str,
    output_description: str,
    equation: str,
    variables: List[Dict[str, Any]],
    compute_fn: Callable[[], float],
    units: str,
    display_decimals: int = 4,
    references: Optional[List[Dict[str, Any]]] = None,
    checks_builder: Optional[Callable[[float], List[Dict[str, Any]]]] = None,
) -> float:
    """Compute one step, append it to the trace and return the unrounded value."""

    if not id or not section or not title:
        raise ValueError("compute_step requires non-empty id/section/title.")

    var_objs: List[CalcVar] = []
    for v in variables:
        for req in ("symbol", "description", "value", "units", "source"):
            if req not in v:
                raise ValueError(f"Variable missing '{req}' in step {id}.")
        var_objs.append(
            CalcVar(
                symbol=str(v["symbol"]),
                description=str(v["description"]),
                value=v["value"],
                units=str(v["units"]),
                source=str(v["source"]),
            )
        )

    try:
        value = float(compute_fn())
    except (ArithmeticError, ValueError) as e:
        raise CalcStepError(id, str(e)) from e

    rounding = Rounding(decimals=int(display_decimals))

    substitution = _substitute(equation, var_objs)

    ref_objs: List[Reference] = []
    for r in references or []:
        if "type" not in r or "ref" not in r:
            raise ValueError(f"Reference missing type/ref in step {id}.")
        ref_objs.append(Reference(type=str(r["type"]), ref=str(r["ref"])))

    try:
        built = checks_builder(value) if checks_builder else []
    except (ArithmeticError, ValueError) as e:
        raise CalcStepError(id, f"check failed: {e}") from e

    checks: List[CheckResult] = []
    for c in built:
        checks.append(
            CheckResult(
                label=str(c["label"]),
                demand=float(c["demand"]),
                capacity=float(c["capacity"]),
                ratio=float(c["ratio"]),
                pass_fail=str(c["pass_fail"]),
            )
        )

    trace.steps.append(
        CalcStep(
            id=id,
            section=section,
            title=title,
            output_symbol=output_symbol,
            output_description=output_description,
            equation=equation,
            substitution=substitution,
            variables=var_objs,
            result=CalcResult(value=value, units=units),
            rounding=rounding,
            result_display=CalcResult(value=round(value, rounding.decimals), units=units),
            references=ref_objs,
            checks=checks,
        )
    )
    logger.debug(f"{id} {output_symbol} = {value!r} {units}")

    return value
