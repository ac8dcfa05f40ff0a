from __future__ import annotations
from typing import Any, Dict, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError

M = TypeVar("M", bound=BaseModel)

def validate_inputs(model: Type[M], raw: Dict[str, Any]) -> Tuple[Optional[M], Optional[str]]:
    """
    Returns (validated_model, error_message). Missing keys fall back to model defaults.
    """
    try:
        return model.model_validate(raw), None
    except ValidationError as e:
        return None, str(e)

def field_labels(model: Type[BaseModel]) -> Dict[str, str]:
    """Field name -> human label, taken from the Field title or description."""
    out: Dict[str, str] = {}
    for name, info in model.model_fields.items():
        out[name] = info.title or info.description or name.replace("_", " ")
    return out

def field_units(model: Type[BaseModel]) -> Dict[str, str]:
    """Field name -> units string declared via json_schema_extra={"units": ...}."""
    out: Dict[str, str] = {}
    for name, info in model.model_fields.items():
        extra = info.json_schema_extra
        if isinstance(extra, dict) and "units" in extra:
            out[name] = str(extra["units"])
    return out
