from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Protocol, Type

from pydantic import BaseModel

@dataclass(frozen=True)
class ToolMeta:
    id: str
    name: str
    category: str
    version: str
    description: str

class ToolBase(Protocol):
    """
    Tool contract.

    Tools declare an `InputModel` (Pydantic) for typed inputs; default_inputs()
    returns the model defaults as a plain dict.

    run() accepts an optional `emit` callback that receives each output line
    as soon as the stage producing it has been computed.
    """
    meta: ToolMeta
    InputModel: Optional[Type[BaseModel]]

    def default_inputs(self) -> Dict[str, Any]:
        ...

    def run(self, inputs: Dict[str, Any], emit: Optional[Callable[[str], None]] = None) -> Dict[str, Any]:
        ...
