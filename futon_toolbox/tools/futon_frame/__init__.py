"""Futon frame structural calculator plugin.

Exports:
  - TOOL: an instance of FutonFrameTool
  - compute_frame / FrameGeometry for direct use
"""
from __future__ import annotations

from .calculator import FrameGeometry, compute_frame
from .tool import TOOL, FutonFrameTool

__all__ = ["TOOL", "FutonFrameTool", "FrameGeometry", "compute_frame"]
