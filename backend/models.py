"""Pydantic models for the spine match API requests and responses."""

from __future__ import annotations

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field

from spine_engine.models import ArrowSpecs, BowSpecs, SpineMatchResult, StringLoadSpecs


# --- Spine match ---

class SpineMatchRequest(BaseModel):
    """One bow / arrow / string snapshot as submitted by the form."""
    bow: BowSpecs
    arrow: ArrowSpecs
    string_weights: StringLoadSpecs = Field(default_factory=StringLoadSpecs)
    temperature_f: Optional[Union[str, float]] = Field(None, description="Ambient temperature (°F), optional")


class PointSweepRequest(SpineMatchRequest):
    point_weights: List[Union[str, float]] = Field(
        ..., max_length=50, description="Point weights (gr) to evaluate, in order",
    )


class PointSweepEntry(BaseModel):
    point_weight: Union[str, float]
    result: SpineMatchResult


class PointSweepResponse(BaseModel):
    results: List[PointSweepEntry]


# --- Calibration ---

class CalibrationResponse(BaseModel):
    values: Dict[str, Union[float, Dict[str, float]]]
