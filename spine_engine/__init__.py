"""
Spine Match Engine

Core computation library for arrow spine matching: launch speed, FOC,
required vs. effective spine, and setup diagnostics for compound and
traditional bows.

All math is deterministic and side-effect free: one call, one result.
"""

from spine_engine.calibration import SpineCalibration, DEFAULT_CALIBRATION, calibration_from_env
from spine_engine.models import (
    ArcheryType, CamAggressiveness, ShaftMaterial, StringMaterial, ReleaseType,
    SpineStatus, ConfidenceLevel, BowSpecs, ArrowSpecs, StringLoadSpecs,
    ConfidenceInterval, SpineMatchResult, release_type_from_text,
)
from spine_engine.normalize import parse_number, normalize_inputs
from spine_engine.foc import calculate_foc
from spine_engine.match import SpineMatchEngine, compute_spine_match, empty_result

__version__ = "0.1.0"
