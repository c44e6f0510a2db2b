"""
Match classification, warnings, recommendations and confidence bands.

Warnings are safety-related; recommendations are tuning advice. Each check is
evaluated independently whenever its input is finite, so a single setup can
collect several of each.
"""

import math
from typing import Dict, List, Optional, Tuple

from spine_engine import messages
from spine_engine.calibration import SpineCalibration
from spine_engine.models import (
    ArrowConfiguration,
    BowConfiguration,
    ConfidenceInterval,
    ConfidenceLevel,
    SpineStatus,
)
from spine_engine.normalize import is_provided


def _finite(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value)


def classify_match(match_index: Optional[float], cal: SpineCalibration) -> SpineStatus:
    """
    Three-way verdict on the match index (effective / required spine).

        index > 1 + tolerance  -> WEAK
        index < 1 - tolerance  -> STIFF
        otherwise              -> GOOD
        not finite             -> UNKNOWN
    """
    if not _finite(match_index):
        return SpineStatus.UNKNOWN
    if match_index > cal.match_good_max:
        return SpineStatus.WEAK
    if match_index < cal.match_good_min:
        return SpineStatus.STIFF
    return SpineStatus.GOOD


def build_diagnostics(
    status: SpineStatus,
    match_index: float,
    mass_ratio: float,
    fps: float,
    foc: float,
    draw_weight: float,
    cal: SpineCalibration,
    temperature_f: Optional[float] = None,
) -> Tuple[List[str], List[str]]:
    """
    Collect recommendations and warnings for an evaluated setup.

    Returns:
        (recommendations, warnings), both in a stable order.
    """
    recommendations: List[str] = []
    warnings: List[str] = []

    if status == SpineStatus.WEAK:
        recommendations.append(messages.STIFFER_SPINE)
    elif status == SpineStatus.STIFF:
        recommendations.append(messages.WEAKER_SPINE)

    if _finite(mass_ratio):
        if mass_ratio < cal.mass_ratio_min_safe:
            warnings.append(messages.DANGER_LIGHT_ARROW)
        elif mass_ratio < cal.mass_ratio_min_recommended:
            warnings.append(messages.LIGHT_ARROW)

    if _finite(match_index):
        if match_index > cal.match_extreme_weak:
            warnings.append(messages.DANGER_TOO_WEAK)
        elif match_index < cal.match_extreme_stiff:
            warnings.append(messages.DANGER_TOO_STIFF)

    if _finite(fps):
        if fps > cal.velocity_max_safe:
            warnings.append(messages.EXTREME_SPEED)
        if fps < cal.velocity_min_target:
            recommendations.append(messages.LOW_SPEED)
        elif fps > cal.velocity_optimal_max:
            recommendations.append(messages.HIGH_SPEED)

    if _finite(mass_ratio):
        if mass_ratio < cal.mass_ratio_min_recommended:
            recommendations.append(messages.ADD_MASS)
        elif mass_ratio > cal.mass_ratio_max_recommended:
            recommendations.append(messages.REDUCE_MASS)

    if _finite(foc):
        if foc < cal.foc_min_recommended:
            recommendations.append(messages.LOW_FOC)
        elif foc > cal.foc_max_recommended:
            recommendations.append(messages.HIGH_FOC)

    # 34.5 lb, 54.5 lb...: one step of limb bolt away from the next spine column
    if status != SpineStatus.WEAK and 4 < draw_weight % 10 < 6:
        recommendations.append(messages.FUTURE_DRAW_WEIGHT)

    if _finite(temperature_f):
        deviation = temperature_f - cal.temp_reference
        if deviation < -cal.temp_advice_threshold:
            recommendations.append(messages.COLD_TEMPERATURE)
        elif deviation > cal.temp_advice_threshold:
            recommendations.append(messages.HOT_TEMPERATURE)

    return recommendations, warnings


# --- Confidence ---

def required_inputs_present(bow: BowConfiguration, arrow: ArrowConfiguration) -> bool:
    """Draw weight, shaft length, static spine, IBO, draw length and brace height all > 0."""
    return all(is_provided(v) for v in (
        bow.draw_weight,
        arrow.shaft_length,
        arrow.static_spine,
        bow.ibo_velocity,
        bow.draw_length,
        bow.brace_height,
    ))


def confidence_level(
    bow: BowConfiguration,
    arrow: ArrowConfiguration,
    temperature_f: Optional[float],
) -> ConfidenceLevel:
    """
    HIGH:   required inputs, temperature, and measured gpi/point/insert masses
    MEDIUM: required inputs only
    LOW:    anything less
    """
    if not required_inputs_present(bow, arrow):
        return ConfidenceLevel.LOW
    precise_masses = all(is_provided(v) for v in (arrow.shaft_gpi, arrow.point_weight, arrow.insert_weight))
    if _finite(temperature_f) and precise_masses:
        return ConfidenceLevel.HIGH
    return ConfidenceLevel.MEDIUM


def confidence_interval(value: Optional[float], half_width: float) -> Optional[ConfidenceInterval]:
    """Symmetric band of +/- half_width (fraction) around value. None for missing values."""
    if not _finite(value):
        return None
    a = value * (1 - half_width)
    b = value * (1 + half_width)
    return ConfidenceInterval(lower=min(a, b), upper=max(a, b))


def confidence_intervals(
    spine_required: Optional[float],
    spine_dynamic: Optional[float],
    match_index: Optional[float],
    cal: SpineCalibration,
) -> Dict[str, Optional[ConfidenceInterval]]:
    return {
        'spine_required': confidence_interval(spine_required, cal.ci_spine_required),
        'spine_dynamic': confidence_interval(spine_dynamic, cal.ci_spine_dynamic),
        'match_index': confidence_interval(match_index, cal.ci_match_index),
    }
