"""
Required spine and effective (dynamic) spine models.

Two independent numbers are compared:

* Required spine comes from bow mechanics alone. For compounds it follows a
  beam-deflection shape, deflection ~ F * L^3 / (3EI), flattened and
  calibrated against manufacturer charts:

      required = K * sqrt(L / 28) * (70 / effective_draw_weight)

  Heavy points act like extra draw weight (about 3 lb per 25 gr over 100 gr),
  so they lower the required spine number.

* Effective spine is the shaft's static spine adjusted for how it behaves on
  this setup: front mass, FOC, fletching, release, wrap and, for carbon,
  temperature. Factors above 1 mean the arrow behaves weaker.

Spine numbers are deflections: smaller is stiffer.
"""

from typing import Dict, Optional

import numpy as np

from spine_engine.calibration import SpineCalibration
from spine_engine.models import (
    ArrowConfiguration,
    BowConfiguration,
    ReleaseType,
    ShaftMaterial,
)


# --- Required spine ---

def point_weight_adjustment(point_weight: float, cal: SpineCalibration) -> float:
    """Draw-weight equivalent (lbf) of point mass above 100 gr, in whole 25 gr steps."""
    if not np.isfinite(point_weight):
        return float('nan')
    if point_weight > cal.point_weight_base:
        increments = np.floor((point_weight - cal.point_weight_base) / cal.point_weight_increment)
        return float(increments * cal.point_weight_lbs_per_increment)
    return 0.0


def effective_draw_weight(bow: BowConfiguration, arrow: ArrowConfiguration, cal: SpineCalibration) -> float:
    return bow.draw_weight + point_weight_adjustment(arrow.point_weight, cal)


def required_spine_compound(effective_weight: float, arrow_length: float, cal: SpineCalibration) -> float:
    with np.errstate(all='ignore'):
        length_term = np.sqrt(np.float64(arrow_length) / cal.reference_arrow_length)
        return float(cal.k_spine_calibration * length_term * (cal.reference_draw_weight / np.float64(effective_weight)))


def required_spine_recurve(draw_weight: float, draw_length: float, cal: SpineCalibration) -> float:
    spine = cal.recurve_spine_coefficient * np.float64(draw_weight) * np.float64(draw_length)
    return float(np.clip(spine, cal.recurve_spine_min, cal.recurve_spine_max))


def calculate_required_spine(
    bow: BowConfiguration,
    arrow: ArrowConfiguration,
    cal: SpineCalibration,
) -> float:
    """Static spine the bow calls for, independent of the chosen shaft."""
    if bow.is_compound:
        return required_spine_compound(effective_draw_weight(bow, arrow, cal), arrow.shaft_length, cal)
    return required_spine_recurve(bow.draw_weight, bow.draw_length, cal)


# --- Effective spine factors ---

def front_mass_factor(front_mass: float, cal: SpineCalibration) -> float:
    """Every 25 gr of point+insert over 120 gr makes the shaft act ~5% weaker."""
    deviation = (np.float64(front_mass) - cal.standard_front_mass) / cal.front_mass_step
    factor = 1 + deviation * cal.front_mass_shift_per_step
    return float(np.clip(factor, cal.front_mass_factor_min, cal.front_mass_factor_max))


def foc_factor(foc: float, cal: SpineCalibration) -> float:
    """
    Weight-forward arrows bend more on launch.

    Above the optimal-low FOC the factor rises by 1.5% per 2 FOC points;
    below (optimal-low - 2) it falls at the same rate; in between it is 1.
    """
    if not np.isfinite(foc):
        return float('nan')
    low = cal.foc_optimal_low
    rate = cal.foc_factor_per_percent / 2
    if foc > low:
        factor = 1 + (foc - low) * rate
    elif foc < low - cal.foc_dead_band:
        factor = 1 - ((low - cal.foc_dead_band) - foc) * rate
    else:
        factor = 1.0
    return float(np.clip(factor, cal.foc_factor_min, cal.foc_factor_max))


def fletching_factor(fletch_quantity: float, weight_each: float, cal: SpineCalibration) -> float:
    """More or heavier fletching steadies the tail and reduces effective flex."""
    return (
        1.0
        - (fletch_quantity - cal.reference_fletch_count) * cal.fletch_count_factor
        - (weight_each - cal.reference_fletch_weight) * cal.fletch_weight_factor
    )


def release_factor(release_type: ReleaseType, cal: SpineCalibration) -> float:
    if release_type == ReleaseType.MANUAL:
        return cal.manual_release_factor
    if release_type == ReleaseType.PRE_GATE:
        return cal.pre_gate_release_factor
    return 1.0


def wrap_factor(wrap_weight: float, cal: SpineCalibration) -> float:
    return cal.wrap_factor if wrap_weight > 0 else 1.0


def temperature_correction(
    spine: float,
    temperature_f: Optional[float],
    material: ShaftMaterial,
    cal: SpineCalibration,
) -> float:
    """Carbon softens as it warms: spine * (1 + (T - 70) * 0.001). Other materials are unchanged."""
    if temperature_f is None or material != ShaftMaterial.CARBON:
        return spine
    return spine * (1 + (temperature_f - cal.temp_reference) * cal.temp_spine_coefficient)


def calculate_effective_spine(
    arrow: ArrowConfiguration,
    release_type: ReleaseType,
    foc: float,
    cal: SpineCalibration,
    temperature_f: Optional[float] = None,
) -> Dict:
    """
    Effective (dynamic) spine of the arrow on this setup.

    Args:
        arrow: Normalized arrow configuration
        release_type: Release in use
        foc: Front-of-center percentage of the arrow
        cal: Calibration constants
        temperature_f: Optional ambient temperature (°F)

    Returns:
        Dict with each factor and 'spine' (the effective spine value).
    """
    factors = {
        'front_mass': front_mass_factor(arrow.front_mass, cal),
        'foc': foc_factor(foc, cal),
        'fletching': fletching_factor(arrow.fletch_quantity, arrow.weight_each, cal),
        'release': release_factor(release_type, cal),
        'wrap': wrap_factor(arrow.wrap_weight, cal),
    }

    spine = np.float64(arrow.static_spine)
    for value in factors.values():
        spine *= value
    spine = temperature_correction(float(spine), temperature_f, arrow.shaft_material, cal)

    factors['spine'] = spine
    return factors
