"""
Stored energy and launch speed model.

The bow is reduced to a stored-energy budget, discounted by bow efficiency,
arrow/bow mass transfer and string material, and converted to speed with the
kinetic energy relation:

    KE [ft-lb] = m [gr] * v^2 [fps^2] / (2 * 7000 * 32.174)
    v = sqrt(KE * K_FPS_CONVERSION / m)

Compound bows use a cam-shaped force-draw curve: peak draw weight over the
power stroke, scaled by a cam efficiency and a let-off ratio. Recurve and
traditional bows store roughly a triangle under a linear force-draw line,
i.e. half the peak force over the power stroke.

All arithmetic runs on numpy float64 so that degenerate inputs yield inf/NaN
instead of raising; the caller nulls non-finite values.
"""

import numpy as np
from typing import Dict

from spine_engine.calibration import SpineCalibration
from spine_engine.models import (
    BowConfiguration,
    ReleaseType,
    StringAccessoryLoad,
    StringMaterial,
)


def effective_draw_length(draw_length: float) -> float:
    """Draw length rounded down to the whole inch. Never assume more draw than measured."""
    return float(np.floor(np.float64(draw_length)))


def power_stroke(bow: BowConfiguration) -> float:
    """Draw length minus brace height (in)."""
    return bow.draw_length - bow.brace_height


def letoff_ratio(percent_letoff: float, cal: SpineCalibration) -> float:
    """Energy penalty for let-off: 1 - letoff * 0.35, clamped to [0.70, 1.05]."""
    ratio = 1 - (np.float64(percent_letoff) / 100) * cal.letoff_energy_coefficient
    return float(np.clip(ratio, cal.letoff_ratio_min, cal.letoff_ratio_max))


def stored_energy(bow: BowConfiguration, cal: SpineCalibration) -> float:
    """
    Energy stored at full draw (ft-lb).

    Compound:
        E = DW * (floor(DL) - BH) * cam_efficiency * letoff_ratio / 12
    Recurve / traditional:
        E = 0.5 * DW * (DL - BH) / 12
    """
    draw_weight = np.float64(bow.draw_weight)
    if not bow.is_compound:
        return float(0.5 * draw_weight * np.float64(power_stroke(bow)) / 12)

    stroke = effective_draw_length(bow.draw_length) - bow.brace_height
    cam = cal.cam_efficiency.get(bow.cam_aggressiveness.value, cal.cam_efficiency['medium'])
    force_draw_ratio = cam * letoff_ratio(bow.percent_letoff, cal)
    return float(draw_weight * np.float64(stroke) * force_draw_ratio / 12)


def bow_efficiency(bow: BowConfiguration, cal: SpineCalibration) -> float:
    """
    Fraction of stored energy the bow hands to the string.

    Longer brace height, a higher IBO rating and a draw length past 30" all
    nudge efficiency up. Recurve/traditional bows use a fixed value.
    """
    if not bow.is_compound:
        return cal.recurve_efficiency

    efficiency = np.float64(cal.bow_efficiency_base)
    efficiency += (bow.brace_height - cal.reference_brace_height) * cal.brace_height_efficiency
    efficiency += (bow.ibo_velocity - cal.reference_ibo) * cal.ibo_efficiency
    extra_draw = np.maximum(0.0, effective_draw_length(bow.draw_length) - cal.reference_draw_length)
    efficiency += extra_draw * cal.draw_length_efficiency
    return float(np.clip(efficiency, cal.bow_efficiency_min, cal.bow_efficiency_max))


def transfer_efficiency(arrow_weight: float, draw_weight: float, cal: SpineCalibration) -> float:
    """
    Energy transfer between bow and arrow as a function of grains per pound.

    Light arrows (< 4 gr/lb) leave energy in the limbs, very heavy ones
    (> 8 gr/lb) lose some to the longer power stroke. In between transfer
    improves slightly with mass.
    """
    with np.errstate(all='ignore'):
        ratio = np.float64(arrow_weight) / np.float64(draw_weight)

    if ratio < cal.mass_ratio_min_safe:
        return cal.transfer_light
    if ratio > cal.mass_ratio_max_recommended:
        return cal.transfer_heavy

    efficiency = cal.transfer_optimal
    if ratio > cal.transfer_bonus_start:
        efficiency += (ratio - cal.transfer_bonus_start) * cal.transfer_bonus_per_ratio
    return float(min(efficiency, cal.transfer_max))


def string_material_factor(string_load: StringAccessoryLoad, cal: SpineCalibration) -> float:
    """
    Speed efficiency of the string material.

    Dacron is slower (about the same as 4 lb less draw weight). When the
    material is unknown, a DFC silencer is taken as a sign of a dacron string.
    """
    if string_load.string_material == StringMaterial.DACRON:
        return cal.dacron_factor
    if string_load.string_material == StringMaterial.FASTFLIGHT:
        return 1.0
    return cal.dacron_factor if string_load.silencer_dfc > 0 else 1.0


def speed_from_energy(kinetic_energy: float, arrow_weight: float, cal: SpineCalibration) -> float:
    """Convert kinetic energy (ft-lb) and arrow mass (gr) to speed (fps)."""
    with np.errstate(all='ignore'):
        return float(np.sqrt(np.float64(kinetic_energy) * cal.k_fps_conversion / np.float64(arrow_weight)))


def speed_adjustments(
    bow: BowConfiguration,
    string_load: StringAccessoryLoad,
    cal: SpineCalibration,
) -> float:
    """
    Additive fps corrections:
        +0.5 fps per inch of axle-to-axle above 35" (only when ATA is given)
        -1 fps per 6 gr of string-mounted mass
        +2 fps for a pre-gate release
    """
    delta = 0.0
    if bow.axle_to_axle > 0:
        delta += (bow.axle_to_axle - cal.reference_axle_to_axle) * cal.axle_to_axle_fps_per_inch
    delta -= string_load.total_weight / cal.string_weight_grains_per_fps
    if string_load.release_type == ReleaseType.PRE_GATE:
        delta += cal.pre_gate_fps_bonus
    return delta


def estimate_launch_speed(
    bow: BowConfiguration,
    arrow_weight: float,
    string_load: StringAccessoryLoad,
    cal: SpineCalibration,
) -> Dict:
    """
    Estimate launch speed and return every stage of the energy budget.

    Args:
        bow: Normalized bow configuration
        arrow_weight: Total arrow mass (gr)
        string_load: Normalized string accessories
        cal: Calibration constants

    Returns:
        Dict with stored_energy, bow_efficiency, available_energy,
        transfer_efficiency, string_factor, kinetic_energy (ft-lb),
        raw_fps and fps (after adjustments). Values may be non-finite.
    """
    energy = stored_energy(bow, cal)
    efficiency = bow_efficiency(bow, cal)
    available = energy * efficiency

    transfer = transfer_efficiency(arrow_weight, bow.draw_weight, cal)
    string_factor = string_material_factor(string_load, cal)
    kinetic = available * transfer * string_factor

    raw_fps = speed_from_energy(kinetic, arrow_weight, cal)
    fps = raw_fps
    if np.isfinite(raw_fps):
        fps = raw_fps + speed_adjustments(bow, string_load, cal)

    return {
        'stored_energy': energy,
        'bow_efficiency': efficiency,
        'available_energy': available,
        'transfer_efficiency': transfer,
        'string_factor': string_factor,
        'kinetic_energy': kinetic,
        'raw_fps': raw_fps,
        'fps': fps,
    }
