"""
Calibration constants for the spine match model.

Every number that tunes the model lives here, grouped into one immutable
SpineCalibration value. The defaults are calibrated so that a 54.5 lb compound
at 29" shooting a 28" 0.400 shaft with a 110 gr point lands on a match index
of about 1.0, and so that launch speeds line up with published IBO-derived
speed tables.

Overrides are applied by building a new calibration (with_overrides) or from
SPINE_* environment variables (calibration_from_env). The engine never reads
module state at call time.
"""

import dataclasses
import os
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional


# Force-draw curve efficiency per cam profile
CAM_EFFICIENCY: Dict[str, float] = {
    'soft': 0.80,    # round wheels, older bows
    'medium': 0.85,  # modern hybrid / single cams
    'hard': 0.90,    # speed cams, aggressive draw cycle
}


@dataclass(frozen=True)
class SpineCalibration:
    """Tunable knobs of the spine match model.

    Spine values are in deflection units (inches under the standard test
    load), masses in grains, forces in lbf, lengths in inches, speeds in fps.
    """

    # Required spine (compound): K * sqrt(L / 28) * (70 / effective draw weight)
    k_spine_calibration: float = 0.315
    reference_arrow_length: float = 28.0
    reference_draw_weight: float = 70.0

    # Recurve / traditional required spine: clamp(k * DW * DL, min, max)
    recurve_spine_coefficient: float = 0.001
    recurve_spine_min: float = 0.200
    recurve_spine_max: float = 0.900

    # Heavy points act like added draw weight: +N lbf per full 25 gr over 100 gr
    point_weight_base: float = 100.0
    point_weight_increment: float = 25.0
    point_weight_lbs_per_increment: float = 3.0

    # 7000 gr/lb * 32.174 ft/s^2 * 2, rounded to the calibrated value
    k_fps_conversion: float = 553000.0

    cam_efficiency: Mapping[str, float] = field(default_factory=lambda: dict(CAM_EFFICIENCY))
    letoff_energy_coefficient: float = 0.35
    letoff_ratio_min: float = 0.70
    letoff_ratio_max: float = 1.05

    # Bow efficiency
    bow_efficiency_base: float = 0.80
    bow_efficiency_min: float = 0.70
    bow_efficiency_max: float = 0.90
    recurve_efficiency: float = 0.75
    reference_brace_height: float = 7.0
    brace_height_efficiency: float = 0.01
    reference_ibo: float = 330.0
    ibo_efficiency: float = 0.0001
    reference_draw_length: float = 30.0
    draw_length_efficiency: float = 0.02

    # Transfer efficiency by mass ratio (grains per lb of draw weight)
    transfer_light: float = 0.85
    transfer_heavy: float = 0.90
    transfer_optimal: float = 0.95
    transfer_bonus_start: float = 5.5
    transfer_bonus_per_ratio: float = 0.01
    transfer_max: float = 0.98

    # String material
    dacron_factor: float = 0.92

    # Launch speed trims
    reference_axle_to_axle: float = 35.0
    axle_to_axle_fps_per_inch: float = 0.5
    string_weight_grains_per_fps: float = 6.0
    pre_gate_fps_bonus: float = 2.0

    # Effective spine factors
    standard_front_mass: float = 120.0
    front_mass_step: float = 25.0
    front_mass_shift_per_step: float = 0.05
    front_mass_factor_min: float = 0.70
    front_mass_factor_max: float = 1.30
    foc_factor_per_percent: float = 0.015
    foc_dead_band: float = 2.0
    foc_factor_min: float = 0.85
    foc_factor_max: float = 1.15
    reference_fletch_count: float = 3.0
    fletch_count_factor: float = 0.02
    reference_fletch_weight: float = 8.0
    fletch_weight_factor: float = 0.005
    manual_release_factor: float = 1.12
    pre_gate_release_factor: float = 0.95
    wrap_factor: float = 0.98

    # Temperature (carbon shafts)
    temp_reference: float = 70.0
    temp_spine_coefficient: float = 0.001
    temp_advice_threshold: float = 20.0

    # Component positions from the nock, used for FOC
    fletch_center: float = 1.5
    wrap_center: float = 2.5
    shaft_center_ratio: float = 0.5

    # Match classification
    match_tolerance: float = 0.10
    match_extreme_weak: float = 1.25
    match_extreme_stiff: float = 0.75

    # Mass ratio thresholds
    mass_ratio_min_safe: float = 4.0
    mass_ratio_min_recommended: float = 5.0
    mass_ratio_max_recommended: float = 8.0

    # FOC thresholds (%)
    foc_min_recommended: float = 7.0
    foc_max_recommended: float = 16.0
    foc_optimal_low: float = 10.0
    foc_optimal_high: float = 15.0

    # Velocity thresholds (fps)
    velocity_min_target: float = 260.0
    velocity_max_safe: float = 340.0
    velocity_optimal_max: float = 320.0

    # Confidence band half-widths (fraction of the value)
    ci_spine_required: float = 0.05
    ci_spine_dynamic: float = 0.08
    ci_match_index: float = 0.10

    def __post_init__(self):
        if not 0 < self.match_tolerance < 1:
            raise ValueError(f"match_tolerance must be in (0, 1), got {self.match_tolerance}")
        if self.k_fps_conversion <= 0:
            raise ValueError("k_fps_conversion must be positive")
        if self.k_spine_calibration <= 0:
            raise ValueError("k_spine_calibration must be positive")
        if self.recurve_spine_min > self.recurve_spine_max:
            raise ValueError("recurve_spine_min must not exceed recurve_spine_max")
        if self.match_extreme_stiff >= 1 or self.match_extreme_weak <= 1:
            raise ValueError("extreme match thresholds must bracket 1.0")
        for name in ('ci_spine_required', 'ci_spine_dynamic', 'ci_match_index'):
            if not 0 < getattr(self, name) < 1:
                raise ValueError(f"{name} must be in (0, 1)")
        missing = set(CAM_EFFICIENCY) - set(self.cam_efficiency)
        if missing:
            raise ValueError(f"cam_efficiency is missing profiles: {sorted(missing)}")

    @property
    def match_good_min(self) -> float:
        return 1 - self.match_tolerance

    @property
    def match_good_max(self) -> float:
        return 1 + self.match_tolerance

    def with_overrides(self, **overrides) -> 'SpineCalibration':
        """Return a copy with the given fields replaced (validated again)."""
        unknown = set(overrides) - {f.name for f in dataclasses.fields(self)}
        if unknown:
            raise ValueError(f"Unknown calibration fields: {sorted(unknown)}")
        return dataclasses.replace(self, **overrides)

    def to_dict(self) -> Dict:
        data = dataclasses.asdict(self)
        data['cam_efficiency'] = dict(self.cam_efficiency)
        return data


DEFAULT_CALIBRATION = SpineCalibration()


def calibration_from_env(
    environ: Optional[Mapping[str, str]] = None,
    prefix: str = 'SPINE_',
    base: SpineCalibration = DEFAULT_CALIBRATION,
) -> SpineCalibration:
    """
    Build a calibration from environment overrides.

    Each float field can be overridden by an upper-cased variable, e.g.
    SPINE_K_SPINE_CALIBRATION=0.34 or SPINE_MATCH_TOLERANCE=0.05.
    Cam profiles use SPINE_CAM_EFFICIENCY_SOFT / _MEDIUM / _HARD.

    Raises:
        ValueError: if a variable is set but is not a number, or the resulting
            calibration is invalid.
    """
    if environ is None:
        environ = os.environ

    overrides = {}
    for f in dataclasses.fields(base):
        if f.name == 'cam_efficiency':
            continue
        key = prefix + f.name.upper()
        if key in environ:
            overrides[f.name] = _env_float(key, environ[key])

    cams = dict(base.cam_efficiency)
    for profile in CAM_EFFICIENCY:
        key = f"{prefix}CAM_EFFICIENCY_{profile.upper()}"
        if key in environ:
            cams[profile] = _env_float(key, environ[key])
    if cams != dict(base.cam_efficiency):
        overrides['cam_efficiency'] = cams

    if not overrides:
        return base
    return base.with_overrides(**overrides)


def _env_float(key: str, raw: str) -> float:
    try:
        return float(raw.strip().replace(',', '.'))
    except ValueError:
        raise ValueError(f"{key} must be a number, got {raw!r}") from None
