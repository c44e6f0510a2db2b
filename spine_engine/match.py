"""
Spine match engine.

Runs the full evaluation for one bow / arrow / string snapshot:

    normalize -> validity gate -> masses -> energy & speed -> required spine
    -> FOC -> effective spine -> match index -> diagnostics -> result

The engine holds nothing but its calibration, so one instance can be shared
freely between threads and requests. Insufficient input never raises: it
yields the empty result (every derived field None, no messages). Non-finite
intermediate values are allowed to propagate and are nulled field by field
when the result is assembled.
"""

import logging
import math
from typing import List, Optional, Sequence, Union

import numpy as np

from spine_engine.calibration import DEFAULT_CALIBRATION, SpineCalibration
from spine_engine.diagnostics import (
    build_diagnostics,
    classify_match,
    confidence_intervals,
    confidence_level,
    required_inputs_present,
)
from spine_engine.energy import estimate_launch_speed, power_stroke
from spine_engine.foc import calculate_foc
from spine_engine.models import (
    ArcheryType,
    ArrowSpecs,
    BowSpecs,
    ConfidenceLevel,
    SpineMatchResult,
    StringLoadSpecs,
)
from spine_engine.normalize import normalize_inputs, parse_temperature
from spine_engine.spine import (
    calculate_effective_spine,
    calculate_required_spine,
    effective_draw_weight,
)

logger = logging.getLogger(__name__)


def _finite_or_none(value) -> Optional[float]:
    if value is None:
        return None
    value = float(value)
    return value if math.isfinite(value) else None


def empty_result(
    arrow_total_weight: float = 0.0,
    archery_type: ArcheryType = ArcheryType.COMPOUND,
    temperature_f: Optional[float] = None,
    string_weight: float = 0.0,
) -> SpineMatchResult:
    """The 'not enough data to evaluate' result."""
    return SpineMatchResult(
        arrow_total_weight=_finite_or_none(arrow_total_weight) or 0.0,
        string_weight=_finite_or_none(string_weight) or 0.0,
        confidence=ConfidenceLevel.LOW,
        confidence_intervals={'spine_required': None, 'spine_dynamic': None, 'match_index': None},
        temperature_f=_finite_or_none(temperature_f),
        archery_type=archery_type,
    )


class SpineMatchEngine:
    """Evaluates arrow/bow spine matches with a fixed calibration."""

    def __init__(self, calibration: SpineCalibration = DEFAULT_CALIBRATION):
        self.calibration = calibration

    def compute(
        self,
        bow: BowSpecs,
        arrow: ArrowSpecs,
        string_load: StringLoadSpecs,
        temperature_f: Union[str, float, None] = None,
    ) -> SpineMatchResult:
        """
        Evaluate one setup.

        Args:
            bow: Bow form snapshot
            arrow: Arrow form snapshot
            string_load: String accessories, release and string material
            temperature_f: Optional ambient temperature (°F); blank/None skips
                the temperature refinement

        Returns:
            SpineMatchResult. Fields that cannot be computed are None.
        """
        with np.errstate(all='ignore'):
            return self._compute(bow, arrow, string_load, temperature_f)

    def sweep_point_weights(
        self,
        bow: BowSpecs,
        arrow: ArrowSpecs,
        string_load: StringLoadSpecs,
        point_weights: Sequence[Union[str, float]],
        temperature_f: Union[str, float, None] = None,
    ) -> List[SpineMatchResult]:
        """Evaluate the same setup once per point weight, in the given order."""
        if not point_weights:
            raise ValueError("point_weights must not be empty")
        return [
            self.compute(bow, arrow.model_copy(update={'point_weight': weight}), string_load, temperature_f)
            for weight in point_weights
        ]

    def _compute(self, bow, arrow, string_load, temperature_f) -> SpineMatchResult:
        cal = self.calibration
        bow_cfg, arrow_cfg, string_cfg = normalize_inputs(bow, arrow, string_load)
        temperature = parse_temperature(temperature_f)
        archery_type = bow_cfg.archery_type

        if not required_inputs_present(bow_cfg, arrow_cfg):
            logger.debug("Required inputs missing or invalid; returning empty result")
            return empty_result(archery_type=archery_type, temperature_f=temperature)

        arrow_weight = arrow_cfg.total_weight
        string_weight = string_cfg.total_weight
        # Draw length must exceed brace height; anything else has no power stroke
        if arrow_weight == 0 or not power_stroke(bow_cfg) > 0:
            logger.debug("Degenerate arrow mass or power stroke; returning empty result")
            return empty_result(arrow_weight, archery_type, temperature, string_weight)

        speed = estimate_launch_speed(bow_cfg, arrow_weight, string_cfg, cal)

        effective_weight = effective_draw_weight(bow_cfg, arrow_cfg, cal)
        mass_ratio = arrow_weight / effective_weight
        spine_required = calculate_required_spine(bow_cfg, arrow_cfg, cal)

        foc = calculate_foc(arrow_cfg, cal)
        dynamic = calculate_effective_spine(
            arrow_cfg, string_cfg.release_type, foc, cal, temperature_f=_finite_or_none(temperature),
        )
        spine_dynamic = dynamic['spine']
        match_index = float(np.float64(spine_dynamic) / np.float64(spine_required))

        status = classify_match(match_index, cal)
        recommendations, warnings = build_diagnostics(
            status=status,
            match_index=match_index,
            mass_ratio=mass_ratio,
            fps=speed['fps'],
            foc=foc,
            draw_weight=bow_cfg.draw_weight,
            cal=cal,
            temperature_f=temperature,
        )

        fields = {
            'spine_required': _finite_or_none(spine_required),
            'spine_dynamic': _finite_or_none(spine_dynamic),
            'match_index': _finite_or_none(match_index),
            'foc': _finite_or_none(foc),
            'calculated_fps': _finite_or_none(speed['fps']),
            'mass_ratio': _finite_or_none(mass_ratio),
        }
        nulled = [name for name, value in fields.items() if value is None]
        if nulled:
            logger.debug("Non-finite values nulled: %s", ", ".join(nulled))

        return SpineMatchResult(
            **fields,
            status=status,
            arrow_total_weight=_finite_or_none(arrow_weight) or 0.0,
            string_weight=_finite_or_none(string_weight) or 0.0,
            confidence=confidence_level(bow_cfg, arrow_cfg, temperature),
            confidence_intervals=confidence_intervals(
                fields['spine_required'], fields['spine_dynamic'], fields['match_index'], cal,
            ),
            temperature_f=_finite_or_none(temperature),
            archery_type=archery_type,
            recommendations=tuple(recommendations),
            warnings=tuple(warnings),
        )


_default_engine = SpineMatchEngine()


def compute_spine_match(
    bow: BowSpecs,
    arrow: ArrowSpecs,
    string_load: StringLoadSpecs,
    temperature_f: Union[str, float, None] = None,
) -> SpineMatchResult:
    """Evaluate a setup with the default calibration. See SpineMatchEngine.compute."""
    return _default_engine.compute(bow, arrow, string_load, temperature_f)
