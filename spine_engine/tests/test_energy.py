"""
Tests for the stored energy and launch speed model.

Validates:
1. Let-off ratio and cam efficiency in the compound energy model
2. Linear recurve energy model
3. Bow and transfer efficiency clamps
4. String material factor and fps trims
"""

import math
import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from spine_engine.calibration import DEFAULT_CALIBRATION as CAL
from spine_engine.energy import (
    bow_efficiency,
    effective_draw_length,
    estimate_launch_speed,
    letoff_ratio,
    speed_adjustments,
    speed_from_energy,
    stored_energy,
    string_material_factor,
    transfer_efficiency,
)
from spine_engine.models import (
    ArcheryType,
    BowConfiguration,
    CamAggressiveness,
    ReleaseType,
    StringAccessoryLoad,
    StringMaterial,
)


def _bow(**overrides):
    values = dict(
        draw_weight=54.5, draw_length=29.0, ibo_velocity=335.0, brace_height=7.25,
        axle_to_axle=34.5, percent_letoff=70.0,
    )
    values.update(overrides)
    return BowConfiguration(**values)


def _string(**overrides):
    values = dict(peep=10.0, d_loop=6.0, nock_point=2.0, silencers=0.0, silencer_dfc=0.0)
    values.update(overrides)
    return StringAccessoryLoad(**values)


class TestStoredEnergy:
    """Compound and recurve energy budgets."""

    def test_effective_draw_length_floors(self):
        assert effective_draw_length(29.75) == 29.0
        assert effective_draw_length(29.0) == 29.0

    def test_letoff_ratio(self):
        assert letoff_ratio(70, CAL) == pytest.approx(0.755)
        assert letoff_ratio(0, CAL) == pytest.approx(1.0)
        # 100 % let-off would give 0.65: clamped
        assert letoff_ratio(100, CAL) == pytest.approx(0.70)

    def test_compound_energy(self):
        """54.5 * (29 - 7.25) * 0.85 * 0.755 / 12."""
        expected = 54.5 * 21.75 * 0.85 * 0.755 / 12
        assert stored_energy(_bow(), CAL) == pytest.approx(expected)

    def test_fractional_draw_length_ignored(self):
        assert stored_energy(_bow(draw_length=29.9), CAL) == pytest.approx(stored_energy(_bow(), CAL))

    def test_cam_profiles_ordered(self):
        soft = stored_energy(_bow(cam_aggressiveness=CamAggressiveness.SOFT), CAL)
        medium = stored_energy(_bow(), CAL)
        hard = stored_energy(_bow(cam_aggressiveness=CamAggressiveness.HARD), CAL)
        assert soft < medium < hard

    def test_recurve_energy(self):
        bow = _bow(archery_type=ArcheryType.RECURVE, draw_weight=40.0, draw_length=28.0, brace_height=7.5)
        assert stored_energy(bow, CAL) == pytest.approx(0.5 * 40 * 20.5 / 12)


class TestEfficiency:
    """Bow efficiency and mass transfer."""

    def test_baseline_bow_efficiency(self):
        # 0.80 + 0.25 * 0.01 + 5 * 0.0001
        assert bow_efficiency(_bow(), CAL) == pytest.approx(0.803)

    def test_long_draw_bonus(self):
        assert bow_efficiency(_bow(draw_length=31.0), CAL) == pytest.approx(0.823)

    def test_efficiency_clamped(self):
        assert bow_efficiency(_bow(brace_height=20.0), CAL) == pytest.approx(0.90)
        assert bow_efficiency(_bow(brace_height=0.0, ibo_velocity=0.0), CAL) == pytest.approx(0.70)

    def test_recurve_fixed(self):
        assert bow_efficiency(_bow(archery_type=ArcheryType.TRADITIONAL), CAL) == 0.75

    def test_transfer_bands(self):
        assert transfer_efficiency(150, 50, CAL) == pytest.approx(0.85)
        assert transfer_efficiency(450, 50, CAL) == pytest.approx(0.90)
        assert transfer_efficiency(250, 50, CAL) == pytest.approx(0.95)
        assert transfer_efficiency(300, 50, CAL) == pytest.approx(0.955)

    def test_transfer_capped(self):
        cal = CAL.with_overrides(transfer_bonus_per_ratio=0.05)
        assert transfer_efficiency(400, 50, cal) == pytest.approx(0.98)


class TestStringAndTrims:
    """String material and additive speed corrections."""

    def test_string_material(self):
        assert string_material_factor(_string(string_material=StringMaterial.DACRON), CAL) == 0.92
        assert string_material_factor(_string(string_material=StringMaterial.FASTFLIGHT), CAL) == 1.0
        assert string_material_factor(_string(), CAL) == 1.0
        assert string_material_factor(_string(silencer_dfc=5.0), CAL) == 0.92

    def test_adjustments(self):
        # (34.5 - 35) * 0.5 - 18 / 6
        assert speed_adjustments(_bow(), _string(), CAL) == pytest.approx(-3.25)

    def test_missing_axle_to_axle_not_penalized(self):
        assert speed_adjustments(_bow(axle_to_axle=0.0), _string(), CAL) == pytest.approx(-3.0)

    def test_pre_gate_bonus(self):
        pre = _string(release_type=ReleaseType.PRE_GATE)
        assert speed_adjustments(_bow(), pre, CAL) == pytest.approx(-1.25)


class TestLaunchSpeed:
    """Full energy budget to fps."""

    def test_speed_from_energy(self):
        ke = 350 * 280 ** 2 / CAL.k_fps_conversion
        assert speed_from_energy(ke, 350, CAL) == pytest.approx(280.0)

    def test_estimate_breakdown(self):
        result = estimate_launch_speed(_bow(), 341.9, _string(), CAL)
        assert result['available_energy'] == pytest.approx(result['stored_energy'] * 0.803)
        assert result['fps'] == pytest.approx(result['raw_fps'] - 3.25)
        assert 250 < result['fps'] < 290

    def test_heavier_arrow_slower(self):
        light = estimate_launch_speed(_bow(), 340.0, _string(), CAL)['fps']
        heavy = estimate_launch_speed(_bow(), 420.0, _string(), CAL)['fps']
        assert heavy < light

    def test_zero_mass_not_finite(self):
        result = estimate_launch_speed(_bow(), 0.0, _string(), CAL)
        assert not math.isfinite(result['fps'])

    def test_negative_energy_is_nan(self):
        bow = _bow(draw_length=7.5, brace_height=7.25)
        result = estimate_launch_speed(bow, 341.9, _string(), CAL)
        assert math.isnan(result['fps'])
