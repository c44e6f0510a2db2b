"""
Front-of-center (FOC) balance.

The balance point is found by summing component moments about the nock
(position 0) and dividing by total mass:

    nock, bushing/pin   at 0
    fletching           at 1.5"
    wrap                at 2.5"
    shaft               at L / 2
    insert, point       at L  (treated as concentrated at the tip)

    FOC % = (CG - L/2) / L * 100
"""

import numpy as np

from spine_engine.calibration import DEFAULT_CALIBRATION, SpineCalibration
from spine_engine.models import ArrowConfiguration


def balance_point(arrow: ArrowConfiguration, cal: SpineCalibration = DEFAULT_CALIBRATION) -> float:
    """Distance of the center of gravity from the nock (in). 0 for a massless arrow."""
    total = arrow.total_weight
    if total == 0:
        return 0.0

    length = np.float64(arrow.shaft_length)
    moments = (
        arrow.nock_weight * 0.0
        + arrow.bushing_pin * 0.0
        + arrow.fletch_weight * cal.fletch_center
        + arrow.wrap_weight * cal.wrap_center
        + arrow.shaft_weight * (length * cal.shaft_center_ratio)
        + arrow.insert_weight * length
        + arrow.point_weight * length
    )
    with np.errstate(all='ignore'):
        return float(moments / np.float64(total))


def calculate_foc(arrow: ArrowConfiguration, cal: SpineCalibration = DEFAULT_CALIBRATION) -> float:
    """
    FOC percentage of the shaft length.

    Returns 0.0 when total mass or shaft length is zero.
    """
    if arrow.total_weight == 0 or arrow.shaft_length == 0:
        return 0.0

    length = np.float64(arrow.shaft_length)
    with np.errstate(all='ignore'):
        return float((balance_point(arrow, cal) - length / 2) / length * 100)
