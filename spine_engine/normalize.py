"""
Permissive numeric parsing of form input.

Text fields are never rejected: blank means 0 ("not provided"), a comma
decimal separator is accepted, and anything unparseable becomes NaN so that it
flows through the model and gets nulled when the result is assembled.
"""

import math
from typing import Optional, Tuple, Union

from spine_engine.models import (
    ArrowConfiguration,
    ArrowSpecs,
    BowConfiguration,
    BowSpecs,
    StringAccessoryLoad,
    StringLoadSpecs,
)


def parse_number(value: Union[str, float, int, None]) -> float:
    """
    Convert a form field to a float.

    Examples:
        parse_number('54,5') -> 54.5
        parse_number('  ')   -> 0.0
        parse_number('abc')  -> nan
        parse_number(28)     -> 28.0
    """
    if value is None:
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip()
    if not text:
        return 0.0
    # float() accepts digit grouping ('1_000'), form input does not
    if '_' in text:
        return math.nan
    try:
        return float(text.replace(',', '.', 1))
    except ValueError:
        return math.nan


def parse_temperature(value: Union[str, float, int, None]) -> Optional[float]:
    """Temperature is optional: blank or missing means 'not supplied' rather than 0 °F."""
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return parse_number(value)


def is_provided(value: float) -> bool:
    """A required magnitude counts as present only when it is a finite positive number."""
    return math.isfinite(value) and value > 0


def normalize_bow(bow: BowSpecs) -> BowConfiguration:
    return BowConfiguration(
        draw_weight=parse_number(bow.draw_weight),
        draw_length=parse_number(bow.draw_length),
        ibo_velocity=parse_number(bow.ibo_velocity),
        brace_height=parse_number(bow.brace_height),
        axle_to_axle=parse_number(bow.axle_to_axle),
        percent_letoff=parse_number(bow.percent_letoff),
        cam_aggressiveness=bow.cam_aggressiveness,
        archery_type=bow.archery_type,
    )


def normalize_arrow(arrow: ArrowSpecs) -> ArrowConfiguration:
    return ArrowConfiguration(
        shaft_length=parse_number(arrow.shaft_length),
        shaft_gpi=parse_number(arrow.shaft_gpi),
        point_weight=parse_number(arrow.point_weight),
        insert_weight=parse_number(arrow.insert_weight),
        fletch_quantity=parse_number(arrow.fletch_quantity),
        weight_each=parse_number(arrow.weight_each),
        wrap_weight=parse_number(arrow.wrap_weight),
        nock_weight=parse_number(arrow.nock_weight),
        bushing_pin=parse_number(arrow.bushing_pin),
        static_spine=parse_number(arrow.static_spine),
        shaft_material=arrow.shaft_material,
    )


def normalize_string_load(string_load: StringLoadSpecs) -> StringAccessoryLoad:
    return StringAccessoryLoad(
        peep=parse_number(string_load.peep),
        d_loop=parse_number(string_load.d_loop),
        nock_point=parse_number(string_load.nock_point),
        silencers=parse_number(string_load.silencers),
        silencer_dfc=parse_number(string_load.silencer_dfc),
        release_type=string_load.release_type,
        string_material=string_load.string_material,
    )


def normalize_inputs(
    bow: BowSpecs,
    arrow: ArrowSpecs,
    string_load: StringLoadSpecs,
) -> Tuple[BowConfiguration, ArrowConfiguration, StringAccessoryLoad]:
    """Convert the three form snapshots into numeric records."""
    return normalize_bow(bow), normalize_arrow(arrow), normalize_string_load(string_load)
