"""Baseline bow, arrow and string setups shared by the engine tests."""

from spine_engine.models import ArrowSpecs, BowSpecs, StringLoadSpecs


# 54.5 lb compound at 29", 28" 0.400 shaft with a 110 gr point
BASE_BOW = {
    'ibo_velocity': '335',
    'draw_length': '29',
    'draw_weight': '54.5',
    'brace_height': '7.25',
    'axle_to_axle': '34.5',
    'percent_letoff': '70',
    'cam_aggressiveness': 'medium',
}

BASE_ARROW = {
    'shaft_length': '28',
    'point_weight': '110',
    'insert_weight': '0',
    'shaft_gpi': '7.4',
    'fletch_quantity': '3',
    'weight_each': '5.9',
    'wrap_weight': '0',
    'nock_weight': '7',
    'bushing_pin': '0',
    'static_spine': '0.400',
}

BASE_STRING = {
    'peep': '10',
    'd_loop': '6',
    'nock_point': '2',
    'silencers': '0',
    'silencer_dfc': '0',
    'release_type': 'mechanical',
    'string_material': 'unknown',
}


def make_setup(bow=None, arrow=None, string=None):
    """Build (BowSpecs, ArrowSpecs, StringLoadSpecs) from the baseline plus overrides."""
    return (
        BowSpecs(**{**BASE_BOW, **(bow or {})}),
        ArrowSpecs(**{**BASE_ARROW, **(arrow or {})}),
        StringLoadSpecs(**{**BASE_STRING, **(string or {})}),
    )

