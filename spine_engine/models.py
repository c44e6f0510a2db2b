"""Input records, enumerations, and the result value of the spine match engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Form fields arrive as text ("54,5", "", "abc") or as plain numbers.
NumericText = Union[str, float]


# --- Enums ---

class ArcheryType(str, Enum):
    COMPOUND = "compound"
    RECURVE = "recurve"
    TRADITIONAL = "traditional"


class CamAggressiveness(str, Enum):
    SOFT = "soft"
    MEDIUM = "medium"
    HARD = "hard"


class ShaftMaterial(str, Enum):
    CARBON = "carbon"
    ALUMINUM = "aluminum"
    WOOD = "wood"
    FIBERGLASS = "fiberglass"


class StringMaterial(str, Enum):
    DACRON = "dacron"
    FASTFLIGHT = "fastflight"
    UNKNOWN = "unknown"


class ReleaseType(str, Enum):
    MECHANICAL = "mechanical"
    MANUAL = "manual"
    PRE_GATE = "pre_gate"


class SpineStatus(str, Enum):
    WEAK = "weak"
    GOOD = "good"
    STIFF = "stiff"
    UNKNOWN = "unknown"


class ConfidenceLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


_ARCHERY_TYPE_ALIASES = {
    "recurvo": ArcheryType.RECURVE,
    "tradicional": ArcheryType.TRADITIONAL,
    "compuesto": ArcheryType.COMPOUND,
}


def release_type_from_text(text: Optional[str]) -> ReleaseType:
    """
    Map a free-text release description to a ReleaseType.

    Matching is case-insensitive substring search, kept compatible with saved
    form values such as "Fingers", "Pre-Gate Release" or "Post Gate Release":
        contains "manual" or "fingers" -> MANUAL
        contains "pre"                 -> PRE_GATE
        anything else                  -> MECHANICAL

    Manual wins over pre-gate, so "Pre-gate (fingers backup)" maps to MANUAL
    and does not get the pre-gate speed bonus.
    """
    lowered = (text or "").lower()
    if "manual" in lowered or "fingers" in lowered:
        return ReleaseType.MANUAL
    if "pre" in lowered:
        return ReleaseType.PRE_GATE
    return ReleaseType.MECHANICAL


def _enum_or_default(enum_cls, value, default, aliases: Optional[Dict] = None):
    if value is None or isinstance(value, enum_cls):
        return value if value is not None else default
    text = str(value).strip().lower()
    if aliases and text in aliases:
        return aliases[text]
    try:
        return enum_cls(text)
    except ValueError:
        return default


# --- Form snapshots ---

class BowSpecs(BaseModel):
    """Bow configuration as entered on the form. Blank numeric fields mean 'not provided'."""
    model_config = ConfigDict(frozen=True)

    draw_weight: NumericText = Field("", description="Peak draw weight (lbf)")
    draw_length: NumericText = Field("", description="Draw length (in)")
    ibo_velocity: NumericText = Field("", description="IBO-rated speed (fps)")
    brace_height: NumericText = Field("", description="Brace height (in)")
    axle_to_axle: NumericText = Field("", description="Axle-to-axle length (in)")
    percent_letoff: NumericText = Field("", description="Let-off (0-100 %)")
    cam_aggressiveness: CamAggressiveness = CamAggressiveness.MEDIUM
    archery_type: ArcheryType = ArcheryType.COMPOUND

    @field_validator("cam_aggressiveness", mode="before")
    @classmethod
    def _cam(cls, value):
        return _enum_or_default(CamAggressiveness, value, CamAggressiveness.MEDIUM)

    @field_validator("archery_type", mode="before")
    @classmethod
    def _archery_type(cls, value):
        return _enum_or_default(ArcheryType, value, ArcheryType.COMPOUND, _ARCHERY_TYPE_ALIASES)


class ArrowSpecs(BaseModel):
    """Arrow build as entered on the form. Masses in grains, lengths in inches."""
    model_config = ConfigDict(frozen=True)

    shaft_length: NumericText = Field("", description="Cut shaft length (in)")
    shaft_gpi: NumericText = Field("", description="Shaft mass per inch (gr/in)")
    point_weight: NumericText = Field("", description="Point mass (gr)")
    insert_weight: NumericText = Field("", description="Insert mass (gr)")
    fletch_quantity: NumericText = Field("", description="Number of vanes/feathers")
    weight_each: NumericText = Field("", description="Mass per fletch (gr)")
    wrap_weight: NumericText = Field("", description="Wrap mass (gr)")
    nock_weight: NumericText = Field("", description="Nock mass (gr)")
    bushing_pin: NumericText = Field("", description="Bushing / pin mass (gr)")
    static_spine: NumericText = Field("", description="Manufacturer static spine (deflection, smaller = stiffer)")
    shaft_material: ShaftMaterial = ShaftMaterial.CARBON

    @field_validator("shaft_material", mode="before")
    @classmethod
    def _material(cls, value):
        return _enum_or_default(ShaftMaterial, value, ShaftMaterial.CARBON)


class StringLoadSpecs(BaseModel):
    """Everything mounted on the bow string, plus release and string material."""
    model_config = ConfigDict(frozen=True)

    peep: NumericText = Field("", description="Peep sight (gr)")
    d_loop: NumericText = Field("", description="D-loop (gr)")
    nock_point: NumericText = Field("", description="Nock point(s) (gr)")
    silencers: NumericText = Field("", description="String silencers (gr)")
    silencer_dfc: NumericText = Field("", description="DFC silencer (gr)")
    release_type: ReleaseType = ReleaseType.MECHANICAL
    string_material: StringMaterial = StringMaterial.UNKNOWN

    @field_validator("release_type", mode="before")
    @classmethod
    def _release(cls, value):
        if isinstance(value, ReleaseType):
            return value
        return release_type_from_text(value)

    @field_validator("string_material", mode="before")
    @classmethod
    def _string_material(cls, value):
        return _enum_or_default(StringMaterial, value, StringMaterial.UNKNOWN)


# --- Normalized records ---
# All quantities are non-negative magnitudes; 0.0 means "not provided".
# NaN marks a field whose text could not be parsed.

@dataclass(frozen=True)
class BowConfiguration:
    draw_weight: float
    draw_length: float
    ibo_velocity: float
    brace_height: float
    axle_to_axle: float
    percent_letoff: float
    cam_aggressiveness: CamAggressiveness = CamAggressiveness.MEDIUM
    archery_type: ArcheryType = ArcheryType.COMPOUND

    @property
    def is_compound(self) -> bool:
        return self.archery_type == ArcheryType.COMPOUND


@dataclass(frozen=True)
class ArrowConfiguration:
    shaft_length: float
    shaft_gpi: float
    point_weight: float
    insert_weight: float
    fletch_quantity: float
    weight_each: float
    wrap_weight: float
    nock_weight: float
    bushing_pin: float
    static_spine: float
    shaft_material: ShaftMaterial = ShaftMaterial.CARBON

    @property
    def shaft_weight(self) -> float:
        return self.shaft_length * self.shaft_gpi

    @property
    def fletch_weight(self) -> float:
        return self.fletch_quantity * self.weight_each

    @property
    def front_mass(self) -> float:
        return self.point_weight + self.insert_weight

    @property
    def total_weight(self) -> float:
        return (
            self.shaft_weight
            + self.point_weight
            + self.insert_weight
            + self.fletch_weight
            + self.wrap_weight
            + self.nock_weight
            + self.bushing_pin
        )


@dataclass(frozen=True)
class StringAccessoryLoad:
    peep: float
    d_loop: float
    nock_point: float
    silencers: float
    silencer_dfc: float
    release_type: ReleaseType = ReleaseType.MECHANICAL
    string_material: StringMaterial = StringMaterial.UNKNOWN

    @property
    def total_weight(self) -> float:
        return self.peep + self.d_loop + self.nock_point + self.silencers + self.silencer_dfc


# --- Result ---

class ConfidenceInterval(BaseModel):
    """Fixed-width uncertainty band around a computed value."""
    model_config = ConfigDict(frozen=True)

    lower: float
    upper: float


class SpineMatchResult(BaseModel):
    """
    Output of one spine match evaluation.

    None marks a value that could not be computed from the inputs; it is
    never used for a computed zero.
    """
    model_config = ConfigDict(frozen=True)

    spine_required: Optional[float] = None
    spine_dynamic: Optional[float] = None
    match_index: Optional[float] = None
    status: Optional[SpineStatus] = None
    arrow_total_weight: float = 0.0
    foc: Optional[float] = None
    calculated_fps: Optional[float] = None
    mass_ratio: Optional[float] = None
    string_weight: float = 0.0
    confidence: ConfidenceLevel = ConfidenceLevel.LOW
    confidence_intervals: Dict[str, Optional[ConfidenceInterval]] = Field(default_factory=dict)
    temperature_f: Optional[float] = None
    archery_type: ArcheryType = ArcheryType.COMPOUND
    recommendations: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        """True when the inputs were insufficient to evaluate the setup."""
        return self.status is None
