from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SpeciesCategory(str, Enum):
    DECIDUOUS = "deciduous"
    CONIFEROUS = "coniferous"
    TROPICAL = "tropical"
    MEDITERRANEAN = "mediterranean"
    BOREAL = "boreal"
    ARID = "arid"
    SUBTROPICAL = "subtropical"


class SpacingClass(str, Enum):
    DENSE = "dense"
    STANDARD = "standard"
    WIDE = "wide"
    VERY_WIDE = "veryWide"


class SimulationMode(str, Enum):
    PLANTING = "planting"
    CLEAR_CUTTING = "clear-cutting"


class CalculationMode(str, Enum):
    """Reporting granularity only; never changes the math."""
    PER_AREA = "perArea"
    PER_TREE = "perTree"


class MixWeighting(str, Enum):
    EMPTY = "empty"
    SINGLE = "single"
    WEIGHTED = "weighted"
    EQUAL = "equal"


# ── Reference data ───────────────────────────────────────────────────

class TreeSpecies(BaseModel):
    """Static catalog record. Rates are per tree at maturity."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    scientific_name: str
    category: SpeciesCategory
    carbon_sequestration: float = Field(ge=0, description="kg CO2/year at maturity")
    biodiversity_value: float = Field(ge=0, le=5)
    resilience_score: float = Field(ge=0, le=5)
    climate_zones: tuple[str, ...] = ()
    spacing: SpacingClass = SpacingClass.STANDARD


class SpeciesMixEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    species: TreeSpecies
    percentage: Optional[float] = Field(None, ge=0, le=100)


# ── Locations ────────────────────────────────────────────────────────

class Point(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float
    lon: float


class RegionBounds(BaseModel):
    model_config = ConfigDict(frozen=True)

    north: float
    south: float
    east: float
    west: float

    @property
    def centroid(self) -> Point:
        return Point(
            lat=(self.north + self.south) / 2,
            lon=(self.east + self.west) / 2,
        )


# ── Environmental observations ───────────────────────────────────────

class HistoricalClimatePoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    year: int
    temperature: float = Field(description="Mean temperature (°C)")
    precipitation: float = Field(description="Mean precipitation (mm)")


class EnvironmentalObservation(BaseModel):
    """Snapshot from the environmental data provider. Every field is optional."""
    model_config = ConfigDict(frozen=True)

    soil_carbon: Optional[float] = Field(None, description="Soil organic carbon (g/kg)")
    soil_ph: Optional[float] = None
    temperature: Optional[float] = Field(None, description="Current temperature (°C)")
    precipitation: Optional[float] = Field(None, description="Current precipitation (mm)")
    history: tuple[HistoricalClimatePoint, ...] = ()


# ── Results ──────────────────────────────────────────────────────────

class YearlyImpact(BaseModel):
    year: int
    carbon: float
    cumulative_carbon: float
    biodiversity: float
    resilience: float
    climate_modifier: float
    predicted_temperature: float
    predicted_precipitation: float


class LandUseImpact(BaseModel):
    """Percentages; positive for planting gains, negative for clear-cutting losses."""
    erosion: float = 0.0
    soil_quality: float = 0.0
    habitat: float = 0.0
    water_quality: float = 0.0


class ImpactResult(BaseModel):
    mode: SimulationMode
    years: int
    carbon_base: float = Field(0.0, description="Blended mature rate incl. soil bonus (kg CO2/year)")
    annual_carbon: float = Field(0.0, description="Year-1 carbon (kg CO2)")
    annual_carbon_at_horizon: float = 0.0
    total_carbon: float = 0.0
    immediate_carbon_release: float = 0.0
    biodiversity_impact: float = Field(0.0, ge=0, le=5)
    forest_resilience: float = Field(0.0, ge=0, le=5)
    average_biodiversity: float = Field(0.0, ge=0, le=5)
    average_resilience: float = Field(0.0, ge=0, le=5)
    water_retention: float = Field(0.0, ge=0, le=95)
    air_quality_improvement: float = Field(0.0, ge=-80, le=95)
    social_impact: float = Field(1.0, ge=1, le=5)
    land_use: LandUseImpact = Field(default_factory=LandUseImpact)
    temperature_trend: float = 0.0
    precipitation_trend: float = 0.0
    used_regional_climate: bool = False
    yearly: list[YearlyImpact] = []


class MixWarning(BaseModel):
    """Raised alongside a result when a multi-species mix falls back to equal weights."""
    code: str = "MIX_PERCENTAGES_FALLBACK"
    total_percentage: float
    message: str


class PlantingPlan(BaseModel):
    spacing: float
    density: float
    area_hectares: float
    total_trees: int


class PlantingTimeline(BaseModel):
    project_scale: str
    recommended_approach: str
    trees_per_year: int
    years_to_complete: int
    trees_per_season: int


# ── API requests / responses ─────────────────────────────────────────

class SpeciesMixItem(BaseModel):
    species_id: str
    percentage: Optional[float] = Field(None, ge=0, le=100)


class SimulationRequest(BaseModel):
    point: Optional[Point] = Field(None, description="Single location (alternative to region)")
    region: Optional[RegionBounds] = Field(None, description="Rectangular region bounds")
    place_name: Optional[str] = Field(None, description="Place to geocode (alternative to point/region)")
    species: list[SpeciesMixItem] = []
    years: int = 10
    mode: SimulationMode = SimulationMode.PLANTING
    calculation_mode: CalculationMode = CalculationMode.PER_AREA
    tree_age: int = Field(20, description="Average tree age (clear-cutting only)")
    spacing: Optional[float] = Field(None, gt=0, description="Custom spacing in meters")
    observation: Optional[EnvironmentalObservation] = Field(
        None, description="Pre-fetched observation; skips the data provider"
    )


class SimulationResponse(BaseModel):
    location: Point
    region: Optional[RegionBounds] = None
    calculation_mode: CalculationMode = CalculationMode.PER_AREA
    impact: ImpactResult
    planting: Optional[PlantingPlan] = None
    timeline: Optional[PlantingTimeline] = None
    recommendations: list[str] = []
    comparisons: list[str] = []
    narrative: str = ""
    observation: EnvironmentalObservation
    warnings: list[MixWarning] = []


class PlantingRequest(BaseModel):
    region: RegionBounds
    species: list[SpeciesMixItem] = []
    spacing: Optional[float] = Field(None, gt=0)


class PlantingResponse(BaseModel):
    plan: PlantingPlan
    timeline: PlantingTimeline
    area_label: str
    recommendations: list[str] = []


class GeocodeResult(BaseModel):
    name: str
    location: Point
    region: Optional[RegionBounds] = None
