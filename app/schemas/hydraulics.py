# app/schemas/hydraulics.py
import math
from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator
from typing import Dict, List, Literal, Optional
from enum import Enum


# Fixed Reynolds boundaries between flow regimes
LAMINAR_LIMIT = 2300.0
TURBULENT_LIMIT = 4000.0

ADDITIVE_TOLERANCE = 1e-9


def sums_to(parts: List[float], total: float) -> bool:
    return math.isclose(math.fsum(parts), total, rel_tol=ADDITIVE_TOLERANCE, abs_tol=1e-12)


class FlowRegimeEnum(str, Enum):
    LAMINAR = "laminar"
    TRANSITION = "transition"
    TURBULENT = "turbulent"

    @classmethod
    def from_reynolds(cls, reynolds: float) -> "FlowRegimeEnum":
        if reynolds < LAMINAR_LIMIT:
            return cls.LAMINAR
        if reynolds < TURBULENT_LIMIT:
            return cls.TRANSITION
        return cls.TURBULENT


class FrictionMethodEnum(str, Enum):
    LAMINAR = "laminar"
    INTERPOLATED = "interpolated"
    SWAMEE_JAIN = "swamee-jain"
    COLEBROOK = "colebrook"


class LineTypeEnum(str, Enum):
    GAS = "gas"
    LIQUID = "liquid"
    MIXED = "mixed"


class VerdictEnum(str, Enum):
    PASS = "pass"
    FAIL = "fail"
    NOT_APPLICABLE = "not_applicable"


class QuantityInput(BaseModel):
    """A numeric value together with the unit it is expressed in."""
    value: float = Field(..., description="Numeric value")
    unit: str = Field(..., description="Unit symbol, e.g. 'm³/h', 'cP', 'barg'")


# ---------------------------------------------------------------------------
# Engine data model (SI units throughout)
# ---------------------------------------------------------------------------

class FluidSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    density: float = Field(..., gt=0, description="Density, kg/m³")
    viscosity: float = Field(..., gt=0, description="Dynamic viscosity, Pa·s")
    temperature: float = Field(..., gt=0, description="Temperature, K")
    vapor_pressure: Optional[float] = Field(None, ge=0, description="Vapor pressure, Pa")
    compressibility: Optional[float] = Field(None, gt=0, description="Gas compressibility factor Z")
    molecular_weight: Optional[float] = Field(None, gt=0, description="Gas molecular weight, kg/kmol")
    specific_heat_ratio: Optional[float] = Field(None, gt=1, description="Gas Cp/Cv")


class PipeSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    nominal_size: str = Field(..., description="Nominal pipe size, e.g. '6' or '1-1/2'")
    schedule: str = Field(..., description="Pipe schedule, e.g. '40', 'STD'")
    material: str = Field(..., description="Pipe material")
    inside_diameter: float = Field(..., gt=0, description="Inside diameter, m")
    roughness: float = Field(..., ge=0, description="Absolute roughness, m")
    length: float = Field(..., ge=0, description="Pipe length, m")

    @computed_field
    @property
    def area(self) -> float:
        """Cross-sectional flow area, m²"""
        return math.pi * self.inside_diameter ** 2 / 4.0

    @computed_field
    @property
    def relative_roughness(self) -> float:
        return self.roughness / self.inside_diameter


class PipeGeometry(BaseModel):
    model_config = ConfigDict(frozen=True)

    nominal_size: str
    schedule: str
    inside_diameter: float = Field(..., gt=0, description="Inside diameter, m")
    area: float = Field(..., gt=0, description="Cross-sectional area, m²")
    from_table: bool = Field(True, description="False when a caller-supplied default diameter was used")


class FlowState(BaseModel):
    """Flow state in one pipe. The regime always follows from the Reynolds number."""
    model_config = ConfigDict(frozen=True)

    flow_rate: float = Field(..., gt=0, description="Volumetric flow rate, m³/s")
    velocity: float = Field(..., gt=0, description="Mean velocity, m/s")
    reynolds: float = Field(..., gt=0, description="Reynolds number")

    @computed_field
    @property
    def regime(self) -> FlowRegimeEnum:
        return FlowRegimeEnum.from_reynolds(self.reynolds)


class FrictionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    factor: float = Field(..., gt=0, description="Darcy friction factor")
    regime: FlowRegimeEnum
    method: FrictionMethodEnum
    iterations: int = Field(0, ge=0, description="Solver iterations (diagnostic)")


class PressureDropResult(BaseModel):
    """Pipe pressure drop, Pa. Components always sum to the total."""
    model_config = ConfigDict(frozen=True)

    friction: float = Field(..., description="Straight-pipe friction loss, Pa")
    fittings: float = Field(0.0, description="Fitting K-factor loss, Pa")
    elevation: float = Field(0.0, description="Static elevation change, Pa (positive uphill)")
    total: float = Field(..., description="Total pressure drop, Pa")

    @model_validator(mode="after")
    def check_additive(self) -> "PressureDropResult":
        if not sums_to([self.friction, self.fittings, self.elevation], self.total):
            raise ValueError("pressure drop components do not sum to total")
        return self


class CriteriaLimit(BaseModel):
    """Service limits. None means no limit is defined for that criterion."""
    model_config = ConfigDict(frozen=True)

    service: str
    velocity: Optional[float] = Field(None, description="Maximum velocity, m/s")
    rho_v2: Optional[float] = Field(None, description="Maximum momentum ρv², kg/(m·s²)")
    mach: Optional[float] = Field(None, description="Maximum Mach number")
    dp_per_km: Optional[float] = Field(None, description="Maximum pressure gradient, bar/km")


class CriterionCheck(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    value: Optional[float] = None
    limit: Optional[float] = None
    unit: str = ""
    verdict: VerdictEnum


class MeasuredValues(BaseModel):
    velocity: Optional[float] = None
    rho_v2: Optional[float] = None
    mach: Optional[float] = None
    dp_per_km: Optional[float] = None


# ---------------------------------------------------------------------------
# Line sizing I/O
# ---------------------------------------------------------------------------

class PipeInput(BaseModel):
    nominal_size: str = Field(..., description="Nominal pipe size, e.g. '6'")
    schedule: str = Field("40", description="Pipe schedule")
    material: str = Field("Carbon Steel (New)", description="Pipe material (roughness lookup)")
    custom_roughness: Optional[QuantityInput] = Field(None, description="Roughness when material is 'Custom'")
    length: QuantityInput = Field(..., description="Pipe length")
    elevation_change: Optional[QuantityInput] = Field(None, description="Outlet minus inlet elevation")
    default_inside_diameter: Optional[QuantityInput] = Field(
        None, description="Inside diameter used when the size/schedule pair is not tabulated"
    )


class LiquidInput(BaseModel):
    flow_rate: QuantityInput = Field(..., description="Volumetric flow rate")
    density: QuantityInput = Field(..., description="Liquid density")
    viscosity: QuantityInput = Field(..., description="Dynamic viscosity")
    temperature: QuantityInput = Field(QuantityInput(value=20.0, unit="°C"), description="Fluid temperature")


class GasInput(BaseModel):
    flow_rate: QuantityInput = Field(..., description="Actual or standard volumetric flow rate")
    inlet_pressure: QuantityInput = Field(..., description="Operating pressure")
    temperature: QuantityInput = Field(..., description="Operating temperature")
    molecular_weight: float = Field(..., description="Molecular weight, kg/kmol")
    compressibility: float = Field(1.0, description="Compressibility factor Z at operating conditions")
    viscosity: QuantityInput = Field(QuantityInput(value=0.011, unit="cP"), description="Gas viscosity")
    specific_heat_ratio: float = Field(1.3, description="Cp/Cv")


class MixedPhaseInput(BaseModel):
    gas_flow_rate: QuantityInput = Field(..., description="Gas flow rate at operating conditions")
    liquid_flow_rate: QuantityInput = Field(..., description="Liquid flow rate")
    gas_density: QuantityInput = Field(..., description="Gas density at operating conditions")
    liquid_density: QuantityInput = Field(..., description="Liquid density")
    gas_viscosity: QuantityInput = Field(QuantityInput(value=0.011, unit="cP"), description="Gas viscosity")
    liquid_viscosity: QuantityInput = Field(QuantityInput(value=1.0, unit="cP"), description="Liquid viscosity")
    temperature: QuantityInput = Field(QuantityInput(value=20.0, unit="°C"), description="Operating temperature")
    gas_molecular_weight: Optional[float] = Field(None, description="Gas molecular weight for Mach check, kg/kmol")
    compressibility: float = Field(1.0, description="Gas compressibility factor Z")
    specific_heat_ratio: float = Field(1.3, description="Gas Cp/Cv")


class LineSizingInput(BaseModel):
    line_type: LineTypeEnum
    pipe: PipeInput
    service: str = Field(..., description="Service name from the criteria tables")
    pressure_range: Optional[str] = Field(None, description="Pressure range for gas service criteria")
    fittings: Dict[str, int] = Field(default_factory=dict, description="Fitting key -> count")
    liquid: Optional[LiquidInput] = None
    gas: Optional[GasInput] = None
    mixed: Optional[MixedPhaseInput] = None
    friction_method: Literal["swamee-jain", "colebrook"] = "swamee-jain"


class CalculationResult(BaseModel):
    """Single immutable output of a line sizing calculation."""
    model_config = ConfigDict(frozen=True)

    line_type: LineTypeEnum
    pipe: PipeSpec
    fluid: FluidSpec
    flow: FlowState
    friction: FrictionResult
    pressure_drop: PressureDropResult
    head_loss: float = Field(..., description="Total loss as fluid head, m")
    dp_per_km: float = Field(..., description="Pressure gradient, bar/km")
    rho_v2: float = Field(..., description="Momentum ρv², kg/(m·s²)")
    mach: Optional[float] = Field(None, description="Mach number (gas and mixed lines)")
    erosional_velocity: float = Field(..., description="API RP 14E erosional velocity, m/s")
    erosional_ratio: float = Field(..., description="Velocity / erosional velocity")
    liquid_fraction: Optional[float] = Field(None, description="No-slip liquid volume fraction (mixed lines)")
    limits: CriteriaLimit
    checks: List[CriterionCheck]
    warnings: List[str] = Field(default_factory=list)

    @computed_field
    @property
    def within_limits(self) -> bool:
        return all(check.verdict != VerdictEnum.FAIL for check in self.checks)


# ---------------------------------------------------------------------------
# Standalone friction factor I/O
# ---------------------------------------------------------------------------

class FrictionFactorInput(BaseModel):
    reynolds: float = Field(..., description="Reynolds number")
    roughness: Optional[QuantityInput] = Field(None, description="Absolute roughness; commercial steel when omitted")
    diameter: QuantityInput = Field(..., description="Inside diameter")
    method: Literal["swamee-jain", "colebrook"] = "swamee-jain"


class FrictionCurvePoint(BaseModel):
    reynolds: float
    factor: float
    regime: FlowRegimeEnum


class UnitConversionInput(BaseModel):
    value: float = Field(..., description="Value to convert")
    quantity_kind: str = Field(..., description="Quantity kind, e.g. 'pressure'")
    source_unit: str
    target_unit: str


class GasTransmissionInput(BaseModel):
    equation: Literal["weymouth", "panhandle_a", "panhandle_b"] = "weymouth"
    flow_rate: QuantityInput = Field(..., description="Standard gas flow rate")
    inlet_pressure: QuantityInput = Field(..., description="Inlet pressure")
    length: QuantityInput = Field(..., description="Pipeline length")
    inside_diameter: QuantityInput = Field(..., description="Pipe inside diameter")
    temperature: QuantityInput = Field(..., description="Average gas temperature")
    specific_gravity: float = Field(..., description="Gas specific gravity (air=1)")
    compressibility: float = Field(1.0, description="Average compressibility factor Z")
    base_pressure: QuantityInput = Field(QuantityInput(value=1.01325, unit="bar"), description="Base pressure")
    base_temperature: QuantityInput = Field(QuantityInput(value=288.15, unit="K"), description="Base temperature")


class GasTransmissionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    equation: str
    pressure_drop: float = Field(..., description="Pressure drop, Pa")
    outlet_pressure: float = Field(..., description="Outlet pressure, Pa (0 when choked)")
    choked: bool = Field(False, description="True when the line cannot pass the flow")
