# app/schemas/pump.py
from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator
from typing import Dict, List, Literal, Optional
from enum import Enum

from app.schemas.hydraulics import (
    CriterionCheck,
    FlowState,
    FrictionResult,
    PipeSpec,
    QuantityInput,
    sums_to,
)


class CalculationModeEnum(str, Enum):
    SYSTEM = "system"    # source and destination vessels, pipe friction included
    FLANGE = "flange"    # rating from flange pressures, velocity heads included


class PumpTypeEnum(str, Enum):
    CENTRIFUGAL = "centrifugal"
    ROTARY = "rotary"
    RECIPROCATING_SIMPLEX = "reciprocating_simplex"
    RECIPROCATING_DUPLEX = "reciprocating_duplex"
    RECIPROCATING_TRIPLEX = "reciprocating_triplex"

    @property
    def is_reciprocating(self) -> bool:
        return self.value.startswith("reciprocating")


class HeadBreakdown(BaseModel):
    """
    Additive head terms, m of fluid.

    Used for both total dynamic head and NPSH available. For NPSHa the
    pressure term is (Ps - Pv)/ρg and the friction and acceleration terms
    are negative.
    """
    model_config = ConfigDict(frozen=True)

    static: float = Field(0.0, description="Elevation term, m")
    friction: float = Field(0.0, description="Friction and fitting losses, m")
    pressure: float = Field(0.0, description="Pressure head term, m")
    velocity: float = Field(0.0, description="Velocity head term, m")
    acceleration: float = Field(0.0, description="Acceleration head term (reciprocating pumps), m")
    total: float = Field(..., description="Sum of all terms, m")

    @model_validator(mode="after")
    def check_additive(self) -> "HeadBreakdown":
        if not sums_to([self.static, self.friction, self.pressure, self.velocity, self.acceleration], self.total):
            raise ValueError("head components do not sum to total")
        return self


class ViscosityCorrection(BaseModel):
    """ANSI/HI 9.6.7 correction factors for viscous liquids."""
    model_config = ConfigDict(frozen=True)

    parameter_b: float = Field(..., description="HI parameter B")
    c_q: float = Field(..., description="Flow correction factor")
    c_h: float = Field(..., description="Head correction factor")
    c_eta: float = Field(..., description="Efficiency correction factor")


class PumpSideInput(BaseModel):
    nominal_size: str = Field(..., description="Nominal pipe size")
    schedule: str = Field("40", description="Pipe schedule")
    length: QuantityInput = Field(QuantityInput(value=0.0, unit="m"), description="Pipe length")
    static_head: QuantityInput = Field(QuantityInput(value=0.0, unit="m"),
                                       description="Liquid level (system) or gauge elevation (flange) above pump datum")
    pressure: QuantityInput = Field(QuantityInput(value=0.0, unit="barg"),
                                    description="Vessel pressure (system) or flange pressure (flange)")
    fittings: Dict[str, int] = Field(default_factory=dict, description="Fitting key -> count")
    service: Optional[str] = Field(None, description="Liquid service for velocity / gradient checks")
    default_inside_diameter: Optional[QuantityInput] = Field(
        None, description="Inside diameter used when the size/schedule pair is not tabulated"
    )


class PumpInput(BaseModel):
    mode: CalculationModeEnum = CalculationModeEnum.SYSTEM
    pump_type: PumpTypeEnum = PumpTypeEnum.CENTRIFUGAL
    flow_rate: QuantityInput = Field(..., description="Volumetric flow rate")
    density: QuantityInput = Field(QuantityInput(value=1000.0, unit="kg/m³"), description="Liquid density")
    viscosity: QuantityInput = Field(QuantityInput(value=1.0, unit="cP"), description="Dynamic viscosity")
    vapor_pressure: QuantityInput = Field(QuantityInput(value=2.34, unit="kPa"), description="Vapor pressure (abs)")
    material: str = Field("Carbon Steel (New)", description="Pipe material")
    custom_roughness: Optional[QuantityInput] = None
    suction: PumpSideInput
    discharge: PumpSideInput
    rpm: float = Field(2950.0, description="Pump speed, rpm")
    pump_efficiency: float = Field(75.0, description="Pump efficiency, %")
    motor_efficiency: float = Field(95.0, description="Motor efficiency, %")
    liquid_compressibility_factor: float = Field(2.0, description="API 674 factor K for acceleration head")
    viscosity_correction: bool = Field(True, description="Apply HI 9.6.7 corrections above 1 cSt")
    friction_method: Literal["swamee-jain", "colebrook"] = "swamee-jain"


class PumpSideResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    pipe: PipeSpec
    flow: FlowState
    friction: FrictionResult
    pipe_loss: float = Field(..., description="Straight-pipe friction head, m")
    fitting_loss: float = Field(..., description="Fitting head loss, m")
    total_loss: float = Field(..., description="Pipe plus fitting loss, m")
    dp_per_km: float = Field(..., description="Friction gradient, bar/km")
    checks: List[CriterionCheck] = Field(default_factory=list)
    recommended_nominal_size: Optional[str] = None


class PumpCalculationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    mode: CalculationModeEnum
    pump_type: PumpTypeEnum
    suction: PumpSideResult
    discharge: PumpSideResult
    head: HeadBreakdown
    npsh: HeadBreakdown
    hydraulic_power: float = Field(..., description="Hydraulic power, kW")
    brake_power: float = Field(..., description="Shaft power, kW")
    motor_power: float = Field(..., description="Motor input power, kW")
    specific_speed: Optional[float] = Field(None, description="Ns (rpm, m³/min, m); None when TDH is not positive")
    suction_specific_speed: float = Field(..., description="Nss (rpm, m³/min, m)")
    viscosity_correction: Optional[ViscosityCorrection] = None
    water_equivalent_head: Optional[float] = Field(None, description="Head a water-rated pump must deliver, m")
    warnings: List[str] = Field(default_factory=list)

    @computed_field
    @property
    def total_dynamic_head(self) -> float:
        return self.head.total

    @computed_field
    @property
    def npsh_available(self) -> float:
        return self.npsh.total
