# app/services/hydraulics/extensions/pump.py
"""
Pump head integration: total dynamic head, NPSH available, API 674
acceleration head, ANSI/HI 9.6.7 viscosity corrections, power and
specific speed.

Suction and discharge are evaluated independently from the same flow rate;
neither side reads the other's result. All heads are in metres of fluid.
"""
import logging
import math
from typing import Dict, List, Optional

import numpy as np

from app.core.config import settings
from app.schemas.hydraulics import MeasuredValues, PipeSpec
from app.schemas.pump import (
    CalculationModeEnum,
    HeadBreakdown,
    PumpCalculationResult,
    PumpInput,
    PumpSideInput,
    PumpSideResult,
    PumpTypeEnum,
    ViscosityCorrection,
)
from app.services.hydraulics import criteria, flow, friction, pressure_drop
from app.services.hydraulics.geometry import PipeGeometryResolver
from app.services.hydraulics.reference_data import DEFAULT_TABLES, ReferenceTables
from app.utils.conversions import to_si
from app.utils.error_handling import ValidationError

logger = logging.getLogger(__name__)

# API 674 pump constant C by pump type; steady-flow pumps have none
ACCELERATION_CONSTANTS: Dict[PumpTypeEnum, float] = {
    PumpTypeEnum.RECIPROCATING_SIMPLEX: 0.200,
    PumpTypeEnum.RECIPROCATING_DUPLEX: 0.115,
    PumpTypeEnum.RECIPROCATING_TRIPLEX: 0.066,
}

# ANSI/HI 9.6.7 digitised correction table: B, C_eta, C_Q, C_H
HI_CORRECTION_TABLE = np.array([
    [0.0, 1.00, 1.00, 1.00],
    [1.0, 1.00, 1.00, 1.00],
    [2.0, 0.96, 0.99, 0.99],
    [4.0, 0.89, 0.97, 0.98],
    [6.0, 0.85, 0.96, 0.97],
    [8.0, 0.81, 0.95, 0.96],
    [10.0, 0.77, 0.94, 0.95],
    [15.0, 0.69, 0.91, 0.93],
    [20.0, 0.62, 0.89, 0.91],
    [30.0, 0.53, 0.85, 0.88],
    [40.0, 0.45, 0.82, 0.85],
])

# Target velocities for recommended line sizes, m/s
SUCTION_TARGET_VELOCITY = 1.2
DISCHARGE_TARGET_VELOCITY = 2.5

# NPSHa below this margin is flagged
NPSH_WARNING_MARGIN = 3.0


def _gravity(gravity: Optional[float]) -> float:
    return settings.GRAVITY if gravity is None else gravity


def velocity_head(velocity: float, gravity: Optional[float] = None) -> float:
    return velocity ** 2 / (2.0 * _gravity(gravity))


def pressure_head(pressure: float, density: float, gravity: Optional[float] = None) -> float:
    return pressure / (density * _gravity(gravity))


# ---------------------------------------------------------------------------
# One side of the pump
# ---------------------------------------------------------------------------

def side_hydraulics(
    flow_rate: float,
    pipe: PipeSpec,
    density: float,
    viscosity: float,
    k_total: float = 0.0,
    method: str = "swamee-jain",
) -> Dict[str, object]:
    """
    Flow state, friction factor and head losses of one pump line.

    Args:
        flow_rate: Volumetric flow, m³/s
        pipe: Pipe geometry
        density: Liquid density, kg/m³
        viscosity: Dynamic viscosity, Pa·s
        k_total: Sum of fitting K factors
        method: Turbulent friction estimator

    Returns:
        Dictionary with flow, friction, pipe_loss, fitting_loss, total_loss (m)
        and dp_per_km (bar/km)
    """
    state = flow.flow_state(flow_rate, pipe.area, pipe.inside_diameter, density, viscosity)
    friction_result = friction.friction_factor(state.reynolds, pipe.roughness, pipe.inside_diameter, method)
    drop = pressure_drop.pipe_pressure_drop(friction_result.factor, pipe.length, pipe.inside_diameter,
                                            density, state.velocity, k_total=k_total)
    pipe_loss = pressure_drop.head_loss(drop.friction, density)
    fitting_loss = pressure_drop.head_loss(drop.fittings, density)
    return {
        "flow": state,
        "friction": friction_result,
        "pipe_loss": pipe_loss,
        "fitting_loss": fitting_loss,
        "total_loss": pipe_loss + fitting_loss,
        "dp_per_km": pressure_drop.dp_per_km(drop.friction + drop.fittings, pipe.length),
    }


# ---------------------------------------------------------------------------
# Heads
# ---------------------------------------------------------------------------

def total_dynamic_head(
    mode: CalculationModeEnum,
    suction_pressure: float,
    discharge_pressure: float,
    density: float,
    suction_elevation: float,
    discharge_elevation: float,
    suction_loss: float = 0.0,
    discharge_loss: float = 0.0,
    suction_velocity: float = 0.0,
    discharge_velocity: float = 0.0,
    gravity: Optional[float] = None,
) -> HeadBreakdown:
    """
    Total dynamic head as an additive breakdown.

    System mode (sizing between two vessels):
        TDH = (Zd - Zs) + (hfs + hfd) + (Pd - Ps)/ρg, no velocity term.
    Flange mode (rating from flange gauges):
        TDH = (Zd - Zs) + (Pd - Ps)/ρg + (Vd² - Vs²)/2g, no friction term.

    Args:
        mode: Calculation mode
        suction_pressure: Suction vessel / flange pressure, Pa abs
        discharge_pressure: Destination / flange pressure, Pa abs
        density: Liquid density, kg/m³
        suction_elevation: Suction level or gauge elevation, m
        discharge_elevation: Discharge level or gauge elevation, m
        suction_loss: Suction line friction head, m
        discharge_loss: Discharge line friction head, m
        suction_velocity: Suction line velocity, m/s
        discharge_velocity: Discharge line velocity, m/s

    Returns:
        HeadBreakdown whose terms sum to the TDH
    """
    static = discharge_elevation - suction_elevation
    pressure = pressure_head(discharge_pressure - suction_pressure, density, gravity)
    if mode == CalculationModeEnum.FLANGE:
        velocity = velocity_head(discharge_velocity, gravity) - velocity_head(suction_velocity, gravity)
        friction_term = 0.0
    else:
        velocity = 0.0
        friction_term = suction_loss + discharge_loss
    return HeadBreakdown(
        static=static,
        friction=friction_term,
        pressure=pressure,
        velocity=velocity,
        total=math.fsum([static, friction_term, pressure, velocity]),
    )


def npsh_available(
    suction_pressure: float,
    vapor_pressure: float,
    density: float,
    suction_elevation: float,
    suction_loss: float,
    velocity_head: float = 0.0,
    acceleration_head: float = 0.0,
    gravity: Optional[float] = None,
) -> HeadBreakdown:
    """
    NPSHa = (Ps - Pv)/ρg + Zs - hfs + v²/2g - ha

    The velocity head is non-zero only when Ps is a flange reading.

    Args:
        suction_pressure: Pa abs
        vapor_pressure: Pa abs
        density: kg/m³
        suction_elevation: Liquid level above the pump datum, m
        suction_loss: Suction friction head, m
        velocity_head: Suction velocity head, m
        acceleration_head: Reciprocating pump acceleration head, m

    Returns:
        HeadBreakdown whose total is NPSHa
    """
    pressure = pressure_head(suction_pressure - vapor_pressure, density, gravity)
    return HeadBreakdown(
        static=suction_elevation,
        friction=-suction_loss,
        pressure=pressure,
        velocity=velocity_head,
        acceleration=-acceleration_head,
        total=math.fsum([suction_elevation, -suction_loss, pressure, velocity_head, -acceleration_head]),
    )


def acceleration_head(
    suction_length: float,
    suction_velocity: float,
    rpm: float,
    pump_type: PumpTypeEnum,
    k: float = 2.0,
    gravity: Optional[float] = None,
) -> float:
    """API 674 acceleration head ha = L·v·N·C / (K·g); zero for steady-flow pumps."""
    constant = ACCELERATION_CONSTANTS.get(PumpTypeEnum(pump_type), 0.0)
    if constant == 0.0:
        return 0.0
    if k <= 0:
        raise ValidationError(["Liquid compressibility factor K must be positive"])
    return suction_length * suction_velocity * rpm * constant / (k * _gravity(gravity))


def with_acceleration_head(npsh: HeadBreakdown, h_a: float) -> HeadBreakdown:
    """Return a copy of an NPSHa breakdown with the acceleration head deducted."""
    static, friction_term, pressure, velocity = npsh.static, npsh.friction, npsh.pressure, npsh.velocity
    return HeadBreakdown(
        static=static,
        friction=friction_term,
        pressure=pressure,
        velocity=velocity,
        acceleration=-h_a,
        total=math.fsum([static, friction_term, pressure, velocity, -h_a]),
    )


# ---------------------------------------------------------------------------
# Viscosity correction, power, specific speed
# ---------------------------------------------------------------------------

def hi_viscosity_correction(flow_m3h: float, head: float, rpm: float, viscosity_cst: float) -> ViscosityCorrection:
    """
    ANSI/HI 9.6.7 correction factors.

    B = 16.5·ν^0.5·H^0.0625 / (Q^0.375·N^0.25) with Q in m³/h, H in m,
    ν in cSt and N in rpm; the factors are interpolated linearly in B and
    clamped to the last table row above B = 40.

    Returns:
        All factors 1 (B = 0) outside the method's range
    """
    if flow_m3h <= 0 or head <= 0 or rpm <= 0 or viscosity_cst <= 1.0:
        return ViscosityCorrection(parameter_b=0.0, c_q=1.0, c_h=1.0, c_eta=1.0)

    b = 16.5 * viscosity_cst ** 0.5 * head ** 0.0625 / (flow_m3h ** 0.375 * rpm ** 0.25)
    table = HI_CORRECTION_TABLE
    c_eta, c_q, c_h = (float(np.interp(b, table[:, 0], table[:, i])) for i in (1, 2, 3))
    logger.debug(f"HI 9.6.7: B={b:.3f}, C_Q={c_q:.3f}, C_H={c_h:.3f}, C_eta={c_eta:.3f}")
    return ViscosityCorrection(parameter_b=b, c_q=c_q, c_h=c_h, c_eta=c_eta)


def apply_viscosity_correction(head: HeadBreakdown, corrections: ViscosityCorrection) -> float:
    """Water-equivalent head H_w = H_vis / C_H a water-rated pump must deliver."""
    return head.total / corrections.c_h


def pump_power(density: float, flow_rate: float, head: float, pump_efficiency: float = 0.75,
               motor_efficiency: float = 0.95, gravity: Optional[float] = None) -> Dict[str, float]:
    """
    Hydraulic, brake and motor power in kW.

    Efficiencies are fractions.
    """
    hydraulic = density * _gravity(gravity) * flow_rate * head / 1000.0
    brake = hydraulic / pump_efficiency
    return {"hydraulic": hydraulic, "brake": brake, "motor": brake / motor_efficiency}


def specific_speed(rpm: float, flow_rate: float, head: float) -> Optional[float]:
    """Ns = N·√Q / H^0.75, Q in m³/min (from m³/s); None when the head is not positive."""
    if head <= 0:
        return None
    return rpm * math.sqrt(flow_rate * 60.0) / head ** 0.75


def suction_specific_speed(rpm: float, flow_rate: float, npsha: float) -> float:
    """Nss = N·√Q / NPSHa^0.75, Q in m³/min, NPSHa floored at 0.1 m."""
    return rpm * math.sqrt(flow_rate * 60.0) / max(npsha, 0.1) ** 0.75


# ---------------------------------------------------------------------------
# Full calculation
# ---------------------------------------------------------------------------

def _side_pipe(side: PumpSideInput, geometry: PipeGeometryResolver, material: str, roughness: float,
               default_mm: float, errors: List[str], label: str) -> Optional[PipeSpec]:
    length = to_si(side.length.value, "length", side.length.unit)
    if length < 0:
        errors.append(f"{label} pipe length cannot be negative")
        return None
    if side.default_inside_diameter is not None:
        default = to_si(side.default_inside_diameter.value, "length_small", side.default_inside_diameter.unit)
    else:
        default = default_mm / 1000.0
    resolved = geometry.resolve_or_default(side.nominal_size, side.schedule, default)
    return PipeSpec(
        nominal_size=side.nominal_size,
        schedule=side.schedule,
        material=material,
        inside_diameter=resolved.inside_diameter,
        roughness=roughness,
        length=length,
    )


def _side_result(side: PumpSideInput, pipe: PipeSpec, hydraulics: Dict[str, object], flow_rate: float,
                 target_velocity: float, geometry: PipeGeometryResolver,
                 tables: ReferenceTables, warnings: List[str], label: str) -> PumpSideResult:
    checks = []
    if side.service is not None:
        limits = criteria.find_liquid_criteria(side.service, side.nominal_size, tables)
        measured = MeasuredValues(velocity=hydraulics["flow"].velocity, dp_per_km=hydraulics["dp_per_km"])
        checks, side_warnings = criteria.evaluate_with_warnings(side.service, measured, limits)
        warnings.extend(f"{label}: {warning}" for warning in side_warnings)
    return PumpSideResult(
        pipe=pipe,
        checks=checks,
        recommended_nominal_size=geometry.recommend_nominal_size(flow_rate, target_velocity, side.schedule),
        **hydraulics,
    )


def calculate_pump(data: PumpInput, tables: ReferenceTables = DEFAULT_TABLES) -> PumpCalculationResult:
    """
    Run a complete pump calculation.

    Args:
        data: Pump input with units per field
        tables: Reference tables

    Returns:
        Frozen PumpCalculationResult

    Raises:
        InvalidUnitError, UnknownGeometryError, InvalidFlowError, ValidationError
    """
    errors: List[str] = []
    flow_rate = to_si(data.flow_rate.value, "flow_rate", data.flow_rate.unit)
    density = to_si(data.density.value, "density", data.density.unit)
    viscosity = to_si(data.viscosity.value, "viscosity", data.viscosity.unit)
    vapor_pressure = to_si(data.vapor_pressure.value, "pressure", data.vapor_pressure.unit)
    suction_pressure = to_si(data.suction.pressure.value, "pressure", data.suction.pressure.unit)
    discharge_pressure = to_si(data.discharge.pressure.value, "pressure", data.discharge.pressure.unit)
    suction_elevation = to_si(data.suction.static_head.value, "head", data.suction.static_head.unit)
    discharge_elevation = to_si(data.discharge.static_head.value, "head", data.discharge.static_head.unit)

    if flow_rate <= 0:
        errors.append("Flow rate must be positive")
    if density <= 0:
        errors.append("Density must be positive")
    if viscosity <= 0:
        errors.append("Viscosity must be positive")
    if vapor_pressure < 0:
        errors.append("Vapor pressure cannot be negative")
    if suction_pressure < 0 or discharge_pressure < 0:
        errors.append("Pressures must be above absolute zero")
    if data.rpm <= 0:
        errors.append("Pump speed must be positive")
    if not 0 < data.pump_efficiency <= 100 or not 0 < data.motor_efficiency <= 100:
        errors.append("Efficiencies must be between 0 and 100 %")

    k_totals = {}
    for label, side in (("Suction", data.suction), ("Discharge", data.discharge)):
        try:
            k_totals[label] = pressure_drop.fitting_k_total(side.fittings, tables)
        except ValidationError as e:
            errors.extend(f"{label}: {message}" for message in e.errors)

    geometry = PipeGeometryResolver(tables)
    custom = None
    if data.custom_roughness is not None:
        custom = to_si(data.custom_roughness.value, "length_small", data.custom_roughness.unit)
    if data.material == "Custom" and (custom is None or custom < 0):
        errors.append("Custom material requires a non-negative roughness")
        roughness = 0.0
    else:
        roughness = geometry.roughness(data.material, custom)
    suction_pipe = _side_pipe(data.suction, geometry, data.material, roughness,
                              settings.DEFAULT_SUCTION_DIAMETER_MM, errors, "Suction")
    discharge_pipe = _side_pipe(data.discharge, geometry, data.material, roughness,
                                settings.DEFAULT_DISCHARGE_DIAMETER_MM, errors, "Discharge")
    if errors:
        logger.warning(f"Pump input rejected: {errors}")
        raise ValidationError(errors)

    suction = side_hydraulics(flow_rate, suction_pipe, density, viscosity, k_totals["Suction"], data.friction_method)
    discharge = side_hydraulics(flow_rate, discharge_pipe, density, viscosity, k_totals["Discharge"],
                                data.friction_method)

    head = total_dynamic_head(
        data.mode, suction_pressure, discharge_pressure, density, suction_elevation, discharge_elevation,
        suction_loss=suction["total_loss"], discharge_loss=discharge["total_loss"],
        suction_velocity=suction["flow"].velocity, discharge_velocity=discharge["flow"].velocity,
    )

    if data.mode == CalculationModeEnum.FLANGE:
        # Flange pressure already reflects the suction line; the gauge sits at the datum
        npsh = npsh_available(suction_pressure, vapor_pressure, density, 0.0, 0.0,
                              velocity_head=velocity_head(suction["flow"].velocity))
    else:
        npsh = npsh_available(suction_pressure, vapor_pressure, density, suction_elevation, suction["total_loss"])
    h_a = 0.0
    if data.pump_type.is_reciprocating:
        h_a = acceleration_head(suction_pipe.length, suction["flow"].velocity, data.rpm, data.pump_type,
                                data.liquid_compressibility_factor)
        npsh = with_acceleration_head(npsh, h_a)

    correction = None
    water_head = None
    viscosity_cst = viscosity / density * 1e6
    if data.viscosity_correction and viscosity_cst > 1.0:
        correction = hi_viscosity_correction(flow_rate * 3600.0, head.total or 10.0, data.rpm, viscosity_cst)
        water_head = apply_viscosity_correction(head, correction)

    power = pump_power(density, flow_rate, head.total, data.pump_efficiency / 100.0, data.motor_efficiency / 100.0)

    warnings: List[str] = []
    if npsh.total < NPSH_WARNING_MARGIN:
        warnings.append(f"NPSH available is low: {npsh.total:.2f} m < {NPSH_WARNING_MARGIN:g} m")
    if head.total <= 0:
        warnings.append("Total dynamic head is not positive; no pump is required for this duty")
    for label, pipe in (("Suction", suction_pipe), ("Discharge", discharge_pipe)):
        if pipe.nominal_size not in tables.pipe_schedules or \
                pipe.schedule not in tables.pipe_schedules[pipe.nominal_size]:
            warnings.append(f"{label}: {pipe.nominal_size}\" Sch {pipe.schedule} not tabulated; "
                            f"default inside diameter used")

    suction_result = _side_result(data.suction, suction_pipe, suction, flow_rate, SUCTION_TARGET_VELOCITY,
                                  geometry, tables, warnings, "Suction")
    discharge_result = _side_result(data.discharge, discharge_pipe, discharge, flow_rate,
                                    DISCHARGE_TARGET_VELOCITY, geometry, tables, warnings, "Discharge")

    result = PumpCalculationResult(
        mode=data.mode,
        pump_type=data.pump_type,
        suction=suction_result,
        discharge=discharge_result,
        head=head,
        npsh=npsh,
        hydraulic_power=power["hydraulic"],
        brake_power=power["brake"],
        motor_power=power["motor"],
        specific_speed=specific_speed(data.rpm, flow_rate, head.total),
        suction_specific_speed=suction_specific_speed(data.rpm, flow_rate, npsh.total),
        viscosity_correction=correction,
        water_equivalent_head=water_head,
        warnings=warnings,
    )
    logger.debug(f"Pump: TDH={head.total:.2f} m, NPSHa={npsh.total:.2f} m, h_a={h_a:.3f} m")
    return result
