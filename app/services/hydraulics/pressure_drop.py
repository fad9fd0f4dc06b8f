# app/services/hydraulics/pressure_drop.py
"""
Pipe pressure drop: Darcy-Weisbach friction, fitting K-factor losses,
static elevation and the metric gas transmission equations.

All functions work in SI (Pa, m, kg/m³, m/s) unless stated otherwise.
"""
import logging
import math
from typing import Dict, List, Mapping, Optional

from app.core.config import settings
from app.schemas.hydraulics import GasTransmissionResult, PressureDropResult
from app.services.hydraulics.reference_data import DEFAULT_TABLES, ReferenceTables
from app.utils.error_handling import InvalidFlowError, ValidationError

logger = logging.getLogger(__name__)

BAR = 1e5


def velocity_pressure(density: float, velocity: float) -> float:
    """Dynamic pressure ρv²/2, Pa."""
    return density * velocity ** 2 / 2.0


def darcy_weisbach(friction_factor: float, length: float, diameter: float, density: float, velocity: float) -> float:
    """Straight-pipe friction loss ΔP = f·(L/D)·ρv²/2, Pa."""
    if diameter <= 0:
        raise InvalidFlowError(f"Diameter must be positive, got {diameter}", details={"diameter": diameter})
    return friction_factor * (length / diameter) * velocity_pressure(density, velocity)


def fitting_k_total(fittings: Mapping[str, int], tables: ReferenceTables = DEFAULT_TABLES) -> float:
    """
    Sum of K·count over the fittings in a line.

    Raises:
        ValidationError: Listing every unknown fitting key and negative count
    """
    errors: List[str] = []
    total = 0.0
    for key, count in fittings.items():
        entry = tables.fittings.get(key)
        if entry is None:
            errors.append(f"Unknown fitting '{key}'")
            continue
        if count < 0:
            errors.append(f"Fitting count for '{key}' cannot be negative")
            continue
        total += entry[1] * count
    if errors:
        raise ValidationError(errors)
    return total


def fitting_pressure_drop(k_total: float, density: float, velocity: float) -> float:
    """Fitting loss ΣK·ρv²/2, Pa."""
    return k_total * velocity_pressure(density, velocity)


def elevation_pressure_drop(density: float, elevation_change: float, gravity: Optional[float] = None) -> float:
    """Static head ρ·g·Δz, Pa. Positive when the outlet is above the inlet."""
    if gravity is None:
        gravity = settings.GRAVITY
    return density * gravity * elevation_change


def pipe_pressure_drop(
    friction_factor: float,
    length: float,
    diameter: float,
    density: float,
    velocity: float,
    k_total: float = 0.0,
    elevation_change: float = 0.0,
) -> PressureDropResult:
    """
    Total pipe pressure drop with its additive breakdown.

    Returns:
        PressureDropResult whose friction, fittings and elevation terms sum to total
    """
    friction = darcy_weisbach(friction_factor, length, diameter, density, velocity)
    fittings = fitting_pressure_drop(k_total, density, velocity)
    elevation = elevation_pressure_drop(density, elevation_change)
    total = math.fsum([friction, fittings, elevation])
    logger.debug(f"Pressure drop: friction={friction:.2f} Pa, fittings={fittings:.2f} Pa, "
                 f"elevation={elevation:.2f} Pa, total={total:.2f} Pa")
    return PressureDropResult(friction=friction, fittings=fittings, elevation=elevation, total=total)


def head_loss(pressure_drop: float, density: float, gravity: Optional[float] = None) -> float:
    """Convert a pressure drop (Pa) to fluid head (m)."""
    if gravity is None:
        gravity = settings.GRAVITY
    if density <= 0:
        raise InvalidFlowError(f"Density must be positive, got {density}", details={"density": density})
    return pressure_drop / (density * gravity)


def dp_per_km(pressure_drop: float, length: float) -> float:
    """Pressure gradient in bar/km; 0 for a zero-length line."""
    if length <= 0:
        return 0.0
    return (pressure_drop / BAR) / (length / 1000.0)


# ---------------------------------------------------------------------------
# Gas transmission equations (metric form: Q m³/d, P kPa, L km, T K, D mm)
# ---------------------------------------------------------------------------

# Q = C·(Tb/Pb)^a·[(P1² - P2²)/(G^g·T·L·Z)]^e·D^d with pipeline efficiency 1
# name -> (C, a, e, g, d)
GAS_TRANSMISSION_EQUATIONS: Dict[str, tuple] = {
    "weymouth": (3.7435e-3, 1.0, 0.5, 1.0, 2.667),
    "panhandle_a": (4.5965e-3, 1.0788, 0.5394, 0.8539, 2.6182),
    "panhandle_b": (1.002e-2, 1.02, 0.51, 0.961, 2.53),
}


def gas_transmission(
    equation: str,
    flow_rate: float,
    inlet_pressure: float,
    length: float,
    diameter: float,
    temperature: float,
    specific_gravity: float,
    compressibility: float = 1.0,
    base_pressure: float = 101325.0,
    base_temperature: float = 288.15,
) -> GasTransmissionResult:
    """
    Pressure drop of a gas transmission line from a Weymouth / Panhandle equation.

    Args:
        equation: "weymouth", "panhandle_a" or "panhandle_b"
        flow_rate: Gas rate at base conditions, m³/s
        inlet_pressure: Inlet pressure, Pa abs
        length: Line length, m
        diameter: Inside diameter, m
        temperature: Average flowing temperature, K
        specific_gravity: Gas gravity (air = 1)
        compressibility: Average Z
        base_pressure: Base pressure, Pa abs
        base_temperature: Base temperature, K

    Returns:
        GasTransmissionResult; when P2² would be negative the line is choked
        and the drop equals the inlet pressure.
    """
    if equation not in GAS_TRANSMISSION_EQUATIONS:
        raise ValidationError([f"Unknown gas transmission equation '{equation}'"])

    errors = []
    for name, value in (("Flow rate", flow_rate), ("Inlet pressure", inlet_pressure), ("Length", length),
                        ("Diameter", diameter), ("Temperature", temperature),
                        ("Specific gravity", specific_gravity), ("Compressibility factor", compressibility),
                        ("Base pressure", base_pressure), ("Base temperature", base_temperature)):
        if value <= 0:
            errors.append(f"{name} must be positive")
    if errors:
        raise ValidationError(errors)

    coefficient, base_exp, flow_exp, sg_exp, d_exp = GAS_TRANSMISSION_EQUATIONS[equation]
    q_m3d = flow_rate * 86400.0
    p1_kpa = inlet_pressure / 1000.0
    c = coefficient * (base_temperature / (base_pressure / 1000.0)) ** base_exp * (diameter * 1000.0) ** d_exp
    p1sq_minus_p2sq = (q_m3d / c) ** (1.0 / flow_exp) * specific_gravity ** sg_exp \
        * (length / 1000.0) * temperature * compressibility

    p2sq = p1_kpa ** 2 - p1sq_minus_p2sq
    if p2sq <= 0:
        logger.warning(f"{equation}: flow exceeds line capacity, outlet pressure would be negative")
        return GasTransmissionResult(equation=equation, pressure_drop=inlet_pressure,
                                     outlet_pressure=0.0, choked=True)

    p2_kpa = math.sqrt(p2sq)
    return GasTransmissionResult(
        equation=equation,
        pressure_drop=(p1_kpa - p2_kpa) * 1000.0,
        outlet_pressure=p2_kpa * 1000.0,
    )


def weymouth(**kwargs) -> GasTransmissionResult:
    return gas_transmission("weymouth", **kwargs)


def panhandle_a(**kwargs) -> GasTransmissionResult:
    return gas_transmission("panhandle_a", **kwargs)


def panhandle_b(**kwargs) -> GasTransmissionResult:
    return gas_transmission("panhandle_b", **kwargs)
