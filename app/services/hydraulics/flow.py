# app/services/hydraulics/flow.py
"""
Flow properties: velocity, Reynolds number, regime and the gas / mixed-phase
helpers needed to get there.

All inputs and outputs are SI.
"""
import logging
import math
from typing import Dict, Optional

from app.core.config import settings
from app.schemas.hydraulics import FlowRegimeEnum, FlowState
from app.utils.conversions import FOOT, POUND
from app.utils.error_handling import InvalidFlowError

logger = logging.getLogger(__name__)

UNIVERSAL_GAS_CONSTANT = 8314.0  # J/(kmol·K)
LB_FT3 = POUND / FOOT ** 3       # kg/m³ per lb/ft³


def _require_positive(**values: float) -> None:
    for name, value in values.items():
        if value is None or not math.isfinite(value) or value <= 0:
            raise InvalidFlowError(
                f"{name.replace('_', ' ').capitalize()} must be positive, got {value}",
                details={name: value},
            )


def velocity(flow_rate: float, area: float) -> float:
    """Mean velocity (m/s) from volumetric flow (m³/s) and flow area (m²)."""
    _require_positive(flow_rate=flow_rate, area=area)
    return flow_rate / area


def reynolds(density: float, flow_velocity: float, diameter: float, viscosity: float) -> float:
    """Reynolds number ρvD/μ."""
    _require_positive(density=density, velocity=flow_velocity, diameter=diameter, viscosity=viscosity)
    return density * flow_velocity * diameter / viscosity


def classify_regime(reynolds_number: float) -> FlowRegimeEnum:
    """Laminar below 2300, transition up to 4000, turbulent from 4000."""
    return FlowRegimeEnum.from_reynolds(reynolds_number)


def flow_state(flow_rate: float, area: float, diameter: float, density: float, viscosity: float) -> FlowState:
    """
    Build the flow state for one pipe.

    Raises:
        InvalidFlowError: For non-positive flow, area, diameter, density or viscosity
    """
    v = velocity(flow_rate, area)
    re = reynolds(density, v, diameter, viscosity)
    state = FlowState(flow_rate=flow_rate, velocity=v, reynolds=re)
    logger.debug(f"Flow state: Q={flow_rate:.6g} m³/s, v={v:.4g} m/s, Re={re:.4g} ({state.regime.value})")
    return state


# ---------------------------------------------------------------------------
# Gas helpers
# ---------------------------------------------------------------------------

def gas_density(pressure: float, molecular_weight: float, compressibility: float, temperature: float) -> float:
    """Real-gas density ρ = P·MW / (Z·R·T), kg/m³ (P in Pa abs, T in K)."""
    _require_positive(
        pressure=pressure,
        molecular_weight=molecular_weight,
        compressibility=compressibility,
        temperature=temperature,
    )
    return pressure * molecular_weight / (compressibility * UNIVERSAL_GAS_CONSTANT * temperature)


def actual_gas_flow(
    standard_flow: float,
    standard_pressure: float,
    operating_pressure: float,
    standard_temperature: float,
    operating_temperature: float,
    compressibility: float = 1.0,
) -> float:
    """Convert a standard-volume gas rate to actual rate at operating conditions."""
    _require_positive(
        standard_flow=standard_flow,
        operating_pressure=operating_pressure,
        standard_temperature=standard_temperature,
        compressibility=compressibility,
    )
    return standard_flow * (standard_pressure / operating_pressure) * (operating_temperature / standard_temperature) * compressibility


def speed_of_sound(temperature: float, molecular_weight: float, specific_heat_ratio: float = 1.3,
                   compressibility: float = 1.0) -> float:
    """Speed of sound in a real gas, c = sqrt(k·Z·R·T/MW), m/s."""
    _require_positive(temperature=temperature, molecular_weight=molecular_weight,
                      specific_heat_ratio=specific_heat_ratio, compressibility=compressibility)
    return math.sqrt(specific_heat_ratio * compressibility * UNIVERSAL_GAS_CONSTANT * temperature / molecular_weight)


def mach_number(flow_velocity: float, sound_speed: float) -> float:
    _require_positive(speed_of_sound=sound_speed)
    return flow_velocity / sound_speed


def erosional_velocity(density: float, c_factor: Optional[float] = None) -> float:
    """
    API RP 14E erosional velocity Ve = C / sqrt(ρ), m/s.

    C is in the customary ft/s·(lb/ft³)^0.5, so density is taken to lb/ft³
    and the result brought back to m/s.
    """
    if c_factor is None:
        c_factor = settings.EROSIONAL_C_FACTOR
    _require_positive(density=density, c_factor=c_factor)
    return c_factor / math.sqrt(density / LB_FT3) * FOOT


def momentum_flux(density: float, flow_velocity: float) -> float:
    """ρv², kg/(m·s²)."""
    return density * flow_velocity ** 2


# ---------------------------------------------------------------------------
# Mixed phase (homogeneous, no slip)
# ---------------------------------------------------------------------------

def mixture_properties(
    gas_flow: float,
    gas_density_value: float,
    gas_viscosity: float,
    liquid_flow: float,
    liquid_density: float,
    liquid_viscosity: float,
) -> Dict[str, float]:
    """
    Homogeneous no-slip mixture.

    Density and viscosity are weighted by the liquid volume fraction
    λ = Q_L / (Q_L + Q_G).

    Returns:
        Dictionary with flow_rate (m³/s), density, viscosity and liquid_fraction

    Raises:
        InvalidFlowError: If both phases are empty or a property is non-positive
    """
    if gas_flow < 0 or liquid_flow < 0:
        raise InvalidFlowError("Phase flow rates cannot be negative",
                               details={"gas_flow": gas_flow, "liquid_flow": liquid_flow})
    total = gas_flow + liquid_flow
    _require_positive(total_flow_rate=total)
    _require_positive(gas_density=gas_density_value, gas_viscosity=gas_viscosity,
                      liquid_density=liquid_density, liquid_viscosity=liquid_viscosity)

    fraction = liquid_flow / total
    density = fraction * liquid_density + (1.0 - fraction) * gas_density_value
    viscosity = fraction * liquid_viscosity + (1.0 - fraction) * gas_viscosity
    logger.debug(f"Mixture: λL={fraction:.4f}, ρm={density:.4g} kg/m³, μm={viscosity:.4g} Pa·s")
    return {
        "flow_rate": total,
        "density": density,
        "viscosity": viscosity,
        "liquid_fraction": fraction,
    }
