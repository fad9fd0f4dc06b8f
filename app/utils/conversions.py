# app/utils/conversions.py
"""
Unit normalisation for every engine input.

All quantities are stored in SI inside the engine. Each quantity kind maps a
unit symbol to an affine transform ``si = value * scale + offset``; every
kind except temperature (and gauge pressures) has ``offset == 0``. Factors
are exact definitions (international foot / pound, standard gravity, IT BTU)
so a round trip through ``to_si`` / ``from_si`` only loses float precision.
"""
import logging
from types import MappingProxyType
from typing import Dict, List, Mapping, Tuple

from app.utils.error_handling import InvalidUnitError

logger = logging.getLogger(__name__)

# Exact base definitions
FOOT = 0.3048                      # m
INCH = 0.0254                      # m
MILE = 1609.344                    # m
POUND = 0.45359237                 # kg
US_GALLON = 3.785411784e-3         # m³
BARREL = 0.158987294928            # m³ (42 US gal)
STANDARD_GRAVITY = 9.80665         # m/s²
BTU = 1055.05585262                # J (International Table)
HORSEPOWER = 745.69987158227022    # W (mechanical)
STANDARD_ATMOSPHERE = 101325.0     # Pa
RANKINE = 5.0 / 9.0                # K per °F / °R

CUBIC_FOOT = FOOT ** 3
PSI = POUND * STANDARD_GRAVITY / INCH ** 2

QUANTITY_KINDS = (
    "length",
    "length_small",
    "area",
    "flow_rate",
    "mass_flow_rate",
    "density",
    "viscosity",
    "pressure",
    "temperature",
    "velocity",
    "head",
    "power",
    "specific_heat",
    "thermal_conductivity",
    "fouling_resistance",
)

# quantity kind -> unit -> (scale, offset)
_UNIT_TABLE: Dict[str, Dict[str, Tuple[float, float]]] = {
    "length": {
        "m": (1.0, 0.0),
        "km": (1000.0, 0.0),
        "cm": (0.01, 0.0),
        "mm": (0.001, 0.0),
        "ft": (FOOT, 0.0),
        "in": (INCH, 0.0),
        "yd": (3 * FOOT, 0.0),
        "mi": (MILE, 0.0),
    },
    "length_small": {
        "mm": (0.001, 0.0),
        "μm": (1e-6, 0.0),
        "cm": (0.01, 0.0),
        "m": (1.0, 0.0),
        "in": (INCH, 0.0),
        "mil": (INCH / 1000.0, 0.0),
    },
    "area": {
        "m²": (1.0, 0.0),
        "cm²": (1e-4, 0.0),
        "mm²": (1e-6, 0.0),
        "ft²": (FOOT ** 2, 0.0),
        "in²": (INCH ** 2, 0.0),
    },
    "flow_rate": {
        "m³/s": (1.0, 0.0),
        "m³/h": (1.0 / 3600.0, 0.0),
        "m³/d": (1.0 / 86400.0, 0.0),
        "L/s": (1e-3, 0.0),
        "L/min": (1e-3 / 60.0, 0.0),
        "gpm": (US_GALLON / 60.0, 0.0),
        "bbl/d": (BARREL / 86400.0, 0.0),
        "ft³/s": (CUBIC_FOOT, 0.0),
        "ft³/min": (CUBIC_FOOT / 60.0, 0.0),
        # Standard-volume gas rates; referred to base conditions, not actual
        "Nm³/h": (1.0 / 3600.0, 0.0),
        "Sm³/h": (1.0 / 3600.0, 0.0),
        "SCFM": (CUBIC_FOOT / 60.0, 0.0),
        "MSCFD": (1e3 * CUBIC_FOOT / 86400.0, 0.0),
        "MMSCFD": (1e6 * CUBIC_FOOT / 86400.0, 0.0),
    },
    "mass_flow_rate": {
        "kg/s": (1.0, 0.0),
        "kg/h": (1.0 / 3600.0, 0.0),
        "t/h": (1000.0 / 3600.0, 0.0),
        "lb/s": (POUND, 0.0),
        "lb/h": (POUND / 3600.0, 0.0),
    },
    "density": {
        "kg/m³": (1.0, 0.0),
        "g/cm³": (1000.0, 0.0),
        "lb/ft³": (POUND / CUBIC_FOOT, 0.0),
        "lb/gal": (POUND / US_GALLON, 0.0),
        "SG": (1000.0, 0.0),
    },
    "viscosity": {
        "Pa·s": (1.0, 0.0),
        "mPa·s": (1e-3, 0.0),
        "cP": (1e-3, 0.0),
        "P": (0.1, 0.0),
        "lb/(ft·s)": (POUND / FOOT, 0.0),
    },
    "pressure": {
        "Pa": (1.0, 0.0),
        "kPa": (1e3, 0.0),
        "MPa": (1e6, 0.0),
        "bar": (1e5, 0.0),
        "bara": (1e5, 0.0),
        "mbar": (100.0, 0.0),
        "psi": (PSI, 0.0),
        "psia": (PSI, 0.0),
        "atm": (STANDARD_ATMOSPHERE, 0.0),
        "kgf/cm²": (STANDARD_GRAVITY * 1e4, 0.0),
        "mmHg": (STANDARD_ATMOSPHERE / 760.0, 0.0),
        "inHg": (STANDARD_ATMOSPHERE / 760.0 * 25.4, 0.0),
        # Gauge units are referenced to one standard atmosphere
        "kPag": (1e3, STANDARD_ATMOSPHERE),
        "barg": (1e5, STANDARD_ATMOSPHERE),
        "psig": (PSI, STANDARD_ATMOSPHERE),
    },
    "temperature": {
        "K": (1.0, 0.0),
        "°C": (1.0, 273.15),
        "°F": (RANKINE, 459.67 * RANKINE),
        "°R": (RANKINE, 0.0),
    },
    "velocity": {
        "m/s": (1.0, 0.0),
        "km/h": (1.0 / 3.6, 0.0),
        "ft/s": (FOOT, 0.0),
        "ft/min": (FOOT / 60.0, 0.0),
    },
    "head": {
        "m": (1.0, 0.0),
        "ft": (FOOT, 0.0),
        "in": (INCH, 0.0),
    },
    "power": {
        "W": (1.0, 0.0),
        "kW": (1e3, 0.0),
        "MW": (1e6, 0.0),
        "hp": (HORSEPOWER, 0.0),
        "BTU/h": (BTU / 3600.0, 0.0),
    },
    "specific_heat": {
        "J/(kg·K)": (1.0, 0.0),
        "kJ/(kg·K)": (1e3, 0.0),
        "BTU/(lb·°F)": (BTU / (POUND * RANKINE), 0.0),
    },
    "thermal_conductivity": {
        "W/(m·K)": (1.0, 0.0),
        "BTU/(h·ft·°F)": (BTU / 3600.0 / (FOOT * RANKINE), 0.0),
    },
    "fouling_resistance": {
        "m²·K/W": (1.0, 0.0),
        "h·ft²·°F/BTU": (FOOT ** 2 * RANKINE / (BTU / 3600.0), 0.0),
    },
}


def _ascii_symbol(unit: str) -> str:
    """ASCII spelling of a unit symbol, e.g. 'm³/h' -> 'm3/h', 'Pa·s' -> 'Pa.s'."""
    return (
        unit.replace("³", "3")
        .replace("²", "2")
        .replace("·", ".")
        .replace("μ", "u")
        .replace("°", "deg")
    )


def _build_registry() -> Mapping[str, Mapping[str, Tuple[float, float]]]:
    registry = {}
    for kind, units in _UNIT_TABLE.items():
        entries = dict(units)
        for unit, transform in units.items():
            entries.setdefault(_ascii_symbol(unit), transform)
        registry[kind] = MappingProxyType(entries)
    return MappingProxyType(registry)


UNIT_REGISTRY = _build_registry()


def _lookup(quantity_kind: str, unit: str) -> Tuple[float, float]:
    units = UNIT_REGISTRY.get(quantity_kind)
    if units is None:
        raise InvalidUnitError(
            f"Unknown quantity kind '{quantity_kind}'",
            details={"quantity_kind": quantity_kind},
        )
    transform = units.get(unit)
    if transform is None:
        raise InvalidUnitError(
            f"Unit '{unit}' is not registered for {quantity_kind}",
            details={"quantity_kind": quantity_kind, "unit": unit, "available": available_units(quantity_kind)},
        )
    return transform


def to_si(value: float, quantity_kind: str, source_unit: str) -> float:
    """
    Convert a value expressed in ``source_unit`` to the SI base unit of ``quantity_kind``.

    Args:
        value: Numeric value in the source unit
        quantity_kind: One of QUANTITY_KINDS
        source_unit: Unit symbol (unicode or ASCII spelling)

    Returns:
        Value in SI units (m, m², m³/s, kg/s, kg/m³, Pa·s, Pa, K, m/s, W, ...)

    Raises:
        InvalidUnitError: If the unit is not registered for the kind
    """
    scale, offset = _lookup(quantity_kind, source_unit)
    return value * scale + offset


def from_si(value: float, quantity_kind: str, target_unit: str) -> float:
    """Inverse of :func:`to_si`."""
    scale, offset = _lookup(quantity_kind, target_unit)
    return (value - offset) / scale


def convert(value: float, quantity_kind: str, source_unit: str, target_unit: str) -> float:
    """Convert between two units of the same kind through SI (Kelvin pivot for temperature)."""
    if source_unit == target_unit:
        _lookup(quantity_kind, source_unit)
        return value
    return from_si(to_si(value, quantity_kind, source_unit), quantity_kind, target_unit)


def available_units(quantity_kind: str) -> List[str]:
    """Canonical unit symbols registered for a quantity kind (ASCII aliases excluded)."""
    if quantity_kind not in _UNIT_TABLE:
        raise InvalidUnitError(
            f"Unknown quantity kind '{quantity_kind}'",
            details={"quantity_kind": quantity_kind},
        )
    return list(_UNIT_TABLE[quantity_kind].keys())


def is_gauge_unit(unit: str) -> bool:
    """True for pressure units referenced to atmosphere (barg, psig, kPag)."""
    return unit in ("barg", "psig", "kPag")


def same_unit(first: str, second: str) -> bool:
    """True when two symbols name the same unit, e.g. 'Nm³/h' and 'Nm3/h'."""
    return _ascii_symbol(first) == _ascii_symbol(second)
