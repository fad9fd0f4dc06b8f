# app/services/hydraulics/criteria.py
"""
Service criteria: look up API RP 14E limits and compare measured values.
"""
import logging
import math
from typing import List, Optional, Tuple

from app.schemas.hydraulics import CriteriaLimit, CriterionCheck, MeasuredValues, VerdictEnum
from app.services.hydraulics.geometry import parse_nominal_size
from app.services.hydraulics.reference_data import DEFAULT_TABLES, LIQUID_VELOCITY_BANDS, ReferenceTables
from app.utils.error_handling import ValidationError

logger = logging.getLogger(__name__)

# (field on MeasuredValues / CriteriaLimit, label, unit)
CRITERIA = (
    ("velocity", "Velocity", "m/s"),
    ("rho_v2", "Momentum (ρv²)", "kg/(m·s²)"),
    ("mach", "Mach number", ""),
    ("dp_per_km", "Pressure gradient", "bar/km"),
)

# Inclusive upper bound (in) of each liquid velocity band, smallest first
BAND_UPPER_BOUNDS = (2.0, 6.0, 12.0, 18.0)

# Gas pressure range label -> (low, high) in barg, both inclusive
PRESSURE_RANGE_BOUNDS = {
    "Vacuum": (-math.inf, 0.0),
    "Atm to 2 barg": (0.0, 2.0),
    "2 to 7 barg": (2.0, 7.0),
    "7 to 35 barg": (7.0, 35.0),
    "35 to 140 barg": (35.0, 140.0),
    "Above 140 barg": (140.0, math.inf),
    "Above 35 barg": (35.0, math.inf),
    "Below 35 barg": (-math.inf, 35.0),
    "35 barg and above": (35.0, math.inf),
    "All": (-math.inf, math.inf),
}


def _fmt(value: float) -> str:
    return f"{round(value, 3):g}"


def liquid_velocity_band(nominal_size_in: float) -> str:
    """Velocity band for a nominal size in inches; the smallest band whose upper bound holds it."""
    for band, upper in zip(LIQUID_VELOCITY_BANDS, BAND_UPPER_BOUNDS):
        if nominal_size_in <= upper:
            return band
    return LIQUID_VELOCITY_BANDS[-1]


def liquid_velocity_limit(bands: Tuple[float, ...], nominal_size_in: float) -> float:
    """Velocity limit (m/s) from a service's per-band limits."""
    return bands[LIQUID_VELOCITY_BANDS.index(liquid_velocity_band(nominal_size_in))]


def evaluate(service_type: str, measured: MeasuredValues, limits: CriteriaLimit) -> List[CriterionCheck]:
    """Compare measured values against limits; see :func:`evaluate_with_warnings`."""
    checks, _ = evaluate_with_warnings(service_type, measured, limits)
    return checks


def evaluate_with_warnings(
    service_type: str, measured: MeasuredValues, limits: CriteriaLimit
) -> Tuple[List[CriterionCheck], List[str]]:
    """
    Evaluate every criterion for a service.

    A criterion without a limit (or without a measured value) is not
    applicable. A measured value strictly above its limit fails and adds a
    warning; anything else passes.

    Returns:
        Tuple of (checks, warnings)
    """
    checks: List[CriterionCheck] = []
    warnings: List[str] = []
    for field, label, unit in CRITERIA:
        value = getattr(measured, field)
        limit = getattr(limits, field)
        if limit is None or value is None:
            verdict = VerdictEnum.NOT_APPLICABLE
        elif value > limit:
            verdict = VerdictEnum.FAIL
            warnings.append(f"{label} exceeds limit: {_fmt(value)} > {_fmt(limit)} {unit}".rstrip())
        else:
            verdict = VerdictEnum.PASS
        checks.append(CriterionCheck(name=label, value=value, limit=limit, unit=unit, verdict=verdict))

    failed = sum(1 for check in checks if check.verdict == VerdictEnum.FAIL)
    logger.debug(f"Criteria for '{service_type}': {failed} of {len(checks)} failed")
    return checks, warnings


def select_gas_pressure_range(service: str, pressure_barg: float,
                              tables: ReferenceTables = DEFAULT_TABLES) -> Optional[str]:
    """First pressure range listed for a gas service that contains the operating pressure."""
    for row_service, pressure_range, *_ in tables.gas_criteria:
        if row_service != service:
            continue
        low, high = PRESSURE_RANGE_BOUNDS.get(pressure_range, (-math.inf, math.inf))
        if low <= pressure_barg <= high:
            return pressure_range
    return None


def find_gas_criteria(service: str, pressure_range: Optional[str] = None,
                      tables: ReferenceTables = DEFAULT_TABLES) -> CriteriaLimit:
    """
    Gas service limits for a service / pressure range.

    The pressure range may be omitted when the service has a single row.

    Raises:
        ValidationError: Unknown service, or an ambiguous / unknown pressure range
    """
    rows = [row for row in tables.gas_criteria if row[0] == service]
    if not rows:
        raise ValidationError([f"Unknown gas service '{service}'"])
    if pressure_range is None:
        if len(rows) > 1:
            raise ValidationError(
                [f"Gas service '{service}' needs a pressure range"],
                details={"available": [row[1] for row in rows]},
            )
        row = rows[0]
    else:
        matches = [row for row in rows if row[1] == pressure_range]
        if not matches:
            raise ValidationError(
                [f"Pressure range '{pressure_range}' is not defined for gas service '{service}'"],
                details={"available": [row[1] for row in rows]},
            )
        row = matches[0]
    _, _, dp_limit, velocity_limit, rho_v2_limit, mach_limit = row
    return CriteriaLimit(service=service, velocity=velocity_limit, rho_v2=rho_v2_limit,
                         mach=mach_limit, dp_per_km=dp_limit)


def find_liquid_criteria(service: str, nominal_size: str,
                         tables: ReferenceTables = DEFAULT_TABLES) -> CriteriaLimit:
    """
    Liquid service limits; the velocity limit comes from the nominal size band.

    Raises:
        ValidationError: Unknown service
    """
    entry = tables.liquid_criteria.get(service)
    if entry is None:
        raise ValidationError([f"Unknown liquid service '{service}'"])
    dp_limit, bands = entry
    return CriteriaLimit(
        service=service,
        velocity=liquid_velocity_limit(bands, parse_nominal_size(nominal_size)),
        dp_per_km=dp_limit,
    )


def find_mixed_criteria(service: str, tables: ReferenceTables = DEFAULT_TABLES) -> CriteriaLimit:
    """
    Mixed-phase service limits (ρv² and Mach only).

    Raises:
        ValidationError: Unknown service
    """
    entry = tables.mixed_criteria.get(service)
    if entry is None:
        raise ValidationError([f"Unknown mixed-phase service '{service}'"])
    rho_v2_limit, mach_limit = entry
    return CriteriaLimit(service=service, rho_v2=rho_v2_limit, mach=mach_limit)


def list_services(line_type: str, tables: ReferenceTables = DEFAULT_TABLES) -> List[dict]:
    """Service names (and gas pressure ranges) available for a line type."""
    if line_type == "gas":
        return [{"service": row[0], "pressure_range": row[1]} for row in tables.gas_criteria]
    if line_type == "liquid":
        return [{"service": name, "velocity_bands": dict(zip(LIQUID_VELOCITY_BANDS, bands)), "dp_per_km": dp}
                for name, (dp, bands) in tables.liquid_criteria.items()]
    if line_type == "mixed":
        return [{"service": name, "rho_v2": rho_v2, "mach": mach}
                for name, (rho_v2, mach) in tables.mixed_criteria.items()]
    raise ValidationError([f"Unknown line type '{line_type}'"])
