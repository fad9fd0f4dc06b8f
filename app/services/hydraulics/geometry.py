# app/services/hydraulics/geometry.py
"""
Pipe geometry resolution: nominal size + schedule -> inside diameter and area.
"""
import logging
import math
from typing import List, Optional

from app.schemas.hydraulics import PipeGeometry
from app.services.hydraulics.reference_data import DEFAULT_TABLES, ReferenceTables
from app.utils.error_handling import UnknownGeometryError

logger = logging.getLogger(__name__)

MM = 0.001


def parse_nominal_size(nominal_size: str) -> float:
    """
    Convert a nominal size label to inches.

    Handles whole ("6"), fractional ("3/4") and mixed ("1-1/2") labels.

    Raises:
        UnknownGeometryError: If the label cannot be parsed
    """
    label = nominal_size.strip().rstrip('"')
    try:
        if "/" not in label:
            return float(label)
        whole = 0.0
        fraction = label
        if "-" in label:
            whole_part, fraction = label.split("-", 1)
            whole = float(whole_part)
        num, den = fraction.split("/")
        return whole + float(num) / float(den)
    except (ValueError, ZeroDivisionError):
        raise UnknownGeometryError(
            f"Cannot parse nominal size '{nominal_size}'",
            details={"nominal_size": nominal_size},
        )


def circular_area(diameter: float) -> float:
    return math.pi * diameter ** 2 / 4.0


class PipeGeometryResolver:
    """Lookup of pipe dimensions and roughness from the reference tables."""

    def __init__(self, tables: ReferenceTables = DEFAULT_TABLES):
        self.tables = tables

    def nominal_sizes(self) -> List[str]:
        """Nominal sizes sorted from smallest to largest."""
        return sorted(self.tables.pipe_schedules.keys(), key=parse_nominal_size)

    def available_schedules(self, nominal_size: str) -> List[str]:
        """
        Schedules tabulated for a nominal size, in ASME order.

        Raises:
            UnknownGeometryError: If the nominal size is not tabulated
        """
        schedules = self.tables.pipe_schedules.get(nominal_size)
        if schedules is None:
            raise UnknownGeometryError(
                f"Nominal size '{nominal_size}' is not in the pipe schedule table",
                details={"nominal_size": nominal_size},
            )
        ordered = [sch for sch in self.tables.schedule_order if sch in schedules]
        # Schedules outside the standard order keep table order at the end
        ordered.extend(sch for sch in schedules if sch not in ordered)
        return ordered

    def resolve(self, nominal_size: str, schedule: str) -> PipeGeometry:
        """
        Resolve inside diameter (m) and flow area (m²).

        Raises:
            UnknownGeometryError: If the (size, schedule) pair is not tabulated
        """
        inside_mm = self.tables.pipe_schedules.get(nominal_size, {}).get(schedule)
        if inside_mm is None:
            raise UnknownGeometryError(
                f"No inside diameter for {nominal_size}\" schedule {schedule}",
                details={"nominal_size": nominal_size, "schedule": schedule},
            )
        diameter = inside_mm * MM
        logger.debug(f"Resolved {nominal_size}\" Sch {schedule}: ID={inside_mm} mm")
        return PipeGeometry(
            nominal_size=nominal_size,
            schedule=schedule,
            inside_diameter=diameter,
            area=circular_area(diameter),
        )

    def resolve_or_default(self, nominal_size: str, schedule: str, default_diameter: float) -> PipeGeometry:
        """
        Resolve geometry, falling back to a caller-supplied inside diameter (m).

        Raises:
            UnknownGeometryError: If the pair is missing and the fallback is not positive
        """
        try:
            return self.resolve(nominal_size, schedule)
        except UnknownGeometryError:
            if default_diameter is None or default_diameter <= 0:
                raise
            logger.warning(
                f"{nominal_size}\" Sch {schedule} not tabulated, using default ID {default_diameter * 1000:.2f} mm"
            )
            return PipeGeometry(
                nominal_size=nominal_size,
                schedule=schedule,
                inside_diameter=default_diameter,
                area=circular_area(default_diameter),
                from_table=False,
            )

    def roughness(self, material: str, custom_roughness: Optional[float] = None) -> float:
        """
        Absolute roughness in m.

        ``"Custom"`` uses ``custom_roughness`` (m), which must then be given.

        Raises:
            UnknownGeometryError: For a material that is not tabulated or a missing custom value
        """
        if material == "Custom":
            if custom_roughness is None or custom_roughness < 0:
                raise UnknownGeometryError(
                    "Custom material requires a non-negative roughness",
                    details={"material": material},
                )
            return custom_roughness
        roughness_mm = self.tables.roughness_mm.get(material)
        if roughness_mm is None:
            raise UnknownGeometryError(
                f"Unknown pipe material '{material}'",
                details={"material": material, "available": list(self.tables.roughness_mm.keys())},
            )
        return roughness_mm * MM

    def recommend_nominal_size(self, flow_rate: float, target_velocity: float, schedule: str) -> Optional[str]:
        """
        Smallest nominal size whose inside diameter reaches 85 % of the
        diameter needed to carry ``flow_rate`` (m³/s) at ``target_velocity`` (m/s).

        Returns None when no tabulated size is large enough.
        """
        if flow_rate <= 0 or target_velocity <= 0:
            return None
        required_mm = math.sqrt(4.0 * (flow_rate / target_velocity) / math.pi) * 1000.0
        for size in self.nominal_sizes():
            inside_mm = self.tables.pipe_schedules[size].get(schedule)
            if inside_mm is not None and inside_mm >= required_mm * 0.85:
                return size
        return None

