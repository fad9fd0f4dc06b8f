import logging
from typing import Dict, Any, List

from app.core.config import settings
from app.schemas.hydraulics import (
    CalculationResult,
    CriteriaLimit,
    FrictionCurvePoint,
    FrictionFactorInput,
    FrictionResult,
    GasTransmissionInput,
    GasTransmissionResult,
    LineSizingInput,
    UnitConversionInput,
)
from app.services.hydraulics import criteria, friction, pressure_drop
from app.services.hydraulics.engine import LineSizingEngine
from app.services.hydraulics.geometry import PipeGeometryResolver
from app.services.hydraulics.reference_data import DEFAULT_TABLES, ReferenceTables
from app.utils.conversions import QUANTITY_KINDS, available_units, convert, to_si
from app.utils.error_handling import ValidationError

# Configure logging
logger = logging.getLogger(__name__)


class HydraulicsService:
    """
    Service for handling line sizing and pipe reference data.
    This service encapsulates all hydraulics-related logic to improve separation of concerns.
    """

    def __init__(self, tables: ReferenceTables = DEFAULT_TABLES):
        self.tables = tables
        self.engine = LineSizingEngine(tables)
        self.geometry = PipeGeometryResolver(tables)

    def calculate_line_sizing(self, data: LineSizingInput) -> CalculationResult:
        """
        Size a gas, liquid or mixed-phase line and check it against its service criteria.

        Args:
            data: Line sizing input

        Returns:
            Line sizing result

        Raises:
            APIError: If the input is invalid
        """
        logger.info(f"Performing {data.line_type.value} line sizing: {data.pipe.nominal_size}\" "
                    f"Sch {data.pipe.schedule}, service '{data.service}'")
        result = self.engine.calculate(data)
        logger.info(f"Calculation completed: v={result.flow.velocity:.3f} m/s, "
                    f"ΔP={result.pressure_drop.total:.1f} Pa, within limits={result.within_limits}")
        return result

    def calculate_friction_factor(self, data: FrictionFactorInput) -> FrictionResult:
        """
        Darcy friction factor for a Reynolds number and pipe.

        Args:
            data: Reynolds number, roughness and diameter

        Returns:
            Friction factor result
        """
        if data.roughness is None:
            roughness = settings.DEFAULT_ROUGHNESS_MM / 1000.0
        else:
            roughness = to_si(data.roughness.value, "length_small", data.roughness.unit)
        diameter = to_si(data.diameter.value, "length_small", data.diameter.unit)
        logger.info(f"Calculating friction factor at Re={data.reynolds:.4g} ({data.method})")
        return friction.friction_factor(data.reynolds, roughness, diameter, data.method)

    def friction_curve(self, relative_roughness: float, re_min: float, re_max: float,
                       points: int, method: str) -> List[FrictionCurvePoint]:
        logger.info(f"Sampling friction curve for ε/D={relative_roughness:g}")
        return friction.friction_factor_curve(relative_roughness, re_min, re_max, points, method)

    def calculate_gas_transmission(self, data: GasTransmissionInput) -> GasTransmissionResult:
        """
        Pressure drop of a long gas line from the Weymouth or Panhandle equations.

        Args:
            data: Gas transmission input

        Returns:
            Gas transmission result
        """
        logger.info(f"Calculating gas transmission pressure drop using {data.equation}")
        result = pressure_drop.gas_transmission(
            data.equation,
            flow_rate=to_si(data.flow_rate.value, "flow_rate", data.flow_rate.unit),
            inlet_pressure=to_si(data.inlet_pressure.value, "pressure", data.inlet_pressure.unit),
            length=to_si(data.length.value, "length", data.length.unit),
            diameter=to_si(data.inside_diameter.value, "length_small", data.inside_diameter.unit),
            temperature=to_si(data.temperature.value, "temperature", data.temperature.unit),
            specific_gravity=data.specific_gravity,
            compressibility=data.compressibility,
            base_pressure=to_si(data.base_pressure.value, "pressure", data.base_pressure.unit),
            base_temperature=to_si(data.base_temperature.value, "temperature", data.base_temperature.unit),
        )
        logger.info(f"Calculation completed: ΔP={result.pressure_drop:.1f} Pa, choked={result.choked}")
        return result

    def get_nominal_sizes(self) -> List[str]:
        return self.geometry.nominal_sizes()

    def get_schedules(self, nominal_size: str) -> Dict[str, Any]:
        """
        Schedules and inside diameters (mm) available for a nominal size.
        """
        schedules = self.geometry.available_schedules(nominal_size)
        return {
            "nominal_size": nominal_size,
            "schedules": [
                {"schedule": sch, "inside_diameter_mm": self.tables.pipe_schedules[nominal_size][sch]}
                for sch in schedules
            ],
        }

    def get_materials(self) -> Dict[str, float]:
        """Pipe materials and their absolute roughness, mm."""
        return dict(self.tables.roughness_mm)

    def get_fittings(self) -> Dict[str, list]:
        return self.tables.fitting_catalogue()

    def get_services(self, line_type: str) -> List[dict]:
        return criteria.list_services(line_type, self.tables)

    def get_criteria(self, line_type: str, service: str, pressure_range: str = None,
                     nominal_size: str = None) -> CriteriaLimit:
        """
        Service limits for a line type.

        Args:
            line_type: "gas", "liquid" or "mixed"
            service: Service name
            pressure_range: Gas pressure range label
            nominal_size: Nominal size, needed for the liquid velocity band

        Returns:
            Criteria limits
        """
        logger.info(f"Looking up {line_type} criteria for '{service}'")
        if line_type == "gas":
            return criteria.find_gas_criteria(service, pressure_range, self.tables)
        if line_type == "liquid":
            return criteria.find_liquid_criteria(service, nominal_size or "2", self.tables)
        if line_type == "mixed":
            return criteria.find_mixed_criteria(service, self.tables)
        raise ValidationError([f"Unknown line type '{line_type}'"])

    def convert_units(self, data: UnitConversionInput) -> Dict[str, Any]:
        result = convert(data.value, data.quantity_kind, data.source_unit, data.target_unit)
        return {
            "value": result,
            "unit": data.target_unit,
            "quantity_kind": data.quantity_kind,
        }

    def get_units(self, quantity_kind: str) -> List[str]:
        return available_units(quantity_kind)

    def get_quantity_kinds(self) -> List[str]:
        return list(QUANTITY_KINDS)


# Create a singleton instance
hydraulics_service = HydraulicsService()
