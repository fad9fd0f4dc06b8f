# app/services/hydraulics/engine.py
"""
Line sizing: normalise inputs, resolve geometry, compute the flow state,
friction factor and pressure drop, then check the service criteria.

Every call recomputes from scratch and returns one frozen CalculationResult.
Invalid inputs raise; no partial result is ever returned.
"""
import logging
from typing import Any, Dict, List, Optional

from app.core.config import settings
from app.schemas.hydraulics import (
    CalculationResult,
    CriteriaLimit,
    FluidSpec,
    LineSizingInput,
    LineTypeEnum,
    MeasuredValues,
    PipeSpec,
    QuantityInput,
)
from app.services.hydraulics import criteria, flow, friction, pressure_drop
from app.services.hydraulics.geometry import PipeGeometryResolver
from app.services.hydraulics.reference_data import DEFAULT_TABLES, ReferenceTables
from app.utils.conversions import same_unit, to_si
from app.utils.error_handling import ValidationError

logger = logging.getLogger(__name__)

# Mach thresholds that add a diagnostic warning to gas lines
MACH_COMPRESSIBLE = 0.3
MACH_CHOKED = 1.0


def _si(quantity: Optional[QuantityInput], kind: str, default: float = None) -> Optional[float]:
    if quantity is None:
        return default
    return to_si(quantity.value, kind, quantity.unit)


class LineSizingEngine:
    """
    Line sizing for gas, liquid and mixed-phase lines.

    Reference tables are injected so that tests can run against synthetic data.
    """

    def __init__(self, tables: ReferenceTables = DEFAULT_TABLES):
        self.tables = tables
        self.geometry = PipeGeometryResolver(tables)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(self, data: LineSizingInput) -> Dict[str, Any]:
        """
        Convert every input to SI and collect all problems.

        Returns:
            Dictionary of normalised SI values

        Raises:
            InvalidUnitError: For a unit not registered for its quantity
            ValidationError: With every value problem found
        """
        errors: List[str] = []
        values: Dict[str, Any] = {}

        values["length"] = _si(data.pipe.length, "length")
        if values["length"] <= 0:
            errors.append("Pipe length must be positive")
        values["elevation_change"] = _si(data.pipe.elevation_change, "length", 0.0)
        values["custom_roughness"] = _si(data.pipe.custom_roughness, "length_small")
        values["default_diameter"] = _si(data.pipe.default_inside_diameter, "length_small")
        if data.pipe.material == "Custom" and (values["custom_roughness"] is None or values["custom_roughness"] < 0):
            errors.append("Custom material requires a non-negative roughness")

        if data.line_type == LineTypeEnum.LIQUID:
            self._validate_liquid(data, values, errors)
        elif data.line_type == LineTypeEnum.GAS:
            self._validate_gas(data, values, errors)
        else:
            self._validate_mixed(data, values, errors)

        try:
            values["k_total"] = pressure_drop.fitting_k_total(data.fittings, self.tables)
        except ValidationError as e:
            errors.extend(e.errors)

        # gas limits depend on the operating pressure
        if data.line_type != LineTypeEnum.GAS or "pressure" in values:
            try:
                values["limits"] = self.limits_for(data, values)
            except ValidationError as e:
                errors.extend(e.errors)

        if errors:
            logger.warning(f"Line sizing input rejected: {errors}")
            raise ValidationError(errors)
        return values

    @staticmethod
    def _check_temperature(temperature: float, errors: List[str]) -> None:
        if temperature <= 0:
            errors.append("Temperature below absolute zero")

    def _validate_liquid(self, data: LineSizingInput, values: Dict[str, Any], errors: List[str]) -> None:
        liquid = data.liquid
        if liquid is None:
            errors.append("Liquid properties are required for a liquid line")
            return
        values["flow_rate"] = _si(liquid.flow_rate, "flow_rate")
        values["density"] = _si(liquid.density, "density")
        values["viscosity"] = _si(liquid.viscosity, "viscosity")
        values["temperature"] = _si(liquid.temperature, "temperature")
        if values["flow_rate"] <= 0:
            errors.append("Flow rate must be positive")
        if values["density"] <= 0:
            errors.append("Density must be positive")
        if values["viscosity"] <= 0:
            errors.append("Viscosity must be positive")
        self._check_temperature(values["temperature"], errors)

    def _standard_conditions(self, unit: str):
        """(pressure Pa, temperature K) behind a standard gas rate unit, or None for actual units."""
        for symbol, conditions in self.tables.standard_conditions.items():
            if same_unit(symbol, unit):
                return conditions
        return None

    def _validate_gas(self, data: LineSizingInput, values: Dict[str, Any], errors: List[str]) -> None:
        gas = data.gas
        if gas is None:
            errors.append("Gas properties are required for a gas line")
            return
        values["pressure"] = _si(gas.inlet_pressure, "pressure")
        values["temperature"] = _si(gas.temperature, "temperature")
        values["viscosity"] = _si(gas.viscosity, "viscosity")
        values["molecular_weight"] = gas.molecular_weight
        values["compressibility"] = gas.compressibility
        values["specific_heat_ratio"] = gas.specific_heat_ratio
        flow_si = _si(gas.flow_rate, "flow_rate")

        if flow_si <= 0:
            errors.append("Flow rate must be positive")
        if values["pressure"] <= 0:
            errors.append("Inlet pressure must be above absolute zero")
        self._check_temperature(values["temperature"], errors)
        if gas.compressibility <= 0:
            errors.append("Compressibility factor must be positive")
        if gas.molecular_weight <= 0:
            errors.append("Molecular weight must be positive")
        if values["viscosity"] <= 0:
            errors.append("Viscosity must be positive")
        if gas.specific_heat_ratio <= 1:
            errors.append("Specific heat ratio must be greater than 1")
        if errors:
            return

        base = self._standard_conditions(gas.flow_rate.unit)
        if base is not None:
            base_pressure, base_temperature = base
            values["flow_rate"] = flow.actual_gas_flow(
                flow_si, base_pressure, values["pressure"], base_temperature,
                values["temperature"], gas.compressibility,
            )
            logger.debug(f"Standard gas rate {flow_si:.6g} m³/s -> actual {values['flow_rate']:.6g} m³/s")
        else:
            values["flow_rate"] = flow_si
        values["density"] = flow.gas_density(
            values["pressure"], gas.molecular_weight, gas.compressibility, values["temperature"]
        )

    def _validate_mixed(self, data: LineSizingInput, values: Dict[str, Any], errors: List[str]) -> None:
        mixed = data.mixed
        if mixed is None:
            errors.append("Phase properties are required for a mixed-phase line")
            return
        gas_flow = _si(mixed.gas_flow_rate, "flow_rate")
        liquid_flow = _si(mixed.liquid_flow_rate, "flow_rate")
        gas_density = _si(mixed.gas_density, "density")
        liquid_density = _si(mixed.liquid_density, "density")
        gas_viscosity = _si(mixed.gas_viscosity, "viscosity")
        liquid_viscosity = _si(mixed.liquid_viscosity, "viscosity")
        values["temperature"] = _si(mixed.temperature, "temperature")

        if gas_flow <= 0 and liquid_flow <= 0:
            errors.append("At least one phase must have positive flow rate")
        if gas_flow < 0 or liquid_flow < 0:
            errors.append("Phase flow rates cannot be negative")
        if gas_density <= 0 or liquid_density <= 0:
            errors.append("Phase densities must be positive")
        if gas_viscosity <= 0 or liquid_viscosity <= 0:
            errors.append("Phase viscosities must be positive")
        self._check_temperature(values["temperature"], errors)
        if mixed.compressibility <= 0:
            errors.append("Compressibility factor must be positive")
        if mixed.gas_molecular_weight is not None and mixed.gas_molecular_weight <= 0:
            errors.append("Molecular weight must be positive")
        if mixed.specific_heat_ratio <= 1:
            errors.append("Specific heat ratio must be greater than 1")
        if errors:
            return

        mixture = flow.mixture_properties(gas_flow, gas_density, gas_viscosity,
                                          liquid_flow, liquid_density, liquid_viscosity)
        values.update(mixture)
        values["molecular_weight"] = mixed.gas_molecular_weight
        values["compressibility"] = mixed.compressibility
        values["specific_heat_ratio"] = mixed.specific_heat_ratio

    # ------------------------------------------------------------------
    # Criteria
    # ------------------------------------------------------------------

    def limits_for(self, data: LineSizingInput, values: Dict[str, Any]) -> CriteriaLimit:
        if data.line_type == LineTypeEnum.LIQUID:
            return criteria.find_liquid_criteria(data.service, data.pipe.nominal_size, self.tables)
        if data.line_type == LineTypeEnum.MIXED:
            return criteria.find_mixed_criteria(data.service, self.tables)
        pressure_range = data.pressure_range
        if pressure_range is None:
            gauge_bar = (values["pressure"] - settings.ATMOSPHERIC_PRESSURE_PA) / pressure_drop.BAR
            pressure_range = criteria.select_gas_pressure_range(data.service, gauge_bar, self.tables)
        return criteria.find_gas_criteria(data.service, pressure_range, self.tables)

    # ------------------------------------------------------------------
    # Calculation
    # ------------------------------------------------------------------

    def calculate(self, data: LineSizingInput) -> CalculationResult:
        """
        Run a complete line sizing calculation.

        Args:
            data: Line sizing input with units per field

        Returns:
            Frozen CalculationResult

        Raises:
            InvalidUnitError, UnknownGeometryError, InvalidFlowError, ValidationError
        """
        values = self.validate(data)
        limits = values["limits"]

        geometry = self.geometry.resolve_or_default(
            data.pipe.nominal_size, data.pipe.schedule, values["default_diameter"]
        )
        roughness = self.geometry.roughness(data.pipe.material, values["custom_roughness"])
        pipe = PipeSpec(
            nominal_size=data.pipe.nominal_size,
            schedule=data.pipe.schedule,
            material=data.pipe.material,
            inside_diameter=geometry.inside_diameter,
            roughness=roughness,
            length=values["length"],
        )
        fluid = FluidSpec(
            density=values["density"],
            viscosity=values["viscosity"],
            temperature=values["temperature"],
            compressibility=values.get("compressibility"),
            molecular_weight=values.get("molecular_weight"),
            specific_heat_ratio=values.get("specific_heat_ratio"),
        )

        state = flow.flow_state(values["flow_rate"], geometry.area, geometry.inside_diameter,
                                fluid.density, fluid.viscosity)
        friction_result = friction.friction_factor(state.reynolds, pipe.roughness, pipe.inside_diameter,
                                                   data.friction_method)
        drop = pressure_drop.pipe_pressure_drop(
            friction_result.factor, pipe.length, pipe.inside_diameter, fluid.density, state.velocity,
            k_total=values["k_total"], elevation_change=values["elevation_change"],
        )

        rho_v2 = flow.momentum_flux(fluid.density, state.velocity)
        erosional = flow.erosional_velocity(fluid.density)
        mach = None
        warnings: List[str] = []
        if fluid.molecular_weight is not None:
            sound = flow.speed_of_sound(fluid.temperature, fluid.molecular_weight,
                                        fluid.specific_heat_ratio or 1.3, fluid.compressibility or 1.0)
            mach = flow.mach_number(state.velocity, sound)

        # Friction plus fittings, per unit length; static head is not a loss
        gradient = pressure_drop.dp_per_km(drop.friction + drop.fittings, pipe.length)
        measured = MeasuredValues(velocity=state.velocity, rho_v2=rho_v2, mach=mach, dp_per_km=gradient)
        checks, criteria_warnings = criteria.evaluate_with_warnings(data.service, measured, limits)
        warnings.extend(criteria_warnings)

        if mach is not None and data.line_type == LineTypeEnum.GAS:
            if mach > MACH_CHOKED:
                warnings.append("Mach > 1.0: flow is choked")
            elif mach > MACH_COMPRESSIBLE:
                warnings.append("Mach > 0.3: compressibility effects significant")
        if data.line_type == LineTypeEnum.GAS and drop.total > 0.1 * values["pressure"]:
            warnings.append("Pressure drop exceeds 10% of inlet pressure; incompressible assumption is weak")
        if not geometry.from_table:
            warnings.append(f"{pipe.nominal_size}\" Sch {pipe.schedule} not tabulated; default inside diameter used")

        result = CalculationResult(
            line_type=data.line_type,
            pipe=pipe,
            fluid=fluid,
            flow=state,
            friction=friction_result,
            pressure_drop=drop,
            head_loss=pressure_drop.head_loss(drop.total, fluid.density),
            dp_per_km=gradient,
            rho_v2=rho_v2,
            mach=mach,
            erosional_velocity=erosional,
            erosional_ratio=state.velocity / erosional,
            liquid_fraction=values.get("liquid_fraction"),
            limits=limits,
            checks=checks,
            warnings=warnings,
        )
        logger.debug(f"Line sizing done: v={state.velocity:.3f} m/s, ΔP={drop.total:.1f} Pa, "
                     f"{len(warnings)} warning(s)")
        return result


def calculate_line_sizing(data: LineSizingInput, tables: ReferenceTables = DEFAULT_TABLES) -> CalculationResult:
    """Functional entry point for :class:`LineSizingEngine`."""
    return LineSizingEngine(tables).calculate(data)
