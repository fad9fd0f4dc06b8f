"""
Test script for the line sizing engine.
Builds liquid, gas and mixed-phase LineSizingInput objects and runs them through
the engine, checking the flow state, pressure drop breakdown and criteria checks.
"""

import sys
import os
import math

import pytest

# Add the project root to the Python path
sys.path.append(os.path.abspath('.'))

from app.schemas.hydraulics import (
    FlowRegimeEnum,
    GasInput,
    LineSizingInput,
    LineTypeEnum,
    LiquidInput,
    MixedPhaseInput,
    PipeInput,
    QuantityInput,
    VerdictEnum,
)
from app.services.hydraulics import pressure_drop
from app.services.hydraulics.engine import LineSizingEngine, calculate_line_sizing
from app.services.hydraulics.flow import actual_gas_flow, gas_density
from app.services.hydraulics.geometry import PipeGeometryResolver
from app.services.hydraulics.reference_data import DEFAULT_TABLES, ReferenceTables
from app.utils.error_handling import InvalidUnitError, UnknownGeometryError, ValidationError


def q(value, unit):
    return QuantityInput(value=value, unit=unit)


def create_test_input(**overrides):
    """Water at 100 m³/h through 100 m of 6 inch schedule 40 carbon steel."""
    data = dict(
        line_type=LineTypeEnum.LIQUID,
        pipe=PipeInput(nominal_size="6", schedule="40", length=q(100.0, "m")),
        service="Pump Discharge (Pop < 35 barg)",
        fittings={"elbow_90_long": 4, "gate_valve_full": 2},
        liquid=LiquidInput(
            flow_rate=q(100.0, "m³/h"),
            density=q(1000.0, "kg/m³"),
            viscosity=q(1.0, "cP"),
        ),
    )
    data.update(overrides)
    return LineSizingInput(**data)


def create_gas_input(**overrides):
    """Natural gas at 10 MMSCFD and 50 barg in an 8 inch line."""
    data = dict(
        line_type=LineTypeEnum.GAS,
        pipe=PipeInput(nominal_size="8", schedule="40", length=q(1.0, "km")),
        service="Continuous",
        gas=GasInput(
            flow_rate=q(10.0, "MMSCFD"),
            inlet_pressure=q(50.0, "barg"),
            temperature=q(40.0, "°C"),
            molecular_weight=19.0,
            compressibility=0.9,
        ),
    )
    data.update(overrides)
    return LineSizingInput(**data)


def test_liquid_flow_state():
    result = calculate_line_sizing(create_test_input())

    assert result.pipe.inside_diameter == pytest.approx(0.15405)
    assert result.flow.velocity == pytest.approx(1.49, abs=0.005)
    assert result.flow.reynolds == pytest.approx(2.29e5, rel=0.005)
    assert result.flow.regime == FlowRegimeEnum.TURBULENT
    assert result.friction.regime == FlowRegimeEnum.TURBULENT


def test_pressure_drop_components_sum_to_total():
    result = calculate_line_sizing(create_test_input())
    drop = result.pressure_drop
    assert math.fsum([drop.friction, drop.fittings, drop.elevation]) == pytest.approx(drop.total, rel=1e-12)

    k_total = 4 * 0.45 + 2 * 0.17
    expected_fittings = k_total * 1000.0 * result.flow.velocity ** 2 / 2.0
    assert drop.fittings == pytest.approx(expected_fittings)
    assert result.head_loss == pytest.approx(drop.total / (1000.0 * 9.81))


def test_elevation_adds_static_head_but_not_gradient():
    flat = calculate_line_sizing(create_test_input())
    uphill = calculate_line_sizing(create_test_input(
        pipe=PipeInput(nominal_size="6", schedule="40", length=q(100.0, "m"), elevation_change=q(10.0, "m")),
    ))
    assert uphill.pressure_drop.elevation == pytest.approx(1000.0 * 9.81 * 10.0)
    assert uphill.pressure_drop.total > flat.pressure_drop.total
    assert uphill.dp_per_km == pytest.approx(flat.dp_per_km)


def test_friction_methods_agree():
    swamee = calculate_line_sizing(create_test_input())
    colebrook = calculate_line_sizing(create_test_input(friction_method="colebrook"))
    assert swamee.friction.factor == pytest.approx(colebrook.friction.factor, rel=0.01)


def test_liquid_criteria_pass():
    result = calculate_line_sizing(create_test_input())
    assert result.limits.velocity == pytest.approx(1.9)
    velocity_check = next(check for check in result.checks if check.name == "Velocity")
    assert velocity_check.verdict == VerdictEnum.PASS
    assert result.within_limits
    assert result.mach is None


def test_liquid_criteria_fail_adds_warning():
    result = calculate_line_sizing(create_test_input(service="Pump Suction (Sub-cooled)"))
    velocity_check = next(check for check in result.checks if check.name == "Velocity")
    assert velocity_check.limit == pytest.approx(1.2)
    assert velocity_check.verdict == VerdictEnum.FAIL
    assert not result.within_limits
    assert any("Velocity exceeds limit" in warning and "1.2" in warning for warning in result.warnings)


def test_laminar_liquid():
    data = create_test_input(liquid=LiquidInput(
        flow_rate=q(5.0, "m³/h"), density=q(900.0, "kg/m³"), viscosity=q(500.0, "cP"),
    ))
    result = calculate_line_sizing(data)
    assert result.flow.regime == FlowRegimeEnum.LAMINAR
    assert result.friction.factor == pytest.approx(64.0 / result.flow.reynolds)


def test_results_are_immutable():
    result = calculate_line_sizing(create_test_input())
    with pytest.raises(Exception):
        result.dp_per_km = 0.0


def test_gas_standard_rate_converted_to_actual():
    result = calculate_line_sizing(create_gas_input())

    pressure = 50e5 + 101325.0
    temperature = 313.15
    standard = 10e6 * 0.3048 ** 3 / 86400.0
    actual = actual_gas_flow(standard, 101325.0, pressure, 288.15, temperature, 0.9)

    assert result.fluid.density == pytest.approx(gas_density(pressure, 19.0, 0.9, temperature))
    assert result.flow.flow_rate == pytest.approx(actual)
    assert result.mach is not None and 0 < result.mach < 0.3


def test_gas_pressure_range_selected_from_inlet_pressure():
    result = calculate_line_sizing(create_gas_input())
    assert result.limits.rho_v2 == 20000
    assert result.limits.dp_per_km == 3.0
    assert result.limits.velocity is None


def test_gas_explicit_pressure_range():
    result = calculate_line_sizing(create_gas_input(pressure_range="7 to 35 barg"))
    assert result.limits.rho_v2 == 15000


def test_gas_high_velocity_warnings():
    data = create_gas_input(
        pipe=PipeInput(nominal_size="2", schedule="40", length=q(100.0, "m")),
        gas=GasInput(
            flow_rate=q(4000.0, "m³/h"),
            inlet_pressure=q(5.0, "barg"),
            temperature=q(20.0, "°C"),
            molecular_weight=19.0,
        ),
    )
    result = calculate_line_sizing(data)
    assert result.mach > 1.0
    assert "Mach > 1.0: flow is choked" in result.warnings
    assert not result.within_limits


def test_mixed_phase_no_slip():
    data = LineSizingInput(
        line_type=LineTypeEnum.MIXED,
        pipe=PipeInput(nominal_size="6", schedule="40", length=q(200.0, "m")),
        service="Continuous (P > 7 barg)",
        mixed=MixedPhaseInput(
            gas_flow_rate=q(500.0, "m³/h"),
            liquid_flow_rate=q(50.0, "m³/h"),
            gas_density=q(30.0, "kg/m³"),
            liquid_density=q(800.0, "kg/m³"),
        ),
    )
    result = calculate_line_sizing(data)
    fraction = 50.0 / 550.0
    assert result.liquid_fraction == pytest.approx(fraction)
    assert result.fluid.density == pytest.approx(fraction * 800.0 + (1 - fraction) * 30.0)
    assert result.limits.rho_v2 == 15000
    assert result.mach is None
    verdicts = {check.name: check.verdict for check in result.checks}
    assert verdicts["Velocity"] == VerdictEnum.NOT_APPLICABLE
    assert verdicts["Momentum (ρv²)"] in (VerdictEnum.PASS, VerdictEnum.FAIL)


def test_mixed_phase_mach_uses_gas_molecular_weight():
    data = LineSizingInput(
        line_type=LineTypeEnum.MIXED,
        pipe=PipeInput(nominal_size="6", schedule="40", length=q(200.0, "m")),
        service="Flare Header (Liquids)",
        mixed=MixedPhaseInput(
            gas_flow_rate=q(2000.0, "m³/h"),
            liquid_flow_rate=q(1.0, "m³/h"),
            gas_density=q(2.0, "kg/m³"),
            liquid_density=q(700.0, "kg/m³"),
            gas_molecular_weight=30.0,
        ),
    )
    result = calculate_line_sizing(data)
    assert result.mach is not None
    assert result.limits.mach == 0.25


def test_validation_collects_every_error():
    data = create_test_input(
        pipe=PipeInput(nominal_size="6", schedule="40", length=q(-5.0, "m")),
        service="No Such Service",
        fittings={"not_a_fitting": 1},
        liquid=LiquidInput(
            flow_rate=q(0.0, "m³/h"),
            density=q(-1.0, "kg/m³"),
            viscosity=q(1.0, "cP"),
            temperature=q(-300.0, "°C"),
        ),
    )
    with pytest.raises(ValidationError) as excinfo:
        calculate_line_sizing(data)
    errors = excinfo.value.errors
    assert "Pipe length must be positive" in errors
    assert "Flow rate must be positive" in errors
    assert "Density must be positive" in errors
    assert "Temperature below absolute zero" in errors
    assert "Unknown fitting 'not_a_fitting'" in errors
    assert "Unknown liquid service 'No Such Service'" in errors
    assert excinfo.value.status_code == 400


def test_missing_phase_block():
    with pytest.raises(ValidationError) as excinfo:
        calculate_line_sizing(create_test_input(line_type=LineTypeEnum.GAS))
    assert "Gas properties are required for a gas line" in excinfo.value.errors


def test_invalid_unit_fails_fast():
    data = create_test_input(liquid=LiquidInput(
        flow_rate=q(100.0, "barrels per fortnight"), density=q(1000.0, "kg/m³"), viscosity=q(1.0, "cP"),
    ))
    with pytest.raises(InvalidUnitError):
        calculate_line_sizing(data)


def test_unknown_geometry():
    data = create_test_input(pipe=PipeInput(nominal_size="7", schedule="40", length=q(100.0, "m")))
    with pytest.raises(UnknownGeometryError):
        calculate_line_sizing(data)


def test_default_diameter_used_when_not_tabulated():
    data = create_test_input(pipe=PipeInput(
        nominal_size="7", schedule="40", length=q(100.0, "m"), default_inside_diameter=q(170.0, "mm"),
    ))
    result = calculate_line_sizing(data)
    assert result.pipe.inside_diameter == pytest.approx(0.170)
    assert any("default inside diameter used" in warning for warning in result.warnings)


def test_custom_roughness():
    data = create_test_input(pipe=PipeInput(
        nominal_size="6", schedule="40", length=q(100.0, "m"), material="Custom", custom_roughness=q(0.5, "mm"),
    ))
    rough = calculate_line_sizing(data)
    smooth = calculate_line_sizing(create_test_input())
    assert rough.pipe.roughness == pytest.approx(0.0005)
    assert rough.friction.factor > smooth.friction.factor


def test_custom_material_without_roughness_is_a_validation_error():
    data = create_test_input(
        pipe=PipeInput(nominal_size="6", schedule="40", length=q(-1.0, "m"), material="Custom"),
    )
    with pytest.raises(ValidationError) as excinfo:
        calculate_line_sizing(data)
    assert excinfo.value.errors == ["Pipe length must be positive", "Custom material requires a non-negative roughness"]


def test_geometry_lookup():
    resolver = PipeGeometryResolver()
    geometry = resolver.resolve("1-1/2", "80")
    assert geometry.inside_diameter == pytest.approx(0.0381)
    assert resolver.available_schedules("4")[0] == "5s"
    sizes = resolver.nominal_sizes()
    assert sizes.index("1/2") < sizes.index("1-1/2") < sizes.index("10")


def test_recommended_nominal_size():
    resolver = PipeGeometryResolver()
    assert resolver.recommend_nominal_size(100.0 / 3600.0, 1.2, "40") == "6"
    assert resolver.recommend_nominal_size(100.0 / 3600.0, 2.5, "40") == "4"


def test_engine_with_synthetic_tables():
    tables = ReferenceTables(
        pipe_schedules={"6": {"40": 150.0}},
        roughness_mm={"Carbon Steel (New)": 0.05},
        fittings={},
        gas_criteria=(),
        liquid_criteria={"Test Service": (2.0, (1.0, 1.0, 1.0, 1.0, 1.0))},
        mixed_criteria={},
    )
    data = create_test_input(service="Test Service", fittings={})
    result = LineSizingEngine(tables).calculate(data)
    assert result.pipe.inside_diameter == pytest.approx(0.150)
    assert result.limits.velocity == 1.0
    assert DEFAULT_TABLES.pipe_schedules["6"]["40"] == 154.05


def test_gas_transmission_equations():
    common = dict(
        flow_rate=1e6 / 86400.0,
        inlet_pressure=70e5,
        length=50e3,
        diameter=0.3,
        temperature=288.15,
        specific_gravity=0.6,
    )
    for equation in ("weymouth", "panhandle_a", "panhandle_b"):
        result = pressure_drop.gas_transmission(equation, **common)
        assert not result.choked
        assert 0 < result.pressure_drop < common["inlet_pressure"]
        assert result.outlet_pressure + result.pressure_drop == pytest.approx(common["inlet_pressure"])


def test_gas_transmission_choked():
    result = pressure_drop.weymouth(
        flow_rate=100.0, inlet_pressure=2e5, length=100e3, diameter=0.1,
        temperature=288.15, specific_gravity=0.6,
    )
    assert result.choked
    assert result.outlet_pressure == 0.0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
