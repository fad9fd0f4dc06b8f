"""
Test script for the pump calculator.
Creates a sample PumpInput with suction and discharge lines, then checks the
total dynamic head and NPSH available in both calculation modes, the API 674
acceleration head and the HI viscosity corrections.
"""

import sys
import os
import math

import pytest

# Add the project root to the Python path
sys.path.append(os.path.abspath('.'))

from app.schemas.hydraulics import QuantityInput
from app.schemas.pump import CalculationModeEnum, PumpInput, PumpSideInput, PumpTypeEnum
from app.services.hydraulics.extensions.pump import (
    acceleration_head,
    calculate_pump,
    hi_viscosity_correction,
    npsh_available,
    pump_power,
    specific_speed,
    suction_specific_speed,
    total_dynamic_head,
)
from app.utils.error_handling import ValidationError

G = 9.81


def q(value, unit):
    return QuantityInput(value=value, unit=unit)


def create_test_input(**overrides):
    """Water at 100 m³/h from an atmospheric tank to a vessel at 2 barg."""
    data = dict(
        flow_rate=q(100.0, "m³/h"),
        suction=PumpSideInput(
            nominal_size="6",
            length=q(10.0, "m"),
            static_head=q(3.0, "m"),
            pressure=q(101.325, "kPa"),
            fittings={"gate_valve_full": 1, "elbow_90_long": 2},
        ),
        discharge=PumpSideInput(
            nominal_size="4",
            length=q(100.0, "m"),
            static_head=q(25.0, "m"),
            pressure=q(2.0, "barg"),
            fittings={"check_valve_swing": 1, "gate_valve_full": 1, "elbow_90_long": 4},
        ),
    )
    data.update(overrides)
    return PumpInput(**data)


def test_npsh_available_reference_case():
    npsh = npsh_available(101325.0, 2340.0, 1000.0, 3.0, 0.5)
    assert npsh.total == pytest.approx(12.59, abs=0.005)
    assert npsh.friction == -0.5
    assert npsh.static == 3.0


def test_total_dynamic_head_system_mode():
    head = total_dynamic_head(CalculationModeEnum.SYSTEM, 101325.0, 301325.0, 1000.0, 3.0, 25.0,
                              suction_loss=0.4, discharge_loss=6.0, suction_velocity=1.5, discharge_velocity=3.4)
    assert head.static == 22.0
    assert head.friction == pytest.approx(6.4)
    assert head.velocity == 0.0
    assert head.pressure == pytest.approx(200000.0 / (1000.0 * G))
    assert head.total == pytest.approx(22.0 + 6.4 + 200000.0 / (1000.0 * G))


def test_total_dynamic_head_flange_mode():
    head = total_dynamic_head(CalculationModeEnum.FLANGE, 150000.0, 600000.0, 1000.0, 0.0, 0.5,
                              suction_loss=0.4, discharge_loss=6.0, suction_velocity=1.5, discharge_velocity=3.4)
    assert head.friction == 0.0
    assert head.velocity == pytest.approx((3.4 ** 2 - 1.5 ** 2) / (2 * G))
    assert head.total == pytest.approx(0.5 + 450000.0 / (1000.0 * G) + head.velocity)


def test_acceleration_head():
    assert acceleration_head(10.0, 1.0, 100.0, PumpTypeEnum.RECIPROCATING_TRIPLEX) == \
        pytest.approx(10.0 * 1.0 * 100.0 * 0.066 / (2.0 * G))
    assert acceleration_head(10.0, 1.0, 100.0, PumpTypeEnum.RECIPROCATING_SIMPLEX, k=1.4) == \
        pytest.approx(10.0 * 100.0 * 0.200 / (1.4 * G))
    assert acceleration_head(10.0, 1.0, 100.0, PumpTypeEnum.CENTRIFUGAL) == 0.0
    with pytest.raises(ValidationError):
        acceleration_head(10.0, 1.0, 100.0, PumpTypeEnum.RECIPROCATING_DUPLEX, k=0.0)


def test_hi_viscosity_correction():
    water = hi_viscosity_correction(100.0, 50.0, 2950.0, 1.0)
    assert (water.parameter_b, water.c_q, water.c_h, water.c_eta) == (0.0, 1.0, 1.0, 1.0)

    oil = hi_viscosity_correction(100.0, 50.0, 2950.0, 100.0)
    assert 4.0 < oil.parameter_b < 6.0
    assert 0.97 < oil.c_h < 0.98
    assert 0.85 < oil.c_eta < 0.89

    tar = hi_viscosity_correction(10.0, 50.0, 1450.0, 1e5)
    assert tar.parameter_b > 40.0
    assert tar.c_h == pytest.approx(0.85)


def test_power_and_specific_speed():
    power = pump_power(1000.0, 0.1, 50.0, 0.75, 0.95)
    assert power["hydraulic"] == pytest.approx(1000.0 * G * 0.1 * 50.0 / 1000.0)
    assert power["brake"] == pytest.approx(power["hydraulic"] / 0.75)
    assert power["motor"] == pytest.approx(power["brake"] / 0.95)
    assert specific_speed(2950.0, 0.1, 50.0) == pytest.approx(2950.0 * math.sqrt(6.0) / 50.0 ** 0.75)
    assert suction_specific_speed(2950.0, 0.1, 0.0) == pytest.approx(2950.0 * math.sqrt(6.0) / 0.1 ** 0.75)


def test_system_mode_calculation():
    result = calculate_pump(create_test_input())

    assert result.suction.flow.velocity == pytest.approx(1.49, abs=0.005)
    assert result.head.static == pytest.approx(22.0)
    assert result.head.velocity == 0.0
    assert result.head.pressure == pytest.approx((301325.0 - 101325.0) / (1000.0 * G))
    assert result.head.friction == pytest.approx(result.suction.total_loss + result.discharge.total_loss)
    assert result.total_dynamic_head == result.head.total

    expected_npsh = (101325.0 - 2340.0) / (1000.0 * G) + 3.0 - result.suction.total_loss
    assert result.npsh_available == pytest.approx(expected_npsh)
    assert result.npsh.acceleration == 0.0
    assert result.viscosity_correction is None
    assert result.hydraulic_power == pytest.approx(1000.0 * G * (100.0 / 3600.0) * result.head.total / 1000.0)
    assert result.motor_power > result.brake_power > result.hydraulic_power


def test_sides_are_independent():
    base = calculate_pump(create_test_input())
    longer = calculate_pump(create_test_input(discharge=PumpSideInput(
        nominal_size="4", length=q(500.0, "m"), static_head=q(25.0, "m"), pressure=q(2.0, "barg"),
    )))
    assert longer.suction.total_loss == pytest.approx(base.suction.total_loss)
    assert longer.npsh_available == pytest.approx(base.npsh_available)
    assert longer.discharge.total_loss > base.discharge.total_loss


def test_flange_mode_calculation():
    result = calculate_pump(create_test_input(mode=CalculationModeEnum.FLANGE))
    vs = result.suction.flow.velocity
    vd = result.discharge.flow.velocity

    assert result.head.friction == 0.0
    assert result.head.velocity == pytest.approx((vd ** 2 - vs ** 2) / (2 * G))
    assert result.npsh.static == 0.0
    assert result.npsh.friction == 0.0
    assert result.npsh.velocity == pytest.approx(vs ** 2 / (2 * G))


def test_reciprocating_pump_deducts_acceleration_head():
    result = calculate_pump(create_test_input(pump_type=PumpTypeEnum.RECIPROCATING_TRIPLEX, rpm=100.0))
    centrifugal = calculate_pump(create_test_input(rpm=100.0))
    h_a = acceleration_head(10.0, result.suction.flow.velocity, 100.0, PumpTypeEnum.RECIPROCATING_TRIPLEX)

    assert result.npsh.acceleration == pytest.approx(-h_a)
    assert result.npsh_available == pytest.approx(centrifugal.npsh_available - h_a)
    assert result.total_dynamic_head == pytest.approx(centrifugal.total_dynamic_head)


def test_viscous_liquid_correction():
    result = calculate_pump(create_test_input(density=q(900.0, "kg/m³"), viscosity=q(100.0, "cP")))
    assert result.viscosity_correction is not None
    assert result.viscosity_correction.c_h < 1.0
    assert result.water_equivalent_head > result.head.total

    uncorrected = calculate_pump(create_test_input(
        density=q(900.0, "kg/m³"), viscosity=q(100.0, "cP"), viscosity_correction=False,
    ))
    assert uncorrected.viscosity_correction is None
    assert uncorrected.water_equivalent_head is None


def test_recommended_sizes_and_service_checks():
    data = create_test_input()
    suction = data.suction.model_copy(update={"service": "Pump Suction (Sub-cooled)"})
    result = calculate_pump(data.model_copy(update={"suction": suction}))

    assert result.suction.recommended_nominal_size == "6"
    assert result.discharge.recommended_nominal_size == "4"
    assert result.suction.checks
    assert result.discharge.checks == []
    assert any(warning.startswith("Suction: Velocity exceeds limit") for warning in result.warnings)


def test_untabulated_size_uses_default_diameter():
    data = create_test_input()
    suction = data.suction.model_copy(update={"nominal_size": "7"})
    result = calculate_pump(data.model_copy(update={"suction": suction}))
    assert result.suction.pipe.inside_diameter == pytest.approx(0.15405)
    assert any(warning.startswith("Suction: 7\"") for warning in result.warnings)


def test_low_npsh_warning():
    data = create_test_input(vapor_pressure=q(95.0, "kPa"))
    suction = data.suction.model_copy(update={"static_head": q(0.5, "m")})
    result = calculate_pump(data.model_copy(update={"suction": suction}))
    assert result.npsh_available < 3.0
    assert any("NPSH available is low" in warning for warning in result.warnings)


def test_negative_head_duty_still_returns_result():
    data = create_test_input()
    suction = data.suction.model_copy(update={"static_head": q(30.0, "m"), "pressure": q(5.0, "barg")})
    discharge = data.discharge.model_copy(update={"static_head": q(0.0, "m"), "pressure": q(0.0, "barg")})
    result = calculate_pump(data.model_copy(update={"suction": suction, "discharge": discharge}))

    assert result.head.total < 0.0
    assert result.specific_speed is None
    assert result.suction_specific_speed > 0.0
    assert any("Total dynamic head is not positive" in warning for warning in result.warnings)
    assert specific_speed(2950.0, 0.1, -5.0) is None
    assert specific_speed(2950.0, 0.1, 0.0) is None


def test_validation_collects_every_error():
    data = create_test_input(flow_rate=q(-1.0, "m³/h"), pump_efficiency=0.0)
    suction = data.suction.model_copy(update={"fittings": {"bogus": 1}})
    with pytest.raises(ValidationError) as excinfo:
        calculate_pump(data.model_copy(update={"suction": suction}))
    errors = excinfo.value.errors
    assert "Flow rate must be positive" in errors
    assert "Efficiencies must be between 0 and 100 %" in errors
    assert "Suction: Unknown fitting 'bogus'" in errors


def test_custom_material_needs_roughness():
    with pytest.raises(ValidationError) as excinfo:
        calculate_pump(create_test_input(material="Custom", rpm=0.0))
    assert excinfo.value.errors == ["Pump speed must be positive", "Custom material requires a non-negative roughness"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
