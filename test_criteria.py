"""
Tests for the API RP 14E service criteria lookups and the pass / fail evaluation.
"""

import sys
import os

import pytest

# Add the project root to the Python path
sys.path.append(os.path.abspath('.'))

from app.schemas.hydraulics import CriteriaLimit, MeasuredValues, VerdictEnum
from app.services.hydraulics.criteria import (
    evaluate,
    evaluate_with_warnings,
    find_gas_criteria,
    find_liquid_criteria,
    find_mixed_criteria,
    list_services,
    liquid_velocity_band,
    select_gas_pressure_range,
)
from app.utils.error_handling import ValidationError


def create_test_input(velocity=1.0, dp_per_km=0.5):
    """Measured values for a liquid line."""
    return MeasuredValues(velocity=velocity, dp_per_km=dp_per_km)


def test_velocity_bands():
    assert liquid_velocity_band(0.5) == "size2"
    assert liquid_velocity_band(2.0) == "size2"
    assert liquid_velocity_band(3.0) == "size3to6"
    assert liquid_velocity_band(6.0) == "size3to6"
    assert liquid_velocity_band(10.0) == "size8to12"
    assert liquid_velocity_band(16.0) == "size14to18"
    assert liquid_velocity_band(24.0) == "size20plus"


def test_liquid_limit_follows_nominal_size():
    assert find_liquid_criteria("Pump Suction (Sub-cooled)", "6").velocity == pytest.approx(1.2)
    assert find_liquid_criteria("Pump Suction (Sub-cooled)", "1-1/2").velocity == pytest.approx(0.7)
    assert find_liquid_criteria("Pump Suction (Sub-cooled)", "24").velocity == pytest.approx(2.6)
    assert find_liquid_criteria("Pump Suction (Sub-cooled)", "6").dp_per_km == pytest.approx(1.0)


def test_velocity_above_limit_fails_with_warning():
    limits = find_liquid_criteria("Pump Suction (Sub-cooled)", "6")
    checks, warnings = evaluate_with_warnings("Pump Suction (Sub-cooled)", create_test_input(velocity=1.3), limits)
    velocity_check = checks[0]
    assert velocity_check.name == "Velocity"
    assert velocity_check.verdict == VerdictEnum.FAIL
    assert len(warnings) == 1
    assert "1.3" in warnings[0] and "1.2" in warnings[0]


def test_value_at_limit_passes():
    limits = CriteriaLimit(service="Test", velocity=2.0)
    eps = 1e-9
    assert evaluate("Test", MeasuredValues(velocity=2.0 - eps), limits)[0].verdict == VerdictEnum.PASS
    assert evaluate("Test", MeasuredValues(velocity=2.0), limits)[0].verdict == VerdictEnum.PASS
    assert evaluate("Test", MeasuredValues(velocity=2.0 + eps), limits)[0].verdict == VerdictEnum.FAIL


def test_missing_limit_is_not_applicable():
    limits = find_mixed_criteria("Continuous (P < 7 barg)")
    checks = evaluate("Continuous (P < 7 barg)", MeasuredValues(velocity=10.0, rho_v2=1000.0), limits)
    verdicts = {check.name: check.verdict for check in checks}
    assert verdicts["Velocity"] == VerdictEnum.NOT_APPLICABLE
    assert verdicts["Momentum (ρv²)"] == VerdictEnum.PASS
    assert verdicts["Mach number"] == VerdictEnum.NOT_APPLICABLE
    assert verdicts["Pressure gradient"] == VerdictEnum.NOT_APPLICABLE


def test_every_criterion_is_reported():
    limits = find_liquid_criteria("Gravity Flow", "4")
    checks = evaluate("Gravity Flow", create_test_input(), limits)
    assert [check.name for check in checks] == ["Velocity", "Momentum (ρv²)", "Mach number", "Pressure gradient"]


def test_gas_pressure_range_selection():
    assert select_gas_pressure_range("Continuous", -0.5) == "Vacuum"
    assert select_gas_pressure_range("Continuous", 0.0) == "Vacuum"
    assert select_gas_pressure_range("Continuous", 1.0) == "Atm to 2 barg"
    assert select_gas_pressure_range("Continuous", 50.0) == "35 to 140 barg"
    assert select_gas_pressure_range("Continuous", 200.0) == "Above 140 barg"
    assert select_gas_pressure_range("Flare Header", 3.0) == "All"
    assert select_gas_pressure_range("No Such Service", 3.0) is None


def test_gas_criteria_lookup():
    limits = find_gas_criteria("Continuous", "2 to 7 barg")
    assert limits.velocity == 45
    assert limits.dp_per_km == 1.0
    assert find_gas_criteria("Flare Header").mach == 0.5


def test_gas_criteria_errors():
    with pytest.raises(ValidationError):
        find_gas_criteria("Continuous")
    with pytest.raises(ValidationError):
        find_gas_criteria("Continuous", "Somewhere in between")
    with pytest.raises(ValidationError):
        find_gas_criteria("Steam Hammer")


def test_unknown_services():
    with pytest.raises(ValidationError):
        find_liquid_criteria("Molten Glass", "6")
    with pytest.raises(ValidationError):
        find_mixed_criteria("Slug Catcher")
    with pytest.raises(ValidationError):
        list_services("plasma")


def test_list_services():
    liquid = list_services("liquid")
    assert any(entry["service"] == "Cooling Water" for entry in liquid)
    assert set(liquid[0]["velocity_bands"]) == {"size2", "size3to6", "size8to12", "size14to18", "size20plus"}
    assert any(entry["pressure_range"] == "All" for entry in list_services("gas"))
    assert any(entry["mach"] == 0.25 for entry in list_services("mixed"))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
