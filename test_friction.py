"""
Tests for the Darcy friction factor.
Covers the three flow regimes, continuity at the regime boundaries and the
explicit Swamee-Jain estimate against an iterative Colebrook-White solve.
"""

import sys
import os

import numpy as np
import pytest

# Add the project root to the Python path
sys.path.append(os.path.abspath('.'))

from app.schemas.hydraulics import FlowRegimeEnum, FrictionMethodEnum
from app.services.hydraulics.flow import classify_regime
from app.services.hydraulics.friction import (
    colebrook,
    friction_factor,
    friction_factor_curve,
    swamee_jain,
)
from app.utils.error_handling import InvalidFlowError


def create_test_input():
    """Commercial steel in a 6 inch schedule 40 line (m)."""
    return {"roughness": 0.0457e-3, "diameter": 0.15405}


def test_regime_boundaries():
    assert classify_regime(2299.999) == FlowRegimeEnum.LAMINAR
    assert classify_regime(2300.0) == FlowRegimeEnum.TRANSITION
    assert classify_regime(3999.999) == FlowRegimeEnum.TRANSITION
    assert classify_regime(4000.0) == FlowRegimeEnum.TURBULENT


def test_laminar_is_64_over_re():
    pipe = create_test_input()
    for re in (100.0, 1000.0, 2299.0):
        result = friction_factor(re, pipe["roughness"], pipe["diameter"])
        assert result.regime == FlowRegimeEnum.LAMINAR
        assert result.method == FrictionMethodEnum.LAMINAR
        assert result.factor == pytest.approx(64.0 / re)


def test_value_at_2300_is_laminar_value():
    pipe = create_test_input()
    result = friction_factor(2300.0, pipe["roughness"], pipe["diameter"])
    assert result.regime == FlowRegimeEnum.TRANSITION
    assert result.factor == pytest.approx(64.0 / 2300.0, rel=1e-12)


def test_continuous_at_regime_boundaries():
    pipe = create_test_input()
    eps = 1e-6
    below = friction_factor(2300.0 - eps, pipe["roughness"], pipe["diameter"]).factor
    above = friction_factor(2300.0 + eps, pipe["roughness"], pipe["diameter"]).factor
    assert above == pytest.approx(below, rel=1e-6)

    below = friction_factor(4000.0 - eps, pipe["roughness"], pipe["diameter"]).factor
    above = friction_factor(4000.0 + eps, pipe["roughness"], pipe["diameter"]).factor
    assert above == pytest.approx(below, rel=1e-6)


def test_transition_is_interpolated():
    pipe = create_test_input()
    result = friction_factor(3150.0, pipe["roughness"], pipe["diameter"])
    f_lam = 64.0 / 2300.0
    f_turb = swamee_jain(4000.0, pipe["roughness"] / pipe["diameter"])
    assert result.method == FrictionMethodEnum.INTERPOLATED
    assert result.factor == pytest.approx(0.5 * (f_lam + f_turb))


def test_turbulent_decreases_with_reynolds():
    pipe = create_test_input()
    factors = [friction_factor(re, pipe["roughness"], pipe["diameter"]).factor
               for re in np.logspace(np.log10(4000.0), 8, 40)]
    assert all(later <= earlier for earlier, later in zip(factors, factors[1:]))


def test_swamee_jain_close_to_colebrook():
    pipe = create_test_input()
    relative = pipe["roughness"] / pipe["diameter"]
    for re in (1e4, 2.29e5, 1e6, 1e7):
        explicit = swamee_jain(re, relative)
        iterative, iterations = colebrook(re, relative)
        assert iterations > 0
        assert explicit == pytest.approx(iterative, rel=0.01)


def test_colebrook_method_selected():
    pipe = create_test_input()
    result = friction_factor(2.29e5, pipe["roughness"], pipe["diameter"], method="colebrook")
    assert result.method == FrictionMethodEnum.COLEBROOK
    assert result.regime == FlowRegimeEnum.TURBULENT


def test_smooth_pipe_is_allowed():
    result = friction_factor(1e5, 0.0, 0.1)
    assert result.factor > 0


def test_non_physical_inputs_raise():
    pipe = create_test_input()
    with pytest.raises(InvalidFlowError):
        friction_factor(0.0, pipe["roughness"], pipe["diameter"])
    with pytest.raises(InvalidFlowError):
        friction_factor(1e5, pipe["roughness"], 0.0)
    with pytest.raises(InvalidFlowError):
        friction_factor(1e5, -1e-5, pipe["diameter"])
    with pytest.raises(InvalidFlowError):
        friction_factor(1e5, pipe["roughness"], pipe["diameter"], method="moody")


def test_curve_covers_all_regimes():
    curve = friction_factor_curve(0.0003, re_min=500.0, re_max=1e7, points=50)
    assert len(curve) == 50
    regimes = {point.regime for point in curve}
    assert regimes == {FlowRegimeEnum.LAMINAR, FlowRegimeEnum.TRANSITION, FlowRegimeEnum.TURBULENT}
    assert curve[0].reynolds == pytest.approx(500.0)
    assert curve[-1].reynolds == pytest.approx(1e7)


def test_curve_rejects_bad_range():
    with pytest.raises(InvalidFlowError):
        friction_factor_curve(0.0003, re_min=1e5, re_max=1e4)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
