# app/services/hydraulics/friction.py
"""
Darcy friction factor across laminar, transition and turbulent flow.

Laminar flow uses 64/Re. Turbulent flow uses the explicit Swamee-Jain
approximation of Colebrook-White by default, or an iterative Colebrook-White
solve. Between Re 2300 and 4000 the factor is interpolated linearly between
the laminar value at 2300 and the turbulent value at 4000, so the curve is
continuous at both regime boundaries.
"""
import logging
import math
from typing import List, Tuple

import numpy as np

from app.schemas.hydraulics import (
    LAMINAR_LIMIT,
    TURBULENT_LIMIT,
    FlowRegimeEnum,
    FrictionCurvePoint,
    FrictionMethodEnum,
    FrictionResult,
)
from app.services.hydraulics.flow import classify_regime
from app.utils.error_handling import InvalidFlowError

logger = logging.getLogger(__name__)

TURBULENT_METHODS = ("swamee-jain", "colebrook")


def _checked(value: float, what: str) -> float:
    if not math.isfinite(value) or value <= 0:
        raise InvalidFlowError(f"Non-physical {what}: {value}", details={what: value})
    return value


def _log10_positive(argument: float) -> float:
    if not math.isfinite(argument) or argument <= 0:
        raise InvalidFlowError(
            "Friction factor logarithm argument is not positive",
            details={"argument": argument},
        )
    return math.log10(argument)


def laminar(reynolds: float) -> float:
    return 64.0 / reynolds


def swamee_jain(reynolds: float, relative_roughness: float) -> float:
    """f = 0.25 / [log10(ε/3.7D + 5.74/Re^0.9)]²"""
    log_term = _log10_positive(relative_roughness / 3.7 + 5.74 / reynolds ** 0.9)
    if log_term == 0:
        raise InvalidFlowError("Swamee-Jain denominator is zero",
                               details={"relative_roughness": relative_roughness})
    return _checked(0.25 / log_term ** 2, "friction factor")


def haaland(reynolds: float, relative_roughness: float) -> float:
    """Explicit Haaland estimate, used to seed the Colebrook iteration."""
    log_term = _log10_positive((relative_roughness / 3.7) ** 1.11 + 6.9 / reynolds)
    return _checked((-1.8 * log_term) ** -2, "friction factor")


def colebrook(reynolds: float, relative_roughness: float, tol: float = 1e-10,
              max_iter: int = 50) -> Tuple[float, int]:
    """
    Solve 1/√f = -2·log10(ε/3.7D + 2.51/(Re·√f)) by fixed-point iteration on 1/√f.

    Args:
        reynolds: Reynolds number
        relative_roughness: ε/D
        tol: Relative convergence tolerance on 1/√f
        max_iter: Iteration cap

    Returns:
        Tuple of (friction factor, iterations used)
    """
    x = 1.0 / math.sqrt(haaland(reynolds, relative_roughness))
    for iteration in range(1, max_iter + 1):
        x_new = -2.0 * _log10_positive(relative_roughness / 3.7 + 2.51 * x / reynolds)
        if x_new <= 0:
            raise InvalidFlowError("Colebrook iteration diverged",
                                   details={"reynolds": reynolds, "relative_roughness": relative_roughness})
        if abs(x_new - x) <= tol * abs(x_new):
            return _checked(1.0 / x_new ** 2, "friction factor"), iteration
        x = x_new
    logger.warning(f"Colebrook did not converge in {max_iter} iterations (Re={reynolds:.4g}, ε/D={relative_roughness:.3g})")
    return _checked(1.0 / x ** 2, "friction factor"), max_iter


def _turbulent(reynolds: float, relative_roughness: float, method: str) -> Tuple[float, int, FrictionMethodEnum]:
    if method == "colebrook":
        factor, iterations = colebrook(reynolds, relative_roughness)
        return factor, iterations, FrictionMethodEnum.COLEBROOK
    return swamee_jain(reynolds, relative_roughness), 0, FrictionMethodEnum.SWAMEE_JAIN


def friction_factor(reynolds: float, roughness: float, diameter: float,
                    method: str = "swamee-jain") -> FrictionResult:
    """
    Darcy friction factor for any Reynolds number.

    Args:
        reynolds: Reynolds number (> 0)
        roughness: Absolute roughness, m (>= 0)
        diameter: Inside diameter, m (> 0)
        method: Turbulent estimator, "swamee-jain" or "colebrook"

    Returns:
        FrictionResult with the factor, the regime and the method applied

    Raises:
        InvalidFlowError: For non-positive Re or diameter, negative roughness,
            or a non-positive logarithm argument
    """
    if method not in TURBULENT_METHODS:
        raise InvalidFlowError(f"Unknown friction method '{method}'", details={"method": method})
    if not math.isfinite(reynolds) or reynolds <= 0:
        raise InvalidFlowError(f"Reynolds number must be positive, got {reynolds}", details={"reynolds": reynolds})
    if not math.isfinite(diameter) or diameter <= 0:
        raise InvalidFlowError(f"Diameter must be positive, got {diameter}", details={"diameter": diameter})
    if not math.isfinite(roughness) or roughness < 0:
        raise InvalidFlowError(f"Roughness cannot be negative, got {roughness}", details={"roughness": roughness})

    relative_roughness = roughness / diameter
    regime = classify_regime(reynolds)

    if regime == FlowRegimeEnum.LAMINAR:
        return FrictionResult(factor=laminar(reynolds), regime=regime, method=FrictionMethodEnum.LAMINAR)

    if regime == FlowRegimeEnum.TRANSITION:
        t = (reynolds - LAMINAR_LIMIT) / (TURBULENT_LIMIT - LAMINAR_LIMIT)
        f_lam = laminar(LAMINAR_LIMIT)
        f_turb, iterations, _ = _turbulent(TURBULENT_LIMIT, relative_roughness, method)
        factor = f_lam * (1.0 - t) + f_turb * t
        logger.debug(f"Transition blend at Re={reynolds:.1f}: t={t:.3f}, f={factor:.5f}")
        return FrictionResult(
            factor=factor,
            regime=regime,
            method=FrictionMethodEnum.INTERPOLATED,
            iterations=iterations,
        )

    factor, iterations, applied = _turbulent(reynolds, relative_roughness, method)
    return FrictionResult(factor=factor, regime=regime, method=applied, iterations=iterations)


def friction_factor_curve(relative_roughness: float, re_min: float = 500.0, re_max: float = 1e8,
                          points: int = 200, method: str = "swamee-jain") -> List[FrictionCurvePoint]:
    """
    Sample the friction factor over a log-spaced Reynolds range (one Moody curve).
    """
    if re_min <= 0 or re_max <= re_min or points < 2:
        raise InvalidFlowError(
            "Curve needs 0 < re_min < re_max and at least two points",
            details={"re_min": re_min, "re_max": re_max, "points": points},
        )
    curve = []
    for re in np.logspace(np.log10(re_min), np.log10(re_max), num=points):
        result = friction_factor(float(re), relative_roughness, 1.0, method)
        curve.append(FrictionCurvePoint(reynolds=float(re), factor=result.factor, regime=result.regime))
    return curve
