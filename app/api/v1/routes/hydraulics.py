import logging
from fastapi import APIRouter, HTTPException, Query
from typing import List, Dict, Any, Literal, Optional

from app.schemas.hydraulics import (
    CalculationResult,
    CriteriaLimit,
    FrictionCurvePoint,
    FrictionFactorInput,
    FrictionResult,
    GasTransmissionInput,
    GasTransmissionResult,
    LineSizingInput,
    LineTypeEnum,
)
from app.services.hydraulics.hydraulics_service import hydraulics_service
from app.utils.error_handling import APIError, handle_api_error

# Set up logging
logger = logging.getLogger(__name__)

# Create router
router = APIRouter(tags=["hydraulics"])


@router.post(
    "/line-sizing",
    response_model=CalculationResult,
    summary="Size a gas, liquid or mixed-phase line",
)
async def line_sizing_endpoint(data: LineSizingInput) -> CalculationResult:
    """
    Calculate velocity, Reynolds number, friction factor and pressure drop for a
    line and check the result against its service criteria.

    Criteria exceedances are reported as failed checks and warnings, not errors.

    Example:
    ```json
    {
      "line_type": "liquid",
      "service": "Pump Discharge (Pop < 35 barg)",
      "pipe": {"nominal_size": "6", "schedule": "40", "length": {"value": 100, "unit": "m"}},
      "liquid": {
        "flow_rate": {"value": 100, "unit": "m³/h"},
        "density": {"value": 1000, "unit": "kg/m³"},
        "viscosity": {"value": 1, "unit": "cP"}
      },
      "fittings": {"elbow_90_long": 4, "gate_valve_full": 2}
    }
    ```
    """
    try:
        return hydraulics_service.calculate_line_sizing(data)
    except APIError as e:
        raise handle_api_error(e)
    except Exception as e:
        logger.error(f"Error in line sizing calculation: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/friction-factor", response_model=FrictionResult)
async def friction_factor_endpoint(data: FrictionFactorInput) -> FrictionResult:
    """
    Darcy friction factor for a Reynolds number, roughness and inside diameter.
    """
    try:
        return hydraulics_service.calculate_friction_factor(data)
    except APIError as e:
        raise handle_api_error(e)
    except Exception as e:
        logger.error(f"Error in friction factor calculation: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/friction-curve", response_model=List[FrictionCurvePoint])
async def friction_curve_endpoint(
    relative_roughness: float = Query(0.0001, ge=0, description="Relative roughness ε/D"),
    re_min: float = Query(500.0, gt=0),
    re_max: float = Query(1e8, gt=0),
    points: int = Query(200, ge=2, le=2000),
    method: Literal["swamee-jain", "colebrook"] = "swamee-jain",
) -> List[FrictionCurvePoint]:
    """
    One Moody diagram curve: friction factor over a log-spaced Reynolds range.
    """
    try:
        return hydraulics_service.friction_curve(relative_roughness, re_min, re_max, points, method)
    except APIError as e:
        raise handle_api_error(e)
    except Exception as e:
        logger.error(f"Error sampling friction curve: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/gas-transmission", response_model=GasTransmissionResult)
async def gas_transmission_endpoint(data: GasTransmissionInput) -> GasTransmissionResult:
    """
    Pressure drop of a long gas line from the Weymouth or Panhandle A/B equation.
    """
    try:
        return hydraulics_service.calculate_gas_transmission(data)
    except APIError as e:
        raise handle_api_error(e)
    except Exception as e:
        logger.error(f"Error in gas transmission calculation: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/pipe/sizes")
async def get_pipe_sizes() -> List[str]:
    """Nominal pipe sizes, smallest first."""
    return hydraulics_service.get_nominal_sizes()


@router.get("/pipe/{nominal_size:path}/schedules")
async def get_pipe_schedules(nominal_size: str) -> Dict[str, Any]:
    """Schedules and inside diameters (mm) for a nominal size."""
    try:
        return hydraulics_service.get_schedules(nominal_size)
    except APIError as e:
        raise handle_api_error(e)


@router.get("/materials")
async def get_materials() -> Dict[str, float]:
    """Pipe materials and absolute roughness, mm."""
    return hydraulics_service.get_materials()


@router.get("/fittings")
async def get_fittings() -> Dict[str, list]:
    """Fittings and their K factors, grouped by category."""
    return hydraulics_service.get_fittings()


@router.get("/criteria/{line_type}")
async def get_criteria(
    line_type: LineTypeEnum,
    service: Optional[str] = Query(None, description="Service name; omit to list all services"),
    pressure_range: Optional[str] = Query(None, description="Gas pressure range"),
    nominal_size: Optional[str] = Query(None, description="Nominal size for the liquid velocity band"),
) -> Any:
    """
    Service criteria for a line type. Without a service, lists the services available.
    """
    try:
        if service is None:
            return hydraulics_service.get_services(line_type.value)
        limits: CriteriaLimit = hydraulics_service.get_criteria(line_type.value, service, pressure_range,
                                                                nominal_size)
        return limits
    except APIError as e:
        raise handle_api_error(e)
    except Exception as e:
        logger.error(f"Error looking up criteria: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))
