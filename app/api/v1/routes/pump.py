import logging
from fastapi import APIRouter, HTTPException

from app.schemas.pump import PumpInput, PumpCalculationResult
from app.services.pump.pump_service import pump_service
from app.utils.error_handling import APIError, handle_api_error

# Set up logging
logger = logging.getLogger(__name__)

# Create router
router = APIRouter(tags=["pump"])


@router.post(
    "/calculate",
    response_model=PumpCalculationResult,
    summary="Calculate pump head, NPSH available and power",
)
async def calculate_pump_endpoint(data: PumpInput) -> PumpCalculationResult:
    """
    Size a pump for a duty.

    - **system** mode: suction and discharge pressures are vessel pressures;
      TDH includes static, friction and pressure head.
    - **flange** mode: pressures are flange readings; TDH includes static,
      pressure and velocity head.

    Reciprocating pumps add the API 674 acceleration head to the NPSHa
    breakdown. Viscous liquids (above 1 cSt) get ANSI/HI 9.6.7 corrections.

    Example:
    ```json
    {
      "flow_rate": {"value": 100, "unit": "m³/h"},
      "suction": {"nominal_size": "6", "length": {"value": 10, "unit": "m"},
                  "static_head": {"value": 3, "unit": "m"}, "pressure": {"value": 0, "unit": "barg"}},
      "discharge": {"nominal_size": "4", "length": {"value": 100, "unit": "m"},
                    "static_head": {"value": 25, "unit": "m"}, "pressure": {"value": 2, "unit": "barg"}}
    }
    ```
    """
    try:
        return pump_service.calculate_pump(data)
    except APIError as e:
        raise handle_api_error(e)
    except Exception as e:
        logger.error(f"Error in pump calculation: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))
