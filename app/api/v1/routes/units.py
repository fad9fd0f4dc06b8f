import logging
from fastapi import APIRouter, HTTPException
from typing import Any, Dict, List

from app.schemas.hydraulics import UnitConversionInput
from app.services.hydraulics.hydraulics_service import hydraulics_service
from app.utils.error_handling import APIError, handle_api_error

# Set up logging
logger = logging.getLogger(__name__)

# Create router
router = APIRouter(tags=["units"])


@router.get("/")
async def get_quantity_kinds() -> List[str]:
    """Quantity kinds known to the unit converter."""
    return hydraulics_service.get_quantity_kinds()


@router.post("/convert")
async def convert_units(data: UnitConversionInput) -> Dict[str, Any]:
    """
    Convert a value between two units of the same quantity kind.

    Example:
    ```json
    {"value": 100, "quantity_kind": "flow_rate", "source_unit": "gpm", "target_unit": "m³/h"}
    ```
    """
    try:
        return hydraulics_service.convert_units(data)
    except APIError as e:
        raise handle_api_error(e)
    except Exception as e:
        logger.error(f"Error converting units: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{quantity_kind}")
async def get_units(quantity_kind: str) -> List[str]:
    """Unit symbols registered for a quantity kind."""
    try:
        return hydraulics_service.get_units(quantity_kind)
    except APIError as e:
        raise handle_api_error(e)
