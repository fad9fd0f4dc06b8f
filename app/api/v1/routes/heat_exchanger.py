import logging
from fastapi import APIRouter, HTTPException, Query

from app.schemas.heat_exchanger import (
    BaffleServiceEnum,
    BaffleSpacing,
    BundleDiameterInput,
    BundleDiameterResult,
    PitchRecommendation,
    ShellDiameterInput,
    ShellSizingResult,
    TubeCountInput,
    TubeCountResult,
    TubePatternEnum,
)
from app.services.heat_exchanger.heat_exchanger_service import heat_exchanger_service
from app.services.hydraulics.extensions import tube_bundle
from app.utils.error_handling import APIError, handle_api_error

# Set up logging
logger = logging.getLogger(__name__)

# Create router
router = APIRouter(tags=["heat-exchanger"])


@router.post("/tube-count", response_model=TubeCountResult)
async def tube_count_endpoint(data: TubeCountInput) -> TubeCountResult:
    """
    Tube count for a shell: mean of the area-ratio and Palen estimates, plus
    the TEMA table value when the shell is a standard size.
    """
    try:
        return heat_exchanger_service.calculate_tube_count(data)
    except APIError as e:
        raise handle_api_error(e)
    except Exception as e:
        logger.error(f"Error in tube count calculation: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/bundle-diameter", response_model=BundleDiameterResult)
async def bundle_diameter_endpoint(data: BundleDiameterInput) -> BundleDiameterResult:
    try:
        return heat_exchanger_service.calculate_bundle_diameter(data)
    except APIError as e:
        raise handle_api_error(e)
    except Exception as e:
        logger.error(f"Error in bundle diameter calculation: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/shell-diameter", response_model=ShellSizingResult)
async def shell_diameter_endpoint(data: ShellDiameterInput) -> ShellSizingResult:
    """
    Shell diameter for a tube count, snapped to the nearest standard shell.
    Baffle spacing is included when a tube length is given.
    """
    try:
        return heat_exchanger_service.calculate_shell_diameter(data)
    except APIError as e:
        raise handle_api_error(e)
    except Exception as e:
        logger.error(f"Error in shell diameter calculation: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/recommended-pitch", response_model=PitchRecommendation)
async def recommended_pitch_endpoint(
    tube_od: float = Query(19.05, description="Tube outside diameter, mm"),
    pattern: TubePatternEnum = TubePatternEnum.TRIANGULAR,
    cleaning_required: bool = False,
) -> PitchRecommendation:
    try:
        return tube_bundle.recommended_pitch(tube_od, pattern, cleaning_required)
    except APIError as e:
        raise handle_api_error(e)


@router.get("/baffle-spacing", response_model=BaffleSpacing)
async def baffle_spacing_endpoint(
    shell_diameter: float = Query(..., description="Shell inside diameter, mm"),
    service: BaffleServiceEnum = BaffleServiceEnum.LIQUID,
) -> BaffleSpacing:
    try:
        return tube_bundle.recommended_baffle_spacing(shell_diameter, service)
    except APIError as e:
        raise handle_api_error(e)
