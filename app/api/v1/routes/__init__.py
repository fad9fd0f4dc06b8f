from fastapi import APIRouter

# Import all the individual routers
from . import heat_exchanger, hydraulics, pump, units

api_router = APIRouter()
api_router.include_router(hydraulics.router, prefix="/hydraulics", tags=["hydraulics"])
api_router.include_router(units.router, prefix="/units", tags=["units"])
api_router.include_router(pump.router, prefix="/pump", tags=["pump"])
api_router.include_router(heat_exchanger.router, prefix="/heat-exchanger", tags=["heat-exchanger"])
