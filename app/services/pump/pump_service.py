import logging

from app.schemas.pump import PumpInput, PumpCalculationResult
from app.services.hydraulics.extensions.pump import calculate_pump
from app.services.hydraulics.reference_data import DEFAULT_TABLES, ReferenceTables

# Configure logging
logger = logging.getLogger(__name__)


class PumpService:
    """
    Service for handling pump sizing calculations.
    This service encapsulates all pump-related logic to improve separation of concerns.
    """

    def __init__(self, tables: ReferenceTables = DEFAULT_TABLES):
        self.tables = tables

    def calculate_pump(self, data: PumpInput) -> PumpCalculationResult:
        """
        Calculate total dynamic head, NPSH available and power for a pump duty.

        Args:
            data: Input data for pump calculation

        Returns:
            Pump calculation result

        Raises:
            APIError: If the input is invalid
        """
        logger.info(f"Performing {data.mode.value} pump calculation for a {data.pump_type.value} pump: "
                    f"{data.flow_rate.value} {data.flow_rate.unit}")
        result = calculate_pump(data, self.tables)
        logger.info(f"Calculation completed: TDH={result.total_dynamic_head:.2f} m, "
                    f"NPSHa={result.npsh_available:.2f} m, brake power={result.brake_power:.2f} kW")
        return result


# Create a singleton instance
pump_service = PumpService()
