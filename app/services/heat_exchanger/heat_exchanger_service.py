import logging

from app.schemas.heat_exchanger import (
    BundleDiameterInput,
    BundleDiameterResult,
    ShellDiameterInput,
    ShellSizingResult,
    TubeCountInput,
    TubeCountResult,
)
from app.services.hydraulics.extensions import tube_bundle
from app.services.hydraulics.reference_data import DEFAULT_TABLES, ReferenceTables
from app.utils.conversions import to_si

# Configure logging
logger = logging.getLogger(__name__)


def _mm(quantity) -> float:
    return to_si(quantity.value, "length_small", quantity.unit) * 1000.0


class HeatExchangerService:
    """
    Service for shell-and-tube bundle geometry.
    """

    def __init__(self, tables: ReferenceTables = DEFAULT_TABLES):
        self.tables = tables

    def calculate_tube_count(self, data: TubeCountInput) -> TubeCountResult:
        """
        Estimate the number of tubes that fit a shell.

        Args:
            data: Shell diameter, tube OD, pitch, layout and passes

        Returns:
            Tube count result
        """
        shell = _mm(data.shell_diameter)
        logger.info(f"Calculating tube count for a {shell:.1f} mm shell, {data.pattern.value}, {data.passes} pass(es)")
        result = tube_bundle.tube_count(shell, _mm(data.tube_od), _mm(data.tube_pitch), data.pattern,
                                        data.passes, self.tables)
        logger.info(f"Calculation completed: Nt={result.count}")
        return result

    def calculate_bundle_diameter(self, data: BundleDiameterInput) -> BundleDiameterResult:
        logger.info(f"Calculating bundle diameter for {data.tube_count} tubes")
        diameter = tube_bundle.bundle_diameter(data.tube_count, _mm(data.tube_od), data.pattern, data.passes)
        return BundleDiameterResult(tube_count=data.tube_count, bundle_diameter=diameter)

    def calculate_shell_diameter(self, data: ShellDiameterInput) -> ShellSizingResult:
        """
        Size the shell for a tube count and snap it to a standard shell.

        Args:
            data: Tube count, tube OD, layout, passes, shell type and optional tube length

        Returns:
            Shell sizing result, with baffle spacing when a tube length is given
        """
        logger.info(f"Calculating {data.shell_type.value} shell diameter for {data.tube_count} tubes")
        tube_length = None
        if data.tube_length is not None:
            tube_length = to_si(data.tube_length.value, "length", data.tube_length.unit)
        result = tube_bundle.shell_sizing(
            data.tube_count, _mm(data.tube_od), data.pattern, data.passes, data.shell_type,
            tube_length, data.baffle_service, self.tables,
        )
        logger.info(f"Calculation completed: Ds={result.shell_diameter:.0f} mm, Db={result.bundle_diameter:.1f} mm")
        return result


# Create a singleton instance
heat_exchanger_service = HeatExchangerService()
