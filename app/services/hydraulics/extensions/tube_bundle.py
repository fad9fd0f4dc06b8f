# app/services/hydraulics/extensions/tube_bundle.py
"""
Shell-and-tube bundle geometry per TEMA RCB-4.

All lengths are in mm. Tube counts are rounded half up.
"""
import logging
import math
from typing import List, Optional, Tuple

from app.schemas.heat_exchanger import (
    BaffleSpacing,
    BaffleServiceEnum,
    PitchRecommendation,
    ShellSizingResult,
    ShellTypeEnum,
    TubeCountResult,
    TubePatternEnum,
)
from app.services.hydraulics.reference_data import DEFAULT_TABLES, ReferenceTables
from app.utils.error_handling import UnknownGeometryError, ValidationError

logger = logging.getLogger(__name__)

# (K1, n1) for Db = Do·(Nt/K1)^(1/n1), keyed by pitch family then passes (1, 2, 4+)
BUNDLE_CONSTANTS = {
    "triangular": ((0.319, 2.142), (0.249, 2.207), (0.175, 2.285)),
    "square": ((0.215, 2.207), (0.156, 2.291), (0.158, 2.263)),
}

# Shell-to-bundle clearance (mm) by shell type for bundles < 300, < 700 and larger
SHELL_CLEARANCES = {
    ShellTypeEnum.FIXED: (10.0, 20.0, 30.0),
    ShellTypeEnum.FLOATING: (40.0, 60.0, 80.0),
    ShellTypeEnum.U_TUBE: (15.0, 25.0, 35.0),
}

BAFFLE_FACTORS = {
    BaffleServiceEnum.LIQUID: 0.4,
    BaffleServiceEnum.GAS: 0.6,
    BaffleServiceEnum.CONDENSING: 0.5,
    BaffleServiceEnum.BOILING: 0.4,
}


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _pitch_family(pattern: TubePatternEnum) -> str:
    return "triangular" if TubePatternEnum(pattern) == TubePatternEnum.TRIANGULAR else "square"


def _pass_index(passes: int) -> int:
    return 0 if passes == 1 else (1 if passes == 2 else 2)


def _validate(errors: List[str]) -> None:
    if errors:
        logger.warning(f"Tube bundle input rejected: {errors}")
        raise ValidationError(errors)


def _check_common(errors: List[str], tube_od: float, passes: int) -> None:
    if tube_od <= 0:
        errors.append("Tube outside diameter must be positive")
    if passes < 1:
        errors.append("Number of tube passes must be at least 1")


def tube_count_constant(passes: int) -> float:
    """CTP: 0.93 for one pass, 0.90 for two, 0.85 for more."""
    return (0.93, 0.90, 0.85)[_pass_index(passes)]


def bundle_clearance(shell_diameter: float) -> float:
    """Approximate shell-to-bundle clearance used when counting tubes."""
    if shell_diameter > 600:
        return 50.0
    if shell_diameter > 300:
        return 30.0
    return 20.0


def tube_count(shell_diameter: float, tube_od: float, tube_pitch: float,
               pattern: TubePatternEnum = TubePatternEnum.TRIANGULAR, passes: int = 1,
               tables: ReferenceTables = DEFAULT_TABLES) -> TubeCountResult:
    """
    Number of tubes that fit a shell.

    Two estimates on the bundle diameter Db = Ds - clearance are averaged:
    the area ratio floor(CTP·CL·(π/4)Db² / A_tube) and Palen's correlation
    floor(CTP·K·(Db/Pt)²).

    Args:
        shell_diameter: Shell inside diameter, mm
        tube_od: Tube outside diameter, mm
        tube_pitch: Tube pitch, mm
        pattern: Tube layout
        passes: Number of tube passes

    Returns:
        TubeCountResult with both estimates and their rounded mean

    Raises:
        ValidationError: Listing every invalid input
    """
    errors: List[str] = []
    if shell_diameter <= 0:
        errors.append("Shell diameter must be positive")
    _check_common(errors, tube_od, passes)
    if tube_pitch <= tube_od:
        errors.append("Tube pitch must be greater than the tube outside diameter")
    clearance = bundle_clearance(shell_diameter)
    if shell_diameter > 0 and shell_diameter <= clearance:
        errors.append(f"Shell diameter must exceed the {clearance:g} mm bundle clearance")
    _validate(errors)

    triangular = _pitch_family(pattern) == "triangular"
    layout_constant = 0.87 if triangular else 1.0
    ctp = tube_count_constant(passes)
    bundle = shell_diameter - clearance

    bundle_area = math.pi * (bundle / 2.0) ** 2
    tube_area = math.sqrt(3.0) / 4.0 * tube_pitch ** 2 if triangular else tube_pitch ** 2
    area_estimate = math.floor(ctp * layout_constant * bundle_area / tube_area)

    palen_k = 0.78 if triangular else 0.785
    palen_estimate = math.floor(ctp * palen_k * (bundle / tube_pitch) ** 2)

    count = round_half_up((area_estimate + palen_estimate) / 2.0)
    logger.debug(f"Tube count: Ds={shell_diameter} mm, area={area_estimate}, palen={palen_estimate}, Nt={count}")
    return TubeCountResult(
        count=count,
        area_estimate=area_estimate,
        palen_estimate=palen_estimate,
        bundle_diameter=bundle,
        bundle_clearance=clearance,
        tema_count=_tema_lookup(shell_diameter, passes, pattern, tables),
    )


def bundle_diameter(number_of_tubes: int, tube_od: float,
                    pattern: TubePatternEnum = TubePatternEnum.TRIANGULAR, passes: int = 1) -> float:
    """Bundle diameter Db = Do·(Nt/K1)^(1/n1), mm."""
    errors: List[str] = []
    if number_of_tubes <= 0:
        errors.append("Number of tubes must be positive")
    _check_common(errors, tube_od, passes)
    _validate(errors)

    k1, n1 = BUNDLE_CONSTANTS[_pitch_family(pattern)][_pass_index(passes)]
    return tube_od * (number_of_tubes / k1) ** (1.0 / n1)


def standard_shell_size(required: float, tables: ReferenceTables = DEFAULT_TABLES) -> float:
    """
    Smallest standard shell inside diameter not below ``required``, mm.

    Above the largest tabulated shell the requirement is rounded up to a whole
    millimetre, so the bundle clearance is never eaten into.
    """
    for size in tables.standard_shell_sizes:
        if size >= required:
            return float(size)
    return float(math.ceil(required))


def shell_diameter(number_of_tubes: int, tube_od: float,
                   pattern: TubePatternEnum = TubePatternEnum.TRIANGULAR, passes: int = 1,
                   shell_type: ShellTypeEnum = ShellTypeEnum.FIXED,
                   tables: ReferenceTables = DEFAULT_TABLES) -> Tuple[float, float, float]:
    """
    Shell diameter needed for a tube count.

    Returns:
        Tuple of (standard shell diameter, bundle diameter, clearance), mm
    """
    bundle = bundle_diameter(number_of_tubes, tube_od, pattern, passes)
    small, medium, large = SHELL_CLEARANCES[ShellTypeEnum(shell_type)]
    clearance = small if bundle < 300 else (medium if bundle < 700 else large)
    shell = standard_shell_size(bundle + clearance, tables)
    return shell, bundle, shell - bundle


def _tema_lookup(shell_id_mm: float, passes: int, pattern: TubePatternEnum,
                 tables: ReferenceTables) -> Optional[int]:
    row = tables.tema_tube_counts.get(int(shell_id_mm)) if float(shell_id_mm).is_integer() else None
    if row is None or passes not in row:
        return None
    triangular, square = row[passes]
    return triangular if _pitch_family(pattern) == "triangular" else square


def tema_tube_count(shell_id_mm: float, passes: int, pattern: TubePatternEnum = TubePatternEnum.TRIANGULAR,
                    tables: ReferenceTables = DEFAULT_TABLES) -> int:
    """
    TEMA tabulated tube count (19.05 mm tubes on 25.4 mm pitch).

    Raises:
        UnknownGeometryError: If the shell size or pass count is not tabulated
    """
    count = _tema_lookup(shell_id_mm, passes, pattern, tables)
    if count is None:
        raise UnknownGeometryError(
            f"No TEMA tube count for a {shell_id_mm:g} mm shell with {passes} pass(es)",
            details={"shell_id_mm": shell_id_mm, "passes": passes,
                     "standard_shells": list(tables.tema_tube_counts.keys())},
        )
    return count


def recommended_pitch(tube_od: float, pattern: TubePatternEnum = TubePatternEnum.TRIANGULAR,
                      cleaning_required: bool = False) -> PitchRecommendation:
    """Minimum TEMA pitch: Pt/Do = 1.25, or 1.33 for square layouts that need cleaning lanes."""
    if tube_od <= 0:
        raise ValidationError(["Tube outside diameter must be positive"])
    if _pitch_family(pattern) == "triangular":
        ratio = 1.25
    else:
        ratio = 1.33 if cleaning_required else 1.25
    pitch = round_half_up(tube_od * ratio * 10.0) / 10.0
    return PitchRecommendation(pitch=pitch, ratio=pitch / tube_od)


def recommended_baffle_spacing(shell_diameter: float,
                               service: BaffleServiceEnum = BaffleServiceEnum.LIQUID) -> BaffleSpacing:
    """
    Baffle spacing between max(50 mm, Ds/5) and Ds, recommended as a
    service-dependent fraction of Ds.
    """
    if shell_diameter <= 0:
        raise ValidationError(["Shell diameter must be positive"])
    minimum = max(50.0, shell_diameter / 5.0)
    maximum = shell_diameter
    recommended = min(maximum, max(minimum, shell_diameter * BAFFLE_FACTORS[BaffleServiceEnum(service)]))
    return BaffleSpacing(minimum=minimum, maximum=maximum, recommended=float(round_half_up(recommended)))


def number_of_baffles(tube_length: float, baffle_spacing: float) -> int:
    """Baffles along a tube length (m) at a spacing (mm); at least one."""
    errors = []
    if tube_length <= 0:
        errors.append("Tube length must be positive")
    if baffle_spacing <= 0:
        errors.append("Baffle spacing must be positive")
    _validate(errors)
    return max(1, math.floor(tube_length * 1000.0 / baffle_spacing) - 1)


def shell_sizing(number_of_tubes: int, tube_od: float,
                 pattern: TubePatternEnum = TubePatternEnum.TRIANGULAR, passes: int = 1,
                 shell_type: ShellTypeEnum = ShellTypeEnum.FIXED, tube_length: Optional[float] = None,
                 baffle_service: BaffleServiceEnum = BaffleServiceEnum.LIQUID,
                 tables: ReferenceTables = DEFAULT_TABLES) -> ShellSizingResult:
    """Shell diameter plus baffle recommendations when a tube length (m) is given."""
    shell, bundle, clearance = shell_diameter(number_of_tubes, tube_od, pattern, passes, shell_type, tables)
    baffles = None
    if tube_length is not None:
        spacing = recommended_baffle_spacing(shell, baffle_service)
        baffles = spacing.model_copy(
            update={"number_of_baffles": number_of_baffles(tube_length, spacing.recommended)}
        )
    return ShellSizingResult(shell_diameter=shell, bundle_diameter=bundle, clearance=clearance, baffles=baffles)
