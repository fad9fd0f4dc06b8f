# app/schemas/heat_exchanger.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from enum import Enum

from app.schemas.hydraulics import QuantityInput


class TubePatternEnum(str, Enum):
    TRIANGULAR = "triangular"
    SQUARE = "square"
    ROTATED_SQUARE = "rotated_square"


class ShellTypeEnum(str, Enum):
    FIXED = "fixed"
    FLOATING = "floating"
    U_TUBE = "u-tube"


class BaffleServiceEnum(str, Enum):
    LIQUID = "liquid"
    GAS = "gas"
    CONDENSING = "condensing"
    BOILING = "boiling"


class TubeCountInput(BaseModel):
    shell_diameter: QuantityInput = Field(..., description="Shell inside diameter")
    tube_od: QuantityInput = Field(QuantityInput(value=19.05, unit="mm"), description="Tube outside diameter")
    tube_pitch: QuantityInput = Field(QuantityInput(value=25.4, unit="mm"), description="Tube pitch")
    pattern: TubePatternEnum = TubePatternEnum.TRIANGULAR
    passes: int = Field(1, description="Number of tube passes")


class BundleDiameterInput(BaseModel):
    tube_count: int = Field(..., description="Number of tubes")
    tube_od: QuantityInput = Field(QuantityInput(value=19.05, unit="mm"), description="Tube outside diameter")
    pattern: TubePatternEnum = TubePatternEnum.TRIANGULAR
    passes: int = Field(1, description="Number of tube passes")


class ShellDiameterInput(BundleDiameterInput):
    shell_type: ShellTypeEnum = ShellTypeEnum.FIXED
    tube_length: Optional[QuantityInput] = Field(None, description="Tube length, for baffle recommendations")
    baffle_service: BaffleServiceEnum = BaffleServiceEnum.LIQUID


class TubeCountResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    count: int = Field(..., description="Mean of the two estimates, rounded half up")
    area_estimate: int = Field(..., description="Area-ratio estimate")
    palen_estimate: int = Field(..., description="Palen correlation estimate")
    bundle_diameter: float = Field(..., description="Bundle diameter, mm")
    bundle_clearance: float = Field(..., description="Shell-to-bundle clearance, mm")
    tema_count: Optional[int] = Field(None, description="TEMA table count for 19.05 mm tubes on 25.4 mm pitch")
    method: str = "Palen/Area Average"


class BundleDiameterResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    tube_count: int
    bundle_diameter: float = Field(..., description="Bundle diameter, mm")


class PitchRecommendation(BaseModel):
    model_config = ConfigDict(frozen=True)

    pitch: float = Field(..., description="Tube pitch, mm")
    ratio: float = Field(..., description="Pitch / OD")


class BaffleSpacing(BaseModel):
    model_config = ConfigDict(frozen=True)

    minimum: float = Field(..., description="Minimum spacing, mm")
    maximum: float = Field(..., description="Maximum spacing, mm")
    recommended: float = Field(..., description="Recommended spacing, mm")
    number_of_baffles: Optional[int] = None


class ShellSizingResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    shell_diameter: float = Field(..., description="Nearest standard shell inside diameter, mm")
    bundle_diameter: float = Field(..., description="Bundle diameter, mm")
    clearance: float = Field(..., description="Standard shell minus bundle diameter, mm")
    baffles: Optional[BaffleSpacing] = None
