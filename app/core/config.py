import os
from typing import List, Union
from pydantic import field_validator
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()



class Settings(BaseSettings):
    # CORE SETTINGS
    ENV: str = os.getenv("ENV", "development")
    DEBUG: bool = ENV == "development"
    API_V1_STR: str = "/api"
    PROJECT_NAME: str = "Flow Sizing API"

    # CORS SETTINGS
    BACKEND_CORS_ORIGINS: List[str] = [
        "http://localhost",
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    @field_validator("BACKEND_CORS_ORIGINS")
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> Union[List[str], str]:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",")]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    # ENGINE DEFAULTS
    GRAVITY: float = float(os.getenv("GRAVITY", "9.81"))  # m/s²
    ATMOSPHERIC_PRESSURE_PA: float = float(os.getenv("ATMOSPHERIC_PRESSURE_PA", "101325"))
    # Fallback inside diameters when a size/schedule pair has no table entry
    DEFAULT_SUCTION_DIAMETER_MM: float = float(os.getenv("DEFAULT_SUCTION_DIAMETER_MM", "154.05"))
    DEFAULT_DISCHARGE_DIAMETER_MM: float = float(os.getenv("DEFAULT_DISCHARGE_DIAMETER_MM", "102.26"))
    DEFAULT_ROUGHNESS_MM: float = float(os.getenv("DEFAULT_ROUGHNESS_MM", "0.0457"))
    # API RP 14E C-factor, ft/s·(lb/ft³)^0.5
    EROSIONAL_C_FACTOR: float = float(os.getenv("EROSIONAL_C_FACTOR", "100"))

    @field_validator("GRAVITY", "ATMOSPHERIC_PRESSURE_PA", "DEFAULT_SUCTION_DIAMETER_MM",
                     "DEFAULT_DISCHARGE_DIAMETER_MM", "EROSIONAL_C_FACTOR")
    def must_be_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("must be positive")
        return v

    # LOGGING SETTINGS
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
