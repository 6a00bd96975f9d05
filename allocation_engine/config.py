"""
Asset Allocation Engine - Configuration Settings
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )
    
    # =========================
    # Application Settings
    # =========================
    APP_NAME: str = "Asset Allocation Engine"
    APP_ENV: str = "development"
    DEBUG: bool = False
    
    # =========================
    # Allocation Strategy
    # =========================
    ALLOCATION_OBJECTIVE: str = "MAX_SHARPE"
    RISK_FREE_RATE: float = 0.04          # 4% annual, as a fraction
    REBALANCING_THRESHOLD: float = 0.05   # Drift fraction that triggers a trade
    TIME_HORIZON_YEARS: int = 5
    ALLOW_LEVERAGE: bool = False
    MAX_LEVERAGE: float = 1.0
    INCLUDE_ALTERNATIVES: bool = True
    
    # =========================
    # Trading Costs
    # =========================
    TRANSACTION_COST_MODEL: str = "PERCENTAGE"
    TRANSACTION_COST_RATE: float = 0.001  # 0.1% of traded amount
    
    # =========================
    # Rebalancing Schedule
    # =========================
    DEFAULT_REBALANCING_DAYS: int = 90
    
    @field_validator("ALLOCATION_OBJECTIVE", "TRANSACTION_COST_MODEL", mode="before")
    @classmethod
    def upper_case_choice(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v
    
    @field_validator("REBALANCING_THRESHOLD")
    @classmethod
    def threshold_is_fraction(cls, v: float) -> float:
        if not 0 <= v <= 1:
            raise ValueError("REBALANCING_THRESHOLD must be a fraction between 0 and 1")
        return v
    
    # =========================
    # Logging
    # =========================
    LOG_LEVEL: str = "INFO"
    LOG_TO_FILE: bool = False
    LOG_DIR: str = "logs"


# Create global settings instance
settings = Settings()
