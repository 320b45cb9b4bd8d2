from decimal import Decimal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Amortization engine limits
    max_iterations: int = 1000
    balance_tolerance: Decimal = Decimal("0.5")  # Currency units

    # Chart axes get this much headroom over the observed maximum
    axis_headroom: Decimal = Decimal("1.1")

    # Calculator form defaults
    default_principal: Decimal = Decimal("6000000")
    default_annual_rate: Decimal = Decimal("6")
    default_tenure_months: int = 360

    # App
    debug: bool = False
    log_level: str = "INFO"


settings = Settings()
