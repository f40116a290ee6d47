from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    APP_ENV: str = "development"
    APP_DEBUG: bool = True
    FRONTEND_URL: str = "http://localhost:3000"

    # Security
    MAX_REQUEST_BODY_BYTES: int = 1_048_576  # 1 MB

    # Sentry error monitoring; no-op when SENTRY_DSN is unset
    SENTRY_DSN: str | None = None
    SENTRY_ENVIRONMENT: str = "development"
    APP_VERSION: str | None = None  # e.g. "1.2.3" or git SHA, used as Sentry release tag

    # Market defaults pre-filled into analysis forms
    DEFAULT_SMP_PRICE: float = 120.0           # won/kWh
    DEFAULT_REC_PRICE: float = 40_000.0        # won/REC
    DEFAULT_REC_WEIGHT: float = 1.0
    DEFAULT_PEAK_HOURS: float = 3.7            # equivalent sun-hours per day
    DEFAULT_DEGRADATION_RATE: float = 0.008    # 0.8 %/yr
    DEFAULT_MAINTENANCE_COST: float = 500_000.0  # won/yr
    DEFAULT_MONITORING_COST: float = 300_000.0   # won/yr
    DEFAULT_BANK_INTEREST_RATE: float = 5.5    # % p.a.
    DEFAULT_FACTORING_FEE_RATE: float = 0.08

    @model_validator(mode="after")
    def _validate_market_defaults(self) -> "Settings":
        for name in ("DEFAULT_SMP_PRICE", "DEFAULT_REC_PRICE", "DEFAULT_PEAK_HOURS"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
        if not 0 <= self.DEFAULT_DEGRADATION_RATE < 1:
            raise ValueError("DEFAULT_DEGRADATION_RATE must be in [0, 1)")
        if self.DEFAULT_BANK_INTEREST_RATE < 0:
            raise ValueError("DEFAULT_BANK_INTEREST_RATE must not be negative")
        return self


settings = Settings()
