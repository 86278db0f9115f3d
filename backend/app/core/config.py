from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from typing import Any
import json
from pathlib import Path
import os


class Settings(BaseSettings):
    model_config = SettingsConfigDict(extra="ignore", case_sensitive=True)

    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Interpretation Pricing API"

    # Currency used for rate plans that do not declare their own
    DEFAULT_CURRENCY: str = "USD"

    # Optional JSON document replacing the built-in rate/commission tables.
    # Read once at startup; changing rates means redeploying this file.
    PRICING_CONFIG_PATH: str = ""

    LOG_LEVEL: str = "INFO"
    DISABLE_ACCESS_LOG: bool | None = None

    # Keep as a plain string to avoid JSON-only decoding of lists in
    # BaseSettings; ``cors_origins`` parses commas or a JSON list.
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"
    CORS_ALLOW_ALL: bool = False

    @field_validator("DEFAULT_CURRENCY", mode="before")
    def upper_currency(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("PRICING_CONFIG_PATH", "LOG_LEVEL", "CORS_ORIGINS", mode="before")
    def strip_whitespace(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v

    @property
    def cors_origins(self) -> list[str]:
        """Parse comma-separated or JSON list of origins."""
        if self.CORS_ALLOW_ALL:
            return ["*"]
        raw = self.CORS_ORIGINS
        try:
            parsed = json.loads(raw)
            if isinstance(parsed, list):
                return [str(s).strip() for s in parsed if str(s).strip()]
        except json.JSONDecodeError:
            pass
        return [s.strip() for s in raw.split(",") if s.strip()]


def load_settings() -> "Settings":
    return Settings(_env_file=os.getenv("ENV_FILE", str(Path(__file__).resolve().parents[3] / ".env")))


settings = load_settings()
