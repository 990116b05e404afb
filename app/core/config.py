from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict  # type: ignore[import-not-found]


class Settings(BaseSettings):
    app_env: str = "local"
    app_name: str = "airport-distance-service"
    port: int = 8000
    log_level: str = "INFO"

    cors_origins: list[str] | str = "*"

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: Any) -> list[str] | str:
        if isinstance(v, str):
            if v == "*":
                return "*"
            if "," in v:
                return [origin.strip() for origin in v.split(",") if origin.strip()]
            return [v.strip()] if v.strip() else "*"
        if isinstance(v, list):
            return v
        return "*"

    # External airport directory
    airport_api_base_url: str = "https://places-dev.continent.ru"
    airport_api_timeout_sec: float = 30.0
    airport_api_user_agent: str = "AirportDistanceService/1.0"

    # Overall deadline for one distance calculation (both lookups); None disables it
    distance_request_timeout_sec: float | None = None
    disconnect_poll_interval_sec: float = 0.5

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)


settings = Settings()
