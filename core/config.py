from typing import List
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    allowed_origins: str = Field(default="http://localhost:5173,http://localhost:5174")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    # Database Configuration
    database_url: str = Field(default="sqlite:///./dashboard.db")
    database_pool_size: int = Field(default=10)
    database_max_overflow: int = Field(default=20)

    # Authentication
    jwt_secret: str = Field(default="default-secret-key-change-in-production")
    jwt_algorithm: str = Field(default="HS256")

    # Dashboard Settings
    dashboard_timezone: str = Field(default="UTC")
    dashboard_recent_limit: int = Field(default=10)

    @property
    def allowed_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    @property
    def timezone(self) -> ZoneInfo:
        return ZoneInfo(self.dashboard_timezone)

    def validate(self) -> None:
        errors = []
        if not self.jwt_secret:
            errors.append("JWT_SECRET is required")
        try:
            ZoneInfo(self.dashboard_timezone)
        except (ZoneInfoNotFoundError, ValueError):
            errors.append(f"DASHBOARD_TIMEZONE '{self.dashboard_timezone}' is not a known timezone")
        if self.dashboard_recent_limit <= 0:
            errors.append("DASHBOARD_RECENT_LIMIT must be positive")
        if errors:
            raise ValueError(f"Configuration errors: {', '.join(errors)}")


settings = Settings()
