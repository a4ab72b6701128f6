"""
Configuration management for the Harmonograph Studio backend.
Loads settings from environment variables.
"""

from typing import List, Literal
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "harmonograph"
    app_version: str = "0.1.0"
    env: Literal["development", "staging", "production"] = "development"
    debug: bool = True

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 1

    # CORS (browser canvas frontend)
    cors_allow_origins: List[str] = ["http://localhost:3000", "http://localhost:5173"]
    cors_allow_credentials: bool = True

    # Canvas
    canvas_width: int = 800  # px
    canvas_height: int = 800  # px
    stroke_color: str = "black"

    # Rendering
    max_points: int = 200_000  # samples per render pass

    # Logging
    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "json"

    model_config = SettingsConfigDict(
        env_prefix="HARMONOGRAPH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.env == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.env == "production"

    @property
    def canvas_center(self) -> tuple:
        """Center of the drawing canvas in px."""
        return (self.canvas_width / 2.0, self.canvas_height / 2.0)


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """
    Get settings instance.
    Useful for dependency injection in FastAPI.
    """
    return settings
