"""
Load settings from the environment (and an optional .env file).

The API key is never logged. Missing configuration is reported through a
StartupCheck so the entry point decides whether to exit.
"""

from dataclasses import dataclass
from typing import Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DIRECTIONS_URL = "https://maps.googleapis.com/maps/api/directions/json"
API_KEY_HELP_URL = "https://console.cloud.google.com/google/maps-apis"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    google_maps_api_key: str = Field(min_length=1, description="Google Maps Platform API key")
    google_maps_directions_url: str = Field(
        default=DEFAULT_DIRECTIONS_URL, description="Directions API JSON endpoint"
    )

    log_level: str = Field(default="INFO", description="Log level")
    http_host: str = Field(default="0.0.0.0", description="HTTP transport bind host")
    http_port: int = Field(default=3000, description="HTTP transport port")


@dataclass
class StartupCheck:
    settings: Optional[Settings] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.settings is not None


def load_settings(**overrides) -> StartupCheck:
    try:
        return StartupCheck(settings=Settings(**overrides))
    except ValidationError as e:
        fields = {str(err["loc"][0]) for err in e.errors() if err.get("loc")}
        if "google_maps_api_key" in fields:
            return StartupCheck(error="GOOGLE_MAPS_API_KEY environment variable is required")
        return StartupCheck(error=f"Invalid configuration: {', '.join(sorted(fields))}")
