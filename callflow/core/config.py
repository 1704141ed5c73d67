"""Application configuration."""
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Azure Communication Services
    connection_string: str
    acs_resource_phone_number: Optional[str] = None
    cognitive_service_endpoint: Optional[str] = None

    # Call flow
    agent_phone_number: str
    callback_uri: str
    voice_name: str = "en-US-NancyNeural"

    # Server
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @field_validator("callback_uri")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("acs_resource_phone_number", "cognitive_service_endpoint")
    @classmethod
    def blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value

    def missing_optional_settings(self) -> list[str]:
        """Names of optional settings that are unset but affect the call flow."""
        missing = []
        if not self.acs_resource_phone_number:
            missing.append("ACS_RESOURCE_PHONE_NUMBER")
        if not self.cognitive_service_endpoint:
            missing.append("COGNITIVE_SERVICE_ENDPOINT")
        return missing


settings = Settings()
