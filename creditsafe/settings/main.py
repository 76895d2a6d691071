"""Pydantic settings models for client and logging configuration."""

from __future__ import annotations

import logging

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from creditsafe.enums import Environment


class CreditsafeSettings(BaseSettings):
    """Connection settings for the GlobalData service."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    environment: Environment = Field(default=Environment.TEST, alias="CS_ENVIRONMENT")
    username: str | None = Field(default=None, alias="CS_USERNAME")
    password: SecretStr | None = Field(default=None, alias="CS_PASSWORD")

    # Seconds; timeout applies to WSDL loading, operation_timeout to service calls
    timeout: int = Field(default=30, alias="CS_TIMEOUT")
    operation_timeout: int | None = Field(default=None, alias="CS_OPERATION_TIMEOUT")


class LogSettings(BaseSettings):
    """Cross-cutting logging behavior settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    log_level: int = Field(default=logging.INFO, alias="CS_LOG_LEVEL")
    log_format: str = '%(asctime)s %(levelname)s %(name)s %(message)s'
    log_file: str | None = Field(default=None, alias="CS_LOG_FILE")
    log_max_queue: int = 10000


class GeneralSettings(BaseSettings):
    """General settings is used when more than one setting is required to be imported into app"""

    @staticmethod
    def _default_client() -> CreditsafeSettings:
        return CreditsafeSettings()

    client: CreditsafeSettings = Field(default_factory=_default_client)
    log_settings: LogSettings = Field(default_factory=LogSettings)
