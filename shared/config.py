"""
Shared configuration management for the Condition Layout service.
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="CONDITIONS_",
        env_file=".env",
        case_sensitive=False,
        extra="allow"
    )
    
    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")
    
    # Evaluation
    default_match_type: Literal["all", "any"] = Field(default="all")
    
    # Observability
    enable_metrics: bool = Field(default=True)

    @field_validator("default_match_type", mode="before")
    @classmethod
    def _lower_match_type(cls, value):
        return value.lower() if isinstance(value, str) else value


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""
    
    service_name: str
    port: int
    host: str = "0.0.0.0"
    
    def __init__(self, service_name: str, port: int, **kwargs):
        super().__init__(service_name=service_name, port=port, **kwargs)


def get_config(service_name: str, port: int) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, port=port)
