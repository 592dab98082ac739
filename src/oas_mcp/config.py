"""Configuration for the OpenAPI MCP server."""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .openapi import DEFAULT_SERVER_URL


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="OAS_MCP_", case_sensitive=False, populate_by_name=True
    )

    service_name: str = Field(default="oas-mcp-server")
    service_version: str = Field(default="1.0.0")

    spec_source: Optional[str] = Field(default=None)
    spec_fetch_timeout_seconds: float = Field(default=30)

    base_url: Optional[str] = Field(default=None)
    default_base_url: str = Field(default=DEFAULT_SERVER_URL)
    api_key: str = Field(
        default="",
        validation_alias=AliasChoices("OAS_MCP_API_KEY", "NEXHEALTH_API_KEY"),
    )
    api_version_header: str = Field(default="Nex-Api-Version")
    api_version: str = Field(default="v2")
    request_timeout_seconds: Optional[float] = Field(default=None)

    transport: str = Field(default="stdio")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    log_level: str = Field(default="INFO")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
