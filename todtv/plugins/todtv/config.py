"""
TOD TV Configuration - Plugin-specific configuration management.

This module handles configuration validation and defaults for the
TOD TV plugin. Credentials and tokens are only ever supplied here.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from todtv.plugins.base import DEFAULT_USER_AGENT


class TodTvConfig(BaseModel):
    """Configuration model for TOD TV plugin."""

    enabled: bool = Field(True, description="Whether the plugin is enabled")
    timeout: int = Field(30, ge=5, le=120, description="Request timeout in seconds")
    rate_limit: float = Field(0.5, ge=0.0, le=10.0, description="Minimum seconds between requests")
    user_agent: str = Field(DEFAULT_USER_AGENT, description="User agent string for requests")

    main_url: str = Field("https://www.todtv.com.tr", description="Site root URL")
    search_path: str = Field("/arama", description="Search endpoint path")

    # Authentication, all optional
    auth_token: Optional[str] = Field(None, description="Bearer token for the video API")
    email: Optional[str] = Field(None, description="Account e-mail used by authenticate()")
    password: Optional[str] = Field(None, description="Account password used by authenticate()")

    @field_validator('main_url')
    @classmethod
    def validate_main_url(cls, v: str) -> str:
        """Require an http(s) root and drop the trailing slash."""
        v = v.strip()
        if not v.startswith(('http://', 'https://')):
            raise ValueError("main_url must start with http:// or https://")
        return v.rstrip('/')

    @field_validator('search_path')
    @classmethod
    def validate_search_path(cls, v: str) -> str:
        v = v.strip()
        return v if v.startswith('/') else f"/{v}"

    @field_validator('user_agent')
    @classmethod
    def validate_user_agent(cls, v: str) -> str:
        """Validate user agent string."""
        if not v or len(v.strip()) < 10:
            raise ValueError("User agent must be a valid browser string")
        return v.strip()

    @property
    def has_credentials(self) -> bool:
        return bool(self.email and self.password)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return self.model_dump()


def get_default_config() -> Dict[str, Any]:
    """Get default configuration for TOD TV plugin."""
    return TodTvConfig().to_dict()


def validate_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate and normalize plugin configuration.

    Args:
        config: Raw configuration dictionary

    Returns:
        Validated and normalized configuration

    Raises:
        ValueError: If configuration is invalid
    """
    try:
        return TodTvConfig.model_validate(config).to_dict()
    except ValidationError as e:
        raise ValueError(f"Invalid TOD TV plugin configuration: {e}")


__all__ = ["TodTvConfig", "get_default_config", "validate_config"]
