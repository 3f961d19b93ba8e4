"""Gitee client configuration."""

import logging
import os
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://gitee.com/api/v5"
DEFAULT_TIMEOUT = 30.0  # seconds

TOKEN_ENV_VARS = ("GITEE_TOKEN", "GITEE_ACCESS_TOKEN")


class ListDefaults(BaseModel):
    """Default query parameters for paginated list endpoints."""

    per_page: int = Field(default=100, ge=1)
    page: int = Field(default=1, ge=1)
    sort: str = "updated"

    def as_params(self) -> dict[str, Any]:
        """Return a fresh parameter dict for one listing."""
        return self.model_dump()


class GiteeConfig(BaseModel):
    """Settings for a GiteeClient."""

    access_token: str
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    defaults: ListDefaults = Field(default_factory=ListDefaults)

    @field_validator("access_token")
    @classmethod
    def _require_token(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Access token is required")
        return value


def get_token(token: str | None = None, use_dotenv: bool = False) -> str | None:
    """
    Get Gitee access token from various sources.

    Priority:
    1. Explicitly provided token
    2. Environment variable GITEE_TOKEN / GITEE_ACCESS_TOKEN
       (optionally populated from a .env file first)

    Args:
        token: Explicitly provided token
        use_dotenv: Load a .env file into the environment before lookup

    Returns:
        Gitee access token or None
    """
    if token:
        logger.debug("Using explicitly provided token")
        return token

    if use_dotenv:
        loaded = load_dotenv()
        logger.debug("Loaded .env file: %s", loaded)

    for name in TOKEN_ENV_VARS:
        env_token = os.environ.get(name)
        if env_token:
            logger.info("Using token from environment variable %s", name)
            return env_token

    return None
