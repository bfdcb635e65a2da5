"""
Configuration module for the Solvook Bot.

This module handles loading configuration from environment variables and default settings.
Two Slack secrets are mandatory (bot token and signing secret); the app-level token is
optional and switches the bot to Socket Mode when present.
"""

import os
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from solvook_bot.errors import ConfigurationError

# Load environment variables from .env file if it exists
load_dotenv()

ENV_PREFIX = "SOLVOOK_BOT_"

# Environment variables that must be present for the process to start
REQUIRED_SECRETS = {
    "slack_bot_token": "SLACK_BOT_TOKEN",
    "slack_signing_secret": "SLACK_SIGNING_SECRET",
}


class Environment(str, Enum):
    """Supported deployment environments."""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Config(BaseModel):
    """
    Configuration settings for the Solvook Bot.
    """
    model_config = ConfigDict(use_enum_values=True)

    # Application settings
    app_name: str = Field(default="Solvook Bot")
    environment: Environment = Field(default=Environment.DEVELOPMENT)
    debug_mode: bool = Field(default=False)
    log_level: str = Field(default="INFO")
    log_file: Optional[str] = Field(default=None)
    log_dir: str = Field(default="logs")

    # Server settings
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000)

    # Slack credentials
    slack_bot_token: str = Field(..., min_length=1)
    slack_signing_secret: str = Field(..., min_length=1)
    slack_app_token: Optional[str] = Field(default=None)

    # Lookup cache (user / channel metadata)
    lookup_cache_size: int = Field(default=256, ge=1)
    lookup_cache_ttl: float = Field(default=300.0, gt=0)

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Log levels are stored upper-cased."""
        return v.upper()

    @field_validator("slack_app_token")
    @classmethod
    def blank_app_token_is_none(cls, v: Optional[str]) -> Optional[str]:
        """An empty app token means Socket Mode is disabled."""
        if v is not None and not v.strip():
            return None
        return v

    @property
    def socket_mode(self) -> bool:
        """Whether the bot should connect over Socket Mode instead of HTTP."""
        return bool(self.slack_app_token)


def load_config(environ: Optional[Mapping[str, str]] = None) -> Config:
    """
    Load configuration from environment variables and default settings.

    Args:
        environ: Mapping to read from (defaults to ``os.environ``)

    Returns:
        Config: Configuration object

    Raises:
        ConfigurationError: If a mandatory Slack secret is missing or a value is invalid
    """
    environ = os.environ if environ is None else environ

    missing: List[str] = [
        env_var for env_var in REQUIRED_SECRETS.values() if not environ.get(env_var, "").strip()
    ]
    if missing:
        raise ConfigurationError(
            f"Missing required environment variables: {', '.join(missing)}", missing=missing
        )

    values: Dict[str, Any] = {
        field_name: environ[env_var] for field_name, env_var in REQUIRED_SECRETS.items()
    }
    values["slack_app_token"] = environ.get("SLACK_APP_TOKEN")
    if environ.get("PORT"):
        values["port"] = environ["PORT"]

    # Prefixed optional settings
    for field_name in ("host", "log_file", "log_dir", "lookup_cache_size", "lookup_cache_ttl"):
        env_value = environ.get(f"{ENV_PREFIX}{field_name.upper()}")
        if env_value:
            values[field_name] = env_value

    # Load environment-specific settings
    env = environ.get(f"{ENV_PREFIX}ENVIRONMENT", "development").lower()
    if env == "production":
        values.update(environment=Environment.PRODUCTION, debug_mode=False, log_level="WARNING")
    elif env == "staging":
        values.update(environment=Environment.STAGING, debug_mode=True, log_level="INFO")
    else:  # development
        values.update(environment=Environment.DEVELOPMENT, debug_mode=True, log_level="DEBUG")

    # An explicit log level wins over the environment default
    if environ.get(f"{ENV_PREFIX}LOG_LEVEL"):
        values["log_level"] = environ[f"{ENV_PREFIX}LOG_LEVEL"]

    try:
        return Config(**values)
    except ValueError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
