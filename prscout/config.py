"""Configuration loading from YAML and environment.

Secrets (app passwords, tokens) are taken from environment variables or
from files (Docker secrets). Never put real credentials in config files
committed to the repo.
"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from prscout.adapters.base import ConfigurationError

SUPPORTED_PROVIDERS = ("bitbucket_cloud",)


def _read_secret(env_key: str, file_env_key: str) -> str | None:
    """Read secret from env var or from file path in env (e.g. Docker
    secrets)."""
    value = os.environ.get(env_key)
    if value:
        return value.strip()
    file_path = os.environ.get(file_env_key)
    if file_path:
        return Path(file_path).read_text().strip()
    return None


def _is_placeholder(value: str | None) -> bool:
    """Empty, or an unresolved $VAR / ${VAR} reference left by _substitute_env."""
    return not value or value.startswith("$")


class BitbucketCloudConfig(BaseSettings):
    """Bitbucket Cloud repository coordinates and credentials."""

    model_config = SettingsConfigDict(env_prefix="BITBUCKET_", extra="ignore")

    api_url: str = Field(default="", description="API base URL; empty means https://api.bitbucket.org/2.0")
    owner: str = Field(default="", description="Workspace (owner) slug")
    repository: str = Field(default="", description="Repository slug")
    username: str | None = Field(default=None, description="Username for basic auth")
    password: str | None = Field(default=None, description="App password; use env or secret file")
    token: str | None = Field(default=None, description="Access token; use env or secret file")
    timeout: float = Field(default=30.0, gt=0, description="Per-request timeout in seconds")
    follow_next: bool = Field(default=True, description="Follow pagination next links")


class LoggingConfig(BaseSettings):
    """Logging settings."""

    model_config = SettingsConfigDict(env_prefix="LOGGING_", extra="ignore")

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )


class AppConfig(BaseSettings):
    """Root application config from YAML + env."""

    model_config = SettingsConfigDict(extra="ignore")

    provider: str = Field(default="bitbucket_cloud", description="SCM provider adapter to use")
    bitbucket_cloud: BitbucketCloudConfig = Field(default_factory=BitbucketCloudConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def bitbucket_password_resolved(self) -> str | None:
        """Resolve Bitbucket app password from config, env or Docker secret file."""
        p = self.bitbucket_cloud.password
        if not _is_placeholder(p):
            return p
        return _read_secret("BITBUCKET_PASSWORD", "BITBUCKET_PASSWORD_FILE")

    @property
    def bitbucket_token_resolved(self) -> str | None:
        """Resolve Bitbucket access token from config, env or Docker secret file."""
        t = self.bitbucket_cloud.token
        if not _is_placeholder(t):
            return t
        return _read_secret("BITBUCKET_TOKEN", "BITBUCKET_TOKEN_FILE")


def _substitute_env(value: Any) -> Any:
    """Replace ${VAR} and $VAR in strings with os.environ."""
    if isinstance(value, str):
        if value.startswith("${") and value.endswith("}"):
            key = value[2:-1].strip()
            return os.environ.get(key, value)
        if value.startswith("$") and not value.startswith("${"):
            key = value[1:].strip()
            return os.environ.get(key, value)
        return value
    if isinstance(value, dict):
        return {k: _substitute_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_substitute_env(v) for v in value]
    return value


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load config from YAML file and environment.

    Missing file gives defaults (env still applies). Secrets:
    BITBUCKET_PASSWORD[_FILE], BITBUCKET_TOKEN[_FILE].
    """
    path = config_path or Path("config.yaml")
    if not path.is_file():
        try:
            return AppConfig()
        except ValidationError as e:
            raise ConfigurationError(f"invalid configuration from environment: {e}") from e

    try:
        raw = yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"failed to parse YAML config at {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigurationError(f"invalid config file at {path}: root must be a YAML mapping")
    raw = _substitute_env(raw)

    provider = raw.get("provider") or "bitbucket_cloud"
    if provider not in SUPPORTED_PROVIDERS:
        raise ConfigurationError(f"unsupported provider {provider!r}, expected one of {SUPPORTED_PROVIDERS}")

    sections = {}
    for key in ("bitbucket_cloud", "logging"):
        section = raw.get(key) or {}
        if not isinstance(section, dict):
            raise ConfigurationError(f"invalid config file at {path}: {key} must be a mapping")
        sections[key] = section

    try:
        return AppConfig(
            provider=provider,
            bitbucket_cloud=BitbucketCloudConfig(**sections["bitbucket_cloud"]),
            logging=LoggingConfig(**sections["logging"]),
        )
    except ValidationError as e:
        raise ConfigurationError(f"invalid config file at {path}: {e}") from e
