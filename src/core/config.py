"""Application configuration.

Why here:
- Centralises environment variables (pydantic-settings) without leaking
  `os.environ` lookups into the client or the CLI.
- Lets the CLI and `create_client` read the same contract.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

APP_NAME = "coolify-cli"
APP_VERSION = "0.1.0"
DEFAULT_USER_AGENT = f"{APP_NAME}/{APP_VERSION}"


def get_user_config_dir() -> Path:
    """`%APPDATA%`, `~/Library/Application Support` or XDG, plus the app name."""

    if sys.platform.startswith("win"):
        return Path(os.environ.get("APPDATA") or Path.home()) / APP_NAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_NAME
    return Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config") / APP_NAME


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def write_user_env_vars(values: dict[str, str | None], *, env_path: Path | None = None) -> Path:
    """Merge `values` into the per-user `.env`; `None` keeps the stored value."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    stored = {k: v for k, v in dotenv_values(env_path).items() if v is not None} if env_path.exists() else {}
    stored.update({k: v for k, v in values.items() if v is not None})

    lines = [f"# {APP_NAME} user config", *(f"{key}={stored[key]}" for key in sorted(stored))]
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Central configuration.

    Both `url` and `token` are optional at this level: their absence is
    reported by `create_client` as a `ConfigurationError`, so commands that
    don't talk to the API (help, `doctor setup`) still work.
    """

    model_config = SettingsConfigDict(
        env_prefix="COOLIFY_",
        extra="ignore",
        case_sensitive=False,
        # Project `.env` first (dev), then the per-user file.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    url: str | None = Field(
        default=None,
        description="Base URL of the Coolify instance (e.g. https://coolify.example.com).",
    )
    token: str | None = Field(
        default=None,
        description="API token sent as a bearer token.",
    )
    http_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Per-request timeout in seconds. Unset means no timeout.",
    )
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        min_length=1,
        description="User-Agent header sent with every request.",
    )
