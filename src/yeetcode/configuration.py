import logging
import os
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class ConfigurationError(Exception):
    """Raised when the process environment cannot produce usable settings."""


def _first(env: Mapping[str, str], *keys: str) -> Optional[str]:
    """
    Return the trimmed value of the first non-blank environment variable in keys.
    """
    for key in keys:
        val = (env.get(key) or "").strip()
        if val:
            return val
    return None


class Settings(BaseModel):
    discord_token: str = Field(..., min_length=1)
    discord_public_key: bytes = Field(..., description="Ed25519 public key used to verify interactions.")
    axiom_api_token: Optional[str] = None
    axiom_dataset: str = "yeetcode"
    host: str = "0.0.0.0"
    port: int = Field(3000, ge=1, le=65535)
    shutdown_timeout: float = Field(15.0, gt=0)
    log_level: str = "INFO"

    model_config = ConfigDict(frozen=True)

    @field_validator("discord_token", mode="before")
    @classmethod
    def _strip_token(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("discord_public_key", mode="before")
    @classmethod
    def _decode_public_key(cls, value):
        if isinstance(value, str):
            try:
                value = bytes.fromhex(value.strip())
            except ValueError as exc:
                raise ValueError("failed decoding application public key") from exc
        if len(value) != 32:
            raise ValueError("application public key must be 32 bytes")
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        level = value.strip().upper() or "INFO"
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level {value!r}")
        return level

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None, dotenv: bool = True) -> "Settings":
        """Build settings from the environment, failing fast on missing or bad values."""
        if env is None:
            if dotenv:
                load_dotenv()
            env = os.environ

        token = _first(env, "DISCORD_TOKEN")
        if token is None:
            raise ConfigurationError("DISCORD_TOKEN must be provided")

        public_key = _first(env, "DISCORD_PUBLIC_KEY")
        if public_key is None:
            raise ConfigurationError("DISCORD_PUBLIC_KEY must be provided")

        values = {
            "discord_token": token,
            "discord_public_key": public_key,
            "axiom_api_token": _first(env, "AXIOM_API_TOKEN"),
            "axiom_dataset": _first(env, "AXIOM_DATASET") or "yeetcode",
            "host": _first(env, "YEETCODE_HOST") or "0.0.0.0",
            "port": _first(env, "YEETCODE_PORT") or 3000,
            "shutdown_timeout": _first(env, "YEETCODE_SHUTDOWN_TIMEOUT") or 15.0,
            "log_level": _first(env, "LOG_LEVEL") or "INFO",
        }
        try:
            return cls(**values)
        except ValidationError as exc:
            raise ConfigurationError(f"invalid configuration: {exc}") from exc
