from __future__ import annotations

import os

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.constants import DEFAULT_DST

# Load .env once, early
load_dotenv()


class Settings(BaseSettings):
    """Application config (env or .env)."""

    model_config = SettingsConfigDict(env_prefix="", env_file=None, extra="ignore")

    forge_api: str | None = None
    forge_token: str | None = None
    default_dst: str = Field(default_factory=lambda: os.path.expanduser(DEFAULT_DST))


def get_settings() -> Settings:
    return Settings()


def resolve_api(s: Settings, api: str) -> str:
    """FORGE_API wins over --api when it is set to something."""
    return s.forge_api if s.forge_api else api


def resolve_token(s: Settings, token: str | None) -> str | None:
    """FORGE_TOKEN wins over --token when it is set to something."""
    return s.forge_token if s.forge_token else token
