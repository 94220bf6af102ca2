"""Typed records for forge API payloads and clone jobs."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict


class _ForgeModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class ForgeUser(_ForgeModel):
    login: str


class ForgeOrganization(_ForgeModel):
    login: str


class ForgeRepository(_ForgeModel):
    full_name: str
    clone_url: str


@dataclass(frozen=True)
class Inventory:
    """Everything the enumeration phase learned about the principal."""

    principal: ForgeUser
    scopes: list[str]
    repositories: list[ForgeRepository]


@dataclass(frozen=True)
class CloneJob:
    full_name: str
    source: str
    destination: Path
